# hvacquote/schemas/promo.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, constr

from hvacquote.repositories.promo_codes import PromoCode


class PromoCodeCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: constr(strip_whitespace=True, min_length=1)  # type: ignore
    amount: int = Field(ge=0)  # cap (1000) checked separately for a clear message
    description: Optional[str] = None
    isActive: Optional[bool] = None


class PromoCodeUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[constr(strip_whitespace=True, min_length=1)] = None  # type: ignore
    amount: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    isActive: Optional[bool] = None


class PromoCodeOut(BaseModel):
    id: int
    code: str
    amount: int
    description: str
    isActive: bool

    @classmethod
    def from_record(cls, promo: PromoCode) -> "PromoCodeOut":
        return cls(
            id=promo.id,
            code=promo.code,
            amount=promo.amount,
            description=promo.description,
            isActive=promo.isActive,
        )


class PromoLookupOut(BaseModel):
    rebate: int
    code: str


class PromoDetailOut(BaseModel):
    id: int
    code: str
    rebate: int
    description: str
    status: str = "Active"
