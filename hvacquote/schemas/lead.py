# hvacquote/schemas/lead.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hvacquote.pricing.tiers import TierId
from hvacquote.schemas.quiz import QuizAnswers


class LeadCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=10)
    address: str = Field(min_length=5)
    notes: Optional[str] = None

    # which package the homeowner picked on the results screen
    tier: Optional[TierId] = None
    answers: Optional[QuizAnswers] = None


class Lead(LeadCreate):
    model_config = ConfigDict(extra="ignore")

    id: int
    createdAt: datetime
