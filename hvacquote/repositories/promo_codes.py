from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

from hvacquote.pricing.engine import MAX_REBATE


class PromoCodeError(Exception):
    pass


class PromoCodeNotFoundError(PromoCodeError):
    def __init__(self, message: str = "Promo code not found"):
        super().__init__(message)


class DuplicatePromoCodeError(PromoCodeError):
    def __init__(self, message: str = "Promo code already exists"):
        super().__init__(message)


class RebateCapExceededError(PromoCodeError):
    def __init__(self, message: str = f"Rebate capped at ${MAX_REBATE}"):
        super().__init__(message)


def normalize_code(code: Optional[str]) -> str:
    """Uppercase and drop all whitespace: " Full System " -> "FULLSYSTEM"."""
    return "".join((code or "").split()).upper()


@dataclass(frozen=True)
class PromoCode:
    id: int
    code: str
    amount: int
    description: str = ""
    isActive: bool = True


class PromoCodeReader(Protocol):
    """The narrow read contract pricing needs."""

    def get_by_code(self, code: str) -> Optional[PromoCode]: ...


class PromoCodeRepository(PromoCodeReader, Protocol):
    def list_all(self) -> List[PromoCode]: ...

    def get(self, promo_id: int) -> Optional[PromoCode]: ...

    def create(
        self,
        *,
        code: str,
        amount: int,
        description: str = "",
        isActive: bool = True,
    ) -> PromoCode: ...

    def update(self, promo_id: int, changes: Mapping[str, Any]) -> PromoCode: ...

    def delete(self, promo_id: int) -> bool: ...


DEFAULT_PROMO_CODES: List[Dict[str, Any]] = [
    {
        "code": "Switch2Electric",
        "amount": 500,
        "description": "Rebate for switching to electric heat pump",
        "isActive": True,
    },
    {
        "code": "IAQBundle",
        "amount": 750,
        "description": "Indoor Air Quality package discount",
        "isActive": True,
    },
    {
        "code": "FastTrack",
        "amount": 500,
        "description": "Expedited installation discount",
        "isActive": True,
    },
    {
        "code": "FullSystem",
        "amount": 1000,
        "description": "Complete system replacement rebate",
        "isActive": True,
    },
]

_UPDATABLE = ("code", "amount", "description", "isActive")


def _validate_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError("amount must be >= 0")
    if amount > MAX_REBATE:
        raise RebateCapExceededError()


class InMemoryPromoCodeRepository:
    """
    Promo codes in process memory, ids count up from 1.
    Codes are unique by their normalized form.
    """

    def __init__(self, seed: Iterable[Mapping[str, Any]] = ()):
        self._items: Dict[int, PromoCode] = {}
        self._next_id = 1
        for item in seed:
            self.create(**item)

    @classmethod
    def with_defaults(cls) -> "InMemoryPromoCodeRepository":
        return cls(seed=DEFAULT_PROMO_CODES)

    def list_all(self) -> List[PromoCode]:
        return sorted(self._items.values(), key=lambda p: p.id)

    def get(self, promo_id: int) -> Optional[PromoCode]:
        return self._items.get(promo_id)

    def get_by_code(self, code: str) -> Optional[PromoCode]:
        wanted = normalize_code(code)
        if not wanted:
            return None
        return next(
            (p for p in self._items.values() if normalize_code(p.code) == wanted),
            None,
        )

    def create(
        self,
        *,
        code: str,
        amount: int,
        description: str = "",
        isActive: bool = True,
    ) -> PromoCode:
        code = (code or "").strip()
        if not normalize_code(code):
            raise ValueError("code is required")
        _validate_amount(amount)
        if self.get_by_code(code) is not None:
            raise DuplicatePromoCodeError()

        promo = PromoCode(
            id=self._next_id,
            code=code,
            amount=int(amount),
            description=description or "",
            isActive=bool(isActive),
        )
        self._next_id += 1
        self._items[promo.id] = promo
        return promo

    def update(self, promo_id: int, changes: Mapping[str, Any]) -> PromoCode:
        existing = self._items.get(promo_id)
        if existing is None:
            raise PromoCodeNotFoundError()

        patch = {k: v for k, v in changes.items() if k in _UPDATABLE and v is not None}
        if "amount" in patch:
            _validate_amount(patch["amount"])
        if "code" in patch:
            patch["code"] = str(patch["code"]).strip()
            if not normalize_code(patch["code"]):
                raise ValueError("code is required")
            clash = self.get_by_code(patch["code"])
            if clash is not None and clash.id != promo_id:
                raise DuplicatePromoCodeError()

        updated = replace(existing, **patch)
        self._items[promo_id] = updated
        return updated

    def delete(self, promo_id: int) -> bool:
        return self._items.pop(promo_id, None) is not None
