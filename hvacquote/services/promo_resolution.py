from __future__ import annotations

from typing import Optional

from hvacquote.core.logging_config import logger
from hvacquote.observability.metrics import promo_lookup_counter
from hvacquote.repositories.promo_codes import PromoCode, PromoCodeReader, normalize_code


def find_active(repo: PromoCodeReader, code: Optional[str]) -> Optional[PromoCode]:
    """Matching record only if it is active. Case and whitespace do not matter."""
    normalized = normalize_code(code)
    if not normalized:
        promo_lookup_counter.labels(result="empty").inc()
        return None

    promo = repo.get_by_code(normalized)
    if promo is None:
        result = "not_found"
    elif not promo.isActive:
        result = "inactive"
    else:
        result = "applied"

    promo_lookup_counter.labels(result=result).inc()
    logger.info("promo_lookup", code=normalized, result=result)
    return promo if result == "applied" else None


def resolve_rebate(repo: PromoCodeReader, code: Optional[str]) -> int:
    """User-typed code -> rebate dollars (0 when unknown, inactive or empty)."""
    promo = find_active(repo, code)
    return promo.amount if promo else 0
