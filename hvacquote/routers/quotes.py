# hvacquote/routers/quotes.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request

from hvacquote.core.logging_config import logger
from hvacquote.core.rate_limit import limit_from, limiter
from hvacquote.dependencies import get_pricing_engine, get_promo_repo
from hvacquote.pricing.engine import PricingEngine
from hvacquote.pricing.tiers import TIER_CATALOG
from hvacquote.repositories.promo_codes import PromoCode, PromoCodeReader
from hvacquote.schemas.quiz import QuizAnswers
from hvacquote.services.promo_resolution import find_active

router = APIRouter(prefix="/api", tags=["quotes"])


def price_answers(
    answers: QuizAnswers,
    engine: PricingEngine,
    promo: Optional[PromoCode],
) -> Dict[str, Any]:
    """Price the answers with an already resolved promo code and shape the response."""
    rebate = promo.amount if promo else 0
    result = engine.compute_quotes(
        priority=answers.priority,
        size=answers.size,
        system_type=answers.systemType,
        rebate_amount=rebate,
    )

    logger.info(
        "quote_computed",
        brand=result.brand.value,
        system_type=result.system_type.value,
        size=result.size.value,
        rebate=result.rebate_applied,
        fallbacks=result.fallbacks,
    )

    out = result.to_dict()
    out["promoApplied"] = promo is not None
    return out


def quote_for_answers(
    answers: QuizAnswers,
    engine: PricingEngine,
    repo: PromoCodeReader,
) -> Dict[str, Any]:
    """Resolve the promo code once, then price."""
    return price_answers(answers, engine, find_active(repo, answers.rebate))


@router.post("/quotes")
@limiter.limit(limit_from("RATE_LIMIT_QUOTES"))
def create_quote(
    request: Request,
    answers: QuizAnswers,
    engine: PricingEngine = Depends(get_pricing_engine),
    repo: PromoCodeReader = Depends(get_promo_repo),
):
    return quote_for_answers(answers, engine, repo)


@router.get("/tiers")
def list_tiers():
    return [
        {
            "tier": info.tier.value,
            "name": info.name,
            "tagline": info.tagline,
            "efficiency": info.efficiency,
            "warranty": info.warranty,
            "features": list(info.features),
            "recommended": info.recommended,
        }
        for info in TIER_CATALOG.values()
    ]
