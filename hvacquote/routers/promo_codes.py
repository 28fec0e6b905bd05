# hvacquote/routers/promo_codes.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from hvacquote.core.logging_config import logger
from hvacquote.core.rate_limit import limit_from, limiter
from hvacquote.dependencies import get_promo_repo
from hvacquote.observability.metrics import promo_admin_counter
from hvacquote.repositories.promo_codes import PromoCodeRepository
from hvacquote.schemas.promo import (
    PromoCodeCreate,
    PromoCodeOut,
    PromoCodeUpdate,
    PromoDetailOut,
    PromoLookupOut,
)
from hvacquote.services.promo_resolution import find_active

router = APIRouter(prefix="/api/promoCodes", tags=["promo-codes"])


@router.get("")
@limiter.limit(limit_from("RATE_LIMIT_PROMO_LOOKUP"))
def list_or_lookup(
    request: Request,
    code: Optional[str] = Query(None),
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    # ?code=X is the quiz-side lookup, without it this is the admin listing
    if code is not None:
        promo = find_active(repo, code)
        if promo is None:
            raise HTTPException(status_code=404, detail={"message": "Invalid or inactive promo code"})
        return PromoLookupOut(rebate=promo.amount, code=promo.code)

    return [PromoCodeOut.from_record(p) for p in repo.list_all()]


@router.get("/{code}", response_model=PromoDetailOut)
@limiter.limit(limit_from("RATE_LIMIT_PROMO_LOOKUP"))
def get_by_code(
    request: Request,
    code: str,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    promo = find_active(repo, code)
    if promo is None:
        raise HTTPException(status_code=404, detail={"message": "Promo code not found or inactive"})
    return PromoDetailOut(
        id=promo.id,
        code=promo.code,
        rebate=promo.amount,
        description=promo.description,
    )


@router.post("", status_code=201, response_model=PromoCodeOut)
def create_promo_code(
    payload: PromoCodeCreate,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    try:
        promo = repo.create(
            code=payload.code,
            amount=payload.amount,
            description=payload.description or "",
            isActive=True if payload.isActive is None else payload.isActive,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    promo_admin_counter.labels(op="create").inc()
    logger.info("promo_code_created", promo_id=promo.id, code=promo.code, amount=promo.amount)
    return PromoCodeOut.from_record(promo)


@router.put("/{promo_id}", response_model=PromoCodeOut)
def update_promo_code(
    promo_id: int,
    payload: PromoCodeUpdate,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    try:
        promo = repo.update(promo_id, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    promo_admin_counter.labels(op="update").inc()
    logger.info(
        "promo_code_updated",
        promo_id=promo.id,
        fields=sorted(payload.model_dump(exclude_unset=True).keys()),
    )
    return PromoCodeOut.from_record(promo)


@router.delete("/{promo_id}", status_code=204)
def delete_promo_code(
    promo_id: int,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    if not repo.delete(promo_id):
        raise HTTPException(status_code=404, detail={"message": "Promo code not found"})

    promo_admin_counter.labels(op="delete").inc()
    logger.info("promo_code_deleted", promo_id=promo_id)
    return Response(status_code=204)
