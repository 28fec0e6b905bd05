# hvacquote/routers/admin.py
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from hvacquote.core.logging_config import logger
from hvacquote.dependencies import get_promo_repo
from hvacquote.observability.metrics import promo_admin_counter
from hvacquote.repositories.promo_codes import MAX_REBATE, PromoCodeRepository

router = APIRouter(prefix="/admin/promo-codes", tags=["promo-admin"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))


def _back() -> RedirectResponse:
    return RedirectResponse(url="/admin/promo-codes", status_code=303)


@router.get("", response_class=HTMLResponse)
def promo_codes_page(
    request: Request,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    return templates.TemplateResponse(
        request,
        "admin_promo_codes.html",
        {"promo_codes": repo.list_all(), "max_rebate": MAX_REBATE},
    )


@router.post("")
def promo_codes_create(
    code: str = Form(...),
    amount: int = Form(...),
    description: str = Form(""),
    isActive: bool = Form(False),
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    try:
        promo = repo.create(code=code, amount=amount, description=description, isActive=isActive)
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    promo_admin_counter.labels(op="create").inc()
    logger.info("promo_code_created", promo_id=promo.id, code=promo.code, via="admin_page")
    return _back()


@router.post("/{promo_id}/update")
def promo_codes_update(
    promo_id: int,
    amount: int = Form(...),
    description: str = Form(""),
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    try:
        repo.update(promo_id, {"amount": amount, "description": description})
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})

    promo_admin_counter.labels(op="update").inc()
    logger.info("promo_code_updated", promo_id=promo_id, via="admin_page")
    return _back()


@router.post("/{promo_id}/toggle")
def promo_codes_toggle(
    promo_id: int,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    existing = repo.get(promo_id)
    if existing is None:
        raise HTTPException(status_code=404, detail={"message": "Promo code not found"})

    repo.update(promo_id, {"isActive": not existing.isActive})
    promo_admin_counter.labels(op="update").inc()
    logger.info("promo_code_toggled", promo_id=promo_id, active=not existing.isActive)
    return _back()


@router.post("/{promo_id}/delete")
def promo_codes_delete(
    promo_id: int,
    repo: PromoCodeRepository = Depends(get_promo_repo),
):
    if not repo.delete(promo_id):
        raise HTTPException(status_code=404, detail={"message": "Promo code not found"})

    promo_admin_counter.labels(op="delete").inc()
    logger.info("promo_code_deleted", promo_id=promo_id, via="admin_page")
    return _back()
