# hvacquote/routers/leads.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from hvacquote.core.logging_config import logger
from hvacquote.core.rate_limit import limit_from, limiter
from hvacquote.dependencies import get_lead_store
from hvacquote.observability.metrics import leads_counter
from hvacquote.schemas.lead import Lead, LeadCreate
from hvacquote.services.lead_store import LeadStore

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("", status_code=201, response_model=Lead)
@limiter.limit(limit_from("RATE_LIMIT_LEADS"))
def capture_lead(
    request: Request,
    payload: LeadCreate,
    store: LeadStore = Depends(get_lead_store),
):
    lead = store.add(payload)
    tier = lead.tier.value if lead.tier else "none"
    leads_counter.labels(tier=tier).inc()
    logger.info("lead_captured", lead_id=lead.id, tier=tier)
    return lead


@router.get("", response_model=List[Lead])
def list_leads(store: LeadStore = Depends(get_lead_store)):
    return store.list_all()
