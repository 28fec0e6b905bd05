# hvacquote/dependencies.py
from __future__ import annotations

from fastapi import Request

from hvacquote.pricing.engine import PricingEngine
from hvacquote.repositories.promo_codes import PromoCodeRepository
from hvacquote.services.lead_store import LeadStore
from hvacquote.services.quiz_flow import QuizSessionStore

# Services live on app.state (built in create_app) so tests get a fresh set per app.


def get_promo_repo(request: Request) -> PromoCodeRepository:
    return request.app.state.promo_repo


def get_pricing_engine(request: Request) -> PricingEngine:
    return request.app.state.pricing_engine


def get_lead_store(request: Request) -> LeadStore:
    return request.app.state.lead_store


def get_quiz_sessions(request: Request) -> QuizSessionStore:
    return request.app.state.quiz_sessions
