# hvacquote/main.py
import time
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from slowapi.middleware import SlowAPIMiddleware

from hvacquote.core.errors import register_exception_handlers
from hvacquote.core.logging_config import logger, setup_logging
from hvacquote.core.rate_limit import bind_settings, limiter
from hvacquote.core.settings import Settings, settings as default_settings
from hvacquote.middleware.request_id import RequestIdMiddleware
from hvacquote.observability.metrics import latency_hist, router as metrics_router
from hvacquote.pricing.engine import PricingEngine, TierPolicy
from hvacquote.repositories.promo_codes import InMemoryPromoCodeRepository, PromoCodeRepository
from hvacquote.routers import admin, leads, promo_codes, quiz, quotes
from hvacquote.services.lead_store import LeadStore
from hvacquote.services.quiz_flow import QuizSessionStore


def create_app(
    settings: Optional[Settings] = None,
    promo_repo: Optional[PromoCodeRepository] = None,
) -> FastAPI:
    settings = settings or default_settings

    setup_logging(settings)

    if settings.SENTRY_DSN:
        sentry_sdk.init(dsn=settings.SENTRY_DSN, integrations=[FastApiIntegration()])

    app = FastAPI(title="HVAC Quote API", version="0.1.0")

    # ----------------------------------------------------
    # Services
    # ----------------------------------------------------
    if promo_repo is None:
        promo_repo = (
            InMemoryPromoCodeRepository.with_defaults()
            if settings.SEED_DEFAULT_PROMO_CODES
            else InMemoryPromoCodeRepository()
        )
    app.state.promo_repo = promo_repo
    app.state.pricing_engine = PricingEngine(policy=TierPolicy(settings.PLATINUM_POLICY))
    app.state.lead_store = LeadStore()
    app.state.quiz_sessions = QuizSessionStore(
        max_sessions=settings.QUIZ_MAX_SESSIONS,
        ttl_seconds=settings.QUIZ_SESSION_TTL_SECONDS,
    )

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.get("/health", include_in_schema=True)
    def health() -> dict:
        return {"status": "ok"}

    # ----------------------------------------------------
    # Logging middleware
    # ----------------------------------------------------
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()

        request_id = getattr(request.state, "request_id", None) or request.headers.get(
            "X-Request-ID", "unknown"
        )
        client_ip = request.client.host if request.client else "unknown"

        bound_logger = logger.bind(
            request_id=request_id,
            ip=client_ip,
            endpoint=str(request.url.path),
            method=request.method,
        )

        bound_logger.info("request_started")
        response = await call_next(request)
        elapsed = time.time() - start

        route = request.scope.get("route")
        latency_hist.labels(route=getattr(route, "path", "unmatched")).observe(elapsed)

        bound_logger.bind(
            status_code=response.status_code, latency_ms=round(elapsed * 1000, 2)
        ).info("request_finished")
        return response

    # ----------------------------------------------------
    # Middleware
    # ----------------------------------------------------
    # added last = outermost, so request ids exist before the logging middleware runs
    bind_settings(settings)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    # ----------------------------------------------------
    # Routers
    # ----------------------------------------------------
    app.include_router(promo_codes.router)
    app.include_router(quotes.router)
    app.include_router(quiz.router)
    app.include_router(leads.router)
    app.include_router(admin.router)
    if settings.METRICS_ENABLED:
        app.include_router(metrics_router)  # /metrics

    logger.info(
        "startup",
        service=settings.APP_NAME,
        environment=settings.ENVIRONMENT,
        platinum_policy=settings.PLATINUM_POLICY,
    )
    return app


app = create_app()
