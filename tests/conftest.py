import pytest
from fastapi.testclient import TestClient

from hvacquote.core.rate_limit import limiter
from hvacquote.core.settings import Settings
from hvacquote.main import create_app
from hvacquote.repositories.promo_codes import InMemoryPromoCodeRepository


@pytest.fixture
def promo_repo():
    return InMemoryPromoCodeRepository.with_defaults()


@pytest.fixture
def settings():
    return Settings(SENTRY_DSN=None, METRICS_ENABLED=True, PLATINUM_POLICY="additive")


@pytest.fixture
def app(settings, promo_repo):
    # limiter storage is process-wide, start every test with a clean slate
    limiter.reset()
    return create_app(settings=settings, promo_repo=promo_repo)


@pytest.fixture
def client(app):
    return TestClient(app)
