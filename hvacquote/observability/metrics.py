# hvacquote/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

quotes_counter = Counter(
    "hvacquote_quotes_total",
    "Number of tier quotes computed",
    ["brand", "policy"],
)

pricing_fallback_counter = Counter(
    "hvacquote_pricing_fallback_total",
    "Cost table lookups that needed a fallback",
    ["reason"],  # size|system_type|unknown_size|unknown_system_type
)

promo_lookup_counter = Counter(
    "hvacquote_promo_lookup_total",
    "Promo code lookups",
    ["result"],  # applied|inactive|not_found|empty
)

promo_admin_counter = Counter(
    "hvacquote_promo_admin_total",
    "Promo code admin mutations",
    ["op"],  # create|update|delete
)

leads_counter = Counter(
    "hvacquote_leads_total",
    "Captured leads",
    ["tier"],
)

latency_hist = Histogram(
    "hvacquote_api_latency_seconds",
    "API latency per route",
    ["route"],
)


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Scrape endpoint for the hvacquote_* series (plus process and GC defaults)."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
