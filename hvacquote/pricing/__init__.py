from hvacquote.pricing.engine import (  # noqa: F401
    MAX_REBATE,
    PricingEngine,
    QuoteResult,
    TierPolicy,
    TierQuote,
    apply_rebate,
    calculate_retail,
    compute_quotes,
)
