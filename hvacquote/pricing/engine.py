from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_CEILING
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from hvacquote.core.logging_config import logger
from hvacquote.observability.metrics import pricing_fallback_counter, quotes_counter
from hvacquote.pricing.dealer_costs import (
    DEFAULT_DEALER_COSTS,
    Brand,
    DealerCostTable,
    SizeClass,
    SystemType,
    brand_for_priority,
    parse_size,
    parse_system_type,
)
from hvacquote.pricing.formatter import (
    format_monthly,
    format_range,
    monthly_estimate,
    round_half_up,
)
from hvacquote.pricing.tiers import TIER_CATALOG, TierId, TierInfo

D = Decimal

# --- Configuration ---
MARGIN = D("0.55")  # target gross margin

LABOR_SMALL = 1000  # 2-3 ton
LABOR_LARGE = 1200  # 4-5 ton
SMALL_SIZES = (SizeClass.TON_2, SizeClass.TON_3)

MAX_REBATE = 1000

# Tier offsets on top of the silver base (min, max)
GOLD_OFFSETS = (1500, 2000)
PLATINUM_OFFSETS = (3000, 4000)
PLATINUM_MULTIPLIER = D("1.25")

RANGE_SPREAD = 500


class TierPolicy(str, Enum):
    ADDITIVE = "additive"
    MULTIPLICATIVE = "multiplicative"


def labor_overhead(size: SizeClass) -> int:
    return LABOR_SMALL if size in SMALL_SIZES else LABOR_LARGE


def calculate_retail(dealer_cost: int, size: SizeClass) -> int:
    """
    Retail = (dealer cost + labor/overhead) / (1 - margin), ceiled to the next 100.

    Decimal keeps exact multiples of 100 from being bumped by float noise.
    """
    base = (D(dealer_cost) + D(labor_overhead(size))) / (D(1) - MARGIN)
    hundreds = (base / D(100)).to_integral_value(rounding=ROUND_CEILING)
    return int(hundreds * 100)


def cap_rebate(rebate_amount: Optional[int]) -> int:
    return max(0, min(int(rebate_amount or 0), MAX_REBATE))


def apply_rebate(price: int, rebate_amount: Optional[int], dealer_cost: int) -> int:
    """Subtract the capped rebate, never going below the dealer's unit cost."""
    return max(price - cap_rebate(rebate_amount), dealer_cost)


@dataclass(frozen=True)
class TierQuote:
    tier: TierId
    low: int
    high: int
    monthly: int
    info: TierInfo

    @property
    def price_range(self) -> str:
        return format_range(self.low, self.high)

    @property
    def monthly_display(self) -> str:
        return format_monthly(self.monthly)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "name": self.info.name,
            "tagline": self.info.tagline,
            "low": self.low,
            "high": self.high,
            "monthly": self.monthly,
            "priceRange": self.price_range,
            "monthlyDisplay": self.monthly_display,
            "efficiency": self.info.efficiency,
            "warranty": self.info.warranty,
            "features": list(self.info.features),
            "recommended": self.info.recommended,
        }


@dataclass(frozen=True)
class QuoteResult:
    brand: Brand
    system_type: SystemType
    size: SizeClass
    dealer_cost: int
    sku: Optional[str]
    base_retail: int
    rebate_applied: int
    policy: TierPolicy
    tiers: Dict[TierId, TierQuote]
    fallbacks: List[str] = field(default_factory=list)

    @property
    def silver(self) -> TierQuote:
        return self.tiers[TierId.SILVER]

    @property
    def gold(self) -> TierQuote:
        return self.tiers[TierId.GOLD]

    @property
    def platinum(self) -> TierQuote:
        return self.tiers[TierId.PLATINUM]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tiers": {t.value: q.to_dict() for t, q in self.tiers.items()},
            "rebateApplied": self.rebate_applied,
            "policy": self.policy.value,
            "selections": {
                "brand": self.brand.value,
                "systemType": self.system_type.value,
                "size": self.size.value,
                "dealerCost": self.dealer_cost,
                "sku": self.sku,
                "baseRetail": self.base_retail,
                "fallbacks": list(self.fallbacks),
            },
        }


class PricingEngine:
    """Quiz answers + resolved rebate -> Silver/Gold/Platinum quotes. No side effects."""

    def __init__(
        self,
        table: DealerCostTable = DEFAULT_DEALER_COSTS,
        policy: TierPolicy = TierPolicy.ADDITIVE,
    ):
        self.table = table
        self.policy = TierPolicy(policy)

    def compute_quotes(
        self,
        priority: Optional[str],
        size: Optional[str],
        system_type: Optional[str],
        rebate_amount: Optional[int] = 0,
    ) -> QuoteResult:
        brand = brand_for_priority(priority)
        fallbacks: List[str] = []

        parsed_type, type_ok = parse_system_type(system_type)
        if system_type and not type_ok:
            logger.warning(
                "pricing_fallback",
                reason="unknown_system_type",
                raw=system_type,
                fallback_system_type=parsed_type.value,
            )
            fallbacks.append("unknown_system_type")

        parsed_size, size_ok = parse_size(size)
        if size and not size_ok:
            logger.warning(
                "pricing_fallback",
                reason="unknown_size",
                raw=size,
                fallback_size=parsed_size.value,
            )
            fallbacks.append("unknown_size")

        hit = self.table.lookup(brand, parsed_type, parsed_size)
        fallbacks.extend(hit.fallbacks)
        for reason in fallbacks:
            pricing_fallback_counter.labels(reason=reason).inc()

        dealer_cost = hit.cost.amount
        base = calculate_retail(dealer_cost, hit.size)
        rebate = cap_rebate(rebate_amount)

        def adjusted(price: int) -> int:
            return apply_rebate(price, rebate, dealer_cost)

        silver_low = adjusted(base)
        bounds: Dict[TierId, Tuple[int, int]] = {
            TierId.SILVER: (silver_low, silver_low + RANGE_SPREAD),
            TierId.GOLD: (adjusted(base + GOLD_OFFSETS[0]), adjusted(base + GOLD_OFFSETS[1])),
        }
        if self.policy is TierPolicy.MULTIPLICATIVE:
            platinum_low = round_half_up(D(silver_low) * PLATINUM_MULTIPLIER)
            bounds[TierId.PLATINUM] = (platinum_low, platinum_low + RANGE_SPREAD)
        else:
            bounds[TierId.PLATINUM] = (
                adjusted(base + PLATINUM_OFFSETS[0]),
                adjusted(base + PLATINUM_OFFSETS[1]),
            )

        tiers = {
            tier: TierQuote(
                tier=tier,
                low=low,
                high=high,
                monthly=monthly_estimate(low),
                info=TIER_CATALOG[tier],
            )
            for tier, (low, high) in bounds.items()
        }

        quotes_counter.labels(brand=brand.value, policy=self.policy.value).inc()

        return QuoteResult(
            brand=brand,
            system_type=hit.system_type,
            size=hit.size,
            dealer_cost=dealer_cost,
            sku=hit.cost.sku,
            base_retail=base,
            rebate_applied=rebate,
            policy=self.policy,
            tiers=tiers,
            fallbacks=fallbacks,
        )


def compute_quotes(
    priority: Optional[str],
    size: Optional[str],
    system_type: Optional[str],
    rebate_amount: Optional[int] = 0,
    policy: TierPolicy = TierPolicy.ADDITIVE,
) -> QuoteResult:
    """Module-level shortcut over the default cost table."""
    return PricingEngine(policy=policy).compute_quotes(priority, size, system_type, rebate_amount)
