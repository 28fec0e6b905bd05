from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

D = Decimal

MONTHLY_RATE = D("0.015")


def round_half_up(value) -> int:
    """Whole-dollar rounding, halves go up (2.5 -> 3)."""
    return int(D(str(value)).quantize(D("1"), rounding=ROUND_HALF_UP))


def monthly_estimate(total: int) -> int:
    # roughly 1.5% of the total per month
    return round_half_up(D(total) * MONTHLY_RATE)


def format_currency(amount: int) -> str:
    """10600 -> "$10,600" (whole dollars, no cents)."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(int(amount)):,}"


def format_range(low: int, high: int) -> str:
    return f"{format_currency(low)} - {format_currency(high)}"


def format_monthly(amount: int) -> str:
    return f"${amount:,}/mo"
