from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class TierId(str, Enum):
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


@dataclass(frozen=True)
class TierInfo:
    """Static product copy per tier. Prices are computed, this is not."""

    tier: TierId
    name: str
    tagline: str
    efficiency: str
    warranty: str
    features: Tuple[str, ...]
    recommended: bool = False


TIER_CATALOG: Dict[TierId, TierInfo] = {
    TierId.SILVER: TierInfo(
        tier=TierId.SILVER,
        name="Silver Comfort",
        tagline="Reliable performance on a budget",
        efficiency="14 SEER2",
        warranty="10-Year Parts",
        features=(
            "Single-Stage Compressor",
            "Standard Sound Levels",
            "Standard Air Filtration",
            "Smart Thermostat Compatible",
        ),
    ),
    TierId.GOLD: TierInfo(
        tier=TierId.GOLD,
        name="Gold Efficiency",
        tagline="Perfect balance of comfort & savings",
        efficiency="16 SEER2",
        warranty="10-Year Parts + 2-Year Labor",
        features=(
            "Two-Stage Compressor (Even Temps)",
            "Quiet Operation Technology",
            "Enhanced Humidity Control",
            "Wi-Fi Smart Thermostat Included",
        ),
        recommended=True,
    ),
    TierId.PLATINUM: TierInfo(
        tier=TierId.PLATINUM,
        name="Platinum Elite",
        tagline="Ultimate precision and silence",
        efficiency="20+ SEER2",
        warranty="Lifetime Unit Replacement",
        features=(
            "Variable Speed Compressor (Inverter)",
            "Whisper-Quiet Operation",
            "Perfect Humidity & Air Quality",
            "Communicating Smart Zoning Ready",
        ),
    ),
}
