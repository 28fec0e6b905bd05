from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from hvacquote.core.logging_config import logger


class Brand(str, Enum):
    BUDGET = "ameristar"
    PREMIUM = "amstd"


class SystemType(str, Enum):
    SPLIT = "split"
    PACKAGE = "package"
    GASPACK = "gaspack"


class SizeClass(str, Enum):
    TON_2 = "2ton"
    TON_3 = "3ton"
    TON_4 = "4ton"
    TON_5 = "5ton"


DEFAULT_SIZE = SizeClass.TON_3
DEFAULT_SYSTEM_TYPE = SystemType.SPLIT

# Accepted spellings after cleanup (lowercase, no spaces/hyphens/underscores)
_SYSTEM_TYPE_ALIASES: Dict[str, SystemType] = {
    "split": SystemType.SPLIT,
    "splitsystem": SystemType.SPLIT,
    "package": SystemType.PACKAGE,
    "packageunit": SystemType.PACKAGE,
    "gaspack": SystemType.GASPACK,
    "gaspackunit": SystemType.GASPACK,
}

_SIZE_ALIASES: Dict[str, SizeClass] = {s.value: s for s in SizeClass}


def _clean(raw: Optional[str]) -> str:
    s = (raw or "").strip().lower()
    for ch in (" ", "-", "_", "\t"):
        s = s.replace(ch, "")
    return s


def parse_system_type(raw: Optional[str]) -> Tuple[SystemType, bool]:
    """
    Closed parse of a quiz systemType answer.
    Returns (system_type, recognized). Unknown values map to split.
    """
    hit = _SYSTEM_TYPE_ALIASES.get(_clean(raw))
    if hit is None:
        return DEFAULT_SYSTEM_TYPE, False
    return hit, True


def parse_size(raw: Optional[str]) -> Tuple[SizeClass, bool]:
    """Returns (size_class, recognized). Missing or unknown sizes map to 3ton."""
    hit = _SIZE_ALIASES.get(_clean(raw))
    if hit is None:
        return DEFAULT_SIZE, False
    return hit, True


def brand_for_priority(priority: Optional[str]) -> Brand:
    # Binary switch: only "budget" picks the budget brand
    return Brand.BUDGET if priority == "budget" else Brand.PREMIUM


@dataclass(frozen=True)
class DealerCost:
    amount: int  # whole dollars
    sku: Optional[str] = None


@dataclass(frozen=True)
class CostLookup:
    brand: Brand
    system_type: SystemType
    size: SizeClass
    cost: DealerCost
    fallbacks: List[str] = field(default_factory=list)


CostKey = Tuple[Brand, SystemType, SizeClass]


class DealerCostTable:
    """
    (brand, system type, size class) -> DealerCost.

    Every brand must carry the (split, 3ton) anchor so that the fallback
    ladder always ends on a real entry.
    """

    def __init__(self, entries: Mapping[CostKey, DealerCost]):
        self._entries: Dict[CostKey, DealerCost] = dict(entries)
        for brand in Brand:
            if (brand, DEFAULT_SYSTEM_TYPE, DEFAULT_SIZE) not in self._entries:
                raise ValueError(
                    f"Dealer cost table has no {DEFAULT_SYSTEM_TYPE.value}/"
                    f"{DEFAULT_SIZE.value} entry for brand {brand.value}"
                )

    @classmethod
    def from_nested(cls, data: Mapping[str, Mapping[str, Mapping[str, int]]]) -> "DealerCostTable":
        """Build from brand -> system type -> size -> cost, like the seed data below."""
        entries: Dict[CostKey, DealerCost] = {}
        for brand, by_type in data.items():
            for system_type, by_size in by_type.items():
                for size, amount in by_size.items():
                    key = (Brand(brand), SystemType(system_type), SizeClass(size))
                    entries[key] = DealerCost(amount=int(amount))
        return cls(entries)

    def get(self, brand: Brand, system_type: SystemType, size: SizeClass) -> Optional[DealerCost]:
        return self._entries.get((brand, system_type, size))

    def lookup(self, brand: Brand, system_type: SystemType, size: SizeClass) -> CostLookup:
        """
        Resolve a cost with the fallback ladder:
        (brand, type, size) -> (brand, type, 3ton) -> (brand, split, 3ton).
        Never raises; every step taken is logged.
        """
        fallbacks: List[str] = []

        cost = self.get(brand, system_type, size)
        if cost is not None:
            return CostLookup(brand, system_type, size, cost, fallbacks)

        logger.warning(
            "pricing_fallback",
            reason="size",
            brand=brand.value,
            system_type=system_type.value,
            size=size.value,
            fallback_size=DEFAULT_SIZE.value,
        )
        fallbacks.append("size")
        size = DEFAULT_SIZE

        cost = self.get(brand, system_type, size)
        if cost is None:
            logger.warning(
                "pricing_fallback",
                reason="system_type",
                brand=brand.value,
                system_type=system_type.value,
                fallback_system_type=DEFAULT_SYSTEM_TYPE.value,
            )
            fallbacks.append("system_type")
            system_type = DEFAULT_SYSTEM_TYPE
            cost = self._entries[(brand, system_type, size)]

        return CostLookup(brand, system_type, size, cost, fallbacks)


# Brand -> SystemType -> Size -> dealer cost (whole dollars)
DEALER_COSTS: Dict[str, Dict[str, Dict[str, int]]] = {
    "ameristar": {
        "split": {"2ton": 3431, "3ton": 3768, "4ton": 4598, "5ton": 4900},
        "package": {"2ton": 4200, "3ton": 4600, "4ton": 5400, "5ton": 5800},
        "gaspack": {"2ton": 4500, "3ton": 4900, "4ton": 5700, "5ton": 6100},
    },
    "amstd": {
        "split": {"2ton": 5146, "3ton": 5673, "4ton": 6800, "5ton": 7200},
        "package": {"2ton": 6200, "3ton": 6800, "4ton": 7900, "5ton": 8400},
        "gaspack": {"2ton": 6600, "3ton": 7200, "4ton": 8300, "5ton": 8800},
    },
}

DEFAULT_DEALER_COSTS = DealerCostTable.from_nested(DEALER_COSTS)
