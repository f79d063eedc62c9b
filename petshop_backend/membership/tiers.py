# membership/tiers.py

"""
MEMBERSHIP TIERS (source of truth for tier benefits)

| tier        | price | discount | reward x | check-in bonus | wallet usage |
|-------------|-------|----------|----------|----------------|--------------|
| (none)      |   -   |    0%    |   1.0    |      0.0       |     30%      |
| Silver Paw  |   29  |    5%    |   1.2    |      0.5       |     40%      |
| Golden Paw  |   59  |   10%    |   1.5    |      1.0       |     50%      |
| Diamond Paw |   99  |   15%    |   2.0    |      2.0       |     70%      |
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

SILVER_PAW = "silver_paw"
GOLDEN_PAW = "golden_paw"
DIAMOND_PAW = "diamond_paw"


@dataclass(frozen=True)
class Tier:
    key: str
    name: str
    price: Decimal
    discount_rate: Decimal
    reward_multiplier: Decimal
    checkin_bonus: Decimal
    wallet_usage_rate: Decimal
    benefits: tuple = ()


TIERS: dict[str, Tier] = {
    SILVER_PAW: Tier(
        key=SILVER_PAW,
        name="Silver Paw",
        price=Decimal("29.00"),
        discount_rate=Decimal("0.05"),
        reward_multiplier=Decimal("1.2"),
        checkin_bonus=Decimal("0.50"),
        wallet_usage_rate=Decimal("0.40"),
        benefits=(
            "5% off every order",
            "1.2x wallet rewards",
            "Access to member-exclusive products",
        ),
    ),
    GOLDEN_PAW: Tier(
        key=GOLDEN_PAW,
        name="Golden Paw",
        price=Decimal("59.00"),
        discount_rate=Decimal("0.10"),
        reward_multiplier=Decimal("1.5"),
        checkin_bonus=Decimal("1.00"),
        wallet_usage_rate=Decimal("0.50"),
        benefits=(
            "10% off every order",
            "1.5x wallet rewards",
            "Access to member-exclusive products",
        ),
    ),
    DIAMOND_PAW: Tier(
        key=DIAMOND_PAW,
        name="Diamond Paw",
        price=Decimal("99.00"),
        discount_rate=Decimal("0.15"),
        reward_multiplier=Decimal("2.0"),
        checkin_bonus=Decimal("2.00"),
        wallet_usage_rate=Decimal("0.70"),
        benefits=(
            "15% off every order",
            "2x wallet rewards",
            "Access to member-exclusive products",
        ),
    ),
}

TIER_CHOICES = [(t.key, t.name) for t in TIERS.values()]

# Non-member defaults
BASE_DISCOUNT_RATE = Decimal("0.00")
BASE_REWARD_MULTIPLIER = Decimal("1.0")
BASE_CHECKIN_BONUS = Decimal("0.00")
BASE_WALLET_USAGE_RATE = Decimal("0.30")


def get_tier(key) -> Optional[Tier]:
    return TIERS.get((key or "").strip().lower())
