"""Order total computation.

Prices are in major currency units (INR). The gateway takes minor units
(paise), so the rounded total is multiplied by 100 before the order call.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

CURRENCY = "INR"
MINOR_UNITS_PER_MAJOR = 100
MINIMUM_TOTAL = 1

PERCENTAGE_TYPES = {"percentage", "percent"}
FLAT_TYPES = {"flat"}


@dataclass(frozen=True)
class PercentageDiscount:
    value: float

    def apply(self, total: float) -> float:
        return total - total * self.value / 100


@dataclass(frozen=True)
class FlatDiscount:
    value: float

    def apply(self, total: float) -> float:
        return total - self.value


Discount = Union[PercentageDiscount, FlatDiscount]


def parse_discount(coupon_type: Optional[str], value) -> Optional[Discount]:
    """Map a stored coupon record onto exactly one discount rule.

    Unknown types give no discount.
    """
    kind = (coupon_type or "").strip().lower()
    if kind in PERCENTAGE_TYPES:
        return PercentageDiscount(float(value))
    if kind in FLAT_TYPES:
        return FlatDiscount(float(value))
    logger.warning("Ignoring coupon with unknown type", extra={"coupon_type": coupon_type})
    return None


def round_half_up(amount: float) -> int:
    return int(math.floor(amount + 0.5))


def compute_total(price: float, quantity: Optional[float] = None, discount: Optional[Discount] = None) -> int:
    """Final chargeable amount in major units, never below MINIMUM_TOTAL."""
    if quantity is None:
        quantity = 1
    total = float(price) * float(quantity)

    if discount is not None:
        total = discount.apply(total)

    total = round_half_up(total)
    if total < MINIMUM_TOTAL:
        total = MINIMUM_TOTAL
    return total


def to_minor_units(total: int) -> int:
    return total * MINOR_UNITS_PER_MAJOR
