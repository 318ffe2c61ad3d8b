"""
Charm pricing: pick a listing discount whose full price ends in .90 or .99.

Given the price the buyer must pay, every candidate discount implies a
full price. The suggested candidate is the one whose cents sit closest to
a charm ending, then the one closest to the desired discount, then the
cheapest.
"""

from collections.abc import Iterable
from decimal import ROUND_FLOOR, Decimal

from pydantic import BaseModel, ConfigDict

from sellerfees.core.money import HUNDRED, ONE, ZERO, normalize_percent, round_money

MAX_DISCOUNT_RATE = Decimal("0.99")

DEFAULT_SPREAD = tuple(
    Decimal(delta) for delta in ("0", "-0.08", "-0.05", "-0.02", "0.02", "0.05", "0.08")
)

CHARM_ENDINGS = (90, 99)


class DiscountAlternative(BaseModel):
    model_config = ConfigDict(frozen=True)

    discount_rate: Decimal
    full_price: Decimal


def clamp_discount(value: Decimal) -> Decimal:
    """Keep a discount rate inside ``[0, 0.99]``."""
    if value < ZERO:
        return ZERO
    if value >= ONE:
        return MAX_DISCOUNT_RATE
    return min(value, MAX_DISCOUNT_RATE)


def normalize_discount(value) -> Decimal:
    return clamp_discount(normalize_percent(value))


def build_discount_candidates(
    desired: Decimal, explicit: Iterable[float] | None = None
) -> list[Decimal]:
    """
    Candidate discount rates, clamped, deduplicated and ascending.

    Args:
        desired: Desired discount rate, already normalized.
        explicit: Caller-supplied candidates; when empty, the default spread
            around ``desired`` is used.
    """
    explicit = list(explicit or [])
    if explicit:
        rates = {normalize_discount(rate) for rate in explicit}
    else:
        rates = {clamp_discount(desired + delta) for delta in DEFAULT_SPREAD}
    return sorted(rates)


def charm_score(full_price: Decimal) -> int:
    """Distance, in cents, from the price's cents to the nearest charm ending."""
    price = round_money(full_price)
    cents = int((price - price.to_integral_value(rounding=ROUND_FLOOR)) * HUNDRED)
    return min(abs(cents - ending) for ending in CHARM_ENDINGS)


def full_price_for_discount(selling_price: Decimal, discount_rate: Decimal) -> Decimal:
    return round_money(selling_price / (ONE - discount_rate))


def plan_discount_alternatives(
    selling_price: Decimal, candidates: Iterable[Decimal]
) -> list[DiscountAlternative]:
    return [
        DiscountAlternative(
            discount_rate=rate,
            full_price=full_price_for_discount(selling_price, rate),
        )
        for rate in candidates
    ]


def pick_suggested_alternative(
    alternatives: list[DiscountAlternative], desired: Decimal
) -> DiscountAlternative:
    return min(
        alternatives,
        key=lambda alt: (
            charm_score(alt.full_price),
            abs(alt.discount_rate - desired),
            alt.full_price,
        ),
    )
