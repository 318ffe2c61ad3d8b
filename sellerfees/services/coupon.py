"""
Listing discount and store coupon adjustment.

Pure price transformations applied before the forward calculation:
the listing discount first, then a store-wide coupon gated by a minimum
price and capped at a maximum amount.
"""

from decimal import Decimal

from sellerfees.core.models import CouponOutcome, StoreCoupon
from sellerfees.core.money import ONE, ZERO, normalize_percent, round_money, to_decimal


def apply_store_coupon(
    discounted_price: Decimal,
    coupon_rate: Decimal,
    coupon_min_price: Decimal | None = None,
    coupon_max_discount: Decimal | None = None,
) -> CouponOutcome:
    """
    Apply a store coupon to an already discounted price.

    Args:
        discounted_price: Price after the listing discount.
        coupon_rate: Normalized coupon fraction.
        coupon_min_price: Minimum eligible price; unset means always eligible.
        coupon_max_discount: Cap on the coupon amount; unset means no cap.

    Returns:
        CouponOutcome with the coupon amount and the final buyer price.
    """
    meets_minimum = coupon_min_price is None or discounted_price >= coupon_min_price
    if not meets_minimum or coupon_rate <= 0:
        return CouponOutcome(
            discounted_price=discounted_price,
            coupon_applied=False,
            coupon_discount_amount=ZERO,
            final_buyer_price=discounted_price,
        )

    raw_coupon = discounted_price * coupon_rate
    if coupon_max_discount is not None:
        raw_coupon = min(raw_coupon, coupon_max_discount)
    coupon_discount_amount = round_money(max(ZERO, min(raw_coupon, discounted_price)))

    return CouponOutcome(
        discounted_price=discounted_price,
        coupon_applied=coupon_discount_amount > 0,
        coupon_discount_amount=coupon_discount_amount,
        final_buyer_price=round_money(discounted_price - coupon_discount_amount),
    )


def apply_discount_and_coupon(
    listed_price: Decimal,
    discount: Decimal,
    coupon: StoreCoupon | None = None,
) -> CouponOutcome:
    """Listing discount followed by the store coupon, both normalized."""
    discounted_price = round_money(to_decimal(listed_price) * (ONE - discount))
    if coupon is None:
        return apply_store_coupon(discounted_price, ZERO)

    return apply_store_coupon(
        discounted_price,
        normalize_percent(coupon.rate),
        _optional_amount(coupon.min_price),
        _optional_amount(coupon.max_discount),
    )


def final_based_to_listing_discount(value) -> Decimal:
    """
    Convert a discount quoted on the final price into a listing discount.

    Knocking 10% of the final price off means the listing price is 110% of
    the final one, i.e. a 10/110 listing discount.
    """
    final_based = normalize_percent(value)
    return final_based / (ONE + final_based)


def _optional_amount(value: float | None) -> Decimal | None:
    return None if value is None else to_decimal(value)
