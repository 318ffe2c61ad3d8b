"""
Forward batch: full price, discount and store coupon in, net amount out.
"""

from decimal import Decimal

from pydantic import BaseModel

from sellerfees.core.money import ZERO, normalize_money, normalize_percent, round_money, to_decimal
from sellerfees.services.csv_export import results_to_csv
from sellerfees.services.planning import PlanningRequest, create_evaluator

CSV_FIELDS = (
    "variation_name",
    "full_price",
    "discount_percent",
    "discounted_price",
    "coupon_applied",
    "coupon_rate",
    "coupon_min_price",
    "coupon_max_discount",
    "coupon_discount_amount",
    "final_buyer_price",
    "commission_amount",
    "net_amount",
    "effective_commission_rate",
)


class NetFromFullPriceItem(BaseModel):
    variation_name: str
    full_price: float
    discount_percent: float = 0.0


class NetFromFullPriceInput(PlanningRequest[NetFromFullPriceItem]):
    pass


class NetFromFullPriceResult(BaseModel):
    variation_name: str
    full_price: Decimal
    discount_percent: Decimal
    discounted_price: Decimal
    coupon_applied: bool
    coupon_rate: Decimal
    coupon_min_price: Decimal | None = None
    coupon_max_discount: Decimal | None = None
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
    commission_amount: Decimal
    net_amount: Decimal
    effective_commission_rate: Decimal


def calculate_net_from_full_price(request: NetFromFullPriceInput) -> list[NetFromFullPriceResult]:
    evaluator = create_evaluator(request)
    coupon = request.context.store_coupon
    coupon_rate = normalize_percent(coupon.rate) if coupon else ZERO
    coupon_min_price = to_decimal(coupon.min_price) if coupon and coupon.min_price is not None else None
    coupon_max_discount = (
        to_decimal(coupon.max_discount) if coupon and coupon.max_discount is not None else None
    )

    results = []
    for item in request.items:
        full_price = round_money(normalize_money(item.full_price))
        discount = normalize_percent(item.discount_percent)
        evaluation = evaluator.evaluate(full_price, discount)

        effective_rate = ZERO
        if evaluation.final_buyer_price > 0:
            effective_rate = evaluation.commission_amount / evaluation.final_buyer_price

        results.append(
            NetFromFullPriceResult(
                variation_name=item.variation_name,
                full_price=full_price,
                discount_percent=discount,
                coupon_rate=coupon_rate,
                coupon_min_price=coupon_min_price,
                coupon_max_discount=coupon_max_discount,
                effective_commission_rate=effective_rate,
                **evaluation.model_dump(),
            )
        )

    return results


def net_from_full_price_to_csv(results: list[NetFromFullPriceResult]) -> str:
    return results_to_csv(results, CSV_FIELDS)
