"""
Smallest full price that reaches a target net under a fixed discount.
"""

import logging
from decimal import Decimal

from pydantic import BaseModel

from sellerfees.core.bisect import SearchDirection, bisect_threshold
from sellerfees.core.models import SolverStatus
from sellerfees.core.money import ZERO, ceil_money, finite_money, normalize_percent, round_money
from sellerfees.services.csv_export import results_to_csv
from sellerfees.services.planning import ListingEvaluator, PlanningRequest, create_evaluator

logger = logging.getLogger(__name__)

# Upper bound search: start here, double at most MAX_DOUBLINGS times
INITIAL_HIGH_PRICE = Decimal("100")
MAX_DOUBLINGS = 30

CSV_FIELDS = (
    "variation_name",
    "discount_percent",
    "target_net",
    "required_full_price",
    "discounted_price",
    "coupon_applied",
    "coupon_discount_amount",
    "final_buyer_price",
    "commission_amount",
    "net_amount",
    "status",
)


class FullPriceFromTargetNetItem(BaseModel):
    variation_name: str
    discount_percent: float = 0.0
    target_net: float


class FullPriceFromTargetNetInput(PlanningRequest[FullPriceFromTargetNetItem]):
    pass


class FullPriceFromTargetNetResult(BaseModel):
    variation_name: str
    discount_percent: Decimal
    target_net: Decimal
    required_full_price: Decimal
    discounted_price: Decimal
    coupon_applied: bool
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
    commission_amount: Decimal
    net_amount: Decimal
    status: SolverStatus


def solve_full_price(
    evaluator: ListingEvaluator,
    variation_name: str,
    discount: Decimal,
    target_net: Decimal,
) -> FullPriceFromTargetNetResult:
    """
    Solve one item.

    Args:
        evaluator: Listing evaluator bound to the batch context.
        variation_name: Echoed on the result.
        discount: Normalized listing discount, kept fixed.
        target_net: Net amount to reach, in cents.

    Returns:
        Result with status ``target-too-low`` when a zero price already
        meets the target, ``target-too-high`` when the doubled upper bound
        never does, ``ok`` otherwise.
    """

    def build(full_price: Decimal, status: SolverStatus) -> FullPriceFromTargetNetResult:
        evaluation = evaluator.evaluate(full_price, discount)
        return FullPriceFromTargetNetResult(
            variation_name=variation_name,
            discount_percent=discount,
            target_net=target_net,
            required_full_price=full_price,
            status=status,
            **evaluation.model_dump(),
        )

    at_zero = evaluator.evaluate(ZERO, discount)
    if target_net <= at_zero.net_amount:
        return build(ZERO, SolverStatus.TARGET_TOO_LOW)

    high = INITIAL_HIGH_PRICE
    at_high = evaluator.evaluate(high, discount)
    doublings = 0
    while at_high.net_amount < target_net and doublings < MAX_DOUBLINGS:
        high *= 2
        at_high = evaluator.evaluate(high, discount)
        doublings += 1

    if at_high.net_amount < target_net:
        logger.info(f"{variation_name}: target net {target_net} unreachable up to {high}")
        return build(round_money(high), SolverStatus.TARGET_TOO_HIGH)

    search = bisect_threshold(
        evaluate=lambda price: evaluator.evaluate(price, discount),
        is_satisfied=lambda evaluation: evaluation.net_amount >= target_net,
        low=ZERO,
        high=high,
        seek=SearchDirection.SMALLEST,
        fallback=at_high,
    )
    required_full_price = round_money(search.x)
    if evaluator.evaluate(required_full_price, discount).net_amount < target_net:
        required_full_price = ceil_money(search.x)
    return build(required_full_price, SolverStatus.OK)


def calculate_full_price_from_target_net(
    request: FullPriceFromTargetNetInput,
) -> list[FullPriceFromTargetNetResult]:
    evaluator = create_evaluator(request)
    return [
        solve_full_price(
            evaluator,
            item.variation_name,
            normalize_percent(item.discount_percent),
            finite_money(item.target_net),
        )
        for item in request.items
    ]


def full_price_from_target_net_to_csv(results: list[FullPriceFromTargetNetResult]) -> str:
    return results_to_csv(results, CSV_FIELDS)
