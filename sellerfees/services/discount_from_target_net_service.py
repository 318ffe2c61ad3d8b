"""
Largest listing discount that still reaches a target net, per variation.

The full price of each variation is fixed; the solver searches the
listing discount in ``[0, 0.99]``.
"""

import logging
from decimal import Decimal

from pydantic import BaseModel

from sellerfees.core.bisect import SearchDirection, bisect_threshold
from sellerfees.core.models import SolverStatus
from sellerfees.core.money import ZERO, finite_money, floor_rate, normalize_money, round_money
from sellerfees.services.csv_export import results_to_csv
from sellerfees.services.planning import PlanningRequest, create_evaluator

logger = logging.getLogger(__name__)

MAX_DISCOUNT = Decimal("0.99")

CSV_FIELDS = (
    "variation_name",
    "full_price",
    "target_net",
    "required_discount_percent",
    "discounted_price",
    "coupon_applied",
    "coupon_discount_amount",
    "final_buyer_price",
    "commission_amount",
    "net_amount",
    "status",
)


class DiscountFromTargetNetItem(BaseModel):
    variation_name: str
    full_price: float
    target_net: float


class DiscountFromTargetNetInput(PlanningRequest[DiscountFromTargetNetItem]):
    pass


class DiscountFromTargetNetResult(BaseModel):
    variation_name: str
    full_price: Decimal
    target_net: Decimal
    required_discount_percent: Decimal
    discounted_price: Decimal
    coupon_applied: bool
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
    commission_amount: Decimal
    net_amount: Decimal
    status: SolverStatus


def calculate_discount_from_target_net(
    request: DiscountFromTargetNetInput,
) -> list[DiscountFromTargetNetResult]:
    """
    Solve the listing discount for every item of the batch.

    Statuses:
        ``target-too-high``: even without discount the net stays below target.
        ``max-discount-cap-reached``: the target holds at the 99% cap.
        ``ok``: the largest discount meeting the target, floored to 4 places.
    """
    evaluator = create_evaluator(request)
    results = []

    for item in request.items:
        full_price = round_money(normalize_money(item.full_price))
        target_net = finite_money(item.target_net)

        def build(discount: Decimal, status: SolverStatus) -> DiscountFromTargetNetResult:
            evaluation = evaluator.evaluate(full_price, discount)
            return DiscountFromTargetNetResult(
                variation_name=item.variation_name,
                full_price=full_price,
                target_net=target_net,
                required_discount_percent=discount,
                status=status,
                **evaluation.model_dump(),
            )

        at_zero = evaluator.evaluate(full_price, ZERO)
        if target_net > at_zero.net_amount:
            logger.info(f"{item.variation_name}: target net {target_net} above undiscounted net")
            results.append(build(ZERO, SolverStatus.TARGET_TOO_HIGH))
            continue

        at_max = evaluator.evaluate(full_price, MAX_DISCOUNT)
        if target_net <= at_max.net_amount:
            results.append(build(MAX_DISCOUNT, SolverStatus.MAX_DISCOUNT_CAP_REACHED))
            continue

        search = bisect_threshold(
            evaluate=lambda discount: evaluator.evaluate(full_price, discount),
            is_satisfied=lambda evaluation: evaluation.net_amount >= target_net,
            low=ZERO,
            high=MAX_DISCOUNT,
            seek=SearchDirection.LARGEST,
            fallback=at_zero,
        )
        results.append(build(floor_rate(search.x), SolverStatus.OK))

    return results


def discount_from_target_net_to_csv(results: list[DiscountFromTargetNetResult]) -> str:
    return results_to_csv(results, CSV_FIELDS)
