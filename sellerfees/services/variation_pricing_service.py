"""
Variation pricing plan.

For each product variation, finds the selling price that yields the target
net once the store coupon is taken by the buyer, then proposes the full
price to list for the desired discount, plus charm-priced alternatives.
"""

import logging
from collections.abc import Callable
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from sellerfees.core.bisect import SearchDirection, bisect_threshold
from sellerfees.core.models import SolverStatus
from sellerfees.core.money import ZERO, finite_money, round_money, to_decimal
from sellerfees.services.charm_pricing import (
    DiscountAlternative,
    build_discount_candidates,
    full_price_for_discount,
    normalize_discount,
    pick_suggested_alternative,
    plan_discount_alternatives,
)
from sellerfees.services.coupon import apply_store_coupon
from sellerfees.services.csv_export import results_to_csv
from sellerfees.services.planning import ListingEvaluator, PlanningRequest, create_evaluator

logger = logging.getLogger(__name__)

MAX_LISTED_PRICE = Decimal("500000")

CSV_FIELDS = (
    "product_name",
    "variation_name",
    "cost",
    "target_net",
    "selling_price_needed",
    "buyer_price_after_coupon",
    "coupon_rate",
    "coupon_max_discount",
    "coupon_discount_amount",
    "desired_discount_rate",
    "full_price_for_desired_discount",
    "suggested_discount_rate",
    "suggested_full_price",
    "effective_commission_rate",
    "margin_amount",
    "margin_rate_on_cost",
)


class VariationPricingItem(BaseModel):
    product_name: str | None = None
    variation_name: str
    cost: float | None = None
    target_net: float
    desired_discount_rate: float = 0.0


class VariationPricingPlanInput(PlanningRequest[VariationPricingItem]):
    discount_candidates: list[float] | None = None


class ListedPriceSolution(BaseModel):
    model_config = ConfigDict(frozen=True)

    listed_price: Decimal
    expected_net: Decimal
    coupon_discount_amount: Decimal
    buyer_price_after_coupon: Decimal
    total_commission: Decimal


class VariationPricingResult(BaseModel):
    product_name: str | None = None
    variation_name: str
    cost: Decimal | None = None
    target_net: Decimal
    expected_net: Decimal
    coupon_rate: Decimal
    coupon_max_discount: Decimal | None = None
    coupon_discount_amount: Decimal
    buyer_price_after_coupon: Decimal
    desired_discount_rate: Decimal
    selling_price_needed: Decimal
    full_price_for_desired_discount: Decimal
    effective_commission_rate: Decimal
    margin_amount: Decimal | None = None
    margin_rate_on_cost: Decimal | None = None
    discount_alternatives: list[DiscountAlternative] = Field(default_factory=list)
    suggested_discount_rate: Decimal
    suggested_full_price: Decimal
    status: SolverStatus = SolverStatus.OK


def solve_listed_price_for_target_net(
    target_net: Decimal,
    evaluate: Callable[[Decimal], ListedPriceSolution],
) -> tuple[ListedPriceSolution, SolverStatus]:
    """
    Smallest listed price in ``[0, 500000]`` whose net after the coupon meets the target.

    Args:
        target_net: Net amount to reach.
        evaluate: Prices a listing from its listed price.

    Returns:
        The solution re-evaluated at the listed price rounded to the cent,
        and ``target-too-high`` when even the ceiling falls short.
    """
    search = bisect_threshold(
        evaluate=evaluate,
        is_satisfied=lambda solution: solution.expected_net >= target_net,
        low=ZERO,
        high=MAX_LISTED_PRICE,
        seek=SearchDirection.SMALLEST,
        fallback=evaluate(MAX_LISTED_PRICE),
    )

    solution = evaluate(round_money(search.x))
    status = SolverStatus.OK if solution.expected_net >= target_net else SolverStatus.TARGET_TOO_HIGH
    return solution, status


def _listed_price_evaluator(
    evaluator: ListingEvaluator,
    coupon_rate: Decimal,
    coupon_max_discount: Decimal | None,
) -> Callable[[Decimal], ListedPriceSolution]:
    """Coupon on the listed price with no minimum, then the forward calculation."""

    def evaluate(listed_price: Decimal) -> ListedPriceSolution:
        coupon = apply_store_coupon(listed_price, coupon_rate, None, coupon_max_discount)
        buyer_price = round_money(coupon.final_buyer_price)
        commission = evaluator.service.calculate_from_item_price(
            evaluator.commission_request(buyer_price)
        )
        return ListedPriceSolution(
            listed_price=listed_price,
            expected_net=commission.net_amount,
            coupon_discount_amount=coupon.coupon_discount_amount,
            buyer_price_after_coupon=buyer_price,
            total_commission=commission.total_commission_amount,
        )

    return evaluate


def calculate_variation_pricing_plan(
    request: VariationPricingPlanInput,
) -> list[VariationPricingResult]:
    """
    Build the pricing plan of every variation.

    The store coupon's minimum price is ignored here: the coupon is assumed
    to reach every buyer, up to its maximum discount.
    """
    evaluator = create_evaluator(request)
    coupon = request.context.store_coupon
    coupon_rate = normalize_discount(coupon.rate) if coupon else ZERO
    coupon_max_discount = (
        to_decimal(coupon.max_discount) if coupon and coupon.max_discount is not None else None
    )
    evaluate = _listed_price_evaluator(evaluator, coupon_rate, coupon_max_discount)

    results = []
    for item in request.items:
        target_net = finite_money(item.target_net)
        desired = normalize_discount(item.desired_discount_rate)

        solution, status = solve_listed_price_for_target_net(target_net, evaluate)
        if status != SolverStatus.OK:
            logger.info(f"{item.variation_name}: target net {target_net} unreachable")

        selling_price_needed = solution.listed_price
        alternatives = plan_discount_alternatives(
            selling_price_needed,
            build_discount_candidates(desired, request.discount_candidates),
        )
        suggested = pick_suggested_alternative(alternatives, desired)

        cost = margin_amount = margin_rate_on_cost = None
        if item.cost is not None:
            cost = finite_money(item.cost)
            margin_amount = round_money(target_net - cost)
            if cost > 0:
                margin_rate_on_cost = margin_amount / cost

        effective_rate = ZERO
        if solution.buyer_price_after_coupon > 0:
            effective_rate = solution.total_commission / solution.buyer_price_after_coupon

        results.append(
            VariationPricingResult(
                product_name=item.product_name,
                variation_name=item.variation_name,
                cost=cost,
                target_net=target_net,
                expected_net=solution.expected_net,
                coupon_rate=coupon_rate,
                coupon_max_discount=coupon_max_discount,
                coupon_discount_amount=solution.coupon_discount_amount,
                buyer_price_after_coupon=solution.buyer_price_after_coupon,
                desired_discount_rate=desired,
                selling_price_needed=selling_price_needed,
                full_price_for_desired_discount=full_price_for_discount(selling_price_needed, desired),
                effective_commission_rate=effective_rate,
                margin_amount=margin_amount,
                margin_rate_on_cost=margin_rate_on_cost,
                discount_alternatives=alternatives,
                suggested_discount_rate=suggested.discount_rate,
                suggested_full_price=suggested.full_price,
                status=status,
            )
        )

    return results


def variation_pricing_to_csv(results: list[VariationPricingResult]) -> str:
    return results_to_csv(results, CSV_FIELDS)
