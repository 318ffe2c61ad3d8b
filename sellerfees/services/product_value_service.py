"""
Listing price from product cost and target profit.

The target net of each variation is its cost plus the profit wanted on
top; the product coupon acts as the listing discount. Solving is delegated
to the full-price solver, then the result is restated in cost and profit
terms.
"""

from decimal import Decimal

from pydantic import BaseModel

from sellerfees.core.models import CommissionResult, SolverStatus
from sellerfees.core.money import ZERO, normalize_money, normalize_percent, round_money
from sellerfees.services.csv_export import results_to_csv
from sellerfees.services.full_price_from_target_net_service import solve_full_price
from sellerfees.services.planning import PlanningRequest, create_evaluator

CSV_FIELDS = (
    "variation_name",
    "product_cost",
    "target_profit",
    "target_net_amount",
    "product_coupon_percent",
    "required_full_price",
    "discounted_price",
    "coupon_applied",
    "coupon_discount_amount",
    "final_buyer_price",
    "commission_amount",
    "pix_subsidy_amount",
    "net_amount",
    "net_diff_to_target",
    "profit_after_cost",
    "profit_diff_to_target",
    "status",
)


class ProductValueItem(BaseModel):
    variation_name: str
    product_cost: float | None = None
    target_profit: float | None = None
    product_coupon_percent: float = 0.0


class ProductValueInput(PlanningRequest[ProductValueItem]):
    pass


class ProductValueResult(BaseModel):
    variation_name: str
    product_cost: Decimal
    target_profit: Decimal
    target_net_amount: Decimal
    product_coupon_percent: Decimal
    required_full_price: Decimal
    discounted_price: Decimal
    coupon_applied: bool
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
    commission_amount: Decimal
    pix_subsidy_amount: Decimal
    net_amount: Decimal
    net_diff_to_target: Decimal
    profit_after_cost: Decimal
    profit_diff_to_target: Decimal
    status: SolverStatus


def calculate_product_value_from_cost_and_target_profit(
    request: ProductValueInput,
) -> list[ProductValueResult]:
    """
    Price every variation so that net minus cost equals the target profit.

    Missing, negative or non-finite costs and profits count as zero.
    """
    evaluator = create_evaluator(request)
    results = []

    for item in request.items:
        product_cost = round_money(normalize_money(item.product_cost))
        target_profit = round_money(normalize_money(item.target_profit))
        target_net_amount = round_money(product_cost + target_profit)

        solved = solve_full_price(
            evaluator,
            item.variation_name,
            normalize_percent(item.product_coupon_percent),
            target_net_amount,
        )
        breakdown = evaluator.service.calculate_from_item_price(
            evaluator.commission_request(solved.final_buyer_price)
        )
        pix_subsidy_amount = (
            breakdown.pix_subsidy_amount if isinstance(breakdown, CommissionResult) else ZERO
        )
        profit_after_cost = round_money(solved.net_amount - product_cost)

        results.append(
            ProductValueResult(
                variation_name=item.variation_name,
                product_cost=product_cost,
                target_profit=target_profit,
                target_net_amount=target_net_amount,
                product_coupon_percent=solved.discount_percent,
                required_full_price=solved.required_full_price,
                discounted_price=solved.discounted_price,
                coupon_applied=solved.coupon_applied,
                coupon_discount_amount=solved.coupon_discount_amount,
                final_buyer_price=solved.final_buyer_price,
                commission_amount=solved.commission_amount,
                pix_subsidy_amount=pix_subsidy_amount,
                net_amount=solved.net_amount,
                net_diff_to_target=round_money(solved.net_amount - target_net_amount),
                profit_after_cost=profit_after_cost,
                profit_diff_to_target=round_money(profit_after_cost - target_profit),
                status=solved.status,
            )
        )

    return results


def product_value_to_csv(results: list[ProductValueResult]) -> str:
    return results_to_csv(results, CSV_FIELDS)
