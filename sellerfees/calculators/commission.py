"""
Commission calculation under the current (2026-03-01) fee schedule.

Resolves the price bracket, the fixed fee (half the price for cheap CNPJ
items, an interpolated curve for cheap CPF items), the CPF extra fee, the
Pix subsidy, and the campaign extra, rounding to the cent after every step.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal

from sellerfees.core.bisect import SearchDirection, bisect_threshold
from sellerfees.core.exceptions import BracketNotFoundError
from sellerfees.core.interfaces import ICommissionCalculator
from sellerfees.core.models import (
    CommissionInput,
    CommissionResult,
    CommissionRules,
    InterpolationPoint,
    InverseCommissionInput,
    InverseCommissionResult,
    PaymentMethod,
    PriceBracket,
    RulePolicy,
    SaleContext,
    SellerType,
    SolverStatus,
)
from sellerfees.core.money import ZERO, clamp_non_negative, round_money

logger = logging.getLogger(__name__)

# Search domain of the price-from-target-net solver
MAX_SEARCH_PRICE = Decimal("500000")


def find_bracket(price: Decimal, brackets: Sequence[PriceBracket]) -> PriceBracket:
    """First bracket, in ascending order, whose bounds include ``price``."""
    for bracket in brackets:
        if bracket.contains(price):
            return bracket
    raise BracketNotFoundError(price)


def interpolate_fixed_fee(price: Decimal, points: Sequence[InterpolationPoint]) -> Decimal:
    """Piecewise-linear fixed fee, clamped to the first/last knot outside the curve."""
    if not points:
        return ZERO

    ordered = sorted(points, key=lambda point: point.price)

    if price <= ordered[0].price:
        return ordered[0].fixed_fee

    last = ordered[-1]
    if price >= last.price:
        return last.fixed_fee

    for left, right in zip(ordered, ordered[1:]):
        if left.price <= price <= right.price:
            ratio = (price - left.price) / (right.price - left.price)
            return left.fixed_fee + ratio * (right.fixed_fee - left.fixed_fee)

    return last.fixed_fee


def has_cpf_extra_fee(orders_last_90_days: int, threshold: int) -> bool:
    return orders_last_90_days > threshold


def resolve_fixed_fee(
    item_price: Decimal,
    seller_type: SellerType,
    orders_last_90_days: int,
    rules: CommissionRules,
    bracket: PriceBracket,
) -> tuple[Decimal, Decimal]:
    """
    Resolve the fixed fee and the CPF extra fee for one item.

    Returns:
        ``(fixed_fee, cpf_extra_fee)``, both unrounded.
    """
    extra_enabled = has_cpf_extra_fee(orders_last_90_days, rules.cpf_extra_orders_threshold_90d)

    if seller_type == SellerType.CNPJ and item_price < rules.cnpj_low_price_threshold:
        return item_price / 2, ZERO

    if seller_type == SellerType.CPF and item_price < rules.cpf_low_price_threshold:
        points = (
            rules.cpf_low_price_with_extra_fee_points
            if extra_enabled
            else rules.cpf_low_price_without_extra_fee_points
        )
        return interpolate_fixed_fee(item_price, points), ZERO

    if seller_type == SellerType.CPF and extra_enabled:
        return bracket.fixed_fee, rules.cpf_extra_fee

    return bracket.fixed_fee, ZERO


def calculate_commission(commission_input: CommissionInput) -> CommissionResult:
    """Forward calculation: item price in, full breakdown out."""
    rules = commission_input.rules
    item_price = round_money(commission_input.item_price)
    bracket = find_bracket(item_price, rules.brackets)
    fixed_fee, cpf_extra_fee = resolve_fixed_fee(
        item_price,
        commission_input.seller_type,
        commission_input.orders_last_90_days,
        rules,
        bracket,
    )

    percentage_amount = round_money(item_price * bracket.percentage_rate)
    fixed_fee_amount = round_money(fixed_fee)
    cpf_extra_fee_amount = round_money(cpf_extra_fee)
    base_commission_amount = round_money(percentage_amount + fixed_fee_amount + cpf_extra_fee_amount)

    is_pix = commission_input.payment_method == PaymentMethod.PIX
    pix_subsidy_rate = bracket.pix_subsidy_rate if is_pix else ZERO
    pix_subsidy_amount = round_money(item_price * pix_subsidy_rate)

    commission_amount = round_money(clamp_non_negative(base_commission_amount - pix_subsidy_amount))
    item_invoice_price = round_money(clamp_non_negative(item_price - pix_subsidy_amount))

    # Campaign extra is charged on the invoice price, after the Pix subsidy
    campaign_extra_rate = rules.campaign_extra_rate if commission_input.include_campaign_extra else ZERO
    campaign_extra_amount = round_money(item_invoice_price * campaign_extra_rate)

    total_commission_amount = round_money(commission_amount + campaign_extra_amount)
    net_amount = round_money(item_invoice_price - total_commission_amount)

    return CommissionResult(
        item_price=item_price,
        item_invoice_price=item_invoice_price,
        seller_type=commission_input.seller_type,
        payment_method=commission_input.payment_method,
        bracket=bracket,
        percentage_amount=percentage_amount,
        fixed_fee_amount=fixed_fee_amount,
        cpf_extra_fee_amount=cpf_extra_fee_amount,
        base_commission_amount=base_commission_amount,
        pix_subsidy_rate=pix_subsidy_rate,
        pix_subsidy_amount=pix_subsidy_amount,
        commission_amount=commission_amount,
        campaign_extra_rate=campaign_extra_rate,
        campaign_extra_amount=campaign_extra_amount,
        total_commission_amount=total_commission_amount,
        net_amount=net_amount,
    )


class CommissionCalculator(ICommissionCalculator):
    """Current fee schedule bound to one rule set."""

    policy = RulePolicy.CURRENT

    def __init__(self, rules: CommissionRules):
        self._rules = rules

    @classmethod
    def from_options(cls, rules: CommissionRules, **options) -> "CommissionCalculator":
        return cls(rules)

    @property
    def rules(self) -> CommissionRules:
        return self._rules

    def calculate(self, item_price: Decimal, context: SaleContext) -> CommissionResult:
        return calculate_commission(
            CommissionInput(
                item_price=item_price,
                seller_type=context.seller_type,
                payment_method=context.payment_method,
                orders_last_90_days=context.orders_last_90_days,
                include_campaign_extra=context.include_campaign_extra,
                rules=self._rules,
            )
        )


def solve_item_price_for_target_net(
    calculator: ICommissionCalculator,
    context: SaleContext,
    target_net_amount: Decimal,
) -> InverseCommissionResult:
    """
    Smallest item price in ``[0, 500000]`` whose net meets the target.

    A target above the net at the domain ceiling saturates at 500000 with
    status ``target-too-high``.
    """
    requested = round_money(target_net_amount)

    search = bisect_threshold(
        evaluate=lambda price: calculator.calculate(price, context),
        is_satisfied=lambda outcome: outcome.net_amount >= requested,
        low=ZERO,
        high=MAX_SEARCH_PRICE,
        seek=SearchDirection.SMALLEST,
    )

    suggested_item_price = round_money(search.x)
    outcome = calculator.calculate(suggested_item_price, context)
    status = SolverStatus.OK if outcome.net_amount >= requested else SolverStatus.TARGET_TOO_HIGH
    if status != SolverStatus.OK:
        logger.info(f"Target net {requested} unreachable below {MAX_SEARCH_PRICE}")

    return InverseCommissionResult(
        requested_net_amount=requested,
        suggested_item_price=suggested_item_price,
        status=status,
        outcome=outcome,
    )


def calculate_required_item_price(inverse_input: InverseCommissionInput) -> InverseCommissionResult:
    """Inverse calculation under the current schedule, rule set included."""
    return solve_item_price_for_target_net(
        CommissionCalculator(inverse_input.rules),
        SaleContext(
            seller_type=inverse_input.seller_type,
            payment_method=inverse_input.payment_method,
            orders_last_90_days=inverse_input.orders_last_90_days,
            include_campaign_extra=inverse_input.include_campaign_extra,
        ),
        inverse_input.target_net_amount,
    )
