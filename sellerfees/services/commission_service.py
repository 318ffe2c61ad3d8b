"""
Commission service: one rule set, one fee schedule, forward and inverse calls.

The rule set is merged from the defaults and an optional partial override
once, at construction, and never changes afterwards.
"""

import logging

from sellerfees.calculators.commission import solve_item_price_for_target_net
from sellerfees.calculators.factory import CalculatorFactory
from sellerfees.core.interfaces import ICommissionCalculator
from sellerfees.core.models import (
    BaseCommissionResult,
    CommissionRequest,
    CommissionRules,
    InverseCommissionRequest,
    InverseCommissionResult,
    RuleOverrides,
    RulePolicy,
    SaleContext,
)
from sellerfees.core.rules import DEFAULT_RULES_2026, merge_rules, validate_rules

logger = logging.getLogger(__name__)


class CommissionService:
    """
    Forward and inverse commission calculations over a fixed rule set.

    Accounts for:
    - Price brackets with percentage, fixed fee and Pix subsidy
    - Low-price fixed-fee rules for CNPJ and CPF sellers
    - CPF extra fee above the 90-day order threshold
    - Optional campaign extra on the invoice price
    """

    def __init__(
        self,
        overrides: RuleOverrides | None = None,
        policy: RulePolicy = RulePolicy.CURRENT,
        base_rules: CommissionRules = DEFAULT_RULES_2026,
    ):
        if base_rules is not DEFAULT_RULES_2026:
            validate_rules(base_rules)
        self._rules = merge_rules(base_rules, overrides)
        self._policy = policy
        self._calculator = CalculatorFactory.create(policy, rules=self._rules)

    @property
    def policy(self) -> RulePolicy:
        return self._policy

    @property
    def calculator(self) -> ICommissionCalculator:
        return self._calculator

    def get_rules(self) -> CommissionRules:
        return self._rules

    def calculate_from_item_price(self, request: CommissionRequest) -> BaseCommissionResult:
        """Full breakdown for the requested item price."""
        return self._calculator.calculate(request.item_price, _context_of(request))

    def calculate_from_target_net(self, request: InverseCommissionRequest) -> InverseCommissionResult:
        """Smallest item price whose net meets ``request.target_net_amount``."""
        result = solve_item_price_for_target_net(
            self._calculator, _context_of(request), request.target_net_amount
        )
        logger.debug(
            f"Solved item price {result.suggested_item_price} for net "
            f"{result.requested_net_amount} ({result.status})"
        )
        return result


def _context_of(request: SaleContext) -> SaleContext:
    return SaleContext(
        seller_type=request.seller_type,
        payment_method=request.payment_method,
        orders_last_90_days=request.orders_last_90_days,
        include_campaign_extra=request.include_campaign_extra,
    )


def create_commission_service(
    overrides: RuleOverrides | None = None,
    policy: RulePolicy = RulePolicy.CURRENT,
) -> CommissionService:
    return CommissionService(overrides=overrides, policy=policy)
