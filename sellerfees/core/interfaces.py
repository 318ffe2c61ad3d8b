"""
Abstract base classes defining the core contracts for SellerFees.

Both fee schedules implement ICommissionCalculator, so services and the
inverse solvers work against either one; the schedule is picked by an
explicit RulePolicy, never by flags at call sites.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from sellerfees.core.models import BaseCommissionResult, CommissionRules, RulePolicy, SaleContext


class ICommissionCalculator(ABC):
    """Interface for forward commission calculation under one fee schedule."""

    policy: RulePolicy

    @classmethod
    @abstractmethod
    def from_options(cls, rules: CommissionRules, **options) -> "ICommissionCalculator":
        """
        Build a calculator from the configured rule set and schedule options.

        Each schedule takes what it needs and ignores options it does not
        know, so callers can pass one set of options to any policy.
        """
        ...

    @abstractmethod
    def calculate(self, item_price: Decimal, context: SaleContext) -> BaseCommissionResult:
        """
        Calculate the commission breakdown for one item.

        Args:
            item_price: Price paid by the buyer.
            context: Seller type, payment method, order volume, campaign flag.

        Returns:
            Breakdown whose ``net_amount`` is what the seller receives.

        Raises:
            RuleConfigurationError: If the rule set does not cover the price.
        """
        ...
