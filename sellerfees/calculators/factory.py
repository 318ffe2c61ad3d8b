"""
Factory pattern for selecting the fee schedule implementation.

Consumers call CalculatorFactory.create(RulePolicy.LEGACY) without knowing
the concrete class; the policy is always an explicit parameter.
"""

from decimal import Decimal

from sellerfees.calculators.commission import CommissionCalculator
from sellerfees.calculators.legacy import LegacyCommissionCalculator
from sellerfees.core.exceptions import UnsupportedPolicyError
from sellerfees.core.interfaces import ICommissionCalculator
from sellerfees.core.models import CommissionRules, PolicyComparison, RulePolicy, SaleContext
from sellerfees.core.money import round_money
from sellerfees.core.rules import DEFAULT_RULES_2026


class CalculatorFactory:
    """
    Factory that creates the calculator for a fee schedule.

    Usage:
        calculator = CalculatorFactory.create(RulePolicy.CURRENT, rules=rules)
        result = calculator.calculate(Decimal("100"), context)
    """

    _registry: dict[str, type[ICommissionCalculator]] = {}

    @classmethod
    def register(cls, policy: RulePolicy, calculator_class: type[ICommissionCalculator]) -> None:
        """Register a calculator class for a policy."""
        cls._registry[str(policy)] = calculator_class

    @classmethod
    def create(
        cls,
        policy: RulePolicy | str,
        rules: CommissionRules = DEFAULT_RULES_2026,
        **options,
    ) -> ICommissionCalculator:
        """
        Create a calculator for the given policy.

        Args:
            policy: Fee schedule version (``RulePolicy`` or its value).
            rules: Rule set for the current schedule.
            **options: Schedule-specific options such as the legacy
                ``include_free_shipping`` and ``apply_low_price_rule``; each
                calculator ignores the ones it does not use.

        Returns:
            Configured calculator instance.

        Raises:
            UnsupportedPolicyError: If the policy is not registered.
        """
        key = str(policy)

        if key not in cls._registry:
            available = ", ".join(cls._registry.keys()) or "none"
            raise UnsupportedPolicyError(
                f"Unsupported rule policy: '{policy}'. Available: {available}"
            )

        return cls._registry[key].from_options(rules, **options)

    @classmethod
    def available_policies(cls) -> list[str]:
        """List all registered policies."""
        return list(cls._registry.keys())


def compare_policies(
    item_price: Decimal,
    context: SaleContext,
    rules: CommissionRules = DEFAULT_RULES_2026,
    include_free_shipping: bool = False,
) -> PolicyComparison:
    """Price one sale under both schedules and report the net difference."""
    options = {"include_free_shipping": include_free_shipping}
    current = CalculatorFactory.create(RulePolicy.CURRENT, rules=rules, **options).calculate(
        item_price, context
    )
    legacy = CalculatorFactory.create(RulePolicy.LEGACY, rules=rules, **options).calculate(
        item_price, context
    )

    return PolicyComparison(
        item_price=current.item_price,
        current_net_amount=current.net_amount,
        legacy_net_amount=legacy.net_amount,
        net_difference=round_money(current.net_amount - legacy.net_amount),
        current_total_commission=current.total_commission_amount,
        legacy_total_commission=legacy.total_commission_amount,
    )


# ─── Register calculators ─────────────────────────────────────

def _register_default_calculators() -> None:
    """Register both built-in fee schedules."""
    CalculatorFactory.register(RulePolicy.CURRENT, CommissionCalculator)
    CalculatorFactory.register(RulePolicy.LEGACY, LegacyCommissionCalculator)


_register_default_calculators()
