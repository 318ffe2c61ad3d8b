"""
Default commission rule sets and rule-set construction.

``DEFAULT_RULES_2026`` is built once at import and injected into every
service; overrides produce a new immutable value and never mutate it.
"""

import logging
from decimal import Decimal

from sellerfees.core.exceptions import InvalidRulesError
from sellerfees.core.models import CommissionRules, InterpolationPoint, PriceBracket, RuleOverrides
from sellerfees.core.money import CENT

logger = logging.getLogger(__name__)


def validate_rules(rules: CommissionRules) -> CommissionRules:
    """
    Check that the bracket table covers ``[0, ∞)`` at cent granularity.

    Prices are rounded to whole cents before lookup, so a bracket ending at
    ``79.99`` followed by one starting at ``80`` leaves no gap.

    Raises:
        InvalidRulesError: On an empty table, a gap, an overlap, or a
            bounded last bracket.
    """
    brackets = rules.brackets
    if not brackets:
        raise InvalidRulesError("Rule set has no price brackets")

    if brackets[0].min_price != 0:
        raise InvalidRulesError(
            f"First bracket must start at 0, starts at {brackets[0].min_price}"
        )

    for previous, current in zip(brackets, brackets[1:]):
        if previous.max_price is None:
            raise InvalidRulesError("Only the last bracket may be unbounded")
        if current.min_price != previous.max_price + CENT:
            raise InvalidRulesError(
                f"Brackets are not contiguous: {previous.max_price} -> {current.min_price}",
                details={"previous_max": str(previous.max_price), "next_min": str(current.min_price)},
            )

    if brackets[-1].max_price is not None:
        raise InvalidRulesError(
            f"Last bracket must be unbounded, ends at {brackets[-1].max_price}"
        )

    return rules


def merge_rules(base: CommissionRules, overrides: RuleOverrides | None = None) -> CommissionRules:
    """Apply the fields set in ``overrides`` on top of ``base``."""
    if overrides is None:
        return base

    update = overrides.model_dump(exclude_none=True)
    if not update:
        return base

    logger.debug(f"Applying rule overrides: {sorted(update)}")
    return base.model_copy(update=update)


def combine_overrides(*layers: RuleOverrides | None) -> RuleOverrides | None:
    """
    Stack partial overrides; later layers win field by field.

    Returns None when no layer sets any field.
    """
    combined: dict = {}
    for layer in layers:
        if layer is not None:
            combined.update(layer.model_dump(exclude_none=True))
    return RuleOverrides(**combined) if combined else None


DEFAULT_RULES_2026 = validate_rules(
    CommissionRules(
        brackets=(
            PriceBracket(min_price="0", max_price="79.99", percentage_rate="0.20", fixed_fee="4", pix_subsidy_rate="0"),
            PriceBracket(min_price="80", max_price="99.99", percentage_rate="0.14", fixed_fee="16", pix_subsidy_rate="0.05"),
            PriceBracket(min_price="100", max_price="199.99", percentage_rate="0.14", fixed_fee="20", pix_subsidy_rate="0.05"),
            PriceBracket(min_price="200", max_price="499.99", percentage_rate="0.14", fixed_fee="26", pix_subsidy_rate="0.05"),
            PriceBracket(min_price="500", max_price=None, percentage_rate="0.14", fixed_fee="26", pix_subsidy_rate="0.08"),
        ),
        campaign_extra_rate=Decimal("0.025"),
        cpf_extra_fee=Decimal("3"),
        cpf_extra_orders_threshold_90d=450,
        cnpj_low_price_threshold=Decimal("8"),
        cpf_low_price_threshold=Decimal("12"),
        cpf_low_price_with_extra_fee_points=(
            InterpolationPoint(price="8", fixed_fee="6"),
            InterpolationPoint(price="10", fixed_fee="6.5"),
            InterpolationPoint(price="12", fixed_fee="7"),
        ),
        cpf_low_price_without_extra_fee_points=(
            InterpolationPoint(price="8", fixed_fee="3"),
            InterpolationPoint(price="10", fixed_fee="3.5"),
            InterpolationPoint(price="12", fixed_fee="4"),
        ),
    )
)
