"""
Frozen fee schedule in force until 2026-02-28.

Kept only for regression comparison against the current schedule.
Mirrors the published articles 18483 (CNPJ) and 18484 (CPF): a flat 14%
plus an optional 6% free-shipping transport fee and a fixed fee, with the
base commission capped, and the campaign extra charged on top.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from sellerfees.calculators.commission import has_cpf_extra_fee, interpolate_fixed_fee
from sellerfees.core.interfaces import ICommissionCalculator
from sellerfees.core.models import (
    Amount,
    CommissionRules,
    InterpolationPoint,
    LegacyCommissionResult,
    RulePolicy,
    SaleContext,
    SellerType,
)
from sellerfees.core.money import ZERO, clamp_non_negative, round_money


class LegacyCommissionRules(BaseModel):
    """Parameters of the legacy schedule, shared by both seller types."""

    model_config = ConfigDict(frozen=True)

    cnpj_article: int = 18483
    cpf_article: int = 18484
    percentage_rate: Amount = Decimal("0.14")
    transport_rate_when_free_shipping: Amount = Decimal("0.06")
    campaign_extra_rate: Amount = Decimal("0.025")
    fixed_fee_default: Amount = Decimal("4")
    base_cap: Amount = Decimal("104")
    base_cap_with_cpf_extra_fee: Amount = Decimal("107")
    cpf_extra_fee: Amount = Decimal("3")
    cpf_extra_orders_threshold_90d: int = 450
    cnpj_low_price_threshold: Amount = Decimal("8")
    cpf_low_price_threshold: Amount = Decimal("12")
    cpf_low_price_with_extra_fee_points: tuple[InterpolationPoint, ...] = (
        InterpolationPoint(price="8", fixed_fee="6"),
        InterpolationPoint(price="12", fixed_fee="7"),
    )


LEGACY_RULES = LegacyCommissionRules()


class LegacyCommissionCalculator(ICommissionCalculator):
    """
    Legacy schedule calculator.

    ``include_free_shipping`` and ``apply_low_price_rule`` only exist in the
    legacy schedule, so they are fixed per calculator instance instead of
    travelling through the shared SaleContext.
    """

    policy = RulePolicy.LEGACY

    def __init__(
        self,
        rules: LegacyCommissionRules = LEGACY_RULES,
        include_free_shipping: bool = False,
        apply_low_price_rule: bool = True,
    ):
        self._rules = rules
        self._include_free_shipping = include_free_shipping
        self._apply_low_price_rule = apply_low_price_rule

    @classmethod
    def from_options(
        cls,
        rules: CommissionRules,
        include_free_shipping: bool = False,
        apply_low_price_rule: bool = True,
        **options,
    ) -> "LegacyCommissionCalculator":
        # The legacy schedule has fixed parameters; current-schedule rules do not apply.
        return cls(
            include_free_shipping=include_free_shipping,
            apply_low_price_rule=apply_low_price_rule,
        )

    @property
    def rules(self) -> LegacyCommissionRules:
        return self._rules

    def calculate(self, item_price: Decimal, context: SaleContext) -> LegacyCommissionResult:
        price = round_money(item_price)
        rules = self._rules

        percentage_amount = round_money(price * rules.percentage_rate)
        transport_amount = round_money(
            price * rules.transport_rate_when_free_shipping if self._include_free_shipping else ZERO
        )

        if context.seller_type == SellerType.CPF:
            fixed_fee, extra_fee, has_extra, regression = self._resolve_cpf_fees(
                price, context.orders_last_90_days
            )
            base_cap = rules.base_cap_with_cpf_extra_fee if has_extra else rules.base_cap
            scope_label = f"CPF (artigo {rules.cpf_article})"
        else:
            fixed_fee = rules.fixed_fee_default
            if self._apply_low_price_rule and price < rules.cnpj_low_price_threshold:
                fixed_fee = price / 2
            extra_fee, has_extra, regression = ZERO, False, False
            base_cap = rules.base_cap
            scope_label = f"CNPJ (artigo {rules.cnpj_article})"

        item_fixed_fee = round_money(fixed_fee)
        cpf_extra_fee = round_money(extra_fee)
        raw_base = percentage_amount + transport_amount + item_fixed_fee + cpf_extra_fee
        base_commission = round_money(min(raw_base, base_cap))

        # Legacy campaign extra is charged on the full item price
        campaign_amount = round_money(
            price * rules.campaign_extra_rate if context.include_campaign_extra else ZERO
        )
        total_commission = round_money(clamp_non_negative(base_commission + campaign_amount))

        return LegacyCommissionResult(
            item_price=price,
            seller_type=context.seller_type,
            percentage_rate=rules.percentage_rate,
            percentage_amount=percentage_amount,
            transport_amount=transport_amount,
            item_fixed_fee=item_fixed_fee,
            cpf_extra_fee=cpf_extra_fee,
            has_cpf_extra_fee=has_extra,
            low_price_regression_applied=regression,
            base_commission=base_commission,
            base_cap=base_cap,
            campaign_amount=campaign_amount,
            total_commission_amount=total_commission,
            net_amount=round_money(price - total_commission),
            scope_label=scope_label,
        )

    def _resolve_cpf_fees(
        self, price: Decimal, orders_last_90_days: int
    ) -> tuple[Decimal, Decimal, bool, bool]:
        """Returns ``(fixed_fee, cpf_extra_fee, has_extra_fee, regression_applied)``."""
        rules = self._rules
        has_extra = has_cpf_extra_fee(orders_last_90_days, rules.cpf_extra_orders_threshold_90d)

        if not has_extra:
            return rules.fixed_fee_default, ZERO, False, False

        if price < rules.cpf_low_price_threshold:
            fee = interpolate_fixed_fee(price, rules.cpf_low_price_with_extra_fee_points)
            return fee, ZERO, True, True

        return rules.fixed_fee_default, rules.cpf_extra_fee, True, False
