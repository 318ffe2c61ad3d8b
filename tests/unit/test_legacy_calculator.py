"""Tests for the legacy (until 2026-02-28) fee schedule."""

from decimal import Decimal

import pytest

from sellerfees.calculators.legacy import LEGACY_RULES, LegacyCommissionCalculator
from sellerfees.core.models import RulePolicy, SaleContext, SellerType


@pytest.fixture
def legacy() -> LegacyCommissionCalculator:
    return LegacyCommissionCalculator()


@pytest.fixture
def legacy_free_shipping() -> LegacyCommissionCalculator:
    return LegacyCommissionCalculator(include_free_shipping=True)


def _cpf(orders: int = 0, campaign: bool = False) -> SaleContext:
    return SaleContext(seller_type=SellerType.CPF, orders_last_90_days=orders, include_campaign_extra=campaign)


def _cnpj(campaign: bool = False) -> SaleContext:
    return SaleContext(seller_type=SellerType.CNPJ, include_campaign_extra=campaign)


class TestLegacyCnpj:

    def test_default_sale(self, legacy):
        result = legacy.calculate(Decimal("100"), _cnpj())

        assert result.percentage_amount == Decimal("14.00")
        assert result.transport_amount == Decimal("0.00")
        assert result.item_fixed_fee == Decimal("4.00")
        assert result.total_commission_amount == Decimal("18.00")
        assert result.net_amount == Decimal("82.00")
        assert result.scope_label == "CNPJ (artigo 18483)"

    def test_free_shipping_and_campaign(self, legacy_free_shipping):
        result = legacy_free_shipping.calculate(Decimal("100"), _cnpj(campaign=True))

        assert result.transport_amount == Decimal("6.00")
        assert result.base_commission == Decimal("24.00")
        assert result.campaign_amount == Decimal("2.50")
        assert result.net_amount == Decimal("73.50")

    def test_low_price_rule_halves_fixed_fee(self, legacy):
        result = legacy.calculate(Decimal("6"), _cnpj())
        assert result.item_fixed_fee == Decimal("3.00")
        assert result.net_amount == Decimal("2.16")

    def test_low_price_rule_can_be_disabled(self):
        calculator = LegacyCommissionCalculator(apply_low_price_rule=False)
        result = calculator.calculate(Decimal("6"), _cnpj())
        assert result.item_fixed_fee == Decimal("4.00")
        assert result.net_amount == Decimal("1.16")

    def test_base_capped(self, legacy_free_shipping):
        result = legacy_free_shipping.calculate(Decimal("1000"), _cnpj())
        assert result.base_commission == Decimal("104.00")
        assert result.net_amount == Decimal("896.00")

    def test_campaign_charged_above_cap(self, legacy_free_shipping):
        result = legacy_free_shipping.calculate(Decimal("1000"), _cnpj(campaign=True))
        assert result.campaign_amount == Decimal("25.00")
        assert result.total_commission_amount == Decimal("129.00")


class TestLegacyCpf:

    def test_below_threshold(self, legacy):
        result = legacy.calculate(Decimal("100"), _cpf(orders=450))

        assert result.has_cpf_extra_fee is False
        assert result.cpf_extra_fee == Decimal("0.00")
        assert result.base_cap == Decimal("104")
        assert result.net_amount == Decimal("82.00")
        assert result.scope_label == "CPF (artigo 18484)"

    def test_above_threshold_adds_fee_and_raises_cap(self, legacy):
        result = legacy.calculate(Decimal("100"), _cpf(orders=451))

        assert result.has_cpf_extra_fee is True
        assert result.cpf_extra_fee == Decimal("3.00")
        assert result.base_cap == Decimal("107")
        assert result.net_amount == Decimal("79.00")

    def test_low_price_regression(self, legacy):
        result = legacy.calculate(Decimal("10"), _cpf(orders=451))

        assert result.low_price_regression_applied is True
        assert result.item_fixed_fee == Decimal("6.50")
        assert result.cpf_extra_fee == Decimal("0.00")
        assert result.net_amount == Decimal("2.10")

    def test_no_regression_without_extra_fee(self, legacy):
        result = legacy.calculate(Decimal("10"), _cpf())

        assert result.low_price_regression_applied is False
        assert result.item_fixed_fee == Decimal("4.00")

    def test_cap_with_extra_fee(self, legacy_free_shipping):
        result = legacy_free_shipping.calculate(Decimal("1000"), _cpf(orders=500, campaign=True))

        assert result.base_commission == Decimal("107.00")
        assert result.campaign_amount == Decimal("25.00")
        assert result.total_commission_amount == Decimal("132.00")
        assert result.net_amount == Decimal("868.00")


class TestLegacyCalculator:

    def test_policy(self, legacy):
        assert legacy.policy == RulePolicy.LEGACY

    def test_default_rules(self, legacy):
        assert legacy.rules is LEGACY_RULES
        assert LEGACY_RULES.percentage_rate == Decimal("0.14")
        assert LEGACY_RULES.base_cap == Decimal("104")

    def test_payment_method_is_ignored(self, legacy):
        card = legacy.calculate(Decimal("100"), _cnpj())
        pix = legacy.calculate(Decimal("100"), _cnpj().model_copy(update={"payment_method": "pix"}))
        assert card.net_amount == pix.net_amount
