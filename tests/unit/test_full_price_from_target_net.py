"""Tests for the full-price-from-target-net batch solver."""

from decimal import Decimal

import pytest

from sellerfees.core.models import PaymentMethod, SolverStatus
from sellerfees.services.full_price_from_target_net_service import (
    INITIAL_HIGH_PRICE,
    MAX_DOUBLINGS,
    FullPriceFromTargetNetInput,
    FullPriceFromTargetNetItem,
    calculate_full_price_from_target_net,
    full_price_from_target_net_to_csv,
)


def _solve(context, *items):
    return calculate_full_price_from_target_net(FullPriceFromTargetNetInput(context=context, items=list(items)))


class TestFullPriceFromTargetNet:

    def test_no_discount(self, cnpj_planning):
        [result] = _solve(cnpj_planning, FullPriceFromTargetNetItem(variation_name="A", target_net=404))

        assert result.status == SolverStatus.OK
        assert result.required_full_price == Decimal("500.00")
        assert result.net_amount == Decimal("404.00")

    def test_half_discount_whole_percent(self, cnpj_planning):
        [result] = _solve(
            cnpj_planning, FullPriceFromTargetNetItem(variation_name="A", discount_percent=50, target_net=404)
        )

        assert result.discount_percent == Decimal("0.5")
        assert result.required_full_price == Decimal("999.99")
        assert result.discounted_price == Decimal("500.00")
        assert result.net_amount == Decimal("404.00")

    def test_pix_same_net(self, cnpj_planning):
        context = cnpj_planning.model_copy(update={"payment_method": PaymentMethod.PIX})
        [result] = _solve(context, FullPriceFromTargetNetItem(variation_name="A", target_net=404))
        assert result.required_full_price == Decimal("500.00")

    def test_with_store_coupon(self, cpf_planning_with_coupon):
        [result] = _solve(
            cpf_planning_with_coupon, FullPriceFromTargetNetItem(variation_name="A", target_net=100)
        )

        assert result.status == SolverStatus.OK
        assert result.coupon_applied is True
        assert result.coupon_discount_amount == Decimal("3.00")
        assert result.net_amount >= Decimal("100")

    def test_target_too_low(self, cnpj_planning):
        [result] = _solve(cnpj_planning, FullPriceFromTargetNetItem(variation_name="A", target_net=0))

        assert result.status == SolverStatus.TARGET_TOO_LOW
        assert result.required_full_price == Decimal("0")

    def test_target_too_high_with_full_discount(self, cnpj_planning):
        [result] = _solve(
            cnpj_planning, FullPriceFromTargetNetItem(variation_name="A", discount_percent=100, target_net=1)
        )

        assert result.status == SolverStatus.TARGET_TOO_HIGH
        assert result.required_full_price == INITIAL_HIGH_PRICE * 2**MAX_DOUBLINGS
        assert result.final_buyer_price == Decimal("0.00")

    @pytest.mark.parametrize("target", [15, 59.99, 150, 1234.56, 20000])
    def test_reported_price_meets_target(self, cnpj_planning, target):
        [result] = _solve(
            cnpj_planning, FullPriceFromTargetNetItem(variation_name="A", discount_percent=0.15, target_net=target)
        )

        assert result.status == SolverStatus.OK
        assert result.net_amount >= result.target_net


class TestCsv:

    def test_csv_rows(self, cnpj_planning):
        results = _solve(
            cnpj_planning,
            FullPriceFromTargetNetItem(variation_name="A", target_net=404),
            FullPriceFromTargetNetItem(variation_name="B", target_net=0),
        )
        lines = full_price_from_target_net_to_csv(results).split("\n")

        assert len(lines) == 3
        assert lines[0].startswith("variation_name,discount_percent,target_net,required_full_price")
        assert lines[1].startswith('"A","0.0","404.00","500.00"')
        assert lines[2].endswith('"target-too-low"')
