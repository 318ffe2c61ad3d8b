"""Tests for pricing from product cost and target profit."""

from decimal import Decimal

from sellerfees.core.models import PaymentMethod, SolverStatus
from sellerfees.services.product_value_service import (
    CSV_FIELDS,
    ProductValueInput,
    ProductValueItem,
    calculate_product_value_from_cost_and_target_profit,
    product_value_to_csv,
)


def _run(context, *items):
    return calculate_product_value_from_cost_and_target_profit(
        ProductValueInput(context=context, items=list(items))
    )


class TestProductValue:

    def test_cost_plus_profit(self, cnpj_planning):
        [result] = _run(cnpj_planning, ProductValueItem(variation_name="A", product_cost=300, target_profit=104))

        assert result.status == SolverStatus.OK
        assert result.target_net_amount == Decimal("404.00")
        assert result.required_full_price == Decimal("500.00")
        assert result.net_amount == Decimal("404.00")
        assert result.net_diff_to_target == Decimal("0.00")
        assert result.profit_after_cost == Decimal("104.00")
        assert result.profit_diff_to_target == Decimal("0.00")
        assert result.pix_subsidy_amount == Decimal("0.00")

    def test_pix_reports_subsidy(self, cnpj_planning):
        context = cnpj_planning.model_copy(update={"payment_method": PaymentMethod.PIX})
        [result] = _run(context, ProductValueItem(variation_name="A", product_cost=300, target_profit=104))

        assert result.required_full_price == Decimal("500.00")
        assert result.pix_subsidy_amount == Decimal("40.00")

    def test_product_coupon_is_listing_discount(self, cnpj_planning):
        [result] = _run(
            cnpj_planning,
            ProductValueItem(variation_name="A", product_cost=300, target_profit=104, product_coupon_percent=50),
        )

        assert result.product_coupon_percent == Decimal("0.5")
        assert result.discounted_price == Decimal("500.00")
        assert result.net_amount >= result.target_net_amount

    def test_invalid_amounts_count_as_zero(self, cnpj_planning):
        [result] = _run(
            cnpj_planning,
            ProductValueItem(variation_name="A", product_cost=-5, target_profit=float("nan")),
        )

        assert result.product_cost == Decimal("0.00")
        assert result.target_profit == Decimal("0.00")
        assert result.status == SolverStatus.TARGET_TOO_LOW

    def test_missing_amounts(self, cnpj_planning):
        [result] = _run(cnpj_planning, ProductValueItem(variation_name="A"))
        assert result.target_net_amount == Decimal("0.00")


class TestCsv:

    def test_header_and_status(self, cnpj_planning):
        results = _run(cnpj_planning, ProductValueItem(variation_name="A", product_cost=300, target_profit=104))
        header, row = product_value_to_csv(results).split("\n")

        assert header == ",".join(CSV_FIELDS)
        assert row.startswith('"A","300.00","104.00","404.00"')
        assert row.endswith('"ok"')
