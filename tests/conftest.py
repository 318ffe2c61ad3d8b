"""
Shared test fixtures for SellerFees test suite.
"""

from pathlib import Path

import pytest

from sellerfees.calculators.commission import CommissionCalculator
from sellerfees.core.models import (
    CommissionRules,
    PaymentMethod,
    PlanningContext,
    SaleContext,
    SellerType,
    StoreCoupon,
)
from sellerfees.core.rules import DEFAULT_RULES_2026
from sellerfees.services.commission_service import CommissionService

REFERENCES_DIR = Path(__file__).resolve().parent.parent / "references" / "shopee"


@pytest.fixture
def references_dir() -> Path:
    return REFERENCES_DIR


@pytest.fixture
def rules() -> CommissionRules:
    return DEFAULT_RULES_2026


@pytest.fixture
def calculator(rules) -> CommissionCalculator:
    return CommissionCalculator(rules)


@pytest.fixture
def service() -> CommissionService:
    return CommissionService()


@pytest.fixture
def cnpj_card() -> SaleContext:
    """A registered business selling by card or boleto."""
    return SaleContext(seller_type=SellerType.CNPJ)


@pytest.fixture
def cnpj_pix() -> SaleContext:
    return SaleContext(seller_type=SellerType.CNPJ, payment_method=PaymentMethod.PIX)


@pytest.fixture
def cpf_high_volume() -> SaleContext:
    """An individual seller above the 450-order extra fee threshold."""
    return SaleContext(seller_type=SellerType.CPF, orders_last_90_days=500)


@pytest.fixture
def cnpj_planning() -> PlanningContext:
    return PlanningContext(seller_type=SellerType.CNPJ)


@pytest.fixture
def cpf_planning_with_coupon() -> PlanningContext:
    """CPF seller running a 3% store coupon from 30, capped at 3."""
    return PlanningContext(
        seller_type=SellerType.CPF,
        store_coupon=StoreCoupon(min_price=30, rate=0.03, max_discount=3),
    )
