"""
Pydantic domain models for SellerFees.

These models represent the data flowing through the commission engine:
CommissionRules → CommissionInput → CommissionResult, plus the request
and result shapes of the inverse solvers and batch planning calls.

Rule and result models are frozen: a rule set is built once and shared
read-only across every calculation.
"""

from decimal import Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from sellerfees.core.money import parse_decimal

# Decimal fields accept ints, floats, and numeric strings without float artifacts;
# anything else is a validation error.
Amount = Annotated[Decimal, BeforeValidator(parse_decimal)]


class SellerType(StrEnum):
    """Seller registration type."""
    CNPJ = "cnpj"  # registered business
    CPF = "cpf"  # individual


class PaymentMethod(StrEnum):
    """Buyer payment method. Pix carries a marketplace subsidy."""
    CARD_OR_BOLETO = "card_or_boleto"
    PIX = "pix"


class RulePolicy(StrEnum):
    """Fee schedule version, named by the date it takes effect or ends."""
    CURRENT = "2026-03-01"
    LEGACY = "2026-02-28"


class SolverStatus(StrEnum):
    """Outcome of an inverse solve. Callers must branch on it."""
    OK = "ok"
    TARGET_TOO_HIGH = "target-too-high"
    TARGET_TOO_LOW = "target-too-low"
    MAX_DISCOUNT_CAP_REACHED = "max-discount-cap-reached"


# ─── Rule Set ─────────────────────────────────────────────────


class PriceBracket(BaseModel):
    """One contiguous price tier. ``max_price=None`` means unbounded."""

    model_config = ConfigDict(frozen=True)

    min_price: Amount
    max_price: Amount | None = None
    percentage_rate: Amount
    fixed_fee: Amount
    pix_subsidy_rate: Amount = Decimal("0")

    def contains(self, price: Decimal) -> bool:
        return price >= self.min_price and (self.max_price is None or price <= self.max_price)


class InterpolationPoint(BaseModel):
    """A knot of the low-price fixed-fee curve."""

    model_config = ConfigDict(frozen=True)

    price: Amount
    fixed_fee: Amount


class CommissionRules(BaseModel):
    """Complete fee configuration. Build once, then share read-only."""

    model_config = ConfigDict(frozen=True)

    brackets: tuple[PriceBracket, ...]
    campaign_extra_rate: Amount
    cpf_extra_fee: Amount
    cpf_extra_orders_threshold_90d: int
    cnpj_low_price_threshold: Amount
    cpf_low_price_threshold: Amount
    cpf_low_price_with_extra_fee_points: tuple[InterpolationPoint, ...]
    cpf_low_price_without_extra_fee_points: tuple[InterpolationPoint, ...]


class RuleOverrides(BaseModel):
    """Partial override of the scalar rule fields. Brackets are never overridden."""

    model_config = ConfigDict(frozen=True)

    campaign_extra_rate: Amount | None = Field(default=None, ge=0)
    cpf_extra_fee: Amount | None = Field(default=None, ge=0)
    cpf_extra_orders_threshold_90d: int | None = Field(default=None, ge=0)
    cnpj_low_price_threshold: Amount | None = Field(default=None, ge=0)
    cpf_low_price_threshold: Amount | None = Field(default=None, ge=0)


# ─── Forward Calculation ──────────────────────────────────────


class SaleContext(BaseModel):
    """Everything about a sale except its price and the rule set."""

    seller_type: SellerType
    payment_method: PaymentMethod = PaymentMethod.CARD_OR_BOLETO
    orders_last_90_days: int = Field(default=0, ge=0)
    include_campaign_extra: bool = False


class CommissionRequest(SaleContext):
    """Forward service call input."""

    item_price: Amount = Field(..., ge=0)


class InverseCommissionRequest(SaleContext):
    """Inverse service call input."""

    target_net_amount: Amount


class CommissionInput(CommissionRequest):
    """One forward calculation, rule set included."""

    rules: CommissionRules


class InverseCommissionInput(InverseCommissionRequest):
    """One inverse calculation, rule set included."""

    rules: CommissionRules


class BaseCommissionResult(BaseModel):
    """Fields every fee policy reports."""

    model_config = ConfigDict(frozen=True)

    item_price: Decimal
    total_commission_amount: Decimal
    net_amount: Decimal

    @property
    def effective_commission_rate(self) -> Decimal:
        if self.item_price <= 0:
            return Decimal("0")
        return self.total_commission_amount / self.item_price


class CommissionResult(BaseCommissionResult):
    """Full monetary breakdown under the current policy."""

    item_invoice_price: Decimal
    seller_type: SellerType
    payment_method: PaymentMethod
    bracket: PriceBracket
    percentage_amount: Decimal
    fixed_fee_amount: Decimal
    cpf_extra_fee_amount: Decimal
    base_commission_amount: Decimal
    pix_subsidy_rate: Decimal
    pix_subsidy_amount: Decimal
    commission_amount: Decimal
    campaign_extra_rate: Decimal
    campaign_extra_amount: Decimal


class LegacyCommissionResult(BaseCommissionResult):
    """Breakdown under the frozen pre-2026-03-01 schedule."""

    seller_type: SellerType
    percentage_rate: Decimal
    percentage_amount: Decimal
    transport_amount: Decimal
    item_fixed_fee: Decimal
    cpf_extra_fee: Decimal
    has_cpf_extra_fee: bool = False
    low_price_regression_applied: bool = False
    base_commission: Decimal
    base_cap: Decimal
    campaign_amount: Decimal
    scope_label: str


class InverseCommissionResult(BaseModel):
    """Price that reaches a requested net amount, with its breakdown."""

    model_config = ConfigDict(frozen=True)

    requested_net_amount: Decimal
    suggested_item_price: Decimal
    status: SolverStatus = SolverStatus.OK
    outcome: CommissionResult | LegacyCommissionResult


class PolicyComparison(BaseModel):
    """Same sale priced under the current and the legacy schedules."""

    item_price: Decimal
    current_net_amount: Decimal
    legacy_net_amount: Decimal
    net_difference: Decimal
    current_total_commission: Decimal
    legacy_total_commission: Decimal


# ─── Batch Planning ───────────────────────────────────────────


class StoreCoupon(BaseModel):
    """Store-wide coupon. ``rate`` accepts fractions or whole percentages."""

    min_price: float | None = None
    rate: float = 0.0
    max_discount: float | None = None


class PlanningContext(SaleContext):
    """Shared context of a batch planning call."""

    store_coupon: StoreCoupon | None = None


class CouponOutcome(BaseModel):
    """Buyer-facing price after the listing discount and the store coupon."""

    model_config = ConfigDict(frozen=True)

    discounted_price: Decimal
    coupon_applied: bool
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
