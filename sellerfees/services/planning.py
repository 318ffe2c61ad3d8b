"""
Shared plumbing of the batch planning calls.

Every batch call takes a shared context, a list of line items and an
optional rule override, and returns one result per item in the same order.
Inside, each solver repeatedly prices a listing: full price, listing
discount, store coupon, then the forward commission calculation.
"""

from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from sellerfees.core.models import CommissionRequest, PlanningContext, RuleOverrides
from sellerfees.services.commission_service import CommissionService
from sellerfees.services.coupon import apply_discount_and_coupon

ItemT = TypeVar("ItemT")


class PlanningRequest(BaseModel, Generic[ItemT]):
    """``{context, items, rules_config}`` envelope of a batch call."""

    context: PlanningContext
    items: list[ItemT] = Field(default_factory=list)
    rules_config: RuleOverrides | None = None


class ListingEvaluation(BaseModel):
    """One priced listing: buyer-facing prices and the seller's net."""

    model_config = ConfigDict(frozen=True)

    discounted_price: Decimal
    coupon_applied: bool
    coupon_discount_amount: Decimal
    final_buyer_price: Decimal
    commission_amount: Decimal
    net_amount: Decimal


class ListingEvaluator:
    """Prices listings for one planning context and one rule set."""

    def __init__(self, service: CommissionService, context: PlanningContext):
        self._service = service
        self._context = context

    @property
    def service(self) -> CommissionService:
        return self._service

    def evaluate(self, full_price: Decimal, discount: Decimal) -> ListingEvaluation:
        coupon = apply_discount_and_coupon(full_price, discount, self._context.store_coupon)
        commission = self._service.calculate_from_item_price(
            self.commission_request(coupon.final_buyer_price)
        )

        return ListingEvaluation(
            discounted_price=coupon.discounted_price,
            coupon_applied=coupon.coupon_applied,
            coupon_discount_amount=coupon.coupon_discount_amount,
            final_buyer_price=coupon.final_buyer_price,
            commission_amount=commission.total_commission_amount,
            net_amount=commission.net_amount,
        )

    def commission_request(self, item_price: Decimal) -> CommissionRequest:
        return CommissionRequest(
            item_price=item_price,
            seller_type=self._context.seller_type,
            payment_method=self._context.payment_method,
            orders_last_90_days=self._context.orders_last_90_days,
            include_campaign_extra=self._context.include_campaign_extra,
        )


def create_evaluator(request: PlanningRequest) -> ListingEvaluator:
    return ListingEvaluator(CommissionService(overrides=request.rules_config), request.context)
