"""
Commission API endpoints.

Provides:
- POST /api/v1/commission/from-price: breakdown for an item price
- POST /api/v1/commission/from-net: item price that reaches a target net
- GET  /api/v1/commission/rules: active rule set and field visibility
- POST /api/v1/commission/compare: current vs legacy schedule for one sale

The fee schedule and rule overrides come from application settings.
"""

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from sellerfees.calculators.factory import compare_policies
from sellerfees.config import Settings, get_settings
from sellerfees.core.models import (
    CommissionRequest,
    CommissionResult,
    CommissionRules,
    InverseCommissionRequest,
    InverseCommissionResult,
    LegacyCommissionResult,
    PolicyComparison,
    RulePolicy,
    SellerType,
)
from sellerfees.services.commission_service import CommissionService
from sellerfees.services.rule_visibility import RuleVisibility, get_rule_visibility

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/commission", tags=["Commission"])


# ─── Response Models ──────────────────────────────────────────


class RulesResponse(BaseModel):
    """Active rule set, with the overridable fields relevant to a seller type."""

    policy: RulePolicy
    rules: CommissionRules
    visibility: RuleVisibility | None = None


# ─── Dependencies ─────────────────────────────────────────────


def get_commission_service(settings: Settings = Depends(get_settings)) -> CommissionService:
    return CommissionService(overrides=settings.rule_overrides(), policy=settings.rule_policy)


# ─── Endpoints ────────────────────────────────────────────────


@router.post(
    "/from-price",
    summary="Commission breakdown for an item price",
    response_model=CommissionResult | LegacyCommissionResult,
)
def commission_from_price(
    request: CommissionRequest,
    service: CommissionService = Depends(get_commission_service),
):
    return service.calculate_from_item_price(request)


@router.post(
    "/from-net",
    summary="Item price that reaches a target net amount",
    response_model=InverseCommissionResult,
)
def commission_from_net(
    request: InverseCommissionRequest,
    service: CommissionService = Depends(get_commission_service),
):
    result = service.calculate_from_target_net(request)
    logger.info(
        f"Price for net {result.requested_net_amount}: "
        f"{result.suggested_item_price} ({result.status})"
    )
    return result


@router.get(
    "/rules",
    summary="Active commission rules",
    response_model=RulesResponse,
)
def commission_rules(
    seller_type: SellerType | None = Query(default=None, description="Include field visibility for this seller type"),
    service: CommissionService = Depends(get_commission_service),
):
    return RulesResponse(
        policy=service.policy,
        rules=service.get_rules(),
        visibility=get_rule_visibility(seller_type) if seller_type else None,
    )


@router.post(
    "/compare",
    summary="Compare the current and legacy fee schedules",
    response_model=PolicyComparison,
)
def commission_compare(
    request: CommissionRequest,
    include_free_shipping: bool = Query(default=False),
    settings: Settings = Depends(get_settings),
):
    service = CommissionService(overrides=settings.rule_overrides())
    return compare_policies(
        request.item_price,
        request,
        rules=service.get_rules(),
        include_free_shipping=include_free_shipping,
    )
