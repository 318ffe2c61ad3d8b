"""
Batch pricing API endpoints.

Provides:
- POST /api/v1/pricing/discount-from-target-net
- POST /api/v1/pricing/full-price-from-target-net
- POST /api/v1/pricing/net-from-full-price
- POST /api/v1/pricing/product-value-from-cost
- POST /api/v1/pricing/variation-plan

Each accepts ``{context, items, rules_config}`` and returns one result per
item, as JSON or, with ``?format=csv``, as a CSV document. Requests without
``rules_config`` use the overrides from application settings.

Solving is CPU-bound, so the endpoints are plain functions and run in
FastAPI's threadpool instead of on the event loop.
"""

import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from sellerfees.config import Settings, get_settings
from sellerfees.services.discount_from_target_net_service import (
    DiscountFromTargetNetInput,
    DiscountFromTargetNetResult,
    calculate_discount_from_target_net,
    discount_from_target_net_to_csv,
)
from sellerfees.services.full_price_from_target_net_service import (
    FullPriceFromTargetNetInput,
    FullPriceFromTargetNetResult,
    calculate_full_price_from_target_net,
    full_price_from_target_net_to_csv,
)
from sellerfees.services.net_from_full_price_service import (
    NetFromFullPriceInput,
    NetFromFullPriceResult,
    calculate_net_from_full_price,
    net_from_full_price_to_csv,
)
from sellerfees.services.planning import PlanningRequest
from sellerfees.services.product_value_service import (
    ProductValueInput,
    ProductValueResult,
    calculate_product_value_from_cost_and_target_profit,
    product_value_to_csv,
)
from sellerfees.services.variation_pricing_service import (
    VariationPricingPlanInput,
    VariationPricingResult,
    calculate_variation_pricing_plan,
    variation_pricing_to_csv,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])

OutputFormat = Query(default="json", pattern="^(json|csv)$", description="Response format")


def _run_batch(
    request: PlanningRequest,
    settings: Settings,
    solve: Callable[[PlanningRequest], list[BaseModel]],
    to_csv: Callable[[list], str],
    output_format: str,
):
    if request.rules_config is None:
        request = request.model_copy(update={"rules_config": settings.rule_overrides()})

    results = solve(request)
    logger.info(f"{solve.__name__}: {len(results)} item(s) priced")

    if output_format == "csv":
        return Response(content=to_csv(results), media_type="text/csv")
    return results


@router.post(
    "/discount-from-target-net",
    summary="Largest discount that still reaches the target net",
    response_model=list[DiscountFromTargetNetResult],
)
def discount_from_target_net(
    request: DiscountFromTargetNetInput,
    format: str = OutputFormat,
    settings: Settings = Depends(get_settings),
):
    return _run_batch(
        request, settings, calculate_discount_from_target_net, discount_from_target_net_to_csv, format
    )


@router.post(
    "/full-price-from-target-net",
    summary="Smallest full price that reaches the target net",
    response_model=list[FullPriceFromTargetNetResult],
)
def full_price_from_target_net(
    request: FullPriceFromTargetNetInput,
    format: str = OutputFormat,
    settings: Settings = Depends(get_settings),
):
    return _run_batch(
        request, settings, calculate_full_price_from_target_net, full_price_from_target_net_to_csv, format
    )


@router.post(
    "/net-from-full-price",
    summary="Net amount for a full price, discount and store coupon",
    response_model=list[NetFromFullPriceResult],
)
def net_from_full_price(
    request: NetFromFullPriceInput,
    format: str = OutputFormat,
    settings: Settings = Depends(get_settings),
):
    return _run_batch(request, settings, calculate_net_from_full_price, net_from_full_price_to_csv, format)


@router.post(
    "/product-value-from-cost",
    summary="Full price from product cost and target profit",
    response_model=list[ProductValueResult],
)
def product_value_from_cost(
    request: ProductValueInput,
    format: str = OutputFormat,
    settings: Settings = Depends(get_settings),
):
    return _run_batch(
        request, settings, calculate_product_value_from_cost_and_target_profit, product_value_to_csv, format
    )


@router.post(
    "/variation-plan",
    summary="Variation pricing plan with charm-priced alternatives",
    response_model=list[VariationPricingResult],
)
def variation_plan(
    request: VariationPricingPlanInput,
    format: str = OutputFormat,
    settings: Settings = Depends(get_settings),
):
    return _run_batch(request, settings, calculate_variation_pricing_plan, variation_pricing_to_csv, format)
