"""
Command-line interface for SellerFees.

Usage:
    sellerfees from-price 129.90 --seller-type cnpj --payment pix
    sellerfees from-net 100 --seller-type cpf --orders 500 --campaign
    sellerfees compare 250 --seller-type cpf --free-shipping
    sellerfees variation-plan --input plan.json --csv plan.csv
    sellerfees serve --port 8000

Batch commands read a JSON file shaped ``{context, items, rules_config}``.
Reports go to stdout, logs to stderr.
"""

import argparse
import json
import logging
import sys
from collections.abc import Callable
from decimal import Decimal
from pathlib import Path
from typing import NamedTuple

import uvicorn
from pydantic import BaseModel, TypeAdapter, ValidationError

from sellerfees import __version__
from sellerfees.calculators.factory import compare_policies
from sellerfees.config import get_settings
from sellerfees.core.exceptions import PlanInputError, SellerFeesError
from sellerfees.core.logging_config import setup_logging
from sellerfees.core.models import (
    BaseCommissionResult,
    CommissionRequest,
    CommissionResult,
    InverseCommissionRequest,
    LegacyCommissionResult,
    PaymentMethod,
    RuleOverrides,
    RulePolicy,
    SellerType,
)
from sellerfees.core.money import format_currency, format_percent, parse_decimal
from sellerfees.core.rules import combine_overrides
from sellerfees.services import (
    discount_from_target_net_service,
    full_price_from_target_net_service,
    net_from_full_price_service,
    product_value_service,
    variation_pricing_service,
)
from sellerfees.services.commission_service import CommissionService

logger = logging.getLogger(__name__)


class BatchCommand(NamedTuple):
    input_model: type[BaseModel]
    result_model: type[BaseModel]
    solve: Callable
    to_csv: Callable[[list], str]
    help: str


BATCH_COMMANDS: dict[str, BatchCommand] = {
    "discount-from-net": BatchCommand(
        discount_from_target_net_service.DiscountFromTargetNetInput,
        discount_from_target_net_service.DiscountFromTargetNetResult,
        discount_from_target_net_service.calculate_discount_from_target_net,
        discount_from_target_net_service.discount_from_target_net_to_csv,
        "Largest discount per variation that still reaches the target net",
    ),
    "full-price-from-net": BatchCommand(
        full_price_from_target_net_service.FullPriceFromTargetNetInput,
        full_price_from_target_net_service.FullPriceFromTargetNetResult,
        full_price_from_target_net_service.calculate_full_price_from_target_net,
        full_price_from_target_net_service.full_price_from_target_net_to_csv,
        "Smallest full price per variation that reaches the target net",
    ),
    "net-from-full-price": BatchCommand(
        net_from_full_price_service.NetFromFullPriceInput,
        net_from_full_price_service.NetFromFullPriceResult,
        net_from_full_price_service.calculate_net_from_full_price,
        net_from_full_price_service.net_from_full_price_to_csv,
        "Net amount per variation for a full price and discount",
    ),
    "product-value": BatchCommand(
        product_value_service.ProductValueInput,
        product_value_service.ProductValueResult,
        product_value_service.calculate_product_value_from_cost_and_target_profit,
        product_value_service.product_value_to_csv,
        "Full price per variation from product cost and target profit",
    ),
    "variation-plan": BatchCommand(
        variation_pricing_service.VariationPricingPlanInput,
        variation_pricing_service.VariationPricingResult,
        variation_pricing_service.calculate_variation_pricing_plan,
        variation_pricing_service.variation_pricing_to_csv,
        "Variation pricing plan with charm-priced discount alternatives",
    ),
}


# ─── Argument parsing ─────────────────────────────────────────


def _to_decimal(value: str) -> Decimal:
    try:
        return parse_decimal(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from exc


def _rule_flags() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_argument_group("rule overrides")
    group.add_argument("--campaign-rate", type=_to_decimal, help="Campaign extra rate (e.g. 0.025)")
    group.add_argument("--cpf-extra-fee", type=_to_decimal, help="CPF extra fee per item")
    group.add_argument("--cpf-threshold", type=int, help="CPF extra fee order threshold (90 days)")
    group.add_argument("--cnpj-low", type=_to_decimal, help="CNPJ low-price threshold")
    group.add_argument("--cpf-low", type=_to_decimal, help="CPF low-price threshold")
    return parent


def _sale_flags() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--seller-type", "-s", choices=[t.value for t in SellerType], required=True)
    parent.add_argument(
        "--payment", "-p",
        choices=[m.value for m in PaymentMethod],
        default=PaymentMethod.CARD_OR_BOLETO.value,
    )
    parent.add_argument("--orders", "-o", type=int, default=0, help="Orders in the last 90 days")
    parent.add_argument("--campaign", action="store_true", help="Include the campaign extra")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sellerfees",
        description="Marketplace commission calculator and price solver.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: from settings)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    rules = _rule_flags()
    sale = _sale_flags()

    from_price = subparsers.add_parser(
        "from-price", parents=[sale, rules], help="Commission breakdown for an item price"
    )
    from_price.add_argument("price", type=_to_decimal)
    from_price.add_argument(
        "--policy", choices=[p.value for p in RulePolicy], default=None, help="Fee schedule"
    )

    from_net = subparsers.add_parser(
        "from-net", parents=[sale, rules], help="Item price that reaches a target net"
    )
    from_net.add_argument("target", type=_to_decimal)
    from_net.add_argument(
        "--policy", choices=[p.value for p in RulePolicy], default=None, help="Fee schedule"
    )

    compare = subparsers.add_parser(
        "compare", parents=[sale, rules], help="Current vs legacy schedule for one sale"
    )
    compare.add_argument("price", type=_to_decimal)
    compare.add_argument("--free-shipping", action="store_true", help="Legacy free-shipping fee")

    for name, command in BATCH_COMMANDS.items():
        batch = subparsers.add_parser(name, parents=[rules], help=command.help)
        batch.add_argument("--input", "-i", type=Path, required=True, help="JSON input file")
        batch.add_argument("--csv", type=Path, default=None, help="Write results as CSV to this path")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: from settings)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: from settings)")

    return parser


def overrides_from_args(args: argparse.Namespace) -> RuleOverrides | None:
    values = {
        "campaign_extra_rate": args.campaign_rate,
        "cpf_extra_fee": args.cpf_extra_fee,
        "cpf_extra_orders_threshold_90d": args.cpf_threshold,
        "cnpj_low_price_threshold": args.cnpj_low,
        "cpf_low_price_threshold": args.cpf_low,
    }
    given = {key: value for key, value in values.items() if value is not None}
    return RuleOverrides(**given) if given else None


def resolve_overrides(args: argparse.Namespace) -> RuleOverrides | None:
    """Overrides from the environment with the command-line flags on top."""
    return combine_overrides(get_settings().rule_overrides(), overrides_from_args(args))


# ─── Reports ──────────────────────────────────────────────────


def _line(label: str, value: str) -> str:
    return f"{label:<24}{value}"


def format_breakdown(result: BaseCommissionResult) -> str:
    """Human-readable breakdown of a forward calculation."""
    lines = [_line("Item price:", format_currency(result.item_price))]

    if isinstance(result, CommissionResult):
        bracket = result.bracket
        lines += [
            _line("Percentage:", f"{format_currency(result.percentage_amount)} "
                                  f"({format_percent(bracket.percentage_rate)})"),
            _line("Fixed fee:", format_currency(result.fixed_fee_amount)),
            _line("CPF extra fee:", format_currency(result.cpf_extra_fee_amount)),
            _line("Base commission:", format_currency(result.base_commission_amount)),
            _line("Pix subsidy:", format_currency(result.pix_subsidy_amount)),
            _line("Invoice price:", format_currency(result.item_invoice_price)),
            _line("Campaign extra:", format_currency(result.campaign_extra_amount)),
        ]
    elif isinstance(result, LegacyCommissionResult):
        lines += [
            _line("Scope:", result.scope_label),
            _line("Percentage:", format_currency(result.percentage_amount)),
            _line("Transport:", format_currency(result.transport_amount)),
            _line("Fixed fee:", format_currency(result.item_fixed_fee)),
            _line("CPF extra fee:", format_currency(result.cpf_extra_fee)),
            _line("Base commission:", f"{format_currency(result.base_commission)} "
                                       f"(cap {format_currency(result.base_cap)})"),
            _line("Campaign extra:", format_currency(result.campaign_amount)),
        ]

    lines += [
        _line("Total commission:", f"{format_currency(result.total_commission_amount)} "
                                    f"({format_percent(result.effective_commission_rate)})"),
        _line("Net amount:", format_currency(result.net_amount)),
    ]
    return "\n".join(lines)


# ─── Commands ─────────────────────────────────────────────────


def _sale_fields(args: argparse.Namespace) -> dict:
    return {
        "seller_type": args.seller_type,
        "payment_method": args.payment,
        "orders_last_90_days": args.orders,
        "include_campaign_extra": args.campaign,
    }


def _service(args: argparse.Namespace) -> CommissionService:
    settings = get_settings()
    overrides = resolve_overrides(args)
    policy = RulePolicy(args.policy) if getattr(args, "policy", None) else settings.rule_policy
    return CommissionService(overrides=overrides, policy=policy)


def run_from_price(args: argparse.Namespace) -> None:
    service = _service(args)
    result = service.calculate_from_item_price(CommissionRequest(item_price=args.price, **_sale_fields(args)))
    print(format_breakdown(result))


def run_from_net(args: argparse.Namespace) -> None:
    service = _service(args)
    result = service.calculate_from_target_net(
        InverseCommissionRequest(target_net_amount=args.target, **_sale_fields(args))
    )
    print(_line("Target net:", format_currency(result.requested_net_amount)))
    print(_line("Suggested price:", format_currency(result.suggested_item_price)))
    print(_line("Status:", result.status.value))
    print(format_breakdown(result.outcome))


def run_compare(args: argparse.Namespace) -> None:
    request = CommissionRequest(item_price=args.price, **_sale_fields(args))
    comparison = compare_policies(
        request.item_price,
        request,
        rules=_service(args).get_rules(),
        include_free_shipping=args.free_shipping,
    )
    print(_line("Item price:", format_currency(comparison.item_price)))
    print(_line("Current net:", format_currency(comparison.current_net_amount)))
    print(_line("Legacy net:", format_currency(comparison.legacy_net_amount)))
    print(_line("Difference:", format_currency(comparison.net_difference)))


def load_batch_input(path: Path, input_model: type[BaseModel], overrides: RuleOverrides | None) -> BaseModel:
    """
    Read and validate a batch input file.

    Raises:
        PlanInputError: If the file is missing, not JSON, or not shaped like
            ``input_model``.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise PlanInputError(f"Cannot read batch input {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PlanInputError(f"Batch input {path} must be a JSON object")
    if overrides is not None and data.get("rules_config") is None:
        data["rules_config"] = overrides.model_dump(exclude_none=True, mode="json")

    try:
        return input_model.model_validate(data)
    except ValidationError as exc:
        raise PlanInputError(
            f"Invalid batch input {path}",
            details={"errors": exc.errors(include_url=False)},
        ) from exc


def run_batch(args: argparse.Namespace) -> None:
    command = BATCH_COMMANDS[args.command]
    request = load_batch_input(args.input, command.input_model, resolve_overrides(args))
    results = command.solve(request)

    if args.csv is not None:
        args.csv.write_text(command.to_csv(results), encoding="utf-8")
        logger.info(f"Wrote {len(results)} row(s) to {args.csv}")
        return

    adapter = TypeAdapter(list[command.result_model])
    print(adapter.dump_json(results, indent=2).decode())


def run_serve(args: argparse.Namespace) -> None:
    settings = get_settings()
    uvicorn.run(
        "sellerfees.main:app",
        host=args.host or settings.app_host,
        port=args.port or settings.app_port,
        log_config=None,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(
        app_env=settings.app_env,
        log_level=args.log_level or settings.log_level,
        log_format=settings.log_format,
        stream=sys.stderr,
        static_context={"rule_policy": getattr(args, "policy", None) or settings.rule_policy.value},
    )

    handlers = {
        "from-price": run_from_price,
        "from-net": run_from_net,
        "compare": run_compare,
        "serve": run_serve,
    }
    try:
        handlers.get(args.command, run_batch)(args)
    except SellerFeesError as exc:
        logger.error(f"{type(exc).__name__}: {exc.message}")
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
