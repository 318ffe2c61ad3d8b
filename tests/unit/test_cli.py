"""Tests for the sellerfees command-line interface."""

import json

import pytest

from sellerfees.cli import build_parser, main, overrides_from_args
from sellerfees.config import get_settings
from sellerfees.core.models import RuleOverrides


@pytest.fixture
def plan_file(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(
        json.dumps(
            {
                "context": {"seller_type": "cnpj"},
                "items": [
                    {"variation_name": "A", "target_net": 404},
                    {"variation_name": "B", "target_net": 0},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def env(monkeypatch):
    """Environment variables read fresh by the cached settings."""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def _write_json(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestParser:

    def test_seller_type_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["from-price", "100"])

    def test_comma_decimal_accepted(self):
        args = build_parser().parse_args(["from-price", "129,90", "-s", "cnpj"])
        assert str(args.price) == "129.90"

    def test_no_overrides(self):
        args = build_parser().parse_args(["from-price", "100", "-s", "cnpj"])
        assert overrides_from_args(args) is None

    def test_overrides(self):
        args = build_parser().parse_args(
            ["from-price", "100", "-s", "cpf", "--cpf-extra-fee", "5", "--cpf-threshold", "10"]
        )
        assert overrides_from_args(args) == RuleOverrides(cpf_extra_fee="5", cpf_extra_orders_threshold_90d=10)


class TestSingleSale:

    def test_from_price(self, capsys):
        assert main(["from-price", "500", "-s", "cnpj"]) == 0

        out = capsys.readouterr().out
        assert "Net amount:" in out
        assert "R$ 404,00" in out

    def test_from_price_legacy(self, capsys):
        assert main(["from-price", "100", "-s", "cnpj", "--policy", "2026-02-28"]) == 0

        out = capsys.readouterr().out
        assert "Scope:" in out
        assert "R$ 82,00" in out

    def test_campaign_rate_flag(self, capsys):
        main(["from-price", "100", "-s", "cnpj", "--campaign", "--campaign-rate", "0"])
        assert "R$ 66,00" in capsys.readouterr().out

    def test_from_net(self, capsys):
        assert main(["from-net", "404", "-s", "cnpj"]) == 0

        out = capsys.readouterr().out
        assert "R$ 500,00" in out
        assert "ok" in out

    def test_compare(self, capsys):
        assert main(["compare", "100", "-s", "cnpj"]) == 0
        assert "-R$ 16,00" in capsys.readouterr().out


class TestBatch:

    def test_json_to_stdout(self, capsys, plan_file):
        assert main(["full-price-from-net", "--input", str(plan_file)]) == 0

        results = json.loads(capsys.readouterr().out)
        assert [r["status"] for r in results] == ["ok", "target-too-low"]
        assert results[0]["required_full_price"] == "500.00"

    def test_csv_file(self, tmp_path, plan_file):
        output = tmp_path / "plan.csv"
        assert main(["full-price-from-net", "-i", str(plan_file), "--csv", str(output)]) == 0

        lines = output.read_text(encoding="utf-8").split("\n")
        assert len(lines) == 3
        assert lines[0].startswith("variation_name,discount_percent")

    def test_missing_file(self, capsys, tmp_path):
        assert main(["variation-plan", "-i", str(tmp_path / "missing.json")]) == 1
        assert "Error: Cannot read batch input" in capsys.readouterr().err

    def test_invalid_shape(self, capsys, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"items": []}), encoding="utf-8")

        assert main(["net-from-full-price", "-i", str(path)]) == 1
        assert "Invalid batch input" in capsys.readouterr().err

    def test_rule_flags_fill_missing_rules_config(self, capsys, tmp_path):
        path = tmp_path / "net.json"
        path.write_text(
            json.dumps(
                {
                    "context": {"seller_type": "cnpj", "include_campaign_extra": True},
                    "items": [{"variation_name": "A", "full_price": 100}],
                }
            ),
            encoding="utf-8",
        )

        main(["net-from-full-price", "-i", str(path), "--campaign-rate", "0"])
        assert json.loads(capsys.readouterr().out)[0]["net_amount"] == "66.00"


class TestServe:

    def test_runs_uvicorn_with_settings_defaults(self, monkeypatch):
        calls = []
        monkeypatch.setattr("sellerfees.cli.uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert main(["serve", "--port", "9000"]) == 0

        [(app, kwargs)] = calls
        assert app == "sellerfees.main:app"
        assert kwargs["port"] == 9000
        assert kwargs["host"] == "0.0.0.0"


class TestEnvironmentOverrides:

    def test_batch_applies_environment_override(self, env, capsys, tmp_path):
        env.setenv("CAMPAIGN_EXTRA_RATE", "0.10")
        path = _write_json(
            tmp_path / "net.json",
            {
                "context": {"seller_type": "cnpj", "include_campaign_extra": True},
                "items": [{"variation_name": "A", "full_price": 100}],
            },
        )

        assert main(["net-from-full-price", "-i", str(path)]) == 0

        [result] = json.loads(capsys.readouterr().out)
        assert result["commission_amount"] == "44.00"
        assert result["net_amount"] == "56.00"

    def test_single_sale_and_batch_agree(self, env, capsys, tmp_path):
        env.setenv("CAMPAIGN_EXTRA_RATE", "0.10")
        path = _write_json(
            tmp_path / "net.json",
            {
                "context": {"seller_type": "cnpj", "include_campaign_extra": True},
                "items": [{"variation_name": "A", "full_price": 100}],
            },
        )

        main(["from-price", "100", "-s", "cnpj", "--campaign"])
        assert "R$ 56,00" in capsys.readouterr().out

        main(["net-from-full-price", "-i", str(path)])
        assert json.loads(capsys.readouterr().out)[0]["net_amount"] == "56.00"

    def test_flags_combine_with_environment(self, env, capsys):
        env.setenv("CAMPAIGN_EXTRA_RATE", "0.10")

        main(["from-price", "100", "-s", "cpf", "-o", "500", "--campaign", "--cpf-extra-fee", "5"])

        # 14 + 20 + 5 extra fee, plus 10 campaign
        assert "R$ 51,00" in capsys.readouterr().out

    def test_flag_wins_over_environment(self, env, capsys):
        env.setenv("CAMPAIGN_EXTRA_RATE", "0.10")

        main(["from-price", "100", "-s", "cnpj", "--campaign", "--campaign-rate", "0"])
        assert "R$ 66,00" in capsys.readouterr().out

    def test_file_rules_config_wins(self, env, capsys, tmp_path):
        env.setenv("CAMPAIGN_EXTRA_RATE", "0.10")
        path = _write_json(
            tmp_path / "net.json",
            {
                "context": {"seller_type": "cnpj", "include_campaign_extra": True},
                "items": [{"variation_name": "A", "full_price": 100}],
                "rules_config": {"campaign_extra_rate": 0},
            },
        )

        main(["net-from-full-price", "-i", str(path)])
        assert json.loads(capsys.readouterr().out)[0]["net_amount"] == "66.00"
