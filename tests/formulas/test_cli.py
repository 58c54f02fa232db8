"""Tests for the fincalc command-line front end."""

import json

import pytest

from fincalc_formulas.cli import EXIT_ARITHMETIC, EXIT_INVALID, EXIT_OK, main
from fincalc_kernel.domain.calculation_context import (
    CalculationContext,
    get_default_context,
)

FVA_ARGS = [
    "future_value_of_annuity",
    "--amount", "1000",
    "--currency", "USD",
    "--rate", "0.05",
    "--periods", "10",
]


class TestCalculate:

    def test_rounded_output(self, capsys):
        assert main(FVA_ARGS) == EXIT_OK
        assert capsys.readouterr().out.strip() == "12577.89 USD"

    def test_no_round_output(self, capsys):
        assert main([*FVA_ARGS, "--no-round"]) == EXIT_OK
        assert capsys.readouterr().out.strip().startswith("12577.892535")

    def test_list(self, capsys):
        assert main(["--list"]) == EXIT_OK
        names = capsys.readouterr().out.split()
        assert "future_value_of_annuity" in names
        assert "annuity_payment" in names

    def test_config_file_installs_default(self, tmp_path, capsys):
        policy = tmp_path / "policy.yaml"
        policy.write_text("calculation_context:\n  precision: 6\n  rounding: half_even\n")
        assert main([*FVA_ARGS, "--no-round", "--config", str(policy)]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "12577.9 USD"
        assert get_default_context() == CalculationContext(precision=6)

    def test_verbose_emits_json_trace(self, capsys):
        assert main([*FVA_ARGS, "--verbose"]) == EXIT_OK
        err_lines = [line for line in capsys.readouterr().err.splitlines() if line]
        traces = [json.loads(line) for line in err_lines]
        assert any(t["message"] == "FINANCE_FORMULA_TRACE" for t in traces)

    def test_verbose_records_share_correlation_id(self, capsys):
        assert main([*FVA_ARGS, "--verbose"]) == EXIT_OK
        err_lines = [line for line in capsys.readouterr().err.splitlines() if line]
        records = [json.loads(line) for line in err_lines]
        correlation_ids = {r.get("correlation_id") for r in records}
        assert len(correlation_ids) == 1
        assert None not in correlation_ids

        (trace,) = [r for r in records if r["message"] == "FINANCE_FORMULA_TRACE"]
        assert len(trace["trace_id"]) == 32

    def test_tiny_rate_reaches_zero_rate_limit(self, capsys):
        args = [*FVA_ARGS[:6], "1E-17", *FVA_ARGS[7:]]
        assert main(args) == EXIT_OK
        assert capsys.readouterr().out.strip() == "10000.00 USD"


class TestErrors:

    def test_unknown_formula(self, capsys):
        args = ["net_present_value", *FVA_ARGS[1:]]
        assert main(args) == EXIT_INVALID
        assert "net_present_value" in capsys.readouterr().err

    def test_invalid_periods(self, capsys):
        args = [*FVA_ARGS[:-1], "0"]
        assert main(args) == EXIT_INVALID
        assert capsys.readouterr().err.startswith("error:")

    def test_invalid_rate_domain(self, capsys):
        args = [*FVA_ARGS[:6], "-1", *FVA_ARGS[7:]]
        assert main(args) == EXIT_INVALID
        assert "rate" in capsys.readouterr().err

    def test_invalid_currency(self, capsys):
        args = [*FVA_ARGS[:4], "ABC", *FVA_ARGS[5:]]
        assert main(args) == EXIT_INVALID

    def test_missing_config_file(self, tmp_path):
        assert main([*FVA_ARGS, "--config", str(tmp_path / "absent.yaml")]) == EXIT_INVALID

    def test_malformed_config_file(self, tmp_path):
        policy = tmp_path / "broken.yaml"
        policy.write_text("calculation_context: [unclosed\n")
        assert main([*FVA_ARGS, "--config", str(policy)]) == EXIT_INVALID

    def test_out_of_range_precision_in_config(self, tmp_path, capsys):
        policy = tmp_path / "huge.yaml"
        policy.write_text("calculation_context:\n  precision: 100000000000000000000\n")
        assert main([*FVA_ARGS, "--config", str(policy)]) == EXIT_INVALID
        assert "precision" in capsys.readouterr().err

    def test_overflow(self, tmp_path, capsys):
        policy = tmp_path / "tight.yaml"
        policy.write_text("calculation_context:\n  emax: 20\n")
        args = [
            "future_value", "--amount", "1", "--currency", "USD",
            "--rate", "10", "--periods", "50", "--config", str(policy),
        ]
        assert main(args) == EXIT_ARITHMETIC
        assert "Overflow" in capsys.readouterr().err

    def test_missing_arguments_exit_via_parser(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["future_value_of_annuity", "--amount", "1000"])
        assert exc_info.value.code == 2
