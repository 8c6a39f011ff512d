"""Tests for console report formatting."""

import pytest

from bjtfit.analysis import run_analysis
from bjtfit.config import AnalysisConfig, DatasetSpec
from bjtfit.models import FittedLine, Measurement
from bjtfit.reporting import (
    format_line,
    format_measurement,
    format_value_with_uncertainty,
    print_report,
    report_lines,
)

VCE = [0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5]


def test_value_rounded_to_uncertainty():
    assert format_value_with_uncertainty(-40.1234, 0.456, "V") == "-40.1 +/- 0.5 V"
    # leading digit 1 keeps two significant figures
    assert format_value_with_uncertainty(192.345, 1.23) == "192.3 +/- 1.2"
    assert format_value_with_uncertainty(12345.0, 230.0, "Ohm") == "12300 +/- 200 Ohm"


def test_zero_uncertainty_is_not_rounded():
    assert format_value_with_uncertainty(0.05, 0.0, "mA") == "0.05 +/- 0 mA"


def test_measurement_line_format():
    m = Measurement(name="V_A", value=-40.0, sigma=0.8, unit="V")
    assert format_measurement(m) == "V_A: -40.0 +/- 0.8 V"
    assert format_measurement(m, "V_A (50 uA)") == "V_A (50 uA): -40.0 +/- 0.8 V"


def test_format_line_flags_exact_fit():
    line = FittedLine(2.0, 3.0, 0.3, 0.14, (1.0, 3.0), chi2=0.0, ndf=0, n_points=2)
    lines = format_line(line, "V", "mA")
    assert lines[0] == "a: 2.0 +/- 0.3 mA"
    assert lines[1] == "b: 3.00 +/- 0.14 mA/V"
    assert "two points" in lines[2]


def test_report_lines_cover_every_quantity(tmp_path, table_writer, linear_table, capsys):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, VCE))
    config = AnalysisConfig(
        name="test",
        datasets=(DatasetSpec("50", str(low), 50.0), DatasetSpec("100", str(high), 100.0)),
        fit_domain=(1.0, 3.5),
        v_target=3.0,
        beta_pair=("50", "100"),
    )
    result = run_analysis(config)

    lines = report_lines(result)
    assert any(line.startswith("V_A (50 uA): -40") for line in lines)
    assert any(line.startswith("g_o (100 uA): ") and line.endswith(" S") for line in lines)
    assert any(line.startswith("beta: 192") for line in lines)
    assert any(line.startswith("Delta I_B: 0.05") for line in lines)
    for line in lines:
        if line.startswith(("V_A", "g_o", "r_o", "beta:", "a:", "b:")):
            assert " +/- " in line

    print_report(result)
    out = capsys.readouterr().out
    assert "Current gain (beta) at V_CE = 3 V" in out


def test_report_lists_skipped_fit(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, [0.5, 2.0]))
    config = AnalysisConfig(
        name="test",
        datasets=(DatasetSpec("50", str(low), 50.0), DatasetSpec("100", str(high), 100.0)),
        fit_domain=(1.0, 3.5),
        v_target=3.0,
        beta_pair=("50", "100"),
    )
    lines = report_lines(run_analysis(config))
    assert any(line.startswith("fit skipped: Need at least 2 points") for line in lines)
    assert any(line.startswith("beta: not computed") for line in lines)
