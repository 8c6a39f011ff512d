import logging

import numpy as np
import pytest

from bjtfit.analysis import analyze_dataset, create_results_dataframe, run_analysis
from bjtfit.config import AnalysisConfig, DatasetSpec
from bjtfit.errors import MissingDataError
from bjtfit.models import Dataset, MeasurementPoint

VCE = [0.2, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0]


def make_config(tmp_path, low_path, high_path, **kwargs):
    return AnalysisConfig(
        name="test",
        datasets=(
            DatasetSpec("50", str(low_path), 50.0),
            DatasetSpec("100", str(high_path), 100.0),
        ),
        fit_domain=(1.0, 3.5),
        v_target=3.0,
        beta_pair=("50", "100"),
        output_path=str(tmp_path / "fit.eps"),
        **kwargs,
    )


def test_run_analysis_on_exact_characteristics(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, VCE))

    result = run_analysis(make_config(tmp_path, low, high))

    res_low = result.result("50")
    assert res_low.ok
    assert res_low.line.n_points == 6
    assert res_low.line.a == pytest.approx(8.0)
    assert res_low.line.b == pytest.approx(0.2)
    assert res_low.early_voltage.value == pytest.approx(-40.0)
    # inverse fit V = -40 + 5 I
    assert res_low.inverse_line.b == pytest.approx(5.0)
    assert res_low.conductance.value == pytest.approx(2e-4)
    assert res_low.output_resistance.value == pytest.approx(5000.0)
    assert res_low.errors == {}

    assert result.beta is not None
    assert result.beta.value == pytest.approx((18.2 - 8.6) / 0.05)
    assert result.beta_error is None


def test_missing_file_aborts_run(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    with pytest.raises(MissingDataError):
        run_analysis(make_config(tmp_path, low, tmp_path / "100.txt"))


def test_empty_file_aborts_run(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", [])
    with pytest.raises(MissingDataError):
        run_analysis(make_config(tmp_path, low, high))


def test_insufficient_points_skip_one_dataset(caplog, tmp_path, table_writer, linear_table):
    caplog.set_level(logging.WARNING)
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, [0.2, 0.5, 2.0]))

    result = run_analysis(make_config(tmp_path, low, high))

    assert result.result("50").ok
    res_high = result.result("100")
    assert not res_high.ok
    assert "fit" in res_high.errors
    assert "inverse_fit" in res_high.errors
    assert res_high.early_voltage is None
    assert result.beta is None
    assert "100" in result.beta_error
    assert any("not computed" in rec.message for rec in caplog.records)


def test_empty_inverse_window_reports_voltage_window(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, VCE))
    config = make_config(tmp_path, low, high, inverse_window=(5.0, 6.0))

    result = run_analysis(config)

    message = result.result("50").errors["inverse_fit"]
    assert "[5, 6]" in message
    assert "nan" not in message
    assert "found 0" in message
    assert result.result("50").conductance is None


def test_constant_current_makes_inverse_fit_singular():
    rows = [MeasurementPoint(v, 5.0, 0.01, 0.05) for v in VCE]
    ds = Dataset(label="flat", points=tuple(rows))
    config = AnalysisConfig(
        name="flat",
        datasets=(DatasetSpec("flat", "unused.txt", 50.0),),
        fit_domain=(1.0, 3.5),
        v_target=3.0,
        beta_pair=("flat", "flat"),
    )

    res = analyze_dataset(ds, config, base_current_ma=0.05)

    assert res.ok
    assert res.line.b == pytest.approx(0.0, abs=1e-9)
    # every swapped point sits at I = 5.0 mA
    assert res.inverse_line is None
    assert "inverse_fit" in res.errors
    assert res.conductance is None
    assert "g_o" not in res.errors


def test_analyze_dataset_is_pure(tmp_path):
    rows = tuple(MeasurementPoint(v, 8.0 + 0.2 * v, 0.01, 0.05) for v in VCE)
    ds = Dataset(label="50", points=rows)
    config = make_config(tmp_path, "a.txt", "b.txt")
    first = analyze_dataset(ds, config, 0.05)
    second = analyze_dataset(ds, config, 0.05)
    assert first == second
    assert ds.points == rows


def test_create_results_dataframe_columns(tmp_path, table_writer, linear_table):
    low = table_writer(tmp_path / "50.txt", linear_table(8.0, 0.2, VCE))
    high = table_writer(tmp_path / "100.txt", linear_table(17.0, 0.4, [0.2, 0.5, 2.0]))
    result = run_analysis(make_config(tmp_path, low, high))

    df = create_results_dataframe(result.results)
    assert list(df["Dataset"]) == ["50", "100"]
    assert {"a", "sigma_a", "b", "sigma_b", "V_A (V)", "g_o (S)"} <= set(df.columns)
    assert np.isclose(df.loc[0, "V_A (V)"], -40.0)
    assert np.isnan(df.loc[1, "b"])
    assert df.loc[1, "Points in domain"] == 0
