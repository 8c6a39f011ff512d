import os

import main

VCE = [0.2, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0]


def test_main_runs_default_variant(tmp_path, table_writer, linear_table, capsys):
    table_writer(tmp_path / "data" / "50.txt", linear_table(8.0, 0.2, VCE))
    table_writer(tmp_path / "data" / "100.txt", linear_table(17.0, 0.4, VCE))
    chart = tmp_path / "fit.eps"

    status = main.main(["--data-dir", str(tmp_path), "--output", str(chart)])

    assert status == 0
    assert os.path.exists(chart)
    out = capsys.readouterr().out
    assert "beta: 192" in out


def test_main_returns_error_on_missing_data(tmp_path):
    status = main.main(["--data-dir", str(tmp_path), "--no-plot"])
    assert status == 1
