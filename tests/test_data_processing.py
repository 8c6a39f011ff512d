import logging

import numpy as np
import pytest

from bjtfit.data_processing import (
    filter_domain,
    load_dataset,
    parse_table,
    require_points,
    swap_axes,
)
from bjtfit.errors import MissingDataError
from bjtfit.models import Dataset, MeasurementPoint


def make_dataset():
    points = (
        MeasurementPoint(0.5, 4.0, 0.01, 0.05),
        MeasurementPoint(1.0, 8.7, 0.01, 0.05),
        MeasurementPoint(2.0, 8.9, 0.02, 0.06),
        MeasurementPoint(3.5, 9.3, 0.01, 0.05),
        MeasurementPoint(4.0, 9.4, 0.01, 0.05),
    )
    return Dataset(label="50", points=points)


def test_load_dataset_skips_malformed_lines(caplog, tmp_path):
    caplog.set_level(logging.WARNING)
    path = tmp_path / "50.txt"
    path.write_text(
        "\n".join(
            [
                "# Vce Ic errVce errIc",
                "1.0 5.0 0.1 0.2",
                "2.0 8.0 0.1 0.2 extra",
                "bad line here x",
                "3.0 11.0",
                "4.0 abc 0.1 0.2",
                "5.0 17.0 -0.1 0.2",
                "6.0 nan 0.1 0.2",
                "// commented out in the macro",
                "",
                "3.0 11.0 0.1 0.2",
            ]
        )
    )

    ds = load_dataset(path)

    assert ds.label == "50"
    assert len(ds) == 3
    assert ds.points[1] == MeasurementPoint(2.0, 8.0, 0.1, 0.2)
    assert list(ds.x) == [1.0, 2.0, 3.0]
    assert any("Skipped 5 malformed line(s)" in rec.message for rec in caplog.records)


def test_load_dataset_missing_file_raises(tmp_path):
    with pytest.raises(MissingDataError):
        load_dataset(tmp_path / "does_not_exist.txt")


def test_empty_dataset_is_missing_data(tmp_path):
    path = tmp_path / "200.txt"
    path.write_text("# only a header\n")
    ds = load_dataset(path, label="200")
    assert ds.is_empty
    with pytest.raises(MissingDataError, match="200"):
        require_points(ds)


def test_parse_table_to_frame_columns():
    ds = parse_table(["1 2 0.1 0.2", "3 4 0.3 0.4"], label="x")
    df = ds.to_frame()
    assert list(df.columns) == ["x", "y", "sigma_x", "sigma_y"]
    assert np.allclose(df["sigma_y"], [0.2, 0.4])


def test_filter_domain_is_inclusive_subset():
    ds = make_dataset()
    out = filter_domain(ds, (1.0, 3.5))

    assert [p.x for p in out] == [1.0, 2.0, 3.5]
    assert set(out.points) <= set(ds.points)
    excluded = set(ds.points) - set(out.points)
    assert all(not (1.0 <= p.x <= 3.5) for p in excluded)


def test_filter_domain_accepts_reversed_window():
    ds = make_dataset()
    assert filter_domain(ds, (3.5, 1.0)).points == filter_domain(ds, (1.0, 3.5)).points


def test_swap_axes_transposes_values_and_errors():
    ds = make_dataset()
    swapped = swap_axes(ds, (1.0, 3.5))

    assert swapped.count == 3
    assert swapped.dataset.points[0] == MeasurementPoint(8.7, 1.0, 0.05, 0.01)
    assert swapped.dataset.points[1] == MeasurementPoint(8.9, 2.0, 0.06, 0.02)
    assert swapped.x_min == 8.7
    assert swapped.x_max == 9.3
    assert swapped.domain == (8.7, 9.3)


def test_swap_axes_twice_restores_points():
    ds = make_dataset()
    twice = swap_axes(swap_axes(ds).dataset)
    assert sorted(twice.dataset.points, key=lambda p: p.x) == sorted(ds.points, key=lambda p: p.x)


def test_swap_axes_empty_window():
    swapped = swap_axes(make_dataset(), (10.0, 20.0))
    assert swapped.count == 0
    assert swapped.dataset.is_empty
    assert np.isnan(swapped.x_min) and np.isnan(swapped.x_max)
