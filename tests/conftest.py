"""Pytest configuration for repository-relative imports."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")


def write_table(path, rows, header="# Vce Ic errVce errIc"):
    lines = [header] if header else []
    lines += [" ".join(f"{v:g}" for v in row) for row in rows]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


def linear_rows(intercept, slope, xs, sigma_x=0.01, sigma_y=0.05):
    return [(x, intercept + slope * x, sigma_x, sigma_y) for x in xs]


@pytest.fixture
def table_writer():
    return write_table


@pytest.fixture
def linear_table():
    return linear_rows
