"""Define standardized column names for point and result DataFrames."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PointColumns:
    """Column labels for one measurement table.

    Attributes:
        x: Primary coordinate, V_CE in volts for a direct dataset or I_C in
            mA once the axes have been swapped.
        y: Measured coordinate paired with ``x``.
        sigma_x: Absolute error on ``x`` (same unit as ``x``).
        sigma_y: Absolute error on ``y`` (same unit as ``y``).
    """

    x: str = "x"
    y: str = "y"
    sigma_x: str = "sigma_x"
    sigma_y: str = "sigma_y"

    def as_list(self) -> list[str]:
        return [self.x, self.y, self.sigma_x, self.sigma_y]


@dataclass(frozen=True)
class ResultColumns:
    """Column labels of the per-dataset summary table."""

    label: str = "Dataset"
    base_current: str = "I_B (mA)"
    n_points: str = "Points in domain"
    intercept: str = "a"
    intercept_unc: str = "sigma_a"
    slope: str = "b"
    slope_unc: str = "sigma_b"
    chi2_ndf: str = "chi2/ndf"
    early_voltage: str = "V_A (V)"
    early_voltage_unc: str = "sigma_V_A (V)"
    conductance: str = "g_o (S)"
    conductance_unc: str = "sigma_g_o (S)"


POINT_COLUMNS = PointColumns()
RESULT_COLUMNS = ResultColumns()
