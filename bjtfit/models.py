"""Value objects shared by the loader, the fit engine, and the pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.stats import chi2 as chi2_dist

from .schema import POINT_COLUMNS


@dataclass(frozen=True)
class MeasurementPoint:
    """One tabulated record: value, measurement, and their absolute errors."""

    x: float
    y: float
    sigma_x: float = 0.0
    sigma_y: float = 0.0

    def swapped(self) -> "MeasurementPoint":
        return MeasurementPoint(self.y, self.x, self.sigma_y, self.sigma_x)


@dataclass(frozen=True)
class Dataset:
    """An ordered, labelled sequence of measurement points.

    ``label`` usually names the base-current setting (for example ``"50"``).
    Point order carries no meaning for fitting but is kept for display.
    """

    label: str
    points: Tuple[MeasurementPoint, ...] = ()
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[MeasurementPoint]:
        return iter(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def x(self) -> np.ndarray:
        return np.array([p.x for p in self.points], dtype=float)

    @property
    def y(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=float)

    @property
    def sigma_x(self) -> np.ndarray:
        return np.array([p.sigma_x for p in self.points], dtype=float)

    @property
    def sigma_y(self) -> np.ndarray:
        return np.array([p.sigma_y for p in self.points], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """Return the points as a DataFrame with the standard point columns."""
        return pd.DataFrame(
            {
                POINT_COLUMNS.x: self.x,
                POINT_COLUMNS.y: self.y,
                POINT_COLUMNS.sigma_x: self.sigma_x,
                POINT_COLUMNS.sigma_y: self.sigma_y,
            },
            columns=POINT_COLUMNS.as_list(),
        )


@dataclass(frozen=True)
class FittedLine:
    """Straight line ``y = a + b*x`` fitted over ``domain``.

    ``sigma_a``, ``sigma_b`` and ``cov_ab`` come from the inverse of the
    weighted normal-equations matrix with the input errors taken as absolute
    (no rescaling by the reduced chi-square).
    """

    intercept: float
    slope: float
    sigma_a: float
    sigma_b: float
    domain: Tuple[float, float]
    cov_ab: float = 0.0
    chi2: float = 0.0
    ndf: int = 0
    n_points: int = 0
    label: str = ""

    @property
    def a(self) -> float:
        return self.intercept

    @property
    def b(self) -> float:
        return self.slope

    @property
    def is_exact(self) -> bool:
        """True when the line passes through exactly two points (no dof)."""
        return self.ndf == 0

    @property
    def reduced_chi2(self) -> float:
        if self.ndf <= 0:
            return math.nan
        return float(self.chi2 / self.ndf)

    @property
    def p_value(self) -> float:
        if self.ndf <= 0:
            return math.nan
        return float(chi2_dist.sf(self.chi2, self.ndf))


@dataclass(frozen=True)
class Measurement:
    """A derived scalar with its propagated uncertainty."""

    name: str
    value: float
    sigma: float
    unit: str = ""
    details: dict = field(default_factory=dict, compare=False)
