"""Provide the weighted straight-line fit used for every characteristic.

This module supports:
- array-level weighted least squares with absolute errors,
- ROOT-style effective-variance weighting that folds x-errors into the
  weights, and
- dataset-level fits restricted to a domain on the primary coordinate.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Tuple

import numpy as np

from ..data_processing import domain_mask, normalize_domain
from ..errors import InsufficientPointsError, SingularFitError
from ..models import Dataset, FittedLine

logger = logging.getLogger(__name__)

SINGULAR_RTOL = 1e-12
EFFECTIVE_VARIANCE_MAX_ITER = 10
EFFECTIVE_VARIANCE_RTOL = 1e-10


def weights_from_sigma(sigma: np.ndarray) -> np.ndarray:
    """Return ``1/sigma**2`` weights.

    A point with zero error takes unit weight.
    """
    sig = np.abs(np.asarray(sigma, dtype=float))
    w = np.ones_like(sig)
    positive = sig > 0
    w[positive] = 1.0 / sig[positive] ** 2
    return w


def weighted_sums(x: np.ndarray, y: np.ndarray, w: np.ndarray) -> Dict[str, float]:
    """Return the sums ``S, Sx, Sy, Sxx, Sxy`` of the weighted normal equations."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    w = np.asarray(w, dtype=float)
    return {
        "S": float(np.sum(w)),
        "Sx": float(np.sum(w * x)),
        "Sy": float(np.sum(w * y)),
        "Sxx": float(np.sum(w * x * x)),
        "Sxy": float(np.sum(w * x * y)),
    }


def _solve_normal_equations(
    x: np.ndarray, y: np.ndarray, w: np.ndarray
) -> Dict[str, float]:
    s = weighted_sums(x, y, w)
    delta = s["S"] * s["Sxx"] - s["Sx"] ** 2
    if not math.isfinite(delta) or delta <= SINGULAR_RTOL * s["S"] * s["Sxx"]:
        raise SingularFitError(
            "Normal equations are singular (all abscissae coincide or weights are degenerate)."
        )

    a = (s["Sxx"] * s["Sy"] - s["Sx"] * s["Sxy"]) / delta
    b = (s["S"] * s["Sxy"] - s["Sx"] * s["Sy"]) / delta
    resid = y - (a + b * x)
    return {
        "a": float(a),
        "b": float(b),
        "var_a": float(s["Sxx"] / delta),
        "var_b": float(s["S"] / delta),
        "cov_ab": float(-s["Sx"] / delta),
        "chi2": float(np.sum(w * resid**2)),
    }


def weighted_linear_fit(
    x: np.ndarray,
    y: np.ndarray,
    sigma_y: np.ndarray,
    sigma_x: Optional[np.ndarray] = None,
    effective_variance: bool = False,
    min_points: int = 2,
) -> Dict[str, float]:
    """Fit ``y = a + b*x`` by weighted least squares.

    Args:
        x (numpy.ndarray): Abscissae.
        y (numpy.ndarray): Ordinates.
        sigma_y (numpy.ndarray): Absolute errors on ``y``; weights are
            ``1/sigma_y**2`` with unit weight where ``sigma_y == 0``.
        sigma_x (numpy.ndarray, optional): Absolute errors on ``x``. Used only
            when ``effective_variance`` is set.
        effective_variance (bool): Replace ``sigma_y**2`` by
            ``sigma_y**2 + (b*sigma_x)**2`` and iterate until the slope is
            stable, as ROOT does when fitting a ``TGraphErrors``.
        min_points (int): Minimum number of finite points. Defaults to ``2``.

    Returns:
        dict[str, float]: ``a``, ``b``, ``se_a``, ``se_b``, ``cov_ab``,
        ``chi2``, ``ndf`` and ``n``.

    Raises:
        InsufficientPointsError: If fewer than ``min_points`` finite points
            are available.
        SingularFitError: If the normal-equations matrix is singular.

    Note:
        Errors are treated as absolute: parameter errors are not rescaled by
        the reduced chi-square. With exactly two points ``ndf`` is 0 and the
        errors still reflect the input ``sigma_y``.

    References:
        Weighted linear least squares, closed-form 2x2 normal equations.
    """
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)
    sy = np.asarray(sigma_y, dtype=float)
    sx = np.zeros_like(x_arr) if sigma_x is None else np.asarray(sigma_x, dtype=float)

    mask = np.isfinite(x_arr) & np.isfinite(y_arr) & np.isfinite(sy) & np.isfinite(sx)
    x_arr, y_arr, sy, sx = x_arr[mask], y_arr[mask], sy[mask], sx[mask]
    n = int(len(x_arr))
    if n < max(2, int(min_points)):
        raise InsufficientPointsError(
            n,
            (float(np.min(x_arr)), float(np.max(x_arr))) if n else (math.nan, math.nan),
        )

    sol = _solve_normal_equations(x_arr, y_arr, weights_from_sigma(sy))

    if effective_variance and np.any(sx > 0):
        for _ in range(EFFECTIVE_VARIANCE_MAX_ITER):
            b_prev = sol["b"]
            sigma_eff = np.sqrt(sy**2 + (b_prev * sx) ** 2)
            sol = _solve_normal_equations(x_arr, y_arr, weights_from_sigma(sigma_eff))
            if abs(sol["b"] - b_prev) <= EFFECTIVE_VARIANCE_RTOL * max(abs(b_prev), 1e-300):
                break
        else:
            logger.warning(
                "Effective-variance fit did not converge after %d iterations",
                EFFECTIVE_VARIANCE_MAX_ITER,
            )

    return {
        "a": sol["a"],
        "b": sol["b"],
        "se_a": float(math.sqrt(max(sol["var_a"], 0.0))),
        "se_b": float(math.sqrt(max(sol["var_b"], 0.0))),
        "cov_ab": sol["cov_ab"],
        "chi2": sol["chi2"],
        "ndf": n - 2,
        "n": n,
    }


def fit_line(
    dataset: Dataset,
    domain: Tuple[float, float],
    *,
    effective_variance: bool = False,
) -> FittedLine:
    """Fit a straight line to the points of ``dataset`` inside ``domain``.

    Args:
        dataset (Dataset): Source points.
        domain (tuple[float, float]): Inclusive window on ``x``; a reversed
            window is normalised.
        effective_variance (bool): See :func:`weighted_linear_fit`.

    Returns:
        FittedLine: Parameters, their standard errors and covariance, and
        the fit statistics.

    Raises:
        InsufficientPointsError: If fewer than two points fall in ``domain``.
        SingularFitError: If the selected points share a single abscissa.
    """
    lo, hi = normalize_domain(domain)
    mask = domain_mask(dataset.x, (lo, hi))
    n_in = int(np.sum(mask))
    if n_in < 2:
        raise InsufficientPointsError(n_in, (lo, hi), dataset.label)

    try:
        result = weighted_linear_fit(
            dataset.x[mask],
            dataset.y[mask],
            dataset.sigma_y[mask],
            sigma_x=dataset.sigma_x[mask],
            effective_variance=effective_variance,
        )
    except SingularFitError as exc:
        raise SingularFitError(f"Cannot fit '{dataset.label}' over [{lo:g}, {hi:g}]: {exc}") from exc

    line = FittedLine(
        intercept=result["a"],
        slope=result["b"],
        sigma_a=result["se_a"],
        sigma_b=result["se_b"],
        domain=(lo, hi),
        cov_ab=result["cov_ab"],
        chi2=result["chi2"],
        ndf=int(result["ndf"]),
        n_points=int(result["n"]),
        label=dataset.label,
    )
    logger.debug(
        "Fit '%s' over [%g, %g]: a=%g, b=%g, chi2/ndf=%g/%d",
        dataset.label,
        lo,
        hi,
        line.a,
        line.b,
        line.chi2,
        line.ndf,
    )
    return line
