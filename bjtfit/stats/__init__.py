"""
Statistical utilities for output-characteristic analysis.

This subpackage provides the straight-line fit and the uncertainty
propagation for quantities derived from it. Functions operate on the value
objects in ``bjtfit.models`` and on plain arrays; no plotting or file I/O is
performed here.

Modules:
    regression:
        Weighted least-squares line fit with absolute errors, optional
        effective-variance weighting of x-errors, and domain restriction.

    propagation:
        Evaluation of fitted lines with uncertainty, current gain (beta),
        Early voltage, output conductance and output resistance.
"""

from .propagation import (
    beta,
    conductance,
    early_voltage,
    evaluate,
    evaluate_with_uncertainty,
    output_resistance,
)
from .regression import fit_line, weighted_linear_fit, weighted_sums, weights_from_sigma

__all__ = [
    "fit_line",
    "weighted_linear_fit",
    "weighted_sums",
    "weights_from_sigma",
    "beta",
    "conductance",
    "early_voltage",
    "evaluate",
    "evaluate_with_uncertainty",
    "output_resistance",
]
