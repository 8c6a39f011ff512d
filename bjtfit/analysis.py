"""
Output-characteristic analysis of a bipolar transistor.

For every base-current setting the active region of ``I_C(V_CE)`` is fitted
with a weighted straight line ``I_C = a + b*V_CE``. From the fits:

- Early voltage V_A = ∓a/b (sign chosen in the configuration),
- output conductance g_o = 1/b' from the inverse fit ``V_CE = a' + b'*I_C``
  over the same points with axes swapped,
- current gain beta = |ΔI_C| / ΔI_B between two settings at a fixed V_CE.

A dataset that cannot be fitted is skipped and recorded in its result.
Only missing input data aborts the whole run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .config import AnalysisConfig
from .data_processing import load_dataset, require_points, swap_axes
from .errors import AnalysisError, InsufficientPointsError
from .models import Dataset, FittedLine, Measurement
from .schema import RESULT_COLUMNS
from .stats.propagation import beta, conductance, early_voltage, output_resistance
from .stats.regression import fit_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetResult:
    """Fits and derived quantities of one dataset.

    ``errors`` maps the name of every step that failed (``"fit"``,
    ``"inverse_fit"``, ``"V_A"``, ``"g_o"``, ``"r_o"``) to its message.
    """

    dataset: Dataset
    base_current_ma: float
    line: Optional[FittedLine] = None
    inverse_line: Optional[FittedLine] = None
    early_voltage: Optional[Measurement] = None
    conductance: Optional[Measurement] = None
    output_resistance: Optional[Measurement] = None
    errors: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def label(self) -> str:
        return self.dataset.label

    @property
    def ok(self) -> bool:
        return self.line is not None


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of :func:`run_analysis`."""

    config: AnalysisConfig
    results: List[DatasetResult]
    beta: Optional[Measurement] = None
    beta_error: Optional[str] = None

    def result(self, label: str) -> DatasetResult:
        for res in self.results:
            if res.label == label:
                return res
        raise KeyError(label)


def _derive(name: str, errors: Dict[str, str], func, *args, **kwargs):
    try:
        return func(*args, **kwargs)
    except AnalysisError as exc:
        errors[name] = str(exc)
        logger.warning("%s not computed: %s", name, exc)
        return None


def _fit_inverse(swapped, window, label, effective_variance=False):
    # An empty window has no I_C extent, so report the V_CE window instead.
    if swapped.count < 2:
        raise InsufficientPointsError(swapped.count, window, label)
    return fit_line(swapped.dataset, swapped.domain, effective_variance=effective_variance)


def analyze_dataset(
    dataset: Dataset, config: AnalysisConfig, base_current_ma: float = float("nan")
) -> DatasetResult:
    """Fit one dataset and derive its scalar quantities.

    Args:
        dataset (Dataset): Loaded ``(V_CE, I_C, σV, σI)`` points.
        config (AnalysisConfig): Fit domain, inverse window, sign convention
            and weighting mode.
        base_current_ma (float): Base current of this dataset (mA).

    Returns:
        DatasetResult: Immutable result; failed steps are listed in
        ``errors`` and leave the matching attribute ``None``.

    Note:
        Pure function: no plotting, printing or file access.
    """
    errors: Dict[str, str] = {}

    line = _derive(
        "fit",
        errors,
        fit_line,
        dataset,
        config.fit_domain,
        effective_variance=config.effective_variance,
    )

    swapped = swap_axes(dataset, config.inverse_domain)
    inverse_line = _derive(
        "inverse_fit",
        errors,
        _fit_inverse,
        swapped,
        config.inverse_domain,
        dataset.label,
        effective_variance=config.effective_variance,
    )

    va = None
    if line is not None:
        va = _derive("V_A", errors, early_voltage, line, sign=config.early_voltage_sign)

    g_o = r_o = None
    if inverse_line is not None:
        g_o = _derive("g_o", errors, conductance, inverse_line)
        r_o = _derive("r_o", errors, output_resistance, inverse_line)

    return DatasetResult(
        dataset=dataset,
        base_current_ma=float(base_current_ma),
        line=line,
        inverse_line=inverse_line,
        early_voltage=va,
        conductance=g_o,
        output_resistance=r_o,
        errors=errors,
    )


def load_datasets(config: AnalysisConfig) -> List[Dataset]:
    """Load every configured table.

    Raises:
        MissingDataError: If any file is unreadable or empty.
    """
    datasets = []
    for spec in config.datasets:
        datasets.append(require_points(load_dataset(spec.path, label=spec.label)))
    return datasets


def compute_beta(results: List[DatasetResult], config: AnalysisConfig) -> Measurement:
    """Current gain between the configured low/high base-current datasets.

    Raises:
        AnalysisError: If either dataset has no direct fit or the base
            currents coincide.
    """
    by_label = {res.label: res for res in results}
    low_label, high_label = config.beta_pair
    low, high = by_label.get(low_label), by_label.get(high_label)
    for lbl, res in ((low_label, low), (high_label, high)):
        if res is None or res.line is None:
            raise AnalysisError(f"No fitted line for dataset '{lbl}'; beta not computed.")
    return beta(
        low.line,
        high.line,
        config.v_target,
        low.base_current_ma,
        high.base_current_ma,
    )


def run_analysis(config: AnalysisConfig) -> AnalysisResult:
    """Load, fit and derive every quantity for one configuration.

    Args:
        config (AnalysisConfig): Run configuration.

    Returns:
        AnalysisResult: Per-dataset results plus beta (or the reason it is
        missing).

    Raises:
        MissingDataError: If any configured dataset is missing or empty.
    """
    datasets = load_datasets(config)
    logger.info("Loaded %d dataset(s) for variant '%s'", len(datasets), config.name)

    results = []
    for spec, dataset in zip(config.datasets, datasets):
        res = analyze_dataset(dataset, config, base_current_ma=spec.base_current_ma)
        if res.ok:
            logger.info(
                "Fitted '%s' with %d point(s) in [%g, %g]",
                res.label,
                res.line.n_points,
                *res.line.domain,
            )
        results.append(res)

    beta_value = None
    beta_error = None
    try:
        beta_value = compute_beta(results, config)
    except AnalysisError as exc:
        beta_error = str(exc)
        logger.warning("beta not computed: %s", exc)

    return AnalysisResult(config=config, results=results, beta=beta_value, beta_error=beta_error)


def create_results_dataframe(results: List[DatasetResult]) -> pd.DataFrame:
    """Tabulate per-dataset fit parameters and derived quantities.

    Missing values (failed fits or quantities) are ``NaN``.
    """
    cols = RESULT_COLUMNS
    rows = []
    for res in results:
        line = res.line
        row = {
            cols.label: res.label,
            cols.base_current: res.base_current_ma,
            cols.n_points: line.n_points if line is not None else 0,
            cols.intercept: line.a if line is not None else np.nan,
            cols.intercept_unc: line.sigma_a if line is not None else np.nan,
            cols.slope: line.b if line is not None else np.nan,
            cols.slope_unc: line.sigma_b if line is not None else np.nan,
            cols.chi2_ndf: line.reduced_chi2 if line is not None else np.nan,
            cols.early_voltage: res.early_voltage.value if res.early_voltage else np.nan,
            cols.early_voltage_unc: res.early_voltage.sigma if res.early_voltage else np.nan,
            cols.conductance: res.conductance.value if res.conductance else np.nan,
            cols.conductance_unc: res.conductance.sigma if res.conductance else np.nan,
        }
        rows.append(row)
    return pd.DataFrame(rows, columns=[getattr(cols, f.name) for f in fields(cols)])
