"""
A Python package for analyzing bipolar-transistor output characteristics.

Fits the active region of I_C(V_CE) for several base currents and derives the
current gain, the Early voltage and the output conductance with propagated
uncertainties.

Modules:
    - data_processing: Loads 4-column text tables, filters by domain and swaps axes.
    - stats: Weighted straight-line fit and uncertainty propagation.
    - analysis: Runs the configured pipeline and collects per-dataset results.
    - reporting: Formats results as ``name: value +/- uncertainty unit`` lines.
    - plotting: Renders the overlaid characteristics as a vector image.
"""

__version__ = "1.0.0"

from .analysis import (
    AnalysisResult,
    DatasetResult,
    analyze_dataset,
    create_results_dataframe,
    run_analysis,
)
from .config import AnalysisConfig, DatasetSpec, get_config
from .data_processing import filter_domain, load_dataset, require_points, swap_axes
from .errors import (
    AnalysisError,
    DivisionByZeroError,
    InsufficientPointsError,
    MissingDataError,
    SingularFitError,
)
from .models import Dataset, FittedLine, Measurement, MeasurementPoint
from .reporting import print_report
from .stats import beta, conductance, early_voltage, evaluate, fit_line

__all__ = [
    # Data model
    "Dataset",
    "FittedLine",
    "Measurement",
    "MeasurementPoint",
    # Data processing
    "filter_domain",
    "load_dataset",
    "require_points",
    "swap_axes",
    # Fitting and derived quantities
    "fit_line",
    "evaluate",
    "beta",
    "early_voltage",
    "conductance",
    # Analysis
    "AnalysisConfig",
    "DatasetSpec",
    "get_config",
    "AnalysisResult",
    "DatasetResult",
    "analyze_dataset",
    "run_analysis",
    "create_results_dataframe",
    "print_report",
    # Errors
    "AnalysisError",
    "MissingDataError",
    "InsufficientPointsError",
    "SingularFitError",
    "DivisionByZeroError",
]
