"""Analysis configurations for the transistor output-characteristic runs.

The measurement campaigns differ only in file paths, fit ranges, target
voltage, base currents and drawing options, so each one is an
:class:`AnalysisConfig` value rather than a separate script.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

from .units import ua_to_ma


@dataclass(frozen=True)
class DatasetSpec:
    """One input table and its base-current setting."""

    label: str
    path: str
    base_current_ua: float
    color: str = "#1f77b4"
    marker: str = "o"

    @property
    def base_current_ma(self) -> float:
        return ua_to_ma(self.base_current_ua)

    @property
    def legend_label(self) -> str:
        return rf"$I_B = {self.base_current_ua:g}\ \mu A$"


@dataclass(frozen=True)
class AnalysisConfig:
    """Everything one analysis run needs.

    Attributes:
        name: Variant name.
        datasets: Input tables in display order.
        fit_domain: Inclusive V_CE window of the active-region fit (V).
        inverse_window: V_CE window whose points are swapped for the
            ``V = a + b*I`` fit; defaults to ``fit_domain``.
        v_target: V_CE at which beta is evaluated (V).
        beta_pair: Labels of the low and high base-current datasets.
        early_voltage_sign: -1 for ``V_A = -a/b``, +1 for ``V_A = a/b``.
        effective_variance: Fold x-errors into the fit weights.
        draw_fits: Overlay fitted lines on the chart.
    """

    name: str
    datasets: Tuple[DatasetSpec, ...]
    fit_domain: Tuple[float, float]
    v_target: float
    beta_pair: Tuple[str, str]
    inverse_window: Optional[Tuple[float, float]] = None
    early_voltage_sign: int = -1
    effective_variance: bool = False
    draw_fits: bool = True
    title: str = "BJT output characteristics"
    x_label: str = r"$V_{CE}$ (V)"
    y_label: str = r"$I_C$ (mA)"
    x_limits: Optional[Tuple[float, float]] = None
    y_limits: Optional[Tuple[float, float]] = None
    output_path: str = "fit.eps"

    def __post_init__(self):
        if self.early_voltage_sign not in (-1, 1):
            raise ValueError("early_voltage_sign must be -1 or +1")
        labels = [d.label for d in self.datasets]
        if len(set(labels)) != len(labels):
            raise ValueError(f"Dataset labels must be unique; got {labels}")
        missing = [lbl for lbl in self.beta_pair if lbl not in labels]
        if missing:
            raise ValueError(f"beta_pair refers to unknown datasets: {missing}")

    @property
    def inverse_domain(self) -> Tuple[float, float]:
        return self.inverse_window if self.inverse_window is not None else self.fit_domain

    def dataset(self, label: str) -> DatasetSpec:
        for spec in self.datasets:
            if spec.label == label:
                return spec
        raise KeyError(label)

    def with_data_dir(self, data_dir) -> "AnalysisConfig":
        """Return a copy whose relative dataset paths are rooted at ``data_dir``."""
        root = Path(data_dir)
        specs = tuple(
            replace(d, path=d.path if Path(d.path).is_absolute() else str(root / d.path))
            for d in self.datasets
        )
        return replace(self, datasets=specs)

    def with_output(self, output_path) -> "AnalysisConfig":
        return replace(self, output_path=str(output_path))


NPN_50_100 = AnalysisConfig(
    name="npn_50_100",
    datasets=(
        DatasetSpec("50", "data/50.txt", 50.0, color="blue", marker="o"),
        DatasetSpec("100", "data/100.txt", 100.0, color="red", marker="o"),
    ),
    fit_domain=(1.0, 3.5),
    v_target=3.0,
    beta_pair=("50", "100"),
    x_limits=(0.0, 4.5),
    y_limits=(0.0, 22.0),
)

PNP_100_200 = AnalysisConfig(
    name="pnp_100_200",
    datasets=(
        DatasetSpec("100", "caratteristica_100.txt", 100.0, color="blue", marker="o"),
        DatasetSpec("200", "caratteristica_200.txt", 200.0, color="red", marker="s"),
    ),
    fit_domain=(-4.5, -1.0),
    v_target=-3.0,
    beta_pair=("100", "200"),
    title="BJT output characteristics (PNP)",
)

VARIANTS: Dict[str, AnalysisConfig] = {
    NPN_50_100.name: NPN_50_100,
    PNP_100_200.name: PNP_100_200,
}
DEFAULT_VARIANT = NPN_50_100.name


def get_config(name: str = DEFAULT_VARIANT) -> AnalysisConfig:
    """Return a named configuration variant.

    Raises:
        KeyError: If ``name`` is not a known variant.
    """
    try:
        return VARIANTS[name]
    except KeyError:
        raise KeyError(f"Unknown analysis variant '{name}'; choose from {sorted(VARIANTS)}") from None
