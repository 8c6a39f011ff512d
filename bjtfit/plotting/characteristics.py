"""Render the overlaid output characteristics and their fitted lines.

The chart consumes precomputed :class:`~bjtfit.analysis.AnalysisResult`
values only; no fitting happens here.
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from ..analysis import AnalysisResult
from ..stats.propagation import evaluate
from .style import (
    FONT_SIZES,
    LINE_WIDTHS,
    STYLE,
    clean_axis,
    save_figure,
    set_axis_labels,
    set_global_style,
)

logger = logging.getLogger(__name__)

FIT_SAMPLES = 200


def plot_output_characteristics(
    result: AnalysisResult, output_path: str | Path | None = None
) -> str:
    """Overlay every dataset with error bars and, optionally, its fitted line.

    Args:
        result (AnalysisResult): Output of ``bjtfit.analysis.run_analysis``.
        output_path (str or pathlib.Path, optional): Image path; defaults to
            ``result.config.output_path``. The extension selects the format.

    Returns:
        str: Path of the written image.
    """
    config = result.config
    set_global_style()

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)
    try:
        for spec, res in zip(config.datasets, result.results):
            ds = res.dataset
            ax.errorbar(
                ds.x,
                ds.y,
                xerr=ds.sigma_x,
                yerr=ds.sigma_y,
                fmt=spec.marker,
                color=spec.color,
                markersize=STYLE.MARKERSIZE,
                elinewidth=LINE_WIDTHS["errorbar"],
                label=spec.legend_label,
            )
            if config.draw_fits and res.line is not None:
                lo, hi = res.line.domain
                xs = np.linspace(lo, hi, FIT_SAMPLES)
                ax.plot(
                    xs,
                    [evaluate(res.line, x) for x in xs],
                    color=spec.color,
                    linewidth=LINE_WIDTHS["fit"],
                    label="_nolegend_",
                )

        set_axis_labels(ax, x=config.x_label, y=config.y_label)
        ax.set_title(config.title, fontsize=FONT_SIZES["title"])
        if config.x_limits is not None:
            ax.set_xlim(*config.x_limits)
        if config.y_limits is not None:
            ax.set_ylim(*config.y_limits)
        clean_axis(ax)
        ax.legend(loc="upper left", fontsize=FONT_SIZES["legend"])

        target = save_figure(fig, output_path if output_path is not None else config.output_path)
    finally:
        plt.close(fig)

    logger.info("Saved output-characteristics chart to %s", target)
    return str(target)
