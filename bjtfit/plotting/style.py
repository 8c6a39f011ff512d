"""Centralized plotting style, axis formatting, and save helpers."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

FIGURE_DPI = 300
DEFAULT_FORMAT = "eps"
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    TITLE_FONTSIZE: float = 14.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LEGEND_FONTSIZE: float = 11.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    MARKERSIZE: float = 6.0
    GRID_ALPHA: float = 0.35
    FIGSIZE_SINGLE: tuple[float, float] = (8.0, 6.0)


STYLE = StyleConfig()

FONT_SIZES = {
    "base": STYLE.BASE_FONTSIZE,
    "title": STYLE.TITLE_FONTSIZE,
    "axis_label": STYLE.LABEL_FONTSIZE,
    "tick": STYLE.TICK_FONTSIZE,
    "legend": STYLE.LEGEND_FONTSIZE,
}

LINE_WIDTHS = {
    "fit": STYLE.LINEWIDTH,
    "errorbar": STYLE.LINEWIDTH_THIN,
}


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply global Matplotlib style scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE * scale,
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.titlepad": 8,
            "axes.labelpad": 6,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "grid.linewidth": 0.7,
            "legend.frameon": True,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "errorbar.capsize": 3.0,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style(font_scale=1.0)
        _STYLE_STATE["initialized"] = True


def clean_axis(ax: Axes, *, nbins_x: int = 6, nbins_y: int = 6, grid: bool = True) -> None:
    """Apply consistent ticks, grid, and spine formatting to one axis."""
    ax.tick_params(axis="both", which="major", labelsize=FONT_SIZES["tick"], width=1.0)
    ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins_x, min_n_ticks=4))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins_y, min_n_ticks=4))
    for side in ("left", "bottom", "top", "right"):
        ax.spines[side].set_linewidth(STYLE.LINEWIDTH_THIN)
    ax.grid(grid, axis="both", alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def set_axis_labels(ax: Axes, x: str | None = None, y: str | None = None) -> None:
    """Apply axis labels with project typography."""
    if x is not None:
        ax.set_xlabel(x, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if y is not None:
        ax.set_ylabel(y, fontsize=FONT_SIZES["axis_label"], labelpad=6)


def save_figure(
    fig: Figure,
    savepath: str | Path,
    *,
    dpi: int = FIGURE_DPI,
    bbox_inches: str = "tight",
    pad_inches: float = 0.12,
) -> Path:
    """Save a figure to one file; an extensionless path gets ``.eps``."""
    target = Path(savepath)
    if not target.suffix:
        target = target.with_suffix(f".{DEFAULT_FORMAT}")
    target.parent.mkdir(parents=True, exist_ok=True)
    with warnings.catch_warnings():
        # The PostScript backend warns about transparency it cannot render.
        warnings.simplefilter("ignore")
        fig.savefig(
            str(target),
            dpi=dpi if target.suffix.lower() == ".png" else None,
            bbox_inches=bbox_inches,
            pad_inches=pad_inches,
        )
    return target
