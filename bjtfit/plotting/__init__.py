"""
Plotting for output-characteristic analysis.

This subpackage renders precomputed results; it performs no fitting and no
derived-quantity calculations.

Modules:
    characteristics:
        Overlay of every dataset (points with x/y error bars) and, when
        enabled, the fitted active-region lines, exported as one vector
        image.

    style:
        Global Matplotlib style, axis formatting and save helper.
"""

from .characteristics import plot_output_characteristics
from .style import apply_global_style, save_figure

__all__ = ["plot_output_characteristics", "apply_global_style", "save_figure"]
