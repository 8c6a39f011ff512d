"""Format fit parameters and derived quantities as console report lines.

Every quantity is printed on its own line as
``<name>: <value> +/- <uncertainty> <unit>``, with the uncertainty rounded to
one significant figure (two when its leading digit is 1) and the value
rounded to the same decimal place.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from .analysis import AnalysisResult, DatasetResult
from .models import FittedLine, Measurement

SEPARATOR = "=" * 45
RULE = "-" * 45


def _round_uncertainty(u: float) -> Tuple[float, int]:
    """Round uncertainty using significant-figure conventions.

    Args:
        u (float): Absolute uncertainty.

    Returns:
        tuple[float, int]: Rounded uncertainty and the decimal places used
        (negative when rounding to tens, hundreds, ...).
    """
    if u <= 0 or not math.isfinite(u):
        return u, 0

    u = abs(float(u))
    exponent = math.floor(math.log10(u))
    leading = u / (10**exponent)

    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent

    ru = round(u, ndigits)

    if ru == 0:
        ndigits = sig_figs - exponent
        ru = round(u, ndigits)

    return float(ru), int(ndigits)


def _format_number_with_rounding(x: float, ndigits: int) -> str:
    xr = round(float(x), ndigits)
    if ndigits > 0:
        return f"{xr:.{ndigits}f}"
    return f"{xr:.0f}"


def format_value_with_uncertainty(value: float, uncertainty: float, unit: str = "") -> str:
    """Return ``"<value> +/- <uncertainty> <unit>"`` with matched precision.

    A zero or non-finite uncertainty leaves both numbers unrounded (6
    significant figures).
    """
    ru, ndigits = _round_uncertainty(abs(float(uncertainty)))
    if ru == 0 or not math.isfinite(ru):
        v = f"{value:.6g}"
        u = f"{uncertainty:.6g}"
        return f"{v} +/- {u} {unit}".strip()

    v_str = _format_number_with_rounding(value, ndigits)
    u_str = _format_number_with_rounding(ru, ndigits)
    return f"{v_str} +/- {u_str} {unit}".strip()


def format_quantity(name: str, value: float, uncertainty: float, unit: str = "") -> str:
    return f"{name}: {format_value_with_uncertainty(value, uncertainty, unit)}"


def format_measurement(measurement: Measurement, name: str | None = None) -> str:
    return format_quantity(
        name or measurement.name, measurement.value, measurement.sigma, measurement.unit
    )


def format_line(line: FittedLine, x_unit: str, y_unit: str, prefix: str = "") -> List[str]:
    """Report lines for the parameters of ``y = a + b*x`` and the fit quality."""
    slope_unit = f"{y_unit}/{x_unit}" if x_unit and y_unit else ""
    lines = [
        format_quantity(f"{prefix}a", line.a, line.sigma_a, y_unit),
        format_quantity(f"{prefix}b", line.b, line.sigma_b, slope_unit),
    ]
    if line.is_exact:
        lines.append(f"{prefix}chi2/ndf: {line.chi2:.4g}/0 (line through two points)")
    else:
        lines.append(
            f"{prefix}chi2/ndf: {line.chi2:.4g}/{line.ndf} "
            f"(p = {line.p_value:.3g})"
        )
    return lines


def dataset_report_lines(res: DatasetResult) -> List[str]:
    """Report block for one dataset: fit parameters and derived quantities."""
    lines = [f"--- Fit results I_B = {res.label} uA ---"]
    if res.line is None:
        lines.append(f"fit skipped: {res.errors.get('fit', 'unknown error')}")
    else:
        lo, hi = res.line.domain
        lines.append(f"domain: [{lo:g}, {hi:g}] V, {res.line.n_points} point(s)")
        lines.extend(format_line(res.line, "V", "mA"))

    if res.inverse_line is not None:
        lines.extend(format_line(res.inverse_line, "mA", "V", prefix="inverse "))
    elif "inverse_fit" in res.errors:
        lines.append(f"inverse fit skipped: {res.errors['inverse_fit']}")

    for key, attr in (("V_A", "early_voltage"), ("g_o", "conductance"), ("r_o", "output_resistance")):
        measurement = getattr(res, attr)
        if measurement is not None:
            lines.append(format_measurement(measurement, f"{key} ({res.label} uA)"))
        elif key in res.errors:
            lines.append(f"{key} ({res.label} uA): not computed ({res.errors[key]})")
    return lines


def beta_report_lines(result: AnalysisResult) -> List[str]:
    """Report block for the current gain."""
    config = result.config
    lines = [
        SEPARATOR,
        f" Current gain (beta) at V_CE = {config.v_target:g} V",
        SEPARATOR,
    ]
    if result.beta is None:
        lines.append(f"beta: not computed ({result.beta_error})")
        lines.append(SEPARATOR)
        return lines

    d = result.beta.details
    low_label, high_label = config.beta_pair
    lines.extend(
        [
            format_quantity(f"I_C (fit) @ {high_label} uA", d["ic_high"], d["ic_high_sigma"], "mA"),
            format_quantity(f"I_C (fit) @ {low_label} uA", d["ic_low"], d["ic_low_sigma"], "mA"),
            format_quantity(
                "Delta I_C",
                d["delta_ic"],
                math.hypot(d["ic_low_sigma"], d["ic_high_sigma"]),
                "mA",
            ),
            format_quantity("Delta I_B", d["delta_ib"], 0.0, "mA"),
            RULE,
            format_measurement(result.beta, "beta"),
            SEPARATOR,
        ]
    )
    return lines


def report_lines(result: AnalysisResult) -> List[str]:
    lines: List[str] = []
    for res in result.results:
        lines.append("")
        lines.extend(dataset_report_lines(res))
    lines.append("")
    lines.extend(beta_report_lines(result))
    return lines


def print_report(result: AnalysisResult) -> None:
    """Print the full report of one analysis run."""
    for line in report_lines(result):
        print(line)
