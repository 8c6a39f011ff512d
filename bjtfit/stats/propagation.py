"""
First-order uncertainty propagation for quantities derived from fitted lines.

- Line evaluation: σy² = σa² + (x·σb)² + 2·x·cov(a, b)
- Beta: |Δy| / ΔI_B, with ΔI_B exact and the two evaluations independent
- Early voltage: V_A = ±a/b, σ/|V_A| = sqrt((σa/a)² + (σb/b)²)
- Conductance: g = k/b, σg = k·σb/b²

Quantities that would divide by a zero parameter raise
``DivisionByZeroError`` instead of returning inf or NaN.
"""

from __future__ import annotations

import math
from typing import Tuple

from ..errors import DivisionByZeroError
from ..models import FittedLine, Measurement
from ..units import KILO, MILLI


def evaluate(line: FittedLine, x: float) -> float:
    """Return ``a + b*x``."""
    return float(line.intercept + line.slope * float(x))


def evaluate_with_uncertainty(line: FittedLine, x: float) -> Tuple[float, float]:
    """Evaluate ``line`` at ``x`` and propagate the parameter errors.

    Args:
        line (FittedLine): Fitted line with parameter covariance.
        x (float): Abscissa, in the unit of the fit's ``x``.

    Returns:
        tuple[float, float]: Value and its standard uncertainty.
    """
    x = float(x)
    var = line.sigma_a**2 + (x * line.sigma_b) ** 2 + 2.0 * x * line.cov_ab
    return evaluate(line, x), float(math.sqrt(max(var, 0.0)))


def beta(
    line_low: FittedLine,
    line_high: FittedLine,
    v_target: float,
    i_low: float,
    i_high: float,
    name: str = "beta",
) -> Measurement:
    """Current gain between two base-current settings at fixed ``V_CE``.

    Args:
        line_low (FittedLine): ``I_C(V_CE)`` fit at base current ``i_low``.
        line_high (FittedLine): ``I_C(V_CE)`` fit at base current ``i_high``.
        v_target (float): Collector-emitter voltage where both lines are
            evaluated (V).
        i_low (float): Lower base current, same unit as ``I_C``.
        i_high (float): Higher base current, same unit as ``I_C``.
        name (str): Reported quantity name.

    Returns:
        Measurement: Dimensionless gain. ``details`` carries the evaluated
        collector currents and both deltas.

    Raises:
        DivisionByZeroError: If ``i_high == i_low``.
    """
    delta_i = float(i_high) - float(i_low)
    if delta_i == 0:
        raise DivisionByZeroError("Base currents are equal; beta is undefined.")

    ic_low, sigma_low = evaluate_with_uncertainty(line_low, v_target)
    ic_high, sigma_high = evaluate_with_uncertainty(line_high, v_target)
    delta_ic = ic_high - ic_low

    value = abs(delta_ic) / abs(delta_i)
    sigma = math.sqrt(sigma_low**2 + sigma_high**2) / abs(delta_i)
    return Measurement(
        name=name,
        value=float(value),
        sigma=float(sigma),
        unit="",
        details={
            "v_target": float(v_target),
            "ic_low": ic_low,
            "ic_low_sigma": sigma_low,
            "ic_high": ic_high,
            "ic_high_sigma": sigma_high,
            "delta_ic": abs(delta_ic),
            "delta_ib": abs(delta_i),
        },
    )


def early_voltage(line: FittedLine, sign: int = -1, name: str = "V_A") -> Measurement:
    """Early voltage from the intercept and slope of ``I_C = a + b*V_CE``.

    The sign convention is a caller choice: ``sign=-1`` gives ``-a/b`` (the
    voltage-axis intercept), ``sign=+1`` gives ``a/b``.

    Raises:
        DivisionByZeroError: If ``a == 0``, ``b == 0`` or ``sigma_b == 0``.
        ValueError: If ``sign`` is not ±1.
    """
    if sign not in (-1, 1):
        raise ValueError(f"sign must be -1 or +1, got {sign!r}")
    a, b = float(line.intercept), float(line.slope)
    if b == 0:
        raise DivisionByZeroError(f"Slope of '{line.label}' is zero; Early voltage is undefined.")
    if a == 0:
        raise DivisionByZeroError(
            f"Intercept of '{line.label}' is zero; relative error on Early voltage is undefined."
        )
    if line.sigma_b == 0:
        raise DivisionByZeroError(
            f"Slope uncertainty of '{line.label}' is zero; Early voltage error is undefined."
        )

    value = sign * a / b
    # Covariance term ignored.
    rel = math.sqrt((line.sigma_a / a) ** 2 + (line.sigma_b / b) ** 2)
    return Measurement(name=name, value=float(value), sigma=float(abs(value) * rel), unit="V")


def conductance(line: FittedLine, scale: float = MILLI, name: str = "g_o") -> Measurement:
    """Reciprocal slope of the inverse fit ``V_CE = a + b*I_C``.

    With ``I_C`` in mA the slope is in V/mA; ``scale`` (default ``MILLI``)
    converts ``1/b`` from mA/V to siemens. The same factor multiplies the
    uncertainty.

    Raises:
        DivisionByZeroError: If ``b == 0`` or ``sigma_b == 0``.
    """
    b = float(line.slope)
    if b == 0:
        raise DivisionByZeroError(f"Slope of '{line.label}' is zero; conductance is undefined.")
    if line.sigma_b == 0:
        raise DivisionByZeroError(
            f"Slope uncertainty of '{line.label}' is zero; conductance error is undefined."
        )
    value = scale / b
    sigma = scale * line.sigma_b / b**2
    return Measurement(name=name, value=float(value), sigma=float(abs(sigma)), unit="S")


def output_resistance(line: FittedLine, scale: float = KILO, name: str = "r_o") -> Measurement:
    """Slope of the inverse fit converted from V/mA to ohm.

    Raises:
        DivisionByZeroError: If ``b == 0``; a zero slope means infinite
            conductance, which is reported as an error rather than ``r_o = 0``.
    """
    b = float(line.slope)
    if b == 0:
        raise DivisionByZeroError(f"Slope of '{line.label}' is zero; output resistance is degenerate.")
    return Measurement(
        name=name,
        value=float(scale * b),
        sigma=float(abs(scale * line.sigma_b)),
        unit="Ohm",
    )
