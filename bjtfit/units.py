"""Centralized unit conversion factors.

Currents are tabulated in mA and voltages in V; these factors bring derived
quantities back to SI.
"""

from __future__ import annotations

MILLI: float = 1.0e-3
KILO: float = 1.0e3


def ua_to_ma(current_ua: float) -> float:
    """Convert a base current from microampere to milliampere.

    Args:
        current_ua (float): Current in µA, as written in dataset labels.

    Returns:
        float: Current in mA, the unit of the tabulated collector currents.
    """
    return float(current_ua) * MILLI
