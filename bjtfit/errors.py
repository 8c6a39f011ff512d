"""Exception taxonomy for loading, fitting, and derived-quantity failures.

Every error subclasses ``ValueError`` so callers that already guard numerical
input with ``except ValueError`` keep working.
"""

from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for all analysis failures."""


class MissingDataError(AnalysisError):
    """A data file is unreadable or yields zero points."""


class InsufficientPointsError(AnalysisError):
    """Fewer than two points fall inside a fit domain."""

    def __init__(self, n_points: int, domain: tuple[float, float], label: str = ""):
        self.n_points = int(n_points)
        self.domain = domain
        self.label = label
        where = f" for '{label}'" if label else ""
        super().__init__(
            f"Need at least 2 points in [{domain[0]:g}, {domain[1]:g}]{where}, "
            f"found {self.n_points}."
        )


class SingularFitError(AnalysisError):
    """The weighted normal-equations matrix cannot be inverted."""


class DivisionByZeroError(AnalysisError, ZeroDivisionError):
    """A derived quantity would divide by a zero fit parameter."""
