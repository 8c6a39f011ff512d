"""
Handles text-table parsing, domain filtering, and axis swapping.
"""

# Input format: one record per line, ``x y sigma_x sigma_y`` separated by
# whitespace. Extra trailing columns are ignored; lines that do not yield four
# finite numbers with non-negative errors are skipped and counted.

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .errors import MissingDataError
from .models import Dataset, MeasurementPoint
from .schema import POINT_COLUMNS

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "//")


def _split_records(lines):
    """Return the first four tokens of every candidate line and a skip count."""
    records = []
    skipped = 0
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        tokens = line.split()
        if len(tokens) < 4:
            skipped += 1
            continue
        records.append(tokens[:4])
    return records, skipped


def parse_table(lines, label: str = "", source: Optional[Path] = None) -> Dataset:
    """Parse 4-column numeric records into a :class:`Dataset`.

    Args:
        lines: Iterable of text lines.
        label (str): Dataset label.
        source (pathlib.Path, optional): File the lines came from.

    Returns:
        Dataset: Points in input order; possibly empty.
    """
    records, skipped = _split_records(lines)
    if records:
        df = pd.DataFrame.from_records(records, columns=POINT_COLUMNS.as_list())
        df = df.apply(pd.to_numeric, errors="coerce")
        values = df.to_numpy(dtype=float)
    else:
        values = np.empty((0, 4), dtype=float)

    valid = np.all(np.isfinite(values), axis=1)
    valid &= (values[:, 2] >= 0) & (values[:, 3] >= 0)
    skipped += int(np.sum(~valid))

    if skipped:
        logger.warning(
            "Skipped %d malformed line(s) while reading %s",
            skipped,
            source if source is not None else label or "table",
        )

    points = tuple(MeasurementPoint(*map(float, row)) for row in values[valid])
    return Dataset(label=label, points=points, source=source)


def load_dataset(path, label: Optional[str] = None) -> Dataset:
    """
    Load a measurement table from a whitespace-separated text file.

    Args:
        path (str or pathlib.Path): Path to the text file.
        label (str, optional): Dataset label; defaults to the file stem.

    Returns:
        Dataset: Loaded points, possibly empty.

    Raises:
        MissingDataError: If the file cannot be read.
    """
    path = Path(path)
    if label is None:
        label = path.stem
    try:
        with path.open("r", encoding="utf-8", errors="replace") as fh:
            dataset = parse_table(fh, label=label, source=path)
    except OSError as exc:
        raise MissingDataError(f"Cannot read data file '{path}': {exc}") from exc

    logger.info("Loaded %d point(s) for '%s' from %s", len(dataset), label, path)
    return dataset


def require_points(dataset: Dataset) -> Dataset:
    """Return ``dataset`` unchanged, or raise if it holds no points."""
    if dataset.is_empty:
        where = f" ({dataset.source})" if dataset.source is not None else ""
        raise MissingDataError(f"Dataset '{dataset.label}'{where} contains no valid points.")
    return dataset


def normalize_domain(domain: Tuple[float, float]) -> Tuple[float, float]:
    lo, hi = (float(v) for v in domain)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


def domain_mask(x: np.ndarray, domain: Tuple[float, float]) -> np.ndarray:
    lo, hi = normalize_domain(domain)
    x = np.asarray(x, dtype=float)
    return (x >= lo) & (x <= hi)


def filter_domain(dataset: Dataset, domain: Tuple[float, float]) -> Dataset:
    """Keep the points whose ``x`` lies in ``domain`` (inclusive), in order."""
    lo, hi = normalize_domain(domain)
    kept = tuple(p for p in dataset if lo <= p.x <= hi)
    return Dataset(label=dataset.label, points=kept, source=dataset.source)


@dataclass(frozen=True)
class SwappedDataset:
    """Result of :func:`swap_axes`: the transposed points and their extent.

    ``x_min``/``x_max`` describe the new primary coordinate and form the
    domain of the inverse fit. Both are NaN when no point was selected.
    """

    dataset: Dataset
    count: int
    x_min: float
    x_max: float

    @property
    def domain(self) -> Tuple[float, float]:
        return (self.x_min, self.x_max)


def swap_axes(
    dataset: Dataset, window: Optional[Tuple[float, float]] = None
) -> SwappedDataset:
    """Select points by primary coordinate and transpose them.

    Each point ``(x, y, sigma_x, sigma_y)`` with ``v_min <= x <= v_max``
    becomes ``(y, x, sigma_y, sigma_x)``, which lets the same fit engine
    produce ``V = a + b*I``.

    Args:
        dataset (Dataset): Source points.
        window (tuple[float, float], optional): Window on the original ``x``;
            all points are used when omitted.

    Returns:
        SwappedDataset: Transposed dataset with count and new-axis extent.
    """
    selected = dataset if window is None else filter_domain(dataset, window)
    swapped = Dataset(
        label=dataset.label,
        points=tuple(p.swapped() for p in selected),
        source=dataset.source,
    )
    if swapped.is_empty:
        return SwappedDataset(swapped, 0, float("nan"), float("nan"))

    new_x = swapped.x
    return SwappedDataset(
        dataset=swapped,
        count=len(swapped),
        x_min=float(np.min(new_x)),
        x_max=float(np.max(new_x)),
    )
