# SPDX-License-Identifier: Apache-2.0
"""Layout classification from column bands."""

from __future__ import annotations

from collections.abc import Sequence

from .models import ColumnBand, LayoutType

# A column counts as "main" when it is wider than the other by this factor
DEFAULT_MAIN_RATIO = 1.5


def classify_layout(
    bands: Sequence[ColumnBand],
    main_ratio: float = DEFAULT_MAIN_RATIO,
) -> LayoutType:
    """Map column bands to a layout type.

    Rules (in order):
    1. One band (or none) -> SINGLE_COLUMN
    2. Two bands -> the wider side is main when it exceeds the other by
       ``main_ratio``; near-equal widths default to TWO_COLUMN_LEFT_MAIN
    3. Three bands -> THREE_COLUMN
    4. More -> COMPLEX_GRID

    Args:
        bands: Column bands of the reference page
        main_ratio: Width ratio for the two-column main decision

    Returns:
        LayoutType
    """
    count = len(bands)
    if count <= 1:
        return LayoutType.SINGLE_COLUMN
    if count == 2:
        left, right = bands[0].width, bands[1].width
        if left > right * main_ratio:
            return LayoutType.TWO_COLUMN_LEFT_MAIN
        if right > left * main_ratio:
            return LayoutType.TWO_COLUMN_RIGHT_MAIN
        return LayoutType.TWO_COLUMN_LEFT_MAIN
    if count == 3:
        return LayoutType.THREE_COLUMN
    return LayoutType.COMPLEX_GRID


def main_column(bands: Sequence[ColumnBand]) -> ColumnBand | None:
    """Return the widest band (lowest index on ties), or None."""
    best: ColumnBand | None = None
    for band in bands:
        if best is None or band.width > best.width:
            best = band
    return best
