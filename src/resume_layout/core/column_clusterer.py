# SPDX-License-Identifier: Apache-2.0
"""Column detection by gap clustering of x-positions.

Text runs that start at nearby x-positions belong to the same visual
column. Sorting the x-positions and cutting wherever two neighbours are
more than ``gap_threshold`` apart yields the column starts; each band then
extends to just before the next column (or to the right margin).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .models import ColumnBand

logger = logging.getLogger(__name__)


class ColumnClusterer:
    """Group x-coordinates into ordered, non-overlapping column bands."""

    DEFAULT_GAP_THRESHOLD = 50.0
    DEFAULT_CLEARANCE = 10.0
    DEFAULT_MARGIN_LEFT = 50.0
    DEFAULT_MARGIN_RIGHT = 50.0

    def __init__(
        self,
        gap_threshold: float = DEFAULT_GAP_THRESHOLD,
        clearance: float = DEFAULT_CLEARANCE,
        margin_left: float = DEFAULT_MARGIN_LEFT,
        margin_right: float = DEFAULT_MARGIN_RIGHT,
    ) -> None:
        """Initialize ColumnClusterer.

        Args:
            gap_threshold: Minimum gap (exclusive) that starts a new column
            clearance: Space left between a band's end and the next start
            margin_left: Left edge of the fallback band for empty pages
            margin_right: Distance from the page's right edge to the last band's end
        """
        self._gap_threshold = float(gap_threshold)
        self._clearance = float(clearance)
        self._margin_left = float(margin_left)
        self._margin_right = float(margin_right)

    def column_starts(self, x_positions: Iterable[float]) -> list[float]:
        """Find column start positions.

        Args:
            x_positions: X-coordinates in any order

        Returns:
            Ascending column starts (empty for empty input)
        """
        xs = sorted(x_positions)
        if not xs:
            return []

        starts = [xs[0]]
        for prev, cur in zip(xs, xs[1:]):
            # Equal to the threshold stays in the same column
            if cur - prev > self._gap_threshold:
                starts.append(cur)
        return starts

    def cluster(
        self,
        x_positions: Iterable[float],
        page_width: float,
    ) -> list[ColumnBand]:
        """Cluster x-coordinates into column bands.

        Args:
            x_positions: X-coordinates of the runs on the reference page
            page_width: Width of the reference page

        Returns:
            Bands ordered by start_x; a single full-width band when
            ``x_positions`` is empty
        """
        right_edge = page_width - self._margin_right
        starts = self.column_starts(x_positions)

        if not starts:
            logger.debug("No runs on reference page, using full-width band")
            return [self._make_band(0, self._margin_left, right_edge, None)]

        bands: list[ColumnBand] = []
        for i, start in enumerate(starts):
            next_start = starts[i + 1] if i < len(starts) - 1 else None
            end = next_start - self._clearance if next_start is not None else right_edge
            bands.append(self._make_band(i, start, end, next_start))

        logger.debug(
            "Clustered %d columns: %s",
            len(bands),
            ", ".join(f"{b.start_x:.1f}-{b.end_x:.1f}" for b in bands),
        )
        return bands

    def _make_band(
        self,
        index: int,
        start: float,
        end: float,
        next_start: float | None,
    ) -> ColumnBand:
        if end <= start:
            # Text starting inside the right margin (or clearance wider than
            # the gap threshold) would produce an empty band. A band with a
            # successor must still end before the next start.
            if next_start is None:
                adjusted = start + max(self._clearance, 1.0)
            else:
                adjusted = (start + next_start) / 2
            logger.debug(
                "Band %d end %.1f <= start %.1f, widened to %.1f",
                index,
                end,
                start,
                adjusted,
            )
            end = adjusted
        return ColumnBand(index=index, start_x=start, end_x=end)


def find_column_index(bands: Sequence[ColumnBand], x: float) -> int:
    """Return the index of the first band containing ``x``.

    Args:
        bands: Column bands
        x: X-coordinate to look up

    Returns:
        Band index, or 0 when no band contains ``x``
    """
    for band in bands:
        if band.contains(x):
            return band.index
    return 0
