# SPDX-License-Identifier: Apache-2.0
"""Insertion point planning for named sections."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from .models import ColumnBand, InsertionPoint, SectionAnchor
from .section_mapper import SectionCatalogue, normalize_keyword

logger = logging.getLogger(__name__)

DEFAULT_INSERTION_POINT = InsertionPoint(x=50.0, y=700.0, column_index=0, page_index=0)


class InsertionPlanner:
    """Compute where new content for a section should start.

    New content starts just below the section heading, aligned to the
    heading's column rather than to the heading text itself, so that it
    lines up with the rest of the column.
    """

    def __init__(
        self,
        bands: Sequence[ColumnBand],
        anchors: Mapping[str, SectionAnchor],
        default_point: InsertionPoint = DEFAULT_INSERTION_POINT,
        offset_x: float = 10.0,
        vertical_gap: float = 20.0,
        catalogue: SectionCatalogue | None = None,
    ) -> None:
        """Initialize InsertionPlanner.

        Args:
            bands: Column bands of the reference page
            anchors: Normalized keyword -> anchor, from SectionMapper
            default_point: Returned when no anchor matches
            offset_x: Indent from the band's start
            vertical_gap: Distance below the heading baseline
            catalogue: Synonym source for plan_section_insertion()
        """
        self._bands = tuple(bands)
        self._anchors = anchors
        self._default_point = default_point
        self._offset_x = float(offset_x)
        self._vertical_gap = float(vertical_gap)
        self._catalogue = catalogue or SectionCatalogue()

    @property
    def default_point(self) -> InsertionPoint:
        """Fallback insertion point."""
        return self._default_point

    def find_anchor(
        self,
        section_name: str,
        aliases: Iterable[str] | None = None,
    ) -> SectionAnchor | None:
        """Look up the anchor for a section.

        Args:
            section_name: Section to look up (case-insensitive)
            aliases: Further keywords to try in order (a single string
                counts as one keyword)

        Returns:
            First anchor found, or None
        """
        if isinstance(aliases, str):
            aliases = (aliases,)
        candidates = [section_name, *(aliases or ())]
        for candidate in candidates:
            anchor = self._anchors.get(normalize_keyword(candidate))
            if anchor is not None:
                return anchor
        return None

    def plan_insertion(
        self,
        section_name: str,
        aliases: Iterable[str] | None = None,
    ) -> InsertionPoint:
        """Plan the insertion point for a section.

        Args:
            section_name: Target section (case-insensitive)
            aliases: Acceptable alternative keywords, in priority order

        Returns:
            InsertionPoint below the heading, or the default point when the
            section was not found
        """
        anchor = self.find_anchor(section_name, aliases)
        if anchor is None:
            logger.info(
                "Section %s not found, using default insertion point",
                normalize_keyword(section_name),
            )
            return self._default_point

        band = self._band_for(anchor.column_index)
        start_x = band.start_x if band is not None else anchor.x
        point = InsertionPoint(
            x=start_x + self._offset_x,
            y=anchor.y - self._vertical_gap,
            column_index=anchor.column_index,
            page_index=anchor.page_index,
        )
        logger.debug("Insertion for %s: %s", anchor.keyword, point)
        return point

    def plan_section_insertion(self, section_name: str) -> InsertionPoint:
        """Plan an insertion trying the section's catalogue synonyms."""
        aliases = self._catalogue.aliases_for(section_name)
        return self.plan_insertion(aliases[0], aliases[1:])

    def _band_for(self, column_index: int) -> ColumnBand | None:
        for band in self._bands:
            if band.index == column_index:
                return band
        # Anchors from another band set can point past the end; use column 0
        return self._bands[0] if self._bands else None
