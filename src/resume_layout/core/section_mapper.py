# SPDX-License-Identifier: Apache-2.0
"""Section heading detection.

A run is treated as a section heading when its normalized text contains a
catalogue keyword and its font size is above the header threshold. The
result is an immutable keyword -> anchor mapping computed from scratch on
every scan; anchors are never patched after an insertion.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from .column_clusterer import find_column_index
from .models import ColumnBand, SectionAnchor, TextRun

logger = logging.getLogger(__name__)

DEFAULT_SECTION_KEYWORDS: tuple[str, ...] = (
    "EXPERIENCE",
    "EDUCATION",
    "SKILLS",
    "CERTIFICATIONS",
    "PROJECTS",
    "WORK EXPERIENCE",
    "TECHNICAL SKILLS",
    "SUMMARY",
    "OBJECTIVE",
    "ACHIEVEMENTS",
    "CERTIFICATES",
)

# Section name -> keywords accepted for it, in lookup order
DEFAULT_SECTION_SYNONYMS: dict[str, tuple[str, ...]] = {
    "EXPERIENCE": ("EXPERIENCE", "WORK EXPERIENCE"),
    "SKILLS": ("SKILLS", "TECHNICAL SKILLS"),
    "CERTIFICATIONS": ("CERTIFICATIONS", "CERTIFICATES"),
}

DEFAULT_HEADER_FONT_THRESHOLD = 11.0


def normalize_keyword(text: str) -> str:
    """Trim and uppercase a keyword or run text."""
    return text.strip().upper()


@dataclass(frozen=True)
class SectionCatalogue:
    """Recognized section keywords and their synonym groups.

    Keywords are matched in catalogue order; the first keyword contained in
    a run's text is the one recorded for that run.
    """

    keywords: tuple[str, ...] = DEFAULT_SECTION_KEYWORDS
    synonyms: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_SECTION_SYNONYMS)
    )

    def __post_init__(self) -> None:
        keywords = tuple(
            dict.fromkeys(
                normalize_keyword(k) for k in self.keywords if k and k.strip()
            )
        )
        synonyms = {
            normalize_keyword(name): tuple(normalize_keyword(a) for a in aliases)
            for name, aliases in self.synonyms.items()
        }
        object.__setattr__(self, "keywords", keywords)
        object.__setattr__(self, "synonyms", MappingProxyType(synonyms))

    def match(self, text: str) -> str | None:
        """Return the first keyword contained in ``text``, or None."""
        normalized = normalize_keyword(text)
        for keyword in self.keywords:
            if keyword in normalized:
                return keyword
        return None

    def aliases_for(self, section_name: str) -> tuple[str, ...]:
        """Keywords to try, in order, when looking up ``section_name``.

        The section itself always comes first, followed by the rest of any
        synonym group it belongs to.
        """
        name = normalize_keyword(section_name)
        group = self.synonyms.get(name)
        if group is None:
            for aliases in self.synonyms.values():
                if name in aliases:
                    group = aliases
                    break
        if group is None:
            return (name,)
        return (name,) + tuple(a for a in group if a != name)


class SectionMapper:
    """Map heading runs to section anchors."""

    def __init__(
        self,
        catalogue: SectionCatalogue | None = None,
        header_font_threshold: float = DEFAULT_HEADER_FONT_THRESHOLD,
    ) -> None:
        """Initialize SectionMapper.

        Args:
            catalogue: Keyword catalogue (default: resume sections)
            header_font_threshold: Font size a heading must exceed
        """
        self._catalogue = catalogue or SectionCatalogue()
        self._header_font_threshold = float(header_font_threshold)

    @property
    def catalogue(self) -> SectionCatalogue:
        """Keyword catalogue in use."""
        return self._catalogue

    def match_run(self, run: TextRun) -> str | None:
        """Return the keyword a run is a heading for, or None."""
        if run.font_size <= self._header_font_threshold:
            return None
        return self._catalogue.match(run.text)

    def map_sections(
        self,
        runs: Iterable[TextRun],
        bands: Sequence[ColumnBand],
    ) -> Mapping[str, SectionAnchor]:
        """Scan runs for section headings.

        Args:
            runs: Runs in document order
            bands: Column bands used to resolve each heading's column

        Returns:
            Read-only mapping of normalized keyword -> anchor. When a
            keyword recurs, the last matching run wins.
        """
        anchors: dict[str, SectionAnchor] = {}
        for run in runs:
            keyword = self.match_run(run)
            if keyword is None:
                continue
            anchor = SectionAnchor(
                keyword=keyword,
                x=run.x,
                y=run.y,
                column_index=find_column_index(bands, run.x),
                page_index=run.page_index,
            )
            if keyword in anchors:
                logger.debug(
                    "Keyword %s recurs on page %d, replacing earlier anchor",
                    keyword,
                    run.page_index,
                )
            anchors[keyword] = anchor
            logger.debug(
                "Heading %r -> %s (page %d, column %d)",
                run.text,
                keyword,
                anchor.page_index,
                anchor.column_index,
            )
        return MappingProxyType(anchors)

    def map_page(
        self,
        runs: Iterable[TextRun],
        bands: Sequence[ColumnBand],
        page_index: int,
    ) -> Mapping[str, SectionAnchor]:
        """Scan only the runs on one page; combine with merge_anchor_maps()."""
        return self.map_sections(
            (run for run in runs if run.page_index == page_index), bands
        )


def merge_anchor_maps(
    page_maps: Mapping[int, Mapping[str, SectionAnchor]],
) -> Mapping[str, SectionAnchor]:
    """Merge per-page anchor maps in ascending page order.

    Pages scanned independently (possibly in parallel) merge to the same
    result as a sequential scan of the document, whatever order the page
    results arrived in.

    Args:
        page_maps: Page index -> anchors found on that page

    Returns:
        Read-only merged mapping; later pages overwrite earlier ones
    """
    merged: dict[str, SectionAnchor] = {}
    for page_index in sorted(page_maps):
        merged.update(page_maps[page_index])
    return MappingProxyType(merged)
