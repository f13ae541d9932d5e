# SPDX-License-Identifier: Apache-2.0
"""Data models for layout detection and section-anchored insertion.

All values are immutable once produced: a document scan yields text runs,
column bands, a layout type and section anchors, and planning operations
yield insertion points and reflow plans. Coordinates follow the PDF
convention (origin at bottom-left, y decreases downward on the page).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class LayoutType(str, Enum):
    """Coarse classification of a page's column structure."""

    SINGLE_COLUMN = "single_column"
    TWO_COLUMN_LEFT_MAIN = "two_column_left_main"
    TWO_COLUMN_RIGHT_MAIN = "two_column_right_main"
    THREE_COLUMN = "three_column"
    COMPLEX_GRID = "complex_grid"

    @property
    def is_two_column(self) -> bool:
        """Whether this is one of the two-column layouts."""
        return self in (
            LayoutType.TWO_COLUMN_LEFT_MAIN,
            LayoutType.TWO_COLUMN_RIGHT_MAIN,
        )


@dataclass(frozen=True)
class TextRun:
    """A piece of text reported by the extraction collaborator.

    Attributes:
        text: Text content of the run
        x: Baseline origin X coordinate
        y: Baseline origin Y coordinate
        font_size: Font size in points
        page_index: Page number (0-indexed)
    """

    text: str
    x: float
    y: float
    font_size: float
    page_index: int = 0

    def shifted(self, delta_y: float) -> TextRun:
        """Return a copy moved downward by ``delta_y``."""
        return replace(self, y=self.y - delta_y)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "font_size": self.font_size,
            "page_index": self.page_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextRun:
        """Create from dictionary."""
        return cls(
            text=str(data["text"]),
            x=float(data["x"]),
            y=float(data["y"]),
            font_size=float(data["font_size"]),
            page_index=int(data.get("page_index", 0)),
        )


@dataclass(frozen=True)
class ColumnBand:
    """A horizontal x-range on a page treated as one visual column.

    Attributes:
        index: Position of the band, left to right
        start_x: Left edge
        end_x: Right edge (always greater than start_x)
    """

    index: int
    start_x: float
    end_x: float

    @property
    def width(self) -> float:
        """Width of the band."""
        return self.end_x - self.start_x

    def contains(self, x: float) -> bool:
        """Check whether ``x`` falls inside the band (edges inclusive)."""
        return self.start_x <= x <= self.end_x

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"index": self.index, "start_x": self.start_x, "end_x": self.end_x}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ColumnBand:
        """Create from dictionary."""
        return cls(
            index=int(data["index"]),
            start_x=float(data["start_x"]),
            end_x=float(data["end_x"]),
        )


@dataclass(frozen=True)
class SectionAnchor:
    """Recorded position of a detected section heading.

    Attributes:
        keyword: Normalized (stripped, uppercased) catalogue keyword
        x: X coordinate of the heading run
        y: Y coordinate of the heading run
        column_index: Index of the band containing the heading
        page_index: Page number (0-indexed)
    """

    keyword: str
    x: float
    y: float
    column_index: int
    page_index: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "keyword": self.keyword,
            "x": self.x,
            "y": self.y,
            "column_index": self.column_index,
            "page_index": self.page_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SectionAnchor:
        """Create from dictionary."""
        return cls(
            keyword=str(data["keyword"]),
            x=float(data["x"]),
            y=float(data["y"]),
            column_index=int(data.get("column_index", 0)),
            page_index=int(data.get("page_index", 0)),
        )


@dataclass(frozen=True)
class InsertionPoint:
    """Coordinate, column and page where new content should begin."""

    x: float
    y: float
    column_index: int = 0
    page_index: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "column_index": self.column_index,
            "page_index": self.page_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InsertionPoint:
        """Create from dictionary."""
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            column_index=int(data.get("column_index", 0)),
            page_index=int(data.get("page_index", 0)),
        )


@dataclass(frozen=True)
class ReflowPlan:
    """Instructions to shift existing content below an insertion.

    Every run on ``page_index`` at or below ``threshold_y`` moves down by
    ``delta_y``. A plan flagged ``overflow`` would push at least one run
    past the page's bottom margin and must not be applied blindly.

    Attributes:
        page_index: Page the plan applies to
        threshold_y: Runs with y <= threshold_y are affected
        delta_y: Downward shift distance (>= 0)
        affected_runs: Affected runs in input order
        overflow: Whether a shifted run lands below bottom_margin
        bottom_margin: Bottom margin the plan was checked against
    """

    page_index: int
    threshold_y: float
    delta_y: float
    affected_runs: tuple[TextRun, ...] = ()
    overflow: bool = False
    bottom_margin: float = 50.0

    @property
    def is_noop(self) -> bool:
        """True when applying the plan would move nothing."""
        return self.delta_y == 0 or not self.affected_runs

    def shifted_runs(self) -> list[TextRun]:
        """Affected runs with the shift applied."""
        return [run.shifted(self.delta_y) for run in self.affected_runs]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "page_index": self.page_index,
            "threshold_y": self.threshold_y,
            "delta_y": self.delta_y,
            "affected_runs": [run.to_dict() for run in self.affected_runs],
            "overflow": self.overflow,
            "bottom_margin": self.bottom_margin,
        }


@dataclass(frozen=True)
class RunIssue:
    """A run excluded from analysis because its geometry is invalid."""

    run: TextRun
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"run": self.run.to_dict(), "reason": self.reason}


def validate_run(run: TextRun) -> str | None:
    """Check a run's geometry.

    Args:
        run: Run to check

    Returns:
        Reason string if the run is invalid, None otherwise
    """
    for name, value in (("x", run.x), ("y", run.y)):
        if math.isnan(value) or math.isinf(value):
            return f"{name} is not finite"
        if value < 0:
            return f"{name} is negative"
    if not math.isfinite(run.font_size) or run.font_size <= 0:
        return "font size must be positive"
    if run.page_index < 0:
        return "page index is negative"
    return None


@dataclass(frozen=True)
class LayoutAnalysis:
    """Result of one document scan.

    Attributes:
        page_width: Width of the reference page
        bands: Column bands of the reference page (page index 0)
        layout_type: Classification of ``bands``
        anchors: Normalized keyword -> SectionAnchor
        runs: Runs that passed validation, in input order
        issues: Runs excluded by validation
    """

    page_width: float
    bands: tuple[ColumnBand, ...]
    layout_type: LayoutType
    anchors: Mapping[str, SectionAnchor] = field(
        default_factory=lambda: MappingProxyType({})
    )
    runs: tuple[TextRun, ...] = ()
    issues: tuple[RunIssue, ...] = ()

    @property
    def column_count(self) -> int:
        """Number of detected columns."""
        return len(self.bands)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (runs omitted)."""
        return {
            "page_width": self.page_width,
            "layout_type": self.layout_type.value,
            "bands": [band.to_dict() for band in self.bands],
            "anchors": {key: anchor.to_dict() for key, anchor in self.anchors.items()},
            "issues": [issue.to_dict() for issue in self.issues],
        }
