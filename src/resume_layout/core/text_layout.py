# SPDX-License-Identifier: Apache-2.0
"""Layout of new entries at an insertion point.

This module lays out the lines of a new entry (title, subtitle and
bulleted responsibilities) below an insertion point:
- Word wrapping against a column width
- Line positions going down the page
- Total vertical extent, which is the height handed to the ReflowEngine

Glyph metrics come from an external ``TextMeasurer``; the composer never
touches font objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Protocol, runtime_checkable

from .models import InsertionPoint, TextRun


@runtime_checkable
class TextMeasurer(Protocol):
    """Measures rendered string width at a given font size."""

    def measure(self, text: str, font_size: float) -> float: ...


@dataclass(frozen=True)
class ExperienceEntry:
    """A new experience entry.

    Attributes:
        title: Job title (bold line)
        company: Company name
        duration: Period, e.g. "Jan 2024 - Present"
        bullets: Responsibilities, one bullet each
    """

    title: str
    company: str
    duration: str
    bullets: tuple[str, ...] = ()

    @property
    def subtitle(self) -> str:
        """Company and duration line."""
        return f"{self.company} | {self.duration}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExperienceEntry:
        """Create from dictionary."""
        return cls(
            title=str(data["title"]),
            company=str(data.get("company", "")),
            duration=str(data.get("duration", "")),
            bullets=tuple(str(b) for b in data.get("bullets", [])),
        )


@dataclass(frozen=True)
class ComposedLine:
    """A single positioned line of new content."""

    text: str
    x: float
    y: float
    font_size: float
    bold: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "font_size": self.font_size,
            "bold": self.bold,
        }


@dataclass(frozen=True)
class ComposedEntry:
    """Positioned lines of an entry and their vertical extent."""

    point: InsertionPoint
    lines: tuple[ComposedLine, ...] = field(default_factory=tuple)
    height: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "point": self.point.to_dict(),
            "lines": [line.to_dict() for line in self.lines],
            "height": self.height,
        }

    def to_runs(self) -> list[TextRun]:
        """Lines as text runs on the entry's page."""
        return [
            TextRun(line.text, line.x, line.y, line.font_size, self.point.page_index)
            for line in self.lines
        ]


class EntryComposer:
    """Lay out entries line by line below an insertion point."""

    def __init__(
        self,
        measurer: TextMeasurer,
        base_font_size: float = 11.0,
        line_height_factor: float = 1.4,
        bullet_indent: float = 15.0,
        bullet: str = "•",
        wrap_factor: float = 0.9,
    ) -> None:
        """Initialize EntryComposer.

        Args:
            measurer: Width measurement capability.
            base_font_size: Body font size in points.
            line_height_factor: Line advance as a multiple of base_font_size.
            bullet_indent: Indent of bullet lines from the entry's x.
            bullet: Bullet glyph prefixed to the first line of each bullet.
            wrap_factor: Line advance multiplier for bullet lines.
        """
        self._measurer = measurer
        self._base_font_size = float(base_font_size)
        self._line_height = self._base_font_size * line_height_factor
        self._bullet_indent = float(bullet_indent)
        self._bullet = bullet
        self._wrap_factor = float(wrap_factor)

    @property
    def line_height(self) -> float:
        """Line advance in points."""
        return self._line_height

    def wrap_text(self, text: str, font_size: float, max_width: float) -> list[str]:
        """Greedy word wrap.

        Args:
            text: Text to wrap.
            font_size: Font size in points.
            max_width: Maximum line width in points.

        Returns:
            Lines; a single word wider than ``max_width`` gets its own line.
        """
        lines: list[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}" if current else word
            if current and self._measurer.measure(candidate, font_size) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def compose_entry(
        self,
        entry: ExperienceEntry,
        point: InsertionPoint,
        max_width: float,
    ) -> ComposedEntry:
        """Lay out an experience entry.

        Args:
            entry: Entry to lay out.
            point: Where the first line's baseline goes.
            max_width: Width available in the target column.

        Returns:
            ComposedEntry with positioned lines and total height.
        """
        lines: list[ComposedLine] = []
        y = point.y

        lines.append(
            ComposedLine(entry.title, point.x, y, self._base_font_size + 1, bold=True)
        )
        y -= self._line_height

        body_size = self._base_font_size - 0.5
        lines.append(ComposedLine(entry.subtitle, point.x, y, body_size))
        y -= self._line_height

        bullet_x = point.x + self._bullet_indent
        wrap_width = max_width - self._bullet_indent - 10
        for bullet in entry.bullets:
            for i, text in enumerate(self.wrap_text(bullet, body_size, wrap_width)):
                prefix = f"{self._bullet} " if i == 0 else "  "
                lines.append(ComposedLine(prefix + text, bullet_x, y, body_size))
                y -= self._line_height * self._wrap_factor

        return ComposedEntry(point=point, lines=tuple(lines), height=point.y - y)

    def compose_lines(
        self,
        items: list[str],
        point: InsertionPoint,
        max_width: float,
        font_size: float | None = None,
    ) -> ComposedEntry:
        """Lay out standalone bullet items, e.g. certifications.

        Args:
            items: Bullet texts.
            point: Where the first line's baseline goes.
            max_width: Width available in the target column.
            font_size: Font size (default: base size - 0.5).

        Returns:
            ComposedEntry with positioned lines and total height.
        """
        size = font_size if font_size is not None else self._base_font_size - 0.5
        lines: list[ComposedLine] = []
        y = point.y
        for item in items:
            for i, text in enumerate(self.wrap_text(item, size, max_width - 10)):
                prefix = f"{self._bullet} " if i == 0 else "  "
                lines.append(ComposedLine(prefix + text, point.x, y, size))
                y -= self._line_height
        return ComposedEntry(point=point, lines=tuple(lines), height=point.y - y)

    def compose_section(
        self,
        heading: str,
        items: list[str],
        point: InsertionPoint,
        max_width: float,
    ) -> ComposedEntry:
        """Lay out a new section: a bold heading followed by bullet items.

        The heading is two points above the base size. Items start 1.5 base
        sizes below the heading baseline, indented like entry bullets.
        """
        heading_line = ComposedLine(
            heading, point.x, point.y, self._base_font_size + 2, bold=True
        )
        items_point = replace(
            point,
            x=point.x + self._bullet_indent,
            y=point.y - self._base_font_size * 1.5,
        )
        body = self.compose_lines(items, items_point, max_width - self._bullet_indent)
        return ComposedEntry(
            point=point,
            lines=(heading_line, *body.lines),
            height=point.y - items_point.y + body.height,
        )
