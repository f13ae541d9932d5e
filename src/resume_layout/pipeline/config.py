# SPDX-License-Identifier: Apache-2.0
"""Layout pipeline configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from resume_layout.core.insertion_planner import DEFAULT_INSERTION_POINT
from resume_layout.core.models import InsertionPoint
from resume_layout.core.section_mapper import (
    DEFAULT_SECTION_KEYWORDS,
    DEFAULT_SECTION_SYNONYMS,
    SectionCatalogue,
)


@dataclass
class LayoutConfig:
    """Layout pipeline configuration."""

    # Column clustering
    column_gap_threshold: float = 50.0
    column_clearance: float = 10.0
    margin_left: float = 50.0
    margin_right: float = 50.0
    main_column_ratio: float = 1.5

    # Used when the page size is unknown (US Letter)
    default_page_width: float = 612.0

    # Section detection
    header_font_threshold: float = 11.0
    keywords: tuple[str, ...] = DEFAULT_SECTION_KEYWORDS
    synonyms: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_SECTION_SYNONYMS)
    )

    # Insertion planning
    default_insertion: InsertionPoint = DEFAULT_INSERTION_POINT
    insertion_offset_x: float = 10.0
    vertical_gap: float = 20.0

    # New section, placed on the last page when the target section is absent
    new_section_x: float = 50.0
    new_section_y: float = 150.0

    # Reflow
    reflow_clearance: float = 10.0
    bottom_margin: float = 50.0

    # Entry composition
    base_font_size: float = 11.0
    line_height_factor: float = 1.4
    bullet_indent: float = 15.0

    def catalogue(self) -> SectionCatalogue:
        """Build the section catalogue from keywords and synonyms."""
        return SectionCatalogue(keywords=tuple(self.keywords), synonyms=self.synonyms)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutConfig:
        """Create from a dictionary of overrides.

        Args:
            data: Field name -> value; missing fields keep their defaults

        Returns:
            LayoutConfig

        Raises:
            ValueError: If ``data`` contains unknown keys or malformed values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(data)
        try:
            if "keywords" in values:
                values["keywords"] = tuple(values["keywords"])
            if "synonyms" in values:
                values["synonyms"] = {
                    name: tuple(aliases) for name, aliases in values["synonyms"].items()
                }
            if "default_insertion" in values:
                values["default_insertion"] = InsertionPoint.from_dict(
                    values["default_insertion"]
                )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid config value: {e!r}") from e
        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Path | str) -> LayoutConfig:
        """Load overrides from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")
        return cls.from_dict(data)
