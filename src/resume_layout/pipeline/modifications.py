# SPDX-License-Identifier: Apache-2.0
"""Batch of content additions applied to one document."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from resume_layout.core.text_layout import ExperienceEntry

DEFAULT_EXPERIENCE_SECTION = "EXPERIENCE"
DEFAULT_CERTIFICATION_SECTION = "CERTIFICATIONS"


@dataclass(frozen=True)
class ModificationSet:
    """Entries and certifications to add, in application order.

    Attributes:
        experiences: Experience entries, added first
        certifications: Certification texts, added after the experiences
        experience_section: Section receiving the experiences
        certification_section: Section receiving the certifications
    """

    experiences: tuple[ExperienceEntry, ...] = ()
    certifications: tuple[str, ...] = ()
    experience_section: str = DEFAULT_EXPERIENCE_SECTION
    certification_section: str = DEFAULT_CERTIFICATION_SECTION

    @property
    def is_empty(self) -> bool:
        """Whether there is nothing to add."""
        return not self.experiences and not self.certifications

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "experiences": [
                {
                    "title": e.title,
                    "company": e.company,
                    "duration": e.duration,
                    "bullets": list(e.bullets),
                }
                for e in self.experiences
            ],
            "certifications": list(self.certifications),
            "experience_section": self.experience_section,
            "certification_section": self.certification_section,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModificationSet:
        """Create from dictionary.

        Raises:
            ValueError: If ``data`` has unknown keys or malformed values
        """
        known = {
            "experiences",
            "certifications",
            "experience_section",
            "certification_section",
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown modification keys: {', '.join(unknown)}")

        try:
            experiences = tuple(
                ExperienceEntry.from_dict(item) for item in data.get("experiences", [])
            )
            certifications = tuple(str(c) for c in data.get("certifications", []))
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid modification value: {e!r}") from e

        return cls(
            experiences=experiences,
            certifications=certifications,
            experience_section=str(
                data.get("experience_section", DEFAULT_EXPERIENCE_SECTION)
            ),
            certification_section=str(
                data.get("certification_section", DEFAULT_CERTIFICATION_SECTION)
            ),
        )

    @classmethod
    def from_json_file(cls, path: Path | str) -> ModificationSet:
        """Load a modification set from a JSON object file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Modifications file must contain a JSON object: {path}")
        return cls.from_dict(data)
