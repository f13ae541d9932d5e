# SPDX-License-Identifier: Apache-2.0
"""Error definitions.

Absence of a section, an empty page or a point outside every column are
not errors; they resolve to documented defaults. Only invalid geometry,
extraction failures and forced application of an overflowing reflow are
surfaced as exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ReflowPlan, TextRun


class LayoutError(Exception):
    """Base exception for layout analysis errors."""

    def __init__(
        self,
        message: str,
        stage: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.cause = cause


class ExtractionError(LayoutError):
    """Text run extraction error."""


class LayoutAnalysisError(LayoutError):
    """Layout analysis error."""


class InvalidGeometryError(LayoutAnalysisError):
    """A run has NaN/negative coordinates or a non-positive font size."""

    def __init__(self, run: TextRun, reason: str) -> None:
        super().__init__(f"Invalid run {run.text!r}: {reason}", stage="validate")
        self.run = run
        self.reason = reason


class ReflowOverflowError(LayoutError):
    """Applying a reflow plan would push content below the bottom margin."""

    def __init__(self, plan: ReflowPlan, overflow_count: int) -> None:
        super().__init__(
            f"Reflow on page {plan.page_index} pushes {overflow_count} run(s) "
            f"below the bottom margin ({plan.bottom_margin:g})",
            stage="reflow",
        )
        self.plan = plan
