# SPDX-License-Identifier: Apache-2.0
"""Progress reporting for the layout pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class AnalysisStage(str, Enum):
    """Stages reported while analyzing a document."""

    EXTRACT = "extract"
    VALIDATE = "validate"
    COLUMNS = "columns"
    SECTIONS = "sections"


@runtime_checkable
class ProgressCallback(Protocol):
    """Called once per finished stage with (stage, current, total, message)."""

    def __call__(
        self,
        stage: str,
        current: int,
        total: int,
        message: str = "",
    ) -> None: ...
