# SPDX-License-Identifier: Apache-2.0
"""Layout pipeline package."""

from resume_layout.core.errors import (
    ExtractionError,
    InvalidGeometryError,
    LayoutAnalysisError,
    LayoutError,
    ReflowOverflowError,
)

from .config import LayoutConfig
from .layout_pipeline import BatchResult, EntryPlan, LayoutPipeline
from .modifications import ModificationSet
from .progress import AnalysisStage, ProgressCallback

__all__ = [
    "AnalysisStage",
    "BatchResult",
    "EntryPlan",
    "ExtractionError",
    "InvalidGeometryError",
    "LayoutAnalysisError",
    "LayoutConfig",
    "LayoutError",
    "LayoutPipeline",
    "ModificationSet",
    "ProgressCallback",
    "ReflowOverflowError",
]
