# SPDX-License-Identifier: Apache-2.0
"""Core layout detection and insertion planning modules."""

from .column_clusterer import ColumnClusterer, find_column_index
from .errors import (
    ExtractionError,
    InvalidGeometryError,
    LayoutAnalysisError,
    LayoutError,
    ReflowOverflowError,
)
from .insertion_planner import DEFAULT_INSERTION_POINT, InsertionPlanner
from .layout_classifier import classify_layout, main_column
from .models import (
    ColumnBand,
    InsertionPoint,
    LayoutAnalysis,
    LayoutType,
    ReflowPlan,
    RunIssue,
    SectionAnchor,
    TextRun,
    validate_run,
)
from .pdf_extractor import PDFTextRunExtractor, PdfiumTextMeasurer
from .reflow_engine import ReflowEngine, apply_reflow, overflow_runs
from .section_mapper import (
    SectionCatalogue,
    SectionMapper,
    merge_anchor_maps,
    normalize_keyword,
)
from .text_layout import (
    ComposedEntry,
    ComposedLine,
    EntryComposer,
    ExperienceEntry,
    TextMeasurer,
)

__all__ = [
    "ColumnBand",
    "ColumnClusterer",
    "ComposedEntry",
    "ComposedLine",
    "DEFAULT_INSERTION_POINT",
    "EntryComposer",
    "ExperienceEntry",
    "ExtractionError",
    "InsertionPlanner",
    "InsertionPoint",
    "InvalidGeometryError",
    "LayoutAnalysis",
    "LayoutAnalysisError",
    "LayoutError",
    "LayoutType",
    "PDFTextRunExtractor",
    "PdfiumTextMeasurer",
    "ReflowEngine",
    "ReflowOverflowError",
    "ReflowPlan",
    "RunIssue",
    "SectionAnchor",
    "SectionCatalogue",
    "SectionMapper",
    "TextMeasurer",
    "TextRun",
    "apply_reflow",
    "classify_layout",
    "find_column_index",
    "main_column",
    "merge_anchor_maps",
    "normalize_keyword",
    "overflow_runs",
    "validate_run",
]
