# SPDX-License-Identifier: Apache-2.0
"""Layout pipeline implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from resume_layout.core.column_clusterer import ColumnClusterer, find_column_index
from resume_layout.core.errors import ExtractionError, InvalidGeometryError
from resume_layout.core.insertion_planner import InsertionPlanner
from resume_layout.core.layout_classifier import classify_layout, main_column
from resume_layout.core.models import (
    ColumnBand,
    InsertionPoint,
    LayoutAnalysis,
    ReflowPlan,
    RunIssue,
    TextRun,
    validate_run,
)
from resume_layout.core.pdf_extractor import PDFTextRunExtractor
from resume_layout.core.reflow_engine import ReflowEngine, apply_reflow
from resume_layout.core.section_mapper import SectionMapper, normalize_keyword
from resume_layout.core.text_layout import (
    ComposedEntry,
    EntryComposer,
    ExperienceEntry,
    TextMeasurer,
)
from resume_layout.pipeline.config import LayoutConfig
from resume_layout.pipeline.modifications import ModificationSet
from resume_layout.pipeline.progress import AnalysisStage, ProgressCallback

logger = logging.getLogger(__name__)

# Bands and layout type are derived from this page only
REFERENCE_PAGE = 0


@dataclass(frozen=True)
class EntryPlan:
    """Everything a content writer needs to insert one entry."""

    section: str
    point: InsertionPoint
    entry: ComposedEntry
    reflow: ReflowPlan
    created_section: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "section": self.section,
            "point": self.point.to_dict(),
            "entry": self.entry.to_dict(),
            "reflow": self.reflow.to_dict(),
            "created_section": self.created_section,
        }


@dataclass(frozen=True)
class BatchResult:
    """Plans applied by apply_modifications() and the final analysis."""

    plans: tuple[EntryPlan, ...]
    analysis: LayoutAnalysis

    @property
    def runs(self) -> tuple[TextRun, ...]:
        """Runs of the modified document."""
        return self.analysis.runs

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "plans": [plan.to_dict() for plan in self.plans],
            "analysis": self.analysis.to_dict(),
        }


class LayoutPipeline:
    """Document layout analysis and insertion planning pipeline.

    The pipeline is stateless between calls: ``analyze()`` returns an
    immutable LayoutAnalysis and every planning method takes one. After an
    insertion has been applied, analyze the updated runs again before
    planning the next one.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        progress_callback: ProgressCallback | None = None,
        strict: bool = False,
    ) -> None:
        """Initialize LayoutPipeline.

        Args:
            config: Pipeline configuration (default: LayoutConfig())
            progress_callback: Called after each analysis stage
            strict: Raise InvalidGeometryError on the first invalid run
                instead of excluding it
        """
        self._config = config or LayoutConfig()
        self._progress_callback = progress_callback
        self._strict = strict
        self._catalogue = self._config.catalogue()
        self._clusterer = ColumnClusterer(
            gap_threshold=self._config.column_gap_threshold,
            clearance=self._config.column_clearance,
            margin_left=self._config.margin_left,
            margin_right=self._config.margin_right,
        )
        self._mapper = SectionMapper(
            catalogue=self._catalogue,
            header_font_threshold=self._config.header_font_threshold,
        )

    @property
    def config(self) -> LayoutConfig:
        """Pipeline configuration."""
        return self._config

    def analyze(
        self,
        runs: Iterable[TextRun],
        page_width: float | None = None,
    ) -> LayoutAnalysis:
        """Analyze a document's text runs.

        Args:
            runs: Runs in document order (never reordered)
            page_width: Width of the reference page (default from config)

        Returns:
            LayoutAnalysis

        Raises:
            InvalidGeometryError: In strict mode, for the first invalid run
        """
        width = page_width if page_width is not None else self._config.default_page_width

        valid, issues = self._validate(list(runs))
        self._notify(
            AnalysisStage.VALIDATE, 1, 3, f"{len(valid)} valid, {len(issues)} excluded"
        )

        xs = [run.x for run in valid if run.page_index == REFERENCE_PAGE]
        bands = self._clusterer.cluster(xs, width)
        layout_type = classify_layout(bands, self._config.main_column_ratio)
        self._notify(AnalysisStage.COLUMNS, 2, 3, f"{len(bands)} column(s)")

        anchors = self._mapper.map_sections(valid, bands)
        self._notify(AnalysisStage.SECTIONS, 3, 3, f"{len(anchors)} section(s)")

        logger.info(
            "Detected layout: %s (%d columns, %d sections)",
            layout_type.value,
            len(bands),
            len(anchors),
        )
        return LayoutAnalysis(
            page_width=width,
            bands=tuple(bands),
            layout_type=layout_type,
            anchors=anchors,
            runs=tuple(valid),
            issues=tuple(issues),
        )

    def analyze_pdf(self, pdf_source: Path | str | bytes) -> LayoutAnalysis:
        """Extract runs from a PDF and analyze them.

        Args:
            pdf_source: Path to PDF file or PDF bytes

        Returns:
            LayoutAnalysis

        Raises:
            FileNotFoundError: If the file path doesn't exist
            ExtractionError: If the PDF cannot be read
        """
        try:
            with PDFTextRunExtractor(pdf_source) as extractor:
                page_width = (
                    extractor.page_size(REFERENCE_PAGE)[0]
                    if extractor.page_count > 0
                    else None
                )
                runs = extractor.extract_runs()
        except (FileNotFoundError, ExtractionError):
            raise
        except Exception as e:
            raise ExtractionError(
                f"Text extraction failed: {e}", stage="extract", cause=e
            ) from e

        self._notify(AnalysisStage.EXTRACT, 0, 3, f"{len(runs)} run(s)")
        return self.analyze(runs, page_width)

    def insertion_planner(self, analysis: LayoutAnalysis) -> InsertionPlanner:
        """Create an InsertionPlanner for an analysis."""
        return InsertionPlanner(
            bands=analysis.bands,
            anchors=analysis.anchors,
            default_point=self._config.default_insertion,
            offset_x=self._config.insertion_offset_x,
            vertical_gap=self._config.vertical_gap,
            catalogue=self._catalogue,
        )

    def plan_insertion(
        self,
        analysis: LayoutAnalysis,
        section_name: str,
        aliases: Sequence[str] | None = None,
    ) -> InsertionPoint:
        """Plan where content for a section starts.

        Args:
            analysis: Result of analyze()
            section_name: Target section
            aliases: Alternative keywords; when None, the catalogue's
                synonym group for the section is used

        Returns:
            InsertionPoint (the configured default if the section is absent)
        """
        planner = self.insertion_planner(analysis)
        if aliases is None:
            return planner.plan_section_insertion(section_name)
        return planner.plan_insertion(section_name, aliases)

    def plan_reflow(
        self,
        analysis: LayoutAnalysis,
        page_index: int,
        inserted_height: float,
        from_y: float,
    ) -> ReflowPlan:
        """Plan the shift of runs below an insertion."""
        engine = ReflowEngine(
            analysis.runs,
            clearance=self._config.reflow_clearance,
            bottom_margin=self._config.bottom_margin,
        )
        return engine.plan_reflow(page_index, inserted_height, from_y)

    def plan_entry(
        self,
        analysis: LayoutAnalysis,
        section_name: str,
        entry: ExperienceEntry,
        measurer: TextMeasurer,
    ) -> EntryPlan:
        """Plan insertion, layout and reflow for a new entry.

        Args:
            analysis: Result of analyze()
            section_name: Target section (synonyms from the catalogue apply)
            entry: Entry to insert
            measurer: Width measurement capability

        Returns:
            EntryPlan; check ``reflow.overflow`` before applying
        """
        point = self.plan_insertion(analysis, section_name)
        composer = self._composer(measurer)
        composed = composer.compose_entry(entry, point, self.available_width(analysis, point))
        reflow = self.plan_reflow(analysis, point.page_index, composed.height, point.y)
        return EntryPlan(
            section=normalize_keyword(section_name),
            point=point,
            entry=composed,
            reflow=reflow,
        )

    def plan_certification(
        self,
        analysis: LayoutAnalysis,
        text: str,
        measurer: TextMeasurer,
        section_name: str = "CERTIFICATIONS",
    ) -> EntryPlan:
        """Plan insertion, layout and reflow for a certification bullet.

        The section is looked up through its catalogue synonyms
        (CERTIFICATIONS, then CERTIFICATES). When no heading exists, a new
        section (heading plus bullet) is planned at the configured new
        section position on the last page.

        Args:
            analysis: Result of analyze()
            text: Certification text
            measurer: Width measurement capability
            section_name: Target section

        Returns:
            EntryPlan; ``created_section`` tells whether a heading is added
        """
        composer = self._composer(measurer)
        planner = self.insertion_planner(analysis)
        aliases = self._catalogue.aliases_for(section_name)
        section = normalize_keyword(section_name)

        if planner.find_anchor(aliases[0], aliases[1:]) is None:
            point = self._new_section_point(analysis)
            logger.info(
                "Section %s not found, creating it on page %d at y=%.1f",
                section,
                point.page_index,
                point.y,
            )
            composed = composer.compose_section(
                section, [text], point, self.available_width(analysis, point)
            )
            created = True
        else:
            point = planner.plan_insertion(aliases[0], aliases[1:])
            composed = composer.compose_lines(
                [text], point, self.available_width(analysis, point)
            )
            created = False

        reflow = self.plan_reflow(analysis, point.page_index, composed.height, point.y)
        return EntryPlan(
            section=section,
            point=point,
            entry=composed,
            reflow=reflow,
            created_section=created,
        )

    def apply_plan(
        self,
        analysis: LayoutAnalysis,
        plan: EntryPlan,
        force: bool = False,
    ) -> LayoutAnalysis:
        """Apply a plan to the analyzed runs and analyze the result again.

        The plan's reflow is applied to the existing runs and the composed
        lines are added as new runs, so the returned analysis reflects the
        inserted content (including any new heading).

        Args:
            analysis: Analysis the plan was made from
            plan: Plan from plan_entry() or plan_certification()
            force: Apply even if the reflow overflows

        Returns:
            Fresh LayoutAnalysis of the modified runs

        Raises:
            ReflowOverflowError: If the reflow overflows and ``force`` is False
        """
        runs = apply_reflow(analysis.runs, plan.reflow, force=force)
        runs.extend(plan.entry.to_runs())
        return self.analyze(runs, analysis.page_width)

    def apply_modifications(
        self,
        analysis: LayoutAnalysis,
        modifications: ModificationSet,
        measurer: TextMeasurer,
        force: bool = False,
    ) -> BatchResult:
        """Plan and apply a batch of additions, one after another.

        Experiences are added first, then certifications. Every insertion
        is planned against the analysis produced by the previous one.

        Args:
            analysis: Result of analyze()
            modifications: Additions to make
            measurer: Width measurement capability
            force: Apply reflows even if they overflow

        Returns:
            BatchResult with the plans in application order

        Raises:
            ReflowOverflowError: If a reflow overflows and ``force`` is False
        """
        plans: list[EntryPlan] = []
        for entry in modifications.experiences:
            plan = self.plan_entry(
                analysis, modifications.experience_section, entry, measurer
            )
            analysis = self.apply_plan(analysis, plan, force=force)
            plans.append(plan)
        for text in modifications.certifications:
            plan = self.plan_certification(
                analysis, text, measurer, modifications.certification_section
            )
            analysis = self.apply_plan(analysis, plan, force=force)
            plans.append(plan)

        logger.info("Applied %d modification(s)", len(plans))
        return BatchResult(plans=tuple(plans), analysis=analysis)

    def available_width(self, analysis: LayoutAnalysis, point: InsertionPoint) -> float:
        """Width from ``point.x`` to the right edge of its column.

        Falls back to the main (widest) column when the point's column is
        not among the analysis bands.
        """
        band = self._band_at(analysis.bands, point.column_index) or main_column(
            analysis.bands
        )
        if band is None:
            return analysis.page_width - self._config.margin_right - point.x
        return max(band.end_x - point.x, 0.0)

    def _composer(self, measurer: TextMeasurer) -> EntryComposer:
        return EntryComposer(
            measurer,
            base_font_size=self._config.base_font_size,
            line_height_factor=self._config.line_height_factor,
            bullet_indent=self._config.bullet_indent,
        )

    def _new_section_point(self, analysis: LayoutAnalysis) -> InsertionPoint:
        last_page = max((run.page_index for run in analysis.runs), default=0)
        x = self._config.new_section_x
        return InsertionPoint(
            x=x,
            y=self._config.new_section_y,
            column_index=find_column_index(analysis.bands, x),
            page_index=last_page,
        )

    @staticmethod
    def _band_at(bands: Sequence[ColumnBand], index: int) -> ColumnBand | None:
        for band in bands:
            if band.index == index:
                return band
        return None

    def _validate(self, runs: list[TextRun]) -> tuple[list[TextRun], list[RunIssue]]:
        valid: list[TextRun] = []
        issues: list[RunIssue] = []
        for run in runs:
            reason = validate_run(run)
            if reason is None:
                valid.append(run)
                continue
            if self._strict:
                raise InvalidGeometryError(run, reason)
            logger.warning(
                "Excluding run %r on page %d: %s", run.text, run.page_index, reason
            )
            issues.append(RunIssue(run=run, reason=reason))
        return valid, issues

    def _notify(self, stage: AnalysisStage, current: int, total: int, message: str) -> None:
        if self._progress_callback is not None:
            self._progress_callback(stage.value, current, total, message)
