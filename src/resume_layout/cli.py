# SPDX-License-Identifier: Apache-2.0
"""
Resume Layout - CLI Tool

Detects the column layout and section headings of a PDF and plans where new
content for a section goes, including the shift of content below it.
Outputs a JSON report.

Usage:
    resume-layout <input.pdf> [options]

Examples:
    resume-layout resume.pdf                           # Layout and sections
    resume-layout resume.pdf --section experience      # Plus insertion point
    resume-layout resume.pdf -s skills --height 40     # Plus reflow plan
    resume-layout resume.pdf -s experience --entry-json entry.json
    resume-layout resume.pdf --certification "AWS Solutions Architect (2024)"
    resume-layout resume.pdf --modifications changes.json
    resume-layout resume.pdf -o report.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

from resume_layout.core.errors import LayoutError
from resume_layout.core.pdf_extractor import PdfiumTextMeasurer
from resume_layout.core.text_layout import ExperienceEntry
from resume_layout.pipeline.config import LayoutConfig
from resume_layout.pipeline.layout_pipeline import LayoutPipeline
from resume_layout.pipeline.modifications import ModificationSet

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (default: sys.argv[1:]).

    Returns:
        Parsed argument Namespace.
    """
    parser = argparse.ArgumentParser(
        prog="resume-layout",
        description="Detect PDF layout and plan section-anchored insertions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s resume.pdf                              # Layout and sections
  %(prog)s resume.pdf -s experience                # Insertion point
  %(prog)s resume.pdf -s skills --height 40        # Insertion + reflow plan
  %(prog)s resume.pdf -s experience --entry-json entry.json
  %(prog)s resume.pdf --certification "AWS Solutions Architect (2024)"
  %(prog)s resume.pdf --modifications changes.json --force
  %(prog)s resume.pdf --config layout.json         # Override defaults
""",
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Path to PDF file to analyze",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the JSON report to this file (default: stdout)",
    )

    # Planning options
    plan_group = parser.add_argument_group("Insertion planning options")
    plan_group.add_argument(
        "-s",
        "--section",
        help="Section to plan an insertion for (e.g. EXPERIENCE)",
    )
    content_group = plan_group.add_mutually_exclusive_group()
    content_group.add_argument(
        "--height",
        type=float,
        help="Height of the content to insert, for the reflow plan",
    )
    content_group.add_argument(
        "--entry-json",
        type=Path,
        help="JSON file with title, company, duration and bullets of a new entry",
    )
    content_group.add_argument(
        "--certification",
        help="Certification to add (section defaults to CERTIFICATIONS)",
    )
    content_group.add_argument(
        "--modifications",
        type=Path,
        help="JSON file with experiences and certifications to apply in order",
    )
    plan_group.add_argument(
        "--force",
        action="store_true",
        help="Apply --modifications even when a reflow overflows the page",
    )
    plan_group.add_argument(
        "--font",
        default="Helvetica",
        help="Standard font used to measure entry text (default: Helvetica)",
    )

    # Configuration options
    cfg_group = parser.add_argument_group("Configuration options")
    cfg_group.add_argument(
        "--config",
        type=Path,
        help="JSON file with LayoutConfig overrides",
    )
    cfg_group.add_argument(
        "--gap-threshold",
        type=float,
        help="Column gap threshold (default: 50)",
    )
    cfg_group.add_argument(
        "--header-threshold",
        type=float,
        help="Font size a section heading must exceed (default: 11)",
    )
    cfg_group.add_argument(
        "--strict",
        action="store_true",
        help="Fail on runs with invalid geometry instead of skipping them",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> LayoutConfig:
    """Build LayoutConfig from a config file and CLI overrides.

    Args:
        args: Command line arguments.

    Returns:
        LayoutConfig.
    """
    config = LayoutConfig.from_json_file(args.config) if args.config else LayoutConfig()
    if args.gap_threshold is not None:
        config.column_gap_threshold = args.gap_threshold
    if args.header_threshold is not None:
        config.header_font_threshold = args.header_threshold
    return config


def load_entry(path: Path) -> ExperienceEntry:
    """Load an ExperienceEntry from a JSON file.

    Raises:
        ValueError: If the file does not describe an entry.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "title" not in data:
        raise ValueError(f"Entry file must be a JSON object with a title: {path}")
    return ExperienceEntry.from_dict(data)


def build_report(pipeline: LayoutPipeline, args: argparse.Namespace) -> dict[str, Any]:
    """Run the analysis and planning requested by ``args``.

    Args:
        pipeline: Configured pipeline.
        args: Command line arguments.

    Returns:
        JSON-serializable report.
    """
    analysis = pipeline.analyze_pdf(args.input)
    report: dict[str, Any] = analysis.to_dict()

    if args.modifications:
        modifications = ModificationSet.from_json_file(args.modifications)
        measurer = PdfiumTextMeasurer(args.font)
        try:
            result = pipeline.apply_modifications(
                analysis, modifications, measurer, force=args.force
            )
        finally:
            measurer.close()
        report["batch"] = result.to_dict()
        return report

    if args.certification:
        measurer = PdfiumTextMeasurer(args.font)
        try:
            plan = pipeline.plan_certification(
                analysis,
                args.certification,
                measurer,
                args.section or "CERTIFICATIONS",
            )
        finally:
            measurer.close()
        report["plan"] = plan.to_dict()
        return report

    if not args.section:
        return report

    if args.entry_json:
        entry = load_entry(args.entry_json)
        measurer = PdfiumTextMeasurer(args.font)
        try:
            plan = pipeline.plan_entry(analysis, args.section, entry, measurer)
        finally:
            measurer.close()
        report["plan"] = plan.to_dict()
        return report

    point = pipeline.plan_insertion(analysis, args.section)
    plan_report: dict[str, Any] = {
        "section": args.section.strip().upper(),
        "point": point.to_dict(),
    }
    if args.height is not None:
        reflow = pipeline.plan_reflow(analysis, point.page_index, args.height, point.y)
        plan_report["reflow"] = reflow.to_dict()
    report["plan"] = plan_report
    return report


def run(args: argparse.Namespace) -> int:
    """Execute the analysis.

    Args:
        args: Command line arguments.

    Returns:
        Exit code (0: success, 1: failure).
    """
    input_path: Path = args.input

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    if input_path.suffix.lower() != ".pdf":
        print(f"Error: Not a PDF file: {input_path}", file=sys.stderr)
        return 1

    try:
        pipeline = LayoutPipeline(build_config(args), strict=args.strict)
        report = build_report(pipeline, args)
    except (LayoutError, ValueError, OSError) as e:
        print(f"Error: Analysis failed: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    text = json.dumps(report, indent=2, ensure_ascii=False)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text + "\n", encoding="utf-8")
        print(f"Report: {args.output}")
    else:
        print(text)

    plans = report.get("batch", {}).get("plans", [])
    if "plan" in report:
        plans = [report["plan"]]
    if any(p.get("reflow", {}).get("overflow") for p in plans):
        print(
            "Warning: reflow overflows the page; content must continue on a new page",
            file=sys.stderr,
        )
    return 0


def main() -> NoReturn:
    """Main entry point."""
    args = parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    sys.exit(run(args))


if __name__ == "__main__":
    main()
