# SPDX-License-Identifier: Apache-2.0
"""PDF adapters using pypdfium2.

This module provides the two collaborators the layout engine consumes
from a real PDF:
- PDFTextRunExtractor: text runs (text, baseline origin, font size, page)
- PdfiumTextMeasurer: string width at a font size for a standard font
"""

from __future__ import annotations

import ctypes
import logging
import math
from pathlib import Path
from typing import Any, Optional, Union

import pypdfium2 as pdfium  # type: ignore[import-untyped]

from .errors import ExtractionError
from .models import TextRun

logger = logging.getLogger(__name__)

# PDFium object type constant for text
FPDF_PAGEOBJ_TEXT = 1


class PDFTextRunExtractor:
    """Extract text runs from a PDF document.

    Example:
        >>> with PDFTextRunExtractor("resume.pdf") as extractor:
        ...     runs = extractor.extract_runs()
        ...     width, height = extractor.page_size(0)
    """

    def __init__(self, pdf_source: Union[Path, str, bytes]) -> None:
        """Open the PDF document.

        Args:
            pdf_source: Path to PDF file or PDF bytes

        Raises:
            TypeError: If pdf_source is not Path, str, or bytes
            FileNotFoundError: If the file path doesn't exist
            ExtractionError: If the PDF cannot be loaded
        """
        self._pdf: Optional[pdfium.PdfDocument] = None

        if isinstance(pdf_source, bytes):
            source: Any = pdf_source
        elif isinstance(pdf_source, (str, Path)):
            path = Path(pdf_source)
            if not path.exists():
                raise FileNotFoundError(f"PDF file not found: {path}")
            source = str(path)
        else:
            raise TypeError(
                f"pdf_source must be Path, str, or bytes, got {type(pdf_source).__name__}"
            )

        try:
            self._pdf = pdfium.PdfDocument(source)
        except pdfium.PdfiumError as e:
            raise ExtractionError(f"Cannot open PDF: {e}", stage="extract", cause=e) from e

    def __enter__(self) -> PDFTextRunExtractor:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the PDF document and release resources."""
        if self._pdf is not None:
            self._pdf.close()
            self._pdf = None

    @property
    def page_count(self) -> int:
        """Get the number of pages in the document."""
        return len(self._ensure_open())

    def _ensure_open(self) -> pdfium.PdfDocument:
        """Ensure PDF document is open and return it."""
        if self._pdf is None:
            raise RuntimeError("PDF document is not open")
        return self._pdf

    def page_size(self, page_index: int) -> tuple[float, float]:
        """Return (width, height) of a page in points."""
        page = self._ensure_open()[page_index]
        return float(page.get_width()), float(page.get_height())

    def extract_runs(self) -> list[TextRun]:
        """Extract text runs of all pages in document order.

        Each non-empty text object becomes one run. The run origin is the
        object's baseline origin (matrix translation).

        Returns:
            Runs ordered by page, then by content-stream order
        """
        pdf = self._ensure_open()
        runs: list[TextRun] = []

        for page_index in range(len(pdf)):
            page = pdf[page_index]
            textpage = page.get_textpage()
            count = 0
            try:
                for obj in page.get_objects(filter=[FPDF_PAGEOBJ_TEXT]):
                    text = self._get_text(obj, textpage).strip()
                    if not text:
                        continue
                    matrix = obj.get_matrix()
                    runs.append(
                        TextRun(
                            text=text,
                            x=float(matrix.e),
                            y=float(matrix.f),
                            font_size=self._get_font_size(obj, matrix),
                            page_index=page_index,
                        )
                    )
                    count += 1
            finally:
                textpage.close()
            logger.debug("Page %d: extracted %d runs", page_index, count)

        logger.info("Extracted %d runs from %d pages", len(runs), len(pdf))
        return runs

    @staticmethod
    def _get_text(obj: pdfium.PdfObject, textpage: pdfium.PdfTextPage) -> str:
        """Get the text belonging to a text object via FPDFTextObj_GetText."""
        length = pdfium.raw.FPDFTextObj_GetText(obj.raw, textpage.raw, None, 0)
        if length == 0:
            return ""

        # UTF-16LE buffer, length includes the null terminator
        buffer = (ctypes.c_ushort * length)()
        pdfium.raw.FPDFTextObj_GetText(obj.raw, textpage.raw, buffer, length)

        chars = []
        for i in range(length - 1):
            if buffer[i] == 0:
                break
            chars.append(chr(buffer[i]))
        return "".join(chars)

    @staticmethod
    def _get_font_size(obj: pdfium.PdfObject, matrix: Any) -> float:
        """Get the rendered font size (object font size x vertical scale).

        Returns 0.0 when the size is unavailable, so that validation
        excludes the run instead of guessing.
        """
        size = ctypes.c_float()
        if not pdfium.raw.FPDFTextObj_GetFontSize(obj.raw, ctypes.byref(size)):
            return 0.0
        scale = math.hypot(matrix.c, matrix.d)
        return float(size.value * scale) if scale > 0 else float(size.value)


class PdfiumTextMeasurer:
    """Measure string widths with a PDF standard font."""

    def __init__(self, font_name: str = "Helvetica") -> None:
        """Load a standard font into a scratch document.

        Args:
            font_name: One of the 14 standard PDF fonts

        Raises:
            ValueError: If the font cannot be loaded
        """
        self._doc = pdfium.PdfDocument.new()
        self._font = pdfium.raw.FPDFText_LoadStandardFont(
            self._doc.raw, font_name.encode("utf-8")
        )
        if not self._font:
            self._doc.close()
            raise ValueError(f"Unknown standard font: {font_name}")
        self._font_name = font_name

    @property
    def font_name(self) -> str:
        """Standard font in use."""
        return self._font_name

    def measure(self, text: str, font_size: float) -> float:
        """Width of ``text`` at ``font_size`` in points."""
        total = 0.0
        width_out = ctypes.c_float()
        for char in text:
            ok = pdfium.raw.FPDFFont_GetGlyphWidth(
                self._font,
                ord(char),
                ctypes.c_float(font_size),
                ctypes.byref(width_out),
            )
            if ok:
                total += width_out.value
        return total

    def close(self) -> None:
        """Release the font and scratch document."""
        if self._font:
            pdfium.raw.FPDFFont_Close(self._font)
            self._font = None
        self._doc.close()
