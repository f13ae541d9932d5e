# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: text runs and generated PDF documents."""

from __future__ import annotations

import ctypes
import io
from collections.abc import Callable, Sequence

import pypdfium2 as pdfium
import pytest

from resume_layout.core.models import TextRun

# (text, x, y, font_size)
RunTuple = tuple[str, float, float, float]

LETTER_WIDTH = 612.0
LETTER_HEIGHT = 792.0


def _widestring(text: str) -> ctypes.Array:
    encoded = text.encode("utf-16-le") + b"\x00\x00"
    return (ctypes.c_ushort * (len(encoded) // 2)).from_buffer_copy(encoded)


def build_pdf(
    pages: Sequence[Sequence[RunTuple]],
    width: float = LETTER_WIDTH,
    height: float = LETTER_HEIGHT,
) -> bytes:
    """Build a PDF with one Helvetica text object per run tuple."""
    pdf = pdfium.PdfDocument.new()
    font = pdfium.raw.FPDFText_LoadStandardFont(pdf.raw, b"Helvetica")
    for runs in pages:
        page = pdf.new_page(width, height)
        for text, x, y, size in runs:
            obj = pdfium.raw.FPDFPageObj_CreateTextObj(pdf.raw, font, ctypes.c_float(size))
            pdfium.raw.FPDFText_SetText(obj, _widestring(text))
            pdfium.raw.FPDFPageObj_Transform(
                obj,
                ctypes.c_double(1.0),
                ctypes.c_double(0.0),
                ctypes.c_double(0.0),
                ctypes.c_double(1.0),
                ctypes.c_double(x),
                ctypes.c_double(y),
            )
            pdfium.raw.FPDFPage_InsertObject(page.raw, obj)
        page.gen_content()

    buffer = io.BytesIO()
    pdf.save(buffer)
    pdf.close()
    return buffer.getvalue()


@pytest.fixture
def pdf_builder() -> Callable[..., bytes]:
    """Factory building PDF bytes from run tuples per page."""
    return build_pdf


@pytest.fixture
def single_column_runs() -> list[TextRun]:
    """A one-page, single-column resume."""
    return [
        TextRun("Jane Doe", 50.0, 740.0, 18.0),
        TextRun("SUMMARY", 50.0, 700.0, 14.0),
        TextRun("Backend engineer", 50.0, 680.0, 10.0),
        TextRun("EXPERIENCE", 50.0, 600.0, 14.0),
        TextRun("Job A", 50.0, 580.0, 10.0),
        TextRun("Built things", 60.0, 565.0, 10.0),
        TextRun("EDUCATION", 50.0, 400.0, 14.0),
        TextRun("B.Tech CSE", 50.0, 380.0, 10.0),
    ]


@pytest.fixture
def two_column_runs() -> list[TextRun]:
    """A one-page resume with a narrow left sidebar and a wide main column."""
    return [
        TextRun("SKILLS", 40.0, 700.0, 13.0),
        TextRun("Python", 42.0, 680.0, 10.0),
        TextRun("Java", 42.0, 665.0, 10.0),
        TextRun("WORK EXPERIENCE", 200.0, 700.0, 13.0),
        TextRun("Engineer, Acme", 200.0, 680.0, 10.0),
        TextRun("Shipped the thing", 210.0, 665.0, 10.0),
        TextRun("PROJECTS", 200.0, 500.0, 13.0),
        TextRun("Side project", 205.0, 480.0, 10.0),
    ]
