"""Pytest fixtures: settings isolated from .env, an extractor, and generated sample documents."""

import io
import zipfile

import openpyxl
import pytest
from docx import Document as DocxDocument
from PIL import Image

from text_extraction import ExtractionSettings, TextExtractor


def make_pdf(text: str, title: str = "Quarterly Report", author: str = "Jane Doe") -> bytes:
    """Build a one-page PDF with a Helvetica text line and an Info dictionary."""
    content = b"BT /F1 24 Tf 72 720 Td (" + text.encode("latin-1") + b") Tj ET"
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R"
        b" /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Title (" + title.encode("latin-1") + b") /Author (" + author.encode("latin-1") + b") >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    out += b"".join(b"%010d 00000 n \n" % offset for offset in offsets)
    out += b"trailer\n<< /Size %d /Root 1 0 R /Info 6 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return out


def make_docx(paragraphs: list[str], title: str = "") -> bytes:
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    if title:
        doc.core_properties.title = title
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def make_xlsx(sheets: dict[str, list[list]]) -> bytes:
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_png(width: int = 4, height: int = 3) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


def make_zip(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def settings() -> ExtractionSettings:
    """Defaults only; ignores any .env in the working directory."""
    return ExtractionSettings(_env_file=None)


@pytest.fixture
def extractor(settings) -> TextExtractor:
    return TextExtractor(settings=settings)


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf("Hello PDF world")


@pytest.fixture
def docx_bytes() -> bytes:
    return make_docx(["First paragraph", "Second paragraph"], title="Memo")


@pytest.fixture
def xlsx_bytes() -> bytes:
    return make_xlsx({"Budget": [["item", "cost"], ["rent", 1200]], "Notes": [["ok"]]})


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
