"""Office Open XML decoders: Word (python-docx) and Excel (openpyxl)."""

from typing import BinaryIO

import openpyxl
from docx import Document as DocxDocument

from ...metadata import Metadata
from ..base import Decoder, ParseContext, TextHandler
from ..detector import DOCX, XLSX
from ..registry import default_registry


@default_registry.register()
class DocxDecoder(Decoder):
    """Paragraphs, then tables with cells joined by ' | '."""

    content_types = (DOCX,)

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        doc = DocxDocument(stream)
        props = doc.core_properties
        metadata.set("dc:title", props.title or None)
        metadata.set("dc:creator", props.author or None)

        for paragraph in doc.paragraphs:
            handler.characters(paragraph.text)
            handler.end_block()
        for table in doc.tables:
            for row in table.rows:
                handler.characters(" | ".join(cell.text for cell in row.cells))
                handler.end_block()


@default_registry.register()
class XlsxDecoder(Decoder):
    """Cell values row by row, one block per sheet headed by the sheet name."""

    content_types = (XLSX,)

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        wb = openpyxl.load_workbook(stream, read_only=True, data_only=True)
        try:
            for name in wb.sheetnames:
                metadata.add("sheetNames", name)
                handler.characters(name)
                handler.end_block()
                for row in wb[name].iter_rows(values_only=True):
                    if all(c is None for c in row):
                        continue
                    handler.characters(" | ".join(str(c) if c is not None else "" for c in row))
                    handler.end_block()
        finally:
            wb.close()
