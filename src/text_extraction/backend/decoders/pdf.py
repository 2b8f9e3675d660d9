"""PDF decoder: native text via pypdf, OCR of embedded page images when configured."""

import logging
from typing import BinaryIO, Optional

from pypdf import PdfReader

from ...metadata import Metadata
from ...ocr import OcrConfig, TesseractOcr
from ..base import Decoder, ParseContext, TextHandler
from ..registry import default_registry

logger = logging.getLogger(__name__)


@default_registry.register()
class PdfDecoder(Decoder):
    """
    One text block per page.

    With an OcrConfig in the context, pages without a native text layer (scans)
    are OCR'd from their embedded images.
    """

    content_types = ("application/pdf",)

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        reader = PdfReader(stream)
        ocr_config = context.get(OcrConfig)
        ocr = TesseractOcr(ocr_config) if ocr_config is not None else None

        metadata.set("xmpTPg:NPages", str(len(reader.pages)))
        if reader.metadata:
            metadata.set("dc:title", reader.metadata.title)
            metadata.set("dc:creator", reader.metadata.author)

        ocr_pages = 0
        for page in reader.pages:
            text = page.extract_text() or ""
            if not text.strip() and ocr is not None:
                text = self._ocr_page(page, ocr) or ""
                if text:
                    ocr_pages += 1
            handler.characters(text)
            handler.end_block()
        if ocr_pages:
            metadata.set("ocrPages", str(ocr_pages))
            logger.debug("OCR'd %s of %s PDF pages", ocr_pages, len(reader.pages))

    def _ocr_page(self, page, ocr: TesseractOcr) -> Optional[str]:
        parts = []
        for embedded in page.images:
            text = ocr.image_to_string(embedded.image)
            if text:
                parts.append(text)
        return "\n".join(parts) or None
