"""Image decoder: size metadata via Pillow, text via Tesseract when OCR is enabled."""

import logging
from typing import BinaryIO

from PIL import Image

from ...metadata import Metadata
from ...ocr import OcrConfig, TesseractOcr
from ..base import Decoder, ParseContext, TextHandler
from ..registry import default_registry

logger = logging.getLogger(__name__)


@default_registry.register()
class ImageDecoder(Decoder):
    content_types = (
        "image/png",
        "image/jpeg",
        "image/gif",
        "image/tiff",
        "image/bmp",
        "image/webp",
    )

    def decode(self, stream: BinaryIO, handler: TextHandler, metadata: Metadata, context: ParseContext) -> None:
        with Image.open(stream) as image:
            width, height = image.size
            metadata.set("tiff:ImageWidth", str(width))
            metadata.set("tiff:ImageLength", str(height))
            ocr_config = context.get(OcrConfig)
            if ocr_config is None:
                logger.debug("OCR disabled; image yields metadata only")
                return
            image.load()
            handler.characters(TesseractOcr(ocr_config).image_to_string(image))
            handler.end_block()
