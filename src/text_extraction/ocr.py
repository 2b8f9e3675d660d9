"""OCR configuration and the Tesseract runner used by image-based decoders."""

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .config import ExtractionSettings

if TYPE_CHECKING:
    from PIL.Image import Image

logger = logging.getLogger(__name__)

# pytesseract reads the binary location from a module global
_TESSERACT_CMD_LOCK = threading.Lock()


@dataclass(frozen=True)
class OcrConfig:
    """
    Where the Tesseract binary lives and how to call it.

    Frozen: extractions capture the instance at call start, so a later change on
    the extractor builds a new OcrConfig instead of mutating one in flight.
    An empty tesseract_path means "tesseract on PATH".
    """

    tesseract_path: str = ""
    language: str = "eng"
    tesseract_config: str = "--psm 3 --oem 3"
    timeout: float = 0

    @classmethod
    def from_settings(cls, settings: ExtractionSettings, tesseract_path: Optional[str] = None) -> "OcrConfig":
        path = tesseract_path if tesseract_path is not None else (settings.TESSERACT_PATH or "")
        return cls(
            tesseract_path=path,
            language=settings.OCR_LANGUAGE,
            tesseract_config=settings.OCR_TESSERACT_CONFIG,
            timeout=settings.OCR_TIMEOUT,
        )


class TesseractOcr:
    """Run pytesseract on PIL images with the binary named in an OcrConfig."""

    def __init__(self, config: OcrConfig) -> None:
        self._config = config

    @property
    def config(self) -> OcrConfig:
        return self._config

    def image_to_string(self, image: "Image") -> str:
        """OCR a single image. Errors from tesseract propagate to the caller."""
        import pytesseract

        with _TESSERACT_CMD_LOCK:
            previous = pytesseract.pytesseract.tesseract_cmd
            if self._config.tesseract_path:
                pytesseract.pytesseract.tesseract_cmd = self._config.tesseract_path
            try:
                text = pytesseract.image_to_string(
                    image,
                    lang=self._config.language,
                    config=self._config.tesseract_config,
                    timeout=self._config.timeout,
                )
            finally:
                pytesseract.pytesseract.tesseract_cmd = previous
        logger.debug("OCR produced %s chars (lang=%s)", len(text or ""), self._config.language)
        return (text or "").strip()
