"""Built-in decoders. Importing this package registers them on default_registry."""

from . import archive, image, markup, office, pdf, text

__all__ = ["archive", "image", "markup", "office", "pdf", "text"]
