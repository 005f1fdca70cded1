"""Document generation backends."""

from grammardoc.backends.base import DocumentBackend, MarkupWriter
from grammardoc.backends.text import TextBackend, TextItemWriter
from grammardoc.backends.xml import XmlBackend, XmlItemWriter

__all__ = [
    "DocumentBackend",
    "MarkupWriter",
    "TextBackend",
    "TextItemWriter",
    "XmlBackend",
    "XmlItemWriter",
]
