"""Ingestion module for loading contract documents and normalizing clause text."""

from .loaders import (
    DocumentLoader,
    DOCXLoader,
    ExtractedDocument,
    HTMLLoader,
    ParseError,
    PDFLoader,
    TextLoader,
    UniversalLoader,
)
from .normalizer import TextNormalizer, compile_ignore_patterns, normalize

__all__ = [
    "DocumentLoader",
    "DOCXLoader",
    "ExtractedDocument",
    "HTMLLoader",
    "ParseError",
    "PDFLoader",
    "TextLoader",
    "UniversalLoader",
    "TextNormalizer",
    "compile_ignore_patterns",
    "normalize",
]
