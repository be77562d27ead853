"""
Document loaders for DOCX, PDF, HTML and plain-text contracts.

Loaders return line-oriented text: clause headings must stay at the
start of a line for segmentation to find them.
"""

import io
import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

import docx
import pypdf
from bs4 import BeautifulSoup, NavigableString


logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


class ParseError(ValueError):
    """Raised when a document format is unsupported or its content is unreadable."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


@dataclass
class ExtractedDocument:
    """Text extracted from a contract document."""

    text: str
    source_path: str
    document_type: str

    @property
    def name(self) -> str:
        """Display name: the file name without a .docx/.pdf extension."""
        return display_name(self.source_path)


def display_name(path: str) -> str:
    """File name with a trailing .docx or .pdf extension removed."""
    name = Path(path).name
    if name.lower().endswith(('.docx', '.pdf')):
        return name[:name.rfind('.')]
    return name


class DocumentLoader(ABC):
    """Abstract base class for document loaders."""

    extensions: tuple[str, ...] = ()

    def supports(self, path: str) -> bool:
        """Check if this loader supports the given file type."""
        return str(path).lower().endswith(self.extensions)

    def load(self, path: Union[str, os.PathLike]) -> ExtractedDocument:
        """Load a document from the given path."""
        path = str(path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"File not found: {path}")

        with open(path, 'rb') as f:
            return self.load_stream(f, source=path)

    def load_stream(self, stream: BinaryIO, source: str = "<stream>") -> ExtractedDocument:
        """Load a document from an open binary stream."""
        try:
            text = self.extract_text(stream)
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"Cannot read {source}: {e}", source=source) from e

        logger.debug("Extracted %d characters from %s", len(text), source)
        return ExtractedDocument(
            text=text,
            source_path=source,
            document_type=self.extensions[0].lstrip('.')
        )

    @abstractmethod
    def extract_text(self, stream: BinaryIO) -> str:
        """Extract raw text from a binary stream."""


class PDFLoader(DocumentLoader):
    """Loader for PDF contracts."""

    extensions = ('.pdf',)

    def extract_text(self, stream: BinaryIO) -> str:
        reader = pypdf.PdfReader(stream)
        pages = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)
        return "\n".join(pages).strip()


class DOCXLoader(DocumentLoader):
    """Loader for DOCX contracts."""

    extensions = ('.docx',)

    def extract_text(self, stream: BinaryIO) -> str:
        document = docx.Document(stream)
        paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
        return "\n\n".join(paragraphs).strip()


class HTMLLoader(DocumentLoader):
    """Loader for HTML contracts."""

    extensions = ('.html', '.htm')

    BLOCK_TAGS = [
        'address', 'article', 'aside', 'blockquote', 'dd', 'div', 'dl', 'dt',
        'footer', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'hr', 'li',
        'main', 'ol', 'p', 'pre', 'section', 'table', 'tr', 'ul',
    ]
    CELL_TAGS = ['td', 'th']

    def extract_text(self, stream: BinaryIO) -> str:
        soup = BeautifulSoup(stream.read(), 'html.parser')

        # Remove script and style elements
        for element in soup(['script', 'style']):
            element.decompose()

        # Source line wrapping is not a line break
        for string in soup.find_all(string=True):
            if type(string) is NavigableString and string.find_parent('pre') is None:
                string.replace_with(_WS_RE.sub(' ', string))

        # One line per block element, so inline markup (<b>1.</b> ...) stays
        # on the heading line
        for br in soup.find_all('br'):
            br.replace_with('\n')
        for element in soup.find_all(self.CELL_TAGS):
            element.append(' ')
        for element in soup.find_all(self.BLOCK_TAGS):
            element.insert_before('\n')
            element.append('\n')

        lines = (line.strip() for line in soup.get_text().split('\n'))
        return '\n'.join(line for line in lines if line)


class TextLoader(DocumentLoader):
    """Loader for plain text contracts."""

    extensions = ('.txt',)

    def extract_text(self, stream: BinaryIO) -> str:
        return stream.read().decode('utf-8-sig')


class UniversalLoader:
    """Universal loader that selects appropriate loader based on file type."""

    def __init__(self):
        self.loaders = [
            DOCXLoader(),
            PDFLoader(),
            HTMLLoader(),
            TextLoader(),
        ]

    def loader_for(self, path: str) -> DocumentLoader:
        for loader in self.loaders:
            if loader.supports(path):
                return loader
        raise ParseError(f"Unsupported file: {Path(path).name}", source=str(path))

    def load(self, path: Union[str, os.PathLike]) -> ExtractedDocument:
        """Load a document using the appropriate loader."""
        return self.loader_for(str(path)).load(path)

    def load_bytes(
        self,
        data: bytes,
        format_hint: str,
        name: Optional[str] = None
    ) -> ExtractedDocument:
        """
        Load a document held in memory.

        Args:
            data: File content
            format_hint: File name or extension, e.g. "contract.docx" or "pdf"
            name: Source name recorded on the result

        Returns:
            ExtractedDocument
        """
        hint = format_hint if '.' in format_hint else f".{format_hint}"
        loader = self.loader_for(hint)
        return loader.load_stream(io.BytesIO(data), source=name or format_hint)
