"""
Tests for document loaders.
"""

import io

import docx
import pypdf
import pytest
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject
from clause_check.ingestion.loaders import (
    DOCXLoader,
    ParseError,
    TextLoader,
    UniversalLoader,
    display_name,
)
from clause_check.parsing.clause_segmenter import segment


@pytest.fixture
def loader():
    return UniversalLoader()


@pytest.fixture
def docx_bytes():
    document = docx.Document()
    document.add_paragraph("SUPPLY AGREEMENT")
    document.add_paragraph("")
    document.add_paragraph("1. Subject")
    document.add_paragraph("1.1. The Supplier delivers the Goods.")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes():
    writer = pypdf.PdfWriter()
    page = writer.add_blank_page(width=612, height=792)
    font = DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject("/Helvetica"),
    })
    page[NameObject("/Resources")] = DictionaryObject({
        NameObject("/Font"): DictionaryObject({NameObject("/F1"): font})
    })
    content = DecodedStreamObject()
    content.set_data(
        b"BT /F1 12 Tf 72 720 Td (1. Subject of the Agreement) Tj "
        b"0 -20 Td (2. Price and Payment) Tj ET"
    )
    page.replace_contents(content)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestUniversalLoader:
    """Test suite for UniversalLoader."""

    def test_load_text(self, loader, tmp_path):
        path = tmp_path / "contract.txt"
        path.write_text("1. Subject\n2. Price", encoding="utf-8")

        document = loader.load(path)

        assert document.text == "1. Subject\n2. Price"
        assert document.document_type == "txt"
        assert document.name == "contract.txt"

    def test_text_with_bom(self, loader, tmp_path):
        path = tmp_path / "bom.txt"
        path.write_bytes("1. Предмет".encode("utf-8-sig"))

        assert loader.load(path).text == "1. Предмет"

    def test_load_docx(self, loader, tmp_path, docx_bytes):
        """Test that non-empty paragraphs are kept one per line block."""
        path = tmp_path / "Acme Corp.docx"
        path.write_bytes(docx_bytes)

        document = loader.load(path)

        assert document.text == (
            "SUPPLY AGREEMENT\n\n1. Subject\n\n1.1. The Supplier delivers the Goods."
        )
        assert document.document_type == "docx"
        assert document.name == "Acme Corp"

    def test_load_html(self, loader, tmp_path):
        path = tmp_path / "contract.html"
        path.write_text(
            "<html><head><style>p {}</style><script>var x;</script></head>"
            "<body><p>1. Subject</p><p>2. Price</p></body></html>",
            encoding="utf-8"
        )

        assert loader.load(path).text == "1. Subject\n2. Price"

    def test_html_inline_markup_keeps_headings(self, loader, tmp_path):
        """Test that bold clause numbers stay on the line they open."""
        path = tmp_path / "contract.html"
        path.write_text(
            "<html><body>"
            "<p><b>1.</b> The Supplier delivers the goods.</p>\n"
            "<p><strong>2.</strong> The Buyer\n    pays.</p>"
            "<div>3. <em>Disputes</em> go to court.<br>Second line</div>"
            "<table><tr><td>4.1</td><td>Notices are in writing.</td></tr></table>"
            "</body></html>",
            encoding="utf-8"
        )

        text = loader.load(path).text

        assert text == (
            "1. The Supplier delivers the goods.\n"
            "2. The Buyer pays.\n"
            "3. Disputes go to court.\n"
            "Second line\n"
            "4.1 Notices are in writing."
        )
        assert segment(text) == {
            "1": "The Supplier delivers the goods.",
            "2": "The Buyer pays.",
            "3": "Disputes go to court.\nSecond line",
            "4.1": "Notices are in writing.",
        }

    def test_load_pdf(self, loader, tmp_path, pdf_bytes):
        path = tmp_path / "Acme.pdf"
        path.write_bytes(pdf_bytes)

        document = loader.load(path)

        assert "1. Subject of the Agreement" in document.text
        assert "2. Price and Payment" in document.text
        assert list(segment(document.text)) == ["1", "2"]
        assert document.document_type == "pdf"
        assert document.name == "Acme"

    def test_blank_pdf(self, loader):
        writer = pypdf.PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buffer = io.BytesIO()
        writer.write(buffer)

        assert loader.load_bytes(buffer.getvalue(), "pdf").text == ""

    def test_unsupported_extension(self, loader, tmp_path):
        path = tmp_path / "contract.rtf"
        path.write_text("{\\rtf1}", encoding="utf-8")

        with pytest.raises(ParseError, match="contract.rtf"):
            loader.load(path)

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "absent.txt")

    def test_corrupt_docx(self, loader, tmp_path):
        """Test that unreadable content is reported as ParseError."""
        path = tmp_path / "broken.docx"
        path.write_bytes(b"not a zip archive")

        with pytest.raises(ParseError) as excinfo:
            loader.load(path)

        assert excinfo.value.source == str(path)

    def test_corrupt_pdf(self, loader):
        with pytest.raises(ParseError):
            loader.load_bytes(b"garbage", "pdf")

    def test_load_bytes(self, loader, docx_bytes):
        document = loader.load_bytes(docx_bytes, "upload.docx", name="Acme.docx")

        assert "1.1. The Supplier delivers the Goods." in document.text
        assert document.name == "Acme"

    def test_load_bytes_extension_hint(self, loader):
        document = loader.load_bytes("1. Subject".encode("utf-8"), "txt")

        assert document.text == "1. Subject"


class TestDocumentLoaders:
    """Tests for individual loaders."""

    def test_supports(self):
        assert DOCXLoader().supports("Contract.DOCX")
        assert not DOCXLoader().supports("contract.doc")
        assert TextLoader().supports("notes.txt")

    @pytest.mark.parametrize("path,expected", [
        ("Acme.docx", "Acme"),
        ("Acme.PDF", "Acme"),
        ("/tmp/dir/Beta LLC.pdf", "Beta LLC"),
        ("notes.txt", "notes.txt"),
        ("archive.docx.zip", "archive.docx.zip"),
    ])
    def test_display_name(self, path, expected):
        assert display_name(path) == expected
