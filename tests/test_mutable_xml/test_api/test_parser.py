"""Tests for the public parsing API."""

import io
from pathlib import Path

import pytest

from mutable_xml import (
    Attr,
    InvariantError,
    MalformedDocumentError,
    ParseConfig,
    ParseResult,
    QName,
    TreeConfig,
    new_from_reader,
    parse,
    parse_file,
    parse_string,
)
from mutable_xml.shared import DiagnosticSeverity

CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<Catalog xmlns:b="api.books.localhost">
\t<b:done>true</b:done>
\t<b:books id="0">
\t\t<name>Book Title 0</name>
\t</b:books>
\t<b:books id="1">
\t\t<name>Book Title 1</name>
\t</b:books>
\t<b:books id="2">
\t\t<name>Book Title 2</name>
\t</b:books>
</Catalog>"""


class TestNewFromReader:
    """Test the raising reader API."""

    def test_edit_catalog(self) -> None:
        """Test parse, search, edit and render of a catalog document."""
        root = new_from_reader(io.StringIO(CATALOG))
        books = root.search().match_name_deep(QName("books", "api.books.localhost"))

        books.match_attr(Attr(QName("id"), "1")).one().add_child(
            QName("type")
        ).set_value("Fiction")
        root.remove_child(books.match_attr(Attr(QName("id"), "2")).one())
        root.set_pretty_xml(True)

        assert root.to_string() == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<Catalog xmlns:b="api.books.localhost">\n'
            '\t<b:done>true</b:done>\n'
            '\t<b:books id="0">\n'
            '\t\t<name>Book Title 0</name>\n'
            '\t</b:books>\n'
            '\t<b:books id="1">\n'
            '\t\t<name>Book Title 1</name>\n'
            '\t\t<type>Fiction</type>\n'
            '\t</b:books>\n'
            '</Catalog>\n'
        )

    def test_tag_search_path(self) -> None:
        """Test a path-like tag search on a parsed document."""
        root = new_from_reader(io.StringIO(CATALOG))

        name = root.tag_search().by_name("books").by_name("name").one()

        assert name.value == "Book Title 0"

    def test_binary_stream(self) -> None:
        """Test reading from a binary stream."""
        root = new_from_reader(io.BytesIO(CATALOG.encode("utf-8")))

        assert root.name == QName("Catalog")
        assert len(root.children) == 4

    def test_malformed_document_raises(self) -> None:
        """Test that an incomplete document raises."""
        with pytest.raises(MalformedDocumentError, match="malformed document"):
            new_from_reader(io.StringIO("<Catalog><b:books>"))

    def test_trailing_content_is_ignored(self) -> None:
        """Test that content after a complete root does not fail the read."""
        root = new_from_reader(io.StringIO("<a>1</a><b/>"))

        assert root.value == "1"

    def test_accepts_tree_config(self) -> None:
        """Test that the parse section of a TreeConfig is used."""
        config = TreeConfig().override(parse__trim_character_data=False)

        root = new_from_reader(io.StringIO("<a> x </a>"), config)

        assert root.value == " x "


class TestParse:
    """Test the non-raising parse API."""

    def test_parse_string(self) -> None:
        """Test a successful parse from a string."""
        result = parse("<root><item>value</item></root>")

        assert isinstance(result, ParseResult)
        assert result.success is True
        assert result.root.children[0].value == "value"
        assert result.element_count == 2
        assert result.diagnostics == []

    def test_parse_bytes(self) -> None:
        """Test a successful parse from bytes."""
        result = parse(CATALOG.encode("utf-8"))

        assert result.success
        assert result.declaration == '<?xml version="1.0" encoding="UTF-8"?>\n'

    def test_parse_stream(self) -> None:
        """Test a successful parse from a file-like object."""
        result = parse(io.StringIO("<a/>"), ParseConfig(chunk_size=1))

        assert result.success
        assert result.performance.characters_processed == 4

    def test_parse_malformed_does_not_raise(self) -> None:
        """Test that failures are reported as diagnostics with no tree."""
        result = parse_string("<root><unclosed></root>", correlation_id="req-7")

        assert result.success is False
        assert result.root is None
        assert result.element_count == 0
        assert result.has_errors()
        errors = [d for d in result.diagnostics if d.severity == DiagnosticSeverity.ERROR]
        assert any(d.message == "malformed document" for d in errors)
        assert all(d.correlation_id == "req-7" for d in result.diagnostics)

    def test_parse_empty(self) -> None:
        """Test that empty input is reported as having no root."""
        result = parse_string("")

        assert not result.success
        assert any(d.message == "no root element" for d in result.diagnostics)

    def test_parse_trailing_content_warns(self) -> None:
        """Test that content after the root is a warning, not a failure."""
        result = parse_string("<a/>junk")

        assert result.success
        assert not result.has_errors()
        assert result.diagnostics[0].severity == DiagnosticSeverity.WARNING
        assert result.diagnostics[0].component == "xml_tokenizer"

    def test_parse_unsupported_type(self) -> None:
        """Test that unsupported inputs are a type error."""
        with pytest.raises(TypeError, match="Unsupported input type"):
            parse(42)  # type: ignore

    def test_parse_string_rejects_bytes(self) -> None:
        """Test that parse_string only accepts text."""
        with pytest.raises(TypeError):
            parse_string(b"<a/>")  # type: ignore

    def test_metrics(self) -> None:
        """Test that the result carries performance counters."""
        result = parse_string("<a><b>1</b></a>")

        assert result.performance.elements_created == 2
        assert result.performance.tokens_consumed == 5
        assert result.performance.processing_time_ms >= 0

    def test_invariant_errors_propagate(self) -> None:
        """Test that misuse after parsing is not turned into diagnostics."""
        result = parse_string("<a><b>1</b></a>")

        with pytest.raises(InvariantError):
            result.root.set_value("x")


class TestParseFile:
    """Test parsing from files."""

    def test_parse_file(self, tmp_path: Path) -> None:
        """Test parsing a file by path string and Path."""
        path = tmp_path / "catalog.xml"
        path.write_bytes(CATALOG.encode("utf-8"))

        by_string = parse_file(str(path))
        by_path = parse(path)

        assert by_string.success and by_path.success
        assert by_string.element_count == by_path.element_count == 8

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that an unreadable path raises OSError."""
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.xml")
