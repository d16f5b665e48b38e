"""Public parsing API.

Two styles are offered:

* ``new_from_reader`` returns the root element and raises
  ``MalformedDocumentError`` when the input is not a complete document.
* ``parse``, ``parse_string`` and ``parse_file`` never raise for bad input.
  They return a ``ParseResult`` whose ``success`` flag and diagnostics say what
  went wrong.

Either way a failed parse yields no tree. Programming errors such as an
``InvariantError`` are not converted into results.
"""

import io
import time
from pathlib import Path
from typing import IO, Any, BinaryIO, Optional, TextIO, Union

from mutable_xml.shared import (
    DiagnosticSeverity,
    MalformedDocumentError,
    ParseConfig,
    TreeConfig,
    get_logger,
)
from mutable_xml.tokenization import XMLTokenizer
from mutable_xml.tree import Element, ParseResult, XMLTreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

MS_PER_SECOND = 1000


def _parse_config(config: Optional[Union[TreeConfig, ParseConfig]]) -> ParseConfig:
    if isinstance(config, TreeConfig):
        return config.parse
    return config or ParseConfig()


def new_from_reader(
    reader: IO[Any],
    config: Optional[Union[TreeConfig, ParseConfig]] = None,
    correlation_id: Optional[str] = None,
) -> Element:
    """Create a document tree from a readable stream.

    Args:
        reader: Text or binary stream holding one XML document
        config: Parse settings, either a TreeConfig or a ParseConfig
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Root element of the document

    Raises:
        MalformedDocumentError: If the document is incomplete or has no root

    Examples:
        >>> root = new_from_reader(io.StringIO('<a><b>1</b></a>'))
        >>> root.children[0].value
        '1'
    """
    parse_config = _parse_config(config)
    tokenizer = XMLTokenizer(correlation_id, parse_config)
    builder = XMLTreeBuilder(correlation_id, parse_config)

    root = builder.build(tokenizer.tokenize(reader))
    if tokenizer.error is not None:
        get_logger(__name__, correlation_id, "new_from_reader").warning(
            "Trailing content after the root element was ignored",
            extra={"error": str(tokenizer.error)},
        )
    return root


def _build_result(
    reader: IO[Any],
    config: Optional[Union[TreeConfig, ParseConfig]],
    correlation_id: Optional[str],
) -> ParseResult:
    start_time = time.time()
    parse_config = _parse_config(config)
    tokenizer = XMLTokenizer(correlation_id, parse_config)
    builder = XMLTreeBuilder(correlation_id, parse_config)
    result = ParseResult(correlation_id=correlation_id)

    try:
        result.root = builder.build(tokenizer.tokenize(reader))
    except MalformedDocumentError as e:
        result.success = False
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(e),
            "xml_tree_builder",
            position=e.position,
            details={"unclosed": e.unclosed} if e.unclosed else None,
        )

    if tokenizer.error is not None:
        result.add_diagnostic(
            DiagnosticSeverity.WARNING if result.success else DiagnosticSeverity.ERROR,
            f"Tokenizer stopped: {tokenizer.error}",
            "xml_tokenizer",
            position=tokenizer.error_position.to_dict(),
        )

    result.performance = builder.metrics
    result.performance.characters_processed = tokenizer.characters_processed
    result.performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
    return result


def parse(
    input_data: InputType,
    config: Optional[Union[TreeConfig, ParseConfig]] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse XML from a string, bytes, path or file-like object.

    Args:
        input_data: XML text, encoded XML bytes, a Path, or a readable stream
        config: Parse settings, either a TreeConfig or a ParseConfig
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult holding the root element on success

    Examples:
        >>> result = parse('<root><item>value</item></root>')
        >>> result.success
        True
        >>> result.root.children[0].value
        'value'
    """
    logger = get_logger(__name__, correlation_id, "parse")
    logger.debug("Starting parse", extra={"input_type": type(input_data).__name__})

    if isinstance(input_data, Path):
        return parse_file(input_data, config, correlation_id)
    if isinstance(input_data, str):
        return _build_result(io.StringIO(input_data), config, correlation_id)
    if isinstance(input_data, bytes):
        return _build_result(io.BytesIO(input_data), config, correlation_id)
    if hasattr(input_data, "read"):
        return _build_result(input_data, config, correlation_id)

    raise TypeError(f"Unsupported input type: {type(input_data).__name__}")


def parse_string(
    xml_string: str,
    config: Optional[Union[TreeConfig, ParseConfig]] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse XML held in a string.

    Examples:
        >>> parse_string('<root><unclosed></root>').success
        False
    """
    if not isinstance(xml_string, str):
        raise TypeError("xml_string must be a str")
    return _build_result(io.StringIO(xml_string), config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[Union[TreeConfig, ParseConfig]] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse an XML file.

    The file is opened in binary mode so the document's own encoding
    declaration is honoured.

    Raises:
        OSError: If the file cannot be opened
    """
    path = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file").bind(path=str(path))
    logger.info("Parsing file")
    with path.open("rb") as stream:
        result = _build_result(stream, config, correlation_id)
    if not result.success:
        logger.warning("File is not a complete document")
    return result
