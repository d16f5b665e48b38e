"""Lazy XML token stream built on the standard library's expat binding.

The tree builder only needs five kinds of tokens: start tags, end tags,
character data, processing instructions and comments. This module turns a
readable stream into that sequence, resolving names the way a namespace-aware
decoder reports them:

* element names carry the namespace URI bound to their prefix, or the in-scope
  default namespace; an undeclared prefix is kept as the namespace verbatim;
* ``xmlns:p="uri"`` arrives as an attribute named ``QName("p", "xmlns")`` and a
  default declaration ``xmlns="uri"`` as ``QName("xmlns")``;
* the ``<?xml ...?>`` declaration arrives as a processing instruction with the
  ``xml`` target and the attribute text exactly as written in the source.

Expat runs with namespace processing off so that ``xmlns`` attributes stay in
the attribute list in document order.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import IO, AnyStr, Deque, Dict, Iterator, List, Optional
from xml.parsers import expat

from mutable_xml.shared import (
    XML_NAMESPACE,
    XMLNS_SPACE,
    Attr,
    ParseConfig,
    QName,
    get_logger,
)

class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    START_ELEMENT = auto()           # <name attr="...">
    END_ELEMENT = auto()             # </name>, also emitted for <name/>
    CHAR_DATA = auto()               # Text, including CDATA section content
    PROCESSING_INSTRUCTION = auto()  # <?target data?>, including <?xml ...?>
    COMMENT = auto()                 # <!-- ... -->


@dataclass
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        """Convert position to dictionary representation."""
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class Token:
    """Single XML token.

    Which fields are meaningful depends on ``type``: ``name`` and
    ``attributes`` for element tokens, ``value`` for character data and
    comments, ``target`` and ``value`` for processing instructions.
    """

    type: TokenType
    name: Optional[QName] = None
    attributes: List[Attr] = field(default_factory=list)
    value: str = ""
    target: str = ""
    position: Optional[TokenPosition] = None


class _TokenCollector:
    """Expat callbacks that queue tokens for the tokenizer to hand out."""

    def __init__(self) -> None:
        self.parser = expat.ParserCreate()
        self.parser.ordered_attributes = True
        self.parser.buffer_text = True
        self.parser.StartElementHandler = self._start_element
        self.parser.EndElementHandler = self._end_element
        self.parser.CharacterDataHandler = self._character_data
        self.parser.ProcessingInstructionHandler = self._processing_instruction
        # Without an XmlDeclHandler expat reports the raw declaration here
        self.parser.DefaultHandlerExpand = self._default
        self.parser.CommentHandler = self._comment

        self.tokens: Deque[Token] = deque()
        self._text: List[str] = []
        self._text_position: Optional[TokenPosition] = None
        self._scopes: List[Dict[str, str]] = [{"xml": XML_NAMESPACE}]

    def feed(self, data: AnyStr, final: bool) -> None:
        self.parser.Parse(data, final)
        if final:
            self._flush_text()

    def drain(self) -> Iterator[Token]:
        while self.tokens:
            yield self.tokens.popleft()

    def _position(self) -> TokenPosition:
        return TokenPosition(
            line=max(self.parser.CurrentLineNumber, 1),
            column=self.parser.CurrentColumnNumber + 1,
            offset=max(self.parser.CurrentByteIndex, 0),
        )

    def _emit(self, token: Token) -> None:
        self._flush_text()
        self.tokens.append(token)

    def _flush_text(self) -> None:
        if not self._text:
            return
        self.tokens.append(Token(
            TokenType.CHAR_DATA,
            value="".join(self._text),
            position=self._text_position,
        ))
        self._text = []
        self._text_position = None

    @staticmethod
    def _element_name(raw: str, scope: Dict[str, str]) -> QName:
        prefix, sep, local = raw.partition(":")
        if not sep:
            return QName(raw, scope.get("", ""))
        return QName(local, scope.get(prefix, prefix))

    @staticmethod
    def _attribute_name(raw: str, scope: Dict[str, str]) -> QName:
        prefix, sep, local = raw.partition(":")
        if not sep:
            return QName(raw)
        if prefix == XMLNS_SPACE:
            return QName(local, XMLNS_SPACE)
        return QName(local, scope.get(prefix, prefix))

    def _start_element(self, name: str, attrs: List[str]) -> None:
        pairs = list(zip(attrs[::2], attrs[1::2]))

        scope = dict(self._scopes[-1])
        for raw, value in pairs:
            if raw == XMLNS_SPACE:
                scope[""] = value
            elif raw.startswith(XMLNS_SPACE + ":"):
                scope[raw[len(XMLNS_SPACE) + 1:]] = value
        self._scopes.append(scope)

        self._emit(Token(
            TokenType.START_ELEMENT,
            name=self._element_name(name, scope),
            attributes=[
                Attr(self._attribute_name(raw, scope), value) for raw, value in pairs
            ],
            position=self._position(),
        ))

    def _end_element(self, name: str) -> None:
        scope = self._scopes.pop()
        self._emit(Token(
            TokenType.END_ELEMENT,
            name=self._element_name(name, scope),
            position=self._position(),
        ))

    def _character_data(self, data: str) -> None:
        if not self._text:
            self._text_position = self._position()
        self._text.append(data)

    def _processing_instruction(self, target: str, data: str) -> None:
        self._emit(Token(
            TokenType.PROCESSING_INSTRUCTION,
            target=target,
            value=data,
            position=self._position(),
        ))

    def _default(self, data: str) -> None:
        if not data.startswith("<?xml") or not data.endswith("?>"):
            return
        self._emit(Token(
            TokenType.PROCESSING_INSTRUCTION,
            target="xml",
            value=data[len("<?xml"):-len("?>")].strip(),
            position=self._position(),
        ))

    def _comment(self, data: str) -> None:
        self._emit(Token(TokenType.COMMENT, value=data, position=self._position()))


class XMLTokenizer:
    """Turns a readable stream into a lazy sequence of tokens.

    The stream is read in ``ParseConfig.chunk_size`` pieces and tokens are
    yielded as soon as expat reports them. A syntax error ends the sequence
    early; the error is kept on ``error`` for the caller to inspect.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[ParseConfig] = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            correlation_id: Optional correlation ID for tracking requests
            config: Parse configuration, defaults to ParseConfig()
        """
        self.correlation_id = correlation_id
        self.config = config or ParseConfig()
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")

        self.error: Optional[expat.ExpatError] = None
        self.characters_processed = 0

    def tokenize(self, reader: IO[AnyStr]) -> Iterator[Token]:
        """Yield tokens read from a text or binary stream.

        Args:
            reader: Object with a ``read(size)`` method returning str or bytes

        Yields:
            Tokens in document order
        """
        self.error = None
        self.characters_processed = 0
        collector = _TokenCollector()

        while True:
            chunk = reader.read(self.config.chunk_size)
            final = not chunk
            try:
                collector.feed(chunk, final)
            except expat.ExpatError as e:
                self.error = e
                self.logger.warning(
                    "Tokenization stopped on syntax error",
                    extra={
                        "error": expat.ErrorString(e.code),
                        "line": e.lineno,
                        "column": e.offset + 1,
                    },
                )
                yield from collector.drain()
                return

            self.characters_processed += len(chunk)
            yield from collector.drain()
            if final:
                return

    @property
    def error_position(self) -> Optional[TokenPosition]:
        """Position of the syntax error that ended the stream, if any."""
        if self.error is None:
            return None
        return TokenPosition(
            line=max(self.error.lineno, 1),
            column=self.error.offset + 1,
            offset=0,
        )
