"""Tree building from token streams.

The builder makes a single pass over the tokens with a stack of open elements.
The first start tag becomes the document root; every later one is created with
``add_child`` on the element at the top of the stack, so ancestry and the
namespace prefix table are set up exactly as they are for hand-built trees.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from mutable_xml.shared import (
    XMLNS_SPACE,
    DiagnosticEntry,
    DiagnosticSeverity,
    MalformedDocumentError,
    ParseConfig,
    PerformanceMetrics,
    get_logger,
)
from mutable_xml.tokenization import Token, TokenPosition, TokenType
from mutable_xml.tree.element import NO_PREFIX, Element, new


@dataclass
class ParseResult:
    """Outcome of a parse that reports failures instead of raising them.

    On success ``root`` holds the document. On failure ``root`` is None and the
    reason is recorded as an ERROR diagnostic; no partial tree is kept.
    """

    root: Optional[Element] = None
    success: bool = True
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Get total number of elements in the document."""
        if self.root is None:
            return 0
        return 1 + len(self.root.all_children())

    @property
    def declaration(self) -> str:
        """Get the declaration that will be written before the root."""
        return self.root.declaration if self.root is not None else ""

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        ))

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )


class XMLTreeBuilder:
    """Builds an element tree from a token stream.

    Raises ``MalformedDocumentError`` when the stream ends with elements still
    open, when it contains no element at all, or when text and child elements
    are mixed inside one element.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[ParseConfig] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Parse configuration, defaults to ParseConfig()
        """
        self.correlation_id = correlation_id
        self.config = config or ParseConfig()
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

        self.metrics = PerformanceMetrics()
        self._stack: List[Element] = []
        self._root: Optional[Element] = None
        self._declaration = ""
        self._in_start_tag = False
        self._last_position: Optional[TokenPosition] = None

    def build(self, tokens: Iterable[Token]) -> Element:
        """Build a document tree from tokens.

        Args:
            tokens: Tokens in document order; consumed to exhaustion

        Returns:
            Root element with the document declaration assigned

        Raises:
            MalformedDocumentError: If the tokens do not form a complete document
        """
        start_time = time.time()
        self._reset_state()
        self.logger.info("Starting tree building")

        for token in tokens:
            self.metrics.tokens_consumed += 1
            if token.position is not None:
                self._last_position = token.position
            self._process_token(token)

        self.metrics.processing_time_ms = (time.time() - start_time) * 1000

        if self._stack:
            unclosed = [str(element.name) for element in self._stack]
            position = self._last_position
            self.logger.warning(
                "Document ended with open elements",
                extra={"unclosed": unclosed},
            )
            raise MalformedDocumentError(
                "malformed document",
                position=position.to_dict() if position else None,
                unclosed=unclosed,
            )
        if self._root is None:
            raise MalformedDocumentError("no root element")

        self._root.declaration = self._declaration
        self.logger.info(
            "Tree building completed",
            extra={
                "element_count": self.metrics.elements_created,
                "token_count": self.metrics.tokens_consumed,
                "processing_time_ms": self.metrics.processing_time_ms,
            },
        )
        return self._root

    def _reset_state(self) -> None:
        self.metrics = PerformanceMetrics()
        self._stack.clear()
        self._root = None
        self._declaration = ""
        self._in_start_tag = False
        self._last_position = None

    def _process_token(self, token: Token) -> None:
        if token.type == TokenType.START_ELEMENT:
            self._handle_start_element(token)
        elif token.type == TokenType.END_ELEMENT:
            self._stack.pop()
            self._in_start_tag = False
        elif token.type == TokenType.CHAR_DATA:
            self._handle_character_data(token)
        elif token.type == TokenType.PROCESSING_INSTRUCTION:
            self._declaration = f"<?{token.target} {token.value}?>\n"
        else:
            self.logger.debug("Skipping token", extra={"token_type": token.type.name})

    def _handle_start_element(self, token: Token) -> None:
        if not self._stack:
            element = new(token.name)
            self._root = element
        else:
            parent = self._stack[-1]
            if parent.value:
                raise MalformedDocumentError(
                    "mixed content is not supported",
                    position=token.position.to_dict() if token.position else None,
                )
            element = parent.add_child(token.name)

        element.attributes = list(token.attributes)
        for attr in element.attributes:
            if attr.name.space.lower() == XMLNS_SPACE:
                element.ns_prefixes.register(attr.value, attr.name.local)
            elif attr.name.local.lower() == XMLNS_SPACE:
                element.ns_prefixes.register(attr.value, NO_PREFIX)

        self._stack.append(element)
        self._in_start_tag = True
        self.metrics.elements_created += 1

    def _handle_character_data(self, token: Token) -> None:
        # Text between a closing tag and the next tag belongs to no element
        if not self._in_start_tag:
            return
        value = token.value
        if not value.strip():
            value = ""
        elif self.config.trim_character_data:
            value = value.strip()
        self._stack[-1].value = value
