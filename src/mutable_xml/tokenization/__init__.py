"""Token stream consumed by the tree builder.

Key Components:
    XMLTokenizer: Reads a stream and yields tokens lazily
    Token: Single token with name, attributes, text and position
    TokenType: Enumeration of the token kinds the builder understands
    TokenPosition: Line, column and byte offset of a token
"""

from .tokenizer import (
    Token,
    TokenPosition,
    TokenType,
    XMLTokenizer,
)

__all__ = [
    "Token",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
]
