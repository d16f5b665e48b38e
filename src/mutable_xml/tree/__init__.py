"""Element tree, renderer and tree builder.

Key Components:
    Element: Mutable XML element holding a value or children
    NamespacePrefixes: Per-document namespace URI to prefix table
    XMLRenderer: Serializes an element tree to text
    XMLTreeBuilder: Reconstructs an element tree from a token stream
    ParseResult: Non-raising parse outcome with diagnostics
"""

from .element import NO_PREFIX, Element, NamespacePrefixes, new
from .render import XMLRenderer, render
from .builder import ParseResult, XMLTreeBuilder

__all__ = [
    "NO_PREFIX",
    "Element",
    "NamespacePrefixes",
    "new",
    "XMLRenderer",
    "render",
    "ParseResult",
    "XMLTreeBuilder",
]
