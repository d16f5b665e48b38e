"""Mutable XML.

An in-memory XML document model: parse a document into a tree of elements,
edit the tree, search it with chainable queries, and write it back out with
namespace prefixes resolved and optional indentation.

Typical use:
- Build: new(), Element.add_child(), Element.add_namespace()
- Read: new_from_reader() raises on malformed input; parse() reports it
- Search: Element.search(), Element.tag_search()
- Write: str(element) or Element.to_string(config)
"""

__version__ = "0.1.0"
__author__ = "Mutable XML Team"

from .api import new_from_reader, parse, parse_file, parse_string
from .search import AttributeSearch, Search, TagSearch
from .shared.config import ParseConfig, RenderConfig, TreeConfig
from .shared.exceptions import (
    ElementNotFoundError,
    InvariantError,
    MalformedDocumentError,
    MutableXMLError,
)
from .shared.names import Attr, QName
from .tree import NO_PREFIX, Element, NamespacePrefixes, ParseResult, new

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Building and reading documents
    "new",
    "new_from_reader",
    "parse",
    "parse_string",
    "parse_file",

    # Data structures
    "Attr",
    "QName",
    "Element",
    "NamespacePrefixes",
    "NO_PREFIX",
    "ParseResult",

    # Searches
    "Search",
    "TagSearch",
    "AttributeSearch",

    # Configuration classes
    "ParseConfig",
    "RenderConfig",
    "TreeConfig",

    # Errors
    "MutableXMLError",
    "MalformedDocumentError",
    "ElementNotFoundError",
    "InvariantError",
]
