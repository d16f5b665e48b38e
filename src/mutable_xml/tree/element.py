"""Mutable element tree for reading, editing and writing XML documents.

An element holds either a text value or child elements, never both. The rule
is enforced by the mutators and checked again when rendering; breaking it is a
programming error and raises ``InvariantError``.

Children are created through ``Element.add_child`` only. That call records the
ancestor names in ``parents`` (used for indentation and ``xpath``) and hands the
child the document's ``NamespacePrefixes`` table, so every element of a document
resolves prefixes against the same table.
"""

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from mutable_xml.search import AttributeSearch, Search, TagSearch
from mutable_xml.shared import (
    DEFAULT_DECLARATION,
    XMLNS_SPACE,
    Attr,
    ElementNotFoundError,
    InvariantError,
    QName,
    RenderConfig,
    get_logger,
)
from mutable_xml.tree.render import XMLRenderer

logger = get_logger(__name__, component="element")

NameType = Union[QName, str]


class _NoPrefix:
    """Marker for a namespace declared as the default (unprefixed) namespace."""

    _instance: Optional["_NoPrefix"] = None

    def __new__(cls) -> "_NoPrefix":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_PREFIX"

    def __bool__(self) -> bool:
        return False


NO_PREFIX = _NoPrefix()

PrefixType = Union[str, _NoPrefix]


class NamespacePrefixes(MutableMapping):
    """Per-document table mapping namespace URIs to the prefix used for them.

    ``NO_PREFIX`` marks a namespace declared with a bare ``xmlns="..."``: it is
    known, but elements in it render without a prefix. That is different from a
    namespace with no entry at all, for which ``get_prefix`` returns ``None``.
    """

    def __init__(self, *args, **kwargs) -> None:
        self._prefixes: dict = {}
        self.update(*args, **kwargs)

    def __getitem__(self, namespace: str) -> PrefixType:
        return self._prefixes[namespace]

    def __setitem__(self, namespace: str, prefix: PrefixType) -> None:
        if prefix == "":
            prefix = NO_PREFIX
        if not isinstance(prefix, (str, _NoPrefix)):
            raise TypeError("Prefix must be a string or NO_PREFIX")
        self._prefixes[namespace] = prefix

    def __delitem__(self, namespace: str) -> None:
        del self._prefixes[namespace]

    def __iter__(self) -> Iterator[str]:
        return iter(self._prefixes)

    def __len__(self) -> int:
        return len(self._prefixes)

    def __repr__(self) -> str:
        return f"NamespacePrefixes({self._prefixes!r})"

    def register(self, namespace: str, prefix: PrefixType) -> None:
        """Register the prefix for a namespace; an empty prefix means NO_PREFIX."""
        self[namespace] = prefix

    def get_prefix(self, namespace: str) -> Optional[PrefixType]:
        """Get the table entry for a namespace, or None when there is none."""
        return self._prefixes.get(namespace)

    def prefix_for(self, namespace: str) -> Optional[str]:
        """Get the prefix to write for a namespace, or None for an unprefixed name."""
        prefix = self._prefixes.get(namespace)
        if isinstance(prefix, str) and prefix:
            return prefix
        return None

    def namespace_for(self, prefix: str) -> Optional[str]:
        """Find the first namespace registered under a prefix."""
        for namespace, registered in self._prefixes.items():
            if registered == prefix:
                return namespace
        return None


def _as_qname(name: NameType) -> QName:
    if isinstance(name, QName):
        return name
    if isinstance(name, str):
        return QName(name)
    raise TypeError("Element name must be a QName or a string")


@dataclass(eq=False)
class Element:
    """Single node of a mutable XML document.

    Elements compare by identity, so two siblings with the same name and
    content are still distinct nodes for ``remove_child`` and search results.
    """

    name: QName
    attributes: List[Attr] = field(default_factory=list)
    value: str = ""
    children: List["Element"] = field(default_factory=list)
    cdata: bool = False
    declaration: str = ""
    pretty_xml: bool = False
    parents: List[QName] = field(default_factory=list)
    ns_prefixes: NamespacePrefixes = field(default_factory=NamespacePrefixes)

    def __post_init__(self) -> None:
        """Normalize the element name."""
        self.name = _as_qname(self.name)

    def __repr__(self) -> str:
        return (
            f"<Element {self.name} attributes={len(self.attributes)} "
            f"children={len(self.children)}>"
        )

    def __str__(self) -> str:
        return self.to_string()

    def set_value(self, value: str) -> "Element":
        """Set the text value of a leaf element.

        Raises:
            InvariantError: If the element already has children
        """
        if self.children:
            raise InvariantError("tried setting value on an element with children")
        if not isinstance(value, str):
            raise TypeError("Element value must be a string")

        self.value = value
        return self

    def add_attribute(self, attr: Attr) -> "Element":
        """Append an attribute; existing attributes with the same name are kept."""
        if not isinstance(attr, Attr):
            raise TypeError("Attribute must be an Attr instance")

        self.attributes.append(attr)
        return self

    def add_namespace(self, prefix: str, namespace: str) -> "Element":
        """Declare a namespace on this element and register its prefix.

        An empty prefix declares the default namespace: the element gets a bare
        ``xmlns`` attribute and the namespace is registered as ``NO_PREFIX``, so
        elements in it keep rendering without a prefix.
        """
        if prefix:
            self.add_attribute(Attr(QName(prefix, XMLNS_SPACE), namespace))
        else:
            self.add_attribute(Attr(QName(XMLNS_SPACE), namespace))

        self.ns_prefixes.register(namespace, prefix or NO_PREFIX)
        return self

    def add_child(self, name: NameType) -> "Element":
        """Create, append and return a new child element.

        The child copies this element's current ``pretty_xml`` flag, shares its
        namespace prefix table and records its ancestry in ``parents``.

        Raises:
            InvariantError: If this element has a non-empty value
        """
        if self.value != "":
            raise InvariantError("tried adding child on an element with non empty value")

        child = Element(
            name=_as_qname(name),
            pretty_xml=self.pretty_xml,
            parents=self.parents + [self.name],
            ns_prefixes=self.ns_prefixes,
        )
        self.children.append(child)
        return child

    def remove_child(self, target: "Element") -> None:
        """Remove an element from anywhere in this element's subtree.

        Raises:
            ElementNotFoundError: If the element is not in the subtree
        """
        if not self._remove_descendant(target):
            logger.debug(
                "Removal target not found",
                extra={"root": str(self.name), "target": str(target.name)},
            )
            raise ElementNotFoundError("element not found in subtree")

    def _remove_descendant(self, target: "Element") -> bool:
        for index, child in enumerate(self.children):
            if child is target:
                del self.children[index]
                return True
            if child._remove_descendant(target):
                return True
        return False

    def iter_descendants(self) -> Iterator["Element"]:
        """Iterate over all descendants in document order."""
        stack = list(reversed(self.children))
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def all_children(self) -> List["Element"]:
        """Get every descendant at any depth in document order."""
        return list(self.iter_descendants())

    def set_pretty_xml(self, pretty: bool) -> "Element":
        """Set the pretty print flag on this element and all current descendants.

        Children added later copy their parent's flag when they are created.
        """
        self.pretty_xml = pretty
        for element in self.iter_descendants():
            element.pretty_xml = pretty
        return self

    def xpath(self) -> str:
        """Get the path from the document root to this element.

        Each step is written as ``namespace:local`` or ``local`` when the step
        has no namespace.
        """
        return "/".join(str(name) for name in self.parents + [self.name])

    def get_attribute(self, local: str, space: str = "") -> Optional[str]:
        """Get the value of the first attribute with the given name."""
        for attr in self.attributes:
            if attr.name.local == local and attr.name.space == space:
                return attr.value
        return None

    def attribute_search(self) -> AttributeSearch:
        """Start an attribute search over this element's attributes."""
        return AttributeSearch(self.attributes)

    def search(self) -> Search:
        """Start a qualified-name search seeded with this element."""
        return Search([self])

    def tag_search(self) -> TagSearch:
        """Start a local-name search seeded with this element."""
        return TagSearch([self])

    def to_string(self, config: Optional[RenderConfig] = None) -> str:
        """Render this element and its subtree as XML text."""
        return XMLRenderer(config).render(self)


def new(name: NameType) -> Element:
    """Create a blank root element with the default XML declaration."""
    return Element(
        name=_as_qname(name),
        declaration=DEFAULT_DECLARATION,
        ns_prefixes=NamespacePrefixes(),
    )
