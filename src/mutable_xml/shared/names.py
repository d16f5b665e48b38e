"""Qualified names and attributes shared by every layer of the document model.

A qualified name pairs a local part with a namespace URI (which may be empty).
Tokens, elements and search predicates all speak in these two types, so they
live here rather than in the tree package.
"""

from dataclasses import dataclass

XMLNS_SPACE = "xmlns"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass(frozen=True)
class QName:
    """Qualified name: local part plus namespace URI (empty when unqualified)."""

    local: str
    space: str = ""

    def __str__(self) -> str:
        if self.space:
            return f"{self.space}:{self.local}"
        return self.local

    def matches(self, other: "QName") -> bool:
        """Check for an exact (local, space) match."""
        return self.local == other.local and self.space == other.space


@dataclass
class Attr:
    """Single attribute with a qualified name and a string value."""

    name: QName
    value: str = ""

    def __post_init__(self) -> None:
        """Validate attribute values."""
        if not isinstance(self.name, QName):
            raise TypeError("Attribute name must be a QName instance")
        if not isinstance(self.value, str):
            raise TypeError("Attribute value must be a string")

    @property
    def is_namespace_declaration(self) -> bool:
        """Check if this attribute declares a namespace (xmlns or xmlns:p)."""
        return (
            self.name.space.lower() == XMLNS_SPACE
            or self.name.local.lower() == XMLNS_SPACE
        )

    def matches(self, other: "Attr") -> bool:
        """Check for an exact (local, space, value) match."""
        return self.name.matches(other.name) and self.value == other.value
