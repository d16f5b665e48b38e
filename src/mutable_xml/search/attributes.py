"""Chainable filtering over attribute lists."""

from typing import List, Optional

from mutable_xml.shared import Attr


class AttributeSearch(List[Attr]):
    """List of attributes narrowed by name, namespace or value."""

    def by_name(self, name: str) -> "AttributeSearch":
        """Keep attributes whose local name equals ``name``, ignoring namespace."""
        return type(self)(attr for attr in self if attr.name.local == name)

    def by_space(self, space: str) -> "AttributeSearch":
        """Keep attributes in the given namespace."""
        return type(self)(attr for attr in self if attr.name.space == space)

    def by_value(self, value: str) -> "AttributeSearch":
        """Keep attributes whose value equals ``value``."""
        return type(self)(attr for attr in self if attr.value == value)

    def one(self) -> Optional[Attr]:
        """Get the first result, or None when the search is empty."""
        return self[0] if self else None
