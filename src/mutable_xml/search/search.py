"""Chainable element searches.

Both search types are plain lists of element references. Every operation
returns a new list of the same type, so queries read left to right and the
matched elements can be edited in place. Results keep document order; ``one()``
takes the first of them.

``Search`` matches qualified names and attributes exactly. ``TagSearch`` walks
descendants by local name only, ignoring namespaces, which makes path-like
lookups short to write::

    root.tag_search().by_name("result").by_name("id").one()
"""

from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from mutable_xml.shared import Attr, QName

if TYPE_CHECKING:
    from mutable_xml.tree.element import Element

Predicate = Callable[["Element"], bool]


def _has_attribute(element: "Element", attr: Attr) -> bool:
    return any(candidate.matches(attr) for candidate in element.attributes)


class Search(List["Element"]):
    """List of elements with exact (local name, namespace) and attribute matching."""

    def _collect(self, predicate: Predicate, include_self: bool,
                 deep: bool) -> "Search":
        result = type(self)()
        for element in self:
            if include_self and predicate(element):
                result.append(element)
            candidates: Iterable["Element"] = (
                element.iter_descendants() if deep else element.children
            )
            result.extend(candidate for candidate in candidates if predicate(candidate))
        return result

    def match_name(self, name: QName) -> "Search":
        """Keep the direct children of each element whose name matches exactly."""
        return self._collect(lambda e: e.name.matches(name), False, False)

    def match_name_deep(self, name: QName) -> "Search":
        """Keep each element and any of its descendants whose name matches exactly."""
        return self._collect(lambda e: e.name.matches(name), True, True)

    def match_attr(self, attr: Attr) -> "Search":
        """Keep the elements carrying an attribute equal to ``attr``."""
        return type(self)(element for element in self if _has_attribute(element, attr))

    def match_attr_deep(self, attr: Attr) -> "Search":
        """Keep each element and any descendant carrying an attribute equal to ``attr``."""
        return self._collect(lambda e: _has_attribute(e, attr), True, True)

    def one(self) -> Optional["Element"]:
        """Get the first result, or None when the search is empty."""
        return self[0] if self else None


class TagSearch(List["Element"]):
    """List of elements searched by local name at any depth."""

    def by_name(self, name: str) -> "TagSearch":
        """Keep the descendants of each element whose local name equals ``name``.

        The comparison is case sensitive and ignores namespaces.
        """
        return type(self)(
            descendant
            for element in self
            for descendant in element.iter_descendants()
            if descendant.name.local == name
        )

    def one(self) -> Optional["Element"]:
        """Get the first result, or None when the search is empty."""
        return self[0] if self else None
