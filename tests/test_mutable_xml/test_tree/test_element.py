"""Tests for the mutable element tree.

Covers the value/children invariant, child creation bookkeeping, namespace
prefix tables, identity-based removal and pretty print propagation.
"""

import pytest

from mutable_xml.shared import (
    DEFAULT_DECLARATION,
    Attr,
    ElementNotFoundError,
    InvariantError,
    MutableXMLError,
    QName,
)
from mutable_xml.tree import NO_PREFIX, Element, NamespacePrefixes, new


class TestElementInvariants:
    """Test that an element never holds a value and children together."""

    def test_set_value_on_leaf(self) -> None:
        """Test setting a value on an element without children."""
        element = Element(name=QName("Foo", "foo.local"))

        assert element.set_value("bar") is element
        assert element.value == "bar"

    def test_set_value_with_children_raises_error(self) -> None:
        """Test that setting a value on a parent is a programming error."""
        element = new(QName("Foo", "foo.local"))
        element.add_child(QName("Bar"))

        with pytest.raises(InvariantError, match="tried setting value"):
            element.set_value("baz")

    def test_set_empty_value_with_children_raises_error(self) -> None:
        """Test that even an empty value is refused once children exist."""
        element = new("Foo")
        element.add_child("Bar")

        with pytest.raises(InvariantError):
            element.set_value("")

    def test_add_child_with_value_raises_error(self) -> None:
        """Test that adding a child to a valued element is a programming error."""
        element = new("Foo").set_value("bar")

        with pytest.raises(InvariantError, match="tried adding child"):
            element.add_child(QName("baz"))
        assert element.children == []

    def test_invariant_error_is_not_a_recoverable_error(self) -> None:
        """Test that API misuse cannot be caught as a document error."""
        assert issubclass(InvariantError, AssertionError)
        assert not issubclass(InvariantError, MutableXMLError)

    def test_set_value_rejects_non_string(self) -> None:
        """Test that values must be strings."""
        with pytest.raises(TypeError, match="must be a string"):
            new("Foo").set_value(5)  # type: ignore


class TestElementChildren:
    """Test child creation and the data it inherits."""

    def test_new_sets_default_declaration(self) -> None:
        """Test that new() creates a root with the UTF-8 declaration."""
        root = new("Catalog")

        assert root.declaration == DEFAULT_DECLARATION
        assert root.parents == []
        assert isinstance(root.ns_prefixes, NamespacePrefixes)

    def test_new_accepts_string_name(self) -> None:
        """Test that a plain string is taken as an unqualified name."""
        assert new("Catalog").name == QName("Catalog")

    def test_add_child_records_parents(self) -> None:
        """Test that parents holds the ancestry from the root."""
        root = new(QName("Foo", "foo.local"))
        child = root.add_child(QName("Bar"))
        grandchild = child.add_child(QName("Baz"))

        assert child.parents == [QName("Foo", "foo.local")]
        assert grandchild.parents == [QName("Foo", "foo.local"), QName("Bar")]
        assert len(grandchild.parents) == 2

    def test_add_child_shares_prefix_table(self) -> None:
        """Test that a document has one prefix table shared by all elements."""
        root = new("Catalog")
        child = root.add_child("books")

        assert child.ns_prefixes is root.ns_prefixes
        child.add_namespace("b", "api.books.localhost")
        assert root.ns_prefixes.get_prefix("api.books.localhost") == "b"

    def test_add_child_copies_pretty_flag(self) -> None:
        """Test that a new child takes the parent's current pretty flag."""
        root = new("Catalog").set_pretty_xml(True)

        assert root.add_child("books").pretty_xml is True

    def test_add_child_returns_child_for_chaining(self) -> None:
        """Test that add_child returns the new element, appended last."""
        root = new("Catalog")
        first = root.add_child("a")
        second = root.add_child("a")

        assert root.children == [first, second]
        assert first is not second
        assert second.declaration == ""

    def test_children_are_compared_by_identity(self) -> None:
        """Test that equal-looking siblings remain distinct."""
        root = new("root")
        first = root.add_child("item").set_value("x")
        second = root.add_child("item").set_value("x")

        assert first != second


class TestElementAttributes:
    """Test attribute storage and namespace declarations."""

    def test_add_attribute_keeps_order_and_duplicates(self) -> None:
        """Test that attributes are appended without de-duplication."""
        element = new("Foo")
        element.add_attribute(Attr(QName("type"), "bar"))
        element.add_attribute(Attr(QName("type"), "baz"))

        assert [a.value for a in element.attributes] == ["bar", "baz"]

    def test_get_attribute_first_match_wins(self) -> None:
        """Test that name lookups return the first matching attribute."""
        element = new("Foo")
        element.add_attribute(Attr(QName("type"), "bar"))
        element.add_attribute(Attr(QName("type"), "baz"))

        assert element.get_attribute("type") == "bar"
        assert element.get_attribute("type", "ns1") is None
        assert element.get_attribute("missing") is None

    def test_add_attribute_rejects_other_types(self) -> None:
        """Test that only Attr instances are accepted."""
        with pytest.raises(TypeError, match="Attr instance"):
            new("Foo").add_attribute(("type", "bar"))  # type: ignore

    def test_add_namespace_with_prefix(self) -> None:
        """Test that a prefixed declaration adds xmlns:prefix and registers it."""
        element = new("Catalog").add_namespace("b", "api.books.localhost")

        assert element.attributes == [
            Attr(QName("b", "xmlns"), "api.books.localhost")
        ]
        assert element.ns_prefixes.get_prefix("api.books.localhost") == "b"

    def test_add_namespace_without_prefix(self) -> None:
        """Test that an empty prefix declares a default namespace."""
        element = new("Job").add_namespace("", "foo.local")

        assert element.attributes == [Attr(QName("xmlns"), "foo.local")]
        assert element.ns_prefixes.get_prefix("foo.local") is NO_PREFIX
        assert element.ns_prefixes.prefix_for("foo.local") is None

    def test_attribute_search_starts_from_attributes(self) -> None:
        """Test that attribute_search covers the element's own attributes."""
        element = new("Foo")
        element.add_attribute(Attr(QName("id"), "1"))

        assert element.attribute_search().by_name("id").one() == Attr(QName("id"), "1")


class TestNamespacePrefixes:
    """Test the per-document prefix table."""

    def test_missing_entry_differs_from_no_prefix(self) -> None:
        """Test that an unknown namespace and a default namespace are distinct."""
        prefixes = NamespacePrefixes()
        prefixes.register("foo.local", NO_PREFIX)

        assert prefixes.get_prefix("foo.local") is NO_PREFIX
        assert prefixes.get_prefix("bar.local") is None
        assert "foo.local" in prefixes
        assert "bar.local" not in prefixes

    def test_empty_prefix_is_normalized(self) -> None:
        """Test that registering an empty prefix stores NO_PREFIX."""
        prefixes = NamespacePrefixes()
        prefixes["foo.local"] = ""

        assert prefixes["foo.local"] is NO_PREFIX

    def test_one_prefix_per_namespace(self) -> None:
        """Test that re-registering a namespace replaces its prefix."""
        prefixes = NamespacePrefixes({"urn:a": "a"})
        prefixes.register("urn:a", "alpha")

        assert len(prefixes) == 1
        assert prefixes.prefix_for("urn:a") == "alpha"
        assert prefixes.namespace_for("alpha") == "urn:a"
        assert prefixes.namespace_for("a") is None

    def test_invalid_prefix_type_raises_error(self) -> None:
        """Test that prefixes must be strings or NO_PREFIX."""
        with pytest.raises(TypeError, match="Prefix must be"):
            NamespacePrefixes().register("urn:a", 1)  # type: ignore


class TestRemoveChild:
    """Test identity-based removal anywhere in a subtree."""

    def test_remove_direct_child(self) -> None:
        """Test removing a direct child."""
        root = new("root")
        keep = root.add_child("keep")
        drop = root.add_child("drop")

        root.remove_child(drop)

        assert root.children == [keep]

    def test_remove_indirect_descendant(self) -> None:
        """Test removing an element that is not a direct child."""
        root = new("root")
        middle = root.add_child("middle")
        target = middle.add_child("target")
        middle.add_child("sibling")

        root.remove_child(target)

        assert target not in root.all_children()
        assert [c.name.local for c in middle.children] == ["sibling"]

    def test_remove_uses_identity_not_equality(self) -> None:
        """Test that only the given element is removed among look-alikes."""
        root = new("root")
        first = root.add_child("item").set_value("x")
        second = root.add_child("item").set_value("x")

        root.remove_child(second)

        assert len(root.children) == 1
        assert root.children[0] is first

    def test_remove_missing_element_raises_error(self) -> None:
        """Test that removing an unknown element fails and changes nothing."""
        root = new("root")
        root.add_child("a").add_child("b")
        stranger = new("b")
        before = root.all_children()

        with pytest.raises(ElementNotFoundError, match="not found"):
            root.remove_child(stranger)

        assert root.all_children() == before

    def test_element_not_found_is_lookup_error(self) -> None:
        """Test that removal failures can be handled as lookup errors."""
        assert issubclass(ElementNotFoundError, LookupError)
        assert issubclass(ElementNotFoundError, MutableXMLError)


class TestTraversal:
    """Test descendant enumeration, pretty flags and paths."""

    def _build(self) -> Element:
        root = new("root")
        a = root.add_child("a")
        a.add_child("a1")
        a.add_child("a2")
        root.add_child("b").add_child("b1")
        return root

    def test_all_children_is_document_order(self) -> None:
        """Test that all descendants are listed in pre-order."""
        root = self._build()

        names = [e.name.local for e in root.all_children()]

        assert names == ["a", "a1", "a2", "b", "b1"]

    def test_all_children_is_a_copy(self) -> None:
        """Test that the flattened list is not the children list."""
        root = self._build()

        flattened = root.all_children()
        flattened.clear()

        assert len(root.children) == 2

    def test_set_pretty_xml_covers_current_descendants(self) -> None:
        """Test that the flag is set on the element and every descendant."""
        root = self._build()

        assert root.set_pretty_xml(True) is root
        assert root.pretty_xml
        assert all(e.pretty_xml for e in root.all_children())

    def test_set_pretty_xml_does_not_reach_later_children(self) -> None:
        """Test that the flag is copied at creation time, not inherited later.

        A child created under a non-pretty parent stays non-pretty even after
        the root is switched on, because the parent's flag was copied before.
        """
        root = new("root")
        branch = root.add_child("branch")
        root.pretty_xml = True

        late = branch.add_child("late")

        assert root.pretty_xml is True
        assert late.pretty_xml is False

    def test_xpath(self) -> None:
        """Test that paths join ancestry with namespace-qualified steps."""
        root = new(QName("Foo", "foo.local"))
        child = root.add_child(QName("Bar"))

        assert root.xpath() == "foo.local:Foo"
        assert child.xpath() == "foo.local:Foo/Bar"
