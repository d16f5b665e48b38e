"""Serialization of element trees back into XML text.

Rendering is recursive and pre-order. Each element decides its own layout from
its ``pretty_xml`` flag and the depth recorded in ``parents``, and resolves its
tag name through the document's namespace prefix table. A namespace without a
registered prefix renders unprefixed; no prefix is ever invented here, apart
from the reserved ``xml`` prefix of the XML namespace.

Text is escaped with ``html.escape``, so quotes are written as ``&quot;`` and
``&#x27;``. Other escapers may use the numeric ``&#34;`` and ``&#39;`` forms;
both parse back to the same characters.
"""

import html
from typing import TYPE_CHECKING, List, Optional

from mutable_xml.shared import XML_NAMESPACE, Attr, InvariantError, RenderConfig

if TYPE_CHECKING:
    from mutable_xml.tree.element import Element, NamespacePrefixes


class XMLRenderer:
    """Renders an element and its subtree as XML text."""

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        """Initialize renderer.

        Args:
            config: Indentation and newline settings, defaults to RenderConfig()
        """
        self.config = config or RenderConfig()

    def render(self, element: "Element") -> str:
        """Render an element, its declaration and all of its children.

        Args:
            element: Element to render

        Returns:
            XML text

        Raises:
            InvariantError: If any element holds both a value and children
        """
        parts: List[str] = []
        self._render_element(element, parts)
        return "".join(parts)

    @staticmethod
    def tag_name(element: "Element") -> str:
        """Get the tag name as written, with its prefix when one is registered."""
        if element.name.space:
            prefix = element.ns_prefixes.prefix_for(element.name.space)
            if prefix:
                return f"{prefix}:{element.name.local}"
        return element.name.local

    @staticmethod
    def attribute_name(attr: Attr, prefixes: "NamespacePrefixes") -> str:
        """Get the attribute name as written.

        A namespace with a registered prefix uses that prefix; any other
        namespace (including the ``xmlns`` pseudo-namespace) is written as is.
        The XML namespace always has the ``xml`` prefix.
        """
        space = attr.name.space
        if not space:
            return attr.name.local
        prefix = prefixes.prefix_for(space)
        if not prefix and space == XML_NAMESPACE:
            prefix = "xml"
        return f"{prefix or space}:{attr.name.local}"

    def _render_element(self, element: "Element", out: List[str]) -> None:
        if element.value and element.children:
            raise InvariantError("element has both a non-empty value and children")

        indent = ""
        newline = ""
        if element.pretty_xml:
            indent = self.config.indent * len(element.parents)
            newline = self.config.newline

        tag = self.tag_name(element)
        start_tag = tag + "".join(
            f' {self.attribute_name(attr, element.ns_prefixes)}="{attr.value}"'
            for attr in element.attributes
        )

        out.append(element.declaration)
        if element.children:
            out.append(f"{indent}<{start_tag}>{newline}")
            for child in element.children:
                self._render_element(child, out)
            out.append(f"{indent}</{tag}>{newline}")
            return

        body = html.escape(element.value)
        if element.cdata:
            body = f"<![CDATA[{body}]]>"
        out.append(f"{indent}<{start_tag}>{body}</{tag}>{newline}")


def render(element: "Element", config: Optional[RenderConfig] = None) -> str:
    """Render an element with a one-off renderer."""
    return XMLRenderer(config).render(element)
