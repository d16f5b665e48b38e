#!/usr/bin/env python3
"""
Quick Start Guide for Mutable XML.

Builds a namespaced catalog by hand, then reads a catalog from text, edits it
through searches and writes it back out.
"""

import io
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mutable_xml import Attr, QName, TreeConfig, new, new_from_reader, parse_string

BOOKS = QName("books", "api.books.localhost")

CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<Catalog xmlns:b="api.books.localhost">
\t<b:done>true</b:done>
\t<b:books id="0">
\t\t<name>Book Title 0</name>
\t</b:books>
\t<b:books id="1">
\t\t<name>Book Title 1</name>
\t</b:books>
\t<b:books id="2">
\t\t<name>Book Title 2</name>
\t</b:books>
</Catalog>"""


def build_example():
    """Build a catalog from scratch."""

    print("📄 Step 1: Building a Document")
    print("-" * 30)

    catalog = new(QName("Catalog")).add_namespace("b", "api.books.localhost")
    catalog.set_pretty_xml(True)

    for i in range(3):
        book = catalog.add_child(BOOKS).add_attribute(Attr(QName("id"), str(i)))
        book.add_child(QName("name")).set_value(f"Book Title {i}")

    print(catalog)


def edit_example():
    """Read a catalog, add a child to one book and remove another."""

    print("\n✏️  Step 2: Reading and Editing")
    print("-" * 30)

    root = new_from_reader(io.StringIO(CATALOG))
    books = root.search().match_name_deep(BOOKS)
    print(f"✅ Found {len(books)} books")

    books.match_attr(Attr(QName("id"), "1")).one().add_child(
        QName("type")
    ).set_value("Fiction")
    root.remove_child(books.match_attr(Attr(QName("id"), "2")).one())

    first_title = root.tag_search().by_name("books").by_name("name").one()
    print(f"📚 First title: {first_title.value}")

    root.set_pretty_xml(True)
    print(root)

    print("📋 Compact output:")
    print(root.to_string(TreeConfig.compact().render))


def diagnostics_example():
    """Parse broken input without raising."""

    print("\n🔍 Step 3: Diagnostics")
    print("-" * 30)

    result = parse_string("<Catalog><b:books id='0'></Catalog>")
    print(f"✅ Parse success: {result.success}")
    for diagnostic in result.diagnostics:
        print(f"  - {diagnostic}")


def main():
    """Main function."""
    try:
        build_example()
        edit_example()
        diagnostics_example()

        print("\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
