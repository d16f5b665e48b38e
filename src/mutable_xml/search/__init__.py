"""Chainable searches over element trees and attribute lists.

Key Components:
    Search: Exact qualified-name and attribute matching, shallow or deep
    TagSearch: Local-name lookups across all descendants
    AttributeSearch: Filtering of an element's attributes
"""

from .attributes import AttributeSearch
from .search import Search, TagSearch

__all__ = [
    "AttributeSearch",
    "Search",
    "TagSearch",
]
