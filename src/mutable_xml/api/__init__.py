"""Public parsing API for the mutable XML document model.

This module exposes the entry points for turning XML input into element trees:
``new_from_reader`` raises on malformed input, while ``parse``,
``parse_string`` and ``parse_file`` report failures through ``ParseResult``.
"""

from .parser import new_from_reader, parse, parse_file, parse_string

__all__ = ["new_from_reader", "parse", "parse_file", "parse_string"]
