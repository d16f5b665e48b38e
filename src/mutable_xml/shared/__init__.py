"""Shared utilities for the mutable XML document model.

This module provides the qualified-name types, error taxonomy, configuration
objects, result records and logging helpers used across all layers.
"""

from .config import (
    DEFAULT_DECLARATION,
    ConfigError,
    ConfigValidationError,
    ParseConfig,
    RenderConfig,
    TreeConfig,
)
from .exceptions import (
    ElementNotFoundError,
    InvariantError,
    MalformedDocumentError,
    MutableXMLError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .names import XML_NAMESPACE, XMLNS_SPACE, Attr, QName
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "DEFAULT_DECLARATION",
    "ConfigError",
    "ConfigValidationError",
    "ParseConfig",
    "RenderConfig",
    "TreeConfig",
    "ElementNotFoundError",
    "InvariantError",
    "MalformedDocumentError",
    "MutableXMLError",
    "CorrelationLogger",
    "get_logger",
    "XML_NAMESPACE",
    "XMLNS_SPACE",
    "Attr",
    "QName",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
