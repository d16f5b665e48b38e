"""Integration adapters for exchanging documents with other XML libraries.

Each adapter converts an ``Element`` tree into a target representation and
back. Conversions never raise; failures come back as an unsuccessful
``ConversionResult`` carrying ERROR diagnostics, matching the ``parse`` API.

Adapters for optional libraries (lxml, pandas) report ``is_available() ==
False`` when the library is not installed and are skipped by the registry.
"""

import io
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from mutable_xml.shared import (
    Attr,
    DiagnosticEntry,
    DiagnosticSeverity,
    QName,
    get_logger,
)
from mutable_xml.tree import Element, new

from .parser import new_from_reader


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # Element tree libraries (lxml, ElementTree)
    DATA_FRAME = auto()      # Tabular libraries (pandas)


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def clark_name(name: QName) -> str:
    """Format a qualified name in ``{namespace}local`` notation."""
    if name.space:
        return f"{{{name.space}}}{name.local}"
    return name.local


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _to_target(self, element: Element) -> Any:
        """Convert an element tree; may raise."""

    @abstractmethod
    def _from_target(self, target_data: Any) -> Element:
        """Convert target data into an element tree; may raise."""

    def to_target(self, element: Element) -> ConversionResult:
        """Convert an element tree to the target format.

        Args:
            element: Root of the subtree to convert

        Returns:
            ConversionResult holding the target object on success
        """
        return self._convert(self._to_target, element, "to")

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target data to an element tree.

        Args:
            target_data: Object in the target format

        Returns:
            ConversionResult holding the root Element on success
        """
        return self._convert(self._from_target, target_data, "from")

    def _convert(self, convert, data: Any, direction: str) -> ConversionResult:
        start_time = time.time()
        if not self.is_available():
            return self._create_error_result(
                f"{self.metadata.target_library} is not installed", data, 0.0
            )

        try:
            converted = convert(data)
        except Exception as e:
            processing_time = (time.time() - start_time) * 1000
            self._logger.warning(
                "Conversion failed",
                extra={"direction": direction, "error": str(e)},
            )
            return self._create_error_result(
                f"Failed to convert {direction} {self.metadata.name}: {e}",
                data,
                processing_time,
            )

        processing_time = (time.time() - start_time) * 1000
        self._logger.debug(
            "Conversion completed",
            extra={"direction": direction, "processing_time_ms": processing_time},
        )
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=data,
            conversion_time_ms=processing_time,
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )

    @staticmethod
    def _copy_to_etree(element: Element, target: Any) -> None:
        for attr in element.attributes:
            if attr.is_namespace_declaration:
                continue
            target.set(clark_name(attr.name), attr.value)
        if element.value:
            target.text = element.value


class ElementTreeAdapter(IntegrationAdapter):
    """Adapter for conversion with xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Conversion between Element trees and ElementTree elements"
        )

    def is_available(self) -> bool:
        """ElementTree ships with Python."""
        return True

    def _to_target(self, element: Element) -> Any:
        import xml.etree.ElementTree as ET

        et_element = ET.Element(clark_name(element.name))
        self._copy_to_etree(element, et_element)
        for child in element.children:
            et_element.append(self._to_target(child))
        return et_element

    def _from_target(self, target_data: Any) -> Element:
        import xml.etree.ElementTree as ET

        xml_string = ET.tostring(target_data, encoding="unicode")
        return new_from_reader(io.StringIO(xml_string), correlation_id=self.correlation_id)


class LxmlAdapter(IntegrationAdapter):
    """Adapter for conversion with lxml.etree.

    The document's namespace prefixes are passed to lxml as the root ``nsmap``,
    so lxml serializes with the same prefixes. CDATA elements become
    ``lxml.etree.CDATA`` text.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Conversion between Element trees and lxml.etree elements"
        )

    def is_available(self) -> bool:
        """Check if lxml is available."""
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, element: Element) -> Any:
        from lxml import etree

        nsmap = {
            element.ns_prefixes.prefix_for(namespace): namespace
            for namespace in element.ns_prefixes
        }
        return self._build(element, etree, nsmap)

    def _build(self, element: Element, etree: Any, nsmap: Optional[Dict] = None) -> Any:
        lxml_element = etree.Element(clark_name(element.name), nsmap=nsmap)
        self._copy_to_etree(element, lxml_element)
        if element.cdata and element.value:
            lxml_element.text = etree.CDATA(element.value)
        for child in element.children:
            lxml_element.append(self._build(child, etree))
        return lxml_element

    def _from_target(self, target_data: Any) -> Element:
        from lxml import etree

        xml_bytes = etree.tostring(target_data, encoding="UTF-8", xml_declaration=True)
        return new_from_reader(io.BytesIO(xml_bytes), correlation_id=self.correlation_id)


class PandasAdapter(IntegrationAdapter):
    """Adapter for conversion with pandas DataFrames.

    ``to_target`` flattens a tree into one row per element in document order
    with ``tag``, ``namespace``, ``value``, ``path`` and ``depth`` columns plus
    one ``attr_<name>`` column per attribute name. ``from_target`` goes the
    other way for record tables: a ``data`` root holding one ``item`` per row
    and one leaf per non-null cell.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            description="Conversion between Element trees and pandas DataFrames"
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def _to_target(self, element: Element) -> Any:
        import pandas as pd

        rows = []
        for node in [element] + element.all_children():
            row: Dict[str, Any] = {
                "tag": node.name.local,
                "namespace": node.name.space,
                "value": node.value,
                "path": node.xpath(),
                "depth": len(node.parents),
            }
            for attr in node.attributes:
                if not attr.is_namespace_declaration:
                    row.setdefault(f"attr_{attr.name.local}", attr.value)
            rows.append(row)
        return pd.DataFrame(rows)

    def _from_target(self, target_data: Any) -> Element:
        import pandas as pd

        if not isinstance(target_data, pd.DataFrame):
            raise TypeError("Target data is not a pandas DataFrame")

        root = new("data")
        for index, row in target_data.iterrows():
            item = root.add_child("item")
            item.add_attribute(Attr(QName("index"), str(index)))
            for column, value in row.items():
                if pd.notna(value):
                    item.add_child(str(column)).set_value(str(value))
        return root


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        """Initialize the adapter registry."""
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Returns:
            Adapter instance if registered and available, None otherwise
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata for every registered adapter whose library is installed."""
        with self._lock:
            classes = list(self._adapters.values())
        instances = [adapter_class() for adapter_class in classes]
        return [instance.metadata for instance in instances if instance.is_available()]


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None when unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
register_adapter(PandasAdapter)
