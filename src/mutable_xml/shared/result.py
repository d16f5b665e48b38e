"""Diagnostic and performance records attached to parse results."""

import time
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Input was accepted but something was ignored
    ERROR = auto()      # The parse failed; no tree was produced
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """One finding reported by a parse or a conversion.

    ``position`` uses the ``line``/``column``/``offset`` keys of
    ``TokenPosition.to_dict()``.
    """

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def __str__(self) -> str:
        text = f"{self.severity.name} [{self.component}] {self.message}"
        if self.position:
            text += f" (line {self.position['line']}, column {self.position['column']})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = asdict(self)
        data["severity"] = self.severity.name
        return data


@dataclass
class PerformanceMetrics:
    """Counters collected while turning a token stream into a tree."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_consumed: int = 0
    elements_created: int = 0

    @property
    def tokens_per_second(self) -> float:
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_consumed * 1000.0) / self.processing_time_ms

    @property
    def elements_per_second(self) -> float:
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.elements_created * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        """Convert counters and rates to a dictionary."""
        data = asdict(self)
        data["tokens_per_second"] = self.tokens_per_second
        data["elements_per_second"] = self.elements_per_second
        return data
