"""Configuration classes for parsing and rendering documents.

Component configs are plain dataclasses validated in ``__post_init__``; the
frozen ``TreeConfig`` bundles them and handles (de)serialization and overrides.
"""

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

DEFAULT_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class ParseConfig:
    """Configuration for reading a document into a tree."""

    chunk_size: int = 8192
    trim_character_data: bool = True

    def __post_init__(self) -> None:
        """Validate parse configuration."""
        if self.chunk_size <= 0:
            raise ConfigValidationError("chunk_size must be > 0", "chunk_size")


@dataclass
class RenderConfig:
    """Configuration for turning a tree back into text."""

    indent: str = "\t"
    newline: str = "\n"

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if self.indent.strip():
            raise ConfigValidationError(
                "indent must contain only whitespace",
                "indent",
                suggestions=['Use "\\t" or a run of spaces'],
            )
        if self.newline not in ("\n", "\r\n", ""):
            raise ConfigValidationError(
                'newline must be "\\n", "\\r\\n" or ""', "newline"
            )


@dataclass(frozen=True)
class TreeConfig:
    """Complete configuration for the document model.

    Frozen, so a single instance can be shared between parses.
    """

    parse: ParseConfig = field(default_factory=ParseConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    _COMPONENTS = ("parse", "render")

    def override(self, **kwargs: Any) -> "TreeConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields in ``component__field`` notation

        Returns:
            New TreeConfig instance with overrides applied

        Example:
            >>> config = TreeConfig().override(render__indent="  ")
            >>> config.render.indent
            '  '
        """
        nested: Dict[str, Dict[str, Any]] = {}
        for key, value in kwargs.items():
            component, sep, field_name = key.partition("__")
            if not sep or component not in self._COMPONENTS:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    key,
                    suggestions=[f"{name}__<field>" for name in self._COMPONENTS],
                )
            nested.setdefault(component, {})[field_name] = value

        updated = {}
        for component, values in nested.items():
            try:
                updated[component] = replace(getattr(self, component), **values)
            except TypeError as e:
                raise ConfigValidationError(str(e), component) from e
        return replace(self, **updated)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            component: {
                f.name: getattr(getattr(self, component), f.name)
                for f in fields(getattr(self, component))
            }
            for component in self._COMPONENTS
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeConfig":
        """Create configuration from dictionary.

        Args:
            data: Mapping of component name to field values

        Returns:
            TreeConfig instance created from dictionary
        """
        unknown = set(data) - set(cls._COMPONENTS)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration sections: {sorted(unknown)}"
            )
        try:
            return cls(
                parse=ParseConfig(**data.get("parse", {})),
                render=RenderConfig(**data.get("render", {})),
            )
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "TreeConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def compact(cls) -> "TreeConfig":
        """Preset with indentation and newlines switched off."""
        return cls(render=RenderConfig(indent="", newline=""))
