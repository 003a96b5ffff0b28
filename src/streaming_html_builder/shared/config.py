"""Configuration classes for streaming HTML rendering.

This module provides configuration objects for the builder, the diagnostics
subsystem, the pretty-printer and the builder pool.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

_COMPONENTS = ["builder", "diagnostics", "pretty", "pool"]


@dataclass
class BuilderConfig:
    """Configuration for builders and the markup they emit."""

    emit_doctype: bool = True
    doctype: str = "<!DOCTYPE html>"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate builder configuration."""
        if self.emit_doctype and not self.doctype:
            raise ValueError("doctype cannot be empty when emit_doctype is set")
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {self.encoding}") from e


@dataclass
class DiagnosticsConfig:
    """Configuration for the concern table and element identities."""

    id_attribute: str = "data-ele-id"
    id_length: int = 8
    capture_call_site: bool = True
    log_anomalies: bool = True

    def __post_init__(self) -> None:
        """Validate diagnostics configuration."""
        if not self.id_attribute or any(c.isspace() for c in self.id_attribute):
            raise ValueError("id_attribute must be a non-empty name without whitespace")
        if not (4 <= self.id_length <= 32):
            raise ValueError("id_length must be between 4 and 32")


@dataclass
class PrettyConfig:
    """Configuration for the pretty-printer."""

    indent_width: int = 2
    trailing_newline: bool = True

    def __post_init__(self) -> None:
        """Validate pretty-printer configuration."""
        if self.indent_width < 0:
            raise ValueError("indent_width must be >= 0")

    @property
    def indent_unit(self) -> str:
        """Whitespace written per nesting level."""
        return " " * self.indent_width


@dataclass
class PoolConfig:
    """Configuration for builder pooling."""

    max_size: int = 64
    pool_while_diagnosing: bool = False

    def __post_init__(self) -> None:
        """Validate pool configuration."""
        if self.max_size <= 0:
            raise ValueError("max_size must be > 0")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class RenderConfig:
    """Complete configuration for a render setup.

    Immutable, so one instance can be shared by every builder in a process.
    """

    builder: BuilderConfig = field(default_factory=BuilderConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    pretty: PrettyConfig = field(default_factory=PrettyConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        for component in _COMPONENTS:
            value = getattr(self, component)
            try:
                value.__post_init__()
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=component) from e
            except (AttributeError, TypeError) as e:
                raise ConfigValidationError(
                    f"{component} has the wrong type: {type(value).__name__}",
                    field_name=component,
                ) from e

    def override(self, **kwargs: Any) -> "RenderConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override, nested ones as ``component__field``

        Returns:
            New RenderConfig instance with overrides applied

        Example:
            >>> config = RenderConfig()
            >>> new_config = config.override(pretty__indent_width=4)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {_COMPONENTS}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files surface.
        """
        component_types = {
            "builder": BuilderConfig,
            "diagnostics": DiagnosticsConfig,
            "pretty": PrettyConfig,
            "pool": PoolConfig,
        }
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{key} must be a mapping", field_name=key
                    )
                try:
                    values[key] = component_types[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=[f"Use one of {_COMPONENTS + ['name', 'description']}"],
                )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "RenderConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def development(cls) -> "RenderConfig":
        """Preset for local development: call sites captured, no pooling while diagnosing."""
        return cls(
            diagnostics=DiagnosticsConfig(capture_call_site=True, log_anomalies=True),
            pretty=PrettyConfig(indent_width=2),
            pool=PoolConfig(max_size=8, pool_while_diagnosing=False),
            name="development",
            description="Diagnostics friendly settings for local rendering",
        )

    @classmethod
    def production(cls) -> "RenderConfig":
        """Preset for high-throughput servers."""
        return cls(
            diagnostics=DiagnosticsConfig(capture_call_site=False, log_anomalies=False),
            pool=PoolConfig(max_size=256),
            name="production",
            description="Settings for high-throughput rendering with pooled builders",
        )
