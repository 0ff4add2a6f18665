"""Configuration classes for text resource reading and writing.

This module provides configuration objects for the document reader, the
document writer and process-wide settings, plus an immutable aggregate that can
be serialized to and from JSON.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_COMPONENTS = ("reader", "writer", "global_")


@dataclass
class ReaderConfig:
    """Configuration for the document reader and its event stream."""

    chunk_size: int = 8192
    require_string_close_tag: bool = False
    resolve_entities: bool = False
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


@dataclass
class WriterConfig:
    """Configuration for the document writer."""

    encoding: str = "UTF-8"
    auto_formatting: bool = True
    indent: int = 4
    write_declaration: bool = True

    def __post_init__(self) -> None:
        """Validate writer configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        try:
            "".encode(self.encoding)
        except LookupError:
            raise ValueError(f"unknown encoding: {self.encoding}") from None
        if self.indent < 0:
            raise ValueError("indent must be >= 0")


@dataclass
class GlobalConfig:
    """Process-wide settings."""

    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {list(VALID_LOGGING_LEVELS)}")


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
class XmlStreamConfig:
    """Complete configuration for reading and writing text resource XML.

    Immutable; use :meth:`override` to derive a modified copy.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    writer: WriterConfig = field(default_factory=WriterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.reader.__post_init__()
            self.writer.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "XmlStreamConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use the
                ``component__field`` notation

        Returns:
            New XmlStreamConfig instance with overrides applied

        Example:
            >>> config = XmlStreamConfig()
            >>> compact = config.override(writer__auto_formatting=False)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for key, value in nested_overrides.items():
                if key in _COMPONENTS:
                    new_fields[key] = replace(getattr(self, key), **value)
                else:
                    new_fields[key] = value
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
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
            if isinstance(obj, (list, tuple)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "XmlStreamConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a mapping")

        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            field_values: Dict[str, Any] = {}
            for field_name, field_info in target_class.__dataclass_fields__.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"{field_name} must be a mapping", field_name=field_name
                        )
                    value = _dict_to_dataclass(value, field_info.type)
                field_values[field_name] = value
            return target_class(**field_values)

        try:
            return _dict_to_dataclass(data, cls)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "XmlStreamConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def strict(cls) -> "XmlStreamConfig":
        """Preset that also fails a group when a </string> close tag is missing."""
        return cls(reader=ReaderConfig(require_string_close_tag=True), name="strict")

    @classmethod
    def compact(cls) -> "XmlStreamConfig":
        """Preset that writes documents without indentation."""
        return cls(writer=WriterConfig(auto_formatting=False), name="compact")
