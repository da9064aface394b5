"""Configuration classes for text transcoding.

This module provides the immutable configuration object that controls source
detection, target encoding and logging for a transcoding run, along with its
serialization helpers.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .types import Encoding

# BOM-less detection thresholds
DEFAULT_DETECTION_MIN_BYTES = 16
DEFAULT_DETECTION_SAMPLE_SIZE = 32

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(ValueError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _check_type(value: Any, expected: type, field_name: str) -> None:
    # bool is an int subclass but never a valid count
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigValidationError(
            f"{field_name} must be of type {expected.__name__}, got {type(value).__name__}",
            field_name=field_name,
        )


def _coerce_encoding(value: Union[Encoding, str], field_name: str) -> Encoding:
    if isinstance(value, Encoding):
        return value
    if isinstance(value, str):
        try:
            return Encoding.from_name(value)
        except ValueError as e:
            raise ConfigValidationError(str(e), field_name=field_name) from e
    raise ConfigValidationError(
        f"{field_name} must be an Encoding or encoding name, got {type(value).__name__}",
        field_name=field_name,
    )


@dataclass(frozen=True)
class TranscodeConfig:
    """Configuration for a transcoding run.

    Thread-safe due to frozen dataclass implementation. Encoding fields accept
    either ``Encoding`` members or their names (``"AUTO"``, ``"ANSI"``,
    ``"UTF8"``, ``"UTF16"``, ``"UTF16BE"``).

    With an explicit ``source_encoding``, ``skip_source_bom`` skips a leading
    BOM only when it names that same encoding; any other BOM is decoded as
    text. The C++ txu tool skipped any BOM it found in that case.
    """

    source_encoding: Encoding = Encoding.AUTO
    target_encoding: Encoding = Encoding.SINGLE_BYTE

    # Detection settings
    detection_min_bytes: int = DEFAULT_DETECTION_MIN_BYTES
    detection_sample_size: int = DEFAULT_DETECTION_SAMPLE_SIZE
    skip_source_bom: bool = True

    # Logging and diagnostics
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize encoding names and validate the configuration."""
        source = _coerce_encoding(self.source_encoding, "source_encoding")
        target = _coerce_encoding(self.target_encoding, "target_encoding")
        object.__setattr__(self, "source_encoding", source)
        object.__setattr__(self, "target_encoding", target)

        if source is Encoding.UNSPECIFIED:
            raise ConfigValidationError(
                "source_encoding must be AUTO or a concrete encoding",
                field_name="source_encoding",
            )
        if not target.is_concrete:
            raise ConfigValidationError(
                f"target_encoding must be a concrete encoding, got {target.display_name}",
                field_name="target_encoding",
                suggestions=["Use one of ANSI, UTF8, UTF16, UTF16BE"],
            )
        _check_type(self.detection_min_bytes, int, "detection_min_bytes")
        _check_type(self.detection_sample_size, int, "detection_sample_size")
        _check_type(self.skip_source_bom, bool, "skip_source_bom")
        _check_type(self.logging_level, str, "logging_level")
        if self.correlation_id is not None:
            _check_type(self.correlation_id, str, "correlation_id")
        if self.detection_min_bytes <= 0:
            raise ConfigValidationError(
                "detection_min_bytes must be > 0", field_name="detection_min_bytes"
            )
        if self.detection_sample_size < self.detection_min_bytes:
            raise ConfigValidationError(
                "detection_sample_size must be >= detection_min_bytes",
                field_name="detection_sample_size",
            )
        if self.logging_level.upper() not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "TranscodeConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = TranscodeConfig()
            >>> config.override(target_encoding="UTF8").target_encoding
            <Encoding.UTF8: 'utf8'>
        """
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        Encodings are written by their human-readable names so the result can
        be fed back through ``from_dict``.
        """
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Encoding):
                value = value.display_name
            result[f.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscodeConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected rather than silently ignored.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                suggestions=sorted(known),
            )
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "TranscodeConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Path) -> "TranscodeConfig":
        """Load configuration from a JSON file."""
        try:
            text = Path(config_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        return cls.from_json(text)
