"""Shared utilities for text transcoding.

This module provides shared value types, configuration objects, result types,
errors and logging helpers used across all processing layers.
"""

from .types import (
    ENCODING_NAMES,
    Encoding,
)
from .errors import (
    AmbiguousEncodingError,
    EmptyInputError,
    InvalidByteSequenceError,
    SinkWriteError,
    TranscodeError,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TranscodeStats,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    TranscodeConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "ENCODING_NAMES",
    "Encoding",
    "AmbiguousEncodingError",
    "EmptyInputError",
    "InvalidByteSequenceError",
    "SinkWriteError",
    "TranscodeError",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "TranscodeStats",
    "ConfigError",
    "ConfigValidationError",
    "TranscodeConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
