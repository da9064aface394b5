"""Result objects and diagnostic types for text transcoding.

This module defines the counters, performance metrics and diagnostic entries
that a transcoding run reports back to its caller.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Content was dropped or altered
    ERROR = auto()      # The run failed


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

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


@dataclass
class TranscodeStats:
    """Counters for one transcoding run.

    ``characters`` counts every code point decoded, including those of a
    trailing line that is later discarded. ``lines`` counts only lines that
    were completed and written.
    """

    lines: int = 0
    characters: int = 0


@dataclass
class PerformanceMetrics:
    """Performance metrics for a transcoding run."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    bytes_written: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms
