"""Performance profiling tools for text transcoding.

Samples wall-clock time and resident memory around a transcoding run so the
command-line verbose report can show what a conversion cost.
"""

import time
from dataclasses import dataclass
from typing import Optional

import psutil

from ..shared.logging import get_logger


@dataclass
class ProfileSnapshot:
    """Timing and memory measurements for one profiled run."""

    label: str
    start_time: float
    end_time: float = 0.0
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return max(0.0, (self.end_time - self.start_time) * 1000)

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    def throughput_mb_per_s(self, input_size: int) -> float:
        """Processing throughput in MB/s for ``input_size`` bytes of input."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (input_size / (1024 * 1024)) / duration_s


class TranscodeProfiler:
    """Context manager that profiles a block of transcoding work.

    Examples:
        >>> with TranscodeProfiler("convert") as snapshot:
        ...     result = transcoder.transcode(source, sink)
        >>> snapshot.duration_ms >= 0
        True
    """

    def __init__(self, label: str = "transcode", enable_memory_tracking: bool = True):
        self.label = label
        self.enable_memory_tracking = enable_memory_tracking
        self.snapshot: Optional[ProfileSnapshot] = None
        self._process = psutil.Process() if enable_memory_tracking else None
        self.logger = get_logger(__name__, None, "profiler")

    def _rss(self) -> int:
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def __enter__(self) -> ProfileSnapshot:
        self.snapshot = ProfileSnapshot(
            label=self.label,
            start_time=time.perf_counter(),
            memory_start=self._rss(),
        )
        return self.snapshot

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.snapshot is None:
            return
        self.snapshot.end_time = time.perf_counter()
        self.snapshot.memory_end = self._rss()
        self.logger.debug(
            f"Profiled {self.label}: {self.snapshot.duration_ms:.1f}ms, "
            f"memory delta {self.snapshot.memory_delta} bytes"
        )
