"""Developer tools for text transcoding."""

from .profiling import ProfileSnapshot, TranscodeProfiler

__all__ = [
    "ProfileSnapshot",
    "TranscodeProfiler",
]
