"""Public API layer for text transcoding."""

from .transcoder import transcode, transcode_file

__all__ = [
    "transcode",
    "transcode_file",
]
