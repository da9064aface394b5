"""Character processing layer for text transcoding.

This module provides byte order mark detection, per-encoding code point
decoding and encoding, and the line-oriented transcoding loop.
"""

from .byte_io import ByteSink, ByteSource
from .codec import (
    CodePointReader,
    CodePointWriter,
    encode_code_point,
    read_code_point,
    write_code_point,
)
from .encoding import (
    BOM_TABLE,
    BOMDetector,
    DetectionMethod,
    DetectionResult,
    bom_for,
)
from .stream import (
    LineTranscoder,
    TranscodeResult,
    TranscodeState,
)

__all__ = [
    # Byte adapters
    "ByteSink",
    "ByteSource",
    # Codec
    "CodePointReader",
    "CodePointWriter",
    "encode_code_point",
    "read_code_point",
    "write_code_point",
    # Detection
    "BOM_TABLE",
    "BOMDetector",
    "DetectionMethod",
    "DetectionResult",
    "bom_for",
    # Transcoding
    "LineTranscoder",
    "TranscodeResult",
    "TranscodeState",
]
