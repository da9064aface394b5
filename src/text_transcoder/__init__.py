"""Text Transcoder.

Converts text streams between single-byte ANSI, UTF-8 and UTF-16 (either byte
order), with byte order mark based auto-detection of the input encoding.

Progressive API Disclosure:
- Level 1: Simple functions - transcode(), transcode_file()
- Level 2: Configured transcoder - LineTranscoder with TranscodeConfig
- Level 3: Codec components - CodePointReader, CodePointWriter, BOMDetector
"""

__version__ = "0.1.0"
__author__ = "Text Transcoder Team"

# Progressive API disclosure - Level 1: Simple functions
from .api import transcode, transcode_file

# Progressive API disclosure - Level 2 and 3: Configured and component use
from .character import (
    BOMDetector,
    CodePointReader,
    CodePointWriter,
    DetectionResult,
    LineTranscoder,
    TranscodeResult,
)
from .shared import (
    AmbiguousEncodingError,
    Encoding,
    EmptyInputError,
    InvalidByteSequenceError,
    SinkWriteError,
    TranscodeConfig,
    TranscodeError,
    TranscodeStats,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple transcoding functions
    "transcode",
    "transcode_file",

    # Level 2: Configured transcoder
    "LineTranscoder",
    "TranscodeConfig",
    "TranscodeResult",
    "TranscodeStats",

    # Level 3: Codec components
    "BOMDetector",
    "CodePointReader",
    "CodePointWriter",
    "DetectionResult",
    "Encoding",

    # Errors
    "TranscodeError",
    "EmptyInputError",
    "AmbiguousEncodingError",
    "InvalidByteSequenceError",
    "SinkWriteError",
]
