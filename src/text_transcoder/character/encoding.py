"""Byte order mark detection and BOM output.

Detection follows a fixed priority: the UTF-16 byte order marks, then the
UTF-8 mark, then an ASCII-only heuristic over the first bytes of the input.
Anything else is inconclusive; the caller decides whether that is fatal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from ..shared.config import DEFAULT_DETECTION_MIN_BYTES, DEFAULT_DETECTION_SAMPLE_SIZE
from ..shared.errors import EmptyInputError
from ..shared.types import Encoding
from .byte_io import ByteSource

ASCII_MAX = 0x7F

# Byte order marks in detection priority order
BOM_TABLE: Tuple[Tuple[bytes, Encoding], ...] = (
    (b"\xfe\xff", Encoding.UTF16_BE),
    (b"\xff\xfe", Encoding.UTF16_LE),
    (b"\xef\xbb\xbf", Encoding.UTF8),
)

TARGET_BOMS: Dict[Encoding, bytes] = {
    Encoding.SINGLE_BYTE: b"",
    Encoding.UTF8: b"\xef\xbb\xbf",
    Encoding.UTF16_LE: b"\xff\xfe",
    Encoding.UTF16_BE: b"\xfe\xff",
}


def bom_for(encoding: Encoding) -> bytes:
    """Return the marker bytes written at the start of ``encoding`` output.

    Raises:
        ValueError: If ``encoding`` is AUTO or UNSPECIFIED
    """
    try:
        return TARGET_BOMS[encoding]
    except KeyError:
        raise ValueError(
            f"No byte order mark for unresolved encoding {encoding.display_name}"
        ) from None


class DetectionMethod(Enum):
    """Enumeration of encoding detection outcomes."""
    BOM = "bom"
    ASCII_HEURISTIC = "ascii_heuristic"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class DetectionResult:
    """Result of source encoding detection.

    Attributes:
        encoding: Detected encoding, ``UNSPECIFIED`` when inconclusive
        marker_length: Number of BOM bytes consumed from the source
        method: How the encoding was determined
        sample: Leading bytes that were inspected
    """
    encoding: Encoding
    marker_length: int
    method: DetectionMethod
    sample: bytes = b""

    @property
    def is_conclusive(self) -> bool:
        return self.encoding is not Encoding.UNSPECIFIED


class BOMDetector:
    """Classify a byte source by its byte order mark or ASCII-only prefix."""

    def __init__(
        self,
        min_sample_size: int = DEFAULT_DETECTION_MIN_BYTES,
        sample_size: int = DEFAULT_DETECTION_SAMPLE_SIZE,
    ) -> None:
        """Initialize the detector.

        Args:
            min_sample_size: Fewest bytes needed for the ASCII heuristic
            sample_size: Most bytes inspected by the ASCII heuristic
        """
        if min_sample_size <= 0 or sample_size < min_sample_size:
            raise ValueError("Require 0 < min_sample_size <= sample_size")
        self.min_sample_size = min_sample_size
        self.sample_size = sample_size

    def detect(self, source: ByteSource) -> DetectionResult:
        """Detect the encoding of ``source`` from its leading bytes.

        On a BOM match the source is left just past the marker; otherwise it
        is returned to where it started.

        Raises:
            EmptyInputError: If the source holds no bytes
        """
        start = source.tell()
        sample = source.read_bytes(self.sample_size)
        if not sample:
            raise EmptyInputError()

        result = self.classify(sample)
        source.seek(start + result.marker_length)
        return result

    def classify(self, sample: bytes) -> DetectionResult:
        """Classify already-read leading bytes without touching any source.

        Raises:
            EmptyInputError: If ``sample`` is empty
        """
        if not sample:
            raise EmptyInputError()
        sample = sample[:self.sample_size]

        for prefix, encoding in BOM_TABLE:
            if sample.startswith(prefix):
                return DetectionResult(
                    encoding=encoding,
                    marker_length=len(prefix),
                    method=DetectionMethod.BOM,
                    sample=sample,
                )

        if len(sample) >= self.min_sample_size and all(b <= ASCII_MAX for b in sample):
            return DetectionResult(
                encoding=Encoding.SINGLE_BYTE,
                marker_length=0,
                method=DetectionMethod.ASCII_HEURISTIC,
                sample=sample,
            )

        return DetectionResult(
            encoding=Encoding.UNSPECIFIED,
            marker_length=0,
            method=DetectionMethod.INCONCLUSIVE,
            sample=sample,
        )
