"""Exception types for text transcoding.

Every failure a transcoding run can hit is fatal to that run. The exceptions
below form a small closed taxonomy so callers can tell errors detected before
any output (``EmptyInputError``, ``AmbiguousEncodingError``) from errors that
may leave partial output behind (``InvalidByteSequenceError``,
``SinkWriteError``).
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .result import TranscodeStats


class TranscodeError(Exception):
    """Base exception for transcoding failures.

    Attributes:
        stats: Counters reached before the failure, when the failure happened
            after streaming had started
        stage: Name of the transcoding stage that failed, when known
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.stats: Optional["TranscodeStats"] = None
        self.stage: Optional[str] = None


class EmptyInputError(TranscodeError):
    """Raised when the byte source holds no data at all."""

    def __init__(self, message: str = "Empty input file") -> None:
        super().__init__(message)


class AmbiguousEncodingError(TranscodeError):
    """Raised when automatic detection cannot classify the source."""

    def __init__(
        self,
        message: str = (
            "AUTO mode can't identify input format. "
            "Please specify the input encoding explicitly."
        ),
    ) -> None:
        super().__init__(message)


class InvalidByteSequenceError(TranscodeError):
    """Raised when a UTF-8 leading byte matches no known sequence pattern.

    ``offset`` is the position of the offending byte itself, not the position
    just past it as the C++ txu tool reported.
    """

    def __init__(self, offset: int, byte_value: int) -> None:
        super().__init__(
            f"Invalid character sequence for UTF-8 at file offset {offset} "
            f"(leading byte 0x{byte_value:02X})"
        )
        self.offset = offset
        self.byte_value = byte_value


class SinkWriteError(TranscodeError):
    """Raised when the output destination rejects a write."""

    def __init__(self, message: str = "Failed writing output file") -> None:
        super().__init__(message)
