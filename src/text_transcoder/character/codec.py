"""Per-encoding code point decoding and encoding.

Decoding is permissive. UTF-8 continuation bytes are not checked for their
``10xxxxxx`` marker and legacy 5- and 6-byte sequences are accepted. UTF-16
surrogate halves pass through as independent code points. A multi-byte
sequence cut short by end-of-input ends the stream rather than raising.
"""

from typing import Callable, Dict, Optional, Tuple

from ..shared.errors import InvalidByteSequenceError
from ..shared.result import TranscodeStats
from ..shared.types import Encoding
from .byte_io import ByteSink, ByteSource

UTF8_CONTINUATION_MASK = 0x3F
UTF8_CONTINUATION_MARKER = 0x80
UTF8_PAYLOAD_BITS = 6

# (mask, marker, continuation byte count) for each UTF-8 leading byte family
UTF8_LEADING_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0x80, 0x00, 0),    # 0xxxxxxx
    (0xE0, 0xC0, 1),    # 110xxxxx
    (0xF0, 0xE0, 2),    # 1110xxxx
    (0xF8, 0xF0, 3),    # 11110xxx
    (0xFC, 0xF8, 4),    # 111110xx
    (0xFE, 0xFC, 5),    # 1111110x
)

# (largest value, leading marker, continuation byte count) for UTF-8 output
UTF8_ENCODING_LIMITS: Tuple[Tuple[int, int, int], ...] = (
    (0x7F, 0x00, 0),
    (0x7FF, 0xC0, 1),
    (0xFFFF, 0xE0, 2),
    (0x1FFFFF, 0xF0, 3),
    (0x3FFFFFF, 0xF8, 4),
    (0x7FFFFFFF, 0xFC, 5),
)
UTF8_MAX_ENCODABLE = UTF8_ENCODING_LIMITS[-1][0]


def _require_concrete(encoding: Encoding) -> None:
    if not encoding.is_concrete:
        raise ValueError(
            f"Encoding must be resolved before use, got {encoding.display_name}"
        )


class CodePointReader:
    """Decode one code point at a time from a ``ByteSource``."""

    def __init__(self) -> None:
        self._decoders: Dict[Encoding, Callable[[ByteSource], Optional[int]]] = {
            Encoding.SINGLE_BYTE: self._read_single_byte,
            Encoding.UTF8: self._read_utf8,
            Encoding.UTF16_LE: self._read_utf16_le,
            Encoding.UTF16_BE: self._read_utf16_be,
        }

    def read_code_point(
        self,
        source: ByteSource,
        encoding: Encoding,
        stats: Optional[TranscodeStats] = None,
    ) -> Optional[int]:
        """Read the next code point.

        Args:
            source: Byte source positioned at the start of a code point
            encoding: Concrete source encoding
            stats: Counters to update; ``characters`` grows by one per code point

        Returns:
            The decoded value, or None at end-of-input (including a truncated
            trailing sequence)

        Raises:
            InvalidByteSequenceError: On an unrecognized UTF-8 leading byte
            ValueError: If ``encoding`` is AUTO or UNSPECIFIED
        """
        _require_concrete(encoding)
        value = self._decoders[encoding](source)
        if value is not None and stats is not None:
            stats.characters += 1
        return value

    def _read_single_byte(self, source: ByteSource) -> Optional[int]:
        return source.read_byte()

    def _read_utf8(self, source: ByteSource) -> Optional[int]:
        offset = source.tell()
        lead = source.read_byte()
        if lead is None:
            return None

        for mask, marker, continuation_count in UTF8_LEADING_PATTERNS:
            if lead & mask == marker:
                break
        else:
            raise InvalidByteSequenceError(offset, lead)

        value = lead & ~mask & 0xFF
        for _ in range(continuation_count):
            byte = source.read_byte()
            if byte is None:
                return None
            value = (value << UTF8_PAYLOAD_BITS) | (byte & UTF8_CONTINUATION_MASK)
        return value

    def _read_utf16_le(self, source: ByteSource) -> Optional[int]:
        pair = source.read_bytes(2)
        if len(pair) < 2:
            return None
        return pair[0] + 256 * pair[1]

    def _read_utf16_be(self, source: ByteSource) -> Optional[int]:
        pair = source.read_bytes(2)
        if len(pair) < 2:
            return None
        return 256 * pair[0] + pair[1]


class CodePointWriter:
    """Encode code points and write them to a ``ByteSink``."""

    def __init__(self) -> None:
        self._encoders: Dict[Encoding, Callable[[int], bytes]] = {
            Encoding.SINGLE_BYTE: self._encode_single_byte,
            Encoding.UTF8: self._encode_utf8,
            Encoding.UTF16_LE: self._encode_utf16_le,
            Encoding.UTF16_BE: self._encode_utf16_be,
        }

    def encode_code_point(self, encoding: Encoding, value: int) -> bytes:
        """Return the byte representation of ``value`` in ``encoding``.

        Single-byte and UTF-16 output keep only the low 8 or 16 bits of the
        value, without error.

        Raises:
            ValueError: If ``encoding`` is unresolved, ``value`` is negative, or
                ``value`` exceeds the 6-byte UTF-8 ceiling
        """
        _require_concrete(encoding)
        if value < 0:
            raise ValueError(f"Code point must be non-negative, got {value}")
        return self._encoders[encoding](value)

    def write_code_point(self, sink: ByteSink, encoding: Encoding, value: int) -> None:
        """Encode ``value`` and write it to ``sink``.

        Raises:
            SinkWriteError: If the sink rejects the write
        """
        sink.write_bytes(self.encode_code_point(encoding, value))

    def _encode_single_byte(self, value: int) -> bytes:
        return bytes((value & 0xFF,))

    def _encode_utf8(self, value: int) -> bytes:
        for limit, marker, continuation_count in UTF8_ENCODING_LIMITS:
            if value <= limit:
                break
        else:
            raise ValueError(
                f"Code point 0x{value:X} exceeds UTF-8 maximum 0x{UTF8_MAX_ENCODABLE:X}"
            )

        encoded = bytearray(continuation_count + 1)
        for index in range(continuation_count, 0, -1):
            encoded[index] = UTF8_CONTINUATION_MARKER | (value & UTF8_CONTINUATION_MASK)
            value >>= UTF8_PAYLOAD_BITS
        encoded[0] = marker | value
        return bytes(encoded)

    def _encode_utf16_le(self, value: int) -> bytes:
        return bytes((value & 0xFF, (value >> 8) & 0xFF))

    def _encode_utf16_be(self, value: int) -> bytes:
        return bytes(((value >> 8) & 0xFF, value & 0xFF))


_default_reader = CodePointReader()
_default_writer = CodePointWriter()


def read_code_point(
    source: ByteSource,
    encoding: Encoding,
    stats: Optional[TranscodeStats] = None,
) -> Optional[int]:
    """Module-level shortcut for ``CodePointReader.read_code_point``."""
    return _default_reader.read_code_point(source, encoding, stats)


def encode_code_point(encoding: Encoding, value: int) -> bytes:
    """Module-level shortcut for ``CodePointWriter.encode_code_point``."""
    return _default_writer.encode_code_point(encoding, value)


def write_code_point(sink: ByteSink, encoding: Encoding, value: int) -> None:
    """Module-level shortcut for ``CodePointWriter.write_code_point``."""
    _default_writer.write_code_point(sink, encoding, value)
