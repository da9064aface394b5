"""Byte source and byte sink adapters.

These adapters wrap ordinary binary file objects with the position tracking
the codec layer relies on. Sink failures surface as ``SinkWriteError``.
"""

import io
from typing import BinaryIO, Optional, Union

from ..shared.errors import SinkWriteError


class ByteSource:
    """Readable byte stream with position tracking.

    Attributes:
        position: Offset of the next byte to be read, relative to the start of
            the underlying stream when it is seekable
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        try:
            self.position = stream.tell() if stream.seekable() else 0
        except (AttributeError, OSError):
            self.position = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteSource":
        """Create a source over an in-memory byte string."""
        return cls(io.BytesIO(data))

    def read_bytes(self, count: int) -> bytes:
        """Read up to ``count`` bytes; an empty result means end-of-input."""
        data = self._stream.read(count) or b""
        self.position += len(data)
        return data

    def read_byte(self) -> Optional[int]:
        """Read a single byte value, or None at end-of-input."""
        data = self.read_bytes(1)
        return data[0] if data else None

    def tell(self) -> int:
        return self.position

    def seek(self, position: int) -> None:
        """Reposition the source to an earlier (or later) byte offset."""
        self._stream.seek(position)
        self.position = position


class ByteSink:
    """Writable byte stream that reports rejected writes as ``SinkWriteError``."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.bytes_written = 0

    def write_bytes(self, data: bytes) -> None:
        """Write ``data`` in full.

        Raises:
            SinkWriteError: If the stream raises or accepts fewer bytes
        """
        if not data:
            return
        try:
            written = self._stream.write(data)
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"Failed writing output file: {e}") from e
        if written is not None and written != len(data):
            raise SinkWriteError(
                f"Failed writing output file: wrote {written} of {len(data)} bytes"
            )
        self.bytes_written += len(data)

    def flush(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(f"Failed flushing output file: {e}") from e


SourceLike = Union[ByteSource, BinaryIO, bytes]
SinkLike = Union[ByteSink, BinaryIO]


def as_source(source: SourceLike) -> ByteSource:
    """Wrap bytes or a binary file object as a ``ByteSource``."""
    if isinstance(source, ByteSource):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return ByteSource.from_bytes(bytes(source))
    return ByteSource(source)


def as_sink(sink: SinkLike) -> ByteSink:
    """Wrap a binary file object as a ``ByteSink``."""
    if isinstance(sink, ByteSink):
        return sink
    return ByteSink(sink)
