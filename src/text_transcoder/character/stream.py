"""Line-oriented transcoding of byte streams.

This module ties detection and the code point codec together: it resolves the
source encoding, writes the target byte order mark, then pulls one complete
line of code points at a time from the source and writes it to the sink.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from ..shared.config import TranscodeConfig
from ..shared.errors import AmbiguousEncodingError, TranscodeError
from ..shared.logging import get_logger
from ..shared.result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TranscodeStats,
)
from ..shared.types import Encoding
from .byte_io import ByteSource, SinkLike, SourceLike, as_sink, as_source
from .codec import CodePointReader, CodePointWriter
from .encoding import BOMDetector, DetectionMethod, DetectionResult, bom_for

LINE_FEED = 0x0A

Line = List[int]


class TranscodeState(Enum):
    """Stages of a transcoding run."""
    START = "start"
    DETECT_ENCODING = "detect_encoding"
    WRITE_TARGET_BOM = "write_target_bom"
    STREAM_LINES = "stream_lines"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TranscodeResult:
    """Result of a successful transcoding run.

    Attributes:
        source_encoding: Concrete encoding the input was decoded with
        target_encoding: Encoding the output was written in
        detection: What the BOM detector reported for the input
        stats: Line and character counters
        performance: Timing and volume metrics
        diagnostics: Non-fatal findings, such as a discarded final line
        state: Final state of the run
    """
    source_encoding: Encoding
    target_encoding: Encoding
    detection: DetectionResult
    stats: TranscodeStats
    performance: PerformanceMetrics
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    state: TranscodeState = TranscodeState.DONE

    @property
    def has_warnings(self) -> bool:
        return any(
            d.severity is DiagnosticSeverity.WARNING for d in self.diagnostics
        )


class LineTranscoder:
    """Transcode a byte source into a byte sink line by line.

    The transcoder keeps no per-run state on the instance, so one instance
    can serve several runs as long as they use distinct sources and sinks.

    Examples:
        >>> import io
        >>> out = io.BytesIO()
        >>> transcoder = LineTranscoder(TranscodeConfig(target_encoding="UTF8"))
        >>> result = transcoder.transcode(b"hello world, ascii\\n", out)
        >>> out.getvalue()
        b'\\xef\\xbb\\xbfhello world, ascii\\n'
    """

    def __init__(self, config: Optional[TranscodeConfig] = None) -> None:
        self.config = config or TranscodeConfig()
        self.detector = BOMDetector(
            min_sample_size=self.config.detection_min_bytes,
            sample_size=self.config.detection_sample_size,
        )
        self.reader = CodePointReader()
        self.writer = CodePointWriter()
        self.logger = get_logger(__name__, self.config.correlation_id, "line_transcoder")

    def transcode(
        self,
        source: SourceLike,
        sink: SinkLike,
        source_encoding: Optional[Encoding] = None,
        target_encoding: Optional[Encoding] = None,
    ) -> TranscodeResult:
        """Transcode everything readable from ``source`` into ``sink``.

        Args:
            source: Bytes, binary file object or ``ByteSource``
            sink: Binary file object or ``ByteSink``
            source_encoding: Overrides the configured source encoding
            target_encoding: Overrides the configured target encoding

        Returns:
            TranscodeResult describing the completed run

        Raises:
            EmptyInputError: The source holds no bytes
            AmbiguousEncodingError: AUTO was requested and detection failed
            InvalidByteSequenceError: Malformed UTF-8 was found mid-stream
            SinkWriteError: The sink rejected a write
        """
        requested = source_encoding or self.config.source_encoding
        target = target_encoding or self.config.target_encoding
        if requested is Encoding.UNSPECIFIED:
            raise ValueError("Source encoding must be AUTO or a concrete encoding")
        if not target.is_concrete:
            raise ValueError(
                f"Target encoding must be concrete, got {target.display_name}"
            )

        byte_source = as_source(source)
        byte_sink = as_sink(sink)
        stats = TranscodeStats()
        diagnostics: List[DiagnosticEntry] = []
        state = TranscodeState.START
        started = time.perf_counter()

        try:
            state = TranscodeState.DETECT_ENCODING
            start_position = byte_source.tell()
            detection = self.detector.detect(byte_source)
            resolved = self._resolve_source_encoding(
                requested, detection, byte_source, start_position
            )

            state = TranscodeState.WRITE_TARGET_BOM
            byte_sink.write_bytes(bom_for(target))

            state = TranscodeState.STREAM_LINES
            for line in self.iter_lines(byte_source, resolved, stats, diagnostics):
                for code_point in line:
                    self.writer.write_code_point(byte_sink, target, code_point)
                stats.lines += 1
            byte_sink.flush()
        except TranscodeError as e:
            e.stats = stats
            e.stage = state.value
            self.logger.error(
                f"Transcoding failed during {state.value}: {e}",
                extra={
                    "state": TranscodeState.FAILED.value,
                    "lines": stats.lines,
                    "characters": stats.characters,
                },
            )
            raise

        state = TranscodeState.DONE
        performance = PerformanceMetrics(
            processing_time_ms=(time.perf_counter() - started) * 1000.0,
            characters_processed=stats.characters,
            bytes_written=byte_sink.bytes_written,
        )
        self.logger.info(
            f"Transcoded {stats.lines} lines ({stats.characters} characters) "
            f"from {resolved.display_name} to {target.display_name}",
            extra={"state": state.value, "bytes_written": byte_sink.bytes_written},
        )
        return TranscodeResult(
            source_encoding=resolved,
            target_encoding=target,
            detection=detection,
            stats=stats,
            performance=performance,
            diagnostics=diagnostics,
            state=state,
        )

    def iter_lines(
        self,
        source: ByteSource,
        encoding: Encoding,
        stats: Optional[TranscodeStats] = None,
        diagnostics: Optional[List[DiagnosticEntry]] = None,
    ) -> Iterator[Line]:
        """Yield each ``\\n``-terminated line of code points from ``source``.

        A trailing line without a terminating ``\\n`` is read (and counted in
        ``stats.characters``) but never yielded.
        """
        line: Line = []
        while True:
            code_point = self.reader.read_code_point(source, encoding, stats)
            if code_point is None:
                break
            line.append(code_point)
            if code_point == LINE_FEED:
                yield line
                line = []

        if line:
            message = (
                f"Discarded unterminated final line of {len(line)} characters"
            )
            self.logger.warning(message, extra={"offset": source.tell()})
            if diagnostics is not None:
                diagnostics.append(DiagnosticEntry(
                    severity=DiagnosticSeverity.WARNING,
                    message=message,
                    component="line_transcoder",
                    position={"offset": source.tell()},
                    details={"discarded_characters": len(line)},
                    correlation_id=self.config.correlation_id,
                ))

    def _resolve_source_encoding(
        self,
        requested: Encoding,
        detection: DetectionResult,
        source: ByteSource,
        start_position: int,
    ) -> Encoding:
        self.logger.debug(
            f"Detection: {detection.encoding.display_name} via "
            f"{detection.method.value}, marker length {detection.marker_length}"
        )

        if requested is Encoding.AUTO:
            if not detection.is_conclusive:
                raise AmbiguousEncodingError()
            return detection.encoding

        # An explicit encoding only consumes a BOM that names that encoding
        if detection.method is DetectionMethod.BOM and (
            not self.config.skip_source_bom or detection.encoding is not requested
        ):
            source.seek(start_position)
        return requested
