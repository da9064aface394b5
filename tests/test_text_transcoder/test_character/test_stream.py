"""Tests for line-oriented transcoding.

This module tests LineTranscoder across detection outcomes, target
encodings, line assembly and failure scenarios following the AAA pattern.
"""

import io

import pytest

from text_transcoder.character.byte_io import ByteSource
from text_transcoder.character.encoding import DetectionMethod
from text_transcoder.character.stream import (
    LineTranscoder,
    TranscodeResult,
    TranscodeState,
)
from text_transcoder.shared.config import TranscodeConfig
from text_transcoder.shared.errors import (
    AmbiguousEncodingError,
    EmptyInputError,
    InvalidByteSequenceError,
    SinkWriteError,
)
from text_transcoder.shared.result import DiagnosticSeverity, TranscodeStats
from text_transcoder.shared.types import Encoding


ASCII_TEXT = b"The quick brown fox\njumps over the lazy dog.\n"


class FailingStream(io.BytesIO):
    """Binary stream that starts raising once ``limit`` bytes were written."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def write(self, data):
        if self.tell() + len(data) > self.limit:
            raise OSError(28, "No space left on device")
        return super().write(data)


class ShortWriteStream(io.BytesIO):
    """Binary stream that never accepts any bytes."""

    def write(self, data):
        return 0


def run(data: bytes, **config_kwargs):
    """Transcode ``data`` and return (result, output bytes)."""
    output = io.BytesIO()
    transcoder = LineTranscoder(TranscodeConfig(**config_kwargs))
    result = transcoder.transcode(data, output)
    return result, output.getvalue()


class TestLineAssembly:
    """Test line splitting and the unterminated final line."""

    def test_unterminated_final_line_discarded(self):
        """Test that "AB\\nCD" writes only "AB\\n" but reads all five characters."""
        # Arrange & Act
        result, output = run(
            b"AB\nCD", source_encoding=Encoding.UTF8, target_encoding=Encoding.UTF8
        )

        # Assert
        assert output == b"\xef\xbb\xbfAB\n"
        assert result.stats.lines == 1
        assert result.stats.characters == 5

    def test_discard_reported_as_warning(self):
        """Test that the discarded line shows up as a WARNING diagnostic."""
        result, _ = run(b"AB\nCD", source_encoding="UTF8")

        assert result.has_warnings
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.severity == DiagnosticSeverity.WARNING
        assert diagnostic.details == {"discarded_characters": 2}

    def test_terminated_input_has_no_warnings(self):
        """Test that fully terminated input produces no diagnostics."""
        result, _ = run(ASCII_TEXT)

        assert result.diagnostics == []
        assert not result.has_warnings

    def test_empty_lines_counted(self):
        """Test that bare newlines are complete lines."""
        result, output = run(b"\n\n\n", source_encoding="ANSI")

        assert output == b"\n\n\n"
        assert result.stats.lines == 3
        assert result.stats.characters == 3

    def test_input_without_newline_writes_only_bom(self):
        """Test that a single unterminated line produces only the BOM."""
        result, output = run(b"no newline here", source_encoding="ANSI", target_encoding="UTF16")

        assert output == b"\xff\xfe"
        assert result.stats.lines == 0
        assert result.stats.characters == 15

    def test_iter_lines(self):
        """Test the line generator directly."""
        transcoder = LineTranscoder()
        stats = TranscodeStats()
        source = ByteSource.from_bytes("é\nab\nc".encode("utf-8"))

        lines = list(transcoder.iter_lines(source, Encoding.UTF8, stats))

        assert lines == [[0xE9, 0x0A], [0x61, 0x62, 0x0A]]
        assert stats.characters == 6


class TestTargetBOM:
    """Test byte order marks written for each target."""

    def test_single_byte_target_has_no_bom(self):
        """Test ANSI output starts directly with content."""
        _, output = run(ASCII_TEXT, target_encoding=Encoding.SINGLE_BYTE)

        assert output == ASCII_TEXT

    def test_utf8_target_bom(self):
        """Test UTF-8 output starts with EF BB BF."""
        _, output = run(ASCII_TEXT, target_encoding=Encoding.UTF8)

        assert output[:3] == b"\xef\xbb\xbf"
        assert output[3:] == ASCII_TEXT

    def test_utf16_le_target(self):
        """Test UTF-16 LE output."""
        _, output = run(b"Hi\n", source_encoding="ANSI", target_encoding="UTF16")

        assert output == b"\xff\xfeH\x00i\x00\n\x00"

    def test_utf16_be_target(self):
        """Test UTF-16 BE output."""
        _, output = run(b"Hi\n", source_encoding="ANSI", target_encoding="UTF16BE")

        assert output == b"\xfe\xff\x00H\x00i\x00\n"


class TestAutoDetection:
    """Test source encoding resolution with AUTO."""

    def test_ascii_resolves_to_single_byte(self):
        """Test ASCII input without a BOM resolves to single-byte."""
        result, _ = run(ASCII_TEXT)

        assert result.source_encoding == Encoding.SINGLE_BYTE
        assert result.detection.method == DetectionMethod.ASCII_HEURISTIC

    def test_utf8_bom_consumed(self):
        """Test a UTF-8 BOM is consumed and the content decoded as UTF-8."""
        data = b"\xef\xbb\xbf" + "café\n".encode("utf-8")

        result, output = run(data, target_encoding=Encoding.SINGLE_BYTE)

        assert result.source_encoding == Encoding.UTF8
        assert output == b"caf\xe9\n"

    def test_utf16_le_to_utf8(self):
        """Test UTF-16 LE with BOM converted to UTF-8."""
        data = b"\xff\xfe" + "naïve €\n".encode("utf-16-le")

        result, output = run(data, target_encoding=Encoding.UTF8)

        assert result.source_encoding == Encoding.UTF16_LE
        assert output == b"\xef\xbb\xbf" + "naïve €\n".encode("utf-8")

    def test_utf16_be_to_utf16_le(self):
        """Test byte order swap between UTF-16 variants."""
        data = b"\xfe\xff" + "x€\n".encode("utf-16-be")

        _, output = run(data, target_encoding=Encoding.UTF16_LE)

        assert output == b"\xff\xfe" + "x€\n".encode("utf-16-le")

    def test_ambiguous_input(self):
        """Test that inconclusive detection under AUTO fails before any output."""
        output = io.BytesIO()
        transcoder = LineTranscoder()

        with pytest.raises(AmbiguousEncodingError) as exc_info:
            transcoder.transcode("café au lait, s'il vous plaît\n".encode("utf-8"), output)

        assert output.getvalue() == b""
        assert exc_info.value.stage == TranscodeState.DETECT_ENCODING.value

    def test_short_input_ambiguous(self):
        """Test that short BOM-less input cannot be auto-detected."""
        with pytest.raises(AmbiguousEncodingError):
            run(b"short\n")

    def test_empty_input(self):
        """Test that empty input fails before any output."""
        output = io.BytesIO()

        with pytest.raises(EmptyInputError):
            LineTranscoder().transcode(b"", output)

        assert output.getvalue() == b""

    def test_empty_input_with_explicit_encoding(self):
        """Test that empty input is an error even with an explicit encoding."""
        with pytest.raises(EmptyInputError):
            run(b"", source_encoding="UTF8")


class TestExplicitEncoding:
    """Test explicitly requested source encodings."""

    def test_ambiguous_input_accepted(self):
        """Test that explicit encodings bypass the AUTO failure."""
        data = "café\n".encode("utf-8")

        result, output = run(data, source_encoding="UTF8", target_encoding="ANSI")

        assert result.source_encoding == Encoding.UTF8
        assert result.detection.method == DetectionMethod.INCONCLUSIVE
        assert output == b"caf\xe9\n"

    def test_matching_bom_skipped(self):
        """Test that a BOM naming the requested encoding is skipped."""
        _, output = run(b"\xef\xbb\xbfa\n", source_encoding="UTF8", target_encoding="UTF8")

        assert output == b"\xef\xbb\xbfa\n"

    def test_matching_bom_kept_when_disabled(self):
        """Test skip_source_bom=False decodes the BOM as content."""
        _, output = run(
            b"\xef\xbb\xbfa\n",
            source_encoding="UTF8",
            target_encoding="UTF8",
            skip_source_bom=False,
        )

        assert output == b"\xef\xbb\xbf\xef\xbb\xbfa\n"

    def test_mismatched_bom_not_skipped(self):
        """Test that a BOM for another encoding is treated as content."""
        data = b"\xef\xbb\xbfab\n"

        _, output = run(data, source_encoding="ANSI", target_encoding="ANSI")

        assert output == data

    def test_encoding_arguments_override_config(self):
        """Test per-call encodings override the configuration."""
        output = io.BytesIO()
        transcoder = LineTranscoder(TranscodeConfig(target_encoding="UTF8"))

        result = transcoder.transcode(
            b"A\n", output, source_encoding=Encoding.SINGLE_BYTE,
            target_encoding=Encoding.UTF16_BE,
        )

        assert result.target_encoding == Encoding.UTF16_BE
        assert output.getvalue() == b"\xfe\xff\x00A\x00\n"

    def test_unresolved_target_rejected(self):
        """Test that AUTO cannot be used as the target."""
        with pytest.raises(ValueError, match="Target encoding must be concrete"):
            LineTranscoder().transcode(b"A\n", io.BytesIO(), target_encoding=Encoding.AUTO)


class TestMidStreamFailures:
    """Test failures after output has started."""

    def test_invalid_utf8_keeps_prior_lines(self):
        """Test that invalid UTF-8 fails the run but keeps written lines."""
        output = io.BytesIO()
        transcoder = LineTranscoder(TranscodeConfig(source_encoding="UTF8", target_encoding="UTF8"))

        with pytest.raises(InvalidByteSequenceError) as exc_info:
            transcoder.transcode(b"ok\nb\xffad\n", output)

        assert output.getvalue() == b"\xef\xbb\xbfok\n"
        error = exc_info.value
        assert error.offset == 4
        assert error.stats.lines == 1
        assert error.stats.characters == 4
        assert error.stage == TranscodeState.STREAM_LINES.value

    def test_sink_failure_mid_stream(self):
        """Test that a sink failure stops the run and keeps earlier output."""
        output = FailingStream(limit=6)
        transcoder = LineTranscoder(TranscodeConfig(target_encoding="ANSI"))

        with pytest.raises(SinkWriteError) as exc_info:
            transcoder.transcode(ASCII_TEXT, output)

        assert output.getvalue() == ASCII_TEXT[:6]
        assert exc_info.value.stats.lines == 0

    def test_sink_failure_on_bom(self):
        """Test that a sink rejecting the BOM fails in the BOM stage."""
        output = FailingStream(limit=0)

        with pytest.raises(SinkWriteError) as exc_info:
            LineTranscoder(TranscodeConfig(target_encoding="UTF8")).transcode(ASCII_TEXT, output)

        assert exc_info.value.stage == TranscodeState.WRITE_TARGET_BOM.value

    def test_short_write(self):
        """Test that a sink accepting fewer bytes than offered is a failure."""
        with pytest.raises(SinkWriteError, match="wrote 0 of 1 bytes"):
            LineTranscoder().transcode(ASCII_TEXT, ShortWriteStream())


class TestTranscodeResult:
    """Test result metadata."""

    def test_performance_metrics(self):
        """Test metrics reflect characters read and bytes written."""
        result, output = run(ASCII_TEXT, target_encoding="UTF16")

        assert isinstance(result, TranscodeResult)
        assert result.state is TranscodeState.DONE
        assert result.performance.characters_processed == len(ASCII_TEXT)
        assert result.performance.bytes_written == len(output)
        assert result.performance.processing_time_ms >= 0.0

    def test_reusable_transcoder(self):
        """Test that one transcoder serves independent runs."""
        transcoder = LineTranscoder(TranscodeConfig(target_encoding="UTF8"))

        first = transcoder.transcode(ASCII_TEXT, io.BytesIO())
        second = transcoder.transcode(b"\xff\xfeA\x00\n\x00", io.BytesIO())

        assert first.stats.lines == 2
        assert second.stats.lines == 1
        assert second.source_encoding == Encoding.UTF16_LE

    def test_file_objects(self, tmp_path):
        """Test transcoding between real files."""
        in_path = tmp_path / "in.txt"
        out_path = tmp_path / "out.txt"
        in_path.write_bytes(b"\xfe\xff" + "line one\nline two\n".encode("utf-16-be"))

        with in_path.open("rb") as source, out_path.open("wb") as sink:
            result = LineTranscoder().transcode(source, sink)

        assert result.stats.lines == 2
        assert out_path.read_bytes() == b"line one\nline two\n"
