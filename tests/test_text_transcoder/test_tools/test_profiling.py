"""Tests for the profiling module."""

from unittest.mock import MagicMock, patch

import pytest

from text_transcoder.tools.profiling import ProfileSnapshot, TranscodeProfiler


class TestProfileSnapshot:
    """Test ProfileSnapshot data class."""

    def test_snapshot_properties(self):
        """Test derived duration and memory values."""
        snapshot = ProfileSnapshot(
            label="convert",
            start_time=10.0,
            end_time=10.5,
            memory_start=1000,
            memory_end=1500,
        )

        assert snapshot.duration_ms == 500.0
        assert snapshot.memory_delta == 500
        assert snapshot.throughput_mb_per_s(1024 * 1024) == 2.0

    def test_unfinished_snapshot(self):
        """Test a snapshot that has not ended reports no duration."""
        snapshot = ProfileSnapshot(label="convert", start_time=10.0)

        assert snapshot.duration_ms == 0.0
        assert snapshot.throughput_mb_per_s(100) == 0.0


class TestTranscodeProfiler:
    """Test TranscodeProfiler context manager."""

    @patch("text_transcoder.tools.profiling.psutil.Process")
    def test_memory_tracking(self, mock_process_class):
        """Test resident memory is sampled on entry and exit."""
        mock_process = MagicMock()
        mock_process.memory_info.side_effect = [
            MagicMock(rss=4096),
            MagicMock(rss=8192),
        ]
        mock_process_class.return_value = mock_process

        profiler = TranscodeProfiler("convert")
        with profiler as snapshot:
            pass

        assert profiler.snapshot is snapshot
        assert snapshot.label == "convert"
        assert snapshot.memory_start == 4096
        assert snapshot.memory_end == 8192
        assert snapshot.memory_delta == 4096
        assert snapshot.end_time >= snapshot.start_time

    @patch("text_transcoder.tools.profiling.psutil.Process")
    def test_memory_tracking_disabled(self, mock_process_class):
        """Test that disabling memory tracking skips psutil entirely."""
        profiler = TranscodeProfiler(enable_memory_tracking=False)
        with profiler as snapshot:
            pass

        mock_process_class.assert_not_called()
        assert snapshot.memory_start == 0
        assert snapshot.memory_delta == 0

    def test_snapshot_completed_on_exception(self):
        """Test the snapshot is finished even when the block raises."""
        profiler = TranscodeProfiler(enable_memory_tracking=False)

        with pytest.raises(RuntimeError):
            with profiler:
                raise RuntimeError("boom")

        assert profiler.snapshot is not None
        assert profiler.snapshot.end_time >= profiler.snapshot.start_time
