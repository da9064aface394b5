"""Simple functions for one-shot transcoding.

Level 1 of the API: ``transcode()`` for in-memory bytes and
``transcode_file()`` for paths. Both build a ``LineTranscoder`` from a
``TranscodeConfig`` and let its errors propagate unchanged.
"""

import io
from pathlib import Path
from typing import Optional, Union

from ..character.stream import LineTranscoder, TranscodeResult
from ..shared.config import TranscodeConfig
from ..shared.logging import get_logger
from ..shared.types import Encoding

EncodingLike = Union[Encoding, str]


def _build_config(
    config: Optional[TranscodeConfig],
    source_encoding: Optional[EncodingLike],
    target_encoding: Optional[EncodingLike],
    correlation_id: Optional[str],
) -> TranscodeConfig:
    config = config or TranscodeConfig()
    overrides = {}
    if source_encoding is not None:
        overrides["source_encoding"] = source_encoding
    if target_encoding is not None:
        overrides["target_encoding"] = target_encoding
    if correlation_id is not None:
        overrides["correlation_id"] = correlation_id
    return config.override(**overrides) if overrides else config


def transcode(
    data: bytes,
    source_encoding: Optional[EncodingLike] = None,
    target_encoding: Optional[EncodingLike] = None,
    config: Optional[TranscodeConfig] = None,
    correlation_id: Optional[str] = None,
) -> bytes:
    """Transcode an in-memory byte string.

    Args:
        data: Encoded input
        source_encoding: Encoding or name; defaults to the config (AUTO)
        target_encoding: Encoding or name; defaults to the config (ANSI)
        config: Base configuration
        correlation_id: Optional correlation ID for log records

    Returns:
        The transcoded bytes, including the target byte order mark

    Examples:
        >>> transcode(b"caf\\xc3\\xa9\\n", "UTF8", "UTF16BE")
        b'\\xfe\\xff\\x00c\\x00a\\x00f\\x00\\xe9\\x00\\n'
    """
    effective = _build_config(config, source_encoding, target_encoding, correlation_id)
    output = io.BytesIO()
    LineTranscoder(effective).transcode(data, output)
    return output.getvalue()


def transcode_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    source_encoding: Optional[EncodingLike] = None,
    target_encoding: Optional[EncodingLike] = None,
    config: Optional[TranscodeConfig] = None,
    correlation_id: Optional[str] = None,
) -> TranscodeResult:
    """Transcode one file into another.

    The output file is created (or truncated) before transcoding starts.
    When a run fails part way through, whatever was written stays in place.

    Raises:
        OSError: If either file cannot be opened
        TranscodeError: Any transcoding failure
    """
    effective = _build_config(config, source_encoding, target_encoding, correlation_id)
    logger = get_logger(__name__, effective.correlation_id, "transcode_file")
    input_path = Path(input_path)
    output_path = Path(output_path)

    logger.info(
        "Starting file transcode",
        extra={"input_path": str(input_path), "output_path": str(output_path)},
    )
    with input_path.open("rb") as source, output_path.open("wb") as sink:
        return LineTranscoder(effective).transcode(source, sink)
