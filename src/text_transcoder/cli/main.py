"""Main CLI entry point for the txu command-line tool.

Provides conversion of text files between the ANSI, UTF-8 and UTF-16 formats,
and inspection of the encoding a file would be auto-detected as.
"""

import argparse
import json
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

from text_transcoder import __version__
from text_transcoder.character.byte_io import ByteSource
from text_transcoder.character.encoding import BOMDetector
from text_transcoder.character.stream import LineTranscoder
from text_transcoder.shared.config import ConfigError, TranscodeConfig
from text_transcoder.shared.errors import EmptyInputError, TranscodeError
from text_transcoder.shared.logging import configure_logging, get_logger
from text_transcoder.shared.result import TranscodeStats
from text_transcoder.shared.types import Encoding
from text_transcoder.tools.profiling import ProfileSnapshot, TranscodeProfiler

PROG = "txu"
STDIO_PATH = "-"
VERBOSE_PREVIEW_BYTES = 8


logger = get_logger(__name__, None, "cli")


def msg(message: str, detail: Optional[str] = None) -> None:
    """Print a message to stderr in the tool's consistent format."""
    if detail:
        print(f"{PROG}: {message}: {detail}", file=sys.stderr)
    else:
        print(f"{PROG}: {message}", file=sys.stderr)


def source_encoding_type(value: str) -> Encoding:
    """argparse type for input encodings (AUTO allowed)."""
    try:
        return Encoding.from_name(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Unrecognized encoding option: {value}"
        ) from None


def target_encoding_type(value: str) -> Encoding:
    """argparse type for output encodings (AUTO rejected)."""
    encoding = source_encoding_type(value)
    if encoding is Encoding.AUTO:
        raise argparse.ArgumentTypeError(
            f"Unrecognized encoding option: {value} (AUTO is only valid for input)"
        )
    return encoding


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Convert text files between the ANSI, UTF-8, and UTF-16 character formats"
        ),
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a text file to another encoding",
        description=(
            "Reads INFILE and writes output to stdout, or to OUTFILE if given. "
            "Note that UTF <-> ANSI conversions always use the US/ANSI code page."
        ),
    )
    convert_parser.add_argument(
        "infile",
        help="Input file ('-' reads stdin)"
    )
    convert_parser.add_argument(
        "outfile",
        nargs="?",
        help="Output file (default: stdout)"
    )
    convert_parser.add_argument(
        "--informat", "-i",
        type=source_encoding_type,
        metavar="FORMAT",
        help="Input format: AUTO, ANSI, UTF8, UTF16, UTF16BE (default: AUTO)"
    )
    convert_parser.add_argument(
        "--outformat", "-o",
        type=target_encoding_type,
        metavar="FORMAT",
        help="Output format: ANSI, UTF8, UTF16, UTF16BE (default: ANSI)"
    )
    convert_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    # Detect command
    detect_parser = subparsers.add_parser(
        "detect", help="Report the auto-detected encoding of files"
    )
    detect_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to inspect"
    )
    detect_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output to stderr"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> TranscodeConfig:
    """Build the run configuration from an optional file plus CLI overrides."""
    config = TranscodeConfig.from_file(args.config) if args.config else TranscodeConfig()

    overrides: Dict[str, Any] = {}
    if args.informat is not None:
        overrides["source_encoding"] = args.informat
    if args.outformat is not None:
        overrides["target_encoding"] = args.outformat
    return config.override(**overrides) if overrides else config


def format_preview(data: bytes) -> str:
    """Format leading bytes as space-separated hex pairs."""
    return " ".join(f"{b:02X}" for b in data)


def print_verbose_header(
    infile: str,
    input_length: int,
    input_format: Encoding,
    outfile: Optional[str],
    output_format: Encoding,
    preview: bytes,
) -> None:
    """Describe the run before it starts."""
    lines = [
        f'Input file:    "{infile}"',
        f"Input length:  {input_length} bytes",
        f"Input format:  {input_format.display_name}",
        "Output file:   " + (f'"{outfile}"' if outfile else "(stdout)"),
        f"Output format: {output_format.display_name}",
        f"First {len(preview)} bytes:  {format_preview(preview)}",
    ]
    print("\n".join(lines), file=sys.stderr)


def print_verbose_summary(
    stats: TranscodeStats,
    bytes_written: Optional[int],
    snapshot: Optional[ProfileSnapshot],
    input_length: int = 0,
) -> None:
    """Report the counters and cost of a run."""
    print(f"Lines Processed:  {stats.lines}", file=sys.stderr)
    print(f"Chars Processed:  {stats.characters}", file=sys.stderr)
    if bytes_written is not None:
        print(f"Bytes Written:    {bytes_written}", file=sys.stderr)
    if snapshot is not None:
        print(f"Elapsed:          {snapshot.duration_ms:.1f}ms", file=sys.stderr)
        print(f"Memory Delta:     {snapshot.memory_delta} bytes", file=sys.stderr)
        if input_length:
            throughput = snapshot.throughput_mb_per_s(input_length)
            print(f"Throughput:       {throughput:.2f} MB/s", file=sys.stderr)


def _open_input(infile: str, stack: ExitStack) -> Tuple[ByteSource, int]:
    """Open the input and return it with its length in bytes."""
    if infile == STDIO_PATH:
        data = sys.stdin.buffer.read()
        return ByteSource.from_bytes(data), len(data)
    source = ByteSource(stack.enter_context(open(infile, "rb")))
    return source, Path(infile).stat().st_size


def _open_output(outfile: Optional[str], stack: ExitStack) -> BinaryIO:
    if outfile is None or outfile == STDIO_PATH:
        return sys.stdout.buffer
    return stack.enter_context(open(outfile, "wb"))


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle convert command."""
    try:
        config = load_config(args)
    except ConfigError as e:
        msg("Invalid configuration", str(e))
        return 1

    if args.config and not (args.verbose or args.quiet):
        configure_logging(config.logging_level)

    with ExitStack() as stack:
        try:
            source, input_length = _open_input(args.infile, stack)
        except OSError as e:
            msg("Failed opening input file", f"{args.infile} ({e.strerror})")
            return 1

        if args.verbose:
            preview = source.read_bytes(config.detection_sample_size)
            source.seek(0)
            input_format = config.source_encoding
            if input_format is Encoding.AUTO and preview:
                detector = BOMDetector(
                    config.detection_min_bytes, config.detection_sample_size
                )
                input_format = detector.classify(preview).encoding
            print_verbose_header(
                args.infile,
                input_length,
                input_format,
                args.outfile,
                config.target_encoding,
                preview[:VERBOSE_PREVIEW_BYTES],
            )

        try:
            sink = _open_output(args.outfile, stack)
        except OSError as e:
            msg("Failed opening output file", f"{args.outfile} ({e.strerror})")
            return 1

        transcoder = LineTranscoder(config)
        profiler = TranscodeProfiler("convert", enable_memory_tracking=args.verbose)
        try:
            with profiler:
                result = transcoder.transcode(source, sink)
        except TranscodeError as e:
            msg(str(e))
            if args.verbose and e.stats is not None:
                print_verbose_summary(e.stats, None, profiler.snapshot, input_length)
            return 1

        if args.verbose:
            print_verbose_summary(
                result.stats,
                result.performance.bytes_written,
                profiler.snapshot,
                input_length,
            )
    return 0


def detect_file(path: Path, detector: BOMDetector) -> Dict[str, Any]:
    """Detect the encoding of a single file and return a result record."""
    try:
        with path.open("rb") as f:
            detection = detector.detect(ByteSource(f))
    except OSError as e:
        return {"file": str(path), "success": False, "error": e.strerror or str(e)}
    except EmptyInputError as e:
        return {"file": str(path), "success": False, "error": str(e)}

    return {
        "file": str(path),
        "success": detection.is_conclusive,
        "encoding": detection.encoding.display_name,
        "method": detection.method.value,
        "marker_length": detection.marker_length,
    }


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format detection results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    lines = []
    for result in results:
        if "error" in result:
            lines.append(f"{result['file']}: error: {result['error']}")
        else:
            lines.append(
                f"{result['file']}: {result['encoding']} "
                f"({result['method']}, marker {result['marker_length']} bytes)"
            )
    return "\n".join(lines)


def cmd_detect(args: argparse.Namespace) -> int:
    """Handle detect command."""
    detector = BOMDetector()
    results = []
    for path in args.paths:
        result = detect_file(path, detector)
        logger.debug("Detected file encoding", extra={"detection": result})
        results.append(result)
    print(format_results(results, args.format))
    return 0 if all(r["success"] for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(logging.WARNING)

    # Route to appropriate command handler
    try:
        if args.command == "convert":
            return cmd_convert(args)
        elif args.command == "detect":
            return cmd_detect(args)
        else:
            msg("Unknown command", args.command)
            return 1

    except KeyboardInterrupt:
        msg("Operation interrupted by user")
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
