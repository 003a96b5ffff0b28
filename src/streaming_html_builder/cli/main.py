"""Main CLI entry point for the streaming-html command-line tool.

Provides re-indentation of rendered markup and a benchmark comparing fresh
and pooled builders.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from streaming_html_builder import __version__
from streaming_html_builder.formatting.pretty import PrettyPrinter
from streaming_html_builder.shared.config import ConfigError, PrettyConfig, RenderConfig
from streaming_html_builder.shared.logging import configure_logging, get_logger
from streaming_html_builder.tools.profiling import PerformanceReport, benchmark_builders

logger = get_logger(__name__, None, "cli")


def load_config(config_path: Optional[Path]) -> RenderConfig:
    """Load a RenderConfig from a JSON file, or the defaults without one.

    Raises:
        ConfigError: If the file cannot be read or does not validate
    """
    if config_path is None:
        return RenderConfig()
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    return RenderConfig.from_json(text)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="streaming-html",
        description="Streaming HTML builder tools: re-indent markup and benchmark rendering",
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Pretty command
    pretty_parser = subparsers.add_parser("pretty", help="Re-indent HTML files for reading")
    pretty_parser.add_argument(
        "paths",
        nargs="+",
        help="HTML files to re-indent, or - for standard input",
    )
    pretty_parser.add_argument(
        "--indent", "-i",
        type=int,
        help="Spaces per nesting level (default: from configuration, 2)",
    )
    pretty_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)",
    )

    # Bench command
    bench_parser = subparsers.add_parser("bench", help="Compare fresh and pooled builders")
    bench_parser.add_argument(
        "--iterations", "-n",
        type=int,
        default=10,
        help="Render passes per strategy (default: 10)",
    )
    bench_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="RenderConfig JSON file",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output",
    )

    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def cmd_pretty(args: argparse.Namespace, config: RenderConfig) -> int:
    """Handle pretty command."""
    pretty_config = config.pretty
    if args.indent is not None:
        try:
            pretty_config = PrettyConfig(
                indent_width=args.indent,
                trailing_newline=pretty_config.trailing_newline,
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    printer = PrettyPrinter(pretty_config)
    outputs: List[str] = []
    for path in args.paths:
        try:
            outputs.append(printer.format(_read_input(path)))
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

    formatted_output = "".join(outputs)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        sys.stdout.write(formatted_output)

    return 0


def format_benchmark(results: Dict[str, PerformanceReport], format_type: str) -> str:
    """Format benchmark reports for output."""
    if format_type == "json":
        return json.dumps(
            {name: report.to_dict()["summary"] for name, report in results.items()},
            indent=2,
        )

    lines = ["Builder benchmark", "================="]
    for name, report in results.items():
        lines.append(
            f"{name:>8}: {report.session_count} renders, "
            f"avg {report.average_duration_ms:.3f} ms, "
            f"{report.average_throughput_mb_per_s:.2f} MB/s, "
            f"peak memory delta {report.peak_memory_delta} bytes"
        )
    return "\n".join(lines)


def cmd_bench(args: argparse.Namespace, config: RenderConfig) -> int:
    """Handle bench command."""
    if args.iterations <= 0:
        print("Error: --iterations must be > 0", file=sys.stderr)
        return 1

    try:
        results = benchmark_builders(iterations=args.iterations, config=config)
    except Exception as e:
        logger.error(f"Benchmark failed: {e}")
        print(f"Error: benchmark failed: {e}", file=sys.stderr)
        return 1

    print(format_benchmark(results, args.format))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    handlers: Dict[str, Any] = {
        "pretty": cmd_pretty,
        "bench": cmd_bench,
    }

    try:
        handler = handlers.get(args.command)
        if handler is None:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1
        return handler(args, config)

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
