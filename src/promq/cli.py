# promq.cli - Command line interface
"""
CLI entry point for promq.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from promq.version import __version__
from promq.config import load_config
from promq.config.config import COMPLETE_SOURCES, SOURCE_ALIASES
from promq.errors import ConfigError
from promq.session import PromQLSession


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="promq",
        description="PromQL completion - interactive PromQL prompt with completion",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"promq {__version__}",
    )

    parser.add_argument(
        "-c", "--complete",
        metavar="QUERY",
        help="Complete a single query and exit",
    )

    parser.add_argument(
        "--pos",
        type=int,
        help="Cursor offset for --complete (default: end of query)",
    )

    parser.add_argument(
        "-o", "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--source",
        choices=list(COMPLETE_SOURCES) + list(SOURCE_ALIASES),
        help="Completion source (overrides config)",
    )

    parser.add_argument(
        "--url",
        help="Prometheus or language server URL (overrides config)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Merge CLI args with config
    if args.source:
        config.complete.source = SOURCE_ALIASES.get(args.source, args.source)
    if args.url:
        config.complete.url = args.url
    config.complete = config.complete.validated()

    # Single completion mode
    if args.complete is not None:
        return run_complete(args.complete, args.pos, config, args.output)

    return run_repl(config)


def run_complete(query: str, pos: Optional[int], config, output_format: str) -> int:
    """Complete a single query and print the result."""
    session = PromQLSession(config.complete)
    cursor = len(query) if pos is None else pos
    result = session.complete_sync(query, cursor)

    if output_format == "json":
        print(json.dumps(result.to_json() if result else None, indent=2))
    elif result is None:
        print("Nothing to complete here.")
    else:
        print(result.format_text())

    return 0


def run_repl(config) -> int:
    """Run interactive REPL."""
    from promq.repl import Repl

    repl = Repl(
        complete_config=config.complete,
        history_file=config.history_file,
        complete_while_typing=config.complete_while_typing,
    )
    repl.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
