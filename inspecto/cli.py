"""
Command-line interface: pretty-print JSON or TOML documents.

Usage:
    python -m inspecto data.json
    cat config.toml | python -m inspecto --format toml --depth none
"""

# Standard library -----------------------------------------------------------------------------------------------------
import argparse
import json
import logging
import sys

from pathlib import Path
from typing import Any, Sequence

# Third-party ----------------------------------------------------------------------------------------------------------
import colorama
import toml

# Local ----------------------------------------------------------------------------------------------------------------
from .core import inspect
from .options import InspectOptions

logger = logging.getLogger(__name__)


# Methods --------------------------------------------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inspecto",
        description="Pretty-print JSON or TOML documents as inspected Python values",
    )
    parser.add_argument("files", nargs="*", default=["-"], help="Input files, '-' for stdin (default: stdin)")
    parser.add_argument(
        "--format", choices=("auto", "json", "toml"), default="auto",
        help="Input format; auto picks TOML for .toml files and JSON otherwise",
    )
    parser.add_argument(
        "--colors", action=argparse.BooleanOptionalAction, default=None,
        help="Colorize output (default: when stdout is a terminal)",
    )
    parser.add_argument("--depth", type=_depth, default=2, help="Nesting levels to show, or 'none' (default: 2)")
    parser.add_argument("--break-length", type=int, default=80, help="Line width budget (default: 80)")
    parser.add_argument("--max-array-length", type=int, default=40, help="Items shown per collection (default: 40)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug messages to stderr")
    return parser


def load_document(text: str, fmt: str, source: str) -> Any:
    """
    Parse text as JSON or TOML.

    Raises:
        ValueError: If the text is not valid in the chosen format.
    """
    if fmt == "auto":
        fmt = "toml" if source.endswith(".toml") else "json"
    if fmt == "toml":
        # TomlDecodeError subclasses ValueError
        return toml.loads(text)
    return json.loads(text)


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(name)s: %(levelname)s: %(message)s")

    colors = sys.stdout.isatty() if args.colors is None else args.colors
    if colors:
        colorama.just_fix_windows_console()

    try:
        opts = InspectOptions(
            colors=colors,
            depth=args.depth,
            break_length=args.break_length,
            max_array_length=args.max_array_length,
        )
    except (TypeError, ValueError) as exc:
        parser.error(str(exc))

    status = 0
    for source in args.files:
        try:
            text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
            document = load_document(text, args.format, source)
        except (OSError, ValueError) as exc:
            print(f"inspecto: {source}: {exc}", file=sys.stderr)
            status = 1
            continue
        logger.debug("loaded %s as %s", source, type(document).__name__)
        print(inspect(document, opts))
    return status


# Private Methods ------------------------------------------------------------------------------------------------------

def _depth(value: str) -> int | None:
    if value.lower() == "none":
        return None
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer or 'none', got {value!r}")
