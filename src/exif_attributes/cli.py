"""
Command-Line Interface for exif-attributes

Multi-level verbosity logging with support for -v through -vvvvv, and
subcommands to show, read, update and extract EXIF data.
"""

import argparse
import logging
import sys
from pathlib import Path

from exif_attributes.cli_handlers import (
    process_get,
    process_set,
    process_show,
    process_thumbnail,
)
from exif_attributes.config import BACKENDS, OUTPUT_FORMATS, load_config
from exif_attributes.errors import ExifAttributesError


def setup_logging(verbose: int) -> None:
    """
    Setup logging with multi-level verbosity.

    Verbosity levels:
        -vvvvv = DEBUG (10)
        -vvvv = TRACE (12)
        -vvv = VERBOSE (15)
        -vv = DETAILED (17)
        -v = INFO (20)
        default = WARNING (30)

    Args:
        verbose: Verbosity level (lower = more verbose).
    """
    level_map = {
        10: logging.DEBUG,  # -vvvvv
        12: logging.DEBUG,  # -vvvv
        15: logging.DEBUG,  # -vvv
        17: logging.INFO,  # -vv
        20: logging.INFO,  # -v
        30: logging.WARNING,  # default
    }

    log_level = level_map.get(verbose, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """
    Add common arguments to a parser.

    Args:
        parser: Argument parser to add arguments to.
    """
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v INFO, -vv DETAILED with progress bars, -vvvvv DEBUG). Default shows only warnings and errors.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (TOML)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Metadata codec backend (default: pillow)",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with all subcommands.

    Returns:
        Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="exif-attributes",
        description="Read and write EXIF attributes of image files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    show_parser = subparsers.add_parser(
        "show",
        help="Show EXIF attributes and interpreted values",
        description="Show all EXIF attributes plus orientation, white balance, location and time.",
    )
    show_parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Image files or directories",
    )
    show_parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: table)",
    )
    show_parser.add_argument(
        "--json",
        dest="output",
        action="store_const",
        const="json",
        help="Shorthand for --output json",
    )

    get_parser = subparsers.add_parser("get", help="Print the value of one tag")
    get_parser.add_argument("path", type=Path, help="Image file")
    get_parser.add_argument("tag", help="Tag name, e.g. Model")

    set_parser = subparsers.add_parser(
        "set",
        help="Set tag values and save",
        description="Set one or more tags and rewrite the image once.",
    )
    set_parser.add_argument("path", type=Path, help="Image file")
    set_parser.add_argument(
        "assignments",
        nargs="+",
        metavar="TAG=VALUE",
        help="Tags to set, e.g. Artist='Jane Doe'",
    )

    thumbnail_parser = subparsers.add_parser("thumbnail", help="Extract the embedded thumbnail")
    thumbnail_parser.add_argument("path", type=Path, help="Image file")
    thumbnail_parser.add_argument("output", type=Path, help="Destination JPEG file")

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # If no subcommand specified, show help
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    return args


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for CLI.

    Args:
        argv: Arguments, defaulting to ``sys.argv[1:]``.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    # 0 = 30 (WARNING), 1 = 20 (INFO), 2 = 17 (DETAILED), 3 = 15 (VERBOSE), 4 = 12 (TRACE), 5+ = 10 (DEBUG)
    verbosity_map = {
        0: 30,
        1: 20,
        2: 17,
        3: 15,
        4: 12,
        5: 10,
    }
    verbose = verbosity_map.get(args.verbose, 10)
    setup_logging(verbose)

    try:
        config = load_config(args.config).with_overrides(
            backend=args.backend,
            output=getattr(args, "output", None),
        )
    except ExifAttributesError as exc:
        logging.error("%s", exc)
        return 1

    handlers = {
        "show": process_show,
        "get": process_get,
        "set": process_set,
        "thumbnail": process_thumbnail,
    }
    handler = handlers.get(args.command)
    if handler is None:
        logging.error("Unknown subcommand: %s", args.command)
        return 1
    return handler(args, verbose, config)


if __name__ == "__main__":
    sys.exit(main())
