"""CLI command handlers for the exif-attributes subcommands."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from exif_attributes.codec import get_exif_codec
from exif_attributes.config import ExifConfig
from exif_attributes.errors import ExifAttributesError
from exif_attributes.exif_interface import ExifInterface
from exif_attributes.utils.file_utils import collect_image_paths
from exif_attributes.utils.progress import create_progress_bar


def summarize(exif: ExifInterface) -> dict[str, Any]:
    """Collect raw attributes and interpreted values of one image."""
    millis = exif.get_date_time()
    return {
        "path": str(exif.path),
        "attributes": exif.store.as_dict(),
        "has_thumbnail": exif.has_thumbnail(),
        "orientation": exif.get_orientation_string(),
        "white_balance": exif.get_white_balance_string(),
        "lat_long": exif.get_lat_long(),
        "date_time": datetime.fromtimestamp(millis / 1000).isoformat() if millis is not None else None,
    }


def _render_table(console: Console, summary: dict[str, Any]) -> None:
    table = Table(title=Text(summary["path"]), show_header=True, header_style="bold")
    table.add_column("Tag")
    table.add_column("Value", overflow="fold")
    for name in sorted(summary["attributes"]):
        table.add_row(Text(name), Text(summary["attributes"][name]))
    console.print(table)

    lat_long = summary["lat_long"]
    location = f"{lat_long[0]:.6f}, {lat_long[1]:.6f}" if lat_long else "-"
    console.print(f"Orientation: {summary['orientation'] or '-'}", markup=False, highlight=False)
    console.print(f"White balance: {summary['white_balance'] or '-'}", markup=False, highlight=False)
    console.print(f"Location: {location}", markup=False, highlight=False)
    console.print(f"Taken: {summary['date_time'] or '-'}", markup=False, highlight=False)
    console.print(f"Thumbnail: {'yes' if summary['has_thumbnail'] else 'no'}", markup=False, highlight=False)


def process_show(args: argparse.Namespace, verbose: int, config: ExifConfig) -> int:
    """Handle the ``show`` subcommand.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed CLI arguments with ``paths``.
    verbose : int
        Derived verbosity level.
    config : ExifConfig
        Effective configuration.

    Returns
    -------
    int
        Exit code where ``0`` indicates every image was read.
    """
    paths = collect_image_paths(args.paths)
    if not paths:
        logging.error("No images found in %s", ", ".join(str(p) for p in args.paths))
        return 1

    try:
        codec = get_exif_codec(config.backend)
    except ExifAttributesError as exc:
        logging.error("%s", exc)
        return 1

    console = Console()
    summaries: list[dict[str, Any]] = []
    errors = 0

    progress_bar = create_progress_bar(len(paths), "Reading EXIF", verbose=verbose)
    try:
        for path in paths:
            try:
                summaries.append(summarize(ExifInterface(path, codec=codec)))
            except ExifAttributesError as exc:
                errors += 1
                logging.error("Failed to read %s: %s", path, exc)
            if progress_bar is not None:
                progress_bar.update(1)
    finally:
        if progress_bar is not None:
            progress_bar.close()

    if config.output == "json":
        print(json.dumps(summaries, indent=2))
    else:
        for summary in summaries:
            _render_table(console, summary)

    if errors:
        logging.warning("Completed with %s errors", errors)
        return 1
    return 0


def process_get(args: argparse.Namespace, verbose: int, config: ExifConfig) -> int:
    """Handle the ``get`` subcommand: print one tag value."""
    del verbose
    try:
        exif = ExifInterface(args.path, codec=get_exif_codec(config.backend))
    except ExifAttributesError as exc:
        logging.error("Failed to read %s: %s", args.path, exc)
        return 1

    value = exif.get_attribute(args.tag)
    if value is None:
        logging.warning("Tag %s not present in %s", args.tag, args.path)
        return 1
    print(value)
    return 0


def parse_assignments(assignments: list[str]) -> list[tuple[str, str]]:
    """
    Split ``TAG=VALUE`` arguments.

    Raises:
        ValueError: If an argument has no ``=`` or an empty tag.
    """
    pairs: list[tuple[str, str]] = []
    for assignment in assignments:
        tag, sep, value = assignment.partition("=")
        if not sep or not tag:
            raise ValueError(f"Expected TAG=VALUE, got {assignment!r}")
        pairs.append((tag, value))
    return pairs


def process_set(args: argparse.Namespace, verbose: int, config: ExifConfig) -> int:
    """Handle the ``set`` subcommand: update tags and save once."""
    del verbose
    try:
        pairs = parse_assignments(args.assignments)
    except ValueError as exc:
        logging.error("%s", exc)
        return 1

    try:
        exif = ExifInterface(args.path, codec=get_exif_codec(config.backend))
        for tag, value in pairs:
            exif.set_attribute(tag, value)
        exif.save_attributes()
    except ExifAttributesError as exc:
        logging.error("Failed to update %s: %s", args.path, exc)
        return 1

    logging.info("Updated %s tags in %s", len(pairs), args.path)
    return 0


def process_thumbnail(args: argparse.Namespace, verbose: int, config: ExifConfig) -> int:
    """Handle the ``thumbnail`` subcommand: write the embedded thumbnail."""
    del verbose
    try:
        exif = ExifInterface(args.path, codec=get_exif_codec(config.backend))
        thumbnail = exif.get_thumbnail()
    except ExifAttributesError as exc:
        logging.error("Failed to read %s: %s", args.path, exc)
        return 1

    if thumbnail is None:
        logging.warning("No thumbnail in %s", args.path)
        return 1

    output: Path = args.output
    try:
        output.write_bytes(thumbnail)
    except OSError as exc:
        logging.error("Failed to write thumbnail to %s: %s", output, exc)
        return 1
    logging.info("Wrote %s byte thumbnail to %s", len(thumbnail), output)
    return 0
