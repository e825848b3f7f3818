"""
File Utilities

Image file extension checks and input path expansion.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Set

logger = logging.getLogger(__name__)


def get_image_extensions() -> Set[str]:
    """
    Get set of image file extensions that can carry EXIF data.

    Returns:
        Set of image file extensions (lowercase, with leading dot).
    """
    return {".jpg", ".jpeg", ".png", ".webp", ".tif", ".tiff"}


def is_image_file(file_path: Path) -> bool:
    """
    Check if file is a supported image format.

    Args:
        file_path: Path to the file.

    Returns:
        True if file is a supported image format.
    """
    return file_path.suffix.lower() in get_image_extensions()


def collect_image_paths(inputs: Iterable[Path]) -> list[Path]:
    """
    Expand files and directories into a sorted list of image files.

    Files given explicitly are kept regardless of extension; directories are
    searched recursively for supported images.

    Args:
        inputs: Files or directories.

    Returns:
        Image paths, with duplicates removed.
    """
    found: dict[Path, None] = {}
    for input_path in inputs:
        if input_path.is_dir():
            for candidate in sorted(input_path.rglob("*")):
                if candidate.is_file() and is_image_file(candidate):
                    found[candidate] = None
        else:
            found[input_path] = None
    logger.debug(f"Collected {len(found)} image paths")
    return list(found)
