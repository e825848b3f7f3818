"""
EXIF Extractor Module

Read-only metadata codec using fast-exif-rs-py for fast attribute extraction.
"""

import logging
from pathlib import Path
from typing import Any

import fast_exif_rs_py

from exif_attributes import protocol
from exif_attributes.errors import CodecError
from exif_attributes.tags import HAS_THUMBNAIL_KEY

logger = logging.getLogger(__name__)


class FastExifCodec:
    """
    EXIF reader using fast-exif-rs-py.

    Only :meth:`fetch_attributes` is supported; the reader cannot write files
    or extract thumbnails.
    """

    def __init__(self) -> None:
        """Initialize the EXIF reader."""
        logger.debug("EXIF extractor initialized with fast-exif-rs-py")

    def extract_from_path(self, image_path: Path) -> dict[str, Any]:
        """
        Extract EXIF data from an image file.

        Args:
            image_path: Path to the image file.

        Returns:
            Dict containing EXIF data keyed by tag name.
        """
        logger.debug(f"Extracting EXIF from {image_path}")
        reader = fast_exif_rs_py.PyFastExifReader()
        exif_data: dict[str, Any] = reader.read_file(str(image_path))
        logger.debug(f"Successfully extracted {len(exif_data)} EXIF tags from {image_path}")
        return exif_data

    def fetch_attributes(self, path: Path) -> str:
        """
        Read ``path`` and return its attributes as a wire string.

        Tag names containing ``=`` are dropped, as the wire format cannot
        carry them. ``hasThumbnail`` is always reported as false.
        """
        exif_data = self.extract_from_path(path)
        entries = [
            (str(name), str(value))
            for name, value in exif_data.items()
            if value is not None and "=" not in str(name) and name != HAS_THUMBNAIL_KEY
        ]
        entries.append((HAS_THUMBNAIL_KEY, "false"))
        return f"{len(entries)} " + "".join(protocol.format_entry(name, value) for name, value in entries)

    def store_attributes(self, path: Path, wire: str) -> None:
        raise CodecError("fast-exif-rs-py backend is read-only", str(path))

    def commit(self, path: Path) -> None:
        raise CodecError("fast-exif-rs-py backend is read-only", str(path))

    def fetch_thumbnail(self, path: Path) -> bytes | None:
        logger.debug(f"Thumbnail extraction not supported by fast-exif-rs-py: {path}")
        return None
