"""
EXIF Interface

Reads EXIF tags from an image file through a metadata codec, exposes them as
an :class:`AttributeStore`, and writes changes back.
"""

import logging
from pathlib import Path

from exif_attributes import accessors
from exif_attributes.codec import CodecGuard, GuardedCodec, MetadataCodec, get_exif_codec
from exif_attributes.store import AttributeStore

logger = logging.getLogger(__name__)


class ExifInterface:
    """
    EXIF attributes of a single image file.

    Attributes:
        path: Image file.
        store: Current attribute values.
        codec: Guarded codec used for every file access.
    """

    def __init__(
        self,
        path: Path | str,
        codec: MetadataCodec | None = None,
        guard: CodecGuard | None = None,
    ) -> None:
        """
        Read the EXIF tags of ``path``.

        Args:
            path: Image file.
            codec: Metadata codec; defaults to :class:`PillowCodec`.
            guard: Guard serializing codec calls; defaults to the shared one.

        Raises:
            CodecError: If the codec cannot read the file.
            MalformedWireError: If the codec returns a malformed wire string.
        """
        self.path = Path(path)
        if codec is None:
            codec = get_exif_codec()
        self.codec = GuardedCodec(codec, guard)
        self.store = AttributeStore()
        self.reload()

    def reload(self) -> None:
        """Re-read attributes from the file, discarding unsaved changes."""
        logger.debug(f"Loading EXIF attributes from {self.path}")
        self.store.load(self.codec.fetch_attributes(self.path))

    def get_attribute(self, tag: str) -> str | None:
        """Return the value of ``tag`` or None if the file has no such tag."""
        return self.store.get(tag)

    def set_attribute(self, tag: str, value: str) -> None:
        """Set ``tag`` in memory; call :meth:`save_attributes` to persist."""
        self.store.set(tag, value)

    def save_attributes(self) -> None:
        """
        Write every attribute back to the file.

        This rewrites the whole image, so batch :meth:`set_attribute` calls
        and save once.

        Raises:
            CodecError: If the codec cannot write the file.
        """
        wire = self.store.save()
        logger.info(f"Saving {len(self.store)} EXIF attributes to {self.path}")
        self.codec.save_and_commit(self.path, wire)

    def has_thumbnail(self) -> bool:
        """Return True if the file has an embedded thumbnail."""
        return self.store.has_thumbnail()

    def get_thumbnail(self) -> bytes | None:
        """Return the embedded thumbnail bytes, or None."""
        return self.codec.fetch_thumbnail(self.path)

    def get_orientation_string(self) -> str:
        return accessors.orientation_label(self.store)

    def get_white_balance_string(self) -> str:
        return accessors.white_balance_label(self.store)

    def get_lat_long(self) -> tuple[float, float] | None:
        return accessors.lat_long(self.store)

    def get_date_time(self) -> int | None:
        """Return the ``DateTime`` tag in epoch milliseconds, or None."""
        return accessors.date_time(self.store)

    def get_attribute_int(self, tag: str, default: int) -> int:
        return accessors.attribute_int(self.store, tag, default)

    def get_attribute_float(self, tag: str, default: float) -> float:
        return accessors.attribute_float(self.store, tag, default)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"ExifInterface(path='{self.path}', attributes={len(self.store)})"
