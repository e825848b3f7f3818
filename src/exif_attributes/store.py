"""
Attribute Store

In-memory mapping from EXIF tag name to string value plus the derived
"has thumbnail" flag.
"""

import logging
from typing import Iterator

from exif_attributes import protocol
from exif_attributes.tags import HAS_THUMBNAIL_KEY

logger = logging.getLogger(__name__)


class AttributeStore:
    """
    Tag name to value mapping loaded from and saved to the wire format.

    Attributes:
        _attributes: Current tag values, never containing ``hasThumbnail``.
        _has_thumbnail: Flag from the most recent successful load.
    """

    def __init__(self) -> None:
        """Create an empty store."""
        self._attributes: dict[str, str] = {}
        self._has_thumbnail: bool = False

    def load(self, wire: str) -> None:
        """
        Replace the store contents with the attributes encoded in ``wire``.

        The store is only modified once the whole wire string has decoded.

        Args:
            wire: Serialized attribute set from the external codec.

        Raises:
            MalformedWireError: If ``wire`` is malformed; the store keeps its
                previous contents.
        """
        entries = protocol.decode(wire)

        attributes: dict[str, str] = {}
        has_thumbnail = False
        for name, value in entries:
            if name == HAS_THUMBNAIL_KEY:
                has_thumbnail = value.lower() == "true"
            else:
                attributes[name] = value

        self._attributes = attributes
        self._has_thumbnail = has_thumbnail
        logger.debug(f"Loaded {len(attributes)} attributes (has_thumbnail={has_thumbnail})")

    def get(self, name: str) -> str | None:
        """
        Return the value of ``name`` or ``None`` if the tag is absent.

        Args:
            name: Tag name.

        Returns:
            Raw string value, or None.
        """
        return self._attributes.get(name)

    def set(self, name: str, value: str) -> None:
        """
        Insert or overwrite a tag value.

        Setting the reserved ``hasThumbnail`` key is ignored, as it is not a
        tag and is never written back.

        Args:
            name: Tag name.
            value: New value.
        """
        if name == HAS_THUMBNAIL_KEY:
            logger.debug(f"Ignoring write to reserved key {HAS_THUMBNAIL_KEY}")
            return
        self._attributes[name] = value

    def save(self) -> str:
        """
        Serialize every current attribute.

        Returns:
            Wire string for the external codec to commit.
        """
        return protocol.encode(self._attributes.items())

    def has_thumbnail(self) -> bool:
        """Return True if the last loaded image carried a thumbnail."""
        return self._has_thumbnail

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the current attributes."""
        return dict(self._attributes)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __len__(self) -> int:
        return len(self._attributes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"AttributeStore(attributes={len(self._attributes)}, has_thumbnail={self._has_thumbnail})"
