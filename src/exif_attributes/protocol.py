"""
Attribute Protocol Codec

Encodes and decodes the length-prefixed attribute wire string exchanged with
the external metadata codec::

    <count> <name>=<valueLength> <value><name>=<valueLength> <value>...

Values are consumed by explicit length, so they may contain ``=``, spaces or
digits. Example: ``"2 Make=3 FOOModel=3 BAR"``.
"""

import logging
from collections.abc import Iterable

from exif_attributes.errors import MalformedWireError, ProtocolError
from exif_attributes.tags import HAS_THUMBNAIL_KEY

logger = logging.getLogger(__name__)


def _parse_length(text: str, wire: str, offset: int, what: str) -> int:
    """Parse a non-negative ASCII decimal integer or raise."""
    if not text or not (text.isascii() and text.isdigit()):
        raise MalformedWireError(f"Invalid {what} {text!r}", wire, offset)
    return int(text)


def decode(wire: str) -> list[tuple[str, str]]:
    """
    Decode a wire string into ``(name, value)`` pairs.

    Trailing data after the declared number of entries is ignored.

    Args:
        wire: Serialized attribute set.

    Returns:
        Entries in wire order. Duplicate names are kept; callers apply
        last-write-wins.

    Raises:
        MalformedWireError: If the count or a value length is not a decimal
            number, a delimiter is missing, or a value runs past the end.
    """
    end = len(wire)
    space = wire.find(" ")
    if space < 0:
        raise MalformedWireError("Missing space after entry count", wire, 0)
    count = _parse_length(wire[:space], wire, 0, "entry count")
    cursor = space + 1

    entries: list[tuple[str, str]] = []
    for index in range(count):
        if cursor >= end:
            raise MalformedWireError(
                f"Wire string exhausted after {index} of {count} entries", wire, cursor
            )

        equals = wire.find("=", cursor)
        if equals < 0:
            raise MalformedWireError(f"Missing '=' in entry {index}", wire, cursor)
        name = wire[cursor:equals]
        cursor = equals + 1

        space = wire.find(" ", cursor)
        if space < 0:
            raise MalformedWireError(f"Missing length delimiter for {name!r}", wire, cursor)
        length = _parse_length(wire[cursor:space], wire, cursor, f"value length for {name!r}")
        cursor = space + 1

        if cursor + length > end:
            raise MalformedWireError(
                f"Value of {name!r} declares {length} bytes but only {end - cursor} remain",
                wire,
                cursor,
            )
        entries.append((name, wire[cursor : cursor + length]))
        cursor += length

    if cursor < end:
        logger.debug(f"Ignoring {end - cursor} trailing characters after {count} entries")
    logger.debug(f"Decoded {len(entries)} attribute entries")
    return entries


def format_entry(name: str, value: str) -> str:
    """Render one ``<name>=<valueLength> <value>`` entry."""
    return f"{name}={len(value)} {value}"


def encode(entries: Iterable[tuple[str, str]]) -> str:
    """
    Encode ``(name, value)`` pairs into a wire string.

    The reserved ``hasThumbnail`` entry is never written.

    Args:
        entries: Pairs in the order they should be emitted.

    Returns:
        Serialized attribute set.

    Raises:
        ProtocolError: If a name contains ``=``.
    """
    parts: list[str] = []
    for name, value in entries:
        if name == HAS_THUMBNAIL_KEY:
            # fake attribute, not saved as an exif tag
            continue
        if "=" in name:
            raise ProtocolError(f"Attribute name {name!r} contains '=' and cannot be encoded")
        parts.append(format_entry(name, value))

    count = len(parts)
    logger.debug(f"Encoded {count} attribute entries")
    return f"{count} " + "".join(parts)


__all__ = ["decode", "encode", "format_entry"]
