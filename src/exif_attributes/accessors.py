"""
Typed Accessors

Best-effort interpretation of selected tag values for display. None of these
functions raise on missing or malformed data; they return a sentinel instead
(empty label, ``None`` coordinate or timestamp, ``0.0`` GPS component).
"""

import logging
import re
from datetime import datetime
from typing import Protocol

from exif_attributes.tags import (
    TAG_DATETIME,
    TAG_GPS_LATITUDE,
    TAG_GPS_LATITUDE_REF,
    TAG_GPS_LONGITUDE,
    TAG_GPS_LONGITUDE_REF,
    TAG_ORIENTATION,
    TAG_WHITE_BALANCE,
    Orientation,
    WhiteBalance,
)

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
DATETIME_UNAVAILABLE = -1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

ORIENTATION_LABELS: dict[int, str] = {
    Orientation.NORMAL: "Normal",
    Orientation.FLIP_HORIZONTAL: "Flipped horizontal",
    Orientation.ROTATE_180: "Rotated 180 degrees",
    Orientation.FLIP_VERTICAL: "Upside down mirror",
    Orientation.TRANSPOSE: "Transposed",
    Orientation.ROTATE_90: "Rotated 90 degrees",
    Orientation.TRANSVERSE: "Transversed",
    Orientation.ROTATE_270: "Rotated 270 degrees",
}

WHITE_BALANCE_LABELS: dict[int, str] = {
    WhiteBalance.AUTO: "Auto",
    WhiteBalance.MANUAL: "Manual",
}


class AttributeSource(Protocol):
    """Anything exposing tag lookup, such as :class:`AttributeStore`."""

    def get(self, name: str) -> str | None: ...


def _parse_int(value: str | None) -> int | None:
    if value is None or not _INTEGER_RE.fullmatch(value):
        return None
    return int(value)


def attribute_int(source: AttributeSource, tag: str, default: int) -> int:
    """
    Read ``tag`` as an integer.

    Args:
        source: Attribute lookup.
        tag: Tag name.
        default: Returned when the tag is absent or not an integer.

    Returns:
        Parsed integer or ``default``.
    """
    parsed = _parse_int(source.get(tag))
    return default if parsed is None else parsed


def attribute_float(source: AttributeSource, tag: str, default: float) -> float:
    """
    Read ``tag`` as a float. Rational values (``"72/1"``) are divided out.

    Args:
        source: Attribute lookup.
        tag: Tag name.
        default: Returned when the tag is absent or not numeric.

    Returns:
        Parsed value or ``default``.
    """
    value = source.get(tag)
    if value is None:
        return default
    try:
        if "/" in value:
            return _parse_rational(value)
        return float(value)
    except (ValueError, ZeroDivisionError):
        return default


def orientation_label(source: AttributeSource) -> str:
    """
    Describe the ``Orientation`` tag.

    Returns:
        Label for codes 1-8, ``"Undefined"`` for any other integer, or an
        empty string when the tag is absent or not an integer.
    """
    code = _parse_int(source.get(TAG_ORIENTATION))
    if code is None:
        return ""
    return ORIENTATION_LABELS.get(code, "Undefined")


def white_balance_label(source: AttributeSource) -> str:
    """
    Describe the ``WhiteBalance`` tag.

    Unlike orientation, unknown codes map to an empty string.

    Returns:
        ``"Auto"``, ``"Manual"`` or an empty string.
    """
    code = _parse_int(source.get(TAG_WHITE_BALANCE))
    if code is None:
        return ""
    return WHITE_BALANCE_LABELS.get(code, "")


def _parse_rational(text: str) -> float:
    numerator, denominator = text.split("/")
    return float(numerator.strip()) / float(denominator.strip())


def rational_to_degrees(rational_string: str, ref: str) -> float:
    """
    Convert a sexagesimal GPS value such as ``"40/1,26/1,4500/100"``.

    Args:
        rational_string: Degrees, minutes and seconds as comma-separated
            ``numerator/denominator`` rationals.
        ref: Hemisphere letter; ``S`` and ``W`` negate the result.

    Returns:
        Decimal degrees, or ``0.0`` if the value cannot be parsed.
    """
    try:
        parts = rational_string.split(",")
        degrees = _parse_rational(parts[0])
        minutes = _parse_rational(parts[1])
        seconds = _parse_rational(parts[2])
    except (ValueError, IndexError, ZeroDivisionError):
        logger.debug(f"Unparseable GPS value {rational_string!r}")
        return 0.0

    result = degrees + minutes / 60.0 + seconds / 3600.0
    if ref in ("S", "W"):
        return -result
    return result


def lat_long(source: AttributeSource) -> tuple[float, float] | None:
    """
    Return ``(latitude, longitude)`` in decimal degrees.

    All four GPS position tags must be present; otherwise there is no
    coordinate.
    """
    lat_value = source.get(TAG_GPS_LATITUDE)
    lat_ref = source.get(TAG_GPS_LATITUDE_REF)
    lng_value = source.get(TAG_GPS_LONGITUDE)
    lng_ref = source.get(TAG_GPS_LONGITUDE_REF)

    if lat_value is None or lat_ref is None or lng_value is None or lng_ref is None:
        return None
    return rational_to_degrees(lat_value, lat_ref), rational_to_degrees(lng_value, lng_ref)


def date_time(source: AttributeSource) -> int | None:
    """
    Parse the ``DateTime`` tag as local time.

    EXIF timestamps carry no offset, so the value is interpreted in the
    process's local timezone.

    Returns:
        Milliseconds since the Unix epoch, or None if the tag is absent or
        does not match ``yyyy:MM:dd HH:mm:ss``.
    """
    value = source.get(TAG_DATETIME)
    if value is None:
        return None
    try:
        parsed = datetime.strptime(value, EXIF_DATETIME_FORMAT)
        return int(parsed.timestamp()) * 1000
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Unparseable DateTime {value!r}")
        return None


def date_time_or_default(source: AttributeSource) -> int:
    """Like :func:`date_time` but return ``DATETIME_UNAVAILABLE`` (-1) when unavailable."""
    millis = date_time(source)
    return DATETIME_UNAVAILABLE if millis is None else millis


__all__ = [
    "DATETIME_UNAVAILABLE",
    "EXIF_DATETIME_FORMAT",
    "attribute_float",
    "attribute_int",
    "date_time",
    "date_time_or_default",
    "lat_long",
    "orientation_label",
    "rational_to_degrees",
    "white_balance_label",
]
