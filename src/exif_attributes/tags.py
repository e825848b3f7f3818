"""
EXIF Tag Names and Enumerated Values

Names of the tags interpreted by :mod:`exif_attributes.accessors` and the
numeric codes they carry.
"""

from enum import IntEnum

TAG_ORIENTATION = "Orientation"
TAG_DATETIME = "DateTime"
TAG_MAKE = "Make"
TAG_MODEL = "Model"
TAG_FLASH = "Flash"
TAG_IMAGE_WIDTH = "ImageWidth"
TAG_IMAGE_LENGTH = "ImageLength"
TAG_GPS_LATITUDE = "GPSLatitude"
TAG_GPS_LONGITUDE = "GPSLongitude"
TAG_GPS_LATITUDE_REF = "GPSLatitudeRef"
TAG_GPS_LONGITUDE_REF = "GPSLongitudeRef"
TAG_WHITE_BALANCE = "WhiteBalance"

# Synthetic entry carrying the thumbnail flag; never an actual EXIF tag.
HAS_THUMBNAIL_KEY = "hasThumbnail"


class Orientation(IntEnum):
    """EXIF orientation codes."""

    UNDEFINED = 0
    NORMAL = 1
    FLIP_HORIZONTAL = 2  # left right reversed mirror
    ROTATE_180 = 3
    FLIP_VERTICAL = 4  # upside down mirror
    TRANSPOSE = 5  # flipped about top-left <--> bottom-right axis
    ROTATE_90 = 6  # rotate 90 cw to right it
    TRANSVERSE = 7  # flipped about top-right <--> bottom-left axis
    ROTATE_270 = 8  # rotate 270 to right it


class WhiteBalance(IntEnum):
    """EXIF white balance codes."""

    AUTO = 0
    MANUAL = 1


__all__ = [
    "HAS_THUMBNAIL_KEY",
    "Orientation",
    "TAG_DATETIME",
    "TAG_FLASH",
    "TAG_GPS_LATITUDE",
    "TAG_GPS_LATITUDE_REF",
    "TAG_GPS_LONGITUDE",
    "TAG_GPS_LONGITUDE_REF",
    "TAG_IMAGE_LENGTH",
    "TAG_IMAGE_WIDTH",
    "TAG_MAKE",
    "TAG_MODEL",
    "TAG_ORIENTATION",
    "TAG_WHITE_BALANCE",
    "WhiteBalance",
]
