"""
Pillow Metadata Codec

:class:`MetadataCodec` implementation on top of Pillow's EXIF support. Tag
values are rendered the way the attribute protocol expects them: rationals as
``numerator/denominator`` and multi-valued tags comma-separated, for example
``GPSLatitude=17 40/1,26/1,4500/100``.

On write, attribute text is converted according to the tag's TIFF type, so
ASCII tags such as ``Software=3 007`` keep their exact text.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from PIL import ExifTags, Image, TiffTags
from PIL.TiffImagePlugin import IFDRational

from exif_attributes import protocol
from exif_attributes.errors import CodecError
from exif_attributes.tags import HAS_THUMBNAIL_KEY

logger = logging.getLogger(__name__)

_TAG_IDS: dict[str, int] = {name: tag for tag, name in ExifTags.TAGS.items()}
_GPS_TAG_IDS: dict[str, int] = {name: tag for tag, name in ExifTags.GPSTAGS.items()}

# Offsets to sub-IFDs; never exposed as attributes.
_POINTER_TAGS = {0x8769, 0x8825, 0xA005}

# Tags that belong in IFD0; every other non-GPS tag is written to the Exif IFD.
_IFD0_TAGS = {
    "ImageWidth",
    "ImageLength",
    "BitsPerSample",
    "Compression",
    "PhotometricInterpretation",
    "ImageDescription",
    "Make",
    "Model",
    "Orientation",
    "XResolution",
    "YResolution",
    "ResolutionUnit",
    "Software",
    "DateTime",
    "Artist",
    "HostComputer",
    "Copyright",
    "WhitePoint",
    "PrimaryChromaticities",
    "YCbCrCoefficients",
    "YCbCrPositioning",
    "ReferenceBlackWhite",
}

# Exif IFD tag types from the EXIF standard, for tags PIL.TiffTags leaves untyped.
_EXIF_TYPES: dict[str, int] = {
    "ExposureTime": TiffTags.RATIONAL,
    "FNumber": TiffTags.RATIONAL,
    "ExposureProgram": TiffTags.SHORT,
    "ISOSpeedRatings": TiffTags.SHORT,
    "DateTimeOriginal": TiffTags.ASCII,
    "DateTimeDigitized": TiffTags.ASCII,
    "OffsetTime": TiffTags.ASCII,
    "OffsetTimeOriginal": TiffTags.ASCII,
    "OffsetTimeDigitized": TiffTags.ASCII,
    "ComponentsConfiguration": TiffTags.UNDEFINED,
    "ShutterSpeedValue": TiffTags.SIGNED_RATIONAL,
    "ApertureValue": TiffTags.RATIONAL,
    "BrightnessValue": TiffTags.SIGNED_RATIONAL,
    "ExposureBiasValue": TiffTags.SIGNED_RATIONAL,
    "MaxApertureValue": TiffTags.RATIONAL,
    "SubjectDistance": TiffTags.RATIONAL,
    "MeteringMode": TiffTags.SHORT,
    "LightSource": TiffTags.SHORT,
    "Flash": TiffTags.SHORT,
    "FocalLength": TiffTags.RATIONAL,
    "MakerNote": TiffTags.UNDEFINED,
    "UserComment": TiffTags.UNDEFINED,
    "SubsecTime": TiffTags.ASCII,
    "SubsecTimeOriginal": TiffTags.ASCII,
    "SubsecTimeDigitized": TiffTags.ASCII,
    "ColorSpace": TiffTags.SHORT,
    "ExifImageWidth": TiffTags.LONG,
    "ExifImageHeight": TiffTags.LONG,
    "FocalPlaneXResolution": TiffTags.RATIONAL,
    "FocalPlaneYResolution": TiffTags.RATIONAL,
    "FocalPlaneResolutionUnit": TiffTags.SHORT,
    "SensingMethod": TiffTags.SHORT,
    "FileSource": TiffTags.UNDEFINED,
    "SceneType": TiffTags.UNDEFINED,
    "CustomRendered": TiffTags.SHORT,
    "ExposureMode": TiffTags.SHORT,
    "WhiteBalance": TiffTags.SHORT,
    "DigitalZoomRatio": TiffTags.RATIONAL,
    "FocalLengthIn35mmFilm": TiffTags.SHORT,
    "SceneCaptureType": TiffTags.SHORT,
    "GainControl": TiffTags.SHORT,
    "Contrast": TiffTags.SHORT,
    "Saturation": TiffTags.SHORT,
    "Sharpness": TiffTags.SHORT,
    "SubjectDistanceRange": TiffTags.SHORT,
    "ImageUniqueID": TiffTags.ASCII,
    "CameraOwnerName": TiffTags.ASCII,
    "BodySerialNumber": TiffTags.ASCII,
    "LensSpecification": TiffTags.RATIONAL,
    "LensMake": TiffTags.ASCII,
    "LensModel": TiffTags.ASCII,
    "LensSerialNumber": TiffTags.ASCII,
}

_RATIONAL_TYPES = {TiffTags.RATIONAL, TiffTags.SIGNED_RATIONAL}
_FLOAT_TYPES = {TiffTags.FLOAT, TiffTags.DOUBLE}

_THUMBNAIL_OFFSET = 0x0201
_THUMBNAIL_LENGTH = 0x0202
_EXIF_HEADER = b"Exif\x00\x00"

_WRITABLE_FORMATS = {"JPEG", "PNG", "WEBP"}


def tag_type(tag: int, group: int | None = None) -> int | None:
    """
    Return the TIFF type of ``tag``, or None if it is not known.

    Args:
        tag: Numeric tag.
        group: Sub-IFD the tag lives in (``ExifTags.IFD.Exif`` or
            ``ExifTags.IFD.GPSInfo``), or None for IFD0.
    """
    info = TiffTags.lookup(tag, group)
    if not info.type and group != ExifTags.IFD.GPSInfo:
        info = TiffTags.lookup(tag)
    if info.type:
        return info.type
    return _EXIF_TYPES.get(ExifTags.TAGS.get(tag, ""))


def _value_type(value: Any) -> int | None:
    """Infer a TIFF type from a value Pillow loaded from the file."""
    if isinstance(value, tuple) and value:
        value = value[0]
    if isinstance(value, str):
        return TiffTags.ASCII
    if isinstance(value, bytes):
        return TiffTags.UNDEFINED
    if isinstance(value, IFDRational):
        return TiffTags.RATIONAL
    if isinstance(value, int):
        return TiffTags.LONG
    if isinstance(value, float):
        return TiffTags.DOUBLE
    return None


def format_value(value: Any, type_: int | None = None) -> str | None:
    """
    Render a Pillow EXIF value as attribute text.

    Args:
        value: Value from :class:`PIL.Image.Exif`.
        type_: TIFF type of the tag, if known. ``BYTE`` tags render as
            comma-separated integers.

    Returns:
        Text form, or None for binary blobs that have no textual form.
    """
    if isinstance(value, IFDRational):
        return f"{value.numerator}/{value.denominator}"
    if isinstance(value, (tuple, list)):
        parts = [format_value(item, type_) for item in value]
        if any(part is None for part in parts):
            return None
        return ",".join(part for part in parts if part is not None)
    if isinstance(value, bytes):
        if type_ == TiffTags.BYTE:
            return ",".join(str(byte) for byte in value)
        text = value.rstrip(b"\x00")
        if text.isascii() and all(32 <= byte < 127 for byte in text):
            return text.decode("ascii")
        return None
    if isinstance(value, str):
        return value.rstrip("\x00")
    return str(value)


def _parse_rational(part: str) -> IFDRational:
    numerator, slash, denominator = part.partition("/")
    if not slash:
        return IFDRational(int(numerator), 1)
    return IFDRational(int(numerator), int(denominator))


def _guess_value(text: str) -> Any:
    parts = text.split(",")
    converted: list[Any] = []
    for part in parts:
        part = part.strip()
        try:
            converted.append(_parse_rational(part) if "/" in part else int(part))
        except ValueError:
            return text
    if len(converted) == 1:
        return converted[0]
    return tuple(converted)


def parse_value(text: str, type_: int | None = None) -> Any:
    """
    Convert attribute text back to a Pillow EXIF value.

    ``ASCII`` text is kept verbatim and ``UNDEFINED`` text becomes bytes.
    Numeric types are split on commas into ints, floats or
    :class:`IFDRational` values; ``BYTE`` values become bytes. Without a type,
    ``"72/1"`` becomes a rational, ``"1"`` an int, comma lists of either a
    tuple, and anything else stays a string.

    Args:
        text: Attribute value.
        type_: TIFF type of the tag, or None if unknown.

    Raises:
        ValueError: If ``text`` is not valid for a numeric ``type_``.
    """
    if type_ is None:
        return _guess_value(text)
    if type_ == TiffTags.ASCII:
        return text
    if type_ == TiffTags.UNDEFINED:
        return text.encode("utf-8")

    parts = [part.strip() for part in text.split(",")]
    if type_ == TiffTags.BYTE:
        return bytes(int(part) for part in parts)
    converted: list[Any]
    if type_ in _RATIONAL_TYPES:
        converted = [_parse_rational(part) for part in parts]
    elif type_ in _FLOAT_TYPES:
        converted = [float(part) for part in parts]
    else:
        converted = [int(part) for part in parts]
    if len(converted) == 1:
        return converted[0]
    return tuple(converted)


def _tiff_data(image: Image.Image) -> bytes | None:
    raw = image.info.get("exif")
    if not raw:
        return None
    if raw.startswith(_EXIF_HEADER):
        return raw[len(_EXIF_HEADER) :]
    return raw


class PillowCodec:
    """
    Reads and writes EXIF attributes with Pillow.

    Attributes:
        _staged: Wire strings waiting for :meth:`commit`, keyed by resolved path.
    """

    def __init__(self) -> None:
        self._staged: dict[Path, str] = {}
        logger.debug("Pillow metadata codec initialized")

    def fetch_attributes(self, path: Path) -> str:
        """
        Read every textual EXIF tag of ``path``.

        Args:
            path: Image file.

        Returns:
            Wire string including the ``hasThumbnail`` entry.

        Raises:
            OSError: If the file cannot be opened or is not an image.
        """
        entries: list[tuple[str, str]] = []
        with Image.open(path) as image:
            exif = image.getexif()
            ifds = [
                (dict(exif), ExifTags.TAGS, None),
                (exif.get_ifd(ExifTags.IFD.Exif), ExifTags.TAGS, ExifTags.IFD.Exif),
                (exif.get_ifd(ExifTags.IFD.GPSInfo), ExifTags.GPSTAGS, ExifTags.IFD.GPSInfo),
            ]
            for ifd, names, group in ifds:
                for tag, value in ifd.items():
                    if tag in _POINTER_TAGS and names is ExifTags.TAGS:
                        continue
                    name = names.get(tag)
                    text = format_value(value, tag_type(tag, group))
                    if name is None or text is None:
                        continue
                    entries.append((name, text))
            has_thumbnail = _THUMBNAIL_OFFSET in exif.get_ifd(ExifTags.IFD.IFD1)

        entries.append((HAS_THUMBNAIL_KEY, "true" if has_thumbnail else "false"))
        logger.debug(f"Read {len(entries) - 1} EXIF tags from {path}")
        return f"{len(entries)} " + "".join(protocol.format_entry(name, value) for name, value in entries)

    def store_attributes(self, path: Path, wire: str) -> None:
        """
        Stage ``wire`` for the next :meth:`commit` of ``path``.

        Raises:
            MalformedWireError: If ``wire`` does not decode.
        """
        protocol.decode(wire)
        self._staged[Path(path).resolve()] = wire

    def commit(self, path: Path) -> None:
        """
        Rewrite ``path`` with the staged attributes.

        The image is written to a temporary file next to ``path`` which then
        replaces the original.

        Raises:
            CodecError: If nothing is staged or the format cannot carry EXIF.
                Also raised when a value does not parse as its tag's type; the
                file is left untouched.
            OSError: If the file cannot be read or written.
        """
        path = Path(path)
        wire = self._staged.pop(path.resolve(), None)
        if wire is None:
            raise CodecError("No staged attributes to commit", str(path))

        with Image.open(path) as image:
            image.load()
            if image.format not in _WRITABLE_FORMATS:
                raise CodecError(f"Cannot write EXIF to {image.format} images", str(path))
            exif = image.getexif()
            exif_ifd = dict(exif.get_ifd(ExifTags.IFD.Exif))
            gps_ifd = dict(exif.get_ifd(ExifTags.IFD.GPSInfo))
            # The interop offset is stale once the file is rewritten; carry its contents instead.
            if ExifTags.IFD.Interop in exif_ifd:
                interop_ifd = dict(exif.get_ifd(ExifTags.IFD.Interop))
                del exif_ifd[ExifTags.IFD.Interop]
                if interop_ifd:
                    exif_ifd[ExifTags.IFD.Interop] = interop_ifd

            target: Any
            for name, text in protocol.decode(wire):
                if name in _GPS_TAG_IDS and name.startswith("GPS"):
                    tag, target, group = _GPS_TAG_IDS[name], gps_ifd, ExifTags.IFD.GPSInfo
                elif name in _TAG_IDS and _TAG_IDS[name] not in _POINTER_TAGS:
                    tag = _TAG_IDS[name]
                    if name in _IFD0_TAGS:
                        target, group = exif, None
                    else:
                        target, group = exif_ifd, ExifTags.IFD.Exif
                else:
                    logger.warning(f"Skipping unknown EXIF tag {name!r} for {path}")
                    continue
                type_ = tag_type(tag, group) or _value_type(target.get(tag))
                try:
                    target[tag] = parse_value(text, type_)
                except ValueError as e:
                    raise CodecError(f"Invalid value {text!r} for EXIF tag {name}", str(path)) from e

            if exif_ifd:
                exif[ExifTags.IFD.Exif] = exif_ifd
            if gps_ifd:
                exif[ExifTags.IFD.GPSInfo] = gps_ifd

            save_kwargs: dict[str, Any] = {"exif": exif.tobytes()}
            if image.format == "JPEG":
                save_kwargs["quality"] = "keep"
            icc_profile = image.info.get("icc_profile")
            if icc_profile:
                save_kwargs["icc_profile"] = icc_profile

            fd, tmp_name = tempfile.mkstemp(prefix=".exif-", suffix=path.suffix, dir=path.parent)
            os.close(fd)
            try:
                image.save(tmp_name, format=image.format, **save_kwargs)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.info(f"Committed EXIF attributes to {path}")

    def fetch_thumbnail(self, path: Path) -> bytes | None:
        """
        Return the JPEG thumbnail stored in IFD1, or None.

        Raises:
            OSError: If the file cannot be opened.
        """
        with Image.open(path) as image:
            thumbnail_ifd = image.getexif().get_ifd(ExifTags.IFD.IFD1)
            offset = thumbnail_ifd.get(_THUMBNAIL_OFFSET)
            length = thumbnail_ifd.get(_THUMBNAIL_LENGTH)
            data = _tiff_data(image)
        if offset is None or not length or data is None:
            return None
        thumbnail = data[offset : offset + length]
        if len(thumbnail) != length:
            logger.warning(f"Truncated thumbnail in {path}")
            return None
        return thumbnail


__all__ = ["PillowCodec", "format_value", "parse_value", "tag_type"]
