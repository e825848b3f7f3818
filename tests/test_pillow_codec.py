"""Tests for :mod:`exif_attributes.pillow_codec` against real JPEG files."""
from __future__ import annotations

from pathlib import Path

import pytest
from PIL import ExifTags, Image, TiffTags
from PIL.TiffImagePlugin import IFDRational

from exif_attributes.errors import CodecError, MalformedWireError
from exif_attributes.exif_interface import ExifInterface
from exif_attributes.pillow_codec import PillowCodec, format_value, parse_value, tag_type
from exif_attributes.protocol import decode

from conftest import FAKE_THUMBNAIL


def test_format_value() -> None:
    assert format_value(IFDRational(4500, 100)) == "4500/100"
    assert format_value((IFDRational(40, 1), IFDRational(26, 1))) == "40/1,26/1"
    assert format_value(6) == "6"
    assert format_value("Canon\x00") == "Canon"
    assert format_value(b"ASCII") == "ASCII"
    assert format_value(b"\x01\x02binary") is None


def test_parse_value() -> None:
    assert parse_value("6") == 6
    assert parse_value("1,2,3") == (1, 2, 3)
    rational = parse_value("72/1")
    assert isinstance(rational, IFDRational)
    assert (rational.numerator, rational.denominator) == (72, 1)
    assert parse_value("2007:04:15 14:30:00") == "2007:04:15 14:30:00"
    assert parse_value("f/2.8") == "f/2.8"
    assert parse_value("N") == "N"


def test_format_value_byte_tags() -> None:
    assert format_value(b"\x02\x02\x00\x00", TiffTags.BYTE) == "2,2,0,0"
    assert format_value(b"\x00", TiffTags.BYTE) == "0"
    assert format_value(b"0230", TiffTags.UNDEFINED) == "0230"


def test_tag_type() -> None:
    assert tag_type(0x0131) == TiffTags.ASCII  # Software
    assert tag_type(0x0112) == TiffTags.SHORT  # Orientation
    assert tag_type(0x9000, ExifTags.IFD.Exif) == TiffTags.UNDEFINED  # ExifVersion
    assert tag_type(0x9290, ExifTags.IFD.Exif) == TiffTags.ASCII  # SubsecTime
    assert tag_type(0x829A, ExifTags.IFD.Exif) == TiffTags.RATIONAL  # ExposureTime
    assert tag_type(0, ExifTags.IFD.GPSInfo) == TiffTags.BYTE  # GPSVersionID
    assert tag_type(0xFFFF) is None


@pytest.mark.parametrize(
    ("text", "type_", "expected"),
    [
        ("007", TiffTags.ASCII, "007"),
        ("1,2", TiffTags.ASCII, "1,2"),
        ("72/1", TiffTags.ASCII, "72/1"),
        ("0230", TiffTags.UNDEFINED, b"0230"),
        ("2,2,0,0", TiffTags.BYTE, b"\x02\x02\x00\x00"),
        ("6", TiffTags.SHORT, 6),
        ("1, 2", TiffTags.SHORT, (1, 2)),
        ("-3", TiffTags.SIGNED_LONG, -3),
        ("1.5", TiffTags.DOUBLE, 1.5),
    ],
)
def test_parse_value_by_type(text: str, type_: int, expected: object) -> None:
    assert parse_value(text, type_) == expected


def test_parse_value_rational_types() -> None:
    value = parse_value("72", TiffTags.RATIONAL)
    assert isinstance(value, IFDRational)
    assert (value.numerator, value.denominator) == (72, 1)

    values = parse_value("-1/3,2/3", TiffTags.SIGNED_RATIONAL)
    assert [(v.numerator, v.denominator) for v in values] == [(-1, 3), (2, 3)]


@pytest.mark.parametrize(
    ("text", "type_"),
    [("abc", TiffTags.SHORT), ("", TiffTags.LONG), ("300", TiffTags.BYTE), ("x/2", TiffTags.RATIONAL)],
)
def test_parse_value_rejects_invalid_numbers(text: str, type_: int) -> None:
    with pytest.raises(ValueError):
        parse_value(text, type_)


def test_fetch_attributes_reads_all_ifds(exif_jpeg: Path) -> None:
    entries = dict(decode(PillowCodec().fetch_attributes(exif_jpeg)))

    assert entries["Make"] == "FOO"
    assert entries["Model"] == "BAR"
    assert entries["Orientation"] == "6"
    assert entries["DateTime"] == "2007:04:15 14:30:00"
    assert entries["GPSLatitude"] == "40/1,26/1,0/1"
    assert entries["GPSLongitudeRef"] == "W"
    assert entries["hasThumbnail"] == "false"
    assert "GPSInfo" not in entries


def test_interface_over_real_file(exif_jpeg: Path) -> None:
    exif = ExifInterface(exif_jpeg, codec=PillowCodec())

    assert exif.get_orientation_string() == "Rotated 90 degrees"
    assert exif.get_lat_long() == pytest.approx((40.4333, -79.9667), abs=1e-4)
    assert exif.get_date_time() is not None
    assert exif.has_thumbnail() is False
    assert exif.get_thumbnail() is None


def test_save_attributes_rewrites_file(exif_jpeg: Path) -> None:
    exif = ExifInterface(exif_jpeg, codec=PillowCodec())
    exif.set_attribute("Model", "BAZ")
    exif.set_attribute("Artist", "Jane Doe")
    exif.set_attribute("WhiteBalance", "1")
    exif.set_attribute("GPSLatitudeRef", "S")
    exif.save_attributes()

    reread = ExifInterface(exif_jpeg, codec=PillowCodec())
    assert reread.get_attribute("Model") == "BAZ"
    assert reread.get_attribute("Artist") == "Jane Doe"
    assert reread.get_attribute("Make") == "FOO"
    assert reread.get_white_balance_string() == "Manual"
    lat_long = reread.get_lat_long()
    assert lat_long is not None and lat_long[0] < 0

    with Image.open(exif_jpeg) as image:
        assert image.size == (32, 24)
    assert not list(exif_jpeg.parent.glob(".exif-*"))


def test_save_adds_exif_to_plain_image(plain_jpeg: Path) -> None:
    exif = ExifInterface(plain_jpeg, codec=PillowCodec())
    assert len(exif.store) == 0

    exif.set_attribute("Make", "FOO")
    exif.set_attribute("GPSLatitude", "40/1,26/1,0/1")
    exif.save_attributes()

    reread = ExifInterface(plain_jpeg, codec=PillowCodec())
    assert reread.get_attribute("Make") == "FOO"
    assert reread.get_attribute("GPSLatitude") == "40/1,26/1,0/1"


def test_thumbnail_from_ifd1(thumbnail_jpeg: Path) -> None:
    codec = PillowCodec()
    exif = ExifInterface(thumbnail_jpeg, codec=codec)

    assert exif.has_thumbnail() is True
    assert exif.get_attribute("Make") == "FOO"
    assert exif.get_thumbnail() == FAKE_THUMBNAIL


def test_commit_without_staging_fails(exif_jpeg: Path) -> None:
    with pytest.raises(CodecError):
        PillowCodec().commit(exif_jpeg)


def test_store_attributes_validates_wire(exif_jpeg: Path) -> None:
    with pytest.raises(MalformedWireError):
        PillowCodec().store_attributes(exif_jpeg, "1 Make=9 FOO")


def test_non_image_raises_codec_error(tmp_path: Path) -> None:
    path = tmp_path / "notes.jpg"
    path.write_text("not an image")
    with pytest.raises(CodecError):
        ExifInterface(path, codec=PillowCodec())


def test_unchanged_save_preserves_every_attribute(text_tags_jpeg: Path) -> None:
    exif = ExifInterface(text_tags_jpeg, codec=PillowCodec())
    before = exif.store.as_dict()
    assert before["Software"] == "007"
    assert before["SubsecTime"] == "050"
    assert before["ExifVersion"] == "0230"
    assert before["GPSVersionID"] == "2,2,0,0"

    exif.save_attributes()

    assert ExifInterface(text_tags_jpeg, codec=PillowCodec()).store.as_dict() == before


def test_numeric_looking_text_survives_save(plain_jpeg: Path) -> None:
    exif = ExifInterface(plain_jpeg, codec=PillowCodec())
    exif.set_attribute("Software", "007")
    exif.set_attribute("Artist", "1,2")
    exif.set_attribute("SubsecTime", "050")
    exif.set_attribute("ExifVersion", "0231")
    exif.set_attribute("ExposureTime", "1/60")
    exif.save_attributes()

    reread = ExifInterface(plain_jpeg, codec=PillowCodec())
    assert reread.get_attribute("Software") == "007"
    assert reread.get_attribute("Artist") == "1,2"
    assert reread.get_attribute("SubsecTime") == "050"
    assert reread.get_attribute("ExifVersion") == "0231"
    assert reread.get_attribute("ExposureTime") == "1/60"


def test_invalid_numeric_value_leaves_file_untouched(exif_jpeg: Path) -> None:
    original = exif_jpeg.read_bytes()
    exif = ExifInterface(exif_jpeg, codec=PillowCodec())
    exif.set_attribute("Orientation", "sideways")

    with pytest.raises(CodecError, match="Orientation"):
        exif.save_attributes()

    assert exif_jpeg.read_bytes() == original
    assert not list(exif_jpeg.parent.glob(".exif-*"))
