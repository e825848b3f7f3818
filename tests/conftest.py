from __future__ import annotations

import struct
import sys
from pathlib import Path

import pytest
from PIL import Image
from PIL.TiffImagePlugin import IFDRational

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from exif_attributes import protocol  # noqa: E402

FAKE_THUMBNAIL = b"\xff\xd8fake-thumbnail\xff\xd9"


class FakeCodec:
    """In-memory codec keyed by path, recording every call."""

    def __init__(self, files: dict[Path, str] | None = None) -> None:
        self.files: dict[Path, str] = dict(files or {})
        self.thumbnails: dict[Path, bytes] = {}
        self.staged: dict[Path, str] = {}
        self.calls: list[tuple[str, Path]] = []

    def fetch_attributes(self, path: Path) -> str:
        self.calls.append(("fetch_attributes", path))
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def store_attributes(self, path: Path, wire: str) -> None:
        self.calls.append(("store_attributes", path))
        self.staged[path] = wire

    def commit(self, path: Path) -> None:
        self.calls.append(("commit", path))
        self.files[path] = self.staged.pop(path)

    def fetch_thumbnail(self, path: Path) -> bytes | None:
        self.calls.append(("fetch_thumbnail", path))
        return self.thumbnails.get(path)


@pytest.fixture
def fake_codec() -> FakeCodec:
    return FakeCodec()


@pytest.fixture
def camera_wire() -> str:
    entries = [
        ("Make", "FOO"),
        ("Model", "BAR"),
        ("Orientation", "6"),
        ("WhiteBalance", "1"),
        ("DateTime", "2007:04:15 14:30:00"),
        ("GPSLatitude", "40/1,26/1,0/1"),
        ("GPSLatitudeRef", "N"),
        ("GPSLongitude", "79/1,58/1,0/1"),
        ("GPSLongitudeRef", "W"),
        ("hasThumbnail", "true"),
    ]
    return f"{len(entries)} " + "".join(protocol.format_entry(name, value) for name, value in entries)


@pytest.fixture
def exif_jpeg(tmp_path: Path) -> Path:
    """JPEG with IFD0, Exif and GPS tags written by Pillow."""
    path = tmp_path / "camera.jpg"
    exif = Image.Exif()
    exif[0x010F] = "FOO"  # Make
    exif[0x0110] = "BAR"  # Model
    exif[0x0112] = 6  # Orientation
    exif[0x0132] = "2007:04:15 14:30:00"  # DateTime
    exif[0x8825] = {
        1: "N",
        2: (IFDRational(40, 1), IFDRational(26, 1), IFDRational(0, 1)),
        3: "W",
        4: (IFDRational(79, 1), IFDRational(58, 1), IFDRational(0, 1)),
    }
    Image.new("RGB", (32, 24), "red").save(path, format="JPEG", exif=exif.tobytes())
    return path


@pytest.fixture
def thumbnail_jpeg(tmp_path: Path) -> Path:
    """JPEG whose EXIF block carries an IFD1 thumbnail."""
    ifd0_offset = 8
    ifd1_offset = ifd0_offset + 2 + 12 + 4
    thumbnail_offset = ifd1_offset + 2 + 2 * 12 + 4
    tiff = (
        struct.pack("<2sHI", b"II", 42, ifd0_offset)
        + struct.pack("<H", 1)
        + struct.pack("<HHI4s", 0x010F, 2, 4, b"FOO\x00")
        + struct.pack("<I", ifd1_offset)
        + struct.pack("<H", 2)
        + struct.pack("<HHII", 0x0201, 4, 1, thumbnail_offset)
        + struct.pack("<HHII", 0x0202, 4, 1, len(FAKE_THUMBNAIL))
        + struct.pack("<I", 0)
        + FAKE_THUMBNAIL
    )
    path = tmp_path / "thumb.jpg"
    Image.new("RGB", (32, 24), "blue").save(path, format="JPEG", exif=b"Exif\x00\x00" + tiff)
    return path


@pytest.fixture
def plain_jpeg(tmp_path: Path) -> Path:
    path = tmp_path / "plain.jpg"
    Image.new("RGB", (16, 16), "green").save(path, format="JPEG")
    return path


@pytest.fixture
def text_tags_jpeg(tmp_path: Path) -> Path:
    """JPEG whose text tags look numeric, plus UNDEFINED and BYTE tags."""
    path = tmp_path / "text_tags.jpg"
    exif = Image.Exif()
    exif[0x0110] = "300"  # Model
    exif[0x0131] = "007"  # Software
    exif[0x013B] = "1,2"  # Artist
    exif[0x8769] = {
        0x9000: b"0230",  # ExifVersion
        0x9290: "050",  # SubsecTime
        0x829A: IFDRational(1, 250),  # ExposureTime
    }
    exif[0x8825] = {
        0: b"\x02\x02\x00\x00",  # GPSVersionID
        1: "N",
        2: (IFDRational(40, 1), IFDRational(26, 1), IFDRational(0, 1)),
    }
    Image.new("RGB", (32, 24), "white").save(path, format="JPEG", exif=exif.tobytes())
    return path
