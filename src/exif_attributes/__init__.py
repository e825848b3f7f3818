"""
exif-attributes - EXIF metadata as a key/value store backed by an external
codec, with typed interpretation of orientation, white balance, GPS position
and capture time.
"""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

# Public names and the submodule defining each; imported on first access.
_EXPORTS = {
    "AttributeStore": "exif_attributes.store",
    "CodecError": "exif_attributes.errors",
    "CodecGuard": "exif_attributes.codec",
    "ExifAttributesError": "exif_attributes.errors",
    "ExifInterface": "exif_attributes.exif_interface",
    "GuardedCodec": "exif_attributes.codec",
    "MalformedWireError": "exif_attributes.errors",
    "MetadataCodec": "exif_attributes.codec",
    "ProtocolError": "exif_attributes.errors",
    "get_exif_codec": "exif_attributes.codec",
}


def __getattr__(name: str) -> Any:
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name), name)


def main() -> int:
    """Run the exif-attributes command-line interface.

    Returns
    -------
    int
        Exit code propagated from the CLI handler.
    """

    from exif_attributes.cli import main as cli_main

    return int(cli_main())


__all__ = [
    "AttributeStore",
    "CodecError",
    "CodecGuard",
    "ExifAttributesError",
    "ExifInterface",
    "GuardedCodec",
    "MalformedWireError",
    "MetadataCodec",
    "ProtocolError",
    "get_exif_codec",
    "main",
]
