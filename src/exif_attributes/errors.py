"""
Exception Hierarchy

Errors raised by the attribute protocol and the external codec boundary.
Missing tags are not errors: lookups return ``None``.
"""


class ExifAttributesError(Exception):
    """Base class for every error raised by this package."""


class ProtocolError(ExifAttributesError, ValueError):
    """The attribute wire string could not be processed."""


class MalformedWireError(ProtocolError):
    """
    The wire string violates the ``<count> <name>=<len> <value>...`` grammar.

    Attributes:
        wire: The offending wire string.
        offset: Cursor position at which decoding stopped.
    """

    def __init__(self, message: str, wire: str = "", offset: int = 0) -> None:
        super().__init__(f"{message} (offset {offset})")
        self.wire = wire
        self.offset = offset


class CodecError(ExifAttributesError):
    """The external metadata codec failed (I/O or codec-level format error)."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message if path is None else f"{message}: {path}")
        self.path = path
