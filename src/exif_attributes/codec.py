"""
External Metadata Codec Boundary

The binary EXIF codec holds process-wide state and is not reentrant, so every
call into it goes through a single shared :class:`CodecGuard`.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol, TypeVar, runtime_checkable

from exif_attributes.errors import CodecError, ExifAttributesError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class MetadataCodec(Protocol):
    """Operations the attribute store needs from an EXIF codec."""

    def fetch_attributes(self, path: Path) -> str:
        """Read ``path`` and return its attributes as a wire string."""
        ...

    def store_attributes(self, path: Path, wire: str) -> None:
        """Stage a wire-formatted attribute set for writing to ``path``."""
        ...

    def commit(self, path: Path) -> None:
        """Durably apply staged attributes to ``path``."""
        ...

    def fetch_thumbnail(self, path: Path) -> bytes | None:
        """Return the embedded thumbnail of ``path`` if there is one."""
        ...


class CodecGuard:
    """
    Mutual exclusion around external codec calls.

    Attributes:
        name: Label used in debug logging.
        _lock: Underlying lock.
    """

    def __init__(self, name: str = "codec") -> None:
        self.name = name
        self._lock: threading.Lock = threading.Lock()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the guard for the duration of the ``with`` block."""
        with self._lock:
            logger.debug(f"Acquired {self.name} guard")
            try:
                yield
            finally:
                logger.debug(f"Released {self.name} guard")

    def locked(self) -> bool:
        """Return True while some caller holds the guard."""
        return self._lock.locked()


# Shared by every GuardedCodec that is not handed an explicit guard.
DEFAULT_GUARD = CodecGuard("default")


class GuardedCodec:
    """
    Serializes access to a :class:`MetadataCodec` and normalizes its errors.

    Attributes:
        codec: Wrapped codec.
        guard: Guard held around each call.
    """

    def __init__(self, codec: MetadataCodec, guard: CodecGuard | None = None) -> None:
        self.codec = codec
        self.guard = guard if guard is not None else DEFAULT_GUARD

    def _call(self, operation: str, path: Path, func: Callable[[], T]) -> T:
        with self.guard.hold():
            try:
                return func()
            except ExifAttributesError:
                raise
            except Exception as e:
                logger.error(f"Codec {operation} failed for {path}: {e}")
                raise CodecError(f"{operation} failed ({e})", str(path)) from e

    def fetch_attributes(self, path: Path) -> str:
        """Return the wire string for ``path``."""
        return self._call("fetch_attributes", path, lambda: self.codec.fetch_attributes(path))

    def fetch_thumbnail(self, path: Path) -> bytes | None:
        """Return thumbnail bytes for ``path`` or None."""
        return self._call("fetch_thumbnail", path, lambda: self.codec.fetch_thumbnail(path))

    def save_and_commit(self, path: Path, wire: str) -> None:
        """
        Stage ``wire`` and commit it to ``path`` under one guard acquisition.

        Args:
            path: Image file.
            wire: Serialized attribute set.

        Raises:
            CodecError: If staging or committing fails.
        """

        def _save() -> None:
            self.codec.store_attributes(path, wire)
            self.codec.commit(path)

        self._call("save_and_commit", path, _save)


def get_exif_codec(backend: str = "pillow") -> MetadataCodec:
    """
    Factory function to get a metadata codec by backend name.

    Backends are imported lazily so the optional fast-exif-rs-py dependency
    is only needed when selected.

    Args:
        backend: ``"pillow"`` (read/write) or ``"fast-exif"`` (read-only).

    Returns:
        Configured metadata codec.

    Raises:
        ValueError: If the backend name is unknown.
        CodecError: If the backend's library is not installed.
    """
    if backend == "pillow":
        from exif_attributes.pillow_codec import PillowCodec

        return PillowCodec()
    if backend == "fast-exif":
        try:
            from exif_attributes.exif_extractor import FastExifCodec
        except ImportError as e:
            raise CodecError(
                f"fast-exif backend requires fast-exif-rs-py (pip install 'exif-attributes[fast]'): {e}"
            ) from e

        return FastExifCodec()
    raise ValueError(f"Unknown EXIF backend: {backend}")


__all__ = ["CodecGuard", "DEFAULT_GUARD", "GuardedCodec", "MetadataCodec", "get_exif_codec"]
