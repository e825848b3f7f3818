"""
Configuration

Settings shared by the command-line interface, loaded from an optional TOML
file and overridden by command-line flags.

Example ``exif-attributes.toml``::

    [exif_attributes]
    backend = "pillow"
    output = "json"
"""

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from exif_attributes.errors import ExifAttributesError

logger = logging.getLogger(__name__)

BACKENDS = ("pillow", "fast-exif")
OUTPUT_FORMATS = ("table", "json")


class ConfigError(ExifAttributesError):
    """Configuration file is unreadable or holds invalid values."""


@dataclass(frozen=True)
class ExifConfig:
    """
    Runtime settings.

    Attributes:
        backend: Metadata codec backend name.
        output: Output format of the ``show`` command.
    """

    backend: str = "pillow"
    output: str = "table"

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(f"Unknown backend {self.backend!r}, expected one of {', '.join(BACKENDS)}")
        if self.output not in OUTPUT_FORMATS:
            raise ConfigError(f"Unknown output {self.output!r}, expected one of {', '.join(OUTPUT_FORMATS)}")

    def with_overrides(self, **overrides: Any) -> "ExifConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def load_config(config_path: Path | None) -> ExifConfig:
    """
    Load settings from a TOML file.

    Values may sit at the top level or under an ``[exif_attributes]`` table.

    Args:
        config_path: TOML file, or None for defaults.

    Returns:
        Loaded configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed, or holds unknown keys.
    """
    if config_path is None:
        return ExifConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot load configuration {config_path}: {e}") from e

    section = data.get("exif_attributes", data)
    known = {field.name for field in fields(ExifConfig)}
    unknown = set(section) - known - {"exif_attributes"}
    if unknown:
        raise ConfigError(f"Unknown configuration keys in {config_path}: {', '.join(sorted(unknown))}")

    logger.debug(f"Loaded configuration from {config_path}")
    return ExifConfig(**{key: value for key, value in section.items() if key in known})
