"""
Blobsym Configuration Management
=================================

Dataclass-based configuration with TOML persistence.  Each table of the
TOML file maps to one dataclass section; keys a section does not declare
are ignored and missing keys keep their defaults.

Example ``blobsym.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "build/blobsym.log"
    log_json = true

    [extract]
    symbol_prefix = "_binary_"
    max_coff_symbols = 1000000

    [header]
    extension = ".h"

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file, looked up in the working directory
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path("blobsym.toml")


# ========================== Sections =======================================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and general settings."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False


@dataclass(frozen=False, slots=True)
class ExtractConfig:
    """Symbol extraction limits and filtering.

    ``max_coff_symbols`` is the sanity ceiling on a COFF header's symbol
    count; anything above it is treated as a corrupt file.
    """

    symbol_prefix: str = "_binary_"
    max_coff_symbols: int = 1_000_000
    max_file_size: int = 268_435_456  # 256 MiB


@dataclass(frozen=False, slots=True)
class HeaderConfig:
    """Header file naming."""

    extension: str = ".h"
    object_suffixes: list[str] = field(default_factory=lambda: [".o", ".obj"])


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class BlobsymConfig:
    """Aggregate of every configuration section.

    Usage:
        >>> config = BlobsymConfig.load()                 # ./blobsym.toml if present
        >>> config = BlobsymConfig.load("ci.toml")        # explicit file
        >>> config.extract.symbol_prefix
        '_binary_'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    header: HeaderConfig = field(default_factory=HeaderConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> BlobsymConfig:
        """Load configuration from a TOML file.

        Args:
            path: TOML file to read.  Defaults to ``./blobsym.toml``; when
                  that default file does not exist, pure defaults are used.

        Returns:
            A fully-populated :class:`BlobsymConfig`.

        Raises:
            FileNotFoundError: *path* was given explicitly and does not exist.
            tomllib.TOMLDecodeError: The file is not valid TOML.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            extract=cls._build_section(ExtractConfig, raw.get("extract", {})),
            header=cls._build_section(HeaderConfig, raw.get("header", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate dataclass *cls* from the keys it declares."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

