"""
Blobsym Data Models
====================

Pydantic-based data models for symbols extracted from relocatable object
files.  A :class:`Symbol` is the shared output of both symbol-table
parsers; an :class:`ObjectFile` aggregates the symbols of one input file
together with its optional macro alias for the header renderer.

Field widths mirror the narrower of the two on-disk formats so that COFF
and ELF64 inputs produce interchangeable records:

    - ``value`` is an unsigned 32-bit integer.  ELF64 symbol values are
      truncated to their low 32 bits.  This loses precision for values
      above ``0xFFFFFFFF`` and is kept deliberately: generated headers only
      consume the names, and downstream tooling reads the 32-bit width.
    - ``section_index`` is a signed 16-bit integer (COFF SectionNumber).

References:
    - Microsoft. (2024). PE Format -- COFF Symbol Table. Microsoft Learn.
    - TIS Committee. (1995). Executable and Linkable Format (ELF) Specification.
"""

from __future__ import annotations

import enum
from pathlib import PurePath, PureWindowsPath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Width limits
# ---------------------------------------------------------------------------

UINT32_MAX: int = 0xFFFFFFFF
INT16_MIN: int = -0x8000
INT16_MAX: int = 0x7FFF

_OBJECT_SUFFIXES: tuple[str, ...] = (".o", ".obj")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ObjectFormat(str, enum.Enum):
    """Container formats understood by the extractor."""
    COFF = "coff"
    ELF64 = "elf64"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Symbol
# ---------------------------------------------------------------------------

class Symbol(BaseModel):
    """A linker-emitted blob symbol extracted from an object file.

    Attributes:
        name: Full symbol name, always starting with the blob prefix.
        value: Stored value field, narrowed to 32 bits.
        section_index: Section number the symbol belongs to (signed 16-bit;
            special ELF indices such as ``SHN_ABS`` wrap to negatives).
        storage_class: COFF storage class byte.  ``None`` for ELF symbols,
            which have no equivalent field.
        source_format: Format of the file the symbol was read from.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    value: int = Field(default=0, ge=0, le=UINT32_MAX)
    section_index: int = Field(default=0, ge=INT16_MIN, le=INT16_MAX)
    storage_class: Optional[int] = Field(default=None, ge=0, le=0xFF)
    source_format: ObjectFormat = ObjectFormat.UNKNOWN

    @property
    def is_size_symbol(self) -> bool:
        """``True`` for ``*_size`` symbols, which hold a length, not data."""
        return "_size" in self.name

    @property
    def suffix(self) -> str:
        """Text after the last underscore (``start``, ``end``, ``size``)."""
        return self.name.rsplit("_", 1)[-1]


# ---------------------------------------------------------------------------
# Object file aggregate
# ---------------------------------------------------------------------------

class ObjectFile(BaseModel):
    """One input object file and the blob symbols found in it.

    Attributes:
        path: Path exactly as given on the command line.
        macro: Optional macro alias used to emit convenience ``#define`` lines.
        format: Detected container format.
        symbols: Extracted symbols in symbol-table order.
    """
    path: str
    macro: str = ""
    format: ObjectFormat = ObjectFormat.UNKNOWN
    symbols: list[Symbol] = Field(default_factory=list)

    @property
    def symbol_count(self) -> int:
        return len(self.symbols)


def object_base_name(
    path: str,
    suffixes: tuple[str, ...] = _OBJECT_SUFFIXES,
) -> str:
    """Strip directories (``/`` or ``\\``) and a trailing object suffix.

    Args:
        path: Object file path.
        suffixes: Extensions removed from the final component.

    Returns:
        The bare base name, e.g. ``"shader.vert"`` for ``"out/shader.vert.o"``.
    """
    name = PureWindowsPath(PurePath(path).name).name
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


# ---------------------------------------------------------------------------
# Batch result
# ---------------------------------------------------------------------------

class ExtractionReport(BaseModel):
    """Outcome of extracting symbols from a batch of object files.

    Attributes:
        files: Successfully parsed files, in input order.
        failures: Diagnostic message per path that could not be parsed.
    """
    files: list[ObjectFile] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def symbol_count(self) -> int:
        return sum(f.symbol_count for f in self.files)

    @property
    def has_files(self) -> bool:
        return bool(self.files)
