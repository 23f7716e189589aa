"""
Object Format Identification
=============================

Classifies an object file by its leading bytes.  ELF files announce
themselves with a four-byte magic number; COFF objects have no magic of
their own (they start with the machine type), so anything that is not
ELF is handed to the COFF parser, which performs its own validation.

References:
    - TIS Committee. (1995). ELF Specification, Section 1-3 (e_ident).
    - Microsoft. (2024). PE Format -- Machine Types.
"""

from __future__ import annotations

from blobsym.core.models import ObjectFormat

ELF_MAGIC: bytes = b"\x7fELF"
MAGIC_SIZE: int = len(ELF_MAGIC)


def is_elf(data: bytes) -> bool:
    """Return ``True`` if *data* starts with the ELF magic number."""
    return data[:MAGIC_SIZE] == ELF_MAGIC


def identify_format(data: bytes) -> ObjectFormat:
    """Return the container format used for routing.

    Args:
        data: At least the first :data:`MAGIC_SIZE` bytes of the file.

    Returns:
        :attr:`ObjectFormat.ELF64` for ELF magic (class and endianness
        are checked by the ELF parser), :attr:`ObjectFormat.COFF` for
        anything else, or :attr:`ObjectFormat.UNKNOWN` for an empty buffer.
    """
    if not data:
        return ObjectFormat.UNKNOWN
    if is_elf(data):
        return ObjectFormat.ELF64
    return ObjectFormat.COFF
