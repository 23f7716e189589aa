"""
Shared Symbol Rules
====================

The prefix test that decides what counts as an embedded-blob symbol, and
the string decoding both parsers apply to raw name bytes.  Keeping them
here guarantees that COFF and ELF64 inputs are filtered identically.

Binary-to-object converters (``objcopy -I binary``, ``ld -r -b binary``)
name their symbols ``_binary_<mangled path>_start``, ``..._end`` and
``..._size``.
"""

from __future__ import annotations

DEFAULT_SYMBOL_PREFIX: str = "_binary_"

_NAME_ENCODING: str = "utf-8"


def is_blob_symbol(name: str, prefix: str = DEFAULT_SYMBOL_PREFIX) -> bool:
    """Return ``True`` if *name* is a non-empty blob symbol name."""
    return bool(name) and name.startswith(prefix)


def decode_name(raw: bytes) -> str:
    """Decode symbol name bytes, replacing invalid sequences."""
    return raw.decode(_NAME_ENCODING, errors="replace")


def read_cstring(table: bytes, offset: int) -> str:
    """Read a NUL-terminated string from a string table.

    The string ends at the first NUL or at the end of *table*, whichever
    comes first.  Callers validate *offset* beforehand; an offset outside
    the table yields ``""``.
    """
    if offset < 0 or offset >= len(table):
        return ""
    end = table.find(b"\x00", offset)
    if end == -1:
        end = len(table)
    return decode_name(table[offset:end])
