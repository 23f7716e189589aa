"""
COFF Symbol-Table Parser
=========================

Struct-based reader for the symbol table of a COFF relocatable object
(the ``.obj`` files produced by MSVC, ``objcopy --output-target pe-*``
and similar tools).  Only the fields needed to walk the symbol table are
decoded:

    - COFF file header (20 bytes)
    - Symbol table records (18 bytes each), including auxiliary records,
      which are skipped
    - The string table that immediately follows the last record, used to
      resolve names longer than eight bytes

Every multi-byte field is little-endian.  Only symbols whose name passes
:func:`~blobsym.parsers.common.is_blob_symbol` are returned.

References:
    - Microsoft. (2024). PE Format -- COFF File Header, COFF Symbol Table,
      COFF String Table. Microsoft Learn.
      https://learn.microsoft.com/en-us/windows/win32/debug/pe-format
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Optional

from shared.logger import BlobsymLogger

from blobsym.core.errors import (
    FailureKind,
    ObjectBoundsError,
    ObjectFormatError,
    ObjectIOError,
)
from blobsym.core.models import ObjectFormat, Symbol
from blobsym.parsers.common import (
    DEFAULT_SYMBOL_PREFIX,
    decode_name,
    is_blob_symbol,
    read_cstring,
)
from blobsym.parsers.magic import MAGIC_SIZE, is_elf
from blobsym.parsers.reader import BinaryReader


# ---------------------------------------------------------------------------
# COFF layout
# ---------------------------------------------------------------------------

# Machine, NumberOfSections, TimeDateStamp, PointerToSymbolTable,
# NumberOfSymbols, SizeOfOptionalHeader, Characteristics
_FILE_HEADER = struct.Struct("<HHIIIHH")

# Name[8], Value, SectionNumber, Type, StorageClass, NumberOfAuxSymbols
_SYMBOL_RECORD = struct.Struct("<8sIhHBB")

# Long-name form of the 8-byte name field: Zeroes, Offset
_NAME_OFFSET = struct.Struct("<II")

_U32 = struct.Struct("<I")

COFF_HEADER_SIZE: int = _FILE_HEADER.size      # 20
COFF_SYMBOL_SIZE: int = _SYMBOL_RECORD.size    # 18
STRING_TABLE_SIZE_FIELD: int = _U32.size       # 4

# Header symbol counts above this are treated as corrupt
MAX_SYMBOL_COUNT: int = 1_000_000


# ---------------------------------------------------------------------------
# Internal parsed structures
# ---------------------------------------------------------------------------

class _COFFHeader:
    """Parsed COFF file header."""
    __slots__ = (
        "machine", "number_of_sections", "time_date_stamp",
        "pointer_to_symbol_table", "number_of_symbols",
        "size_of_optional_header", "characteristics",
    )

    def __init__(self) -> None:
        self.machine: int = 0
        self.number_of_sections: int = 0
        self.time_date_stamp: int = 0
        self.pointer_to_symbol_table: int = 0
        self.number_of_symbols: int = 0
        self.size_of_optional_header: int = 0
        self.characteristics: int = 0

    @property
    def string_table_offset(self) -> int:
        return (
            self.pointer_to_symbol_table
            + self.number_of_symbols * COFF_SYMBOL_SIZE
        )


# ---------------------------------------------------------------------------
# COFF Parser
# ---------------------------------------------------------------------------

class COFFParser:
    """Extract blob symbols from a COFF object held in a :class:`BinaryReader`.

    Usage::

        parser = COFFParser(BinaryReader.from_path("logo.obj"))
        for sym in parser.parse():
            print(sym.name, sym.value)

    Fatal problems (wrong format, header out of bounds, implausible
    symbol count) raise :class:`~blobsym.core.errors.ObjectParseError`.
    A symbol table cut short by end-of-file is not fatal: the symbols
    decoded before the cut are returned.
    """

    def __init__(
        self,
        reader: BinaryReader,
        *,
        prefix: str = DEFAULT_SYMBOL_PREFIX,
        max_symbols: int = MAX_SYMBOL_COUNT,
        logger: BlobsymLogger | None = None,
    ) -> None:
        """Initialise the parser.

        Args:
            reader: Reader over the complete file contents.
            prefix: Name prefix a symbol must carry to be returned.
            max_symbols: Sanity ceiling for the header's symbol count.
            logger: Logger for skipped symbols and truncation warnings.
        """
        self._reader = reader
        self._prefix = prefix
        self._max_symbols = max_symbols
        self._logger: BlobsymLogger = logger or BlobsymLogger("coff")
        self._header: _COFFHeader = _COFFHeader()

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse(self) -> list[Symbol]:
        """Walk the symbol table and return the blob symbols in order.

        Raises:
            ObjectFormatError: The data carries the ELF magic.
            ObjectIOError: The file is shorter than the COFF header.
            ObjectBoundsError: The symbol count exceeds the ceiling, or the
                symbol table starts at or beyond end-of-file.
        """
        self._parse_file_header()
        h = self._header

        if h.number_of_symbols > self._max_symbols:
            raise ObjectBoundsError(
                FailureKind.SYMBOL_COUNT,
                f"implausible symbol count {h.number_of_symbols:,} "
                f"(max: {self._max_symbols:,}); file is likely corrupt",
                self._reader.path,
            )

        if h.number_of_symbols == 0:
            return []

        if h.pointer_to_symbol_table >= self._reader.size:
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"symbol table offset {h.pointer_to_symbol_table} is at or "
                f"beyond end of file ({self._reader.size} bytes)",
                self._reader.path,
            )

        string_table = self._load_string_table()
        return self._parse_symbol_table(string_table)

    @property
    def machine(self) -> int:
        return self._header.machine

    @property
    def declared_symbol_count(self) -> int:
        """``NumberOfSymbols`` from the header, auxiliary records included."""
        return self._header.number_of_symbols

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    def _parse_file_header(self) -> None:
        r = self._reader
        if is_elf(r.tail(0, MAGIC_SIZE)):
            raise ObjectFormatError(
                FailureKind.FORMAT_MISMATCH,
                "file is an ELF object, not COFF",
                r.path,
            )
        if r.size < COFF_HEADER_SIZE:
            raise ObjectIOError(
                FailureKind.SHORT_READ,
                f"file is {r.size} bytes, smaller than the "
                f"{COFF_HEADER_SIZE}-byte COFF header",
                r.path,
            )

        h = self._header
        (
            h.machine, h.number_of_sections, h.time_date_stamp,
            h.pointer_to_symbol_table, h.number_of_symbols,
            h.size_of_optional_header, h.characteristics,
        ) = r.unpack_at(_FILE_HEADER, 0, "COFF header")

    # ------------------------------------------------------------------ #
    #  String table
    # ------------------------------------------------------------------ #

    def _load_string_table(self) -> bytes:
        """Return the string table bytes, size field included.

        Long-name offsets count from the start of the size field, so the
        returned buffer is indexed directly by them.  A table the file
        cannot fully hold is clipped to its readable part.
        """
        r = self._reader
        offset = self._header.string_table_offset

        if not r.contains(offset, STRING_TABLE_SIZE_FIELD):
            self._logger.debug(
                "No string table at offset %d; long names will be skipped",
                offset,
            )
            return b""

        (declared,) = r.unpack_at(_U32, offset, "string table size")
        if declared <= STRING_TABLE_SIZE_FIELD:
            return b""

        table = r.tail(offset, declared)
        if len(table) < declared:
            self._logger.warning(
                "String table declares %d bytes but only %d are present",
                declared,
                len(table),
                path=r.path,
            )
        return table

    # ------------------------------------------------------------------ #
    #  Symbol table
    # ------------------------------------------------------------------ #

    def _parse_symbol_table(self, string_table: bytes) -> list[Symbol]:
        r = self._reader
        count = self._header.number_of_symbols
        r.seek(self._header.pointer_to_symbol_table)

        symbols: list[Symbol] = []
        index = 0
        while index < count:
            try:
                (
                    raw_name, value, section_number,
                    _sym_type, storage_class, aux_count,
                ) = r.unpack(_SYMBOL_RECORD)
            except ObjectIOError:
                self._logger.warning(
                    "Symbol table truncated at record %d of %d; "
                    "keeping %d symbols",
                    index,
                    count,
                    len(symbols),
                    path=r.path,
                )
                break

            name = self._resolve_name(raw_name, string_table, index)
            if name is not None and is_blob_symbol(name, self._prefix):
                symbols.append(Symbol(
                    name=name,
                    value=value,
                    section_index=section_number,
                    storage_class=storage_class,
                    source_format=ObjectFormat.COFF,
                ))

            index += 1
            if aux_count:
                index += aux_count
                aux_bytes = aux_count * COFF_SYMBOL_SIZE
                if not r.contains(r.position, aux_bytes):
                    if index < count:
                        self._logger.warning(
                            "Auxiliary records of symbol %d run past end "
                            "of file; keeping %d symbols",
                            index - aux_count - 1,
                            len(symbols),
                            path=r.path,
                        )
                    break
                r.skip(aux_bytes)

        return symbols

    def _resolve_name(
        self,
        raw_name: bytes,
        string_table: bytes,
        index: int,
    ) -> Optional[str]:
        """Decode the 8-byte name field of one record.

        Returns ``None`` when a long name points outside the string table;
        the caller skips that symbol and keeps scanning.
        """
        zeroes, offset = _NAME_OFFSET.unpack(raw_name)
        if zeroes == 0:
            if offset >= len(string_table):
                self._logger.debug(
                    "Skipping symbol %d: string table offset %d outside "
                    "table of %d bytes",
                    index,
                    offset,
                    len(string_table),
                )
                return None
            return read_cstring(string_table, offset)

        # Short names are padded with NULs or spaces and need not be terminated
        short = raw_name.split(b"\x00", 1)[0].rstrip(b" ")
        return decode_name(short)


# ---------------------------------------------------------------------------
# Path-level entry point
# ---------------------------------------------------------------------------

def parse_coff(
    path: str | Path,
    *,
    prefix: str = DEFAULT_SYMBOL_PREFIX,
    max_symbols: int = MAX_SYMBOL_COUNT,
    max_file_size: Optional[int] = None,
    logger: BlobsymLogger | None = None,
) -> list[Symbol]:
    """Parse *path* strictly as COFF and return its blob symbols.

    An ELF file handed to this function fails with
    ``FailureKind.FORMAT_MISMATCH`` instead of being misread as COFF.

    Raises:
        ObjectParseError: Any fatal I/O, format or bounds failure; the
            error's ``path`` is set to *path*.
    """
    reader = BinaryReader.from_path(path, max_size=max_file_size)
    parser = COFFParser(
        reader,
        prefix=prefix,
        max_symbols=max_symbols,
        logger=logger,
    )
    return parser.parse()
