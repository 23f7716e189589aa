"""
Format Dispatcher
==================

Routes an object file to the right symbol-table parser by its magic
number.  The file is read once; the first four bytes of the loaded
buffer decide between :class:`~blobsym.parsers.elf_parser.ELF64Parser`
and :class:`~blobsym.parsers.coff_parser.COFFParser`.  Parser errors
propagate unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional

from shared.logger import BlobsymLogger

from blobsym.core.models import ObjectFormat, Symbol
from blobsym.parsers.coff_parser import MAX_SYMBOL_COUNT, COFFParser
from blobsym.parsers.common import DEFAULT_SYMBOL_PREFIX
from blobsym.parsers.elf_parser import ELF64Parser
from blobsym.parsers.magic import MAGIC_SIZE, identify_format
from blobsym.parsers.reader import BinaryReader


class ParsedSymbols(NamedTuple):
    """Symbols of one file together with the format they were read as."""
    format: ObjectFormat
    symbols: list[Symbol]


def dispatch_object(
    path: str | Path,
    *,
    prefix: str = DEFAULT_SYMBOL_PREFIX,
    max_coff_symbols: int = MAX_SYMBOL_COUNT,
    max_file_size: Optional[int] = None,
    logger: BlobsymLogger | None = None,
) -> ParsedSymbols:
    """Parse *path* as ELF64 when it carries the ELF magic, else as COFF.

    Args:
        path: Object file to parse.
        prefix: Blob symbol prefix, applied identically by both parsers.
        max_coff_symbols: Symbol count ceiling for COFF headers.
        max_file_size: Reject larger files before reading them.
        logger: Parent logger; each parser logs through a child of it.

    Raises:
        ObjectParseError: Propagated from the reader or the chosen parser.
    """
    reader = BinaryReader.from_path(path, max_size=max_file_size)
    fmt = identify_format(reader.tail(0, MAGIC_SIZE))

    if fmt is ObjectFormat.ELF64:
        elf = ELF64Parser(
            reader,
            prefix=prefix,
            logger=logger.child("elf64") if logger else None,
        )
        return ParsedSymbols(ObjectFormat.ELF64, elf.parse())

    coff = COFFParser(
        reader,
        prefix=prefix,
        max_symbols=max_coff_symbols,
        logger=logger.child("coff") if logger else None,
    )
    return ParsedSymbols(ObjectFormat.COFF, coff.parse())


def parse_object_file(
    path: str | Path,
    *,
    prefix: str = DEFAULT_SYMBOL_PREFIX,
    max_coff_symbols: int = MAX_SYMBOL_COUNT,
    max_file_size: Optional[int] = None,
    logger: BlobsymLogger | None = None,
) -> list[Symbol]:
    """Return the blob symbols of *path*, whichever supported format it is."""
    return dispatch_object(
        path,
        prefix=prefix,
        max_coff_symbols=max_coff_symbols,
        max_file_size=max_file_size,
        logger=logger,
    ).symbols
