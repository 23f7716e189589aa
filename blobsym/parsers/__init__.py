"""
Blobsym Parsers
================

Bounds-checked readers for the symbol tables of COFF and 64-bit ELF
relocatable objects, and the dispatcher that picks between them.
"""

from blobsym.parsers.coff_parser import COFFParser, parse_coff
from blobsym.parsers.common import DEFAULT_SYMBOL_PREFIX, is_blob_symbol
from blobsym.parsers.dispatch import ParsedSymbols, dispatch_object, parse_object_file
from blobsym.parsers.elf_parser import ELF64Parser, parse_elf64
from blobsym.parsers.reader import BinaryReader

__all__ = [
    "BinaryReader",
    "COFFParser",
    "DEFAULT_SYMBOL_PREFIX",
    "ELF64Parser",
    "ParsedSymbols",
    "dispatch_object",
    "is_blob_symbol",
    "parse_coff",
    "parse_elf64",
    "parse_object_file",
]
