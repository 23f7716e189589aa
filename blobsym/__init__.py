"""
Blobsym -- Blob Symbol Extractor
=================================

Reads the symbol tables of relocatable object files produced by
binary-to-object converters (``ld -r -b binary``, ``objcopy -I binary``,
``bin2obj``) and generates C headers declaring the embedded-data
symbols they define (``_binary_<name>_start``, ``_end``, ``_size``).

Capabilities:
    - COFF symbol tables, short and string-table names, auxiliary records
    - 64-bit little-endian relocatable ELF ``.symtab``/``.strtab``
    - Magic-number dispatch between the two formats
    - Strict bounds checking against truncated or hostile files
    - Per-object or combined header generation with macro aliases

References:
    - Microsoft. (2024). PE Format. Microsoft Learn.
    - TIS Committee. (1995). ELF Specification.
"""

__version__ = "1.0.0"
__all__ = [
    "ExtractionEngine",
    "HeaderRenderer",
    "ObjectFile",
    "Symbol",
    "parse_object_file",
]

from blobsym.core.engine import ExtractionEngine
from blobsym.core.models import ObjectFile, Symbol
from blobsym.output.header import HeaderRenderer
from blobsym.parsers.dispatch import parse_object_file
