"""
ELF64 Symbol-Table Parser
==========================

Struct-based reader for the ``.symtab`` of a 64-bit little-endian
relocatable ELF object, the format produced on Linux by
``ld -r -b binary`` or ``objcopy -I binary -O elf64-x86-64``.

The parser decodes only what symbol extraction needs:

    - ELF file header (64 bytes), validated field by field
    - Section header table (64-byte entries) and the section-name string
      table (``e_shstrndx``)
    - ``.symtab`` entries (24 bytes each) and the ``.strtab`` they name

32-bit and big-endian ELF files are rejected with a specific
:class:`~blobsym.core.errors.FailureKind`.

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
    - Linux man page: elf(5).
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
from blobsym.core.models import UINT32_MAX, ObjectFormat, Symbol
from blobsym.parsers.common import (
    DEFAULT_SYMBOL_PREFIX,
    is_blob_symbol,
    read_cstring,
)
from blobsym.parsers.magic import MAGIC_SIZE, is_elf
from blobsym.parsers.reader import BinaryReader


# ---------------------------------------------------------------------------
# ELF Constants
# ---------------------------------------------------------------------------

# e_ident indices
EI_CLASS: int = 4
EI_DATA: int = 5
EI_NIDENT: int = 16

ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

ET_REL: int = 1   # Relocatable
ET_EXEC: int = 2  # Executable
ET_DYN: int = 3   # Shared object / PIE

_ET_NAMES: dict[int, str] = {
    0: "NONE",
    ET_REL: "REL",
    ET_EXEC: "EXEC",
    ET_DYN: "DYN",
    4: "CORE",
}

SYMTAB_NAME: str = ".symtab"
STRTAB_NAME: str = ".strtab"


# ---------------------------------------------------------------------------
# ELF64 layout (little-endian only)
# ---------------------------------------------------------------------------

# e_type .. e_shstrndx, following the 16-byte e_ident
_FILE_HEADER_TAIL = struct.Struct("<HHIQQQIHHHHHH")

# sh_name, sh_type, sh_flags, sh_addr, sh_offset, sh_size,
# sh_link, sh_info, sh_addralign, sh_entsize
_SECTION_HEADER = struct.Struct("<IIQQQQIIQQ")

# st_name, st_info, st_other, st_shndx, st_value, st_size
_SYMBOL_ENTRY = struct.Struct("<IBBHQQ")

ELF64_HEADER_SIZE: int = EI_NIDENT + _FILE_HEADER_TAIL.size    # 64
ELF64_SHDR_SIZE: int = _SECTION_HEADER.size                   # 64
ELF64_SYM_SIZE: int = _SYMBOL_ENTRY.size                      # 24


# ---------------------------------------------------------------------------
# Internal parsed structures
# ---------------------------------------------------------------------------

class _ELFHeader:
    """Parsed ELF64 header fields."""
    __slots__ = (
        "ei_class", "ei_data",
        "e_type", "e_machine", "e_version", "e_entry",
        "e_phoff", "e_shoff", "e_flags", "e_ehsize",
        "e_phentsize", "e_phnum", "e_shentsize", "e_shnum",
        "e_shstrndx",
    )

    def __init__(self) -> None:
        self.ei_class: int = 0
        self.ei_data: int = 0
        self.e_type: int = 0
        self.e_machine: int = 0
        self.e_version: int = 0
        self.e_entry: int = 0
        self.e_phoff: int = 0
        self.e_shoff: int = 0
        self.e_flags: int = 0
        self.e_ehsize: int = 0
        self.e_phentsize: int = 0
        self.e_phnum: int = 0
        self.e_shentsize: int = 0
        self.e_shnum: int = 0
        self.e_shstrndx: int = 0


class _SectionHeader:
    """Parsed section header entry."""
    __slots__ = (
        "sh_name", "sh_type", "sh_flags", "sh_addr",
        "sh_offset", "sh_size", "sh_link", "sh_info",
        "sh_addralign", "sh_entsize", "name",
    )

    def __init__(self) -> None:
        self.sh_name: int = 0
        self.sh_type: int = 0
        self.sh_flags: int = 0
        self.sh_addr: int = 0
        self.sh_offset: int = 0
        self.sh_size: int = 0
        self.sh_link: int = 0
        self.sh_info: int = 0
        self.sh_addralign: int = 0
        self.sh_entsize: int = 0
        self.name: str = ""


def _as_int16(value: int) -> int:
    """Reinterpret an unsigned 16-bit section index as signed."""
    return value - 0x10000 if value >= 0x8000 else value


# ---------------------------------------------------------------------------
# ELF64 Parser
# ---------------------------------------------------------------------------

class ELF64Parser:
    """Extract blob symbols from a 64-bit little-endian relocatable ELF.

    Usage::

        parser = ELF64Parser(BinaryReader.from_path("logo.o"))
        symbols = parser.parse()

    Header validation fails fast in a fixed order -- magic, class,
    endianness, object type -- each with its own
    :class:`~blobsym.core.errors.FailureKind`.  A missing ``.symtab`` or
    ``.strtab`` is fatal.  Individual symbols whose name offset lies
    outside ``.strtab`` are skipped, and a symbol table cut short by
    end-of-file yields the symbols decoded before the cut.
    """

    def __init__(
        self,
        reader: BinaryReader,
        *,
        prefix: str = DEFAULT_SYMBOL_PREFIX,
        logger: BlobsymLogger | None = None,
    ) -> None:
        """Initialise the parser.

        Args:
            reader: Reader over the complete file contents.
            prefix: Name prefix a symbol must carry to be returned.
            logger: Logger for skipped symbols and truncation warnings.
        """
        self._reader = reader
        self._prefix = prefix
        self._logger: BlobsymLogger = logger or BlobsymLogger("elf64")
        self._header: _ELFHeader = _ELFHeader()
        self._sections: list[_SectionHeader] = []

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse(self) -> list[Symbol]:
        """Locate ``.symtab``/``.strtab`` and return the blob symbols in order.

        Raises:
            ObjectIOError: The file is shorter than the ELF64 header.
            ObjectFormatError: Magic, class, endianness or object type is
                wrong, or ``.symtab``/``.strtab`` is missing.
            ObjectBoundsError: The section header table, the section-name
                string table or ``.strtab`` lies outside the file, or
                ``e_shstrndx`` is out of range.
        """
        self._parse_elf_header()
        if self._header.e_shnum == 0:
            return []

        self._parse_section_headers()
        self._resolve_section_names()

        symtab = self._find_section(SYMTAB_NAME)
        strtab = self._find_section(STRTAB_NAME)
        if symtab is None or strtab is None:
            missing = [
                name
                for name, sh in ((SYMTAB_NAME, symtab), (STRTAB_NAME, strtab))
                if sh is None
            ]
            raise ObjectFormatError(
                FailureKind.MISSING_SECTION,
                f"required section(s) not found: {', '.join(missing)}",
                self._reader.path,
            )

        string_table = self._reader.slice(
            strtab.sh_offset, strtab.sh_size, STRTAB_NAME
        )
        return self._parse_symbol_table(symtab, string_table)

    @property
    def section_names(self) -> list[str]:
        """Names of all parsed section headers, in table order."""
        return [sh.name for sh in self._sections]

    @property
    def machine(self) -> int:
        return self._header.e_machine

    # ------------------------------------------------------------------ #
    #  ELF header parsing
    # ------------------------------------------------------------------ #

    def _parse_elf_header(self) -> None:
        r = self._reader
        if r.size < ELF64_HEADER_SIZE:
            raise ObjectIOError(
                FailureKind.SHORT_READ,
                f"file is {r.size} bytes, smaller than the "
                f"{ELF64_HEADER_SIZE}-byte ELF64 header",
                r.path,
            )

        ident = r.slice(0, EI_NIDENT, "e_ident")
        if not is_elf(ident):
            raise ObjectFormatError(
                FailureKind.BAD_MAGIC,
                f"bad ELF magic {ident[:MAGIC_SIZE]!r}",
                r.path,
            )

        h = self._header
        h.ei_class = ident[EI_CLASS]
        h.ei_data = ident[EI_DATA]

        if h.ei_class != ELFCLASS64:
            bits = "32-bit" if h.ei_class == ELFCLASS32 else f"class {h.ei_class}"
            raise ObjectFormatError(
                FailureKind.BAD_CLASS,
                f"unsupported ELF class ({bits}); only 64-bit ELF is supported",
                r.path,
            )
        if h.ei_data != ELFDATA2LSB:
            order = "big-endian" if h.ei_data == ELFDATA2MSB else f"encoding {h.ei_data}"
            raise ObjectFormatError(
                FailureKind.BAD_ENDIANNESS,
                f"unsupported ELF data encoding ({order}); "
                f"only little-endian is supported",
                r.path,
            )

        (
            h.e_type, h.e_machine, h.e_version, h.e_entry,
            h.e_phoff, h.e_shoff, h.e_flags, h.e_ehsize,
            h.e_phentsize, h.e_phnum, h.e_shentsize, h.e_shnum,
            h.e_shstrndx,
        ) = r.unpack_at(_FILE_HEADER_TAIL, EI_NIDENT, "ELF header")

        if h.e_type != ET_REL:
            type_name = _ET_NAMES.get(h.e_type, f"0x{h.e_type:x}")
            raise ObjectFormatError(
                FailureKind.BAD_OBJECT_TYPE,
                f"ELF type is {type_name}, expected REL (relocatable object)",
                r.path,
            )

    # ------------------------------------------------------------------ #
    #  Section header parsing
    # ------------------------------------------------------------------ #

    def _parse_section_headers(self) -> None:
        h = self._header
        r = self._reader

        if h.e_shentsize < ELF64_SHDR_SIZE:
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"section header entry size {h.e_shentsize} is smaller "
                f"than {ELF64_SHDR_SIZE} bytes",
                r.path,
            )

        table_size = h.e_shnum * h.e_shentsize
        if not r.contains(h.e_shoff, table_size):
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"section header table ({h.e_shnum} x {h.e_shentsize} bytes "
                f"at offset {h.e_shoff}) extends past end of file "
                f"({r.size} bytes)",
                r.path,
            )

        for i in range(h.e_shnum):
            sh = _SectionHeader()
            (
                sh.sh_name, sh.sh_type, sh.sh_flags, sh.sh_addr,
                sh.sh_offset, sh.sh_size, sh.sh_link, sh.sh_info,
                sh.sh_addralign, sh.sh_entsize,
            ) = r.unpack_at(
                _SECTION_HEADER,
                h.e_shoff + i * h.e_shentsize,
                f"section header {i}",
            )
            self._sections.append(sh)

    def _resolve_section_names(self) -> None:
        h = self._header
        if h.e_shstrndx >= len(self._sections):
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"section name string table index {h.e_shstrndx} out of "
                f"range ({len(self._sections)} sections)",
                self._reader.path,
            )

        shstrtab_sh = self._sections[h.e_shstrndx]
        shstrtab = self._reader.slice(
            shstrtab_sh.sh_offset,
            shstrtab_sh.sh_size,
            "section name string table",
        )
        for sh in self._sections:
            sh.name = read_cstring(shstrtab, sh.sh_name)

    def _find_section(self, name: str) -> Optional[_SectionHeader]:
        for sh in self._sections:
            if sh.name == name:
                return sh
        return None

    # ------------------------------------------------------------------ #
    #  Symbol table parsing
    # ------------------------------------------------------------------ #

    def _parse_symbol_table(
        self,
        symtab: _SectionHeader,
        string_table: bytes,
    ) -> list[Symbol]:
        r = self._reader
        count = symtab.sh_size // ELF64_SYM_SIZE
        r.seek(symtab.sh_offset)

        symbols: list[Symbol] = []
        for index in range(count):
            try:
                (
                    st_name, _st_info, _st_other,
                    st_shndx, st_value, _st_size,
                ) = r.unpack(_SYMBOL_ENTRY)
            except ObjectIOError:
                self._logger.warning(
                    "Symbol table truncated at entry %d of %d; "
                    "keeping %d symbols",
                    index,
                    count,
                    len(symbols),
                    path=r.path,
                )
                break

            if st_name == 0:
                continue
            if st_name >= len(string_table):
                self._logger.debug(
                    "Skipping symbol %d: name offset %d outside %s of %d bytes",
                    index,
                    st_name,
                    STRTAB_NAME,
                    len(string_table),
                )
                continue

            name = read_cstring(string_table, st_name)
            if not is_blob_symbol(name, self._prefix):
                continue

            symbols.append(Symbol(
                name=name,
                # Narrowed to the shared 32-bit width; high bits are dropped
                value=st_value & UINT32_MAX,
                section_index=_as_int16(st_shndx),
                storage_class=None,
                source_format=ObjectFormat.ELF64,
            ))

        return symbols


# ---------------------------------------------------------------------------
# Path-level entry point
# ---------------------------------------------------------------------------

def parse_elf64(
    path: str | Path,
    *,
    prefix: str = DEFAULT_SYMBOL_PREFIX,
    max_file_size: Optional[int] = None,
    logger: BlobsymLogger | None = None,
) -> list[Symbol]:
    """Parse *path* as a 64-bit little-endian relocatable ELF object.

    Raises:
        ObjectParseError: Any fatal I/O, format or bounds failure.
    """
    reader = BinaryReader.from_path(path, max_size=max_file_size)
    parser = ELF64Parser(reader, prefix=prefix, logger=logger)
    return parser.parse()
