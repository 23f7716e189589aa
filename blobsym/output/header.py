"""
Blobsym Header Generator
=========================

Renders C/C++ header files declaring the blob symbols found in object
files, either one header per object file or a single combined header.

Declarations follow the usual meaning of the converter's symbols::

    extern const unsigned char _binary_logo_png_start[];   // first byte
    extern const unsigned char _binary_logo_png_end[];     // one past last
    extern const unsigned int _binary_logo_png_size;       // absolute symbol

When a macro alias is supplied for an object file, a convenience
``#define`` is emitted per symbol, named ``<ALIAS>_<SUFFIX>`` where the
suffix is the text after the symbol's last underscore.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from blobsym.core.models import ObjectFile, Symbol, object_base_name


def guard_name(name: str) -> str:
    """Upper-cased include-guard stem with dots replaced by underscores."""
    return name.replace(".", "_").upper()


def declaration(symbol: Symbol) -> str:
    """Return the ``extern`` declaration line for *symbol*."""
    if symbol.is_size_symbol:
        return f"extern const unsigned int {symbol.name};"
    return f"extern const unsigned char {symbol.name}[];"


def macro_define(macro: str, symbol: Symbol) -> Optional[str]:
    """Return ``#define <MACRO>_<SUFFIX> <name>``, or ``None`` when the
    symbol name has no underscore to split on."""
    if "_" not in symbol.name:
        return None
    macro_name = f"{macro}_{symbol.suffix}".upper()
    return f"#define {macro_name} {symbol.name}"


class HeaderRenderer:
    """Build and write header files for extracted symbols.

    Usage::

        renderer = HeaderRenderer()
        path = renderer.write(Path("include"), obj)
        combined = renderer.write_combined(Path("include"), "assets", objs)
    """

    def __init__(
        self,
        extension: str = ".h",
        object_suffixes: Sequence[str] = (".o", ".obj"),
    ) -> None:
        """Initialise the renderer.

        Args:
            extension: Suffix appended to header file names.
            object_suffixes: Extensions stripped from object file names to
                form per-object header names.
        """
        self._extension = extension
        self._object_suffixes = tuple(object_suffixes)

    def base_name(self, obj: ObjectFile) -> str:
        return object_base_name(obj.path, self._object_suffixes)

    # ------------------------------------------------------------------ #
    #  Per-object header
    # ------------------------------------------------------------------ #

    def render(self, obj: ObjectFile) -> str:
        """Return the header text for a single object file."""
        base = self.base_name(obj)
        guard = guard_name(base)

        lines: list[str] = [
            f"// Auto-generated header from {base}.o",
            f"#ifndef _INCLUDE_{guard}_H_",
            f"#define _INCLUDE_{guard}_H_",
            "",
        ]
        lines.extend(declaration(sym) for sym in obj.symbols)

        if obj.macro:
            lines.append("")
            lines.append("// Macros for convenience")
            lines.extend(self._macro_lines(obj.macro, obj.symbols))

        lines.append("")
        lines.append(f"#endif // _INCLUDE_{guard}_H_")
        return "\n".join(lines) + "\n"

    def header_path(self, out_dir: Path, obj: ObjectFile) -> Path:
        return out_dir / f"{self.base_name(obj)}{self._extension}"

    def write(self, out_dir: Path, obj: ObjectFile) -> Path:
        """Write the header for *obj* into *out_dir* and return its path."""
        path = self.header_path(out_dir, obj)
        path.write_text(self.render(obj), encoding="utf-8")
        return path

    # ------------------------------------------------------------------ #
    #  Combined header
    # ------------------------------------------------------------------ #

    def render_combined(
        self,
        header_name: str,
        files: Sequence[ObjectFile],
    ) -> str:
        """Return one header declaring the symbols of every file.

        Args:
            header_name: Header name as given by the user; it also feeds
                the include guard, extension included.
            files: Parsed object files in input order.
        """
        guard = guard_name(header_name)

        lines: list[str] = [
            f"// Auto-generated combined header from {len(files)} object files",
            f"#ifndef _INCLUDE_{guard}_H_",
            f"#define _INCLUDE_{guard}_H_",
            "",
        ]

        for obj in files:
            if not obj.symbols:
                continue
            lines.append(f"// From {obj.path}")
            lines.extend(declaration(sym) for sym in obj.symbols)
            lines.append("")

        if any(obj.macro for obj in files):
            lines.append("// Macros for convenience")
            for obj in files:
                if not (obj.macro and obj.symbols):
                    continue
                lines.append(f"// From {obj.path}")
                lines.extend(self._macro_lines(obj.macro, obj.symbols))

        lines.append("")
        lines.append(f"#endif // _INCLUDE_{guard}_H_")
        return "\n".join(lines) + "\n"

    def combined_path(self, out_dir: Path, header_name: str) -> Path:
        if header_name.endswith(self._extension):
            return out_dir / header_name
        return out_dir / f"{header_name}{self._extension}"

    def write_combined(
        self,
        out_dir: Path,
        header_name: str,
        files: Sequence[ObjectFile],
    ) -> Path:
        """Write the combined header into *out_dir* and return its path."""
        path = self.combined_path(out_dir, header_name)
        path.write_text(self.render_combined(header_name, files), encoding="utf-8")
        return path

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _macro_lines(macro: str, symbols: Sequence[Symbol]) -> list[str]:
        lines: list[str] = []
        for sym in symbols:
            line = macro_define(macro, sym)
            if line is not None:
                lines.append(line)
        return lines
