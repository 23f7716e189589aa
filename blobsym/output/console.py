"""
Blobsym Console Output
=======================

Rich tables listing the symbols extracted from each object file and the
files that were skipped.
"""

from __future__ import annotations

from shared.console import BlobsymConsole

from blobsym.core.models import ExtractionReport, ObjectFile, Symbol


def _format_value(value: int) -> str:
    return f"0x{value:08x}"


def _format_storage_class(symbol: Symbol) -> str:
    return "-" if symbol.storage_class is None else str(symbol.storage_class)


class SymbolConsoleOutput:
    """Display an :class:`ExtractionReport` on a :class:`BlobsymConsole`."""

    def __init__(self, console: BlobsymConsole | None = None) -> None:
        self._console = console or BlobsymConsole()

    def display(self, report: ExtractionReport) -> None:
        """Print one table per parsed file, then the skipped files."""
        for obj in report.files:
            self.display_file(obj)

        if report.failures:
            self._console.table(
                "Skipped files",
                ["Path", "Reason"],
                list(report.failures.items()),
                styles=["bright_white", "red"],
            )

    def display_file(self, obj: ObjectFile) -> None:
        title = f"{obj.path} ({obj.format.value})"
        if obj.macro:
            title += f" as {obj.macro}"

        if not obj.symbols:
            self._console.info(f"{title}: no blob symbols")
            return

        rows = [
            (
                idx,
                sym.name,
                _format_value(sym.value),
                sym.section_index,
                _format_storage_class(sym),
            )
            for idx, sym in enumerate(obj.symbols, start=1)
        ]
        self._console.table(
            title,
            ["#", "Symbol", "Value", "Section", "Class"],
            rows,
            styles=["dim", "bright_cyan", "bright_white", "", "dim"],
            justify=["right", "left", "right", "right", "right"],
        )
