"""
Blobsym Console Interface
==========================

Rich-powered console abstraction giving every blobsym command the same
look: section rules, prefixed status messages and bordered tables.

Messages are printed with ``soft_wrap`` so long file paths stay on one
line and remain copy-pasteable from build logs.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_BLOBSYM_THEME = Theme(
    {
        "blobsym.success": "bold green",
        "blobsym.warning": "bold yellow",
        "blobsym.error": "bold red",
        "blobsym.info": "bold bright_blue",
        "blobsym.dim": "dim white",
    }
)


class BlobsymConsole:
    """Unified console for blobsym output.

    Usage::

        con = BlobsymConsole()
        con.warning("Skipped bad.obj: file is 8 bytes")
        con.success("Generated header: out/shader.h")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        stderr: bool = False,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (library / test mode).
            record: Enable Rich recording for :meth:`export_text`.
            stderr: Write to stderr instead of stdout.
        """
        self._console = Console(
            theme=_BLOBSYM_THEME,
            quiet=quiet,
            record=record,
            stderr=stderr,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def _message(self, style: str, label: str, message: str) -> None:
        self._console.print(
            f"[{style}]{label}[/{style}] {escape(message)}",
            soft_wrap=True,
        )

    def success(self, message: str) -> None:
        self._message("blobsym.success", "[✔]", message)

    def warning(self, message: str) -> None:
        self._message("blobsym.warning", "[⚠] WARNING:", message)

    def error(self, message: str) -> None:
        self._message("blobsym.error", "[✘] ERROR:", message)

    def info(self, message: str) -> None:
        self._message("blobsym.info", "[ℹ]", message)

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
        justify: Sequence[str] | None = None,
    ) -> None:
        """Render a bordered Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples; each cell is stringified and escaped.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
            justify:  Optional per-column justification
                      (``"left"``, ``"right"``, ``"center"``).
        """
        tbl = Table(
            title=escape(title),
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            align = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, style=style, justify=align)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def export_text(self) -> str:
        """Return recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
