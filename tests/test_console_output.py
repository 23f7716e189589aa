"""Symbol table display tests, rendered through a recording console."""

from __future__ import annotations

import unittest

from shared.console import BlobsymConsole

from blobsym.core.models import ExtractionReport, ObjectFile, ObjectFormat, Symbol
from blobsym.output.console import SymbolConsoleOutput


class SymbolConsoleOutputTests(unittest.TestCase):
    def setUp(self) -> None:
        self.console = BlobsymConsole(record=True)
        self.console.rich.width = 120
        self.output = SymbolConsoleOutput(console=self.console)

    def test_file_table_lists_symbols(self) -> None:
        obj = ObjectFile(
            path="logo.obj",
            macro="LOGO",
            format=ObjectFormat.COFF,
            symbols=[
                Symbol(name="_binary_logo_start", value=0, section_index=1, storage_class=2),
                Symbol(name="_binary_logo_size", value=0x1F4, section_index=-1, storage_class=2),
            ],
        )
        self.output.display_file(obj)
        text = self.console.export_text()

        self.assertIn("logo.obj (coff) as LOGO", text)
        self.assertIn("_binary_logo_size", text)
        self.assertIn("0x000001f4", text)
        self.assertIn("-1", text)

    def test_elf_storage_class_shown_as_dash(self) -> None:
        obj = ObjectFile(
            path="a.o",
            format=ObjectFormat.ELF64,
            symbols=[Symbol(name="_binary_a_start", section_index=1)],
        )
        self.output.display_file(obj)
        self.assertRegex(self.console.export_text(), r"0x00000000\W+1\W+-")

    def test_empty_file_and_failures(self) -> None:
        report = ExtractionReport(
            files=[ObjectFile(path="empty.o", format=ObjectFormat.ELF64)],
            failures={"bad.obj": "file is 8 bytes"},
        )
        self.output.display(report)
        text = self.console.export_text()

        self.assertIn("empty.o (elf64): no blob symbols", text)
        self.assertIn("Skipped files", text)
        self.assertIn("bad.obj", text)


if __name__ == "__main__":
    unittest.main()
