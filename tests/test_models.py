"""Symbol model and error hierarchy tests."""

from __future__ import annotations

import unittest

from pydantic import ValidationError

from blobsym.core.errors import (
    FailureKind,
    ObjectBoundsError,
    ObjectFormatError,
    ObjectIOError,
    ObjectParseError,
)
from blobsym.core.models import ExtractionReport, ObjectFile, ObjectFormat, Symbol


class SymbolTests(unittest.TestCase):
    def test_fields_and_helpers(self) -> None:
        sym = Symbol(
            name="_binary_logo_png_size",
            value=1024,
            section_index=-1,
            storage_class=2,
            source_format=ObjectFormat.COFF,
        )
        self.assertTrue(sym.is_size_symbol)
        self.assertEqual(sym.suffix, "size")

    def test_symbols_are_immutable(self) -> None:
        sym = Symbol(name="_binary_a_start")
        with self.assertRaises(ValidationError):
            sym.value = 5

    def test_widths_are_enforced(self) -> None:
        with self.assertRaises(ValidationError):
            Symbol(name="_binary_a_start", value=0x1_0000_0000)
        with self.assertRaises(ValidationError):
            Symbol(name="_binary_a_start", section_index=0x8000)
        with self.assertRaises(ValidationError):
            Symbol(name="")

    def test_report_totals(self) -> None:
        report = ExtractionReport(
            files=[
                ObjectFile(path="a.o", symbols=[Symbol(name="_binary_a_start")]),
                ObjectFile(path="b.o"),
            ],
        )
        self.assertEqual(report.symbol_count, 1)
        self.assertTrue(report.has_files)
        self.assertFalse(ExtractionReport().has_files)


class ObjectParseErrorTests(unittest.TestCase):
    def test_str_includes_path_when_known(self) -> None:
        err = ObjectFormatError(FailureKind.BAD_CLASS, "32-bit", "x.o")
        self.assertEqual(str(err), "x.o: 32-bit")
        self.assertEqual(str(ObjectIOError(FailureKind.SHORT_READ, "short")), "short")

    def test_with_path_fills_missing_path_only(self) -> None:
        err = ObjectBoundsError(FailureKind.OUT_OF_RANGE, "bad offset")
        self.assertIs(err.with_path("a.o"), err)
        self.assertEqual(str(err), "a.o: bad offset")
        err.with_path("b.o")
        self.assertEqual(err.path, "a.o")

    def test_hierarchy(self) -> None:
        for cls in (ObjectIOError, ObjectFormatError, ObjectBoundsError):
            self.assertTrue(issubclass(cls, ObjectParseError))


if __name__ == "__main__":
    unittest.main()
