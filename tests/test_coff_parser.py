"""COFF symbol-table parser tests.

Builds small COFF objects in memory and checks name resolution, prefix
filtering, auxiliary-record skipping and every fatal failure kind.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from objbuilder import COFFBuilder, ELF64Builder, write_object

from blobsym.core.errors import (
    FailureKind,
    ObjectBoundsError,
    ObjectFormatError,
    ObjectIOError,
)
from blobsym.core.models import ObjectFormat
from blobsym.parsers.coff_parser import COFFParser, parse_coff
from blobsym.parsers.reader import BinaryReader


class _TempDirTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)

    def write(self, data: bytes, name: str = "blob.obj") -> Path:
        return write_object(self.tmp, name, data)


class COFFSymbolExtractionTests(_TempDirTestCase):
    def test_extracts_blob_triple_in_table_order(self) -> None:
        builder = (
            COFFBuilder()
            .add(".rdata", storage_class=3)
            .add_blob("logo_png", size=1234)
            .add("main")
        )
        symbols = parse_coff(self.write(builder.build()))

        self.assertEqual(
            [s.name for s in symbols],
            [
                "_binary_logo_png_start",
                "_binary_logo_png_end",
                "_binary_logo_png_size",
            ],
        )
        self.assertEqual([s.value for s in symbols], [0, 1234, 1234])
        self.assertEqual(symbols[2].section_index, -1)
        self.assertTrue(all(s.storage_class == 2 for s in symbols))
        self.assertTrue(all(s.source_format is ObjectFormat.COFF for s in symbols))

    def test_non_prefixed_symbols_are_dropped(self) -> None:
        builder = COFFBuilder().add(".text").add("a_very_long_function_name").add("_bin")
        self.assertEqual(parse_coff(self.write(builder.build())), [])

    def test_custom_prefix(self) -> None:
        builder = COFFBuilder().add_blob("x").add("_asset_font_start")
        symbols = parse_coff(self.write(builder.build()), prefix="_asset_")
        self.assertEqual([s.name for s in symbols], ["_asset_font_start"])

    def test_unterminated_eight_byte_short_name(self) -> None:
        builder = COFFBuilder().add("_binary_", value=5)
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual(len(symbols), 1)
        self.assertEqual(symbols[0].name, "_binary_")
        self.assertEqual(symbols[0].value, 5)

    def test_short_name_trailing_spaces_stripped(self) -> None:
        builder = COFFBuilder().add("_bx  ")
        symbols = parse_coff(self.write(builder.build()), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bx"])

    def test_long_names_resolve_through_string_table(self) -> None:
        long_name = "_binary_assets_textures_terrain_diffuse_png_start"
        builder = COFFBuilder().add(long_name, value=64)
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual([s.name for s in symbols], [long_name])

    def test_auxiliary_records_are_skipped(self) -> None:
        builder = (
            COFFBuilder()
            .add("_binary_a_start", aux=2)
            .add("_binary_a_end", value=16)
        )
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual([s.name for s in symbols], ["_binary_a_start", "_binary_a_end"])
        self.assertNotIn(0xDEAD, [s.value for s in symbols])

    def test_out_of_range_long_name_skips_only_that_symbol(self) -> None:
        builder = (
            COFFBuilder()
            .add("_binary_a_start")
            .add_long_offset(100_000)
            .add("_binary_a_end", value=8)
        )
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual([s.name for s in symbols], ["_binary_a_start", "_binary_a_end"])

    def test_declared_string_table_past_eof_is_clipped(self) -> None:
        builder = COFFBuilder().add_blob("clip")
        builder.string_table_size = 1_000_000
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual(len(symbols), 3)

    def test_string_table_of_declared_size_four_is_not_read(self) -> None:
        builder = COFFBuilder().add("_bA", 1).add("_binary_logo_png_start", 2)
        builder.string_table_size = 4
        symbols = parse_coff(self.write(builder.build()), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bA"])

    def test_missing_string_table_size_field_skips_long_names(self) -> None:
        builder = COFFBuilder().add("_bA", 1).add("_binary_logo_png_start", 2)
        data = builder.build()[: builder.records_end()]
        symbols = parse_coff(self.write(data), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bA"])

    def test_short_and_long_names_in_one_table(self) -> None:
        builder = (
            COFFBuilder()
            .add("_binary_", value=1)
            .add("_binary_logo_png_start", value=2)
            .add("_binary_logo_png_end", value=3)
        )
        symbols = parse_coff(self.write(builder.build()))
        self.assertEqual(
            [(s.name, s.value) for s in symbols],
            [
                ("_binary_", 1),
                ("_binary_logo_png_start", 2),
                ("_binary_logo_png_end", 3),
            ],
        )


class COFFEdgeCaseTests(_TempDirTestCase):
    def test_zero_symbols_returns_empty(self) -> None:
        builder = COFFBuilder()
        builder.number_of_symbols = 0
        # Pointer is never checked when there is nothing to read
        builder.pointer_to_symbol_table = 0xFFFFFFFF
        self.assertEqual(parse_coff(self.write(builder.build())), [])

    def test_truncated_symbol_table_keeps_decoded_symbols(self) -> None:
        builder = COFFBuilder().add("_bA", 1).add("_bB", 2).add("_bC", 3)
        data = builder.build()[: builder.records_end() - 10]
        symbols = parse_coff(self.write(data), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bA", "_bB"])

    def test_count_at_ceiling_is_accepted(self) -> None:
        builder = COFFBuilder().add("_bA").add("_bB")
        builder.number_of_symbols = 1_000_000
        symbols = parse_coff(self.write(builder.build()), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bA", "_bB"])

    def test_auxiliary_records_past_eof_stop_scan(self) -> None:
        builder = COFFBuilder().add("_bA", aux=3).add("_bB")
        data = builder.build()[: builder.records_end() - 30]
        symbols = parse_coff(self.write(data), prefix="_b")
        self.assertEqual([s.name for s in symbols], ["_bA"])


class COFFFailureTests(_TempDirTestCase):
    def test_implausible_symbol_count(self) -> None:
        builder = COFFBuilder().add_blob("x")
        builder.number_of_symbols = 2_000_000
        with self.assertRaises(ObjectBoundsError) as ctx:
            parse_coff(self.write(builder.build()))
        self.assertEqual(ctx.exception.kind, FailureKind.SYMBOL_COUNT)

    def test_ceiling_is_configurable(self) -> None:
        builder = COFFBuilder().add_blob("x")
        reader = BinaryReader(builder.build())
        with self.assertRaises(ObjectBoundsError) as ctx:
            COFFParser(reader, max_symbols=2).parse()
        self.assertEqual(ctx.exception.kind, FailureKind.SYMBOL_COUNT)

    def test_symbol_table_pointer_beyond_eof(self) -> None:
        builder = COFFBuilder().add_blob("x")
        builder.pointer_to_symbol_table = 1 << 20
        with self.assertRaises(ObjectBoundsError) as ctx:
            parse_coff(self.write(builder.build()))
        self.assertEqual(ctx.exception.kind, FailureKind.OUT_OF_RANGE)

    def test_file_shorter_than_header(self) -> None:
        with self.assertRaises(ObjectIOError) as ctx:
            parse_coff(self.write(b"\x64\x86\x01\x00"))
        self.assertEqual(ctx.exception.kind, FailureKind.SHORT_READ)

    def test_elf_input_is_format_mismatch(self) -> None:
        path = self.write(ELF64Builder().add_blob("x").build(), "blob.o")
        with self.assertRaises(ObjectFormatError) as ctx:
            parse_coff(path)
        self.assertEqual(ctx.exception.kind, FailureKind.FORMAT_MISMATCH)
        self.assertEqual(ctx.exception.path, str(path))

    def test_partial_elf_magic_is_not_a_format_mismatch(self) -> None:
        with self.assertRaises(ObjectIOError) as ctx:
            parse_coff(self.write(b"\x7fEL"))
        self.assertEqual(ctx.exception.kind, FailureKind.SHORT_READ)

    def test_missing_file_is_io_error(self) -> None:
        with self.assertRaises(ObjectIOError) as ctx:
            parse_coff(self.tmp / "nope.obj")
        self.assertEqual(ctx.exception.kind, FailureKind.IO_ERROR)


class COFFParserPropertiesTests(unittest.TestCase):
    def test_header_fields_exposed_after_parse(self) -> None:
        builder = COFFBuilder().add("_binary_a_start", aux=1).add("_binary_a_end")
        parser = COFFParser(BinaryReader(builder.build()))
        parser.parse()
        self.assertEqual(parser.machine, 0x8664)
        self.assertEqual(parser.declared_symbol_count, 3)


if __name__ == "__main__":
    unittest.main()
