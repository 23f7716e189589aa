"""Extraction engine batch tests.

A file that fails to parse must be recorded and skipped without
stopping the rest of the batch.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from objbuilder import COFFBuilder, ELF64Builder, write_object

from shared.config import BlobsymConfig
from shared.logger import BlobsymLogger

from blobsym.core.engine import ExtractionEngine
from blobsym.core.errors import FailureKind, ObjectBoundsError, ObjectIOError
from blobsym.core.models import ObjectFormat


class ExtractionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.logger = BlobsymLogger("engine-test", console_output=False)

    def test_extract_single_file(self) -> None:
        path = write_object(self.tmp, "logo.o", ELF64Builder().add_blob("logo_png").build())
        engine = ExtractionEngine(logger=self.logger)
        obj = engine.extract(path, "LOGO")

        self.assertEqual(obj.path, str(path))
        self.assertEqual(obj.macro, "LOGO")
        self.assertIs(obj.format, ObjectFormat.ELF64)
        self.assertEqual(obj.symbol_count, 3)

    def test_extract_raises_with_path(self) -> None:
        engine = ExtractionEngine(logger=self.logger)
        missing = self.tmp / "missing.o"
        with self.assertRaises(ObjectIOError) as ctx:
            engine.extract(missing)
        self.assertEqual(ctx.exception.path, str(missing))

    def test_batch_skips_failing_files(self) -> None:
        good_elf = write_object(self.tmp, "a.o", ELF64Builder().add_blob("a").build())
        bad = write_object(self.tmp, "bad.obj", b"\x00" * 8)
        good_coff = write_object(self.tmp, "b.obj", COFFBuilder().add_blob("b").build())

        engine = ExtractionEngine(logger=self.logger)
        report = engine.extract_many(
            [(str(good_elf), "A"), (str(bad), ""), (str(good_coff), "B")]
        )

        self.assertEqual([f.path for f in report.files], [str(good_elf), str(good_coff)])
        self.assertEqual(list(report.failures), [str(bad)])
        self.assertIn("COFF header", report.failures[str(bad)])
        self.assertEqual(report.symbol_count, 6)
        self.assertTrue(report.has_files)

    def test_batch_of_only_failures_has_no_files(self) -> None:
        engine = ExtractionEngine(logger=self.logger)
        report = engine.extract_many([(str(self.tmp / "nope.o"), "")])
        self.assertFalse(report.has_files)
        self.assertEqual(len(report.failures), 1)

    def test_config_limits_are_applied(self) -> None:
        config = BlobsymConfig()
        config.extract.max_coff_symbols = 2
        path = write_object(self.tmp, "a.obj", COFFBuilder().add_blob("a").build())
        engine = ExtractionEngine(config=config, logger=self.logger)
        with self.assertRaises(ObjectBoundsError) as ctx:
            engine.extract(path)
        self.assertEqual(ctx.exception.kind, FailureKind.SYMBOL_COUNT)

    def test_config_prefix_is_applied(self) -> None:
        config = BlobsymConfig()
        config.extract.symbol_prefix = "_res_"
        path = write_object(self.tmp, "a.o", ELF64Builder().add_blob("a").add("_res_x").build())
        engine = ExtractionEngine(config=config, logger=self.logger)
        self.assertEqual([s.name for s in engine.extract(path).symbols], ["_res_x"])

    def test_file_size_limit(self) -> None:
        config = BlobsymConfig()
        config.extract.max_file_size = 16
        path = write_object(self.tmp, "a.o", ELF64Builder().add_blob("a").build())
        engine = ExtractionEngine(config=config, logger=self.logger)
        report = engine.extract_many([(str(path), "")])
        self.assertIn("too large", report.failures[str(path)])


if __name__ == "__main__":
    unittest.main()
