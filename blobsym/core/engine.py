"""
Blobsym Extraction Engine
==========================

Drives symbol extraction over a batch of object files.  Each file is
opened, parsed and closed before the next one starts.  A file that fails
to parse is logged, recorded in the
:class:`~blobsym.core.models.ExtractionReport` and skipped; the rest of
the batch still runs.

Usage::

    engine = ExtractionEngine(config=BlobsymConfig.load())
    report = engine.extract_many([("shader.o", "SHADER"), ("font.obj", "")])
    for obj in report.files:
        print(obj.path, [s.name for s in obj.symbols])
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from shared.config import BlobsymConfig
from shared.logger import BlobsymLogger

from blobsym.core.errors import ObjectParseError
from blobsym.core.models import ExtractionReport, ObjectFile
from blobsym.parsers.dispatch import dispatch_object


class ExtractionEngine:
    """Extract blob symbols from object files using the active configuration."""

    def __init__(
        self,
        config: BlobsymConfig | None = None,
        logger: BlobsymLogger | None = None,
    ) -> None:
        """Initialise the engine.

        Args:
            config: Configuration.  Defaults are used if not provided.
            logger: Logger instance.  A new one is created if not provided.
        """
        self._config: BlobsymConfig = config or BlobsymConfig()
        self._logger: BlobsymLogger = logger or BlobsymLogger("engine")

    def extract(self, path: str | Path, macro: str = "") -> ObjectFile:
        """Parse one object file.

        Args:
            path: Object file path.
            macro: Macro alias carried through to the header renderer.

        Returns:
            The populated :class:`ObjectFile`.

        Raises:
            ObjectParseError: The file could not be parsed.
        """
        file_path = str(path)
        extract_cfg = self._config.extract

        with self._logger.operation(file_path), self._logger.timed(f"parse {file_path}"):
            try:
                parsed = dispatch_object(
                    file_path,
                    prefix=extract_cfg.symbol_prefix,
                    max_coff_symbols=extract_cfg.max_coff_symbols,
                    max_file_size=extract_cfg.max_file_size,
                    logger=self._logger,
                )
            except ObjectParseError as exc:
                exc.with_path(file_path)
                raise

            self._logger.debug(
                "Extracted %d symbol(s) from %s (%s)",
                len(parsed.symbols),
                file_path,
                parsed.format.value,
            )

        return ObjectFile(
            path=file_path,
            macro=macro,
            format=parsed.format,
            symbols=parsed.symbols,
        )

    def extract_many(
        self,
        inputs: Iterable[tuple[str, str]],
    ) -> ExtractionReport:
        """Parse every ``(path, macro)`` pair, skipping files that fail.

        Returns:
            Report holding the parsed files in input order and a
            diagnostic for each skipped path.
        """
        report = ExtractionReport()
        for path, macro in inputs:
            try:
                report.files.append(self.extract(path, macro))
            except ObjectParseError as exc:
                self._logger.error(
                    "Failed to parse '%s', skipping: %s",
                    path,
                    exc.message,
                    kind=exc.kind.value,
                )
                report.failures[path] = exc.message
        return report
