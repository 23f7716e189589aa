"""
Blobsym CLI -- Blob Symbol Header Generator
============================================

Click-based command line that extracts ``_binary_*`` symbols from COFF
and ELF64 object files and writes C headers declaring them.

Usage::

    # One header per object file: include/logo.h, include/font.h
    blobsym -d include logo.o LOGO font.obj

    # One combined header: include/assets.h
    blobsym -d include -n assets logo.o LOGO font.obj FONT

    # Also list the symbols found
    blobsym -d include --list logo.o

Input files may each be followed by a macro alias.  A token is taken as
the alias of the preceding file when it is a valid C identifier and does
not name an existing file.

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import click

from shared.config import BlobsymConfig
from shared.console import BlobsymConsole
from shared.logger import BlobsymLogger

from blobsym.core.engine import ExtractionEngine
from blobsym.output.console import SymbolConsoleOutput
from blobsym.output.header import HeaderRenderer


def _is_macro_token(token: str) -> bool:
    return token.isidentifier() and not Path(token).exists()


def pair_inputs(tokens: Sequence[str]) -> list[tuple[str, str]]:
    """Group ``FILE [MACRO] FILE [MACRO] ...`` tokens into pairs.

    Returns:
        ``(path, macro)`` tuples; *macro* is ``""`` when absent.
    """
    pairs: list[tuple[str, str]] = []
    i = 0
    while i < len(tokens):
        path = tokens[i]
        i += 1
        macro = ""
        if i < len(tokens) and _is_macro_token(tokens[i]):
            macro = tokens[i]
            i += 1
        pairs.append((path, macro))
    return pairs


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command("blobsym", context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("inputs", nargs=-1, required=True)
@click.option(
    "--output-dir", "-d",
    "output_dir",
    type=click.Path(file_okay=False),
    required=True,
    help="Directory for generated headers (created if missing).",
)
@click.option(
    "--name", "-n",
    "header_name",
    default=None,
    help="Write a single combined header with this name.",
)
@click.option(
    "--prefix",
    default=None,
    help="Symbol prefix to extract.  Default: _binary_ (or the config value).",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="TOML configuration file.  Default: ./blobsym.toml if present.",
)
@click.option(
    "--list", "list_symbols",
    is_flag=True,
    default=False,
    help="Print a table of the extracted symbols.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the extraction report as JSON to stdout.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def blobsym_cli(
    inputs: tuple[str, ...],
    output_dir: str,
    header_name: str | None,
    prefix: str | None,
    config_path: str | None,
    list_symbols: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Generate C headers for the blob symbols in object files.

    INPUTS is a list of object files (COFF or 64-bit ELF), each optionally
    followed by a macro alias used for convenience #defines.

    Without -n every object file gets its own header; with -n all symbols
    go into one combined header.
    """
    # JSON mode keeps stdout for the report alone
    console = BlobsymConsole(quiet=json_output)

    try:
        config = BlobsymConfig.load(config_path)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Cannot load configuration: {exc}") from exc

    if prefix is not None:
        config.extract.symbol_prefix = prefix

    settings = config.global_settings
    logger = BlobsymLogger(
        "cli",
        log_level="DEBUG" if verbose else settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
    )

    out_dir = Path(output_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        console.error(f"Failed to create directory '{out_dir}': {exc.strerror or exc}")
        sys.exit(1)

    engine = ExtractionEngine(config=config, logger=logger)
    report = engine.extract_many(pair_inputs(inputs))

    for path, reason in report.failures.items():
        console.warning(f"Skipped {path}: {reason}")

    if not report.has_files:
        console.error("No valid object files to process")
        sys.exit(1)

    if list_symbols:
        SymbolConsoleOutput(console=console).display(report)

    renderer = HeaderRenderer(
        extension=config.header.extension,
        object_suffixes=config.header.object_suffixes,
    )
    write_failed = False

    if header_name:
        try:
            path = renderer.write_combined(out_dir, header_name, report.files)
            console.success(f"Generated combined header: {path}")
        except OSError as exc:
            console.error(f"Error creating header file: {exc}")
            write_failed = True
    else:
        for obj in report.files:
            try:
                path = renderer.write(out_dir, obj)
                console.success(f"Generated header: {path}")
            except OSError as exc:
                console.error(f"Error creating header file: {exc}")
                write_failed = True

    if json_output:
        click.echo(report.model_dump_json(indent=2))
    else:
        console.info(
            f"Extracted {report.symbol_count} symbol(s) from "
            f"{len(report.files)} file(s); skipped {len(report.failures)}"
        )

    if write_failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Entry point for ``blobsym`` and ``python -m blobsym``."""
    blobsym_cli()


if __name__ == "__main__":
    main()
