"""Blobsym output: header generation and console tables."""

from blobsym.output.console import SymbolConsoleOutput
from blobsym.output.header import HeaderRenderer

__all__ = ["HeaderRenderer", "SymbolConsoleOutput"]
