"""
Blobsym Parse Errors
=====================

Exception hierarchy raised by the object-file parsers.  Every fatal
outcome carries a :class:`FailureKind` naming the check that failed so
that callers can report it precisely and tests can assert on it.

Per-symbol anomalies (an out-of-range name offset, a truncated trailing
record) are *not* errors: the parsers skip them and return what they
decoded.
"""

from __future__ import annotations

import enum
from typing import Optional


class FailureKind(str, enum.Enum):
    """Named failure modes of a single file parse."""
    IO_ERROR = "io_error"
    SHORT_READ = "short_read"
    ALLOCATION = "allocation"
    FORMAT_MISMATCH = "format_mismatch"
    BAD_MAGIC = "bad_magic"
    BAD_CLASS = "bad_class"
    BAD_ENDIANNESS = "bad_endianness"
    BAD_OBJECT_TYPE = "bad_object_type"
    MISSING_SECTION = "missing_section"
    OUT_OF_RANGE = "out_of_range"
    SYMBOL_COUNT = "symbol_count"


class ObjectParseError(Exception):
    """Base class for fatal object-file parse failures.

    Attributes:
        kind: The specific validation or I/O step that failed.
        message: Human-readable diagnostic.
        path: File being parsed, when known.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        path: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.path = path
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def with_path(self, path: str) -> ObjectParseError:
        """Attach *path* if the error was raised before it was known."""
        if self.path is None:
            self.path = path
            self.args = (self.__str__(),)
        return self


class ObjectIOError(ObjectParseError):
    """The file could not be opened, or a required byte range is missing."""

    pass


class ObjectFormatError(ObjectParseError):
    """Magic, class, endianness or object type checks failed, or a
    required named section is absent."""

    pass


class ObjectBoundsError(ObjectParseError):
    """A declared size, offset, index or count is outside the file or
    above a sanity ceiling."""

    pass
