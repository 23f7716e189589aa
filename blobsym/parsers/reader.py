"""
Bounds-Checked Binary Reader
=============================

:class:`BinaryReader` is the single place where file offsets read from
untrusted object files are compared against the real buffer length.
Both symbol-table parsers go through it instead of slicing the raw
bytes directly, so an oversized count or a wild offset surfaces as an
:class:`~blobsym.core.errors.ObjectParseError` rather than an
``IndexError``, a silently short slice, or a ``struct.error``.

Two access styles are offered:

    - *sequential* (:meth:`read`, :meth:`unpack`, :meth:`skip`) over a
      cursor, used for walking record arrays; running off the end is a
      ``SHORT_READ``.
    - *random* (:meth:`slice`, :meth:`unpack_at`) over absolute offsets,
      used for regions located by header fields; a region outside the
      file is ``OUT_OF_RANGE``.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Optional

from blobsym.core.errors import (
    FailureKind,
    ObjectBoundsError,
    ObjectIOError,
)


class BinaryReader:
    """Read-only, bounds-checked view over the bytes of one file.

    Usage::

        reader = BinaryReader.from_path("shader.o")
        header = reader.unpack(_HEADER)
        strtab = reader.slice(offset, size, "string table")
    """

    def __init__(self, data: bytes, *, path: Optional[str] = None) -> None:
        """Wrap *data*.

        Args:
            data: Complete file contents.
            path: File path, used only in diagnostics.
        """
        self._data: bytes = bytes(data)
        self._pos: int = 0
        self._path: Optional[str] = path

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        max_size: Optional[int] = None,
    ) -> BinaryReader:
        """Load a whole file into a reader.

        Args:
            path: File to read.
            max_size: Reject files larger than this many bytes.

        Raises:
            ObjectIOError: The file cannot be opened or read.
            ObjectBoundsError: The file exceeds *max_size*, or its
                contents cannot be held in memory.
        """
        file_path = str(path)
        try:
            size = Path(path).stat().st_size
            if max_size is not None and size > max_size:
                raise ObjectBoundsError(
                    FailureKind.OUT_OF_RANGE,
                    f"file too large: {size:,} bytes (max: {max_size:,} bytes)",
                    file_path,
                )
            data = Path(path).read_bytes()
        except OSError as exc:
            raise ObjectIOError(
                FailureKind.IO_ERROR,
                f"cannot read file: {exc.strerror or exc}",
                file_path,
            ) from exc
        except MemoryError as exc:
            raise ObjectBoundsError(
                FailureKind.ALLOCATION,
                "allocation failed while loading file",
                file_path,
            ) from exc
        return cls(data, path=file_path)

    # ------------------------------------------------------------------ #
    #  Properties
    # ------------------------------------------------------------------ #

    @property
    def size(self) -> int:
        """Total number of bytes in the view."""
        return len(self._data)

    @property
    def position(self) -> int:
        """Current cursor offset for sequential reads."""
        return self._pos

    @property
    def path(self) -> Optional[str]:
        return self._path

    # ------------------------------------------------------------------ #
    #  Bounds
    # ------------------------------------------------------------------ #

    def contains(self, offset: int, length: int) -> bool:
        """Return ``True`` if ``[offset, offset + length)`` lies in the file."""
        return 0 <= offset and 0 <= length and offset + length <= len(self._data)

    def seek(self, offset: int) -> None:
        """Move the cursor to an absolute offset.

        Positioning exactly at end-of-file is allowed; any later read
        will then report a short read.
        """
        if offset < 0 or offset > len(self._data):
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"seek to offset {offset} outside file of {len(self._data)} bytes",
                self._path,
            )
        self._pos = offset

    # ------------------------------------------------------------------ #
    #  Sequential access
    # ------------------------------------------------------------------ #

    def read(self, length: int) -> bytes:
        """Read *length* bytes at the cursor and advance it.

        Raises:
            ObjectIOError: Fewer than *length* bytes remain (``SHORT_READ``).
        """
        if not self.contains(self._pos, length):
            raise ObjectIOError(
                FailureKind.SHORT_READ,
                f"short read: wanted {length} bytes at offset {self._pos}, "
                f"file has {len(self._data)}",
                self._path,
            )
        chunk = self._data[self._pos : self._pos + length]
        self._pos += length
        return chunk

    def skip(self, length: int) -> None:
        """Advance the cursor without materialising the bytes."""
        if not self.contains(self._pos, length):
            raise ObjectIOError(
                FailureKind.SHORT_READ,
                f"short read: cannot skip {length} bytes at offset {self._pos}",
                self._path,
            )
        self._pos += length

    def unpack(self, fmt: struct.Struct) -> tuple:
        """Decode one fixed-size record at the cursor and advance past it."""
        return fmt.unpack(self.read(fmt.size))

    # ------------------------------------------------------------------ #
    #  Random access
    # ------------------------------------------------------------------ #

    def slice(self, offset: int, length: int, what: str = "region") -> bytes:
        """Return a copy of ``[offset, offset + length)``.

        Args:
            offset: Absolute start offset (from a header field).
            length: Number of bytes (from a header field).
            what: Description of the region for the diagnostic.

        Raises:
            ObjectBoundsError: The region is not fully inside the file.
        """
        if not self.contains(offset, length):
            raise ObjectBoundsError(
                FailureKind.OUT_OF_RANGE,
                f"{what} at offset {offset} (+{length} bytes) extends past "
                f"end of file ({len(self._data)} bytes)",
                self._path,
            )
        try:
            return self._data[offset : offset + length]
        except MemoryError as exc:
            raise ObjectBoundsError(
                FailureKind.ALLOCATION,
                f"allocation failed for {what} ({length} bytes)",
                self._path,
            ) from exc

    def unpack_at(
        self,
        fmt: struct.Struct,
        offset: int,
        what: str = "record",
    ) -> tuple:
        """Decode one fixed-size record at an absolute offset."""
        return fmt.unpack(self.slice(offset, fmt.size, what))

    def tail(self, offset: int, length: int) -> bytes:
        """Return up to *length* bytes from *offset*, clipped to end-of-file.

        Returns an empty string when *offset* is at or past the end.
        """
        if offset < 0 or offset >= len(self._data) or length <= 0:
            return b""
        return self._data[offset : min(offset + length, len(self._data))]
