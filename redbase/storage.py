"""Immutable on-disk sorted tables of cell versions.

File layout, with every length and count a big-endian u32:

1. the number of entries;
2. for each entry: key length, encoded key, value length, encoded value.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

from redbase.cells import (
    Delete,
    Entry,
    EntryKey,
    Put,
    decode_cell,
    decode_key,
    encode_cell,
    encode_key,
)

_LEN = struct.Struct(">I")

CellValue = Union[Put, Delete]
PathLike = Union[str, os.PathLike]


def _write_chunk(stream: BinaryIO, payload: bytes) -> None:
    stream.write(_LEN.pack(len(payload)))
    stream.write(payload)


def write_sstable(path: PathLike, entries: Iterable[Entry]) -> None:
    """Write ``entries`` (expected to be sorted by key) to a new table at ``path``."""
    entries = list(entries)
    with open(path, "wb") as stream:
        stream.write(_LEN.pack(len(entries)))
        for entry in entries:
            _write_chunk(stream, encode_key(entry.key))
            _write_chunk(stream, encode_cell(entry.value))


def _read_exact(stream: BinaryIO, size: int, path: Path) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise ValueError(f"truncated SSTable: {path}")
    return data


def _read_chunk(stream: BinaryIO, path: Path) -> bytes:
    (length,) = _LEN.unpack(_read_exact(stream, _LEN.size, path))
    return _read_exact(stream, length, path)


class SSTableReader:
    """All entries of one table, loaded into memory in file order."""

    def __init__(self, entries: Optional[Iterable[tuple[EntryKey, CellValue]]] = None) -> None:
        self._entries: list[tuple[EntryKey, CellValue]] = list(entries or ())

    @classmethod
    def open(cls, path: PathLike) -> "SSTableReader":
        """Read the table at ``path``; raises ValueError if it is truncated."""
        path = Path(path)
        with open(path, "rb") as stream:
            (count,) = _LEN.unpack(_read_exact(stream, _LEN.size, path))
            entries = []
            for _ in range(count):
                key = decode_key(_read_chunk(stream, path))
                cell = decode_cell(_read_chunk(stream, path))
                entries.append((key, cell))
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get_full(self, row: bytes, column: bytes) -> Optional[CellValue]:
        """Return the last value stored for the cell, or None."""
        row, column = bytes(row), bytes(column)
        return next(
            (
                cell
                for key, cell in reversed(self._entries)
                if key.row == row and key.column == column
            ),
            None,
        )

    def get_versions_full(self, row: bytes, column: bytes) -> list[tuple[int, CellValue]]:
        """Return all (timestamp, value) pairs for a cell, newest first."""
        row, column = bytes(row), bytes(column)
        versions = [
            (key.timestamp, cell)
            for key, cell in self._entries
            if key.row == row and key.column == column
        ]
        versions.sort(key=lambda item: item[0], reverse=True)
        return versions

    def scan_row_full(self, row: bytes) -> list[tuple[bytes, int, CellValue]]:
        """Return (column, timestamp, value) for every entry of ``row``."""
        row = bytes(row)
        return [
            (key.column, key.timestamp, cell)
            for key, cell in self._entries
            if key.row == row
        ]

    def scan_all(self) -> list[tuple[EntryKey, CellValue]]:
        """Return every (key, value) pair in file order."""
        return list(self._entries)

    def scan_range(self, start_row: bytes, end_row: bytes) -> list[tuple[EntryKey, CellValue]]:
        """Return every (key, value) pair with ``start_row <= row <= end_row``."""
        start_row, end_row = bytes(start_row), bytes(end_row)
        return [
            (key, cell)
            for key, cell in self._entries
            if start_row <= key.row <= end_row
        ]

    def get_row_keys_in_range(self, start_row: bytes, end_row: bytes) -> list[bytes]:
        """Return the distinct row keys within the inclusive range, sorted."""
        return sorted({key.row for key, _ in self.scan_range(start_row, end_row)})