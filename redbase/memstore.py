"""In-memory sorted store of cell versions backed by an append-only WAL."""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import BinaryIO, Optional, Union

from sortedcontainers import SortedDict

from redbase.cells import Delete, Entry, EntryKey, Put, decode_entry, encode_entry

_U64_MAX = 2**64 - 1
_LEN = struct.Struct(">I")

CellValue = Union[Put, Delete]


class MemStore:
    """Sorted map of ``EntryKey`` to cell value, mirrored to a write-ahead log.

    Each WAL record is a big-endian u32 length followed by the encoded entry.
    Opening a store replays the log to rebuild the in-memory map.
    """

    def __init__(self, wal_path: Union[str, os.PathLike]) -> None:
        self._wal_path = Path(wal_path)
        self._map: SortedDict = SortedDict()
        self._wal: BinaryIO = open(self._wal_path, "a+b")
        try:
            self._replay()
        except BaseException:
            self._wal.close()
            raise

    def _replay(self) -> None:
        self._wal.seek(0)
        while True:
            header = self._wal.read(_LEN.size)
            if len(header) < _LEN.size:
                break
            (length,) = _LEN.unpack(header)
            body = self._wal.read(length)
            if len(body) < length:
                raise ValueError(f"truncated WAL record in {self._wal_path}")
            entry = decode_entry(body)
            self._map[entry.key] = entry.value
        self._wal.seek(0, os.SEEK_END)

    @property
    def wal_path(self) -> Path:
        return self._wal_path

    def __len__(self) -> int:
        return len(self._map)

    def __enter__(self) -> "MemStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """Close the WAL file handle."""
        self._wal.close()

    def append(self, entry: Entry) -> None:
        """Write ``entry`` to the WAL and insert it into the map."""
        payload = encode_entry(entry)
        self._wal.write(_LEN.pack(len(payload)) + payload)
        self._wal.flush()
        self._map[entry.key] = entry.value

    def _cell_range(self, row: bytes, column: bytes):
        low = EntryKey(row, column, 0)
        high = EntryKey(row, column, _U64_MAX)
        return self._map.irange(low, high)

    def get_full(self, row: bytes, column: bytes) -> Optional[CellValue]:
        """Return the cell value with the highest timestamp, or None."""
        row, column = bytes(row), bytes(column)
        latest = None
        for key in self._cell_range(row, column):
            latest = key
        return None if latest is None else self._map[latest]

    def get_versions_full(self, row: bytes, column: bytes) -> list[tuple[int, CellValue]]:
        """Return all (timestamp, value) pairs for a cell, newest first."""
        row, column = bytes(row), bytes(column)
        versions = [(key.timestamp, self._map[key]) for key in self._cell_range(row, column)]
        versions.sort(key=lambda item: item[0], reverse=True)
        return versions

    def drain_all(self) -> list[Entry]:
        """Remove and return every entry in key order, and reset the WAL."""
        entries = [Entry(key, value) for key, value in self._map.items()]
        self._map.clear()
        self._wal.close()
        self._wal_path.unlink()
        self._wal = open(self._wal_path, "a+b")
        return entries

    def scan_row_full(self, row: bytes) -> list[tuple[EntryKey, CellValue]]:
        """Return every (key, value) pair stored for ``row``, in key order."""
        row = bytes(row)
        low = EntryKey(row, b"", 0)
        high = EntryKey(row, b"\xff", _U64_MAX)
        return [
            (key, self._map[key])
            for key in self._map.irange(low, high)
            if key.row == row
        ]

    def scan_range(self, start_row: bytes, end_row: bytes) -> list[tuple[EntryKey, CellValue]]:
        """Return every (key, value) pair with ``start_row <= row <= end_row``."""
        start_row, end_row = bytes(start_row), bytes(end_row)
        if start_row > end_row:
            raise ValueError("start_row is greater than end_row")
        low = EntryKey(start_row, b"", 0)
        high = EntryKey(end_row, b"\xff", _U64_MAX)
        return [
            (key, self._map[key])
            for key in self._map.irange(low, high)
            if start_row <= key.row <= end_row
        ]

    def get_row_keys_in_range(self, start_row: bytes, end_row: bytes) -> list[bytes]:
        """Return the distinct row keys within the inclusive range, sorted."""
        return sorted({key.row for key, _ in self.scan_range(start_row, end_row)})