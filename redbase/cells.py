"""Cell keys and values, and their binary encoding.

Encoding is little-endian: byte strings are a u64 length followed by the
bytes, timestamps are u64, enum variants are a u32 index, and an optional
value is a one-byte tag followed by the value when present.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional, Union

_U64_MAX = 2**64 - 1


@dataclass(frozen=True, order=True)
class EntryKey:
    """Identifies one version of a cell; ordered by row, column, timestamp."""

    row: bytes
    column: bytes
    timestamp: int


class CellValue:
    """Base of the values a cell version can hold."""

    __slots__ = ()


@dataclass(frozen=True)
class Put(CellValue):
    """A stored value."""

    value: bytes


@dataclass(frozen=True)
class Delete(CellValue):
    """A tombstone, optionally carrying a time-to-live in milliseconds."""

    ttl_ms: Optional[int] = None


@dataclass(frozen=True)
class Entry:
    key: EntryKey
    value: Union[Put, Delete]


_PUT_TAG = 0
_DELETE_TAG = 1


def _pack_u64(n: int) -> bytes:
    if not 0 <= n <= _U64_MAX:
        raise ValueError(f"value out of u64 range: {n}")
    return struct.pack("<Q", n)


def _pack_bytes(data: bytes) -> bytes:
    data = bytes(data)
    return _pack_u64(len(data)) + data


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._pos = 0

    def take(self, n: int) -> bytes:
        end = self._pos + n
        if end > len(self._data):
            raise ValueError("truncated data")
        chunk = self._data[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u32(self) -> int:
        return struct.unpack("<I", self.take(4))[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self.take(8))[0]

    def blob(self) -> bytes:
        return self.take(self.u64())

    def key(self) -> EntryKey:
        row = self.blob()
        column = self.blob()
        return EntryKey(row, column, self.u64())

    def cell(self) -> Union[Put, Delete]:
        tag = self.u32()
        if tag == _PUT_TAG:
            return Put(self.blob())
        if tag == _DELETE_TAG:
            present = self.u8()
            if present == 0:
                return Delete(None)
            if present == 1:
                return Delete(self.u64())
            raise ValueError(f"invalid option tag: {present}")
        raise ValueError(f"invalid cell variant: {tag}")

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise ValueError("trailing bytes after value")


def encode_key(key: EntryKey) -> bytes:
    return _pack_bytes(key.row) + _pack_bytes(key.column) + _pack_u64(key.timestamp)


def decode_key(data: bytes) -> EntryKey:
    reader = _Reader(data)
    key = reader.key()
    reader.finish()
    return key


def encode_cell(cell: Union[Put, Delete]) -> bytes:
    if isinstance(cell, Put):
        return struct.pack("<I", _PUT_TAG) + _pack_bytes(cell.value)
    if isinstance(cell, Delete):
        head = struct.pack("<I", _DELETE_TAG)
        if cell.ttl_ms is None:
            return head + b"\x00"
        return head + b"\x01" + _pack_u64(cell.ttl_ms)
    raise TypeError(f"not a cell value: {cell!r}")


def decode_cell(data: bytes) -> Union[Put, Delete]:
    reader = _Reader(data)
    cell = reader.cell()
    reader.finish()
    return cell


def encode_entry(entry: Entry) -> bytes:
    return encode_key(entry.key) + encode_cell(entry.value)


def decode_entry(data: bytes) -> Entry:
    reader = _Reader(data)
    key = reader.key()
    cell = reader.cell()
    reader.finish()
    return Entry(key, cell)