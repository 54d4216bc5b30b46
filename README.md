# redbase

This package is the storage core of a wide-column, multi-version key-value
store. A cell is addressed by a row, a column and a timestamp. Each write adds
a new version of the cell. A delete adds a tombstone and leaves the older
versions in place.

## Modules

- `redbase.cells` holds the data model and its binary encoding.
  - `EntryKey(row, column, timestamp)` sorts by row, then column, then
    timestamp.
  - `Put(value)` and `Delete(ttl_ms=None)` are the two kinds of cell value.
    Both derive from `CellValue`.
  - `Entry(key, value)` pairs a key with a cell value.
  - `encode_key`/`decode_key`, `encode_cell`/`decode_cell` and
    `encode_entry`/`decode_entry` write and read the little-endian binary
    form. The decoders raise `ValueError` when the data is truncated, has
    trailing bytes, or carries an unknown variant tag.
- `redbase.memstore` provides `MemStore(wal_path)`, a sorted in-memory map of
  `EntryKey` to cell value. Every `append` is also written to an append-only
  write-ahead log, and opening a store replays that log. `MemStore` is a
  context manager, and `close()` closes the log. Its query methods are:
  - `get_full(row, column)`: the newest value.
  - `get_versions_full(row, column)`: `(timestamp, value)` pairs, newest
    first.
  - `scan_row_full(row)`, `scan_range(start_row, end_row)` and
    `get_row_keys_in_range(start_row, end_row)`: queries over a row or an
    inclusive row range. `scan_range` raises `ValueError` if `start_row >
    end_row`.
  - `drain_all()`: empties the map, returns every entry in key order and
    starts a fresh log.
  - `len(store)`: the number of entries held.
- `redbase.storage` covers the sorted tables written to disk.
  - `write_sstable(path, entries)` writes entries to a table file. The
    entries are expected to be sorted by key already.
  - `SSTableReader.open(path)` loads a table into memory. It raises
    `ValueError` if the file is truncated.
  - The reader answers `get_full`, `get_versions_full`, `scan_row_full` (which
    returns `(column, timestamp, value)` tuples), `scan_all`, `scan_range` and
    `get_row_keys_in_range`. `len(reader)` gives the number of entries.
- `redbase.filter` has the value predicates and `FilterSet`.
  - The predicates are `Equal`, `NotEqual`, `GreaterThan`,
    `GreaterThanOrEqual`, `LessThan`, `LessThanOrEqual`, `Contains`,
    `StartsWith`, `EndsWith`, `Regex`, `And`, `Or` and `Not`. All of them
    derive from `Filter` and have `matches(value)`.
  - `FilterSet` holds `ColumnFilter`s. It also has an optional inclusive
    timestamp range, which `timestamp_matches` checks, and an optional
    `max_versions`.
  - `add_column_filter`, `with_timestamp_range` and `with_max_versions` each
    return the set, so the calls can be chained.
  - `filters_for(column)` yields the filters attached to a column.

## Installation

```
pip install .
```

## Example

```python
from redbase.cells import Entry, EntryKey, Put, Delete
from redbase.memstore import MemStore
from redbase.storage import write_sstable, SSTableReader
from redbase.filter import Contains, FilterSet, GreaterThan

with MemStore("table.wal") as store:
    store.append(Entry(EntryKey(b"row1", b"col1", 100), Put(b"value1")))
    store.append(Entry(EntryKey(b"row1", b"col1", 200), Put(b"value2")))
    store.append(Entry(EntryKey(b"row1", b"col2", 150), Delete(3600 * 1000)))

    for ts, cell in store.get_versions_full(b"row1", b"col1"):
        print(ts, cell)                      # newest first

    entries = store.drain_all()              # sorted; the log starts afresh

write_sstable("table-0001.sst", entries)
reader = SSTableReader.open("table-0001.sst")
print(reader.get_full(b"row1", b"col1"))     # Put(value=b'value2')

print(Contains(b"value").matches(b"value2")) # True

filters = FilterSet()
filters.add_column_filter(b"age", GreaterThan(b"25"))
filters.with_timestamp_range(100, None)
print(filters.timestamp_matches(150))        # True
```

Values are compared as raw bytes. For example, `GreaterThan(b"25")` matches
`b"30"` because `b"30"` sorts after `b"25"` as bytes. A `Regex` filter
searches the value for the pattern and only considers values that decode as
UTF-8. An invalid pattern matches nothing and does not raise.

## What it does not do

This package holds the storage building blocks only. It does not provide a
table or column-family layer that combines the memstore with on-disk tables.
It also does not provide compaction, aggregation, connection pooling, a
network server or a command-line program. The filters are plain predicates.
Applying them to query results is left to the caller.

## Tests

```
pip install ".[test]"
pytest
```