"""Storage core for a wide-column, multi-version key-value store: cells, filters, memstore and SSTables."""

__version__ = "0.1.0"
__all__ = ["cells", "filter", "memstore", "storage"]