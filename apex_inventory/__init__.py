"""Apex inventory package."""
from __future__ import annotations

from .csv_import import CsvParseResult, CsvRow, MalformedFileError, import_csv
from .inventory import InventoryManager, Item, ItemFields, LogEntry, Lookup
from .storage import PersistenceError, SnapshotStore

__all__ = [
    "create_app",
    "CsvParseResult",
    "CsvRow",
    "import_csv",
    "InventoryManager",
    "Item",
    "ItemFields",
    "LogEntry",
    "Lookup",
    "MalformedFileError",
    "PersistenceError",
    "SnapshotStore",
]


def create_app(*args, **kwargs):
    from .app import create_app as _create_app

    return _create_app(*args, **kwargs)
