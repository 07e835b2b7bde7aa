"""JSON snapshot persistence for items and the activity log."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Sequence, Tuple

from .inventory import Item, LogEntry
from .seed import seed_items

logger = logging.getLogger(__name__)


class PersistenceError(OSError):
    """Raised when the snapshot could not be written."""


@dataclass
class SnapshotStore:
    """Reads and writes the ``{"items": [...], "log": [...]}`` snapshot.

    The snapshot is always written as a whole: the JSON document goes to a
    temporary sibling file which then replaces the real one, so a failed
    write never corrupts what was saved before.
    """

    storage_path: Path

    def __post_init__(self) -> None:
        self.storage_path = Path(self.storage_path)

    def load(self) -> Tuple[List[Item], List[LogEntry]]:
        if not self.storage_path.exists():
            logger.info("No snapshot at %s, seeding default catalog", self.storage_path)
            return self._seed()
        raw = self.storage_path.read_bytes()
        try:
            items, log = self._decode(json.loads(raw.decode("utf-8")))
        except ValueError as exc:
            logger.warning(
                "Snapshot at %s is unreadable (%s), seeding default catalog",
                self.storage_path,
                exc,
            )
            return self._seed()
        return items, log

    def save(self, items: Sequence[Item], log: Sequence[LogEntry]) -> None:
        payload = {
            "items": [item.to_dict() for item in items],
            "log": [entry.to_record() for entry in log],
        }
        temp_path = self.storage_path.with_name(self.storage_path.name + ".tmp")
        try:
            data = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(data)
            temp_path.replace(self.storage_path)
        except (OSError, ValueError) as exc:
            logger.error("Failed to write snapshot %s: %s", self.storage_path, exc)
            temp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write snapshot to {self.storage_path}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _seed(self) -> Tuple[List[Item], List[LogEntry]]:
        items = seed_items()
        log: List[LogEntry] = []
        self.save(items, log)
        return items, log

    @staticmethod
    def _decode(state: Any) -> Tuple[List[Item], List[LogEntry]]:
        if not isinstance(state, dict):
            raise ValueError("Snapshot must be an object")
        raw_items = state.get("items")
        raw_log = state.get("log")
        if not isinstance(raw_items, list) or not isinstance(raw_log, list):
            raise ValueError("Snapshot must hold 'items' and 'log' lists")
        items = [Item.from_record(record) for record in raw_items]
        log = [LogEntry.from_record(record) for record in raw_log]
        return items, log


__all__ = ["PersistenceError", "SnapshotStore"]
