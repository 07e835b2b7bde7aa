"""Inventory records, the activity log and the commands that mutate them."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .storage import SnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOG_ENTRIES = 10


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _serialize_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ItemFields:
    """Everything an item carries except its identifier."""

    name: str
    sku: str
    category: str
    price: float
    quantity: int
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "name": self.name,
            "sku": self.sku,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
        }
        if self.image_url is not None:
            record["imageUrl"] = self.image_url
        return record


@dataclass(frozen=True)
class Item:
    """Represents a single inventory item."""

    id: str
    name: str
    sku: str
    category: str
    price: float
    quantity: int
    image_url: Optional[str] = None

    @classmethod
    def from_fields(cls, item_id: str, fields: ItemFields) -> "Item":
        return cls(
            id=item_id,
            name=fields.name,
            sku=fields.sku,
            category=fields.category,
            price=fields.price,
            quantity=fields.quantity,
            image_url=fields.image_url,
        )

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "category": self.category,
            "price": self.price,
            "quantity": self.quantity,
        }
        if self.image_url is not None:
            record["imageUrl"] = self.image_url
        return record

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Item":
        if not isinstance(record, dict):
            raise ValueError("Item record must be an object")
        try:
            item_id = record["id"]
            name = record["name"]
            sku = record["sku"]
            category = record["category"]
            price = record["price"]
            quantity = record["quantity"]
        except KeyError as exc:
            raise ValueError(f"Item record missing field {exc}") from exc
        for value in (item_id, name, sku, category):
            if not isinstance(value, str):
                raise ValueError("Item text fields must be strings")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ValueError("Item price must be a number")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError("Item quantity must be an integer")
        image_url = record.get("imageUrl")
        if image_url is not None and not isinstance(image_url, str):
            raise ValueError("Item imageUrl must be a string")
        return cls(
            id=item_id,
            name=name,
            sku=sku,
            category=category,
            price=float(price),
            quantity=quantity,
            image_url=image_url,
        )


@dataclass(frozen=True)
class LogEntry:
    """Represents a single activity log line."""

    id: str
    timestamp: datetime
    message: str

    @classmethod
    def create(cls, message: str) -> "LogEntry":
        return cls(id=_new_id(), timestamp=_now(), message=message)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": _serialize_timestamp(self.timestamp),
            "message": self.message,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "LogEntry":
        if not isinstance(record, dict):
            raise ValueError("Log record must be an object")
        timestamp = _parse_timestamp(record.get("timestamp"))
        if timestamp is None:
            raise ValueError("Invalid timestamp in log record")
        entry_id = record.get("id")
        message = record.get("message")
        if not isinstance(entry_id, str) or not isinstance(message, str):
            raise ValueError("Log record id and message must be strings")
        return cls(id=entry_id, timestamp=timestamp, message=message)


class Lookup(str, Enum):
    """Whether a command addressed by id found its target."""

    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass
class InventoryManager:
    """Sole writer of the item table and the activity log.

    Commands trust their input: validation happens upstream in the CSV
    pipeline and the item form. Each command builds the new state, records
    one log entry (except :meth:`clear_log`), saves the snapshot and only
    then swaps the new state in.
    """

    store: "SnapshotStore"
    max_log_entries: int = DEFAULT_MAX_LOG_ENTRIES
    _lock: RLock = field(default_factory=RLock, init=False)
    _items: List[Item] = field(default_factory=list, init=False)
    _log: List[LogEntry] = field(default_factory=list, init=False)
    _initialized: bool = field(default=False, init=False)

    def initialize(self) -> None:
        """Load the persisted snapshot, seeding it on first run."""

        with self._lock:
            items, log = self.store.load()
            self._items = list(items)
            self._log = list(log)[: self.max_log_entries]
            self._initialized = True
            logger.info(
                "Loaded %d items and %d log entries", len(self._items), len(self._log)
            )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def items(self) -> Tuple[Item, ...]:
        with self._lock:
            return tuple(self._items)

    @property
    def log(self) -> Tuple[LogEntry, ...]:
        with self._lock:
            return tuple(self._log)

    def get(self, item_id: str) -> Optional[Item]:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
            return None

    def existing_skus(self, *, exclude_id: Optional[str] = None) -> List[str]:
        with self._lock:
            return [item.sku for item in self._items if item.id != exclude_id]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create(self, fields: ItemFields) -> Item:
        with self._lock:
            self._ensure_initialized()
            item = Item.from_fields(_new_id(), fields)
            self._commit_locked([*self._items, item], f"Item '{fields.name}' created")
            logger.info("Created item %s (%s)", item.id, item.sku)
            return item

    def bulk_add(self, fields_list: Iterable[ItemFields]) -> List[Item]:
        with self._lock:
            self._ensure_initialized()
            new_items = [Item.from_fields(_new_id(), fields) for fields in fields_list]
            self._commit_locked(
                [*self._items, *new_items],
                f"{len(new_items)} items imported via CSV",
            )
            logger.info("Imported %d items", len(new_items))
            return new_items

    def update(self, item_id: str, fields: ItemFields) -> Lookup:
        with self._lock:
            self._ensure_initialized()
            outcome = Lookup.NOT_FOUND
            updated: List[Item] = []
            for item in self._items:
                if item.id == item_id:
                    updated.append(Item.from_fields(item_id, fields))
                    outcome = Lookup.FOUND
                else:
                    updated.append(item)
            self._commit_locked(updated, f"Item '{fields.name}' updated")
            if outcome is Lookup.NOT_FOUND:
                logger.info("Update skipped, no item with id %s", item_id)
            return outcome

    def delete(self, item_id: str, name: str) -> Lookup:
        with self._lock:
            self._ensure_initialized()
            remaining = [item for item in self._items if item.id != item_id]
            outcome = (
                Lookup.FOUND if len(remaining) < len(self._items) else Lookup.NOT_FOUND
            )
            self._commit_locked(remaining, f"Item '{name}' deleted")
            if outcome is Lookup.NOT_FOUND:
                logger.info("Delete skipped, no item with id %s", item_id)
            return outcome

    def bulk_delete(self, item_ids: Sequence[str]) -> int:
        with self._lock:
            self._ensure_initialized()
            targets = set(item_ids)
            remaining = [item for item in self._items if item.id not in targets]
            removed = len(self._items) - len(remaining)
            self._commit_locked(remaining, f"{len(item_ids)} items deleted")
            logger.info("Bulk delete removed %d of %d requested items", removed, len(item_ids))
            return removed

    def clear_log(self) -> None:
        with self._lock:
            self._ensure_initialized()
            self._commit_locked(self._items, None, clear_log=True)
            logger.info("Activity log cleared")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("InventoryManager.initialize() has not been called")

    def _commit_locked(
        self,
        items: List[Item],
        message: Optional[str],
        *,
        clear_log: bool = False,
    ) -> None:
        if clear_log:
            log: List[LogEntry] = []
        elif message is not None:
            log = [LogEntry.create(message), *self._log][: self.max_log_entries]
        else:
            log = self._log
        # A failed save leaves the previous state in place.
        self.store.save(items, log)
        self._items = items
        self._log = log


__all__ = [
    "DEFAULT_MAX_LOG_ENTRIES",
    "InventoryManager",
    "Item",
    "ItemFields",
    "LogEntry",
    "Lookup",
]
