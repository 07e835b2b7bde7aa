"""Read-only projections of the item table for display."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence

from .inventory import Item

DEFAULT_LOW_STOCK_THRESHOLD = 10
SORT_FIELDS = ("name", "sku", "category", "price", "quantity")
SORT_DIRECTIONS = ("asc", "desc")

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"


@dataclass(frozen=True)
class InventorySummary:
    total_items: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    total_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_items": self.total_items,
            "in_stock": self.in_stock,
            "low_stock": self.low_stock,
            "out_of_stock": self.out_of_stock,
            "total_value": self.total_value,
        }


@dataclass(frozen=True)
class StockAlert:
    """A transient notification about stock levels."""

    id: str
    kind: str
    title: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "message": self.message,
        }


def search_items(items: Iterable[Item], query: str) -> List[Item]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(items)
    return [
        item
        for item in items
        if needle in item.name.lower()
        or needle in item.sku.lower()
        or needle in item.category.lower()
    ]


def sort_items(items: Iterable[Item], field: str = "name", direction: str = "asc") -> List[Item]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by '{field}'")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unknown sort direction '{direction}'")

    def _sort_key(item: Item) -> Any:
        value = getattr(item, field)
        if isinstance(value, str):
            return value.casefold()
        return value

    return sorted(items, key=_sort_key, reverse=direction == "desc")


def visible_items(
    items: Iterable[Item],
    query: str = "",
    field: str = "name",
    direction: str = "asc",
) -> List[Item]:
    return sort_items(search_items(items, query), field, direction)


def stock_status(item: Item, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> str:
    if item.quantity == 0:
        return OUT_OF_STOCK
    if item.quantity < threshold:
        return LOW_STOCK
    return IN_STOCK


def summarize(
    items: Sequence[Item], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> InventorySummary:
    statuses = [stock_status(item, threshold) for item in items]
    return InventorySummary(
        total_items=len(items),
        in_stock=statuses.count(IN_STOCK),
        low_stock=statuses.count(LOW_STOCK),
        out_of_stock=statuses.count(OUT_OF_STOCK),
        total_value=sum(item.price * item.quantity for item in items),
    )


def stock_alerts(
    items: Sequence[Item], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> List[StockAlert]:
    """Build the out-of-stock and low-stock notifications for ``items``.

    Alert ids embed the number of affected items, so a UI that remembers
    dismissed ids shows the alert again once that number changes.
    """

    out_of_stock = [item for item in items if stock_status(item, threshold) == OUT_OF_STOCK]
    low_stock = [item for item in items if stock_status(item, threshold) == LOW_STOCK]
    alerts: List[StockAlert] = []
    if out_of_stock:
        if len(out_of_stock) == 1:
            message = f'"{out_of_stock[0].name}" is out of stock'
        else:
            message = f"{len(out_of_stock)} items are out of stock"
        alerts.append(
            StockAlert(
                id=f"out-of-stock-{len(out_of_stock)}",
                kind="danger",
                title="Out of Stock",
                message=message,
            )
        )
    if low_stock:
        if len(low_stock) == 1:
            message = f'"{low_stock[0].name}" has only {low_stock[0].quantity} units left'
        else:
            message = f"{len(low_stock)} items are running low on stock"
        alerts.append(
            StockAlert(
                id=f"low-stock-{len(low_stock)}",
                kind="warning",
                title="Low Stock Alert",
                message=message,
            )
        )
    return alerts


def category_quantities(items: Iterable[Item]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for item in items:
        totals[item.category] = totals.get(item.category, 0) + item.quantity
    return totals


__all__ = [
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "IN_STOCK",
    "InventorySummary",
    "LOW_STOCK",
    "OUT_OF_STOCK",
    "SORT_DIRECTIONS",
    "SORT_FIELDS",
    "StockAlert",
    "category_quantities",
    "search_items",
    "sort_items",
    "stock_alerts",
    "stock_status",
    "summarize",
    "visible_items",
]
