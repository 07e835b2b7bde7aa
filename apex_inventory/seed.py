"""Default catalog written on first run or when the snapshot is unreadable."""
from __future__ import annotations

from typing import List

from .inventory import Item

_SEED_ROWS = [
    ("1", "Classic T-Shirt", "TS-001", "Apparel", 19.99, 42),
    ("2", "Running Shoes", "SH-042", "Footwear", 89.99, 8),
    ("3", "Water Bottle", "WB-007", "Accessories", 12.49, 0),
    ("4", "Yoga Mat", "YM-003", "Fitness", 34.99, 15),
    ("5", "Wireless Earbuds", "WE-101", "Electronics", 59.99, 3),
    ("6", "Resistance Bands", "RB-009", "Fitness", 14.99, 27),
    ("7", "Canvas Backpack", "CB-055", "Accessories", 44.99, 6),
    ("8", "Denim Jacket", "DJ-021", "Apparel", 74.99, 0),
    ("9", "USB-C Hub", "UH-300", "Electronics", 29.99, 11),
    ("10", "Leather Sneakers", "LS-088", "Footwear", 110.0, 4),
]


def seed_items() -> List[Item]:
    return [
        Item(id=item_id, name=name, sku=sku, category=category, price=price, quantity=quantity)
        for item_id, name, sku, category, price, quantity in _SEED_ROWS
    ]


__all__ = ["seed_items"]
