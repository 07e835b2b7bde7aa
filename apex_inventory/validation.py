"""Field rules shared by the CSV importer and the item form."""
from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Set, Tuple

from .inventory import ItemFields

_DECIMAL_PATTERN = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII
)


def parse_price(text: str) -> Optional[float]:
    """Return the price in ``text`` or ``None`` unless it is a finite number >= 0."""

    candidate = text.strip()
    if not _DECIMAL_PATTERN.fullmatch(candidate):
        return None
    value = float(candidate)
    if not math.isfinite(value) or value < 0:
        return None
    # "-0" parses to -0.0
    return value if value != 0 else 0.0


def parse_quantity(text: str) -> Optional[int]:
    """Return the quantity in ``text`` or ``None``.

    The text must be the canonical decimal spelling of a non-negative
    integer, so ``"3.5"``, ``"007"`` and ``"+7"`` are all rejected.
    """

    candidate = text.strip()
    try:
        value = int(candidate)
    except ValueError:
        return None
    if value < 0 or str(value) != candidate:
        return None
    return value


def sku_key(sku: str) -> str:
    return sku.strip().lower()


def sku_keys(skus: Iterable[str]) -> Set[str]:
    return {sku_key(sku) for sku in skus}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _encodable(text: str) -> bool:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_item_form(
    form: Mapping[str, Any],
    existing_skus: Iterable[str],
) -> Tuple[Optional[ItemFields], Dict[str, str]]:
    """Check a create/edit form and build the item fields it describes.

    ``existing_skus`` must not include the SKU of the item being edited.
    Returns ``(fields, {})`` on success or ``(None, errors)`` where
    ``errors`` maps each failing field to one message.
    """

    name = _text(form.get("name")).strip()
    sku = _text(form.get("sku")).strip()
    category = _text(form.get("category")).strip()
    price = parse_price(_text(form.get("price")))
    quantity = parse_quantity(_text(form.get("quantity")))
    image_raw = form.get("imageUrl", form.get("image_url"))
    image_url = _text(image_raw).strip() or None

    errors: Dict[str, str] = {}
    if not name:
        errors["name"] = "Name is required"
    if not sku:
        errors["sku"] = "SKU is required"
    elif sku_key(sku) in sku_keys(existing_skus):
        errors["sku"] = "SKU already exists"
    if not category:
        errors["category"] = "Category is required"
    if price is None:
        errors["price"] = "Enter a valid price ≥ 0"
    if quantity is None:
        errors["quantity"] = "Enter a valid whole number ≥ 0"
    for key, value in (
        ("name", name),
        ("sku", sku),
        ("category", category),
        ("imageUrl", image_url or ""),
    ):
        if not _encodable(value):
            errors[key] = "Contains invalid characters"

    if errors or price is None or quantity is None:
        return None, errors
    return (
        ItemFields(
            name=name,
            sku=sku,
            category=category,
            price=price,
            quantity=quantity,
            image_url=image_url,
        ),
        errors,
    )


__all__ = [
    "parse_price",
    "parse_quantity",
    "sku_key",
    "sku_keys",
    "validate_item_form",
]
