import pytest

from apex_inventory.inventory import Item
from apex_inventory.seed import seed_items
from apex_inventory.views import (
    category_quantities,
    search_items,
    sort_items,
    stock_alerts,
    stock_status,
    summarize,
    visible_items,
)


def _item(item_id: str, name: str, quantity: int, category: str = "Misc", price: float = 1.0) -> Item:
    return Item(
        id=item_id,
        name=name,
        sku=f"SKU-{item_id}",
        category=category,
        price=price,
        quantity=quantity,
    )


def test_search_matches_name_sku_and_category() -> None:
    items = seed_items()

    assert [item.name for item in search_items(items, "foot")] == [
        "Running Shoes",
        "Leather Sneakers",
    ]
    assert [item.sku for item in search_items(items, "wb-")] == ["WB-007"]
    assert search_items(items, "  ") == items


def test_sort_by_text_and_number() -> None:
    items = [_item("1", "banana", 3), _item("2", "Apple", 10), _item("3", "cherry", 1)]

    assert [item.name for item in sort_items(items)] == ["Apple", "banana", "cherry"]
    assert [item.quantity for item in sort_items(items, "quantity", "desc")] == [10, 3, 1]


def test_sort_is_stable() -> None:
    items = [_item("1", "Same", 1), _item("2", "Same", 1), _item("3", "Same", 1)]
    assert [item.id for item in sort_items(items, "name", "desc")] == ["1", "2", "3"]


def test_sort_rejects_unknown_field() -> None:
    with pytest.raises(ValueError):
        sort_items([], "id")
    with pytest.raises(ValueError):
        sort_items([], "name", "sideways")


def test_visible_items_filters_then_sorts() -> None:
    items = seed_items()
    visible = visible_items(items, "fitness", "price", "desc")
    assert [item.name for item in visible] == ["Yoga Mat", "Resistance Bands"]


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [(0, "Out of Stock"), (1, "Low Stock"), (9, "Low Stock"), (10, "In Stock")],
)
def test_stock_status(quantity: int, expected: str) -> None:
    assert stock_status(_item("1", "Cap", quantity)) == expected


def test_summarize_seed_catalog() -> None:
    summary = summarize(seed_items())

    assert summary.total_items == 10
    assert summary.in_stock == 4
    assert summary.low_stock == 4
    assert summary.out_of_stock == 2
    assert summary.total_value == pytest.approx(3708.88)


def test_summarize_with_custom_threshold() -> None:
    summary = summarize([_item("1", "A", 4), _item("2", "B", 6)], threshold=5)
    assert (summary.in_stock, summary.low_stock) == (1, 1)


def test_alerts_for_many_items() -> None:
    alerts = stock_alerts(seed_items())

    assert [alert.to_dict() for alert in alerts] == [
        {
            "id": "out-of-stock-2",
            "kind": "danger",
            "title": "Out of Stock",
            "message": "2 items are out of stock",
        },
        {
            "id": "low-stock-4",
            "kind": "warning",
            "title": "Low Stock Alert",
            "message": "4 items are running low on stock",
        },
    ]


def test_alerts_for_single_items() -> None:
    alerts = stock_alerts([_item("1", "Cap", 0), _item("2", "Mug", 3), _item("3", "Hat", 50)])

    assert [alert.message for alert in alerts] == [
        '"Cap" is out of stock',
        '"Mug" has only 3 units left',
    ]


def test_no_alerts_when_stock_is_healthy() -> None:
    assert stock_alerts([_item("1", "Cap", 50)]) == []


def test_category_quantities_keep_first_seen_order() -> None:
    totals = category_quantities(seed_items())

    assert list(totals.items()) == [
        ("Apparel", 42),
        ("Footwear", 12),
        ("Accessories", 6),
        ("Fitness", 42),
        ("Electronics", 14),
    ]
