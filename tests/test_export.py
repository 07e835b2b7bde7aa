from datetime import datetime

import xlrd

from apex_inventory.export import INVENTORY_FIELDS, inventory_workbook
from apex_inventory.seed import seed_items
from apex_inventory.views import summarize


def test_workbook_has_inventory_and_summary_sheets() -> None:
    items = seed_items()
    content = inventory_workbook(
        items, summarize(items), exported_at=datetime(2026, 10, 19, 12, 0)
    )

    book = xlrd.open_workbook(file_contents=content)
    assert book.sheet_names() == ["Inventory", "Summary"]

    sheet = book.sheet_by_name("Inventory")
    assert sheet.row_values(0) == INVENTORY_FIELDS
    assert sheet.nrows == len(items) + 1
    first = sheet.row_values(1)
    assert first[:3] == ["Classic T-Shirt", "TS-001", "Apparel"]
    assert first[3] == 19.99
    assert first[4] == 42
    assert first[5] == "In Stock"
    statuses = [sheet.cell_value(row, 5) for row in range(1, sheet.nrows)]
    assert statuses.count("Out of Stock") == 2
    assert statuses.count("Low Stock") == 4

    summary_sheet = book.sheet_by_name("Summary")
    rows = {
        summary_sheet.cell_value(row, 0): summary_sheet.cell_value(row, 1)
        for row in range(1, summary_sheet.nrows)
    }
    assert summary_sheet.row_values(0) == ["Metric", "Value"]
    assert rows["Total Unique Items"] == 10
    assert rows["In Stock"] == 4
    assert rows["Low Stock (< 10)"] == 4
    assert rows["Out of Stock"] == 2
    assert rows["Total Inventory Value"] == "$3708.88"
    assert rows["Export Date"] == "2026-10-19"


def test_workbook_with_empty_catalog() -> None:
    content = inventory_workbook([], summarize([]), exported_at=datetime(2026, 1, 1))

    book = xlrd.open_workbook(file_contents=content)
    assert book.sheet_by_name("Inventory").nrows == 1
    summary_sheet = book.sheet_by_name("Summary")
    assert summary_sheet.cell_value(5, 1) == "$0.00"
