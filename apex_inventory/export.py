"""Spreadsheet export of the catalog."""
from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Sequence

import xlwt

from .inventory import Item
from .views import DEFAULT_LOW_STOCK_THRESHOLD, InventorySummary, stock_status

INVENTORY_FIELDS = ["Name", "SKU", "Category", "Price", "Quantity", "Status"]


def inventory_workbook(
    items: Sequence[Item],
    summary: InventorySummary,
    *,
    exported_at: datetime,
    threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> bytes:
    """Render ``items`` and ``summary`` as a two-sheet ``.xls`` workbook."""

    workbook = xlwt.Workbook()

    header_style = xlwt.easyxf(
        "font: bold on; align: horiz center, vert center;"
        "borders: left thin, right thin, top thin, bottom thin"
    )
    text_style = xlwt.easyxf(
        "align: horiz left, vert center;"
        "borders: left thin, right thin, top thin, bottom thin"
    )
    price_style = xlwt.easyxf(
        "align: horiz right, vert center;"
        "borders: left thin, right thin, top thin, bottom thin",
        num_format_str="0.00",
    )
    number_style = xlwt.easyxf(
        "align: horiz center, vert center;"
        "borders: left thin, right thin, top thin, bottom thin"
    )

    sheet = workbook.add_sheet("Inventory")
    for index, width in enumerate([25, 12, 15, 10, 10, 14]):
        sheet.col(index).width = 256 * width
    for col_index, label in enumerate(INVENTORY_FIELDS):
        sheet.write(0, col_index, label, header_style)
    for row_index, item in enumerate(items, start=1):
        sheet.write(row_index, 0, item.name, text_style)
        sheet.write(row_index, 1, item.sku, text_style)
        sheet.write(row_index, 2, item.category, text_style)
        sheet.write(row_index, 3, item.price, price_style)
        sheet.write(row_index, 4, item.quantity, number_style)
        sheet.write(row_index, 5, stock_status(item, threshold), text_style)

    summary_sheet = workbook.add_sheet("Summary")
    summary_sheet.col(0).width = 256 * 22
    summary_sheet.col(1).width = 256 * 18
    summary_sheet.write(0, 0, "Metric", header_style)
    summary_sheet.write(0, 1, "Value", header_style)
    metrics = [
        ("Total Unique Items", summary.total_items),
        ("In Stock", summary.in_stock),
        (f"Low Stock (< {threshold})", summary.low_stock),
        ("Out of Stock", summary.out_of_stock),
        ("Total Inventory Value", f"${summary.total_value:.2f}"),
        ("Export Date", exported_at.strftime("%Y-%m-%d")),
    ]
    for row_index, (label, value) in enumerate(metrics, start=1):
        summary_sheet.write(row_index, 0, label, text_style)
        summary_sheet.write(row_index, 1, value, text_style)

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


__all__ = ["INVENTORY_FIELDS", "inventory_workbook"]
