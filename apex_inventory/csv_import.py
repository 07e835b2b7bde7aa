"""CSV import: tokenizing uploads, header aliasing and row validation."""
from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from io import StringIO
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .inventory import ItemFields
from .validation import parse_price, parse_quantity, sku_key, sku_keys

logger = logging.getLogger(__name__)

CANONICAL_FIELDS = ("name", "sku", "category", "price", "quantity")
TEMPLATE_FILENAME = "inventory_import_template.csv"
# Cells up to this many characters tokenize; the csv module default is 131072.
FIELD_SIZE_LIMIT = 64 * 1024 * 1024

_CSV_FIELD_ALIASES: Dict[str, set[str]] = {
    "name": {"name", "product_name", "product", "item", "item_name"},
    "sku": {"sku", "sku_code", "code"},
    "category": {"category", "cat", "type"},
    "price": {"price", "unit_price", "cost"},
    "quantity": {"quantity", "qty", "stock", "count"},
}

_ALIAS_LOOKUP: Dict[str, str] = {
    alias: canonical
    for canonical, aliases in _CSV_FIELD_ALIASES.items()
    for alias in aliases
}

_WHITESPACE = re.compile(r"\s+")


class MalformedFileError(ValueError):
    """Raised when an upload cannot be read as comma-separated text."""


class RowStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ParsedCsv:
    """Tokenized upload: original header names plus data rows aligned to them."""

    headers: List[str]
    rows: List[List[str]]


@dataclass
class CsvRow:
    row_number: int
    raw: Dict[str, str]
    status: RowStatus
    parsed: Optional[ItemFields] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_number": self.row_number,
            "raw": dict(self.raw),
            "parsed": None if self.parsed is None else self.parsed.to_dict(),
            "errors": list(self.errors),
            "status": self.status.value,
        }


@dataclass
class CsvParseResult:
    rows: List[CsvRow]
    valid_count: int
    invalid_count: int
    headers: List[str]

    def valid_items(self) -> List[ItemFields]:
        return [
            row.parsed
            for row in self.rows
            if row.status is RowStatus.VALID and row.parsed is not None
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "headers": list(self.headers),
        }


def normalize_header(value: Any) -> str:
    """Map a header cell onto its canonical field name when it has one."""

    if value is None:
        return ""
    text = str(value).replace("\ufeff", "").strip().lower()
    text = _WHITESPACE.sub("_", text)
    return _ALIAS_LOOKUP.get(text, text)


def _is_blank_line(record: Sequence[str]) -> bool:
    return len(record) <= 1 and not "".join(record).strip()


def parse_csv(data: Union[bytes, str]) -> ParsedCsv:
    """Tokenize an upload into its header row and data rows.

    Blank lines are skipped. Short rows are padded with empty cells and
    cells past the last header are dropped.
    """

    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedFileError("File must be UTF-8 encoded") from exc
    else:
        text = data.lstrip("\ufeff")

    headers: Optional[List[str]] = None
    rows: List[List[str]] = []
    if csv.field_size_limit() < FIELD_SIZE_LIMIT:
        csv.field_size_limit(FIELD_SIZE_LIMIT)
    reader = csv.reader(StringIO(text), strict=True)
    try:
        for record in reader:
            if _is_blank_line(record):
                continue
            if headers is None:
                headers = list(record)
                continue
            cells = list(record[: len(headers)])
            cells.extend([""] * (len(headers) - len(cells)))
            rows.append(cells)
    except csv.Error as exc:
        raise MalformedFileError(f"Could not tokenize CSV: {exc}") from exc

    if headers is None:
        raise MalformedFileError("Missing header row")
    return ParsedCsv(headers=headers, rows=rows)


def validate_rows(parsed: ParsedCsv, existing_skus: Iterable[str]) -> CsvParseResult:
    """Validate every row of ``parsed`` against the field rules.

    SKUs are checked against ``existing_skus`` and against rows accepted
    earlier in the same file, so rows must be processed strictly in order.
    """

    normalized = [normalize_header(header) for header in parsed.headers]
    headers = list(dict.fromkeys(normalized))
    raw_rows = [_normalize_row(normalized, cells) for cells in parsed.rows]

    missing = [name for name in CANONICAL_FIELDS if name not in headers]
    if missing:
        message = (
            f"Missing required columns: {', '.join(missing)}. "
            f"Found: {', '.join(headers)}"
        )
        logger.info("CSV import rejected, missing columns: %s", ", ".join(missing))
        rows = [
            CsvRow(row_number=index, raw=raw, status=RowStatus.INVALID, errors=[message])
            for index, raw in enumerate(raw_rows, start=1)
        ]
        return CsvParseResult(
            rows=rows, valid_count=0, invalid_count=len(rows), headers=headers
        )

    seen = sku_keys(existing_skus)
    rows = []
    for index, raw in enumerate(raw_rows, start=1):
        row = _validate_row(index, raw, seen)
        if row.parsed is not None:
            seen.add(sku_key(row.parsed.sku))
        rows.append(row)

    valid_count = sum(1 for row in rows if row.status is RowStatus.VALID)
    logger.info(
        "Validated CSV import: %d valid, %d invalid", valid_count, len(rows) - valid_count
    )
    return CsvParseResult(
        rows=rows,
        valid_count=valid_count,
        invalid_count=len(rows) - valid_count,
        headers=headers,
    )


def import_csv(data: Union[bytes, str], existing_skus: Iterable[str]) -> CsvParseResult:
    return validate_rows(parse_csv(data), existing_skus)


def csv_template() -> str:
    return ",".join(CANONICAL_FIELDS) + "\n"


def _normalize_row(normalized_headers: Sequence[str], cells: Sequence[str]) -> Dict[str, str]:
    raw: Dict[str, str] = {}
    for key, value in zip(normalized_headers, cells):
        # the first column wins when two headers share a canonical name
        raw.setdefault(key, value)
    return raw


def _validate_row(row_number: int, raw: Dict[str, str], seen: set[str]) -> CsvRow:
    errors: List[str] = []

    name = raw.get("name", "").strip()
    sku = raw.get("sku", "").strip()
    category = raw.get("category", "").strip()
    price = parse_price(raw.get("price", ""))
    quantity = parse_quantity(raw.get("quantity", ""))

    if not name:
        errors.append("Name is required")
    if not sku:
        errors.append("SKU is required")
    if not category:
        errors.append("Category is required")
    if price is None:
        errors.append("Price must be a number ≥ 0")
    if quantity is None:
        errors.append("Quantity must be a whole number ≥ 0")
    if sku and sku_key(sku) in seen:
        errors.append("SKU already exists")

    if errors or price is None or quantity is None:
        return CsvRow(
            row_number=row_number, raw=raw, status=RowStatus.INVALID, errors=errors
        )
    return CsvRow(
        row_number=row_number,
        raw=raw,
        status=RowStatus.VALID,
        parsed=ItemFields(
            name=name, sku=sku, category=category, price=price, quantity=quantity
        ),
    )


__all__ = [
    "CANONICAL_FIELDS",
    "CsvParseResult",
    "CsvRow",
    "MalformedFileError",
    "ParsedCsv",
    "RowStatus",
    "TEMPLATE_FILENAME",
    "csv_template",
    "import_csv",
    "normalize_header",
    "parse_csv",
    "validate_rows",
]
