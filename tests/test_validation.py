import pytest

from apex_inventory.inventory import ItemFields
from apex_inventory.validation import parse_price, parse_quantity, validate_item_form


def test_parse_price_normalizes_negative_zero() -> None:
    value = parse_price("-0")
    assert value == 0.0
    assert str(value) == "0.0"


@pytest.mark.parametrize("text", ["", "  ", "1e999", "-0.01", "0x10", "٣", "1.٥", "1e٣"])
def test_parse_price_rejects(text: str) -> None:
    assert parse_price(text) is None


@pytest.mark.parametrize("text", ["1_0", "٣", " 0 5", "1e1"])
def test_parse_quantity_rejects(text: str) -> None:
    assert parse_quantity(text) is None


def test_form_builds_fields() -> None:
    form = {
        "name": " Cap ",
        "sku": " NEW-1 ",
        "category": "Apparel",
        "price": 9.99,
        "quantity": "5",
        "imageUrl": " https://example.com/cap.png ",
    }

    fields, errors = validate_item_form(form, ["SH-042"])

    assert errors == {}
    assert fields == ItemFields(
        name="Cap",
        sku="NEW-1",
        category="Apparel",
        price=9.99,
        quantity=5,
        image_url="https://example.com/cap.png",
    )


def test_form_blank_image_becomes_none() -> None:
    form = {"name": "Cap", "sku": "N", "category": "A", "price": "1", "quantity": "1", "imageUrl": ""}
    fields, _ = validate_item_form(form, [])
    assert fields is not None
    assert fields.image_url is None


def test_form_reports_each_field() -> None:
    fields, errors = validate_item_form({"price": "-2", "quantity": "2.5"}, [])

    assert fields is None
    assert errors == {
        "name": "Name is required",
        "sku": "SKU is required",
        "category": "Category is required",
        "price": "Enter a valid price ≥ 0",
        "quantity": "Enter a valid whole number ≥ 0",
    }


def test_form_rejects_existing_sku_case_insensitively() -> None:
    form = {"name": "Cap", "sku": "sh-042", "category": "A", "price": "1", "quantity": "1"}

    fields, errors = validate_item_form(form, ["SH-042"])

    assert fields is None
    assert errors == {"sku": "SKU already exists"}


def test_form_rejects_non_integer_json_quantity() -> None:
    form = {"name": "Cap", "sku": "N", "category": "A", "price": 1, "quantity": 5.0}
    fields, errors = validate_item_form(form, [])
    assert fields is None
    assert set(errors) == {"quantity"}


def test_form_rejects_unencodable_text() -> None:
    form = {"name": "\ud800", "sku": "N-1", "category": "A\udfff", "price": "1", "quantity": "1"}

    fields, errors = validate_item_form(form, [])

    assert fields is None
    assert errors == {
        "name": "Contains invalid characters",
        "category": "Contains invalid characters",
    }
