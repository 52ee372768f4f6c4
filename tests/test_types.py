from pantry.core.types import DocumentSnapshot, InventoryItem
from pantry.core.utils import capitalize_first, coerce_quantity, parse_int


def test_parse_int_takes_leading_integer():
    assert parse_int("5") == 5
    assert parse_int("  7") == 7
    assert parse_int("-2") == -2
    assert parse_int("12abc") == 12
    assert parse_int("3.9") == 3


def test_parse_int_rejects_non_numeric():
    assert parse_int("abc") is None
    assert parse_int("") is None
    assert parse_int(None) is None


def test_coerce_quantity_defaults_to_zero():
    assert coerce_quantity(None) == 0
    assert coerce_quantity("junk") == 0
    assert coerce_quantity({"x": 1}) == 0
    assert coerce_quantity(float("nan")) == 0
    assert coerce_quantity(4) == 4
    assert coerce_quantity(2.7) == 2
    assert coerce_quantity("9") == 9


def test_item_from_document_missing_quantity():
    item = InventoryItem.from_document(DocumentSnapshot("salt", {}))
    assert item == InventoryItem("salt", 0)


def test_display_name_capitalizes_first_letter_only():
    assert InventoryItem("milk").display_name == "Milk"
    assert InventoryItem("bAKING soda").display_name == "BAKING soda"
    assert capitalize_first("") == ""


def test_parse_int_oversized_number_is_none():
    assert parse_int("9" * 5000) is None
    assert coerce_quantity("9" * 5000) == 0


def test_parse_int_ascii_digits_only():
    assert parse_int("٣") is None
    assert parse_int("５") is None
