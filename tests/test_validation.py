"""Tests for decoded record validation."""
from decimal import Decimal

from losstrack.codec import DecodedLine
from losstrack.models import UnitType
from losstrack.validation import (
    DUPLICATE_CODE,
    EMPTY_NAME,
    INVALID_CODE,
    INVALID_PRICE,
    infer_unit_type,
    validate_record,
)


def record(code="7890000000001", name="ARROZ 5KG", price="25.99"):
    return DecodedLine(code=code, name=name, price=price)


class TestValidateRecord:
    """Tests for the ordered validation rules."""

    def test_valid_record(self):
        result = validate_record(record())
        assert result.valid
        assert result.reason is None
        assert result.price == Decimal("25.99")

    def test_code_with_letters(self):
        assert validate_record(record(code="78900000000AB")).reason == INVALID_CODE

    def test_code_with_spaces(self):
        assert validate_record(record(code="   7890000001")).reason == INVALID_CODE

    def test_empty_name(self):
        assert validate_record(record(name="")).reason == EMPTY_NAME

    def test_zero_price(self):
        assert validate_record(record(price="0.00")).reason == INVALID_PRICE

    def test_unparseable_price(self):
        assert validate_record(record(price="abc")).reason == INVALID_PRICE

    def test_price_below_one_cent(self):
        assert validate_record(record(price="0.001")).reason == INVALID_PRICE

    def test_price_rounded_to_cents(self):
        assert validate_record(record(price="12.345")).price == Decimal("12.35")

    def test_half_cent_rounds_up(self):
        result = validate_record(record(price="0.005"))
        assert result.valid
        assert result.price == Decimal("0.01")

    def test_duplicate_code(self):
        result = validate_record(record(), seen_codes={"7890000000001"})
        assert not result.valid
        assert result.reason == DUPLICATE_CODE

    def test_first_failure_wins(self):
        result = validate_record(record(code="bad", name="", price="x"), seen_codes={"bad"})
        assert result.reason == INVALID_CODE

    def test_name_checked_before_price(self):
        assert validate_record(record(name="", price="x")).reason == EMPTY_NAME

    def test_price_checked_before_duplicate(self):
        result = validate_record(record(price="-1"), seen_codes={"7890000000001"})
        assert result.reason == INVALID_PRICE

    def test_seen_codes_not_mutated(self):
        seen = set()
        validate_record(record(), seen)
        assert seen == set()

    def test_reason_messages(self):
        assert INVALID_CODE == "invalid code format"
        assert EMPTY_NAME == "empty name"
        assert INVALID_PRICE == "invalid or non-positive price"
        assert DUPLICATE_CODE == "duplicate code in file"


class TestInferUnitType:
    """Tests for the name-based unit heuristic."""

    def test_kg_suffix(self):
        assert infer_unit_type("ARROZ 5KG") == UnitType.WEIGHT

    def test_lower_case(self):
        assert infer_unit_type("Queijo kg") == UnitType.WEIGHT

    def test_inside_word(self):
        assert infer_unit_type("KGB VODKA") == UnitType.WEIGHT

    def test_no_kg(self):
        assert infer_unit_type("FEIJAO PRETO") == UnitType.UNIT

    def test_empty(self):
        assert infer_unit_type("") == UnitType.UNIT
