"""Field validation for decoded product records."""
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import AbstractSet, NamedTuple, Optional

from .codec import DecodedLine, parse_price
from .models import UnitType

CODE_PATTERN = re.compile(r"[0-9]{13}")
# Scale of the stored regular_price column
PRICE_QUANTUM = Decimal("0.01")

INVALID_CODE = "invalid code format"
EMPTY_NAME = "empty name"
INVALID_PRICE = "invalid or non-positive price"
DUPLICATE_CODE = "duplicate code in file"


class ValidationResult(NamedTuple):
    valid: bool
    reason: Optional[str] = None
    price: Optional[Decimal] = None


def validate_record(decoded: DecodedLine, seen_codes: AbstractSet[str] = frozenset()) -> ValidationResult:
    """
    Check a decoded record; the first failing rule wins.

    ``seen_codes`` holds the codes already accepted earlier in the same
    import batch. It belongs to the caller and is only read here.
    """
    if not CODE_PATTERN.fullmatch(decoded.code):
        return ValidationResult(False, INVALID_CODE)

    if not decoded.name.strip():
        return ValidationResult(False, EMPTY_NAME)

    price = parse_price(decoded.price)
    if price is not None and price.is_finite():
        price = price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
    if price is None or not price.is_finite() or price <= 0:
        return ValidationResult(False, INVALID_PRICE)

    if decoded.code in seen_codes:
        return ValidationResult(False, DUPLICATE_CODE)

    return ValidationResult(True, price=price)


def infer_unit_type(name: str) -> UnitType:
    """
    Guess the unit type from the product name.

    Heuristic only: any "KG" in the name, even inside a word, means WEIGHT.
    """
    if name and "KG" in name.upper():
        return UnitType.WEIGHT
    return UnitType.UNIT
