import re
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import NamedTuple, Optional

from .errors import LineLengthError
from .models import UnitType

RECORD_LENGTH = 40
CODE_LENGTH = 13

CODE_FIELD = slice(0, 13)
NAME_FIELD = slice(13, 33)
PRICE_FIELD = slice(33, 40)

LEGACY_NAME_SUFFIX = "000"
EXPORT_PREFIX = "Inventario"

_DECIMAL_PRICE = re.compile(r"[0-9]*\.[0-9]+|[0-9]+\.")
_IMPLIED_DECIMAL_PRICE = re.compile(r"[0-9]+")
_THREE_PLACES = Decimal("0.001")


class DecodedLine(NamedTuple):
    code: str
    name: str
    price: str


def sanitize_name(raw: str) -> str:
    """
    Trim the name field and drop the legacy "000" padding.

    The suffix is only padding when it is not the tail of a longer number:
      "PRESUNTO HACIENDA000" -> "PRESUNTO HACIENDA"
      "ARROZ 5000"           -> "ARROZ 5000"
      "000"                  -> ""
    """
    name = raw.strip()
    if not name.endswith(LEGACY_NAME_SUFFIX):
        return name
    head = name[:-len(LEGACY_NAME_SUFFIX)]
    if head and head[-1].isdigit():
        return name
    return head.strip()


def _normalize_price(raw: str) -> str:
    return raw.strip().replace(",", ".")


def parse_price(price: str) -> Optional[Decimal]:
    """
    Parse a price field, "," or "." accepted as separator.

    Fields without a separator carry two implied decimals ("002599" -> 25.99).
    Returns None when the field is not a plain unsigned number.
    """
    s = _normalize_price(price)
    if _DECIMAL_PRICE.fullmatch(s):
        return Decimal(s)
    if _IMPLIED_DECIMAL_PRICE.fullmatch(s):
        return Decimal(s).scaleb(-2)
    return None


def decode_line(line: str) -> DecodedLine:
    """Split a 40-character product record into its three fields."""
    if len(line) != RECORD_LENGTH:
        raise LineLengthError(len(line), RECORD_LENGTH)
    return DecodedLine(
        code=line[CODE_FIELD],
        name=sanitize_name(line[NAME_FIELD]),
        price=_normalize_price(line[PRICE_FIELD]),
    )


def format_product_code(code: str) -> str:
    return str(code).strip().zfill(CODE_LENGTH)


def format_quantity(quantity, unit_type: UnitType) -> str:
    # UNIT quantities are whole items: truncate before rendering
    q = Decimal(str(quantity))
    if UnitType(unit_type) == UnitType.UNIT:
        q = q.to_integral_value(rounding=ROUND_DOWN)
    return f"{q.quantize(_THREE_PLACES, rounding=ROUND_HALF_UP):.3f}"


def encode_export_line(code: str, quantity, unit_type: UnitType) -> str:
    return f"{EXPORT_PREFIX} {format_product_code(code)} {format_quantity(quantity, unit_type)}"
