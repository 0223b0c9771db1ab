"""
Table definitions for the record store.

Each table is described by a plain tuple of FieldSpec entries
(field name -> column name -> type). The SQLAlchemy Table objects are built
from those descriptors and rows are mapped back to field names by
``map_row`` so no ORM class mapping is involved.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NamedTuple, Sequence
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Table

from .db import metadata


class UnitType(str, Enum):
    WEIGHT = "KG"
    UNIT = "UN"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FieldSpec(NamedTuple):
    field: str
    column: str
    type_: Any
    options: dict = {}


PRODUCT_FIELDS = (
    FieldSpec("id", "id", Integer, {"primary_key": True, "autoincrement": True}),
    FieldSpec("code", "product_code", String(13), {"nullable": False, "index": True}),
    FieldSpec("name", "product_name", String(120), {"nullable": False, "index": True}),
    FieldSpec("regular_price", "regular_price", Numeric(10, 2), {"nullable": False}),
    FieldSpec("club_price", "club_price", Numeric(10, 2), {"nullable": False, "default": 0}),
    FieldSpec("unit_type", "unit_type", String(2), {"nullable": False, "default": UnitType.UNIT.value}),
    FieldSpec("status", "status", String(10), {"nullable": False, "default": ProductStatus.ACTIVE.value, "index": True}),
    FieldSpec("created_at", "created_at", DateTime, {"nullable": False, "default": utcnow}),
    FieldSpec("updated_at", "updated_at", DateTime, {"nullable": False, "default": utcnow, "onupdate": utcnow}),
    FieldSpec("deleted_at", "deleted_at", DateTime, {"nullable": True}),
    FieldSpec("restored_at", "restored_at", DateTime, {"nullable": True}),
)

REASON_FIELDS = (
    FieldSpec("id", "id", Integer, {"primary_key": True, "autoincrement": True}),
    FieldSpec("code", "code", String(2), {"nullable": False, "unique": True}),
    FieldSpec("description", "description", String(120), {"nullable": False}),
    FieldSpec("created_at", "created_at", DateTime, {"nullable": False, "default": utcnow}),
    FieldSpec("updated_at", "updated_at", DateTime, {"nullable": False, "default": utcnow, "onupdate": utcnow}),
)

ENTRY_FIELDS = (
    FieldSpec("id", "id", Integer, {"primary_key": True, "autoincrement": True}),
    FieldSpec("product_code", "product_code_value", String(13), {"nullable": False, "index": True}),
    FieldSpec("product_name", "product_name", String(120), {"nullable": False}),
    FieldSpec("quantity", "quantity", Numeric(12, 3), {"nullable": False}),
    FieldSpec("reason_id", "linked_reason_id", Integer, {"nullable": False, "index": True}),
    FieldSpec("entry_date", "entry_date", DateTime, {"nullable": False, "default": utcnow, "index": True}),
    FieldSpec("flushed", "is_synchronized", Boolean, {"nullable": False, "default": False}),
    FieldSpec("chosen_unit_type", "chosen_unit_type", String(2), {"nullable": True}),
)

IMPORT_FIELDS = (
    FieldSpec("id", "id", Integer, {"primary_key": True, "autoincrement": True}),
    FieldSpec("file_name", "file_name", String(255), {"nullable": False}),
    FieldSpec("import_date", "import_date", DateTime, {"nullable": False, "default": utcnow}),
    FieldSpec("items_inserted", "items_inserted", Integer, {"nullable": False, "default": 0}),
    FieldSpec("items_updated", "items_updated", Integer, {"nullable": False, "default": 0}),
    FieldSpec("source", "source", String(50), {"nullable": False, "default": "file"}),
)

SCHEMA = {
    "products": PRODUCT_FIELDS,
    "reasons": REASON_FIELDS,
    "entries": ENTRY_FIELDS,
    "imports": IMPORT_FIELDS,
}


def build_table(name: str, fields: Sequence[FieldSpec]) -> Table:
    return Table(name, metadata, *(Column(f.column, f.type_, **f.options) for f in fields))


TABLES = {name: build_table(name, fields) for name, fields in SCHEMA.items()}

products = TABLES["products"]
reasons = TABLES["reasons"]
entries = TABLES["entries"]
imports = TABLES["imports"]


def map_row(fields: Sequence[FieldSpec], table: Table, row) -> dict:
    """Translate a result row into a dict keyed by field names."""
    mapping = row._mapping
    return {f.field: mapping[table.c[f.column]] for f in fields}


def to_columns(fields: Sequence[FieldSpec], values: dict) -> dict:
    """Translate field-name keyed values into column-name keyed values."""
    by_field = {f.field: f.column for f in fields}
    unknown = set(values) - set(by_field)
    if unknown:
        raise KeyError(f"unknown fields: {sorted(unknown)}")
    return {by_field[k]: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}
