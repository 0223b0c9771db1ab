"""Tests for the SQLAlchemy-backed record store."""
import pytest
from decimal import Decimal

from losstrack.errors import StorageError
from losstrack.models import PRODUCT_FIELDS, products, to_columns
from losstrack.store import to_array


def product_values(code="7890000000001", **overrides):
    values = {
        "code": code,
        "name": "ARROZ 5KG",
        "regular_price": Decimal("25.99"),
        "unit_type": "KG",
        "status": "active",
    }
    values.update(overrides)
    return values


class TestWrites:
    """Tests for batched writes."""

    def test_create_returns_field_names(self, store):
        with store.write():
            row = store.create("products", product_values())

        assert row["id"] is not None
        assert row["code"] == "7890000000001"
        assert row["name"] == "ARROZ 5KG"
        assert row["club_price"] == Decimal("0")
        assert row["created_at"] is not None
        assert row["deleted_at"] is None

    def test_write_outside_batch_rejected(self, store):
        with pytest.raises(StorageError):
            store.create("products", product_values())

    def test_exception_rolls_back_batch(self, store):
        with pytest.raises(RuntimeError):
            with store.write():
                store.create("products", product_values("7890000000001"))
                store.create("products", product_values("7890000000002"))
                raise RuntimeError("boom")

        assert store.query("products") == []

    def test_nested_write_joins_outer(self, store):
        with pytest.raises(RuntimeError):
            with store.write():
                with store.write():
                    store.create("products", product_values())
                raise RuntimeError("boom")

        assert store.query("products") == []

    def test_update(self, store):
        with store.write():
            row = store.create("products", product_values())
            updated = store.update("products", row["id"], {"name": "ARROZ 1KG"})

        assert updated["name"] == "ARROZ 1KG"
        assert updated["updated_at"] >= row["updated_at"]

    def test_update_missing_record(self, store):
        with pytest.raises(StorageError):
            with store.write():
                store.update("products", 999, {"name": "X"})

    def test_unknown_collection(self, store):
        with pytest.raises(StorageError):
            store.query("invoices")


class TestQuery:
    """Tests for lookups."""

    def test_filters_by_field_name(self, store):
        with store.write():
            store.create("products", product_values("7890000000001"))
            store.create("products", product_values("7890000000002", status="deleted"))

        rows = store.query("products", status="active")
        assert [r["code"] for r in rows] == ["7890000000001"]

    def test_none_filter_matches_null(self, store):
        with store.write():
            store.create("products", product_values("7890000000001"))

        assert len(store.query("products", deleted_at=None)) == 1

    def test_find(self, store):
        with store.write():
            row = store.create("products", product_values())

        assert store.find("products", row["id"])["code"] == "7890000000001"
        assert store.find("products", 12345) is None


class TestMapping:
    """Tests for the field/column descriptors."""

    def test_columns_renamed(self):
        assert to_columns(PRODUCT_FIELDS, {"code": "1", "name": "X"}) == {
            "product_code": "1",
            "product_name": "X",
        }

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            to_columns(PRODUCT_FIELDS, {"sku": "1"})

    def test_table_built_from_descriptors(self):
        assert "product_code" in products.c
        assert "code" not in products.c


class TestToArray:
    """Tests for result shape normalization."""

    def test_none(self):
        assert to_array(None) == []

    def test_list(self):
        assert to_array([{"id": 1}]) == [{"id": 1}]

    def test_single_dict(self):
        assert to_array({"id": 1}) == [{"id": 1}]

    def test_iterable_of_pairs(self):
        assert to_array(iter([[("id", 1)]])) == [{"id": 1}]
