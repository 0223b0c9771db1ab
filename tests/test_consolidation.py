"""Tests for per-product consolidation of loss entries."""
from datetime import datetime, timedelta
from decimal import Decimal

from losstrack.consolidation import consolidate
from losstrack.schemas import EntryRecord


def entry(entry_id, code, quantity, days_ago=0):
    return EntryRecord(
        id=entry_id,
        product_code=code,
        product_name=f"PRODUCT {code[-1]}",
        quantity=Decimal(quantity),
        reason_id=1,
        entry_date=datetime(2026, 10, 18) - timedelta(days=days_ago),
    )


class TestConsolidate:
    """Tests for grouping and summing."""

    def test_groups_and_sums(self):
        groups = consolidate([
            entry(1, "0000000000001", "2"),
            entry(2, "0000000000002", "1"),
            entry(3, "0000000000001", "3"),
        ])
        assert [(g.product_code, g.quantity) for g in groups] == [
            ("0000000000001", Decimal("5")),
            ("0000000000002", Decimal("1")),
        ]

    def test_keeps_entry_ids(self):
        groups = consolidate([
            entry(1, "0000000000001", "2"),
            entry(2, "0000000000002", "1"),
            entry(3, "0000000000001", "3"),
        ])
        assert groups[0].entry_ids == [1, 3]
        assert groups[1].entry_ids == [2]

    def test_first_appearance_order(self):
        groups = consolidate([
            entry(1, "0000000000009", "1"),
            entry(2, "0000000000001", "1"),
        ])
        assert [g.product_code for g in groups] == ["0000000000009", "0000000000001"]

    def test_dates_ignored(self):
        groups = consolidate([
            entry(1, "0000000000001", "1.250", days_ago=10),
            entry(2, "0000000000001", "0.750", days_ago=0),
        ])
        assert len(groups) == 1
        assert groups[0].quantity == Decimal("2.000")

    def test_product_name_from_first_entry(self):
        groups = consolidate([entry(1, "0000000000001", "1")])
        assert groups[0].product_name == "PRODUCT 1"

    def test_empty(self):
        assert consolidate([]) == []
