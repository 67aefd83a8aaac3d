"""Tests for IdentifierAllocator: per-conversion and persisted id uniqueness."""

from datetime import datetime
from uuid import UUID

import pytest

from shopfloor_ingestion.services import IdentifierAllocator
from shopfloor_kernel.models import WorkOrder
from shopfloor_kernel.selectors import EntitySelector, EntityTable


@pytest.fixture
def allocator(session):
    session.add_all(
        [
            WorkOrder(id="WO1", name="Kitchen", imported_date=datetime(2025, 6, 1)),
            WorkOrder(id="WO1_1", name="Kitchen 2", imported_date=datetime(2025, 6, 2)),
        ]
    )
    session.commit()
    return IdentifierAllocator(EntitySelector(session))


class TestClaim:
    def test_free_id_kept(self, allocator):
        assert allocator.claim(EntityTable.PRODUCT, "P1") == "P1"
        assert allocator.renamed == {}

    def test_persisted_id_rewritten_past_every_taken_variant(self, allocator, captured_logs):
        assert allocator.claim(EntityTable.WORK_ORDER, "WO1") == "WO1_2"
        assert allocator.renamed == {(EntityTable.WORK_ORDER, "WO1"): "WO1_2"}
        renamed = [r for r in captured_logs() if r["message"] == "identifier_renamed"]
        assert renamed[0]["final_id"] == "WO1_2"

    def test_claims_within_one_conversion(self, allocator):
        claimed = [allocator.claim(EntityTable.PART, "X1") for _ in range(3)]
        assert claimed == ["X1", "X1_1", "X1_2"]

    def test_tables_are_independent(self, allocator):
        assert allocator.claim(EntityTable.PART, "WO1") == "WO1"
        assert allocator.claim(EntityTable.PRODUCT, "X1") == "X1"
        assert allocator.claim(EntityTable.PART, "X1") == "X1"

    def test_generate_returns_fresh_uuid(self, allocator):
        first = allocator.generate(EntityTable.HARDWARE)
        second = allocator.generate(EntityTable.HARDWARE)
        assert first != second
        assert UUID(first).version == 4
