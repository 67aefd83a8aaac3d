"""
Pytest fixtures for the shop-floor import test suite.

Provides:
- An in-memory SQLite engine per test (tables created from metadata)
- Sessions, session factory and a deterministic clock
- Row factories producing CAD export rows keyed by physical column names
- Structured log capture
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO
from typing import Any

import pytest

from shopfloor_config.schema import ImportSettings
from shopfloor_ingestion.domain.types import RawImportBundle
from shopfloor_ingestion.services.import_service import ImportService
from shopfloor_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from shopfloor_kernel.domain.clock import DeterministicClock
from shopfloor_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

FIXED_NOW = datetime(2025, 7, 1, 9, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture shopfloor logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, import_service):
            import_service.import_all(bundle)
            logs = captured_logs()
            assert any(r["message"] == "conversion_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("shopfloor")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory database with every table created."""
    eng = init_engine_from_url("sqlite://")
    create_tables(eng)
    yield eng
    drop_tables(eng)
    reset_engine()


@pytest.fixture
def session_factory(engine):
    return get_session_factory()


@pytest.fixture
def session(session_factory):
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def settings():
    return ImportSettings()


@pytest.fixture
def import_service(session_factory, settings, deterministic_clock):
    return ImportService(session_factory, settings=settings, clock=deterministic_clock)


# =============================================================================
# Export row factories
# =============================================================================


class RowFactory:
    """Builds export rows with the physical column names a CAD export uses."""

    def product(
        self,
        link_id: str,
        qty: Any = 1,
        name: str | None = None,
        work_order_id: str = "WO100",
        work_order_name: str | None = None,
        item_number: str = "",
    ) -> dict[str, Any]:
        row = {
            "LinkID": link_id,
            "LinkIDWorkOrder": work_order_id,
            "Name": name if name is not None else f"Cabinet {link_id}",
            "ItemNumber": item_number or f"C-{link_id}",
            "Quantity": qty,
            "Width": "600",
            "Height": "720",
        }
        if work_order_name is not None:
            row["WorkOrderName"] = work_order_name
        return row

    def subassembly(
        self,
        link_id: str,
        product_id: str,
        parent_id: str = "",
        qty: Any = 1,
        name: str | None = None,
    ) -> dict[str, Any]:
        return {
            "LinkID": link_id,
            "LinkIDParentProduct": product_id,
            "LinkIDParentSubassembly": parent_id,
            "Name": name if name is not None else f"Drawer {link_id}",
            "Quantity": qty,
        }

    def part(
        self,
        link_id: str,
        product_id: str = "",
        subassembly_id: str = "",
        qty: Any = 1,
        name: str | None = None,
        material: str = "Maple Ply",
        edges: tuple[str, ...] = (),
    ) -> dict[str, Any]:
        row = {
            "LinkID": link_id,
            "LinkIDProduct": product_id,
            "LinkIDSubAssembly": subassembly_id,
            "Name": name if name is not None else f"Panel {link_id}",
            "Quantity": qty,
            "MaterialName": material,
            "MaterialThickness": "18",
            "Width": "300.5",
            "Length": "700",
        }
        for side in edges:
            row[f"EdgeName{side}"] = "0.5mm Maple"
        return row

    def hardware(
        self,
        link_id: str,
        product_id: str = "",
        subassembly_id: str = "",
        qty: Any = 1,
        name: str | None = None,
    ) -> dict[str, Any]:
        return {
            "LinkID": link_id,
            "LinkIDProduct": product_id,
            "LinkIDSubAssembly": subassembly_id,
            "Name": name if name is not None else f"Hinge {link_id}",
            "Quantity": qty,
        }

    def sheet(
        self,
        link_id: str,
        file_name: str | None = None,
        name: str = "Maple Ply 18mm",
        barcode: str | None = None,
    ) -> dict[str, Any]:
        row = {
            "LinkID": link_id,
            "Name": name,
            "FileName": file_name if file_name is not None else f"{link_id}.nc",
            "Width": "1220",
            "Length": "2440",
            "Thickness": "18",
        }
        if barcode is not None:
            row["BarCode"] = barcode
        return row

    def placement(self, part_id: str, sheet_id: str) -> dict[str, Any]:
        return {"LinkIDPart": part_id, "LinkIDSheet": sheet_id}

    def cabinet(self, link_id: str, qty: Any = 1, **product_kwargs: Any) -> RawImportBundle:
        """Single product with two direct parts (so it is not detached)."""
        return RawImportBundle(
            products=[self.product(link_id, qty=qty, **product_kwargs)],
            parts=[
                self.part(f"{link_id}-L", product_id=link_id),
                self.part(f"{link_id}-R", product_id=link_id),
            ],
        )


@pytest.fixture
def rows() -> RowFactory:
    return RowFactory()
