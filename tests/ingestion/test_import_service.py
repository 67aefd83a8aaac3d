"""
End-to-end tests for ImportService: parse, preview and import a full export.
"""

from datetime import datetime

import pytest
from sqlalchemy import func, select

from shopfloor_config.schema import DatabaseSettings, ImportSettings
from shopfloor_ingestion.domain.types import RawImportBundle, SelectionItemType
from shopfloor_ingestion.services import build_full_selection, build_import_service
from shopfloor_kernel.db.engine import reset_engine, session_scope
from shopfloor_kernel.models import (
    DetachedProduct,
    Hardware,
    NestSheet,
    Part,
    PartStatus,
    Product,
    Subassembly,
    WorkOrder,
)


@pytest.fixture
def kitchen_export(rows):
    """Two base cabinets, a drawer bank, a filler strip and loose hardware."""
    return RawImportBundle(
        products=[
            rows.product("B1", qty=2, name="Base 600", work_order_name="Kitchen"),
            rows.product("D1", name="Drawer Bank"),
            rows.product("F1", name="Filler"),
        ],
        subassemblies=[rows.subassembly("DR", "D1", qty=3, name="Drawer Box")],
        parts=[
            rows.part("B1-SIDE", product_id="B1", qty=2, edges=("Top",)),
            rows.part("B1-BOTTOM", product_id="B1"),
            rows.part("DR-FRONT", subassembly_id="DR", name="Drawer Front"),
            rows.part("DR-BACK", subassembly_id="DR"),
            rows.part("F1-STRIP", product_id="F1"),
        ],
        hardware=[
            rows.hardware("H-HINGE", product_id="B1", qty=2),
            rows.hardware("H-SLIDE", product_id="D1", subassembly_id="DR"),
            rows.hardware("H-SCREWS", qty=200),
        ],
        nest_sheets=[rows.sheet("N1"), rows.sheet("N2")],
        optimization_results=[
            rows.placement("B1-SIDE", "N1"),
            rows.placement("B1-SIDE", "N2"),
            rows.placement("DR-FRONT", "N2"),
        ],
    )


class TestParse:
    def test_parse_does_not_persist(self, import_service, session, kitchen_export):
        tree = import_service.parse(kitchen_export)

        assert tree.id == "WO100"
        assert tree.name == "Kitchen"
        assert [p.id for p in tree.products] == ["B1", "D1"]
        assert [d.id for d in tree.detached_products] == ["F1"]
        assert session.scalar(select(func.count()).select_from(WorkOrder)) == 0

    def test_full_selection_covers_every_node(self, import_service, kitchen_export):
        tree = import_service.parse(kitchen_export)

        selection = build_full_selection(tree)

        assert selection.work_order_name == "Kitchen"
        assert selection.allow_duplicates is False
        assert selection.items["F1"] is SelectionItemType.DETACHED_PRODUCT
        assert selection.items["N2"] is SelectionItemType.NEST_SHEET
        assert selection.items["H-SCREWS"] is SelectionItemType.HARDWARE
        assert set(selection.items) == tree.all_item_ids()


class TestImportAll:
    def test_full_kitchen_import(self, import_service, session, kitchen_export):
        result = import_service.import_all(kitchen_export)

        assert result.success, result.errors
        assert result.work_order_id == "WO100"
        assert result.warnings == ()
        stats = result.statistics
        assert stats.converted_products == 3  # B1_1, B1_2, D1
        assert stats.converted_subassemblies == 3
        assert stats.converted_detached_products == 1
        assert stats.converted_nest_sheets == 2
        assert stats.converted_hardware == 2 + 3 + 1
        assert stats.converted_parts == 4 + 6 + 1

        assert session.scalar(select(func.count()).select_from(Product)) == 3
        assert session.scalar(select(func.count()).select_from(Subassembly)) == 3
        assert session.scalar(select(func.count()).select_from(Hardware)) == 6
        assert session.scalar(select(func.count()).select_from(DetachedProduct)) == 1
        assert session.scalar(select(func.count()).select_from(Part)) == 11

        assert session.get(Part, "B1-SIDE_1").nest_sheet_id == "N1"
        assert session.get(Part, "B1-SIDE_2").nest_sheet_id == "N2"
        assert session.get(Part, "DR-FRONT_3").nest_sheet_id == "N2"
        assert session.get(Part, "B1-BOTTOM_1").nest_sheet_id == "N1"
        assert session.get(Part, "B1-SIDE_1").qty == 2
        assert session.scalars(select(NestSheet.barcode)).all().count("DEFAULT") == 0

    def test_everything_starts_pending(self, import_service, session, kitchen_export):
        import_service.import_all(kitchen_export)

        for model in (Product, Part, Hardware, DetachedProduct):
            statuses = set(session.scalars(select(model.status)))
            assert statuses == {PartStatus.PENDING.value}, model.__name__

        work_order = session.get(WorkOrder, "WO100")
        assert work_order.is_archived is False
        assert sorted(s.id for s in work_order.nest_sheets) == ["N1", "N2"]

    def test_name_override(self, import_service, session, kitchen_export):
        result = import_service.import_all(kitchen_export, "Kitchen Remodel")

        assert result.success
        assert session.get(WorkOrder, "WO100").name == "Kitchen Remodel"

    def test_empty_export_fails_validation(self, import_service):
        result = import_service.import_all(RawImportBundle())

        assert not result.success
        assert result.errors == ("At least one item must be selected for import",)


class TestBuildImportService:
    @pytest.fixture
    def sqlite_settings(self):
        settings = ImportSettings(database=DatabaseSettings(url="sqlite://"), log_level="DEBUG")
        yield settings
        reset_engine()

    def test_wires_engine_from_settings(self, sqlite_settings, deterministic_clock, rows):
        service = build_import_service(
            sqlite_settings, clock=deterministic_clock, create_schema=True
        )

        result = service.import_all(rows.cabinet("P1"))

        assert result.success, result.errors
        with session_scope() as s:
            assert s.get(WorkOrder, "WO100").imported_date == datetime(2025, 7, 1, 9, 30)
