"""
Tests for FieldResolver: logical-to-physical column lookup and typed accessors.
"""

from decimal import Decimal

import pytest

from shopfloor_ingestion.domain.types import TableType
from shopfloor_ingestion.mapping import FieldResolver
from shopfloor_kernel.exceptions import UnknownTableTypeError


@pytest.fixture
def resolver():
    return FieldResolver()


class TestResolve:
    def test_aliases_share_physical_column(self, resolver):
        assert resolver.resolve(TableType.PRODUCTS, "Id") == "LinkID"
        assert resolver.resolve(TableType.PRODUCTS, "ProductId") == "LinkID"

    def test_dimension_aliases(self, resolver):
        assert resolver.resolve(TableType.PRODUCTS, "Length") == "Height"
        assert resolver.resolve(TableType.PARTS, "Height") == "Length"
        assert resolver.resolve(TableType.PARTS, "Thickness") == "MaterialThickness"

    def test_table_tag_is_case_insensitive(self, resolver):
        assert resolver.resolve("parts", "SubassemblyId") == "LinkIDSubAssembly"

    def test_nestsheets_alias_for_placed_sheets(self, resolver):
        assert resolver.resolve("NESTSHEETS", "Material") == "Name"
        assert TableType.parse("NestSheets") is TableType.PLACEDSHEETS

    def test_unmapped_name_passes_through_with_warning(self, resolver, captured_logs):
        assert resolver.resolve(TableType.HARDWARE, "Finish") == "Finish"
        missing = [r for r in captured_logs() if r["message"] == "field_mapping_missing"]
        assert missing[0]["table_type"] == "HARDWARE"
        assert missing[0]["logical_name"] == "Finish"

    def test_unknown_table_type(self, resolver):
        with pytest.raises(UnknownTableTypeError) as exc_info:
            resolver.resolve("DOORS", "Id")
        assert exc_info.value.code == "UNKNOWN_TABLE_TYPE"


class TestTypedAccessors:
    def test_get_string_missing_value_is_empty(self, resolver):
        row = {"LinkID": "P1", "Name": None}
        assert resolver.get_string(row, TableType.PRODUCTS, "Id") == "P1"
        assert resolver.get_string(row, TableType.PRODUCTS, "Name") == ""
        assert resolver.get_string(row, TableType.PRODUCTS, "ItemNumber") == ""

    def test_get_string_unmapped_field_is_silent(self, resolver, captured_logs):
        assert resolver.get_string({"Finish": "Oak"}, TableType.PARTS, "Finish") == ""
        assert not any(r["message"] == "field_mapping_missing" for r in captured_logs())

    def test_get_string_stringifies(self, resolver):
        assert resolver.get_string({"LinkID": 42}, TableType.PARTS, "Id") == "42"

    @pytest.mark.parametrize(
        "raw, expected",
        [(3, 3), ("4", 4), (" 5 ", 5), (2.0, 2), (None, 1), ("lots", 1), (2.5, 1), (True, 1)],
    )
    def test_get_int(self, resolver, raw, expected):
        assert resolver.get_int({"Quantity": raw}, TableType.PARTS, "Quantity") == expected

    def test_get_int_missing_column_defaults_to_one(self, resolver):
        assert resolver.get_int({}, TableType.PRODUCTS, "Quantity") == 1

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("718.5", Decimal("718.5")),
            (600, Decimal(600)),
            (Decimal("12.25"), Decimal("12.25")),
            ("", Decimal(0)),
            (None, Decimal(0)),
            ("wide", Decimal(0)),
            ("NaN", Decimal(0)),
            ("Infinity", Decimal(0)),
        ],
    )
    def test_get_decimal(self, resolver, raw, expected):
        assert resolver.get_decimal({"Width": raw}, TableType.PARTS, "Width") == expected


class TestEdgeBanding:
    def test_code_lists_banded_sides_in_order(self, resolver, rows):
        row = rows.part("X1", edges=("Left", "Top"))
        assert resolver.edge_banding_code(row) == "Top,Left"

    def test_blank_edge_names_are_unbanded(self, resolver):
        row = {"EdgeNameTop": "  ", "EdgeNameRight": "1mm PVC"}
        assert resolver.edge_banding_code(row) == "Right"

    def test_no_edges(self, resolver, rows):
        assert resolver.edge_banding_code(rows.part("X1")) == ""
