"""
Tests for quantity expansion: logical quantities to physical instances.
"""

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from shopfloor_ingestion.domain import expand, instance_count


class TestInstanceCount:
    def test_single_units(self):
        for quantity in (1, 0, -3, None, "x", True):
            assert instance_count(quantity) == 1

    def test_numeric_strings(self):
        assert instance_count("4") == 4


class TestExpand:
    def test_quantity_one_keeps_id_and_name(self):
        [instance] = expand("P1", "Base Cabinet", 1)
        assert instance.id == "P1"
        assert instance.name == "Base Cabinet"
        assert instance.suffix == ""

    def test_quantity_three(self):
        instances = expand("P1", "Base Cabinet", 3)
        assert [i.id for i in instances] == ["P1_1", "P1_2", "P1_3"]
        assert [i.name for i in instances] == [
            "Base Cabinet (Instance 1)",
            "Base Cabinet (Instance 2)",
            "Base Cabinet (Instance 3)",
        ]

    def test_inherited_suffix_accumulates(self):
        instances = expand("S1", "Drawer", 2, inherited_suffix="_1")
        assert [i.id for i in instances] == ["S1_1_1", "S1_1_2"]
        assert instances[1].suffix == "_1_2"

    def test_single_child_inherits_parent_suffix(self):
        [instance] = expand("S1", "Drawer", 1, inherited_suffix="_2")
        assert instance.id == "S1_2"
        assert instance.name == "Drawer"


class TestExpansionProperties:
    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(st.integers(min_value=-5, max_value=60))
    def test_instance_count_is_never_below_one(self, quantity):
        assert len(expand("P", "Product", quantity)) == max(quantity, 1)

    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        st.integers(min_value=2, max_value=40),
        st.text(alphabet="_0123456789", max_size=6),
    )
    def test_instance_ids_unique_and_prefixed(self, quantity, inherited):
        instances = expand("P", "Product", quantity, inherited)
        ids = [i.id for i in instances]
        assert len(set(ids)) == quantity
        assert all(i.id.startswith(f"P{inherited}_") for i in instances)
        assert [i.index for i in instances] == list(range(1, quantity + 1))
