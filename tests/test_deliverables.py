"""Tests for rtlforge.deliverables: the fixed catalog and fragment lookup."""

from rtlforge.deliverables import (
    CATALOG,
    EXPLORATION_ID,
    all_ids,
    catalog_ids,
    default_deliverables,
    default_ids,
    get_display_name,
    get_prompt_fragment,
)


class TestCatalog:
    def test_catalog_has_thirteen_entries(self):
        assert len(CATALOG) == 13

    def test_ids_are_unique(self):
        assert len(set(all_ids())) == len(all_ids())

    def test_catalog_order_starts_with_rtl_and_testbench(self):
        assert catalog_ids()[:4] == ["rtlCode", "testbench", "testPlan", "stateDiagram"]

    def test_default_ids(self):
        assert default_ids() == ["rtlCode", "testbench"]

    def test_all_ids_includes_schema_only_entries(self):
        ids = all_ids()
        assert "testCases" in ids
        assert "performanceReport" in ids
        assert ids[:13] == catalog_ids()

    def test_exploration_id_not_in_registry(self):
        assert EXPLORATION_ID not in all_ids()

    def test_default_deliverables_are_fresh_copies(self):
        first = default_deliverables()
        first[0]["checked"] = False
        assert default_deliverables()[0]["checked"] is True

    def test_default_deliverables_shape(self):
        for d in default_deliverables():
            assert set(d) == {"id", "name", "checked"}


class TestLookup:
    def test_display_name(self):
        assert get_display_name("testbench") == "UVM Testbench"

    def test_display_name_for_exploration(self):
        assert get_display_name(EXPLORATION_ID) == "Architecture Exploration"

    def test_display_name_unknown_echoes_id(self):
        assert get_display_name("mystery") == "mystery"

    def test_every_id_has_a_fragment(self):
        for d in all_ids():
            assert get_prompt_fragment(d) != d

    def test_fragment_substitutes_hdl_language(self):
        assert get_prompt_fragment("rtlCode", hdl_language="VHDL") == "RTL Code in VHDL"

    def test_fragment_substitutes_simulation_tool(self):
        fragment = get_prompt_fragment("simulationScripts", simulation_tool="Verilator")
        assert fragment == "Simulation Scripts for Verilator"

    def test_unknown_id_falls_back_to_raw_id(self):
        assert get_prompt_fragment("customThing") == "customThing"
