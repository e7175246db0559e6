"""Deliverable Registry — the fixed catalog of artifacts a user can request.

Catalog order is significant: it drives the checkbox order in the UI and the
order result tabs are shown in. Prompt fragments may reference
``{hdl_language}`` and ``{simulation_tool}``.
"""

from typing import NamedTuple

from rtlforge.state import Deliverable


class DeliverableSpec(NamedTuple):
    id: str
    name: str
    default_checked: bool
    fragment: str


CATALOG: tuple[DeliverableSpec, ...] = (
    DeliverableSpec("rtlCode", "VHDL/Verilog Code", True, "RTL Code in {hdl_language}"),
    DeliverableSpec("testbench", "UVM Testbench", True, "SystemVerilog/UVM Testbench"),
    DeliverableSpec("testPlan", "Test Plan", False, "Verification Test Plan (in Markdown)"),
    DeliverableSpec("stateDiagram", "State Diagram", False, "State Diagram (in Mermaid.js syntax)"),
    DeliverableSpec("functionalCoverage", "Func. Coverage", False, "Functional Coverage Model (SystemVerilog)"),
    DeliverableSpec("svaAssertions", "SVA Assertions", False, "SystemVerilog Assertions (SVA)"),
    DeliverableSpec("simulationScripts", "Sim Scripts", False, "Simulation Scripts for {simulation_tool}"),
    DeliverableSpec("designSpec", "Design Spec", False, "Design Specification (in Markdown)"),
    DeliverableSpec("synthesisReport", "Synthesis Report", False, "Synthesis & Timing Report (in Markdown)"),
    DeliverableSpec("lintReport", "Lint Report", False, "RTL Lint & Code Quality Report (in Markdown)"),
    DeliverableSpec("scoreboardLog", "Scoreboard Log", False, "Example Scoreboard Log (Plain Text)"),
    DeliverableSpec("waveformSummary", "Waveform Summary", False, "Waveform Behavior Summary (in Markdown)"),
    DeliverableSpec("outputTable", "Output Table", False, "Test Results Summary Table (in Markdown)"),
)

# Advertised in the response schema and understood by the prompt builder,
# but not offered as checkboxes.
EXTRA: tuple[DeliverableSpec, ...] = (
    DeliverableSpec("testCases", "Test Cases", False, "Test Cases Description (in Markdown)"),
    DeliverableSpec("performanceReport", "Performance Report", False, "Performance and Resource Analysis Report (Markdown)"),
)

EXPLORATION_ID = "explorationResult"
EXPLORATION_NAME = "Architecture Exploration"
SIMULATION_SCRIPTS_ID = "simulationScripts"

_BY_ID = {spec.id: spec for spec in CATALOG + EXTRA}


def all_ids() -> list[str]:
    """Every id the response schema advertises, catalog first."""
    return [spec.id for spec in CATALOG + EXTRA]


def catalog_ids() -> list[str]:
    """Ids offered in the UI, in catalog order."""
    return [spec.id for spec in CATALOG]


def default_ids() -> list[str]:
    """Ids selected by default, in catalog order."""
    return [spec.id for spec in CATALOG if spec.default_checked]


def default_deliverables() -> list[Deliverable]:
    """Fresh deliverable list with catalog defaults."""
    return [
        {"id": spec.id, "name": spec.name, "checked": spec.default_checked}
        for spec in CATALOG
    ]


def get_display_name(deliverable_id: str) -> str:
    if deliverable_id == EXPLORATION_ID:
        return EXPLORATION_NAME
    spec = _BY_ID.get(deliverable_id)
    return spec.name if spec else deliverable_id


def get_prompt_fragment(
    deliverable_id: str, hdl_language: str = "Verilog", simulation_tool: str = "ModelSim"
) -> str:
    """Return the instruction phrase for a deliverable id.

    Unknown ids echo back unchanged.
    """
    spec = _BY_ID.get(deliverable_id)
    if spec is None:
        return deliverable_id
    return spec.fragment.format(hdl_language=hdl_language, simulation_tool=simulation_tool)
