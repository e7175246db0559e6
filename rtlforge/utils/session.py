"""Session helpers — form state defaults/restore, derived values, request sequencing.

The dashboard keeps one AppState per browser session and recomputes every
derived value (selected ids, simulator flag, tab order) from it on each rerun.
"""

import logging
from concurrent.futures import Future

from rtlforge.deliverables import (
    CATALOG,
    EXPLORATION_ID,
    SIMULATION_SCRIPTS_ID,
    all_ids,
    default_deliverables,
)
from rtlforge.errors import ForgeError
from rtlforge.state import HDL_LANGUAGES, MODES, AppState, Deliverable, GenerationRequest, GenerationResult

log = logging.getLogger(__name__)

GENERATE_MESSAGES = (
    "Analyzing requirements...",
    "Synthesizing RTL...",
    "Building UVM environment...",
    "Generating assertions & coverage...",
    "Writing simulation scripts...",
    "Finalizing documentation...",
)
EXPLORE_MESSAGES = (
    "Considering architectural trade-offs...",
    "Evaluating performance characteristics...",
    "Analyzing area and power constraints...",
    "Formulating design proposals...",
    "Comparing implementation strategies...",
)

STALE_NOTICE = "The form changed while the request was running, so its reply was discarded."


def default_app_state(defaults: dict | None = None) -> AppState:
    """Fresh form state from the config ``defaults`` section."""
    defaults = defaults or {}
    return {
        "description": defaults.get("description", ""),
        "hdl_language": defaults.get("hdl_language", "Verilog"),
        "protocol": defaults.get("protocol", "None"),
        "architecture": defaults.get("architecture", "None"),
        "simulation_tool": defaults.get("simulation_tool", "ModelSim"),
        "thinking_mode": bool(defaults.get("thinking_mode", False)),
        "operation_mode": defaults.get("operation_mode", "generate"),
        "deliverables": default_deliverables(),
    }


def restore_deliverables(saved) -> list[Deliverable]:
    """Map persisted checkbox state onto the current catalog.

    Catalog order and names always win. Persisted ids no longer in the catalog
    are dropped; catalog entries absent from the saved list keep their default.
    """
    checked_by_id = {}
    if isinstance(saved, list):
        for entry in saved:
            if isinstance(entry, dict) and isinstance(entry.get("checked"), bool):
                checked_by_id[entry.get("id")] = entry["checked"]

    return [
        {
            "id": spec.id,
            "name": spec.name,
            "checked": checked_by_id.get(spec.id, spec.default_checked),
        }
        for spec in CATALOG
    ]


def restore_app_state(saved: dict | None, defaults: dict | None = None) -> AppState:
    """Merge persisted state over defaults, field by field.

    Any field that is missing or has the wrong type falls back to its default.
    """
    state = default_app_state(defaults)
    if not saved:
        return state

    for field in ("description", "protocol", "architecture", "simulation_tool"):
        value = saved.get(field)
        if isinstance(value, str) and value:
            state[field] = value

    if saved.get("hdl_language") in HDL_LANGUAGES:
        state["hdl_language"] = saved["hdl_language"]
    if saved.get("operation_mode") in MODES:
        state["operation_mode"] = saved["operation_mode"]
    if isinstance(saved.get("thinking_mode"), bool):
        state["thinking_mode"] = saved["thinking_mode"]
    if "deliverables" in saved:
        state["deliverables"] = restore_deliverables(saved["deliverables"])

    return state


def require_description(description) -> str:
    """Trimmed design description; raises ValueError if empty or not a string."""
    if isinstance(description, str) and description.strip():
        return description.strip()
    raise ValueError("Design description must be a non-empty string.")


def selected_ids(deliverables: list[Deliverable]) -> list[str]:
    return [d["id"] for d in deliverables if d["checked"]]


def simulation_scripts_selected(deliverables: list[Deliverable]) -> bool:
    return SIMULATION_SCRIPTS_ID in selected_ids(deliverables)


def build_request(state: AppState) -> GenerationRequest:
    """Freeze the current form into a request.

    Raises ValueError if the description is empty after trimming.
    """
    return GenerationRequest(
        mode=state["operation_mode"],
        description=require_description(state["description"]),
        hdl_language=state["hdl_language"],
        deliverables=tuple(selected_ids(state["deliverables"])),
        protocol=state["protocol"],
        architecture=state["architecture"],
        simulation_tool=state["simulation_tool"],
        thinking_mode=state["thinking_mode"],
    )


def ordered_result_ids(result: dict) -> list[str]:
    """Result keys in catalog order; anything unknown goes last, as returned."""
    order = {d: i for i, d in enumerate(all_ids() + [EXPLORATION_ID])}
    return sorted(result, key=lambda key: order.get(key, len(order)))


def loading_messages(mode: str) -> tuple[str, ...]:
    return EXPLORE_MESSAGES if mode == "explore" else GENERATE_MESSAGES


class RequestTracker:
    """Sequence numbers for submissions, so a late reply never overwrites a newer one.

    Only one request may be in flight; ``begin`` returns None while one is.
    """

    def __init__(self):
        self.latest = 0
        self.in_flight: int | None = None

    @property
    def busy(self) -> bool:
        return self.in_flight is not None

    def begin(self) -> int | None:
        if self.busy:
            log.info("Ignoring submit: request #%d still in flight", self.in_flight)
            return None
        self.latest += 1
        self.in_flight = self.latest
        return self.latest

    def invalidate(self) -> None:
        """Mark every issued sequence number stale."""
        self.latest += 1

    def finish(self, seq: int) -> bool:
        """Settle request ``seq``. Returns True if its result should be applied."""
        if self.in_flight == seq:
            self.in_flight = None
        current = seq == self.latest
        if not current:
            log.warning("Discarding stale result for request #%d (latest is #%d)", seq, self.latest)
        return current


def settle_request(
    tracker: RequestTracker, seq: int, future: Future
) -> tuple[bool, GenerationResult | None, str | None]:
    """Collect a finished request and release the tracker.

    Returns ``(apply, result, error)``. ``apply`` is False when the request went
    stale. A ForgeError becomes the user-facing error message; anything else
    propagates.
    """
    result = None
    error = None
    try:
        result = future.result()
    except ForgeError as exc:
        log.error("Error processing request: %s", exc)
        error = f"Failed to generate content. {exc}"
    finally:
        current = tracker.finish(seq)
    return current, result, error
