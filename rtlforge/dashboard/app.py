"""RTL Forge — Streamlit UI for generating hardware design deliverables."""

import sys
from pathlib import Path

# Add project root to path so 'rtlforge' package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import logging
import time
from concurrent.futures import ThreadPoolExecutor

import streamlit as st
import streamlit.components.v1 as components

from rtlforge.agents.generator import HdlGenerator
from rtlforge.config import get_config, resolve_path
from rtlforge.deliverables import CATALOG, SIMULATION_SCRIPTS_ID, get_display_name
from rtlforge.errors import ConfigurationError, RenderError
from rtlforge.graph import process_request
from rtlforge.llm import GeminiClient
from rtlforge.logging_setup import setup_logging
from rtlforge.state import HDL_LANGUAGES, AppState, GenerationResult
from rtlforge.utils.persistence import JsonFileStore, PersistenceService
from rtlforge.utils.progress import progress_message
from rtlforge.utils.session import (
    STALE_NOTICE,
    RequestTracker,
    build_request,
    loading_messages,
    ordered_result_ids,
    restore_app_state,
    settle_request,
    simulation_scripts_selected,
)
from rtlforge.utils.viewers import MARKDOWN, MERMAID, code_language, mermaid_html, viewer_for

setup_logging()
log = logging.getLogger("rtlforge.dashboard")
config = get_config()

# Seconds between reruns while a request is in flight
POLL_SECONDS = 0.5

st.set_page_config(page_title="RTL Forge", layout="wide")
st.title("RTL Forge")
st.markdown(
    "Describe a digital circuit and pick your deliverables. **Gemini** generates "
    "synthesizable RTL, a UVM testbench, diagrams and reports, or explores "
    "competing microarchitectures for the problem."
)


# ---------------------------------------------------------------------------
# Session bootstrap
# ---------------------------------------------------------------------------


@st.cache_resource
def _get_persistence() -> PersistenceService:
    store = JsonFileStore(resolve_path(config.get("state_path", "./.rtlforge/state.json")))
    return PersistenceService(store, config.get("state_key", "rtlForgeAppState"))


@st.cache_resource
def _get_generator() -> HdlGenerator:
    return HdlGenerator(GeminiClient.from_config())


@st.cache_resource
def _get_executor() -> ThreadPoolExecutor:
    """Worker threads shared by all sessions; a request outlives the rerun that started it."""
    return ThreadPoolExecutor(max_workers=4, thread_name_prefix="rtlforge")


def _init_session() -> None:
    """Seed widget keys from the persisted form state, once per session."""
    if "tracker" in st.session_state:
        return
    form = restore_app_state(_get_persistence().load(), config.get("defaults"))
    st.session_state["tracker"] = RequestTracker()
    st.session_state["result"] = None
    st.session_state["error"] = None
    st.session_state["submitted_form"] = None
    st.session_state["pending"] = None
    st.session_state["notice"] = None
    st.session_state["description"] = form["description"]
    st.session_state["operation_mode"] = form["operation_mode"]
    st.session_state["hdl_language"] = form["hdl_language"]
    st.session_state["protocol"] = form["protocol"]
    st.session_state["architecture"] = form["architecture"]
    st.session_state["simulation_tool"] = form["simulation_tool"]
    st.session_state["thinking_mode"] = form["thinking_mode"]
    for d in form["deliverables"]:
        st.session_state[f"deliverable_{d['id']}"] = d["checked"]


def _options(key: str, current: str) -> list[str]:
    """Configured options, keeping a restored value that is no longer listed."""
    options = list(config.get(key, ["None"]))
    if current not in options:
        options.append(current)
    return options


def _set_description(example: str) -> None:
    st.session_state["description"] = example


try:
    generator = _get_generator()
except ConfigurationError as exc:
    st.error(f"Configuration error: {exc}")
    st.stop()

_init_session()
tracker: RequestTracker = st.session_state["tracker"]

st.divider()

# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

st.radio(
    "Mode",
    ["generate", "explore"],
    key="operation_mode",
    horizontal=True,
    format_func=lambda m: "Generate deliverables" if m == "generate" else "Explore architectures",
)

st.text_area(
    "Design description:",
    key="description",
    height=160,
    placeholder="Describe the digital circuit you want to build...",
)

example_cols = st.columns(len(config.get("example_prompts", [])) or 1)
for col, example in zip(example_cols, config.get("example_prompts", [])):
    col.button(example, on_click=_set_description, args=(example,), use_container_width=True)

# Always rendered (disabled in explore mode) so Streamlit keeps their state
exploring = st.session_state["operation_mode"] == "explore"

col_lang, col_proto, col_arch, col_sim = st.columns(4)
col_lang.selectbox("HDL language", list(HDL_LANGUAGES), key="hdl_language", disabled=exploring)
col_proto.selectbox(
    "Interface protocol",
    _options("protocols", st.session_state["protocol"]),
    key="protocol",
    disabled=exploring,
)
col_arch.selectbox(
    "Target architecture",
    _options("architectures", st.session_state["architecture"]),
    key="architecture",
    disabled=exploring,
)

st.markdown("**Deliverables**")
checkbox_cols = st.columns(4)
for i, spec in enumerate(CATALOG):
    checkbox_cols[i % 4].checkbox(spec.name, key=f"deliverable_{spec.id}", disabled=exploring)

# Simulator only matters when sim scripts are requested
col_sim.selectbox(
    "Simulation tool",
    _options("simulation_tools", st.session_state["simulation_tool"]),
    key="simulation_tool",
    disabled=exploring or not st.session_state[f"deliverable_{SIMULATION_SCRIPTS_ID}"],
)

st.toggle(
    "Extended reasoning",
    key="thinking_mode",
    help="Lets the model think before answering. Slower, usually better on complex designs.",
)


def _current_form() -> AppState:
    return {
        "description": st.session_state["description"],
        "hdl_language": st.session_state["hdl_language"],
        "protocol": st.session_state["protocol"],
        "architecture": st.session_state["architecture"],
        "simulation_tool": st.session_state["simulation_tool"],
        "thinking_mode": st.session_state["thinking_mode"],
        "operation_mode": st.session_state["operation_mode"],
        "deliverables": [
            {"id": spec.id, "name": spec.name, "checked": st.session_state[f"deliverable_{spec.id}"]}
            for spec in CATALOG
        ],
    }


form = _current_form()
_get_persistence().save(form)

# A reply for an older form must not land on top of the edited one
if tracker.busy and st.session_state["submitted_form"] not in (None, form):
    tracker.invalidate()


# ---------------------------------------------------------------------------
# Artifact viewers
# ---------------------------------------------------------------------------


def _render_artifact(key: str, artifact: dict) -> None:
    """Render one artifact through the viewer its language tag selects.

    Render failures stay inside this tab.
    """
    code = artifact.get("code", "")
    language = artifact.get("language", "")
    filename = artifact.get("filename", key)
    st.caption(f"`{filename}` · {language}")

    viewer = viewer_for(language)
    try:
        if viewer == MARKDOWN:
            st.markdown(code)
        elif viewer == MERMAID:
            components.html(mermaid_html(code, f"mermaid-{key}"), height=520, scrolling=True)
            with st.expander("Diagram source"):
                st.code(code, language="text")
        else:
            st.code(code, language=code_language(language), line_numbers=True)
    except RenderError as exc:
        log.warning("Could not render %s: %s", key, exc)
        st.error(f"Could not render {get_display_name(key)}: {exc}")

    st.download_button(
        label=f"Download {filename}",
        data=code,
        file_name=filename,
        key=f"download_{key}",
    )


def _render_result(result: GenerationResult) -> None:
    if not result:
        st.info("The model returned none of the requested deliverables. Try again or adjust your request.")
        return
    keys = ordered_result_ids(result)
    tabs = st.tabs([get_display_name(k) for k in keys])
    for tab, key in zip(tabs, keys):
        with tab:
            _render_artifact(key, result[key])


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


def _submit() -> None:
    """Start the request on a worker thread; later reruns poll it."""
    request = build_request(form)
    seq = tracker.begin()
    if seq is None:
        return

    # Replaced wholesale: a failure must not leave the previous result showing
    st.session_state["result"] = None
    st.session_state["error"] = None
    st.session_state["notice"] = None
    st.session_state["submitted_form"] = form
    st.session_state["pending"] = {
        "seq": seq,
        "future": _get_executor().submit(process_request, generator, request),
        "started": time.monotonic(),
        "mode": request.mode,
    }


def _poll_pending() -> None:
    """Show progress for the in-flight request, or apply its outcome once settled."""
    pending = st.session_state["pending"]
    if pending is None:
        return

    future = pending["future"]
    if not future.done():
        elapsed = time.monotonic() - pending["started"]
        label = progress_message(
            loading_messages(pending["mode"]),
            elapsed,
            config.get("loading_interval_seconds", 2.5),
        )
        st.status(label, state="running")
        time.sleep(POLL_SECONDS)
        st.rerun()

    st.session_state["pending"] = None
    current, result, error = settle_request(tracker, pending["seq"], future)
    if current:
        st.session_state["result"] = result
        st.session_state["error"] = error
    else:
        st.session_state["notice"] = STALE_NOTICE
    # The button above was drawn disabled
    st.rerun()


generate_label = "Generate" if form["operation_mode"] == "generate" else "Explore"
if st.button(generate_label, type="primary", disabled=tracker.busy):
    if not form["description"].strip():
        st.error("Please enter a design description.")
        st.stop()
    if form["operation_mode"] == "generate" and not any(d["checked"] for d in form["deliverables"]):
        st.error("Select at least one deliverable.")
        st.stop()
    _submit()
    st.rerun()

if simulation_scripts_selected(form["deliverables"]) and form["operation_mode"] == "generate":
    st.caption(f"Simulation scripts will target {form['simulation_tool']}.")

_poll_pending()

if st.session_state["notice"]:
    st.info(st.session_state["notice"])
if st.session_state["error"]:
    st.error(st.session_state["error"])
elif st.session_state["result"] is not None:
    st.divider()
    _render_result(st.session_state["result"])
