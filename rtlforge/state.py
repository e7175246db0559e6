"""RTL Forge types — requests, artifacts and the persisted form state."""

from dataclasses import dataclass
from typing import Literal, TypedDict

Mode = Literal["generate", "explore"]
HdlLanguage = Literal["VHDL", "Verilog"]

HDL_LANGUAGES = ("VHDL", "Verilog")
MODES = ("generate", "explore")


class HdlFile(TypedDict):
    filename: str  # e.g. counter.v, spec.md
    language: str  # Free-form tag: Verilog, Markdown, Mermaid, Text, ...
    code: str  # Complete file or document content.


# Deliverable id -> artifact. Keys are always a subset of the requested ids.
GenerationResult = dict[str, HdlFile]


class Deliverable(TypedDict):
    id: str  # Stable registry key, e.g. rtlCode.
    name: str  # Human-readable label.
    checked: bool  # Selected by the user.


class AppState(TypedDict):
    description: str
    hdl_language: HdlLanguage
    protocol: str  # "None" means no interface protocol.
    architecture: str  # "None" means no target architecture.
    simulation_tool: str
    thinking_mode: bool
    operation_mode: Mode
    deliverables: list[Deliverable]


@dataclass(frozen=True)
class GenerationRequest:
    """One user submission. Built fresh per submit, never persisted."""

    mode: Mode
    description: str
    hdl_language: HdlLanguage = "Verilog"
    deliverables: tuple[str, ...] = ()
    protocol: str = "None"
    architecture: str = "None"
    simulation_tool: str = "ModelSim"
    thinking_mode: bool = False


class ForgeState(TypedDict):
    request: GenerationRequest  # Immutable after init.
    result: GenerationResult  # Filled by the generate or explore node.
