"""Prompt Builder — turns form selections into the instruction text sent to Gemini."""

from typing import Sequence

from rtlforge.deliverables import SIMULATION_SCRIPTS_ID, get_prompt_fragment

NO_OPTION = "None"

ROLE_STATEMENT = """\
You are an expert Hardware Design and Verification Engineer AI assistant. Your role is to \
help users develop, verify, and test digital designs.
Follow best practices for synthesizable, modular, and well-documented code."""

INSTRUCTIONS = """\
Instructions:
1. Analyze the user's request and generate all the required deliverables.
2. Ensure all generated code is syntactically correct and complete.
3. For testbenches, create a comprehensive UVM-based environment.
4. For documentation (like specs or reports), use Markdown format.
5. If a state diagram is requested, generate it using valid Mermaid.js 'stateDiagram-v2' \
syntax. Place notes on separate lines, not within transition labels. Example of a correct \
note: 'note right of IDLE: This is the reset state.'. Set the 'language' property to 'Mermaid'.
6. For advanced verification deliverables:
   - Scoreboard Log: Generate a sample plain text log from a UVM scoreboard. Show \
transaction comparisons with PASS/FAIL status.
   - Waveform Summary: Create a Markdown document describing expected behaviors of \
critical signals during key operations.
   - Output Table: Generate a Markdown table that summarizes test cases, including columns \
for Test Name, Description, and an example Pass/Fail Status.
7. For advanced analysis deliverables:
   - Synthesis Report: Provide a Markdown report estimating resource usage (LUTs, FFs, \
BRAMs, DSPs) and identify potential timing critical paths. Discuss potential synthesis \
optimizations.
   - Lint Report: Generate a Markdown report analyzing the RTL code for potential issues \
like non-synthesizable constructs, style violations, or common pitfalls.
8. Return the output as a single, valid JSON object that adheres to the provided schema. \
Do not include any text, markdown formatting, or code blocks before or after the JSON object.
9. Only generate properties in the JSON for the deliverables that were explicitly requested."""

EXPLORATION_PROMPT = """\
You are a Senior Principal Digital Design Architect with decades of experience.
A junior engineer has come to you with the following design problem. Your task is to \
explore and propose multiple microarchitectural approaches to solve it.

Problem Statement:
"{description}"

Your Task:
1. Thoroughly analyze the problem statement.
2. Propose at least two distinct and viable microarchitectural solutions.
3. For each proposed architecture, provide a clear, high-level description of its \
structure and operation. Use bullet points and simple diagrams if it helps clarity.
4. Create a comparison table or section that analyzes the trade-offs between the proposed \
solutions. Key comparison points should include:
   - Performance (e.g., latency, throughput, max frequency).
   - Area/Resource Usage (estimated complexity, number of flops/LUTs).
   - Power Consumption (qualitative assessment).
   - Complexity (design effort, verification complexity).
5. Conclude with a recommendation on which architecture to proceed with and why, based on \
a likely set of design goals (e.g., if the goal is low power, recommend one; if it's high \
performance, recommend another).

Format your response in clear, well-structured Markdown."""


def build_deliverable_list(
    deliverables: Sequence[str], hdl_language: str, simulation_tool: str
) -> str:
    """Resolve each id to its prompt fragment, preserving order."""
    return ", ".join(
        get_prompt_fragment(d, hdl_language, simulation_tool) for d in deliverables
    )


def build_prompt(
    description: str,
    hdl_language: str,
    deliverables: Sequence[str],
    protocol: str = NO_OPTION,
    architecture: str = NO_OPTION,
    simulation_tool: str = "ModelSim",
) -> str:
    """Build the generate-mode instruction text.

    The description is embedded verbatim. It is not re-validated here; callers
    reject empty descriptions before submitting.
    """
    task_lines = [
        f"- Target RTL Language: {hdl_language}",
        "- Verification Environment: SystemVerilog with UVM.",
    ]
    if protocol != NO_OPTION:
        task_lines.append(f"- Interface Protocol: {protocol}")
    if architecture != NO_OPTION:
        task_lines.append(f"- Target Architecture: {architecture}")
    if SIMULATION_SCRIPTS_ID in deliverables:
        task_lines.append(f"- Target Simulator: {simulation_tool}")
    deliverable_list = build_deliverable_list(deliverables, hdl_language, simulation_tool)
    task_lines.append(f"- Required Deliverables: {deliverable_list}.")

    parts = [
        ROLE_STATEMENT,
        f"User's Design Request:\n\"{description}\"",
        "Generation Task:\n" + "\n".join(task_lines),
        INSTRUCTIONS,
    ]
    return "\n\n".join(parts)


def build_exploration_prompt(description: str) -> str:
    """Build the fixed architecture-comparison prompt for explore mode."""
    return EXPLORATION_PROMPT.replace("{description}", description)
