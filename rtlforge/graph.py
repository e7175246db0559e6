"""LangGraph StateGraph that dispatches a request to generate or explore mode."""

from functools import lru_cache

from langgraph.graph import END, StateGraph

from rtlforge.agents.generator import HdlGenerator
from rtlforge.state import ForgeState, GenerationRequest, GenerationResult


def _route_by_mode(state: ForgeState) -> str:
    """Conditional entry: explore requests skip the deliverable pipeline."""
    return "explore" if state["request"].mode == "explore" else "generate"


@lru_cache(maxsize=8)
def build_graph(generator: HdlGenerator):
    """Compile the dispatch graph around an already-configured generator.

    Cached per generator instance, so repeated submissions reuse one graph.
    """

    def _generate_node(state: ForgeState) -> dict:
        return {"result": generator.generate(state["request"])}

    def _explore_node(state: ForgeState) -> dict:
        request = state["request"]
        return {"result": generator.explore(request.description, request.thinking_mode)}

    workflow = StateGraph(ForgeState)

    workflow.add_node("generate", _generate_node)
    workflow.add_node("explore", _explore_node)

    workflow.set_conditional_entry_point(
        _route_by_mode,
        {"generate": "generate", "explore": "explore"},
    )

    workflow.add_edge("generate", END)
    workflow.add_edge("explore", END)

    return workflow.compile()


def process_request(generator: HdlGenerator, request: GenerationRequest) -> GenerationResult:
    """Run one submission end to end. Errors from the generator propagate unchanged."""
    graph = build_graph(generator)
    final_state = graph.invoke({"request": request, "result": {}})
    return final_state["result"]
