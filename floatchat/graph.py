"""
FloatChat — LangGraph StateGraph Definition
build_route_safety_agent() compiles the route safety-check pipeline.
"""

from langgraph.graph import StateGraph, END

from .state import RouteState
from .nodes import (
    parse_route_request_node,
    assess_route_hazards_node,
    llm_route_briefing_node,
    generate_route_report_node,
)


def _route_after_parse(state: RouteState) -> str:
    """Conditional edge after parse_route_request: stop on validation error."""
    return "error" if state.get("status") == "error" else "ok"


def build_route_safety_agent():
    """
    Compile and return the route safety-check LangGraph.

    Flow:
      parse_route_request → assess_route_hazards
        → llm_route_briefing → generate_route_report → END
    """
    graph = StateGraph(RouteState)

    graph.add_node("parse_route_request",   parse_route_request_node)
    graph.add_node("assess_route_hazards",  assess_route_hazards_node)
    graph.add_node("llm_route_briefing",    llm_route_briefing_node)
    graph.add_node("generate_route_report", generate_route_report_node)

    graph.set_entry_point("parse_route_request")

    graph.add_conditional_edges(
        "parse_route_request",
        _route_after_parse,
        {"error": END, "ok": "assess_route_hazards"},
    )

    graph.add_edge("assess_route_hazards",  "llm_route_briefing")
    graph.add_edge("llm_route_briefing",    "generate_route_report")
    graph.add_edge("generate_route_report", END)

    return graph.compile()


def initial_route_state(
    start=None,
    end=None,
    start_port=None,
    end_port=None,
    hazards=None,
    seed=None,
    use_llm=True,
) -> RouteState:
    return {
        "start":           start,
        "end":             end,
        "start_port":      start_port,
        "end_port":        end_port,
        "hazards":         hazards,
        "seed":            seed,
        "use_llm":         use_llm,
        "start_label":     "",
        "end_label":       "",
        "analysis":        {},
        "llm_briefing":    "",
        "briefing_source": "static",
        "route_report":    {},
        "messages":        [],
        "errors":          [],
        "status":          "init",
    }
