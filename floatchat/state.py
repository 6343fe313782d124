"""
FloatChat — LangGraph State Definition
"""

from typing import Any, Dict, List, Optional, TypedDict


class RouteState(TypedDict, total=False):
    """State flowing through the route safety-check graph."""

    # Input
    start:          Optional[Dict[str, float]]   # {x, y} in the 0–100 plane
    end:            Optional[Dict[str, float]]
    start_port:     Optional[str]                # port name, overrides start
    end_port:       Optional[str]
    hazards:        Optional[List[Dict[str, Any]]]   # None → generated from seed
    seed:           Optional[int]
    use_llm:        bool

    # Resolved endpoints
    start_label:    str
    end_label:      str

    # Assessment
    analysis:       Dict[str, Any]
    llm_briefing:   str
    briefing_source: str                         # "llm" | "static"

    # Output
    route_report:   Dict[str, Any]

    # Execution control
    messages:       List[Any]
    errors:         List[str]
    status:         str                          # init / processing / analysed / complete / error
