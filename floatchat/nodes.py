"""
FloatChat — Route Safety-Check Node Functions

Graph flow:
  parse_route_request
       │ (error) ──► END
       ▼
  assess_route_hazards
       ▼
  llm_route_briefing
       ▼
  generate_route_report
       ▼
      END
"""

from datetime import datetime, timezone

from langchain_core.messages import AIMessage, HumanMessage

from . import config
from .catalog    import find_port
from .llm        import call_llm
from .prompts    import build_route_briefing_prompt, verdict_for
from .route_risk import HAZARD_TYPES, INTENSITIES, HazardZone, Point, RouteRiskEvaluator
from .simulation import generate_hazards
from .state      import RouteState

_evaluator = RouteRiskEvaluator()

_ANALYST_SYSTEM = (
    "You are FloatChat's senior maritime data analyst. "
    "Be concise, quantitative and safety-oriented."
)


# ─────────────────────────────────────────────────────────────────────────────
# NODE 1 — parse_route_request
# ─────────────────────────────────────────────────────────────────────────────

def _resolve_endpoint(state: RouteState, which: str, errors: list):
    port_name = state.get(f"{which}_port")
    if port_name:
        port = find_port(port_name)
        if port is None:
            errors.append(f"Unknown {which} port: {port_name}.")
            return None, None
        return Point(port.x, port.y), port.name

    raw = state.get(which)
    if not raw:
        errors.append(f"Route {which} is not set.")
        return None, None

    x, y = raw.get("x"), raw.get("y")
    if x is None or y is None:
        errors.append(f"Route {which} missing x/y coordinates.")
        return None, None
    if not (_is_number(x) and _is_number(y)):
        errors.append(f"Route {which} x/y must be numbers.")
        return None, None
    if not (0 <= x <= 100 and 0 <= y <= 100):
        errors.append(f"Route {which} outside the 0-100 map plane.")
        return None, None

    label = raw.get("label") or ("Custom Origin" if which == "start" else "Custom Dest")
    return Point(x, y), label


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _hazard_errors(i: int, h) -> list:
    if not isinstance(h, dict):
        return [f"Hazard {i}: expected an object, got {type(h).__name__}."]

    errors = []
    missing = [k for k in HazardZone._fields if k not in h]
    if missing:
        errors.append(f"Hazard {i}: missing {', '.join(missing)}.")

    for key in ("top", "left", "radius"):
        if key in h and not _is_number(h[key]):
            errors.append(f"Hazard {i}: {key} must be a number.")

    if _is_number(h.get("radius")) and h["radius"] <= 0:
        errors.append(f"Hazard {i}: radius must be positive.")
    if "intensity" in h and h["intensity"] not in INTENSITIES:
        errors.append(f"Hazard {i}: unknown intensity {h['intensity']!r}.")
    if "type" in h and h["type"] not in HAZARD_TYPES:
        errors.append(f"Hazard {i}: unknown type {h['type']!r}.")
    return errors


def parse_route_request_node(state: RouteState) -> RouteState:
    """Resolve ports, validate coordinates and hazards."""
    errors = []

    start, start_label = _resolve_endpoint(state, "start", errors)
    end,   end_label   = _resolve_endpoint(state, "end",   errors)

    hazards = state.get("hazards")
    if hazards is None:
        hazards = [h._asdict() for h in generate_hazards(state.get("seed"))]

    for i, h in enumerate(hazards):
        errors.extend(_hazard_errors(i, h))

    if errors:
        return {**state, "status": "error", "errors": errors}

    msg = HumanMessage(
        content=(
            f"[parse_route_request] ✅ Route {start_label} → {end_label} validated "
            f"against {len(hazards)} hazard zones."
        )
    )
    return {
        **state,
        "start":       start._asdict(),
        "end":         end._asdict(),
        "start_label": start_label,
        "end_label":   end_label,
        "hazards":     [{k: h[k] for k in HazardZone._fields} for h in hazards],
        "status":      "processing",
        "messages":    [msg],
        "errors":      [],
    }


# ─────────────────────────────────────────────────────────────────────────────
# NODE 2 — assess_route_hazards
# ─────────────────────────────────────────────────────────────────────────────

def assess_route_hazards_node(state: RouteState) -> RouteState:
    """Sample the route against every hazard zone and score it."""
    start    = Point(**state["start"])
    end      = Point(**state["end"])
    hazards  = [HazardZone(**h) for h in state["hazards"]]
    analysis = _evaluator.evaluate(start, end, hazards).to_dict()

    msg = AIMessage(
        content=(
            f"[assess_route_hazards] {len(analysis['hazards'])}/{len(hazards)} hazards crossed | "
            f"danger_level={analysis['danger_level']} | status={analysis['status']}"
        )
    )
    return {**state, "analysis": analysis, "status": "analysed", "messages": [msg]}


# ─────────────────────────────────────────────────────────────────────────────
# NODE 3 — llm_route_briefing
# ─────────────────────────────────────────────────────────────────────────────

def _static_briefing(analysis: dict) -> str:
    hazards = analysis["hazards"]
    if hazards:
        crossing = "Route crosses " + ", ".join(hazards) + "."
    else:
        crossing = "No hazard zones intersect the route."
    return (
        f"{crossing} Expect {analysis['wave_height']} m seas and "
        f"{analysis['wind_speed']} kts wind, visibility {analysis['visibility']} nm.\n"
        f"**Verdict: {verdict_for(analysis['status'])}**"
    )


def llm_route_briefing_node(state: RouteState) -> RouteState:
    """
    Ask the analyst model for a skipper recommendation. Falls back to a
    static summary when the LLM is disabled or unavailable.
    """
    analysis = state["analysis"]
    briefing = ""

    if state.get("use_llm", True) and config.LLM_ROUTE_BRIEFING:
        prompt = build_route_briefing_prompt(state["start_label"], state["end_label"], analysis)
        briefing = call_llm(prompt, system=_ANALYST_SYSTEM)

    source = "llm" if briefing else "static"
    if not briefing:
        briefing = _static_briefing(analysis)

    msg = AIMessage(content=f"[llm_route_briefing] briefing source={source}")
    return {**state, "llm_briefing": briefing, "briefing_source": source, "messages": [msg]}


# ─────────────────────────────────────────────────────────────────────────────
# NODE 4 — generate_route_report
# ─────────────────────────────────────────────────────────────────────────────

def generate_route_report_node(state: RouteState) -> RouteState:
    """Assemble the final route safety report."""
    analysis = state["analysis"]

    route_report = {
        "report_type": "Route Safety Check",
        "metadata": {
            "service":         "FloatChat Route Safety Check",
            "framework":       "LangGraph",
            "generated_at":    datetime.now(timezone.utc).isoformat(),
            "hazards_checked": len(state.get("hazards", [])),
            "briefing_source": state.get("briefing_source", "static"),
        },
        "route": {
            "start": {**state["start"], "label": state["start_label"]},
            "end":   {**state["end"],   "label": state["end_label"]},
        },
        "analysis": analysis,
        "verdict":  verdict_for(analysis["status"]),
        "briefing": state.get("llm_briefing", ""),
    }

    msg = AIMessage(
        content=(
            f"[generate_route_report] ✅ {state['start_label']} → {state['end_label']} | "
            f"score={analysis['safety_score']} [{analysis['status']}]"
        )
    )
    return {**state, "route_report": route_report, "status": "complete", "messages": [msg]}
