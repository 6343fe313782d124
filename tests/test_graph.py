from floatchat import nodes
from floatchat.graph import build_route_safety_agent, initial_route_state

SEVERE_ON_ROUTE = [{
    "id": "H-0", "name": "Cyclone Iota", "top": 0, "left": 5,
    "radius": 2, "intensity": "severe", "type": "storm",
}]


def test_pipeline_scores_route_with_static_briefing():
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": 0}, end={"x": 10, "y": 0},
        hazards=SEVERE_ON_ROUTE, use_llm=False,
    ))

    assert result["status"] == "complete"
    report = result["route_report"]
    assert report["analysis"]["status"] == "DANGER"
    assert report["analysis"]["safety_score"] == 40
    assert report["verdict"] == "DANGER"
    assert report["route"]["start"]["label"] == "Custom Origin"
    assert report["metadata"]["briefing_source"] == "static"
    assert "Cyclone Iota (STORM)" in report["briefing"]


def test_pipeline_resolves_ports_and_generates_hazards():
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start_port="New York", end_port="London", seed=5, use_llm=False,
    ))
    assert result["status"] == "complete"
    assert result["route_report"]["route"]["end"] == {"x": 46, "y": 25, "label": "London"}
    assert result["route_report"]["metadata"]["hazards_checked"] == 6


def test_pipeline_stops_on_invalid_request():
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start_port="Atlantis", end={"x": 150, "y": 0}, hazards=[], use_llm=False,
    ))
    assert result["status"] == "error"
    assert result["route_report"] == {}
    assert any("Atlantis" in e for e in result["errors"])
    assert any("0-100" in e for e in result["errors"])


def test_pipeline_rejects_bad_hazard():
    bad = [{**SEVERE_ON_ROUTE[0], "radius": 0}]
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": 0}, end={"x": 10, "y": 0}, hazards=bad, use_llm=False,
    ))
    assert result["status"] == "error"


def test_pipeline_uses_llm_briefing_when_available(monkeypatch):
    monkeypatch.setattr(nodes.config, "LLM_ROUTE_BRIEFING", True)
    monkeypatch.setattr(nodes, "call_llm", lambda prompt, system="": "Hold departure 12h.\n**Verdict: DANGER**")

    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": 0}, end={"x": 10, "y": 0}, hazards=SEVERE_ON_ROUTE,
    ))
    report = result["route_report"]
    assert report["metadata"]["briefing_source"] == "llm"
    assert report["briefing"].startswith("Hold departure")


def test_pipeline_falls_back_when_llm_unavailable(monkeypatch):
    monkeypatch.setattr(nodes.config, "LLM_ROUTE_BRIEFING", True)
    monkeypatch.setattr(nodes, "call_llm", lambda prompt, system="": "")

    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": 0}, end={"x": 10, "y": 0}, hazards=[],
    ))
    report = result["route_report"]
    assert report["metadata"]["briefing_source"] == "static"
    assert report["verdict"] == "CLEAR GO"


def test_pipeline_reports_malformed_hazards_as_errors():
    malformed = [
        {"id": "H-0", "name": "Cyclone Iota", "left": 5, "radius": 2, "intensity": "severe", "type": "storm"},
        {**SEVERE_ON_ROUTE[0], "id": "H-1", "radius": "wide"},
        "Polar Front",
    ]
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": "north"}, end={"x": 10, "y": 0}, hazards=malformed, use_llm=False,
    ))
    assert result["status"] == "error"
    assert "Hazard 0: missing top." in result["errors"]
    assert "Hazard 1: radius must be a number." in result["errors"]
    assert "Hazard 2: expected an object, got str." in result["errors"]
    assert "Route start x/y must be numbers." in result["errors"]


def test_pipeline_ignores_extra_hazard_keys():
    tagged = [{**SEVERE_ON_ROUTE[0], "source": "buoy-feed"}]
    agent = build_route_safety_agent()
    result = agent.invoke(initial_route_state(
        start={"x": 0, "y": 0}, end={"x": 10, "y": 0}, hazards=tagged, use_llm=False,
    ))
    assert result["status"] == "complete"
    assert result["route_report"]["analysis"]["status"] == "DANGER"
