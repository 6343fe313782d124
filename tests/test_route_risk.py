from floatchat.route_risk import (
    HazardZone,
    Point,
    RouteRiskEvaluator,
    evaluate_route,
)


def _hazard(x, y, radius, intensity="moderate", name="Zone", type_="storm", hid="H-0"):
    return HazardZone(id=hid, name=name, top=y, left=x, radius=radius, intensity=intensity, type=type_)


def test_missing_endpoint_gives_no_analysis():
    hazards = [_hazard(5, 0, 2)]
    assert evaluate_route(None, Point(10, 0), hazards) is None
    assert evaluate_route(Point(0, 0), None, hazards) is None
    assert evaluate_route(None, None, hazards) is None


def test_no_hazards_is_safe():
    analysis = evaluate_route(Point(0, 0), Point(30, 40), [])
    assert analysis.status == "SAFE"
    assert analysis.safety_score == 100
    assert analysis.danger_level == 0
    assert analysis.hazards == []
    assert analysis.visibility == "10+"
    assert analysis.precipitation == 5
    assert analysis.wave_height == 1.2
    assert analysis.wind_speed == 15


def test_route_clear_of_every_hazard_is_safe():
    hazards = [_hazard(50, 50, 5, "severe"), _hazard(80, 10, 3)]
    analysis = evaluate_route(Point(0, 0), Point(10, 0), hazards)
    assert analysis.status == "SAFE"
    assert analysis.safety_score == 100


def test_severe_hazard_on_route_is_danger():
    hazards = [_hazard(5, 0, 2, "severe", name="Cyclone Iota")]
    analysis = evaluate_route(Point(0, 0), Point(10, 0), hazards)
    assert analysis.danger_level == 2
    assert analysis.status == "DANGER"
    assert analysis.safety_score == 40
    assert analysis.wave_height == 6.2
    assert analysis.wind_speed == 55
    assert analysis.precipitation == 70
    assert analysis.visibility == "2"
    assert analysis.hazards == ["Cyclone Iota (STORM)"]


def test_midpoint_on_severe_centre_is_danger():
    hazards = [_hazard(20, 20, 4, "severe")]
    analysis = evaluate_route(Point(10, 10), Point(30, 30), hazards)
    assert analysis.danger_level == 2
    assert analysis.status == "DANGER"
    assert analysis.safety_score == 40


def test_single_moderate_hazard_is_caution():
    hazards = [_hazard(5, 0, 2, "moderate", name="Gulf Current", type_="current")]
    analysis = evaluate_route(Point(0, 0), Point(10, 0), hazards)
    assert analysis.danger_level == 1
    assert analysis.status == "CAUTION"
    assert analysis.safety_score == 70
    assert analysis.hazards == ["Gulf Current (CURRENT)"]


def test_extreme_intensity_counts_as_one():
    analysis = evaluate_route(Point(0, 0), Point(10, 0), [_hazard(5, 0, 2, "extreme")])
    assert analysis.danger_level == 1
    assert analysis.status == "CAUTION"


def test_narrow_hazard_caught_when_centre_is_a_sample_point():
    analysis = evaluate_route(Point(0, 0), Point(10, 0), [_hazard(5, 0, 0.5, "severe")])
    assert analysis.danger_level == 2


def test_hazard_between_samples_is_missed():
    # Centre sits half-way between samples x=5 and x=6; radius smaller than the gap
    analysis = evaluate_route(Point(0, 0), Point(10, 0), [_hazard(5.5, 0, 0.4, "severe")])
    assert analysis.danger_level == 0
    assert analysis.status == "SAFE"


def test_boundary_distance_does_not_intersect():
    # Closest sample (x=5) is exactly 1.0 away from the centre
    analysis = evaluate_route(Point(0, 0), Point(10, 0), [_hazard(5, 1, 1.0)])
    assert analysis.hazards == []


def test_zero_length_route_is_containment_test():
    inside  = evaluate_route(Point(40, 40), Point(40, 40), [_hazard(41, 40, 2)])
    outside = evaluate_route(Point(40, 40), Point(40, 40), [_hazard(45, 40, 2)])
    assert inside.danger_level == 1
    assert inside.distance == 0
    assert outside.danger_level == 0


def test_safety_score_clamped_at_zero():
    hazards = [_hazard(5, 0, 2, "severe", hid=f"H-{i}", name=f"Storm {i}") for i in range(5)]
    analysis = evaluate_route(Point(0, 0), Point(10, 0), hazards)
    assert analysis.danger_level == 10
    assert analysis.safety_score == 0


def test_hazard_order_follows_input_order():
    hazards = [
        _hazard(8, 0, 1, name="Polar Front", type_="ice", hid="H-1"),
        _hazard(2, 0, 1, "severe", name="Vortex Beta", hid="H-2"),
    ]
    analysis = evaluate_route(Point(0, 0), Point(10, 0), hazards)
    assert analysis.hazards == ["Polar Front (ICE)", "Vortex Beta (STORM)"]


def test_distance_scales_linearly():
    short = evaluate_route(Point(10, 10), Point(13, 14), [])
    long  = evaluate_route(Point(10, 10), Point(16, 18), [])
    assert short.distance == 5 * 60
    assert long.distance == 2 * short.distance


def test_swapping_endpoints_is_symmetric():
    hazards = [
        _hazard(30, 30, 6, "severe", hid="H-0", name="A"),
        _hazard(60, 40, 3, hid="H-1", name="B"),
        _hazard(70, 70, 8, hid="H-2", name="C"),
    ]
    forward  = evaluate_route(Point(20, 25), Point(75, 65), hazards)
    backward = evaluate_route(Point(75, 65), Point(20, 25), hazards)
    assert set(forward.hazards) == set(backward.hazards)
    assert forward.distance == backward.distance


def test_to_dict_rounds_distance_for_display():
    data = evaluate_route(Point(0, 0), Point(10, 0), []).to_dict()
    assert data["distance"] == 600
    assert data["distance_nm"] == "600"
    assert data["status"] == "SAFE"


def test_custom_step_count():
    coarse = RouteRiskEvaluator(steps=2)
    # Only x=0, 5, 10 are sampled
    assert coarse.intersects(Point(0, 0), Point(10, 0), _hazard(5, 0, 0.5))
    assert not coarse.intersects(Point(0, 0), Point(10, 0), _hazard(2, 0, 0.5))


def test_display_distance_rounds_halves_up():
    # 0.375 plane units * 60 = 22.5 nm exactly
    data = evaluate_route(Point(0, 0), Point(0.375, 0), []).to_dict()
    assert data["distance"] == 22.5
    assert data["distance_nm"] == "23"
