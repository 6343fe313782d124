"""
FloatChat — Map Session State
Explicit state holder for one map overlay: exploration view (region focus,
selected float) and routing (endpoints, port selections, hazards).
The route analysis is re-evaluated from scratch whenever it is read.
"""

import logging
from typing import Any, Dict, List, Optional

from .catalog    import REGION_CONFIG, find_port, is_region
from .route_risk import HazardZone, Point, RouteAnalysis, evaluate_route
from .simulation import (
    INITIAL_ACTIVE_NODES,
    FloatNode,
    RngLike,
    drift_active_nodes,
    drift_floats,
    filter_floats,
    generate_floats,
    generate_hazards,
    make_rng,
    region_stats,
)

log = logging.getLogger("floatchat.session")

MODE_EXPLORATION = "exploration"
MODE_ROUTING     = "routing"
MODES            = (MODE_EXPLORATION, MODE_ROUTING)

CUSTOM_ORIGIN = "Custom Origin"
CUSTOM_DEST   = "Custom Dest"
CUSTOM_PORT   = "Custom"


class MapSession:
    """
    One map overlay, from open to close.

    Hazards and the initial float fleet are generated once from *seed*;
    later telemetry ticks draw from the same generator.
    """

    def __init__(self, mode: str = MODE_EXPLORATION, seed: RngLike = None):
        if mode not in MODES:
            raise ValueError(f"Unknown map mode: {mode!r}")

        self._rng = make_rng(seed)
        self.mode = mode

        self.hazards: List[HazardZone] = generate_hazards(self._rng)
        self.floats:  List[FloatNode]  = generate_floats(self._rng)
        self.active_nodes = INITIAL_ACTIVE_NODES

        # Exploration view
        self.selected_region = "All"
        self.view: Dict[str, float] = dict(REGION_CONFIG["All"])
        self.selected_float: Optional[str] = None

        # Routing
        self.route_start: Optional[Point] = None
        self.route_end:   Optional[Point] = None
        self.start_label: Optional[str]   = None
        self.end_label:   Optional[str]   = None
        self.selected_port_start = ""
        self.selected_port_end   = ""

    # ── Routing ───────────────────────────────────────────────────────────────

    def select_port(self, which: str, name: str) -> None:
        """
        Pick a port for the route start or end. An empty name clears the
        endpoint; an unknown name is recorded but leaves the endpoint as is.
        """
        if which not in ("start", "end"):
            raise ValueError(f"Endpoint must be 'start' or 'end', got {which!r}")

        port = find_port(name)
        if which == "start":
            self.selected_port_start = name
            if port:
                self.route_start, self.start_label = Point(port.x, port.y), port.name
            elif name == "":
                self.route_start, self.start_label = None, None
        else:
            self.selected_port_end = name
            if port:
                self.route_end, self.end_label = Point(port.x, port.y), port.name
            elif name == "":
                self.route_end, self.end_label = None, None

        log.info(f"Port selected: {which}={name or '<cleared>'}")

    def click_map(self, x: float, y: float) -> bool:
        """
        Map background click. In exploration it resets the view, like the
        reset button. In routing it drops a custom endpoint at (x, y), origin
        first, then destination. Returns True only when an endpoint was placed.
        """
        if self.mode != MODE_ROUTING:
            self.reset()
            return False

        if self.route_start is None:
            self.route_start, self.start_label = Point(x, y), CUSTOM_ORIGIN
            self.selected_port_start = CUSTOM_PORT
            return True
        if self.route_end is None:
            self.route_end, self.end_label = Point(x, y), CUSTOM_DEST
            self.selected_port_end = CUSTOM_PORT
            return True
        return False

    @property
    def analysis(self) -> Optional[RouteAnalysis]:
        return evaluate_route(self.route_start, self.route_end, self.hazards)

    # ── Exploration ───────────────────────────────────────────────────────────

    def select_region(self, region: str) -> None:
        if not is_region(region):
            raise ValueError(f"Unknown region: {region!r}")
        self.selected_region = region
        self.selected_float  = None
        self.view = dict(REGION_CONFIG[region])

    def select_float(self, float_id: str) -> bool:
        """Focus the view on a float (exploration mode only)."""
        if self.mode != MODE_EXPLORATION:
            return False
        for f in self.floats:
            if f.id == float_id:
                self.selected_float = f.id
                self.view = {"x": 50 - f.left, "y": 50 - f.top, "scale": 3.0}
                return True
        return False

    def visible_floats(self) -> List[FloatNode]:
        return filter_floats(self.floats, self.selected_region)

    # ── Shared ────────────────────────────────────────────────────────────────

    def set_mode(self, mode: str) -> None:
        """Switch mode; the pan/zoom goes back to the whole-ocean transform."""
        if mode not in MODES:
            raise ValueError(f"Unknown map mode: {mode!r}")
        self.mode = mode
        self.view = dict(REGION_CONFIG["All"])

    def reset(self) -> None:
        """Exploration: back to the whole-ocean view. Routing: clear the route."""
        if self.mode == MODE_EXPLORATION:
            self.select_region("All")
        else:
            self.route_start = self.route_end = None
            self.start_label = self.end_label = None
            self.selected_port_start = ""
            self.selected_port_end   = ""

    def tick(self) -> None:
        """Advance simulated telemetry by one interval."""
        self.active_nodes = drift_active_nodes(self.active_nodes, self._rng)
        self.floats       = drift_floats(self.floats, self._rng)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session."""
        analysis = self.analysis
        return {
            "mode":            self.mode,
            "active_nodes":    self.active_nodes,
            "selected_region": self.selected_region,
            "view":            self.view,
            "selected_float":  self.selected_float,
            "region_stats":    region_stats(self.floats),
            "floats":          [f._asdict() for f in self.visible_floats()],
            "hazards":         [h._asdict() for h in self.hazards],
            "route": {
                "start":      _point_dict(self.route_start, self.start_label),
                "end":        _point_dict(self.route_end,   self.end_label),
                "port_start": self.selected_port_start,
                "port_end":   self.selected_port_end,
            },
            "analysis": analysis.to_dict() if analysis else None,
        }


def _point_dict(point: Optional[Point], label: Optional[str]) -> Optional[Dict[str, Any]]:
    if point is None:
        return None
    return {"x": point.x, "y": point.y, "label": label}
