"""
FloatChat — Route Hazard Scoring
================================
RouteRiskEvaluator checks a straight route across the normalized map plane
(0–100 on both axes, percentage of the map viewport) against the circular
hazard zones of the current session and derives a coarse sea-state verdict.

Intersection model
------------------
The segment start → end is sampled at 11 evenly spaced points
(t = 0.0, 0.1, … 1.0). A hazard is crossed when any sample lies strictly
inside its radius. Hazards thinner than one sampling step can fall between
two samples and are not reported; the sampling is an approximation and is
kept that way on purpose.

Scoring
-------
  severe hazard crossed  → danger_level += 2
  any other intensity    → danger_level += 1

  safety_score  = max(0, 100 - 30 * danger_level)
  status        = DANGER (> 1) | CAUTION (> 0) | SAFE
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, NamedTuple, Optional


# ── Constants ─────────────────────────────────────────────────────────────────

SAMPLE_STEPS   = 10      # 11 sample points including both endpoints
DISTANCE_SCALE = 60      # plane units → pseudo nautical miles

STATUS_SAFE    = "SAFE"
STATUS_CAUTION = "CAUTION"
STATUS_DANGER  = "DANGER"

INTENSITIES  = ("moderate", "severe", "extreme")
HAZARD_TYPES = ("storm", "current", "ice")


# ── Types ─────────────────────────────────────────────────────────────────────

class Point(NamedTuple):
    x: float
    y: float


class HazardZone(NamedTuple):
    id:        str
    name:      str
    top:       float    # centre y
    left:      float    # centre x
    radius:    float    # same units as the plane, > 0
    intensity: str      # "moderate" | "severe" | "extreme"
    type:      str      # "storm" | "current" | "ice"

    @property
    def center(self) -> Point:
        return Point(self.left, self.top)

    @property
    def label(self) -> str:
        return f"{self.name} ({self.type.upper()})"


class RouteAnalysis(NamedTuple):
    distance:      float
    danger_level:  int
    safety_score:  int
    wave_height:   float
    wind_speed:    int
    precipitation: int
    visibility:    str
    status:        str
    hazards:       List[str]

    def to_dict(self) -> dict:
        """Serialisable view, with the rounded figures the map panel displays (halves round up)."""
        data = self._asdict()
        data["hazards"]     = list(self.hazards)
        data["distance_nm"] = str(Decimal(self.distance).quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return data


# ══════════════════════════════════════════════════════════════════════════════
# Evaluator
# ══════════════════════════════════════════════════════════════════════════════

class RouteRiskEvaluator:
    """Stateless route-vs-hazard scorer. Safe to share between sessions."""

    def __init__(self, steps: int = SAMPLE_STEPS):
        self.steps = steps

    def evaluate(
        self,
        start:   Optional[Point],
        end:     Optional[Point],
        hazards: Iterable[HazardZone],
    ) -> Optional[RouteAnalysis]:
        """
        Score the route start → end against *hazards*.

        Returns None while either endpoint is unset; callers render that
        as "no analysis available".
        """
        if start is None or end is None:
            return None

        dx = end.x - start.x
        dy = end.y - start.y
        distance = math.sqrt(dx * dx + dy * dy) * DISTANCE_SCALE

        danger_level = 0
        crossed: List[str] = []

        for hazard in hazards:
            if self.intersects(start, end, hazard):
                danger_level += 2 if hazard.intensity == "severe" else 1
                crossed.append(hazard.label)

        return self._derive(distance, danger_level, crossed)

    def intersects(self, start: Point, end: Point, hazard: HazardZone) -> bool:
        """True if any sample point along start → end is strictly inside *hazard*."""
        dx = end.x - start.x
        dy = end.y - start.y
        for i in range(self.steps + 1):
            t  = i / self.steps
            px = start.x + dx * t
            py = start.y + dy * t
            if math.hypot(px - hazard.left, py - hazard.top) < hazard.radius:
                return True
        return False

    @staticmethod
    def _derive(distance: float, danger_level: int, crossed: List[str]) -> RouteAnalysis:
        if danger_level > 1:
            status = STATUS_DANGER
        elif danger_level > 0:
            status = STATUS_CAUTION
        else:
            status = STATUS_SAFE

        return RouteAnalysis(
            distance      = distance,
            danger_level  = danger_level,
            safety_score  = max(0, 100 - danger_level * 30),
            wave_height   = round(danger_level * 2.5 + 1.2, 1),
            wind_speed    = danger_level * 20 + 15,
            precipitation = danger_level * 30 + 10 if danger_level > 0 else 5,
            visibility    = "2" if danger_level > 0 else "10+",
            status        = status,
            hazards       = crossed,
        )


_default_evaluator = RouteRiskEvaluator()


def evaluate_route(
    start:   Optional[Point],
    end:     Optional[Point],
    hazards: Iterable[HazardZone],
) -> Optional[RouteAnalysis]:
    """Module-level shortcut around a shared RouteRiskEvaluator."""
    return _default_evaluator.evaluate(start, end, hazards)
