"""
FloatChat — Simulated Telemetry & Weather
=========================================
Plausible-looking synthetic data for the map overlay and the data log:
hazard zones, ARGO float positions and sensor drift, regional weather and
telemetry log lines.

Every generator takes an explicit ``random.Random`` (or a seed, via
``make_rng``) so that sessions and tests are reproducible. None of these
numbers carry meaning beyond "looks like ocean data".
"""

import random
from datetime import datetime, timezone
from typing import Dict, List, NamedTuple, Optional, Union

from .catalog    import HAZARD_NAMES, REGION_CONFIG
from .route_risk import HazardZone

HAZARD_COUNT         = 6
INITIAL_ACTIVE_NODES = 3824
FLOAT_STATUSES       = ("active", "transmitting", "diving")
LOG_METRICS          = ("TEMP", "SAL", "PRES", "OXY")

# Share of floats touched per telemetry tick, and odds of a status change
_DRIFT_RATIO        = 0.2
_STATUS_CHANGE_ODDS = 0.02

# (count, top_min, top_max, left_min, left_max) per deployment region
FLOAT_DEPLOYMENTS: Dict[str, tuple] = {
    "North Atlantic": (25, 15, 45, 25, 50),
    "Pacific":        (35, 20, 80, 60, 90),
    "Indian Ocean":   (20, 50, 75, 50, 70),
    "Southern Ocean": (15, 80, 95, 20, 80),
}

RngLike = Union[random.Random, int, None]


class FloatNode(NamedTuple):
    id:     str
    top:    float
    left:   float
    temp:   str     # °C, one decimal
    depth:  str     # m, integer
    lat:    str
    lng:    str
    region: str
    status: str


class WeatherData(NamedTuple):
    wind_speed:    str   # knots
    wave_height:   str   # metres
    precipitation: str   # % chance
    visibility:    str   # nautical miles
    condition:     str   # Clear | Cloudy | Stormy | Rain
    pressure:      str   # hPa


def make_rng(seed: RngLike = None) -> random.Random:
    """Return *seed* if it already is a Random, else a new Random seeded with it."""
    if isinstance(seed, random.Random):
        return seed
    return random.Random(seed)


# ── Hazards ───────────────────────────────────────────────────────────────────

def generate_hazards(rng: RngLike = None) -> List[HazardZone]:
    """Six named hazard zones scattered over the central map area."""
    rng = make_rng(rng)
    hazards = []
    for i in range(HAZARD_COUNT):
        hazards.append(HazardZone(
            id        = f"H-{i}",
            name      = HAZARD_NAMES[i],
            top       = rng.random() * 60 + 20,
            left      = rng.random() * 80 + 10,
            radius    = rng.random() * 10 + 5,
            intensity = "severe" if rng.random() > 0.6 else "moderate",
            type      = "storm" if rng.random() > 0.5 else "current",
        ))
    return hazards


# ── Floats ────────────────────────────────────────────────────────────────────

def _make_float(rng: random.Random, region: str, bounds: tuple) -> FloatNode:
    _, t_min, t_max, l_min, l_max = bounds
    top  = rng.random() * (t_max - t_min) + t_min
    left = rng.random() * (l_max - l_min) + l_min
    return FloatNode(
        id     = f"ARGO-{region[0].upper()}{rng.randrange(1000)}",
        top    = top,
        left   = left,
        temp   = f"{rng.random() * 25 + 2:.1f}",
        depth  = f"{rng.random() * 2000 + 50:.0f}",
        lat    = f"{(top - 50) * -3.6:.2f}",
        lng    = f"{(left - 50) * 7.2:.2f}",
        region = region,
        status = rng.choice(FLOAT_STATUSES),
    )


def generate_floats(rng: RngLike = None) -> List[FloatNode]:
    """Initial float fleet: 95 floats across the four deployment regions."""
    rng = make_rng(rng)
    floats: List[FloatNode] = []
    for region, bounds in FLOAT_DEPLOYMENTS.items():
        count = bounds[0]
        floats.extend(_make_float(rng, region, bounds) for _ in range(count))
    return floats


def drift_floats(floats: List[FloatNode], rng: RngLike = None) -> List[FloatNode]:
    """
    One telemetry tick. About 20 % of floats receive minor sensor drift
    (±0.15 °C, ±2.5 m); a rare few change operational status.
    """
    rng = make_rng(rng)
    updated = []
    for f in floats:
        if rng.random() > _DRIFT_RATIO:
            updated.append(f)
            continue

        temp  = max(0.0, float(f.temp)  + (rng.random() - 0.5) * 0.3)
        depth = max(0.0, float(f.depth) + (rng.random() - 0.5) * 5)

        status = f.status
        if rng.random() < _STATUS_CHANGE_ODDS:
            status = rng.choice(FLOAT_STATUSES)

        updated.append(f._replace(temp=f"{temp:.1f}", depth=f"{depth:.0f}", status=status))
    return updated


def drift_active_nodes(count: int, rng: RngLike = None) -> int:
    rng = make_rng(rng)
    return count + (1 if rng.random() > 0.5 else -1)


def filter_floats(floats: List[FloatNode], region: str) -> List[FloatNode]:
    if region == "All":
        return list(floats)
    return [f for f in floats if f.region == region]


def region_stats(floats: List[FloatNode]) -> Dict[str, Dict[str, object]]:
    """Float count and mean surface temperature per region (plus "All")."""
    stats = {}
    for region in REGION_CONFIG:
        members = filter_floats(floats, region)
        count   = len(members)
        total   = sum(float(f.temp) for f in members)
        stats[region] = {
            "count":    count,
            "avg_temp": f"{total / count:.1f}" if count else "0.0",
        }
    return stats


# ── Weather ───────────────────────────────────────────────────────────────────

def generate_regional_weather(region: str, rng: RngLike = None) -> WeatherData:
    """
    Synthetic sea-state for a region. The Southern Ocean and North Atlantic
    run rougher and never report clear skies.
    """
    rng = make_rng(rng)

    if region == "Southern Ocean":
        base_wind, base_wave = 35, 4.5
    elif region == "North Atlantic":
        base_wind, base_wave = 25, 2.8
    else:
        base_wind, base_wave = 15, 1.2

    wind = base_wind + (rng.random() * 10 - 5)
    wave = base_wave + (rng.random() * 1.5 - 0.5)

    condition, precip, visibility, pressure = "Clear", "0", "10+", "1015"

    roll = rng.random()
    if region in ("Southern Ocean", "North Atlantic"):
        if roll > 0.6:
            condition, precip, visibility, pressure = "Stormy", "85", "2", "985"
        elif roll > 0.3:
            condition, precip, visibility, pressure = "Rain", "60", "5", "1002"
        else:
            condition, precip, visibility, pressure = "Cloudy", "20", "8", "1010"
    else:
        if roll > 0.8:
            condition, precip, visibility, pressure = "Rain", "40", "6", "1008"
        elif roll > 0.5:
            condition, precip, visibility, pressure = "Cloudy", "10", "9", "1012"

    return WeatherData(
        wind_speed    = f"{wind:.0f}",
        wave_height   = f"{wave:.1f}",
        precipitation = precip,
        visibility    = visibility,
        condition     = condition,
        pressure      = pressure,
    )


# ── Data log ──────────────────────────────────────────────────────────────────

def telemetry_log_line(rng: RngLike = None, now: Optional[datetime] = None) -> str:
    """e.g. ``[14:02:11] FLOAT_4821 :: SAL_VAL > 35.12``"""
    rng = make_rng(rng)
    now = now or datetime.now(timezone.utc)
    float_id = rng.randrange(1000, 10000)
    metric   = rng.choice(LOG_METRICS)
    value    = rng.random() * 100
    return f"[{now:%H:%M:%S}] FLOAT_{float_id} :: {metric}_VAL > {value:.2f}"
