"""
FloatChat — Map Catalogue
Major maritime hubs and ocean regions of the simulated map overlay.
Coordinates are in the normalized 0–100 map plane.
"""

from typing import Dict, List, NamedTuple, Optional


class Port(NamedTuple):
    name:    str
    country: str
    x:       float
    y:       float
    region:  str


PORTS: List[Port] = [
    Port("New York",       "USA",          28, 32, "North Atlantic"),
    Port("London",         "UK",           46, 25, "North Atlantic"),
    Port("Reykjavik",      "Iceland",      40, 15, "North Atlantic"),
    Port("Tokyo",          "Japan",        85, 35, "Pacific"),
    Port("Shanghai",       "China",        80, 38, "Pacific"),
    Port("Singapore",      "Singapore",    72, 55, "Indian Ocean"),
    Port("Sydney",         "Australia",    88, 75, "Pacific"),
    Port("Cape Town",      "South Africa", 52, 75, "South Atlantic"),
    Port("Rio de Janeiro", "Brazil",       32, 65, "South Atlantic"),
    Port("Mumbai",         "India",        62, 42, "Indian Ocean"),
    Port("Los Angeles",    "USA",          15, 38, "Pacific"),
    Port("Honolulu",       "USA",           5, 45, "Pacific"),
]

# View transform applied when a region is focused (pan in %, zoom factor)
REGION_CONFIG: Dict[str, Dict[str, float]] = {
    "All":            {"x":   0, "y":   0, "scale": 1.0},
    "North Atlantic": {"x":  15, "y":  25, "scale": 2.2},
    "Pacific":        {"x": -25, "y":   5, "scale": 2.0},
    "Indian Ocean":   {"x": -10, "y": -10, "scale": 2.4},
    "Southern Ocean": {"x":   0, "y": -35, "scale": 2.4},
}

REGIONS: List[str] = list(REGION_CONFIG)

HAZARD_NAMES: List[str] = [
    "Cyclone Iota",
    "Typhoon Mawar",
    "Atlantic Swell",
    "Gulf Current",
    "Vortex Beta",
    "Polar Front",
]


def find_port(name: str) -> Optional[Port]:
    """Exact-name port lookup."""
    for port in PORTS:
        if port.name == name:
            return port
    return None


def is_region(name: str) -> bool:
    return name in REGION_CONFIG
