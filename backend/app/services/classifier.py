"""
Classifier - choropleth color buckets for population and road type styling.
The legend is derived from the same tables so it always matches the map.
"""
from dataclasses import dataclass
from typing import List, Tuple

# Population buckets, highest first. A value must be strictly greater than
# the threshold to fall into the bucket.
POPULATION_BUCKETS: List[Tuple[float, str]] = [
    (100000, '#800026'),
    (75000, '#BD0026'),
    (50000, '#E31A1C'),
    (40000, '#FC4E2A'),
    (30000, '#FD8D3C'),
]
POPULATION_BASE_COLOR = '#FEB24C'

# Lower bounds shown in the legend, ascending
POPULATION_LEGEND_GRADES = [0, 30000, 40000, 50000, 75000, 100000]

ARTERIAL = "Arterial"
COLLECTOR = "Collector"
LOCAL = "Local"


@dataclass(frozen=True)
class RoadStyle:
    """Road class with its line color and weight."""
    road_class: str
    color: str
    weight: int


ROAD_STYLES = {
    ARTERIAL: RoadStyle(ARTERIAL, '#FF0000', 4),
    COLLECTOR: RoadStyle(COLLECTOR, '#0000FF', 3),
    LOCAL: RoadStyle(LOCAL, '#00AA00', 2),
}

# REMARK substrings checked in order; first match wins, otherwise Local
ROAD_REMARK_MARKERS: List[Tuple[str, str]] = [
    ("Arteri", ARTERIAL),
    ("Kolektor", COLLECTOR),
]


def population_color(population: float) -> str:
    """Fill color for a population value."""
    for threshold, color in POPULATION_BUCKETS:
        if population > threshold:
            return color
    return POPULATION_BASE_COLOR


def road_class(remark: str) -> RoadStyle:
    """Classify a road by its REMARK text (case-sensitive substring match)."""
    remark = remark or ""
    for marker, name in ROAD_REMARK_MARKERS:
        if marker in remark:
            return ROAD_STYLES[name]
    return ROAD_STYLES[LOCAL]


def population_legend() -> List[Tuple[int, str]]:
    """(lower bound, color) pairs, ascending."""
    return [(grade, population_color(grade + 1)) for grade in POPULATION_LEGEND_GRADES]


def road_legend() -> List[Tuple[str, str]]:
    """(road class, color) pairs in priority order."""
    return [(name, ROAD_STYLES[name].color) for name in (ARTERIAL, COLLECTOR, LOCAL)]
