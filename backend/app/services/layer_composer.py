"""
Layer Composer - turns the raw region and road FeatureCollections plus the
current filter selection into renderer-ready output.

Every call is a pure function of its inputs: it reads the source features,
never mutates them, and returns freshly built lists.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from app.services import feature_properties as fp
from app.services.classifier import population_color, road_class
from app.services.filter_index import ALL
from app.services.geometry_metrics import (
    KM_PER_DEGREE,
    centroid,
    derived_metrics,
    geometry_bounds,
    is_polygonal,
)

logger = logging.getLogger(__name__)

# Region polygon styling
REGION_OUTLINE_COLOR = 'white'
REGION_OUTLINE_WEIGHT = 2
REGION_DASH_ARRAY = '3'
FILL_OPACITY = 0.7
HEATMAP_FILL_OPACITY = 0.9

# Road line styling
ROAD_OPACITY = 0.8

# Heat intensity = population / HEAT_SCALE
HEAT_SCALE = 10000

# Popup fallbacks shown to the user
UNKNOWN_REGION_NAME = 'Tidak diketahui'
UNKNOWN_PARENT_REGION = '-'
UNNAMED_ROAD = 'Jalan Tanpa Nama'
DEFAULT_ROAD_TYPE = 'Jalan Lokal'


@dataclass(frozen=True)
class FilterSelection:
    """Current cascading filter choice."""
    region: str = ALL
    sub_region: str = ALL


@dataclass(frozen=True)
class HeatPoint:
    lat: float
    lng: float
    intensity: float


@dataclass
class StyledFeature:
    """A region polygon with its choropleth style and popup data."""
    geometry: Dict[str, Any]
    color: str
    weight: int
    fill_opacity: float
    popup_fields: Dict[str, Any]
    tooltip_label: str
    outline_color: str = REGION_OUTLINE_COLOR
    dash_array: str = REGION_DASH_ARRAY


@dataclass
class StyledRoad:
    """A road line with its class style and popup data."""
    geometry: Dict[str, Any]
    road_class: str
    color: str
    weight: int
    popup_fields: Dict[str, Any]
    opacity: float = ROAD_OPACITY


@dataclass
class RegionComposition:
    """Output of one region composition pass."""
    styled_features: List[StyledFeature] = field(default_factory=list)
    heat_points: List[HeatPoint] = field(default_factory=list)
    matched_count: int = 0
    total_population: float = 0
    # (min_lng, min_lat, max_lng, max_lat); None when nothing matched
    bounds: Optional[Tuple[float, float, float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def format_population(value: float) -> str:
    """Format a number with Indonesian digit grouping (1.234.567)."""
    if float(value).is_integer():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.3f}".rstrip('0').rstrip('.')
    return text.replace(',', '\0').replace('.', ',').replace('\0', '.')


def matches_region(region_name: str, region: str) -> bool:
    """
    Region filter test. Uses substring containment, so a selection that is
    part of a longer name also matches it (e.g. "Malang" matches "Kota Malang").
    """
    return region == ALL or region in region_name


def matches_selection(feature: Dict[str, Any], selection: FilterSelection) -> bool:
    props = fp.properties_of(feature)
    if not matches_region(fp.region_name(props), selection.region):
        return False
    return selection.sub_region == ALL or fp.sub_region_name(props) == selection.sub_region


def _features(data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    return [f for f in (data.get('features') or []) if isinstance(f, dict)]


def style_region(feature: Dict[str, Any], heatmap_mode: bool) -> StyledFeature:
    props = fp.properties_of(feature)
    geometry = feature.get('geometry')
    name = fp.sub_region_name(props) or UNKNOWN_REGION_NAME
    population = fp.population(props)
    metrics = derived_metrics(geometry, population)

    return StyledFeature(
        geometry=geometry,
        color=population_color(population),
        weight=REGION_OUTLINE_WEIGHT,
        fill_opacity=HEATMAP_FILL_OPACITY if heatmap_mode else FILL_OPACITY,
        popup_fields={
            'name': name,
            'region': fp.region_name(props) or UNKNOWN_PARENT_REGION,
            'population': population,
            'area_km2': round(metrics.area_km2, 2),
            'density': round(metrics.density),
        },
        tooltip_label=f"{name} ({format_population(population)} jiwa)",
    )


def heat_point(feature: Dict[str, Any]) -> Optional[HeatPoint]:
    geometry = feature.get('geometry')
    if not is_polygonal(geometry):
        return None
    point = centroid(geometry)
    if point is None:
        return None
    lat, lng = point
    return HeatPoint(lat=lat, lng=lng, intensity=fp.population(fp.properties_of(feature)) / HEAT_SCALE)


def compose_regions(
    data: Optional[Dict[str, Any]],
    selection: FilterSelection,
    heatmap_mode: bool = False,
) -> RegionComposition:
    """
    Filter the region dataset by the selection and build the choropleth
    features, heat points and summary for the renderer.
    """
    matched = [f for f in _features(data) if matches_selection(f, selection)]

    styled = [style_region(f, heatmap_mode) for f in matched]
    heat_points = [p for p in (heat_point(f) for f in matched) if p is not None]

    composition = RegionComposition(
        styled_features=styled,
        heat_points=heat_points,
        matched_count=len(styled),
        total_population=sum(s.popup_fields['population'] for s in styled),
        bounds=geometry_bounds(f.get('geometry') for f in matched) if matched else None,
    )
    logger.info(
        f"Region filter {selection.region!r}/{selection.sub_region!r}: "
        f"{composition.matched_count} kecamatan, {len(heat_points)} heat points"
    )
    return composition


def style_road(feature: Dict[str, Any]) -> StyledRoad:
    props = fp.properties_of(feature)
    remark = fp.remark(props)
    style = road_class(remark)
    return StyledRoad(
        geometry=feature.get('geometry'),
        road_class=style.road_class,
        color=style.color,
        weight=style.weight,
        popup_fields={
            'name': fp.road_name(props) or UNNAMED_ROAD,
            'type': remark or DEFAULT_ROAD_TYPE,
            'length_km': round(fp.shape_length(props) * KM_PER_DEGREE, 2),
        },
    )


def compose_roads(data: Optional[Dict[str, Any]], region: str = ALL) -> List[StyledRoad]:
    """Filter roads by region (substring match on WADMKK) and style them."""
    roads = [
        style_road(f) for f in _features(data)
        if matches_region(fp.road_region_name(fp.properties_of(f)), region)
    ]
    logger.info(f"Road filter {region!r}: {len(roads)} segments")
    return roads


def feature_collection(items: List[Any]) -> Dict[str, Any]:
    """Wrap styled regions or roads as a GeoJSON FeatureCollection."""
    features = []
    for item in items:
        properties = asdict(item)
        geometry = properties.pop('geometry')
        features.append({"type": "Feature", "geometry": geometry, "properties": properties})
    return {"type": "FeatureCollection", "features": features}
