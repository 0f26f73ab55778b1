"""
Geometry metrics for kecamatan polygons.

Area uses a planar shoelace sum on raw lon/lat degrees scaled by a fixed
111 km/degree factor on both axes. This is an estimate for display, it is not
a projected or geodesic area.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

import numpy as np
from shapely.errors import ShapelyError
from shapely.geometry import shape

logger = logging.getLogger(__name__)

KM_PER_DEGREE = 111

POLYGONAL_TYPES = ('Polygon', 'MultiPolygon')


@dataclass(frozen=True)
class DerivedMetrics:
    """Display metrics for one region feature."""
    area_km2: float
    density: float


def _ring_array(ring: Sequence) -> np.ndarray:
    coords = np.asarray(ring, dtype=float)
    if coords.size == 0:
        return np.empty((0, 2))
    if coords.ndim != 2 or coords.shape[1] < 2:
        raise ValueError(f"Ring is not a sequence of positions (shape {coords.shape})")
    return coords[:, :2]


def ring_area(ring: Sequence) -> float:
    """
    Shoelace area of a single ring in km².

    Pairs consecutive vertices without wrapping around, so the ring is
    expected to be closed (first == last) as GeoJSON requires.
    """
    coords = _ring_array(ring)
    if len(coords) < 3:
        return 0.0
    x = coords[:, 0]
    y = coords[:, 1]
    signed = float(np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]))
    return abs(signed / 2) * KM_PER_DEGREE * KM_PER_DEGREE


def is_polygonal(geometry: Optional[Dict[str, Any]]) -> bool:
    return isinstance(geometry, dict) and geometry.get('type') in POLYGONAL_TYPES


def _outer_rings(geometry: Optional[Dict[str, Any]]) -> list:
    if not isinstance(geometry, dict):
        return []
    geom_type = geometry.get('type')
    coords = geometry.get('coordinates') or []
    if not isinstance(coords, (list, tuple)):
        raise TypeError(f"{geom_type} coordinates must be a list, got {type(coords).__name__}")
    if geom_type == 'Polygon':
        return [coords[0]] if coords else []
    if geom_type == 'MultiPolygon':
        return [polygon[0] for polygon in coords if isinstance(polygon, (list, tuple)) and polygon]
    return []


def area(geometry: Optional[Dict[str, Any]]) -> float:
    """
    Approximate area in km² of a Polygon (outer ring only) or MultiPolygon
    (sum of member outer rings). Other geometry types have no area.
    """
    try:
        return sum(ring_area(ring) for ring in _outer_rings(geometry))
    except (TypeError, ValueError, IndexError, KeyError) as e:
        logger.warning(f"Could not compute area, treating as 0: {e}")
        return 0.0


def centroid(geometry: Optional[Dict[str, Any]]) -> Optional[Tuple[float, float]]:
    """
    Vertex-average point of the first polygon's outer ring, as (lat, lng).

    Every listed vertex counts, including the closing one. This places heat
    points, it is not an area-weighted centroid.
    """
    try:
        rings = _outer_rings(geometry)
        if not rings:
            return None
        coords = _ring_array(rings[0])
    except (TypeError, ValueError, IndexError, KeyError) as e:
        logger.warning(f"Could not compute centroid: {e}")
        return None
    if len(coords) == 0:
        return None
    lng, lat = coords.mean(axis=0)
    return float(lat), float(lng)


def derived_metrics(geometry: Optional[Dict[str, Any]], population: float) -> DerivedMetrics:
    """Area and population density (people per km²) of one feature."""
    area_km2 = area(geometry)
    density = population / area_km2 if area_km2 > 0 else 0
    return DerivedMetrics(area_km2=area_km2, density=density)


def geometry_bounds(
    geometries: Iterable[Optional[Dict[str, Any]]]
) -> Optional[Tuple[float, float, float, float]]:
    """
    Combined (min_lng, min_lat, max_lng, max_lat) of the given GeoJSON
    geometries, or None when none of them has a usable extent.
    """
    bounds = None
    for geometry in geometries:
        if not geometry:
            continue
        try:
            geom = shape(geometry)
        except (ShapelyError, TypeError, ValueError, KeyError, IndexError, AttributeError) as e:
            logger.debug(f"Skipping geometry in bounds: {e}")
            continue
        if geom.is_empty:
            continue
        min_x, min_y, max_x, max_y = geom.bounds
        if bounds is None:
            bounds = (min_x, min_y, max_x, max_y)
        else:
            bounds = (
                min(bounds[0], min_x),
                min(bounds[1], min_y),
                max(bounds[2], max_x),
                max(bounds[3], max_y),
            )
    return bounds
