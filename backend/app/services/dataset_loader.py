"""
Dataset loading - reads the kecamatan population and road GeoJSON files and
checks that each one is a FeatureCollection.

A dataset that can't be read or isn't a FeatureCollection is reported once
and comes back as None; the other dataset still loads.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from app.config import MapConfig

logger = logging.getLogger(__name__)


class InvalidDatasetFormat(ValueError):
    """The document is not a GeoJSON FeatureCollection."""


def validate_feature_collection(doc: Any) -> Dict[str, Any]:
    """Return the document if it is a FeatureCollection, raise otherwise."""
    if not isinstance(doc, dict):
        raise InvalidDatasetFormat("GeoJSON must be an object")
    if doc.get('type') != 'FeatureCollection':
        raise InvalidDatasetFormat(
            f"Expected type 'FeatureCollection', got {doc.get('type')!r}"
        )
    if not isinstance(doc.get('features'), list):
        raise InvalidDatasetFormat("FeatureCollection has no 'features' list")
    return doc


def parse_feature_collection(doc: Any, name: str) -> Optional[Dict[str, Any]]:
    """Validate an already-parsed document; None (logged) when invalid."""
    try:
        data = validate_feature_collection(doc)
    except InvalidDatasetFormat as e:
        logger.error(f"Rejected {name}: {e}")
        return None
    logger.info(f"Loaded {name}: {len(data['features'])} features")
    return data


def load_geojson(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Read and validate a GeoJSON file; None (logged) on any failure."""
    path = Path(path)
    if not path.exists():
        logger.error(f"Dataset not found: {path}")
        return None

    try:
        with open(path, encoding='utf-8') as f:
            doc = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to read {path.name}: {e}")
        return None

    return parse_feature_collection(doc, path.name)


def load_datasets(config: MapConfig) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """Load (region_data, road_data) one after the other."""
    region_data = load_geojson(config.region_path)
    road_data = load_geojson(config.road_path)

    if region_data is None and road_data is None:
        logger.error("No dataset could be loaded")
    return region_data, road_data
