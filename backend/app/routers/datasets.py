"""
Datasets router - load, replace and inspect the region and road GeoJSON datasets.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel

from app.config import get_map_config
from app.services.dataset_loader import InvalidDatasetFormat, load_datasets, validate_feature_collection
from app.services.map_session import MapSession, get_current_session, set_current_session

logger = logging.getLogger(__name__)

router = APIRouter()

DATASET_KINDS = ["regions", "roads"]


class DatasetLoadResponse(BaseModel):
    """Result of loading one dataset."""
    kind: str
    available: bool
    message: str
    feature_count: int = 0


class DatasetStatusResponse(BaseModel):
    """Which datasets the current session has."""
    regions_available: bool
    roads_available: bool
    region_features: int
    road_features: int


def _loaded_status(session: Optional[MapSession]) -> DatasetStatusResponse:
    if session is None:
        return DatasetStatusResponse(
            regions_available=False, roads_available=False, region_features=0, road_features=0
        )
    summary = session.to_dict()
    return DatasetStatusResponse(
        regions_available=summary["regions_available"],
        roads_available=summary["roads_available"],
        region_features=summary["region_features"],
        road_features=summary["road_features"],
    )


@router.get("/status", response_model=DatasetStatusResponse)
async def get_dataset_status():
    """Report which datasets are currently loaded."""
    return _loaded_status(get_current_session())


@router.post("/reload", response_model=DatasetStatusResponse)
async def reload_datasets():
    """
    Reload both datasets from the configured data directory and start a new
    session. A dataset that fails to load is reported as unavailable.
    """
    region_data, road_data = load_datasets(get_map_config())
    session = MapSession(region_data, road_data)
    set_current_session(session)
    return _loaded_status(session)


@router.post("/{kind}", response_model=DatasetLoadResponse)
async def upload_dataset(kind: str, document: Any = Body(...)):
    """
    Replace one dataset with an uploaded GeoJSON FeatureCollection.

    An invalid document leaves the current session untouched and is reported
    with available=false.
    """
    if kind not in DATASET_KINDS:
        raise HTTPException(
            status_code=400,
            detail=f"Dataset kind must be one of {DATASET_KINDS}"
        )

    try:
        data = validate_feature_collection(document)
    except InvalidDatasetFormat as e:
        logger.error(f"Rejected uploaded {kind} dataset: {e}")
        return DatasetLoadResponse(kind=kind, available=False, message=f"Invalid GeoJSON format: {e}")

    current = get_current_session()
    region_data: Optional[Dict[str, Any]] = current.region_data if current else None
    road_data: Optional[Dict[str, Any]] = current.road_data if current else None
    if kind == "regions":
        region_data = data
    else:
        road_data = data

    set_current_session(MapSession(region_data, road_data))
    count = len(data["features"])
    logger.info(f"Uploaded {kind} dataset: {count} features")
    return DatasetLoadResponse(
        kind=kind,
        available=True,
        message=f"Loaded {count} features",
        feature_count=count,
    )
