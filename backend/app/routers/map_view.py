"""
Map view router - cascading filter options, filter/heatmap transitions and
legend data for the map frontend.
"""
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.config import get_map_config
from app.services.classifier import population_legend, road_legend
from app.services.filter_index import ALL
from app.services.map_session import MapSession, get_current_session

router = APIRouter()


class RegionSelectRequest(BaseModel):
    """Request to select a region (kota/kabupaten)."""
    region: str = Field(default=ALL, description='Region name or "all"')


class SubRegionSelectRequest(BaseModel):
    """Request to select a sub-region (kecamatan) within the current region."""
    sub_region: str = Field(default=ALL, description='Sub-region name or "all"')


class SessionStateResponse(BaseModel):
    region: str
    sub_region: str
    heatmap_visible: bool


def _require_session() -> MapSession:
    session = get_current_session()
    if session is None:
        raise HTTPException(
            status_code=400,
            detail="No dataset has been loaded yet. Please load the GeoJSON datasets first."
        )
    return session


@router.get("/filters/regions", response_model=List[str])
async def get_regions():
    """Sorted region names for the first dropdown."""
    return _require_session().index.regions_sorted()


@router.get("/filters/sub-regions", response_model=List[str])
async def get_sub_regions(region: str = ALL):
    """Sorted sub-region names for a region, or for every region with "all"."""
    return _require_session().index.sub_regions_for(region)


@router.get("/state", response_model=SessionStateResponse)
async def get_state():
    state = _require_session().state
    return SessionStateResponse(
        region=state.region,
        sub_region=state.sub_region,
        heatmap_visible=state.heatmap_visible,
    )


@router.get("/view")
async def get_view():
    """All layers composed for the current state."""
    return _require_session().refresh().to_dict()


@router.post("/region")
async def select_region(request: RegionSelectRequest):
    """Select a region. The sub-region resets to "all"; regions and roads are recomposed."""
    return _require_session().select_region(request.region).to_dict()


@router.post("/sub-region")
async def select_sub_region(request: SubRegionSelectRequest):
    """Select a sub-region. Only the region layer is recomposed."""
    return _require_session().select_sub_region(request.sub_region).to_dict()


@router.post("/heatmap/toggle")
async def toggle_heatmap():
    return _require_session().toggle_heatmap().to_dict()


@router.post("/reset")
async def reset_view():
    return _require_session().reset().to_dict()


@router.get("/legend")
async def get_legend():
    """Legend entries, taken from the classifier tables used for styling."""
    return {
        "population": [
            {"lower_bound": bound, "color": color} for bound, color in population_legend()
        ],
        "roads": [
            {"road_class": name, "color": color} for name, color in road_legend()
        ],
    }


@router.get("/config")
async def get_view_config():
    """Initial map view and heat layer options."""
    config = get_map_config()
    heatmap = config.heatmap
    return {
        "center": list(config.center),
        "default_zoom": config.default_zoom,
        "heatmap": {
            "radius": heatmap.radius,
            "blur": heatmap.blur,
            "max_zoom": heatmap.max_zoom,
            "max": heatmap.max_intensity,
            "gradient": {str(k): v for k, v in heatmap.gradient.items()},
        },
    }
