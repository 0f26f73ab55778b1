"""
Filter/view state machine for one map session.

The selection and heatmap flag live in an immutable SessionState. Every
transition builds a new SessionState, recomposes whichever layers depend on
what changed and returns the result as a ViewUpdate.
"""
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional

from app.services.filter_index import ALL, FilterIndex
from app.services.layer_composer import (
    FilterSelection,
    RegionComposition,
    StyledRoad,
    compose_regions,
    compose_roads,
)

logger = logging.getLogger(__name__)


def _features(data: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return (data or {}).get('features') or []


@dataclass(frozen=True)
class SessionState:
    """Current region, sub-region and heatmap visibility."""
    region: str = ALL
    sub_region: str = ALL
    heatmap_visible: bool = False

    @property
    def selection(self) -> FilterSelection:
        return FilterSelection(region=self.region, sub_region=self.sub_region)


INITIAL_STATE = SessionState()


@dataclass
class ViewUpdate:
    """
    What the renderer needs after a transition. A layer left as None was not
    recomposed (or its dataset is unavailable) and should be kept as is.
    """
    state: SessionState
    regions: Optional[RegionComposition] = None
    roads: Optional[List[StyledRoad]] = None
    sub_region_options: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": {
                "region": self.state.region,
                "sub_region": self.state.sub_region,
                "heatmap_visible": self.state.heatmap_visible,
            },
            "regions": self.regions.to_dict() if self.regions is not None else None,
            "roads": [asdict(r) for r in self.roads] if self.roads is not None else None,
            "sub_region_options": self.sub_region_options,
        }


class MapSession:
    """
    Holds the two loaded datasets, the filter index built from the region
    dataset, and the current SessionState.

    Either dataset may be None (failed to load); the layers built from it are
    then skipped while the other keeps working.
    """

    def __init__(
        self,
        region_data: Optional[Dict[str, Any]] = None,
        road_data: Optional[Dict[str, Any]] = None,
    ):
        self.region_data = region_data
        self.road_data = road_data
        self.index = FilterIndex.build(_features(region_data))
        self.state = INITIAL_STATE

    @property
    def has_regions(self) -> bool:
        return self.region_data is not None

    @property
    def has_roads(self) -> bool:
        return self.road_data is not None

    def _regions(self, state: SessionState) -> Optional[RegionComposition]:
        if self.region_data is None:
            return None
        return compose_regions(self.region_data, state.selection, state.heatmap_visible)

    def _roads(self, state: SessionState) -> Optional[List[StyledRoad]]:
        if self.road_data is None:
            return None
        return compose_roads(self.road_data, state.region)

    def _apply(
        self,
        state: SessionState,
        regions: bool = True,
        roads: bool = False,
        options: bool = False,
    ) -> ViewUpdate:
        self.state = state
        return ViewUpdate(
            state=state,
            regions=self._regions(state) if regions else None,
            roads=self._roads(state) if roads else None,
            sub_region_options=self.index.sub_regions_for(state.region) if options else None,
        )

    def refresh(self) -> ViewUpdate:
        """Compose everything for the current state (initial render)."""
        return self._apply(self.state, regions=True, roads=True, options=True)

    def select_region(self, region: str) -> ViewUpdate:
        """Pick a region; the sub-region always goes back to "all"."""
        logger.debug(f"select_region({region!r})")
        state = replace(self.state, region=region, sub_region=ALL)
        return self._apply(state, regions=True, roads=True, options=True)

    def select_sub_region(self, sub_region: str) -> ViewUpdate:
        """Pick a sub-region within the current region. Roads are unaffected."""
        logger.debug(f"select_sub_region({sub_region!r})")
        state = replace(self.state, sub_region=sub_region)
        return self._apply(state, regions=True)

    def toggle_heatmap(self) -> ViewUpdate:
        """Flip heatmap visibility and recompose regions (fill opacity changes)."""
        state = replace(self.state, heatmap_visible=not self.state.heatmap_visible)
        logger.debug(f"toggle_heatmap -> {state.heatmap_visible}")
        return self._apply(state, regions=True)

    def reset(self) -> ViewUpdate:
        logger.debug("reset")
        return self._apply(INITIAL_STATE, regions=True, roads=True, options=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regions_available": self.has_regions,
            "roads_available": self.has_roads,
            "region_features": len(_features(self.region_data)),
            "road_features": len(_features(self.road_data)),
            "index": self.index.to_dict(),
        }


# Global session instance
_current_session: Optional[MapSession] = None


def get_current_session() -> Optional[MapSession]:
    """Get the current map session."""
    return _current_session


def set_current_session(session: Optional[MapSession]) -> None:
    """Set the current map session."""
    global _current_session
    _current_session = session
