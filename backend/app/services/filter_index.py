"""
Filter index for the cascading region (kota/kabupaten) -> sub-region
(kecamatan) selection.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from app.services import feature_properties as fp

logger = logging.getLogger(__name__)

ALL = "all"


class FilterIndex:
    """
    Region -> sub-region membership built once from the full region dataset.

    Supports:
    - Sorted region list for the first dropdown
    - Sorted sub-region list for a region (or every region)
    - Reverse lookup of a sub-region's owning region
    """

    def __init__(self):
        # region -> sub-regions in first-seen order, no duplicates
        self._sub_regions: Dict[str, List[str]] = {}
        # sub-region -> owning region, last seen wins
        self._owner: Dict[str, str] = {}

    @classmethod
    def build(cls, region_features: Iterable[Dict[str, Any]]) -> "FilterIndex":
        """
        Build the index in a single pass.

        Features without a region name add nothing to the index (they stay
        in the dataset for rendering).
        """
        index = cls()
        for feature in region_features or []:
            props = fp.properties_of(feature)
            region = fp.region_name(props)
            sub_region = fp.sub_region_name(props)

            if not region:
                continue

            members = index._sub_regions.setdefault(region, [])
            if not sub_region:
                continue
            if sub_region not in members:
                members.append(sub_region)

            previous = index._owner.get(sub_region)
            if previous is not None and previous != region:
                logger.debug(f"Sub-region '{sub_region}' seen under '{previous}' and '{region}'")
            index._owner[sub_region] = region

        logger.info(f"Filter index: {len(index._sub_regions)} regions, {len(index._owner)} sub-regions")
        return index

    def regions_sorted(self) -> List[str]:
        return sorted(self._sub_regions)

    def sub_regions_for(self, region: str = ALL) -> List[str]:
        """Sorted sub-region names for a region; every sub-region for "all"."""
        if region == ALL:
            return sorted(self._owner)
        return sorted(self._sub_regions.get(region, []))

    def members(self, region: str) -> List[str]:
        """Sub-regions of a region in first-seen order."""
        return list(self._sub_regions.get(region, []))

    def region_of(self, sub_region: str) -> Optional[str]:
        return self._owner.get(sub_region)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_regions": len(self._sub_regions),
            "num_sub_regions": len(self._owner),
            "regions": {region: list(subs) for region, subs in self._sub_regions.items()},
        }
