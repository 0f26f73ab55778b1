"""
Map configuration - data file locations, initial view and heatmap rendering options.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

# backend/app/config.py -> <repo>/data
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


@dataclass
class HeatmapOptions:
    """Options passed straight to the heat layer renderer."""
    radius: int = 25
    blur: int = 35
    max_zoom: int = 13
    max_intensity: float = 10.0
    gradient: Dict[float, str] = field(default_factory=lambda: {
        0.0: '#FEB24C',
        0.3: '#FD8D3C',
        0.5: '#FC4E2A',
        0.7: '#E31A1C',
        0.9: '#BD0026',
        1.0: '#800026',
    })


@dataclass
class MapConfig:
    """Configuration for dataset loading and the initial map view."""
    data_dir: Path = DEFAULT_DATA_DIR
    region_file: str = "penduduk_kecamatan.geojson"
    road_file: str = "jalan_utama.geojson"
    center: Tuple[float, float] = (-7.450, 112.640)  # (lat, lng)
    default_zoom: int = 10
    heatmap: HeatmapOptions = field(default_factory=HeatmapOptions)

    @property
    def region_path(self) -> Path:
        return Path(self.data_dir) / self.region_file

    @property
    def road_path(self) -> Path:
        return Path(self.data_dir) / self.road_file

    @classmethod
    def from_env(cls) -> "MapConfig":
        """Build a config, letting WEBGIS_* environment variables override defaults."""
        config = cls()
        data_dir = os.getenv("WEBGIS_DATA_DIR")
        if data_dir:
            config.data_dir = Path(data_dir)
        config.region_file = os.getenv("WEBGIS_REGION_FILE", config.region_file)
        config.road_file = os.getenv("WEBGIS_ROAD_FILE", config.road_file)
        return config


# Global config instance
_map_config: Optional[MapConfig] = None


def get_map_config() -> MapConfig:
    """Get or create the global map configuration."""
    global _map_config
    if _map_config is None:
        _map_config = MapConfig.from_env()
    return _map_config


def set_map_config(config: MapConfig) -> None:
    """Replace the global map configuration."""
    global _map_config
    _map_config = config
