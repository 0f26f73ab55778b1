"""
Print a per-region summary of the kecamatan population dataset and a
per-class summary of the road dataset.

    python -m app.scripts.summarize_datasets [data_dir]
"""
import sys
from pathlib import Path

import geopandas as gpd
import pandas as pd

from app.config import MapConfig
from app.services.classifier import road_class
from app.services.geometry_metrics import KM_PER_DEGREE, area


def _column(gdf: gpd.GeoDataFrame, name: str, default) -> pd.Series:
    if name in gdf.columns:
        return gdf[name]
    return pd.Series(default, index=gdf.index)


def summarize_regions(path: Path) -> pd.DataFrame:
    gdf = gpd.read_file(path)

    gdf['NAMOBJ'] = _column(gdf, 'NAMOBJ', None)
    # Same fallbacks as the map: WADMKK, then WADMPR
    wadmkk = _column(gdf, 'WADMKK', None).replace('', pd.NA)
    wadmpr = _column(gdf, 'WADMPR', None).replace('', pd.NA)
    gdf['region'] = wadmkk.fillna(wadmpr).fillna('')
    gdf['population'] = pd.to_numeric(_column(gdf, 'Penduduk', 0), errors='coerce').fillna(0)
    gdf['area_km2'] = [area(geom.__geo_interface__) if geom is not None else 0.0 for geom in gdf.geometry]

    summary = gdf.groupby('region').agg(
        kecamatan=('NAMOBJ', 'nunique'),
        population=('population', 'sum'),
        area_km2=('area_km2', 'sum'),
    )
    summary['density'] = (summary['population'] / summary['area_km2']).where(summary['area_km2'] > 0, 0)
    return summary.sort_index()


def summarize_roads(path: Path) -> pd.DataFrame:
    gdf = gpd.read_file(path)
    remarks = _column(gdf, 'REMARK', '').fillna('')
    gdf['road_class'] = [road_class(r).road_class for r in remarks]
    lengths = pd.to_numeric(_column(gdf, 'SHAPE_Leng', 0), errors='coerce').fillna(0)
    gdf['length_km'] = lengths * KM_PER_DEGREE
    return gdf.groupby('road_class').agg(segments=('road_class', 'size'), length_km=('length_km', 'sum'))


def summarize_datasets(config: MapConfig):
    if config.region_path.exists():
        print(f"Reading {config.region_path}...")
        print(summarize_regions(config.region_path).round(2).to_string())
    else:
        print(f"Region dataset not found: {config.region_path}")

    if config.road_path.exists():
        print(f"\nReading {config.road_path}...")
        print(summarize_roads(config.road_path).round(2).to_string())
    else:
        print(f"Road dataset not found: {config.road_path}")


if __name__ == "__main__":
    config = MapConfig.from_env()
    if len(sys.argv) > 1:
        config.data_dir = Path(sys.argv[1])
    summarize_datasets(config)
