import pytest


def rectangle(min_x, min_y, max_x, max_y):
    """Closed axis-aligned GeoJSON polygon."""
    return {
        "type": "Polygon",
        "coordinates": [[
            [min_x, min_y], [max_x, min_y], [max_x, max_y], [min_x, max_y], [min_x, min_y]
        ]],
    }


def kecamatan(region, sub_region, population, geometry=None, region_key="WADMKK"):
    props = {"NAMOBJ": sub_region, region_key: region}
    if population is not None:
        props["Penduduk"] = population
    return {
        "type": "Feature",
        "properties": props,
        "geometry": geometry or rectangle(112.0, -7.5, 112.1, -7.4),
    }


def road(name, remark, length, region):
    return {
        "type": "Feature",
        "properties": {"NAMOBJ": name, "REMARK": remark, "SHAPE_Leng": length, "WADMKK": region},
        "geometry": {"type": "LineString", "coordinates": [[112.0, -7.4], [112.1, -7.3]]},
    }


@pytest.fixture
def region_data():
    return {
        "type": "FeatureCollection",
        "features": [
            kecamatan("Surabaya", "Gubeng", 120000, rectangle(112.74, -7.28, 112.76, -7.26)),
            kecamatan("Surabaya", "Wonokromo", 50000, rectangle(112.72, -7.31, 112.74, -7.29)),
            kecamatan("Sidoarjo", "Waru", 45000, rectangle(112.75, -7.36, 112.78, -7.34)),
        ],
    }


@pytest.fixture
def road_data():
    return {
        "type": "FeatureCollection",
        "features": [
            road("Jl. Ahmad Yani", "Jalan Arteri Primer", 0.05, "Surabaya"),
            road("Jl. Raya Waru", "Jalan Kolektor", 0.02, "Sidoarjo"),
            road(None, None, None, "Sidoarjo"),
        ],
    }
