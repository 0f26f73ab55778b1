"""
Unit tests for the Population & Road WebGIS API
"""
import json

import pytest
from fastapi.testclient import TestClient

from app.config import MapConfig, get_map_config, set_map_config
from app.main import app
from app.services.map_session import MapSession, get_current_session, set_current_session

client = TestClient(app)


@pytest.fixture
def loaded_session(region_data, road_data):
    session = MapSession(region_data, road_data)
    set_current_session(session)
    yield session
    set_current_session(None)


@pytest.fixture
def no_session():
    set_current_session(None)
    yield
    set_current_session(None)


class TestHealthEndpoints:
    """Test health check endpoints"""

    def test_root_health_check(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_endpoint(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "api_version": "0.1.0"}


class TestFilterEndpoints:

    def test_regions(self, loaded_session):
        response = client.get("/api/map/filters/regions")
        assert response.status_code == 200
        assert response.json() == ["Sidoarjo", "Surabaya"]

    def test_sub_regions(self, loaded_session):
        assert client.get("/api/map/filters/sub-regions").json() == ["Gubeng", "Waru", "Wonokromo"]
        assert client.get("/api/map/filters/sub-regions", params={"region": "Surabaya"}).json() == \
            ["Gubeng", "Wonokromo"]
        assert client.get("/api/map/filters/sub-regions", params={"region": "Malang"}).json() == []

    def test_without_session(self, no_session):
        response = client.get("/api/map/filters/regions")
        assert response.status_code == 400
        assert "No dataset has been loaded yet" in response.json()["detail"]


class TestTransitionEndpoints:

    def test_initial_state(self, loaded_session):
        response = client.get("/api/map/state")
        assert response.status_code == 200
        assert response.json() == {"region": "all", "sub_region": "all", "heatmap_visible": False}

    def test_view(self, loaded_session):
        data = client.get("/api/map/view").json()
        assert data["regions"]["matched_count"] == 3
        assert len(data["roads"]) == 3
        assert len(data["regions"]["heat_points"]) == 3

    def test_cascading_selection(self, loaded_session):
        data = client.post("/api/map/region", json={"region": "Surabaya"}).json()
        assert data["state"]["sub_region"] == "all"
        assert data["regions"]["matched_count"] == 2
        assert data["sub_region_options"] == ["Gubeng", "Wonokromo"]
        assert [r["road_class"] for r in data["roads"]] == ["Arterial"]

        data = client.post("/api/map/sub-region", json={"sub_region": "Gubeng"}).json()
        assert data["state"] == {"region": "Surabaya", "sub_region": "Gubeng", "heatmap_visible": False}
        assert data["regions"]["matched_count"] == 1
        feature = data["regions"]["styled_features"][0]
        assert feature["color"] == "#800026"
        assert feature["popup_fields"]["name"] == "Gubeng"
        assert data["roads"] is None

    def test_toggle_heatmap(self, loaded_session):
        data = client.post("/api/map/heatmap/toggle").json()
        assert data["state"]["heatmap_visible"] is True
        assert {f["fill_opacity"] for f in data["regions"]["styled_features"]} == {0.9}
        assert client.get("/api/map/state").json()["heatmap_visible"] is True

    def test_reset(self, loaded_session):
        client.post("/api/map/region", json={"region": "Sidoarjo"})
        client.post("/api/map/heatmap/toggle")
        data = client.post("/api/map/reset").json()
        assert data["state"] == {"region": "all", "sub_region": "all", "heatmap_visible": False}
        assert data["regions"]["matched_count"] == 3

    def test_empty_result_has_no_bounds(self, loaded_session):
        data = client.post("/api/map/sub-region", json={"sub_region": "Nowhere"}).json()
        assert data["regions"]["matched_count"] == 0
        assert data["regions"]["bounds"] is None


class TestLegendEndpoints:

    def test_legend(self):
        data = client.get("/api/map/legend").json()
        assert [p["lower_bound"] for p in data["population"]] == [0, 30000, 40000, 50000, 75000, 100000]
        assert data["population"][-1]["color"] == "#800026"
        assert data["roads"] == [
            {"road_class": "Arterial", "color": "#FF0000"},
            {"road_class": "Collector", "color": "#0000FF"},
            {"road_class": "Local", "color": "#00AA00"},
        ]

    def test_view_config(self):
        data = client.get("/api/map/config").json()
        assert data["center"] == [-7.45, 112.64]
        assert data["default_zoom"] == 10
        assert data["heatmap"]["radius"] == 25


class TestDatasetEndpoints:

    def test_status_without_session(self, no_session):
        data = client.get("/api/datasets/status").json()
        assert data["regions_available"] is False
        assert data["roads_available"] is False

    def test_upload_regions(self, no_session, region_data):
        response = client.post("/api/datasets/regions", json=region_data)
        assert response.status_code == 200
        data = response.json()
        assert data["available"] is True
        assert data["feature_count"] == 3

        status = client.get("/api/datasets/status").json()
        assert status["regions_available"] is True
        assert status["roads_available"] is False
        assert client.get("/api/map/filters/regions").json() == ["Sidoarjo", "Surabaya"]

    def test_upload_roads_keeps_regions(self, loaded_session, road_data):
        response = client.post("/api/datasets/roads", json=road_data)
        assert response.json()["available"] is True
        session = get_current_session()
        assert session is not loaded_session
        assert session.region_data is loaded_session.region_data

    def test_upload_invalid_format(self, loaded_session):
        response = client.post("/api/datasets/regions", json={"type": "Feature", "geometry": None})
        assert response.status_code == 200
        data = response.json()
        assert data["available"] is False
        assert "FeatureCollection" in data["message"]
        assert get_current_session() is loaded_session

    def test_upload_unknown_kind(self, region_data):
        response = client.post("/api/datasets/rivers", json=region_data)
        assert response.status_code == 400

    def test_reload_from_data_dir(self, no_session, tmp_path, region_data):
        (tmp_path / "penduduk_kecamatan.geojson").write_text(json.dumps(region_data), encoding="utf-8")
        previous = get_map_config()
        set_map_config(MapConfig(data_dir=tmp_path))
        try:
            data = client.post("/api/datasets/reload").json()
        finally:
            set_map_config(previous)
        assert data["regions_available"] is True
        assert data["roads_available"] is False
        assert data["region_features"] == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
