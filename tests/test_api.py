"""
HTTP API tests using FastAPI's TestClient
"""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app

FLOOD_CSV = "date,location,rainfall,humidity,pressure,temperature\n" + "".join(
    f"2024-07-{day:02d},Mumbai,150,90,980,28\n" for day in range(1, 16)
)
SMALL_CSV = "date,location,temp,humidity\n2024-01-01,Mumbai,30,70\n"


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as c:
        yield c


def upload(client, content: str, filename: str = "weather.csv", content_type: str = "text/csv", **kwargs):
    return client.post(
        "/api/v1/datasets",
        files={"file": (filename, content.encode("utf-8"), content_type)},
        **kwargs,
    )


class TestSystemEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["api"]["datasets"] == "/api/v1/datasets"

    def test_health(self, client):
        response = client.get("/health")
        body = response.json()

        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["services"]["dataset_store"]["backend"] == "InMemoryDatasetStore"
        assert body["services"]["weather_feed"]["mode"] == "demo"

    def test_request_id_header(self, client):
        assert "x-request-id" in client.get("/").headers


class TestDatasetEndpoints:

    def test_upload_and_list(self, client):
        response = upload(client, SMALL_CSV)
        assert response.status_code == 201
        info = response.json()
        assert info["name"] == "weather"
        assert info["summary"]["total_records"] == 1
        assert "records" not in info
        assert info["summary"]["avg_temperature"] == 30
        assert isinstance(info["summary"]["avg_temperature"], int)

        listing = client.get("/api/v1/datasets").json()
        assert [d["id"] for d in listing] == [info["id"]]

    def test_get_with_records(self, client):
        dataset_id = upload(client, SMALL_CSV).json()["id"]
        body = client.get(f"/api/v1/datasets/{dataset_id}").json()
        assert body["records"][0]["temperature"] == 30.0

    def test_unsupported_type(self, client):
        response = upload(client, "hello", filename="notes.txt", content_type="text/plain")
        assert response.status_code == 400

    def test_oversized_upload(self, tmp_path):
        app = create_app(Settings(use_file_storage=False, data_dir=str(tmp_path), max_upload_bytes=16))
        with TestClient(app) as c:
            response = upload(c, SMALL_CSV)
        assert response.status_code == 413

    def test_quoted_fields_upload(self, client):
        csv = 'date,location,temp\n2024-01-01,"Mumbai, India",30\n'
        info = upload(client, csv).json()
        assert info["summary"]["locations"] == ["Mumbai, India"]

    def test_upload_ids_are_unique(self, client):
        ids = {upload(client, SMALL_CSV).json()["id"] for _ in range(5)}
        assert len(ids) == 5

    def test_unparseable_csv(self, client):
        response = upload(client, "date,temp\n")
        assert response.status_code == 422
        assert response.json()["detail"].startswith("Failed to parse CSV")

    def test_delete(self, client):
        dataset_id = upload(client, SMALL_CSV).json()["id"]
        assert client.delete(f"/api/v1/datasets/{dataset_id}").status_code == 204
        assert client.get(f"/api/v1/datasets/{dataset_id}").status_code == 404
        assert client.delete(f"/api/v1/datasets/{dataset_id}").status_code == 404

    def test_latest_record(self, client):
        csv = "date,location,temp\n2024-01-01,Mumbai,30\n2024-03-01,Mumbai,33\n2024-05-01,Delhi,40\n"
        dataset_id = upload(client, csv).json()["id"]

        mumbai = client.get(f"/api/v1/datasets/{dataset_id}/latest", params={"location": "mumbai"})
        assert mumbai.json()["temperature"] == 33.0
        missing = client.get(f"/api/v1/datasets/{dataset_id}/latest", params={"location": "chennai"})
        assert missing.status_code == 404


class TestPredictionEndpoints:

    def test_dataset_prediction(self, client):
        dataset_id = upload(client, FLOOD_CSV).json()["id"]
        response = client.post("/api/v1/predictions/dataset", json={
            "dataset_id": dataset_id,
            "disaster_type": "flood",
            "location": "mumbai",
            "current_conditions": {"rainfall": 150, "humidity": 90, "pressure": 980, "temperature": 28},
        })
        body = response.json()

        assert response.status_code == 200
        assert body["method"] == "dataset"
        assert 0 <= body["risk_score"] <= 100
        assert body["analysis"]["risk_patterns"][0]["occurrences"] == 15
        assert body["dataset_id"] == dataset_id

    def test_small_dataset_falls_back(self, client):
        dataset_id = upload(client, SMALL_CSV).json()["id"]
        body = client.post("/api/v1/predictions/dataset", json={
            "dataset_id": dataset_id, "disaster_type": "flood"
        }).json()

        assert body["method"] == "fallback"
        assert body["risk_score"] == 30
        assert body["affected_population"] == 2000

    def test_unknown_dataset(self, client):
        response = client.post("/api/v1/predictions/dataset", json={
            "dataset_id": "nope", "disaster_type": "flood"
        })
        assert response.status_code == 404

    def test_analysis(self, client):
        dataset_id = upload(client, FLOOD_CSV).json()["id"]
        response = client.get("/api/v1/predictions/analysis",
                              params={"dataset_id": dataset_id, "disaster_type": "flood"})
        body = response.json()

        assert response.status_code == 200
        assert set(body["seasonal_factors"]) == {"q1", "q2", "q3", "q4"}
        assert len(body["risk_patterns"]) == 1

    def test_analysis_insufficient_data(self, client):
        dataset_id = upload(client, SMALL_CSV).json()["id"]
        response = client.get("/api/v1/predictions/analysis", params={"dataset_id": dataset_id})
        assert response.status_code == 422

    def test_manual_prediction(self, client):
        response = client.post("/api/v1/predictions/manual", json={
            "disaster_type": "cyclone",
            "location": "chennai",
            "factors": {"wind_speed": 130, "pressure": 960, "temperature": 31, "population": 9000},
        })
        body = response.json()

        assert response.status_code == 200
        assert body["method"] == "manual"
        assert body["risk_score"] == 96
        assert body["risk_level"] == "High"

    def test_manual_rejects_heat(self, client):
        response = client.post("/api/v1/predictions/manual", json={"disaster_type": "heat"})
        assert response.status_code == 422

    def test_manual_unknown_location(self, client):
        response = client.post("/api/v1/predictions/manual", json={
            "disaster_type": "flood", "location": "atlantis"
        })
        assert response.status_code == 404

    def test_live_prediction(self, client):
        response = client.post("/api/v1/predictions/live", json={
            "disaster_type": "flood", "location": "mumbai", "population": 8000
        })
        body = response.json()

        assert response.status_code == 200
        assert body["method"] == "live"
        assert body["recommendations"][0] == "Based on real-time weather data analysis"
        assert body["reasoning"][0].startswith("Live weather data from")

    def test_history(self, client):
        for _ in range(12):
            client.post("/api/v1/predictions/manual", json={"disaster_type": "flood", "location": "delhi"})

        history = client.get("/api/v1/predictions/history").json()
        assert len(history) == 10
        assert history[0]["location"] == "delhi"

        assert client.delete("/api/v1/predictions/history").status_code == 204
        assert client.get("/api/v1/predictions/history").json() == []


class TestWeatherEndpoints:

    def test_live(self, client):
        body = client.get("/api/v1/weather/live/chennai").json()
        assert body["location"] == "Chennai"
        assert 20 <= body["humidity"] <= 95

    def test_trend(self, client):
        body = client.get("/api/v1/weather/trend/delhi", params={"hours": 3}).json()
        assert len(body["points"]) == 4
        assert body["api_key_configured"] is False

    def test_trend_hours_bounds(self, client):
        assert client.get("/api/v1/weather/trend/delhi", params={"hours": 500}).status_code == 422


class TestApiKey:

    @pytest.fixture
    def secured_client(self, tmp_path):
        app = create_app(Settings(use_file_storage=False, data_dir=str(tmp_path), api_key="secret"))
        with TestClient(app) as c:
            yield c

    def test_upload_requires_key(self, secured_client):
        assert upload(secured_client, SMALL_CSV).status_code == 401

    def test_upload_with_key(self, secured_client):
        response = upload(secured_client, SMALL_CSV, headers={"Authorization": "Bearer secret"})
        assert response.status_code == 201

    def test_reads_are_open(self, secured_client):
        assert secured_client.get("/api/v1/datasets").status_code == 200
