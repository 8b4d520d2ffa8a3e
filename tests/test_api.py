"""Tests for the HTTP API served by the Flask app."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import AsyncMock

import pytest
from faker import Faker

from core.exceptions import PersistenceError


def _participate(client, location_id="alpha", access_time="2025-05-01T09:00:00.000Z", user_agent="pytest", **kwargs):
    return client.post(
        "/api/participate",
        json={"locationId": location_id, "accessTime": access_time, "userAgent": user_agent},
        **kwargs,
    )


class TestLocations:
    """Tests for GET /api/locations and /api/locations/<id>"""

    def test_list_locations(self, client):
        response = client.get("/api/locations")

        assert response.status_code == 200
        assert response.get_json() == {
            "alpha": {"name": "Alpha Station", "prize": "Coffee", "emoji": "☕"},
            "beta": {"name": "Beta Station", "prize": "Cake", "emoji": "🍰"},
        }

    def test_location_without_winner(self, client):
        data = client.get("/api/locations/alpha").get_json()

        assert data["locationId"] == "alpha"
        assert data["hasWinner"] is False
        assert data["winnerTime"] is None

    def test_location_with_winner(self, client):
        _participate(client)

        data = client.get("/api/locations/alpha").get_json()

        assert data["hasWinner"] is True
        assert data["winnerTime"].endswith("Z")

    def test_unknown_location_returns_404(self, client):
        response = client.get("/api/locations/nowhere")

        assert response.status_code == 404
        assert response.get_json()["code"] == "UNKNOWN_LOCATION"


class TestParticipate:
    """Tests for POST /api/participate"""

    def test_first_visit_wins(self, client):
        response = _participate(client)

        assert response.status_code == 200
        assert response.get_json() == {
            "isWinner": True,
            "locationName": "Alpha Station",
            "prize": "Coffee",
            "emoji": "☕",
            "accessTime": "2025-05-01T09:00:00.000Z",
            "winnerTime": None,
        }

    def test_second_visit_sees_winner_time(self, client):
        _participate(client, access_time="t1")
        winner_time = client.get("/api/locations/alpha").get_json()["winnerTime"]

        data = _participate(client, access_time="t2").get_json()

        assert data["isWinner"] is False
        assert data["accessTime"] == "t2"
        assert data["winnerTime"] == winner_time

    def test_records_source_address_and_header_user_agent(self, client):
        client.post(
            "/api/participate",
            json={"locationId": "beta"},
            headers={"User-Agent": "HeaderAgent/1.0"},
            environ_base={"REMOTE_ADDR": "203.0.113.7"},
        )

        entry = client.get("/api/admin/logs").get_json()[0]
        assert entry["ip"] == "203.0.113.7"
        assert entry["userAgent"] == "HeaderAgent/1.0"
        assert entry["accessTime"] is None

    def test_unknown_location_returns_400_and_changes_nothing(self, client):
        _participate(client)

        response = _participate(client, location_id="nowhere")

        assert response.status_code == 400
        assert response.get_json()["code"] == "UNKNOWN_LOCATION"
        stats = client.get("/api/admin/stats").get_json()
        assert stats["totalParticipants"] == 1
        assert stats["winnersCount"] == 1

    @pytest.mark.parametrize("body", [
        None,
        [],
        {},
        {"locationId": ""},
        {"locationId": 7},
        {"locationId": "alpha", "accessTime": 12},
        {"locationId": "alpha", "userAgent": ["x"]},
    ])
    def test_malformed_body_returns_400(self, client, body):
        response = client.post("/api/participate", json=body)

        assert response.status_code == 400
        assert response.get_json()["code"] == "VALIDATION_FAILURE"
        assert client.get("/api/admin/stats").get_json()["totalParticipants"] == 0

    def test_invalid_json_returns_400(self, client):
        response = client.post("/api/participate", data="{not json", content_type="application/json")

        assert response.status_code == 400

    def test_concurrent_requests_from_threads_yield_one_winner(self, app):
        fake = Faker()
        agents = [fake.user_agent() for _ in range(40)]

        def visit(agent):
            with app.test_client() as thread_client:
                return _participate(thread_client, user_agent=agent).get_json()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(visit, agents))

        assert sum(result["isWinner"] for result in results) == 1
        with app.test_client() as check:
            assert check.get("/api/admin/stats").get_json()["totalParticipants"] == 40


class TestAdmin:
    """Tests for /api/admin endpoints"""

    def test_scenario_stats(self, client):
        _participate(client, "alpha", "t1")
        _participate(client, "beta", "t1")
        _participate(client, "alpha", "t2")

        stats = client.get("/api/admin/stats").get_json()

        assert stats["totalLocations"] == 2
        assert stats["winnersCount"] == 2
        assert stats["totalParticipants"] == 3
        assert stats["participantsByLocation"]["alpha"] == {"name": "Alpha Station", "count": 2, "hasWinner": True}
        assert stats["participantsByLocation"]["beta"] == {"name": "Beta Station", "count": 1, "hasWinner": True}

    def test_winners_and_logs(self, client):
        _participate(client, "alpha", "t1")
        _participate(client, "alpha", "t2")

        winners = client.get("/api/admin/winners").get_json()
        logs = client.get("/api/admin/logs").get_json()

        assert winners["alpha"]["accessTime"] == "t1"
        assert winners["alpha"]["locationInfo"]["prize"] == "Coffee"
        assert [entry["accessTime"] for entry in logs] == ["t2", "t1"]
        assert [entry["isWinner"] for entry in logs] == [False, True]

    def test_logs_limit_parameter(self, client):
        for n in range(3):
            _participate(client, "beta", str(n))

        logs = client.get("/api/admin/logs?limit=1").get_json()

        assert [entry["accessTime"] for entry in logs] == ["2"]
        assert len(client.get("/api/admin/logs?limit=1000").get_json()) == 3
        assert len(client.get("/api/admin/logs?limit=0").get_json()) == 3

    def test_reset(self, client):
        _participate(client, "alpha")
        _participate(client, "beta")

        response = client.post("/api/admin/reset")

        assert response.status_code == 200
        assert response.get_json() == {"message": "Event has been reset."}
        assert client.get("/api/admin/winners").get_json() == {}
        assert client.get("/api/admin/logs").get_json() == []
        for location_id in ("alpha", "beta"):
            assert client.get(f"/api/locations/{location_id}").get_json()["hasWinner"] is False

    def test_reset_storage_failure_returns_500(self, client, app_services, monkeypatch):
        monkeypatch.setattr(app_services.store, "reset", AsyncMock(side_effect=PersistenceError("disk I/O error")))

        response = client.post("/api/admin/reset")

        assert response.status_code == 500
        assert response.get_json()["code"] == "PERSISTENCE_FAILURE"
        assert "disk" not in response.get_json()["error"]


class TestOperational:
    def test_health(self, client):
        data = client.get("/health").get_json()

        assert data["status"] == "ok"
        assert data["locations"] == 2
        assert data["db_pool_size"] == 4
        assert "memory_rss" in data["host"]

    def test_metrics_exposes_visit_counter(self, client):
        _participate(client)

        body = client.get("/metrics").get_data(as_text=True)

        assert "promotion_visits_total" in body
        assert "http_request_latency_seconds" in body

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "error" in response.get_json()
