"""
Tests for trip and schedule endpoints.
"""
from app.api.dependencies import get_planner
from app.main import app
from app.services.trip_service import TripLocks, TripPlanner
from app.tests.factories import FailingTripRepository, make_route


def _create_trip(client, total_km=250, daily_km=100, **extra):
    payload = {
        "route": make_route(total_km).model_dump(mode="json"),
        "route_source": {"type": "eurovelo", "eurovelo_id": 6, "variant": "developed"},
        "start_date": "2024-06-01",
        "daily_distance_km": daily_km,
    }
    payload.update(extra)
    return client.post("/api/trips", json=payload)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_trip(client):
    response = _create_trip(client)

    assert response.status_code == 201
    trip = response.json()
    assert trip["name"] == "EuroVelo 6 Trip"
    assert trip["status"] == "planning"
    assert trip["route_source"]["variant"] == "developed"
    assert trip["end_date"] == "2024-06-03"
    assert [day["target_km"] for day in trip["day_plans"]] == [100, 100, 50]
    assert [day["is_rest_day"] for day in trip["day_plans"]] == [False, False, False]


def test_create_trip_rejects_zero_daily_distance(client):
    response = _create_trip(client, daily_km=0)

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_parameter"


def test_create_trip_rejects_unknown_route_source(client):
    response = _create_trip(client, route_source={"type": "strava", "id": 1})
    assert response.status_code == 422


def test_get_list_and_delete_trip(client):
    trip_id = _create_trip(client).json()["id"]

    assert client.get(f"/api/trips/{trip_id}").status_code == 200
    assert [t["id"] for t in client.get("/api/trips").json()] == [trip_id]
    assert client.get("/api/trips", params={"status": "completed"}).json() == []

    assert client.delete(f"/api/trips/{trip_id}").status_code == 204
    assert client.get(f"/api/trips/{trip_id}").status_code == 404


def test_unknown_trip_is_404(client):
    response = client.get("/api/trips/12345")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


def test_update_trip(client):
    trip_id = _create_trip(client).json()["id"]

    response = client.patch(
        f"/api/trips/{trip_id}",
        json={"name": "Danube", "budget": {"amount": "750.00", "currency": "EUR"}},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Danube"
    assert response.json()["budget"]["currency"] == "EUR"

    cleared = client.patch(f"/api/trips/{trip_id}", json={"clear_budget": True}).json()
    assert cleared["budget"] is None


def test_update_day_distance(client):
    trip = _create_trip(client).json()
    day_id = trip["day_plans"][0]["id"]

    response = client.patch(f"/api/trips/{trip['id']}/days/{day_id}/distance", json={"target_km": 120})

    assert response.status_code == 200
    assert [day["start_km"] for day in response.json()["day_plans"]] == [0, 120, 220]

    negative = client.patch(f"/api/trips/{trip['id']}/days/{day_id}/distance", json={"target_km": -1})
    assert negative.status_code == 422


def test_update_day_date_conflict(client):
    trip = _create_trip(client).json()
    day_id = trip["day_plans"][0]["id"]

    response = client.patch(f"/api/trips/{trip['id']}/days/{day_id}/date", json={"date": "2024-06-02"})
    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "conflict"

    malformed = client.patch(f"/api/trips/{trip['id']}/days/{day_id}/date", json={"date": "06/02/2024"})
    assert malformed.status_code == 422

    unchanged = client.get(f"/api/trips/{trip['id']}").json()
    assert unchanged["day_plans"] == trip["day_plans"]


def test_insert_rest_day_and_remove_day(client):
    trip = _create_trip(client).json()
    second_id = trip["day_plans"][1]["id"]

    days = client.post(f"/api/trips/{trip['id']}/days/{second_id}/rest-day").json()["day_plans"]
    assert len(days) == 4
    assert days[2]["target_km"] == 0
    assert days[2]["status"] == "skipped"
    assert days[2]["is_rest_day"] is True
    assert days[3]["date"] == "2024-06-04"

    response = client.delete(f"/api/trips/{trip['id']}/days/{days[2]['id']}")
    assert response.status_code == 200
    assert len(response.json()["day_plans"]) == 3


def test_remove_only_day_is_400(client):
    trip = _create_trip(client, total_km=50).json()
    day_id = trip["day_plans"][0]["id"]

    response = client.delete(f"/api/trips/{trip['id']}/days/{day_id}")

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_operation"


def test_day_progress_and_stats(client):
    trip = _create_trip(client).json()
    trip_id = trip["id"]
    first_id = trip["day_plans"][0]["id"]

    assert client.get("/api/trips/active").status_code == 404

    assert client.post(f"/api/trips/{trip_id}/days/{first_id}/start").json()["day_plans"][0]["status"] == "in_progress"
    completed = client.post(
        f"/api/trips/{trip_id}/days/{first_id}/complete",
        json={"actual_km": 80, "redistribute": True},
    ).json()
    assert completed["status"] == "active"
    assert [day["target_km"] for day in completed["day_plans"][1:]] == [85, 85]
    assert client.get("/api/trips/active").json()["id"] == trip_id

    again = client.post(f"/api/trips/{trip_id}/days/{first_id}/complete", json={"actual_km": 90})
    assert again.status_code == 400

    stats = client.get(f"/api/trips/{trip_id}/stats").json()
    assert stats["completed_km"] == 80
    assert stats["completed_days"] == 1
    assert stats["remaining_days"] == 2

    summary = client.get(f"/api/trips/{trip_id}/summary").json()
    assert summary["cycling_days"] == 1


def test_skip_and_adjust(client):
    trip = _create_trip(client).json()
    trip_id = trip["id"]
    days = trip["day_plans"]

    client.post(f"/api/trips/{trip_id}/days/{days[0]['id']}/complete", json={"actual_km": 250})
    adjusted = client.post(f"/api/trips/{trip_id}/days/adjust", json={"through_index": 0}).json()
    assert [day["status"] for day in adjusted["day_plans"]] == ["completed", "skipped", "skipped"]
    assert adjusted["status"] == "completed"

    skip = client.post(f"/api/trips/{trip_id}/days/{days[1]['id']}/skip")
    assert skip.status_code == 400


def test_pause_and_resume(client):
    trip_id = _create_trip(client).json()["id"]

    assert client.post(f"/api/trips/{trip_id}/pause").json()["status"] == "paused"
    assert client.post(f"/api/trips/{trip_id}/resume").json()["status"] == "planning"
    assert client.post(f"/api/trips/{trip_id}/resume").status_code == 400


def test_storage_failure_is_503(client, session_factory):
    trip = _create_trip(client).json()
    db = session_factory()
    app.dependency_overrides[get_planner] = lambda: TripPlanner(FailingTripRepository(db), locks=TripLocks())
    try:
        response = client.patch(
            f"/api/trips/{trip['id']}/days/{trip['day_plans'][0]['id']}/distance",
            json={"target_km": 10},
        )
    finally:
        del app.dependency_overrides[get_planner]
        db.close()

    assert response.status_code == 503
    assert response.json()["details"]["code"] == "persistence_failure"
    assert client.get(f"/api/trips/{trip['id']}").json()["day_plans"] == trip["day_plans"]
