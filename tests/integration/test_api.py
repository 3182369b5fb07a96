"""
Integration tests for the trajectory planner API.

Fixtures (client, plan_payload) provided by tests/conftest.py.
"""
import json

import pytest


# ============================================================================
# System Endpoint Tests
# ============================================================================

def test_root_endpoint(client):
    """Test API root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Harbor Trajectory Planner API"
    assert data["version"] == "1.0.0"
    assert data["status"] == "operational"


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data


def test_playback_speeds(client):
    response = client.get("/api/playback/speeds")
    assert response.status_code == 200
    assert response.json()["speeds"] == [1, 2, 4, 8, 16, 32, 64, 128, 256]


# ============================================================================
# Trajectory Endpoint Tests
# ============================================================================

def test_calculate_trajectory(client, plan_payload):
    """Four waypoints give three real legs and the terminal leg."""
    response = client.post("/api/trajectory", json=plan_payload)
    assert response.status_code == 200
    data = response.json()

    legs = data["legs"]
    assert len(legs) == 4
    assert legs[0]["command"] == "Start"
    assert legs[-1]["command"] == "End of Plan"
    assert legs[-1]["distance_m"] == 0
    assert legs[-1]["turn_radius_m"] is None

    assert legs[0]["speed_kts"] == 6.0
    assert legs[1]["speed_kts"] == 5.0
    assert legs[2]["propulsion"] == "Astern"
    assert legs[2]["pivot_time_s"] == 30
    assert legs[1]["pivot_time_s"] == 0

    assert legs[0]["start"]["speedToNext"] == 6.0
    assert legs[2]["start"]["propulsionDirection"] == "Astern"

    summary = data["summary"]
    assert summary["leg_count"] == 3
    assert summary["total_pivot_time_s"] == 30
    assert summary["total_time_s"] == pytest.approx(sum(leg["time_s"] for leg in legs))


def test_trajectory_without_drift_has_no_ground_track(client, plan_payload):
    response = client.post("/api/trajectory", json=plan_payload)
    leg = response.json()["legs"][0]
    assert leg["sog_kts"] is None
    assert leg["predicted_end"] is None
    assert leg["course_maintainable"] is None


def test_custom_pivot_duration(client, plan_payload):
    plan_payload["pivot_duration_s"] = 12
    response = client.post("/api/trajectory", json=plan_payload)
    assert response.status_code == 200
    assert response.json()["legs"][2]["pivot_time_s"] == 12


def test_turning_radius_violation(client):
    payload = {
        "waypoints": [
            {"id": 1, "lat": 0.0, "lng": 0.0},
            {"id": 2, "lat": 0.0, "lng": 0.01},
            {"id": 3, "lat": 0.005, "lng": 0.0},
        ],
        "ship": {"length": 150, "beam": 25, "turningRadius": 300},
    }
    response = client.post("/api/trajectory", json=payload)
    legs = response.json()["legs"]

    assert legs[1]["turn_radius_violation"] is True
    assert legs[1]["turn_radius_m"] < 300
    assert response.json()["summary"]["violation_count"] == 1


def test_trajectory_with_drift(client):
    payload = {
        "waypoints": [{"id": 1, "lat": 0.0, "lng": 0.0}, {"id": 2, "lat": 0.01, "lng": 0.0}],
        "environment": {
            "driftEnabled": True,
            "current": {"speed": 2.0, "direction": 20.0},
        },
    }
    response = client.post("/api/trajectory", json=payload)
    assert response.status_code == 200
    leg = response.json()["legs"][0]

    assert leg["sog_kts"] < leg["speed_kts"]
    assert leg["course_maintainable"] is True
    assert leg["course_correction_deg"] > 0
    assert leg["predicted_end"]["lat"] < 0.01


def test_unmaintainable_course(client):
    """An overwhelming beam current is reported, not hidden as NaN."""
    payload = {
        "waypoints": [{"id": 1, "lat": 0.0, "lng": 0.0}, {"id": 2, "lat": 0.01, "lng": 0.0}],
        "environment": {
            "driftEnabled": True,
            "current": {"speed": 50.0, "direction": 90.0},
        },
    }
    response = client.post("/api/trajectory", json=payload)
    assert response.status_code == 200
    leg = response.json()["legs"][0]

    assert leg["course_maintainable"] is False
    assert leg["course_correction_deg"] is None


def test_single_waypoint_has_no_legs(client):
    response = client.post("/api/trajectory", json={"waypoints": [{"id": 1, "lat": 0, "lng": 0}]})
    assert response.status_code == 200
    assert response.json()["legs"] == []
    assert response.json()["summary"]["leg_count"] == 0


def test_duplicate_waypoint_ids(client):
    payload = {"waypoints": [{"id": 1, "lat": 0, "lng": 0}, {"id": 1, "lat": 0, "lng": 0.01}]}
    response = client.post("/api/trajectory", json=payload)
    assert response.status_code == 400


def test_too_many_waypoints(client):
    payload = {"waypoints": [{"id": i, "lat": 0, "lng": i * 1e-4} for i in range(501)]}
    response = client.post("/api/trajectory", json=payload)
    assert response.status_code == 400


@pytest.mark.parametrize("waypoint", [
    {"id": 1, "lat": 95, "lng": 0},
    {"id": 1, "lat": 0, "lng": 200},
    {"id": 1, "lat": 0},
])
def test_invalid_waypoint_rejected(client, waypoint):
    payload = {"waypoints": [waypoint, {"id": 2, "lat": 0, "lng": 0.01}]}
    response = client.post("/api/trajectory", json=payload)
    assert response.status_code == 422


def test_invalid_ship_rejected(client, plan_payload):
    plan_payload["ship"]["turningRadius"] = 0
    response = client.post("/api/trajectory", json=plan_payload)
    assert response.status_code == 422


# ============================================================================
# Playback State Tests
# ============================================================================

def test_playback_state_at_start(client, plan_payload):
    response = client.post("/api/trajectory/state", json={**plan_payload, "progress": 0})
    assert response.status_code == 200
    data = response.json()

    assert data["state"]["position"] == {"lat": 51.90, "lng": 4.10}
    assert data["state"]["speed_kts"] == 6.0
    assert data["total_duration_s"] > 0


def test_playback_state_at_end(client, plan_payload):
    response = client.post("/api/trajectory/state", json={**plan_payload, "progress": 1})
    state = response.json()["state"]

    assert state["position"]["lat"] == pytest.approx(51.915)
    assert state["position"]["lng"] == pytest.approx(4.105)


def test_playback_state_duration_matches_legs(client, plan_payload):
    legs = client.post("/api/trajectory", json=plan_payload).json()
    state = client.post("/api/trajectory/state", json={**plan_payload, "progress": 0.5}).json()
    assert state["total_duration_s"] == pytest.approx(legs["summary"]["total_time_s"])
    assert state["progress"] == 0.5


def test_playback_state_without_route(client):
    response = client.post(
        "/api/trajectory/state",
        json={"waypoints": [{"id": 1, "lat": 0, "lng": 0}], "progress": 0.5},
    )
    assert response.status_code == 200
    assert response.json()["state"] is None


@pytest.mark.parametrize("progress", [-0.1, 1.5])
def test_playback_progress_out_of_range(client, plan_payload, progress):
    response = client.post("/api/trajectory/state", json={**plan_payload, "progress": progress})
    assert response.status_code == 422


# ============================================================================
# Plan File Tests
# ============================================================================

def test_export_plan(client, plan_payload):
    response = client.post("/api/plans/export", json=plan_payload)
    assert response.status_code == 200
    assert "trajectory-plan.json" in response.headers["content-disposition"]

    data = json.loads(response.content)
    assert len(data["waypoints"]) == 4
    assert data["waypoints"][1]["speedToNext"] == 5.0
    assert data["waypoints"][2]["propulsionDirection"] == "Astern"
    assert data["ship"]["turningRadius"] == 300


def test_export_import_round_trip(client, plan_payload):
    exported = client.post("/api/plans/export", json=plan_payload).content
    response = client.post(
        "/api/plans/import",
        files={"file": ("trajectory-plan.json", exported, "application/json")},
    )
    assert response.status_code == 200
    data = response.json()

    assert [wp["id"] for wp in data["waypoints"]] == [1, 2, 3, 4]
    assert data["waypoints"][0]["speedToNext"] == 6.0
    assert data["waypoints"][2]["propulsionDirection"] == "Astern"
    assert data["ship"] == {"length": 150, "beam": 25, "turningRadius": 300}


def test_import_defaults_turning_radius(client):
    content = json.dumps({
        "waypoints": [{"id": 1, "lat": 51.9, "lng": 4.1}],
        "ship": {"length": 120, "beam": 20},
    }).encode()
    response = client.post("/api/plans/import", files={"file": ("old.json", content, "application/json")})
    assert response.status_code == 200
    assert response.json()["ship"]["turningRadius"] == 300
    assert response.json()["waypoints"][0]["speedToNext"] == 5.0


@pytest.mark.parametrize("content", [
    b"not json",
    b'{"waypoints": []}',
    b'{"ship": {"length": 1, "beam": 1}}',
    b'{"waypoints": [{"id": 1, "lat": 95, "lng": 0}], "ship": {"length": 1, "beam": 1}}',
])
def test_import_invalid_plan(client, content):
    response = client.post("/api/plans/import", files={"file": ("bad.json", content, "application/json")})
    assert response.status_code == 400


def test_import_empty_file(client):
    response = client.post("/api/plans/import", files={"file": ("empty.json", b"", "application/json")})
    assert response.status_code == 400


def test_import_too_large(client):
    content = b" " * (1024 * 1024 + 1)
    response = client.post("/api/plans/import", files={"file": ("big.json", content, "application/json")})
    assert response.status_code == 413
