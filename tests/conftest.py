"""
Shared pytest fixtures for trajectory planner tests.

Environment defaults are set before any api.* import so the cached
settings pick them up.
"""

import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "warning")

from src.routes.models import (  # noqa: E402
    CurrentConditions,
    EnvironmentalFactors,
    PropulsionDirection,
    Ship,
    WindConditions,
    make_waypoint,
)


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ship():
    """Default harbor vessel: 150 m x 25 m, 300 m turning radius."""
    return Ship()


@pytest.fixture
def calm():
    """Drift disabled, no forcing."""
    return EnvironmentalFactors()


@pytest.fixture
def two_waypoints():
    """One eastbound leg along the equator (~1.1 km)."""
    return [make_waypoint(0.0, 0.0, 1), make_waypoint(0.0, 0.01, 2)]


@pytest.fixture
def sharp_turn_waypoints():
    """East for ~1.1 km, then a hairpin back to the north-west."""
    return [
        make_waypoint(0.0, 0.0, 1),
        make_waypoint(0.0, 0.01, 2),
        make_waypoint(0.005, 0.0, 3),
    ]


@pytest.fixture
def reversing_waypoints():
    """Three waypoints northbound; the second leg is made astern."""
    return [
        make_waypoint(0.0, 0.0, 1),
        make_waypoint(0.005, 0.0, 2, propulsion_direction=PropulsionDirection.ASTERN),
        make_waypoint(0.010, 0.0, 3),
    ]


@pytest.fixture
def northbound_waypoints():
    """One northbound leg (~1.1 km) on the prime meridian."""
    return [make_waypoint(0.0, 0.0, 1), make_waypoint(0.01, 0.0, 2)]


@pytest.fixture
def drift_env():
    """Factory for drift-enabled environments."""
    def factory(current_speed=0.0, current_dir=0.0, wind_speed=0.0, wind_dir=0.0):
        return EnvironmentalFactors(
            drift_enabled=True,
            wind=WindConditions(speed=wind_speed, direction=wind_dir),
            current=CurrentConditions(speed=current_speed, direction=current_dir),
        )
    return factory


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """FastAPI TestClient for the planner API."""
    from api.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def plan_payload():
    """Plan body in the front-end's camelCase format."""
    return {
        "waypoints": [
            {"id": 1, "lat": 51.90, "lng": 4.10, "speedToNext": 6.0},
            {"id": 2, "lat": 51.905, "lng": 4.11},
            {"id": 3, "lat": 51.912, "lng": 4.112, "propulsionDirection": "Astern"},
            {"id": 4, "lat": 51.915, "lng": 4.105},
        ],
        "ship": {"length": 150, "beam": 25, "turningRadius": 300},
    }
