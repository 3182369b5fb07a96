"""
Trajectory planner configuration.

Centralized defaults for the planning core, read from environment
variables. Supports .env files for local development.

Usage:
    from src.config import settings

    ship = settings.default_ship()
    legs = build_legs(waypoints, ship, settings.pivot_duration_s, environment)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from src.playback.driver import PLAYBACK_SPEEDS
from src.routes.models import Ship

# Load .env file if present
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


@dataclass
class Settings:
    """Planner settings loaded from environment."""

    # Default ship
    ship_length_m: float = field(default_factory=lambda: get_float("SHIP_LENGTH_M", 150.0))
    ship_beam_m: float = field(default_factory=lambda: get_float("SHIP_BEAM_M", 25.0))
    ship_turning_radius_m: float = field(
        default_factory=lambda: get_float("SHIP_TURNING_RADIUS_M", 300.0)
    )

    # Leg calculation
    pivot_duration_s: float = field(default_factory=lambda: get_float("PIVOT_DURATION_S", 30.0))

    # Playback
    playback_speed: int = field(default_factory=lambda: get_int("PLAYBACK_SPEED", 1))
    playback_fps: int = field(default_factory=lambda: get_int("PLAYBACK_FPS", 60))
    playback_hold_s: float = field(default_factory=lambda: get_float("PLAYBACK_HOLD_S", 1.0))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.pivot_duration_s < 0:
            logging.warning(f"Pivot duration {self.pivot_duration_s} s is negative, using 30 s")
            self.pivot_duration_s = 30.0

        if self.playback_speed not in PLAYBACK_SPEEDS:
            logging.warning(f"Playback speed {self.playback_speed}x not supported, using 1x")
            self.playback_speed = 1

        if self.playback_fps <= 0:
            logging.warning(f"Playback FPS {self.playback_fps} must be positive, using 60")
            self.playback_fps = 60

        if min(self.ship_length_m, self.ship_beam_m, self.ship_turning_radius_m) <= 0:
            logging.warning("Ship dimensions must be positive, using 150 x 25 m, 300 m radius")
            self.ship_length_m = 150.0
            self.ship_beam_m = 25.0
            self.ship_turning_radius_m = 300.0

    def default_ship(self) -> Ship:
        """Ship built from the configured defaults."""
        return Ship(
            length=self.ship_length_m,
            beam=self.ship_beam_m,
            turning_radius=self.ship_turning_radius_m,
        )

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)


# Singleton instance
settings = Settings()


# Convenience function for testing
def get_settings() -> Settings:
    """Get the settings instance (useful for dependency injection)."""
    return settings
