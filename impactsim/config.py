"""Configuration module for impactsim.

Loads environment-backed configuration with defaults suitable for a local
classroom deployment. Uses python-dotenv to enable `.env` files during local
runs while keeping runtime dependencies explicit.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import os

from dotenv import load_dotenv

from .backend.impact_calculator import DEFAULT_PHYSICS, PhysicsConstants

# Load environment variables from a `.env` file if present.
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True)
class Settings:
    """Container for tunable runtime parameters."""

    debug: bool = field(default_factory=lambda: bool(int(os.getenv("IMPACTSIM_DEBUG", "0"))))
    default_event_id: str = field(default_factory=lambda: os.getenv("IMPACTSIM_DEFAULT_EVENT", "chicxulub"))
    default_latitude: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_DEFAULT_LAT", "40.7")))
    default_longitude: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_DEFAULT_LON", "-74.0")))
    default_angle: float = field(default_factory=lambda: float(os.getenv("IMPACTSIM_DEFAULT_ANGLE", "45")))
    random_seed: Optional[int] = field(default_factory=lambda: _optional_int("IMPACTSIM_RANDOM_SEED"))
    asteroid_density_kg_m3: float = field(
        default_factory=lambda: float(
            os.getenv("IMPACTSIM_ASTEROID_DENSITY", str(DEFAULT_PHYSICS.asteroid_density_kg_m3))
        )
    )
    ocean_coverage: float = field(
        default_factory=lambda: float(os.getenv("IMPACTSIM_OCEAN_COVERAGE", str(DEFAULT_PHYSICS.ocean_coverage)))
    )
    nasa_api_key: str = field(default_factory=lambda: os.getenv("NASA_API_KEY", "DEMO_KEY"))
    use_live_apis: bool = field(default_factory=lambda: bool(int(os.getenv("IMPACTSIM_USE_LIVE_APIS", "1"))))

    def physics_constants(self) -> PhysicsConstants:
        return replace(
            DEFAULT_PHYSICS,
            asteroid_density_kg_m3=self.asteroid_density_kg_m3,
            ocean_coverage=self.ocean_coverage,
        )


def get_settings() -> Settings:
    """Factory returning immutable settings instance."""

    return Settings()
