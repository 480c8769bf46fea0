"""Impact physics pipeline turning asteroid parameters into an ImpactResult.

The formulas are simplified empirical scalings intended for education, not
hazard assessment. Two stages draw from an injectable uniform random source:
the ocean classification fallback and the population density variation.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import logging
import math
import random

from scipy import constants

from .models import AsteroidParameters, ImpactResult, InvalidInputError

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]


# -----------------------------------------------------------------------------
# Shared constants
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PhysicsConstants:
    """Tunable constants for the impact pipeline."""

    # Rubble-pile / ice-rich small body rather than solid rock.
    asteroid_density_kg_m3: float = 2000.0
    tnt_joules_per_ton: float = 4.184e9
    ocean_coverage: float = 0.71
    crater_scaling_constant: float = 0.8  # km per megaton^0.33
    ocean_terrain_factor: float = 0.7
    default_water_depth_m: float = 4000.0

    @property
    def joules_per_megaton(self) -> float:
        return constants.mega * self.tnt_joules_per_ton


DEFAULT_PHYSICS = PhysicsConstants()


# -----------------------------------------------------------------------------
# Utility helpers
# -----------------------------------------------------------------------------
def _require_non_negative(name: str, value: float) -> float:
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"{name} must be a finite non-negative number, got {value!r}")
    return value


def _require_representable(name: str, value: float, result: float, quantity: str) -> float:
    """Reject a positive input whose derived quantity overflowed or underflowed."""

    if value > 0 and (not math.isfinite(result) or result <= 0):
        raise InvalidInputError(f"{name} {value!r} is outside the range where {quantity} can be computed")
    return result


def _in_pacific(lat: float, lon: float) -> bool:
    return (lon > 120 or lon < -70) and abs(lat) < 60


def _in_atlantic(lat: float, lon: float) -> bool:
    return -70 < lon < -10 and abs(lat) < 60


def _in_indian(lat: float, lon: float) -> bool:
    return 40 < lon < 120 and -50 < lat < 20


OCEAN_BASINS = (
    ("pacific", _in_pacific),
    ("atlantic", _in_atlantic),
    ("indian", _in_indian),
)


def ocean_basin(lat: float, lon: float) -> Optional[str]:
    """Name of the coarse ocean box containing the point, if any.

    The boxes are crude: everything west of -70° longitude within 60° of the
    equator counts as Pacific, which includes most of North and South America.
    """

    for name, contains in OCEAN_BASINS:
        if contains(lat, lon):
            return name
    return None


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def calculate_mass(diameter: float, *, physics: PhysicsConstants = DEFAULT_PHYSICS) -> float:
    """Mass in kg of a uniform sphere of the given diameter in metres."""

    radius = _require_non_negative("diameter", diameter) / 2.0
    try:
        mass = (4.0 / 3.0) * math.pi * radius**3 * physics.asteroid_density_kg_m3
    except OverflowError as exc:
        raise InvalidInputError(f"diameter {diameter!r} is too large to compute a mass") from exc
    return _require_representable("diameter", diameter, mass, "mass")


def calculate_energy(mass: float, velocity: float, *, physics: PhysicsConstants = DEFAULT_PHYSICS) -> float:
    """Kinetic energy in megatons of TNT for mass (kg) at velocity (km/s)."""

    _require_non_negative("mass", mass)
    velocity_ms = _require_non_negative("velocity", velocity) * 1000.0
    try:
        energy_joules = 0.5 * mass * velocity_ms**2
    except OverflowError as exc:
        raise InvalidInputError(f"velocity {velocity!r} is too large to compute an energy") from exc
    energy = energy_joules / physics.joules_per_megaton
    if mass > 0 and velocity > 0 and not (math.isfinite(energy_joules) and energy > 0):
        raise InvalidInputError(
            f"mass {mass!r} at velocity {velocity!r} is outside the range where energy can be computed"
        )
    return energy


def is_ocean_impact(
    lat: float,
    lon: float,
    rng: RandomSource = random.random,
    *,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> bool:
    """Classify the impact point as ocean or land.

    Points inside one of the coarse ocean boxes are always ocean. Anything
    else is decided by a single draw from ``rng`` weighted by Earth's ocean
    coverage, so the result is non-deterministic unless ``rng`` is seeded.
    Replace this function to plug in a real land/ocean raster.
    """

    if ocean_basin(lat, lon) is not None:
        return True
    return rng() < physics.ocean_coverage


def calculate_crater_diameter(
    energy: float,
    angle: float,
    is_ocean: bool,
    *,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> float:
    """Final crater diameter in km, never smaller than 100 m."""

    _require_non_negative("energy", energy)
    angle_efficiency = math.sin(math.radians(angle)) ** 0.3
    terrain_factor = physics.ocean_terrain_factor if is_ocean else 1.0
    diameter_km = physics.crater_scaling_constant * energy**0.33 * angle_efficiency * terrain_factor
    return max(0.1, diameter_km)


def calculate_crater_depth(crater_diameter: float) -> float:
    return crater_diameter / 4.0


def calculate_shockwave_radius(energy: float) -> float:
    return _require_non_negative("energy", energy) ** 0.33 * 2.5


def calculate_thermal_radius(energy: float) -> float:
    return _require_non_negative("energy", energy) ** 0.41 * 3.2


def calculate_seismic_magnitude(energy: float, *, physics: PhysicsConstants = DEFAULT_PHYSICS) -> float:
    """Richter-like magnitude from impact energy in megatons."""

    if not math.isfinite(energy) or energy <= 0:
        raise InvalidInputError(f"energy must be positive to compute a magnitude, got {energy!r}")
    energy_joules = energy * physics.joules_per_megaton
    return (2.0 / 3.0) * math.log10(energy_joules) - 2.9


def calculate_tsunami_height(
    energy: float,
    crater_diameter: float,
    water_depth: Optional[float] = None,
    *,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> float:
    """Initial tsunami wave height in metres for an ocean impact."""

    if water_depth is None:
        water_depth = physics.default_water_depth_m
    energy_factor = _require_non_negative("energy", energy) ** 0.25
    crater_m = crater_diameter * 1000.0
    initial_height = min(crater_m / 10.0, water_depth * 0.5)
    return initial_height * energy_factor * 0.1


def estimate_population_density(lat: float, lon: float, rng: RandomSource = random.random) -> float:
    """People per km² from latitude bands and a rough continental multiplier."""

    abs_lat = abs(lat)
    if abs_lat < 30:
        density = 200.0  # tropical/subtropical
    elif abs_lat < 50:
        density = 150.0  # temperate
    elif abs_lat < 70:
        density = 20.0  # subarctic
    else:
        density = 1.0

    if -180 < lon < -50:  # Americas
        density *= 0.8
    elif -50 < lon < 50:  # Europe/Africa
        density *= 1.2
    elif 50 < lon < 150:  # Asia
        density *= 1.5
    else:  # Pacific
        density *= 0.3

    variation = 0.5 + rng()
    return max(1.0, density * variation)


def estimate_affected_population(
    lat: float,
    lon: float,
    shockwave_radius: float,
    thermal_radius: float,
    rng: RandomSource = random.random,
) -> int:
    density = estimate_population_density(lat, lon, rng)
    affected_area_km2 = math.pi * max(shockwave_radius, thermal_radius) ** 2
    return int(round(density * affected_area_km2))


def calculate_impact(
    parameters: AsteroidParameters,
    *,
    rng: RandomSource = random.random,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> ImpactResult:
    """Run the full pipeline for one asteroid."""

    if not isinstance(parameters, AsteroidParameters):
        raise InvalidInputError(f"Expected AsteroidParameters, got {type(parameters).__name__}")

    lat = parameters.impact_latitude
    lon = parameters.impact_longitude

    mass = calculate_mass(parameters.diameter, physics=physics)
    energy = calculate_energy(mass, parameters.velocity, physics=physics)
    ocean = is_ocean_impact(lat, lon, rng, physics=physics)
    crater_diameter = calculate_crater_diameter(energy, parameters.angle, ocean, physics=physics)
    shockwave_radius = calculate_shockwave_radius(energy)
    thermal_radius = calculate_thermal_radius(energy)
    seismic_magnitude = calculate_seismic_magnitude(energy, physics=physics)
    affected_population = estimate_affected_population(lat, lon, shockwave_radius, thermal_radius, rng)

    tsunami_height = None
    if ocean:
        tsunami_height = calculate_tsunami_height(energy, crater_diameter, physics=physics)

    logger.debug(
        "Impact at (%.2f, %.2f): %.3g Mt, crater %.2f km, ocean=%s",
        lat,
        lon,
        energy,
        crater_diameter,
        ocean,
    )

    return ImpactResult(
        mass=mass,
        energy_megatons_tnt=energy,
        crater_diameter_km=crater_diameter,
        crater_depth_km=calculate_crater_depth(crater_diameter),
        shockwave_radius_km=shockwave_radius,
        thermal_radius_km=thermal_radius,
        seismic_magnitude=seismic_magnitude,
        is_ocean_impact=ocean,
        affected_population=affected_population,
        tsunami_height_meters=tsunami_height,
    )
