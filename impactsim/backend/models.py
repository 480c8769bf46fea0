"""Record types shared by the impact calculator and mitigation evaluator.

Every record is a frozen dataclass validated at construction, so an invalid
scenario is rejected before any stage of the pipeline runs.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Optional, Union

import math


class InvalidInputError(ValueError):
    """Raised when a parameter falls outside its documented domain."""


class UnsupportedStrategyError(ValueError):
    """Raised when a mitigation strategy tag is not recognised."""


def _require_finite(name: str, value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    return number


def _require_positive(name: str, value: float) -> float:
    number = _require_finite(name, value)
    if number <= 0:
        raise InvalidInputError(f"{name} must be positive, got {value!r}")
    return number


def _coerce_positive(record: object, *names: str) -> None:
    for name in names:
        object.__setattr__(record, name, _require_positive(name, getattr(record, name)))


# -----------------------------------------------------------------------------
# Asteroid inputs and impact outputs
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AsteroidParameters:
    """Physical description of an incoming asteroid and its impact point.

    ``diameter`` is in metres, ``velocity`` in km/s and ``angle`` in degrees
    from the horizontal.
    """

    diameter: float
    velocity: float
    angle: float
    impact_latitude: float
    impact_longitude: float

    def __post_init__(self) -> None:
        diameter = _require_positive("diameter", self.diameter)
        velocity = _require_positive("velocity", self.velocity)
        angle = _require_finite("angle", self.angle)
        if not 0.0 < angle <= 90.0:
            raise InvalidInputError(f"angle must be in (0, 90] degrees, got {self.angle!r}")
        latitude = _require_finite("impact_latitude", self.impact_latitude)
        if not -90.0 <= latitude <= 90.0:
            raise InvalidInputError(f"impact_latitude must be in [-90, 90], got {self.impact_latitude!r}")
        longitude = _require_finite("impact_longitude", self.impact_longitude)
        if not -180.0 <= longitude <= 180.0:
            raise InvalidInputError(f"impact_longitude must be in [-180, 180], got {self.impact_longitude!r}")

        for name, value in (
            ("diameter", diameter),
            ("velocity", velocity),
            ("angle", angle),
            ("impact_latitude", latitude),
            ("impact_longitude", longitude),
        ):
            object.__setattr__(self, name, value)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ImpactResult:
    mass: float
    energy_megatons_tnt: float
    crater_diameter_km: float
    crater_depth_km: float
    shockwave_radius_km: float
    thermal_radius_km: float
    seismic_magnitude: float
    is_ocean_impact: bool
    affected_population: int
    tsunami_height_meters: Optional[float] = None

    def __post_init__(self) -> None:
        if self.is_ocean_impact != (self.tsunami_height_meters is not None):
            raise InvalidInputError("tsunami_height_meters must be set exactly when is_ocean_impact is true")

    def as_dict(self) -> Dict[str, object]:
        """Serialise for JSON responses; land impacts carry no tsunami key."""

        payload = asdict(self)
        if not self.is_ocean_impact:
            payload.pop("tsunami_height_meters")
        return payload


# -----------------------------------------------------------------------------
# Mitigation
# -----------------------------------------------------------------------------
class MitigationStrategy(str, Enum):
    NONE = "none"
    KINETIC_IMPACTOR = "kinetic-impactor"
    NUCLEAR_STANDOFF = "nuclear-standoff"
    GRAVITY_TRACTOR = "gravity-tractor"
    ION_BEAM = "ion-beam"

    @classmethod
    def parse(cls, value: Union[str, "MitigationStrategy", None]) -> "MitigationStrategy":
        if isinstance(value, cls):
            return value
        if value is None:
            raise UnsupportedStrategyError("A mitigation strategy is required; use \"none\" for no mitigation")
        try:
            return cls(str(value).strip().lower().replace("_", "-"))
        except ValueError as exc:
            raise UnsupportedStrategyError(f"Unsupported mitigation strategy: {value!r}") from exc


@dataclass(frozen=True)
class KineticImpactorConfig:
    impactor_mass_kg: float
    impactor_speed_kms: float
    momentum_enhancement: float = 3.6  # DART-measured beta

    def __post_init__(self) -> None:
        _coerce_positive(self, "impactor_mass_kg", "impactor_speed_kms", "momentum_enhancement")


@dataclass(frozen=True)
class NuclearStandoffConfig:
    yield_megatons: float
    coupling_efficiency: float = 0.01

    def __post_init__(self) -> None:
        _coerce_positive(self, "yield_megatons", "coupling_efficiency")
        if self.coupling_efficiency > 1.0:
            raise InvalidInputError(f"coupling_efficiency must not exceed 1, got {self.coupling_efficiency!r}")


@dataclass(frozen=True)
class GravityTractorConfig:
    spacecraft_mass_kg: float
    standoff_distance_m: float
    duration_years: float

    def __post_init__(self) -> None:
        _coerce_positive(self, "spacecraft_mass_kg", "standoff_distance_m", "duration_years")


@dataclass(frozen=True)
class IonBeamConfig:
    beam_power_watts: float
    duration_years: float

    def __post_init__(self) -> None:
        _coerce_positive(self, "beam_power_watts", "duration_years")


StrategyConfig = Union[KineticImpactorConfig, NuclearStandoffConfig, GravityTractorConfig, IonBeamConfig]

CONFIG_TYPES = {
    MitigationStrategy.KINETIC_IMPACTOR: KineticImpactorConfig,
    MitigationStrategy.NUCLEAR_STANDOFF: NuclearStandoffConfig,
    MitigationStrategy.GRAVITY_TRACTOR: GravityTractorConfig,
    MitigationStrategy.ION_BEAM: IonBeamConfig,
}


@dataclass(frozen=True)
class MitigationRequest:
    parameters: AsteroidParameters
    strategy: MitigationStrategy
    warning_time_years: float
    config: Optional[StrategyConfig] = None

    def __post_init__(self) -> None:
        if not isinstance(self.parameters, AsteroidParameters):
            raise InvalidInputError("parameters must be an AsteroidParameters instance")
        object.__setattr__(self, "strategy", MitigationStrategy.parse(self.strategy))
        warning = _require_finite("warning_time_years", self.warning_time_years)
        if warning < 0:
            raise InvalidInputError(f"warning_time_years must not be negative, got {self.warning_time_years!r}")
        object.__setattr__(self, "warning_time_years", warning)

        expected = CONFIG_TYPES.get(self.strategy)
        if expected is None:
            return
        if self.config is None:
            raise InvalidInputError(f"{self.strategy.value} requires a {expected.__name__}")
        if not isinstance(self.config, expected):
            raise InvalidInputError(
                f"{self.strategy.value} requires a {expected.__name__}, got {type(self.config).__name__}"
            )


@dataclass(frozen=True)
class MitigationResult:
    delta_velocity_meters_per_second: float
    success_probability: float
    resulting_parameters: AsteroidParameters
    strategy_used: MitigationStrategy
    deflection_distance_km: float = 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "delta_velocity_meters_per_second": self.delta_velocity_meters_per_second,
            "success_probability": self.success_probability,
            "resulting_parameters": self.resulting_parameters.as_dict(),
            "strategy_used": self.strategy_used.value,
            "deflection_distance_km": self.deflection_distance_km,
        }
