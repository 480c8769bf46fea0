"""Deflection strategy models.

Each strategy is a pair of pure functions: a delta-v model and a success
probability model. The achieved delta-v is applied directly against the
closing speed rather than integrated along a 3-D trajectory.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

import logging
import math

from scipy import constants

from .impact_calculator import DEFAULT_PHYSICS, PhysicsConstants, calculate_mass
from .models import (
    AsteroidParameters,
    GravityTractorConfig,
    IonBeamConfig,
    KineticImpactorConfig,
    MitigationRequest,
    MitigationResult,
    MitigationStrategy,
    NuclearStandoffConfig,
    StrategyConfig,
)

logger = logging.getLogger(__name__)

MIN_EFFECTIVE_VELOCITY_MS = 1.0
ABLATION_EJECTA_VELOCITY_MS = 1000.0
ION_BEAM_THRUST_PER_WATT = 4e-5  # N/W


@dataclass(frozen=True)
class SuccessCurve:
    """Saturating success model: rises with warning time, falls with size."""

    floor: float
    ceiling: float
    time_constant_years: float
    reference_diameter_m: float

    def probability(self, diameter_m: float, warning_time_years: float) -> float:
        time_factor = 1.0 - math.exp(-warning_time_years / self.time_constant_years)
        size_factor = 1.0 / (1.0 + diameter_m / self.reference_diameter_m)
        value = self.floor + (self.ceiling - self.floor) * time_factor * size_factor
        return min(max(value, 0.0), 1.0)


KINETIC_IMPACTOR_CURVE = SuccessCurve(floor=0.05, ceiling=0.95, time_constant_years=2.0, reference_diameter_m=1000.0)
NUCLEAR_STANDOFF_CURVE = SuccessCurve(floor=0.02, ceiling=0.98, time_constant_years=1.0, reference_diameter_m=5000.0)
GRAVITY_TRACTOR_CURVE = SuccessCurve(floor=0.0, ceiling=0.90, time_constant_years=10.0, reference_diameter_m=200.0)
ION_BEAM_CURVE = SuccessCurve(floor=0.02, ceiling=0.90, time_constant_years=5.0, reference_diameter_m=500.0)


# -----------------------------------------------------------------------------
# Delta-v models (m/s)
# -----------------------------------------------------------------------------
def _operating_seconds(duration_years: float, warning_time_years: float) -> float:
    return min(duration_years, warning_time_years) * constants.year


def kinetic_impactor_delta_v(
    config: KineticImpactorConfig,
    asteroid_mass_kg: float,
    warning_time_years: float,
    physics: PhysicsConstants,
) -> float:
    """Momentum transfer from a single high-speed spacecraft."""

    impactor_speed_ms = config.impactor_speed_kms * 1000.0
    momentum = config.momentum_enhancement * config.impactor_mass_kg * impactor_speed_ms
    return momentum / asteroid_mass_kg


def nuclear_standoff_delta_v(
    config: NuclearStandoffConfig,
    asteroid_mass_kg: float,
    warning_time_years: float,
    physics: PhysicsConstants,
) -> float:
    """Surface ablation thrust from the coupled fraction of the device yield."""

    yield_joules = config.yield_megatons * physics.joules_per_megaton
    coupled_energy = config.coupling_efficiency * yield_joules
    return coupled_energy / (ABLATION_EJECTA_VELOCITY_MS * asteroid_mass_kg)


def gravity_tractor_delta_v(
    config: GravityTractorConfig,
    asteroid_mass_kg: float,
    warning_time_years: float,
    physics: PhysicsConstants,
) -> float:
    """Mutual gravitational pull accumulated while the tractor hovers."""

    acceleration = constants.G * config.spacecraft_mass_kg / config.standoff_distance_m**2
    return acceleration * _operating_seconds(config.duration_years, warning_time_years)


def ion_beam_delta_v(
    config: IonBeamConfig,
    asteroid_mass_kg: float,
    warning_time_years: float,
    physics: PhysicsConstants,
) -> float:
    thrust_newtons = config.beam_power_watts * ION_BEAM_THRUST_PER_WATT
    return thrust_newtons * _operating_seconds(config.duration_years, warning_time_years) / asteroid_mass_kg


DeltaVModel = Callable[[StrategyConfig, float, float, PhysicsConstants], float]

STRATEGY_MODELS: Dict[MitigationStrategy, Tuple[DeltaVModel, SuccessCurve]] = {
    MitigationStrategy.KINETIC_IMPACTOR: (kinetic_impactor_delta_v, KINETIC_IMPACTOR_CURVE),
    MitigationStrategy.NUCLEAR_STANDOFF: (nuclear_standoff_delta_v, NUCLEAR_STANDOFF_CURVE),
    MitigationStrategy.GRAVITY_TRACTOR: (gravity_tractor_delta_v, GRAVITY_TRACTOR_CURVE),
    MitigationStrategy.ION_BEAM: (ion_beam_delta_v, ION_BEAM_CURVE),
}


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def apply_delta_v(parameters: AsteroidParameters, delta_v_ms: float) -> AsteroidParameters:
    """Reduce the closing speed by ``delta_v_ms``, keeping it above 1 m/s."""

    effective_velocity_ms = max(parameters.velocity * 1000.0 - delta_v_ms, MIN_EFFECTIVE_VELOCITY_MS)
    return replace(parameters, velocity=effective_velocity_ms / 1000.0)


def evaluate_mitigation(
    request: MitigationRequest,
    *,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> MitigationResult:
    """Compute the delta-v and success likelihood of a deflection attempt."""

    parameters = request.parameters
    if request.strategy is MitigationStrategy.NONE:
        return MitigationResult(
            delta_velocity_meters_per_second=0.0,
            success_probability=1.0,
            resulting_parameters=parameters,
            strategy_used=MitigationStrategy.NONE,
        )

    delta_v_model, curve = STRATEGY_MODELS[request.strategy]
    asteroid_mass = calculate_mass(parameters.diameter, physics=physics)
    delta_v = delta_v_model(request.config, asteroid_mass, request.warning_time_years, physics)
    probability = curve.probability(parameters.diameter, request.warning_time_years)
    deflection_km = delta_v * request.warning_time_years * constants.year / 1000.0

    logger.debug(
        "%s on %.0f m asteroid: delta-v %.3g m/s, p=%.2f",
        request.strategy.value,
        parameters.diameter,
        delta_v,
        probability,
    )

    return MitigationResult(
        delta_velocity_meters_per_second=delta_v,
        success_probability=probability,
        resulting_parameters=apply_delta_v(parameters, delta_v),
        strategy_used=request.strategy,
        deflection_distance_km=deflection_km,
    )


def build_strategy_config(
    strategy: MitigationStrategy,
    options: Optional[Dict[str, object]],
) -> Optional[StrategyConfig]:
    """Build the configuration dataclass for ``strategy`` from a plain mapping."""

    strategy = MitigationStrategy.parse(strategy)
    if strategy is MitigationStrategy.NONE:
        return None
    options = dict(options or {})
    if strategy is MitigationStrategy.KINETIC_IMPACTOR:
        return KineticImpactorConfig(
            impactor_mass_kg=options.get("impactor_mass_kg", 0.0),
            impactor_speed_kms=options.get("impactor_speed_kms", 0.0),
            momentum_enhancement=options.get("momentum_enhancement", 3.6),
        )
    if strategy is MitigationStrategy.NUCLEAR_STANDOFF:
        return NuclearStandoffConfig(
            yield_megatons=options.get("yield_megatons", 0.0),
            coupling_efficiency=options.get("coupling_efficiency", 0.01),
        )
    if strategy is MitigationStrategy.GRAVITY_TRACTOR:
        return GravityTractorConfig(
            spacecraft_mass_kg=options.get("spacecraft_mass_kg", 0.0),
            standoff_distance_m=options.get("standoff_distance_m", 0.0),
            duration_years=options.get("duration_years", 0.0),
        )
    return IonBeamConfig(
        beam_power_watts=options.get("beam_power_watts", 0.0),
        duration_years=options.get("duration_years", 0.0),
    )
