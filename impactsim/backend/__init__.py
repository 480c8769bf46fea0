"""Backend package for impactsim.

Exposes the impact calculator, the mitigation evaluator and the data sources
that feed them.
"""
from __future__ import annotations

from .data_service import ScenarioDataService, ScenarioSource
from .historical_events import HistoricalEvent, HistoricalEventCatalog
from .impact_calculator import (
    DEFAULT_PHYSICS,
    PhysicsConstants,
    RandomSource,
    calculate_crater_depth,
    calculate_crater_diameter,
    calculate_energy,
    calculate_impact,
    calculate_mass,
    calculate_seismic_magnitude,
    calculate_shockwave_radius,
    calculate_thermal_radius,
    calculate_tsunami_height,
    estimate_affected_population,
    estimate_population_density,
    is_ocean_impact,
)
from .mitigation import build_strategy_config, evaluate_mitigation
from .models import (
    AsteroidParameters,
    GravityTractorConfig,
    ImpactResult,
    InvalidInputError,
    IonBeamConfig,
    KineticImpactorConfig,
    MitigationRequest,
    MitigationResult,
    MitigationStrategy,
    NuclearStandoffConfig,
    UnsupportedStrategyError,
)
from .nasa_client import NASAAPIError, NASAClient
from .reporting import build_impact_briefing
from .scenario import ScenarioComparison, compare_outcomes

__all__ = [
    "AsteroidParameters",
    "ImpactResult",
    "MitigationStrategy",
    "MitigationRequest",
    "MitigationResult",
    "KineticImpactorConfig",
    "NuclearStandoffConfig",
    "GravityTractorConfig",
    "IonBeamConfig",
    "InvalidInputError",
    "UnsupportedStrategyError",
    "PhysicsConstants",
    "DEFAULT_PHYSICS",
    "RandomSource",
    "calculate_mass",
    "calculate_energy",
    "is_ocean_impact",
    "calculate_crater_diameter",
    "calculate_crater_depth",
    "calculate_shockwave_radius",
    "calculate_thermal_radius",
    "calculate_seismic_magnitude",
    "calculate_tsunami_height",
    "estimate_population_density",
    "estimate_affected_population",
    "calculate_impact",
    "evaluate_mitigation",
    "build_strategy_config",
    "ScenarioComparison",
    "compare_outcomes",
    "HistoricalEvent",
    "HistoricalEventCatalog",
    "NASAClient",
    "NASAAPIError",
    "ScenarioDataService",
    "ScenarioSource",
    "build_impact_briefing",
]
