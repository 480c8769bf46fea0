"""Compose mitigation and impact runs into an unmitigated/mitigated comparison."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import random

from .impact_calculator import DEFAULT_PHYSICS, PhysicsConstants, RandomSource, calculate_impact
from .mitigation import evaluate_mitigation
from .models import ImpactResult, MitigationRequest, MitigationResult


class _RecordedDraws:
    """Wraps a random source so a second run can replay the first run's draws."""

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng
        self._draws: List[float] = []

    def record(self) -> float:
        value = self._rng()
        self._draws.append(value)
        return value

    def replayer(self) -> RandomSource:
        # Same impact point, so the replay needs exactly as many draws.
        return iter(list(self._draws)).__next__


@dataclass(frozen=True)
class ScenarioComparison:
    mitigation: MitigationResult
    unmitigated: ImpactResult
    mitigated: ImpactResult

    @property
    def energy_reduction_megatons(self) -> float:
        return self.unmitigated.energy_megatons_tnt - self.mitigated.energy_megatons_tnt

    @property
    def population_spared(self) -> int:
        return self.unmitigated.affected_population - self.mitigated.affected_population

    def as_dict(self) -> Dict[str, object]:
        return {
            "mitigation": self.mitigation.as_dict(),
            "unmitigated": self.unmitigated.as_dict(),
            "mitigated": self.mitigated.as_dict(),
            "energy_reduction_megatons": self.energy_reduction_megatons,
            "population_spared": self.population_spared,
        }


def compare_outcomes(
    request: MitigationRequest,
    *,
    rng: RandomSource = random.random,
    physics: PhysicsConstants = DEFAULT_PHYSICS,
) -> ScenarioComparison:
    """Evaluate ``request`` and run the impact pipeline before and after it.

    The mitigated run replays the random draws of the unmitigated one, so any
    difference between the two comes from the mitigation alone. A seeded
    ``rng`` makes the whole comparison reproducible.
    """

    mitigation = evaluate_mitigation(request, physics=physics)
    draws = _RecordedDraws(rng)
    unmitigated = calculate_impact(request.parameters, rng=draws.record, physics=physics)
    mitigated = calculate_impact(mitigation.resulting_parameters, rng=draws.replayer(), physics=physics)
    return ScenarioComparison(mitigation=mitigation, unmitigated=unmitigated, mitigated=mitigated)
