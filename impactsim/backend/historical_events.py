"""Canned historical impact events.

These let the simulator run without network access and give the UI a set of
well-known reference scenarios. Sizes and speeds are the commonly quoted
estimates; they are rounded and carry large real-world uncertainties.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import AsteroidParameters


@dataclass(frozen=True)
class HistoricalEvent:
    event_id: str
    name: str
    year: str
    diameter_m: float
    velocity_kms: float
    angle_deg: float
    latitude: float
    longitude: float
    description: str

    def to_parameters(self) -> AsteroidParameters:
        return AsteroidParameters(
            diameter=self.diameter_m,
            velocity=self.velocity_kms,
            angle=self.angle_deg,
            impact_latitude=self.latitude,
            impact_longitude=self.longitude,
        )


class HistoricalEventCatalog:
    """Provides deterministic reference scenarios keyed by event id."""

    def __init__(self) -> None:
        self.default_event_id = "chicxulub"
        self.aliases: Dict[str, str] = {
            "meteor-crater": "barringer",
            "k-pg": "chicxulub",
            "dinosaur-killer": "chicxulub",
        }
        events = [
            HistoricalEvent(
                event_id="chicxulub",
                name="Chicxulub",
                year="66 Ma",
                diameter_m=10000.0,
                velocity_kms=20.0,
                angle_deg=60.0,
                latitude=21.3,
                longitude=-89.5,
                description="End-Cretaceous impactor on the Yucatan Peninsula.",
            ),
            HistoricalEvent(
                event_id="popigai",
                name="Popigai",
                year="35.7 Ma",
                diameter_m=5000.0,
                velocity_kms=20.0,
                angle_deg=45.0,
                latitude=71.65,
                longitude=111.18,
                description="Siberian impact structure roughly 100 km across.",
            ),
            HistoricalEvent(
                event_id="barringer",
                name="Barringer (Meteor Crater)",
                year="50 ka",
                diameter_m=50.0,
                velocity_kms=12.8,
                angle_deg=45.0,
                latitude=35.03,
                longitude=-111.02,
                description="Iron impactor that excavated Meteor Crater, Arizona.",
            ),
            HistoricalEvent(
                event_id="tunguska",
                name="Tunguska",
                year="1908",
                diameter_m=60.0,
                velocity_kms=27.0,
                angle_deg=30.0,
                latitude=60.89,
                longitude=101.89,
                description="Airburst that flattened ~2000 km² of Siberian forest.",
            ),
            HistoricalEvent(
                event_id="chelyabinsk",
                name="Chelyabinsk",
                year="2013",
                diameter_m=19.0,
                velocity_kms=19.0,
                angle_deg=18.0,
                latitude=54.8,
                longitude=61.1,
                description="Superbolide over the southern Urals; ~1500 injured by glass.",
            ),
        ]
        self._events: Dict[str, HistoricalEvent] = {event.event_id: event for event in events}

    def resolve(self, event_id: Optional[str]) -> str:
        key = (event_id or self.default_event_id).strip().lower()
        return self.aliases.get(key, key)

    def has_event(self, event_id: Optional[str]) -> bool:
        return self.resolve(event_id) in self._events

    def get_event(self, event_id: Optional[str] = None) -> HistoricalEvent:
        """Return the requested event, or the default when it is unknown."""

        return self._events.get(self.resolve(event_id), self._events[self.default_event_id])

    @property
    def default_event(self) -> HistoricalEvent:
        return self._events[self.default_event_id]

    def snapshot(self, *, limit: int = 12) -> List[Dict[str, object]]:
        entries: List[Dict[str, object]] = []
        for idx, event in enumerate(self._events.values()):
            if idx >= limit:
                break
            entries.append(
                {
                    "event_id": event.event_id,
                    "name": event.name,
                    "year": event.year,
                    "diameter_m": event.diameter_m,
                    "velocity_kms": event.velocity_kms,
                    "angle_deg": event.angle_deg,
                    "impact_lat": event.latitude,
                    "impact_lon": event.longitude,
                    "description": event.description,
                }
            )
        return entries
