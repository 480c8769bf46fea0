"""High-level data service combining the NASA catalog with canned events."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional

import logging

from .historical_events import HistoricalEventCatalog
from .models import AsteroidParameters
from .nasa_client import NASAAPIError, NASAClient, NEOCatalogEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioSource:
    """Simulation inputs together with where they came from."""

    source: str
    asteroid_id: str
    name: str
    parameters: AsteroidParameters
    nasa_jpl_url: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "source": self.source,
            "asteroid_id": self.asteroid_id,
            "name": self.name,
            "parameters": self.parameters.as_dict(),
            "nasa_jpl_url": self.nasa_jpl_url,
        }


class ScenarioDataService:
    """Coordinates live NASA data with deterministic historical fallbacks."""

    DEFAULT_ALIASES = {
        "Apophis": "2099942",
        "Bennu": "2101955",
        "Didymos": "2065803",
    }

    def __init__(
        self,
        *,
        nasa_api_key: str,
        enable_live_apis: bool = True,
        default_event_id: Optional[str] = None,
        nasa_client: Optional[NASAClient] = None,
    ) -> None:
        self.enable_live_apis = enable_live_apis
        self.events = HistoricalEventCatalog()
        self.default_event_id = default_event_id or self.events.default_event_id
        if enable_live_apis:
            self.nasa_client = nasa_client or NASAClient(nasa_api_key)
        else:
            self.nasa_client = None

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    def get_scenario(
        self,
        asteroid_id: Optional[str],
        *,
        impact_lat: Optional[float] = None,
        impact_lon: Optional[float] = None,
        angle_deg: Optional[float] = None,
    ) -> ScenarioSource:
        """Resolve an id to simulation inputs.

        Historical event ids are served from the canned catalog. Anything else
        is looked up in the NASA catalog when live APIs are enabled; failures
        fall back to the default historical event. For catalog objects the
        impact point defaults to the default event's location and the angle
        to 45 degrees; historical events keep their own unless overridden.
        """

        friendly = asteroid_id or self.default_event_id
        if self.events.has_event(friendly):
            return self._scenario_from_event(friendly, impact_lat, impact_lon, angle_deg)

        if self.nasa_client is not None:
            resolved_id = self.DEFAULT_ALIASES.get(friendly, friendly)
            fallback = self.events.get_event(self.default_event_id)
            lat = impact_lat if impact_lat is not None else fallback.latitude
            lon = impact_lon if impact_lon is not None else fallback.longitude
            try:
                payload = self.nasa_client.fetch_neo(resolved_id)
                parameters = self.nasa_client.to_asteroid_parameters(
                    payload,
                    impact_lat=lat,
                    impact_lon=lon,
                    angle_deg=angle_deg if angle_deg is not None else 45.0,
                )
                return ScenarioSource(
                    source="nasa",
                    asteroid_id=str(payload.get("id") or resolved_id),
                    name=str(payload.get("name") or friendly),
                    parameters=parameters,
                    nasa_jpl_url=payload.get("nasa_jpl_url"),
                )
            except NASAAPIError as exc:
                logger.warning("NASA NEO lookup failed for %s (%s): %s", friendly, resolved_id, exc)
        else:
            logger.info("Live APIs disabled; using historical event for %s", friendly)
        return self._scenario_from_event(self.default_event_id, impact_lat, impact_lon, angle_deg)

    def list_catalog(self, *, limit: int = 12) -> List[Dict[str, object]]:
        entries: List[Dict[str, object]] = []
        if self.nasa_client is not None:
            try:
                for entry in self.nasa_client.list_featured(page_size=limit):
                    entries.append(self._serialise_catalog_entry(entry))
            except NASAAPIError as exc:
                logger.warning("NASA catalog fetch failed: %s", exc)
        if not entries:
            entries.extend(self._serialise_event(event) for event in self.events.snapshot(limit=limit))
        return entries

    def list_historical_events(self, *, limit: int = 12) -> List[Dict[str, object]]:
        return self.events.snapshot(limit=limit)

    def get_health_snapshot(self) -> Dict[str, object]:
        """Summarise the health of the live catalog and the fallbacks."""

        services: Dict[str, Dict[str, object]] = {}

        if self.nasa_client is None:
            services["nasa_neo_api"] = {
                "status": "disabled",
                "detail": "Live NASA API access disabled; using historical events.",
            }
        else:
            try:
                self.nasa_client.list_featured(page_size=1)
                services["nasa_neo_api"] = {"status": "ok"}
            except NASAAPIError as exc:
                services["nasa_neo_api"] = {
                    "status": "degraded",
                    "detail": str(exc),
                }

        services["historical_events"] = {
            "status": "ok",
            "detail": "Deterministic fallback catalogue available.",
        }

        return {
            "status": _aggregate_overall_status(services.values()),
            "services": services,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _scenario_from_event(
        self,
        event_id: str,
        impact_lat: Optional[float],
        impact_lon: Optional[float],
        angle_deg: Optional[float],
    ) -> ScenarioSource:
        event = self.events.get_event(event_id)
        parameters = event.to_parameters()
        overrides = {}
        if impact_lat is not None:
            overrides["impact_latitude"] = impact_lat
        if impact_lon is not None:
            overrides["impact_longitude"] = impact_lon
        if angle_deg is not None:
            overrides["angle"] = angle_deg
        if overrides:
            parameters = replace(parameters, **overrides)
        return ScenarioSource(
            source="historical",
            asteroid_id=event.event_id,
            name=event.name,
            parameters=parameters,
        )

    @staticmethod
    def _serialise_catalog_entry(entry: NEOCatalogEntry) -> Dict[str, object]:
        return {
            "source": "nasa",
            "asteroid_id": entry.asteroid_id,
            "name": entry.name,
            "designation": entry.designation,
            "absolute_magnitude_h": entry.absolute_magnitude_h,
            "diameter_m": entry.mean_diameter_m,
            "diameter_min_m": entry.diameter_min_m,
            "diameter_max_m": entry.diameter_max_m,
            "velocity_kms": entry.relative_velocity_kms,
            "close_approach_date": entry.close_approach_date,
            "is_potentially_hazardous": entry.is_potentially_hazardous,
        }

    @staticmethod
    def _serialise_event(event: Dict[str, object]) -> Dict[str, object]:
        return {
            "source": "historical",
            "asteroid_id": event["event_id"],
            "name": event["name"],
            "designation": event["year"],
            "absolute_magnitude_h": None,
            "diameter_m": event["diameter_m"],
            "diameter_min_m": event["diameter_m"],
            "diameter_max_m": event["diameter_m"],
            "velocity_kms": event["velocity_kms"],
            "close_approach_date": None,
            "is_potentially_hazardous": False,
        }


def _aggregate_overall_status(service_snapshots: Iterable[Dict[str, object]]) -> str:
    seen_statuses = {snapshot.get("status", "unknown") for snapshot in service_snapshots}
    if "error" in seen_statuses:
        return "error"
    if "degraded" in seen_statuses:
        return "degraded"
    if "ok" in seen_statuses and seen_statuses.issubset({"ok", "disabled", "unknown"}):
        return "ok"
    return "unknown"
