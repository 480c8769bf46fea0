"""NASA NeoWs lookups turned into impact simulation inputs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import logging
import math

import requests
from scipy import constants

from .models import AsteroidParameters


logger = logging.getLogger(__name__)

NEOWS_URL = "https://api.nasa.gov/neo/rest/v1"
REQUEST_TIMEOUT_S = 10


class NASAAPIError(RuntimeError):
    """Raised when NeoWs is unreachable or returns something unusable."""


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class NEOCatalogEntry:
    """The fields of a NeoWs object that the impact pipeline cares about."""

    asteroid_id: str
    name: str
    designation: str
    absolute_magnitude_h: Optional[float]
    diameter_min_m: Optional[float]
    diameter_max_m: Optional[float]
    is_potentially_hazardous: bool
    close_approach_date: Optional[str]
    relative_velocity_kms: Optional[float]

    @classmethod
    def from_neows(cls, payload: Dict[str, Any]) -> "NEOCatalogEntry":
        size = (payload.get("estimated_diameter") or {}).get("meters") or {}
        approaches = payload.get("close_approach_data") or [{}]
        approach = approaches[0]
        name = payload.get("name") or "Unknown"
        return cls(
            asteroid_id=str(payload.get("id")),
            name=name,
            designation=payload.get("designation") or name,
            absolute_magnitude_h=_optional_float(payload.get("absolute_magnitude_h")),
            diameter_min_m=_optional_float(size.get("estimated_diameter_min")),
            diameter_max_m=_optional_float(size.get("estimated_diameter_max")),
            is_potentially_hazardous=bool(payload.get("is_potentially_hazardous_asteroid")),
            close_approach_date=approach.get("close_approach_date"),
            relative_velocity_kms=_optional_float((approach.get("relative_velocity") or {}).get("kilometers_per_second")),
        )

    @property
    def mean_diameter_m(self) -> Optional[float]:
        bounds = [value for value in (self.diameter_min_m, self.diameter_max_m) if value]
        if not bounds:
            return None
        return sum(bounds) / len(bounds)


def mean_orbital_speed_kms(orbital_data: Dict[str, Any]) -> Optional[float]:
    """Mean heliocentric speed 2πa/T in km/s, or None without a usable orbit."""

    semi_major_axis_au = _optional_float(orbital_data.get("semi_major_axis"))
    period_days = _optional_float(orbital_data.get("orbital_period"))
    if not semi_major_axis_au or not period_days:
        return None
    orbit_length_m = 2 * math.pi * semi_major_axis_au * constants.astronomical_unit
    return orbit_length_m / (period_days * constants.day) / 1000.0


class NASAClient:
    """NeoWs wrapper that memoises every response for the client's lifetime."""

    def __init__(self, api_key: str, session: Optional[requests.Session] = None) -> None:
        self.api_key = api_key or "DEMO_KEY"
        self.session = session or requests.Session()
        self._responses: Dict[Tuple[str, Tuple[Tuple[str, Any], ...]], Any] = {}

    def fetch_neo(self, asteroid_id: str) -> Dict[str, Any]:
        """Raw NeoWs payload for one object."""

        return self._get(f"/neo/{asteroid_id}")

    def list_featured(self, *, page: int = 0, page_size: int = 12) -> List[NEOCatalogEntry]:
        payload = self._get("/neo/browse", page=page, size=page_size)
        entries = []
        for item in payload.get("near_earth_objects", []):
            try:
                entries.append(NEOCatalogEntry.from_neows(item))
            except (AttributeError, TypeError) as exc:
                logger.debug("Skipping malformed NeoWs object %s: %s", item.get("id"), exc)
        return entries

    def to_asteroid_parameters(
        self,
        payload: Dict[str, Any],
        *,
        impact_lat: float,
        impact_lon: float,
        angle_deg: float = 45.0,
    ) -> AsteroidParameters:
        """Turn a NeoWs object into simulation inputs at a chosen impact point.

        The catalog has no impact geometry, so the caller supplies the impact
        point and angle. The close-approach speed is used when present, the
        mean orbital speed otherwise. Raises ``NASAAPIError`` if the payload
        lacks a usable diameter or velocity.
        """

        entry = NEOCatalogEntry.from_neows(payload)
        velocity = entry.relative_velocity_kms or mean_orbital_speed_kms(payload.get("orbital_data") or {})
        if not entry.mean_diameter_m or not velocity:
            raise NASAAPIError(f"NEO {entry.asteroid_id} has no usable diameter/velocity")
        return AsteroidParameters(
            diameter=entry.mean_diameter_m,
            velocity=velocity,
            angle=angle_deg,
            impact_latitude=impact_lat,
            impact_longitude=impact_lon,
        )

    def _get(self, path: str, **params: Any) -> Any:
        key = (path, tuple(sorted(params.items())))
        if key in self._responses:
            return self._responses[key]

        url = NEOWS_URL + path
        try:
            response = self.session.get(url, params={"api_key": self.api_key, **params}, timeout=REQUEST_TIMEOUT_S)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            raise NASAAPIError(f"GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise NASAAPIError(f"GET {path} returned invalid JSON: {exc}") from exc

        self._responses[key] = body
        return body
