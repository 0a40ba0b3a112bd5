"""Live aircraft source backed by the OpenSky Network REST API."""

from __future__ import annotations

import math
from typing import Any, List, Optional

import httpx

import config
from .errors import DataSourceFailure
from .models import AircraftSighting, GeoPoint

KM_PER_DEG_LAT = 111.32

# indices into an OpenSky state vector
ICAO24, CALLSIGN, LON, LAT, BARO_ALT, VELOCITY, GEO_ALT = 0, 1, 5, 6, 7, 9, 13


def _m_to_feet(value_m: Any) -> Optional[float]:
    if value_m is None:
        return None
    try:
        return float(value_m) * config.M_TO_FT
    except (TypeError, ValueError):
        return None


def bounding_box(user: GeoPoint, radius_km: float) -> dict:
    lat_delta = radius_km / KM_PER_DEG_LAT
    lon_delta = radius_km / max(KM_PER_DEG_LAT * math.cos(math.radians(user.lat)), 0.0001)
    return {
        "lamin": user.lat - lat_delta,
        "lomin": user.lon - lon_delta,
        "lamax": user.lat + lat_delta,
        "lomax": user.lon + lon_delta,
    }


def parse_state(entry: Any) -> Optional[AircraftSighting]:
    """Normalize one OpenSky state vector; None if it is unusable."""
    if not isinstance(entry, (list, tuple)) or len(entry) < 7 or not entry[ICAO24]:
        return None
    try:
        lat, lon = float(entry[LAT]), float(entry[LON])
        if not (math.isfinite(lat) and math.isfinite(lon)):
            return None

        alt_m = entry[GEO_ALT] if len(entry) > GEO_ALT else None
        if alt_m is None and len(entry) > BARO_ALT:
            alt_m = entry[BARO_ALT]
        alt_ft = _m_to_feet(alt_m)
        velocity = entry[VELOCITY] if len(entry) > VELOCITY else None
        callsign = entry[CALLSIGN].strip() if entry[CALLSIGN] else None

        return AircraftSighting(
            identity=str(entry[ICAO24]).lower(),
            callsign=callsign or None,
            position=GeoPoint(lat, lon),
            alt_ft=alt_ft if alt_ft is not None else 0.0,   # no altitude: treat as on the ground
            ground_speed_mps=float(velocity) if velocity is not None else 0.0,
        )
    except (TypeError, ValueError, AttributeError):
        # one bad row from upstream drops that row, not the poll
        return None


class OpenSkySource:
    """Fetch aircraft around the user from OpenSky's states/all endpoint."""

    synthetic = False
    name = "opensky"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        radius_km: float | None = None,
        auth: tuple[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or config.OPENSKY_URL
        self.timeout = timeout or config.OPENSKY_TIMEOUT_S
        self.radius_km = radius_km or config.OPENSKY_RADIUS_KM
        self.auth = auth
        self.transport = transport

    def fetch(self, user: GeoPoint) -> List[AircraftSighting]:
        params = bounding_box(user, self.radius_km)
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport, auth=self.auth) as client:
                response = client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            raise DataSourceFailure(f"OpenSky request timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise DataSourceFailure(f"OpenSky request failed: {exc}") from exc

        if response.status_code == 429:
            raise DataSourceFailure("OpenSky rate limit reached, retrying later")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DataSourceFailure(f"OpenSky returned HTTP {exc.response.status_code}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DataSourceFailure(f"OpenSky sent invalid JSON: {exc}") from exc

        raw = payload.get("states") if isinstance(payload, dict) else None
        if not isinstance(raw, list):
            raw = []
        sightings = []
        for entry in raw:
            s = parse_state(entry)
            if s is not None:
                sightings.append(s)
        return sightings
