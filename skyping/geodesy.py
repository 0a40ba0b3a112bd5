import math
from typing import List

import config
from .models import GeoPoint, SectorPolicy

CARDINALS = ("North", "East", "South", "West")
INTERCARDINALS = ("NorthEast", "SouthEast", "SouthWest", "NorthWest")

SECTOR_WIDTH_DEG = 45.0
HALF_SECTOR_DEG = SECTOR_WIDTH_DEG / 2


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine great-circle distance on a spherical Earth."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat))
        * math.sin(d_lon / 2) ** 2
    )
    h = min(1.0, h)   # rounding near antipodes
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return config.EARTH_RADIUS_KM * c


def initial_bearing_deg(frm: GeoPoint, to: GeoPoint) -> float:
    """Forward azimuth from `frm` toward `to`, in [0, 360).

    Undefined for coincident points (returns 0.0); callers narrating a bearing
    must check the distance first.
    """
    lat1 = math.radians(frm.lat)
    lat2 = math.radians(to.lat)
    d_lon = math.radians(to.lon - frm.lon)
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return normalize_deg(math.degrees(math.atan2(y, x)))


def normalize_deg(deg: float) -> float:
    if not math.isfinite(deg):
        raise ValueError(f"bearing must be finite, got {deg!r}")
    deg = deg % 360.0
    # -1e-17 % 360 rounds up to exactly 360.0
    return 0.0 if deg >= 360.0 else deg


def sector_index(bearing_deg: float) -> int:
    """
    Index 0..7 of the 45° sector holding `bearing_deg`, clockwise from North.

    Sectors are open below and closed above: (lo, hi]. North wraps as
    (337.5, 360) ∪ [0, 22.5], so 22.5 is still North and 67.5 is still the
    North/East band.
    """
    b = normalize_deg(bearing_deg)
    return math.ceil((b - HALF_SECTOR_DEG) / SECTOR_WIDTH_DEG) % 8


def sector_phrase(bearing_deg: float, policy: SectorPolicy = SectorPolicy.COMPOUND) -> List[str]:
    idx = sector_index(bearing_deg)
    if idx % 2 == 0:
        return [CARDINALS[idx // 2]]

    if policy == SectorPolicy.NAMED:
        return [INTERCARDINALS[idx // 2]]

    # in-between band: name both flanking cardinals, clockwise
    left = CARDINALS[idx // 2]
    right = CARDINALS[(idx // 2 + 1) % 4]
    return ["between", left, "and", right]


class DirectionPhraser:
    """Turns a bearing into narration tokens under a fixed policy."""

    def __init__(self, policy: SectorPolicy = SectorPolicy.COMPOUND) -> None:
        self.policy = policy

    def phrase(self, bearing_deg: float) -> List[str]:
        return sector_phrase(bearing_deg, self.policy)

    def text(self, bearing_deg: float) -> str:
        return " ".join(self.phrase(bearing_deg))


def destination_point(origin: GeoPoint, bearing_deg: float, dist_km: float) -> GeoPoint:
    """Point reached by travelling `dist_km` from `origin` on an initial bearing."""
    lat1 = math.radians(origin.lat)
    lon1 = math.radians(origin.lon)
    brg = math.radians(bearing_deg)
    d = dist_km / config.EARTH_RADIUS_KM

    lat2 = math.asin(math.sin(lat1) * math.cos(d) + math.cos(lat1) * math.sin(d) * math.cos(brg))
    lon2 = lon1 + math.atan2(
        math.sin(brg) * math.sin(d) * math.cos(lat1),
        math.cos(d) - math.sin(lat1) * math.sin(lat2),
    )
    # wrap longitude into [-180, 180)
    lon2_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return GeoPoint(math.degrees(lat2), lon2_deg)
