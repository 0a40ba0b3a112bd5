from dataclasses import dataclass
from typing import Optional
from enum import Enum, auto

import config


class TrackingState(Enum):
    IDLE = auto()
    ACQUIRING_LOCATION = auto()
    LIVE_TRACKING = auto()
    SYNTHETIC_TRACKING = auto()


class TrackingMode(Enum):
    LIVE = auto()
    SYNTHETIC = auto()


class SectorPolicy(Enum):
    COMPOUND = auto()    # "between North and East"
    NAMED = auto()       # "NorthEast"


class BearingSource(Enum):
    POLL = auto()
    IDLE = auto()


@dataclass(frozen=True)
class GeoPoint:
    lat: float           # decimal degrees
    lon: float


@dataclass(frozen=True)
class AircraftSighting:
    # -------------------------------
    # Identity
    # -------------------------------
    identity: str                       # stable id, e.g. icao24 hex
    callsign: Optional[str]

    # -------------------------------
    # Kinematics
    # -------------------------------
    position: GeoPoint
    alt_ft: float                       # feet, converted at ingestion
    ground_speed_mps: float = 0.0

    @property
    def speed_knots(self) -> float:
        return self.ground_speed_mps * config.MPS_TO_KT


@dataclass(frozen=True)
class NotifiedAircraft:
    sighting: AircraftSighting
    is_synthetic: bool = False

    @property
    def identity(self) -> str:
        return self.sighting.identity


@dataclass(frozen=True)
class Contact:
    """A sighting placed relative to the user for one poll cycle."""
    sighting: AircraftSighting
    distance_km: float
    bearing_deg: float


@dataclass(frozen=True)
class DetectionResult:
    compass_target: Optional[Contact] = None
    notified: Optional[NotifiedAircraft] = None
    new_detection: bool = False

    @property
    def compass_bearing(self) -> Optional[float]:
        if self.compass_target is None:
            return None
        return self.compass_target.bearing_deg
