from typing import Dict, Iterable, List, Optional

import config
from .geodesy import distance_km, initial_bearing_deg
from .models import AircraftSighting, Contact, DetectionResult, GeoPoint, NotifiedAircraft


def build_contacts(user: GeoPoint, sightings: Iterable[AircraftSighting]) -> List[Contact]:
    """
    Place every sighting relative to the user, one contact per identity.

    A repeated identity keeps the closer sighting; on equal distance the one
    seen first wins. Output keeps first-seen order.
    """
    by_id: Dict[str, Contact] = {}
    for s in sightings:
        dist = distance_km(user, s.position)
        prev = by_id.get(s.identity)
        if prev is not None and prev.distance_km <= dist:
            continue
        by_id[s.identity] = Contact(
            sighting=s,
            distance_km=dist,
            bearing_deg=initial_bearing_deg(user, s.position),
        )
    return list(by_id.values())


class DetectionEngine:
    """
    Picks the compass target and the notification target for each poll and
    owns the single NotifiedAircraft.

    The compass always follows the nearest aircraft. Notification only goes to
    the nearest aircraft inside the admission thresholds, and fires once per
    identity until that identity drops out of the qualifying set.
    """

    def __init__(self, radius_km: float = config.NOTIFICATION_RADIUS_KM,
                 min_alt_ft: float = config.MINIMUM_ALTITUDE_FT) -> None:
        self.radius_km = radius_km
        self.min_alt_ft = min_alt_ft
        self._notified: Optional[NotifiedAircraft] = None

    @property
    def notified(self) -> Optional[NotifiedAircraft]:
        return self._notified

    def reset(self) -> None:
        self._notified = None

    def admits(self, c: Contact) -> bool:
        return c.distance_km < self.radius_km and c.sighting.alt_ft > self.min_alt_ft

    def evaluate(self, user: GeoPoint, sightings: Iterable[AircraftSighting],
                 synthetic: bool = False) -> DetectionResult:
        contacts = build_contacts(user, sightings)

        # min() keeps the first of equal keys, so ties resolve in batch order
        compass_target = min(contacts, key=lambda c: c.distance_km, default=None)

        qualifying = [c for c in contacts if self.admits(c)]
        candidate = min(qualifying, key=lambda c: c.distance_km, default=None)

        # ---------------------------
        # Debounce
        # ---------------------------
        new_detection = False
        if candidate is None:
            self._notified = None
        elif self._notified is None or self._notified.identity != candidate.sighting.identity:
            self._notified = NotifiedAircraft(candidate.sighting, is_synthetic=synthetic)
            new_detection = True
        else:
            # same aircraft: refresh its data, no re-signal
            self._notified = NotifiedAircraft(candidate.sighting, is_synthetic=synthetic)

        return DetectionResult(
            compass_target=compass_target,
            notified=self._notified,
            new_detection=new_detection,
        )
