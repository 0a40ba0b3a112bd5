import random
from typing import List, Optional

import config
from skyping.models import AircraftSighting, GeoPoint


class SyntheticSource:
    """
    Makes up one plane per poll somewhere near the user.

    Each plane gets a fresh identity, so every qualifying poll is a new
    detection. Pass a seed for a repeatable sky.
    """

    synthetic = True
    name = "synthetic"

    def __init__(self, seed: Optional[int] = None, spread_deg: float = 0.1,
                 min_alt_ft: float = config.MINIMUM_ALTITUDE_FT) -> None:
        self.rng = random.Random(seed)
        self.spread_deg = spread_deg
        self.min_alt_ft = min_alt_ft
        self.count = 0

    def fetch(self, user: GeoPoint) -> List[AircraftSighting]:
        self.count += 1
        rng = self.rng
        return [AircraftSighting(
            identity=f"mock{self.count:05d}",
            callsign=f"SKYFUN {rng.randrange(100)}",
            position=GeoPoint(
                user.lat + (rng.random() - 0.5) * self.spread_deg,
                user.lon + (rng.random() - 0.5) * self.spread_deg,
            ),
            alt_ft=self.min_alt_ft + rng.random() * 20000,
            ground_speed_mps=200 + rng.random() * 100,
        )]
