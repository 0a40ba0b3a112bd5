from typing import Optional

import config
from .errors import LocationUnavailable
from .models import GeoPoint


def default_location() -> GeoPoint:
    return GeoPoint(*config.DEFAULT_LOCATION)


class FixedLocation:
    """
    Location provider backed by coordinates given on the command line.
    With no coordinates it always fails, which sends tracking down the
    default-position fallback.
    """

    def __init__(self, point: Optional[GeoPoint] = None) -> None:
        self.point = point

    def locate(self) -> GeoPoint:
        if self.point is None:
            raise LocationUnavailable("no coordinates configured (use --lat/--lon)")
        return self.point
