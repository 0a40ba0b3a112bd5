from typing import Callable, Dict, List

import config
from skyping.geodesy import destination_point
from skyping.models import AircraftSighting, GeoPoint
from skyping.sources import ScriptedSource

STEP_S = config.SYNTHETIC_POLL_S


def _track(identity: str, callsign: str, start_brg: float, start_km: float,
           heading: float, speed_mps: float, alt_ft: float, n: int) -> List[Callable]:
    """
    Frames for one aircraft flying a straight line. Positions are laid out
    relative to wherever the user turns out to be.
    """
    step_km = speed_mps * STEP_S / 1000.0

    def frame(i: int) -> Callable[[GeoPoint], List[AircraftSighting]]:
        def at(user: GeoPoint) -> List[AircraftSighting]:
            start = destination_point(user, start_brg, start_km)
            pos = destination_point(start, heading, step_km * i)
            return [AircraftSighting(identity, callsign, pos, alt_ft, speed_mps)]
        return at

    return [frame(i) for i in range(n)]


def _merge(*tracks: List[Callable]) -> List[Callable]:
    n = max(len(t) for t in tracks)

    def frame(i: int):
        def at(user: GeoPoint) -> List[AircraftSighting]:
            out: List[AircraftSighting] = []
            for t in tracks:
                if i < len(t):
                    out.extend(t[i](user))
            return out
        return at

    return [frame(i) for i in range(n)]


def overhead_pass() -> ScriptedSource:
    # Airliner crossing south to north, passing ~1 km east of the user
    frames = _track("800c1f", "AIC101", 175.0, 12.0, 0.0, 230.0, 33000, 30)
    return ScriptedSource(frames, loop=True, name="overhead pass")


def low_crossing() -> ScriptedSource:
    # Close but below the altitude floor: compass follows it, no notification
    frames = _track("8015a2", "VTX20", 270.0, 6.0, 90.0, 60.0, 2500, 30)
    return ScriptedSource(frames, loop=True, name="low crossing")


def two_aircraft() -> ScriptedSource:
    # One westbound, one eastbound; the nearest qualifying aircraft changes hands
    a = _track("8008d4", "IGO612", 60.0, 10.0, 250.0, 220.0, 28000, 30)
    b = _track("801392", "SEJ330", 230.0, 12.0, 60.0, 210.0, 31000, 30)
    return ScriptedSource(_merge(a, b), loop=True, name="two aircraft")


SCENARIOS: Dict[str, Callable[[], ScriptedSource]] = {
    "1": overhead_pass,
    "2": low_crossing,
    "3": two_aircraft,
}
