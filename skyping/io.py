import csv
from typing import Dict, List

from .models import AircraftSighting, GeoPoint
from .sources import ScriptedSource

# CSV columns:
# time_s,identity,callsign,lat,lon,alt_ft,ground_speed_mps
# Example:
# 0,abc123,AIC101,10.60,76.15,32000,230
#
# Rows sharing a time_s form one poll frame; frames replay in time order.


def load_frames_csv(path: str) -> List[List[AircraftSighting]]:
    frames: Dict[float, List[AircraftSighting]] = {}
    with open(path, newline="") as f:
        r = csv.DictReader(f)
        for row in r:
            t = float(row.get("time_s") or 0)
            callsign = (row.get("callsign") or "").strip() or None
            speed = row.get("ground_speed_mps") or 0
            s = AircraftSighting(
                identity=row["identity"].strip(),
                callsign=callsign,
                position=GeoPoint(float(row["lat"]), float(row["lon"])),
                alt_ft=float(row["alt_ft"]),
                ground_speed_mps=float(speed),
            )
            frames.setdefault(t, []).append(s)
    return [frames[t] for t in sorted(frames)]


def replay_source(path: str, loop: bool = True) -> ScriptedSource:
    frames = load_frames_csv(path)
    if not frames:
        raise RuntimeError(f"No rows in replay file: {path}")
    return ScriptedSource(frames, synthetic=True, loop=loop, name=f"replay:{path}")
