import csv
import os
from typing import Optional

from .models import DetectionResult

HEADER = [
    "time_s",
    "state",
    "n_contacts",
    "target_id",
    "target_dist_km",
    "target_bearing_deg",
    "notified_id",
    "notified_alt_ft",
    "new_detection",
    "status",
]


class CsvRecorder:
    """One CSV row per committed poll (or failed poll), for offline debugging."""

    def __init__(self, path: str) -> None:
        log_dir = os.path.dirname(path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        self.path = path
        self._file = open(path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(HEADER)

    def record(self, time_s: float, state: str, n_contacts: int,
               result: Optional[DetectionResult], status: str) -> None:
        if self._writer is None:
            return
        target = result.compass_target if result else None
        notified = result.notified if result else None
        self._writer.writerow([
            f"{time_s:.2f}",
            state,
            n_contacts,
            target.sighting.identity if target else "",
            f"{target.distance_km:.3f}" if target else "",
            f"{target.bearing_deg:.1f}" if target else "",
            notified.identity if notified else "",
            f"{notified.sighting.alt_ft:.0f}" if notified else "",
            1 if result and result.new_detection else 0,
            status,
        ])

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None
