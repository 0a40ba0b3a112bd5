# A tiny pub/sub event bus between the tracking loop and its listeners.
from typing import Callable, Dict, List

# Topics published by TrackingLoop
STATUS = "status"            # (message: str)
BEARING = "bearing"          # (bearing_deg: float, source: BearingSource)
DETECTION = "detection"      # (notified: NotifiedAircraft, contact: Contact)
CLEARED = "cleared"          # (previous: NotifiedAircraft)
STATE = "state"              # (state: TrackingState)


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable]] = {}

    def on(self, topic: str, fn: Callable):
        self._subs.setdefault(topic, []).append(fn)

    def off(self, topic: str, fn: Callable):
        subs = self._subs.get(topic, [])
        if fn in subs:
            subs.remove(fn)

    def emit(self, topic: str, *args, **kwargs):
        for fn in list(self._subs.get(topic, [])):
            fn(*args, **kwargs)
