from typing import Callable, List, Sequence, Union

from .errors import DataSourceFailure
from .models import AircraftSighting, GeoPoint

# A frame is either the batch for one poll, or a failure to raise for that poll,
# or a function of the user's position producing the batch.
Frame = Union[Sequence[AircraftSighting], DataSourceFailure,
              Callable[[GeoPoint], Sequence[AircraftSighting]]]


class ScriptedSource:
    """
    Replays a fixed list of poll frames, one per fetch().

    Used by the built-in scenarios, CSV replay and tests. Once the frames run
    out it either starts over (loop=True) or keeps reporting an empty sky.
    """

    def __init__(self, frames: List[Frame], synthetic: bool = True,
                 loop: bool = False, name: str = "scripted") -> None:
        self.frames = list(frames)
        self.synthetic = synthetic
        self.loop = loop
        self.name = name
        self.calls = 0

    def fetch(self, user: GeoPoint) -> List[AircraftSighting]:
        idx = self.calls
        self.calls += 1
        if self.loop and self.frames:
            idx %= len(self.frames)
        if idx >= len(self.frames):
            return []

        frame = self.frames[idx]
        if isinstance(frame, DataSourceFailure):
            raise frame
        if callable(frame):
            return list(frame(user))
        return list(frame)
