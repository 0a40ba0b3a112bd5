import queue
import threading
from typing import List, Optional, Tuple

from .models import AircraftSighting, GeoPoint

# (generation, sightings, error)
PollResult = Tuple[int, List[AircraftSighting], Optional[Exception]]


def _fetch(source, user: GeoPoint) -> Tuple[List[AircraftSighting], Optional[Exception]]:
    try:
        return list(source.fetch(user)), None
    except Exception as e:  # handed back to the loop, which decides what is fatal
        return [], e


class InlinePoller:
    """Runs the fetch synchronously inside submit()."""

    def __init__(self) -> None:
        self._results: List[PollResult] = []

    @property
    def busy(self) -> bool:
        return False

    def submit(self, generation: int, source, user: GeoPoint) -> None:
        sightings, err = _fetch(source, user)
        self._results.append((generation, sightings, err))

    def drain(self) -> List[PollResult]:
        out, self._results = self._results, []
        return out

    def cancel(self) -> None:
        self._results.clear()

    def close(self) -> None:
        pass


class ThreadedPoller:
    """
    Runs blocking fetches on one background thread so the frame loop never
    waits on the network. Results come back through a queue and are applied
    by whoever calls drain(), i.e. the tracking loop's own thread.
    """

    def __init__(self) -> None:
        self._requests: "queue.Queue" = queue.Queue()
        self._results: "queue.Queue" = queue.Queue()
        self._in_flight = 0
        self._thread = threading.Thread(target=self._worker, daemon=True)
        self._thread.start()

    def _worker(self) -> None:
        while True:
            item = self._requests.get()
            if item is None:
                break
            generation, source, user = item
            sightings, err = _fetch(source, user)
            self._results.put((generation, sightings, err))

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    def submit(self, generation: int, source, user: GeoPoint) -> None:
        self._in_flight += 1
        self._requests.put((generation, source, user))

    def drain(self) -> List[PollResult]:
        out: List[PollResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except queue.Empty:
                break
        self._in_flight = max(0, self._in_flight - len(out))
        return out

    def cancel(self) -> None:
        # Drops results already back. A fetch still running keeps busy True
        # until it returns, so a new session never has two fetches in flight;
        # its late result is dropped by generation.
        self.drain()

    def close(self) -> None:
        self._requests.put(None)
