from __future__ import annotations
from typing import Dict, Optional

import config
from . import bus as topics
from .bus import EventBus
from .detection import DetectionEngine
from .errors import DataSourceFailure, LocationUnavailable, PermissionDenied
from .geodesy import distance_km, initial_bearing_deg, normalize_deg
from .location import default_location
from .models import (BearingSource, Contact, DetectionResult, GeoPoint,
                     NotifiedAircraft, TrackingMode, TrackingState)
from .narration import NarrationQueue
from .poller import InlinePoller

ACTIVE_STATES = {
    TrackingMode.LIVE: TrackingState.LIVE_TRACKING,
    TrackingMode.SYNTHETIC: TrackingState.SYNTHETIC_TRACKING,
}

# closer than this the bearing is meaningless
OVERHEAD_KM = 1e-6


class IdleRotation:
    """Time-driven needle sweep used while nothing is notified."""

    def __init__(self, rate_dps: float) -> None:
        self.rate_dps = rate_dps
        self._last: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._last is not None

    def start(self, now: float) -> None:
        self._last = now

    def cancel(self) -> None:
        self._last = None

    def step(self, now: float) -> float:
        """Degrees to advance since the previous step."""
        if self._last is None:
            return 0.0
        dt = max(0.0, now - self._last)
        self._last = now
        return self.rate_dps * dt


class TrackingLoop:
    """
    Owns the tracking session: location, poll schedule, idle rotation,
    the compass bearing and the notified aircraft.

    Single-threaded and cooperative. The host calls tick(now) every frame;
    every state change happens inside start/stop/tick/narrate on that thread.
    Blocking fetches may run elsewhere (ThreadedPoller), but their results are
    only applied here, tagged with the session generation so a stopped
    session can never write state.
    """

    def __init__(
        self,
        engine: DetectionEngine,
        narrator: NarrationQueue,
        sources: Dict[TrackingMode, object],
        locator,
        bus: EventBus | None = None,
        poller=None,
        recorder=None,
        live_interval_s: float = config.LIVE_POLL_S,
        synthetic_interval_s: float = config.SYNTHETIC_POLL_S,
        idle_rate_dps: float = config.IDLE_ROTATION_DPS,
        allow_fallback: bool = config.FALLBACK_ON_DENIED,
    ) -> None:
        self.engine = engine
        self.narrator = narrator
        self.sources = sources
        self.locator = locator
        self.bus = bus or EventBus()
        self.poller = poller or InlinePoller()
        self.recorder = recorder
        self.intervals = {
            TrackingMode.LIVE: live_interval_s,
            TrackingMode.SYNTHETIC: synthetic_interval_s,
        }
        self.allow_fallback = allow_fallback

        self.state = TrackingState.IDLE
        self.mode: Optional[TrackingMode] = None
        self.user: Optional[GeoPoint] = None
        self.bearing: float = 0.0
        self.compass_target: Optional[Contact] = None
        self.status = "Press L (live) or S (synthetic) to start tracking."

        self.idle = IdleRotation(idle_rate_dps)
        self._generation = 0
        self._next_poll: Optional[float] = None

    # -------------------------------
    # Read-only views
    # -------------------------------
    @property
    def active(self) -> bool:
        return self.state in (TrackingState.LIVE_TRACKING, TrackingState.SYNTHETIC_TRACKING)

    @property
    def notified(self) -> Optional[NotifiedAircraft]:
        return self.engine.notified

    @property
    def source(self):
        return self.sources[self.mode] if self.mode is not None else None

    # -------------------------------
    # Transitions
    # -------------------------------
    def start(self, mode: TrackingMode, now: float) -> bool:
        if mode not in self.sources:
            self._set_status(f"No {mode.name.lower()} data source configured.")
            return False
        if self.active and self.mode == mode:
            return True
        if self.active:
            self.stop()

        self.mode = mode
        if self.user is None:
            self._set_state(TrackingState.ACQUIRING_LOCATION)
            self._set_status("Getting your location...")
            if not self._acquire_location():
                self._set_state(TrackingState.IDLE)
                return False

        self._generation += 1
        self._set_state(ACTIVE_STATES[mode])
        self._set_status("Scanning the skies...")
        self.idle.start(now)
        self._next_poll = now
        self._run_schedule(now)
        return True

    def stop(self) -> None:
        if self.state == TrackingState.IDLE:
            return
        self._generation += 1
        self.poller.cancel()
        self.idle.cancel()
        self._next_poll = None
        self.narrator.stop_all()

        previous = self.engine.notified
        self.engine.reset()
        self.compass_target = None
        if previous is not None:
            self.bus.emit(topics.CLEARED, previous)

        self._set_state(TrackingState.IDLE)
        self._set_status("Tracking stopped.")

    def _acquire_location(self) -> bool:
        try:
            self.user = self.locator.locate()
            self._set_status("Location found! Ready to track.")
        except LocationUnavailable as e:
            print(f"[LOCATION] {e}")
            self.user = default_location()
            self._set_status("Unable to get location. Using default position.")
        except PermissionDenied as e:
            print(f"[LOCATION] {e}")
            if not self.allow_fallback:
                self._set_status("Location permission denied. Allow access to start tracking.")
                return False
            self.user = default_location()
            self._set_status("Location permission denied. Using default position.")
        return True

    # -------------------------------
    # Per-frame scheduling
    # -------------------------------
    def tick(self, now: float) -> None:
        if not self.active:
            return
        self._run_schedule(now)

        # idle sweep goes last so it can never overwrite this frame's poll
        if self.idle.running:
            delta = self.idle.step(now)
            if delta:
                self.commit_bearing(self.bearing + delta, BearingSource.IDLE, now)

    def _run_schedule(self, now: float) -> None:
        self._apply_results(now)
        if self._next_poll is not None and now >= self._next_poll and not self.poller.busy:
            self.poller.submit(self._generation, self.source, self.user)
            interval = self.intervals[self.mode]
            self._next_poll += interval
            if self._next_poll <= now:
                self._next_poll = now + interval
            self._apply_results(now)

    def _apply_results(self, now: float) -> None:
        for generation, sightings, err in self.poller.drain():
            if generation != self._generation or not self.active:
                continue  # from a stopped session
            if err is None:
                self._commit_poll(now, sightings)
            elif isinstance(err, DataSourceFailure):
                # keep bearing + notified as they are; retry on schedule
                self._set_status(f"Data source error: {err}")
                if self.recorder:
                    kept = DetectionResult(notified=self.engine.notified)
                    self.recorder.record(now, self.state.name, 0, kept, self.status)
            else:
                raise err

    def _commit_poll(self, now: float, sightings) -> None:
        previous = self.engine.notified
        result: DetectionResult = self.engine.evaluate(
            self.user, sightings, synthetic=getattr(self.source, "synthetic", False)
        )
        self.compass_target = result.compass_target

        if result.notified is not None:
            self.idle.cancel()
        if result.compass_bearing is not None:
            self.commit_bearing(result.compass_bearing, BearingSource.POLL, now)
        elif result.notified is None and not self.idle.running:
            self.idle.start(now)

        if result.new_detection:
            n = result.notified
            label = n.sighting.callsign or n.identity
            print(f"[DETECT] {label} alt={n.sighting.alt_ft:.0f} ft")
            self.bus.emit(topics.DETECTION, n, self._contact_for(result, n))
        elif previous is not None and result.notified is None:
            self.bus.emit(topics.CLEARED, previous)

        if result.notified is not None:
            s = result.notified.sighting
            self._set_status(f"Look up! Flight {s.callsign or 'N/A'} is passing by.")
        elif result.compass_target is not None:
            self._set_status(
                f"Scanning the skies... nearest {result.compass_target.distance_km:.1f} km")
        else:
            self._set_status("Scanning the skies...")

        if self.recorder:
            n_contacts = len({s.identity for s in sightings})
            self.recorder.record(now, self.state.name, n_contacts, result, self.status)

    @staticmethod
    def _contact_for(result: DetectionResult, n: NotifiedAircraft) -> Optional[Contact]:
        t = result.compass_target
        if t is not None and t.sighting.identity == n.identity:
            return t
        return None

    # -------------------------------
    # Bearing: the only writer
    # -------------------------------
    def commit_bearing(self, value: float, source: BearingSource, now: float) -> None:
        if source == BearingSource.IDLE:
            if self.engine.notified is not None:
                raise RuntimeError("idle rotation wrote the bearing while an aircraft is notified")
        else:
            self.idle.cancel()

        self.bearing = normalize_deg(value)
        self.bus.emit(topics.BEARING, self.bearing, source)

        if source == BearingSource.POLL and self.active and self.engine.notified is None:
            self.idle.start(now)

    # -------------------------------
    # Narration
    # -------------------------------
    def narrate(self) -> bool:
        """Speak the direction toward the notified aircraft, if any."""
        n = self.engine.notified
        if n is None or self.user is None:
            return False
        pos = n.sighting.position
        if distance_km(self.user, pos) < OVERHEAD_KM:
            self._set_status("It's directly overhead. Look straight up!")
            return False
        return self.narrator.announce(initial_bearing_deg(self.user, pos))

    def look_direction(self) -> Optional[str]:
        """Where to look for the notified aircraft, as display text."""
        n = self.engine.notified
        if n is None or self.user is None:
            return None
        pos = n.sighting.position
        if distance_km(self.user, pos) < OVERHEAD_KM:
            return "straight up"
        return self.narrator.phraser.text(initial_bearing_deg(self.user, pos))

    # -------------------------------
    # Helpers
    # -------------------------------
    def _set_state(self, state: TrackingState) -> None:
        if state != self.state:
            self.state = state
            self.bus.emit(topics.STATE, state)

    def _set_status(self, msg: str) -> None:
        if msg != self.status:
            self.status = msg
            print(f"[STATUS] {msg}")
            self.bus.emit(topics.STATUS, msg)

    def close(self) -> None:
        self.stop()
        self.poller.close()
        if self.recorder:
            self.recorder.close()
