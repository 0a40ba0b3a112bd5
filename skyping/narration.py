from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from .errors import PlaybackFailure
from .geodesy import DirectionPhraser


class NarrationQueue:
    """
    Plays a direction phrase one clip at a time.

    Each token maps to one clip. The next clip starts only after the player
    reports the current one done (or failed). A token with no clip is skipped.
    At most one narration is active; a new request while playing is dropped.

    Player contract:
        play(clip, on_done)   on_done(ok: bool) is called once, later, from pump()
        stop_all()
    """

    def __init__(self, player, clips: Dict[str, str],
                 phraser: Optional[DirectionPhraser] = None) -> None:
        self.player = player
        self.clips = clips
        self.phraser = phraser or DirectionPhraser()

        self._queue: Deque[str] = deque()
        self._playing = False
        self._ticket = 0
        self._waiting: Optional[int] = None   # ticket of the clip now playing
        self.current_token: Optional[str] = None

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def pending(self) -> List[str]:
        return list(self._queue)

    def announce(self, bearing_deg: float) -> bool:
        """Narrate the sector phrase for a bearing. False if already busy."""
        if self._playing:
            return False
        return self.load(self.phraser.phrase(bearing_deg))

    def load(self, tokens: List[str]) -> bool:
        if self._playing:
            return False
        self._queue = deque(tokens)
        self._playing = True
        self.advance()
        return True

    def advance(self) -> None:
        """Start the next playable clip, or finish if nothing is left."""
        while self._queue:
            token = self._queue.popleft()
            clip = self.clips.get(token)
            if clip is None:
                continue

            self._ticket += 1
            ticket = self._ticket
            self._waiting = ticket
            self.current_token = token
            try:
                self.player.play(clip, self._completion(ticket))
            except PlaybackFailure as e:
                print(f"[AUDIO] clip {clip!r} failed: {e}")
                self._waiting = None
                continue
            return

        self._waiting = None
        self.current_token = None
        self._playing = False

    def stop_all(self) -> None:
        self._queue.clear()
        self._waiting = None
        self.current_token = None
        self._playing = False
        self.player.stop_all()

    def _completion(self, ticket: int) -> Callable[[bool], None]:
        def on_done(ok: bool = True) -> None:
            if ticket != self._waiting:
                return  # stale: cancelled or already handled
            if not ok:
                print(f"[AUDIO] clip for {self.current_token!r} did not finish cleanly")
            self._waiting = None
            self.advance()
        return on_done
