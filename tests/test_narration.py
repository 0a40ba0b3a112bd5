import pytest

from skyping.errors import PlaybackFailure
from skyping.geodesy import DirectionPhraser
from skyping.models import SectorPolicy
from skyping.narration import NarrationQueue

CLIPS = {
    "North": "north.ogg",
    "East": "east.ogg",
    "South": "south.ogg",
    "West": "west.ogg",
    "between": "between.ogg",
    "and": "and.ogg",
}


class FakePlayer:
    """Records what plays; completions are delivered by finish()."""

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.started = []
        self.active = []          # (clip, on_done) currently "sounding"
        self.max_active = 0
        self.stops = 0

    def play(self, clip, on_done):
        if clip in self.fail:
            raise PlaybackFailure(f"cannot decode {clip}")
        self.started.append(clip)
        self.active.append((clip, on_done))
        self.max_active = max(self.max_active, len(self.active))

    def finish(self, ok=True):
        clip, cb = self.active.pop(0)
        cb(ok)
        return clip

    def stop_all(self):
        self.stops += 1
        self.active.clear()


def drain(player, q):
    while player.active:
        player.finish()


def test_plays_tokens_strictly_in_order():
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)

    assert q.announce(45.0) is True
    assert player.started == ["between.ogg"]
    assert q.playing

    drain(player, q)

    assert player.started == ["between.ogg", "north.ogg", "and.ogg", "east.ogg"]
    assert player.max_active == 1
    assert not q.playing
    assert q.pending == []


def test_request_while_playing_is_ignored():
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)
    q.announce(45.0)

    assert q.announce(180.0) is False
    drain(player, q)
    assert "south.ogg" not in player.started


def test_missing_clip_is_skipped():
    player = FakePlayer()
    clips = dict(CLIPS)
    del clips["and"]
    q = NarrationQueue(player, clips)

    q.announce(135.0)
    drain(player, q)

    assert player.started == ["between.ogg", "east.ogg", "south.ogg"]
    assert not q.playing


def test_phrase_with_no_clips_finishes_immediately():
    player = FakePlayer()
    q = NarrationQueue(player, {})
    assert q.announce(0.0) is True
    assert not q.playing
    assert player.started == []


def test_failed_play_counts_as_done():
    player = FakePlayer(fail={"north.ogg"})
    q = NarrationQueue(player, CLIPS)

    q.announce(45.0)
    drain(player, q)

    assert player.started == ["between.ogg", "and.ogg", "east.ogg"]
    assert not q.playing


def test_error_completion_still_advances():
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)
    q.announce(315.0)

    player.finish(ok=False)
    assert player.started[-1] == "west.ogg"


def test_stop_all_mid_phrase():
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)
    q.announce(45.0)
    stale = player.active[0][1]
    player.finish()                       # "between" done, "North" now playing

    q.stop_all()

    assert not q.playing
    assert q.pending == []
    assert player.stops == 1
    # a late completion from the cancelled clip must not restart anything
    stale(True)
    assert player.started == ["between.ogg", "north.ogg"]
    # and a new request works
    assert q.announce(90.0) is True
    assert player.started[-1] == "east.ogg"


def test_stop_all_when_idle_is_harmless():
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)
    q.stop_all()
    q.stop_all()
    assert not q.playing
    assert player.stops == 2


def test_named_policy_single_clip():
    player = FakePlayer()
    clips = dict(CLIPS, NorthEast="ne.ogg")
    q = NarrationQueue(player, clips, DirectionPhraser(SectorPolicy.NAMED))
    q.announce(45.0)
    drain(player, q)
    assert player.started == ["ne.ogg"]


def test_synchronous_completion_does_not_overlap():
    class InstantPlayer(FakePlayer):
        def play(self, clip, on_done):
            self.started.append(clip)
            on_done(True)

    player = InstantPlayer()
    q = NarrationQueue(player, CLIPS)
    q.announce(225.0)
    assert player.started == ["between.ogg", "south.ogg", "and.ogg", "west.ogg"]
    assert not q.playing


@pytest.mark.parametrize("bearing", [0.0, 22.5, 90.0, 200.0, 300.0, 359.9])
def test_every_announcement_ends_idle(bearing):
    player = FakePlayer()
    q = NarrationQueue(player, CLIPS)
    q.announce(bearing)
    drain(player, q)
    assert not q.playing
    assert player.max_active == 1
