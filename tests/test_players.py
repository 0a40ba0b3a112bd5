import sys
import threading
import time
import types
import wave

import pygame
import pytest

from skyping.audio import MixerClipPlayer, SpeechPlayer
from skyping.errors import PlaybackFailure


# ============================================================
#   pygame.mixer player, dummy SDL audio driver
# ============================================================

class FakeChannel:
    def __init__(self):
        self.busy = False
        self.played = []
        self.stops = 0

    def play(self, sound):
        self.played.append(sound)
        self.busy = True

    def stop(self):
        self.stops += 1
        self.busy = False

    def get_busy(self):
        return self.busy


def write_wav(path, seconds=0.05, rate=22050):
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(b"\x00\x00" * int(rate * seconds))
    return str(path)


@pytest.fixture
def mixer_player(monkeypatch):
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    try:
        player = MixerClipPlayer()
    except PlaybackFailure as e:
        pytest.skip(f"no mixer available: {e}")
    player._narration = FakeChannel()
    yield player
    pygame.mixer.quit()


def test_mixer_pump_reports_completion_once(mixer_player, tmp_path):
    clip = write_wav(tmp_path / "North.wav")
    done = []

    mixer_player.play(clip, done.append)
    assert len(mixer_player._narration.played) == 1
    mixer_player.pump()
    assert done == []

    mixer_player._narration.busy = False
    mixer_player.pump()
    mixer_player.pump()
    assert done == [True]


def test_mixer_stop_all_drops_pending_completion(mixer_player, tmp_path):
    clip = write_wav(tmp_path / "East.wav")
    done = []

    mixer_player.play(clip, done.append)
    mixer_player.stop_all()
    mixer_player.pump()

    assert done == []
    assert not mixer_player._narration.busy


def test_mixer_missing_clip_is_playback_failure(mixer_player, tmp_path):
    with pytest.raises(PlaybackFailure):
        mixer_player.play(str(tmp_path / "missing.wav"), lambda ok: None)
    # the alert never raises
    mixer_player.chime(str(tmp_path / "missing.wav"))


# ============================================================
#   pyttsx3 speech player, fake engine
# ============================================================

class FakeEngine:
    def __init__(self):
        self.props = {}
        self.spoken = []
        self.stops = 0
        self.fail = False
        self.gate = threading.Event()
        self.gate.set()

    def setProperty(self, name, value):
        self.props[name] = value

    def say(self, text):
        if self.fail:
            raise RuntimeError("run loop already started")
        self.spoken.append(text)

    def runAndWait(self):
        self.gate.wait(5.0)

    def stop(self):
        self.stops += 1


@pytest.fixture
def engine(monkeypatch):
    eng = FakeEngine()
    monkeypatch.setitem(sys.modules, "pyttsx3", types.SimpleNamespace(init=lambda: eng))
    return eng


def pump_until(player, cond, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        player.pump()
        if cond():
            return True
        time.sleep(0.01)
    return False


def test_speech_completion_arrives_through_pump(engine):
    player = SpeechPlayer(rate=150, volume=0.5)
    done = []

    player.play("North", done.append)
    assert pump_until(player, lambda: done)

    assert done == [True]
    assert engine.spoken == ["North"]
    assert engine.props == {"rate": 150, "volume": 0.5}
    player.close()


def test_speech_stop_all_suppresses_old_callbacks(engine):
    engine.gate.clear()
    player = SpeechPlayer()
    first, second, third = [], [], []

    player.play("North", first.append)
    assert pump_until(player, lambda: engine.spoken == ["North"])
    player.play("East", second.append)

    player.stop_all()
    engine.gate.set()
    player.play("South", third.append)

    assert pump_until(player, lambda: third)
    assert third == [True]
    assert first == [] and second == []
    assert engine.spoken == ["North", "South"]
    assert engine.stops == 1
    player.close()


def test_speech_engine_error_reports_not_ok(engine):
    engine.fail = True
    player = SpeechPlayer()
    done = []

    player.play("West", done.append)
    assert pump_until(player, lambda: done)
    assert done == [False]
    player.close()


def test_speech_play_after_close_is_playback_failure(engine):
    player = SpeechPlayer()
    player.close()
    player._thread.join(timeout=2.0)

    with pytest.raises(PlaybackFailure):
        player.play("North", lambda ok: None)
