import os
import queue
import threading
from typing import Callable, Dict, Optional

import pygame

import config
from .bus import DETECTION
from .errors import PlaybackFailure

OnDone = Callable[[bool], None]


def clip_map(clip_dir: str) -> Dict[str, str]:
    """
    Map tokens to clip files found in `clip_dir`, e.g. North.ogg, between.wav.
    Tokens with no file are left out, so narration skips them.
    """
    clips: Dict[str, str] = {}
    tokens = list(config.SPEECH_WORDS) + [config.ALERT_CLIP]
    for token in tokens:
        for ext in config.CLIP_EXTENSIONS:
            path = os.path.join(clip_dir, token + ext)
            if os.path.isfile(path):
                clips[token] = path
                break
    return clips


def attach_alert(bus, player, clip: str) -> Callable[[], None]:
    """Chime on every new detection. Returns a function that unsubscribes it."""
    def on_detection(notified, contact):
        player.chime(clip)

    bus.on(DETECTION, on_detection)
    return lambda: bus.off(DETECTION, on_detection)


# ============================================================
#   pygame.mixer clip player
# ============================================================

class MixerClipPlayer:
    """
    Plays audio files on two reserved mixer channels: one for narration,
    one for the detection alert. Completion is detected in pump() by polling
    the narration channel, so callbacks always run on the host thread.
    """

    NARRATION_CH = 0
    ALERT_CH = 1

    def __init__(self) -> None:
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            pygame.mixer.set_reserved(2)
        except pygame.error as e:
            raise PlaybackFailure(f"audio device unavailable: {e}") from e
        self._narration = pygame.mixer.Channel(self.NARRATION_CH)
        self._alert = pygame.mixer.Channel(self.ALERT_CH)
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._on_done: Optional[OnDone] = None

    def _sound(self, path: str) -> "pygame.mixer.Sound":
        snd = self._sounds.get(path)
        if snd is None:
            try:
                snd = pygame.mixer.Sound(path)
            except (pygame.error, FileNotFoundError) as e:
                raise PlaybackFailure(f"cannot load {path}: {e}") from e
            self._sounds[path] = snd
        return snd

    def play(self, clip: str, on_done: OnDone) -> None:
        snd = self._sound(clip)
        self._narration.stop()
        self._on_done = on_done
        self._narration.play(snd)

    def chime(self, clip: str) -> None:
        try:
            self._alert.play(self._sound(clip))
        except PlaybackFailure as e:
            print(f"[AUDIO] alert failed: {e}")

    def stop_all(self) -> None:
        self._on_done = None
        self._narration.stop()
        self._alert.stop()

    def pump(self) -> None:
        if self._on_done is not None and not self._narration.get_busy():
            cb, self._on_done = self._on_done, None
            cb(True)

    def close(self) -> None:
        self.stop_all()


# ============================================================
#   pyttsx3 speech player (clip = text to speak)
# ============================================================

class SpeechPlayer:
    """
    Speaks each clip's text on a background TTS thread, one utterance at a
    time. The worker reports completions through a queue; pump() hands them
    to the narration queue on the host thread.
    """

    def __init__(self, rate: int = config.SPEECH_RATE, volume: float = config.SPEECH_VOLUME) -> None:
        self.rate = rate
        self.volume = volume
        self._requests: "queue.Queue" = queue.Queue()
        self._done: "queue.Queue" = queue.Queue()
        self._callbacks: Dict[int, OnDone] = {}
        self._seq = 0
        self._generation = 0
        self._engine = None
        self._thread = threading.Thread(target=self._worker, daemon=True)
        self._thread.start()

    def _worker(self) -> None:
        import pyttsx3
        engine = pyttsx3.init()
        engine.setProperty("rate", self.rate)
        engine.setProperty("volume", self.volume)
        self._engine = engine
        while True:
            item = self._requests.get()
            if item is None:
                break
            generation, seq, text = item
            if generation != self._generation:
                continue  # cancelled by stop_all before it started
            ok = True
            try:
                engine.say(text)
                engine.runAndWait()
            except RuntimeError as e:
                print(f"[AUDIO] speech failed: {e}")
                ok = False
            if seq is not None:
                self._done.put((seq, ok))

    def play(self, clip: str, on_done: OnDone) -> None:
        if not self._thread.is_alive():
            raise PlaybackFailure("speech worker is not running")
        self._seq += 1
        self._callbacks[self._seq] = on_done
        self._requests.put((self._generation, self._seq, clip))

    def chime(self, clip: str) -> None:
        self._requests.put((self._generation, None, clip))

    def stop_all(self) -> None:
        self._generation += 1
        self._callbacks.clear()
        if self._engine is not None:
            self._engine.stop()

    def pump(self) -> None:
        while True:
            try:
                seq, ok = self._done.get_nowait()
            except queue.Empty:
                return
            cb = self._callbacks.pop(seq, None)
            if cb is not None:
                cb(ok)

    def close(self) -> None:
        self.stop_all()
        self._requests.put(None)
