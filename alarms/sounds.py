from __future__ import annotations

import logging
import wave
from pathlib import Path
from threading import Event, Lock, Thread
from typing import Optional

import numpy as np

try:
    import winsound
except ImportError:  # pragma: no cover - non-Windows fallback
    winsound = None  # type: ignore

try:  # Optional local TTS for spoken alerts
    import pyttsx3
except ImportError:  # pragma: no cover - optional
    pyttsx3 = None  # type: ignore

logger = logging.getLogger(__name__)

SAMPLE_RATE = 24000


def render_alarm_tone(
    duration_seconds: float = 1.5,
    freq: float = 880.0,
    amplitude: float = 0.4,
    sample_rate: int = SAMPLE_RATE,
) -> bytes:
    """16-bit mono PCM of a sine tone, pulsed twice a second."""
    t = np.arange(int(duration_seconds * sample_rate)) / sample_rate
    envelope = (np.floor(t * 4) % 2 == 0).astype(np.float64)
    samples = amplitude * envelope * np.sin(2 * np.pi * freq * t)
    return (samples * 32767).astype("<i2").tobytes()


def ensure_alarm_sound(path: Path, duration_seconds: float = 1.5) -> None:
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(SAMPLE_RATE)
        wav.writeframes(render_alarm_tone(duration_seconds))
    logger.info("Generated default alarm sound at %s", path)


class AlarmSoundPlayer:
    def __init__(self, sound_path: Path):
        self.sound_path = Path(sound_path)
        self._stop_event = Event()
        self._beep_thread: Optional[Thread] = None
        self._playing = False

    @property
    def is_playing(self) -> bool:
        return self._playing

    def start_loop(self) -> None:
        ensure_alarm_sound(self.sound_path)
        self._stop_event.clear()
        self._playing = True
        if winsound:
            try:
                winsound.PlaySound(
                    str(self.sound_path),
                    winsound.SND_FILENAME | winsound.SND_LOOP | winsound.SND_ASYNC,
                )
                return
            except RuntimeError:
                logger.warning("winsound.PlaySound failed, falling back to beep loop")

        if self._beep_thread and self._beep_thread.is_alive():
            return
        self._beep_thread = Thread(target=self._beep_loop, name="alarm-beep", daemon=True)
        self._beep_thread.start()

    def stop_loop(self) -> None:
        self._stop_event.set()
        self._playing = False
        if winsound:
            try:
                winsound.PlaySound(None, winsound.SND_PURGE)
            except RuntimeError:
                logger.debug("winsound.PlaySound purge failed")

    def _beep_loop(self) -> None:  # pragma: no cover - timing loop
        while not self._stop_event.is_set():
            if winsound:
                try:
                    winsound.Beep(880, 250)
                except RuntimeError:
                    logger.debug("winsound.Beep failed inside loop")
            else:
                print("\a", end="", flush=True)
                logger.info("Alarm ringing...")
            self._stop_event.wait(0.75)


class LocalSpeaker:
    """Lightweight offline TTS wrapper around pyttsx3."""

    def __init__(self, rate: int = 185):
        self._engine = None
        self._lock = Lock()
        if pyttsx3:
            try:
                self._engine = pyttsx3.init()
                self._engine.setProperty("rate", rate)
            except Exception:  # pragma: no cover - driver missing on host
                logger.warning("pyttsx3 engine unavailable, spoken alerts disabled", exc_info=True)
                self._engine = None

    @property
    def available(self) -> bool:
        return self._engine is not None

    def speak_async(self, text: str) -> bool:
        if not self._engine:
            return False
        Thread(target=self._speak, args=(text,), daemon=True).start()
        return True

    def _speak(self, text: str) -> None:
        if not self._engine:
            return
        with self._lock:
            try:
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception:  # pragma: no cover - engine runtime errors
                logger.error("pyttsx3 failed to speak text", exc_info=True)
