from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import Callable, Optional

from .sounds import AlarmSoundPlayer, LocalSpeaker

logger = logging.getLogger(__name__)

APP_TITLE = "Hackatime Monitor"


def _applescript_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def send_desktop_notification(title: str, message: str, timeout: int = 10) -> bool:
    """Show a native notification. Returns False when none could be shown."""
    try:
        if sys.platform == "darwin":
            script = f"display notification {_applescript_quote(message)} with title {_applescript_quote(title)}"
            subprocess.run(["osascript", "-e", script], check=True, timeout=timeout, capture_output=True)
            return True
        if sys.platform.startswith("linux"):
            if not shutil.which("notify-send"):
                logger.debug("notify-send not installed, skipping desktop notification")
                return False
            subprocess.run(["notify-send", title, message], check=True, timeout=timeout, capture_output=True)
            return True
        if sys.platform == "win32":
            from plyer import notification

            notification.notify(title=title, message=message, app_name=APP_TITLE, timeout=timeout)
            return True
    except Exception as exc:
        logger.warning("Desktop notification failed: %s", exc)
        return False
    logger.debug("No desktop notification backend for platform %s", sys.platform)
    return False


class BackgroundNotifier:
    """System notification only; no sound is played while backgrounded."""

    def __init__(self, desktop: bool = True):
        self.desktop = desktop

    def notify(self, alarm_name: str, message: str) -> None:
        logger.info("Alarm '%s' fired in background: %s", alarm_name, message)
        if self.desktop:
            send_desktop_notification(f"{APP_TITLE}: {alarm_name}", message)


class ForegroundNotifier:
    """Alert line, desktop notification, looping sound and spoken text."""

    def __init__(
        self,
        sound_player: Optional[AlarmSoundPlayer] = None,
        speaker: Optional[LocalSpeaker] = None,
        on_alert: Optional[Callable[[str, str], None]] = None,
        desktop: bool = True,
    ):
        self.sound_player = sound_player
        self.speaker = speaker
        self.on_alert = on_alert
        self.desktop = desktop

    @property
    def is_ringing(self) -> bool:
        return bool(self.sound_player and self.sound_player.is_playing)

    def notify(self, alarm_name: str, message: str) -> None:
        logger.info("Alarm '%s' fired: %s", alarm_name, message)
        if self.on_alert:
            try:
                self.on_alert(alarm_name, message)
            except Exception:  # pragma: no cover - callback safety
                logger.error("on_alert callback failed", exc_info=True)
        if self.desktop:
            send_desktop_notification(f"{APP_TITLE}: {alarm_name}", message)
        if self.sound_player:
            try:
                self.sound_player.start_loop()
            except OSError as exc:
                logger.error("Failed to start alarm sound: %s", exc)
        if self.speaker and self.speaker.available:
            self.speaker.speak_async(f"{alarm_name}. {message}")

    def stop(self) -> bool:
        if not self.is_ringing:
            return False
        self.sound_player.stop_loop()
        return True
