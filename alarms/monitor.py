from __future__ import annotations

import logging
from threading import Event, Lock, Thread
from typing import List, Optional

from hackatime_client import TimeSourceError

from .evaluator import ElapsedTimeReading, FiredAlarm, evaluate_reading
from .storage import AlarmStorage
from .store import Alarm

logger = logging.getLogger(__name__)


def dispatch_fired(fired: List[FiredAlarm], notifier) -> None:
    """Hand every fired alarm to the notifier. Failures do not stop the rest."""
    for item in fired:
        logger.info(
            "Alarm %s (%s) reached at %sh %sm",
            item.alarm.id,
            item.alarm.name,
            item.hours,
            item.minutes,
        )
        try:
            notifier.notify(item.alarm.name, item.message)
        except Exception:
            logger.error("Notifier failed for alarm %s", item.alarm.id, exc_info=True)


class AlarmMonitor:
    """Foreground polling loop that owns the current alarm snapshot."""

    def __init__(
        self,
        storage: AlarmStorage,
        time_source,
        notifier,
        clock,
        poll_interval: float = 60.0,
        api_key: Optional[str] = None,
    ):
        self.storage = storage
        self.time_source = time_source
        self.notifier = notifier
        self.clock = clock
        self.poll_interval = max(1.0, poll_interval)

        stored_key, self._store = storage.load()
        self._api_key = api_key or stored_key
        self._latest: Optional[ElapsedTimeReading] = None
        self.last_error: Optional[str] = None
        self._lock = Lock()
        self._stop_event = Event()
        self._thread: Optional[Thread] = None
        logger.info("Loaded %s alarms from %s", len(self._store), storage.path)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def latest_reading(self) -> Optional[ElapsedTimeReading]:
        return self._latest

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = Thread(target=self._loop, name="alarm-monitor", daemon=True)
        self._thread.start()
        logger.info("Monitoring started (every %.0fs)", self.poll_interval)

    def shutdown(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
        self._thread = None
        stop = getattr(self.notifier, "stop", None)
        if stop:
            stop()
        logger.info("Monitoring stopped")

    def list_alarms(self) -> List[Alarm]:
        with self._lock:
            return list(self._store)

    def set_api_key(self, api_key: str) -> None:
        with self._lock:
            self._api_key = api_key.strip()
            self._persist()

    def add_alarm(self, name: str, hours, minutes) -> Alarm:
        with self._lock:
            self._store, alarm = self._store.add(name, hours, minutes)
            self._persist()
        logger.info("Alarm added: %s at %s", alarm.name, alarm.target_label)
        return alarm

    def generate_interval(self, step_hours, step_minutes, count) -> List[Alarm]:
        with self._lock:
            self._store, generated = self._store.generate_interval(step_hours, step_minutes, count)
            self._persist()
        logger.info("Generated %s interval alarms", len(generated))
        return generated

    def clear_interval(self) -> int:
        with self._lock:
            removed = len(self._store.interval_alarms)
            self._store = self._store.clear_interval()
            self._persist()
        logger.info("Cleared %s interval alarms", removed)
        return removed

    def toggle(self, alarm_id: str) -> Alarm:
        with self._lock:
            self._store = self._store.toggle(alarm_id)
            self._persist()
            return self._store.get(alarm_id)

    def remove(self, alarm_id: str) -> Alarm:
        with self._lock:
            alarm = self._store.get(alarm_id)
            self._store = self._store.remove(alarm_id)
            self._persist()
        logger.info("Removed alarm %s", alarm_id)
        return alarm

    def reset_trigger(self, alarm_id: str) -> Alarm:
        with self._lock:
            self._store = self._store.reset_trigger(alarm_id)
            self._persist()
            return self._store.get(alarm_id)

    def stop_ringing(self) -> bool:
        stop = getattr(self.notifier, "stop", None)
        return bool(stop and stop())

    def check_now(self) -> List[FiredAlarm]:
        """Fetch one reading and evaluate it. Fetch errors skip the pass."""
        with self._lock:
            api_key = self._api_key
        if not api_key:
            logger.debug("No API key set, skipping check")
            return []
        try:
            reading = self.time_source.fetch_elapsed_time(api_key)
        except TimeSourceError as exc:
            self.last_error = str(exc)
            logger.error("Error fetching coding stats: %s", exc)
            return []

        today = self.clock.today()
        with self._lock:
            self._latest = reading
            self.last_error = None
            self._store, fired = evaluate_reading(self._store, reading, today)
            self._persist()
        dispatch_fired(fired, self.notifier)
        return fired

    def _persist(self) -> None:
        self.storage.save(self._api_key, self._store)

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.check_now()
            except Exception:  # pragma: no cover - keep the loop alive
                logger.error("Alarm check failed", exc_info=True)
            self._stop_event.wait(self.poll_interval)
