from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict

from hackatime_client import TimeSourceError

from .evaluator import evaluate_reading
from .monitor import dispatch_fired
from .storage import AlarmStorage

logger = logging.getLogger(__name__)

BACKGROUND_CHECK_TASK = "hackatime-background-check"


class BackgroundResult(str, Enum):
    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    FAILED = "failed"


class TaskRegistry:
    def __init__(self) -> None:
        self._tasks: Dict[str, Callable[[], BackgroundResult]] = {}

    def define(self, name: str, fn: Callable[[], BackgroundResult]) -> None:
        if name in self._tasks:
            logger.info("Replacing background task %s", name)
        self._tasks[name] = fn

    def is_defined(self, name: str) -> bool:
        return name in self._tasks

    def unregister(self, name: str) -> None:
        self._tasks.pop(name, None)

    def run(self, name: str) -> BackgroundResult:
        try:
            task = self._tasks[name]
        except KeyError:
            raise KeyError(f"Background task {name} is not defined") from None
        return task()


class BackgroundCheck:
    """One load, fetch, evaluate, save and notify pass over stored alarms."""

    def __init__(self, storage: AlarmStorage, time_source, notifier, clock):
        self.storage = storage
        self.time_source = time_source
        self.notifier = notifier
        self.clock = clock

    def __call__(self) -> BackgroundResult:
        api_key, store = self.storage.load()
        if not api_key:
            logger.info("Background check skipped: no API key stored")
            return BackgroundResult.FAILED
        try:
            reading = self.time_source.fetch_elapsed_time(api_key)
        except TimeSourceError as exc:
            logger.error("Background fetch failed: %s", exc)
            return BackgroundResult.FAILED

        store, fired = evaluate_reading(store, reading, self.clock.today())
        self.storage.save(api_key, store)
        dispatch_fired(fired, self.notifier)
        logger.info("Background check at %sh %sm fired %s alarms", reading.hours, reading.minutes, len(fired))
        return BackgroundResult.NEW_DATA if fired else BackgroundResult.NO_DATA


def register_background_check(
    registry: TaskRegistry,
    storage: AlarmStorage,
    time_source,
    notifier,
    clock,
    name: str = BACKGROUND_CHECK_TASK,
) -> BackgroundCheck:
    task = BackgroundCheck(storage, time_source, notifier, clock)
    registry.define(name, task)
    return task
