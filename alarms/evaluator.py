from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple, Union

from .store import Alarm, AlarmStore


@dataclass(frozen=True)
class ElapsedTimeReading:
    total_seconds: float
    hours: int
    minutes: int
    label: str = ""

    @classmethod
    def from_total_seconds(cls, total_seconds: float, label: str = "") -> "ElapsedTimeReading":
        total = max(0, int(total_seconds))
        hours, remainder = divmod(total, 3600)
        return cls(total_seconds=total_seconds, hours=hours, minutes=remainder // 60, label=label or "")


@dataclass(frozen=True)
class FiredAlarm:
    alarm: Alarm  # snapshot taken before the trigger state was set
    hours: int
    minutes: int

    @property
    def message(self) -> str:
        return (
            f"You've coded for {self.hours}h {self.minutes}m today "
            f"(target {self.alarm.target_label})."
        )


def has_reached(alarm: Alarm, current_hours: int, current_minutes: int) -> bool:
    if current_hours > alarm.target_hours:
        return True
    return current_hours == alarm.target_hours and current_minutes >= alarm.target_minutes


def evaluate(
    alarms: Union[AlarmStore, Iterable[Alarm]],
    current_hours: int,
    current_minutes: int,
    today: str,
) -> Tuple[AlarmStore, List[FiredAlarm]]:
    """Decide which alarms fire for the reading and return the updated store.

    Trigger state from an earlier day is cleared before the firing check, so
    an alarm fires at most once per ``today`` value. Alarms do not interact.
    """
    updated: List[Alarm] = []
    fired: List[FiredAlarm] = []
    for alarm in alarms:
        if not alarm.enabled:
            updated.append(alarm)
            continue

        if alarm.last_triggered_date != today:
            if alarm.has_triggered or alarm.last_triggered_date is not None:
                alarm = alarm.cleared()

        if alarm.has_triggered:
            updated.append(alarm)
            continue

        if has_reached(alarm, current_hours, current_minutes):
            fired.append(FiredAlarm(alarm=alarm, hours=current_hours, minutes=current_minutes))
            alarm = replace(alarm, has_triggered=True, last_triggered_date=today)
        updated.append(alarm)
    return AlarmStore.of(updated), fired


def evaluate_reading(
    alarms: Union[AlarmStore, Iterable[Alarm]],
    reading: ElapsedTimeReading,
    today: str,
) -> Tuple[AlarmStore, List[FiredAlarm]]:
    return evaluate(alarms, reading.hours, reading.minutes, today)
