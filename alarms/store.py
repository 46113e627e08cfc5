from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import NotFoundError, ValidationError

MAX_INTERVAL_COUNT = 50
INTERVAL_NAME = "Commit {index}"


class AlarmKind(str, Enum):
    MANUAL = "manual"
    INTERVAL = "interval"


@dataclass(frozen=True)
class Alarm:
    id: str
    name: str
    target_hours: int
    target_minutes: int
    enabled: bool = True
    has_triggered: bool = False
    last_triggered_date: Optional[str] = None  # YYYY-MM-DD
    kind: AlarmKind = AlarmKind.MANUAL

    @property
    def target_label(self) -> str:
        return f"{self.target_hours}h {self.target_minutes}m"

    def cleared(self) -> "Alarm":
        return replace(self, has_triggered=False, last_triggered_date=None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "hours": self.target_hours,
            "minutes": self.target_minutes,
            "enabled": self.enabled,
            "hasTriggered": self.has_triggered,
            "lastTriggeredDate": self.last_triggered_date,
            "type": self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Alarm":
        alarm_id = data.get("id")
        if not alarm_id:
            raise ValueError("Alarm payload missing id")
        try:
            hours = _coerce_int(data.get("hours"), "hours", 0, 23)
            minutes = _coerce_int(data.get("minutes"), "minutes", 0, 59)
            kind = AlarmKind(data.get("type") or AlarmKind.MANUAL.value)
        except ValidationError as exc:
            raise ValueError(f"Alarm {alarm_id}: {exc}") from exc
        last_date = data.get("lastTriggeredDate") or None
        has_triggered = bool(data.get("hasTriggered")) and last_date is not None
        return cls(
            id=str(alarm_id),
            name=str(data.get("name") or "Alarm"),
            target_hours=hours,
            target_minutes=minutes,
            enabled=bool(data.get("enabled", True)),
            has_triggered=has_triggered,
            last_triggered_date=last_date if has_triggered else None,
            kind=kind,
        )


def new_alarm_id() -> str:
    return f"al_{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class AlarmStore:
    """Immutable alarm collection. Every operation returns a new store."""

    alarms: Tuple[Alarm, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, alarms: Iterable[Alarm]) -> "AlarmStore":
        return cls(tuple(alarms))

    def __iter__(self) -> Iterator[Alarm]:
        return iter(self.alarms)

    def __len__(self) -> int:
        return len(self.alarms)

    @property
    def interval_alarms(self) -> List[Alarm]:
        return [a for a in self.alarms if a.kind is AlarmKind.INTERVAL]

    @property
    def manual_alarms(self) -> List[Alarm]:
        return [a for a in self.alarms if a.kind is AlarmKind.MANUAL]

    def get(self, alarm_id: str) -> Alarm:
        for alarm in self.alarms:
            if alarm.id == alarm_id:
                return alarm
        raise NotFoundError(alarm_id)

    def add(self, name: str, target_hours, target_minutes) -> Tuple["AlarmStore", Alarm]:
        label = (name or "").strip()
        if not label:
            raise ValidationError("Alarm name must not be empty")
        hours = _coerce_int(target_hours, "hours", 0, 23)
        minutes = _coerce_int(target_minutes, "minutes", 0, 59)
        alarm = Alarm(id=self._fresh_id(), name=label, target_hours=hours, target_minutes=minutes)
        return AlarmStore(self.alarms + (alarm,)), alarm

    def generate_interval(self, step_hours, step_minutes, count) -> Tuple["AlarmStore", List[Alarm]]:
        """Replace all interval alarms with ``count`` alarms spaced one step apart.

        Nothing is created unless every target fits within a single day; the
        error names the first commit that would not.
        """
        hours = _coerce_int(step_hours, "interval hours", 0, 23)
        minutes = _coerce_int(step_minutes, "interval minutes", 0, 59)
        total = _coerce_int(count, "commit count", 1, MAX_INTERVAL_COUNT)
        step = hours * 60 + minutes
        if step == 0:
            raise ValidationError("Interval must be longer than 0h 0m")

        targets = []
        for index in range(1, total + 1):
            target_hours, target_minutes = divmod(step * index, 60)
            if target_hours > 23:
                raise ValidationError(
                    f"Commit {index} would be at {target_hours}h {target_minutes}m, past 23 hours"
                )
            targets.append((index, target_hours, target_minutes))

        kept = [a for a in self.alarms if a.kind is not AlarmKind.INTERVAL]
        taken = {a.id for a in kept}
        generated: List[Alarm] = []
        for index, target_hours, target_minutes in targets:
            alarm_id = new_alarm_id()
            while alarm_id in taken:
                alarm_id = new_alarm_id()
            taken.add(alarm_id)
            generated.append(
                Alarm(
                    id=alarm_id,
                    name=INTERVAL_NAME.format(index=index),
                    target_hours=target_hours,
                    target_minutes=target_minutes,
                    kind=AlarmKind.INTERVAL,
                )
            )
        return AlarmStore(tuple(kept) + tuple(generated)), generated

    def clear_interval(self) -> "AlarmStore":
        return AlarmStore(tuple(a for a in self.alarms if a.kind is not AlarmKind.INTERVAL))

    def toggle(self, alarm_id: str) -> "AlarmStore":
        current = self.get(alarm_id)
        return self._replace(replace(current, enabled=not current.enabled))

    def remove(self, alarm_id: str) -> "AlarmStore":
        self.get(alarm_id)
        return AlarmStore(tuple(a for a in self.alarms if a.id != alarm_id))

    def reset_trigger(self, alarm_id: str) -> "AlarmStore":
        return self._replace(self.get(alarm_id).cleared())

    def _replace(self, updated: Alarm) -> "AlarmStore":
        return AlarmStore(tuple(updated if a.id == updated.id else a for a in self.alarms))

    def _fresh_id(self) -> str:
        taken = {a.id for a in self.alarms}
        alarm_id = new_alarm_id()
        while alarm_id in taken:
            alarm_id = new_alarm_id()
        return alarm_id


def _coerce_int(value, field_name: str, low: int, high: int) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    if isinstance(value, str):
        value = value.strip()
        try:
            value = int(value)
        except ValueError:
            raise ValidationError(f"{field_name} must be a whole number") from None
    if not isinstance(value, int):
        raise ValidationError(f"{field_name} must be a whole number")
    if not low <= value <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value
