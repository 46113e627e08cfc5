from __future__ import annotations

from typing import Optional


class AlarmError(Exception):
    """Base class for alarm collection errors."""


class ValidationError(AlarmError, ValueError):
    pass


class NotFoundError(AlarmError, KeyError):
    def __init__(self, alarm_id: str, message: Optional[str] = None):
        self.alarm_id = alarm_id
        super().__init__(message or f"No alarm with id {alarm_id}")

    def __str__(self) -> str:
        return str(self.args[0])
