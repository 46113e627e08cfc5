"""Coding-time alarms for the Hackatime monitor."""

from .errors import AlarmError, NotFoundError, ValidationError
from .evaluator import ElapsedTimeReading, FiredAlarm, evaluate, evaluate_reading
from .store import Alarm, AlarmKind, AlarmStore
