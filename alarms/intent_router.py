from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import AlarmError, NotFoundError
from .monitor import AlarmMonitor
from .parser import parse_command
from .store import Alarm, AlarmKind

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  add <name> <H>h <M>m     add an alarm (also: add <name> H:MM)
  interval <H>h <M>m x<N>  replace interval alarms with N commits
  clear interval           remove all interval alarms
  toggle <n>               enable/disable alarm n from 'list'
  remove <n>               delete alarm n
  reset <n>                clear today's trigger state of alarm n
  list                     show alarms
  stats                    show the latest coding time
  check                    fetch coding time now
  key <api key>            set the Hackatime API key
  stop                     silence a ringing alarm
  quit                     exit"""


@dataclass
class CommandResult:
    handled: bool
    response_text: Optional[str] = None
    action: Optional[str] = None
    quit: bool = False


class CommandRouter:
    def __init__(self, monitor: AlarmMonitor):
        self.monitor = monitor

    def handle_text(self, text: str) -> Optional[CommandResult]:
        parsed = parse_command(text)
        if not parsed:
            return None
        logger.debug("Command parsed: %s", parsed)

        if parsed.action == "unknown":
            return CommandResult(handled=False, response_text=parsed.error, action=parsed.action)

        try:
            return self._dispatch(parsed)
        except AlarmError as exc:
            return CommandResult(handled=True, response_text=str(exc), action=parsed.action)

    def _dispatch(self, parsed) -> CommandResult:
        action = parsed.action

        if action == "help":
            return CommandResult(handled=True, response_text=HELP_TEXT, action=action)

        if action == "quit":
            return CommandResult(handled=True, response_text="Bye.", action=action, quit=True)

        if action == "list":
            return CommandResult(handled=True, response_text=format_alarm_list(self.monitor.list_alarms()), action=action)

        if action == "stats":
            return CommandResult(handled=True, response_text=self._stats_text(), action=action)

        if action == "check":
            fired = self.monitor.check_now()
            if self.monitor.last_error:
                resp = f"Failed to fetch coding stats: {self.monitor.last_error}"
            elif not self.monitor.api_key:
                resp = "Set your Hackatime API key first: key <api key>"
            else:
                resp = self._stats_text()
                if fired:
                    resp += "\nFired: " + ", ".join(f.alarm.name for f in fired)
            return CommandResult(handled=True, response_text=resp, action=action)

        if action == "key":
            self.monitor.set_api_key(parsed.api_key)
            return CommandResult(handled=True, response_text="API key saved.", action=action)

        if action == "stop":
            resp = "Alarm silenced." if self.monitor.stop_ringing() else "Nothing is ringing."
            return CommandResult(handled=True, response_text=resp, action=action)

        if action == "add":
            alarm = self.monitor.add_alarm(parsed.name, parsed.hours, parsed.minutes)
            return CommandResult(
                handled=True,
                response_text=f"Alarm '{alarm.name}' set for {alarm.target_label}.",
                action=action,
            )

        if action == "interval":
            generated = self.monitor.generate_interval(parsed.hours, parsed.minutes, parsed.count)
            targets = ", ".join(a.target_label for a in generated)
            return CommandResult(
                handled=True,
                response_text=f"Created {len(generated)} interval alarms: {targets}.",
                action=action,
            )

        if action == "clear_interval":
            removed = self.monitor.clear_interval()
            return CommandResult(handled=True, response_text=f"Removed {removed} interval alarms.", action=action)

        if action in ("toggle", "remove", "reset"):
            alarm_id = self._resolve(parsed.target)
            if action == "toggle":
                alarm = self.monitor.toggle(alarm_id)
                state = "enabled" if alarm.enabled else "disabled"
                resp = f"Alarm '{alarm.name}' {state}."
            elif action == "remove":
                alarm = self.monitor.remove(alarm_id)
                resp = f"Removed alarm '{alarm.name}'."
            else:
                alarm = self.monitor.reset_trigger(alarm_id)
                resp = f"Alarm '{alarm.name}' reset."
            return CommandResult(handled=True, response_text=resp, action=action)

        return CommandResult(handled=False, response_text=None, action=action)

    def _resolve(self, target: str) -> str:
        alarms = self.monitor.list_alarms()
        if target.isdigit():
            index = int(target)
            if 1 <= index <= len(alarms):
                return alarms[index - 1].id
            raise NotFoundError(target, f"No alarm number {index}")
        for alarm in alarms:
            if alarm.id == target:
                return alarm.id
        raise NotFoundError(target)

    def _stats_text(self) -> str:
        reading = self.monitor.latest_reading
        if reading is None:
            return "0h 0m\nNo data available"
        return f"{reading.hours}h {reading.minutes}m\n{reading.label or 'No data available'}"


def format_alarm_list(alarms: List[Alarm]) -> str:
    if not alarms:
        return "No alarms configured"
    lines = [f"Alarms ({len(alarms)})"]
    for idx, alarm in enumerate(alarms, start=1):
        if not alarm.enabled:
            status = "Disabled"
        elif alarm.has_triggered:
            status = "Triggered"
        else:
            status = "Pending"
        tag = " [interval]" if alarm.kind is AlarmKind.INTERVAL else ""
        lines.append(f"{idx}) {alarm.name}{tag}: {alarm.target_label} - {status}")
    return "\n".join(lines)
