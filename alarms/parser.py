from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

SIMPLE_ACTIONS = {
    "list": "list",
    "ls": "list",
    "alarms": "list",
    "stats": "stats",
    "status": "stats",
    "check": "check",
    "refresh": "check",
    "stop": "stop",
    "help": "help",
    "?": "help",
    "quit": "quit",
    "exit": "quit",
}

TARGET_ACTIONS = {
    "toggle": "toggle",
    "remove": "remove",
    "delete": "remove",
    "rm": "remove",
    "reset": "reset",
}

# "8h 30m", "8h", "45m", "8:30"
DURATION = r"(?:(?P<h>\d+)\s*h(?:ours?)?(?:\s*(?P<m>\d+)\s*m(?:in(?:utes?)?)?)?|(?P<m_only>\d+)\s*m(?:in(?:utes?)?)?|(?P<hh>\d+):(?P<mm>\d{1,2}))"

ADD_RE = re.compile(rf"^add\s+(?P<name>.+?)\s+(?:at\s+)?{DURATION}$", re.IGNORECASE)
INTERVAL_RE = re.compile(rf"^interval\s+(?:every\s+)?{DURATION}\s*(?:x|\*|times)?\s*(?P<count>\d+)(?:\s*times)?$")
CLEAR_RE = re.compile(r"^clear(?:\s+intervals?)?$")
TARGET_RE = re.compile(r"^(?P<verb>\w+)\s+(?:alarm\s+)?#?(?P<target>[\w-]+)$")
KEY_RE = re.compile(r"^(?:key|api[-_ ]?key)\s+(?P<key>\S+)$", re.IGNORECASE)


@dataclass
class Command:
    action: str
    name: Optional[str] = None
    hours: Optional[int] = None
    minutes: Optional[int] = None
    count: Optional[int] = None
    target: Optional[str] = None
    api_key: Optional[str] = None
    error: Optional[str] = None
    raw_text: str = ""


def parse_command(text: str) -> Optional[Command]:
    """Parse one console line into a Command, or None for blank input."""

    cleaned = " ".join(text.strip().split())
    if not cleaned:
        return None
    lower = cleaned.lower()
    verb = lower.split(" ", 1)[0]

    if lower in SIMPLE_ACTIONS:
        return Command(action=SIMPLE_ACTIONS[lower], raw_text=cleaned)

    # The key is case-sensitive, match it on the original text.
    key_match = KEY_RE.match(cleaned) if verb in ("key", "api-key", "api_key", "api") else None
    if key_match:
        return Command(action="key", api_key=key_match.group("key"), raw_text=cleaned)

    if CLEAR_RE.match(lower):
        return Command(action="clear_interval", raw_text=cleaned)

    if verb == "add":
        match = ADD_RE.match(cleaned)
        if not match:
            return _unknown(cleaned, "Usage: add <name> <hours>h <minutes>m")
        hours, minutes = _duration(match)
        return Command(
            action="add",
            name=match.group("name").strip(),
            hours=hours,
            minutes=minutes,
            raw_text=cleaned,
        )

    if verb == "interval":
        match = INTERVAL_RE.match(lower)
        if not match:
            return _unknown(cleaned, "Usage: interval <hours>h <minutes>m x<count>")
        hours, minutes = _duration(match)
        return Command(
            action="interval",
            hours=hours,
            minutes=minutes,
            count=int(match.group("count")),
            raw_text=cleaned,
        )

    if verb in TARGET_ACTIONS:
        match = TARGET_RE.match(lower)
        if not match:
            return _unknown(cleaned, f"Usage: {verb} <number or id>")
        return Command(action=TARGET_ACTIONS[verb], target=match.group("target"), raw_text=cleaned)

    if verb in ("key", "api-key", "api_key"):
        return _unknown(cleaned, "Usage: key <hackatime api key>")

    return _unknown(cleaned, "Unknown command, type 'help' for the list.")


def _unknown(cleaned: str, error: str) -> Command:
    return Command(action="unknown", error=error, raw_text=cleaned)


def _duration(match: re.Match) -> tuple[int, int]:
    if match.group("hh") is not None:
        return int(match.group("hh")), int(match.group("mm"))
    if match.group("m_only") is not None:
        return 0, int(match.group("m_only"))
    return int(match.group("h")), int(match.group("m") or 0)
