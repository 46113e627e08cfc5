from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Tuple

from .store import Alarm, AlarmStore

logger = logging.getLogger(__name__)


class AlarmStorage:
    """JSON file holding the API key and the alarm collection.

    Best effort: read problems yield an empty state, write problems are
    logged and retried by the next save.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Tuple[str, AlarmStore]:
        if not self.path.exists():
            return "", AlarmStore()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Failed to load alarms from %s: %s", self.path, exc)
            return "", AlarmStore()

        if isinstance(payload, list):
            api_key, items = "", payload
        elif isinstance(payload, dict):
            api_key = str(payload.get("api_key") or "")
            items = payload.get("alarms") or []
        else:
            logger.error("Unexpected alarm file layout in %s", self.path)
            return "", AlarmStore()

        alarms: List[Alarm] = []
        seen = set()
        for item in items:
            try:
                alarm = Alarm.from_dict(item)
            except (AttributeError, TypeError, ValueError) as exc:
                logger.warning("Skipping alarm item due to parse error: %s", exc)
                continue
            if alarm.id in seen:
                logger.warning("Skipping duplicate alarm id %s", alarm.id)
                continue
            seen.add(alarm.id)
            alarms.append(alarm)
        return api_key, AlarmStore.of(alarms)

    def save(self, api_key: str, store: AlarmStore) -> bool:
        payload = {
            "api_key": api_key or "",
            "alarms": [a.to_dict() for a in store],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except OSError as exc:
            logger.error("Failed to save alarms to %s: %s", self.path, exc)
            return False
        return True
