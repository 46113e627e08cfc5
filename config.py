import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from hackatime_client import DEFAULT_API_URL


def _get_env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val.strip() in {"1", "true", "True", "yes", "YES", "y"}


def _get_env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return float(val)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a float") from exc


@dataclass
class Config:
    hackatime_api_key: str
    hackatime_api_url: str
    request_timeout_s: float
    poll_interval_s: float
    alarms_path: Path
    alarm_sound_path: Path
    timezone: Optional[str]
    enable_sound: bool
    enable_desktop_notifications: bool
    enable_speech: bool
    debug: bool
    log_level: str
    log_dir: Path


def load_config(env_path: Optional[Path] = None) -> Config:
    if env_path is None:
        env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    poll_interval_s = _get_env_float("POLL_INTERVAL_SECONDS", 60.0)
    if poll_interval_s <= 0:
        raise ValueError("Environment variable POLL_INTERVAL_SECONDS must be positive")

    debug = _get_env_bool("DEBUG", False)
    log_level = (os.getenv("LOG_LEVEL") or ("DEBUG" if debug else "INFO")).upper()

    return Config(
        hackatime_api_key=os.getenv("HACKATIME_API_KEY", "").strip(),
        hackatime_api_url=os.getenv("HACKATIME_API_URL") or DEFAULT_API_URL,
        request_timeout_s=_get_env_float("REQUEST_TIMEOUT_SECONDS", 10.0),
        poll_interval_s=poll_interval_s,
        alarms_path=Path(os.getenv("ALARM_STORAGE_PATH", "data/alarms.json")),
        alarm_sound_path=Path(os.getenv("ALARM_SOUND_PATH", "data/alarm.wav")),
        timezone=os.getenv("TIMEZONE") or None,
        enable_sound=_get_env_bool("ENABLE_SOUND", True),
        enable_desktop_notifications=_get_env_bool("ENABLE_DESKTOP_NOTIFICATIONS", True),
        enable_speech=_get_env_bool("ENABLE_SPEECH", False),
        debug=debug,
        log_level=log_level,
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
    )


def setup_logging(log_level: str = "INFO", logs_dir: Path = Path("logs")) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)

    log_path = logs_dir / "monitor.log"
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[file_handler, console_handler],
    )
