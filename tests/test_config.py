import os
from pathlib import Path

import pytest

from config import load_config
from hackatime_client import DEFAULT_API_URL

ENV_VARS = (
    "HACKATIME_API_KEY",
    "HACKATIME_API_URL",
    "POLL_INTERVAL_SECONDS",
    "ALARM_STORAGE_PATH",
    "ENABLE_SOUND",
    "DEBUG",
    "LOG_LEVEL",
    "TIMEZONE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults(tmp_path):
    config = load_config(tmp_path / ".env")
    assert config.hackatime_api_key == ""
    assert config.hackatime_api_url == DEFAULT_API_URL
    assert config.poll_interval_s == 60.0
    assert config.alarms_path == Path("data/alarms.json")
    assert config.enable_sound
    assert config.log_level == "INFO"
    assert config.timezone is None


def test_env_file_is_loaded(tmp_path):
    env = tmp_path / ".env"
    env.write_text(
        "HACKATIME_API_KEY=abc\nPOLL_INTERVAL_SECONDS=15\nENABLE_SOUND=no\nDEBUG=1\n",
        encoding="utf-8",
    )
    config = load_config(env)
    assert config.hackatime_api_key == "abc"
    assert config.poll_interval_s == 15.0
    assert not config.enable_sound
    assert config.log_level == "DEBUG"


def test_bad_number_names_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "soon")
    with pytest.raises(ValueError, match="POLL_INTERVAL_SECONDS"):
        load_config(tmp_path / ".env")
