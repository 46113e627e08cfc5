from datetime import date

from time_utils import FixedClock, SystemClock, now_in_tz, resolve_timezone


def test_resolve_named_timezone():
    tz = resolve_timezone("UTC")
    assert now_in_tz(tz).utcoffset().total_seconds() == 0


def test_unknown_timezone_falls_back_to_local():
    assert resolve_timezone("Not/AZone") is not None


def test_system_clock_returns_iso_day():
    today = SystemClock(resolve_timezone("UTC")).today()
    assert date.fromisoformat(today)


def test_fixed_clock_accepts_date():
    assert FixedClock(date(2024, 1, 2)).today() == "2024-01-02"
    assert FixedClock("2024-01-03").today() == "2024-01-03"
