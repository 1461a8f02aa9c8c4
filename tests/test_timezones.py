from datetime import datetime, timedelta

import pytest

from app.services.errors import ValidationError
from app.services.timezones import TimeZoneResolver, normalize_instant, parse_local

from conftest import StubFinder

def test_resolver_returns_zone():
    assert TimeZoneResolver(StubFinder("Asia/Kolkata")).resolve(13.08, 80.27) == "Asia/Kolkata"

@pytest.mark.parametrize("finder", [None, StubFinder(tz=None), StubFinder(error=RuntimeError("boom"))])
def test_resolver_is_best_effort(finder):
    assert TimeZoneResolver(finder).resolve(0.0, 0.0) is None

def test_resolver_with_real_finder():
    assert TimeZoneResolver.from_settings().resolve(13.0827, 80.2707) == "Asia/Kolkata"

def test_dst_is_respected():
    summer = normalize_instant("2021-07-01", "12:00", "Europe/Berlin", fallback_zone="Asia/Kolkata")
    winter = normalize_instant("2021-01-01", "12:00", "Europe/Berlin", fallback_zone="Asia/Kolkata")
    assert summer.instant.utcoffset() == timedelta(hours=2)
    assert winter.instant.utcoffset() == timedelta(hours=1)
    assert summer.time_zone_id == "Europe/Berlin"
    assert not summer.fallback_used

def test_nonexistent_local_time_stays_in_zone():
    resolved = normalize_instant("2021-03-28", "02:30", "Europe/Berlin", fallback_zone="Asia/Kolkata")
    assert not resolved.fallback_used
    assert resolved.instant.tzinfo.zone == "Europe/Berlin"

@pytest.mark.parametrize("zone", [None, "Mars/Olympus_Mons"])
def test_fallback_is_flagged(zone):
    resolved = normalize_instant("1990-08-15", "10:30", zone, fallback_zone="Asia/Kolkata")
    assert resolved.fallback_used
    assert resolved.time_zone_id is None
    assert resolved.fallback_zone == "Asia/Kolkata"
    assert resolved.instant.utcoffset() == timedelta(hours=5, minutes=30)

@pytest.mark.parametrize(
    "date_str, time_str, expected",
    [
        ("1990-08-15", "10:30", datetime(1990, 8, 15, 10, 30)),
        ("15/08/1990", "10:30 pm", datetime(1990, 8, 15, 22, 30)),
        ("15.08.1990", "10:30:15", datetime(1990, 8, 15, 10, 30, 15)),
        ("15-08-1990", "07:05AM", datetime(1990, 8, 15, 7, 5)),
    ],
)
def test_parse_formats(date_str, time_str, expected):
    assert parse_local(date_str, time_str) == expected

@pytest.mark.parametrize("date_str, time_str", [("1990-13-45", "10:30"), ("yesterday", "10:30"), ("1990-08-15", "25:00")])
def test_unparseable_input(date_str, time_str):
    with pytest.raises(ValidationError) as exc_info:
        normalize_instant(date_str, time_str, "Asia/Kolkata", fallback_zone="Asia/Kolkata")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid birth date or time"

def test_ambiguous_local_time_uses_standard_time():
    resolved = normalize_instant("2021-10-31", "02:30", "Europe/Berlin", fallback_zone="Asia/Kolkata")
    assert resolved.instant.utcoffset() == timedelta(hours=1)
    assert resolved.time_zone_id == "Europe/Berlin"
    assert not resolved.fallback_used
