from __future__ import annotations
from datetime import date, datetime, time
from typing import Optional
import logging

import pytz
from timezonefinder import TimezoneFinder

from app.models.schemas import ResolvedInstant
from app.services.errors import ValidationError

log = logging.getLogger("uvicorn")

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y")
TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M:%S %p", "%I:%M%p")

class TimeZoneResolver:
    """Koordinaten -> IANA-Zone. Best effort: liefert None statt zu werfen."""

    def __init__(self, finder: Optional[TimezoneFinder] = None) -> None:
        self._finder = finder

    @classmethod
    def from_settings(cls) -> "TimeZoneResolver":
        try:
            finder = TimezoneFinder()
        except Exception as e:
            log.warning(f"TimezoneFinder not available, timezone lookup disabled: {e}")
            finder = None
        return cls(finder)

    @property
    def available(self) -> bool:
        return self._finder is not None

    def resolve(self, lat: float, lon: float) -> Optional[str]:
        if self._finder is None:
            return None
        try:
            tz = self._finder.timezone_at(lng=float(lon), lat=float(lat))
        except Exception as e:
            log.warning(f"Timezone lookup failed for ({lat}, {lon}): {e}")
            return None
        return tz or None

def resolve_time_zone(lat: float, lon: float, resolver: Optional[TimeZoneResolver] = None) -> Optional[str]:
    return (resolver or TimeZoneResolver.from_settings()).resolve(lat, lon)

def _parse(value: str, formats: tuple[str, ...]) -> Optional[datetime]:
    for fmt in formats:
        try:
            return datetime.strptime(value.strip().upper(), fmt)
        except ValueError:
            continue
    return None

def parse_local(date_str: str, time_str: str) -> datetime:
    """Datum + Uhrzeit -> naive lokale Zeit. Wirft ValidationError."""
    d = _parse(date_str, DATE_FORMATS)
    t = _parse(time_str, TIME_FORMATS)
    if d is None or t is None:
        raise ValidationError(
            f"unparseable date/time {date_str!r} {time_str!r}",
            message="Invalid birth date or time",
        )
    return datetime.combine(date(d.year, d.month, d.day), time(t.hour, t.minute, t.second))

def _localize(naive: datetime, zone: str) -> datetime:
    tz = pytz.timezone(zone)
    try:
        return tz.localize(naive, is_dst=None)
    except (pytz.exceptions.AmbiguousTimeError, pytz.exceptions.NonExistentTimeError) as e:
        # Umstellungsstunde: Normalzeit annehmen, Zone bleibt gültig
        log.info(f"{type(e).__name__} for {naive.isoformat()} in {zone}, assuming standard time")
        return tz.localize(naive, is_dst=False)

def normalize_instant(
    date_str: str,
    time_str: str,
    time_zone_id: Optional[str],
    *,
    fallback_zone: str,
) -> ResolvedInstant:
    """Lokales Datum + Uhrzeit + (optionale) Zone -> eindeutiger Zeitpunkt.

    Ohne gültige Zone wird deterministisch in ``fallback_zone`` gerechnet und
    ``fallback_used`` gesetzt, damit der Bericht das kennzeichnen kann.
    """
    naive = parse_local(date_str, time_str)

    if time_zone_id:
        try:
            aware = _localize(naive, time_zone_id)
            return ResolvedInstant(instant=aware, time_zone_id=time_zone_id)
        except pytz.exceptions.UnknownTimeZoneError:
            log.warning(f"Unknown timezone {time_zone_id!r}, falling back to {fallback_zone}")

    aware = _localize(naive, fallback_zone)
    return ResolvedInstant(
        instant=aware,
        time_zone_id=None,
        fallback_used=True,
        fallback_zone=fallback_zone,
    )
