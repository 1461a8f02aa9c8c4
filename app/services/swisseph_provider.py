# app/services/swisseph_provider.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict
import logging

from app.models.schemas import GeoPoint
from app.services.provider import ChartEngine
from app.config import settings

import swisseph as swe

log = logging.getLogger("uvicorn")

# Mapping unserer Körper auf Swiss Ephemeris Konstanten (Ketu = Rahu + 180°)
_BODY_MAP: dict[str, int] = {
    "sun": swe.SUN,
    "moon": swe.MOON,
    "mercury": swe.MERCURY,
    "venus": swe.VENUS,
    "mars": swe.MARS,
    "jupiter": swe.JUPITER,
    "saturn": swe.SATURN,
}

_SID_MODES: dict[str, int] = {
    "lahiri": swe.SIDM_LAHIRI,
    "raman": swe.SIDM_RAMAN,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
}

def _ensure_ephe_path() -> None:
    """Setzt den Ephemeriden-Pfad, wenn konfiguriert."""
    if settings.se_ephe_path:
        swe.set_ephe_path(settings.se_ephe_path)
        log.info(f"Swiss Ephemeris path set to: {settings.se_ephe_path}")

def _to_julday(dt: datetime) -> float:
    """Swiss Ephemeris erwartet UT."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    ut = dt.astimezone(timezone.utc)
    hour_frac = (
        ut.hour
        + ut.minute / 60.0
        + ut.second / 3600.0
        + ut.microsecond / 3_600_000_000.0
    )
    return swe.julday(ut.year, ut.month, ut.day, hour_frac)

class SwissEphemeris(ChartEngine):
    """Engine via pyswisseph (direkte Modulfunktionen), siderisch per Default."""

    name = "swisseph"

    def __init__(self, ayanamsa: str | None = None, node_type: str | None = None) -> None:
        _ensure_ephe_path()
        ayanamsa = ayanamsa or settings.ayanamsa
        self._node = swe.TRUE_NODE if (node_type or settings.node_type) == "true" else swe.MEAN_NODE
        self._flags = swe.FLG_SWIEPH
        if ayanamsa != "tropical":
            swe.set_sid_mode(_SID_MODES[ayanamsa])
            self._flags |= swe.FLG_SIDEREAL
        log.info(f"Swiss Ephemeris engine ready (ayanamsa={ayanamsa})")

    def ascendant(self, when: datetime, loc: GeoPoint) -> float:
        jd_ut = _to_julday(when)
        # Häusersystem egal, ASC ist ascmc[0]
        _cusps, ascmc = swe.houses_ex(jd_ut, float(loc.lat), float(loc.lon), b"W", self._flags)
        return float(ascmc[0])

    def body_longitudes(self, when: datetime, loc: GeoPoint) -> Dict[str, float]:
        jd_ut = _to_julday(when)
        result: Dict[str, float] = {}

        for body, code in _BODY_MAP.items():
            xx, _retflag = swe.calc_ut(jd_ut, code, self._flags)
            result[body] = float(xx[0])

        xx, _retflag = swe.calc_ut(jd_ut, self._node, self._flags)
        result["rahu"] = float(xx[0])
        result["ketu"] = float(xx[0]) + 180.0  # Normalisierung übernimmt der Adapter

        return result
