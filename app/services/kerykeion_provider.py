# app/services/kerykeion_provider.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import threading

from app.models.schemas import GeoPoint
from app.services.provider import ChartEngine
from app.config import settings

# Kerykeion: spezialisiertes Astrology-Toolkit (Positionen als verschachtelte Objekte)
from kerykeion import AstrologicalSubject  # type: ignore

log = logging.getLogger("uvicorn")

_PLANET_ATTRS = ("sun", "moon", "mercury", "venus", "mars", "jupiter", "saturn")
# Attributnamen unterscheiden sich je nach Kerykeion-Version
_NODE_ATTRS = {
    "mean": ("mean_node", "mean_north_lunar_node"),
    "true": ("true_node", "true_north_lunar_node"),
}

def _abs_pos(point: Any) -> Optional[float]:
    if point is None:
        return None
    pos = getattr(point, "abs_pos", None)
    return None if pos is None else float(pos)

class KerykeionEngine(ChartEngine):
    """Engine via Kerykeion AstrologicalSubject."""

    name = "kerykeion"

    def __init__(self, ayanamsa: str | None = None, node_type: str | None = None) -> None:
        ayanamsa = ayanamsa or settings.ayanamsa
        self._zodiac_kwargs: Dict[str, Any] = (
            {} if ayanamsa == "tropical"
            else {"zodiac_type": "Sidereal", "sidereal_mode": ayanamsa.upper()}
        )
        self._node_attrs = _NODE_ATTRS[node_type or settings.node_type]
        self._local = threading.local()
        log.info(f"Kerykeion engine ready (ayanamsa={ayanamsa})")

    def _subject(self, when: datetime, loc: GeoPoint) -> AstrologicalSubject:
        # Kerykeion rechnet minutengenau aus Wandzeit + tz_str; wir übergeben UT
        ut = when.astimezone(timezone.utc)
        key = (ut.year, ut.month, ut.day, ut.hour, ut.minute, float(loc.lat), float(loc.lon))
        # ascendant() und body_longitudes() laufen direkt nacheinander im selben Worker-Thread
        last = getattr(self._local, "last", None)
        if last is not None and last[0] == key:
            return last[1]
        subject = AstrologicalSubject(
            "Jathagam",
            ut.year, ut.month, ut.day, ut.hour, ut.minute,
            lng=float(loc.lon),
            lat=float(loc.lat),
            tz_str="UTC",
            online=False,
            **self._zodiac_kwargs,
        )
        self._local.last = (key, subject)
        return subject

    def ascendant(self, when: datetime, loc: GeoPoint) -> Optional[float]:
        subject = self._subject(when, loc)
        return _abs_pos(getattr(subject, "first_house", None))

    def body_longitudes(self, when: datetime, loc: GeoPoint) -> Dict[str, Optional[float]]:
        subject = self._subject(when, loc)
        result: Dict[str, Optional[float]] = {
            attr: _abs_pos(getattr(subject, attr, None)) for attr in _PLANET_ATTRS
        }

        node = None
        for attr in self._node_attrs:
            node = _abs_pos(getattr(subject, attr, None))
            if node is not None:
                break
        result["rahu"] = node
        result["ketu"] = None if node is None else node + 180.0
        return result
