from __future__ import annotations
from datetime import datetime
from typing import List, Mapping, Optional

from app.models.schemas import BODIES, GeoPoint
from app.services.zodiac import body_name, zodiac_name

LBL_DATE = "பிறந்த தேதி"
LBL_TIME = "பிறந்த நேரம்"
LBL_PLACE = "பிறந்த இடம்"
LBL_LAGNA = "லக்னம்"
LBL_HEADER = "கிரக நிலைகள்:"
UNKNOWN_TZ = "நேர மண்டலம் தெரியவில்லை"
UNKNOWN_PLACE = "தெரியாத இடம்"
NO_DATA = "தரவு கிடைக்கவில்லை"

def _time_note(time_zone_id: Optional[str], fallback_zone: Optional[str]) -> str:
    if time_zone_id:
        return time_zone_id
    if fallback_zone:
        return f"{UNKNOWN_TZ}; {fallback_zone} எனக் கொள்ளப்பட்டது"
    return UNKNOWN_TZ

def _ordered_bodies(body_indices: Mapping[str, int]) -> List[str]:
    known = [b for b in BODIES if b in body_indices]
    extra = sorted(b for b in body_indices if b not in BODIES)
    return known + extra

def render_report(
    instant: datetime,
    geo_point: GeoPoint,
    time_zone_id: Optional[str],
    ascendant_index: int,
    body_indices: Optional[Mapping[str, int]],
    *,
    fallback_zone: Optional[str] = None,
) -> str:
    """Erzeugt den Tamil-Bericht. Rein und deterministisch.

    ``time_zone_id=None`` heißt: Zone nicht ermittelt, die Zeile wird
    ausdrücklich markiert. ``body_indices=None`` heißt: Engine lieferte keine
    Positionen.
    """
    place = (geo_point.formatted_address or "").strip() or UNKNOWN_PLACE
    lines = [
        f"{LBL_DATE}: {instant:%Y-%m-%d}",
        f"{LBL_TIME}: {instant:%H:%M} ({_time_note(time_zone_id, fallback_zone)})",
        f"{LBL_PLACE}: {place}",
        "",
        f"{LBL_LAGNA}: {zodiac_name(ascendant_index)}",
        LBL_HEADER,
    ]

    if body_indices is None:
        lines.append(NO_DATA)
    else:
        for body in _ordered_bodies(body_indices):
            lines.append(f"{body_name(body)}: {zodiac_name(body_indices[body])}")

    return "\n".join(lines)
