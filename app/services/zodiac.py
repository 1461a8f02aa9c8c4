from __future__ import annotations
import math
from types import MappingProxyType
from typing import Mapping

# Rasi-Namen (Tamil), Index 0 = Mesha/Widder
RASI_NAMES: tuple[str, ...] = (
    "மேஷம்", "ரிஷபம்", "மிதுனம்", "கடகம்",
    "சிம்மம்", "கன்னி", "துலாம்", "விருச்சிகம்",
    "தனுசு", "மகரம்", "கும்பம்", "மீனம்",
)

BODY_NAMES: Mapping[str, str] = MappingProxyType({
    "sun": "சூரியன்",
    "moon": "சந்திரன்",
    "mercury": "புதன்",
    "venus": "சுக்கிரன்",
    "mars": "செவ்வாய்",
    "jupiter": "குரு",
    "saturn": "சனி",
    "rahu": "ராகு",
    "ketu": "கேது",
})

def normalize_longitude(x: float) -> float:
    """Echter Modulo nach [0, 360), auch für negative Werte.

    ``-1e-15 % 360.0`` rundet auf genau 360.0, das wird zu 0.0.
    """
    lon = float(x) % 360.0
    return 0.0 if lon >= 360.0 else lon

def map_longitude_to_zodiac(longitude: float) -> int:
    """Ekliptische Länge -> Zeichen-Index 0..11.

    Erst normalisieren, dann teilen: 30.0 gehört zu Index 1, -0.001 zu 11.
    """
    reduced = normalize_longitude(longitude)
    return int(math.floor(reduced / 30.0)) % 12

def zodiac_name(index: int) -> str:
    return RASI_NAMES[index % 12]

def body_name(body: str) -> str:
    """Tamil-Name eines Körpers; unbekannte IDs bleiben roh."""
    return BODY_NAMES.get(body, body)
