# app/models/schemas.py
from __future__ import annotations
from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Kanonische Reihenfolge der Körper (Ausgabe)
BODIES: tuple[str, ...] = (
    "sun","moon","mercury","venus","mars","jupiter","saturn","rahu","ketu"
)

class BirthRequest(BaseModel):
    """Eingabe von POST /horoscope. Leere Felder werden erst im Orchestrator abgewiesen."""
    birthDate: Optional[str] = None
    birthTime: Optional[str] = None
    birthPlace: Optional[str] = None

    @field_validator("birthDate", "birthTime", "birthPlace", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def missing_fields(self) -> list[str]:
        return [
            name for name in ("birthDate", "birthTime", "birthPlace")
            if getattr(self, name) is None
        ]

class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    formatted_address: str = ""

class ResolvedInstant(BaseModel):
    model_config = ConfigDict(frozen=True)

    instant: datetime                 # immer tz-aware
    time_zone_id: Optional[str] = None
    fallback_used: bool = False
    fallback_zone: Optional[str] = None

    @field_validator("instant")
    @classmethod
    def must_be_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("instant must be timezone-aware")
        return v

class BodyPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    body: str
    longitude: float = Field(..., ge=0.0, lt=360.0)

class ChartData(BaseModel):
    model_config = ConfigDict(frozen=True)

    ascendant: float = Field(..., ge=0.0, lt=360.0)
    # None = Engine lieferte keine Positionen (Ausgabe: "keine Daten")
    bodies: Optional[Dict[str, BodyPosition]] = None

class HoroscopeReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    ascendant_index: int = Field(..., ge=0, le=11)
    positions: Optional[Dict[str, int]] = None
    time_zone_id: Optional[str] = None
    fallback_used: bool = False

class HoroscopeResponse(BaseModel):
    horoscopeText: str
    lagna: int = Field(..., ge=0, le=11)
    # body -> Tierkreis-Index 0..11 (leer, wenn die Engine keine Positionen lieferte)
    planetPositions: Dict[str, int]
    timeZoneId: Optional[str] = None

class ErrorResponse(BaseModel):
    error: str
