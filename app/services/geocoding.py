from __future__ import annotations
import asyncio
from typing import Any, Optional
import logging

import pydantic
from geopy.exc import GeocoderParseError, GeocoderQueryError, GeopyError
from geopy.geocoders import GoogleV3, Nominatim

from app.config import settings
from app.models.schemas import GeoPoint
from app.services.calls import call_bounded
from app.services.errors import (
    CollaboratorUnavailableError,
    MalformedResponseError,
    PlaceNotFoundError,
)

log = logging.getLogger("uvicorn")

STAGE = "place_resolving"
UNAVAILABLE = "Geocoding service unavailable"
MALFORMED = "Geocoding service returned incomplete data"

def build_geocoder() -> Any:
    """Google, wenn ein API-Key da ist, sonst Nominatim (OpenStreetMap)."""
    if settings.geocoder == "google":
        if settings.google_maps_api_key:
            return GoogleV3(api_key=settings.google_maps_api_key, timeout=settings.collaborator_timeout_s)
        log.warning("GOOGLE_MAPS_API_KEY not set, using Nominatim for geocoding")
    return Nominatim(user_agent=settings.geocoder_user_agent, timeout=settings.collaborator_timeout_s)

class PlaceResolver:
    """Freitext-Ort -> GeoPoint. Nimmt nur den ersten (besten) Treffer."""

    def __init__(
        self,
        geocoder: Any,
        timeout_s: Optional[float] = None,
        language: Optional[str] = None,
    ) -> None:
        self._geocoder = geocoder
        self._timeout_s = timeout_s if timeout_s is not None else settings.collaborator_timeout_s
        self._language = language or settings.geocoder_language

    @classmethod
    def from_settings(cls) -> "PlaceResolver":
        try:
            geocoder = build_geocoder()
        except Exception as e:
            log.error(f"collaborator unavailable: geocoder could not be configured: {e}")
            geocoder = None
        return cls(geocoder)

    @property
    def available(self) -> bool:
        return self._geocoder is not None

    def _unavailable(self, detail: str) -> CollaboratorUnavailableError:
        return CollaboratorUnavailableError(
            detail, stage=STAGE, collaborator="geocoder", message=UNAVAILABLE
        )

    async def resolve(self, text: str) -> GeoPoint:
        if self._geocoder is None:
            raise self._unavailable("no geocoder configured")

        try:
            matches = await call_bounded(
                self._geocoder.geocode,
                text,
                exactly_one=False,
                language=self._language,
                timeout_s=self._timeout_s,
            )
        except asyncio.TimeoutError:
            raise self._unavailable(f"geocoder exceeded {self._timeout_s}s")
        except (GeocoderQueryError, GeocoderParseError) as e:
            raise PlaceNotFoundError(f"geocoder rejected {text!r}: {e}", stage=STAGE, collaborator="geocoder")
        except GeopyError as e:
            raise self._unavailable(f"{type(e).__name__}: {e}")

        if not matches:
            raise PlaceNotFoundError(f"no match for {text!r}", stage=STAGE, collaborator="geocoder")

        best = matches[0]
        try:
            return GeoPoint(
                lat=float(best.latitude),
                lon=float(best.longitude),
                formatted_address=best.address or "",
            )
        except (TypeError, ValueError, pydantic.ValidationError) as e:
            raise MalformedResponseError(
                f"geocoder returned unusable coordinates for {text!r}: {e}",
                stage=STAGE, collaborator="geocoder", message=MALFORMED,
            )
