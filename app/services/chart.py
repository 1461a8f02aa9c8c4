from __future__ import annotations
import asyncio
import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
import logging

from app.config import settings
from app.models.schemas import BodyPosition, ChartData, GeoPoint, ResolvedInstant
from app.services.calls import call_bounded
from app.services.errors import (
    CollaboratorUnavailableError,
    InternalComputationError,
    MalformedResponseError,
)
from app.services.provider import ChartEngine
from app.services.zodiac import normalize_longitude

log = logging.getLogger("uvicorn")

STAGE = "chart_computing"

def build_engine(backend: Optional[str] = None) -> ChartEngine:
    """Bindet die konfigurierte Engine. Import erst hier, damit eine fehlende
    Bibliothek als Verfügbarkeitsfehler gemeldet wird."""
    backend = backend or settings.astro_backend
    if backend == "swisseph":
        from app.services.swisseph_provider import SwissEphemeris
        return SwissEphemeris()
    if backend == "kerykeion":
        from app.services.kerykeion_provider import KerykeionEngine
        return KerykeionEngine()
    raise RuntimeError(f"Unknown astro backend: {backend!r}")

def _as_longitude(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return normalize_longitude(value)

class ChartComputationAdapter:
    """Einziger Zugang der Pipeline zur Ephemeris-Engine.

    - keine Engine beim Start -> jede Anfrage: CollaboratorUnavailableError
    - Engine wirft -> InternalComputationError
    - ASC fehlt -> MalformedResponseError; Positionen fehlen -> ``bodies=None``
    """

    def __init__(
        self,
        engine: Optional[ChartEngine],
        unavailable_reason: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._engine = engine
        self._unavailable_reason = unavailable_reason or "no astro engine bound"
        self._timeout_s = timeout_s if timeout_s is not None else settings.collaborator_timeout_s

    @classmethod
    def from_settings(cls) -> "ChartComputationAdapter":
        try:
            engine = build_engine()
        except Exception as e:
            reason = f"astro backend {settings.astro_backend!r} could not be loaded: {e}"
            log.error(f"collaborator unavailable: {reason}")
            return cls(None, unavailable_reason=reason)
        return cls(engine)

    @property
    def available(self) -> bool:
        return self._engine is not None

    @property
    def engine_name(self) -> Optional[str]:
        return getattr(self._engine, "name", None) if self._engine is not None else None

    def _call_engine(self, when: datetime, loc: GeoPoint) -> Tuple[Any, Any]:
        return self._engine.ascendant(when, loc), self._engine.body_longitudes(when, loc)

    async def compute(self, resolved: ResolvedInstant, geo: GeoPoint) -> ChartData:
        if self._engine is None:
            raise CollaboratorUnavailableError(
                self._unavailable_reason, stage=STAGE, collaborator="engine"
            )

        try:
            asc_raw, bodies_raw = await call_bounded(
                self._call_engine, resolved.instant, geo, timeout_s=self._timeout_s
            )
        except asyncio.TimeoutError:
            raise CollaboratorUnavailableError(
                f"engine call exceeded {self._timeout_s}s", stage=STAGE, collaborator="engine"
            )
        except Exception as e:
            raise InternalComputationError(
                f"engine {self.engine_name} failed: {e!r}", stage=STAGE, collaborator="engine"
            ) from e

        return self._to_chart(asc_raw, bodies_raw)

    def _to_chart(self, asc_raw: Any, bodies_raw: Any) -> ChartData:
        asc = _as_longitude(asc_raw)
        if asc is None:
            raise MalformedResponseError(
                f"engine {self.engine_name} returned no ascendant ({asc_raw!r})",
                stage=STAGE, collaborator="engine",
            )

        if not isinstance(bodies_raw, Mapping):
            log.warning(f"malformed engine response: body map is {type(bodies_raw).__name__}")
            return ChartData(ascendant=asc, bodies=None)

        bodies: Dict[str, BodyPosition] = {}
        for body, raw in bodies_raw.items():
            lon = _as_longitude(raw)
            if lon is None:
                log.warning(f"malformed engine response: dropping {body!r}={raw!r}")
                continue
            bodies[str(body)] = BodyPosition(body=str(body), longitude=lon)

        if not bodies:
            log.warning("malformed engine response: no usable body positions")
            return ChartData(ascendant=asc, bodies=None)

        return ChartData(ascendant=asc, bodies=bodies)
