from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple
import logging

from app.config import settings
from app.models.schemas import BirthRequest, ChartData, GeoPoint, HoroscopeReport, ResolvedInstant
from app.services.chart import ChartComputationAdapter
from app.services.errors import (
    CollaboratorUnavailableError,
    HoroscopeError,
    InternalComputationError,
    PlaceNotFoundError,
    ValidationError,
)
from app.services.geocoding import PlaceResolver
from app.services.render import render_report
from app.services.timezones import TimeZoneResolver, normalize_instant
from app.services.zodiac import map_longitude_to_zodiac

log = logging.getLogger("uvicorn")

class Stage(str, Enum):
    VALIDATING = "validating"
    PLACE_RESOLVING = "place_resolving"
    TIME_ZONE_RESOLVING = "time_zone_resolving"
    INSTANT_NORMALIZING = "instant_normalizing"
    CHART_COMPUTING = "chart_computing"
    RENDERING = "rendering"
    DONE = "done"
    FAILED = "failed"

def failure_response(exc: BaseException) -> Tuple[int, str]:
    """Fehlerart -> (HTTP-Status, stabiler Text). Nie Details der Kollaborateure."""
    if isinstance(exc, HoroscopeError):
        return exc.status_code, exc.message
    return InternalComputationError.status_code, InternalComputationError.message

def _log_failure(exc: HoroscopeError) -> None:
    where = f"[{exc.stage}] -> {Stage.FAILED.value}"
    if isinstance(exc, (ValidationError, PlaceNotFoundError)):
        log.info(f"horoscope request rejected {where}: {exc.detail}")
    elif isinstance(exc, CollaboratorUnavailableError):
        log.error(f"collaborator unavailable {where} ({exc.collaborator}): {exc.detail}")
    elif isinstance(exc, InternalComputationError) and exc.__cause__ is not None:
        log.error(f"internal computation error {where}: {exc.detail}", exc_info=exc.__cause__)
    else:
        log.error(f"{type(exc).__name__} {where}: {exc.detail}")

class HoroscopeOrchestrator:
    """Eine Anfrage, streng sequenziell:

    validating -> place_resolving -> time_zone_resolving -> instant_normalizing
    -> chart_computing -> rendering -> done

    Nur die Zeitzonen-Stufe darf scheitern, ohne die Anfrage abzubrechen.
    """

    def __init__(
        self,
        places: PlaceResolver,
        time_zones: TimeZoneResolver,
        charts: ChartComputationAdapter,
        fallback_zone: Optional[str] = None,
    ) -> None:
        self.places = places
        self.time_zones = time_zones
        self.charts = charts
        self.fallback_zone = fallback_zone or settings.tz_default

    def _resolve_time_zone(self, geo: GeoPoint) -> Optional[str]:
        try:
            tz = self.time_zones.resolve(geo.lat, geo.lon)
        except Exception as e:
            log.warning(f"timezone lookup failed, continuing without zone: {e!r}")
            return None
        if tz is None:
            log.info(f"no timezone for ({geo.lat}, {geo.lon}), using {self.fallback_zone}")
        return tz

    @staticmethod
    def _indices(chart: ChartData) -> Tuple[int, Optional[Dict[str, int]]]:
        asc = map_longitude_to_zodiac(chart.ascendant)
        if chart.bodies is None:
            return asc, None
        return asc, {b: map_longitude_to_zodiac(p.longitude) for b, p in chart.bodies.items()}

    def _render(self, resolved: ResolvedInstant, geo: GeoPoint, chart: ChartData) -> HoroscopeReport:
        asc_idx, positions = self._indices(chart)
        tz_id = None if resolved.fallback_used else resolved.time_zone_id
        text = render_report(
            resolved.instant, geo, tz_id, asc_idx, positions,
            fallback_zone=resolved.fallback_zone,
        )
        return HoroscopeReport(
            text=text,
            ascendant_index=asc_idx,
            positions=positions,
            time_zone_id=tz_id,
            fallback_used=resolved.fallback_used,
        )

    async def run(self, req: BirthRequest) -> HoroscopeReport:
        stage = Stage.VALIDATING
        try:
            missing = req.missing_fields()
            if missing:
                raise ValidationError(f"missing fields: {', '.join(missing)}")

            stage = Stage.PLACE_RESOLVING
            geo = await self.places.resolve(req.birthPlace)

            stage = Stage.TIME_ZONE_RESOLVING
            tz_id = self._resolve_time_zone(geo)

            stage = Stage.INSTANT_NORMALIZING
            resolved = normalize_instant(
                req.birthDate, req.birthTime, tz_id, fallback_zone=self.fallback_zone
            )

            stage = Stage.CHART_COMPUTING
            chart = await self.charts.compute(resolved, geo)

            stage = Stage.RENDERING
            report = self._render(resolved, geo, chart)
        except HoroscopeError as e:
            e.stage = e.stage or stage.value
            _log_failure(e)
            raise
        except Exception as e:
            log.exception(f"internal computation error [{stage.value}] -> {Stage.FAILED.value}: {e!r}")
            raise InternalComputationError(repr(e), stage=stage.value) from e

        log.info(
            f"horoscope {Stage.DONE.value}: place={geo.formatted_address!r} tz={report.time_zone_id} "
            f"fallback={report.fallback_used} lagna={report.ascendant_index}"
        )
        return report
