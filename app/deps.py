from app.config import settings
from app.services.chart import ChartComputationAdapter
from app.services.geocoding import PlaceResolver
from app.services.horoscope import HoroscopeOrchestrator
from app.services.timezones import TimeZoneResolver

# Nach dem Start nur noch gelesen; enthält keinen Anfrage-Zustand
_orchestrator: HoroscopeOrchestrator | None = None

def init_collaborators() -> HoroscopeOrchestrator:
    global _orchestrator
    _orchestrator = HoroscopeOrchestrator(
        places=PlaceResolver.from_settings(),
        time_zones=TimeZoneResolver.from_settings(),
        charts=ChartComputationAdapter.from_settings(),
        fallback_zone=settings.tz_default,
    )
    return _orchestrator

def get_orchestrator() -> HoroscopeOrchestrator:
    if _orchestrator is None:
        return init_collaborators()
    return _orchestrator
