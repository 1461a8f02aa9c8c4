from fastapi import APIRouter, Depends
from app.deps import get_orchestrator
from app.services.horoscope import HoroscopeOrchestrator

router = APIRouter(prefix="/v1/astro", tags=["astro"])

@router.get("/health")
def health(orchestrator: HoroscopeOrchestrator = Depends(get_orchestrator)):
    # "degraded": Anfragen werden mit stabilem Fehler beantwortet statt zu hängen
    engine_ok = orchestrator.charts.available
    return {
        "status": "ok" if engine_ok and orchestrator.places.available else "degraded",
        "engine": orchestrator.charts.engine_name,
        "geocoder": orchestrator.places.available,
        "timezone_lookup": orchestrator.time_zones.available,
    }
