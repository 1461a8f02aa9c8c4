from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.deps import get_orchestrator
from app.models.schemas import BirthRequest, ErrorResponse, HoroscopeResponse
from app.services.errors import HoroscopeError
from app.services.horoscope import HoroscopeOrchestrator, failure_response

router = APIRouter(tags=["horoscope"])

@router.post(
    "/horoscope",
    response_model=HoroscopeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def horoscope(req: BirthRequest, orchestrator: HoroscopeOrchestrator = Depends(get_orchestrator)):
    try:
        report = await orchestrator.run(req)
    except HoroscopeError as e:
        status, message = failure_response(e)
        return JSONResponse(status_code=status, content={"error": message})

    return HoroscopeResponse(
        horoscopeText=report.text,
        lagna=report.ascendant_index,
        planetPositions=report.positions or {},
        timeZoneId=report.time_zone_id,
    )
