from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.deps import init_collaborators
from app.routers import astro
from app.routers import horoscope
from app.services.errors import ValidationError

logging.getLogger("uvicorn").setLevel(settings.log_level.upper())

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Engine, Geocoder, TimezoneFinder einmal binden; Fehler -> degradierte Antworten
    init_collaborators()
    yield

app = FastAPI(title="Jathagam API", version="1.0.0", lifespan=lifespan)
app.include_router(astro.router)
app.include_router(horoscope.router)

@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=ValidationError.status_code, content={"error": ValidationError.message})

if settings.static_dir and Path(settings.static_dir).is_dir():
    # Formular-Frontend unter / (API-Routen haben Vorrang)
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
else:
    @app.get("/")
    def root():
        return {"name": "Jathagam API", "version": "1.0.0"}
