from typing import Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AstroBackend = Literal["swisseph", "kerykeion"]
Ayanamsa = Literal["lahiri", "raman", "krishnamurti", "tropical"]  # tropical = kein Ayanamsa

class Settings(BaseSettings):
    # Extra-ENV-Variablen ignorieren, .env laden
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Astro-Backend (wird beim Start einmal gebunden)
    astro_backend: AstroBackend = "swisseph"
    se_ephe_path: str | None = None            # z.B. /opt/ephe (im Container)
    ayanamsa: Ayanamsa = "lahiri"
    node_type: Literal["mean", "true"] = "mean"

    # Fallback-Zone, wenn für den Geburtsort keine Zeitzone ermittelt werden kann
    tz_default: str = "Asia/Kolkata"

    # Geocoding
    geocoder: Literal["google", "nominatim"] = "google"
    google_maps_api_key: str | None = None
    geocoder_user_agent: str = "jathagam-api"
    geocoder_language: str = "en"

    # Obergrenze für jeden externen Aufruf (Geocoder, Ephemeris)
    collaborator_timeout_s: float = 10.0

    static_dir: str | None = "public"
    log_level: str = "INFO"

    @field_validator("se_ephe_path", "google_maps_api_key", "static_dir")
    @classmethod
    def strip_empty(cls, v: str | None) -> str | None:
        v = (v or "").strip()
        return v or None

settings = Settings()
