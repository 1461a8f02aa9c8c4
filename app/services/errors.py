from __future__ import annotations
from typing import Optional

class HoroscopeError(Exception):
    """Basisklasse aller Pipeline-Fehler.

    ``message`` ist der stabile, nach außen sichtbare Text; ``detail`` bleibt
    intern und landet nur im Log.
    """

    status_code = 500
    message = "Internal server error"

    def __init__(
        self,
        detail: str = "",
        *,
        stage: Optional[str] = None,
        collaborator: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(detail or self.message)
        self.detail = detail
        self.stage = stage
        self.collaborator = collaborator
        if message is not None:
            self.message = message

class ValidationError(HoroscopeError):
    status_code = 400
    message = "Missing birth data"

class PlaceNotFoundError(HoroscopeError):
    status_code = 404
    message = "Birth place not found"

class CollaboratorUnavailableError(HoroscopeError):
    status_code = 500
    message = "Astrology engine unavailable"

class MalformedResponseError(HoroscopeError):
    status_code = 500
    message = "Astrology engine returned incomplete data"

class InternalComputationError(HoroscopeError):
    status_code = 500
    message = "Internal server error"
