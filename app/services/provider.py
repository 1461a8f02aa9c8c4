from typing import Any, Mapping, Protocol
from datetime import datetime
from app.models.schemas import GeoPoint

class ChartEngine(Protocol):
    """Die zwei Operationen, die jede Engine-Anbindung liefern muss.

    Rückgabewerte sind roh (Grad, beliebiger Wertebereich); geprüft und
    normalisiert wird im ChartComputationAdapter.
    """
    name: str

    def ascendant(self, when: datetime, loc: GeoPoint) -> Any: ...
    def body_longitudes(self, when: datetime, loc: GeoPoint) -> Mapping[str, Any]: ...
