from functools import lru_cache

from app.services.inspector_service import InspectorService
from app.settings import get_settings


@lru_cache()
def get_inspector_service() -> InspectorService:
    """
    Singleton-ish InspectorService for the FastAPI app.

    Uses centralized Settings so configuration is loaded once and injected.
    """
    settings = get_settings()
    return InspectorService(settings=settings)
