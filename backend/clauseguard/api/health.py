"""Health and readiness endpoints."""

import logging

from fastapi import APIRouter, Depends

from clauseguard.core.config import Settings, get_settings
from clauseguard.db import get_client
from clauseguard.schemas.common import HealthResponse
from clauseguard.settings_store import get_llm_settings

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Return service health, environment, and whether Valkey and the LLM settings are usable."""
    try:
        get_client().ping()
        valkey_ok = True
    except Exception as e:
        logger.warning("Valkey ping failed: %s", e)
        valkey_ok = False

    llm_configured = False
    if valkey_ok:
        llm_configured = not get_llm_settings().missing_fields()

    return HealthResponse(
        status="ok" if valkey_ok else "degraded",
        environment=settings.environment,
        valkey=valkey_ok,
        llm_configured=llm_configured,
    )
