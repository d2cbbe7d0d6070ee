"""Root / welcome endpoint."""

from fastapi import APIRouter, Depends

from clauseguard.core.config import Settings, get_settings
from clauseguard.schemas.common import MessageResponse

router = APIRouter(tags=["root"])


@router.get("/", response_model=MessageResponse)
def root(settings: Settings = Depends(get_settings)) -> MessageResponse:
    """Welcome message and where to start."""
    return MessageResponse(
        message=f"{settings.app_name} is running. POST policy text to /api/policy_analyzer/analyze."
    )
