"""LLM settings API (Valkey-backed)."""

from fastapi import APIRouter, HTTPException

from clauseguard.api.policy_analyzer.models import LLMSettings, SettingsView
from clauseguard.schemas.common import MessageResponse
from clauseguard.settings_store import clear_llm_settings, get_llm_settings, save_llm_settings, settings_view

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsView)
def get_settings_record() -> SettingsView:
    """Return the effective endpoint and model, and whether an API key is set."""
    try:
        return settings_view(get_llm_settings())
    except Exception as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.put("", response_model=SettingsView)
def put_settings_record(body: LLMSettings) -> SettingsView:
    """Replace the stored endpoint, model and API key."""
    try:
        save_llm_settings(body)
        return settings_view(get_llm_settings())
    except Exception as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.delete("", response_model=MessageResponse)
def delete_settings_record() -> MessageResponse:
    """Remove the stored record; environment defaults still apply."""
    try:
        removed = clear_llm_settings()
    except Exception as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return MessageResponse(message="Settings cleared" if removed else "No settings stored")
