"""The LLM settings record (endpoint, model, API key) stored in Valkey."""

from __future__ import annotations

import logging

from clauseguard.api.policy_analyzer.models import LLMSettings, SettingsView
from clauseguard.core.config import get_settings
from clauseguard.queries import delete_key, get_json, set_json

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"


def get_stored_settings() -> LLMSettings | None:
    """Return the record as saved, or None if nothing has been saved yet."""
    return get_json(SETTINGS_KEY, LLMSettings)


def get_llm_settings() -> LLMSettings:
    """
    Return the effective settings: the stored record, with any empty field
    filled from LLM_ENDPOINT / LLM_MODEL / LLM_API_KEY.

    Fields that are empty in both places stay empty; the pipeline rejects
    them with a ConfigurationError.
    """
    stored = get_stored_settings() or LLMSettings()
    config = get_settings()
    return LLMSettings(
        endpoint=stored.endpoint or config.llm_endpoint or "",
        model=stored.model or config.llm_model or "",
        api_key=stored.api_key or config.llm_api_key or "",
    )


def save_llm_settings(settings: LLMSettings) -> None:
    """Overwrite the settings record. No TTL."""
    set_json(SETTINGS_KEY, settings)
    logger.info("Saved LLM settings (endpoint=%s, model=%s)", settings.endpoint, settings.model)


def clear_llm_settings() -> bool:
    return delete_key(SETTINGS_KEY)


def settings_view(settings: LLMSettings) -> SettingsView:
    return SettingsView(
        endpoint=settings.endpoint,
        model=settings.model,
        api_key_set=bool(settings.api_key.strip()),
    )
