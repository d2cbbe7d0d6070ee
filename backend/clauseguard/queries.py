"""Key-value queries: store, load and drop JSON documents by key (Valkey-backed)."""

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from clauseguard.db import get_client

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def set_json(key: str, value: BaseModel | Any, *, ttl_seconds: int | None = None) -> None:
    """
    Store a value under the given key as JSON.
    Pydantic models are dumped by alias so stored documents keep their wire field names.
    """
    client = get_client()
    if isinstance(value, BaseModel):
        payload = value.model_dump_json(by_alias=True).encode("utf-8")
    else:
        payload = json.dumps(value).encode("utf-8")
    client.set(key, payload, ex=ttl_seconds)


def get_json(key: str, model: type[T]) -> T | None:
    """
    Retrieve a value by key, parse as JSON, and validate into the given Pydantic model.
    Returns None if the key is missing or the stored document no longer fits the model.
    """
    client = get_client()
    raw = client.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding unreadable value under %s: %s", key, e)
        return None


def delete_key(key: str) -> bool:
    """Remove *key*; return True if something was deleted."""
    return get_client().delete(key) > 0
