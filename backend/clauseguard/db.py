"""Valkey (Redis-compatible) connection management."""

from redis import Redis

from clauseguard.core.config import get_settings

_client: Redis | None = None


def connect() -> None:
    """Create and store the Valkey connection (call on app startup)."""
    global _client
    settings = get_settings()
    _client = Redis(
        host=settings.valkey_host,
        port=settings.valkey_port,
        password=settings.valkey_password or None,
        decode_responses=False,
    )


def close() -> None:
    """Close the Valkey connection (call on app shutdown)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_client() -> Redis:
    """Return the shared Valkey client. Call connect() before first use."""
    if _client is None:
        raise RuntimeError("Valkey not connected; call db.connect() first.")
    return _client


def use_client(client: Redis | None) -> None:
    """Install an already-built client (or None to detach), e.g. a shared pool or a test double."""
    global _client
    _client = client
