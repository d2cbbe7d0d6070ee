"""Application utilities."""

from clauseguard.utils.url_utils import get_domain

__all__ = ["get_domain"]
