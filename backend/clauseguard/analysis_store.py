"""Per-domain cache of the latest analysis state in Valkey."""

from __future__ import annotations

import logging
import time

from clauseguard.api.policy_analyzer.models import AnalysisRecord, AnalysisResult
from clauseguard.core.config import get_settings
from clauseguard.queries import delete_key, get_json, set_json
from clauseguard.utils.url_utils import get_domain

logger = logging.getLogger(__name__)

ANALYSIS_PREFIX = "analysis:"


def _domain(url: str) -> str:
    return get_domain(url) or "no_domain"


def cache_key_for_url(url: str) -> str:
    """Cache key from the registered domain of *url*, so every page of a site shares one entry."""
    return f"{ANALYSIS_PREFIX}{_domain(url)}"


def _store(record: AnalysisRecord) -> AnalysisRecord:
    key = f"{ANALYSIS_PREFIX}{record.domain}"
    set_json(key, record, ttl_seconds=get_settings().analysis_cache_ttl_seconds)
    logger.info("Stored %s analysis record under %s", record.status, key)
    return record


def mark_analyzing(url: str, policy_type: str) -> AnalysisRecord:
    return _store(AnalysisRecord(
        status="analyzing",
        domain=_domain(url),
        url=url,
        policy_type=policy_type,
        timestamp=time.time(),
    ))


def mark_complete(url: str, policy_type: str, analysis: AnalysisResult) -> AnalysisRecord:
    return _store(AnalysisRecord(
        status="complete",
        domain=_domain(url),
        url=url,
        policy_type=policy_type,
        analysis=analysis,
        timestamp=time.time(),
    ))


def mark_error(url: str, policy_type: str, message: str) -> AnalysisRecord:
    return _store(AnalysisRecord(
        status="error",
        domain=_domain(url),
        url=url,
        policy_type=policy_type,
        error=message,
        timestamp=time.time(),
    ))


def get_analysis(url: str) -> AnalysisRecord | None:
    return get_json(cache_key_for_url(url), AnalysisRecord)


def clear_analysis(url: str) -> bool:
    """Drop the cached record for the domain of *url*; True if one existed."""
    return delete_key(cache_key_for_url(url))
