"""Policy analyzer routes."""

import logging
from typing import Any, Callable

from fastapi import APIRouter, HTTPException, Query

from clauseguard.analysis_store import clear_analysis, get_analysis, mark_analyzing, mark_complete, mark_error
from clauseguard.api.policy_analyzer.catalog import DIRTY_DOZEN, GRADE_DESCRIPTIONS, POLICY_TYPES, resolve_policy_type
from clauseguard.api.policy_analyzer.chain import analyze_policy
from clauseguard.api.policy_analyzer.errors import ConfigurationError, TransportError
from clauseguard.api.policy_analyzer.models import AnalysisRecord, AnalysisResult, AnalyzeRequest
from clauseguard.schemas.common import MessageResponse
from clauseguard.settings_store import get_llm_settings

router = APIRouter(prefix="/policy_analyzer", tags=["policy_analyzer"])
logger = logging.getLogger(__name__)


def _record(write: Callable[..., Any], *args: Any) -> None:
    """Update the analysis cache; a cache failure never fails the analysis itself."""
    try:
        write(*args)
    except Exception as e:
        logger.warning("Analysis cache update failed: %s", e)


@router.get("/categories")
def get_categories() -> dict[str, Any]:
    """Return the Dirty Dozen categories, grade descriptions and known policy types."""
    return {
        "categories": [c._asdict() for c in DIRTY_DOZEN],
        "grades": GRADE_DESCRIPTIONS,
        "policyTypes": POLICY_TYPES,
    }


@router.post("/analyze", response_model=AnalysisResult)
async def analyze(body: AnalyzeRequest) -> AnalysisResult:
    """
    Grade the submitted policy text with the configured LLM.
    When *url* is given, the result (or error) is cached for the site's domain.
    """
    policy_type = resolve_policy_type(body.policy_type)
    try:
        settings = get_llm_settings()
    except Exception as e:
        logger.error("Failed to load LLM settings: %s", e)
        raise HTTPException(status_code=503, detail=str(e)) from e

    if body.url:
        _record(mark_analyzing, body.url, policy_type)
    try:
        result = await analyze_policy(body.policy_text, policy_type, settings)
    except ConfigurationError as e:
        if body.url:
            _record(mark_error, body.url, policy_type, e.message)
        raise HTTPException(status_code=400, detail=e.message) from e
    except TransportError as e:
        if body.url:
            _record(mark_error, body.url, policy_type, e.message)
        raise HTTPException(status_code=502, detail=e.message) from e
    except Exception as e:
        logger.exception("Policy analysis failed unexpectedly")
        if body.url:
            _record(mark_error, body.url, policy_type, str(e) or type(e).__name__)
        raise

    if body.url:
        _record(mark_complete, body.url, policy_type, result)
    return result


@router.get("/analysis", response_model=AnalysisRecord)
def get_cached_analysis(
    url: str = Query(..., description="Any URL on the site, e.g. https://example.com/privacy")
) -> AnalysisRecord:
    """Return the latest analysis state cached for the domain of *url*."""
    try:
        record = get_analysis(url)
    except Exception as e:
        logger.error("Cache lookup failed for %s: %s", url, e)
        raise HTTPException(status_code=503, detail=str(e)) from e
    if record is None:
        raise HTTPException(status_code=404, detail="No analysis cached for this site")
    return record


@router.delete("/analysis", response_model=MessageResponse)
def delete_cached_analysis(
    url: str = Query(..., description="Any URL on the site")
) -> MessageResponse:
    """Forget the cached analysis for the domain of *url*."""
    try:
        removed = clear_analysis(url)
    except Exception as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return MessageResponse(message="Cached analysis cleared" if removed else "Nothing cached for this site")
