"""Turn a raw LLM reply into a validated AnalysisResult.

``parse_reply`` returns a tagged outcome; ``normalize`` collapses a failed
outcome into the sentinel result and never raises.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from clauseguard.api.policy_analyzer.catalog import (
    CATEGORY_IDS,
    DEFAULT_GRADE,
    GRADE_ORDER,
    STATUS_ORDER,
    UNKNOWN_GRADE,
)
from clauseguard.api.policy_analyzer.models import (
    AnalysisResult,
    CategoryFinding,
    CriticalQuote,
    Highlights,
)

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "Analysis complete. Review the findings below."
UNPARSEABLE_SUMMARY = "Unable to parse the analysis. Check your API settings and try again."
MIN_SUMMARY_LENGTH = 11

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


@dataclass(frozen=True)
class ParseOutcome:
    ok: bool
    result: AnalysisResult
    error: str | None = None


def unparseable_result() -> AnalysisResult:
    """The sentinel returned whenever a reply cannot be interpreted."""
    return AnalysisResult(grade=UNKNOWN_GRADE, summary=UNPARSEABLE_SUMMARY)


def extract_json(text: str) -> Any:
    """
    Decode the JSON payload of a chatty reply: drop a surrounding code fence,
    then keep the span from the first ``{`` to the last ``}``.
    Raises json.JSONDecodeError when nothing decodable remains.
    """
    clean = text.strip()
    if clean.startswith("```"):
        clean = _FENCE_OPEN.sub("", clean)
        clean = _FENCE_CLOSE.sub("", clean)
    start = clean.find("{")
    end = clean.rfind("}")
    if start != -1 and end > start:
        clean = clean[start:end + 1]
    return json.loads(clean)


def _grade(value: Any) -> str:
    if not isinstance(value, str):
        return DEFAULT_GRADE
    upper = value.upper()
    if upper not in GRADE_ORDER:
        return DEFAULT_GRADE
    return upper


def _summary(value: Any) -> str:
    if isinstance(value, str) and len(value) >= MIN_SUMMARY_LENGTH:
        return value
    return FALLBACK_SUMMARY


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _dirty_dozen(value: Any) -> dict[str, CategoryFinding]:
    if not isinstance(value, dict):
        return {}
    findings: dict[str, CategoryFinding] = {}
    for category_id, entry in value.items():
        if category_id not in CATEGORY_IDS:
            logger.debug("Ignoring unknown category %r", category_id)
            continue
        if not isinstance(entry, dict):
            continue
        status = entry.get("status")
        if isinstance(status, str):
            status = status.lower()
        if status not in STATUS_ORDER:
            status = "unknown"
        findings[category_id] = CategoryFinding(status=status, finding=_text(entry.get("finding")))
    return findings


def _highlights(value: Any) -> Highlights:
    if not isinstance(value, dict):
        return Highlights()
    return Highlights(good=_strings(value.get("good")), bad=_strings(value.get("bad")))


def _critical_quotes(value: Any) -> list[CriticalQuote]:
    if not isinstance(value, list):
        return []
    return [
        CriticalQuote(text=_text(item.get("text")), concern=_text(item.get("concern")))
        for item in value
        if isinstance(item, dict)
    ]


def _validate(data: dict[str, Any]) -> AnalysisResult:
    return AnalysisResult(
        grade=_grade(data.get("grade")),
        summary=_summary(data.get("summary")),
        dirty_dozen=_dirty_dozen(data.get("dirtyDozen")),
        highlights=_highlights(data.get("highlights")),
        critical_quotes=_critical_quotes(data.get("criticalQuotes")),
    )


def parse_reply(raw: Any) -> ParseOutcome:
    """Validate *raw* (reply text, decoded dict or AnalysisResult) against the result schema."""
    if isinstance(raw, AnalysisResult):
        return ParseOutcome(ok=True, result=raw.model_copy(deep=True))
    try:
        if isinstance(raw, str):
            data = extract_json(raw)
        elif isinstance(raw, dict):
            data = raw
        else:
            raise TypeError(f"unsupported reply type {type(raw).__name__}")
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return ParseOutcome(ok=True, result=_validate(data))
    except Exception as e:
        logger.warning("Could not parse LLM reply: %s", e)
        if isinstance(raw, str):
            logger.debug("Raw reply (first 500 chars): %s", raw[:500])
        return ParseOutcome(ok=False, result=unparseable_result(), error=str(e))


def normalize(raw: Any) -> AnalysisResult:
    """Return the validated result for *raw*, or the sentinel if it cannot be interpreted."""
    return parse_reply(raw).result
