"""Combine per-chunk analysis results into one worst-case assessment."""

from typing import Sequence

from clauseguard.api.policy_analyzer.catalog import GRADE_ORDER, grade_rank, status_rank
from clauseguard.api.policy_analyzer.models import (
    AnalysisResult,
    CategoryFinding,
    CriticalQuote,
    Highlights,
)

MERGED_SUMMARY_FALLBACK = "Analysis complete."

# Presentation caps for the merged result.
MAX_GOOD_HIGHLIGHTS = 5
MAX_BAD_HIGHLIGHTS = 10
MAX_CRITICAL_QUOTES = 5


def _dedupe(items: list[str]) -> list[str]:
    """Drop repeats, keeping first-occurrence order."""
    return list(dict.fromkeys(items))


def merge_results(results: Sequence[AnalysisResult]) -> AnalysisResult:
    """
    Merge chunk results given in chunk order.

    - grade: the worst grade seen, starting from A (``?`` never raises it)
    - summary: the first chunk's summary
    - dirtyDozen: per category, the finding with the most severe status;
      ties keep the earliest finding
    - highlights: de-duplicated, capped at 5 good / 10 bad
    - criticalQuotes: concatenated, capped at 5
    """
    if not results:
        raise ValueError("merge_results needs at least one result")

    worst = GRADE_ORDER[0]
    for result in results:
        if grade_rank(result.grade) > grade_rank(worst):
            worst = result.grade

    dirty_dozen: dict[str, CategoryFinding] = {}
    for result in results:
        for category_id, finding in result.dirty_dozen.items():
            existing = dirty_dozen.get(category_id)
            if existing is None or status_rank(finding.status) > status_rank(existing.status):
                dirty_dozen[category_id] = finding

    good = _dedupe([item for r in results for item in r.highlights.good])
    bad = _dedupe([item for r in results for item in r.highlights.bad])
    quotes: list[CriticalQuote] = [q for r in results for q in r.critical_quotes]

    return AnalysisResult(
        grade=worst,
        summary=results[0].summary or MERGED_SUMMARY_FALLBACK,
        dirty_dozen={k: v.model_copy() for k, v in dirty_dozen.items()},
        highlights=Highlights(good=good[:MAX_GOOD_HIGHLIGHTS], bad=bad[:MAX_BAD_HIGHLIGHTS]),
        critical_quotes=[q.model_copy() for q in quotes[:MAX_CRITICAL_QUOTES]],
    )
