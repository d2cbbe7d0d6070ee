"""Pydantic models for policy analysis results, LLM settings and the HTTP surface.

Python attributes are snake_case; JSON keeps the camelCase names the
extension and the prompt use (``dirtyDozen``, ``criticalQuotes``, ``apiKey``).
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from clauseguard.api.policy_analyzer.catalog import FindingStatus, Grade


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------
# Analysis result
# ---------------------------

class CategoryFinding(CamelModel):
    """Assessment of one Dirty Dozen category."""
    status: FindingStatus = Field("unknown", description="One of: safe, warning, danger, unknown")
    finding: str = Field("", description="Brief explanation")


class Highlights(CamelModel):
    good: List[str] = Field(default_factory=list, description="User-friendly practices")
    bad: List[str] = Field(default_factory=list, description="Concerning practices")


class CriticalQuote(CamelModel):
    text: str = Field("", description="Exact quote from the policy")
    concern: str = Field("", description="Why this matters")


class AnalysisResult(CamelModel):
    """Canonical output of the analysis pipeline."""
    grade: Grade = Field(..., description="A (best) to F (worst), ? when undetermined")
    summary: str = Field(..., description="Plain English summary")
    dirty_dozen: Dict[str, CategoryFinding] = Field(default_factory=dict)
    highlights: Highlights = Field(default_factory=Highlights)
    critical_quotes: List[CriticalQuote] = Field(default_factory=list)


# ---------------------------
# LLM settings record
# ---------------------------

class LLMSettings(CamelModel):
    """Endpoint, model and key for the OpenAI-compatible API. Empty string means not configured."""
    endpoint: str = ""
    model: str = ""
    api_key: str = ""

    def missing_fields(self) -> list[str]:
        missing = []
        for name in ("endpoint", "model", "api_key"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                missing.append(name)
        return missing


class SettingsView(CamelModel):
    """Settings as exposed over HTTP; the key itself is never echoed back."""
    endpoint: str
    model: str
    api_key_set: bool


# ---------------------------
# HTTP surface
# ---------------------------

class AnalyzeRequest(CamelModel):
    policy_text: str = Field(..., description="Plain text of the policy document")
    policy_type: str = Field("unknown", description="Short key (privacy, terms...) or a display label")
    url: Optional[str] = Field(None, description="Page the text came from; enables result caching per domain")


class AnalysisRecord(CamelModel):
    """Cached state of the latest analysis for a domain."""
    status: Literal["analyzing", "complete", "error"]
    domain: str
    url: Optional[str] = None
    policy_type: Optional[str] = None
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None
    timestamp: float
