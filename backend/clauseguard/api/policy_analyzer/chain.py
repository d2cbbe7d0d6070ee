"""Policy analysis pipeline: chunk, call the LLM, normalize and merge."""

import asyncio
import logging
from typing import Any, Mapping, Protocol

from langchain_core.tools import StructuredTool

from clauseguard.api.policy_analyzer.catalog import resolve_policy_type
from clauseguard.api.policy_analyzer.chunking import Chunk, needs_chunking, plan_chunks
from clauseguard.api.policy_analyzer.llm import LLMInvoker, require_settings
from clauseguard.api.policy_analyzer.merger import merge_results
from clauseguard.api.policy_analyzer.models import AnalysisResult, LLMSettings
from clauseguard.api.policy_analyzer.normalizer import normalize
from clauseguard.api.policy_analyzer.prompts import ANALYSIS_SYSTEM_PROMPT, build_user_prompt
from clauseguard.core.config import get_settings
from clauseguard.settings_store import get_llm_settings

logger = logging.getLogger(__name__)


class Invoker(Protocol):
    async def invoke(self, settings: LLMSettings, system_prompt: str, user_prompt: str) -> str: ...


async def _analyze_chunk(invoker: Invoker, settings: LLMSettings, chunk: Chunk, policy_type: str) -> AnalysisResult:
    user_prompt = build_user_prompt(chunk.text, f"{policy_type} ({chunk.label})")
    reply = await invoker.invoke(settings, ANALYSIS_SYSTEM_PROMPT, user_prompt)
    result = normalize(reply)
    logger.info("%s analyzed: grade %s", chunk.label, result.grade)
    return result


async def _run(
    invoker: Invoker,
    settings: LLMSettings,
    policy_text: str,
    policy_type: str,
    max_length: int,
    reserve: int,
) -> AnalysisResult:
    if not needs_chunking(policy_text, max_length):
        logger.info("Analyzing %s in a single call (%d chars)", policy_type, len(policy_text))
        reply = await invoker.invoke(settings, ANALYSIS_SYSTEM_PROMPT, build_user_prompt(policy_text, policy_type))
        return normalize(reply)

    chunks = plan_chunks(policy_text, max_length, reserve)
    logger.info("Analyzing %s in %d chunks (%d chars)", policy_type, len(chunks), len(policy_text))
    # Every chunk call settles before the first failure is raised, so an owned client outlives them all.
    outcomes = await asyncio.gather(
        *(_analyze_chunk(invoker, settings, c, policy_type) for c in chunks), return_exceptions=True
    )
    failures = [o for o in outcomes if isinstance(o, BaseException)]
    if failures:
        logger.warning("%d of %d chunk calls failed", len(failures), len(chunks))
        raise failures[0]
    results = list(outcomes)
    merged = merge_results(results)
    logger.info("Merged %d chunk results: grade %s", len(results), merged.grade)
    return merged


async def analyze_policy(
    policy_text: str,
    policy_type: str,
    settings: LLMSettings | Mapping[str, Any] | None,
    *,
    invoker: Invoker | None = None,
    max_text_length: int | None = None,
    chunk_reserve: int | None = None,
) -> AnalysisResult:
    """
    Analyze one policy document.

    Settings are checked once before any work. Documents within the length
    threshold take a single LLM call; longer ones are split and every chunk
    is sent concurrently, then the normalized chunk results are merged.
    Invoker errors (ConfigurationError, TransportError) fail the whole call;
    an unparseable reply only degrades its own chunk to the sentinel result.
    """
    llm_settings = require_settings(settings)
    config = get_settings()
    max_length = max_text_length if max_text_length is not None else config.max_text_length
    reserve = chunk_reserve if chunk_reserve is not None else config.chunk_reserve
    label = resolve_policy_type(policy_type)

    if invoker is not None:
        return await _run(invoker, llm_settings, policy_text, label, max_length, reserve)
    async with LLMInvoker(timeout=config.llm_timeout_seconds) as owned:
        return await _run(owned, llm_settings, policy_text, label, max_length, reserve)


async def analyze_policy_with_llm(policy_text: str, policy_type: str) -> AnalysisResult:
    """Analyze *policy_text* with the LLM settings currently saved in the settings store."""
    return await analyze_policy(policy_text, policy_type, get_llm_settings())


async def _analyze_policy_for_tool(policy_text: str, policy_type: str = "Privacy Policy") -> dict:
    result = await analyze_policy_with_llm(policy_text, policy_type)
    return result.model_dump(by_alias=True)


# LangChain-compatible tool: use with bind_tools([...]) or an agent
analyze_policy_tool = StructuredTool.from_function(
    coroutine=_analyze_policy_for_tool,
    name="analyze_policy",
    description=(
        "Grade a Privacy Policy or Terms of Service document for user-rights risk. "
        "Input is the full plain-text document and its type (e.g. 'Privacy Policy'). "
        "Returns JSON: grade (A-F, ? if undetermined), summary, dirtyDozen findings "
        "per risk category, highlights (good/bad), criticalQuotes."
    ),
)
