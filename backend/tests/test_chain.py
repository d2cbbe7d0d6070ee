"""Tests for the analysis orchestrator."""

import asyncio
import json
import re
from unittest.mock import patch

import httpx
import pytest

from clauseguard.api.policy_analyzer import chain
from clauseguard.api.policy_analyzer.chain import analyze_policy, analyze_policy_tool, analyze_policy_with_llm
from clauseguard.api.policy_analyzer.errors import ConfigurationError, TransportError
from clauseguard.api.policy_analyzer.llm import LLMInvoker
from clauseguard.api.policy_analyzer.models import LLMSettings
from clauseguard.api.policy_analyzer.prompts import ANALYSIS_SYSTEM_PROMPT

PART = re.compile(r"\(Part (\d+) of (\d+)\)")


def _reply(grade: str, **extra) -> str:
    return json.dumps({"grade": grade, "summary": f"Summary for a grade {grade} section.", **extra})


def _part(user_prompt: str) -> int:
    match = PART.search(user_prompt)
    assert match is not None, "chunk prompt must carry its part label"
    return int(match.group(1))


class TestSingleCall:
    @pytest.mark.asyncio
    async def test_short_document_uses_one_call(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: _reply("b"))
        result = await analyze_policy("We respect your privacy.", "Privacy Policy", llm_settings, invoker=invoker)

        assert result.grade == "B"
        assert len(invoker.calls) == 1
        settings, system_prompt, user_prompt = invoker.calls[0]
        assert settings == llm_settings
        assert system_prompt == ANALYSIS_SYSTEM_PROMPT
        assert "Analyze this Privacy Policy" in user_prompt
        assert "We respect your privacy." in user_prompt
        assert "Part" not in user_prompt

    @pytest.mark.asyncio
    async def test_policy_type_key_is_resolved(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: _reply("A"))
        await analyze_policy("text", "terms", llm_settings, invoker=invoker)
        assert "Analyze this Terms of Service" in invoker.calls[0][2]

    @pytest.mark.asyncio
    async def test_unparseable_reply_degrades_to_sentinel(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: "")
        result = await analyze_policy("text", "Privacy Policy", llm_settings, invoker=invoker)
        assert result.grade == "?"


class TestChunked:
    @pytest.mark.asyncio
    async def test_chunks_are_analyzed_concurrently_and_merged(self, llm_settings, make_invoker) -> None:
        grades = {1: "A", 2: "D", 3: "B"}
        invoker = make_invoker(lambda prompt: _reply(grades[_part(prompt)]), delay=0.01)
        text = "x" * 2_500

        result = await analyze_policy(
            text, "Privacy Policy", llm_settings, invoker=invoker, max_text_length=1_000, chunk_reserve=100
        )

        assert result.grade == "D"
        assert result.summary == "Summary for a grade A section."
        assert len(invoker.calls) == 3
        assert invoker.max_in_flight == 3
        labels = sorted(PART.search(call[2]).group(0) for call in invoker.calls)
        assert labels == ["(Part 1 of 3)", "(Part 2 of 3)", "(Part 3 of 3)"]
        assert all("Privacy Policy (Part" in call[2] for call in invoker.calls)

    @pytest.mark.asyncio
    async def test_chunk_prompts_cover_the_document(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: _reply("A"))
        text = "".join(chr(ord("a") + i % 26) for i in range(1_950))

        await analyze_policy(text, "Terms", llm_settings, invoker=invoker, max_text_length=1_000, chunk_reserve=100)

        bodies = {}
        for _, _, prompt in invoker.calls:
            body = prompt.split("---BEGIN POLICY---\n", 1)[1].split("\n---END POLICY---", 1)[0]
            bodies[_part(prompt)] = body
        assert "".join(bodies[i] for i in sorted(bodies)) == text

    @pytest.mark.asyncio
    async def test_default_threshold_from_config(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: _reply("C"))
        await analyze_policy("y" * 120_000, "Privacy Policy", llm_settings, invoker=invoker)
        assert len(invoker.calls) == 3

    @pytest.mark.asyncio
    async def test_malformed_chunk_participates_in_merge(self, llm_settings, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: "garbage" if _part(prompt) == 2 else _reply("B"))
        result = await analyze_policy(
            "z" * 2_000, "Privacy Policy", llm_settings, invoker=invoker, max_text_length=1_000, chunk_reserve=0
        )
        assert result.grade == "B"

    @pytest.mark.asyncio
    async def test_transport_error_fails_whole_analysis(self, llm_settings, make_invoker) -> None:
        def reply(prompt: str) -> str:
            if _part(prompt) == 3:
                raise TransportError("Rate limit exceeded - please wait a moment and try again", 429)
            return _reply("A")

        invoker = make_invoker(reply)
        with pytest.raises(TransportError, match="Rate limit exceeded"):
            await analyze_policy(
                "z" * 3_000, "Privacy Policy", llm_settings, invoker=invoker, max_text_length=1_000, chunk_reserve=0
            )

    @pytest.mark.asyncio
    async def test_failure_waits_for_sibling_chunks(self, llm_settings, make_invoker) -> None:
        finished: list[int] = []

        def reply(prompt: str) -> str:
            part = _part(prompt)
            if part == 1:
                raise TransportError("Server error - the API service encountered an error", 500)
            finished.append(part)
            return _reply("A")

        # Part 1 fails before the slower siblings return.
        invoker = make_invoker(reply)
        original_invoke = invoker.invoke

        async def staggered(settings, system_prompt, user_prompt):
            if _part(user_prompt) != 1:
                await asyncio.sleep(0.02)
            return await original_invoke(settings, system_prompt, user_prompt)

        invoker.invoke = staggered
        with pytest.raises(TransportError, match="Server error"):
            await analyze_policy(
                "z" * 3_000, "Privacy Policy", llm_settings, invoker=invoker, max_text_length=1_000, chunk_reserve=0
            )
        assert sorted(finished) == [2, 3]
        assert invoker.in_flight == 0


class TestConfiguration:
    @pytest.mark.asyncio
    async def test_missing_settings_fail_before_any_call(self, make_invoker) -> None:
        invoker = make_invoker(lambda prompt: _reply("A"))
        with pytest.raises(ConfigurationError):
            await analyze_policy(
                "z" * 3_000, "Privacy Policy", LLMSettings(endpoint="https://x", model="m"),
                invoker=invoker, max_text_length=1_000,
            )
        assert invoker.calls == []

    @pytest.mark.asyncio
    async def test_config_thresholds_from_environment(self, monkeypatch, llm_settings, make_invoker) -> None:
        monkeypatch.setenv("MAX_TEXT_LENGTH", "100")
        monkeypatch.setenv("CHUNK_RESERVE", "50")
        chain.get_settings.cache_clear()
        invoker = make_invoker(lambda prompt: _reply("A"))
        await analyze_policy("q" * 120, "Privacy Policy", llm_settings, invoker=invoker)
        assert len(invoker.calls) == 3


class TestEntryPoint:
    @pytest.mark.asyncio
    async def test_uses_stored_settings_and_real_invoker(self, valkey, llm_settings) -> None:
        from clauseguard.settings_store import save_llm_settings

        save_llm_settings(llm_settings)
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": _reply("F")}}]})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch.object(chain, "LLMInvoker", lambda timeout=None: LLMInvoker(client)):
            result = await analyze_policy_with_llm("We sell everything.", "Privacy Policy")
        await client.aclose()

        assert result.grade == "F"
        assert len(seen) == 1
        assert str(seen[0].url) == "https://llm.example.com/v1/chat/completions"

    @pytest.mark.asyncio
    async def test_unconfigured_store_raises(self, valkey) -> None:
        with pytest.raises(ConfigurationError):
            await analyze_policy_with_llm("text", "Privacy Policy")

    @pytest.mark.asyncio
    async def test_langchain_tool(self, make_invoker, llm_settings) -> None:
        assert analyze_policy_tool.name == "analyze_policy"
        invoker = make_invoker(lambda prompt: _reply("D", criticalQuotes=[{"text": "t", "concern": "c"}]))

        async def fake_entry(policy_text: str, policy_type: str):
            return await analyze_policy(policy_text, policy_type, llm_settings, invoker=invoker)

        with patch.object(chain, "analyze_policy_with_llm", fake_entry):
            output = await analyze_policy_tool.ainvoke({"policy_text": "We own your uploads.", "policy_type": "terms"})

        assert output["grade"] == "D"
        assert output["criticalQuotes"] == [{"text": "t", "concern": "c"}]
        assert "Terms of Service" in invoker.calls[0][2]
