"""
Tests for the AI insight client

The HTTP side is faked with httpx.MockTransport; nothing leaves the process.
"""
import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from mindfit.services.admin_stats import compute_mentee_status
from mindfit.services.insights import (
    InsightClient, InsightsUnavailable, build_admin_prompt, build_coach_prompt, build_progress_prompt
)
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate

LOSS = GoalConfiguration(GoalType.WEIGHT_LOSS, initial_weight=100, target_weight=80)
UPDATES = [WeeklyUpdate(1, 99.0), WeeklyUpdate(2, 98.0)]


def make_client(handler, api_key="test-key"):
    return InsightClient(
        base_url="https://ai.example.test/v1/chat/completions",
        api_key=api_key,
        model="test-model",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def completion(text):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


class TestPrompts:

    def test_progress_prompt(self):
        prompt = build_progress_prompt("Ana", LOSS, UPDATES)
        assert "Mentee: Ana" in prompt
        assert "weight loss" in prompt
        assert "Progress: 10.0%" in prompt
        assert "week 2: 98.0 kg" in prompt

    def test_admin_prompt_lists_attention_reasons(self):
        now = datetime(2026, 5, 20, tzinfo=timezone.utc)
        status = compute_mentee_status([], LOSS, now)
        prompt = build_admin_prompt("Ana", LOSS, status, [])
        assert "ATTENTION NEEDED: no check-ins" in prompt
        assert "Total check-ins: 0" in prompt

    def test_coach_prompt(self):
        prompt = build_coach_prompt("Ana", LOSS, UPDATES)
        assert "Mentee: Ana" in prompt
        assert "Target weight: 80 kg" in prompt
        assert "Latest check-ins: week 1: 99.0 kg, week 2: 98.0 kg" in prompt
        assert "150 words" in prompt

    def test_coach_prompt_without_checkins(self):
        assert "Latest check-ins: none" in build_coach_prompt("Ana", LOSS, [])


class TestInsightClient:

    def test_returns_completion_text(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return completion("Great work this week.")

        text = asyncio.run(make_client(handler).progress_insights("Ana", LOSS, UPDATES))

        assert text == "Great work this week."
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["model"] == "test-model"
        assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]

    def test_missing_key(self):
        client = make_client(lambda request: completion("unused"), api_key="")
        with pytest.raises(InsightsUnavailable):
            asyncio.run(client.complete("system", "prompt"))

    def test_http_error(self):
        client = make_client(lambda request: httpx.Response(500, json={"error": "boom"}))
        with pytest.raises(InsightsUnavailable):
            asyncio.run(client.complete("system", "prompt"))

    def test_malformed_body(self):
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(InsightsUnavailable):
            asyncio.run(client.complete("system", "prompt"))

    def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(InsightsUnavailable):
            asyncio.run(client.complete("system", "prompt"))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(InsightsUnavailable):
            asyncio.run(make_client(handler).complete("system", "prompt"))

    def test_chat_sends_history_after_system_prompt(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return completion("Aim for 0.5 kg a week.")

        history = [
            {"role": "user", "content": "How fast should I lose weight?"},
            {"role": "assistant", "content": "About 1% a week."},
            {"role": "user", "content": "In kg?"},
        ]
        text = asyncio.run(make_client(handler).coach_reply("Ana", LOSS, UPDATES, history))

        assert text == "Aim for 0.5 kg a week."
        messages = seen["body"]["messages"]
        assert messages[0]["role"] == "system"
        assert "Mentee: Ana" in messages[0]["content"]
        assert messages[1:] == history

    def test_chat_without_key(self):
        client = make_client(lambda request: completion("unused"), api_key="")
        with pytest.raises(InsightsUnavailable):
            asyncio.run(client.chat("system", [{"role": "user", "content": "hi"}]))
