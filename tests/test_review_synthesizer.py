"""
Unit Tests — Review Synthesizer
================================
Exercises the rich review flow against a mocked MiniMax endpoint.
No real network calls: httpx.AsyncClient.post is patched in every test.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from diffshield.core.config import MiniMaxConfig
from diffshield.llm.client import MiniMaxClient
from diffshield.models.analysis import DiffStats, DocTypeClassification, ReviewFinding, SemanticDiff
from diffshield.models.pr_context import CodeFileInfo, PRContext
from diffshield.services.review_synthesizer import (
    SynthesisOutcome,
    generate_v2_review,
    synthesize_v2_review,
)
from diffshield.utils.failure_reasons import (
    HTTP_ERROR,
    MISSING_CREDENTIALS,
    NO_JSON_FOUND,
    SCHEMA_VIOLATION,
    TRANSPORT_FAILURE,
)


VALID_CONTENT = json.dumps({
    "prIntent": "Improve onboarding",
    "changeOverview": "Docs updated",
    "verdict": {"verdict": "approved", "confidence": 0.8, "summary": "Looks good"},
})

CONFIG = MiniMaxConfig(api_key="test-key", group_id="group-1")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    return resp


def _completion(content):
    return _response(body={"choices": [{"message": {"role": "assistant", "content": content}}]})


def _args():
    return dict(
        pr_context=PRContext(title="Update README", body=None, author="dev", base_ref="main", head_ref="docs"),
        doc_type=DocTypeClassification(type="readme", confidence=0.92),
        semantic_diff=SemanticDiff(stats=DiffStats(added=2, removed=0, modified=1, moved=0)),
        findings=[ReviewFinding(kind="warning", file="README.md", message="Missing install section")],
    )


def _run(coro):
    return asyncio.run(coro)


# ===========================================================================
# Configuration errors
# ===========================================================================
@pytest.mark.parametrize("config", [
    MiniMaxConfig(api_key="", group_id="group-1"),
    MiniMaxConfig(api_key="test-key", group_id=""),
    MiniMaxConfig(api_key="", group_id=""),
])
def test_missing_credentials_makes_no_network_call(config):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        output = _run(generate_v2_review(config=config, **_args()))

    assert output is None
    assert mock_post.call_count == 0


def test_missing_credentials_outcome_is_unavailable():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock):
        result = _run(synthesize_v2_review(config=MiniMaxConfig("", ""), **_args()))
    assert result.outcome == SynthesisOutcome.UNAVAILABLE
    assert result.reason == MISSING_CREDENTIALS


# ===========================================================================
# Successful call
# ===========================================================================
def test_success_returns_parsed_review():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _completion(VALID_CONTENT)
        output = _run(generate_v2_review(config=CONFIG, **_args()))

    assert mock_post.call_count == 1
    assert output.pr_intent == "Improve onboarding"
    assert output.key_risks == []
    assert output.checklist == []
    assert output.pr_body_suggestion == {"sections": []}
    assert output.verdict.verdict == "approved"
    assert output.verdict.confidence == 0.8


def test_request_shape():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _completion(VALID_CONTENT)
        _run(generate_v2_review(
            config=CONFIG,
            code_files=[CodeFileInfo(filename="src/app.py", additions=3, deletions=1)],
            **_args(),
        ))

    kwargs = mock_post.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer test-key"
    assert kwargs["headers"]["Content-Type"] == "application/json"

    body = kwargs["json"]
    assert body["groupId"] == "group-1"
    assert body["temperature"] == 0.3
    assert body["max_tokens"] == 2000
    assert len(body["messages"]) == 1
    assert body["messages"][0]["role"] == "user"
    assert "src/app.py: +3/-1" in body["messages"][0]["content"]
    assert "[WARNING] README.md: Missing install section" in body["messages"][0]["content"]


def test_injected_http_client_is_used():
    http = MagicMock()
    http.post = AsyncMock(return_value=_completion(VALID_CONTENT))
    client = MiniMaxClient(api_url="https://example.test/chat", model="test-model", http_client=http)

    output = _run(generate_v2_review(config=CONFIG, client=client, **_args()))

    assert output is not None
    assert http.post.call_args.args[0] == "https://example.test/chat"
    assert http.post.call_args.kwargs["json"]["model"] == "test-model"


# ===========================================================================
# Transport failures
# ===========================================================================
@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
def test_non_success_status_returns_none(status):
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _response(status=status)
        result = _run(synthesize_v2_review(config=CONFIG, **_args()))

    assert result.output is None
    assert result.outcome == SynthesisOutcome.UNAVAILABLE
    assert result.reason == HTTP_ERROR


def test_transport_exception_returns_none():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = httpx.ConnectError("connection refused")
        result = _run(synthesize_v2_review(config=CONFIG, **_args()))

    assert result.output is None
    assert result.outcome == SynthesisOutcome.UNAVAILABLE
    assert result.reason == TRANSPORT_FAILURE


def test_unexpected_exception_is_contained():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = RuntimeError("boom")
        output = _run(generate_v2_review(config=CONFIG, **_args()))

    assert output is None


# ===========================================================================
# Invalid responses
# ===========================================================================
def test_missing_choices_is_invalid():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _response(body={"base_resp": {"status_code": 1004}})
        result = _run(synthesize_v2_review(config=CONFIG, **_args()))

    assert result.outcome == SynthesisOutcome.INVALID
    assert result.reason == NO_JSON_FOUND


def test_missing_verdict_is_invalid():
    content = json.dumps({"prIntent": "x", "changeOverview": "y"})
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _completion(content)
        result = _run(synthesize_v2_review(config=CONFIG, **_args()))

    assert result.output is None
    assert result.outcome == SynthesisOutcome.INVALID
    assert result.reason == SCHEMA_VIOLATION


def test_prose_wrapped_json_is_valid():
    with patch("httpx.AsyncClient.post", new_callable=AsyncMock) as mock_post:
        mock_post.return_value = _completion(f"Here is the result: {VALID_CONTENT} thanks")
        result = _run(synthesize_v2_review(config=CONFIG, **_args()))

    assert result.outcome == SynthesisOutcome.VALID
    assert result.ok
