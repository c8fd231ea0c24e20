"""
tests/agents/test_gemini_agent.py

Unit tests for `GeminiAgent` (`ngle_analyzer.agents.gemini_agent`).

These tests verify:
    - Initialization from configuration and missing-key handling.
    - The request sent to `client.aio.models.generate_content`.
    - Raw text passthrough, including empty replies.
    - Translation of `google.genai.errors` and `httpx` exceptions into
      `ServiceCallError` kinds.
    - Token usage tracking.

The SDK client is replaced by a `MagicMock` whose `generate_content` is an `AsyncMock`.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from google.genai import errors

from ngle_analyzer.agents.errors import FailureKind, ServiceCallError
from ngle_analyzer.agents.gemini_agent import GeminiAgent

MOCK_CONFIG = {
    "gemini": {
        "api_key": "test-gemini-key",
        "model_name": "gemini-2.5-flash",
        "temperature": None,
    }
}


def mock_response(text, total_tokens=None):
    response = MagicMock()
    response.text = text
    if total_tokens is None:
        response.usage_metadata = None
    else:
        response.usage_metadata = MagicMock(total_token_count=total_tokens)
    return response


@pytest.fixture
def agent():
    with patch("ngle_analyzer.agents.gemini_agent.config", MOCK_CONFIG):
        agent = GeminiAgent()
    agent.client = MagicMock()
    agent.client.aio.models.generate_content = AsyncMock()
    return agent


# === Initialization ===


def test_initialization_missing_api_key():
    with patch("ngle_analyzer.agents.gemini_agent.config", {"gemini": {"api_key": ""}}):
        with pytest.raises(ValueError, match="Gemini API key is not set"):
            GeminiAgent()


def test_initialization_without_gemini_section():
    with patch("ngle_analyzer.agents.gemini_agent.config", {}):
        with pytest.raises(ValueError, match="Gemini API key is not set"):
            GeminiAgent()


def test_initialization_success(agent):
    assert agent.model == "gemini-2.5-flash"
    assert agent.get_provider_name() == "gemini"
    assert agent.get_model_name() == "gemini-2.5-flash"


def test_default_model_name():
    with patch("ngle_analyzer.agents.gemini_agent.config", {"gemini": {"api_key": "k"}}):
        agent = GeminiAgent()
    assert agent.model == "gemini-2.5-flash"


# === Successful calls ===


@pytest.mark.asyncio
async def test_generate_returns_raw_text(agent, el_perro_json):
    agent.client.aio.models.generate_content.return_value = mock_response(el_perro_json)

    text = await agent.generate("Analiza: El perro que ladra no muerde")

    assert text == el_perro_json
    kwargs = agent.client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert kwargs["contents"] == "Analiza: El perro que ladra no muerde"
    assert kwargs["config"].response_mime_type == "application/json"


@pytest.mark.asyncio
async def test_generate_passes_temperature_when_configured():
    config = {"gemini": {"api_key": "k", "temperature": 0.3}}
    with patch("ngle_analyzer.agents.gemini_agent.config", config):
        agent = GeminiAgent()
    agent.client = MagicMock()
    agent.client.aio.models.generate_content = AsyncMock(return_value=mock_response("{}"))

    await agent.generate("prompt")

    assert agent.client.aio.models.generate_content.await_args.kwargs["config"].temperature == 0.3


@pytest.mark.asyncio
async def test_generate_empty_text_returns_empty_string(agent):
    agent.client.aio.models.generate_content.return_value = mock_response(None)

    assert await agent.generate("prompt") == ""


@pytest.mark.asyncio
async def test_token_usage_is_tracked(agent):
    agent.client.aio.models.generate_content.return_value = mock_response("{}", total_tokens=1834)

    with patch("ngle_analyzer.agents.gemini_agent.metrics_tracker") as mock_metrics:
        await agent.generate("prompt")

    mock_metrics.increment_api_calls.assert_called_once()
    mock_metrics.add_tokens.assert_called_once_with(1834)


@pytest.mark.asyncio
async def test_missing_usage_is_not_tracked(agent):
    agent.client.aio.models.generate_content.return_value = mock_response("{}")

    with patch("ngle_analyzer.agents.gemini_agent.metrics_tracker") as mock_metrics:
        await agent.generate("prompt")

    mock_metrics.increment_api_calls.assert_called_once()
    mock_metrics.add_tokens.assert_not_called()


# === Error translation ===


def api_error_json(code, status, message):
    return {"error": {"code": code, "message": message, "status": status}}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raised, expected_kind, expected_status",
    [
        (
            errors.ServerError(503, api_error_json(503, "UNAVAILABLE", "The model is overloaded.")),
            FailureKind.SERVER,
            503,
        ),
        (
            errors.ClientError(400, api_error_json(400, "INVALID_ARGUMENT", "API key not valid.")),
            FailureKind.CREDENTIAL,
            400,
        ),
        (
            errors.ClientError(403, api_error_json(403, "PERMISSION_DENIED", "Forbidden")),
            FailureKind.CREDENTIAL,
            403,
        ),
        (
            errors.ClientError(429, api_error_json(429, "RESOURCE_EXHAUSTED", "Quota exceeded")),
            FailureKind.OTHER,
            429,
        ),
        (httpx.ConnectError("All connection attempts failed"), FailureKind.NETWORK, None),
        (httpx.ReadTimeout("The read operation timed out"), FailureKind.TIMEOUT, None),
        (asyncio.TimeoutError(), FailureKind.TIMEOUT, None),
        (RuntimeError("fetch failed"), FailureKind.NETWORK, None),
        (RuntimeError("unexpected"), FailureKind.OTHER, None),
    ],
)
async def test_exceptions_are_translated(agent, raised, expected_kind, expected_status):
    agent.client.aio.models.generate_content.side_effect = raised

    with pytest.raises(ServiceCallError) as exc_info:
        await agent.generate("prompt")

    assert exc_info.value.kind is expected_kind
    assert exc_info.value.status_code == expected_status
    assert exc_info.value.__cause__ is raised


@pytest.mark.asyncio
async def test_generate_makes_a_single_attempt(agent):
    agent.client.aio.models.generate_content.side_effect = errors.ServerError(
        500, api_error_json(500, "INTERNAL", "Internal error encountered.")
    )

    with pytest.raises(ServiceCallError):
        await agent.generate("prompt")

    assert agent.client.aio.models.generate_content.await_count == 1
