"""Tests for LLMClient structured generation."""

from unittest.mock import MagicMock

import httpx
import pytest
from anthropic import AnthropicError, APITimeoutError

from blocker_insights.reporting.schemas import Analysis
from blocker_insights.services.llm_client import (
    Generated,
    GenerationError,
    GenerationFailed,
    LLMClient,
)


@pytest.fixture
def mock_anthropic():
    """Create a mock Anthropic client."""
    return MagicMock()


@pytest.fixture
def llm(mock_anthropic, settings):
    return LLMClient(client=mock_anthropic, settings=settings)


@pytest.fixture
def analysis() -> Analysis:
    return Analysis(summary="s", action_items=[], insights=["i"])


@pytest.mark.asyncio
async def test_returns_generated_output(llm, mock_anthropic, analysis, settings):
    mock_anthropic.beta.messages.parse.return_value = MagicMock(parsed_output=analysis)

    outcome = await llm.generate("system", "prompt", Analysis)

    assert outcome == Generated(output=analysis)
    kwargs = mock_anthropic.beta.messages.parse.call_args.kwargs
    assert kwargs["model"] == settings.anthropic_model
    assert kwargs["system"] == "system"
    assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
    assert kwargs["output_format"] is Analysis
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 2000
    assert kwargs["timeout"] == settings.generation_timeout_seconds


@pytest.mark.asyncio
async def test_overrides_sampling(llm, mock_anthropic, analysis):
    mock_anthropic.beta.messages.parse.return_value = MagicMock(parsed_output=analysis)

    await llm.generate("system", "prompt", Analysis, temperature=0.0, max_tokens=500)

    kwargs = mock_anthropic.beta.messages.parse.call_args.kwargs
    assert kwargs["temperature"] == 0.0
    assert kwargs["max_tokens"] == 500


@pytest.mark.asyncio
async def test_timeout_becomes_failure(llm, mock_anthropic):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    mock_anthropic.beta.messages.parse.side_effect = APITimeoutError(request=request)

    outcome = await llm.generate("system", "prompt", Analysis)

    assert isinstance(outcome, GenerationFailed)
    assert isinstance(outcome.error, GenerationError)


@pytest.mark.asyncio
async def test_missing_parsed_output_becomes_failure(llm, mock_anthropic):
    mock_anthropic.beta.messages.parse.return_value = MagicMock(parsed_output=None)

    outcome = await llm.generate("system", "prompt", Analysis)

    assert isinstance(outcome, GenerationFailed)


@pytest.mark.asyncio
async def test_unconfigured_client_fails_without_raising(settings):
    llm = LLMClient(settings=settings)

    assert llm.is_configured is False
    outcome = await llm.generate("system", "prompt", Analysis)
    assert isinstance(outcome, GenerationFailed)
    assert "ANTHROPIC_API_KEY" in str(outcome.error)


@pytest.mark.asyncio
async def test_non_api_sdk_error_becomes_failure(llm, mock_anthropic):
    mock_anthropic.beta.messages.parse.side_effect = AnthropicError(
        "credentials unavailable"
    )

    outcome = await llm.generate("system", "prompt", Analysis)

    assert isinstance(outcome, GenerationFailed)
    assert "credentials unavailable" in str(outcome.error)


@pytest.mark.asyncio
async def test_worker_thread_error_becomes_failure(llm, mock_anthropic):
    mock_anthropic.beta.messages.parse.side_effect = RuntimeError("event loop is closed")

    outcome = await llm.generate("system", "prompt", Analysis)

    assert isinstance(outcome, GenerationFailed)


@pytest.mark.asyncio
async def test_malformed_response_becomes_failure(llm, mock_anthropic):
    def parse_malformed(**kwargs):
        # Missing required actionItems and insights
        return Analysis.model_validate({"summary": "only a summary"})

    mock_anthropic.beta.messages.parse.side_effect = parse_malformed

    outcome = await llm.generate("system", "prompt", Analysis)

    assert isinstance(outcome, GenerationFailed)
    assert "schema" in str(outcome.error)
