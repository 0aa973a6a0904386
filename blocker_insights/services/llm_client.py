"""LLM client wrapper for Anthropic structured outputs.

``generate`` never raises for generation problems: it returns either
``Generated`` with the parsed output or ``GenerationFailed`` carrying a
GenerationError, and the caller decides what to do with each.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from anthropic import Anthropic, APIError
from pydantic import BaseModel, ValidationError

from blocker_insights.config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GenerationError(Exception):
    """Raised when text generation fails or returns unusable output."""

    pass


@dataclass(frozen=True)
class Generated(Generic[T]):
    """Successful generation with schema-valid output."""

    output: T


@dataclass(frozen=True)
class GenerationFailed:
    """Failed generation (API error, timeout, invalid output, no client)."""

    error: GenerationError


GenerationOutcome = Union[Generated[T], GenerationFailed]


class LLMClient:
    """Anthropic client wrapper with structured output support.

    Uses client.beta.messages.parse with Pydantic models for
    schema-valid output. Every request carries an explicit timeout.
    """

    def __init__(
        self,
        client: Anthropic | None = None,
        settings: Settings | None = None,
    ):
        """Initialize LLM client.

        Args:
            client: Optional Anthropic client for dependency injection.
                   If not provided, creates one from settings.
            settings: Application settings. Defaults to cached settings.
        """
        self._settings = settings or get_settings()
        if client is not None:
            self._client = client
        elif self._settings.anthropic_api_key:
            self._client = Anthropic(
                api_key=self._settings.anthropic_api_key,
                max_retries=1,
            )
        else:
            # Allow initialization without API key; generation then fails over
            self._client = None

    @property
    def is_configured(self) -> bool:
        """Whether an Anthropic client is available."""
        return self._client is not None

    async def generate(
        self,
        system: str,
        prompt: str,
        response_model: type[T],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationOutcome[T]:
        """Generate structured output for a prompt.

        Args:
            system: System instruction
            prompt: The user prompt
            response_model: Pydantic model defining the output schema
            temperature: Sampling temperature (default from settings)
            max_tokens: Output token cap (default from settings)

        Returns:
            Generated with the parsed output, or GenerationFailed
        """
        try:
            output = await self._parse(
                system,
                prompt,
                response_model,
                temperature=(
                    self._settings.generation_temperature
                    if temperature is None
                    else temperature
                ),
                max_tokens=max_tokens or self._settings.generation_max_tokens,
            )
        except GenerationError as e:
            logger.warning(f"Generation failed: {e}")
            return GenerationFailed(error=e)
        return Generated(output=output)

    async def _parse(
        self,
        system: str,
        prompt: str,
        response_model: type[T],
        *,
        temperature: float,
        max_tokens: int,
    ) -> T:
        if self._client is None:
            raise GenerationError(
                "Anthropic client not initialized. "
                "Set ANTHROPIC_API_KEY environment variable."
            )

        try:
            response = await asyncio.to_thread(
                self._client.beta.messages.parse,
                model=self._settings.anthropic_model,
                max_tokens=max_tokens,
                temperature=temperature,
                betas=["structured-outputs-2025-11-13"],
                system=system,
                messages=[{"role": "user", "content": prompt}],
                output_format=response_model,
                timeout=self._settings.generation_timeout_seconds,
            )
        except APIError as e:
            # Includes connection errors and request timeouts
            raise GenerationError(f"Anthropic API error: {e}") from e
        except ValidationError as e:
            raise GenerationError(f"Response did not match schema: {e}") from e
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e

        parsed = response.parsed_output
        if parsed is None:
            raise GenerationError("Response contained no structured output")
        return parsed
