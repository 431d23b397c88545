"""Abstract base class for LLM service providers.

Defines the structured-generation contract used by the description
pipeline: one call takes a system instruction, a user prompt and a JSON
schema, and returns a :class:`GenerationResult` whose ``subtype`` reports
success or the reason for failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from catalog_tools.models.generation import GenerationResult


# Concrete implementation: AnthropicLLMProvider in catalog_tools/providers/llm/
class ILLMProvider(ABC):
    """Contract for LLM services that can return schema-constrained output."""

    @abstractmethod
    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        max_turns: int = 5,
    ) -> GenerationResult:
        """Generate a payload conforming to ``schema``.

        Parameters
        ----------
        system_prompt:
            The instruction message that sets the model's behaviour.
        user_prompt:
            The request and its data.
        schema:
            JSON schema the structured output must satisfy.
        max_turns:
            Upper bound on internal model turns before giving up with
            ``error_max_turns``.

        Returns
        -------
        GenerationResult
            Never raises for service-side failures; they are reported
            through ``subtype`` and ``errors``.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this LLM provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has credentials configured."""
