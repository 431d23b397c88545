"""Anthropic LLM provider adapter.

Wraps the ``anthropic`` async client to implement :class:`ILLMProvider`.

Structured output is enforced through a single forced tool: the requested
JSON schema becomes the tool's ``input_schema`` and ``tool_choice`` pins the
model to it, so the reply is a ``tool_use`` block whose ``input`` is the
payload.  The tool is never executed; it exists only as the output contract.

A turn that ends without a usable payload is answered with an error
``tool_result`` (or a reminder when no tool was called) and the model gets
another turn, up to ``max_turns``.  Failures are reported through the
result ``subtype`` rather than raised:

    success                  payload received
    error_max_turns          no usable payload within max_turns
    error_during_execution   the API call itself failed
"""

from __future__ import annotations

from typing import Any

import anthropic

from catalog_tools.config.settings import Settings
from catalog_tools.interfaces.llm_provider import ILLMProvider
from catalog_tools.models.generation import GenerationResult, GenerationUsage
from catalog_tools.utils.logging import get_logger

_OUTPUT_TOOL = "submit_structured_output"


class AnthropicLLMProvider(ILLMProvider):
    """LLM provider backed by the Anthropic Claude Messages API.

    The model defaults to ``claude-haiku-4-5``; batch description work
    needs volume more than depth.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.anthropic_api_key
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        self._model = settings.description_model
        self._max_tokens = settings.description_max_tokens
        self._input_cost = settings.input_cost_per_mtok
        self._output_cost = settings.output_cost_per_mtok
        self._logger = get_logger(__name__)

    def _cost(self, input_tokens: int, output_tokens: int) -> float:
        return (input_tokens * self._input_cost + output_tokens * self._output_cost) / 1_000_000

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        max_turns: int = 5,
    ) -> GenerationResult:
        tool = {
            "name": _OUTPUT_TOOL,
            "description": "Submit the final answer. The input must match the schema exactly.",
            "input_schema": schema,
        }
        messages: list[dict[str, Any]] = [{"role": "user", "content": user_prompt}]
        input_tokens = 0
        output_tokens = 0
        turns = 0

        def _result(subtype: str, **kwargs: Any) -> GenerationResult:
            return GenerationResult(
                subtype=subtype,
                total_cost_usd=self._cost(input_tokens, output_tokens),
                usage=GenerationUsage(input_tokens=input_tokens, output_tokens=output_tokens),
                num_turns=turns,
                **kwargs,
            )

        while turns < max_turns:
            turns += 1
            try:
                response = await self._client.messages.create(
                    model=self._model,
                    max_tokens=self._max_tokens,
                    system=system_prompt,
                    messages=messages,
                    tools=[tool],
                    tool_choice={"type": "tool", "name": _OUTPUT_TOOL},
                )
            except anthropic.APIError as exc:
                self._logger.warning("anthropic_request_failed", error=str(exc), turn=turns)
                return _result("error_during_execution", errors=[f"Anthropic API error: {exc}"])

            input_tokens += response.usage.input_tokens
            output_tokens += response.usage.output_tokens

            tool_use = next(
                (b for b in response.content if b.type == "tool_use" and b.name == _OUTPUT_TOOL),
                None,
            )
            # max_tokens can cut the tool input short; never trust a truncated payload.
            if tool_use is not None and response.stop_reason != "max_tokens" and isinstance(tool_use.input, dict):
                self._logger.info(
                    "anthropic_structured_output",
                    model=self._model,
                    turns=turns,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                )
                return _result("success", structured_output=tool_use.input)

            messages.append({"role": "assistant", "content": response.content})
            if tool_use is not None:
                messages.append({
                    "role": "user",
                    "content": [{
                        "type": "tool_result",
                        "tool_use_id": tool_use.id,
                        "is_error": True,
                        "content": "Output was incomplete. Submit the complete answer again.",
                    }],
                })
            else:
                messages.append({
                    "role": "user",
                    "content": f"Submit the answer with the {_OUTPUT_TOOL} tool.",
                })

        self._logger.warning("anthropic_max_turns", model=self._model, turns=turns)
        return _result(
            "error_max_turns",
            errors=[f"no structured output after {turns} turns"],
        )

    def is_available(self) -> bool:
        """Return ``True`` if an Anthropic API key is configured."""
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return "anthropic"
