"""Builds the prompt and output contract for one batch of products and
turns the provider's structured result into positionally matched
descriptions.

Each product contributes only the attributes it actually has, so the model
never sees empty fields.  The output schema pins the result array to the
batch size in both directions (``minItems`` and ``maxItems``) and the
result is still checked against the batch length before use.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from catalog_tools.config.prompts import DESCRIPTION_PROMPT_HEADER, DESCRIPTION_SYSTEM_PROMPT
from catalog_tools.interfaces.llm_provider import ILLMProvider
from catalog_tools.models.generation import (
    LONG_DESCRIPTION_KEY,
    BatchDescriptions,
    DescriptionBatchOutput,
    ProductAttributes,
)
from catalog_tools.utils.errors import BatchLengthMismatchError, GenerationError
from catalog_tools.utils.logging import get_logger


def extract_attributes(record: dict[str, Any]) -> ProductAttributes:
    """Flatten a product record into the attributes the prompt may use."""
    return ProductAttributes.from_record(record)


def format_product(attrs: ProductAttributes, position: int) -> str:
    """Render one product block, skipping missing attributes.

    ``position`` is 1-based.
    """
    lines = [f"Product {position}: {attrs.title or ''}".rstrip()]
    if attrs.product_type:
        lines.append(f"Type: {attrs.product_type}")
    if attrs.vendor:
        lines.append(f"Vendor: {attrs.vendor}")
    if attrs.tags:
        lines.append(f"Tags: {', '.join(attrs.tags)}")

    for key, value in attrs.metafields.items():
        if key == LONG_DESCRIPTION_KEY:
            continue
        if value:
            lines.append(f"{key}: {value}")

    return "\n".join(lines)


def build_prompt(batch: list[dict[str, Any]]) -> str:
    """The user prompt for a batch: a header plus one block per product."""
    blocks = [
        format_product(extract_attributes(record), i + 1)
        for i, record in enumerate(batch)
    ]
    header = DESCRIPTION_PROMPT_HEADER.format(count=len(batch))
    return header + "\n\n" + "\n\n".join(blocks)


def output_schema(length: int) -> dict[str, Any]:
    """JSON schema requiring exactly ``length`` description pairs."""
    return {
        "type": "object",
        "properties": {
            "products": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "description": {"type": "string"},
                        "longDescription": {"type": "string"},
                    },
                    "required": ["description", "longDescription"],
                    "additionalProperties": False,
                },
                "minItems": length,
                "maxItems": length,
            },
        },
        "required": ["products"],
        "additionalProperties": False,
    }


class DescriptionGenerator:
    """Generates descriptions for one batch through an :class:`ILLMProvider`.

    Parameters
    ----------
    llm:
        The structured-output capable provider.
    max_turns:
        Internal turn budget passed to the provider per batch.
    """

    def __init__(self, llm: ILLMProvider, max_turns: int = 5) -> None:
        self._llm = llm
        self._max_turns = max_turns
        self._logger = get_logger(__name__)

    async def generate_batch(self, batch: list[dict[str, Any]]) -> BatchDescriptions:
        """Generate one description pair per product, in input order.

        Raises
        ------
        GenerationError
            If the provider reports a non-success subtype, or the payload
            does not match the output contract.
        BatchLengthMismatchError
            If the number of results differs from ``len(batch)``.
        """
        self._logger.info("batch_started", size=len(batch))
        result = await self._llm.generate_structured(
            system_prompt=DESCRIPTION_SYSTEM_PROMPT,
            user_prompt=build_prompt(batch),
            schema=output_schema(len(batch)),
            max_turns=self._max_turns,
        )
        provider = self._llm.get_provider_name()

        if not result.is_success:
            raise GenerationError(result.subtype, result.errors, provider_name=provider)

        try:
            output = DescriptionBatchOutput.model_validate(result.structured_output or {})
        except ValidationError as exc:
            raise GenerationError(
                "error_invalid_structured_output",
                [str(exc)],
                provider_name=provider,
            ) from exc

        if len(output.products) != len(batch):
            raise BatchLengthMismatchError(
                expected=len(batch),
                actual=len(output.products),
                provider_name=provider,
            )

        return BatchDescriptions(
            descriptions=output.products,
            cost_usd=result.total_cost_usd,
            usage=result.usage,
        )
