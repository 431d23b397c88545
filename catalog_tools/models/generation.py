"""Pydantic v2 models for batched description generation.

Covers both sides of the generation contract: the flattened product view
that goes into the prompt, the structured result that comes back from the
provider, and the line written to stdout.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LONG_DESCRIPTION_KEY = "longDescription"


def metafield_map(record: dict[str, Any]) -> dict[str, Any]:
    """Collapse a record's metafield list into ``{key: value}``.

    Later entries win when two namespaces share a key.
    """
    metafields = record.get("metafields")
    if not isinstance(metafields, list):
        return {}
    return {m["key"]: m.get("value") for m in metafields if isinstance(m, dict) and "key" in m}


def _text(value: Any) -> str | None:
    """Render a scalar attribute as text; missing or empty becomes ``None``."""
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _tags(value: Any) -> list[str]:
    # Upstream sends a list; a bare string is one tag, not one per character.
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [_text(t) for t in value if _text(t) is not None]
    return []


class ProductAttributes(BaseModel):
    """Every attribute of a product that the prompt may mention."""

    model_config = ConfigDict(frozen=True)

    id: Any = Field(description="Upstream product identity.")
    title: str | None = Field(default=None)
    product_type: str | None = Field(default=None)
    vendor: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list)
    existing_description: str | None = Field(default=None)
    existing_long_description: str | None = Field(default=None)
    metafields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ProductAttributes:
        """Flatten an input record.

        Scalars of any JSON type are rendered as text and empty values become
        ``None``, so odd upstream types never fail validation.
        """
        mf = metafield_map(record)
        return cls(
            id=record.get("id"),
            title=_text(record.get("title")),
            product_type=_text(record.get("productType")),
            vendor=_text(record.get("vendor")),
            tags=_tags(record.get("tags")),
            existing_description=_text(record.get("description")),
            existing_long_description=_text(mf.get(LONG_DESCRIPTION_KEY)),
            metafields=mf,
        )


class GeneratedDescription(BaseModel):
    """One generated result, positionally matched to its input product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    description: str
    long_description: str = Field(alias="longDescription")


class DescriptionBatchOutput(BaseModel):
    """The structured payload the generation schema asks for."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    products: list[GeneratedDescription]


class GenerationUsage(BaseModel):
    """Token counts reported for one generation call."""

    model_config = ConfigDict(frozen=True)

    input_tokens: int = 0
    output_tokens: int = 0


class GenerationResult(BaseModel):
    """Outcome of one structured generation call.

    ``subtype`` is ``"success"`` or an ``error_*`` code.  On success
    ``structured_output`` holds the schema-conforming payload.
    """

    model_config = ConfigDict(frozen=True)

    subtype: str
    structured_output: dict[str, Any] | None = None
    errors: list[str] = Field(default_factory=list)
    total_cost_usd: float = 0.0
    usage: GenerationUsage = Field(default_factory=GenerationUsage)
    num_turns: int = 0

    @property
    def is_success(self) -> bool:
        return self.subtype == "success"


class BatchDescriptions(BaseModel):
    """Validated output of one batch, with its cost and usage."""

    model_config = ConfigDict(frozen=True)

    descriptions: list[GeneratedDescription]
    cost_usd: float = 0.0
    usage: GenerationUsage = Field(default_factory=GenerationUsage)


class DescriptionLine(BaseModel):
    """The record written to stdout for each generated product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Any
    handle: Any = None
    title: Any = None
    description: str
    long_description: str = Field(alias="longDescription")

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class GenerationSummary(BaseModel):
    """Run-level totals reported at the end of a generation run."""

    model_config = ConfigDict(frozen=True)

    read: int = 0
    skipped: int = 0
    to_generate: int = 0
    completed: int = 0
    batches: int = 0
    cost_usd: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
