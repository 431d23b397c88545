"""catalog-tools models -- re-exports all public model classes.

    - page.py        -- GraphQL pagination envelope and query-cost extension
    - generation.py  -- description generation inputs, results and summaries
"""

from __future__ import annotations

from catalog_tools.models.generation import (
    LONG_DESCRIPTION_KEY,
    BatchDescriptions,
    DescriptionBatchOutput,
    DescriptionLine,
    GeneratedDescription,
    GenerationResult,
    GenerationSummary,
    GenerationUsage,
    ProductAttributes,
    metafield_map,
)
from catalog_tools.models.page import Page, QueryCost, ThrottleStatus

__all__ = [
    "LONG_DESCRIPTION_KEY",
    "BatchDescriptions",
    "DescriptionBatchOutput",
    "DescriptionLine",
    "GeneratedDescription",
    "GenerationResult",
    "GenerationSummary",
    "GenerationUsage",
    "Page",
    "ProductAttributes",
    "QueryCost",
    "ThrottleStatus",
    "metafield_map",
]
