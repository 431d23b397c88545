"""Utility modules for catalog-tools.

- **errors** -- exception hierarchy rooted at CatalogToolsError; each failure
  class of the pipelines has its own subclass.
- **logging** -- structlog setup (console or JSON renderer, always stderr)
  plus the coloured success/failure status lines.
- **concurrency** -- semaphore-bounded gather and the wait-for-all join.
- **jsonl** -- incremental JSON-lines reader and the stdout line sink.
"""

from catalog_tools.utils.concurrency import gather_all, make_semaphore, throttled_gather
from catalog_tools.utils.errors import (
    BatchLengthMismatchError,
    CatalogToolsError,
    ConfigurationError,
    GenerationError,
    GraphQLError,
    MalformedInputError,
    ShopifyHTTPError,
)
from catalog_tools.utils.jsonl import JsonLineSink, iter_json_lines, stdin_chunk_reader
from catalog_tools.utils.logging import configure_logging, get_logger

__all__ = [
    "BatchLengthMismatchError",
    "CatalogToolsError",
    "ConfigurationError",
    "GenerationError",
    "GraphQLError",
    "JsonLineSink",
    "MalformedInputError",
    "ShopifyHTTPError",
    "configure_logging",
    "gather_all",
    "get_logger",
    "iter_json_lines",
    "make_semaphore",
    "stdin_chunk_reader",
    "throttled_gather",
]
