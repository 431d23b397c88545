"""Shared pytest fixtures for the catalog-tools test suite."""

from __future__ import annotations

import io
import re
from typing import Any, AsyncIterator
from unittest.mock import MagicMock

import pytest

from catalog_tools.config.settings import Settings
from catalog_tools.interfaces.catalog_provider import ConnectionExtractor, ICatalogProvider
from catalog_tools.interfaces.llm_provider import ILLMProvider
from catalog_tools.models.generation import GenerationResult, GenerationUsage
from catalog_tools.models.page import Page
from catalog_tools.providers.shopify.queries import (
    MEDIA_QUERY,
    METAFIELDS_QUERY,
    PRODUCTS_QUERY,
    VARIANTS_QUERY,
)
from catalog_tools.utils.errors import ShopifyHTTPError
from catalog_tools.utils.logging import configure_logging

_PRODUCT_LINE = re.compile(r"^Product (\d+): (.*)$", re.MULTILINE)


@pytest.fixture(autouse=True)
def _logging() -> None:
    """Route structlog to stderr so stdout assertions stay clean."""
    configure_logging("DEBUG")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def connection(
    nodes: list[dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: str | None = None,
) -> dict[str, Any]:
    """A GraphQL connection object around ``nodes``."""
    return {
        "edges": [{"node": n} for n in nodes],
        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
    }


def http_response(
    body: dict[str, Any] | None = None,
    status_code: int = 200,
    text: str = "",
) -> MagicMock:
    """A stand-in for ``httpx.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.is_success = 200 <= status_code < 300
    response.json.return_value = body or {}
    response.text = text
    return response


def product(pid: str, title: str = "", description: str = "", long_description: str = "", **extra: Any) -> dict[str, Any]:
    """An input record as produced by the export."""
    metafields = []
    if long_description:
        metafields.append({
            "namespace": "custom",
            "key": "longDescription",
            "value": long_description,
            "type": "multi_line_text_field",
        })
    return {
        "id": pid,
        "handle": f"handle-{pid}",
        "title": title or f"Product {pid}",
        "description": description,
        "metafields": metafields,
        **extra,
    }


def chunk_reader(data: bytes, chunk_size: int = 7):
    """A ChunkReader over ``data`` in fixed-size chunks."""
    stream = io.BytesIO(data)

    async def _read() -> bytes:
        return stream.read(chunk_size)

    return _read


async def aiter_records(records: list[dict[str, Any]]) -> AsyncIterator[dict[str, Any]]:
    for record in records:
        yield record


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCatalogProvider(ICatalogProvider):
    """In-memory catalog keyed by node id.

    ``product_pages`` is the top-level pagination; sub-collections are
    looked up by the ``id`` variable.  Ids in ``fail_ids`` raise a 500.
    """

    def __init__(
        self,
        product_pages: list[list[dict[str, Any]]],
        variants: dict[str, list[dict[str, Any]]] | None = None,
        media: dict[str, list[dict[str, Any]]] | None = None,
        metafields: dict[str, list[dict[str, Any]]] | None = None,
        fail_ids: set[str] | None = None,
    ) -> None:
        self._product_pages = product_pages
        self._collections = {
            VARIANTS_QUERY: variants or {},
            MEDIA_QUERY: media or {},
            METAFIELDS_QUERY: metafields or {},
        }
        self._fail_ids = fail_ids or set()
        self.calls: list[tuple[str, str]] = []

    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        raise NotImplementedError

    async def iter_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> AsyncIterator[Page]:
        assert query == PRODUCTS_QUERY
        for i, items in enumerate(self._product_pages):
            has_next = i < len(self._product_pages) - 1
            yield Page(items=items, has_next_page=has_next, end_cursor=f"c{i}" if has_next else None)

    async def fetch_all_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> list[dict[str, Any]]:
        node_id = variables["id"]
        self.calls.append((query, node_id))
        if node_id in self._fail_ids:
            raise ShopifyHTTPError(status=500, body=f"boom {node_id}")
        return list(self._collections[query].get(node_id, []))

    def get_provider_name(self) -> str:
        return "fake"


class EchoLLMProvider(ILLMProvider):
    """Answers every batch with descriptions derived from each title.

    Reads the ``Product N: title`` lines back out of the prompt, so any
    reordering or dropped product shows up in the output.
    """

    def __init__(self, subtype: str = "success", errors: list[str] | None = None, drop: int = 0) -> None:
        self._subtype = subtype
        self._errors = errors or []
        self._drop = drop
        self.prompts: list[str] = []
        self.schemas: list[dict[str, Any]] = []

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        max_turns: int = 5,
    ) -> GenerationResult:
        self.prompts.append(user_prompt)
        self.schemas.append(schema)
        if self._subtype != "success":
            return GenerationResult(subtype=self._subtype, errors=self._errors, num_turns=max_turns)

        titles = [m.group(2) for m in _PRODUCT_LINE.finditer(user_prompt)]
        if self._drop:
            titles = titles[: -self._drop]
        products = [
            {"description": f"short:{t}", "longDescription": f"long:{t}"}
            for t in titles
        ]
        return GenerationResult(
            subtype="success",
            structured_output={"products": products},
            total_cost_usd=0.01,
            usage=GenerationUsage(input_tokens=100, output_tokens=40),
            num_turns=1,
        )

    def get_provider_name(self) -> str:
        return "echo"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides: Any) -> Settings:
    """Build Settings that ignore the process environment and .env files."""
    defaults: dict[str, Any] = {
        "shopify_admin_api_token": "shpat_test",
        "shopify_api_version": "2025-01",
        "shopify_store_domain": "test-shop.myshopify.com",
        "anthropic_api_key": "test-anthropic",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the tools read from the environment."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    return monkeypatch
