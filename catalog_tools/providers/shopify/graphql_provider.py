"""Shopify Admin API client over GraphQL.

Issues POST requests to ``https://{store}/admin/api/{version}/graphql.json``
with the ``X-Shopify-Access-Token`` header.  Every failure is fatal: a
non-2xx status raises :class:`ShopifyHTTPError`, an ``errors`` array raises
:class:`GraphQLError`.  There is no retry.

Rate control is cost based.  Each response reports its query cost and the
bucket's remaining capacity under ``extensions.cost``; when capacity drops
below the throttle floor the client sleeps long enough for the bucket to
restore the cost of the request before returning.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

import httpx

from catalog_tools.interfaces.catalog_provider import ConnectionExtractor, ICatalogProvider
from catalog_tools.models.page import Page, QueryCost
from catalog_tools.utils.errors import GraphQLError, ShopifyHTTPError
from catalog_tools.utils.logging import get_logger

_THROTTLE_FLOOR = 100.0


class ShopifyGraphQLProvider(ICatalogProvider):
    """Cursor-paginated access to the Shopify Admin GraphQL API.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient`` for testability and connection pooling.
    endpoint:
        Full GraphQL endpoint URL.
    access_token:
        Admin API access token.
    throttle_floor:
        Available-capacity threshold below which the client waits.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint: str,
        access_token: str,
        throttle_floor: float = _THROTTLE_FLOOR,
        timeout: float = 30.0,
    ) -> None:
        self._http = http_client
        self._endpoint = endpoint
        self._access_token = access_token
        self._throttle_floor = throttle_floor
        self._timeout = timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _throttle(self, extensions: dict[str, Any] | None) -> None:
        """Sleep when the cost bucket is below the floor."""
        raw_cost = (extensions or {}).get("cost")
        if not raw_cost:
            return
        cost = QueryCost.model_validate(raw_cost)
        wait = cost.wait_seconds(self._throttle_floor)
        if wait > 0:
            self._logger.info(
                "throttled",
                wait_ms=int(wait * 1000),
                currently_available=cost.throttle_status.currently_available,
                requested_cost=cost.requested_query_cost,
            )
            await asyncio.sleep(wait)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }
        payload = {"query": query, "variables": variables or {}}

        try:
            response = await self._http.post(
                self._endpoint,
                json=payload,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise ShopifyHTTPError(status=None, body=str(exc)) from exc

        if not response.is_success:
            raise ShopifyHTTPError(status=response.status_code, body=response.text)

        try:
            body = response.json()
        except ValueError as exc:
            raise ShopifyHTTPError(
                status=response.status_code,
                body=f"response is not JSON: {response.text[:200]}",
            ) from exc
        if not isinstance(body, dict):
            raise ShopifyHTTPError(status=response.status_code, body="response is not a JSON object")

        if body.get("errors"):
            raise GraphQLError(body["errors"])

        await self._throttle(body.get("extensions"))
        return body.get("data") or {}

    async def iter_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> AsyncIterator[Page]:
        cursor: str | None = None
        while True:
            data = await self.query(query, {**variables, "cursor": cursor})
            page = Page.from_connection(extract(data))
            yield page
            if not page.has_next_page:
                break
            cursor = page.end_cursor

    async def fetch_all_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        async for page in self.iter_pages(query, variables, extract):
            items.extend(page.items)
        return items

    def get_provider_name(self) -> str:
        """Return ``'shopify'``."""
        return "shopify"
