"""Unit tests for ShopifyGraphQLProvider -- pagination, throttling, errors."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from catalog_tools.models.page import QueryCost
from catalog_tools.providers.shopify.graphql_provider import ShopifyGraphQLProvider
from catalog_tools.providers.shopify.queries import (
    METAFIELDS_QUERY,
    PRODUCTS_QUERY,
    metafields_connection,
    products_connection,
)
from catalog_tools.utils.errors import GraphQLError, ShopifyHTTPError
from tests.conftest import connection, http_response

_ENDPOINT = "https://test-shop.myshopify.com/admin/api/2025-01/graphql.json"


def _provider(client: Any, **kwargs: Any) -> ShopifyGraphQLProvider:
    return ShopifyGraphQLProvider(
        http_client=client,
        endpoint=_ENDPOINT,
        access_token="shpat_test",
        **kwargs,
    )


def _paged_client(items: list[dict[str, Any]], page_size: int) -> MagicMock:
    """An http client serving ``items`` as a products connection.

    Cursors are ``"after:<index>"`` strings; a wrong cursor fails the test.
    """
    client = MagicMock()

    async def _post(url: str, json: dict[str, Any], headers: dict[str, str], timeout: float) -> MagicMock:
        cursor = json["variables"]["cursor"]
        start = 0 if cursor is None else int(cursor.split(":")[1])
        chunk = items[start:start + page_size]
        end = start + len(chunk)
        has_next = end < len(items)
        body = {"data": {"products": connection(chunk, has_next, f"after:{end}" if has_next else None)}}
        return http_response(body)

    client.post = AsyncMock(side_effect=_post)
    return client


# ======================================================================
# Pagination
# ======================================================================


class TestPagination:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("page_size", [1, 2, 3, 7, 50])
    async def test_fetch_all_pages_is_linear_traversal(self, page_size: int) -> None:
        items = [{"id": f"gid://shopify/Product/{i}"} for i in range(7)]
        client = _paged_client(items, page_size)

        result = await _provider(client).fetch_all_pages(PRODUCTS_QUERY, {}, products_connection)

        assert result == items
        expected_requests = max(1, -(-len(items) // page_size))
        assert client.post.await_count == expected_requests

    @pytest.mark.asyncio
    async def test_cursor_threaded_verbatim(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(side_effect=[
            http_response({"data": {"products": connection([{"id": "a"}], True, "opaque==cursor/1")}}),
            http_response({"data": {"products": connection([{"id": "b"}], False, None)}}),
        ])

        pages = [p async for p in _provider(client).iter_pages(PRODUCTS_QUERY, {}, products_connection)]

        assert [p.items for p in pages] == [[{"id": "a"}], [{"id": "b"}]]
        first_vars = client.post.call_args_list[0].kwargs["json"]["variables"]
        second_vars = client.post.call_args_list[1].kwargs["json"]["variables"]
        assert first_vars["cursor"] is None
        assert second_vars["cursor"] == "opaque==cursor/1"

    @pytest.mark.asyncio
    async def test_variables_merged_with_cursor(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"data": {"node": {"metafields": connection([{"key": "k", "value": "v"}])}}}
        ))

        result = await _provider(client).fetch_all_pages(
            METAFIELDS_QUERY, {"id": "gid://shopify/Product/1"}, metafields_connection,
        )

        assert result == [{"key": "k", "value": "v"}]
        sent = client.post.call_args.kwargs["json"]
        assert sent["query"] == METAFIELDS_QUERY
        assert sent["variables"] == {"id": "gid://shopify/Product/1", "cursor": None}

    @pytest.mark.asyncio
    async def test_missing_node_yields_empty_collection(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response({"data": {"node": None}}))

        result = await _provider(client).fetch_all_pages(
            METAFIELDS_QUERY, {"id": "gid://shopify/Product/gone"}, metafields_connection,
        )

        assert result == []

    @pytest.mark.asyncio
    async def test_sends_access_token_header(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response({"data": {"shop": {"name": "x"}}}))

        data = await _provider(client).query("{ shop { name } }")

        assert data == {"shop": {"name": "x"}}
        call = client.post.call_args
        assert call.args[0] == _ENDPOINT
        assert call.kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"


# ======================================================================
# Throttling
# ======================================================================


def _cost(available: float, requested: float = 10, restore: float = 5) -> dict[str, Any]:
    return {
        "cost": {
            "requestedQueryCost": requested,
            "actualQueryCost": requested,
            "throttleStatus": {
                "maximumAvailable": 1000.0,
                "currentlyAvailable": available,
                "restoreRate": restore,
            },
        }
    }


class TestThrottle:
    @pytest.mark.asyncio
    async def test_waits_when_below_floor(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"data": {"shop": {}}, "extensions": _cost(available=50, requested=10, restore=5)}
        ))
        sleep = AsyncMock()

        with patch("catalog_tools.providers.shopify.graphql_provider.asyncio.sleep", sleep):
            await _provider(client, throttle_floor=100).query("{ shop { name } }")

        sleep.assert_awaited_once()
        assert sleep.await_args.args[0] >= 2.0

    @pytest.mark.asyncio
    async def test_wait_rounds_up_to_whole_seconds(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"data": {}, "extensions": _cost(available=10, requested=52, restore=50)}
        ))
        sleep = AsyncMock()

        with patch("catalog_tools.providers.shopify.graphql_provider.asyncio.sleep", sleep):
            await _provider(client).query("{ shop { name } }")

        assert sleep.await_args.args[0] == 2.0

    @pytest.mark.asyncio
    async def test_no_wait_at_or_above_floor(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"data": {}, "extensions": _cost(available=100)}
        ))
        sleep = AsyncMock()

        with patch("catalog_tools.providers.shopify.graphql_provider.asyncio.sleep", sleep):
            await _provider(client, throttle_floor=100).query("{ shop { name } }")

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_wait_without_cost_extension(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response({"data": {}}))
        sleep = AsyncMock()

        with patch("catalog_tools.providers.shopify.graphql_provider.asyncio.sleep", sleep):
            await _provider(client).query("{ shop { name } }")

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_partial_throttle_status_does_not_wait(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"data": {"shop": {}}, "extensions": {"cost": {"requestedQueryCost": 10, "throttleStatus": {}}}}
        ))
        sleep = AsyncMock()

        with patch("catalog_tools.providers.shopify.graphql_provider.asyncio.sleep", sleep):
            data = await _provider(client).query("{ shop { name } }")

        assert data == {"shop": {}}
        sleep.assert_not_awaited()

    def test_wait_seconds_ignores_missing_fields(self) -> None:
        assert QueryCost.model_validate({"throttleStatus": {"currentlyAvailable": 5}}).wait_seconds(100) == 0.0
        assert QueryCost.model_validate({"throttleStatus": {"restoreRate": 50}}).wait_seconds(100) == 0.0
        assert QueryCost.model_validate({
            "throttleStatus": {"currentlyAvailable": 5, "restoreRate": 50},
        }).wait_seconds(100) == 0.0


# ======================================================================
# Errors
# ======================================================================


class TestErrors:
    @pytest.mark.asyncio
    async def test_non_success_status_raises(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(status_code=401, text="Invalid API key"))

        with pytest.raises(ShopifyHTTPError) as exc_info:
            await _provider(client).query("{ shop { name } }")

        assert exc_info.value.status == 401
        assert exc_info.value.body == "Invalid API key"
        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_rate_limit_rejection_is_fatal(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(status_code=429, text="Throttled"))

        with pytest.raises(ShopifyHTTPError):
            await _provider(client).query("{ shop { name } }")
        assert client.post.await_count == 1

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response(
            {"errors": [{"message": "Field 'nope' doesn't exist on type 'Product'"}]}
        ))

        with pytest.raises(GraphQLError) as exc_info:
            await _provider(client).query("{ products { nope } }")

        assert "nope" in str(exc_info.value)
        assert len(exc_info.value.errors) == 1

    @pytest.mark.asyncio
    async def test_transport_error_raises_without_status(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(ShopifyHTTPError) as exc_info:
            await _provider(client).query("{ shop { name } }")

        assert exc_info.value.status is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_error_mid_pagination_aborts(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(side_effect=[
            http_response({"data": {"products": connection([{"id": "a"}], True, "c1")}}),
            http_response(status_code=500, text="Internal error"),
        ])

        with pytest.raises(ShopifyHTTPError):
            await _provider(client).fetch_all_pages(PRODUCTS_QUERY, {}, products_connection)

    @pytest.mark.asyncio
    async def test_non_json_success_body_raises(self) -> None:
        response = http_response(text="<html>maintenance</html>")
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>maintenance</html>", 0)
        client = MagicMock()
        client.post = AsyncMock(return_value=response)

        with pytest.raises(ShopifyHTTPError) as exc_info:
            await _provider(client).query("{ shop { name } }")

        assert exc_info.value.status == 200
        assert "maintenance" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_object_body_raises(self) -> None:
        client = MagicMock()
        client.post = AsyncMock(return_value=http_response())
        client.post.return_value.json.return_value = ["not", "an", "object"]

        with pytest.raises(ShopifyHTTPError, match="not a JSON object"):
            await _provider(client).query("{ shop { name } }")

    def test_provider_name(self) -> None:
        assert _provider(MagicMock()).get_provider_name() == "shopify"
