"""Abstract base class for paginated catalog query backends.

The export service talks to the catalog only through this contract, so
tests can inject a fixture-backed fake and another GraphQL storefront could
be supported by a new adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Callable

from catalog_tools.models.page import Page

# Locates the connection object (``{edges, pageInfo}``) inside ``data``.
ConnectionExtractor = Callable[[dict[str, Any]], dict[str, Any]]


class ICatalogProvider(ABC):
    """Contract for a cursor-paginated catalog query endpoint."""

    @abstractmethod
    async def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute one query and return its ``data`` object.

        Raises
        ------
        catalog_tools.utils.errors.ShopifyHTTPError
            On a non-2xx response or a transport failure.
        catalog_tools.utils.errors.GraphQLError
            When the response carries an ``errors`` array.
        """

    @abstractmethod
    def iter_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> AsyncIterator[Page]:
        """Yield every page of a connection, starting from a null cursor.

        The query must accept a ``$cursor`` variable.
        """

    @abstractmethod
    async def fetch_all_pages(
        self,
        query: str,
        variables: dict[str, Any],
        extract: ConnectionExtractor,
    ) -> list[dict[str, Any]]:
        """Return the nodes of every page, concatenated in order."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this backend, e.g. ``"shopify"``."""
