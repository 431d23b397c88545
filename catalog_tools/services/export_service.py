"""Exports every product in the catalog as JSON lines.

Two-pass export:

    1. Page through products (scalar fields only), strictly one page at a
       time.
    2. For each product, resolve its variants, media and metafields by id,
       concurrently, then each variant's metafields, concurrently, and merge
       everything into one enriched record.

Records are emitted one line each, in source order, as soon as they are
resolved.  A failed sub-fetch aborts the whole run; a partially merged
record is never written.

Usage via CLI::

    export-products > products.jsonl
"""

from __future__ import annotations

import asyncio
from typing import Any

from catalog_tools.interfaces.catalog_provider import ICatalogProvider
from catalog_tools.providers.shopify.queries import (
    MEDIA_QUERY,
    METAFIELDS_QUERY,
    PRODUCTS_QUERY,
    VARIANTS_QUERY,
    media_connection,
    metafields_connection,
    products_connection,
    variants_connection,
)
from catalog_tools.utils.concurrency import throttled_gather
from catalog_tools.utils.jsonl import JsonLineSink
from catalog_tools.utils.logging import get_logger


class ProductExportService:
    """Drives the paginated product export.

    Parameters
    ----------
    provider:
        The catalog backend handling HTTP requests.
    sink:
        Destination for the enriched records.
    semaphore:
        Optional bound on concurrent sub-collection requests.  ``None``
        leaves the fan-out unbounded.
    """

    def __init__(
        self,
        provider: ICatalogProvider,
        sink: JsonLineSink,
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        self._provider = provider
        self._sink = sink
        self._semaphore = semaphore
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Sub-collection fetches
    # ------------------------------------------------------------------

    async def fetch_metafields(self, node_id: str) -> list[dict[str, Any]]:
        """All metafields of a product or variant."""
        return await self._provider.fetch_all_pages(
            METAFIELDS_QUERY, {"id": node_id}, metafields_connection,
        )

    async def fetch_variants(self, product_id: str) -> list[dict[str, Any]]:
        return await self._provider.fetch_all_pages(
            VARIANTS_QUERY, {"id": product_id}, variants_connection,
        )

    async def fetch_media(self, product_id: str) -> list[dict[str, Any]]:
        return await self._provider.fetch_all_pages(
            MEDIA_QUERY, {"id": product_id}, media_connection,
        )

    async def resolve_product(self, product: dict[str, Any]) -> dict[str, Any]:
        """Merge a product with its variants, media and metafields.

        The three product-level fetches run concurrently, then every
        variant's metafields are fetched concurrently.  The input dict is
        not modified.
        """
        product_id = product["id"]
        variants, media, metafields = await throttled_gather(
            [
                self.fetch_variants(product_id),
                self.fetch_media(product_id),
                self.fetch_metafields(product_id),
            ],
            semaphore=self._semaphore,
        )

        variant_metafields = await throttled_gather(
            [self.fetch_metafields(v["id"]) for v in variants],
            semaphore=self._semaphore,
        )
        enriched_variants = [
            {**variant, "metafields": mf}
            for variant, mf in zip(variants, variant_metafields)
        ]

        return {
            **product,
            "metafields": metafields,
            "variants": enriched_variants,
            "media": media,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def export_all(self) -> int:
        """Export every product and return the number of records written."""
        total = 0
        self._logger.info("product_export_started")

        async for page in self._provider.iter_pages(PRODUCTS_QUERY, {}, products_connection):
            for product in page.items:
                enriched = await self.resolve_product(product)
                self._sink.write(enriched)
                total += 1

            self._logger.info("product_page_exported", products_exported=total)

        return total
