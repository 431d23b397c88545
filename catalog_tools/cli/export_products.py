"""CLI for exporting every Shopify product, with variants, media and
metafields, as JSON lines on stdout.

Usage::

    export-products > products.jsonl
    export-products --env-file .claude/skills/shopify/.env > products.jsonl
    python -m catalog_tools.cli.export_products --log-level DEBUG > products.jsonl

Requires ``SHOPIFY_ADMIN_API_TOKEN``, ``SHOPIFY_API_VERSION`` and
``SHOPIFY_STORE_DOMAIN``.  Progress goes to stderr.  Exits 1 on any error;
lines already written to stdout are then an incomplete export.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from catalog_tools.config.settings import Settings
from catalog_tools.utils.errors import CatalogToolsError
from catalog_tools.utils.logging import configure_logging, print_failure, print_success


async def _run(settings: Settings) -> int:
    """Export all products and return the number written."""
    from catalog_tools.providers.shopify.graphql_provider import ShopifyGraphQLProvider
    from catalog_tools.services.export_service import ProductExportService
    from catalog_tools.utils.concurrency import make_semaphore
    from catalog_tools.utils.jsonl import JsonLineSink

    async with httpx.AsyncClient() as client:
        provider = ShopifyGraphQLProvider(
            http_client=client,
            endpoint=settings.shopify_endpoint,
            access_token=settings.shopify_admin_api_token,
            throttle_floor=settings.throttle_floor,
            timeout=settings.http_timeout,
        )
        service = ProductExportService(
            provider=provider,
            sink=JsonLineSink(sys.stdout),
            semaphore=make_semaphore(settings.max_concurrent_requests),
        )
        return await service.export_all()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the export CLI."""
    parser = argparse.ArgumentParser(
        prog="export-products",
        description="Export all Shopify products with variants, media and metafields as JSON lines.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Env file with Shopify credentials (default: .env).",
    )
    parser.add_argument(
        "--max-concurrent-requests",
        type=int,
        default=None,
        help="Cap concurrent sub-collection requests per product (default: unbounded).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for stderr progress output (default: LOG_LEVEL or INFO).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write stderr logs as JSON instead of console lines.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the export tool."""
    args = _build_parser().parse_args(argv)

    settings = Settings(_env_file=args.env_file)
    if args.max_concurrent_requests is not None:
        settings.max_concurrent_requests = args.max_concurrent_requests

    configure_logging(args.log_level or settings.log_level, json_output=args.json_logs)

    try:
        settings.require("shopify_admin_api_token", "shopify_api_version", "shopify_store_domain")
        total = asyncio.run(_run(settings))
    except CatalogToolsError as exc:
        print_failure(str(exc))
        sys.exit(1)

    print_success(f"done, {total} products")
    sys.exit(0)


if __name__ == "__main__":
    main()
