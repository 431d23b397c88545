"""CLI for generating product descriptions with an LLM.

Reads products as JSON lines on stdin and writes
``{id, handle, title, description, longDescription}`` per generated product
to stdout.  Two descriptions per product:

  - description: short overview of materials and key features (1-2 sentences)
  - longDescription: practical details and specifications (1-2 sentences)

Products that already have both are skipped unless ``--overwrite``.
Products are sent 20 per prompt to keep cost down.

Usage::

    cat products.jsonl | generate-descriptions > descriptions.jsonl
    cat products.jsonl | generate-descriptions --overwrite > descriptions.jsonl

Requires ``ANTHROPIC_API_KEY``.  Exits 1 on any error.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from catalog_tools.config.settings import Settings
from catalog_tools.models.generation import GenerationSummary
from catalog_tools.utils.errors import CatalogToolsError
from catalog_tools.utils.logging import configure_logging, print_failure, print_success


async def _run(settings: Settings, overwrite: bool) -> GenerationSummary:
    """Wire provider, generator and sink, then stream stdin through them."""
    from catalog_tools.providers.llm.anthropic_provider import AnthropicLLMProvider
    from catalog_tools.services.description_generator import DescriptionGenerator
    from catalog_tools.services.description_service import DescriptionGenerationService
    from catalog_tools.utils.concurrency import make_semaphore
    from catalog_tools.utils.jsonl import JsonLineSink, iter_json_lines, stdin_chunk_reader

    llm = AnthropicLLMProvider(settings)
    generator = DescriptionGenerator(llm, max_turns=settings.description_max_turns)
    service = DescriptionGenerationService(
        generator=generator,
        sink=JsonLineSink(sys.stdout),
        batch_size=settings.description_batch_size,
        overwrite=overwrite,
        semaphore=make_semaphore(settings.max_concurrent_batches),
    )
    return await service.run(iter_json_lines(stdin_chunk_reader()))


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the generation CLI."""
    parser = argparse.ArgumentParser(
        prog="generate-descriptions",
        description="Generate product descriptions from JSON-lines products on stdin.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Regenerate products that already have both descriptions.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Products per generation call (default: 20).",
    )
    parser.add_argument(
        "--max-concurrent-batches",
        type=int,
        default=None,
        help="Cap in-flight generation calls (default: unbounded).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model name (default: DESCRIPTION_MODEL or claude-haiku-4-5).",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Env file with the Anthropic API key (default: .env).",
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
    """CLI entry point for the description generator."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.batch_size is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")

    settings = Settings(_env_file=args.env_file)
    if args.batch_size is not None:
        settings.description_batch_size = args.batch_size
    if args.max_concurrent_batches is not None:
        settings.max_concurrent_batches = args.max_concurrent_batches
    if args.model:
        settings.description_model = args.model

    configure_logging(args.log_level or settings.log_level, json_output=args.json_logs)

    try:
        settings.require("anthropic_api_key")
        summary = asyncio.run(_run(settings, args.overwrite))
    except CatalogToolsError as exc:
        print_failure(str(exc))
        sys.exit(1)

    print_success(
        f"{summary.completed} descriptions generated "
        f"(cost ${summary.cost_usd:.4f}, {summary.input_tokens} input tokens, "
        f"{summary.output_tokens} output tokens)"
    )
    sys.exit(0)


if __name__ == "__main__":
    main()
