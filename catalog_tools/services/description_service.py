"""Streams products through batched description generation.

# ─── DESIGN ────────────────────────────────────────────────────────────
#
#   stdin ──> iter_json_lines ──> needs_generation ──> batcher
#                                      │ (skip count)      │ full batch
#                                      ▼                   ▼
#                                  RunTotals  <──  batch task (one per batch)
#                                                          │
#                                                          ▼
#                                                  JsonLineSink (stdout)
#
#   - Batches are dispatched as tasks the moment they fill; reading goes on
#     while they run.  In-flight batches are unbounded unless a semaphore
#     is supplied.
#   - Each batch writes all its lines in one sink call, so a batch's lines
#     are contiguous and in input order.  Batches themselves land in
#     completion order.
#   - The run joins every task before returning.  A failed batch does not
#     cancel its siblings; the first failure is raised after all finish.
#   - Counters live in RunTotals and are only changed under its lock.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

from catalog_tools.models.generation import (
    LONG_DESCRIPTION_KEY,
    BatchDescriptions,
    DescriptionLine,
    GenerationSummary,
    metafield_map,
)
from catalog_tools.services.description_generator import DescriptionGenerator
from catalog_tools.utils.concurrency import gather_all
from catalog_tools.utils.jsonl import JsonLineSink
from catalog_tools.utils.logging import get_logger

DEFAULT_BATCH_SIZE = 20


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def needs_generation(record: dict[str, Any], overwrite: bool = False) -> bool:
    """Return ``True`` unless the record already has both descriptions.

    ``overwrite`` selects every record.  The record is not modified.
    """
    if overwrite:
        return True
    mf = metafield_map(record)
    return not (_has_text(record.get("description")) and _has_text(mf.get(LONG_DESCRIPTION_KEY)))


class RunTotals:
    """Run-scoped counters shared by the reader and the batch tasks.

    All updates go through the async ``record_*`` methods, which serialize
    on one lock.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._read = 0
        self._skipped = 0
        self._to_generate = 0
        self._completed = 0
        self._batches = 0
        self._cost_usd = 0.0
        self._input_tokens = 0
        self._output_tokens = 0

    async def record_read(self, eligible: bool) -> None:
        async with self._lock:
            self._read += 1
            if eligible:
                self._to_generate += 1
            else:
                self._skipped += 1

    async def record_dispatch(self) -> None:
        async with self._lock:
            self._batches += 1

    async def record_batch(self, size: int, result: BatchDescriptions) -> int:
        """Add one finished batch and return the new completed count."""
        async with self._lock:
            self._completed += size
            self._cost_usd += result.cost_usd
            self._input_tokens += result.usage.input_tokens
            self._output_tokens += result.usage.output_tokens
            return self._completed

    def snapshot(self) -> GenerationSummary:
        return GenerationSummary(
            read=self._read,
            skipped=self._skipped,
            to_generate=self._to_generate,
            completed=self._completed,
            batches=self._batches,
            cost_usd=self._cost_usd,
            input_tokens=self._input_tokens,
            output_tokens=self._output_tokens,
        )


class DescriptionGenerationService:
    """Reads products, filters, batches, generates and emits.

    Parameters
    ----------
    generator:
        Generates one batch of descriptions.
    sink:
        Destination for the ``{id, handle, title, description,
        longDescription}`` lines.
    batch_size:
        Products per generation call (default 20).
    overwrite:
        Regenerate products that already have both descriptions.
    semaphore:
        Optional bound on in-flight batches.  ``None`` dispatches every
        batch immediately.
    """

    def __init__(
        self,
        generator: DescriptionGenerator,
        sink: JsonLineSink,
        batch_size: int = DEFAULT_BATCH_SIZE,
        overwrite: bool = False,
        semaphore: asyncio.Semaphore | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._generator = generator
        self._sink = sink
        self._batch_size = batch_size
        self._overwrite = overwrite
        self._semaphore = semaphore
        self._totals = RunTotals()
        self._logger = get_logger(__name__)

    @property
    def totals(self) -> RunTotals:
        return self._totals

    # ------------------------------------------------------------------
    # Batch processing
    # ------------------------------------------------------------------

    async def _generate(self, batch: list[dict[str, Any]]) -> BatchDescriptions:
        if self._semaphore is None:
            return await self._generator.generate_batch(batch)
        async with self._semaphore:
            return await self._generator.generate_batch(batch)

    async def _process_batch(self, batch: list[dict[str, Any]]) -> None:
        result = await self._generate(batch)

        lines = [
            DescriptionLine(
                id=record.get("id"),
                handle=record.get("handle"),
                title=record.get("title"),
                description=desc.description,
                long_description=desc.long_description,
            ).to_json_dict()
            for record, desc in zip(batch, result.descriptions)
        ]
        self._sink.write_many(lines)

        completed = await self._totals.record_batch(len(batch), result)
        self._logger.info(
            "batch_completed",
            completed=completed,
            total=self._totals.snapshot().to_generate,
        )

    async def _dispatch(self, batch: list[dict[str, Any]], tasks: list[asyncio.Task[None]]) -> None:
        await self._totals.record_dispatch()
        tasks.append(asyncio.create_task(self._process_batch(batch)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, records: AsyncIterator[dict[str, Any]]) -> GenerationSummary:
        """Consume ``records`` to the end and return the run totals.

        Raises the first error from reading or from any batch, but only
        after every dispatched batch has finished.
        """
        tasks: list[asyncio.Task[None]] = []
        batch: list[dict[str, Any]] = []

        self._logger.info("reading_products")
        try:
            async for record in records:
                eligible = needs_generation(record, self._overwrite)
                await self._totals.record_read(eligible)
                if not eligible:
                    continue

                batch.append(record)
                if len(batch) >= self._batch_size:
                    snapshot = self._totals.snapshot()
                    self._logger.info(
                        "batch_dispatched",
                        products_read=snapshot.to_generate,
                        skipped=snapshot.skipped,
                    )
                    await self._dispatch(batch, tasks)
                    batch = []

            if batch:
                await self._dispatch(batch, tasks)
        except BaseException:
            # Input failed mid-stream: let batches already in flight finish.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        snapshot = self._totals.snapshot()
        self._logger.info(
            "products_to_generate",
            to_generate=snapshot.to_generate,
            skipped=snapshot.skipped,
            batches=snapshot.batches,
        )

        await gather_all(tasks)

        summary = self._totals.snapshot()
        self._logger.info(
            "generation_totals",
            cost_usd=round(summary.cost_usd, 4),
            input_tokens=summary.input_tokens,
            output_tokens=summary.output_tokens,
        )
        return summary
