"""Pydantic v2 models for paginated GraphQL responses.

All models use frozen config (immutable).  Records themselves stay plain
``dict`` objects: the export passes every upstream field through untouched,
so only the pagination envelope and the cost extension are typed.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One bounded window over a remote collection.

    ``end_cursor`` is opaque and must be passed back verbatim to fetch the
    next page.
    """

    model_config = ConfigDict(frozen=True)

    items: list[dict[str, Any]] = Field(default_factory=list)
    has_next_page: bool = Field(default=False)
    end_cursor: str | None = Field(default=None)

    @classmethod
    def from_connection(cls, connection: dict[str, Any]) -> Page:
        """Build a page from a GraphQL connection.

        Parameters
        ----------
        connection:
            ``{"edges": [{"node": {...}}], "pageInfo": {"hasNextPage", "endCursor"}}``.
        """
        page_info = connection.get("pageInfo") or {}
        return cls(
            items=[edge["node"] for edge in connection.get("edges") or []],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )


class ThrottleStatus(BaseModel):
    """Bucket state reported under ``extensions.cost.throttleStatus``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    maximum_available: float | None = Field(default=None, alias="maximumAvailable")
    currently_available: float | None = Field(default=None, alias="currentlyAvailable")
    restore_rate: float | None = Field(default=None, alias="restoreRate")


class QueryCost(BaseModel):
    """The ``extensions.cost`` envelope of an Admin API response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    requested_query_cost: float | None = Field(default=None, alias="requestedQueryCost")
    actual_query_cost: float | None = Field(default=None, alias="actualQueryCost")
    throttle_status: ThrottleStatus | None = Field(default=None, alias="throttleStatus")

    def wait_seconds(self, floor: float) -> float:
        """Seconds to wait before the next request, or ``0.0``.

        Waits only when available capacity is below ``floor``; the wait is
        the requested cost over the restore rate, rounded up to whole seconds.
        A partial envelope never causes a wait.
        """
        status = self.throttle_status
        if status is None or status.currently_available is None or status.restore_rate is None:
            return 0.0
        if status.currently_available >= floor or status.restore_rate <= 0:
            return 0.0
        return float(math.ceil((self.requested_query_cost or 0.0) / status.restore_rate))
