"""Custom exception hierarchy for catalog-tools.

All application exceptions inherit from :class:`CatalogToolsError`, which
carries an optional ``provider_name`` so the CLI can show which external
service (e.g. "shopify", "anthropic") caused the failure.

The hierarchy follows the error taxonomy of the two pipelines:

    CatalogToolsError  (base -- caught once by each CLI entry point)
    +-- ConfigurationError        (required environment variable missing)
    +-- ShopifyHTTPError          (non-2xx response or transport failure)
    +-- GraphQLError              (``errors`` array in a GraphQL response)
    +-- GenerationError           (non-success generation result subtype)
    +-- BatchLengthMismatchError  (generation output length != batch size)
    +-- MalformedInputError       (an input line is not a JSON object)

None of these are retried.  They propagate to the CLI, which prints a single
failure line to stderr and exits with status 1.
"""

from __future__ import annotations

from typing import Any


class CatalogToolsError(Exception):
    """Base exception for all catalog-tools errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets, e.g.
    ``[shopify] HTTP 401: Unauthorized``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Startup errors
# ---------------------------------------------------------------------------

class ConfigurationError(CatalogToolsError):
    """Raised when required configuration is missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Catalog API errors
# ---------------------------------------------------------------------------

class ShopifyHTTPError(CatalogToolsError):
    """Raised on a non-2xx response from the Shopify Admin API.

    ``status`` is ``None`` when the request never produced a response
    (connection refused, timeout).
    """

    def __init__(
        self,
        status: int | None,
        body: str = "",
        provider_name: str | None = "shopify",
    ) -> None:
        self._status = status
        self._body = body
        if status is None:
            message = f"request failed: {body}"
        else:
            message = f"Shopify API {status}: {body}"
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status(self) -> int | None:
        return self._status

    @property
    def body(self) -> str:
        return self._body


class GraphQLError(CatalogToolsError):
    """Raised when a 200 response carries a GraphQL ``errors`` array."""

    def __init__(
        self,
        errors: list[Any],
        provider_name: str | None = "shopify",
    ) -> None:
        self._errors = list(errors)
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e)
            for e in self._errors
        ]
        super().__init__(
            message=f"GraphQL: {'; '.join(messages)}",
            provider_name=provider_name,
        )

    @property
    def errors(self) -> list[Any]:
        return self._errors


# ---------------------------------------------------------------------------
# Generation errors
# ---------------------------------------------------------------------------

class GenerationError(CatalogToolsError):
    """Raised when the generation service reports a non-success subtype."""

    def __init__(
        self,
        subtype: str,
        errors: list[str] | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._subtype = subtype
        self._errors = list(errors or [])
        super().__init__(
            message=f"AI error: {subtype}: {', '.join(self._errors)}",
            provider_name=provider_name,
        )

    @property
    def subtype(self) -> str:
        return self._subtype

    @property
    def errors(self) -> list[str]:
        return self._errors


class BatchLengthMismatchError(CatalogToolsError):
    """Raised when a generation call returns a different number of results
    than the batch it was given."""

    def __init__(
        self,
        expected: int,
        actual: int,
        provider_name: str | None = None,
    ) -> None:
        self._expected = expected
        self._actual = actual
        super().__init__(
            message=f"expected {expected} generated results, got {actual}",
            provider_name=provider_name,
        )

    @property
    def expected(self) -> int:
        return self._expected

    @property
    def actual(self) -> int:
        return self._actual


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------

class MalformedInputError(CatalogToolsError):
    """Raised when a line of JSON-lines input cannot be parsed."""

    def __init__(self, line_number: int, detail: str) -> None:
        self._line_number = line_number
        super().__init__(message=f"line {line_number}: {detail}")

    @property
    def line_number(self) -> int:
        return self._line_number
