"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources (in priority order):

  1. **Environment variables** -- e.g. ``SHOPIFY_STORE_DOMAIN=shop.myshopify.com``
  2. **.env file** -- ``key=value`` lines; the CLIs accept ``--env-file`` to
     point somewhere other than ``./.env``.

Field ``shopify_admin_api_token`` maps to ``SHOPIFY_ADMIN_API_TOKEN`` and so
on.  Credentials default to ``""`` (not configured); each CLI calls
:meth:`Settings.require` for the fields it needs before any network I/O.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_tools.utils.errors import ConfigurationError


class Settings(BaseSettings):
    """catalog-tools settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Shopify Admin API ===
    shopify_admin_api_token: str = ""
    shopify_api_version: str = ""
    shopify_store_domain: str = ""
    http_timeout: float = 30.0
    # Below this many available cost points the client sleeps before the
    # next request.
    throttle_floor: float = 100.0
    # 0 = unbounded fan-out of sub-collection fetches per product.
    max_concurrent_requests: int = 0

    # === Description generation ===
    anthropic_api_key: str = ""
    description_model: str = "claude-haiku-4-5"
    description_batch_size: int = 20
    description_max_turns: int = 5
    description_max_tokens: int = 8000
    # 0 = unbounded number of in-flight batches.
    max_concurrent_batches: int = 0
    # USD per million tokens, used to report run cost.
    input_cost_per_mtok: float = 1.0
    output_cost_per_mtok: float = 5.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def shopify_endpoint(self) -> str:
        """The Admin GraphQL endpoint for the configured store and version."""
        return (
            f"https://{self.shopify_store_domain}/admin/api/"
            f"{self.shopify_api_version}/graphql.json"
        )

    def require(self, *fields: str) -> None:
        """Raise :class:`ConfigurationError` if any of ``fields`` is empty.

        The message names every missing environment variable, not just the
        first one.
        """
        missing = [name.upper() for name in fields if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"Missing {', '.join(missing)}")
