"""Public interface definitions for the external services.

    Interface          ->  Concrete implementation (in catalog_tools/providers/)
    -------------------------------------------------------------------------
    ICatalogProvider   ->  ShopifyGraphQLProvider
    ILLMProvider       ->  AnthropicLLMProvider
"""

from catalog_tools.interfaces.catalog_provider import ConnectionExtractor, ICatalogProvider
from catalog_tools.interfaces.llm_provider import ILLMProvider

__all__ = ["ConnectionExtractor", "ICatalogProvider", "ILLMProvider"]
