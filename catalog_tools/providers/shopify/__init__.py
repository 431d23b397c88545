"""Shopify Admin GraphQL adapter and the export query documents."""

from catalog_tools.providers.shopify.graphql_provider import ShopifyGraphQLProvider

__all__ = ["ShopifyGraphQLProvider"]
