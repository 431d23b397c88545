"""GraphQL documents for the two-pass product export.

Pass 1 pulls product scalar fields, options, SEO and featured media at 50
products per page, which keeps the query cost under 1000.  Pass 2 fetches
each product's variants, media and metafields by id, each paginated on its
own, so no single request has to nest connections.
"""

from __future__ import annotations

from typing import Any

PRODUCTS_PAGE_SIZE = 50
VARIANTS_PAGE_SIZE = 100
MEDIA_PAGE_SIZE = 250
METAFIELDS_PAGE_SIZE = 250

PRODUCTS_QUERY = f"""
  query Products($cursor: String) {{
    products(first: {PRODUCTS_PAGE_SIZE}, after: $cursor) {{
      edges {{
        node {{
          id
          legacyResourceId
          handle
          title
          description
          descriptionHtml
          productType
          vendor
          status
          tags
          templateSuffix
          isGiftCard
          hasOnlyDefaultVariant
          hasOutOfStockVariants
          totalInventory
          tracksInventory
          createdAt
          updatedAt
          publishedAt
          onlineStoreUrl
          onlineStorePreviewUrl
          seo {{ title description }}
          category {{ id name fullName }}
          priceRangeV2 {{
            minVariantPrice {{ amount currencyCode }}
            maxVariantPrice {{ amount currencyCode }}
          }}
          compareAtPriceRange {{
            minVariantCompareAtPrice {{ amount currencyCode }}
            maxVariantCompareAtPrice {{ amount currencyCode }}
          }}
          options {{ id name position values }}
          featuredMedia {{
            ... on MediaImage {{ image {{ url altText width height }} }}
          }}
        }}
      }}
      pageInfo {{ hasNextPage endCursor }}
    }}
  }}
"""

VARIANTS_QUERY = f"""
  query Variants($id: ID!, $cursor: String) {{
    product(id: $id) {{
      variants(first: {VARIANTS_PAGE_SIZE}, after: $cursor) {{
        edges {{
          node {{
            id
            legacyResourceId
            title
            displayName
            sku
            barcode
            price
            compareAtPrice
            position
            availableForSale
            inventoryQuantity
            inventoryPolicy
            taxable
            createdAt
            updatedAt
            selectedOptions {{ name value }}
            image {{ url altText width height }}
          }}
        }}
        pageInfo {{ hasNextPage endCursor }}
      }}
    }}
  }}
"""

MEDIA_QUERY = f"""
  query Media($id: ID!, $cursor: String) {{
    product(id: $id) {{
      media(first: {MEDIA_PAGE_SIZE}, after: $cursor) {{
        edges {{
          node {{
            mediaContentType
            ... on MediaImage {{ image {{ url altText width height }} }}
            ... on Video {{ sources {{ url mimeType }} }}
            ... on ExternalVideo {{ originUrl }}
          }}
        }}
        pageInfo {{ hasNextPage endCursor }}
      }}
    }}
  }}
"""

# Works for any node that carries metafields (Product or ProductVariant).
METAFIELDS_QUERY = f"""
  query Metafields($id: ID!, $cursor: String) {{
    node(id: $id) {{
      ... on Product {{
        metafields(first: {METAFIELDS_PAGE_SIZE}, after: $cursor) {{
          edges {{ node {{ namespace key value type }} }}
          pageInfo {{ hasNextPage endCursor }}
        }}
      }}
      ... on ProductVariant {{
        metafields(first: {METAFIELDS_PAGE_SIZE}, after: $cursor) {{
          edges {{ node {{ namespace key value type }} }}
          pageInfo {{ hasNextPage endCursor }}
        }}
      }}
    }}
  }}
"""

_EMPTY_CONNECTION: dict[str, Any] = {
    "edges": [],
    "pageInfo": {"hasNextPage": False, "endCursor": None},
}


def _connection(parent: dict[str, Any] | None, field: str) -> dict[str, Any]:
    # A deleted product or variant comes back as ``null``.
    if not parent:
        return _EMPTY_CONNECTION
    return parent.get(field) or _EMPTY_CONNECTION


def products_connection(data: dict[str, Any]) -> dict[str, Any]:
    return _connection(data, "products")


def variants_connection(data: dict[str, Any]) -> dict[str, Any]:
    return _connection(data.get("product"), "variants")


def media_connection(data: dict[str, Any]) -> dict[str, Any]:
    return _connection(data.get("product"), "media")


def metafields_connection(data: dict[str, Any]) -> dict[str, Any]:
    return _connection(data.get("node"), "metafields")
