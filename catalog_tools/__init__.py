"""catalog-tools: JSON-lines pipelines over a Shopify catalog.

Two pipelines, sharing only the ambient utilities:

- product export (``catalog_tools.services.export_service``)
- batched description generation (``catalog_tools.services.description_service``)
"""

__version__ = "0.1.0"
