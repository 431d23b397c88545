"""Pipeline services.

- **ProductExportService** -- paginated export with nested resolution.
- **DescriptionGenerator** -- prompt, schema and validation for one batch.
- **DescriptionGenerationService** -- stdin-to-stdout batched generation.
"""

from catalog_tools.services.description_generator import DescriptionGenerator
from catalog_tools.services.description_service import (
    DescriptionGenerationService,
    RunTotals,
    needs_generation,
)
from catalog_tools.services.export_service import ProductExportService

__all__ = [
    "DescriptionGenerationService",
    "DescriptionGenerator",
    "ProductExportService",
    "RunTotals",
    "needs_generation",
]
