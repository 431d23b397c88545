"""Command-line tools for catalog-tools.

- ``export-products`` (``python -m catalog_tools.cli.export_products``) --
  export every product with variants, media and metafields as JSON lines.
- ``generate-descriptions`` (``python -m catalog_tools.cli.generate_descriptions``)
  -- generate product descriptions for JSON-lines products on stdin.

Both keep stdout for data only; logs and status lines go to stderr.
Heavy imports are deferred into the async runners so ``--help`` stays fast.
"""
