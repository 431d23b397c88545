"""Concrete adapters for the external services (see catalog_tools.interfaces)."""
