"""Configuration module -- exports Settings and the prompt constants."""

from catalog_tools.config.prompts import DESCRIPTION_PROMPT_HEADER, DESCRIPTION_SYSTEM_PROMPT
from catalog_tools.config.settings import Settings

__all__ = ["DESCRIPTION_PROMPT_HEADER", "DESCRIPTION_SYSTEM_PROMPT", "Settings"]
