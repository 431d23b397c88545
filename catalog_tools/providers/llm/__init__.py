"""LLM provider adapters.

One concrete implementation of ILLMProvider (catalog_tools/interfaces/llm_provider.py):
    - AnthropicLLMProvider -- Claude via the Messages API, structured output
      through a forced output tool
"""

from catalog_tools.providers.llm.anthropic_provider import AnthropicLLMProvider

__all__ = ["AnthropicLLMProvider"]
