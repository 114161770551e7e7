"""Interfaces for Sisyflow components."""

from .llm_interface import LLMProviderInterface, OpenRouterProvider, LLM_PROVIDERS, get_llm_provider

__all__ = [
    "LLMProviderInterface",
    "OpenRouterProvider",
    "LLM_PROVIDERS",
    "get_llm_provider",
]
