"""Mock LLM provider for testing without API calls.

This module provides a MockLLMProvider class that implements the
LLMProviderInterface used by the AI suggestion service. It returns
deterministic suggestions and can be told to fail, so tests never need an
OpenRouter API key.

Usage:
    from tests.fixtures.mock_llm_provider import MockLLMProvider

    provider = MockLLMProvider(suggestions=[...])
    result = await provider.generate_ticket_suggestions("Title", "Description")
    assert provider.call_count == 1
"""

import copy
from typing import Any, Dict, List, Optional

from sisyflow.interfaces.llm_interface import LLMProviderInterface

DEFAULT_SUGGESTIONS = [
    {
        "type": "INSERT",
        "content": "## Acceptance criteria\n- The change is covered by tests",
        "applied": False,
    },
    {
        "type": "QUESTION",
        "content": "Which browsers need to be supported?",
        "applied": False,
    },
]


class MockLLMProvider(LLMProviderInterface):
    """Mock LLM provider returning canned ticket suggestions.

    Attributes:
        suggestions: Suggestions returned by every call
        error: Exception raised instead of answering, if set
        call_count: Number of calls made to the provider
        last_request: Arguments of the most recent call
    """

    def __init__(self, suggestions: Optional[List[Dict[str, Any]]] = None, error: Optional[Exception] = None):
        """Initialize mock provider.

        Args:
            suggestions: Suggestions to return, defaults to one INSERT and one QUESTION
            error: Exception to raise from every call
        """
        self.suggestions = copy.deepcopy(DEFAULT_SUGGESTIONS if suggestions is None else suggestions)
        self.error = error
        self.call_count = 0
        self.last_request: Optional[Dict[str, Any]] = None

    async def generate_ticket_suggestions(
        self,
        title: str,
        description: str,
        project_context: str = "",
    ) -> Dict[str, Any]:
        """Return the configured suggestions or raise the configured error."""
        self.call_count += 1
        self.last_request = {
            "title": title,
            "description": description,
            "project_context": project_context,
        }
        if self.error is not None:
            raise self.error
        return {"suggestions": copy.deepcopy(self.suggestions)}

    def get_model_name(self) -> str:
        return "mock-model"

    def reset(self):
        """Reset mock state (call count, last request)."""
        self.call_count = 0
        self.last_request = None

    def __repr__(self):
        """String representation of mock provider."""
        return f"MockLLMProvider(suggestions={len(self.suggestions)}, calls={self.call_count})"
