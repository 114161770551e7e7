"""Abstract interface for LLM providers."""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
import json
import logging

import httpx
import openai
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from sisyflow.core.config import LLMConfig
from sisyflow.c2_validation_service.schemas import AIResponse, MAX_SUGGESTIONS, MIN_SUGGESTION_LENGTH

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = f"""You are an assistant that helps people write clear, actionable tickets for a software team.
Read the ticket title and description and answer with a JSON object of the form
{{"suggestions": [{{"type": "INSERT" | "QUESTION", "content": "..."}}]}}.

- INSERT suggestions contain Markdown text that can be appended to the description as-is
  (acceptance criteria, reproduction steps, missing technical context).
- QUESTION suggestions ask the reporter about something the ticket leaves unclear.
- Return at most {MAX_SUGGESTIONS} suggestions, each at least {MIN_SUGGESTION_LENGTH} characters long.
- Answer in the language of the ticket. Do not repeat what the description already says.
"""


class LLMResponseError(Exception):
    """The model answered, but not with the expected suggestions shape."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None, received: Any = None):
        super().__init__(message)
        self.details = details or []
        self.received = received


class LLMProviderInterface(ABC):
    """Abstract interface for LLM providers."""

    @abstractmethod
    async def generate_ticket_suggestions(
        self,
        title: str,
        description: str,
        project_context: str = "",
    ) -> Dict[str, Any]:
        """Suggest improvements for a ticket.

        Args:
            title: Trimmed ticket title
            description: Trimmed ticket description
            project_context: Project documentation shown to the model

        Returns:
            Dictionary containing:
                - suggestions: list of {type, content, applied} with applied False

        Raises:
            LLMResponseError: If the reply is not valid suggestions JSON
            openai.OpenAIError: If the upstream call fails
        """
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        pass


def build_messages(title: str, description: str, project_context: str = "") -> List[Dict[str, str]]:
    """Chat messages for one ticket analysis."""
    system = SYSTEM_PROMPT
    if project_context.strip():
        system += f"""
# Project documentation
{project_context.strip()}"""

    user = f"""Title: {title}

Description:
{description}"""

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def parse_suggestions(raw_content: Optional[str]) -> Dict[str, Any]:
    """
    Parse and validate the model's reply.

    Raises:
        LLMResponseError: If the content is not JSON or fails schema validation
    """
    if not raw_content:
        raise LLMResponseError("Model returned an empty response.")
    try:
        data = json.loads(raw_content)
    except json.JSONDecodeError as e:
        raise LLMResponseError("Model response is not valid JSON.", received=raw_content) from e

    try:
        parsed = AIResponse.model_validate(data)
    except ValidationError as e:
        raise LLMResponseError(
            "Model response validation error.",
            details=e.errors(include_url=False, include_context=False, include_input=False),
            received=data,
        ) from e

    return {"suggestions": [s.model_dump(mode="json") for s in parsed.suggestions]}


class OpenRouterProvider(LLMProviderInterface):
    """OpenRouter implementation through the OpenAI-compatible chat API."""

    def __init__(
        self,
        api_key: str,
        model: str = "mistralai/mistral-7b-instruct",
        base_url: str = "https://openrouter.ai/api/v1",
        temperature: float = 0.6,
        max_tokens: int = 1024,
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        """Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            model: Model to use for completions
            base_url: OpenAI-compatible endpoint
            temperature: Sampling temperature
            max_tokens: Completion token limit
            timeout: Request timeout in seconds
            max_retries: Attempts for connection and rate-limit errors
        """
        # Retries are handled by tenacity, not by the SDK
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=httpx.AsyncClient(timeout=timeout),
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries

    def get_model_name(self) -> str:
        return self.model

    async def generate_ticket_suggestions(
        self,
        title: str,
        description: str,
        project_context: str = "",
    ) -> Dict[str, Any]:
        """Ask the model for suggestions and validate them."""
        content = await self._complete(build_messages(title, description, project_context))
        result = parse_suggestions(content)
        logger.debug(f"Received {len(result['suggestions'])} suggestions from {self.model}")
        return result

    async def _complete(self, messages: List[Dict[str, str]]) -> Optional[str]:
        retrying = retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type((openai.APIConnectionError, openai.RateLimitError)),
            reraise=True,
        )
        return await retrying(self._create_completion)(messages)

    async def _create_completion(self, messages: List[Dict[str, str]]) -> Optional[str]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},
            )
        except (openai.APIConnectionError, openai.RateLimitError) as e:
            logger.warning(f"OpenRouter transient error (will retry): {e}")
            raise
        if not response.choices:
            return None
        return response.choices[0].message.content


# Provider registry
LLM_PROVIDERS = {
    "openrouter": OpenRouterProvider,
}


def get_llm_provider(config: Optional[LLMConfig] = None) -> LLMProviderInterface:
    """Factory function to get configured LLM provider.

    Raises:
        ValueError: If the provider is unknown or the API key is missing
    """
    if config is None:
        from sisyflow.core.config import get_settings
        config = get_settings().llm

    provider_class = LLM_PROVIDERS.get(config.provider)
    if not provider_class:
        raise ValueError(f"Unknown LLM provider: {config.provider}")

    if config.api_key is None or not config.api_key.get_secret_value():
        raise ValueError(f"API key not found for provider: {config.provider}")

    logger.info(f"Using {config.provider} provider with model {config.model}")
    return provider_class(
        api_key=config.api_key.get_secret_value(),
        model=config.model,
        base_url=config.base_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )
