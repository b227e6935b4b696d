"""
LLM client abstraction for copy generation.

This module sends the composed prompts to the external model and returns the
raw response text. Two providers are supported: Google Gemini (REST
generateContent endpoint) and Anthropic Claude (Messages API). Each request is
a single attempt; failures surface as ExternalServiceError.
"""

import logging
from typing import Any, Optional

import anthropic
import httpx

from .config import DEFAULT_MODELS, ModelSettings
from .errors import ExternalServiceError, MalformedModelOutputError
from .prompts import PromptPair

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def _http_timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=30.0)


class ModelClient:
    """Base class: send a prompt pair, receive the model's response text."""

    async def generate(self, prompts: PromptPair) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        pass

    async def __aenter__(self) -> "ModelClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class GeminiClient(ModelClient):
    """
    Client for the Gemini generateContent REST endpoint.

    The request asks for an application/json response; the text of the first
    candidate is returned as-is for JSON recovery.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODELS["gemini"],
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key, sent with every request.
            model: Model identifier.
            timeout: Request timeout in seconds.
            http_client: Optional preconfigured client (closed by the caller).
        """
        self.api_key = api_key
        self.model = model
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=_http_timeout(timeout),
            follow_redirects=True,
        )

    @property
    def endpoint(self) -> str:
        return f"{GEMINI_API_BASE}/models/{self.model}:generateContent"

    @staticmethod
    def build_payload(prompts: PromptPair) -> dict:
        """Request body with system instructions and a JSON response hint."""
        return {
            "systemInstruction": {"parts": [{"text": prompts.system}]},
            "contents": [{"parts": [{"text": prompts.user}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

    async def generate(self, prompts: PromptPair) -> str:
        """
        Send prompts to Gemini and return the first candidate's text.

        Raises:
            ExternalServiceError: On transport failure or a non-success status.
            MalformedModelOutputError: If the response carries no candidate text.
        """
        logger.info(f"Calling Gemini model {self.model}")
        try:
            response = await self.http_client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_payload(prompts),
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Model API request failed: {e}")

        if not response.is_success:
            body = response.text
            raise ExternalServiceError(
                f"Model API request failed: {response.status_code} {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise MalformedModelOutputError(f"Model API returned a non-JSON envelope: {e}")

        return extract_candidate_text(envelope)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()


def extract_candidate_text(envelope: Any) -> str:
    """
    Extract candidates[0].content.parts[0].text from a Gemini response.

    Raises:
        MalformedModelOutputError: If the envelope has no candidate text.
    """
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        raise MalformedModelOutputError("The model did not return any generated content.")
    if not isinstance(text, str):
        raise MalformedModelOutputError("The model did not return any generated content.")
    return text


class AnthropicClient(ModelClient):
    """Client for the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODELS["anthropic"],
        timeout: float = 120.0,
        max_tokens: int = 8192,
        client: Optional[Any] = None,
    ):
        """
        Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key.
            model: Model identifier.
            timeout: Request timeout in seconds.
            max_tokens: Maximum tokens in the response.
            client: Optional preconfigured anthropic.AsyncAnthropic.
        """
        self.model = model
        self.max_tokens = max_tokens
        self._owns_client = client is None
        # SDK retries are disabled: one attempt per generation
        self.client = client or anthropic.AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
            http_client=httpx.AsyncClient(
                timeout=_http_timeout(timeout),
                follow_redirects=True,
            ),
        )

    async def generate(self, prompts: PromptPair) -> str:
        """
        Send prompts to Claude and return the concatenated text blocks.

        Raises:
            ExternalServiceError: On transport failure or a non-success status.
            MalformedModelOutputError: If the response has no text content.
        """
        logger.info(f"Calling Anthropic model {self.model}")
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=prompts.system,
                messages=[{"role": "user", "content": prompts.user}],
            )
        except anthropic.APIStatusError as e:
            body = e.response.text
            raise ExternalServiceError(
                f"Model API request failed: {e.status_code} {body}",
                status_code=e.status_code,
                body=body,
            )
        except anthropic.APIError as e:
            raise ExternalServiceError(f"Model API request failed: {e}")

        texts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        if not texts:
            raise MalformedModelOutputError("The model did not return any generated content.")
        return "".join(texts)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.close()


def create_model_client(api_key: str, settings: Optional[ModelSettings] = None) -> ModelClient:
    """
    Factory function to create a model client.

    Args:
        api_key: Credential for the selected provider. Passed through as-is.
        settings: Provider, model and timeout. Defaults to Gemini.

    Returns:
        Configured ModelClient instance.
    """
    settings = settings or ModelSettings()
    if settings.provider == "anthropic":
        return AnthropicClient(
            api_key=api_key,
            model=settings.model_name,
            timeout=settings.timeout,
            max_tokens=settings.max_tokens,
        )
    return GeminiClient(api_key=api_key, model=settings.model_name, timeout=settings.timeout)
