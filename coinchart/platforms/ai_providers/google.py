"""
Google GenAI client for market summaries, built on the official Google GenAI SDK.

Sends a single user turn and returns the text of the first candidate. Every
provider problem is raised as a typed pipeline error.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors, types

from coinchart.contracts.errors import ConfigurationError, MalformedResponse, NetworkFailure, UpstreamStatusFailure
from coinchart.logger.logger import Logger

UNEXPECTED_RESPONSE_SHAPE = "unexpected response shape"


class GoogleAIClient:
    """Client for handling Google AI API requests using the official Google GenAI SDK."""

    def __init__(self, api_key: Optional[str], model: str, logger: Logger, timeout_seconds: float = 30) -> None:
        """
        Initialize the GoogleAIClient.

        Args:
            api_key: Google AI Studio API key, None when not configured
            model: Model name (e.g., 'gemini-2.0-flash')
            logger: Logger instance
            timeout_seconds: Upper bound for one generate_content call
        """
        self.api_key = api_key
        self.model = model
        self.logger = logger
        self.timeout_seconds = timeout_seconds
        self.client: Optional[genai.Client] = None

    async def __aenter__(self):
        self._ensure_client()
        return self

    async def __aexit__(self, _exc_type, _exc_val, _exc_tb):
        await self.close()

    async def close(self) -> None:
        """Drop the SDK client; it holds no connections that need explicit closing."""
        if self.client:
            self.client = None
            self.logger.debug("GoogleAIClient closed successfully")

    def _ensure_client(self) -> genai.Client:
        """Ensure a client exists and return it."""
        if not self.api_key:
            raise ConfigurationError(
                "Gemini API key is not configured. Set GOOGLE_STUDIO_API_KEY in keys.env or the environment."
            )
        if not self.client:
            self.client = genai.Client(api_key=self.api_key)
        return self.client

    @staticmethod
    def build_contents(prompt: str) -> List[types.Content]:
        """Single user turn: [{role: 'user', parts: [{text: prompt}]}]."""
        return [types.Content(role="user", parts=[types.Part(text=prompt)])]

    @staticmethod
    def _create_generation_config(model_config: Dict[str, Any]) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=model_config.get("temperature"),
            top_p=model_config.get("top_p"),
            top_k=model_config.get("top_k"),
            max_output_tokens=model_config.get("max_tokens"),
        )

    def extract_text(self, response: Any) -> str:
        """
        Text of the first candidate, skipping non-text and thought parts.

        Raises:
            MalformedResponse: no candidates, no content or no text parts
        """
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            self.logger.error(f"Google AI response has no candidates: {response!r}")
            raise MalformedResponse(UNEXPECTED_RESPONSE_SHAPE)

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        texts = [
            part.text for part in parts
            if isinstance(getattr(part, "text", None), str) and part.text and not getattr(part, "thought", False)
        ]
        if not texts:
            self.logger.error(f"Google AI first candidate has no text parts: {candidates[0]!r}")
            raise MalformedResponse(UNEXPECTED_RESPONSE_SHAPE)
        return "".join(texts)

    async def generate_text(self, prompt: str, model_config: Optional[Dict[str, Any]] = None) -> str:
        """
        Submit the prompt and return the generated text.

        Raises:
            ConfigurationError: no API key configured
            UpstreamStatusFailure: provider returned an error status
            NetworkFailure: timeout or transport error
            MalformedResponse: response without usable text
        """
        client = self._ensure_client()
        generation_config = self._create_generation_config(model_config or {})

        try:
            self.logger.debug(f"Sending request to Google AI with model: {self.model}")
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.model,
                    contents=self.build_contents(prompt),
                    config=generation_config,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            self.logger.error(f"Google AI request timed out after {self.timeout_seconds}s")
            raise NetworkFailure(f"Analysis request timed out after {self.timeout_seconds:g}s", timed_out=True) from e
        except errors.APIError as e:
            self.logger.error(f"Google AI API error {e.code}: {e.message}")
            raise UpstreamStatusFailure(
                f"Analysis request failed with status {e.code}: {e.message or e.status}",
                status=e.code
            ) from e
        except (httpx.TransportError, OSError) as e:
            self.logger.error(f"Network error during Google AI request: {type(e).__name__} - {e}")
            raise NetworkFailure(f"Network error during analysis request: {e}") from e

        text = self.extract_text(response)
        self.logger.debug("Received successful response from Google AI")
        return text
