import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from coinchart.contracts.errors import MalformedResponse, NetworkFailure, UpstreamStatusFailure
from coinchart.logger.logger import Logger
from coinchart.utils.decorators import RetryPolicy


class BaseApiClient:
    """Base class for JSON-over-HTTP clients: session lifecycle, timeouts and error mapping."""

    def __init__(self,
                 base_url: str,
                 logger: Logger,
                 timeout_seconds: float = 15,
                 headers: Optional[Dict[str, str]] = None,
                 retry_policy: Optional[RetryPolicy] = None) -> None:
        self.base_url = base_url.rstrip('/')
        self.logger = logger
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.headers = headers or {}
        self.retry_policy = retry_policy or RetryPolicy()
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self._ensure_session()
        return self

    async def __aexit__(self, _exc_type, _exc_val, _exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session:
            try:
                self.logger.debug(f"Closing {self.__class__.__name__} session")
                await asyncio.wait_for(self.session.close(), timeout=1.0)
            except asyncio.TimeoutError:
                self.logger.error(f"{self.__class__.__name__} session close timed out")
            finally:
                self.session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure a session exists and return it."""
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
        return self.session

    async def _handle_error_response(self, response: aiohttp.ClientResponse, url: str) -> UpstreamStatusFailure:
        """Build the failure for a non-success status."""
        try:
            error_text = await response.text()
        except (aiohttp.ClientError, UnicodeDecodeError):
            error_text = "Failed to read error response"

        self.logger.debug(f"API Error for {url}: Status {response.status} - {error_text[:500]}")

        error_details = {
            401: "Authentication error. Check the API key.",
            403: "Permission denied by the provider.",
            404: "Resource not found.",
            429: "Rate limit exceeded. Try again later.",
        }
        hint = error_details.get(response.status)
        if hint is None and response.status >= 500:
            hint = "Server error. The service may be experiencing issues."

        message = f"Request failed with status {response.status}"
        if hint:
            message = f"{message}: {hint}"
        return UpstreamStatusFailure(message, status=response.status, details={"url": url, "body": error_text[:500]})

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON document with standardized error handling.

        Args:
            path: Path relative to base_url
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            NetworkFailure: transport error or timeout
            UpstreamStatusFailure: non-2xx status
            MalformedResponse: body is not valid JSON
        """
        session = self._ensure_session()
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            self.logger.debug(f"GET {url} params={params}")
            async with session.get(url, params=params) as response:
                if not 200 <= response.status < 300:
                    raise await self._handle_error_response(response, url)

                try:
                    return await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
                    raise MalformedResponse(f"Malformed JSON from {url}: {e}", details={"url": url}) from e
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"Request to {url} timed out", timed_out=True) from e
        except aiohttp.ClientPayloadError as e:
            raise NetworkFailure(f"Incomplete payload from {url}: {e}") from e
        except aiohttp.ClientError as e:
            raise NetworkFailure(f"Network error for {url}: {type(e).__name__} - {e}") from e
