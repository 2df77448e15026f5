"""Provider interface for remote insight generation"""

import httpx
from abc import ABC, abstractmethod
from typing import Any, Dict
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import (
    CredentialInvalidError,
    MalformedResponseError,
    ProviderUnavailableError,
    RateLimitedError,
    RemoteTimeoutError,
)
from vividpulse_insights.infrastructure.credentials import Credential

# Markers some providers use for a bad key on a 400 response
_INVALID_KEY_MARKERS = ("API_KEY_INVALID", "API key not valid", "invalid_api_key", "Incorrect API key")


class InsightProvider(ABC):
    """
    Contract every remote text-generation adapter satisfies.

    Adapters accept instruction text, the shaped data and a JSON schema
    descriptor, and return the raw reply text expected to hold one JSON
    object. Transport and HTTP failures are raised as tagged
    RemoteInsightError subclasses; the reply itself is validated by the
    caller.
    """

    name: str = "provider"

    def __init__(self, timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout = timeout or settings.remote_timeout_seconds
        self.transport = transport

    @abstractmethod
    async def generate(
        self,
        instruction: str,
        data: Dict[str, Any],
        schema: Dict[str, Any],
        credential: Credential,
    ) -> str:
        """Send one request and return the raw reply text"""

    async def _post_json(self, url: str, headers: Dict[str, str], body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON body and return the decoded JSON envelope.

        Raises:
            RemoteTimeoutError: Transport timeout or 408/504
            CredentialInvalidError: 401/403, or 400 flagging a bad key
            RateLimitedError: 429
            ProviderUnavailableError: Connection failure or other HTTP error
            MalformedResponseError: Envelope is not a JSON object
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(url, headers=headers, json=body)
                response.raise_for_status()
                envelope = response.json()

            except httpx.TimeoutException as e:
                raise RemoteTimeoutError(f"{self.name} timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise self._status_error(e.response) from e
            except httpx.RequestError as e:
                raise ProviderUnavailableError(f"{self.name} unreachable: {e.__class__.__name__}") from e
            except ValueError as e:
                raise MalformedResponseError(f"{self.name} returned a non-JSON envelope") from e

        if not isinstance(envelope, dict):
            raise MalformedResponseError(f"{self.name} returned an unexpected envelope")
        return envelope

    def _status_error(self, response: httpx.Response) -> Exception:
        status = response.status_code
        if status in (401, 403):
            return CredentialInvalidError(f"{self.name} rejected the credential: {status}")
        if status == 400 and any(marker in response.text for marker in _INVALID_KEY_MARKERS):
            return CredentialInvalidError(f"{self.name} rejected the credential: {status}")
        if status == 429:
            return RateLimitedError(f"{self.name} rate limit: {status}")
        if status in (408, 504):
            return RemoteTimeoutError(f"{self.name} gateway timeout: {status}")
        return ProviderUnavailableError(f"{self.name} error: {status}")
