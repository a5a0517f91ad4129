"""Async HTTP client with retry and timeout support."""

from __future__ import annotations

from typing import Any

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_exception_type, stop_after_attempt, wait_exponential

from factorfive_mcp.config.settings import RetryConfig


class HttpClient:
    """Thin wrapper around httpx with retries."""

    def __init__(
        self,
        timeout_seconds: float,
        retry_config: RetryConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._retry_config = retry_config
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def get_json(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any] | list[Any] | None:
        """Return JSON payload or raise runtime error."""

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_config.attempts),
                wait=wait_exponential(
                    min=self._retry_config.min_seconds,
                    max=self._retry_config.max_seconds,
                ),
                retry=retry_if_exception_type(httpx.HTTPError),
                reraise=True,
            ):
                with attempt:
                    response = await self._client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
        except RetryError as error:
            raise RuntimeError(f"HTTP retries exhausted for URL: {url}") from error
        except httpx.HTTPError as error:
            raise RuntimeError(f"HTTP request failed for URL: {url}") from error
        except ValueError as error:
            raise RuntimeError(f"Invalid JSON returned by URL: {url}") from error
        return None

    async def close(self) -> None:
        """Close underlying transport."""

        await self._client.aclose()
