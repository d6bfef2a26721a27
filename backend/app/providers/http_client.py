"""
backend/app/providers/http_client.py

Purpose:
    Thin httpx.AsyncClient wrapper bound to one upstream provider with an
    explicit base URL and timeout. Failures surface to the caller; nothing
    is retried here.

Dependencies:
    - httpx
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger("oddsfeed.http_client")


@dataclass(frozen=True)
class ProviderClientConfig:
    base_url: str
    timeout_seconds: float = 10.0


def _safe_url(url: str) -> str:
    """Strip query params for safe logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


def describe_error(exc: BaseException) -> tuple[Optional[int], str]:
    """Return (status_code, message) for log lines; status is None for transport errors."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code, str(exc)
    return None, str(exc) or exc.__class__.__name__


class ProviderClient:
    """GET-only JSON client for a single provider base URL."""

    def __init__(
        self,
        name: str,
        config: ProviderClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._name = name
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET ``path`` and decode the JSON body. Raises on non-2xx or transport errors."""
        try:
            resp = await self._client.get(path, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "[%s] HTTP %d on GET %s",
                self._name, exc.response.status_code, _safe_url(exc.request.url),
            )
            raise
        except httpx.HTTPError as exc:
            logger.warning("[%s] Network error on GET %s: %s", self._name, path, exc)
            raise
        return resp.json()

    async def aclose(self) -> None:
        await self._client.aclose()
