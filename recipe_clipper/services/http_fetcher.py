"""
HTTP fetching collaborator.

Parsers depend on the small ``HttpFetcher`` protocol; ``HttpxFetcher`` is the
production implementation on ``httpx.AsyncClient``. Transport failures raise
``FetchError``. Non-2xx responses are returned so callers can inspect them
(a 301 with a Location header is a useful answer for share-link resolution).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Protocol

import httpx
import logfire

from ..config.settings import settings
from ..exceptions import FetchError


class RedirectPolicy(str, Enum):
    MANUAL = "manual"
    FOLLOW = "follow"


@dataclass(frozen=True)
class FetchResponse:
    status: int
    final_url: str
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class HttpFetcher(Protocol):
    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        redirect_policy: RedirectPolicy = RedirectPolicy.FOLLOW,
        timeout: Optional[float] = None,
    ) -> FetchResponse:
        ...


class HttpxFetcher:
    """Fetch text over HTTP with httpx, one client per request."""

    def __init__(self, default_timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.default_timeout = default_timeout or settings.fetch_timeout_seconds
        # Injected transport is used by tests (httpx.MockTransport)
        self.transport = transport

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        redirect_policy: RedirectPolicy = RedirectPolicy.FOLLOW,
        timeout: Optional[float] = None,
    ) -> FetchResponse:
        """
        Perform a single HTTP request.

        Args:
            url: Absolute URL to request
            method: HTTP method (GET or HEAD)
            headers: Request headers
            redirect_policy: Follow redirects or surface the 3xx response
            timeout: Per-request timeout in seconds

        Returns:
            FetchResponse with status, final URL, body text and headers

        Raises:
            FetchError: On connection errors, timeouts and invalid URLs
        """
        follow = redirect_policy == RedirectPolicy.FOLLOW
        try:
            async with httpx.AsyncClient(
                timeout=timeout or self.default_timeout,
                follow_redirects=follow,
                transport=self.transport,
            ) as client:
                response = await client.request(method, url, headers=headers or {})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logfire.debug("http_fetch_failed", url=url, method=method, error=str(e)[:200])
            raise FetchError(url, f"{type(e).__name__}: {e}") from e

        body = "" if method.upper() == "HEAD" else response.text
        return FetchResponse(
            status=response.status_code,
            final_url=str(response.url),
            text=body,
            headers=dict(response.headers),
        )
