"""
Shared fixtures: in-memory HTTP fetcher and completion service fakes.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Tuple, Union

import logfire
import pytest

from recipe_clipper.config.settings import Settings
from recipe_clipper.exceptions import CompletionError
from recipe_clipper.services.http_fetcher import FetchResponse, RedirectPolicy

Handler = Callable[[Dict[str, str]], FetchResponse]
Route = Union[FetchResponse, Exception, Handler]


@pytest.fixture(scope="session", autouse=True)
def quiet_logfire():
    logfire.configure(send_to_logfire=False, console=False)


class FakeFetcher:
    """Routes (method, url) to canned responses; anything unrouted is a 404."""

    def __init__(self, hang: bool = False):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.calls: List[Tuple[str, str, RedirectPolicy]] = []
        self.hang = hang

    def add(
        self,
        url: str,
        text: str = "",
        status: int = 200,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        final_url: Optional[str] = None,
    ) -> None:
        self.routes[(method, url)] = FetchResponse(
            status=status,
            final_url=final_url or url,
            text=text,
            headers=headers or {},
        )

    def fail(self, url: str, error: Exception, method: str = "GET") -> None:
        self.routes[(method, url)] = error

    def respond(self, url: str, handler: Handler, method: str = "GET") -> None:
        """Route to a function of the request headers, for user-agent dependent pages."""
        self.routes[(method, url)] = handler

    def called_urls(self, method: Optional[str] = None) -> List[str]:
        return [url for call_method, url, _ in self.calls if method is None or call_method == method]

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        redirect_policy: RedirectPolicy = RedirectPolicy.FOLLOW,
        timeout: Optional[float] = None,
    ) -> FetchResponse:
        self.calls.append((method, url, redirect_policy))
        if self.hang:
            # Never resolves
            await asyncio.Event().wait()

        route = self.routes.get((method, url))
        if route is None:
            return FetchResponse(status=404, final_url=url)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(headers or {})
        return route


class FakeCompletionService:
    """Returns queued responses in order and records every prompt."""

    def __init__(self, responses: Optional[List[Union[str, Exception]]] = None):
        self.responses = list(responses or [])
        self.prompts: List[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise CompletionError("No completion queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def test_settings():
    return Settings(
        google_gemini_key="test-key",
        pipeline_timeout_seconds=5.0,
        fetch_timeout_seconds=1.0,
        probe_timeout_seconds=1.0,
    )


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def completion_service():
    return FakeCompletionService()
