"""
Facebook share-link resolution.

``facebook.com/share/r/<token>`` links redirect to the real post only for some
clients. Each method below is tried in order until one yields a post URL; a
failing method (network error, blocked page, no id in the body) never stops
the chain. When everything fails the caller keeps the original share URL.
"""

from typing import List, Optional
from urllib.parse import quote, urljoin

import logfire

from ...config.settings import Settings, settings as default_settings
from ...exceptions import FetchError
from ...services.http_fetcher import FetchResponse, HttpFetcher, RedirectPolicy
from ..strategies import first_result_async
from .constants import (
    CRAWLER_HEADERS,
    DESKTOP_HEADERS,
    FACEBOOK_EMBED_URL,
    FACEBOOK_REEL_URL,
    FACEBOOK_SHARE_PATTERN,
    GUESSED_URL_TEMPLATES,
    LONG_NUMBER_PATTERN,
    MOBILE_HEADERS,
    OG_URL_REEL_PATTERN,
    OG_URL_REEL_PATTERN_REVERSED,
    RESOLVED_POST_MARKERS,
    SHARE_ID_PATTERNS,
    SHARE_QUERY_VARIATIONS,
)


def is_share_url(url: str) -> bool:
    return bool(FACEBOOK_SHARE_PATTERN.search(url or ""))


def share_token(url: str) -> Optional[str]:
    match = FACEBOOK_SHARE_PATTERN.search(url or "")
    return match.group(1) if match else None


def find_post_id(html: str, allow_bare_numbers: bool = True) -> Optional[str]:
    """
    Find a numeric post/video id in a Facebook page body.

    Tries the JSON-key patterns in order, then an og:url pointing at /reel/<id>,
    then (optionally) the first 10+ digit number anywhere on the page.
    """
    if not html:
        return None
    for pattern in SHARE_ID_PATTERNS + [OG_URL_REEL_PATTERN, OG_URL_REEL_PATTERN_REVERSED]:
        match = pattern.search(html)
        if match:
            return match.group(1)
    if allow_bare_numbers:
        match = LONG_NUMBER_PATTERN.search(html)
        if match:
            return match.group(1)
    return None


def points_at_post(url: str) -> bool:
    return 'facebook.com' in url and any(marker in url for marker in RESOLVED_POST_MARKERS)


class ResolutionMethod:
    """Base class: one guarded share-resolution attempt."""

    name = "base"

    def __init__(self, fetcher: HttpFetcher, app_settings: Settings):
        self.fetcher = fetcher
        self.settings = app_settings

    async def attempt(self, share_url: str) -> Optional[str]:
        try:
            return await self.resolve(share_url)
        except FetchError as e:
            logfire.debug("share_resolution_method_failed", method=self.name, error=str(e)[:200])
            return None

    async def resolve(self, share_url: str) -> Optional[str]:
        raise NotImplementedError

    async def _get(self, url: str, headers: dict, follow: bool = True) -> FetchResponse:
        return await self.fetcher.fetch(
            url,
            method="GET",
            headers=headers,
            redirect_policy=RedirectPolicy.FOLLOW if follow else RedirectPolicy.MANUAL,
            timeout=self.settings.fetch_timeout_seconds,
        )

    async def _head(self, url: str, headers: dict) -> FetchResponse:
        return await self.fetcher.fetch(
            url,
            method="HEAD",
            headers=headers,
            redirect_policy=RedirectPolicy.MANUAL,
            timeout=self.settings.probe_timeout_seconds,
        )


class HeadRedirectMethod(ResolutionMethod):
    """Step 1: HEAD without following redirects; a 3xx Location is the answer."""

    name = "head_redirect"

    async def resolve(self, share_url: str) -> Optional[str]:
        response = await self._head(share_url, DESKTOP_HEADERS)
        location = response.header('location')
        if response.is_redirect and location:
            return urljoin(share_url, location)
        return None


class FollowRedirectMethod(ResolutionMethod):
    """Step 2: GET following redirects; accept a changed facebook.com final URL."""

    name = "follow_redirect"

    async def resolve(self, share_url: str) -> Optional[str]:
        response = await self._get(share_url, DESKTOP_HEADERS)
        if response.final_url != share_url and 'facebook.com' in response.final_url:
            return response.final_url
        return None


class BodyIdMethod(ResolutionMethod):
    """Step 3: GET the share page and dig a post id out of the body."""

    name = "body_id"

    async def resolve(self, share_url: str) -> Optional[str]:
        response = await self._get(share_url, DESKTOP_HEADERS)
        post_id = find_post_id(response.text)
        return FACEBOOK_REEL_URL.format(id=post_id) if post_id else None


class UserAgentMethod(ResolutionMethod):
    """Step 4: mobile Safari, then Facebook's own crawler; only /reel/ targets count."""

    name = "user_agent_retry"

    async def resolve(self, share_url: str) -> Optional[str]:
        for headers in (MOBILE_HEADERS, CRAWLER_HEADERS):
            try:
                response = await self._get(share_url, headers)
            except FetchError:
                continue
            if response.final_url != share_url and '/reel/' in response.final_url:
                return response.final_url
        return None


class EmbedEndpointMethod(ResolutionMethod):
    """Step 5: video embed plugin page, scanned for the same id patterns."""

    name = "embed_endpoint"

    async def resolve(self, share_url: str) -> Optional[str]:
        embed_url = FACEBOOK_EMBED_URL.format(href=quote(share_url, safe=''))
        response = await self._get(embed_url, DESKTOP_HEADERS)
        if not response.ok:
            return None
        post_id = find_post_id(response.text, allow_bare_numbers=False)
        return FACEBOOK_REEL_URL.format(id=post_id) if post_id else None


class QueryVariationMethod(ResolutionMethod):
    """Step 6: redirect behaviour differs per referrer tag, so retry with a few."""

    name = "query_variation"

    async def resolve(self, share_url: str) -> Optional[str]:
        base = share_url.split('?')[0]
        for suffix in SHARE_QUERY_VARIATIONS:
            candidate = base + suffix
            try:
                response = await self._get(candidate, DESKTOP_HEADERS)
            except FetchError:
                continue
            if response.final_url not in (candidate, share_url) and points_at_post(response.final_url):
                return response.final_url
        return None


class GuessedUrlMethod(ResolutionMethod):
    """Step 7: probe canonical URL shapes built from the share token."""

    name = "guessed_url"

    def candidates(self, share_url: str) -> List[str]:
        token = share_token(share_url)
        if not token:
            return []
        return [template.format(id=token) for template in GUESSED_URL_TEMPLATES]

    async def resolve(self, share_url: str) -> Optional[str]:
        for candidate in self.candidates(share_url):
            try:
                response = await self._head(candidate, DESKTOP_HEADERS)
            except FetchError:
                continue
            if response.status == 200 or response.is_redirect:
                return candidate
        return None


class FacebookShareResolver:
    """Resolve a Facebook share link to a canonical post URL, best effort."""

    METHOD_CLASSES = [
        HeadRedirectMethod,
        FollowRedirectMethod,
        BodyIdMethod,
        UserAgentMethod,
        EmbedEndpointMethod,
        QueryVariationMethod,
        GuessedUrlMethod,
    ]

    def __init__(self, fetcher: HttpFetcher, app_settings: Settings = None):
        self.settings = app_settings or default_settings
        self.methods = [method_class(fetcher, self.settings) for method_class in self.METHOD_CLASSES]

    async def resolve(self, share_url: str) -> Optional[str]:
        """
        Args:
            share_url: A facebook.com/share/r/... or /share/v/... link

        Returns:
            Resolved post URL, or None when every method failed
        """
        if not is_share_url(share_url):
            return None

        resolved, method = await first_result_async(self.methods, share_url, cascade="facebook_share")
        if resolved:
            logfire.info("facebook_share_resolved", share_url=share_url, resolved_url=resolved, method=method)
        else:
            logfire.warn("facebook_share_unresolved", share_url=share_url)
        return resolved
