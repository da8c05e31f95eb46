"""
Instagram post caption scraper.

The embed page has the least anti-bot friction, so it goes first; then the
/p/, /reel/ and /tv/ paths, and finally the original URL as a desktop browser.
"""

from typing import List, Optional, Tuple

import logfire

from ...config.settings import Settings, settings as default_settings
from ...exceptions import FetchError
from ...models import CaptionData
from ...services.http_fetcher import HttpFetcher, RedirectPolicy
from .constants import DESKTOP_HEADERS, INSTAGRAM_EMBED_HEADERS, INSTAGRAM_URL_PATTERN
from .html_extraction import extract_data_from_html


def instagram_post_id(url: str) -> Optional[str]:
    match = INSTAGRAM_URL_PATTERN.match(url or "")
    return match.group(2) if match else None


def clean_instagram_url(url: str) -> str:
    """Drop query string and fragment (igsh=..., utm_source=...)."""
    return url.split('?')[0].split('#')[0]


def fetch_variants(url: str) -> List[Tuple[str, str, dict]]:
    """(label, url, headers) in the order they are tried."""
    variants = []
    post_id = instagram_post_id(url)
    if post_id:
        variants.append(("embed", f"https://www.instagram.com/p/{post_id}/embed/", INSTAGRAM_EMBED_HEADERS))
        for path in ("p", "reel", "tv"):
            variants.append((path, f"https://www.instagram.com/{path}/{post_id}/", DESKTOP_HEADERS))
    variants.append(("original", url, DESKTOP_HEADERS))
    return variants


class InstagramCaptionScraper:
    """Fetch an Instagram post through several endpoints and pull its caption."""

    def __init__(self, fetcher: HttpFetcher, app_settings: Settings = None):
        self.fetcher = fetcher
        self.settings = app_settings or default_settings

    async def scrape(self, url: str) -> Optional[CaptionData]:
        seen = set()
        for label, variant_url, headers in fetch_variants(url):
            if variant_url in seen:
                continue
            seen.add(variant_url)

            try:
                response = await self.fetcher.fetch(
                    variant_url,
                    method="GET",
                    headers=headers,
                    redirect_policy=RedirectPolicy.FOLLOW,
                    timeout=self.settings.fetch_timeout_seconds,
                )
            except FetchError as e:
                logfire.debug("instagram_variant_failed", variant=label, error=str(e)[:200])
                continue

            if not response.ok:
                logfire.debug("instagram_variant_bad_status", variant=label, status=response.status)
                continue

            data = extract_data_from_html(response.text)
            if data.caption:
                logfire.info("instagram_caption_found",
                             variant=label,
                             caption_length=len(data.caption),
                             has_image=bool(data.image))
                return CaptionData(caption=data.caption, image=data.image)

        logfire.warn("instagram_caption_not_found", url=url)
        return None
