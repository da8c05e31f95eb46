"""
Facebook post caption scraper.

The post URL is normalized to /reel/<id>, then fetched as a desktop browser,
as mobile Safari on m.facebook.com, and finally via the /posts/<id> path.
Every 200 body goes through the ordered caption patterns; the first candidate
that is long enough and is not login-wall boilerplate wins.
"""

from typing import List, Optional, Tuple

import logfire
from bs4 import BeautifulSoup

from ...config.settings import Settings, settings as default_settings
from ...exceptions import FetchError
from ...models import CaptionData
from ...services.http_fetcher import HttpFetcher, RedirectPolicy
from .constants import (
    DESKTOP_HEADERS,
    FACEBOOK_BOILERPLATE_PATTERNS,
    FACEBOOK_CAPTION_PATTERNS,
    FACEBOOK_REEL_ID_PATTERN,
    FACEBOOK_STORY_FBID_PATTERN,
    FACEBOOK_WATCH_ID_PATTERN,
    MOBILE_HEADERS,
)
from .html_extraction import clean_caption


def facebook_post_id(url: str) -> Optional[str]:
    for pattern in (FACEBOOK_REEL_ID_PATTERN, FACEBOOK_WATCH_ID_PATTERN, FACEBOOK_STORY_FBID_PATTERN):
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def fetch_variants(url: str) -> List[Tuple[str, str, dict]]:
    """(label, url, headers) in the order they are tried."""
    post_id = facebook_post_id(url)
    if not post_id:
        return [("desktop", url, DESKTOP_HEADERS)]
    return [
        ("desktop", f"https://www.facebook.com/reel/{post_id}", DESKTOP_HEADERS),
        ("mobile", f"https://m.facebook.com/reel/{post_id}", MOBILE_HEADERS),
        ("posts_path", f"https://www.facebook.com/posts/{post_id}", DESKTOP_HEADERS),
    ]


def is_boilerplate(text: str) -> bool:
    return any(pattern.search(text) for pattern in FACEBOOK_BOILERPLATE_PATTERNS)


def extract_facebook_caption(html: str, min_length: int = 50) -> Optional[str]:
    """First pattern match that is longer than min_length and not boilerplate."""
    for pattern in FACEBOOK_CAPTION_PATTERNS:
        for match in pattern.finditer(html):
            text = clean_caption(match.group(1))
            if len(text) > min_length and not is_boilerplate(text):
                return text
    return None


def extract_facebook_image(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, 'html.parser')
    tag = soup.find('meta', attrs={'property': 'og:image'})
    if tag and tag.get('content'):
        return tag['content'].strip()
    return None


class FacebookCaptionScraper:
    """Fetch a Facebook post through several request variants and pull its caption."""

    def __init__(self, fetcher: HttpFetcher, app_settings: Settings = None):
        self.fetcher = fetcher
        self.settings = app_settings or default_settings

    async def scrape(self, url: str) -> Optional[CaptionData]:
        """
        Args:
            url: Canonical (already share-resolved) Facebook post URL

        Returns:
            CaptionData, or None when no variant produced a usable caption
        """
        for label, variant_url, headers in fetch_variants(url):
            try:
                response = await self.fetcher.fetch(
                    variant_url,
                    method="GET",
                    headers=headers,
                    redirect_policy=RedirectPolicy.FOLLOW,
                    timeout=self.settings.fetch_timeout_seconds,
                )
            except FetchError as e:
                logfire.debug("facebook_variant_failed", variant=label, error=str(e)[:200])
                continue

            if response.status != 200:
                logfire.debug("facebook_variant_bad_status", variant=label, status=response.status)
                continue

            caption = extract_facebook_caption(response.text, self.settings.min_caption_length)
            if caption:
                logfire.info("facebook_caption_found", variant=label, caption_length=len(caption))
                return CaptionData(caption=caption, image=extract_facebook_image(response.text))

        logfire.warn("facebook_caption_not_found", url=url)
        return None
