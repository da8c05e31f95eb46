"""
Social caption scraping entry point for Instagram and Facebook post URLs.
"""

from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from ...config.settings import Settings, settings as default_settings
from ...models import CaptionData
from ...services.http_fetcher import HttpFetcher
from .constants import FACEBOOK_URL_PATTERN, INSTAGRAM_URL_PATTERN
from .facebook_resolver import FacebookShareResolver, is_share_url
from .facebook_scraper import FacebookCaptionScraper
from .instagram_scraper import InstagramCaptionScraper, clean_instagram_url


class SourcePlatform(str, Enum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    WEB_PAGE = "web_page"
    INVALID = "invalid"


def classify_url(url: str) -> SourcePlatform:
    """Decide which extraction path a URL takes."""
    if not url or not isinstance(url, str):
        return SourcePlatform.INVALID

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or ' ' in url:
        return SourcePlatform.INVALID

    host = parsed.netloc.lower()
    if host.endswith("instagram.com"):
        return SourcePlatform.INSTAGRAM if INSTAGRAM_URL_PATTERN.match(url) else SourcePlatform.INVALID
    if FACEBOOK_URL_PATTERN.match(url):
        return SourcePlatform.FACEBOOK
    return SourcePlatform.WEB_PAGE


class SocialCaptionScraper:
    """Resolve, fetch and extract the caption of an Instagram or Facebook post."""

    def __init__(self, fetcher: HttpFetcher, app_settings: Settings = None):
        self.settings = app_settings or default_settings
        self.share_resolver = FacebookShareResolver(fetcher, self.settings)
        self.facebook = FacebookCaptionScraper(fetcher, self.settings)
        self.instagram = InstagramCaptionScraper(fetcher, self.settings)

    async def resolve_facebook_url(self, url: str) -> str:
        """Share links are resolved best effort; the original URL is kept on failure."""
        if not is_share_url(url):
            return url
        resolved = await self.share_resolver.resolve(url)
        return resolved or url

    async def scrape(self, url: str, platform: SourcePlatform = None, resolve_share: bool = True) -> Optional[CaptionData]:
        """
        Args:
            url: Post URL
            platform: Pre-computed classification, to skip classifying again
            resolve_share: Resolve a Facebook share link first (off when the caller already did)

        Returns:
            CaptionData or None
        """
        platform = platform or classify_url(url)
        if platform == SourcePlatform.INSTAGRAM:
            return await self.instagram.scrape(clean_instagram_url(url))
        if platform == SourcePlatform.FACEBOOK:
            if resolve_share:
                url = await self.resolve_facebook_url(url)
            return await self.facebook.scrape(url)
        return None
