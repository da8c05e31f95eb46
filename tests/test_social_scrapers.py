"""
Tests for Instagram/Facebook caption scraping and URL classification
"""

import pytest

from recipe_clipper.exceptions import FetchError
from recipe_clipper.parsers.social import SocialCaptionScraper, SourcePlatform, classify_url
from recipe_clipper.parsers.social.instagram_scraper import clean_instagram_url, fetch_variants

from conftest import FakeFetcher

CAPTION = "Honey garlic chicken thighs, ready in 30 minutes. Full recipe in the caption below!"


def og_page(description, image=None):
    html = f'<html><head><meta property="og:description" content="{description}">'
    if image:
        html += f'<meta property="og:image" content="{image}">'
    return html + "</head><body></body></html>"


class TestClassifyUrl:

    @pytest.mark.parametrize("url, expected", [
        ("https://www.instagram.com/reel/ABC123/", SourcePlatform.INSTAGRAM),
        ("https://instagram.com/p/XyZ_9-/?igsh=abc", SourcePlatform.INSTAGRAM),
        ("https://www.instagram.com/someuser/", SourcePlatform.INVALID),
        ("https://www.facebook.com/share/r/AbC123/", SourcePlatform.FACEBOOK),
        ("https://m.facebook.com/reel/12345", SourcePlatform.FACEBOOK),
        ("https://www.allrecipes.com/recipe/12345/banana-bread/", SourcePlatform.WEB_PAGE),
        ("ftp://example.com/recipe", SourcePlatform.INVALID),
        ("not a url", SourcePlatform.INVALID),
        ("", SourcePlatform.INVALID),
    ])
    def test_classify_url(self, url, expected):
        assert classify_url(url) == expected


class TestInstagramScraper:

    def test_clean_instagram_url(self):
        assert clean_instagram_url("https://www.instagram.com/reel/ABC123/?igsh=xyz#top") == \
            "https://www.instagram.com/reel/ABC123/"

    def test_embed_endpoint_tried_first(self):
        urls = [url for _, url, _ in fetch_variants("https://www.instagram.com/reel/ABC123/")]

        assert urls[0] == "https://www.instagram.com/p/ABC123/embed/"
        assert urls[-1] == "https://www.instagram.com/reel/ABC123/"

    @pytest.mark.asyncio
    async def test_falls_through_failed_variants(self, test_settings):
        fetcher = FakeFetcher()
        fetcher.fail("https://www.instagram.com/p/ABC123/embed/", FetchError("embed", "connection reset"))
        fetcher.add("https://www.instagram.com/p/ABC123/", status=429)
        fetcher.add("https://www.instagram.com/reel/ABC123/", text=og_page(CAPTION, "https://cdn.example.com/cover.jpg"))
        scraper = SocialCaptionScraper(fetcher, test_settings)

        data = await scraper.scrape("https://www.instagram.com/reel/ABC123/?igsh=xyz")

        assert data.caption == CAPTION
        assert data.image == "https://cdn.example.com/cover.jpg"
        assert fetcher.called_urls() == [
            "https://www.instagram.com/p/ABC123/embed/",
            "https://www.instagram.com/p/ABC123/",
            "https://www.instagram.com/reel/ABC123/",
        ]

    @pytest.mark.asyncio
    async def test_no_caption_anywhere(self, test_settings):
        scraper = SocialCaptionScraper(FakeFetcher(), test_settings)

        assert await scraper.scrape("https://www.instagram.com/p/ABC123/") is None


class TestFacebookScraper:

    @pytest.mark.asyncio
    async def test_share_link_resolved_then_scraped(self, test_settings):
        share_url = "https://www.facebook.com/share/r/AbC123/"
        fetcher = FakeFetcher()
        fetcher.add(share_url, method="HEAD", status=302, headers={"Location": "https://www.facebook.com/reel/24680"})
        fetcher.add("https://www.facebook.com/reel/24680", text=og_page(CAPTION, "https://cdn.example.com/fb.jpg"))
        scraper = SocialCaptionScraper(fetcher, test_settings)

        data = await scraper.scrape(share_url)

        assert data.caption == CAPTION
        assert data.image == "https://cdn.example.com/fb.jpg"

    @pytest.mark.asyncio
    async def test_mobile_variant_after_desktop_login_wall(self, test_settings):
        fetcher = FakeFetcher()
        fetcher.add(
            "https://www.facebook.com/reel/24680",
            text=og_page("Log in or sign up to view. See posts, photos and more on Facebook."),
        )
        fetcher.add("https://m.facebook.com/reel/24680", text=og_page(CAPTION))
        scraper = SocialCaptionScraper(fetcher, test_settings)

        data = await scraper.scrape("https://www.facebook.com/watch/?v=24680")

        assert data.caption == CAPTION

    @pytest.mark.asyncio
    async def test_short_caption_rejected(self, test_settings):
        fetcher = FakeFetcher()
        fetcher.add("https://www.facebook.com/reel/24680", text=og_page("Yum!"))
        scraper = SocialCaptionScraper(fetcher, test_settings)

        assert await scraper.scrape("https://www.facebook.com/reel/24680") is None
