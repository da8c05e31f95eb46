"""
Tests for caption/image extraction from social post HTML
"""

import json

from recipe_clipper.parsers.social.facebook_scraper import extract_facebook_caption
from recipe_clipper.parsers.social.html_extraction import (
    clean_caption,
    extract_data_from_html,
    longest_script_caption,
)


def shared_data_script(caption, display_url="https://cdn.example.com/display.jpg"):
    shared = {
        "entry_data": {
            "PostPage": [{
                "graphql": {
                    "shortcode_media": {
                        "display_url": display_url,
                        "edge_media_to_caption": {"edges": [{"node": {"text": caption}}]},
                    }
                }
            }]
        }
    }
    return f"<script>window._sharedData = {json.dumps(shared)};</script>"


class TestExtractDataFromHtml:

    def test_shared_data_caption_beats_og_description(self):
        long_caption = "Crispy chickpea salad with lemon dressing. " + "x" * 357
        short_description = "y" * 60
        assert len(long_caption) == 400
        html = (
            "<html><head>"
            f'<meta property="og:description" content="{short_description}">'
            "</head><body>"
            f"{shared_data_script(long_caption)}"
            "</body></html>"
        )

        data = extract_data_from_html(html)

        assert data.caption == long_caption

    def test_json_ld_caption_used_without_shared_data(self):
        ld = {"@type": "VideoObject", "caption": "Slow cooker chili &amp; cornbread for game day", "image": ["https://cdn.example.com/ld.jpg"]}
        html = (
            f'<script type="application/ld+json">{json.dumps(ld)}</script>'
            '<meta property="og:description" content="short">'
        )

        data = extract_data_from_html(html)

        assert data.caption == "Slow cooker chili & cornbread for game day"
        assert data.image == "https://cdn.example.com/ld.jpg"

    def test_longest_script_caption_wins(self):
        short = "Quick pasta for two with garlic, butter and a squeeze of lemon juice!"
        longer = short + " Top with parmesan and black pepper, then serve straight away."
        html = (
            f'<script>{{"caption": "{short}"}}</script>'
            f'<script>{{"caption": "{longer}"}}</script>'
        )

        data = extract_data_from_html(html)

        assert data.caption == longer

    def test_og_description_is_last_resort(self):
        html = '<meta property="og:description" content="Banana bread &amp; coffee">'

        data = extract_data_from_html(html)

        assert data.caption == "Banana bread & coffee"

    def test_og_description_escapes_are_cleaned(self):
        html = r'<meta property="og:description" content="Crispy tofu\nCaf\u00e9 style \&quot;bowl\&quot;">'

        data = extract_data_from_html(html)

        assert data.caption == 'Crispy tofu\nCafé style "bowl"'

    def test_og_image_preferred_over_display_url(self):
        html = (
            '<meta property="og:image" content="https://cdn.example.com/og.jpg">'
            + shared_data_script("Caption text long enough to matter for this post.")
        )

        data = extract_data_from_html(html)

        assert data.image == "https://cdn.example.com/og.jpg"

    def test_display_url_used_without_meta_image(self):
        data = extract_data_from_html(shared_data_script("Some caption"))

        assert data.image == "https://cdn.example.com/display.jpg"

    def test_empty_html(self):
        data = extract_data_from_html("")

        assert data.caption is None
        assert data.image is None


class TestCleanCaption:

    def test_json_escapes_and_emoji_surrogates(self):
        raw = r"Line one\nLine \"two\" \ud83c\udf5d https:\/\/example.com"

        assert clean_caption(raw) == 'Line one\nLine "two" \U0001F35D https://example.com'

    def test_html_entities_after_unescaping(self):
        assert clean_caption("Mac &amp; cheese") == "Mac & cheese"

    def test_short_script_matches_are_ignored(self):
        assert longest_script_caption(['{"caption": "too short"}']) is None


class TestFacebookCaption:

    def test_structured_message_beats_title(self):
        message = "Creamy garlic butter salmon ready in 20 minutes, full recipe below!"
        html = (
            "<html><head><title>Facebook</title></head><body>"
            f'<script>{{"message": {{"text": "{message}"}}}}</script>'
            "</body></html>"
        )

        assert extract_facebook_caption(html) == message

    def test_login_wall_text_is_skipped(self):
        html = (
            '<meta property="og:description" content="Log in or sign up to view. See posts, photos and more on Facebook.">'
            '<meta name="description" content="One pan lemon orzo with spinach and feta, dinner in 25 minutes flat.">'
        )

        assert extract_facebook_caption(html) == "One pan lemon orzo with spinach and feta, dinner in 25 minutes flat."

    def test_nothing_long_enough(self):
        assert extract_facebook_caption("<title>Watch | Facebook</title>") is None
