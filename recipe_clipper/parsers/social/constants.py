"""
Headers, URL shapes and extraction pattern tables for Instagram/Facebook scraping.
"""

import re

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
FACEBOOK_CRAWLER_USER_AGENT = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"

DESKTOP_HEADERS = {
    "User-Agent": DESKTOP_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
}

MOBILE_HEADERS = {
    "User-Agent": MOBILE_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

CRAWLER_HEADERS = {
    "User-Agent": FACEBOOK_CRAWLER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

INSTAGRAM_EMBED_HEADERS = {
    "User-Agent": DESKTOP_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Referer": "https://www.instagram.com/",
}

# ---------------------------------------------------------------------------
# URL shapes
# ---------------------------------------------------------------------------

INSTAGRAM_URL_PATTERN = re.compile(r'^https?://(?:www\.)?instagram\.com/(p|reel|reels|tv)/([A-Za-z0-9_-]+)', re.IGNORECASE)
FACEBOOK_URL_PATTERN = re.compile(r'^https?://(?:(?:www|m|web)\.)?(?:facebook\.com|fb\.watch)/', re.IGNORECASE)
FACEBOOK_SHARE_PATTERN = re.compile(r'facebook\.com/share/(?:r|v)/([A-Za-z0-9_-]+)', re.IGNORECASE)
FACEBOOK_REEL_ID_PATTERN = re.compile(r'/(?:reel|videos|posts|watch)/(?:\?v=)?(\d+)')
FACEBOOK_WATCH_ID_PATTERN = re.compile(r'[?&]v=(\d+)')
FACEBOOK_STORY_FBID_PATTERN = re.compile(r'[?&]story_fbid=(\d+)')

FACEBOOK_REEL_URL = "https://www.facebook.com/reel/{id}"
FACEBOOK_EMBED_URL = "https://www.facebook.com/plugins/video.php?href={href}"

# ---------------------------------------------------------------------------
# Facebook share-link id extraction (ordered)
# ---------------------------------------------------------------------------

SHARE_ID_KEYS = [
    'video_id', 'post_id', 'id', 'target_id', 'object_id',
    'story_id', 'media_id', 'content_id', 'item_id',
]

# Quoted then unquoted numeric value, per key
SHARE_ID_PATTERNS = [
    pattern
    for key in SHARE_ID_KEYS
    for pattern in (
        re.compile(r'"' + key + r'"\s*:\s*"(\d{6,})"'),
        re.compile(r'"' + key + r'"\s*:\s*(\d{6,})\b'),
    )
]

OG_URL_REEL_PATTERN = re.compile(
    r'<meta[^>]+property=["\']og:url["\'][^>]+content=["\'][^"\']*/reel/(\d+)',
    re.IGNORECASE
)
OG_URL_REEL_PATTERN_REVERSED = re.compile(
    r'<meta[^>]+content=["\'][^"\']*/reel/(\d+)[^"\']*["\'][^>]+property=["\']og:url["\']',
    re.IGNORECASE
)
LONG_NUMBER_PATTERN = re.compile(r'(?<!\d)(\d{10,})(?!\d)')

SHARE_QUERY_VARIATIONS = ['?ref=share', '?ref=embed', '?mibextid=wwXIfr', '?_rdr']

GUESSED_URL_TEMPLATES = [
    "https://www.facebook.com/reel/{id}",
    "https://www.facebook.com/posts/{id}",
    "https://www.facebook.com/videos/{id}",
    "https://www.facebook.com/watch/?v={id}",
    "https://m.facebook.com/reel/{id}",
    "https://m.facebook.com/posts/{id}",
    "https://m.facebook.com/videos/{id}",
    "https://m.facebook.com/watch/?v={id}",
]

RESOLVED_POST_MARKERS = ['/reel/', '/posts/', '/videos/', '/watch', 'story_fbid=']

# ---------------------------------------------------------------------------
# Facebook caption extraction (structured JSON first, <title> last)
# ---------------------------------------------------------------------------

FACEBOOK_CAPTION_PATTERNS = [
    re.compile(r'"message"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"creation_story"\s*:\s*\{.*?"message"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL),
    re.compile(r'"description"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"text_with_entities"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"savable_description"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"caption"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'<meta[^>]+property=["\']og:description["\'][^>]+content="([^"]*)"', re.IGNORECASE),
    re.compile(r'<meta[^>]+name=["\']description["\'][^>]+content="([^"]*)"', re.IGNORECASE),
    re.compile(r'<meta[^>]+property=["\']og:title["\'][^>]+content="([^"]*)"', re.IGNORECASE),
    re.compile(r'<title[^>]*>([^<]*)</title>', re.IGNORECASE),
]

FACEBOOK_BOILERPLATE_PATTERNS = [
    re.compile(r'^\s*facebook\s*$', re.IGNORECASE),
    re.compile(r'log\s*in\s*(?:or sign up)?\s*(?:to|on)?\s*(?:view|facebook|continue)', re.IGNORECASE),
    re.compile(r'^\s*log\s*in\b', re.IGNORECASE),
    re.compile(r'see posts, photos and more on facebook', re.IGNORECASE),
    re.compile(r'^\s*(?:watch|video)\s*\|\s*facebook\s*$', re.IGNORECASE),
    re.compile(r'you must log in', re.IGNORECASE),
]

# ---------------------------------------------------------------------------
# Generic HTML caption extraction
# ---------------------------------------------------------------------------

SHARED_DATA_PATTERN = re.compile(r'window\._sharedData\s*=\s*(\{.*?\});\s*(?:</script>|$)', re.DOTALL)

SCRIPT_CAPTION_PATTERNS = [
    re.compile(r'"edge_media_to_caption"\s*:\s*\{\s*"edges"\s*:\s*\[\s*\{\s*"node"\s*:\s*\{\s*"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"caption"\s*:\s*\{[^{}]*?"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"caption"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"text"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r"caption['\"]\s*:\s*['\"]([^'\"]*?)['\"]"),
]

SCRIPT_IMAGE_PATTERNS = [
    re.compile(r'"display_url"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"display_src"\s*:\s*"((?:[^"\\]|\\.)*)"'),
    re.compile(r'"thumbnail_src"\s*:\s*"((?:[^"\\]|\\.)*)"'),
]

UNICODE_ESCAPE_PATTERN = re.compile(r'\\u([0-9a-fA-F]{4})')
