"""
Caption and cover-image extraction from Instagram/Facebook post HTML.

Caption priority when several sources are present:
    1. window._sharedData caption (full, authoritative)
    2. JSON-LD caption/description
    3. longest caption-shaped string found in any <script>
    4. og:description (often truncated, last resort)
"""

import json
from typing import Any, Iterable, List, NamedTuple, Optional

from bs4 import BeautifulSoup

from ..coercion import as_dict, as_list
from ..html_entities import decode_html_entities
from .constants import (
    SCRIPT_CAPTION_PATTERNS,
    SCRIPT_IMAGE_PATTERNS,
    SHARED_DATA_PATTERN,
    UNICODE_ESCAPE_PATTERN,
)

MIN_SCRIPT_CAPTION_LENGTH = 50


class PostData(NamedTuple):
    caption: Optional[str]
    image: Optional[str]


def clean_caption(raw: str) -> str:
    """
    Decode JSON string escapes and HTML entities in scraped caption text.

    Handles literal ``\\n``, ``\\"``, ``\\/`` and ``\\uXXXX`` sequences,
    including UTF-16 surrogate pairs used for emoji.
    """
    if not raw:
        return ""
    try:
        text = json.loads('"' + raw + '"')
    except json.JSONDecodeError:
        text = (raw.replace('\\n', '\n')
                   .replace('\\"', '"')
                   .replace('\\/', '/')
                   .replace('\\t', ' '))
        text = UNICODE_ESCAPE_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), text)
        # Recombine surrogate pairs; lone halves become U+FFFD
        text = text.encode('utf-16', 'surrogatepass').decode('utf-16', 'replace')
    return decode_html_entities(text).strip()


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    tag = soup.find('meta', attrs={'property': key}) or soup.find('meta', attrs={'name': key})
    if tag and tag.get('content'):
        return tag['content'].strip() or None
    return None


def _script_bodies(soup: BeautifulSoup) -> List[str]:
    bodies = []
    for script in soup.find_all('script'):
        body = script.string or script.get_text()
        if body and body.strip():
            bodies.append(body)
    return bodies


def shared_data_post(html: str) -> Optional[dict]:
    """``entry_data.PostPage[0].graphql.shortcode_media`` from window._sharedData."""
    match = SHARED_DATA_PATTERN.search(html)
    if not match:
        return None
    try:
        shared = json.loads(match.group(1))
    except json.JSONDecodeError:
        return None

    entry_data = as_dict(as_dict(shared) and shared.get('entry_data')) or {}
    pages = as_list(entry_data.get('PostPage'))
    page = as_dict(pages[0]) if pages else None
    graphql = as_dict(page.get('graphql')) if page else None
    return as_dict(graphql.get('shortcode_media')) if graphql else None


def shared_data_caption(post: Optional[dict]) -> Optional[str]:
    if not post:
        return None
    edges = as_list((as_dict(post.get('edge_media_to_caption')) or {}).get('edges'))
    node = as_dict((as_dict(edges[0]) or {}).get('node')) if edges else None
    text = node.get('text') if node else None
    if isinstance(text, str) and text.strip():
        return decode_html_entities(text).strip()
    return None


def _json_ld_nodes(soup: BeautifulSoup) -> Iterable[dict]:
    for script in soup.find_all('script', type='application/ld+json'):
        raw = script.string or script.get_text()
        if not raw:
            continue
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            continue
        for item in as_list(data):
            node = as_dict(item)
            if node:
                yield node


def json_ld_caption_and_image(soup: BeautifulSoup) -> PostData:
    caption = None
    image = None
    for node in _json_ld_nodes(soup):
        if caption is None:
            text = node.get('caption') or node.get('articleBody') or node.get('description')
            if isinstance(text, str) and text.strip():
                caption = decode_html_entities(text).strip()
        if image is None:
            for item in as_list(node.get('image')):
                url = item if isinstance(item, str) else (as_dict(item) or {}).get('url')
                if isinstance(url, str) and url.strip():
                    image = url.strip()
                    break
    return PostData(caption or None, image)


def longest_script_caption(script_bodies: List[str]) -> Optional[str]:
    """Best caption-shaped string across all scripts: longest wins."""
    candidates = (
        clean_caption(match.group(1))
        for body in script_bodies
        for pattern in SCRIPT_CAPTION_PATTERNS
        for match in pattern.finditer(body)
    )
    return max(
        (text for text in candidates if len(text) > MIN_SCRIPT_CAPTION_LENGTH),
        key=len,
        default=None,
    )


def script_image(script_bodies: List[str]) -> Optional[str]:
    for body in script_bodies:
        for pattern in SCRIPT_IMAGE_PATTERNS:
            match = pattern.search(body)
            if match and match.group(1):
                return clean_caption(match.group(1))
    return None


def first_present(values: Iterable[Any]) -> Optional[Any]:
    for value in values:
        if value:
            return value
    return None


def extract_data_from_html(html: str) -> PostData:
    """
    Recover the post caption and cover image from a social post page.

    Args:
        html: Raw HTML of the post, embed or mobile page

    Returns:
        PostData with caption and image, either of which may be None
    """
    if not html:
        return PostData(None, None)

    soup = BeautifulSoup(html, 'html.parser')
    scripts = _script_bodies(soup)
    post = shared_data_post(html)
    ld_caption, ld_image = json_ld_caption_and_image(soup)

    og_description = _meta_content(soup, 'og:description')

    caption = first_present([
        shared_data_caption(post),
        ld_caption,
        longest_script_caption(scripts),
        clean_caption(og_description) or None,
    ])

    image = first_present([
        _meta_content(soup, 'og:image'),
        _meta_content(soup, 'twitter:image'),
        ld_image,
        post.get('display_url') if post else None,
        script_image(scripts),
    ])
    if image and not isinstance(image, str):
        image = None

    return PostData(caption, image)
