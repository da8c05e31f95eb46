"""
Field-level helpers shared by the structured-data strategies.
"""

from typing import Any, Optional

from ..coercion import as_dict, as_list, as_text, clean_text
from .constants import ISO_DURATION_PATTERN


def format_duration(value: Any) -> Optional[str]:
    """
    Convert an ISO-8601 duration to display text.

    ``PT1H30M`` -> ``"1h 30m"``, ``P1DT2H`` -> ``"1d 2h"``. Text that is not an
    ISO duration passes through unchanged; a valid but empty duration
    (``PT0M``, ``PT``) gives ``None``.
    """
    text = as_text(value)
    if not text:
        return None

    match = ISO_DURATION_PATTERN.match(text.strip())
    if not match:
        return text

    days, hours, minutes, seconds = match.groups()
    parts = []
    if days and int(days):
        parts.append(f"{int(days)}d")
    if hours and int(hours):
        parts.append(f"{int(hours)}h")
    if minutes and int(minutes):
        parts.append(f"{int(minutes)}m")
    if seconds and float(seconds) and not parts:
        parts.append(f"{int(float(seconds))}s")
    return " ".join(parts) or None


def extract_image_url(image: Any) -> Optional[str]:
    """Image as string, list of strings/objects, or ImageObject ``{url}``."""
    for item in as_list(image):
        if isinstance(item, str) and item.strip():
            return item.strip()
        obj = as_dict(item)
        if obj:
            url = obj.get('url') or obj.get('contentUrl')
            if isinstance(url, str) and url.strip():
                return url.strip()
    return None


def extract_author(author: Any) -> Optional[str]:
    """Author as string, Person object, or a list of either (first wins)."""
    for item in as_list(author):
        if isinstance(item, str):
            text = clean_text(item)
            if text:
                return text
        obj = as_dict(item)
        if obj:
            text = as_text(obj.get('name'))
            if text:
                return text
    return None


def extract_servings(data: dict) -> Optional[str]:
    return as_text(data.get('recipeYield')) or as_text(data.get('yield'))


def normalize_difficulty(value: Any) -> Optional[str]:
    text = as_text(value)
    if not text:
        return None
    for level in ('Easy', 'Medium', 'Hard'):
        if text.lower() == level.lower():
            return level
    return text
