"""
HTML entity decoding for scraped recipe text.

Named entities come from a fixed table; numeric references (``&#233;`` and
``&#xE9;``) are decoded generically. Anything unknown or out of range is left
as written.
"""

import re

NAMED_ENTITIES = {
    '&amp;': '&',
    '&lt;': '<',
    '&gt;': '>',
    '&quot;': '"',
    '&apos;': "'",
    '&#39;': "'",
    '&nbsp;': ' ',
    '&ndash;': '–',
    '&mdash;': '—',
    '&hellip;': '…',
    '&lsquo;': "'",
    '&rsquo;': "'",
    '&ldquo;': '"',
    '&rdquo;': '"',
    '&bull;': '•',
    '&middot;': '·',
    '&deg;': '°',
    '&frac12;': '½',
    '&frac14;': '¼',
    '&frac34;': '¾',
    '&times;': '×',
    '&trade;': '™',
    '&copy;': '©',
    '&reg;': '®',
}

_NAMED_PATTERN = re.compile('|'.join(re.escape(name) for name in NAMED_ENTITIES))
_DECIMAL_PATTERN = re.compile(r'&#(\d+);')
_HEX_PATTERN = re.compile(r'&#[xX]([0-9a-fA-F]+);')


def _code_point(match: re.Match, base: int) -> str:
    try:
        return chr(int(match.group(1), base))
    except (ValueError, OverflowError):
        return match.group(0)


def _decode_once(text: str) -> str:
    text = _NAMED_PATTERN.sub(lambda m: NAMED_ENTITIES[m.group(0)], text)
    text = _DECIMAL_PATTERN.sub(lambda m: _code_point(m, 10), text)
    return _HEX_PATTERN.sub(lambda m: _code_point(m, 16), text)


def decode_html_entities(text: str) -> str:
    """
    Replace HTML entities with the characters they stand for.

    Decoding repeats until the text stops changing, so double-escaped input
    such as ``&amp;amp;`` ends up fully decoded and a second call is a no-op.

    Args:
        text: Raw text that may contain entities

    Returns:
        Decoded text (empty string for falsy input)
    """
    if not text:
        return ""

    # Every pass that changes the text shortens it, so this terminates
    decoded = _decode_once(text)
    while decoded != text:
        text = decoded
        decoded = _decode_once(text)
    return decoded
