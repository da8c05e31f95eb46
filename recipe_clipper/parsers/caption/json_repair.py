"""
Parsing and repair of JSON produced by the generative model.

Model output is untrusted: it may be wrapped in Markdown fences, surrounded by
chatter, or carry small syntax errors. Parsing goes
    strip fences -> isolate the outermost object/array -> json.loads
    -> deterministic repair pass -> json.loads
and callers fall back to per-field regex extraction when both fail.
"""

import json
import re
from typing import Any, Dict, List, Optional

FENCE_PATTERN = re.compile(r'```(?:json|JSON)?\s*')
DOUBLED_COMMA_PATTERN = re.compile(r',\s*,+')
TRAILING_COMMA_PATTERN = re.compile(r',\s*([}\]])')
UNQUOTED_KEY_PATTERN = re.compile(r'([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)\s*:')
SINGLE_QUOTED_VALUE_PATTERN = re.compile(r"([:\[,]\s*)'((?:[^'\\]|\\.)*)'(?=\s*[,}\]])")
SINGLE_QUOTED_KEY_PATTERN = re.compile(r"([{,]\s*)'([^'\\]*)'\s*:")


def strip_code_fences(text: str) -> str:
    return FENCE_PATTERN.sub('', text or '').strip()


def isolate_span(text: str, opener: str, closer: str) -> Optional[str]:
    """Text from the first opener to the last closer, inclusive."""
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def _single_to_double(match: re.Match) -> str:
    body = match.group(2).replace('\\\'', '\'').replace('"', '\\"')
    return f'{match.group(1)}"{body}"'


def repair_json_text(text: str) -> str:
    """
    Deterministic repair pass for almost-JSON.

    Collapses newlines, doubled commas and trailing commas, quotes bare keys
    and converts single-quoted keys and values to double quotes.
    """
    repaired = text.replace('\r', ' ').replace('\n', ' ').replace('\t', ' ')
    repaired = DOUBLED_COMMA_PATTERN.sub(',', repaired)
    repaired = TRAILING_COMMA_PATTERN.sub(r'\1', repaired)
    repaired = SINGLE_QUOTED_KEY_PATTERN.sub(lambda m: f'{m.group(1)}"{m.group(2)}":', repaired)
    repaired = UNQUOTED_KEY_PATTERN.sub(lambda m: f'{m.group(1)}"{m.group(2)}":', repaired)
    # Values may sit next to each other in arrays, so run until stable
    previous = None
    while previous != repaired:
        previous = repaired
        repaired = SINGLE_QUOTED_VALUE_PATTERN.sub(_single_to_double, repaired)
    return repaired


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_model_json(text: str, opener: str = '{', closer: str = '}') -> Optional[Any]:
    """
    Parse a JSON object (or array, with opener='[' / closer=']') from model output.

    Returns:
        Parsed value, or None when the text cannot be repaired into JSON
    """
    cleaned = strip_code_fences(text)
    candidate = isolate_span(cleaned, opener, closer)
    if candidate is None:
        return None

    parsed = _loads(candidate)
    if parsed is not None:
        return parsed
    return _loads(repair_json_text(candidate))


# ---------------------------------------------------------------------------
# Manual field extraction
# ---------------------------------------------------------------------------

STRING_LITERAL_PATTERN = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _unescape(value: str) -> str:
    decoded = _loads('"' + value + '"')
    if isinstance(decoded, str):
        return decoded
    return value.replace('\\"', '"').replace('\\n', ' ')


def extract_string_field(text: str, key: str) -> Optional[str]:
    """Value of ``"key": "..."`` anywhere in the text (single quotes tolerated)."""
    pattern = re.compile(r'["\']' + re.escape(key) + r'["\']\s*:\s*"((?:[^"\\]|\\.)*)"')
    match = pattern.search(text)
    if match:
        value = _unescape(match.group(1)).strip()
        return value or None

    pattern = re.compile(r'["\']' + re.escape(key) + r'["\']\s*:\s*\'([^\']*)\'')
    match = pattern.search(text)
    if match:
        return match.group(1).strip() or None

    # Bare numbers ("servings": 4)
    pattern = re.compile(r'["\']' + re.escape(key) + r'["\']\s*:\s*(\d+(?:\.\d+)?)')
    match = pattern.search(text)
    return match.group(1) if match else None


def extract_array_field(text: str, key: str) -> List[str]:
    """Every quoted literal inside the ``"key": [ ... ]`` array body."""
    pattern = re.compile(r'["\']' + re.escape(key) + r'["\']\s*:\s*\[(.*?)\]', re.DOTALL)
    match = pattern.search(text)
    if not match:
        return []
    body = match.group(1)
    values = [_unescape(item).strip() for item in STRING_LITERAL_PATTERN.findall(body)]
    if not values:
        values = [item.strip() for item in re.findall(r"'([^']*)'", body)]
    return [value for value in values if value]


def extract_fields_manually(text: str, scalar_keys: List[str], array_keys: List[str]) -> Dict[str, Any]:
    """Best-effort field recovery from text that will not parse as JSON."""
    fields: Dict[str, Any] = {}
    for key in scalar_keys:
        value = extract_string_field(text, key)
        if value is not None:
            fields[key] = value
    for key in array_keys:
        values = extract_array_field(text, key)
        if values:
            fields[key] = values
    return fields
