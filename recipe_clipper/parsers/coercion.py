"""
Total coercion helpers for untyped JSON trees (JSON-LD blocks, model output).

Every helper accepts anything and returns ``None`` (or an empty list) when the
value does not have the expected shape. Nothing here raises.
"""

import re
from typing import Any, Dict, List, Optional

from .html_entities import decode_html_entities

_TAG_PATTERN = re.compile(r'<[^>]+>')
_WHITESPACE_PATTERN = re.compile(r'\s+')


def clean_text(value: str) -> str:
    """Strip tags, decode entities and collapse whitespace."""
    if not value:
        return ""
    text = _TAG_PATTERN.sub(' ', value)
    text = decode_html_entities(text)
    return _WHITESPACE_PATTERN.sub(' ', text).strip()


def as_dict(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def as_list(value: Any) -> List[Any]:
    """Wrap a scalar in a list; None becomes []."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_text(value: Any) -> Optional[str]:
    """
    Narrow a JSON value to display text.

    Strings are cleaned, numbers are formatted without a trailing ``.0``,
    lists yield their first textual item and objects their ``text``/``name``/
    ``@value``. Booleans and empty values give ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = clean_text(value)
        return text or None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    if isinstance(value, list):
        for item in value:
            text = as_text(item)
            if text:
                return text
        return None
    if isinstance(value, dict):
        for key in ('text', 'name', '@value'):
            text = as_text(value.get(key))
            if text:
                return text
    return None


def as_text_list(value: Any) -> List[str]:
    """Every textual item of a list (or the single item), in order."""
    result = []
    for item in as_list(value):
        text = as_text(item)
        if text:
            result.append(text)
    return result


def type_matches(node: Dict[str, Any], type_name: str) -> bool:
    """True when ``@type`` is ``type_name`` or a list that contains it."""
    node_type = node.get('@type')
    if isinstance(node_type, str):
        return node_type == type_name
    if isinstance(node_type, list):
        return type_name in node_type
    return False
