"""
Caption inspection helpers: instruction presence, timing lines, time-unit cleanup.
"""

from typing import Dict, Optional

from ..html_entities import decode_html_entities
from ..social.constants import UNICODE_ESCAPE_PATTERN
from .constants import (
    BARE_NUMBER_PATTERN,
    COMBINED_TIME_PATTERN,
    FOREIGN_INSTRUCTION_PATTERN,
    IMPERATIVE_START_PATTERN,
    INSTRUCTION_SECTION_MARKERS,
    MIN_NUMBERED_STEPS,
    NOTES_ONLY_MARKERS,
    NUMBERED_STEP_PATTERN,
    TIME_UNIT_REWRITES,
    TIMING_PATTERNS,
)


def clean_time_unit(value: Optional[str]) -> Optional[str]:
    """
    Normalize model-produced durations.

    "20 minutes minutes" -> "20 min", "1 hour hour" -> "1 hr", "20" -> "20 min".
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if BARE_NUMBER_PATTERN.match(text):
        return f"{text} min"
    for pattern, replacement in TIME_UNIT_REWRITES:
        text = pattern.sub(replacement, text)
    return text.strip()


def _decoded(caption: str) -> str:
    text = UNICODE_ESCAPE_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), caption or "")
    return decode_html_entities(text)


def caption_has_instructions(caption: str) -> bool:
    """
    True when the caption itself carries cooking steps.

    Signals: an instructions/method section marker, three or more numbered
    cooking steps, a sentence or bullet that opens with a cooking verb, or
    cooking vocabulary in Spanish, French or Bulgarian. A caption whose only
    extra text is notes/tips does not count.
    """
    text = _decoded(caption)
    lowered = text.lower()

    has_markers = any(marker in lowered for marker in INSTRUCTION_SECTION_MARKERS)
    has_numbered_steps = len(NUMBERED_STEP_PATTERN.findall(text)) >= MIN_NUMBERED_STEPS
    has_imperatives = bool(IMPERATIVE_START_PATTERN.search(text))
    has_foreign_steps = bool(FOREIGN_INSTRUCTION_PATTERN.search(text))

    if not (has_markers or has_numbered_steps or has_imperatives or has_foreign_steps):
        return False

    # Notes/tips alone are not instructions
    has_only_notes = any(marker in lowered for marker in NOTES_ONLY_MARKERS) and not (
        has_markers or has_numbered_steps
    )
    return not has_only_notes


def extract_caption_timing(caption: str) -> Dict[str, str]:
    """
    Timing and servings stated in the caption ("Prep: 10 min", "Serves 4").

    Returns:
        Dict with any of prep_time, cook_time, total_time, servings
    """
    found: Dict[str, str] = {}
    if not caption:
        return found

    for field, pattern in TIMING_PATTERNS:
        if field in found:
            continue
        match = pattern.search(caption)
        if match:
            found[field] = match.group(1).strip()

    if 'prep_time' not in found or 'cook_time' not in found:
        combined = COMBINED_TIME_PATTERN.search(caption)
        if combined:
            found.setdefault('prep_time', f"{combined.group(1)} min")
            found.setdefault('cook_time', f"{combined.group(2)} min")

    for field in ('prep_time', 'cook_time', 'total_time'):
        if field in found:
            found[field] = clean_time_unit(found[field])
    return found
