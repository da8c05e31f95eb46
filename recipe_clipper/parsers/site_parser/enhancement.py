"""
Post-extraction instruction enhancement.

Short instruction lists from schema data are often fragmentary on some sites,
while the page itself renders each step in a <span> under an "Instructions"
heading. When the list is at or under the configured threshold, those spans
replace it. Footnotes that read like steps are then dropped, and a heading
fragment such as "For the topping:" triggers one targeted scan for the steps
that belong under it; when that scan finds them the heading itself is dropped.
"""

from typing import List, Optional

import logfire
from bs4 import BeautifulSoup

from ...config.settings import Settings
from ...models import Recipe
from .constants import (
    FOOTNOTE_PATTERNS,
    INCOMPLETE_HEADING_PREFIXES,
    MIN_INSTRUCTION_LENGTH,
    MISSING_STEP_PATTERN,
    SHORT_HEADING_MAX_LENGTH,
    SHORT_HEADING_PATTERN,
)
from .heuristics import (
    dedupe,
    element_text,
    find_instruction_headings,
    is_ingredient_line,
    leaf_elements,
    looks_like_instruction,
)


def scan_heading_spans(soup: BeautifulSoup) -> List[str]:
    """Instruction-shaped <span> text in the container around an Instructions heading."""
    for heading in find_instruction_headings(soup):
        container = heading.parent
        if container is None:
            continue
        spans = [element_text(span) for span in leaf_elements(container, ['span'])]
        steps = dedupe(text for text in spans if looks_like_instruction(text))
        if steps:
            return steps
    return []


def is_footnote(text: str) -> bool:
    return any(pattern.search(text) for pattern in FOOTNOTE_PATTERNS)


def looks_like_incomplete_heading(text: str) -> bool:
    lowered = text.lower().strip()
    if any(lowered.startswith(prefix) for prefix in INCOMPLETE_HEADING_PREFIXES):
        return True
    return len(lowered) < SHORT_HEADING_MAX_LENGTH and bool(SHORT_HEADING_PATTERN.match(lowered))


def is_heading_fragment(text: str) -> bool:
    """A heading line on its own, as opposed to a step that opens with "For the ..."."""
    stripped = text.strip()
    return looks_like_incomplete_heading(stripped) and (
        stripped.endswith(':') or len(stripped) < SHORT_HEADING_MAX_LENGTH
    )


def scan_missing_steps(soup: BeautifulSoup, existing: List[str]) -> List[str]:
    """Spans with stirring/transfer/temperature cues not already in the list."""
    known = {step.lower() for step in existing}
    found = []
    for span in leaf_elements(soup, ['span']):
        text = element_text(span)
        if len(text) < MIN_INSTRUCTION_LENGTH or is_ingredient_line(text):
            continue
        if text.lower() in known or is_footnote(text):
            continue
        if MISSING_STEP_PATTERN.search(text):
            known.add(text.lower())
            found.append(text)
    return found


class InstructionEnhancer:
    """Runs after whichever strategy won; returns a new Recipe when anything changed."""

    def __init__(self, app_settings: Settings):
        self.threshold = app_settings.instruction_enhancement_threshold
        self.enabled = app_settings.instruction_enhancement_enabled

    def enhance(self, recipe: Recipe, soup: BeautifulSoup, strategy: Optional[str] = None) -> Recipe:
        if not self.enabled:
            return recipe

        original = list(recipe.instructions)
        instructions = original

        # Step 1: replace short lists with heading-scoped spans
        if len(instructions) <= self.threshold:
            span_steps = scan_heading_spans(soup)
            if span_steps and span_steps != instructions:
                logfire.info("instructions_replaced_by_span_scan",
                             strategy=strategy,
                             before_count=len(instructions),
                             after_count=len(span_steps),
                             threshold=self.threshold)
                instructions = span_steps

        # Step 2: drop footnotes and asides
        instructions = [step for step in instructions if not is_footnote(step)]

        # Step 3: a dangling section heading means steps were missed
        if any(looks_like_incomplete_heading(step) for step in instructions):
            missing = scan_missing_steps(soup, instructions)
            if missing:
                logfire.info("instructions_missing_steps_appended",
                             strategy=strategy,
                             appended_count=len(missing))
                complete = [step for step in instructions if not is_heading_fragment(step)]
                instructions = complete + missing

        if instructions == original:
            return recipe
        return recipe.model_copy(update={"instructions": instructions})
