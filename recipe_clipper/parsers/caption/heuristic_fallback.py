"""
Regex-only caption fallback.

Used when the generative extractor gives up. Produces a low-confidence,
ingredients-only recipe with placeholder timing that a later instruction
generation pass can complete.
"""

from typing import List, Optional

import logfire

from ...models import Nutrition, Recipe
from .caption_metadata import extract_caption_timing
from .constants import (
    DEFAULT_COOK_TIME,
    DEFAULT_DIFFICULTY,
    DEFAULT_PREP_TIME,
    DEFAULT_SERVINGS,
    DEFAULT_TITLE,
    DEFAULT_TOTAL_TIME,
    DISH_NOUN_PATTERN,
    FOOD_PHRASE_PATTERN,
    FRAGMENT_SPLIT_PATTERN,
    INGREDIENT_BLOCKLIST_PATTERN,
    LEADING_NON_LETTERS_PATTERN,
    MAX_HEURISTIC_INGREDIENTS,
    MAX_TITLE_WORDS,
    MIN_INGREDIENT_LENGTH,
    PLACEHOLDER_NUTRITION,
    QUANTITY_UNIT_INGREDIENT_PATTERN,
)
from .generative_extractor import video_sentinel


def mine_ingredients(caption: str) -> List[str]:
    """Quantity+unit matches first, then bare food phrases; deduped case-insensitively."""
    candidates = [m.group(0) for m in QUANTITY_UNIT_INGREDIENT_PATTERN.finditer(caption)]
    candidates += [m.group(0) for m in FOOD_PHRASE_PATTERN.finditer(caption)]

    ingredients: List[str] = []
    seen = set()
    for candidate in candidates:
        text = " ".join(candidate.split()).strip(" -•*")
        if len(text) < MIN_INGREDIENT_LENGTH or INGREDIENT_BLOCKLIST_PATTERN.search(text):
            continue
        key = text.lower()
        # A bare phrase already covered by a quantity match adds nothing
        if key in seen or any(key in existing for existing in seen):
            continue
        seen.add(key)
        ingredients.append(text)
        if len(ingredients) >= MAX_HEURISTIC_INGREDIENTS:
            break
    return ingredients


def derive_title(caption: str) -> str:
    """First capitalized fragment that ends in a dish noun, e.g. "Creamy Tuscan Pasta"."""
    for fragment in FRAGMENT_SPLIT_PATTERN.split(caption):
        fragment = LEADING_NON_LETTERS_PATTERN.sub('', fragment).strip()
        if not fragment or not fragment[0].isupper():
            continue
        dish_matches = list(DISH_NOUN_PATTERN.finditer(fragment))
        if not dish_matches:
            continue
        title = fragment[:dish_matches[-1].end()].strip()
        if len(title.split()) <= MAX_TITLE_WORDS:
            return title
    return DEFAULT_TITLE


class CaptionHeuristicFallback:
    """Ingredients-only recipe from caption text, no model involved."""

    def extract(self, caption: str, source_url: Optional[str] = None) -> Optional[Recipe]:
        if not caption:
            return None

        ingredients = mine_ingredients(caption)
        if not ingredients:
            logfire.info("caption_heuristic_no_ingredients", caption_length=len(caption))
            return None

        timing = extract_caption_timing(caption)
        recipe = Recipe(
            title=derive_title(caption),
            image=video_sentinel(source_url),
            prep_time=timing.get('prep_time', DEFAULT_PREP_TIME),
            cook_time=timing.get('cook_time', DEFAULT_COOK_TIME),
            total_time=timing.get('total_time', DEFAULT_TOTAL_TIME),
            servings=timing.get('servings', DEFAULT_SERVINGS),
            difficulty=DEFAULT_DIFFICULTY,
            ingredients=ingredients,
            instructions=[],
            nutrition=Nutrition(
                calories=PLACEHOLDER_NUTRITION,
                protein=PLACEHOLDER_NUTRITION,
                carbs=PLACEHOLDER_NUTRITION,
                fat=PLACEHOLDER_NUTRITION,
            ),
        )
        logfire.info("caption_heuristic_recipe",
                     title=recipe.title,
                     ingredient_count=len(ingredients),
                     timing_fields=sorted(timing.keys()))
        return recipe
