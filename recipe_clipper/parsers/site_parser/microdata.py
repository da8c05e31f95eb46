"""
Tier 2: schema.org microdata (itemtype/itemprop attributes).
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ...models import Recipe
from ..coercion import clean_text
from .fields import format_duration, normalize_difficulty
from .heuristics import dedupe, element_text, leaf_elements, looks_like_instruction

RECIPE_ITEMTYPE = re.compile(r'Recipe')


def _owning_scope(element: Tag) -> Optional[Tag]:
    return element.find_parent(attrs={'itemtype': True})


def own_props(root: Tag, name: str) -> List[Tag]:
    """itemprop elements that belong to root, not to a nested item (e.g. author Person)."""
    return [el for el in root.select(f'[itemprop~="{name}"]') if _owning_scope(el) is root]


def prop_value(element: Tag) -> str:
    """Value of a single itemprop element per the microdata rules we care about."""
    if element.name == 'meta' or element.has_attr('content'):
        return clean_text(element.get('content', ''))
    if element.name in ('img', 'source'):
        return (element.get('src') or '').strip()
    if element.name == 'time' and element.get('datetime'):
        return element['datetime'].strip()
    if element.name in ('a', 'link') and element.get('href') and not element.get_text(strip=True):
        return element['href'].strip()
    return element_text(element)


def first_prop(root: Tag, *names: str) -> Optional[str]:
    for name in names:
        for element in own_props(root, name):
            value = prop_value(element)
            if value:
                return value
    return None


def first_time_prop(root: Tag, name: str) -> Optional[str]:
    for element in own_props(root, name):
        value = element.get('datetime') or element.get('content') or element_text(element)
        if value:
            return format_duration(value.strip())
    return None


def extract_microdata_instructions(root: Tag) -> List[str]:
    steps = []
    for element in own_props(root, 'recipeInstructions'):
        items = element.find_all('li')
        if items:
            steps.extend(element_text(li) for li in items)
            continue
        text_element = element.select_one('[itemprop~="text"]') or element
        steps.append(prop_value(text_element))
    steps = [step for step in steps if step]
    if steps:
        return steps

    # Itemprop yielded nothing: look for step-shaped leaves inside the recipe element
    return dedupe(
        text for text in (element_text(el) for el in leaf_elements(root))
        if looks_like_instruction(text)
    )


class MicrodataStrategy:
    """Tier 2: first element whose itemtype mentions Recipe."""

    name = "microdata"

    def attempt(self, soup: BeautifulSoup) -> Optional[Recipe]:
        root = soup.find(attrs={'itemtype': RECIPE_ITEMTYPE})
        if root is None:
            return None

        ingredients = [
            prop_value(el) for el in own_props(root, 'recipeIngredient') + own_props(root, 'ingredients')
        ]

        recipe = Recipe(
            title=first_prop(root, 'name') or "",
            description=first_prop(root, 'description'),
            image=first_prop(root, 'image'),
            prep_time=first_time_prop(root, 'prepTime'),
            cook_time=first_time_prop(root, 'cookTime'),
            total_time=first_time_prop(root, 'totalTime'),
            servings=first_prop(root, 'recipeYield', 'yield'),
            difficulty=normalize_difficulty(first_prop(root, 'difficulty')),
            ingredients=[text for text in ingredients if text],
            instructions=extract_microdata_instructions(root),
            author=first_prop(root, 'author'),
            rating=first_prop(root, 'ratingValue') or _nested_prop(root, 'ratingValue'),
            review_count=first_prop(root, 'reviewCount') or _nested_prop(root, 'reviewCount'),
        )
        return recipe if recipe.has_content() else None


def _nested_prop(root: Tag, name: str) -> Optional[str]:
    """aggregateRating is its own item, so its props live in a nested scope."""
    element = root.select_one(f'[itemprop~="{name}"]')
    if element is None:
        return None
    return prop_value(element) or None
