"""
Tier 1: JSON-LD structured data.

Most recipe sites include a schema.org Recipe object in a
<script type="application/ld+json"> tag. It can sit at the top level, inside an
array, under ``@graph`` or nested in another object's value.
"""

import json
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from ...models import Nutrition, Recipe
from ..coercion import as_dict, as_list, as_text, as_text_list, clean_text, type_matches
from .fields import (
    extract_author,
    extract_image_url,
    extract_servings,
    format_duration,
    normalize_difficulty,
)


def find_recipe_node(data: Any) -> Optional[Dict[str, Any]]:
    """Depth-first search for the first object typed Recipe."""
    if isinstance(data, list):
        for item in data:
            found = find_recipe_node(item)
            if found:
                return found
        return None

    node = as_dict(data)
    if node is None:
        return None

    if type_matches(node, 'Recipe'):
        return node

    if '@graph' in node:
        found = find_recipe_node(node['@graph'])
        if found:
            return found

    for key, value in node.items():
        if key != '@graph' and isinstance(value, (dict, list)):
            found = find_recipe_node(value)
            if found:
                return found
    return None


def extract_ingredients(data: Dict[str, Any]) -> List[str]:
    raw = data.get('recipeIngredient')
    if raw is None:
        raw = data.get('ingredients')
    return as_text_list(raw)


def extract_instructions(raw: Any) -> List[str]:
    """
    Flatten recipeInstructions into step strings.

    Handles a single string (split on line breaks), lists of strings,
    HowToStep objects and HowToSection objects with nested itemListElement.
    """
    if isinstance(raw, str):
        # Some sites put every step in one string separated by line breaks
        text = raw.replace('<br>', '\n').replace('<br/>', '\n').replace('<br />', '\n')
        steps = [clean_text(line) for line in text.splitlines()]
        return [step for step in steps if step]

    steps: List[str] = []
    for item in as_list(raw):
        if isinstance(item, str):
            text = clean_text(item)
            if text:
                steps.append(text)
            continue

        node = as_dict(item)
        if node is None:
            continue

        if type_matches(node, 'HowToSection') or 'itemListElement' in node:
            steps.extend(extract_instructions(node.get('itemListElement')))
            continue

        for key in ('text', 'name', 'description'):
            text = as_text(node.get(key))
            if text:
                steps.append(text)
                break
    return steps


def extract_nutrition(raw: Any) -> Optional[Nutrition]:
    """Only the four fields the app displays: calories, protein, carbs, fat."""
    node = as_dict(raw)
    if not node:
        return None
    nutrition = Nutrition(
        calories=as_text(node.get('calories')),
        protein=as_text(node.get('proteinContent')),
        carbs=as_text(node.get('carbohydrateContent')),
        fat=as_text(node.get('fatContent')),
    )
    return None if nutrition.is_empty() else nutrition


def recipe_from_node(node: Dict[str, Any]) -> Recipe:
    """Map a schema.org Recipe object onto the Recipe model."""
    rating = as_dict(node.get('aggregateRating')) or {}
    return Recipe(
        title=as_text(node.get('name')) or "",
        description=as_text(node.get('description')),
        image=extract_image_url(node.get('image')),
        prep_time=format_duration(node.get('prepTime')),
        cook_time=format_duration(node.get('cookTime')),
        total_time=format_duration(node.get('totalTime')),
        servings=extract_servings(node),
        difficulty=normalize_difficulty(node.get('difficulty')),
        ingredients=extract_ingredients(node),
        instructions=extract_instructions(node.get('recipeInstructions')),
        nutrition=extract_nutrition(node.get('nutrition')),
        author=extract_author(node.get('author')),
        rating=as_text(rating.get('ratingValue')),
        review_count=as_text(rating.get('reviewCount')) or as_text(rating.get('ratingCount')),
    )


class JsonLdStrategy:
    """Tier 1: schema.org Recipe from JSON-LD script blocks."""

    name = "json_ld"

    def attempt(self, soup: BeautifulSoup) -> Optional[Recipe]:
        for script in soup.find_all('script', type='application/ld+json'):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                # Continue to next script tag
                continue

            node = find_recipe_node(data)
            if node is None:
                continue

            recipe = recipe_from_node(node)
            if recipe.has_content():
                return recipe
        return None
