"""
Generative Recipe Extractor

Turns free-form caption text into a structured Recipe by prompting the text
completion service for a strict JSON object. The response is repaired when it
is almost-JSON, and mined field by field with regexes when it is not JSON at
all, so a model that never returns valid JSON still yields a recipe.

Also provides instruction-only generation for recipes that have ingredients
but no steps.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import logfire

from ...exceptions import CompletionError
from ...models import IngredientSection, Nutrition, Recipe, RecipeMetadata
from ...services.llm_service import TextCompletionService
from ..coercion import as_dict, as_list, as_text
from ..site_parser.fields import normalize_difficulty
from .caption_metadata import caption_has_instructions, clean_time_unit
from .constants import (
    FACEBOOK_IMAGE_SENTINEL,
    INSTAGRAM_IMAGE_SENTINEL,
    INSTRUCTION_CONTEXT_LENGTH,
    MAX_GENERATED_STEPS,
    MIN_GENERATED_STEPS,
    STEP_NUMBER_PREFIX_PATTERN,
)
from .json_repair import extract_fields_manually, parse_model_json

PROMPTS_DIR = Path(__file__).parent / "llm_prompts"

SCALAR_KEYS = [
    'title', 'description', 'prepTime', 'cookTime', 'totalTime', 'servings',
    'difficulty', 'calories', 'protein', 'carbs', 'fat',
]
ARRAY_KEYS = ['ingredients', 'instructions']


def load_prompt(filename: str) -> str:
    prompt_path = PROMPTS_DIR / filename
    with open(prompt_path, 'r', encoding='utf-8') as f:
        return f.read()


def video_sentinel(source_url: Optional[str]) -> str:
    """Placeholder image for recipes that came from a video post."""
    if source_url and 'facebook' in source_url.lower():
        return FACEBOOK_IMAGE_SENTINEL
    return INSTAGRAM_IMAGE_SENTINEL


def strip_step_number(step: str) -> str:
    return STEP_NUMBER_PREFIX_PATTERN.sub('', step).strip()


def coerce_ingredients(raw: Any) -> List[Any]:
    """Plain strings, or {title, ingredients} sections, in the model's order."""
    entries: List[Any] = []
    for item in as_list(raw):
        section = as_dict(item)
        if section is not None and 'ingredients' in section:
            lines = [text for text in (as_text(line) for line in as_list(section.get('ingredients'))) if text]
            if lines:
                entries.append(IngredientSection(title=as_text(section.get('title')), ingredients=lines))
            continue
        text = as_text(item)
        if text:
            entries.append(text)
    return entries


def coerce_instructions(raw: Any) -> List[str]:
    steps = []
    for item in as_list(raw):
        text = as_text(item)
        if text:
            text = strip_step_number(text)
            if text:
                steps.append(text)
    return steps


def coerce_nutrition(fields: Dict[str, Any]) -> Optional[Nutrition]:
    # Some responses nest nutrition despite the flat key set
    nested = as_dict(fields.get('nutrition')) or {}
    nutrition = Nutrition(
        calories=as_text(fields.get('calories')) or as_text(nested.get('calories')),
        protein=as_text(fields.get('protein')) or as_text(nested.get('protein')),
        carbs=as_text(fields.get('carbs')) or as_text(nested.get('carbs')),
        fat=as_text(fields.get('fat')) or as_text(nested.get('fat')),
    )
    return None if nutrition.is_empty() else nutrition


class GenerativeRecipeExtractor:
    """Caption -> Recipe through the text completion service."""

    def __init__(self, completion_service: TextCompletionService):
        self.completion_service = completion_service
        self.extraction_prompt = load_prompt("Recipe_Extraction_Prompt.txt")
        self.instruction_prompt = load_prompt("Instruction_Generation_Prompt.txt")

    async def extract(self, caption: str, source_url: Optional[str] = None) -> Optional[Recipe]:
        """
        Extract a recipe from caption text.

        Args:
            caption: Caption text of the post
            source_url: Post URL, used for context and the image sentinel

        Returns:
            Recipe, or None when no title could be recovered
        """
        if not caption or not caption.strip():
            return None

        prompt = self.extraction_prompt.format(caption=caption, source_url=source_url or "unknown")

        start_time = time.time()
        try:
            response_text = await self.completion_service.complete(prompt)
        except CompletionError as e:
            logfire.warn("recipe_extraction_llm_failed", error=str(e)[:200])
            return None

        fields = self.parse_response(response_text)
        if fields is None:
            return None

        recipe = self.build_recipe(fields, caption, source_url)
        if recipe is None:
            logfire.warn("recipe_extraction_no_title", response_preview=response_text[:200])
            return None

        logfire.info("recipe_extracted_from_caption",
                     title=recipe.title,
                     ingredient_count=len(recipe.ingredients),
                     instruction_count=len(recipe.instructions),
                     instructions_generated=bool(recipe.metadata.instructions_generated),
                     elapsed_ms=round((time.time() - start_time) * 1000))
        return recipe

    def parse_response(self, response_text: str) -> Optional[Dict[str, Any]]:
        """JSON (repaired if needed) first, manual field extraction second."""
        parsed = as_dict(parse_model_json(response_text))
        if parsed is not None:
            return parsed

        fields = extract_fields_manually(response_text or "", SCALAR_KEYS, ARRAY_KEYS)
        logfire.warn("recipe_json_manual_fallback",
                     recovered_fields=sorted(fields.keys()),
                     response_preview=(response_text or "")[:200])
        return fields or None

    def build_recipe(self, fields: Dict[str, Any], caption: str, source_url: Optional[str]) -> Optional[Recipe]:
        title = as_text(fields.get('title'))
        if not title:
            return None

        instructions = coerce_instructions(fields.get('instructions'))
        # Steps the caption never had were written by the model
        generated = bool(instructions) and not caption_has_instructions(caption)

        return Recipe(
            title=title,
            description=as_text(fields.get('description')),
            image=video_sentinel(source_url),
            prep_time=clean_time_unit(as_text(fields.get('prepTime'))),
            cook_time=clean_time_unit(as_text(fields.get('cookTime'))),
            total_time=clean_time_unit(as_text(fields.get('totalTime'))),
            servings=as_text(fields.get('servings')),
            difficulty=normalize_difficulty(fields.get('difficulty')),
            ingredients=coerce_ingredients(fields.get('ingredients')),
            instructions=instructions,
            nutrition=coerce_nutrition(fields),
            metadata=RecipeMetadata(instructions_generated=generated),
        )

    async def generate_instructions(self, recipe: Recipe, caption: Optional[str] = None) -> Optional[Recipe]:
        """
        Write instructions for a recipe that only has ingredients.

        Args:
            recipe: Recipe with a title and ingredients
            caption: Original caption, passed as context (truncated)

        Returns:
            Copy of the recipe with generated instructions and the
            instructions_generated flag set, or None on any failure
        """
        ingredients = recipe.flat_ingredients
        if not recipe.title or not ingredients:
            return None

        prompt = self.instruction_prompt.format(
            title=recipe.title,
            ingredients="\n".join(f"- {line}" for line in ingredients),
            context=(caption or "")[:INSTRUCTION_CONTEXT_LENGTH] or "none",
        )

        try:
            response_text = await self.completion_service.complete(prompt)
        except CompletionError as e:
            logfire.warn("instruction_generation_llm_failed", title=recipe.title, error=str(e)[:200])
            return None

        steps = coerce_instructions(parse_model_json(response_text, opener='[', closer=']'))
        if len(steps) < MIN_GENERATED_STEPS:
            logfire.warn("instruction_generation_unparseable", response_preview=(response_text or "")[:200])
            return None

        steps = steps[:MAX_GENERATED_STEPS]
        logfire.info("instructions_generated", title=recipe.title, step_count=len(steps))
        return recipe.model_copy(update={
            "instructions": steps,
            "metadata": RecipeMetadata(instructions_generated=True),
        })
