"""
Tests for the generative caption extractor and instruction generation
"""

import json

import pytest

from recipe_clipper.exceptions import CompletionError
from recipe_clipper.models import IngredientSection, Recipe
from recipe_clipper.parsers.caption import GenerativeRecipeExtractor

from conftest import FakeCompletionService

CAPTION = "Easy beef tacos! 1 lb beef, 8 taco shells, 1 cup cheese. Cook the beef, fill the shells and top with cheese."


def model_json(**overrides):
    data = {
        "title": "Beef Tacos",
        "description": "Weeknight tacos",
        "ingredients": ["1 lb beef", "8 taco shells", "1 cup cheese"],
        "instructions": ["Brown the beef.", "Fill the shells.", "Top with cheese."],
        "prepTime": "10 minutes",
        "cookTime": "15",
        "totalTime": "25 min",
        "servings": 4,
        "difficulty": "easy",
        "calories": "450",
        "protein": "30g",
        "carbs": "35g",
        "fat": "20g",
    }
    data.update(overrides)
    return json.dumps(data)


class TestExtract:

    @pytest.mark.asyncio
    async def test_well_formed_json(self):
        service = FakeCompletionService([model_json()])
        extractor = GenerativeRecipeExtractor(service)

        recipe = await extractor.extract(CAPTION, "https://www.instagram.com/reel/ABC123/")

        assert recipe.title == "Beef Tacos"
        assert recipe.image == "instagram-video"
        assert recipe.ingredients == ["1 lb beef", "8 taco shells", "1 cup cheese"]
        assert recipe.prep_time == "10 min"
        assert recipe.cook_time == "15 min"
        assert recipe.servings == "4"
        assert recipe.difficulty == "Easy"
        assert recipe.nutrition.calories == "450"
        assert recipe.nutrition.fat == "20g"
        assert recipe.metadata.instructions_generated is False

    @pytest.mark.asyncio
    async def test_prompt_carries_caption_and_source(self):
        service = FakeCompletionService([model_json()])
        extractor = GenerativeRecipeExtractor(service)

        await extractor.extract(CAPTION, "https://www.instagram.com/reel/ABC123/")

        assert CAPTION in service.prompts[0]
        assert "https://www.instagram.com/reel/ABC123/" in service.prompts[0]

    @pytest.mark.asyncio
    async def test_fenced_response_with_trailing_comma(self):
        response = '```json\n{"title": "Pancakes", "ingredients": ["1 cup flour", "1 egg",], "instructions": ["Whisk everything.",],}\n```'
        extractor = GenerativeRecipeExtractor(FakeCompletionService([response]))

        recipe = await extractor.extract("Fluffy pancakes with 1 cup flour and 1 egg")

        assert recipe is not None
        assert recipe.title == "Pancakes"
        assert recipe.ingredients == ["1 cup flour", "1 egg"]

    @pytest.mark.asyncio
    async def test_manual_extraction_when_json_is_irreparable(self):
        response = 'Recipe -> "title": "Tacos", "ingredients": ["taco shells", "beef"] "instructions": [oops'
        extractor = GenerativeRecipeExtractor(FakeCompletionService([response]))

        recipe = await extractor.extract("Taco night with taco shells and beef")

        assert recipe.title == "Tacos"
        assert len(recipe.ingredients) == 2
        assert recipe.instructions == []

    @pytest.mark.asyncio
    async def test_no_title_returns_none(self):
        extractor = GenerativeRecipeExtractor(FakeCompletionService(["There is no recipe in this caption."]))

        assert await extractor.extract(CAPTION) is None

    @pytest.mark.asyncio
    async def test_completion_failure_returns_none(self):
        extractor = GenerativeRecipeExtractor(FakeCompletionService([CompletionError("blocked", "SAFETY")]))

        assert await extractor.extract(CAPTION) is None

    @pytest.mark.asyncio
    async def test_empty_caption_skips_the_model(self):
        service = FakeCompletionService([model_json()])
        extractor = GenerativeRecipeExtractor(service)

        assert await extractor.extract("   ") is None
        assert service.prompts == []

    @pytest.mark.asyncio
    async def test_facebook_source_gets_facebook_sentinel(self):
        extractor = GenerativeRecipeExtractor(FakeCompletionService([model_json()]))

        recipe = await extractor.extract(CAPTION, "https://www.facebook.com/reel/12345")

        assert recipe.image == "facebook-video"

    @pytest.mark.asyncio
    async def test_ingredient_sections(self):
        response = model_json(ingredients=[
            {"title": "For the sauce", "ingredients": ["2 tbsp soy sauce", "1 tsp honey"]},
            "1 lb chicken",
        ])
        extractor = GenerativeRecipeExtractor(FakeCompletionService([response]))

        recipe = await extractor.extract(CAPTION)

        assert recipe.ingredients[0] == IngredientSection(title="For the sauce", ingredients=["2 tbsp soy sauce", "1 tsp honey"])
        assert recipe.flat_ingredients == ["2 tbsp soy sauce", "1 tsp honey", "1 lb chicken"]

    @pytest.mark.asyncio
    async def test_instructions_written_by_model_are_flagged(self):
        caption = "Creamy garlic pasta 🍝 200g spaghetti, 2 cloves garlic, 100ml cream #pasta #dinner"
        extractor = GenerativeRecipeExtractor(FakeCompletionService([model_json()]))

        recipe = await extractor.extract(caption)

        assert recipe.metadata.instructions_generated is True


class TestGenerateInstructions:

    RECIPE = Recipe(title="Garlic Pasta", ingredients=["200g spaghetti", "2 cloves garlic"])

    @pytest.mark.asyncio
    async def test_numbered_steps_are_cleaned(self):
        response = '```json\n["1. Boil the spaghetti.", "Step 2: Fry the garlic in oil.", "3) Toss together."]\n```'
        service = FakeCompletionService([response])
        extractor = GenerativeRecipeExtractor(service)

        recipe = await extractor.generate_instructions(self.RECIPE, "Garlic pasta caption")

        assert recipe.instructions == ["Boil the spaghetti.", "Fry the garlic in oil.", "Toss together."]
        assert recipe.metadata.instructions_generated is True
        assert recipe.title == "Garlic Pasta"
        assert "200g spaghetti" in service.prompts[0]

    @pytest.mark.asyncio
    async def test_steps_capped_at_eight(self):
        steps = [f"Do step number {i} carefully." for i in range(12)]
        extractor = GenerativeRecipeExtractor(FakeCompletionService([json.dumps(steps)]))

        recipe = await extractor.generate_instructions(self.RECIPE)

        assert len(recipe.instructions) == 8

    @pytest.mark.asyncio
    async def test_caption_context_is_truncated(self):
        service = FakeCompletionService(['["Cook it."]'])
        extractor = GenerativeRecipeExtractor(service)

        await extractor.generate_instructions(self.RECIPE, "a" * 1500)

        assert "a" * 1000 in service.prompts[0]
        assert "a" * 1001 not in service.prompts[0]

    @pytest.mark.asyncio
    async def test_unparseable_response_returns_none(self):
        extractor = GenerativeRecipeExtractor(FakeCompletionService(["Sorry, I can't help with that."]))

        assert await extractor.generate_instructions(self.RECIPE) is None

    @pytest.mark.asyncio
    async def test_recipe_without_ingredients_returns_none(self):
        service = FakeCompletionService(['["Cook it."]'])
        extractor = GenerativeRecipeExtractor(service)

        assert await extractor.generate_instructions(Recipe(title="Mystery")) is None
        assert service.prompts == []
