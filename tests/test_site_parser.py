"""
Tests for recipe web page parsing (JSON-LD, microdata, heuristic DOM, enhancement)
"""

import json

import pytest

from recipe_clipper.config.settings import Settings
from recipe_clipper.models import Nutrition
from recipe_clipper.parsers.site_parser import SiteRecipeExtractor, fetch_recipe_page
from recipe_clipper.parsers.site_parser.fields import format_duration
from recipe_clipper.parsers.site_parser.json_ld import JsonLdStrategy, extract_instructions

from conftest import FakeFetcher


def json_ld_page(data, body=""):
    return (
        "<html><head><title>Recipe</title>"
        f'<script type="application/ld+json">{json.dumps(data)}</script>'
        f"</head><body>{body}</body></html>"
    )


class ExplodingStrategy:
    """Fails the test if the cascade ever reaches it."""

    name = "exploding"

    def attempt(self, soup):
        raise AssertionError("later strategy should not run")


@pytest.fixture
def extractor():
    return SiteRecipeExtractor(Settings())


class TestJsonLd:

    def test_json_ld_recipe_bypasses_later_strategies(self, extractor):
        html = json_ld_page(
            {
                "@context": "https://schema.org",
                "@type": "Recipe",
                "name": "Simple Dough",
                "recipeIngredient": ["2 cups flour"],
                "recipeInstructions": [{"@type": "HowToStep", "text": "Mix well."}],
            },
            body='<ul><li class="ingredient">3 cups sugar</li></ul>',
        )
        extractor.strategies = [JsonLdStrategy(), ExplodingStrategy()]

        recipe = extractor.extract(html)

        assert recipe is not None
        assert recipe.ingredients == ["2 cups flour"]
        assert recipe.instructions == ["Mix well."]

    def test_recipe_inside_graph(self, extractor):
        html = json_ld_page({
            "@context": "https://schema.org",
            "@graph": [
                {"@type": "WebPage", "name": "Blog"},
                {
                    "@type": ["Recipe", "NewsArticle"],
                    "name": "Lemon Chicken",
                    "image": [{"@type": "ImageObject", "url": "https://cdn.example.com/chicken.jpg"}],
                    "author": [{"@type": "Person", "name": "Sam Cook"}],
                    "prepTime": "PT15M",
                    "cookTime": "PT1H30M",
                    "recipeYield": ["4", "4 servings"],
                    "recipeIngredient": ["2 chicken breasts", "1 lemon"],
                    "recipeInstructions": "Season the chicken.\nRoast for 90 minutes.",
                    "nutrition": {"calories": "420 kcal", "proteinContent": "38 g"},
                    "aggregateRating": {"ratingValue": 4.5, "reviewCount": 120},
                },
            ],
        })

        recipe = extractor.extract(html)

        assert recipe.title == "Lemon Chicken"
        assert recipe.image == "https://cdn.example.com/chicken.jpg"
        assert recipe.author == "Sam Cook"
        assert recipe.prep_time == "15m"
        assert recipe.cook_time == "1h 30m"
        assert recipe.servings == "4"
        assert recipe.instructions == ["Season the chicken.", "Roast for 90 minutes."]
        assert recipe.nutrition == Nutrition(calories="420 kcal", protein="38 g")
        assert recipe.rating == "4.5"
        assert recipe.review_count == "120"

    def test_invalid_json_block_is_skipped(self, extractor):
        html = (
            '<script type="application/ld+json">{"@type": "Recipe", broken</script>'
            '<script type="application/ld+json">'
            '{"@type": "Recipe", "name": "Second Block", "recipeIngredient": ["1 egg"]}'
            "</script>"
        )

        recipe = extractor.extract(html)

        assert recipe.title == "Second Block"

    def test_how_to_sections_are_flattened(self):
        raw = [
            {
                "@type": "HowToSection",
                "name": "For the sauce",
                "itemListElement": [
                    {"@type": "HowToStep", "text": "Melt the butter."},
                    {"@type": "HowToStep", "name": "Whisk in the flour."},
                ],
            },
            "Serve &amp; enjoy.",
        ]

        assert extract_instructions(raw) == ["Melt the butter.", "Whisk in the flour.", "Serve & enjoy."]


class TestMicrodata:

    def test_microdata_recipe(self, extractor):
        html = """
        <div itemscope itemtype="http://schema.org/Recipe">
          <h1 itemprop="name">Grandma's Apple Pie</h1>
          <meta itemprop="prepTime" content="PT30M">
          <span itemprop="recipeIngredient">6 apples</span>
          <span itemprop="recipeIngredient">1 cup sugar</span>
          <div itemprop="author" itemscope itemtype="http://schema.org/Person">
            <span itemprop="name">Grandma</span>
          </div>
          <ol itemprop="recipeInstructions">
            <li>Peel and slice the apples.</li>
            <li>Bake at 200°C for 45 minutes.</li>
          </ol>
        </div>
        """

        recipe = extractor.extract(html)

        assert recipe.title == "Grandma's Apple Pie"
        assert recipe.prep_time == "30m"
        assert recipe.ingredients == ["6 apples", "1 cup sugar"]
        assert recipe.author == "Grandma"
        assert recipe.instructions == ["Peel and slice the apples.", "Bake at 200°C for 45 minutes."]


class TestHeuristicDom:

    def test_instruction_container_paragraph(self, extractor):
        html = (
            "<html><body>"
            '<div class="instructions"><p>Preheat oven to 350°F and bake 20 minutes.</p></div>'
            "</body></html>"
        )

        recipe = extractor.extract(html)

        assert recipe is not None
        assert any("350°F" in step for step in recipe.instructions)

    def test_ingredient_list_items_and_step_list(self, extractor):
        html = """
        <html><head><meta property="og:image" content="https://example.com/soup.jpg"></head>
        <body>
          <h1>Tomato Soup</h1>
          <ul>
            <li>2 cups tomatoes</li>
            <li>1 tbsp olive oil</li>
          </ul>
          <ol class="directions">
            <li>Heat the oil in a large pot.</li>
            <li>Add the tomatoes and simmer for 20 minutes.</li>
            <li>Blend until smooth and serve.</li>
          </ol>
        </body></html>
        """

        recipe = extractor.extract(html)

        assert recipe.title == "Tomato Soup"
        assert recipe.image == "https://example.com/soup.jpg"
        assert recipe.ingredients == ["2 cups tomatoes", "1 tbsp olive oil"]
        assert recipe.instructions[0] == "Heat the oil in a large pot."
        assert len(recipe.instructions) == 3

    def test_sentence_mining_over_page_text(self, extractor):
        html = (
            "<html><body><article>"
            "We made this on a rainy day. Combine 2 cups of flour with the milk. "
            "Then bake for 30 minutes."
            "</article></body></html>"
        )

        recipe = extractor.extract(html)

        assert "Combine 2 cups of flour with the milk." in recipe.instructions
        assert "We made this on a rainy day." not in recipe.instructions

    def test_page_without_recipe_content_returns_none(self, extractor):
        html = (
            "<html><head><title>About us</title></head>"
            "<body><h1>About our company</h1><p>We love our customers.</p></body></html>"
        )

        assert extractor.extract(html) is None

    def test_empty_html_returns_none(self, extractor):
        assert extractor.extract("") is None


class TestInstructionEnhancement:

    SPAN_SECTION = (
        "<div><h2>Instructions</h2>"
        "<span>Preheat the oven to 180°C.</span>"
        "<span>Stir the flour into the melted butter.</span>"
        "<span>Bake for 25 minutes until golden.</span>"
        "</div>"
    )

    def page(self, instructions):
        return json_ld_page(
            {
                "@type": "Recipe",
                "name": "Shortbread",
                "recipeIngredient": ["1 cup butter"],
                "recipeInstructions": instructions,
            },
            body=self.SPAN_SECTION,
        )

    def test_short_list_replaced_by_heading_spans(self, extractor):
        recipe = extractor.extract(self.page(["Bake it."]))

        assert recipe.instructions == [
            "Preheat the oven to 180°C.",
            "Stir the flour into the melted butter.",
            "Bake for 25 minutes until golden.",
        ]

    def test_threshold_is_configurable(self):
        extractor = SiteRecipeExtractor(Settings(instruction_enhancement_threshold=1))

        recipe = extractor.extract(self.page(["Cream the butter.", "Bake it."]))

        assert recipe.instructions == ["Cream the butter.", "Bake it."]

    def test_enhancement_can_be_disabled(self):
        extractor = SiteRecipeExtractor(Settings(instruction_enhancement_enabled=False))

        recipe = extractor.extract(self.page(["Bake it."]))

        assert recipe.instructions == ["Bake it."]

    def test_footnotes_are_dropped(self, extractor):
        html = json_ld_page({
            "@type": "Recipe",
            "name": "Stuffing",
            "recipeIngredient": ["4 cups bread"],
            "recipeInstructions": [
                "Toast the bread cubes.",
                "The name is a misnomer, there is no stuffing involved.",
                "Bake for 40 minutes.",
            ],
        })

        recipe = extractor.extract(html)

        assert recipe.instructions == ["Toast the bread cubes.", "Bake for 40 minutes."]

    def test_steps_under_dangling_heading_are_recovered(self, extractor):
        html = json_ld_page(
            {
                "@type": "Recipe",
                "name": "Apple Tart",
                "recipeIngredient": ["3 apples", "1 sheet pastry"],
                "recipeInstructions": ["Roll out the pastry and line the tin.", "For the filling:"],
            },
            body=(
                "<div class='notes'>"
                "<span>Stir the apples with the sugar and cinnamon.</span>"
                "<span>Transfer to the tin and bake at 190°C.</span>"
                "</div>"
            ),
        )

        recipe = extractor.extract(html)

        assert recipe.instructions == [
            "Roll out the pastry and line the tin.",
            "Stir the apples with the sugar and cinnamon.",
            "Transfer to the tin and bake at 190°C.",
        ]

    def test_step_opening_with_for_the_is_kept(self, extractor):
        html = json_ld_page(
            {
                "@type": "Recipe",
                "name": "Apple Tart",
                "recipeIngredient": ["3 apples"],
                "recipeInstructions": [
                    "For the filling, toss the sliced apples with sugar and lemon juice until coated.",
                ],
            },
            body="<span>Transfer to the tin and bake at 190°C.</span>",
        )

        recipe = extractor.extract(html)

        assert recipe.instructions == [
            "For the filling, toss the sliced apples with sugar and lemon juice until coated.",
            "Transfer to the tin and bake at 190°C.",
        ]


class TestFormatDuration:

    @pytest.mark.parametrize("value, expected", [
        ("PT1H30M", "1h 30m"),
        ("PT45M", "45m"),
        ("P1DT2H", "1d 2h"),
        ("PT0M", None),
        ("20 minutes", "20 minutes"),
        (None, None),
    ])
    def test_format_duration(self, value, expected):
        assert format_duration(value) == expected


class TestFetchRecipePage:

    @pytest.mark.asyncio
    async def test_non_2xx_returns_none(self):
        fetcher = FakeFetcher()
        fetcher.add("https://example.com/recipe", status=503)

        assert await fetch_recipe_page("https://example.com/recipe", fetcher, Settings()) is None

    @pytest.mark.asyncio
    async def test_ok_response_returned(self):
        fetcher = FakeFetcher()
        fetcher.add("https://example.com/recipe", text="<html></html>")

        response = await fetch_recipe_page("https://example.com/recipe", fetcher, Settings())

        assert response.text == "<html></html>"
