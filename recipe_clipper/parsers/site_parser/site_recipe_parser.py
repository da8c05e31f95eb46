"""
Recipe web page parser.

Runs the structured-data-first cascade over a page's HTML:
    Tier 1: JSON-LD
    Tier 2: microdata
    Tier 3: heuristic DOM scan (ends in whole-page sentence mining)
then the instruction enhancement pass on whichever tier won.
"""

import time
from typing import Optional

import logfire
from bs4 import BeautifulSoup

from ...config.settings import Settings, settings as default_settings
from ...exceptions import FetchError
from ...models import Recipe
from ...services.http_fetcher import FetchResponse, HttpFetcher, RedirectPolicy
from ..strategies import first_result
from .constants import SITE_HEADERS
from .enhancement import InstructionEnhancer
from .heuristics import HeuristicStrategy
from .json_ld import JsonLdStrategy
from .microdata import MicrodataStrategy


class SiteRecipeExtractor:
    """Extract a Recipe from raw recipe page HTML."""

    def __init__(self, app_settings: Settings = None):
        self.settings = app_settings or default_settings
        self.strategies = [
            JsonLdStrategy(),
            MicrodataStrategy(),
            HeuristicStrategy(),
        ]
        self.enhancer = InstructionEnhancer(self.settings)

    def extract(self, html: str) -> Optional[Recipe]:
        """
        Parse recipe HTML.

        Args:
            html: Raw page HTML

        Returns:
            Recipe, or None when no title, ingredients or instructions were found
        """
        if not html or not html.strip():
            return None

        start_time = time.time()
        soup = BeautifulSoup(html, 'html.parser')

        recipe, strategy = first_result(self.strategies, soup, cascade="site_recipe")
        if recipe is None:
            logfire.debug("site_recipe_not_found", html_length=len(html))
            return None

        recipe = self.enhancer.enhance(recipe, soup, strategy)
        if not recipe.has_content():
            return None

        logfire.info("site_recipe_extracted",
                     strategy=strategy,
                     ingredient_count=len(recipe.ingredients),
                     instruction_count=len(recipe.instructions),
                     elapsed_ms=round((time.time() - start_time) * 1000))
        return recipe


async def fetch_recipe_page(url: str, fetcher: HttpFetcher, app_settings: Settings = None) -> Optional[FetchResponse]:
    """
    Download a recipe page with browser headers.

    Returns:
        The 2xx response, or None on transport failure or non-2xx status
    """
    app_settings = app_settings or default_settings
    try:
        response = await fetcher.fetch(
            url,
            method="GET",
            headers=SITE_HEADERS,
            redirect_policy=RedirectPolicy.FOLLOW,
            timeout=app_settings.fetch_timeout_seconds,
        )
    except FetchError as e:
        logfire.warn("recipe_page_fetch_failed", url=url, error=str(e)[:200])
        return None

    if not response.ok:
        logfire.warn("recipe_page_bad_status", url=url, status=response.status)
        return None
    return response
