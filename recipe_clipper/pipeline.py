"""
Recipe Extraction Pipeline

Single entry point that turns a URL into a Recipe or a typed Failure:

    classify url
      invalid    -> Failure(invalid_url)
      web page   -> fetch -> structured extraction
      instagram /
      facebook   -> (share resolution) -> caption scrape
                 -> generative extraction
                 -> heuristic fallback + instruction generation

Every step returns None for expected misses; this module is the one place that
turns those Nones into Failure values. The whole chain runs under a wall-clock
budget and a timed-out chain contributes nothing to the result.
"""

import asyncio
import time
from typing import Optional, Union

import logfire

from .config.settings import Settings, settings as default_settings
from .models import CaptionData, Failure, FailureReason, Recipe
from .parsers.caption.generative_extractor import GenerativeRecipeExtractor
from .parsers.caption.heuristic_fallback import CaptionHeuristicFallback
from .parsers.site_parser import SiteRecipeExtractor, fetch_recipe_page
from .parsers.social import SocialCaptionScraper, SourcePlatform, classify_url
from .parsers.social.instagram_scraper import clean_instagram_url
from .services.http_fetcher import HttpFetcher, HttpxFetcher
from .services.llm_service import GeminiCompletionService, TextCompletionService

ExtractionResult = Union[Recipe, Failure]

UNTITLED_RECIPE = "Untitled Recipe"
SLOW_RUN_FRACTION = 0.75


class RecipeExtractionPipeline:
    """Orchestrates one extraction request from URL to Recipe or Failure."""

    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        completion_service: Optional[TextCompletionService] = None,
        app_settings: Optional[Settings] = None,
    ):
        self.settings = app_settings or default_settings
        self.fetcher = fetcher or HttpxFetcher(default_timeout=self.settings.fetch_timeout_seconds)
        self._completion_service = completion_service
        self.site_extractor = SiteRecipeExtractor(self.settings)
        self.caption_scraper = SocialCaptionScraper(self.fetcher, self.settings)
        self.heuristic_fallback = CaptionHeuristicFallback()
        self._generative_extractor: Optional[GenerativeRecipeExtractor] = None

    @property
    def generative_extractor(self) -> GenerativeRecipeExtractor:
        # Created on first use so web-page-only runs never need a model key
        if self._generative_extractor is None:
            if self._completion_service is None:
                self._completion_service = GeminiCompletionService(self.settings)
            self._generative_extractor = GenerativeRecipeExtractor(self._completion_service)
        return self._generative_extractor

    def available_generative_extractor(self) -> Optional[GenerativeRecipeExtractor]:
        """The generative extractor, or None when the model service cannot be configured."""
        try:
            return self.generative_extractor
        except ValueError as e:
            logfire.warn("generative_extractor_unavailable", error=str(e))
            return None

    def caption_failure(self, reason: FailureReason, message: str, caption: Optional[str]) -> Failure:
        preview = caption[:self.settings.caption_preview_length] if caption else None
        return Failure(reason=reason, message=message, caption_preview=preview)

    async def run(self, url: str) -> ExtractionResult:
        """
        Extract a recipe from a URL within the pipeline time budget.

        Args:
            url: Instagram, Facebook or recipe page URL

        Returns:
            Recipe on success, Failure with a reason code otherwise
        """
        budget = self.settings.pipeline_timeout_seconds
        start_time = time.time()

        try:
            result = await asyncio.wait_for(self.run_chain(url), timeout=budget)
        except asyncio.TimeoutError:
            result = Failure(
                reason=FailureReason.TIMEOUT,
                message=f"Recipe extraction timed out after {budget:g}s",
            )

        elapsed = time.time() - start_time
        if isinstance(result, Recipe):
            logfire.info("pipeline_succeeded",
                         url=url,
                         title=result.title,
                         instructions_generated=bool(result.metadata.instructions_generated),
                         elapsed_seconds=round(elapsed, 2))
        else:
            logfire.info("pipeline_failed",
                         url=url,
                         reason=result.reason.value,
                         has_caption_preview=result.caption_preview is not None,
                         elapsed_seconds=round(elapsed, 2))

        if elapsed > budget * SLOW_RUN_FRACTION:
            logfire.warn("pipeline_slow_run", url=url, elapsed_seconds=round(elapsed, 2), budget_seconds=budget)
        return result

    async def run_chain(self, url: str) -> ExtractionResult:
        platform = classify_url(url)
        logfire.debug("pipeline_url_classified", url=url, platform=platform.value)

        if platform == SourcePlatform.INVALID:
            return Failure(reason=FailureReason.INVALID_URL, message=f"Not a supported recipe URL: {url}")
        if platform == SourcePlatform.WEB_PAGE:
            return await self.run_web_page(url)
        return await self.run_social(url.strip(), platform)

    async def run_web_page(self, url: str) -> ExtractionResult:
        response = await fetch_recipe_page(url, self.fetcher, self.settings)
        if response is None:
            return Failure(reason=FailureReason.FETCH_FAILED, message=f"Could not fetch recipe page: {url}")

        return self.extract_from_html(response.text)

    def extract_from_html(self, html: str) -> ExtractionResult:
        recipe = self.site_extractor.extract(html)
        if recipe is None:
            return Failure(reason=FailureReason.MALFORMED_SOURCE, message="Could not parse a recipe from the page")
        return ensure_title(recipe)

    async def run_social(self, url: str, platform: SourcePlatform) -> ExtractionResult:
        if platform == SourcePlatform.INSTAGRAM:
            url = clean_instagram_url(url)
        else:
            url = await self.caption_scraper.resolve_facebook_url(url)

        caption_data = await self.caption_scraper.scrape(url, platform=platform, resolve_share=False)
        if caption_data is None or not caption_data.caption.strip():
            return Failure(reason=FailureReason.NO_CAPTION, message="Could not extract a caption from the post")

        result = await self.extract_from_caption(caption_data, url)
        if isinstance(result, Failure):
            return result

        if platform == SourcePlatform.INSTAGRAM:
            return result.model_copy(update={"instagram_url": url})
        return result.model_copy(update={"facebook_url": url})

    async def extract_from_caption(self, caption_data: CaptionData, source_url: Optional[str]) -> ExtractionResult:
        """Generative extraction, then heuristic fallback completed by instruction generation."""
        caption = caption_data.caption
        extractor = self.available_generative_extractor()
        recipe = await extractor.extract(caption, source_url) if extractor else None
        if recipe is not None:
            return ensure_title(recipe)

        logfire.info("caption_generative_extraction_failed", source_url=source_url, caption_length=len(caption))
        fallback = self.heuristic_fallback.extract(caption, source_url)
        if fallback is None:
            return self.caption_failure(
                FailureReason.NO_RECIPE_FOUND, "No recipe found in the caption", caption
            )

        completed = await extractor.generate_instructions(fallback, caption) if extractor else None
        if completed is None:
            return self.caption_failure(
                FailureReason.NO_RECIPE_FOUND, "Found ingredients but could not build instructions", caption
            )
        return ensure_title(completed)

    async def generate_instructions(self, recipe: Recipe, caption: Optional[str] = None) -> ExtractionResult:
        extractor = self.available_generative_extractor()
        completed = await extractor.generate_instructions(recipe, caption) if extractor else None
        if completed is None:
            return self.caption_failure(
                FailureReason.NO_RECIPE_FOUND, "Could not generate instructions", caption
            )
        return completed

    async def scrape_caption(self, url: str) -> Union[CaptionData, Failure]:
        platform = classify_url(url)
        if platform not in (SourcePlatform.INSTAGRAM, SourcePlatform.FACEBOOK):
            return Failure(reason=FailureReason.INVALID_URL, message=f"Not an Instagram or Facebook post URL: {url}")

        caption_data = await self.caption_scraper.scrape(url.strip(), platform=platform)
        if caption_data is None:
            return Failure(reason=FailureReason.NO_CAPTION, message="Could not extract a caption from the post")
        return caption_data


def ensure_title(recipe: Recipe) -> Recipe:
    if recipe.title:
        return recipe
    return recipe.model_copy(update={"title": UNTITLED_RECIPE})


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------

async def extract_recipe_from_html(html: str, settings: Optional[Settings] = None) -> ExtractionResult:
    """Structured extraction over HTML that was fetched elsewhere."""
    pipeline = RecipeExtractionPipeline(app_settings=settings)
    return pipeline.extract_from_html(html)


async def scrape_social_caption(
    url: str,
    fetcher: Optional[HttpFetcher] = None,
    settings: Optional[Settings] = None,
) -> Union[CaptionData, Failure]:
    pipeline = RecipeExtractionPipeline(fetcher=fetcher, app_settings=settings)
    return await pipeline.scrape_caption(url)


async def extract_recipe_from_caption(
    caption: str,
    source_url: Optional[str] = None,
    completion_service: Optional[TextCompletionService] = None,
    settings: Optional[Settings] = None,
) -> ExtractionResult:
    pipeline = RecipeExtractionPipeline(completion_service=completion_service, app_settings=settings)
    return await pipeline.extract_from_caption(CaptionData(caption=caption or ""), source_url)


async def generate_instructions(
    recipe: Recipe,
    caption: Optional[str] = None,
    completion_service: Optional[TextCompletionService] = None,
    settings: Optional[Settings] = None,
) -> ExtractionResult:
    pipeline = RecipeExtractionPipeline(completion_service=completion_service, app_settings=settings)
    return await pipeline.generate_instructions(recipe, caption)


async def run_extraction_pipeline(
    url: str,
    fetcher: Optional[HttpFetcher] = None,
    completion_service: Optional[TextCompletionService] = None,
    settings: Optional[Settings] = None,
) -> ExtractionResult:
    """
    Turn a recipe URL into a Recipe or a Failure.

    This is the only call the surrounding application needs; a Failure with
    reason ``timeout`` or ``fetch_failed`` is worth retrying, the others are not.
    """
    pipeline = RecipeExtractionPipeline(fetcher=fetcher, completion_service=completion_service, app_settings=settings)
    return await pipeline.run(url)
