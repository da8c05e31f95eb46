"""
Recipe Clipper

Turns Instagram posts, Facebook reels and recipe web pages into structured
recipes. ``run_extraction_pipeline`` is the entry point; the other functions
expose the individual stages.
"""

__version__ = "1.0.0"

from .models import CaptionData, Failure, FailureReason, Recipe
from .pipeline import (
    RecipeExtractionPipeline,
    extract_recipe_from_caption,
    extract_recipe_from_html,
    generate_instructions,
    run_extraction_pipeline,
    scrape_social_caption,
)

__all__ = [
    'CaptionData',
    'Failure',
    'FailureReason',
    'Recipe',
    'RecipeExtractionPipeline',
    'extract_recipe_from_caption',
    'extract_recipe_from_html',
    'generate_instructions',
    'run_extraction_pipeline',
    'scrape_social_caption'
]
