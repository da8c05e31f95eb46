"""
Models module exports
"""

from .recipe import (
    CaptionData,
    Failure,
    FailureReason,
    IngredientEntry,
    IngredientSection,
    Nutrition,
    Recipe,
    RecipeMetadata
)

__all__ = [
    'CaptionData',
    'Failure',
    'FailureReason',
    'IngredientEntry',
    'IngredientSection',
    'Nutrition',
    'Recipe',
    'RecipeMetadata'
]
