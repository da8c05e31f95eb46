"""
Recipe data models.

Recipes are frozen once built; the pipeline derives updated copies with
``model_copy(update=...)``. Field names are snake_case in Python and
camelCase on the wire (``prepTime``, ``instagramUrl``, ...).
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class FrozenModel(BaseModel):
    """Base model: immutable, camelCase aliases, accepts either naming on input"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Nutrition(FrozenModel):
    calories: Optional[str] = None
    protein: Optional[str] = None
    carbs: Optional[str] = None
    fat: Optional[str] = None

    def is_empty(self) -> bool:
        return not any([self.calories, self.protein, self.carbs, self.fat])


class IngredientSection(FrozenModel):
    """A titled group of ingredients, e.g. "For the sauce"."""
    title: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)


class RecipeMetadata(FrozenModel):
    instructions_generated: Optional[bool] = None


IngredientEntry = Union[str, IngredientSection]


class Recipe(FrozenModel):
    """Structured recipe as returned by every extraction path."""

    title: str = ""
    description: Optional[str] = None
    image: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[str] = None
    ingredients: List[IngredientEntry] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    nutrition: Optional[Nutrition] = None
    author: Optional[str] = None
    rating: Optional[str] = None
    review_count: Optional[str] = None
    instagram_url: Optional[str] = None
    facebook_url: Optional[str] = None
    metadata: RecipeMetadata = Field(default_factory=RecipeMetadata)

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value

    @property
    def flat_ingredients(self) -> List[str]:
        """Ingredient lines with sections flattened in order."""
        lines: List[str] = []
        for entry in self.ingredients:
            if isinstance(entry, IngredientSection):
                lines.extend(entry.ingredients)
            else:
                lines.append(entry)
        return lines

    def has_content(self) -> bool:
        return bool(self.title or self.ingredients or self.instructions)


class CaptionData(FrozenModel):
    caption: str
    image: Optional[str] = None


class FailureReason(str, Enum):
    INVALID_URL = "invalid_url"
    FETCH_FAILED = "fetch_failed"
    NO_CAPTION = "no_caption"
    NO_RECIPE_FOUND = "no_recipe_found"
    TIMEOUT = "timeout"
    MALFORMED_SOURCE = "malformed_source"


class Failure(FrozenModel):
    """Terminal, typed outcome of an extraction that produced no recipe."""

    reason: FailureReason
    message: str
    caption_preview: Optional[str] = None

    @property
    def is_retryable(self) -> bool:
        return self.reason in (FailureReason.TIMEOUT, FailureReason.FETCH_FAILED)
