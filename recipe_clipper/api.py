"""
Recipe Clipper API - Instagram, Facebook & Site Recipe Parsing
FastAPI service wrapping the extraction pipeline for the iOS share extension.
"""

import time
from typing import List, Optional

import logfire
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .models import Failure, FailureReason, Recipe
from .pipeline import RecipeExtractionPipeline

# Failure reason -> HTTP status
FAILURE_STATUS_CODES = {
    FailureReason.INVALID_URL: 400,
    FailureReason.TIMEOUT: 408,
    FailureReason.NO_CAPTION: 422,
    FailureReason.NO_RECIPE_FOUND: 422,
    FailureReason.MALFORMED_SOURCE: 422,
    FailureReason.FETCH_FAILED: 502,
}


# Pydantic models
class URLRequest(BaseModel):
    url: str


class GenerateInstructionsRequest(BaseModel):
    title: Optional[str] = None
    ingredients: Optional[List[str]] = None
    originalContent: Optional[str] = None


# Create FastAPI app
app = FastAPI(
    title="Recipe Clipper API",
    description="Turn Instagram posts, Facebook reels and recipe sites into structured recipe JSON.",
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_pipeline() -> RecipeExtractionPipeline:
    return RecipeExtractionPipeline()


def failure_response(failure: Failure) -> JSONResponse:
    body = {
        "error": failure.message,
        "reason": failure.reason.value,
        "fallbackMode": True,
    }
    if failure.caption_preview:
        body["caption"] = failure.caption_preview
    return JSONResponse(status_code=FAILURE_STATUS_CODES[failure.reason], content=body)


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "service": "Recipe Clipper API",
        "status": "healthy",
        "version": __version__,
        "endpoints": [
            "POST /parse-recipe",
            "POST /generate-instructions"
        ]
    }


@app.post("/parse-recipe")
async def parse_recipe(request: URLRequest, pipeline: RecipeExtractionPipeline = Depends(get_pipeline)):
    """
    Parse an Instagram post, Facebook reel or recipe page into a recipe.

    Input: {"url": "https://www.instagram.com/reel/ABC123/"}
    Output: {"recipe": {...}} or {"error": ..., "reason": ..., "fallbackMode": true, "caption": ...}
    """
    start_time = time.time()
    result = await pipeline.run(request.url)

    if isinstance(result, Failure):
        logfire.info("api_parse_recipe_failed", url=request.url, reason=result.reason.value)
        return failure_response(result)

    logfire.info("api_parse_recipe_succeeded",
                 url=request.url,
                 elapsed_seconds=round(time.time() - start_time, 2))
    return {"recipe": result.model_dump(by_alias=True, exclude_none=True)}


@app.post("/generate-instructions")
async def generate_instructions(
    request: GenerateInstructionsRequest,
    pipeline: RecipeExtractionPipeline = Depends(get_pipeline),
):
    """
    Write instructions for a recipe the user saved with ingredients only.

    Input: {"title": "...", "ingredients": ["..."], "originalContent": "caption text"}
    Output: {"instructions": ["...", "..."]}
    """
    ingredients = [line for line in (request.ingredients or []) if line and line.strip()]
    if not request.title or not ingredients:
        raise HTTPException(status_code=400, detail="Title and ingredients are required")

    recipe = Recipe(title=request.title, ingredients=ingredients)
    result = await pipeline.generate_instructions(recipe, request.originalContent)
    if isinstance(result, Failure):
        logfire.warn("api_generate_instructions_failed", title=request.title)
        raise HTTPException(status_code=500, detail="Failed to generate instructions")

    return {"instructions": result.instructions}
