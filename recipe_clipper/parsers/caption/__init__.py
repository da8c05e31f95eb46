"""
Caption-based recipe extraction: generative model first, regex fallback second
"""

from .caption_metadata import caption_has_instructions, clean_time_unit, extract_caption_timing
from .generative_extractor import GenerativeRecipeExtractor
from .heuristic_fallback import CaptionHeuristicFallback

__all__ = [
    'GenerativeRecipeExtractor',
    'CaptionHeuristicFallback',
    'caption_has_instructions',
    'clean_time_unit',
    'extract_caption_timing'
]
