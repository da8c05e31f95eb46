"""
Recipe parsers for web pages, social captions and generative output
"""

from .caption import CaptionHeuristicFallback, GenerativeRecipeExtractor
from .html_entities import decode_html_entities
from .site_parser import SiteRecipeExtractor
from .social import SocialCaptionScraper

__all__ = [
    'CaptionHeuristicFallback',
    'GenerativeRecipeExtractor',
    'SiteRecipeExtractor',
    'SocialCaptionScraper',
    'decode_html_entities'
]
