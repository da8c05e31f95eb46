"""
Recipe web page parsing: JSON-LD, microdata and heuristic DOM tiers
"""

from .site_recipe_parser import SiteRecipeExtractor, fetch_recipe_page

__all__ = [
    'SiteRecipeExtractor',
    'fetch_recipe_page'
]
