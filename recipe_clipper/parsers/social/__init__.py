"""
Instagram/Facebook caption scraping
"""

from .caption_scraper import SocialCaptionScraper, SourcePlatform, classify_url
from .facebook_resolver import FacebookShareResolver
from .html_extraction import extract_data_from_html

__all__ = [
    'SocialCaptionScraper',
    'SourcePlatform',
    'classify_url',
    'FacebookShareResolver',
    'extract_data_from_html'
]
