"""
External collaborators: HTTP fetching and text completion
"""

from .http_fetcher import FetchResponse, HttpFetcher, HttpxFetcher, RedirectPolicy
from .llm_service import GeminiCompletionService, TextCompletionService

__all__ = [
    'FetchResponse',
    'HttpFetcher',
    'HttpxFetcher',
    'RedirectPolicy',
    'GeminiCompletionService',
    'TextCompletionService'
]
