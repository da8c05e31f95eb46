"""
Custom exception classes for recipe extraction collaborators
"""


class RecipeClipperError(Exception):
    """Base exception for recipe_clipper"""
    pass


class FetchError(RecipeClipperError):
    """Raised when an HTTP request fails at the transport level"""
    def __init__(self, url: str, detail: str = ""):
        self.url = url
        self.detail = detail
        super().__init__(f"Failed to fetch {url}: {detail}" if detail else f"Failed to fetch {url}")


class CompletionError(RecipeClipperError):
    """Raised when the text completion service cannot produce a response"""
    def __init__(self, message: str, finish_reason: str = None):
        self.finish_reason = finish_reason
        super().__init__(message)
