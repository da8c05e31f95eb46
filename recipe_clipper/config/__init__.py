"""
Configuration exports
"""

from .settings import Settings, settings
from .observability import configure_logfire

__all__ = [
    'Settings',
    'settings',
    'configure_logfire'
]
