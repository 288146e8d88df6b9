"""
HTTP API for persona-quiz
"""

from .app import create_app, build_provider
from .ratelimit import SlidingWindowRateLimiter

__all__ = [
    "create_app",
    "build_provider",
    "SlidingWindowRateLimiter",
]
