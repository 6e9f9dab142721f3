"""
Upstream story sources.

Usage:
    from storyrank.sources import HackerNewsSource

    source = HackerNewsSource()
    stories = source.fetch_stories(limit=100)
"""

from .base import BaseStorySource
from .hacker_news import HackerNewsSource

__all__ = [
    'BaseStorySource',
    'HackerNewsSource',
]
