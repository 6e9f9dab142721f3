"""
Abstract base class for story sources.

All sources must implement this interface to be swappable.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import Story


class BaseStorySource(ABC):
    """
    Abstract base class for upstream story sources.

    All sources must implement this interface to be swappable.
    """

    @abstractmethod
    def fetch_stories(self, limit: int = 100) -> List[Story]:
        """
        Fetch the current top stories.

        Args:
            limit: Maximum number of stories to return

        Returns:
            Up to limit stories, in upstream order. Items that failed to
            load are left out.

        Raises:
            StoryFetchError: The batch as a whole could not be fetched
        """
        pass

    def get_source_info(self) -> dict:
        """Information about the source (name, endpoint, settings)"""
        return {"name": type(self).__name__}

    def close(self):
        """Optional cleanup (close HTTP sessions, etc.)"""
        pass
