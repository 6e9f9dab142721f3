"""
Hacker News story source (Firebase API).

Two-step fetch:
1. GET /topstories.json → list of item ids (first `limit` kept)
2. GET /item/{id}.json for each id, in parallel batches (default 20)

A failing or empty item is logged and skipped; only a failure of the id
list aborts the whole fetch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from ..exceptions import StoryFetchError
from ..models import Story
from .base import BaseStorySource

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hacker-news.firebaseio.com/v0"
DEFAULT_BATCH_SIZE = 20
DEFAULT_TIMEOUT = 10.0


class HackerNewsSource(BaseStorySource):
    """Fetches top stories from the public Hacker News API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API root (no trailing slash needed)
            batch_size: Items fetched concurrently per batch
            timeout: Per-request timeout in seconds
            session: HTTP session (injectable for tests)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_stories(self, limit: int = 100) -> List[Story]:
        story_ids = self._fetch_top_story_ids()[:max(limit, 0)]

        stories: List[Story] = []
        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for start in range(0, len(story_ids), self.batch_size):
                batch = story_ids[start:start + self.batch_size]
                # map() keeps upstream order within the batch
                results = executor.map(self._fetch_item, batch)
                stories.extend(story for story in results if story is not None)

        skipped = len(story_ids) - len(stories)
        logger.info(f"Fetched {len(stories)} stories from Hacker News ({skipped} skipped)")
        return stories

    def _fetch_top_story_ids(self) -> List[int]:
        url = f"{self.base_url}/topstories.json"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            story_ids = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching top stories: {e}")
            raise StoryFetchError(f"Failed to fetch top stories: {e}") from e

        if not isinstance(story_ids, list):
            raise StoryFetchError(f"Unexpected top stories payload: {type(story_ids).__name__}")
        return story_ids

    def _fetch_item(self, story_id: int) -> Optional[Story]:
        url = f"{self.base_url}/item/{story_id}.json"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            item = response.json()
            if not item:
                logger.warning(f"Story {story_id} returned no data, skipping")
                return None
            if not isinstance(item, dict):
                logger.warning(f"Story {story_id} returned unexpected payload ({type(item).__name__}), skipping")
                return None
            return Story.from_api(item)
        except (requests.RequestException, ValueError, TypeError) as e:
            logger.warning(f"Error fetching story {story_id}: {e}")
            return None

    def get_source_info(self) -> dict:
        return {
            "name": "hacker_news",
            "base_url": self.base_url,
            "batch_size": self.batch_size,
            "timeout": self.timeout,
        }

    def close(self):
        self.session.close()
