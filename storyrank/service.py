"""
Ranking service - single entry point used by the HTTP layer.

rank_for_query():
1. Validate query text (blank → InvalidQueryError, nothing fetched)
2. Get story batch via CollectionCache (fresh, cached, or stale on error)
3. Rank batch against the query
4. Apply optional ordering and minimum-relevance filter
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .cache import CollectionCache
from .exceptions import InvalidQueryError
from .models import Story
from .ranking import SortKey, StoryRanker, filter_by_min_relevance, sort_stories
from .sources.base import BaseStorySource

logger = logging.getLogger(__name__)

DEFAULT_MAX_STORIES = 100


@dataclass
class RankedStories:
    """Result of one ranking request"""
    stories: List[Story]
    keywords: List[str] = field(default_factory=list)
    cache_hit: bool = False
    stale: bool = False
    processing_time_ms: int = 0


class StoryRankingService:
    """Joins the story source, collection cache and ranker."""

    def __init__(
        self,
        source: BaseStorySource,
        collection_cache: Optional[CollectionCache] = None,
        ranker: Optional[StoryRanker] = None,
        max_stories: int = DEFAULT_MAX_STORIES,
    ):
        self.source = source
        self.collection_cache = collection_cache or CollectionCache()
        self.ranker = ranker or StoryRanker()
        self.max_stories = max_stories

    def rank_for_query(
        self,
        query_text: Optional[str],
        sort_key: Union[SortKey, str] = SortKey.RELEVANCE,
        min_relevance: int = 0,
    ) -> RankedStories:
        """
        Rank the current story batch against a user's interest statement.

        Args:
            query_text: Free-text bio; must contain non-whitespace text
            sort_key: Final ordering (relevance, HN score, or newest)
            min_relevance: Minimum relevance percentage kept (0 = keep all)

        Returns:
            RankedStories with keywords and cache flags

        Raises:
            InvalidQueryError: query_text empty or missing
            ValueError: Unknown sort key
            StoryFetchError: Upstream failed and nothing is cached
        """
        if not query_text or not query_text.strip():
            raise InvalidQueryError("Bio is required")
        sort_key = SortKey(sort_key)

        start_time = time.perf_counter()

        snapshot = self.collection_cache.get_or_fetch(
            lambda: self.source.fetch_stories(limit=self.max_stories)
        )

        result = self.ranker.rank(snapshot.stories, query_text)
        stories = result.stories
        if sort_key is not SortKey.RELEVANCE:
            stories = sort_stories(stories, sort_key)
        stories = filter_by_min_relevance(stories, min_relevance)

        processing_time_ms = round((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"Ranked {len(result.stories)} stories in {processing_time_ms}ms "
            f"(cache_hit={snapshot.cache_hit}, stale={snapshot.stale}, returned={len(stories)})"
        )

        return RankedStories(
            stories=stories,
            keywords=result.keywords,
            cache_hit=snapshot.cache_hit,
            stale=snapshot.stale,
            processing_time_ms=processing_time_ms,
        )
