"""
Story ranking against a user's interest statement.

Flow:
    bio → keywords (for display)
    bio → token set (for matching)
    each story → tokens → relevance score
    stories → stable sort by score (descending)

Also provides the alternative orderings and the minimum-relevance filter
offered to clients (relevance / HN score / newest).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from .models import Story
from .text.keywords import DEFAULT_KEYWORD_LIMIT, extract_keywords
from .text.scorer import RelevanceScorer
from .text.tokenizer import Tokenizer, get_default_tokenizer

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    """Available story orderings"""
    RELEVANCE = "relevance"
    SCORE = "score"     # HN points
    DATE = "date"       # Newest first


@dataclass
class RankingResult:
    """Ranked stories plus the keywords extracted from the query"""
    stories: List[Story]
    keywords: List[str] = field(default_factory=list)


def select_comparator(sort_key: Union[SortKey, str]) -> Callable[[Story], float]:
    """
    Sort key function for an ordering (use with reverse=True).

    Raises:
        ValueError: Unknown sort key
    """
    sort_key = SortKey(sort_key)
    if sort_key is SortKey.RELEVANCE:
        return lambda story: story.relevance_score or 0.0
    if sort_key is SortKey.SCORE:
        return lambda story: story.score or 0
    return lambda story: story.time or 0


def sort_stories(stories: Sequence[Story], sort_key: Union[SortKey, str] = SortKey.RELEVANCE) -> List[Story]:
    """Stable descending sort (equal keys keep input order)"""
    return sorted(stories, key=select_comparator(sort_key), reverse=True)


def score_percentage(score: float) -> int:
    """Display percentage of a raw score. Not clamped: dense short stories can exceed 100."""
    return round((score or 0.0) * 100)


def filter_by_min_relevance(stories: Sequence[Story], min_percentage: int) -> List[Story]:
    """Keep stories whose relevance percentage is at least min_percentage"""
    if min_percentage <= 0:
        return list(stories)
    return [story for story in stories if score_percentage(story.relevance_score) >= min_percentage]


class StoryRanker:
    """Scores a story batch against a query and orders it by relevance."""

    def __init__(self, tokenizer: Optional[Tokenizer] = None, keyword_limit: int = DEFAULT_KEYWORD_LIMIT):
        """
        Args:
            tokenizer: Tokenizer shared by query and stories (default: shared tokenizer)
            keyword_limit: Maximum number of query keywords returned
        """
        self.tokenizer = tokenizer or get_default_tokenizer()
        self.scorer = RelevanceScorer(self.tokenizer)
        self.keyword_limit = keyword_limit

    def rank(self, stories: Sequence[Story], query_text: str) -> RankingResult:
        """
        Rank stories by relevance to the query text.

        Input stories are not modified; scored copies are returned.

        Args:
            stories: Full story batch (no pagination)
            query_text: Free-text interest statement

        Returns:
            RankingResult with stories sorted by relevance_score (descending,
            stable) and the query's keywords
        """
        keywords = extract_keywords(query_text, limit=self.keyword_limit, tokenizer=self.tokenizer)
        query_tokens = self.tokenizer.token_set(query_text)

        scored = [
            story.with_score(self.scorer.score_story(story, query_tokens))
            for story in stories
        ]
        ranked = sort_stories(scored, SortKey.RELEVANCE)

        matched = sum(1 for story in ranked if story.relevance_score > 0)
        logger.debug(
            f"Ranked {len(ranked)} stories against {len(query_tokens)} query tokens "
            f"({matched} with matches)"
        )
        return RankingResult(stories=ranked, keywords=keywords)
