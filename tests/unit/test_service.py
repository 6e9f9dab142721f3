"""
Unit tests for StoryRankingService (validation, collection caching, stale-serve).
"""

import pytest

from storyrank.exceptions import InvalidQueryError, StoryFetchError
from storyrank.ranking import SortKey
from storyrank.service import RankedStories, StoryRankingService

pytestmark = pytest.mark.unit

BIO = "Statistical GAM models for disease ecology"


@pytest.fixture
def service(fake_source, collection_cache):
    return StoryRankingService(source=fake_source, collection_cache=collection_cache)


class TestValidation:

    @pytest.mark.parametrize("bio", [None, "", "   ", "\n\t"])
    def test_blank_query_rejected_before_fetch(self, service, fake_source, bio):
        with pytest.raises(InvalidQueryError):
            service.rank_for_query(bio)
        assert fake_source.calls == 0

    def test_invalid_query_is_value_error(self):
        assert issubclass(InvalidQueryError, ValueError)

    def test_unknown_sort_key(self, service):
        with pytest.raises(ValueError):
            service.rank_for_query(BIO, sort_key="comments")


class TestRanking:

    def test_ranked_by_relevance(self, service):
        result = service.rank_for_query(BIO)

        assert isinstance(result, RankedStories)
        assert result.stories[0].id == 3
        scores = [s.relevance_score for s in result.stories]
        assert scores == sorted(scores, reverse=True)
        assert "disease" in result.keywords
        assert result.processing_time_ms >= 0

    def test_sort_by_popularity(self, service):
        result = service.rank_for_query(BIO, sort_key=SortKey.SCORE)
        assert [s.id for s in result.stories] == [1, 3, 4, 2]

    def test_sort_by_date(self, service):
        result = service.rank_for_query(BIO, sort_key="date")
        assert [s.id for s in result.stories] == [4, 2, 3, 1]

    def test_min_relevance_filter(self, service):
        result = service.rank_for_query(BIO, min_relevance=1)
        assert {s.id for s in result.stories} == {2, 3}

    def test_max_stories_passed_to_source(self, fake_source, collection_cache):
        service = StoryRankingService(source=fake_source, collection_cache=collection_cache, max_stories=2)
        result = service.rank_for_query(BIO)
        assert len(result.stories) == 2

    def test_cached_stories_not_mutated(self, service, collection_cache):
        service.rank_for_query(BIO)
        assert all(s.relevance_score == 0.0 for s in collection_cache.peek().stories)


class TestCollectionCaching:

    def test_cache_hit_lifecycle(self, service, fake_source, clock):
        """Fresh fetch, then hit within expiry, then stale batch when upstream is down"""
        first = service.rank_for_query(BIO)
        assert first.cache_hit is False
        assert fake_source.calls == 1

        clock.advance(60)
        second = service.rank_for_query(BIO)
        assert second.cache_hit is True
        assert {s.id for s in second.stories} == {s.id for s in first.stories}
        assert fake_source.calls == 1

        clock.advance(300)
        fake_source.fail = True
        third = service.rank_for_query(BIO)
        assert third.stale is True
        assert {s.id for s in third.stories} == {s.id for s in first.stories}
        assert fake_source.calls == 2

    def test_fetch_failure_without_cache(self, service, fake_source):
        fake_source.fail = True
        with pytest.raises(StoryFetchError):
            service.rank_for_query(BIO)
