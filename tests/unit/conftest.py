"""Unit test configuration - fakes for isolated testing (no network)"""

from typing import List, Optional

import pytest

from storyrank.cache import CollectionCache, TokenCache
from storyrank.exceptions import StoryFetchError
from storyrank.models import Story
from storyrank.sources.base import BaseStorySource
from storyrank.text.tokenizer import Tokenizer, set_default_tokenizer


class FakeClock:
    """Manually advanced clock (epoch seconds)"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeStorySource(BaseStorySource):
    """In-memory story source that can be switched into a failing state"""

    def __init__(self, stories: List[Story]):
        self.stories = stories
        self.calls = 0
        self.fail = False

    def fetch_stories(self, limit: int = 100) -> List[Story]:
        self.calls += 1
        if self.fail:
            raise StoryFetchError("Hacker News unreachable")
        return list(self.stories[:limit])


def make_story(story_id: int, title: str, text: Optional[str] = None, score: int = 0, time: int = 0) -> Story:
    return Story(id=story_id, title=title, text=text, by="tester", time=time, score=score)


@pytest.fixture(autouse=True)
def fresh_default_tokenizer():
    """
    Give every test its own shared tokenizer.

    The default tokenizer memoizes across calls; resetting it keeps
    cache counters and eviction state from leaking between tests.
    """
    set_default_tokenizer(None)
    yield
    set_default_tokenizer(None)


@pytest.fixture
def token_cache():
    return TokenCache()


@pytest.fixture
def tokenizer(token_cache):
    return Tokenizer(cache=token_cache)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def collection_cache(clock):
    return CollectionCache(expiry_seconds=300, clock=clock)


@pytest.fixture
def sample_stories():
    """Small batch mixing relevant and irrelevant titles"""
    return [
        make_story(1, "Cooking recipes for dinner", score=300, time=1_000),
        make_story(2, "New R package for disease modeling", score=50, time=3_000),
        make_story(3, "Statistical GAM models for ecology", text="<p>Disease ecology with GAMs</p>", score=120, time=2_000),
        make_story(4, "Show HN: A tiny text editor", score=90, time=4_000),
    ]


@pytest.fixture
def fake_source(sample_stories):
    return FakeStorySource(sample_stories)
