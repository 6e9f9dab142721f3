"""
Unit tests for term segmenters.
"""

import pytest

from storyrank.text.segmenter import NltkTermSegmenter, RegexTermSegmenter, TermSegmenter

pytestmark = pytest.mark.unit


class TestNltkTermSegmenter:

    def test_splits_on_whitespace(self):
        assert NltkTermSegmenter().segment("disease ecology  models") == ["disease", "ecology", "models"]

    def test_splits_contractions(self):
        """Treebank rules split 'cannot' into two terms"""
        assert NltkTermSegmenter().segment("cannot stop") == ["can", "not", "stop"]

    def test_empty_input(self):
        assert NltkTermSegmenter().segment("") == []
        assert NltkTermSegmenter().segment("   ") == []


class TestRegexTermSegmenter:

    def test_splits_on_non_word(self):
        assert RegexTermSegmenter().segment("disease-ecology, models") == ["disease", "ecology", "models"]

    def test_empty_input(self):
        assert RegexTermSegmenter().segment("") == []


def test_segmenter_is_abstract():
    with pytest.raises(TypeError):
        TermSegmenter()
