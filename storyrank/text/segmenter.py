"""
Term segmenters for the normalization pipeline.

A segmenter splits already-cleaned text (lowercase, no punctuation,
no digits) into raw terms. Filtering and suffix handling happen later
in the tokenizer, so any implementation can be swapped in.

Default: NLTK Treebank word tokenizer
- Pure regex, no corpus download needed
- Splits contractions: "cannot" → "can", "not"

Fallback: RegexTermSegmenter (plain word split)
"""

import re
from abc import ABC, abstractmethod
from typing import List

from nltk.tokenize import TreebankWordTokenizer

_WORD_PATTERN = re.compile(r"[a-z0-9_]+")


class TermSegmenter(ABC):
    """Splits cleaned text into an ordered list of raw terms."""

    @abstractmethod
    def segment(self, text: str) -> List[str]:
        """
        Segment text into terms.

        Args:
            text: Lowercased text with punctuation and digits removed

        Returns:
            Terms in original order (may contain duplicates)
        """
        pass


class NltkTermSegmenter(TermSegmenter):
    """Segmenter backed by NLTK's Treebank word tokenizer."""

    def __init__(self):
        # Tokenizer is stateless and reusable across threads
        self._tokenizer = TreebankWordTokenizer()

    def segment(self, text: str) -> List[str]:
        """
        Examples:
            >>> NltkTermSegmenter().segment("cannot parse this")
            ['can', 'not', 'parse', 'this']
        """
        if not text or not text.strip():
            return []
        return [term for term in self._tokenizer.tokenize(text) if term.strip()]


class RegexTermSegmenter(TermSegmenter):
    """Minimal segmenter: every run of word characters is a term."""

    def segment(self, text: str) -> List[str]:
        if not text:
            return []
        return _WORD_PATTERN.findall(text)
