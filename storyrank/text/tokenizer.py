"""
Tokenizer for relevance scoring.

Normalization pipeline (order matters):
1. Lowercase conversion
2. Strip HTML tags (<...>) → space
3. Strip URLs (http:// or https:// + non-whitespace) → space
4. Strip non-word characters, then digit runs → space
5. Segment into terms (pluggable TermSegmenter, NLTK by default)
6. Drop terms with length <= 2 and stopwords
7. Strip one trailing 's' ("models" → "model", "glass" → "glas"),
   re-applying the step 6 filter to the stripped term

Step 7 is a deliberately naive singularization. Query and document text
go through the same pipeline, so matching stays symmetric.

Results are memoized per exact input string in a TokenCache.
"""

import logging
import re
from typing import FrozenSet, List, Optional, Union

from ..cache import TokenCache
from .segmenter import NltkTermSegmenter, TermSegmenter

logger = logging.getLogger(__name__)

# English function words plus noise words common in user bios
STOP_WORDS = frozenset([
    'a', 'an', 'the', 'and', 'or', 'but', 'is', 'are', 'was', 'were',
    'be', 'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did',
    'to', 'from', 'in', 'out', 'on', 'off', 'over', 'under', 'again',
    'further', 'then', 'once', 'here', 'there', 'when', 'where', 'why',
    'how', 'all', 'any', 'both', 'each', 'few', 'more', 'most', 'other',
    'some', 'such', 'no', 'nor', 'not', 'only', 'own', 'same', 'so',
    'than', 'too', 'very', 's', 't', 'can', 'will', 'just', 'don', 'should',
    'now', 'of', 'for', 'with', 'by', 'about', 'against', 'between', 'into',
    'through', 'during', 'before', 'after', 'above', 'below', 'up', 'down',
    'that', 'this', 'these', 'those', 'am', 'im', 'your', 'his', 'her', 'their',
    'my', 'mine', 'our', 'ours', 'its', 'theirs', 'you', 'me', 'him',
    'working', 'work', 'works', 'worked', 'using', 'use', 'uses', 'used',
    'interest', 'interested', 'interesting', 'interests',
])

MIN_TERM_LENGTH = 3

_HTML_TAG = re.compile(r'<[^>]*>')
_URL = re.compile(r'https?://\S+')
# ASCII word chars only; underscore counts as punctuation so tokens stay alphabetic
_NON_WORD = re.compile(r'[^a-z0-9\s]|_', re.ASCII)
_DIGITS = re.compile(r'\d+', re.ASCII)
_TRAILING_S = re.compile(r's$')

TextInput = Union[str, bytes, None]


def clean_text(text: str) -> str:
    """
    Apply steps 1-4 of the pipeline (lowercase, strip HTML/URLs/punctuation/digits).

    Example:
        >>> clean_text("<b>GAM</b> v2!").split()
        ['gam', 'v']
    """
    text = text.lower()
    text = _HTML_TAG.sub(' ', text)
    text = _URL.sub(' ', text)
    text = _NON_WORD.sub(' ', text)
    text = _DIGITS.sub(' ', text)
    return text


def singularize(term: str) -> str:
    """Strip a single trailing 's' (no handling of 'ss' or irregular plurals)."""
    return _TRAILING_S.sub('', term)


class Tokenizer:
    """
    Text → normalized token sequence, with memoization.

    Order and repetition are preserved (frequency counts depend on it).
    Never raises: None, non-text values, empty strings and undecodable
    bytes yield [] (or whatever text survives decoding).
    """

    def __init__(
        self,
        segmenter: Optional[TermSegmenter] = None,
        stop_words: FrozenSet[str] = STOP_WORDS,
        cache: Optional[TokenCache] = None,
    ):
        """
        Args:
            segmenter: Term segmenter for step 5 (default: NltkTermSegmenter)
            stop_words: Terms dropped unconditionally in step 6
            cache: Memo for exact input strings (default: fresh TokenCache)
        """
        self.segmenter = segmenter or NltkTermSegmenter()
        self.stop_words = frozenset(stop_words)
        self.cache = cache if cache is not None else TokenCache()

    def tokenize(self, text: TextInput) -> List[str]:
        """
        Tokenize text for relevance scoring.

        Args:
            text: Raw text (may contain HTML/URLs); bytes decoded as UTF-8

        Returns:
            List of normalized tokens in original order

        Examples:
            >>> Tokenizer().tokenize("Statistical GAM models in R")
            ['statistical', 'gam', 'model']

            >>> Tokenizer().tokenize("   ")
            []
        """
        if text is None:
            return []
        if isinstance(text, (bytes, bytearray)):
            # Invalid sequences become U+FFFD, which step 4 strips
            text = bytes(text).decode('utf-8', errors='replace')
        if not isinstance(text, str):
            return []

        cached = self.cache.get(text)
        if cached is not None:
            return cached

        tokens = self._normalize(text)
        self.cache.set(text, tokens)
        return tokens

    def token_set(self, text: TextInput) -> FrozenSet[str]:
        """Deduplicated tokens for membership tests"""
        return frozenset(self.tokenize(text))

    def _normalize(self, text: str) -> List[str]:
        cleaned = clean_text(text)
        if not cleaned.strip():
            return []

        tokens = []
        for term in self.segmenter.segment(cleaned):
            if not self._keep(term):
                continue
            term = singularize(term)
            # "bus" → "bu", "hers" → "her": re-check after stripping
            if self._keep(term):
                tokens.append(term)
        return tokens

    def _keep(self, term: str) -> bool:
        return len(term) >= MIN_TERM_LENGTH and term not in self.stop_words


_default_tokenizer: Optional[Tokenizer] = None


def get_default_tokenizer() -> Tokenizer:
    """Shared process-wide tokenizer (created on first use)"""
    global _default_tokenizer
    if _default_tokenizer is None:
        _default_tokenizer = Tokenizer()
    return _default_tokenizer


def set_default_tokenizer(tokenizer: Optional[Tokenizer]) -> None:
    """Replace the shared tokenizer (None resets to a fresh default on next use)"""
    global _default_tokenizer
    _default_tokenizer = tokenizer


def tokenize(text: TextInput) -> List[str]:
    """Tokenize with the shared default tokenizer."""
    return get_default_tokenizer().tokenize(text)
