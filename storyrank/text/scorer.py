"""
Lexical relevance scoring.

Two measures:

1. Jaccard similarity between two texts (token sets):
    similarity(A, B) = |A ∩ B| / |A ∪ B|        (0 if either set is empty)

2. Query-weighted relevance of a document:
    relevance(doc, Q) = matches / sqrt(doc_token_count)

Where:
    matches = number of document tokens (with repetition) that are in Q
    doc_token_count = length of the document token sequence

The sqrt normalization favors dense short documents without punishing long
relevant ones as hard as linear normalization would. Scores are not capped:
a short document with repeated matches can exceed 1.0.
"""

import math
from typing import AbstractSet, Optional, Sequence

from ..models import Story
from .tokenizer import TextInput, Tokenizer, get_default_tokenizer


def jaccard_similarity(text_a: TextInput, text_b: TextInput, tokenizer: Optional[Tokenizer] = None) -> float:
    """
    Jaccard similarity coefficient of two texts.

    Examples:
        >>> jaccard_similarity("disease ecology", "ecology models")
        0.333...
        >>> jaccard_similarity("disease ecology", "")
        0.0
    """
    tokenizer = tokenizer or get_default_tokenizer()
    tokens_a = tokenizer.token_set(text_a)
    tokens_b = tokenizer.token_set(text_b)

    if not tokens_a or not tokens_b:
        return 0.0

    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


class RelevanceScorer:
    """
    Length-normalized match count of query tokens in a document.

    Pure function of (document text, query token set); the tokenizer's
    cache only affects cost.
    """

    def __init__(self, tokenizer: Optional[Tokenizer] = None):
        self.tokenizer = tokenizer or get_default_tokenizer()

    def score_tokens(self, doc_tokens: Sequence[str], query_tokens: AbstractSet[str]) -> float:
        """
        Score a pre-tokenized document.

        Args:
            doc_tokens: Document token sequence (order/repetition kept)
            query_tokens: Query token set

        Returns:
            Relevance score >= 0

        Example:
            >>> RelevanceScorer().score_tokens(["new", "package", "disease", "modeling"], {"disease"})
            0.5
        """
        if not doc_tokens:
            return 0.0

        matches = sum(1 for token in doc_tokens if token in query_tokens)
        return matches / math.sqrt(len(doc_tokens))

    def score(self, text: TextInput, query_tokens: AbstractSet[str]) -> float:
        return self.score_tokens(self.tokenizer.tokenize(text), query_tokens)

    def score_story(self, story: Story, query_tokens: AbstractSet[str]) -> float:
        """Score a story by its combined title and body text"""
        return self.score(story.content, query_tokens)
