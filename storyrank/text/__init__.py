"""
Lexical text relevance for story ranking.

This module turns raw text into normalized tokens and scores texts against
each other by exact-token overlap. No stemming beyond a trailing-'s' strip,
no synonyms, no embeddings.

Components:
- segmenter: Pluggable term segmentation (NLTK Treebank by default)
- tokenizer: Normalization pipeline with stopwords and memoization
- keywords: Frequency-ranked keyword extraction and keyword matching
- scorer: Length-normalized relevance score and Jaccard similarity
"""

from .segmenter import TermSegmenter, NltkTermSegmenter, RegexTermSegmenter
from .tokenizer import STOP_WORDS, Tokenizer, tokenize, get_default_tokenizer, set_default_tokenizer
from .keywords import count_terms, extract_keywords, matching_keywords
from .scorer import RelevanceScorer, jaccard_similarity

__all__ = [
    "TermSegmenter",
    "NltkTermSegmenter",
    "RegexTermSegmenter",
    "STOP_WORDS",
    "Tokenizer",
    "tokenize",
    "get_default_tokenizer",
    "set_default_tokenizer",
    "count_terms",
    "extract_keywords",
    "matching_keywords",
    "RelevanceScorer",
    "jaccard_similarity",
]
