"""
Keyword extraction by term frequency.

Keywords are the most frequent distinct tokens of a text:
- Count occurrences per token (first-occurrence order kept)
- Stable sort by descending count (ties keep first-occurrence order)
- Truncate to limit (default: 20)
"""

import logging
from typing import Dict, Iterable, List, Optional

from .tokenizer import TextInput, Tokenizer, get_default_tokenizer

logger = logging.getLogger(__name__)

DEFAULT_KEYWORD_LIMIT = 20


def count_terms(tokens: Iterable[str]) -> Dict[str, int]:
    """
    Build a term frequency map.

    Example:
        >>> count_terms(["model", "gam", "model"])
        {'model': 2, 'gam': 1}
    """
    term_frequencies: Dict[str, int] = {}
    for term in tokens:
        term_frequencies[term] = term_frequencies.get(term, 0) + 1
    return term_frequencies


def extract_keywords(
    text: TextInput,
    limit: int = DEFAULT_KEYWORD_LIMIT,
    tokenizer: Optional[Tokenizer] = None,
) -> List[str]:
    """
    Extract the top keywords of a text.

    Args:
        text: Raw text (bio, story title, ...)
        limit: Maximum number of keywords returned
        tokenizer: Tokenizer to use (default: shared tokenizer)

    Returns:
        Distinct tokens ordered by descending frequency

    Examples:
        >>> extract_keywords("GAM models and more GAM models for ecology")
        ['gam', 'model', 'ecology']

        >>> extract_keywords("")
        []
    """
    if limit <= 0:
        return []

    tokenizer = tokenizer or get_default_tokenizer()
    term_frequencies = count_terms(tokenizer.tokenize(text))

    # sorted() is stable, so equal counts keep first-occurrence order
    ranked = sorted(term_frequencies.items(), key=lambda item: item[1], reverse=True)
    keywords = [term for term, _ in ranked[:limit]]

    logger.debug(f"Extracted {len(keywords)} keywords from {len(term_frequencies)} distinct terms")
    return keywords


def matching_keywords(
    content: TextInput,
    keywords: Iterable[str],
    limit: Optional[int] = None,
    tokenizer: Optional[Tokenizer] = None,
) -> List[str]:
    """
    Keywords that also occur in the tokenized content.

    Args:
        content: Text to search (e.g. story title + body)
        keywords: Query keywords, already normalized
        limit: Optional cap on returned keywords
        tokenizer: Tokenizer to use (default: shared tokenizer)

    Returns:
        Matching keywords in the order they were given

    Example:
        >>> matching_keywords("Disease ecology in practice", ["ecology", "gam"])
        ['ecology']
    """
    keywords = list(keywords)
    if not keywords:
        return []

    tokenizer = tokenizer or get_default_tokenizer()
    content_tokens = tokenizer.token_set(content)

    matches = [keyword for keyword in keywords if keyword in content_tokens]
    if limit is not None:
        matches = matches[:max(limit, 0)]
    return matches
