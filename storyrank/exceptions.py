"""
Exceptions raised by the ranking service.

Tokenizer and scorer never raise; these only come from the request
boundary (bad input) and the upstream story source.
"""


class InvalidQueryError(ValueError):
    """
    Raised when the query text (user bio) is empty or missing.

    Rejected before any fetching or tokenization happens.
    Maps to HTTP 400.
    """
    pass


class StoryFetchError(Exception):
    """
    Raised when the upstream story source cannot supply a batch.

    CollectionCache swallows it when an expired batch is available
    (serve-stale); otherwise it reaches the caller and maps to HTTP 502.

    Common causes:
    - Network failures (timeout, connection reset)
    - Non-200 response for the top stories list
    - Malformed JSON payload
    """
    pass
