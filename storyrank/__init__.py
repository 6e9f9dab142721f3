"""storyrank - rank Hacker News stories by lexical relevance to a user bio"""

__version__ = "0.1.0"
