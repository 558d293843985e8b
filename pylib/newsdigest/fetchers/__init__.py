'''Story sources: HTTP retrieval and RSS/Atom parsing.'''

from newsdigest.fetchers.http import fetch_http
from newsdigest.fetchers.rss import FeedFetchError, Story, fetch_top_stories, parse_stories

__all__ = [
    'FeedFetchError',
    'Story',
    'fetch_http',
    'fetch_top_stories',
    'parse_stories',
]
