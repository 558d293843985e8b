'''RSS/Atom story source using feedparser.'''

import io
from dataclasses import dataclass

import feedparser
import httpx
import structlog

from newsdigest.fetchers.http import fetch_http


class FeedFetchError(Exception):
    '''Raised when the feed cannot be retrieved or parsed.'''


@dataclass(frozen=True)
class Story:
    '''One feed item. Only the title and link are carried.'''

    title: str
    link: str


def parse_stories(document: bytes, limit: int) -> list[Story]:
    '''
    Parse a raw feed document and return up to limit stories, in document order.
    The XML encoding declaration decides how the bytes are decoded.
    '''
    # A file object, so feedparser never mistakes the body for a URL or path
    feed = feedparser.parse(io.BytesIO(document))
    if feed.bozo and not feed.entries:
        raise FeedFetchError(f'Invalid RSS/Atom feed ({feed.get("bozo_exception")})')
    stories = []
    for entry in feed.entries[:limit]:
        stories.append(Story(
            title=(entry.get('title') or '').strip(),
            link=(entry.get('link') or '').strip(),
        ))
    return stories


def fetch_top_stories(
    url: str,
    limit: int = 5,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> list[Story]:
    '''
    Fetch the feed at url and return its first limit stories.
    Raises FeedFetchError on network, status or parse failure.
    '''
    try:
        document = fetch_http(url, timeout=timeout, transport=transport)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FeedFetchError(f'Failed to fetch feed: {url} ({e})') from e
    stories = parse_stories(document, limit)
    structlog.get_logger().info('fetched stories', url=url, count=len(stories), limit=limit)
    return stories
