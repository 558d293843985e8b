'''
Main runner: post the date header, fetch top stories, process each story concurrently.
This is what one scheduled invocation executes.
'''

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime

import structlog

from newsdigest.config import DigestConfig
from newsdigest.executor import process_story
from newsdigest.fetchers.rss import Story, fetch_top_stories
from newsdigest.notifier import Notifier, SlackNotifier
from newsdigest.summarizer import HuggingFaceSummarizer, Summarizer


def date_header(now: datetime) -> str:
    '''First message of a run, e.g. "🗓️ October 19, 2026".'''
    return f'🗓️ {now:%B} {now.day}, {now.year}'


def fan_out(
    stories: Sequence[Story],
    summarizer: Summarizer,
    notifier: Notifier,
    max_workers: int | None = None,
) -> int:
    '''
    Process every story on its own worker thread and wait for all of them.
    Per-story failures never propagate. Returns the number of tasks joined.
    '''
    if not stories:
        return 0
    log = structlog.get_logger()
    workers = min(max_workers or len(stories), len(stories))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='story') as pool:
        futures = {pool.submit(process_story, story, summarizer, notifier): story for story in stories}
        done, _ = wait(futures)
    for future in done:
        exc = future.exception()
        if exc is not None:
            log.error('story task crashed', title=futures[future].title, error=repr(exc))
    return len(done)


def run_digest(
    config: DigestConfig,
    summarizer: Summarizer | None = None,
    notifier: Notifier | None = None,
    fetch_stories: Callable[[str, int], list[Story]] | None = None,
    now: datetime | None = None,
) -> int:
    '''
    One digest run. Raises NotifyError if the date header cannot be posted and
    FeedFetchError if the feed cannot be fetched; both happen before any story work.
    Returns the number of stories processed.
    '''
    log = structlog.get_logger()
    summarizer = summarizer or HuggingFaceSummarizer(
        config.api_key, url=config.summarizer_url, timeout=config.timeout,
    )
    notifier = notifier or SlackNotifier(config.webhook_url, timeout=config.timeout)
    fetch_stories = fetch_stories or (lambda url, limit: fetch_top_stories(url, limit, timeout=config.timeout))

    notifier.notify(date_header(now or datetime.now()))
    stories = fetch_stories(config.feed_url, config.story_limit)
    count = fan_out(stories, summarizer, notifier, max_workers=config.max_workers)
    log.info('digest complete', stories=count)
    return count
