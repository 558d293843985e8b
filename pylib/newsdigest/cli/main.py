'''CLI for the news digest: one run per invocation, meant for cron or a CI schedule.'''

import sys

import fire
import structlog

from newsdigest.config import ConfigError, DigestConfig
from newsdigest.fetchers.rss import FeedFetchError
from newsdigest.notifier import NotifyError
from newsdigest.runner import run_digest


def _configure_plain_tracebacks() -> None:
    '''Console logging with standard Python tracebacks.'''
    from structlog.contextvars import merge_contextvars
    from structlog.dev import ConsoleRenderer, plain_traceback, set_exc_info
    from structlog.processors import StackInfoRenderer, TimeStamper, add_log_level

    structlog.configure(
        processors=[
            merge_contextvars,
            add_log_level,
            StackInfoRenderer(),
            set_exc_info,
            TimeStamper(fmt='%Y-%m-%d %H:%M:%S', utc=False),
            ConsoleRenderer(exception_formatter=plain_traceback),
        ],
    )


def run_once() -> None:
    '''
    Post today's date, then a summary of each top story, to the Slack webhook.
    Settings come from the environment (or .env): SLACK_WEBHOOK_URL, HUGGINGFACE_API_KEY,
    and optionally DIGEST_FEED_URL, DIGEST_SUMMARIZER_URL, DIGEST_STORY_LIMIT,
    DIGEST_TIMEOUT, DIGEST_MAX_WORKERS.
    '''
    log = structlog.get_logger()
    try:
        config = DigestConfig.from_env()
    except ConfigError as e:
        log.critical('invalid configuration', error=str(e))
        sys.exit(1)
    try:
        run_digest(config)
    except NotifyError as e:
        log.critical('error posting date to Slack', error=str(e), status_code=e.status_code)
        sys.exit(1)
    except FeedFetchError as e:
        log.critical('failed to fetch stories', error=str(e))
        sys.exit(1)


def main() -> None:
    '''newsdigest: summarize top news stories into a Slack channel.'''
    _configure_plain_tracebacks()
    fire.Fire(run_once)
