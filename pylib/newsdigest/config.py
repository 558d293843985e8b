'''
Run configuration, resolved once from the environment (and an optional .env file).

Credentials are read here and nowhere else; the rest of the package receives them
as constructor arguments.
'''

from __future__ import annotations

import math
import os
from dataclasses import dataclass

import structlog
from dotenv import find_dotenv, load_dotenv

DEFAULT_FEED_URL = 'https://www.reddit.com/r/news/top/.rss?t=day'
DEFAULT_SUMMARIZER_URL = 'https://api-inference.huggingface.co/models/facebook/bart-large-cnn'
DEFAULT_STORY_LIMIT = 5
DEFAULT_TIMEOUT = 40.0


class ConfigError(Exception):
    '''Raised when required settings are missing or malformed.'''


def _positive(name: str, raw: str, cast):
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigError(f'{name} must be a number, got {raw!r}') from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f'{name} must be a positive finite number, got {raw!r}')
    return value


@dataclass(frozen=True)
class DigestConfig:
    '''Resolved settings for one digest run.'''

    webhook_url: str
    api_key: str
    feed_url: str = DEFAULT_FEED_URL
    summarizer_url: str = DEFAULT_SUMMARIZER_URL
    story_limit: int = DEFAULT_STORY_LIMIT
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int | None = None  # None: one worker per story

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, load_env_file: bool = True) -> DigestConfig:
        '''
        Build config from env vars. SLACK_WEBHOOK_URL and HUGGINGFACE_API_KEY are required.
        A .env file, when present, fills in variables not already set.
        '''
        if load_env_file:
            env_file = find_dotenv(usecwd=True)
            if env_file:
                load_dotenv(env_file)
            else:
                structlog.get_logger().info('no .env file found, using process environment')
        env = os.environ if environ is None else environ

        webhook_url = (env.get('SLACK_WEBHOOK_URL') or '').strip()
        api_key = (env.get('HUGGINGFACE_API_KEY') or '').strip()
        if not webhook_url or not api_key:
            raise ConfigError('Missing SLACK_WEBHOOK_URL or HUGGINGFACE_API_KEY in environment')

        max_workers_raw = (env.get('DIGEST_MAX_WORKERS') or '').strip()
        return cls(
            webhook_url=webhook_url,
            api_key=api_key,
            feed_url=(env.get('DIGEST_FEED_URL') or '').strip() or DEFAULT_FEED_URL,
            summarizer_url=(env.get('DIGEST_SUMMARIZER_URL') or '').strip() or DEFAULT_SUMMARIZER_URL,
            story_limit=_positive('DIGEST_STORY_LIMIT', env.get('DIGEST_STORY_LIMIT') or str(DEFAULT_STORY_LIMIT), int),
            timeout=_positive('DIGEST_TIMEOUT', env.get('DIGEST_TIMEOUT') or str(DEFAULT_TIMEOUT), float),
            max_workers=_positive('DIGEST_MAX_WORKERS', max_workers_raw, int) if max_workers_raw else None,
        )
