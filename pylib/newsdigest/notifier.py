'''Chat notifier protocol and the Slack incoming-webhook implementation.'''

from abc import ABC, abstractmethod

import httpx

from newsdigest.config import DEFAULT_TIMEOUT
from newsdigest.fetchers.http import request_with_deadline


class NotifyError(Exception):
    '''Raised when a message could not be delivered. status_code is None for transport failures.'''

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class Notifier(ABC):
    '''Protocol for chat notifiers.'''

    @abstractmethod
    def notify(self, text: str) -> None:
        '''Deliver text to the channel. Raises NotifyError on failure.'''


class SlackNotifier(Notifier):
    '''Posts {"text": ...} to a Slack incoming webhook. Only HTTP 200 counts as delivered.'''

    def __init__(
        self,
        webhook_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    def notify(self, text: str) -> None:
        try:
            resp = request_with_deadline(
                'POST', self.webhook_url, self.timeout, transport=self._transport, json={'text': text},
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise NotifyError(f'Slack webhook request failed: {e}') from e
        if resp.status_code != 200:
            raise NotifyError(
                f'Slack responded with status: {resp.status_code} {resp.reason_phrase}',
                status_code=resp.status_code,
            )
