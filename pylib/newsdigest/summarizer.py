'''
Summarizer protocol and the Hugging Face inference implementation.

The inference API answers a summarization request with a JSON array of objects,
each optionally holding a summary_text string.
'''

from abc import ABC, abstractmethod

import httpx

from newsdigest.config import DEFAULT_SUMMARIZER_URL, DEFAULT_TIMEOUT
from newsdigest.fetchers.http import request_with_deadline

SUMMARY_UNAVAILABLE = 'Summary unavailable'


class SummarizeError(Exception):
    '''Base class for summarization failures.'''


class SummarizeRequestError(SummarizeError):
    '''The request could not be built or sent, or timed out.'''


class SummarizeResponseError(SummarizeError):
    '''The API answered with an error status or an unexpected body.'''

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class Summarizer(ABC):
    '''Protocol for text summarizers.'''

    @abstractmethod
    def summarize(self, text: str) -> str:
        '''
        Summarize text.

        Args:
            text: non-empty input text

        Returns:
            Summary string, or SUMMARY_UNAVAILABLE if the service produced none
        '''


def extract_summary(payload) -> str:
    '''
    Pick the first summary_text out of a decoded response body.
    An empty array or a missing/empty field yields SUMMARY_UNAVAILABLE.
    '''
    if not isinstance(payload, list):
        raise SummarizeResponseError(f'Expected a JSON array, got {type(payload).__name__}: {payload!r:.200}')
    if not payload:
        return SUMMARY_UNAVAILABLE
    first = payload[0]
    if not isinstance(first, dict):
        raise SummarizeResponseError(f'Expected result objects, got {type(first).__name__}')
    summary = first.get('summary_text')
    if summary is None:
        return SUMMARY_UNAVAILABLE
    if not isinstance(summary, str):
        raise SummarizeResponseError(f'summary_text is not a string: {summary!r:.200}')
    return summary or SUMMARY_UNAVAILABLE


class HuggingFaceSummarizer(Summarizer):
    '''
    Summarizer backed by the Hugging Face inference API (bearer-token auth).

    Each call opens its own client, so one instance can be shared across threads.
    '''

    def __init__(
        self,
        api_key: str,
        url: str = DEFAULT_SUMMARIZER_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def summarize(self, text: str) -> str:
        if not text:
            raise ValueError('text to summarize must be non-empty')
        try:
            resp = request_with_deadline(
                'POST',
                self.url,
                self.timeout,
                transport=self._transport,
                headers={'Authorization': f'Bearer {self.api_key}', 'Content-Type': 'application/json'},
                json={'inputs': text},
            )
        # ValueError: a header value (e.g. the API key) that cannot be encoded
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise SummarizeRequestError(f'Summarization request failed: {e}') from e

        if resp.is_error:
            raise SummarizeResponseError(
                f'Summarization API responded with status {resp.status_code}: {resp.text[:200]}',
                status_code=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise SummarizeResponseError(f'Summarization response is not JSON: {e}', resp.status_code) from e
        return extract_summary(payload)
