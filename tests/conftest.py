import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from newsdigest.fetchers.rss import Story
from newsdigest.notifier import Notifier, NotifyError
from newsdigest.summarizer import Summarizer, SummarizeRequestError


def rss_document(count: int) -> bytes:
    items = '\n'.join(
        f'<item><title>Story {i}</title><link>https://example.com/{i}</link></item>'
        for i in range(1, count + 1)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>news</title><link>https://example.com</link>'
        f'<description>top stories</description>{items}</channel></rss>'
    ).encode('utf-8')


class RecordingSummarizer(Summarizer):
    '''Returns a canned summary per input; inputs listed in fail_on raise.'''

    def __init__(self, summary='a summary', fail_on=()):
        self.summary = summary
        self.fail_on = set(fail_on)
        self.calls = []
        self._lock = threading.Lock()

    def summarize(self, text):
        with self._lock:
            self.calls.append(text)
        if any(text.startswith(f'{title} - ') for title in self.fail_on):
            raise SummarizeRequestError('timed out')
        return self.summary


class RecordingNotifier(Notifier):
    '''Collects delivered messages; messages containing a fail_on marker are rejected.'''

    def __init__(self, fail_on=()):
        self.fail_on = tuple(fail_on)
        self.attempts = []
        self.delivered = []
        self._lock = threading.Lock()

    def notify(self, text):
        with self._lock:
            self.attempts.append(text)
        if any(marker in text for marker in self.fail_on):
            raise NotifyError('Slack responded with status: 500', status_code=500)
        with self._lock:
            self.delivered.append(text)


@pytest.fixture
def stories():
    return [Story(title=f'Story {i}', link=f'https://example.com/{i}') for i in range(1, 4)]


class SlowBodyHandler(BaseHTTPRequestHandler):
    '''Answers any POST with 200 and a JSON body sent one byte at a time.'''

    body = b'[{"summary_text": "slow"}]'
    delay = 0.2

    def do_POST(self):
        self.rfile.read(int(self.headers.get('Content-Length', 0)))
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(self.body)))
        self.end_headers()
        for byte in self.body:
            try:
                self.wfile.write(bytes([byte]))
                self.wfile.flush()
            except (BrokenPipeError, ConnectionResetError):
                return
            time.sleep(self.delay)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_server(monkeypatch):
    '''URL of a local server that takes about 5 seconds to finish each response.'''
    monkeypatch.setenv('NO_PROXY', '127.0.0.1')
    monkeypatch.setenv('no_proxy', '127.0.0.1')
    server = ThreadingHTTPServer(('127.0.0.1', 0), SlowBodyHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_address[1]}/'
    server.shutdown()
    server.server_close()
