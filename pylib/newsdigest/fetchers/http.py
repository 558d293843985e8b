'''HTTP requests using httpx, bounded by a deadline over the whole exchange.'''

import time

import httpx

USER_AGENT = 'newsdigest/0.1 (+https://github.com/newsdigest)'

# Describe the wire body; the returned response carries the decoded body instead
_WIRE_HEADERS = {'content-encoding', 'content-length', 'transfer-encoding'}


def request_with_deadline(
    method: str,
    url: str,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
    follow_redirects: bool = False,
    **kwargs,
) -> httpx.Response:
    '''
    Send a request and read its full response within timeout seconds in total.

    httpx timeouts apply per connect/read/write phase, so a server trickling its body
    could otherwise hold the call open indefinitely. Raises httpx.ReadTimeout once the
    deadline passes. The returned response is already read.
    '''
    deadline = time.monotonic() + timeout
    with httpx.Client(timeout=timeout, follow_redirects=follow_redirects, transport=transport) as client:
        request = client.build_request(method, url, **kwargs)
        resp = client.send(request, stream=True)
        try:
            chunks = []
            for chunk in resp.iter_bytes():
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(f'No complete response within {timeout}s', request=request)
                chunks.append(chunk)
            if time.monotonic() > deadline:
                raise httpx.ReadTimeout(f'No complete response within {timeout}s', request=request)
        finally:
            resp.close()
    headers = [(k, v) for k, v in resp.headers.multi_items() if k.lower() not in _WIRE_HEADERS]
    return httpx.Response(resp.status_code, headers=headers, content=b''.join(chunks), request=resp.request)


def fetch_http(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> bytes:
    '''
    Fetch URL and return the raw body. Raises httpx.HTTPError on transport, timeout or status failure.
    '''
    merged = {'User-Agent': USER_AGENT}
    merged.update(headers or {})
    resp = request_with_deadline('GET', url, timeout, transport=transport, follow_redirects=True, headers=merged)
    resp.raise_for_status()
    return resp.content
