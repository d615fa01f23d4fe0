"""Pytest fixtures for davpy tests."""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import aiohttp
import pytest

from davpy.core.api import DavConfig
from davpy.core.listing import ListingParser


def multistatus(*records: Tuple[str, bool]) -> str:
    """Build a multistatus body from (href, is_collection) pairs."""
    responses = []
    for href, is_collection in records:
        resourcetype = '<D:resourcetype><D:collection/></D:resourcetype>' if is_collection \
            else '<D:resourcetype/>'
        responses.append(
            f'<D:response><D:href>{href}</D:href>'
            f'<D:propstat><D:prop>{resourcetype}</D:prop>'
            f'<D:status>HTTP/1.1 200 OK</D:status></D:propstat></D:response>'
        )
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<D:multistatus xmlns:D="DAV:">' + ''.join(responses) + '</D:multistatus>'
    )


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''


class FakeContent:
    """Response body; with cut_after set the stream breaks after that many chunks."""

    def __init__(self, payload: bytes, cut_after: Optional[int] = None):
        self._payload = payload
        self.cut_after = cut_after

    async def iter_chunked(self, size: int):
        for count, i in enumerate(range(0, len(self._payload), size)):
            if self.cut_after is not None and count >= self.cut_after:
                raise aiohttp.ClientPayloadError("Response payload is not completed")
            yield self._payload[i:i + size]


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse."""

    def __init__(self, status: int = 200, body: Any = ''):
        self.status = status
        self._payload = body.encode() if isinstance(body, str) else body
        self.content = FakeContent(self._payload)

    async def text(self) -> str:
        return self._payload.decode()


class FakeRequestContext:
    def __init__(self, session: 'FakeSession', request: RecordedRequest, data):
        self._session = session
        self._request = request
        self._data = data

    async def __aenter__(self) -> FakeResponse:
        # Drain streaming bodies the way the transport would
        if hasattr(self._data, '__aiter__'):
            async for chunk in self._data:
                self._request.body += chunk
        elif isinstance(self._data, str):
            self._request.body = self._data.encode()
        elif self._data is not None:
            self._request.body = bytes(self._data)
        return self._session.respond(self._request)

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Records requests and answers them from a routing table.

    Routes map (method, url) to a FakeResponse, an exception to raise, or
    a list consumed in order.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.closed = False

    def route(self, method: str, url: str, status: int = 200, body: Any = '') -> 'FakeSession':
        self.routes[(method, url)] = FakeResponse(status, body)
        return self

    def fail(self, method: str, url: str, error: Exception) -> 'FakeSession':
        self.routes[(method, url)] = error
        return self

    def respond(self, request: RecordedRequest) -> FakeResponse:
        answer = self.routes.get((request.method, request.url), FakeResponse(200, ''))
        if isinstance(answer, list):
            answer = answer.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                data=None, proxy=None) -> FakeRequestContext:
        recorded = RecordedRequest(method, url, dict(headers or {}))
        self.requests.append(recorded)
        return FakeRequestContext(self, recorded, data)

    def get(self, url: str, proxy=None) -> FakeRequestContext:
        return self.request('GET', url)

    async def close(self):
        self.closed = True

    def methods(self) -> List[str]:
        return [r.method for r in self.requests]


class FakeDavClient:
    """
    In-memory remote store implementing the protocol client's operations.

    Listings come from a dict of directory -> list of (name, is_dir).
    """

    def __init__(self, tree: Optional[Dict[str, List[Tuple[str, bool]]]] = None):
        self.tree = tree or {'/': []}
        self.calls: List[Tuple] = []
        self.errors: Dict[str, Exception] = {}
        self.stored: Dict[str, int] = {}

    def _raise_for(self, operation: str):
        error = self.errors.get(operation)
        if error is not None:
            raise error

    async def list(self, path: str):
        self.calls.append(('list', path))
        self._raise_for('list')
        records = [(path, True)] + [
            (path + name + ('/' if is_dir else ''), is_dir)
            for name, is_dir in self.tree.get(path, [])
        ]
        return ListingParser().parse_records(multistatus(*records))

    async def remove(self, path: str):
        self.calls.append(('remove', path))
        self._raise_for('remove')

    async def move_or_rename(self, source: str, destination: str, is_directory: bool = False):
        self.calls.append(('move', source, destination, is_directory))
        self._raise_for('move')

    async def create_directory(self, path: str):
        self.calls.append(('mkcol', path))
        self._raise_for('mkcol')

    async def store(self, path, source, on_progress=None):
        self.calls.append(('store', path))
        self._raise_for('store:' + path)
        with open(source, 'rb') as f:
            data = f.read()
        sent = 0
        for i in range(0, len(data), 8):
            sent += len(data[i:i + 8])
            if on_progress:
                on_progress(sent)
            # Yield like a real chunked body so concurrent stores interleave
            await asyncio.sleep(0)
        self.stored[path] = sent

    async def fetch_or_download(self, path, destination, on_progress=None):
        self.calls.append(('get', path))
        self._raise_for('get')
        return destination

    def methods(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakePrompter:
    """Prompter answering from preset values and recording the questions."""

    def __init__(self, answers: Optional[List[Optional[str]]] = None, confirmed: bool = True):
        self.answers = list(answers or [])
        self.confirmed = confirmed
        self.questions: List[str] = []

    async def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.confirmed

    async def prompt(self, message: str, default: str = '') -> Optional[str]:
        self.questions.append(message)
        return self.answers.pop(0) if self.answers else default


@pytest.fixture
def config():
    """Configuration pointing at a device-style server."""
    return DavConfig(base_url='http://192.168.4.1', root='/dav')


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def fake_dav():
    return FakeDavClient({
        '/': [('docs', True), ('readme.txt', False)],
        '/docs/': [('report.txt', False), ('drafts', True)],
    })


@pytest.fixture
def listing_xml():
    """A depth-1 listing of /docs/ under the /dav root."""
    return multistatus(
        ('/dav/docs/', True),
        ('/dav/docs/report.txt', False),
        ('/dav/docs/My%20Photos/', True),
    )


@pytest.fixture
def client_error():
    return aiohttp.ClientConnectionError("connection refused")


@pytest.fixture
def make_listing():
    """Factory building multistatus bodies from (href, is_collection) pairs."""
    return multistatus


@pytest.fixture
def make_prompter():
    """Factory for prompters with preset answers."""
    return FakePrompter


@pytest.fixture
def make_dav():
    """Factory for in-memory remote stores."""
    return FakeDavClient
