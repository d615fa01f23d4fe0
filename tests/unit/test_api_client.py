"""Tests for the async WebDAV protocol client."""
import asyncio

import pytest

from davpy.core.api import AsyncDavClient, DavConfig
from davpy.core.exceptions import (
    NetworkError,
    ProtocolError,
    TransportError,
    UnsupportedOperationError,
)

BASE = 'http://192.168.4.1/dav'


@pytest.fixture
def dav(config, session):
    return AsyncDavClient(config, session=session)


class TestAddressing:
    """Test suite for URL building."""

    def test_resource_path_is_encoded(self, dav):
        assert dav.resource_path('/My Photos/a b.txt') == '/dav/My%20Photos/a%20b.txt'

    def test_url_for(self, dav):
        assert dav.url_for('/docs/') == BASE + '/docs/'

    def test_relative_path_gets_separator(self, dav):
        assert dav.url_for('docs/a.txt') == BASE + '/docs/a.txt'

    def test_download_url(self, dav):
        assert dav.download_url('/a.txt') == BASE + '/a.txt'


class TestList:
    """Test suite for PROPFIND listings."""

    @pytest.mark.asyncio
    async def test_sends_depth_one_propfind(self, dav, session, listing_xml):
        session.route('PROPFIND', BASE + '/docs/', 207, listing_xml)

        await dav.list('/docs')

        request = session.requests[0]
        assert request.method == 'PROPFIND'
        assert request.url == BASE + '/docs/'
        assert request.headers['Depth'] == '1'
        assert b'resourcetype' in request.body

    @pytest.mark.asyncio
    async def test_returns_records(self, dav, session, listing_xml):
        session.route('PROPFIND', BASE + '/docs/', 207, listing_xml)

        response = await dav.list('/docs/')

        assert [e.name for e in response.entries()] == ['report.txt', 'My Photos']

    @pytest.mark.asyncio
    async def test_error_status_carries_body(self, dav, session):
        session.route('PROPFIND', BASE + '/missing/', 404, 'Not Found')

        with pytest.raises(TransportError) as info:
            await dav.list('/missing')

        assert info.value.status == 404
        assert info.value.body == 'Not Found'
        assert 'Not Found' in str(info.value)

    @pytest.mark.asyncio
    async def test_malformed_listing(self, dav, session):
        session.route('PROPFIND', BASE + '/', 207, '<html>not a listing')

        with pytest.raises(ProtocolError):
            await dav.list('/')

    @pytest.mark.asyncio
    async def test_network_failure(self, dav, session, client_error):
        session.fail('PROPFIND', BASE + '/', client_error)

        with pytest.raises(NetworkError):
            await dav.list('/')

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, dav, session):
        session.fail('PROPFIND', BASE + '/', asyncio.TimeoutError())

        with pytest.raises(NetworkError):
            await dav.list('/')


class TestMutations:
    """Test suite for DELETE, MOVE and MKCOL."""

    @pytest.mark.asyncio
    async def test_remove_file(self, dav, session):
        await dav.remove('/docs/report.txt')

        assert session.requests[0].method == 'DELETE'
        assert session.requests[0].url == BASE + '/docs/report.txt'

    @pytest.mark.asyncio
    async def test_remove_directory_keeps_separator(self, dav, session):
        await dav.remove('/docs/drafts/')

        assert session.requests[0].url == BASE + '/docs/drafts/'

    @pytest.mark.asyncio
    async def test_remove_failure(self, dav, session):
        session.route('DELETE', BASE + '/locked.txt', 423, 'Locked')

        with pytest.raises(TransportError) as info:
            await dav.remove('/locked.txt')

        assert info.value.status == 423
        assert info.value.method == 'DELETE'

    @pytest.mark.asyncio
    async def test_move_headers(self, dav, session):
        await dav.move_or_rename('/docs/a.txt', '/docs/b.txt')

        request = session.requests[0]
        assert request.method == 'MOVE'
        assert request.url == BASE + '/docs/a.txt'
        assert request.headers['Destination'] == '/dav/docs/b.txt'
        assert 'Overwrite' not in request.headers

    @pytest.mark.asyncio
    async def test_move_absolute_destination_without_overwrite(self, session):
        config = DavConfig(base_url='http://192.168.4.1', absolute_destination=True, overwrite=False)
        dav = AsyncDavClient(config, session=session)

        await dav.move_or_rename('/a.txt', '/sub/a.txt')

        assert session.requests[0].headers['Destination'] == BASE + '/sub/a.txt'
        assert session.requests[0].headers['Overwrite'] == 'F'

    @pytest.mark.asyncio
    async def test_move_explicit_overwrite(self, session):
        dav = AsyncDavClient(DavConfig(base_url='http://192.168.4.1', overwrite=True), session=session)

        await dav.move_or_rename('/a.txt', '/b.txt')

        assert session.requests[0].headers['Overwrite'] == 'T'

    @pytest.mark.asyncio
    async def test_move_directory_rejected_without_request(self, dav, session):
        with pytest.raises(UnsupportedOperationError):
            await dav.move_or_rename('/docs/', '/other/docs/')

        with pytest.raises(UnsupportedOperationError):
            await dav.move_or_rename('/docs', '/other/docs', is_directory=True)

        assert session.requests == []

    @pytest.mark.asyncio
    async def test_create_directory(self, dav, session):
        await dav.create_directory('/docs/new')

        assert session.requests[0].method == 'MKCOL'
        assert session.requests[0].url == BASE + '/docs/new/'


class TestTransfers:
    """Test suite for streaming PUT and GET."""

    @pytest.mark.asyncio
    async def test_store_streams_file(self, session, tmp_path):
        dav = AsyncDavClient(DavConfig(base_url='http://192.168.4.1', chunk_size=4), session=session)
        source = tmp_path / 'a.txt'
        source.write_bytes(b'0123456789')
        reported = []

        await dav.store('/docs/a.txt', source, reported.append)

        request = session.requests[0]
        assert request.method == 'PUT'
        assert request.body == b'0123456789'
        assert request.headers['Content-Length'] == '10'
        assert reported == [4, 8, 10]

    @pytest.mark.asyncio
    async def test_store_missing_file_sends_nothing(self, dav, session, tmp_path):
        with pytest.raises(FileNotFoundError):
            await dav.store('/x.txt', tmp_path / 'missing.txt')

        assert session.requests == []

    @pytest.mark.asyncio
    async def test_store_failure_status(self, dav, session, tmp_path):
        source = tmp_path / 'big.bin'
        source.write_bytes(b'x' * 16)
        session.route('PUT', BASE + '/big.bin', 507, 'Insufficient Storage')

        with pytest.raises(TransportError) as info:
            await dav.store('/big.bin', source)

        assert info.value.status == 507

    @pytest.mark.asyncio
    async def test_download_into_directory(self, dav, session, tmp_path):
        session.route('GET', BASE + '/docs/report.txt', 200, b'hello world')
        received = []

        saved = await dav.fetch_or_download('/docs/report.txt', tmp_path, received.append)

        assert saved == tmp_path / 'report.txt'
        assert saved.read_bytes() == b'hello world'
        assert received[-1] == 11

    @pytest.mark.asyncio
    async def test_download_failure(self, dav, session, tmp_path):
        session.route('GET', BASE + '/gone.txt', 404, 'Not Found')

        with pytest.raises(TransportError):
            await dav.fetch_or_download('/gone.txt', tmp_path / 'gone.txt')

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_download_cut_off_leaves_no_file(self, session, tmp_path):
        dav = AsyncDavClient(DavConfig(base_url='http://192.168.4.1', chunk_size=4), session=session)
        session.route('GET', BASE + '/big.bin', 200, b'0123456789')
        session.routes[('GET', BASE + '/big.bin')].content.cut_after = 1
        received = []

        with pytest.raises(NetworkError):
            await dav.fetch_or_download('/big.bin', tmp_path, received.append)

        assert received == [4]
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_download_cut_off_keeps_existing_file(self, session, tmp_path):
        dav = AsyncDavClient(DavConfig(base_url='http://192.168.4.1', chunk_size=4), session=session)
        target = tmp_path / 'big.bin'
        target.write_bytes(b'old copy')
        session.route('GET', BASE + '/big.bin', 200, b'0123456789')
        session.routes[('GET', BASE + '/big.bin')].content.cut_after = 2

        with pytest.raises(NetworkError):
            await dav.fetch_or_download('/big.bin', target)

        assert target.read_bytes() == b'old copy'
        assert [p.name for p in tmp_path.iterdir()] == ['big.bin']

    @pytest.mark.asyncio
    async def test_download_replaces_existing_file(self, dav, session, tmp_path):
        target = tmp_path / 'report.txt'
        target.write_bytes(b'old copy that is longer')
        session.route('GET', BASE + '/report.txt', 200, b'new')

        await dav.fetch_or_download('/report.txt', target)

        assert target.read_bytes() == b'new'

    @pytest.mark.asyncio
    async def test_store_network_failure(self, dav, session, tmp_path, client_error):
        source = tmp_path / 'a.txt'
        source.write_bytes(b'payload')
        session.fail('PUT', BASE + '/a.txt', client_error)

        with pytest.raises(NetworkError):
            await dav.store('/a.txt', source)


class TestSessionLifecycle:
    """Test suite for session ownership."""

    @pytest.mark.asyncio
    async def test_shared_session_is_not_closed(self, config, session):
        async with AsyncDavClient(config, session=session):
            pass

        assert session.closed is False
