"""Tests for the high-level DavClient."""
import pytest

from davpy import DavClient, DavConfig, TransportError, raise_on_error
from davpy.core.view import OperationResult

BASE = 'http://192.168.4.1/dav'


class TestDavClient:
    """Test suite for DavClient."""

    def test_launch_selects_initial_directory(self, config, session):
        dav = DavClient(config=config, launch='?dir=/photos', session=session)

        assert dav.current_directory == '/photos/'

    def test_base_url_override(self, session):
        dav = DavClient('http://nas.local/', config=DavConfig(), session=session)

        assert dav.config.base_url == 'http://nas.local'

    def test_base_url_override_leaves_config_alone(self, config, session):
        dav = DavClient('http://nas.local', config=config, session=session)

        assert dav.config.base_url == 'http://nas.local'
        assert dav.config.root == '/dav'
        assert config.base_url == 'http://192.168.4.1'
        assert dav.api.config is dav.config

    @pytest.mark.asyncio
    async def test_ls(self, config, session, listing_xml):
        session.route('PROPFIND', BASE + '/docs/', 207, listing_xml)

        async with DavClient(config=config, session=session) as dav:
            view = await dav.ls('/docs')

        assert view.names() == ['My Photos', 'report.txt']
        assert session.closed is False

    @pytest.mark.asyncio
    async def test_ls_raises(self, config, session):
        session.route('PROPFIND', BASE + '/', 500, 'boom')
        dav = DavClient(config=config, session=session)
        errors = []
        dav.on('error', errors.append)

        with pytest.raises(TransportError):
            await dav.ls()

        assert len(errors) == 1

    @pytest.mark.asyncio
    async def test_menu(self, config, session):
        session.route('GET', 'http://192.168.4.1/menu.json', 200, '[{"title": "Home", "url": "/"}]')
        dav = DavClient(config=config, session=session)

        links = await dav.menu()

        assert links[0].title == 'Home'


class TestRaiseOnError:
    """Test suite for raise_on_error."""

    def test_ok(self):
        result = OperationResult()

        assert raise_on_error(result) is result

    def test_error(self):
        with pytest.raises(TransportError):
            raise_on_error(OperationResult.failure(TransportError(404)))
