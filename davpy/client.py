"""
DavClient - High-level async file manager for a WebDAV store.

Example:
    >>> async with DavClient("http://192.168.4.1") as dav:
    ...     view = await dav.ls("/docs")
    ...     for row in view.rows:
    ...         print(row.name)
"""
import dataclasses
from pathlib import Path
from typing import Callable, List, Optional, Union

import aiohttp

from .core.api import AsyncDavClient, DavConfig
from .core.events import EventEmitter
from .core.logging import get_logger
from .core.menu import MenuLink, fetch_menu
from .core.upload import UploadBatch
from .core.view import (
    DirectoryView,
    DirectoryViewController,
    OperationResult,
    Prompter,
    initial_directory,
)


class DavClient:
    """
    High-level async client combining the protocol client and the
    directory view.

    Failures of view operations never raise; they come back as
    OperationResult errors and as 'error' events. Use raise_on_error() to
    turn a result into an exception.

    With custom configuration:
        >>> config = DavConfig.insecure(base_url="https://nas.local", root="/webdav")
        >>> async with DavClient(config=config, launch="?dir=/photos") as dav:
        ...     await dav.start()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[DavConfig] = None,
        prompter: Optional[Prompter] = None,
        launch: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Server URL (overrides config.base_url)
            config: Optional client configuration
            prompter: User interaction for mutations
            launch: Launch URL or query string carrying the initial 'dir'
            session: Optional shared aiohttp session
        """
        self._config = config or DavConfig.default()
        if base_url:
            # A copy; the caller's config stays untouched
            self._config = dataclasses.replace(self._config, base_url=base_url)
        self._logger = get_logger('davpy.client')
        self._events = EventEmitter()
        self._api = AsyncDavClient(self._config, session=session)
        self._controller = DirectoryViewController(
            self._api,
            prompter=prompter,
            directory=initial_directory(launch),
            editor_url=self._config.editor_url,
            events=self._events
        )

    @property
    def config(self) -> DavConfig:
        return self._config

    @property
    def api(self) -> AsyncDavClient:
        """Low-level protocol client."""
        return self._api

    @property
    def controller(self) -> DirectoryViewController:
        return self._controller

    @property
    def events(self) -> EventEmitter:
        return self._events

    @property
    def current_directory(self) -> str:
        return self._controller.current_directory

    @property
    def view(self) -> Optional[DirectoryView]:
        return self._controller.view

    def on(self, event: str, callback: Callable) -> 'DavClient':
        """Register an event handler ('render', 'error', 'upload_progress', ...)."""
        self._events.on(event, callback)
        return self

    async def __aenter__(self) -> 'DavClient':
        await self._api.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying HTTP session."""
        await self._api.close()

    async def start(self) -> OperationResult:
        """Render the initial directory."""
        self._logger.info(f"Opening {self._config.base_url}{self._config.root}{self.current_directory}")
        return await self._controller.refresh()

    async def ls(self, path: Optional[str] = None) -> DirectoryView:
        """
        Navigate to path (or refresh the current directory) and return the view.

        Raises:
            DavException: If the listing fails
        """
        if path is None:
            result = await self._controller.refresh()
        else:
            result = await self._controller.navigate(path)
        raise_on_error(result)
        return result.view

    async def upload(self, *files: Union[str, Path]) -> UploadBatch:
        """Upload files into the current directory."""
        return await self._controller.upload(files)

    async def download(self, name: str, destination: Union[str, Path] = '.') -> Path:
        """Download a file of the current directory."""
        result = await self._controller.download(name, destination)
        raise_on_error(result)
        return result.value

    async def menu(self) -> List[MenuLink]:
        """Fetch the server's navigation menu."""
        session = await self._api.get_session()
        return await fetch_menu(session, self._config)


def raise_on_error(result: OperationResult) -> OperationResult:
    """Raise the result's error, if any; otherwise return the result."""
    if result.error is not None:
        raise result.error
    return result

