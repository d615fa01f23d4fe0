"""
Async WebDAV protocol client.

Issues one request per remote action against the fixed mount root and
maps HTTP outcomes to success or a DavException.
"""
import asyncio
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union
from urllib.parse import quote

import aiofiles
import aiohttp

from .config import DavConfig
from ..exceptions import NetworkError, TransportError, UnsupportedOperationError
from ..listing import ListingParser, ListingResponse
from ..logging import get_logger
from ..path import SEPARATOR, basename, normalize
from ..upload.services import AsyncFileReader, FileValidator

ProgressCallback = Callable[[int], None]  # bytes_transferred

PARTIAL_SUFFIX = '.part'

PROPFIND_BODY = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<D:propfind xmlns:D="DAV:"><D:prop><D:resourcetype/></D:prop></D:propfind>'
)


def is_success(status: int) -> bool:
    """True for 2xx status codes."""
    return 200 <= status < 300


class AsyncDavClient:
    """
    Asynchronous WebDAV client.

    Features:
    - Depth-1 listings parsed into entries
    - Streaming upload and download with byte-level progress
    - Delete, move/rename and collection creation
    - No automatic retries: a failed operation surfaces once

    Example:
        >>> config = DavConfig(base_url='http://192.168.4.1')
        >>> async with AsyncDavClient(config) as dav:
        ...     listing = await dav.list('/')
    """

    def __init__(
        self,
        config: Optional[DavConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        parser: Optional[ListingParser] = None,
        file_reader: Optional[AsyncFileReader] = None
    ):
        """
        Initialize async WebDAV client.

        Args:
            config: Client configuration (uses defaults if not provided)
            session: Optional shared session; it is not closed by the client
            parser: Listing parser
            file_reader: Reader used to stream uploads
        """
        self._config = config or DavConfig.default()
        self._session = session
        self._owns_session = session is None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._parser = parser or ListingParser()
        self._file_reader = file_reader or AsyncFileReader(self._config.chunk_size)
        self._validator = FileValidator()
        self._logger = get_logger('davpy.api')

    @property
    def config(self) -> DavConfig:
        """Get current configuration."""
        return self._config

    async def __aenter__(self) -> 'AsyncDavClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def get_session(self) -> aiohttp.ClientSession:
        """Open (if needed) and return the HTTP session."""
        return await self._ensure_session()

    async def close(self):
        """Close client and release resources it owns."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None
            self._connector = None

    # Addressing

    def resource_path(self, path: str) -> str:
        """Server path of a resource: mount root plus encoded path."""
        if not path.startswith(SEPARATOR):
            path = SEPARATOR + path
        return self._config.root + quote(path, safe='/')

    def url_for(self, path: str) -> str:
        """Absolute URL of a resource."""
        return self._config.base_url + self.resource_path(path)

    def download_url(self, path: str) -> str:
        """Link a browser would save for the resource."""
        return self.url_for(path)

    # Requests

    async def _request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        data=None
    ) -> Tuple[int, str]:
        """
        Issue a request and read the whole body.

        Returns:
            Tuple of (status, body text)

        Raises:
            TransportError: On non-2xx status
            NetworkError: If no response was obtained
        """
        session = await self._ensure_session()
        url = self.url_for(path)
        start = time.time()
        self._logger.debug(f"{method} {url}")

        try:
            async with session.request(
                method,
                url,
                headers=headers,
                data=data,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                body = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"{method} {url} got no response: {e}")
            raise NetworkError(f"Network error during {method} {path}: {e}") from e

        elapsed = time.time() - start
        self._logger.debug(f"{method} {url} -> {status} in {elapsed:.2f}s")

        if not is_success(status):
            self._logger.warning(f"{method} {url} failed with HTTP {status}")
            raise TransportError(status, body, method)

        return status, body

    async def list(self, path: str) -> ListingResponse:
        """
        List the immediate children of a directory.

        Args:
            path: Directory path relative to the mount root

        Returns:
            Raw listing; its first record is the directory itself

        Raises:
            TransportError: On non-success status (body as detail)
            ProtocolError: If the response is not a valid listing
        """
        directory = normalize(path)
        _, body = await self._request(
            'PROPFIND',
            directory,
            headers={'Depth': '1', 'Content-Type': 'application/xml; charset="utf-8"'},
            data=PROPFIND_BODY
        )
        return self._parser.parse_records(body)

    async def fetch_or_download(
        self,
        path: str,
        destination: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None
    ) -> Path:
        """
        Save a remote file locally.

        Args:
            path: File path relative to the mount root
            destination: Target file, or directory to save into
            on_progress: Called with the bytes received so far

        Returns:
            Path of the written file

        Raises:
            TransportError: On non-2xx status
            NetworkError: If the connection fails or the body is cut off;
                nothing is left at the target path
        """
        target = Path(destination)
        if target.is_dir():
            target = target / basename(path)

        # Renamed onto target only once the body is complete
        partial = target.with_name(target.name + PARTIAL_SUFFIX)

        session = await self._ensure_session()
        url = self.url_for(path)
        self._logger.info(f"Downloading {path} to {target}")

        received = 0
        try:
            async with session.get(
                url,
                proxy=self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
            ) as response:
                if not is_success(response.status):
                    body = await response.text()
                    raise TransportError(response.status, body, 'GET')

                async with aiofiles.open(partial, 'wb') as f:
                    async for chunk in response.content.iter_chunked(self._config.chunk_size):
                        await f.write(chunk)
                        received += len(chunk)
                        if on_progress:
                            on_progress(received)
            partial.replace(target)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"GET {url} failed after {received} bytes: {e}")
            raise NetworkError(f"Network error during GET {path}: {e}") from e
        finally:
            if partial.exists():
                partial.unlink()

        self._logger.info(f"Downloaded {path} ({received} bytes)")
        return target

    async def store(
        self,
        path: str,
        source: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None
    ) -> None:
        """
        Stream a local file to a remote path.

        Args:
            path: Target file path relative to the mount root
            source: Local file to send
            on_progress: Called with the bytes sent so far after each chunk

        Raises:
            FileNotFoundError: If the local file doesn't exist
            TransportError: On non-2xx status (carries the status)
            NetworkError: If no response was obtained
        """
        file_path, file_size = self._validator.validate(source)
        size_kb = file_size / 1024
        self._logger.info(f"Uploading {file_path.name} to {path} ({size_kb:.1f} KB)")

        async def body():
            sent = 0
            async for chunk in self._file_reader.iter_chunks(file_path):
                yield chunk
                sent += len(chunk)
                if on_progress:
                    on_progress(sent)

        start = time.time()
        await self._request(
            'PUT',
            path,
            headers={
                'Content-Length': str(file_size),
                'Content-Type': 'application/octet-stream'
            },
            data=body()
        )
        elapsed = time.time() - start
        self._logger.info(f"Uploaded {file_path.name} in {elapsed:.2f}s")

    async def remove(self, path: str) -> None:
        """Delete a single resource."""
        await self._request('DELETE', path)
        self._logger.info(f"Deleted {path}")

    async def move_or_rename(
        self,
        source: str,
        destination: str,
        is_directory: bool = False
    ) -> None:
        """
        Relocate a file.

        Used both for rename (same directory, new name) and move (other
        directory, same name).

        Raises:
            UnsupportedOperationError: If the source is a directory; no
                request is issued
        """
        if is_directory or source.endswith(SEPARATOR):
            raise UnsupportedOperationError("Moving directories is not supported")

        if self._config.absolute_destination:
            target = self.url_for(destination)
        else:
            target = self.resource_path(destination)

        headers = {'Destination': target}
        if self._config.overwrite is not None:
            headers['Overwrite'] = 'T' if self._config.overwrite else 'F'

        await self._request('MOVE', source, headers=headers)
        self._logger.info(f"Moved {source} to {destination}")

    async def create_directory(self, path: str) -> None:
        """Create an empty collection; the path gets a trailing separator."""
        directory = normalize(path)
        await self._request('MKCOL', directory)
        self._logger.info(f"Created directory {directory}")
