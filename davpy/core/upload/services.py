"""
Local file services for uploads: checking a source before any request is
issued, and streaming its bytes to the transport.
"""
import os
from pathlib import Path
from typing import AsyncIterator, Tuple, Union

import aiofiles

from ..logging import get_logger


class FileValidator:
    """Decides whether a local path can be sent as a PUT body."""

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Check an upload source.

        Returns:
            Tuple of (source path, size in bytes to send)

        Raises:
            FileNotFoundError: If nothing exists at the path
            ValueError: If the path is a directory or another non-regular file
            PermissionError: If the file cannot be read
        """
        path = Path(file_path)
        try:
            stat = path.stat()
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None

        if not path.is_file():
            raise ValueError(f"Only regular files can be uploaded: {path}")
        if not os.access(path, os.R_OK):
            raise PermissionError(f"File is not readable: {path}")

        return path, stat.st_size


class AsyncFileReader:
    """
    Asynchronous file reader for chunk-based streaming.

    Uses aiofiles for non-blocking I/O operations.
    """

    def __init__(self, chunk_size: int = 64 * 1024):
        """
        Initialize file reader.

        Args:
            chunk_size: Bytes per chunk yielded by iter_chunks
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size
        self._logger = get_logger('davpy.upload.file')

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def iter_chunks(self, file_path: Path) -> AsyncIterator[bytes]:
        """
        Yield the file's content chunk by chunk.

        Args:
            file_path: Path to the file

        Yields:
            Consecutive chunks of at most chunk_size bytes
        """
        async with aiofiles.open(file_path, 'rb') as f:
            while True:
                data = await f.read(self._chunk_size)
                if not data:
                    break
                self._logger.debug(f"Read chunk of {len(data)} bytes from {file_path.name}")
                yield data

