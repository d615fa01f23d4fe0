"""
Protocol definitions for upload module.

Defines the interfaces the pipeline depends on, so the protocol client
and the view refresh can be swapped or mocked.
"""
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol, Union


class StoreClientProtocol(Protocol):
    """Protocol for the remote store used by uploads."""

    async def store(
        self,
        path: str,
        source: Union[str, Path],
        on_progress: Optional[Callable[[int], None]] = None
    ) -> None:
        """
        Stream a local file to a remote path.

        Args:
            path: Target path relative to the mount root
            source: Local file
            on_progress: Called with the bytes sent so far
        """
        ...


RefreshHook = Callable[[], Awaitable[object]]
CompletionHook = Callable[[], None]
