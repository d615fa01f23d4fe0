"""
Protocol definitions for the directory view.

The controller depends on these interfaces only; the protocol client and
the user-facing prompts are injected.
"""
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from ..listing import ListingResponse


class DavClientProtocol(Protocol):
    """Remote operations the directory view issues."""

    async def list(self, path: str) -> ListingResponse:
        ...

    async def remove(self, path: str) -> None:
        ...

    async def move_or_rename(
        self,
        source: str,
        destination: str,
        is_directory: bool = False
    ) -> None:
        ...

    async def create_directory(self, path: str) -> None:
        ...

    async def store(
        self,
        path: str,
        source: Union[str, Path],
        on_progress: Optional[Callable[[int], None]] = None
    ) -> None:
        ...

    async def fetch_or_download(
        self,
        path: str,
        destination: Union[str, Path],
        on_progress: Optional[Callable[[int], None]] = None
    ) -> Path:
        ...


class Prompter(Protocol):
    """
    User interaction needed by mutations.

    Implemented by the presentation layer (terminal, GUI, or a test double).
    """

    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question."""
        ...

    async def prompt(self, message: str, default: str = '') -> Optional[str]:
        """Ask for a value; None or '' means cancelled."""
        ...
