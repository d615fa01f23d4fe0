"""
Directory view controller.

Owns the current directory and turns listings into rendered views.
Every navigation or successful mutation ends in a full refresh.
"""
import locale
import unicodedata
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import parse_qs, quote, urlsplit

from .models import (
    Action,
    DIRECTORY_ACTIONS,
    FILE_ACTIONS,
    DirectoryView,
    OperationResult,
    Row,
)
from .protocols import DavClientProtocol, Prompter
from ..events import ERROR, RENDER, EventEmitter
from ..exceptions import DavException, UnsupportedOperationError
from ..listing import Entry
from ..logging import get_logger
from ..path import ROOT, SEPARATOR, breadcrumb_segments, child_path, extension, normalize
from ..upload import ProgressIndicator, UploadBatch, UploadPipeline

logger = get_logger('davpy.view')

EDITABLE_EXTENSIONS: Tuple[str, ...] = ('.txt', '.js', '.json', '.css', '.html')
LAUNCH_PARAMETER = 'dir'

Handler = Callable[..., Awaitable[OperationResult]]


def is_editable(name: str) -> bool:
    """True if the companion editor accepts the file (case-insensitive suffix)."""
    return name.lower().endswith(EDITABLE_EXTENSIONS)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def sort_key(entry: Entry) -> Tuple[str, str]:
    """
    Case-insensitive, locale-aware collation key.

    Both parts are collated with the active LC_COLLATE locale (see
    use_system_collation). The primary part ignores accents, so 'Éclair'
    sorts among the e's even under the C locale; the secondary part
    orders names that differ only by accents.
    """
    folded = entry.name.casefold()
    return locale.strxfrm(_strip_accents(folded)), locale.strxfrm(folded)


def use_system_collation() -> bool:
    """
    Collate with the user's locale (LC_ALL, LC_COLLATE or LANG).

    Returns False and keeps the current collation if that locale is not
    available.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, '')
    except locale.Error as e:
        logger.warning(f"Keeping default collation: {e}")
        return False
    return True


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Sort by name; sorted() is stable so equal keys keep their order."""
    return sorted(entries, key=sort_key)


def partition(entries: Iterable[Entry]) -> Tuple[List[Entry], List[Entry]]:
    """Split entries into (directories, files)."""
    directories: List[Entry] = []
    files: List[Entry] = []
    for entry in entries:
        (directories if entry.is_dir else files).append(entry)
    return directories, files


def initial_directory(launch: Optional[str] = None) -> str:
    """
    Directory to show first.

    Args:
        launch: Application URL or query string that may carry a
            'dir' parameter

    Returns:
        The normalized 'dir' value, else the root
    """
    if not launch:
        return ROOT
    query = urlsplit(launch).query if '?' in launch else launch
    values = parse_qs(query).get(LAUNCH_PARAMETER)
    if values and values[0]:
        return normalize(values[0])
    return ROOT


class DirectoryViewController:
    """
    Navigation state machine over the current directory.

    Events emitted:
    - 'render' (DirectoryView) after every successful refresh
    - 'error' (DavException) whenever an operation fails or is rejected

    Overlapping refreshes are tagged with a generation number; a response
    older than the latest issued request is discarded.

    Example:
        >>> controller = DirectoryViewController(dav, prompter)
        >>> await controller.navigate('/docs')
        >>> controller.view.names()
        ['drafts', 'report.txt']
    """

    def __init__(
        self,
        client: DavClientProtocol,
        prompter: Optional[Prompter] = None,
        directory: str = ROOT,
        editor_url: str = '/editor.html',
        events: Optional[EventEmitter] = None,
        indicator: Optional[ProgressIndicator] = None
    ):
        """
        Initialize the controller.

        Args:
            client: Remote store
            prompter: User interaction for mutations
            directory: Initial directory (see initial_directory)
            editor_url: Companion editor page for edit hand-offs
            events: Emitter receiving render and error events
            indicator: Progress display shared by upload batches
        """
        self._client = client
        self._prompter = prompter
        self._current_directory = normalize(directory)
        self._editor_url = editor_url
        self._events = events or EventEmitter()
        self._indicator = indicator or ProgressIndicator()
        self._view: Optional[DirectoryView] = None
        self._handlers: Dict[Tuple[str, Action], Handler] = {}
        self._generation = 0

    @property
    def current_directory(self) -> str:
        return self._current_directory

    @property
    def view(self) -> Optional[DirectoryView]:
        """Last rendered view."""
        return self._view

    @property
    def events(self) -> EventEmitter:
        return self._events

    @property
    def indicator(self) -> ProgressIndicator:
        return self._indicator

    # Navigation

    async def navigate(self, path: str) -> OperationResult:
        """Make path the current directory and refresh."""
        self._current_directory = normalize(path)
        logger.debug(f"Navigate to {self._current_directory}")
        return await self.refresh()

    async def refresh(self) -> OperationResult:
        """
        List, parse, partition, sort and render the current directory.

        Returns:
            Result carrying the new view, the error, or stale=True if a
            newer refresh was issued meanwhile
        """
        self._generation += 1
        generation = self._generation
        directory = self._current_directory

        try:
            listing = await self._client.list(directory)
        except DavException as e:
            if generation != self._generation:
                return OperationResult(stale=True)
            return self._failed(e, f"Listing {directory} failed")

        if generation != self._generation:
            logger.debug(f"Discarding stale listing of {directory} (generation {generation})")
            return OperationResult(stale=True)

        view = self.render(directory, listing.entries())
        self._view = view
        self._handlers = self._build_handlers(view)
        self._events.emit(RENDER, view)
        return OperationResult(view=view)

    def render(self, directory: str, entries: Iterable[Entry]) -> DirectoryView:
        """Build the view of directory: directories first, each partition sorted."""
        directories, files = partition(entries)
        rows = [
            Row(entry, child_path(directory, entry.name, True), DIRECTORY_ACTIONS)
            for entry in sort_entries(directories)
        ]
        for entry in sort_entries(files):
            actions = FILE_ACTIONS + ((Action.EDIT,) if is_editable(entry.name) else ())
            rows.append(Row(entry, child_path(directory, entry.name, False), actions))

        return DirectoryView(
            directory=directory,
            breadcrumbs=tuple(breadcrumb_segments(directory)),
            rows=tuple(rows)
        )

    # Dispatch

    def _build_handlers(self, view: DirectoryView) -> Dict[Tuple[str, Action], Handler]:
        handlers: Dict[Tuple[str, Action], Handler] = {}
        for row in view.rows:
            for action in row.actions:
                handlers[(row.name, action)] = self._handler_for(row, action)
        return handlers

    def _handler_for(self, row: Row, action: Action) -> Handler:
        name = row.name
        if action is Action.NAVIGATE:
            return lambda: self.navigate(row.path)
        if action is Action.DOWNLOAD:
            return lambda destination='.': self.download(name, destination)
        if action is Action.DELETE:
            return lambda: self.delete(name)
        if action is Action.RENAME:
            return lambda: self.rename(name)
        if action is Action.MOVE:
            return lambda: self.move(name)

        async def edit() -> OperationResult:
            return OperationResult(value=self.edit_url(name))
        return edit

    def actions_for(self, name: str) -> List[Action]:
        """Actions offered for name in the current view."""
        return [action for (entry, action) in self._handlers if entry == name]

    async def dispatch(self, name: str, action: Action, *args) -> OperationResult:
        """
        Run the action bound to (name, action) in the current view.

        Raises:
            KeyError: If the current view offers no such action
        """
        handler = self._handlers.get((name, action))
        if handler is None:
            raise KeyError(f"No {action.value} action for {name!r}")
        return await handler(*args)

    # Mutations

    async def delete(self, name: str) -> OperationResult:
        """Delete an entry after confirmation."""
        if not await self._ask_confirm(f"Really delete?\n{name}"):
            return OperationResult.noop()

        path = child_path(self._current_directory, name, self._is_dir(name))
        try:
            await self._client.remove(path)
        except DavException as e:
            return self._failed(e, f"Deleting {path} failed")
        return await self.refresh()

    async def rename(self, name: str) -> OperationResult:
        """Rename a file inside the current directory."""
        new_name = await self._ask('New name:', name)
        if not new_name or new_name == name:
            return OperationResult.noop()

        source = child_path(self._current_directory, name, False)
        destination = child_path(self._current_directory, new_name, False)
        try:
            await self._client.move_or_rename(source, destination, self._is_dir(name))
        except DavException as e:
            return self._failed(e, f"Renaming {source} failed")
        return await self.refresh()

    async def move(self, name: str) -> OperationResult:
        """Move a file into another directory, keeping its name."""
        if self._is_dir(name):
            return self._failed(
                UnsupportedOperationError("Moving directories is not supported"),
                f"Move of directory {name} rejected"
            )

        target = await self._ask('Target directory (e.g. /sub/):', self._current_directory)
        if not target:
            return OperationResult.noop()

        target_directory = normalize(target)
        if target_directory == self._current_directory:
            return OperationResult.noop()

        source = child_path(self._current_directory, name, False)
        destination = child_path(target_directory, name, False)
        try:
            await self._client.move_or_rename(source, destination)
        except DavException as e:
            return self._failed(e, f"Moving {source} failed")
        return await self.refresh()

    async def create_directory(self) -> OperationResult:
        """Create a directory inside the current one."""
        answer = await self._ask('New folder:')
        name = (answer or '').strip().strip(SEPARATOR)
        if not name:
            return OperationResult.noop()
        if SEPARATOR in name:
            return self._failed(
                UnsupportedOperationError(f"Folder name must not contain '{SEPARATOR}': {name}"),
                "Create folder rejected"
            )

        path = child_path(self._current_directory, name, True)
        try:
            await self._client.create_directory(path)
        except DavException as e:
            return self._failed(e, f"Creating {path} failed")
        return await self.refresh()

    # Transfers

    async def download(self, name: str, destination: Union[str, Path] = '.') -> OperationResult:
        """Save a file of the current directory locally."""
        path = child_path(self._current_directory, name, False)
        try:
            saved = await self._client.fetch_or_download(path, destination)
        except DavException as e:
            return self._failed(e, f"Downloading {path} failed")
        return OperationResult(value=saved)

    async def upload(
        self,
        sources: Iterable[Union[str, Path]],
        on_complete: Optional[Callable[[], None]] = None
    ) -> UploadBatch:
        """
        Upload files into the current directory.

        Each file refreshes the view when its own transfer completes.
        """
        pipeline = UploadPipeline(
            self._client,
            refresh=self.refresh,
            on_complete=on_complete,
            indicator=self._indicator,
            events=self._events
        )
        return await pipeline.submit(sources, self._current_directory)

    def edit_url(self, name: str) -> str:
        """Companion editor URL for a file of the current directory."""
        path = child_path(self._current_directory, name, False)
        return (
            f"{self._editor_url}?file={quote(path, safe='')}"
            f"&type={quote(extension(name), safe='')}"
        )

    # Helpers

    def _is_dir(self, name: str) -> bool:
        row = self._view.find(name) if self._view else None
        return bool(row and row.is_dir)

    async def _ask_confirm(self, message: str) -> bool:
        if self._prompter is None:
            return True
        return await self._prompter.confirm(message)

    async def _ask(self, message: str, default: str = '') -> Optional[str]:
        if self._prompter is None:
            return default
        return await self._prompter.prompt(message, default)

    def _failed(self, error: DavException, context: str) -> OperationResult:
        logger.error(f"{context}: {error}")
        self._events.emit(ERROR, error)
        return OperationResult.failure(error)
