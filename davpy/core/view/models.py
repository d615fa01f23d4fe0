"""
View models for the directory view.

A DirectoryView is a complete, immutable rendering of one directory: the
breadcrumbs, then every directory row, then every file row.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..exceptions import DavException
from ..listing import Entry
from ..path import Breadcrumb


class Action(Enum):
    """Interaction affordances offered per row."""
    NAVIGATE = 'navigate'
    DOWNLOAD = 'download'
    DELETE = 'delete'
    RENAME = 'rename'
    MOVE = 'move'
    EDIT = 'edit'


DIRECTORY_ACTIONS: Tuple[Action, ...] = (Action.NAVIGATE, Action.DELETE, Action.MOVE)
FILE_ACTIONS: Tuple[Action, ...] = (Action.DOWNLOAD, Action.DELETE, Action.RENAME, Action.MOVE)


@dataclass(frozen=True)
class Row:
    """
    One rendered entry.

    Attributes:
        entry: The listed file or directory
        path: Absolute path of the entry (directories end with '/')
        actions: Affordances offered for the entry
    """
    entry: Entry
    path: str
    actions: Tuple[Action, ...]

    @property
    def name(self) -> str:
        return self.entry.name

    @property
    def is_dir(self) -> bool:
        return self.entry.is_dir


@dataclass(frozen=True)
class DirectoryView:
    """Rendered state of the current directory."""
    directory: str
    breadcrumbs: Tuple[Breadcrumb, ...]
    rows: Tuple[Row, ...] = ()

    @property
    def directories(self) -> List[Row]:
        return [row for row in self.rows if row.is_dir]

    @property
    def files(self) -> List[Row]:
        return [row for row in self.rows if not row.is_dir]

    def names(self) -> List[str]:
        """Entry names in render order."""
        return [row.name for row in self.rows]

    def find(self, name: str) -> Optional[Row]:
        for row in self.rows:
            if row.name == name:
                return row
        return None


@dataclass
class OperationResult:
    """
    Outcome of a controller operation.

    Attributes:
        error: Failure cause; None on success
        view: View rendered by the refresh that followed the operation
        skipped: True if the operation exited locally without a request
        stale: True if a newer refresh superseded this one's response
        value: Operation-specific payload (e.g. an edit URL or a saved path)
    """
    error: Optional[DavException] = None
    view: Optional[DirectoryView] = None
    skipped: bool = False
    stale: bool = False
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: DavException) -> 'OperationResult':
        return cls(error=error)

    @classmethod
    def noop(cls) -> 'OperationResult':
        return cls(skipped=True)
