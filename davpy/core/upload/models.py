"""
Data models for upload module.

Each UploadTask owns its own progress; tasks of one batch share no
mutable state.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class UploadState(Enum):
    """Lifecycle of a single upload."""
    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class UploadProgress:
    """
    Snapshot of one task's progress.

    Attributes:
        name: File name being uploaded
        total_bytes: Total file size
        uploaded_bytes: Bytes handed to the transport so far
    """
    name: str
    total_bytes: int = 0
    uploaded_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage."""
        if self.total_bytes == 0:
            return 100.0 if self.uploaded_bytes else 0.0
        return (self.uploaded_bytes / self.total_bytes) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if every byte was sent."""
        return self.uploaded_bytes >= self.total_bytes


@dataclass
class UploadTask:
    """
    One file of a batch.

    Attributes:
        source: Local file path
        remote_path: Target path relative to the mount root
        bytes_total: File size (known after validation)
        bytes_transferred: Bytes sent so far
        state: Current lifecycle state
        error: Failure cause when state is FAILED
    """
    source: Path
    remote_path: str
    bytes_total: int = 0
    bytes_transferred: int = 0
    state: UploadState = UploadState.PENDING
    error: Optional[BaseException] = None

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def failed(self) -> bool:
        return self.state is UploadState.FAILED

    def progress(self) -> UploadProgress:
        """Immutable view of the task's progress."""
        return UploadProgress(
            name=self.name,
            total_bytes=self.bytes_total,
            uploaded_bytes=self.bytes_transferred
        )


@dataclass
class UploadBatch:
    """Files submitted together, processed as independent tasks."""
    tasks: List[UploadTask] = field(default_factory=list)

    @property
    def succeeded(self) -> List[UploadTask]:
        return [t for t in self.tasks if t.state is UploadState.DONE]

    @property
    def failed(self) -> List[UploadTask]:
        return [t for t in self.tasks if t.state is UploadState.FAILED]

    @property
    def errors(self) -> List[BaseException]:
        return [t.error for t in self.failed if t.error is not None]

    def __iter__(self):
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)


class ProgressIndicator:
    """
    Single progress value shown for a whole batch.

    Last write wins: the indicator shows whichever task reported most
    recently. Tasks never write into it directly; the pipeline forwards
    their snapshots at the presentation boundary.
    """

    def __init__(self):
        self._current: Optional[UploadProgress] = None
        self.visible = False

    @property
    def current(self) -> Optional[UploadProgress]:
        return self._current

    def update(self, progress: UploadProgress) -> None:
        self._current = progress
        self.visible = True

    def hide(self) -> None:
        self.visible = False
