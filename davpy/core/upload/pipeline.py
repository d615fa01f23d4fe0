"""
Upload pipeline.

Runs one independent transfer per submitted file. Tasks are interleaved
by the event loop; a failing task never aborts its siblings and every
successful task triggers its own view refresh.
"""
import asyncio
from pathlib import Path
from typing import Iterable, Optional, Union

from .models import ProgressIndicator, UploadBatch, UploadState, UploadTask
from .protocols import CompletionHook, RefreshHook, StoreClientProtocol
from .services import FileValidator
from ..events import ERROR, UPLOAD_DONE, UPLOAD_FAILED, UPLOAD_PROGRESS, EventEmitter
from ..exceptions import DavException
from ..logging import get_logger
from ..path import child_path, normalize

logger = get_logger('davpy.upload')


class UploadPipeline:
    """
    Uploads batches of local files into a remote directory.

    Events emitted (when an emitter is given):
    - 'upload_progress' (UploadProgress) after each reported chunk
    - 'upload_done' (UploadTask) after a task completes
    - 'upload_failed' (UploadTask) after a task fails
    - 'error' (exception) if the refresh or completion hook of a finished
      task raises; the task stays DONE

    Example:
        >>> pipeline = UploadPipeline(dav, refresh=controller.refresh)
        >>> batch = await pipeline.submit(['a.txt', 'b.txt'], '/docs/')
        >>> [t.state for t in batch]
        [<UploadState.DONE: 'done'>, <UploadState.DONE: 'done'>]
    """

    def __init__(
        self,
        client: StoreClientProtocol,
        refresh: Optional[RefreshHook] = None,
        on_complete: Optional[CompletionHook] = None,
        indicator: Optional[ProgressIndicator] = None,
        events: Optional[EventEmitter] = None,
        validator: Optional[FileValidator] = None
    ):
        """
        Initialize upload pipeline.

        Args:
            client: Remote store performing the transfers
            refresh: Awaited after each successful task
            on_complete: Called after each refresh (e.g. to reset a file picker)
            indicator: Batch-wide progress display
            events: Emitter receiving progress and outcome events
            validator: Local file validator
        """
        self._client = client
        self._refresh = refresh
        self._on_complete = on_complete
        self._indicator = indicator or ProgressIndicator()
        self._events = events or EventEmitter()
        self._validator = validator or FileValidator()

    @property
    def indicator(self) -> ProgressIndicator:
        return self._indicator

    async def submit(
        self,
        sources: Iterable[Union[str, Path]],
        directory: str
    ) -> UploadBatch:
        """
        Upload every file into directory, each as its own task.

        Args:
            sources: Local files of the batch
            directory: Remote target directory

        Returns:
            The settled batch; inspect each task's state and error
        """
        directory = normalize(directory)
        batch = UploadBatch([
            UploadTask(
                source=Path(source),
                remote_path=child_path(directory, Path(source).name, False)
            )
            for source in sources
        ])
        if not batch.tasks:
            return batch

        logger.info(f"Uploading {len(batch)} file(s) to {directory}")
        results = await asyncio.gather(
            *(self._run(task) for task in batch.tasks),
            return_exceptions=True
        )

        for task, result in zip(batch.tasks, results):
            if not isinstance(result, Exception):
                continue
            if task.state is UploadState.DONE:
                logger.error(f"Hook after upload of {task.name} failed: {result}")
                self._events.emit(ERROR, result)
            elif not task.failed:
                self._fail(task, result)

        logger.info(
            f"Batch finished: {len(batch.succeeded)} done, {len(batch.failed)} failed"
        )
        return batch

    async def _run(self, task: UploadTask) -> None:
        """Upload one file, then refresh the view."""
        try:
            _, task.bytes_total = self._validator.validate(task.source)
        except (OSError, ValueError) as e:
            self._fail(task, e)
            return

        task.state = UploadState.IN_PROGRESS
        self._indicator.update(task.progress())

        def on_progress(transferred: int) -> None:
            task.bytes_transferred = transferred
            snapshot = task.progress()
            self._indicator.update(snapshot)
            self._events.emit(UPLOAD_PROGRESS, snapshot)

        try:
            await self._client.store(task.remote_path, task.source, on_progress)
        except (DavException, OSError) as e:
            self._fail(task, e)
            return

        task.state = UploadState.DONE
        self._indicator.hide()
        logger.info(f"Upload of {task.name} complete ({task.bytes_total} bytes)")
        self._events.emit(UPLOAD_DONE, task)

        if self._refresh:
            await self._refresh()
        if self._on_complete:
            self._on_complete()

    def _fail(self, task: UploadTask, error: BaseException) -> None:
        task.state = UploadState.FAILED
        task.error = error
        logger.error(f"Upload of {task.name} failed: {error}")
        self._events.emit(UPLOAD_FAILED, task)
