"""
Presentation-boundary events.

The view controller and the upload pipeline publish what happened; front
ends subscribe to the events they display. Event names are plain strings
so callers may also subscribe with literals.
"""
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional

RENDER = 'render'                    # DirectoryView
ERROR = 'error'                      # DavException (or a failed hook's exception)
UPLOAD_PROGRESS = 'upload_progress'  # UploadProgress
UPLOAD_DONE = 'upload_done'          # UploadTask
UPLOAD_FAILED = 'upload_failed'      # UploadTask

EVENTS = (RENDER, ERROR, UPLOAD_PROGRESS, UPLOAD_DONE, UPLOAD_FAILED)


class EventEmitter:
    """
    Synchronous observer registry.

    Handlers run in subscription order inside emit(); a handler may
    unsubscribe itself while being called.
    """

    def __init__(self):
        self._handlers: DefaultDict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        self._handlers[event].append(callback)
        return self

    def emit(self, event: str, *args) -> None:
        for callback in tuple(self._handlers.get(event, ())):
            callback(*args)

    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Remove one handler, or every handler of event when callback is None."""
        if callback is None:
            self._handlers.pop(event, None)
        elif event in self._handlers:
            self._handlers[event] = [cb for cb in self._handlers[event] if cb != callback]
        return self

    def has_listeners(self, event: str) -> bool:
        return bool(self._handlers.get(event))
