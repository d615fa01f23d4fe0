"""Directory view: navigation state, rendering and mutations."""
from .controller import (
    DirectoryViewController,
    EDITABLE_EXTENSIONS,
    initial_directory,
    is_editable,
    partition,
    sort_entries,
    sort_key,
    use_system_collation,
)
from .models import Action, DirectoryView, OperationResult, Row
from .protocols import DavClientProtocol, Prompter

__all__ = [
    'DirectoryViewController',
    'EDITABLE_EXTENSIONS',
    'initial_directory',
    'is_editable',
    'partition',
    'sort_entries',
    'sort_key',
    'use_system_collation',
    'Action',
    'DirectoryView',
    'OperationResult',
    'Row',
    'DavClientProtocol',
    'Prompter',
]
