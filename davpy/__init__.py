"""
davpy - Async Python file manager for WebDAV stores.

Usage:
    >>> from davpy import DavClient
    >>>
    >>> async with DavClient("http://192.168.4.1") as dav:
    ...     view = await dav.ls("/")
    ...     for row in view.rows:
    ...         print(row.name)
"""
from .client import DavClient, raise_on_error

# Configuration
from .core.api import (
    AsyncDavClient,
    DavConfig,
    AuthConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
)

# Errors
from .core.exceptions import (
    DavException,
    TransportError,
    NetworkError,
    ProtocolError,
    UnsupportedOperationError,
)

# Models
from .core.listing import Entry, EntryKind, ListingParser
from .core.view import Action, DirectoryView, DirectoryViewController, OperationResult
from .core.upload import UploadBatch, UploadPipeline, UploadState, UploadTask
from .core.logging import setup_logging

__version__ = '1.0.0'

__all__ = [
    'DavClient',
    'raise_on_error',
    'AsyncDavClient',
    'DavConfig',
    'AuthConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DavException',
    'TransportError',
    'NetworkError',
    'ProtocolError',
    'UnsupportedOperationError',
    'Entry',
    'EntryKind',
    'ListingParser',
    'Action',
    'DirectoryView',
    'DirectoryViewController',
    'OperationResult',
    'UploadBatch',
    'UploadPipeline',
    'UploadState',
    'UploadTask',
    'setup_logging',
]
