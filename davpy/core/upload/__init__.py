"""
Upload module.

Streams local files to the remote store as independent, progress-reporting
tasks.
"""
from .pipeline import UploadPipeline
from .models import UploadBatch, UploadProgress, UploadState, UploadTask, ProgressIndicator
from .protocols import StoreClientProtocol
from .services import AsyncFileReader, FileValidator

__all__ = [
    # Main classes
    'UploadPipeline',

    # Models
    'UploadBatch',
    'UploadProgress',
    'UploadState',
    'UploadTask',
    'ProgressIndicator',

    # Protocols
    'StoreClientProtocol',

    # Services
    'AsyncFileReader',
    'FileValidator',
]
