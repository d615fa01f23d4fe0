"""WebDAV protocol client and its configuration."""
from .config import DavConfig, AuthConfig, ProxyConfig, SSLConfig, TimeoutConfig
from .client import AsyncDavClient, ProgressCallback, is_success

__all__ = [
    # Client
    'AsyncDavClient',
    'ProgressCallback',
    'is_success',

    # Configuration
    'DavConfig',
    'AuthConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
]
