"""
Client configuration module.

Provides configuration for the WebDAV client: server location, mount
root, transport settings, and the companion resources the file manager
links to.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import ssl

import aiohttp


@dataclass
class ProxyConfig:
    """
    Proxy configuration.

    Supports HTTP and HTTPS proxies.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        """Convert to aiohttp proxy format."""
        if not self.url:
            return None

        if self.username and self.password:
            # Insert credentials into URL
            if '://' in self.url:
                protocol, rest = self.url.split('://', 1)
                return f"{protocol}://{self.username}:{self.password}@{rest}"

        return self.url


@dataclass
class SSLConfig:
    """
    SSL/TLS configuration.

    Allows customization of SSL behavior for self-hosted servers.
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def create_ssl_context(self):
        """Create SSL context from configuration (False disables verification)."""
        if not self.verify:
            return False

        context = ssl.create_default_context()

        if self.ca_file:
            context.load_verify_locations(self.ca_file)

        if self.cert_file:
            context.load_cert_chain(
                self.cert_file,
                keyfile=self.key_file
            )

        context.check_hostname = self.check_hostname

        return context


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Defaults match aiohttp's own defaults; the core imposes no timeouts
    of its own.
    """
    total: Optional[float] = 300.0
    connect: Optional[float] = None
    sock_read: Optional[float] = None
    sock_connect: Optional[float] = 30.0

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        """Convert to aiohttp ClientTimeout."""
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class AuthConfig:
    """Credentials handed to the transport as HTTP basic auth."""
    username: str
    password: str = ''

    def to_aiohttp_auth(self) -> aiohttp.BasicAuth:
        return aiohttp.BasicAuth(self.username, self.password)


@dataclass
class DavConfig:
    """
    Complete client configuration.

    Attributes:
        base_url: Scheme and host of the server (e.g. 'http://192.168.4.1')
        root: Fixed path prefix of the WebDAV mount
        editor_url: Companion editor page that receives edit hand-offs
        menu_url: Static JSON menu resource
        absolute_destination: Send MOVE destinations as absolute URLs
            instead of root-relative paths ('/dav/b.txt')
        overwrite: MOVE Overwrite header; None sends no header, which
            servers treat as T (replace an existing destination)
        chunk_size: Bytes read per chunk when streaming uploads/downloads
    """
    base_url: str = 'http://localhost'
    root: str = '/dav'

    user_agent: str = 'davpy/1.0.0'

    editor_url: str = '/editor.html'
    menu_url: str = '/menu.json'

    absolute_destination: bool = False
    overwrite: Optional[bool] = None
    chunk_size: int = 64 * 1024

    # Sub-configurations
    auth: Optional[AuthConfig] = None
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    # Additional headers
    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    def __post_init__(self):
        self.base_url = self.base_url.rstrip('/')
        self.root = '/' + self.root.strip('/') if self.root.strip('/') else ''

    @classmethod
    def default(cls) -> 'DavConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'DavConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'DavConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False, check_hostname=False),
            **kwargs
        )

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        kwargs: Dict[str, Any] = {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
        if self.auth:
            kwargs['auth'] = self.auth.to_aiohttp_auth()
        return kwargs

    def resolve(self, url: str) -> str:
        """Absolute URL for a server-relative companion resource."""
        if '://' in url:
            return url
        return f"{self.base_url}/{url.lstrip('/')}"
