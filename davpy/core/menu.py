"""
Menu resource loader.

The server publishes a static JSON list of {title, url} links next to the
file manager. Only front ends read it; the core never does.
"""
import json
from dataclasses import dataclass
from typing import Any, List

import aiohttp

from .api import DavConfig, is_success
from .exceptions import NetworkError, ProtocolError, TransportError
from .logging import get_logger

logger = get_logger('davpy.menu')


@dataclass(frozen=True)
class MenuLink:
    """One navigation link of the menu."""
    title: str
    url: str


def parse_menu(data: Any) -> List[MenuLink]:
    """
    Convert decoded menu JSON into links.

    Raises:
        ProtocolError: If the document is not a list of {title, url} objects
    """
    if not isinstance(data, list):
        raise ProtocolError("Menu must be a JSON list")
    links = []
    for item in data:
        if not isinstance(item, dict) or 'title' not in item or 'url' not in item:
            raise ProtocolError(f"Invalid menu item: {item!r}")
        links.append(MenuLink(title=str(item['title']), url=str(item['url'])))
    return links


async def fetch_menu(session: aiohttp.ClientSession, config: DavConfig) -> List[MenuLink]:
    """
    Fetch and decode the menu resource.

    Args:
        session: Open HTTP session
        config: Client configuration naming the menu resource
    """
    url = config.resolve(config.menu_url)
    logger.debug(f"Fetching menu from {url}")
    try:
        async with session.get(url) as response:
            body = await response.text()
            if not is_success(response.status):
                raise TransportError(response.status, body, 'GET')
    except aiohttp.ClientError as e:
        raise NetworkError(f"Network error fetching menu: {e}") from e

    try:
        data = json.loads(body)
    except ValueError as e:
        raise ProtocolError(f"Menu is not valid JSON: {e}") from e
    return parse_menu(data)
