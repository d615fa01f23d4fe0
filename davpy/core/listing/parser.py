"""
Listing parser.

Decodes a WebDAV multistatus document into entries.
"""
from typing import List, Optional, Union
from urllib.parse import unquote, urlsplit
from xml.etree import ElementTree as ET

from .models import Entry, ListingRecord, ListingResponse
from ..exceptions import ProtocolError
from ..logging import get_logger

DAV_NAMESPACE = 'DAV:'


def _local_name(tag: str) -> str:
    """Strip the '{namespace}' part of an element tag."""
    return tag.rsplit('}', 1)[-1]


def _is_dav(tag: str) -> bool:
    """True for elements in the DAV: namespace or without any namespace."""
    if tag.startswith('{'):
        return tag[1:].split('}', 1)[0] == DAV_NAMESPACE
    return True


class ListingParser:
    """
    Parses depth-1 PROPFIND responses.

    The first record of every response describes the queried directory
    itself and is excluded from the entries.

    Example:
        >>> parser = ListingParser()
        >>> entries = parser.parse(xml_text)
        >>> [e.name for e in entries]
        ['photos', 'notes.txt']
    """

    def __init__(self):
        self._logger = get_logger('davpy.listing')

    def parse_records(self, text: Union[str, bytes]) -> ListingResponse:
        """
        Extract all resource records in document order.

        Args:
            text: Raw response body

        Returns:
            ListingResponse with at least one record

        Raises:
            ProtocolError: If the body is not XML or holds no records
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ProtocolError(f"Listing is not a valid XML document: {e}") from e

        records = []
        for element in root.iter():
            if _local_name(element.tag) != 'response' or not _is_dav(element.tag):
                continue
            href = self._find_href(element)
            if href is None:
                raise ProtocolError("Listing record without href")
            records.append(ListingRecord(
                href=self._decode_href(href),
                is_collection=self._has_collection(element)
            ))

        if not records:
            raise ProtocolError(
                "Listing contains no records; expected at least the queried directory"
            )

        self._logger.debug(f"Parsed {len(records)} listing records")
        return ListingResponse(records)

    def parse(self, text: Union[str, bytes]) -> List[Entry]:
        """
        Decode a listing into entries, self-entry excluded.

        Order is not significant; consumers sort.
        """
        return self.parse_records(text).entries()

    @staticmethod
    def _find_href(response: ET.Element) -> Optional[str]:
        for child in response:
            if _local_name(child.tag) == 'href':
                return (child.text or '').strip()
        return None

    @staticmethod
    def _has_collection(response: ET.Element) -> bool:
        return any(
            _local_name(element.tag) == 'collection'
            for element in response.iter()
        )

    @staticmethod
    def _decode_href(href: str) -> str:
        # Some servers answer with absolute URLs
        if '://' in href:
            href = urlsplit(href).path
        return unquote(href)
