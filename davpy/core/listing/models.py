"""
Data models for directory listings.

Entries are derived transiently from each listing response and are never
persisted.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class EntryKind(Enum):
    """Kind of a listed resource."""
    FILE = 'file'
    DIRECTORY = 'directory'


@dataclass(frozen=True)
class Entry:
    """
    A file or directory inside the current directory.

    Names are unique within one directory, so the name is the identity.
    """
    name: str
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        """Returns True for directories."""
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class ListingRecord:
    """
    One raw record of a multistatus response.

    Attributes:
        href: Percent-decoded resource reference
        is_collection: True if the record carries a collection marker
    """
    href: str
    is_collection: bool

    @property
    def name(self) -> str:
        """Last non-empty segment of the reference."""
        href = self.href[:-1] if self.href.endswith('/') else self.href
        return href.split('/')[-1]

    def to_entry(self) -> Entry:
        kind = EntryKind.DIRECTORY if self.is_collection else EntryKind.FILE
        return Entry(name=self.name, kind=kind)


@dataclass
class ListingResponse:
    """
    Ordered records of a depth-1 listing.

    The first record always describes the queried directory itself.
    """
    records: List[ListingRecord] = field(default_factory=list)

    @property
    def self_entry(self) -> ListingRecord:
        """The record describing the queried directory."""
        return self.records[0]

    @property
    def children(self) -> List[ListingRecord]:
        """All records except the self-entry."""
        return self.records[1:]

    def entries(self) -> List[Entry]:
        """Child records converted to entries."""
        return [record.to_entry() for record in self.children]

    def __len__(self) -> int:
        return len(self.records)
