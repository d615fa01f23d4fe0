"""Directory listing models and parser."""
from .models import Entry, EntryKind, ListingRecord, ListingResponse
from .parser import ListingParser

__all__ = [
    'Entry',
    'EntryKind',
    'ListingRecord',
    'ListingResponse',
    'ListingParser',
]
