"""
Path model for the remote directory tree.

Pure functions over '/'-separated directory strings. Directory paths are
absolute and always end with the separator; file paths never do.
"""
from dataclasses import dataclass
from typing import Iterable, List

SEPARATOR = '/'
ROOT = '/'
ROOT_LABEL = 'Root'


@dataclass(frozen=True)
class Breadcrumb:
    """
    One navigable segment of the current directory.

    Attributes:
        label: Text shown for the segment
        path: Cumulative directory path up to and including the segment
    """
    label: str
    path: str


def normalize(path: str) -> str:
    """
    Normalize a directory path.

    Appends a trailing separator if absent and makes the path absolute.
    Never fails.

    Example:
        >>> normalize('/docs')
        '/docs/'
        >>> normalize('')
        '/'
    """
    if not path.startswith(SEPARATOR):
        path = SEPARATOR + path
    if not path.endswith(SEPARATOR):
        path = path + SEPARATOR
    return path


def segments(path: str) -> List[str]:
    """Non-empty path segments in order."""
    return [part for part in path.split(SEPARATOR) if part]


def breadcrumb_segments(path: str) -> List[Breadcrumb]:
    """
    Split a directory path into navigable breadcrumbs.

    The root is always the first, implicit segment. Every following
    breadcrumb carries the cumulative directory path, usable for navigation.

    Example:
        >>> [b.path for b in breadcrumb_segments('/a/b/')]
        ['/', '/a/', '/a/b/']
    """
    crumbs = [Breadcrumb(ROOT_LABEL, ROOT)]
    current = ''
    for part in segments(path):
        current += SEPARATOR + part
        crumbs.append(Breadcrumb(part, current + SEPARATOR))
    return crumbs


def join_breadcrumbs(crumbs: Iterable[Breadcrumb]) -> str:
    """Rebuild a directory path from breadcrumbs (inverse of breadcrumb_segments)."""
    parts = [crumb.label for crumb in crumbs if crumb.path != ROOT]
    if not parts:
        return ROOT
    return SEPARATOR + SEPARATOR.join(parts) + SEPARATOR


def child_path(current_directory: str, name: str, is_directory: bool) -> str:
    """
    Build the path of an entry inside current_directory.

    The separator is appended only for directories.
    """
    path = current_directory + name
    if is_directory:
        path += SEPARATOR
    return path


def parent(path: str) -> str:
    """Parent directory of a directory path (root is its own parent)."""
    parts = segments(path)
    if len(parts) <= 1:
        return ROOT
    return SEPARATOR + SEPARATOR.join(parts[:-1]) + SEPARATOR


def basename(path: str) -> str:
    """Last non-empty segment of a path, '' for the root."""
    parts = segments(path)
    return parts[-1] if parts else ''


def extension(name: str) -> str:
    """Lower-cased extension of a file name without the dot."""
    base = basename(name) or name
    if '.' not in base:
        return ''
    return base.rsplit('.', 1)[1].lower()
