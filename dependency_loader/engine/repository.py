# Path: dependency_loader/engine/repository.py
"""
Repository Layout

Canonical remote paths of a coordinate's files and the ordered list of
fallback repositories they are fetched from.

Paths are relative to a repository base URL:
    <group with '.' -> '/'>/<artifact>/<version>/<artifact>-<version>.jar
"""

import threading
from typing import Iterable, Iterator, Optional

from dependency_loader.core.logger import get_logger
from dependency_loader.engine.validator import validate_url
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import (
    DEFAULT_REPOSITORIES,
    METADATA_REMOTE_NAME,
    BINARY_EXTENSION,
    DESCRIPTOR_EXTENSION,
)

logger = get_logger(__name__, 'engine')


def fix_url(url: str) -> str:
    """Return the URL with a trailing '/'."""
    return url if url.endswith("/") else url + "/"


def get_base_url(coordinate: Coordinate) -> str:
    """
    Path of the directory holding every file of this coordinate.

    Args:
        coordinate: The coordinate

    Returns:
        Relative path ending with '/'
    """
    return f"{coordinate.group.replace('.', '/')}/{coordinate.artifact}/{coordinate.version}/"


def get_jar_url(coordinate: Coordinate) -> str:
    """Relative path of the coordinate's binary."""
    return get_base_url(coordinate) + coordinate.jar_name


def get_pom_url(coordinate: Coordinate) -> str:
    """Relative path of the coordinate's descriptor."""
    return get_base_url(coordinate) + coordinate.pom_name


def get_meta_url(coordinate: Coordinate) -> str:
    """Relative path of the coordinate's snapshot metadata."""
    return get_base_url(coordinate) + METADATA_REMOTE_NAME


def get_snapshot_urls(coordinate: Coordinate, resolved_file_name: str) -> tuple[str, str]:
    """
    Relative paths of a snapshot's timestamped binary and descriptor.

    Args:
        coordinate: Snapshot coordinate
        resolved_file_name: '<artifact>-<timestamped version>'

    Returns:
        (jar path, pom path)
    """
    base = get_base_url(coordinate)
    return base + resolved_file_name + BINARY_EXTENSION, base + resolved_file_name + DESCRIPTOR_EXTENSION


class RepositoryList:
    """
    Ordered, thread-safe list of fallback repository base URLs.

    Maven Central is always present first unless an explicit list is given.
    Every entry ends with '/', duplicates are ignored.

    Example:
        repositories = RepositoryList()
        repositories.add(['https://jitpack.io'])
        list(repositories)
        # ['https://repo1.maven.org/maven2/', 'https://jitpack.io/']
    """

    def __init__(self, initial: Optional[Iterable[str]] = None):
        self._lock = threading.Lock()
        self._urls: list[str] = []
        self.add(DEFAULT_REPOSITORIES if initial is None else initial)

    def add(self, urls: Iterable[str]) -> None:
        """
        Append repositories, normalized to end with '/'.

        Args:
            urls: Repository base URLs
        """
        with self._lock:
            for url in urls:
                url = url.strip()
                if not url or not validate_url(url):
                    continue

                fixed = fix_url(url)
                if fixed in self._urls:
                    continue

                self._urls.append(fixed)
                logger.debug(f"Repository added: {fixed}")

    def snapshot(self) -> list[str]:
        """Copy of the current list, safe to iterate while others add."""
        with self._lock:
            return list(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)


__all__ = [
    'RepositoryList',
    'fix_url',
    'get_base_url',
    'get_jar_url',
    'get_pom_url',
    'get_meta_url',
    'get_snapshot_urls',
]
