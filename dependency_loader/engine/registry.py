# Path: dependency_loader/engine/registry.py
"""
Dependency Registry

Process-lifetime mapping from lowercase dependency name to the resolved
Coordinate. Written by concurrent resolutions, read by embedding hosts.
"""

import threading
from typing import Optional

from dependency_loader.core.logger import get_logger
from dependency_loader.models.coordinate import Coordinate

logger = get_logger(__name__, 'engine')


class DependencyRegistry:
    """
    Thread-safe name -> Coordinate map of successfully fetched dependencies.

    Entries are only ever added; a name registered twice keeps the most
    recent coordinate.

    Example:
        registry.register(coordinate)
        registry.get('HikariCP')  # case-insensitive
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, Coordinate] = {}

    @staticmethod
    def normalize(name: str) -> str:
        return name.lower()

    def register(self, coordinate: Coordinate) -> None:
        """
        Record a coordinate whose binary has been fetched.

        Args:
            coordinate: The fetched coordinate
        """
        key = self.normalize(coordinate.name)

        with self._lock:
            if coordinate in self._entries.values():
                logger.debug(f"Dependency {coordinate.name} has a duplicate")
            self._entries[key] = coordinate

    def get(self, name: str) -> Optional[Coordinate]:
        """Coordinate registered under name, if any."""
        with self._lock:
            return self._entries.get(self.normalize(name))

    def contains(self, coordinate: Coordinate) -> bool:
        """Whether an equal (group, artifact, version) is registered under any name."""
        with self._lock:
            return coordinate in self._entries.values()

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ['DependencyRegistry']
