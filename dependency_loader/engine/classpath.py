# Path: dependency_loader/engine/classpath.py
"""
Classpath Loader

Collects fetched binaries into the classpath handed to the JVM process
that consumes them. Each (group, artifact, version) is added once; the
classpath file is rewritten on every addition so a host can pick it up
at any time.

Architecture:
- initialize() proves the classpath file can be written
- add() de-duplicates by coordinate identity
- as_classpath() yields the os.pathsep-joined string
"""

import os
import threading
from pathlib import Path
from typing import Optional

from dependency_loader.core.logger import get_logger
from dependency_loader.engine.errors import ClasspathUnavailableError
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import LOG_OUTPUT

logger = get_logger(__name__, 'engine')


class ClasspathLoader:
    """
    Ordered, de-duplicated set of binaries on the classpath.

    Example:
        classpath = ClasspathLoader(Path('Dependencies/classpath.txt'))
        classpath.initialize()
        classpath.add(coordinate, jar_path)
        classpath.as_classpath()  # 'Dependencies/com.zaxxer/HikariCP-2.6.1.jar'
    """

    def __init__(self, classpath_file: Optional[Path] = None):
        """
        Initialize classpath loader.

        Args:
            classpath_file: File receiving the classpath (None keeps it in memory)
        """
        self.classpath_file = Path(classpath_file) if classpath_file else None
        self._lock = threading.Lock()
        self._entries: dict[Coordinate, Path] = {}
        self._available = False

    @property
    def available(self) -> bool:
        return self._available

    def initialize(self) -> None:
        """
        Make sure the classpath can be extended.

        Raises:
            ClasspathUnavailableError: If the classpath file cannot be written
        """
        if self.classpath_file is not None:
            try:
                self.classpath_file.parent.mkdir(parents=True, exist_ok=True)
                self.classpath_file.touch(exist_ok=True)
            except OSError as e:
                self._available = False
                raise ClasspathUnavailableError(
                    f"Cannot write classpath file {self.classpath_file}: {e}"
                ) from e

            if not os.access(self.classpath_file, os.W_OK):
                self._available = False
                raise ClasspathUnavailableError(f"Classpath file {self.classpath_file} is not writable")

        self._available = True

    def add(self, coordinate: Coordinate, binary_path: Path) -> bool:
        """
        Put a binary on the classpath.

        Args:
            coordinate: Coordinate the binary belongs to
            binary_path: Local binary file

        Returns:
            True if added, False if this coordinate was already loaded

        Raises:
            ClasspathUnavailableError: If initialize() has not succeeded
            FileNotFoundError: If the binary does not exist
        """
        if not self._available:
            raise ClasspathUnavailableError("Classpath has not been initialized")

        if not binary_path.is_file():
            raise FileNotFoundError(f"Binary {binary_path} does not exist")

        with self._lock:
            if coordinate in self._entries:
                logger.debug(f"{coordinate.gav} is already on the classpath")
                return False

            self._entries[coordinate] = binary_path
            self._write()

        logger.debug(f"{LOG_OUTPUT} Added {binary_path.name} to classpath")
        return True

    def contains(self, coordinate: Coordinate) -> bool:
        with self._lock:
            return coordinate in self._entries

    def entries(self) -> list[Path]:
        with self._lock:
            return list(self._entries.values())

    def as_classpath(self) -> str:
        return os.pathsep.join(str(path) for path in self.entries())

    def _write(self) -> None:
        # Caller holds the lock
        if self.classpath_file is None:
            return
        content = os.pathsep.join(str(path) for path in self._entries.values())
        self.classpath_file.write_text(content + '\n', encoding='utf-8')


__all__ = ['ClasspathLoader']
