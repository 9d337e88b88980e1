# Path: dependency_loader/core/manifest_loader.py
"""
Dependency Manifest Loader

Reads the JSON manifest declaring root dependencies and extra repositories.

Format:
    {
        "repositories": ["https://jitpack.io"],
        "dependencies": {
            "HikariCP": {
                "group": "com.zaxxer",
                "artifact": "HikariCP",
                "version": "2.6.1",
                "repository": "",
                "always-update": false
            }
        }
    }

A missing manifest is created empty so users have a file to fill in.
Incomplete entries are logged and skipped.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dependency_loader.core.logger import get_logger
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import (
    MANIFEST_REPOSITORIES,
    MANIFEST_DEPENDENCIES,
    MANIFEST_GROUP,
    MANIFEST_ARTIFACT,
    MANIFEST_VERSION,
    MANIFEST_REPOSITORY,
    MANIFEST_ALWAYS_UPDATE,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'core')

REQUIRED_FIELDS = (MANIFEST_GROUP, MANIFEST_ARTIFACT, MANIFEST_VERSION)
TRUE_VALUES = ('true', '1', 'yes', 'on')


class ManifestError(ValueError):
    """Manifest file exists but is not a usable JSON document."""


@dataclass
class Manifest:
    """Declared repositories and root coordinates, in file order."""
    repositories: list[str] = field(default_factory=list)
    dependencies: list[Coordinate] = field(default_factory=list)


class ManifestLoader:
    """
    Loads declared dependencies from a JSON manifest.

    Example:
        manifest = ManifestLoader(Path('dependencies.json')).load()
        context.repositories.add(manifest.repositories)
        await loader.load_declared(manifest.dependencies)
    """

    def __init__(self, manifest_path: Path):
        self.manifest_path = Path(manifest_path)

    def load(self) -> Manifest:
        """
        Read the manifest.

        Returns:
            Manifest (empty if the file did not exist)

        Raises:
            ManifestError: If the file is not valid JSON or has the wrong shape
        """
        logger.info(f"{LOG_INPUT} Reading manifest {self.manifest_path}")

        if not self.manifest_path.exists():
            self._create_empty()
            return Manifest()

        try:
            with open(self.manifest_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Manifest {self.manifest_path} is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise ManifestError(f"Manifest {self.manifest_path} must contain a JSON object")

        manifest = Manifest(
            repositories=self._read_repositories(document.get(MANIFEST_REPOSITORIES)),
            dependencies=self._read_dependencies(document.get(MANIFEST_DEPENDENCIES)),
        )

        logger.info(
            f"{LOG_OUTPUT} Manifest declares {len(manifest.dependencies)} dependencies "
            f"and {len(manifest.repositories)} repositories"
        )
        return manifest

    def _create_empty(self) -> None:
        logger.warning(f"Manifest {self.manifest_path} not found, creating an empty one")
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.manifest_path, 'w', encoding='utf-8') as f:
            json.dump({MANIFEST_REPOSITORIES: [], MANIFEST_DEPENDENCIES: {}}, f, indent=2)

    def _read_repositories(self, section: Any) -> list[str]:
        if section is None:
            return []
        if not isinstance(section, list):
            raise ManifestError(f"'{MANIFEST_REPOSITORIES}' must be a list of URLs")
        return [str(url) for url in section if str(url).strip()]

    def _read_dependencies(self, section: Any) -> list[Coordinate]:
        if section is None:
            return []
        if not isinstance(section, dict):
            raise ManifestError(f"'{MANIFEST_DEPENDENCIES}' must map names to coordinates")

        coordinates = []
        for name, entry in section.items():
            coordinate = self._read_entry(name, entry)
            if coordinate is not None:
                coordinates.append(coordinate)

        return coordinates

    def _read_entry(self, name: str, entry: Any) -> Optional[Coordinate]:
        if not isinstance(entry, dict):
            logger.error(f"Dependency {name} is not an object, skipping")
            return None

        missing = [key for key in REQUIRED_FIELDS if not str(entry.get(key) or '').strip()]
        if missing:
            logger.error(f"Dependency {name} is missing {', '.join(missing)}, skipping")
            return None

        return Coordinate.create(
            name,
            str(entry[MANIFEST_VERSION]).strip(),
            str(entry[MANIFEST_GROUP]).strip(),
            str(entry[MANIFEST_ARTIFACT]).strip(),
            custom_repository=str(entry.get(MANIFEST_REPOSITORY) or '').strip() or None,
            always_refetch=self._read_flag(entry.get(MANIFEST_ALWAYS_UPDATE)),
        )

    @staticmethod
    def _read_flag(value: Any) -> bool:
        """JSON booleans as is; strings such as "false" parsed like environment flags."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        return False


__all__ = ['ManifestLoader', 'Manifest', 'ManifestError']
