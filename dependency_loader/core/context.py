# Path: dependency_loader/core/context.py
"""
Loader Context

The process-level state of the dependency loader, owned by whoever
creates it and handed explicitly to the fetch layer and orchestrator:
configuration, storage root, repositories, registry, classpath,
scope policy and diagnostic flags.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.engine.classpath import ClasspathLoader
from dependency_loader.engine.descriptor_parser import ScopePolicy
from dependency_loader.engine.registry import DependencyRegistry
from dependency_loader.engine.repository import RepositoryList
from dependency_loader.models.coordinate import Coordinate


@dataclass
class LoaderContext:
    """
    Explicitly owned dependency loader state.

    Attributes:
        config: Loaded configuration
        dependency_root: Directory receiving <group>/ folders
        repositories: Ordered fallback repositories
        registry: Name -> Coordinate of fetched dependencies
        classpath: Binaries loaded so far
        scope_policy: Which descriptor scopes are followed
        show_debug: Emit verbose trace lines
        enforce_file_check: Verify binaries against published checksums
    """
    config: ConfigLoader
    dependency_root: Path
    repositories: RepositoryList = field(default_factory=RepositoryList)
    registry: DependencyRegistry = field(default_factory=DependencyRegistry)
    classpath: ClasspathLoader = field(default_factory=ClasspathLoader)
    scope_policy: ScopePolicy = field(default_factory=ScopePolicy)
    show_debug: bool = False
    enforce_file_check: bool = True

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> 'LoaderContext':
        """
        Build a context from configuration.

        Args:
            config: Optional ConfigLoader instance

        Returns:
            New LoaderContext
        """
        config = config if config else ConfigLoader()

        repositories = RepositoryList()
        repositories.add(config.get('repositories') or [])

        return cls(
            config=config,
            dependency_root=Path(config.get('dependency_root')),
            repositories=repositories,
            registry=DependencyRegistry(),
            classpath=ClasspathLoader(config.get('classpath_file')),
            scope_policy=ScopePolicy.from_config(config),
            show_debug=bool(config.get('show_debug', False)),
            enforce_file_check=bool(config.get('enforce_file_check', True)),
        )

    def group_folder(self, coordinate: Coordinate) -> Path:
        """Local directory holding a coordinate's files."""
        return self.dependency_root / coordinate.group


__all__ = ['LoaderContext']
