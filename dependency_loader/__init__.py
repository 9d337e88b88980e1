# Path: dependency_loader/__init__.py
"""
Dependency Loader

Recursive Maven-style dependency resolver: fetches binaries and their
descriptors, verifies them, follows declared dependencies and reports
completion once a whole dependency tree has been loaded.
"""

from .engine.coordinator import DependencyLoader
from .core.context import LoaderContext
from .core.manifest_loader import ManifestLoader
from .models.coordinate import Coordinate, CoordinateOptions

__version__ = '1.0.0'

__all__ = ['DependencyLoader', 'LoaderContext', 'ManifestLoader', 'Coordinate', 'CoordinateOptions']
