# Path: dependency_loader/models/__init__.py
"""
Dependency Loader Models

Value objects shared by the core and engine packages.
"""

from dependency_loader.models.coordinate import Coordinate, CoordinateOptions

__all__ = ['Coordinate', 'CoordinateOptions']
