# Path: dependency_loader/core/__init__.py
"""
Dependency Loader Core Module

Configuration and logging shared by every component.
"""

from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.core.logger import get_logger, configure_logging

__all__ = ['ConfigLoader', 'get_logger', 'configure_logging']
