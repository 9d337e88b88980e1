# Path: dependency_loader/cli/__init__.py
"""Command-line interface of the dependency loader."""

from dependency_loader.cli.load_cli import LoadCLI, main

__all__ = ['LoadCLI', 'main']
