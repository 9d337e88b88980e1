# Path: dependency_loader/download.py
"""
Dependency Loader - Main Entry Point

Loads every dependency declared in the manifest.

Usage:
    python -m dependency_loader.download [--manifest dependencies.json] [--debug]
    dependency-loader [--manifest dependencies.json] [--debug]
"""

import asyncio
import sys

from dependency_loader.cli.load_cli import main


def run():
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\n\nLoading cancelled by user.")
        sys.exit(130)
    except Exception as e:
        print(f"\nFatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    run()
