# Path: dependency_loader/engine/errors.py
"""
Dependency Loader Errors

Typed failures raised inside the fetch layer. None of them cross the
orchestrator: each is absorbed where the node is marked as failed.
"""


class DependencyLoaderError(Exception):
    """Base class for dependency loader failures."""


class DownloadError(DependencyLoaderError):
    """A file could not be fetched from any eligible repository."""

    def __init__(self, remote_path: str, message: str = ''):
        self.remote_path = remote_path
        super().__init__(message or f"Failed to download {remote_path}")


class VerificationError(DependencyLoaderError):
    """A downloaded binary did not match its published checksum."""


class SnapshotResolutionError(DependencyLoaderError):
    """Snapshot metadata could not be turned into a timestamped version."""


class ClasspathUnavailableError(DependencyLoaderError):
    """The classpath cannot be extended, so nothing can be loaded."""


__all__ = [
    'DependencyLoaderError',
    'DownloadError',
    'VerificationError',
    'SnapshotResolutionError',
    'ClasspathUnavailableError',
]
