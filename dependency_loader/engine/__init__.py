# Path: dependency_loader/engine/__init__.py
"""
Dependency Loader Engine Module

Fetch, verification and resolution components.

Architecture:
- HTTPHandler / StreamHandler: Streaming downloads with retries
- ChecksumValidator: SHA-1 verification of fetched binaries
- DescriptorParser: Child coordinates and snapshot versions from XML
- RepositoryList: Ordered fallback repositories
- DependencyRegistry / ClasspathLoader: What has been loaded
- CompletionCountdown: Exactly-once subtree completion

The orchestrator (engine.coordinator.DependencyLoader) and the fetch
layer (engine.fetcher.DependencyFetcher) depend on core.context and are
imported from their modules directly.
"""

from dependency_loader.engine.protocol_handlers import HTTPHandler, RetryableStatusError
from dependency_loader.engine.stream_handler import StreamHandler, ChunkIterator
from dependency_loader.engine.validator import ChecksumValidator, compute_sha1, validate_url
from dependency_loader.engine.descriptor_parser import DescriptorParser, ScopePolicy
from dependency_loader.engine.repository import RepositoryList
from dependency_loader.engine.registry import DependencyRegistry
from dependency_loader.engine.classpath import ClasspathLoader
from dependency_loader.engine.countdown import CompletionCountdown
from dependency_loader.engine.errors import (
    DependencyLoaderError,
    DownloadError,
    VerificationError,
    SnapshotResolutionError,
    ClasspathUnavailableError,
)
from dependency_loader.engine.result import (
    ResolutionState,
    DownloadResult,
    VerificationResult,
    FetchResult,
    ResolutionReport,
)

__all__ = [
    # Protocol handlers
    'HTTPHandler',
    'RetryableStatusError',
    'StreamHandler',
    'ChunkIterator',

    # Verification and parsing
    'ChecksumValidator',
    'compute_sha1',
    'validate_url',
    'DescriptorParser',
    'ScopePolicy',

    # Resolution state
    'RepositoryList',
    'DependencyRegistry',
    'ClasspathLoader',
    'CompletionCountdown',

    # Errors
    'DependencyLoaderError',
    'DownloadError',
    'VerificationError',
    'SnapshotResolutionError',
    'ClasspathUnavailableError',

    # Result objects
    'ResolutionState',
    'DownloadResult',
    'VerificationResult',
    'FetchResult',
    'ResolutionReport',
]
