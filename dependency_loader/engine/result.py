# Path: dependency_loader/engine/result.py
"""
Dependency Loader Result Objects

Type-safe, structured results for fetch and resolution operations.

Architecture:
- DownloadResult: Single file download from one URL
- VerificationResult: Checksum verification of a downloaded binary
- FetchResult: Binary + descriptor pair of one coordinate
- ResolutionReport: Terminal state of one resolved coordinate
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class ResolutionState(Enum):
    """Lifecycle of one coordinate inside the orchestrator."""
    PENDING = 'pending'
    FETCHING = 'fetching'
    FETCHED = 'fetched'
    FAILED = 'failed'
    EXPANDING = 'expanding'
    ALL_CHILDREN_DONE = 'all_children_done'


@dataclass
class DownloadResult:
    """
    Result of a single file download operation.

    Attributes:
        success: Whether download succeeded
        url: Source URL
        file_path: Path where file was downloaded
        file_size: Size of downloaded file in bytes
        duration: Download duration in seconds
        error_message: Error message if failed
        status_code: HTTP status code
        chunks_downloaded: Number of chunks downloaded
    """
    success: bool
    url: str = ''
    file_path: Optional[Path] = None
    file_size: int = 0
    duration: float = 0.0
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    chunks_downloaded: int = 0

    @property
    def download_speed_mbps(self) -> float:
        """Calculate download speed in MB/s."""
        if self.duration > 0 and self.file_size > 0:
            mb = self.file_size / (1024 * 1024)
            return mb / self.duration
        return 0.0


@dataclass
class VerificationResult:
    """
    Result of a checksum verification.

    Attributes:
        valid: Whether the file may be kept
        file_path: Verified file
        expected: Published checksum (None if none was served)
        actual: Checksum computed from the local file
        skipped: Verification did not apply or no checksum was available
        error_message: Reason the file was rejected
    """
    valid: bool
    file_path: Optional[Path] = None
    expected: Optional[str] = None
    actual: Optional[str] = None
    skipped: bool = False
    error_message: Optional[str] = None


@dataclass
class FetchResult:
    """
    Local binary and descriptor of a fetched coordinate.

    Attributes:
        binary_path: Local .jar path
        descriptor_path: Local .pom path
        cached: Served from local storage without network access
        resolved_version: Timestamped version for snapshots
    """
    binary_path: Path
    descriptor_path: Path
    cached: bool = False
    resolved_version: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return {
            'binary_path': str(self.binary_path),
            'descriptor_path': str(self.descriptor_path),
            'cached': self.cached,
            'resolved_version': self.resolved_version,
        }


@dataclass
class ResolutionReport:
    """
    Terminal record of one coordinate resolution.

    Attributes:
        gav: group:artifact:version of the coordinate
        name: Coordinate label
        depth: Distance from the root request
        state: Final ResolutionState
        children: Number of children dispatched
        fetch: FetchResult when the fetch succeeded
    """
    gav: str
    name: str
    depth: int = 0
    state: ResolutionState = ResolutionState.PENDING
    children: int = 0
    fetch: Optional[FetchResult] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        return self.state is not ResolutionState.FAILED and self.fetch is not None

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return {
            'gav': self.gav,
            'name': self.name,
            'depth': self.depth,
            'state': self.state.value,
            'children': self.children,
            'fetch': self.fetch.to_dict() if self.fetch else None,
            'timestamp': self.timestamp.isoformat(),
        }


__all__ = [
    'ResolutionState',
    'DownloadResult',
    'VerificationResult',
    'FetchResult',
    'ResolutionReport',
]
