# Path: dependency_loader/engine/validator.py
"""
Checksum Validator

Post-download verification of artifact binaries against the checksum
the repository publishes next to them.

Architecture:
- SHA-1 of the local file, hashed in chunks off the response path
- Published value fetched from <file url>.sha1
- Corrupted files deleted before anyone can load them
"""

import hashlib
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dependency_loader.core.logger import get_logger
from dependency_loader.engine.protocol_handlers import HTTPHandler
from dependency_loader.engine.stream_handler import ChunkIterator
from dependency_loader.engine.result import VerificationResult
from dependency_loader.constants import (
    BINARY_EXTENSION,
    CHECKSUM_EXTENSION,
    DEFAULT_CHUNK_SIZE,
    LOG_INPUT,
    LOG_OUTPUT,
)
from dependency_loader.engine.constants import VALID_URL_SCHEMES

logger = get_logger(__name__, 'engine')


def validate_url(url: str) -> bool:
    """
    Validate repository URL format.

    Args:
        url: URL to validate

    Returns:
        True if URL has an http(s) scheme and a host
    """
    parsed = urlparse(url)

    if not parsed.scheme or not parsed.netloc:
        logger.warning(f"Invalid URL format: {url}")
        return False

    if parsed.scheme not in VALID_URL_SCHEMES:
        logger.warning(f"URL must be HTTP/HTTPS: {url}")
        return False

    return True


async def compute_sha1(file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Compute the hex SHA-1 digest of a local file.

    Args:
        file_path: File to hash
        chunk_size: Read size in bytes

    Returns:
        Lowercase hex digest
    """
    digest = hashlib.sha1()

    async with ChunkIterator(file_path, chunk_size=chunk_size) as chunks:
        async for chunk in chunks:
            digest.update(chunk)

    return digest.hexdigest()


def parse_published_checksum(body: str) -> str:
    """
    Extract the digest from a published .sha1 body.

    Repositories serve either the bare digest or 'digest  filename'.
    """
    parts = body.strip().split()
    return parts[0] if parts else ''


class ChecksumValidator:
    """
    Verifies downloaded binaries against published SHA-1 checksums.

    Only binary artifacts are checked, and only when enforcement is
    enabled. A binary without a published checksum is kept.

    Example:
        validator = ChecksumValidator(http_handler, enforce=True)
        result = await validator.verify(jar_path, jar_url)
        if not result.valid:
            ...  # jar_path no longer exists
    """

    def __init__(self, http_handler: HTTPHandler, enforce: bool = True):
        """
        Initialize validator.

        Args:
            http_handler: Handler used to fetch published checksums
            enforce: Whether verification is enforced at all
        """
        self.http_handler = http_handler
        self.enforce = enforce

    def applies_to(self, file_path: Path) -> bool:
        return self.enforce and file_path.name.endswith(BINARY_EXTENSION)

    async def verify(self, file_path: Path, source_url: str) -> VerificationResult:
        """
        Verify a downloaded file against <source_url>.sha1.

        Args:
            file_path: Local copy of the downloaded file
            source_url: URL the file was downloaded from

        Returns:
            VerificationResult; on mismatch the file has been deleted
        """
        result = VerificationResult(valid=True, file_path=file_path)

        if not self.applies_to(file_path):
            result.skipped = True
            return result

        logger.debug(f"{LOG_INPUT} Verifying {file_path.name}")

        published: Optional[str] = await self.http_handler.fetch_text(source_url + CHECKSUM_EXTENSION)
        if published is None:
            logger.warning(f"{LOG_OUTPUT} No checksum published for {file_path.name}, keeping file")
            result.skipped = True
            return result

        result.expected = parse_published_checksum(published)
        result.actual = await compute_sha1(file_path)

        logger.debug(f"Repository SHA-1: {result.expected}")
        logger.debug(f"File SHA-1: {result.actual}")

        if result.expected != result.actual:
            file_path.unlink(missing_ok=True)
            result.valid = False
            result.error_message = f"Failed to validate downloaded file {file_path.name}"
            logger.error(
                f"{LOG_OUTPUT} {result.error_message}: expected {result.expected}, "
                f"got {result.actual}. File deleted"
            )
            return result

        logger.debug(f"{LOG_OUTPUT} File {file_path.name} passed validation")
        return result


__all__ = ['ChecksumValidator', 'compute_sha1', 'parse_published_checksum', 'validate_url']
