# Path: dependency_loader/engine/fetcher.py
"""
Dependency Fetcher

Fetch layer of the resolver: brings a coordinate's binary and descriptor
onto local storage.

Workflow (fetch_pair):
1. Compute local binary/descriptor paths under the group folder
2. Cached release -> done without network access
3. Snapshot -> metadata, timestamped file names, marker short-circuit
4. Descriptor, then binary, from the custom repository or the fallbacks
5. Binary verified against its published SHA-1
Any failure is logged and reported as None; nothing is raised.
"""

import asyncio
import re
from pathlib import Path
from typing import Optional

from dependency_loader.core.context import LoaderContext
from dependency_loader.core.logger import get_logger
from dependency_loader.engine.descriptor_parser import DescriptorParser
from dependency_loader.engine.errors import (
    DependencyLoaderError,
    DownloadError,
    SnapshotResolutionError,
    VerificationError,
)
from dependency_loader.engine.protocol_handlers import HTTPHandler
from dependency_loader.engine.repository import (
    fix_url,
    get_jar_url,
    get_meta_url,
    get_pom_url,
    get_snapshot_urls,
)
from dependency_loader.engine.result import FetchResult
from dependency_loader.engine.validator import ChecksumValidator
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import (
    METADATA_LOCAL_NAME,
    SNAPSHOT_TOKEN,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

# <timestamp>-<buildNumber> as published in maven-metadata.xml
SNAPSHOT_BUILD_PATTERN = r'\d{8}\.\d{6}-\d+'


class DependencyFetcher:
    """
    Downloads and verifies the files of one coordinate.

    Example:
        fetcher = DependencyFetcher(context)
        fetched = await fetcher.fetch_pair(coordinate, context.group_folder(coordinate))
        if fetched is not None:
            fetched.binary_path, fetched.descriptor_path
        await fetcher.close()
    """

    def __init__(
        self,
        context: LoaderContext,
        http_handler: Optional[HTTPHandler] = None,
        parser: Optional[DescriptorParser] = None
    ):
        """
        Initialize dependency fetcher.

        Args:
            context: Owning loader context
            http_handler: Optional HTTPHandler (created from context config if None)
            parser: Optional DescriptorParser used for snapshot metadata
        """
        self.context = context
        self.http_handler = http_handler if http_handler else HTTPHandler(context.config)
        self.parser = parser if parser else DescriptorParser(context.scope_policy)
        self.validator = ChecksumValidator(self.http_handler, enforce=context.enforce_file_check)
        self._locks: dict[Path, asyncio.Lock] = {}

    async def fetch_pair(self, coordinate: Coordinate, folder: Path) -> Optional[FetchResult]:
        """
        Make the coordinate's binary and descriptor available locally.

        Fetches of the same destination are serialized; a duplicate waits for
        the first and is then served from local storage.

        Args:
            coordinate: Coordinate to fetch
            folder: Destination directory

        Returns:
            FetchResult with both local paths, or None if the fetch failed
        """
        jar_file = folder / coordinate.jar_name
        lock = self._locks.setdefault(jar_file, asyncio.Lock())

        async with lock:
            return await self._fetch_pair(coordinate, folder, jar_file)

    async def _fetch_pair(self, coordinate: Coordinate, folder: Path, jar_file: Path) -> Optional[FetchResult]:
        pom_file = folder / coordinate.pom_name
        always_refetch = coordinate.options.always_refetch

        if jar_file.exists() and not coordinate.is_snapshot and not always_refetch:
            logger.debug(f"{LOG_OUTPUT} {coordinate.jar_name} already present, skipping download")
            return FetchResult(binary_path=jar_file, descriptor_path=pom_file, cached=True)

        logger.info(f"{LOG_INPUT} Fetching {coordinate.gav}")

        try:
            folder.mkdir(parents=True, exist_ok=True)
            custom_repository = coordinate.options.custom_repository
            resolved_version = None
            marker_file = None

            if coordinate.is_snapshot:
                meta_file = folder / f"{coordinate.artifact}-{coordinate.version}-{METADATA_LOCAL_NAME}"
                meta_url = get_meta_url(coordinate)
                if not await self.try_download(meta_url, meta_file, custom_repository):
                    raise DownloadError(meta_url)

                resolved_version = self.parser.read_latest_snapshot_version(coordinate, meta_file)
                if resolved_version is None:
                    raise SnapshotResolutionError(f"No snapshot build found for {coordinate.gav}")

                latest_file_name = f"{coordinate.artifact}-{resolved_version}"
                marker_file = folder / latest_file_name

                if marker_file.exists() and jar_file.exists() and not always_refetch:
                    logger.debug(f"{LOG_OUTPUT} Snapshot {latest_file_name} already resolved")
                    return FetchResult(
                        binary_path=jar_file,
                        descriptor_path=pom_file,
                        cached=True,
                        resolved_version=resolved_version,
                    )

                pom_file.unlink(missing_ok=True)
                jar_file.unlink(missing_ok=True)
                self._remove_stale_markers(coordinate, folder)

                jar_url, pom_url = get_snapshot_urls(coordinate, latest_file_name)
            else:
                pom_url = get_pom_url(coordinate)
                jar_url = get_jar_url(coordinate)

            if not await self.try_download(pom_url, pom_file, custom_repository):
                raise DownloadError(pom_url)

            if not await self.try_download(jar_url, jar_file, custom_repository):
                raise DownloadError(jar_url)

            if marker_file is not None:
                marker_file.touch()

            logger.info(f"{LOG_OUTPUT} Fetched {coordinate.gav}")
            return FetchResult(
                binary_path=jar_file,
                descriptor_path=pom_file,
                cached=False,
                resolved_version=resolved_version,
            )

        except DependencyLoaderError as e:
            logger.error(f"Failed to download dependency {coordinate.name}: {e}")

        except Exception as e:
            logger.error(f"Failed to download dependency {coordinate.name}: {e}", exc_info=True)

        return None

    async def try_download(
        self,
        remote_path: str,
        destination: Path,
        custom_repository: str = ''
    ) -> bool:
        """
        Download one file, from the custom repository or the fallback list.

        Args:
            remote_path: Path relative to a repository base URL
            destination: Local file to create
            custom_repository: Exclusive repository base URL ('' = fallbacks)

        Returns:
            True if destination now holds a verified copy

        Raises:
            DownloadError: If the custom repository does not serve the file
            VerificationError: If the downloaded file failed its checksum
        """
        logger.debug(f"{LOG_PROCESS} Attempting to download {remote_path}")

        if custom_repository:
            url = fix_url(custom_repository) + remote_path
            result = await self.http_handler.download(url, destination)
            if not result.success:
                raise DownloadError(remote_path, f"Failed to download {url}: {result.error_message}")
            return await self.verify_and_store(url, destination)

        for repository in self.context.repositories:
            url = repository + remote_path
            logger.debug(f"URL is '{url}'")

            result = await self.http_handler.download(url, destination)
            if not result.success:
                logger.warning(f"Failed to download from repo '{repository}' ({result.error_message})")
                continue

            return await self.verify_and_store(url, destination)

        logger.error(f"Failed to download {remote_path}")
        return False

    async def verify_and_store(self, source_url: str, destination: Path) -> bool:
        """
        Keep a freshly downloaded file only if it passes verification.

        A rejected file is not retried from another repository.

        Args:
            source_url: URL the file came from
            destination: Downloaded file

        Returns:
            True if the file is kept

        Raises:
            VerificationError: If the file was rejected and deleted
        """
        verification = await self.validator.verify(destination, source_url)
        if not verification.valid:
            raise VerificationError(verification.error_message)
        return destination.exists()

    def _remove_stale_markers(self, coordinate: Coordinate, folder: Path) -> None:
        """Delete markers of older builds of the same snapshot."""
        prefix = f"{coordinate.artifact}-{coordinate.version.replace(SNAPSHOT_TOKEN, '')}"
        pattern = re.compile(re.escape(prefix) + SNAPSHOT_BUILD_PATTERN)

        for candidate in folder.iterdir():
            if candidate.is_file() and pattern.fullmatch(candidate.name):
                logger.debug(f"Removing stale snapshot marker {candidate.name}")
                candidate.unlink(missing_ok=True)

    async def close(self):
        """Close the underlying HTTP session."""
        await self.http_handler.close()


__all__ = ['DependencyFetcher']
