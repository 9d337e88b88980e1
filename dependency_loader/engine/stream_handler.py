# Path: dependency_loader/engine/stream_handler.py
"""
Stream Handler

Memory-efficient streaming of artifact downloads to disk.
Writes directly to disk without loading the entire artifact into memory.

Architecture:
- Chunk-based streaming (8KB default)
- Progress tracking
- Async I/O via aiofiles
"""

from pathlib import Path
from typing import Optional, AsyncIterator
import aiofiles

from dependency_loader.core.logger import get_logger
from dependency_loader.constants import (
    DEFAULT_CHUNK_SIZE,
    LOG_PROCESS,
)
from dependency_loader.engine.constants import PROGRESS_LOG_EVERY_CHUNKS

logger = get_logger(__name__, 'engine')


class StreamHandler:
    """
    Handles streaming download to disk.

    Example:
        handler = StreamHandler(chunk_size=8192)
        bytes_written = await handler.stream_to_file(
            response.content.iter_chunked(8192),
            Path('Dependencies/com.zaxxer/HikariCP-2.6.1.jar')
        )
    """

    def __init__(self, chunk_size: Optional[int] = None):
        """
        Initialize stream handler.

        Args:
            chunk_size: Size of chunks to read/write (bytes)
        """
        self.chunk_size = chunk_size if chunk_size is not None else DEFAULT_CHUNK_SIZE

        self.bytes_written = 0
        self.chunks_written = 0

    async def stream_to_file(
        self,
        response_stream: AsyncIterator[bytes],
        output_path: Path,
        total_size: Optional[int] = None
    ) -> int:
        """
        Stream response to file, replacing any previous content.

        Args:
            response_stream: Async iterator of byte chunks
            output_path: Path where file will be written
            total_size: Total expected size (for progress)

        Returns:
            Total bytes written
        """
        logger.debug(f"{LOG_PROCESS} Streaming to: {output_path.name}")

        self.bytes_written = 0
        self.chunks_written = 0

        output_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(output_path, 'wb') as f:
            async for chunk in response_stream:
                if not chunk:
                    continue

                await f.write(chunk)
                self.bytes_written += len(chunk)
                self.chunks_written += 1

                if self.chunks_written % PROGRESS_LOG_EVERY_CHUNKS == 0:
                    if total_size:
                        progress = (self.bytes_written / total_size) * 100
                        logger.debug(
                            f"{LOG_PROCESS} Progress: {progress:.1f}% "
                            f"({self.bytes_written}/{total_size} bytes)"
                        )
                    else:
                        logger.debug(f"{LOG_PROCESS} Downloaded: {self.bytes_written} bytes")

        logger.debug(
            f"{LOG_PROCESS} Stream complete: {self.bytes_written} bytes "
            f"in {self.chunks_written} chunks"
        )

        return self.bytes_written

    def get_progress(self, total_size: Optional[int] = None) -> dict:
        """
        Get current progress statistics.

        Args:
            total_size: Total expected size (optional)

        Returns:
            Dictionary with progress stats
        """
        progress = {
            'bytes_written': self.bytes_written,
            'chunks_written': self.chunks_written,
            'mb_written': self.bytes_written / (1024 * 1024),
        }

        if total_size:
            progress['percent_complete'] = (self.bytes_written / total_size) * 100
            progress['bytes_remaining'] = total_size - self.bytes_written

        return progress


class ChunkIterator:
    """
    Async iterator for reading a local file in chunks.

    Used to hash downloaded artifacts without blocking the event loop.

    Example:
        async with ChunkIterator(jar_path) as chunks:
            async for chunk in chunks:
                digest.update(chunk)
    """

    def __init__(self, file_path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize chunk iterator.

        Args:
            file_path: Path to file to read
            chunk_size: Size of chunks to read
        """
        self.file_path = file_path
        self.chunk_size = chunk_size
        self._file_handle = None

    async def __aenter__(self):
        self._file_handle = await aiofiles.open(self.file_path, 'rb')
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._file_handle:
            await self._file_handle.close()
            self._file_handle = None

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if not self._file_handle:
            raise RuntimeError("File not opened. Use async context manager.")

        chunk = await self._file_handle.read(self.chunk_size)

        if not chunk:
            raise StopAsyncIteration

        return chunk


__all__ = ['StreamHandler', 'ChunkIterator']
