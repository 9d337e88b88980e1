# Path: dependency_loader/engine/protocol_handlers.py
"""
Protocol Handlers

HTTP/HTTPS handler for repository downloads with streaming support.
Handles headers, timeouts, retries and connection management.

Architecture:
- Async HTTP client (aiohttp) with a shared session
- Streaming to a .part file, renamed into place on success
- Exponential backoff on transient failures (tenacity)
- Bounded concurrency across every resolution branch
"""

import asyncio
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from dependency_loader.core.logger import get_logger
from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.engine.stream_handler import StreamHandler
from dependency_loader.engine.result import DownloadResult
from dependency_loader.constants import (
    LOADER_VERSION,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_MAX_RETRY_DELAY,
    DEFAULT_MAX_CONCURRENT,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)
from dependency_loader.engine.constants import (
    HTTP_OK,
    RETRYABLE_STATUS_CODES,
    FORCE_CLOSE_CONNECTIONS,
    DEFAULT_ACCEPT_HEADER,
    DEFAULT_ACCEPT_ENCODING,
    HEADER_USER_AGENT,
    HEADER_ACCEPT,
    HEADER_ACCEPT_ENCODING,
)

logger = get_logger(__name__, 'engine')

PART_SUFFIX = '.part'


class RetryableStatusError(Exception):
    """Server answered with a status worth retrying (429, 5xx)."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"HTTP {status}")


RETRYABLE_EXCEPTIONS = (aiohttp.ClientError, asyncio.TimeoutError, RetryableStatusError)


class HTTPHandler:
    """
    HTTP/HTTPS download handler with streaming.

    Features:
    - Async HTTP with aiohttp
    - Streaming to disk (memory-efficient)
    - Retries with exponential backoff
    - Semaphore-bounded outbound requests

    Example:
        async with HTTPHandler(config) as handler:
            result = await handler.download(
                url='https://repo1.maven.org/maven2/com/zaxxer/HikariCP/2.6.1/HikariCP-2.6.1.jar',
                output_path=Path('Dependencies/com.zaxxer/HikariCP-2.6.1.jar')
            )
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize HTTP handler.

        Args:
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()

        self.chunk_size = self.config.get('chunk_size', DEFAULT_CHUNK_SIZE)
        self.timeout = self.config.get('request_timeout', DEFAULT_TIMEOUT)
        self.connect_timeout = self.config.get('connect_timeout', DEFAULT_CONNECT_TIMEOUT)
        self.retry_attempts = max(1, self.config.get('retry_attempts', DEFAULT_RETRY_ATTEMPTS))
        self.retry_delay = self.config.get('retry_delay', DEFAULT_RETRY_DELAY)
        self.max_retry_delay = self.config.get('max_retry_delay', DEFAULT_MAX_RETRY_DELAY)
        self.max_concurrent = max(1, self.config.get('max_concurrent', DEFAULT_MAX_CONCURRENT))
        self.user_agent = self.config.get('user_agent') or f'dependency-loader/{LOADER_VERSION}'

        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._session: Optional[aiohttp.ClientSession] = None

    async def download(self, url: str, output_path: Path) -> DownloadResult:
        """
        Download file from URL to local path.

        The body is streamed into a temporary file private to this call and
        only appears at output_path once fully received. Concurrent downloads
        of the same destination never share a temporary file, and a failed
        download leaves any previous file untouched.

        Args:
            url: Source URL
            output_path: Destination path

        Returns:
            DownloadResult with download statistics
        """
        logger.debug(f"{LOG_INPUT} Downloading: {url}")

        start_time = time.time()
        result = DownloadResult(success=False, url=url, file_path=output_path)
        part_path: Optional[Path] = None

        try:
            part_path = self._create_part_file(output_path)
            status, bytes_written, chunks = await self._retrying(
                self._download_once, url, part_path
            )
            result.status_code = status
            result.duration = time.time() - start_time

            if status != HTTP_OK:
                result.error_message = f"HTTP {status}"
                logger.debug(f"{LOG_OUTPUT} HTTP {status} for {url}")
                return result

            os.replace(part_path, output_path)

            result.success = True
            result.file_size = bytes_written
            result.chunks_downloaded = chunks

            logger.debug(
                f"{LOG_OUTPUT} Download complete: {bytes_written} bytes "
                f"in {result.duration:.2f}s "
                f"({result.download_speed_mbps:.2f} MB/s)"
            )

        except RetryableStatusError as e:
            result.status_code = e.status
            result.error_message = str(e)
            result.duration = time.time() - start_time
            logger.warning(f"{LOG_OUTPUT} Server error after retries: {url} ({e})")

        except asyncio.TimeoutError as e:
            result.error_message = f"Timeout: {e}"
            result.duration = time.time() - start_time
            logger.warning(f"{LOG_OUTPUT} Download timeout: {url}")

        except aiohttp.ClientError as e:
            result.error_message = f"HTTP error: {e}"
            result.duration = time.time() - start_time
            logger.warning(f"{LOG_OUTPUT} Download failed: {url} ({e})")

        except OSError as e:
            result.error_message = f"I/O error: {e}"
            result.duration = time.time() - start_time
            logger.error(f"{LOG_OUTPUT} Could not write {output_path}: {e}")

        finally:
            if part_path is not None:
                part_path.unlink(missing_ok=True)

        return result

    async def fetch_text(self, url: str) -> Optional[str]:
        """
        Fetch a small text resource such as a published checksum.

        Args:
            url: Resource URL

        Returns:
            Response body, or None if the resource is unavailable
        """
        logger.debug(f"{LOG_INPUT} Fetching text: {url}")

        try:
            status, body = await self._retrying(self._fetch_text_once, url)
        except RETRYABLE_EXCEPTIONS as e:
            logger.warning(f"{LOG_OUTPUT} Could not fetch {url}: {e}")
            return None

        if status != HTTP_OK:
            logger.debug(f"{LOG_OUTPUT} HTTP {status} for {url}")
            return None

        return body

    async def _download_once(self, url: str, part_path: Path) -> tuple[int, int, int]:
        """Single GET attempt streaming the body into part_path."""
        session = await self._get_session()

        async with self._semaphore:
            async with session.get(url, headers=self._build_headers(), timeout=self._client_timeout()) as response:
                if response.status in RETRYABLE_STATUS_CODES:
                    raise RetryableStatusError(response.status)

                if response.status != HTTP_OK:
                    return response.status, 0, 0

                total_size = response.content_length
                if total_size:
                    logger.debug(f"{LOG_PROCESS} File size: {total_size} bytes")

                stream_handler = StreamHandler(chunk_size=self.chunk_size)
                bytes_written = await stream_handler.stream_to_file(
                    response_stream=response.content.iter_chunked(self.chunk_size),
                    output_path=part_path,
                    total_size=total_size,
                )

                return response.status, bytes_written, stream_handler.chunks_written

    @staticmethod
    def _create_part_file(output_path: Path) -> Path:
        """Create an empty, uniquely named .part file beside output_path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(
            dir=output_path.parent,
            prefix=output_path.name + '.',
            suffix=PART_SUFFIX,
        )
        os.close(fd)
        return Path(name)

    async def _fetch_text_once(self, url: str) -> tuple[int, Optional[str]]:
        """Single GET attempt reading the body as text."""
        session = await self._get_session()

        async with self._semaphore:
            async with session.get(url, headers=self._build_headers(), timeout=self._client_timeout()) as response:
                if response.status in RETRYABLE_STATUS_CODES:
                    raise RetryableStatusError(response.status)

                if response.status != HTTP_OK:
                    return response.status, None

                return response.status, await response.text()

    async def _retrying(self, operation, *args):
        """Run operation with exponential backoff on transient failures."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_delay, max=self.max_retry_delay),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
            before_sleep=self._log_retry,
            reraise=True,
        )
        return await retrying(operation, *args)

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{LOG_PROCESS} Attempt {retry_state.attempt_number} failed: {error}. "
            f"Retrying in {delay:.1f}s..."
        )

    def _client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.timeout, connect=self.connect_timeout)

    def _build_headers(self) -> dict[str, str]:
        """
        Build HTTP request headers.

        Returns:
            Dictionary of headers
        """
        return {
            HEADER_USER_AGENT: self.user_agent,
            HEADER_ACCEPT: DEFAULT_ACCEPT_HEADER,
            HEADER_ACCEPT_ENCODING: DEFAULT_ACCEPT_ENCODING,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """
        Get or create aiohttp session.

        Returns:
            ClientSession instance
        """
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_concurrent,
                force_close=FORCE_CLOSE_CONNECTIONS
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._client_timeout()
            )

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


__all__ = ['HTTPHandler', 'RetryableStatusError']
