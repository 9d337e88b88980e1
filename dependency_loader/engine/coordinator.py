# Path: dependency_loader/engine/coordinator.py
"""
Dependency Loader Coordinator

Recursive resolution driver: fetch a coordinate, put its binary on the
classpath, parse its descriptor, resolve every child concurrently and
signal completion once the whole subtree is done.

Architecture:
- One asyncio task per coordinate, children fanned out without waiting
- CompletionCountdown per expanded node, fired exactly once
- Failed nodes complete vacuously so ancestors never wait forever
- All state reached through the owned LoaderContext
- IPO logging plus optional depth-arrow trace lines
"""

import asyncio
import threading
from typing import Callable, Iterable, Optional

from dependency_loader.core.context import LoaderContext
from dependency_loader.core.logger import get_logger
from dependency_loader.engine.countdown import CompletionCountdown
from dependency_loader.engine.descriptor_parser import DescriptorParser
from dependency_loader.engine.errors import ClasspathUnavailableError
from dependency_loader.engine.fetcher import DependencyFetcher
from dependency_loader.engine.result import FetchResult, ResolutionReport, ResolutionState
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import (
    LOADER_VERSION,
    BANNER_WIDTH,
    TRACE_WIDTH,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

Callback = Callable[[], None]


def block_bar(length: int) -> str:
    return '=' * length


def block_arrow(coordinate: Coordinate, symbol: str) -> str:
    """Depth-sized arrow for trace output; roots get three symbols."""
    generated = symbol * coordinate.depth()
    return generated if generated else symbol * 3


class DependencyLoader:
    """
    Loads dependencies, and everything they depend on, onto the classpath.

    load() must be called from inside a running event loop; it returns
    immediately and invokes when_done once the coordinate and all of its
    transitive children reached a terminal state.

    Example:
        async with DependencyLoader(LoaderContext.from_config()) as loader:
            hikari = Coordinate.create('HikariCP', '2.6.1', 'com.zaxxer', 'HikariCP')
            loader.load(hikari, lambda: print('HikariCP ready'))
            await loader.wait_idle()
            loader.get('hikaricp')
    """

    def __init__(
        self,
        context: Optional[LoaderContext] = None,
        fetcher: Optional[DependencyFetcher] = None,
        parser: Optional[DescriptorParser] = None
    ):
        """
        Initialize dependency loader.

        Args:
            context: Owned loader state (built from configuration if None)
            fetcher: Optional fetch layer (created from context if None)
            parser: Optional descriptor parser (created from context if None)
        """
        self.context = context if context else LoaderContext.from_config()
        self.parser = parser if parser else DescriptorParser(self.context.scope_policy)
        self.fetcher = fetcher if fetcher else DependencyFetcher(self.context, parser=self.parser)

        self._tasks: set[asyncio.Task] = set()
        self._reports: list[ResolutionReport] = []
        self._reports_lock = threading.Lock()

        self.working = self._initialize_classpath()

    def _initialize_classpath(self) -> bool:
        try:
            self.context.classpath.initialize()
            return True
        except ClasspathUnavailableError as e:
            logger.critical(f"Failed to initialize classpath, dependencies will not be loaded! {e}")
            return False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, coordinate: Coordinate, when_done: Optional[Callback] = None) -> Optional[asyncio.Task]:
        """
        Load a coordinate and its transitive dependencies.

        Args:
            coordinate: The dependency to load
            when_done: Invoked once after the whole subtree completed

        Returns:
            Task resolving the root, or None if the loader is disabled
        """
        if not self.working:
            logger.error(f"Dependency loader is disabled, not loading {coordinate.name}")
            return None

        logger.info(f"{LOG_INPUT} Loading {coordinate.name} ({coordinate.gav})")
        self._trace(' ', ' ', block_bar(TRACE_WIDTH), ' ', block_arrow(coordinate, 'v'))

        return self._spawn(coordinate, self._guard(coordinate, when_done))

    async def load_and_wait(self, coordinate: Coordinate) -> bool:
        """
        Load a coordinate and wait for its subtree to complete.

        Args:
            coordinate: The dependency to load

        Returns:
            True if the coordinate itself ended up registered
        """
        loop = asyncio.get_running_loop()
        done = loop.create_future()

        def finish():
            if not done.done():
                done.set_result(None)

        if self.load(coordinate, lambda: loop.call_soon_threadsafe(finish)) is None:
            return False

        await done
        return self.get(coordinate.name) is not None

    async def load_declared(self, coordinates: Iterable[Coordinate]) -> dict[str, bool]:
        """
        Load every declared root coordinate concurrently.

        Args:
            coordinates: Root coordinates, typically from the manifest

        Returns:
            Mapping of coordinate name to whether it was loaded
        """
        coordinates = list(coordinates)
        self.log_banner(len(coordinates))

        results: dict[str, bool] = {}

        async def load_one(coordinate: Coordinate):
            if self.context.registry.contains(coordinate):
                self._trace(f"Dependency {coordinate.name} has a duplicate")

            results[coordinate.name] = await self.load_and_wait(coordinate)
            self._trace(f"Loaded Dependency {coordinate.name} From Config")

        await asyncio.gather(*(load_one(coordinate) for coordinate in coordinates))

        loaded = sum(1 for ok in results.values() if ok)
        logger.info(f"{LOG_OUTPUT} Loaded {loaded}/{len(results)} declared dependencies")
        return results

    def get(self, name: str) -> Optional[Coordinate]:
        """
        Retrieve a loaded dependency by name.

        Args:
            name: Name of the dependency (case-insensitive)

        Returns:
            The Coordinate, or None if it has not been loaded
        """
        return self.context.registry.get(name)

    def reports(self) -> list[ResolutionReport]:
        """Resolution records of every coordinate seen so far."""
        with self._reports_lock:
            return list(self._reports)

    async def wait_idle(self) -> None:
        """Wait until no resolution task is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def log_banner(self, declared: int) -> None:
        lines = [
            block_bar(BANNER_WIDTH),
            '<  ',
            f"< Dependency Loader {LOADER_VERSION}",
            '<  ',
            f"< Showing Debug Messages? -> {self.context.show_debug}",
            f"< Enforcing File Check? -> {self.context.enforce_file_check}",
            f"< Repositories -> {len(self.context.repositories)}",
            f"< Dependencies In Config -> {declared}",
            '<  ',
            block_bar(BANNER_WIDTH),
        ]
        for line in lines:
            logger.info(line)

    async def close(self):
        """Wait for running resolutions and release network resources."""
        await self.wait_idle()
        await self.fetcher.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _spawn(self, coordinate: Coordinate, on_done: Callback) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(
            self._resolve(coordinate, on_done),
            name=f"resolve:{coordinate.gav}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _resolve(self, coordinate: Coordinate, on_done: Callback) -> None:
        """
        Resolve one coordinate and, through its children, its subtree.

        on_done is invoked exactly once on every path, including failures.
        """
        report = ResolutionReport(
            gav=coordinate.gav,
            name=coordinate.name,
            depth=coordinate.depth(),
            state=ResolutionState.FETCHING,
        )
        self._record(report)

        children: list[Coordinate] = []

        try:
            fetched = await self.fetcher.fetch_pair(coordinate, self.context.group_folder(coordinate))

            if fetched is None:
                report.state = ResolutionState.FAILED
            else:
                report.fetch = fetched
                report.state = ResolutionState.FETCHED
                self._load_binary(coordinate, fetched)

                self._trace(f"Loading child dependencies of {coordinate.name}")
                children = self.parser.read_dependencies(fetched.descriptor_path, parent=coordinate)

        except Exception as e:
            logger.error(f"Unexpected error while resolving {coordinate.gav}: {e}", exc_info=True)
            report.state = ResolutionState.FAILED

        if report.state is ResolutionState.FAILED:
            logger.warning(f"{LOG_OUTPUT} {coordinate.gav} could not be loaded, skipping its subtree")
            self._trace(block_arrow(coordinate, '^'), block_bar(TRACE_WIDTH), ' ', ' ')
            on_done()
            return

        if not children:
            report.state = ResolutionState.ALL_CHILDREN_DONE
            self._trace(
                f"No children found in {coordinate.name}",
                block_arrow(coordinate, '^'), block_bar(TRACE_WIDTH), ' ', ' '
            )
            on_done()
            return

        report.state = ResolutionState.EXPANDING
        report.children = len(children)
        logger.debug(f"{LOG_PROCESS} {coordinate.gav} has {len(children)} children")

        def children_done():
            report.state = ResolutionState.ALL_CHILDREN_DONE
            self._trace(
                f"Finished loading children from {coordinate.name}",
                block_arrow(coordinate, '^'), ' ', block_bar(TRACE_WIDTH), ' ', ' '
            )
            on_done()

        countdown = CompletionCountdown(len(children), children_done)

        for child in children:
            child.set_parent(coordinate)
            self._trace(' ', block_arrow(child, 'v'))
            self._spawn(child, countdown.count_down)

    def _load_binary(self, coordinate: Coordinate, fetched: FetchResult) -> None:
        """Put the binary on the classpath, then register the coordinate."""
        added = self.context.classpath.add(coordinate, fetched.binary_path)
        if added:
            self._trace(f"Added {fetched.binary_path.name} to classpath")

        self.context.registry.register(coordinate)

    def _record(self, report: ResolutionReport) -> None:
        with self._reports_lock:
            self._reports.append(report)

    def _guard(self, coordinate: Coordinate, when_done: Optional[Callback]) -> Callback:
        """Root completion: log, then run the caller's callback without letting it escape."""
        def run():
            logger.info(f"{LOG_OUTPUT} Finished loading {coordinate.name}")
            if when_done is None:
                return
            try:
                when_done()
            except Exception as e:
                logger.error(f"Completion callback of {coordinate.name} failed: {e}", exc_info=True)

        return run

    def _trace(self, *lines: str) -> None:
        """Verbose diagnostic lines, emitted only when show_debug is set."""
        if not self.context.show_debug:
            return
        for line in lines:
            logger.debug(line)


__all__ = ['DependencyLoader', 'block_arrow', 'block_bar']
