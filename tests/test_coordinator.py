"""
Tests for recursive resolution and exactly-once completion.
"""

import asyncio
import random

import pytest
import pytest_asyncio

from conftest import make_metadata, make_pom
from dependency_loader.engine.classpath import ClasspathLoader
from dependency_loader.engine.coordinator import DependencyLoader, block_arrow
from dependency_loader.engine.result import FetchResult, ResolutionState
from dependency_loader.models.coordinate import Coordinate

TERMINAL = (ResolutionState.FAILED, ResolutionState.ALL_CHILDREN_DONE)


class FakeFetcher:
    """Serves descriptors from an in-memory tree, in random completion order."""

    def __init__(self, tree=None, failing=()):
        self.tree = tree or {}
        self.failing = set(failing)
        self.fetched = []

    async def fetch_pair(self, coordinate, folder):
        await asyncio.sleep(random.random() / 1000)
        self.fetched.append(coordinate.gav)

        if coordinate.gav in self.failing:
            return None

        folder.mkdir(parents=True, exist_ok=True)
        jar = folder / coordinate.jar_name
        jar.write_bytes(coordinate.gav.encode('utf-8'))

        pom = folder / coordinate.pom_name
        children = [(g, a, v, 'runtime') for g, a, v in self.tree.get(coordinate.gav, [])]
        pom.write_text(make_pom(coordinate.group, coordinate.artifact, coordinate.version, children))

        return FetchResult(binary_path=jar, descriptor_path=pom)

    async def close(self):
        pass


class Completion:
    """when_done callback recording how often, and with what registry size, it ran."""

    def __init__(self, loader=None):
        self.loader = loader
        self.calls = 0
        self.registered_at_call = None
        self.unfinished_at_call = None

    def __call__(self):
        self.calls += 1
        if self.loader is not None:
            self.registered_at_call = len(self.loader.context.registry)
            self.unfinished_at_call = [
                report.gav for report in self.loader.reports() if report.state not in TERMINAL
            ]


def root() -> Coordinate:
    return Coordinate.create('Root', '1.0', 'org.example', 'root')


@pytest_asyncio.fixture
async def loader(context):
    loader = DependencyLoader(context)
    yield loader
    await loader.close()


class TestResolutionAgainstRepository:

    @pytest.mark.asyncio
    async def test_leaf_completes_once(self, loader, repository):
        repository.add_artifact('org.example', 'root', '1.0')
        done = Completion()

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert loader.get('root') == root()
        assert loader.get('ROOT') is not None

    @pytest.mark.asyncio
    async def test_transitive_tree_loaded(self, loader, repository):
        repository.add_artifact('org.example', 'root', '1.0', dependencies=[
            ('org.example', 'a', '1.0', 'runtime'),
            ('org.example', 'b', '1.0', 'provided'),
            ('org.example', 'skipped', '1.0', 'test'),
        ])
        repository.add_artifact('org.example', 'a', '1.0', dependencies=[
            ('org.example', 'c', '1.0', 'runtime'),
        ])
        repository.add_artifact('org.example', 'b', '1.0')
        repository.add_artifact('org.example', 'c', '1.0')

        assert await loader.load_and_wait(root())

        assert loader.get('org.example:a:1.0') is not None
        assert loader.get('org.example:b:1.0') is not None
        assert loader.get('org.example:c:1.0').depth() == 2
        assert loader.get('org.example:skipped:1.0') is None
        assert repository.count('skipped-1.0.pom') == 0
        assert len(loader.context.classpath.entries()) == 4

    @pytest.mark.asyncio
    async def test_failed_child_does_not_block_parent(self, loader, repository):
        repository.add_artifact('org.example', 'root', '1.0', dependencies=[
            ('org.example', 'present', '1.0', 'runtime'),
            ('org.example', 'absent', '1.0', 'runtime'),
        ])
        repository.add_artifact('org.example', 'present', '1.0')
        done = Completion()

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert loader.get('root') is not None
        assert loader.get('org.example:present:1.0') is not None
        assert loader.get('org.example:absent:1.0') is None

    @pytest.mark.asyncio
    async def test_failed_root_completes_vacuously(self, loader, repository):
        done = Completion()

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert loader.get('root') is None
        assert [report.state for report in loader.reports()] == [ResolutionState.FAILED]

    @pytest.mark.asyncio
    async def test_second_load_uses_cache(self, loader, repository):
        repository.add_artifact('org.example', 'root', '1.0', dependencies=[
            ('org.example', 'a', '1.0', 'runtime'),
        ])
        repository.add_artifact('org.example', 'a', '1.0')

        await loader.load_and_wait(root())
        jar_requests = repository.count('.jar')

        assert await loader.load_and_wait(root())

        assert repository.count('.jar') == jar_requests
        assert all(report.fetch.cached for report in loader.reports()[2:])

    @pytest.mark.asyncio
    async def test_shared_child_in_diamond(self, loader, repository):
        shared_jar = bytes(range(256)) * 8192
        repository.add_artifact('org.example', 'root', '1.0', dependencies=[
            ('org.example', 'a', '1.0', 'runtime'),
            ('org.example', 'b', '1.0', 'runtime'),
        ])
        for parent in ('a', 'b'):
            repository.add_artifact('org.example', parent, '1.0', dependencies=[
                ('org.example', 'shared', '1.0', 'runtime'),
            ])
        repository.add_artifact('org.example', 'shared', '1.0', jar=shared_jar)
        repository.chunk_delay = 0.001

        assert await loader.load_and_wait(root())

        shared = [r for r in loader.reports() if r.gav == 'org.example:shared:1.0']
        assert len(shared) == 2
        assert all(r.state is ResolutionState.ALL_CHILDREN_DONE for r in loader.reports())
        assert repository.count('shared-1.0.jar') == 1
        assert loader.get('org.example:shared:1.0') is not None
        assert len(loader.context.classpath.entries()) == 4

    @pytest.mark.asyncio
    async def test_snapshot_siblings_in_one_group(self, loader, repository):
        builds = {'liba': ('20240101.120000', 3), 'libb': ('20240305.090000', 7)}
        repository.add_artifact('org.example', 'root', '1.0', dependencies=[
            ('org.example', artifact, '1.0-SNAPSHOT', 'runtime') for artifact in builds
        ])
        for artifact, (timestamp, build_number) in builds.items():
            repository.put(
                f'org/example/{artifact}/1.0-SNAPSHOT/maven-metadata.xml',
                make_metadata(timestamp, build_number),
            )
            repository.add_artifact(
                'org.example', artifact, '1.0-SNAPSHOT',
                file_version=f'1.0-{timestamp}-{build_number}',
            )
        repository.chunk_delay = 0.01

        assert await loader.load_and_wait(root())

        assert all(r.state is ResolutionState.ALL_CHILDREN_DONE for r in loader.reports())
        resolved = {r.name: r.fetch.resolved_version for r in loader.reports() if r.fetch.resolved_version}
        assert resolved == {
            'org.example:liba:1.0-SNAPSHOT': '1.0-20240101.120000-3',
            'org.example:libb:1.0-SNAPSHOT': '1.0-20240305.090000-7',
        }
        assert loader.get('org.example:libb:1.0-SNAPSHOT') is not None

    @pytest.mark.asyncio
    async def test_load_declared(self, loader, repository):
        repository.add_artifact('org.example', 'root', '1.0')
        missing = Coordinate.create('Missing', '9.9', 'org.example', 'missing')

        results = await loader.load_declared([root(), missing])

        assert results == {'Root': True, 'Missing': False}


class TestFanOut:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("width", [0, 1, 5, 50])
    async def test_callback_fires_once_after_all_children(self, context, width):
        children = [('fan', f'child{i}', '1.0') for i in range(width)]
        fetcher = FakeFetcher(tree={'org.example:root:1.0': children})
        loader = DependencyLoader(context, fetcher=fetcher)
        done = Completion(loader)

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert done.registered_at_call == width + 1
        assert done.unfinished_at_call == []
        assert len(loader.reports()) == width + 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("width", [0, 1, 5, 50])
    @pytest.mark.parametrize("seed", range(3))
    async def test_callback_fires_once_with_failing_children(self, context, width, seed):
        rng = random.Random(seed)
        children = [('fan', f'child{i}', '1.0') for i in range(width)]
        failing = {f'{g}:{a}:{v}' for g, a, v in children if rng.random() < 0.5}
        fetcher = FakeFetcher(tree={'org.example:root:1.0': children}, failing=failing)
        loader = DependencyLoader(context, fetcher=fetcher)
        done = Completion(loader)

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert done.unfinished_at_call == []
        assert done.registered_at_call == width + 1 - len(failing)
        assert len(loader.reports()) == width + 1
        failed = {r.gav for r in loader.reports() if r.state is ResolutionState.FAILED}
        assert failed == failing

    @pytest.mark.asyncio
    async def test_descriptor_read_before_children_fetched(self, context):
        fetcher = FakeFetcher(tree={
            'org.example:root:1.0': [('g', 'a', '1'), ('g', 'b', '1')],
            'g:a:1': [('g', 'c', '1')],
        })
        loader = DependencyLoader(context, fetcher=fetcher)

        await loader.load_and_wait(root())

        assert fetcher.fetched[0] == 'org.example:root:1.0'
        assert fetcher.fetched.index('g:c:1') > fetcher.fetched.index('g:a:1')

    @pytest.mark.asyncio
    async def test_partial_failure_deep_in_tree(self, context):
        fetcher = FakeFetcher(
            tree={
                'org.example:root:1.0': [('g', 'a', '1'), ('g', 'b', '1')],
                'g:a:1': [('g', 'c', '1'), ('g', 'd', '1')],
            },
            failing={'g:c:1'},
        )
        loader = DependencyLoader(context, fetcher=fetcher)
        done = Completion(loader)

        loader.load(root(), done)
        await loader.wait_idle()

        assert done.calls == 1
        assert done.registered_at_call == 4
        assert loader.get('g:c:1') is None

    @pytest.mark.asyncio
    async def test_duplicates_resolved_independently(self, context):
        fetcher = FakeFetcher(tree={
            'org.example:root:1.0': [('g', 'a', '1'), ('g', 'b', '1')],
            'g:a:1': [('g', 'shared', '1')],
            'g:b:1': [('g', 'shared', '1')],
        })
        loader = DependencyLoader(context, fetcher=fetcher)

        await loader.load_and_wait(root())

        assert fetcher.fetched.count('g:shared:1') == 2
        assert len(loader.context.classpath.entries()) == 4

    @pytest.mark.asyncio
    async def test_callback_error_is_contained(self, context):
        loader = DependencyLoader(context, fetcher=FakeFetcher())

        def explode():
            raise RuntimeError("host callback failed")

        loader.load(root(), explode)
        await loader.wait_idle()

        assert loader.get('root') is not None


class TestDisabledLoader:

    @pytest.fixture
    def broken_context(self, context, tmp_path):
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')
        context.classpath = ClasspathLoader(blocker / 'classpath.txt')
        return context

    @pytest.mark.asyncio
    async def test_load_is_refused(self, broken_context):
        fetcher = FakeFetcher()
        loader = DependencyLoader(broken_context, fetcher=fetcher)
        done = Completion()

        assert not loader.working
        assert loader.load(root(), done) is None
        assert not await loader.load_and_wait(root())

        await loader.wait_idle()
        assert done.calls == 0
        assert fetcher.fetched == []


class TestTrace:

    def test_arrow_grows_with_depth(self):
        parent = root()
        child = Coordinate.create('child', '1.0', 'g', 'child')
        child.set_parent(parent)

        assert block_arrow(parent, 'v') == 'vvv'
        assert block_arrow(child, 'v') == 'v'
