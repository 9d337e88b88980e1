"""
Shared fixtures: isolated configuration and a fake Maven repository
served over HTTP by aiohttp's TestServer.
"""

import asyncio
import hashlib
import os
from collections import Counter
from typing import Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.core.context import LoaderContext
from dependency_loader.engine.repository import RepositoryList


def make_pom(group: str, artifact: str, version: str, dependencies=(), properties=None, namespace=True) -> str:
    """
    Build a descriptor document.

    dependencies: iterable of (group, artifact, version, scope) or
    (group, artifact, version, scope, optional); scope None omits the element.
    """
    blocks = []
    for dependency in dependencies:
        dep_group, dep_artifact, dep_version, scope = dependency[:4]
        optional = dependency[4] if len(dependency) > 4 else None
        lines = [
            "    <dependency>",
            f"      <groupId>{dep_group}</groupId>",
            f"      <artifactId>{dep_artifact}</artifactId>",
            f"      <version>{dep_version}</version>",
        ]
        if scope is not None:
            lines.append(f"      <scope>{scope}</scope>")
        if optional is not None:
            lines.append(f"      <optional>{str(optional).lower()}</optional>")
        lines.append("    </dependency>")
        blocks.append("\n".join(lines))

    props = ""
    if properties:
        props = "  <properties>\n" + "\n".join(
            f"    <{key}>{value}</{key}>" for key, value in properties.items()
        ) + "\n  </properties>\n"

    xmlns = ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespace else ''
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<project{xmlns}>\n"
        "  <modelVersion>4.0.0</modelVersion>\n"
        f"  <groupId>{group}</groupId>\n"
        f"  <artifactId>{artifact}</artifactId>\n"
        f"  <version>{version}</version>\n"
        f"{props}"
        "  <dependencies>\n"
        + "\n".join(blocks) +
        "\n  </dependencies>\n"
        "</project>\n"
    )


def make_metadata(timestamp: str, build_number: int) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<metadata>\n"
        "  <versioning>\n"
        "    <snapshot>\n"
        f"      <timestamp>{timestamp}</timestamp>\n"
        f"      <buildNumber>{build_number}</buildNumber>\n"
        "    </snapshot>\n"
        "  </versioning>\n"
        "</metadata>\n"
    )


class FakeRepository:
    """
    In-memory Maven repository layout with per-path request counters.

    chunk_delay > 0 streams bodies in small chunks with a pause between
    them, so concurrent downloads overlap.
    """

    STREAM_CHUNK = 16 * 1024

    def __init__(self):
        self.chunk_delay = 0.0
        self.files: dict[str, bytes] = {}
        self.requests: Counter = Counter()
        self.server: Optional[TestServer] = None

    @property
    def url(self) -> str:
        return str(self.server.make_url('/'))

    def put(self, path: str, content) -> None:
        if isinstance(content, str):
            content = content.encode('utf-8')
        self.files[path] = content

    def add_artifact(
        self,
        group: str,
        artifact: str,
        version: str,
        dependencies=(),
        jar: Optional[bytes] = None,
        checksum: bool = True,
        bad_checksum: bool = False,
        pom: Optional[str] = None,
        file_version: Optional[str] = None,
    ) -> str:
        """
        Publish descriptor, binary and checksum; returns the directory path.

        file_version: version used in file names (timestamped snapshots).
        """
        base = f"{group.replace('.', '/')}/{artifact}/{version}/"
        stem = f"{artifact}-{file_version or version}"
        jar = jar if jar is not None else f"binary of {group}:{artifact}:{version}".encode('utf-8')

        self.put(base + stem + '.pom', pom if pom is not None else make_pom(group, artifact, version, dependencies))
        self.put(base + stem + '.jar', jar)

        if checksum:
            digest = hashlib.sha1(b'tampered' if bad_checksum else jar).hexdigest()
            self.put(base + stem + '.jar.sha1', f"{digest}  {stem}.jar\n")

        return base

    def count(self, suffix: str) -> int:
        return sum(n for path, n in self.requests.items() if path.endswith(suffix))

    async def handle(self, request: web.Request) -> web.StreamResponse:
        path = request.match_info['path']
        self.requests[path] += 1

        if path not in self.files:
            return web.Response(status=404)

        if not self.chunk_delay:
            return web.Response(body=self.files[path])

        body = self.files[path]
        response = web.StreamResponse()
        response.content_length = len(body)
        await response.prepare(request)
        for offset in range(0, len(body), self.STREAM_CHUNK):
            await response.write(body[offset:offset + self.STREAM_CHUNK])
            await asyncio.sleep(self.chunk_delay)
        await response.write_eof()
        return response

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get('/{path:.*}', self.handle)
        self.server = TestServer(app)
        await self.server.start_server()

    async def close(self) -> None:
        if self.server is not None:
            await self.server.close()


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Configuration isolated from the developer's environment."""
    for key in list(os.environ):
        if key.startswith('DEPENDENCY_LOADER_'):
            monkeypatch.delenv(key)

    return ConfigLoader(
        env_file=tmp_path / '.env',
        overrides={
            'dependency_root': tmp_path / 'Dependencies',
            'retry_attempts': 1,
            'retry_delay': 0.0,
            'log_console': False,
        },
    )


@pytest_asyncio.fixture
async def repository():
    repo = FakeRepository()
    await repo.start()
    yield repo
    await repo.close()


@pytest_asyncio.fixture
async def mirror():
    """Second repository, used as a fallback."""
    repo = FakeRepository()
    await repo.start()
    yield repo
    await repo.close()


@pytest.fixture
def context(config, repository):
    """Loader context that only knows the fake repository."""
    ctx = LoaderContext.from_config(config)
    ctx.repositories = RepositoryList([repository.url])
    return ctx
