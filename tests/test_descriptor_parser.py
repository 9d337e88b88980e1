"""
Tests for descriptor and snapshot metadata parsing.
"""

import pytest

from conftest import make_metadata, make_pom
from dependency_loader.engine.descriptor_parser import DescriptorParser, ScopePolicy
from dependency_loader.models.coordinate import Coordinate


@pytest.fixture
def parser():
    return DescriptorParser()


@pytest.fixture
def owner():
    return Coordinate.create('owner', '1.0', 'org.example', 'owner')


def write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding='utf-8')
    return path


class TestReadDependencies:
    """Child coordinates extracted from a descriptor."""

    def test_only_accepted_scopes_become_children(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom('org.example', 'owner', '1.0', [
            ('a', 'x', '1', 'runtime'),
            ('b', 'y', '2', 'test'),
            ('c', 'z', '3', 'provided'),
            ('d', 'w', '4', 'compile'),
            ('e', 'v', '5', None),
        ]))

        children = parser.read_dependencies(pom, parent=owner)

        assert [child.gav for child in children] == ['a:x:1', 'c:z:3']
        assert [child.name for child in children] == ['a:x:1', 'c:z:3']
        assert all(child.parent is owner for child in children)
        assert all(child.depth() == 1 for child in children)

    def test_unscoped_followed_when_enabled(self, owner, tmp_path):
        parser = DescriptorParser(ScopePolicy(allowed=frozenset({'compile'}), include_unscoped=True))
        pom = write(tmp_path, 'owner-1.0.pom', make_pom('org.example', 'owner', '1.0', [
            ('a', 'x', '1', 'runtime'),
            ('b', 'y', '2', 'compile'),
            ('c', 'z', '3', None),
        ]))

        children = parser.read_dependencies(pom, parent=owner)

        assert [child.gav for child in children] == ['b:y:2', 'c:z:3']

    def test_property_version_is_substituted(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom(
            'org.example', 'owner', '1.0',
            [('org.slf4j', 'slf4j-api', '${slf4j.version}', 'runtime')],
            properties={'slf4j.version': '1.7.25'},
        ))

        children = parser.read_dependencies(pom, parent=owner)

        assert children[0].version == '1.7.25'
        assert children[0].gav == 'org.slf4j:slf4j-api:1.7.25'

    def test_project_version_property(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom(
            'org.example', 'owner', '1.0',
            [('org.example', 'sibling', '${project.version}', 'runtime')],
        ))

        children = parser.read_dependencies(pom, parent=owner)

        assert children[0].version == '1.0'

    def test_undefined_property_yields_empty_version(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom(
            'org.example', 'owner', '1.0',
            [('org.example', 'lib', '${missing.version}', 'runtime')],
        ))

        children = parser.read_dependencies(pom, parent=owner)

        assert len(children) == 1
        assert children[0].version == ''

    def test_optional_dependencies_skipped(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom('org.example', 'owner', '1.0', [
            ('a', 'x', '1', 'runtime', True),
            ('b', 'y', '2', 'runtime', False),
        ]))

        children = parser.read_dependencies(pom, parent=owner)

        assert [child.gav for child in children] == ['b:y:2']

    def test_descriptor_without_namespace(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom(
            'org.example', 'owner', '1.0', [('a', 'x', '1', 'runtime')], namespace=False
        ))

        assert [child.gav for child in parser.read_dependencies(pom, parent=owner)] == ['a:x:1']

    def test_no_dependencies(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', make_pom('org.example', 'owner', '1.0'))

        assert parser.read_dependencies(pom, parent=owner) == []

    def test_malformed_descriptor_has_no_children(self, parser, owner, tmp_path):
        pom = write(tmp_path, 'owner-1.0.pom', '<project><dependencies><dependency>')

        assert parser.read_dependencies(pom, parent=owner) == []

    def test_missing_descriptor_has_no_children(self, parser, owner, tmp_path):
        assert parser.read_dependencies(tmp_path / 'missing.pom', parent=owner) == []


class TestReadLatestSnapshotVersion:

    def test_timestamped_version(self, parser, tmp_path):
        snapshot = Coordinate.create('lib', '1.0-SNAPSHOT', 'org.example', 'lib')
        meta = write(tmp_path, 'meta.xml', make_metadata('20240101.120000', 3))

        latest = parser.read_latest_snapshot_version(snapshot, meta)

        assert latest == '1.0-20240101.120000-3'
        assert not meta.exists()

    def test_missing_snapshot_element(self, parser, tmp_path):
        snapshot = Coordinate.create('lib', '1.0-SNAPSHOT', 'org.example', 'lib')
        meta = write(tmp_path, 'meta.xml', '<metadata><versioning/></metadata>')

        assert parser.read_latest_snapshot_version(snapshot, meta) is None
        assert not meta.exists()

    def test_malformed_metadata(self, parser, tmp_path):
        snapshot = Coordinate.create('lib', '1.0-SNAPSHOT', 'org.example', 'lib')
        meta = write(tmp_path, 'meta.xml', 'not xml at all')

        assert parser.read_latest_snapshot_version(snapshot, meta) is None


class TestScopePolicy:

    def test_defaults(self):
        policy = ScopePolicy()

        assert policy.accepts('runtime')
        assert policy.accepts('provided')
        assert not policy.accepts('test')
        assert not policy.accepts('compile')
        assert not policy.accepts('')

    def test_from_config(self, config):
        policy = ScopePolicy.from_config(config)

        assert policy.allowed == frozenset({'provided', 'runtime'})
        assert not policy.include_unscoped
