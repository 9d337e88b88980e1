"""
Tests for the Coordinate model.
"""

import pytest

from dependency_loader.models.coordinate import Coordinate, CoordinateOptions


class TestCoordinate:
    """Identity, derived names and parent links."""

    def test_equality_ignores_name(self):
        a = Coordinate.create('HikariCP', '2.6.1', 'com.zaxxer', 'HikariCP')
        b = Coordinate.create('com.zaxxer:HikariCP:2.6.1', '2.6.1', 'com.zaxxer', 'HikariCP')

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_different_version_is_different(self):
        a = Coordinate.create('hikari', '2.6.1', 'com.zaxxer', 'HikariCP')
        b = Coordinate.create('hikari', '2.6.2', 'com.zaxxer', 'HikariCP')

        assert a != b

    def test_file_names(self):
        hikari = Coordinate.create('HikariCP', '2.6.1', 'com.zaxxer', 'HikariCP')

        assert hikari.jar_name == 'HikariCP-2.6.1.jar'
        assert hikari.pom_name == 'HikariCP-2.6.1.pom'
        assert hikari.gav == 'com.zaxxer:HikariCP:2.6.1'

    def test_snapshot_detection(self):
        assert Coordinate.create('x', '1.0-SNAPSHOT', 'g', 'x').is_snapshot
        assert not Coordinate.create('x', '1.0', 'g', 'x').is_snapshot

    def test_options(self):
        plain = Coordinate.create('x', '1.0', 'g', 'x')
        custom = Coordinate.create('x', '1.0', 'g', 'x', custom_repository='https://jitpack.io', always_refetch=True)

        assert plain.options == CoordinateOptions()
        assert plain.options.custom_repository == ''
        assert custom.options.custom_repository == 'https://jitpack.io'
        assert custom.options.always_refetch

    def test_depth_follows_parents(self):
        root = Coordinate.create('root', '1.0', 'g', 'root')
        child = Coordinate.create('child', '1.0', 'g', 'child')
        grandchild = Coordinate.create('grandchild', '1.0', 'g', 'grandchild')

        child.set_parent(root)
        grandchild.set_parent(child)

        assert root.depth() == 0
        assert child.depth() == 1
        assert grandchild.depth() == 2
        assert grandchild.parent is child

    def test_parent_set_once(self):
        root = Coordinate.create('root', '1.0', 'g', 'root')
        other = Coordinate.create('other', '1.0', 'g', 'other')
        child = Coordinate.create('child', '1.0', 'g', 'child')

        child.set_parent(root)
        child.set_parent(root)

        with pytest.raises(ValueError):
            child.set_parent(other)

    def test_cannot_parent_itself(self):
        node = Coordinate.create('node', '1.0', 'g', 'node')

        with pytest.raises(ValueError):
            node.set_parent(node)

    def test_to_dict(self):
        root = Coordinate.create('root', '1.0', 'g', 'root')
        child = Coordinate.create('child', '2.0', 'g', 'child')
        child.set_parent(root)

        data = child.to_dict()

        assert data['parent'] == 'g:root:1.0'
        assert data['depth'] == 1
        assert data['options'] == {'custom_repository': '', 'always_refetch': False}
