# Path: dependency_loader/engine/descriptor_parser.py
"""
Descriptor Parser

Reads downloaded descriptors (POM files) for child dependencies and
snapshot metadata for the latest timestamped build.

Architecture:
- lxml parsing without entity resolution or network access
- Namespace-agnostic tag matching (POMs may or may not declare one)
- Scope filtering through a configurable ScopePolicy
- Failures logged and turned into "no children" / None, never raised
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from lxml import etree

from dependency_loader.core.logger import get_logger
from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.engine.errors import SnapshotResolutionError
from dependency_loader.models.coordinate import Coordinate
from dependency_loader.constants import (
    DEFAULT_ALLOWED_SCOPES,
    DEFAULT_INCLUDE_UNSCOPED,
    SNAPSHOT_TOKEN,
    TAG_DEPENDENCY,
    TAG_GROUP,
    TAG_ARTIFACT,
    TAG_VERSION,
    TAG_SCOPE,
    TAG_OPTIONAL,
    TAG_PARENT,
    TAG_SNAPSHOT,
    TAG_TIMESTAMP,
    TAG_BUILD_NUMBER,
    LOG_INPUT,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

PROPERTY_PATTERN = re.compile(r'\$\{([^}]+)\}')

# Built-in properties that refer to the project element itself
PROJECT_PROPERTIES = {
    'project.version': TAG_VERSION,
    'pom.version': TAG_VERSION,
    'project.groupId': TAG_GROUP,
    'pom.groupId': TAG_GROUP,
}


@dataclass(frozen=True)
class ScopePolicy:
    """
    Which dependency scopes produce child coordinates.

    Attributes:
        allowed: Scopes that are followed
        include_unscoped: Whether dependencies without a scope are followed
    """
    allowed: frozenset = DEFAULT_ALLOWED_SCOPES
    include_unscoped: bool = DEFAULT_INCLUDE_UNSCOPED

    @classmethod
    def from_config(cls, config: ConfigLoader) -> 'ScopePolicy':
        scopes = config.get('allowed_scopes') or DEFAULT_ALLOWED_SCOPES
        return cls(
            allowed=frozenset(scope.strip() for scope in scopes if scope.strip()),
            include_unscoped=bool(config.get('include_unscoped', DEFAULT_INCLUDE_UNSCOPED)),
        )

    def accepts(self, scope: str) -> bool:
        scope = scope.strip()
        if not scope:
            return self.include_unscoped
        return scope in self.allowed


def _local_name(element) -> str:
    # Comments and processing instructions have non-string tags
    if not isinstance(element.tag, str):
        return ''
    return etree.QName(element).localname


def _child(element, tag: str):
    for child in element:
        if _local_name(child) == tag:
            return child
    return None


def _child_text(element, tag: str) -> str:
    child = _child(element, tag)
    if child is None or child.text is None:
        return ''
    return child.text.strip()


def _first_descendant(root, tag: str):
    for element in root.iter():
        if element is not root and _local_name(element) == tag:
            return element
    return None


def read_document(path: Path):
    """
    Parse an XML file and return its root element.

    Raises:
        etree.XMLSyntaxError: Malformed or empty document
        OSError: File missing or unreadable
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    return etree.parse(str(path), parser).getroot()


class DescriptorParser:
    """
    Extracts child coordinates and snapshot versions from XML documents.

    Example:
        parser = DescriptorParser(ScopePolicy(allowed=frozenset({'runtime'})))
        children = parser.read_dependencies(pom_path, parent=coordinate)
    """

    def __init__(self, scope_policy: Optional[ScopePolicy] = None):
        """
        Initialize descriptor parser.

        Args:
            scope_policy: Scope filter (defaults to provided + runtime)
        """
        self.scope_policy = scope_policy if scope_policy else ScopePolicy()

    def read_dependencies(
        self,
        descriptor_path: Path,
        parent: Optional[Coordinate] = None
    ) -> list[Coordinate]:
        """
        Read every followed dependency declared in a descriptor.

        Args:
            descriptor_path: Local POM file
            parent: Coordinate that owns the descriptor

        Returns:
            Child coordinates, empty if none or if the document is unreadable
        """
        try:
            root = read_document(descriptor_path)
        except (etree.XMLSyntaxError, OSError, ValueError) as e:
            logger.error(f"Failed to load dependencies for pom {descriptor_path.name}: {e}")
            return []

        declarations = [element for element in root.iter() if _local_name(element) == TAG_DEPENDENCY]
        logger.debug(f"{LOG_INPUT} Found {len(declarations)} dependencies in {descriptor_path.name}")

        children = []
        for declaration in declarations:
            group = _child_text(declaration, TAG_GROUP)
            artifact = _child_text(declaration, TAG_ARTIFACT)
            scope = _child_text(declaration, TAG_SCOPE)

            if not self.scope_policy.accepts(scope):
                logger.debug(f"Skipping {group}:{artifact}, its scope is '{scope}'")
                continue

            version = self._resolve_version(root, _child_text(declaration, TAG_VERSION))

            optional = _child_text(declaration, TAG_OPTIONAL)
            if optional.lower() == 'true':
                logger.debug(f"Skipping {group}:{artifact}, it is optional")
                continue

            logger.debug(f"Child > GroupId {group}, ArtifactId {artifact}, Version {version} < Child")

            child = Coordinate.create(f"{group}:{artifact}:{version}", version, group, artifact)
            if parent is not None:
                child.set_parent(parent)
            children.append(child)

        logger.debug(f"{LOG_OUTPUT} {len(children)} children kept from {descriptor_path.name}")
        return children

    def read_latest_snapshot_version(
        self,
        coordinate: Coordinate,
        metadata_path: Path
    ) -> Optional[str]:
        """
        Compute the timestamped version of a snapshot from its metadata.

        The metadata file is transient and deleted once read.

        Args:
            coordinate: Snapshot coordinate
            metadata_path: Local copy of maven-metadata.xml

        Returns:
            Version with 'SNAPSHOT' replaced by 'timestamp-buildNumber',
            or None if the metadata could not be read
        """
        try:
            root = read_document(metadata_path)

            snapshot = _first_descendant(root, TAG_SNAPSHOT)
            if snapshot is None:
                raise SnapshotResolutionError(f"No <{TAG_SNAPSHOT}> element in metadata")

            timestamp = _child_text(snapshot, TAG_TIMESTAMP)
            build_number = _child_text(snapshot, TAG_BUILD_NUMBER)
            if not timestamp or not build_number:
                raise SnapshotResolutionError("Snapshot metadata lacks timestamp or buildNumber")

            latest = coordinate.version.replace(SNAPSHOT_TOKEN, f"{timestamp}-{build_number}")
            logger.debug(f"Latest Snapshot version of {coordinate.name} is {latest}")
            return latest

        except (etree.XMLSyntaxError, OSError, ValueError, SnapshotResolutionError) as e:
            logger.error(f"Failed to load meta for snapshot of {coordinate.gav}: {e}")
            return None

        finally:
            metadata_path.unlink(missing_ok=True)

    def _resolve_version(self, root, version: str) -> str:
        """Substitute a '${property}' version; unresolved properties become ''."""
        match = PROPERTY_PATTERN.fullmatch(version)
        if not match:
            return version

        property_name = match.group(1)

        if property_name in PROJECT_PROPERTIES:
            tag = PROJECT_PROPERTIES[property_name]
            value = _child_text(root, tag)
            if not value:
                parent = _child(root, TAG_PARENT)
                value = _child_text(parent, tag) if parent is not None else ''
            return value

        element = _first_descendant(root, property_name)
        if element is None or element.text is None:
            logger.debug(f"Property ${{{property_name}}} is not defined")
            return ''

        return element.text.strip()


__all__ = ['DescriptorParser', 'ScopePolicy', 'read_document']
