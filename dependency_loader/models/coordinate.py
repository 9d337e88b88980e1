# Path: dependency_loader/models/coordinate.py
"""
Coordinate Model

Value object naming one resolvable artifact (group, artifact, version)
plus a free-form label and per-coordinate resolution options.

Architecture:
- Identity is (group, artifact, version); the name is only a label
- Options are mutable until resolution begins
- Parent back-reference is set once and used for trace depth only
"""

from dataclasses import dataclass, field
from typing import Optional

from dependency_loader.constants import (
    BINARY_EXTENSION,
    DESCRIPTOR_EXTENSION,
    SNAPSHOT_SUFFIX,
)


@dataclass
class CoordinateOptions:
    """
    Resolution options of a coordinate.

    Attributes:
        custom_repository: Repository base URL used exclusively ('' = fallback list)
        always_refetch: Re-download even when the artifact is cached
    """
    custom_repository: str = ''
    always_refetch: bool = False

    def __post_init__(self):
        if self.custom_repository is None:
            self.custom_repository = ''

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging/storage."""
        return {
            'custom_repository': self.custom_repository,
            'always_refetch': self.always_refetch,
        }


@dataclass(eq=False)
class Coordinate:
    """
    A Maven-style artifact coordinate.

    Two coordinates are equal when group, artifact and version match;
    the name never takes part in equality or hashing.

    Example:
        hikari = Coordinate.create('HikariCP', '2.6.1', 'com.zaxxer', 'HikariCP')
        hikari.jar_name   # 'HikariCP-2.6.1.jar'
        hikari.depth()    # 0
    """
    name: str
    version: str
    group: str
    artifact: str
    options: CoordinateOptions = field(default_factory=CoordinateOptions)
    _parent: Optional['Coordinate'] = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls,
        name: str,
        version: str,
        group: str,
        artifact: str,
        custom_repository: Optional[str] = None,
        always_refetch: bool = False
    ) -> 'Coordinate':
        """
        Build a coordinate with its options in one call.

        Args:
            name: Label of the dependency
            version: Maven version
            group: Maven groupId
            artifact: Maven artifactId
            custom_repository: Optional repository base URL override
            always_refetch: Re-download even when cached

        Returns:
            New Coordinate
        """
        options = CoordinateOptions(
            custom_repository=custom_repository or '',
            always_refetch=always_refetch,
        )
        return cls(name=name, version=version, group=group, artifact=artifact, options=options)

    @property
    def parent(self) -> Optional['Coordinate']:
        """Coordinate whose descriptor declared this one, if any."""
        return self._parent

    def set_parent(self, parent: 'Coordinate') -> None:
        """
        Attach the coordinate that introduced this one.

        Setting the same parent again is a no-op.

        Raises:
            ValueError: If a different parent is already set, or parent is self
        """
        if parent is self:
            raise ValueError(f"{self.gav} cannot be its own parent")

        if self._parent is not None and self._parent is not parent:
            raise ValueError(f"Parent of {self.gav} is already set to {self._parent.gav}")

        self._parent = parent

    def depth(self) -> int:
        """Number of parent edges between this coordinate and its root."""
        depth = 0
        current = self._parent
        while current is not None:
            depth += 1
            current = current._parent
        return depth

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.group, self.artifact, self.version)

    @property
    def gav(self) -> str:
        """group:artifact:version string."""
        return f"{self.group}:{self.artifact}:{self.version}"

    @property
    def is_snapshot(self) -> bool:
        return self.version.endswith(SNAPSHOT_SUFFIX)

    @property
    def jar_name(self) -> str:
        """File name of this coordinate's binary in the repository."""
        return f"{self.artifact}-{self.version}{BINARY_EXTENSION}"

    @property
    def pom_name(self) -> str:
        """File name of this coordinate's descriptor in the repository."""
        return f"{self.artifact}-{self.version}{DESCRIPTOR_EXTENSION}"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Coordinate):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self) -> int:
        return hash(self.identity)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging/storage."""
        return {
            'name': self.name,
            'group': self.group,
            'artifact': self.artifact,
            'version': self.version,
            'options': self.options.to_dict(),
            'parent': self._parent.gav if self._parent else None,
            'depth': self.depth(),
        }


__all__ = ['Coordinate', 'CoordinateOptions']
