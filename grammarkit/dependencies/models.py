"""Pydantic models for dependency declarations.

This module defines the coordinates, exclusion rules, repositories and
dependency sets that the plugin populates before the generator tasks run.
"""

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from grammarkit.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from grammarkit.dependencies.repository import ArtifactResolver


# =============================================================================
# COORDINATES
# =============================================================================


class DependencyCoordinate(BaseModel):
    """A ``group:artifact:version`` triple.

    Example:
        >>> coordinate = DependencyCoordinate.parse("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")
        >>> coordinate.artifact
        'jflex'
    """

    model_config = ConfigDict(frozen=True)

    group: str = Field(..., min_length=1, description="Group identifier")
    artifact: str = Field(..., min_length=1, description="Artifact (module) name")
    version: str = Field(..., min_length=1, description="Artifact version")

    @classmethod
    def parse(cls, notation: str) -> "DependencyCoordinate":
        """Parse ``group:artifact:version`` notation.

        Raises:
            ConfigurationError: If the notation does not have exactly three parts.
        """
        parts = notation.strip().split(":")
        if len(parts) != 3 or not all(parts):
            raise ConfigurationError(
                f"Invalid dependency notation {notation!r}, expected group:artifact:version"
            )
        group, artifact, version = parts
        return cls(group=group, artifact=artifact, version=version)

    @property
    def notation(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"

    @property
    def file_name(self) -> str:
        """Base name of the jar this coordinate resolves to."""
        return f"{self.artifact}-{self.version}.jar"

    def __str__(self) -> str:
        return self.notation


class ExclusionRule(BaseModel):
    """Suppresses transitive dependencies by group, module or both."""

    model_config = ConfigDict(frozen=True)

    group: str | None = Field(default=None, description="Excluded group")
    module: str | None = Field(default=None, description="Excluded module (artifact)")

    @model_validator(mode="after")
    def _require_one_field(self) -> "ExclusionRule":
        if not self.group and not self.module:
            raise ValueError("An exclusion rule needs a group, a module or both")
        return self

    def matches(self, coordinate: DependencyCoordinate) -> bool:
        """Check whether every field set on this rule matches ``coordinate``."""
        if self.group and self.group != coordinate.group:
            return False
        if self.module and self.module != coordinate.artifact:
            return False
        return True

    def __str__(self) -> str:
        fields = []
        if self.group:
            fields.append(f"group={self.group}")
        if self.module:
            fields.append(f"module={self.module}")
        return ", ".join(fields)


# =============================================================================
# REPOSITORIES
# =============================================================================


class MavenRepository(BaseModel):
    """Maven-layout artifact repository."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["maven"] = "maven"
    url: str


class IvyRepository(BaseModel):
    """Pattern-layout repository keyed by ``[revision]``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ivy"] = "ivy"
    url: str
    artifact_pattern: str
    metadata_sources: tuple[str, ...] = ("artifact",)

    def artifact_url(self, revision: str) -> str:
        """Render the archive URL for a given release."""
        path = self.artifact_pattern.replace("[revision]", revision)
        return f"{self.url.rstrip('/')}/{path}"


Repository = MavenRepository | IvyRepository


# =============================================================================
# DEPENDENCY SETS
# =============================================================================


class DependencySet(BaseModel):
    """Named set of declared dependencies resolved into files on demand.

    Exclusions attach to the set, not to a single coordinate: a rule
    suppresses matching transitive dependencies of every declared
    coordinate. The file set is resolved at most once; after that the set
    refuses further changes, and so does every set it extends from.
    """

    name: str = Field(..., min_length=1, description="Set name")
    dependencies: list[DependencyCoordinate] = Field(default_factory=list)
    exclusions: list[ExclusionRule] = Field(default_factory=list)

    _resolver: Any = PrivateAttr(default=None)
    _parents: list["DependencySet"] = PrivateAttr(default_factory=list)
    _files: tuple[Path, ...] | None = PrivateAttr(default=None)
    _locked_by: str | None = PrivateAttr(default=None)

    def bind(self, resolver: "ArtifactResolver | None") -> "DependencySet":
        """Attach the collaborator that turns coordinates into files."""
        self._resolver = resolver
        return self

    def extends_from(self, *parents: "DependencySet") -> None:
        """Inherit the dependencies and exclusions of ``parents``."""
        self._check_mutable()
        for parent in parents:
            if any(member is self for member in parent.hierarchy()):
                raise ConfigurationError(
                    f"Dependency set '{self.name}' cannot extend from '{parent.name}' (cycle)"
                )
            if not any(existing is parent for existing in self._parents):
                self._parents.append(parent)

    def hierarchy(self) -> list["DependencySet"]:
        """This set followed by every set it extends from, depth-first."""
        found: list[DependencySet] = [self]
        for parent in self._parents:
            for member in parent.hierarchy():
                if not any(member is existing for existing in found):
                    found.append(member)
        return found

    @property
    def all_dependencies(self) -> list[DependencyCoordinate]:
        return [dep for member in self.hierarchy() for dep in member.dependencies]

    @property
    def all_exclusions(self) -> list[ExclusionRule]:
        return [rule for member in self.hierarchy() for rule in member.exclusions]

    @property
    def is_resolved(self) -> bool:
        return self._files is not None

    def add(self, *notations: str | DependencyCoordinate) -> None:
        """Declare one or more dependencies."""
        self._check_mutable()
        for notation in notations:
            coordinate = (
                notation
                if isinstance(notation, DependencyCoordinate)
                else DependencyCoordinate.parse(notation)
            )
            self.dependencies.append(coordinate)

    def add_all(self, notations: Iterable[str | DependencyCoordinate]) -> None:
        self.add(*notations)

    def exclude(self, group: str | None = None, module: str | None = None) -> None:
        """Add an exclusion rule that applies to the whole set."""
        self._check_mutable()
        self.exclusions.append(ExclusionRule(group=group, module=module))

    def is_excluded(self, coordinate: DependencyCoordinate) -> bool:
        return any(rule.matches(coordinate) for rule in self.all_exclusions)

    @property
    def files(self) -> tuple[Path, ...]:
        """Resolved files, computed the first time they are requested."""
        if self._files is None:
            self._files = self._resolve()
            for member in self.hierarchy():
                if member is self or member._locked_by is None:
                    member._locked_by = self.name
        return self._files

    @property
    def is_empty(self) -> bool:
        return not self.files

    def _resolve(self) -> tuple[Path, ...]:
        dependencies = self.all_dependencies
        if not dependencies:
            return ()
        exclusions = self.all_exclusions
        if self._resolver is None:
            raise ConfigurationError(
                f"Dependency set '{self.name}' has dependencies but no resolver"
            )
        logger.debug(
            f"Resolving '{self.name}': {len(dependencies)} dependencies, "
            f"{len(exclusions)} exclusions"
        )
        files = tuple(self._resolver.resolve(dependencies, exclusions))
        logger.info(f"Resolved '{self.name}' to {len(files)} files")
        return files

    def _check_mutable(self) -> None:
        if self._locked_by is None:
            return
        if self._locked_by == self.name:
            raise ConfigurationError(
                f"Cannot change dependency set '{self.name}' after it has been resolved"
            )
        raise ConfigurationError(
            f"Cannot change dependency set '{self.name}' after '{self._locked_by}', "
            f"which extends from it, has been resolved"
        )
