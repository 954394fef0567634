"""Artifact resolution collaborators.

Downloading artifacts is the host build's job; the plugin only needs
something that turns declared coordinates into files. ``ArtifactResolver``
is that seam, and ``LocalRepositoryResolver`` implements it over a local
Maven-layout directory (e.g. a pre-populated cache) so the CLI and tests
work offline.
"""

from collections import deque
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable
from xml.etree import ElementTree

from loguru import logger

from grammarkit.core.exceptions import ResolutionError
from grammarkit.dependencies.models import DependencyCoordinate, ExclusionRule

_POM_NAMESPACE = "{http://maven.apache.org/POM/4.0.0}"
_TRANSITIVE_SCOPES = {"compile", "runtime"}


@runtime_checkable
class ArtifactResolver(Protocol):
    """Resolves declared coordinates (and their transitive graph) to files."""

    def resolve(
        self,
        dependencies: Sequence[DependencyCoordinate],
        exclusions: Sequence[ExclusionRule],
    ) -> Sequence[Path]:
        """Return the files for ``dependencies``, honouring set-level ``exclusions``."""
        ...


class LocalRepositoryResolver:
    """Resolve coordinates against a Maven-layout directory.

    ``group/artifact/version/artifact-version.jar`` is the expected layout,
    with dots in the group turned into directories. When a matching
    ``.pom`` file sits next to the jar, its compile and runtime
    dependencies are followed transitively. Exclusion rules are checked for
    every coordinate reached, so a rule declared on the set prunes the
    transitive graph of all declared coordinates.

    Example:
        >>> resolver = LocalRepositoryResolver(Path("~/.m2/repository").expanduser())
        >>> resolver.resolve([DependencyCoordinate.parse("org.jetbrains.intellij.deps.jflex:jflex:1.9.2")], [])
        (PosixPath('.../jflex-1.9.2.jar'),)
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def artifact_dir(self, coordinate: DependencyCoordinate) -> Path:
        return (
            self.root.joinpath(*coordinate.group.split("."))
            / coordinate.artifact
            / coordinate.version
        )

    def jar_path(self, coordinate: DependencyCoordinate) -> Path:
        return self.artifact_dir(coordinate) / coordinate.file_name

    def pom_path(self, coordinate: DependencyCoordinate) -> Path:
        return self.artifact_dir(coordinate) / f"{coordinate.artifact}-{coordinate.version}.pom"

    def resolve(
        self,
        dependencies: Sequence[DependencyCoordinate],
        exclusions: Sequence[ExclusionRule],
    ) -> tuple[Path, ...]:
        """Resolve the transitive closure breadth-first.

        Declared coordinates are never excluded; exclusions only prune what
        is pulled in transitively.

        Raises:
            ResolutionError: If a reachable coordinate has no jar on disk.
        """
        files: list[Path] = []
        seen: set[tuple[str, str]] = set()
        queue: deque[tuple[DependencyCoordinate, bool]] = deque(
            (coordinate, True) for coordinate in dependencies
        )

        while queue:
            coordinate, declared = queue.popleft()
            key = (coordinate.group, coordinate.artifact)
            if key in seen:
                continue
            if not declared and any(rule.matches(coordinate) for rule in exclusions):
                logger.debug(f"Excluded transitive dependency {coordinate}")
                continue
            seen.add(key)

            jar = self.jar_path(coordinate)
            if not jar.is_file():
                raise ResolutionError(f"Cannot resolve {coordinate}: {jar} does not exist")
            files.append(jar)

            for transitive in self._read_pom_dependencies(coordinate):
                queue.append((transitive, False))

        return tuple(files)

    def _read_pom_dependencies(self, coordinate: DependencyCoordinate) -> list[DependencyCoordinate]:
        pom = self.pom_path(coordinate)
        if not pom.is_file():
            return []

        try:
            tree = ElementTree.parse(pom)
        except ElementTree.ParseError as e:
            raise ResolutionError(f"Cannot parse {pom}: {e}") from e

        found: list[DependencyCoordinate] = []
        # Only direct <dependencies>, not <dependencyManagement>
        for node in tree.getroot().findall(f"{_POM_NAMESPACE}dependencies/{_POM_NAMESPACE}dependency"):
            group = node.findtext(f"{_POM_NAMESPACE}groupId")
            artifact = node.findtext(f"{_POM_NAMESPACE}artifactId")
            version = node.findtext(f"{_POM_NAMESPACE}version")
            scope = node.findtext(f"{_POM_NAMESPACE}scope") or "compile"
            optional = (node.findtext(f"{_POM_NAMESPACE}optional") or "false").strip() == "true"

            if scope not in _TRANSITIVE_SCOPES or optional:
                continue
            if not group or not artifact or not version:
                logger.warning(f"Skipping incomplete dependency entry in {pom}")
                continue
            found.append(DependencyCoordinate(group=group, artifact=artifact, version=version))

        return found
