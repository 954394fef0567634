"""Dependency resolution - versions, dependency sets and classpath selection.

- Version resolution (``latest`` -> concrete Grammar-Kit release)
- Dependency declaration (compile-only vs dedicated classpath branch)
- Artifact resolution (coordinates -> files)
- Classpath selection (dedicated set or filtered compile classpath)
"""

from grammarkit.dependencies.builder import Branch, DependencySetBuilder
from grammarkit.dependencies.classpath import (
    REQUIRED_PARSER_LIBS,
    lexer_predicate,
    parser_predicate,
    required_libs_predicate,
    select,
)
from grammarkit.dependencies.models import (
    DependencyCoordinate,
    DependencySet,
    ExclusionRule,
    IvyRepository,
    MavenRepository,
)
from grammarkit.dependencies.repository import ArtifactResolver, LocalRepositoryResolver
from grammarkit.dependencies.version_resolver import VersionResolver, resolve_generator_version

__all__ = [
    "REQUIRED_PARSER_LIBS",
    "ArtifactResolver",
    "Branch",
    "DependencyCoordinate",
    "DependencySet",
    "DependencySetBuilder",
    "ExclusionRule",
    "IvyRepository",
    "LocalRepositoryResolver",
    "MavenRepository",
    "VersionResolver",
    "lexer_predicate",
    "parser_predicate",
    "required_libs_predicate",
    "resolve_generator_version",
    "select",
]
