"""Plugin entry point - wires dependency resolution into the generator tasks.

Applying the plugin to a project registers both generator tasks, their lazy
classpaths and purge hooks, the artifact repositories, and an after-evaluate
hook that freezes the configuration and declares dependencies.
"""

import sys
from pathlib import Path

from loguru import logger

from grammarkit.core.config import Settings, get_settings
from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.extension import GrammarKitExtension
from grammarkit.core.project import Project
from grammarkit.core.version import check_runtime_version
from grammarkit.dependencies.builder import Branch, DependencySetBuilder
from grammarkit.dependencies.classpath import (
    NamePredicate,
    lexer_predicate,
    parser_predicate,
    select,
)
from grammarkit.dependencies.models import DependencySet, IvyRepository, MavenRepository
from grammarkit.dependencies.version_resolver import VersionResolver
from grammarkit.tasks.base import ClasspathProvider
from grammarkit.tasks.lexer import GenerateLexerTask
from grammarkit.tasks.parser import GenerateParserTask
from grammarkit.tasks.purge import purge

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure loguru based on settings."""
    settings = settings or get_settings()
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        level="DEBUG" if settings.debug else settings.log_level,
        format=LOG_FORMAT,
        colorize=True,
    )


# =============================================================================
# TASK WIRING
# =============================================================================


def classpath_provider(
    dedicated: DependencySet,
    ambient: DependencySet,
    predicate: NamePredicate,
) -> ClasspathProvider:
    """Build the per-task classpath provider.

    Nothing resolves until the task runs. The ambient set is only resolved
    when the dedicated set turns out to be empty.
    """

    def provide() -> tuple[Path, ...]:
        primary = dedicated.files
        return select(primary, () if primary else ambient.files, predicate)

    return provide


def purge_lexer_output(task: GenerateLexerTask) -> None:
    """Delete the lexer's previous output file if the task asks for it."""
    purge([task.target_file], enabled=task.purge_old_files)


def purge_parser_output(task: GenerateParserTask) -> None:
    """Delete the parser file and PSI tree under the task's output root."""
    purge([task.parser_file, task.psi_dir], enabled=task.purge_old_files)


# =============================================================================
# PLUGIN
# =============================================================================


class GrammarKitPlugin:
    """
    Apply Grammar-Kit code generation to a project.

    Example:
        >>> project = Project(Path("."), runtime_version="8.5", resolver=resolver)
        >>> plugin = GrammarKitPlugin()
        >>> extension = plugin.apply(project)
        >>> extension.intellij_release = "2023.1"
        >>> project.evaluate()
        >>> plugin.branch
        <Branch.DEDICATED_CLASSPATH: 'dedicated_classpath'>
    """

    def __init__(
        self,
        settings: Settings | None = None,
        version_resolver: VersionResolver | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.version_resolver = version_resolver or VersionResolver(
            url=self.settings.latest_release_url,
            timeout=self.settings.http_timeout,
        )
        self.branch: Branch | None = None

    def apply(self, project: Project) -> GrammarKitExtension:
        """
        Register tasks, repositories and the after-evaluate hook.

        Raises:
            SetupError: If the host runtime is older than the supported floor.
        """
        check_runtime_version(project.runtime_version)

        extension = GrammarKitExtension()
        project.extensions[GrammarKitConstants.GROUP_NAME] = extension

        configurations = project.configurations
        grammar_kit_class_path = configurations.create(
            GrammarKitConstants.GRAMMAR_KIT_CLASS_PATH_CONFIGURATION_NAME
        )
        compile_classpath = configurations.maybe_create(
            GrammarKitConstants.COMPILE_CLASSPATH_CONFIGURATION_NAME
        )
        compile_only = configurations.maybe_create(
            GrammarKitConstants.COMPILE_ONLY_CONFIGURATION_NAME
        )
        bom = configurations.maybe_create(GrammarKitConstants.BOM_CONFIGURATION_NAME)

        self._register_lexer_task(project, grammar_kit_class_path, compile_classpath)
        self._register_parser_task(project, grammar_kit_class_path, compile_classpath)
        self._add_repositories(project)

        builder = DependencySetBuilder(
            compile_only=compile_only,
            grammar_kit_class_path=grammar_kit_class_path,
            bom=bom,
            settings=self.settings,
        )

        def after_evaluate(_: Project) -> None:
            frozen = extension.freeze(self.version_resolver)
            self.branch = builder.configure(frozen)

        project.after_evaluate(after_evaluate)
        logger.debug(f"Applied {GrammarKitConstants.PLUGIN_NAME} plugin to {project.root}")
        return extension

    def _register_lexer_task(
        self,
        project: Project,
        grammar_kit_class_path: DependencySet,
        compile_classpath: DependencySet,
    ) -> None:
        def configure(task: GenerateLexerTask) -> None:
            task.description = "Generates lexers for IntelliJ-based plugin"
            task.group = GrammarKitConstants.GROUP_NAME
            task.classpath = classpath_provider(grammar_kit_class_path, compile_classpath, lexer_predicate)
            task.do_first(purge_lexer_output)

        project.tasks.register(
            GrammarKitConstants.GENERATE_LEXER_TASK_NAME,
            GenerateLexerTask,
            configure,
        )

    def _register_parser_task(
        self,
        project: Project,
        grammar_kit_class_path: DependencySet,
        compile_classpath: DependencySet,
    ) -> None:
        def configure(task: GenerateParserTask) -> None:
            task.description = "Generates parsers for IntelliJ-based plugin"
            task.group = GrammarKitConstants.GROUP_NAME
            task.classpath = classpath_provider(grammar_kit_class_path, compile_classpath, parser_predicate)
            task.do_first(purge_parser_output)

        project.tasks.register(
            GrammarKitConstants.GENERATE_PARSER_TASK_NAME,
            GenerateParserTask,
            configure,
        )

    def _add_repositories(self, project: Project) -> None:
        project.repositories.extend(
            [
                MavenRepository(url=GrammarKitConstants.INTELLIJ_DEPENDENCIES_URL),
                MavenRepository(url=GrammarKitConstants.INTELLIJ_RELEASES_URL),
                IvyRepository(
                    url=GrammarKitConstants.GRAMMAR_KIT_RELEASES_DOWNLOAD_URL,
                    artifact_pattern=GrammarKitConstants.GRAMMAR_KIT_ARCHIVE_PATTERN,
                    metadata_sources=("artifact",),
                ),
            ]
        )


def apply_plugin(
    root: Path | str,
    runtime_version: str,
    **project_options,
) -> tuple[Project, GrammarKitExtension]:
    """Create a project at ``root`` and apply the plugin to it."""
    project = Project(root, runtime_version=runtime_version, **project_options)
    extension = GrammarKitPlugin().apply(project)
    return project, extension
