"""Minimal host build model.

Just enough of a build tool for the plugin to hook into: named dependency
sets, repositories, a task registry, after-evaluate hooks, and running a
task by name. Scheduling, caching and downloads stay with the real host.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from loguru import logger

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import ConfigurationError
from grammarkit.dependencies.models import DependencySet, Repository
from grammarkit.dependencies.repository import ArtifactResolver
from grammarkit.tasks.base import CommandRunner, GenerateTask, GenerationResult

TaskType = TypeVar("TaskType", bound=GenerateTask)
ProjectHook = Callable[["Project"], None]

IMPLEMENTATION_CONFIGURATION_NAME = "implementation"


class ConfigurationContainer:
    """Named dependency sets sharing one artifact resolver."""

    def __init__(self, resolver: ArtifactResolver | None = None) -> None:
        self._resolver = resolver
        self._sets: dict[str, DependencySet] = {}

    def create(self, name: str) -> DependencySet:
        if name in self._sets:
            raise ConfigurationError(f"Dependency set '{name}' already exists")
        dependency_set = DependencySet(name=name).bind(self._resolver)
        self._sets[name] = dependency_set
        return dependency_set

    def get_by_name(self, name: str) -> DependencySet:
        try:
            return self._sets[name]
        except KeyError:
            raise ConfigurationError(f"Dependency set '{name}' not found") from None

    def maybe_create(self, name: str) -> DependencySet:
        return self._sets.get(name) or self.create(name)

    def __contains__(self, name: object) -> bool:
        return name in self._sets

    def __iter__(self):
        return iter(self._sets.values())


class TaskContainer:
    """Registered tasks with type-scoped configuration callbacks."""

    def __init__(self, project: "Project") -> None:
        self._project = project
        self._tasks: dict[str, GenerateTask] = {}

    def register(
        self,
        name: str,
        task_type: type[TaskType],
        configure: Callable[[TaskType], None] | None = None,
    ) -> TaskType:
        if name in self._tasks:
            raise ConfigurationError(f"Task '{name}' already registered")
        task = task_type(name, runner=self._project.runner, java_home=self._project.java_home)
        task.project_dir = self._project.root
        if configure:
            configure(task)
        self._tasks[name] = task
        logger.debug(f"Registered task '{name}' ({task_type.__name__})")
        return task

    def get_by_name(self, name: str) -> GenerateTask:
        try:
            return self._tasks[name]
        except KeyError:
            raise ConfigurationError(f"Task '{name}' not found") from None

    def with_type(self, task_type: type[TaskType]) -> list[TaskType]:
        return [task for task in self._tasks.values() if isinstance(task, task_type)]

    def names(self) -> list[str]:
        return list(self._tasks)


class Project:
    """
    A build project the plugin is applied to.

    Example:
        >>> project = Project(Path("."), runtime_version="8.5", resolver=LocalRepositoryResolver(cache))
        >>> GrammarKitPlugin().apply(project)
        >>> project.evaluate()
        >>> project.run_task("generateLexer")
    """

    def __init__(
        self,
        root: Path | str,
        runtime_version: str,
        resolver: ArtifactResolver | None = None,
        runner: CommandRunner | None = None,
        java_home: str | None = None,
    ) -> None:
        self.root = Path(root)
        self.runtime_version = runtime_version
        self.runner = runner
        self.java_home = java_home
        self.configurations = ConfigurationContainer(resolver)
        self.repositories: list[Repository] = []
        self.tasks = TaskContainer(self)
        self.extensions: dict[str, object] = {}
        self._after_evaluate: list[ProjectHook] = []
        self._evaluated = False
        self._create_java_configurations()

    def _create_java_configurations(self) -> None:
        """The compile sets a Java project starts with."""
        compile_only = self.configurations.create(
            GrammarKitConstants.COMPILE_ONLY_CONFIGURATION_NAME
        )
        implementation = self.configurations.create(IMPLEMENTATION_CONFIGURATION_NAME)
        compile_classpath = self.configurations.create(
            GrammarKitConstants.COMPILE_CLASSPATH_CONFIGURATION_NAME
        )
        compile_classpath.extends_from(compile_only, implementation)

    @property
    def is_evaluated(self) -> bool:
        return self._evaluated

    def after_evaluate(self, hook: ProjectHook) -> None:
        """Register a hook that runs once, when configuration freezes."""
        if self._evaluated:
            raise ConfigurationError("Project has already been evaluated")
        self._after_evaluate.append(hook)

    def evaluate(self) -> None:
        """Finish configuration and run after-evaluate hooks (once)."""
        if self._evaluated:
            return
        logger.debug(f"Evaluating project at {self.root}")
        for hook in self._after_evaluate:
            hook(self)
        self._evaluated = True

    def run_task(self, name: str) -> GenerationResult:
        """Run a registered task; the project must be evaluated first."""
        if not self._evaluated:
            raise ConfigurationError(f"Cannot run '{name}' before the project is evaluated")
        return self.tasks.get_by_name(name).execute()
