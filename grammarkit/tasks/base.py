"""
Base generator task for grammarkit.

Both generator tasks (lexer, parser) inherit from this. A task owns a lazy
classpath provider, an ordered list of pre-run actions and a runner that
launches the external generator on the JVM.
"""

import os
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from grammarkit.core.exceptions import GenerationError

ClasspathProvider = Callable[[], Sequence[Path]]
TaskAction = Callable[["GenerateTask"], None]


# =============================================================================
# EXECUTION
# =============================================================================


@dataclass
class GenerationResult:
    """Outcome of one generator invocation."""

    task_name: str
    command: list[str]
    return_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    classpath: list[Path] = field(default_factory=list)

    def is_success(self) -> bool:
        return self.return_code == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "task_name": self.task_name,
            "command": self.command,
            "return_code": self.return_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "duration_seconds": self.duration_seconds,
            "classpath": [str(p) for p in self.classpath],
        }


class CommandRunner(Protocol):
    """Runs a command and reports its exit status and output."""

    def __call__(self, command: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
        ...


def run_command(command: list[str], cwd: Path | None = None) -> subprocess.CompletedProcess:
    """Default runner: a blocking ``subprocess.run`` capturing output."""
    return subprocess.run(command, cwd=cwd, capture_output=True, text=True, check=False)


def find_java(java_home: str | None = None) -> str:
    """Locate the ``java`` launcher from ``java_home``, ``JAVA_HOME`` or ``PATH``.

    Raises:
        GenerationError: If no launcher can be found.
    """
    for home in (java_home, os.environ.get("JAVA_HOME")):
        if home:
            candidate = Path(home) / "bin" / ("java.exe" if os.name == "nt" else "java")
            if candidate.is_file():
                return str(candidate)

    found = shutil.which("java")
    if found:
        return found
    raise GenerationError("Cannot find a java executable (set JAVA_HOME or GRAMMARKIT_JAVA_HOME)")


# =============================================================================
# TASKS
# =============================================================================


class GenerateTask(ABC):
    """
    A generator task registered with a project.

    The classpath is supplied as a zero-argument provider and evaluated each
    time the task runs, because dependency sets are only populated once the
    project has been evaluated, well after the task is registered.
    """

    main_class: str = ""

    def __init__(
        self,
        name: str,
        runner: CommandRunner | None = None,
        java_home: str | None = None,
    ) -> None:
        self.name = name
        self.description: str | None = None
        self.group: str | None = None
        self.purge_old_files: bool | None = None
        self.classpath: ClasspathProvider = lambda: ()
        self.runner: CommandRunner = runner or run_command
        self.java_home = java_home
        self.project_dir: Path = Path(".")
        self._do_first: list[TaskAction] = []

    def file(self, path: Path | str) -> Path:
        """Resolve ``path`` against the project directory."""
        return self.project_dir / path

    def do_first(self, action: TaskAction) -> None:
        """Prepend an action to run before the generator."""
        self._do_first.insert(0, action)

    @property
    def actions(self) -> list[TaskAction]:
        return list(self._do_first)

    @abstractmethod
    def arguments(self) -> list[str]:
        """Generator command-line arguments (after the main class)."""
        ...

    @abstractmethod
    def validate(self) -> None:
        """Check required inputs before anything is deleted or launched."""
        ...

    def execute(self, working_dir: Path | None = None) -> GenerationResult:
        """
        Resolve the classpath, run pre-run actions, then the generator.

        Pre-run actions only run once the classpath and the java executable
        are both available.

        Args:
            working_dir: Generator working directory (project directory by default).

        Raises:
            GenerationError: If inputs are missing, the classpath is empty or
                the generator exits non-zero.
        """
        self.validate()
        classpath = list(self.classpath())
        if not classpath:
            raise GenerationError(
                f"Task '{self.name}' has an empty classpath; configure an IntelliJ release "
                f"or add the generator to the compile classpath"
            )
        java = find_java(self.java_home)

        for action in self._do_first:
            action(self)

        command = [
            java,
            "-cp",
            os.pathsep.join(str(p) for p in classpath),
            self.main_class,
            *self.arguments(),
        ]
        logger.info(f"Running {self.name}: {self.main_class} {' '.join(self.arguments())}")
        logger.debug(f"{self.name} classpath: {len(classpath)} entries")

        start = time.monotonic()
        completed = self.runner(command, cwd=working_dir or self.project_dir)
        result = GenerationResult(
            task_name=self.name,
            command=command,
            return_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_seconds=time.monotonic() - start,
            classpath=classpath,
        )

        if not result.is_success():
            logger.error(f"{self.name} failed with exit code {result.return_code}")
            raise GenerationError(
                f"Task '{self.name}' failed with exit code {result.return_code}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )

        logger.info(f"{self.name} completed in {result.duration_seconds:.2f}s")
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
