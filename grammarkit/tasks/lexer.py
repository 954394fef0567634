"""JFlex lexer generation task."""

from pathlib import Path

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import ConfigurationError, GenerationError
from grammarkit.tasks.base import CommandRunner, GenerateTask


class GenerateLexerTask(GenerateTask):
    """
    Generate a lexer class from a ``.flex`` lexer definition.

    Example:
        >>> task = GenerateLexerTask("generateLexer")
        >>> task.source = "src/main/grammars/Sample.flex"
        >>> task.target_dir = "src/main/gen/org/example"
        >>> task.target_class = "SampleLexer"
        >>> task.target_file
        PosixPath('src/main/gen/org/example/SampleLexer.java')
    """

    main_class = GrammarKitConstants.LEXER_MAIN_CLASS

    def __init__(
        self,
        name: str,
        runner: CommandRunner | None = None,
        java_home: str | None = None,
    ) -> None:
        super().__init__(name, runner=runner, java_home=java_home)
        self.source: Path | str | None = None
        self.target_dir: Path | str | None = None
        self.target_class: str | None = None
        self.skeleton: Path | str | None = None

    @property
    def target_file(self) -> Path:
        """The single generated file; it is what gets purged."""
        if self.target_dir is None or not self.target_class:
            raise ConfigurationError(f"Task '{self.name}' needs target_dir and target_class")
        return self.file(self.target_dir) / f"{self.target_class}.java"

    def validate(self) -> None:
        if self.source is None:
            raise ConfigurationError(f"Task '{self.name}' has no source file")
        self._require_outputs()
        if not self.file(self.source).is_file():
            raise GenerationError(f"Lexer source {self.file(self.source)} does not exist")
        if self.skeleton is not None and not self.file(self.skeleton).is_file():
            raise GenerationError(f"Lexer skeleton {self.file(self.skeleton)} does not exist")

    def _require_outputs(self) -> Path:
        """Fail when the output location is incomplete."""
        return self.target_file

    def arguments(self) -> list[str]:
        args = ["-d", str(self.target_file.parent)]
        if self.skeleton is not None:
            args += ["--skel", str(self.file(self.skeleton))]
        args.append(str(self.file(self.source)))
        return args
