"""Grammar-Kit parser generation task."""

from pathlib import Path

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import ConfigurationError, GenerationError
from grammarkit.tasks.base import CommandRunner, GenerateTask


class GenerateParserTask(GenerateTask):
    """
    Generate a parser and PSI classes from a ``.bnf`` grammar.

    Output lands under ``target_root``; ``path_to_parser`` and
    ``path_to_psi_root`` are relative to it and are the two locations
    purged before regeneration.
    """

    main_class = GrammarKitConstants.PARSER_MAIN_CLASS

    def __init__(
        self,
        name: str,
        runner: CommandRunner | None = None,
        java_home: str | None = None,
    ) -> None:
        super().__init__(name, runner=runner, java_home=java_home)
        self.source: Path | str | None = None
        self.target_root: Path | str | None = None
        self.path_to_parser: str | None = None
        self.path_to_psi_root: str | None = None

    @property
    def target_root_output_dir(self) -> Path:
        if self.target_root is None:
            raise ConfigurationError(f"Task '{self.name}' has no target_root")
        return self.file(self.target_root)

    @property
    def parser_file(self) -> Path:
        if not self.path_to_parser:
            raise ConfigurationError(f"Task '{self.name}' has no path_to_parser")
        return self.target_root_output_dir / self.path_to_parser

    @property
    def psi_dir(self) -> Path:
        if not self.path_to_psi_root:
            raise ConfigurationError(f"Task '{self.name}' has no path_to_psi_root")
        return self.target_root_output_dir / self.path_to_psi_root

    def validate(self) -> None:
        if self.source is None:
            raise ConfigurationError(f"Task '{self.name}' has no source file")
        self._require_outputs()
        if not self.file(self.source).is_file():
            raise GenerationError(f"Grammar {self.file(self.source)} does not exist")

    def _require_outputs(self) -> tuple[Path, Path]:
        """Fail when the parser file or PSI root is not configured."""
        return self.parser_file, self.psi_dir

    def arguments(self) -> list[str]:
        return [str(self.target_root_output_dir), str(self.file(self.source))]
