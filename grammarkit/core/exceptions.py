"""Exceptions raised while configuring and running the generator tasks."""

from pathlib import Path


class GrammarKitError(Exception):
    """Base exception for grammarkit errors."""

    pass


class SetupError(GrammarKitError):
    """The host build cannot apply the plugin (e.g. runtime too old)."""

    pass


class ConfigurationError(GrammarKitError):
    """Invalid or out-of-phase configuration."""

    pass


class VersionResolutionError(GrammarKitError):
    """The latest Grammar-Kit release could not be looked up."""

    pass


class ResolutionError(GrammarKitError):
    """A dependency coordinate could not be resolved to a file."""

    pass


class PurgeError(GrammarKitError):
    """Stale generated output could not be deleted."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = Path(path)
        message = f"Cannot purge old generated files at {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GenerationError(GrammarKitError):
    """The external generator failed or could not be launched."""

    pass
