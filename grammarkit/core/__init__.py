"""Core module - plugin wiring, host project model and configuration."""

from grammarkit.core.config import Settings, get_settings
from grammarkit.core.exceptions import (
    ConfigurationError,
    GenerationError,
    GrammarKitError,
    PurgeError,
    ResolutionError,
    SetupError,
    VersionResolutionError,
)
from grammarkit.core.extension import FrozenConfiguration, GrammarKitExtension
from grammarkit.core.orchestrator import GrammarKitPlugin, configure_logging
from grammarkit.core.project import Project

__all__ = [
    "ConfigurationError",
    "FrozenConfiguration",
    "GenerationError",
    "GrammarKitError",
    "GrammarKitExtension",
    "GrammarKitPlugin",
    "Project",
    "PurgeError",
    "ResolutionError",
    "Settings",
    "SetupError",
    "VersionResolutionError",
    "configure_logging",
    "get_settings",
]
