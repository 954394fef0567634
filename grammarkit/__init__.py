"""
grammarkit - lexer and parser generation for IntelliJ-based plugins.

Resolves the Grammar-Kit and JFlex classpaths and runs the generators with
stale output purged first.
"""

__version__ = "0.1.0"
__author__ = "grammarkit contributors"

from grammarkit.core.orchestrator import GrammarKitPlugin

__all__ = ["GrammarKitPlugin", "__version__"]
