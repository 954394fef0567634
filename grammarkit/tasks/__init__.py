"""Generator tasks and output purging."""

from grammarkit.tasks.base import GenerateTask, GenerationResult, run_command
from grammarkit.tasks.lexer import GenerateLexerTask
from grammarkit.tasks.parser import GenerateParserTask
from grammarkit.tasks.purge import purge

__all__ = [
    "GenerateLexerTask",
    "GenerateParserTask",
    "GenerateTask",
    "GenerationResult",
    "purge",
    "run_command",
]
