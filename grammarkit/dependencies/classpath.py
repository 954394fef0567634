"""Classpath selection for the generator tasks.

A dedicated classpath set, when the user resolved one, is trusted as-is.
Otherwise the project's compile classpath is narrowed down to the jars a
generator actually needs; handing it the whole compile classpath leads to
classloading clashes inside the generator.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

from loguru import logger

NamePredicate = Callable[[Path], bool]

LEXER_JAR_PREFIX = "jflex"

REQUIRED_PARSER_LIBS: tuple[str, ...] = (
    "jdom",
    "trove4j",
    "junit",
    "guava",
    "asm-all",
    "automaton",
    "platform-api",
    "platform-impl",
    "util",
    "annotations",
    "picocontainer",
    "extensions",
    "idea",
    "openapi",
    "Grammar-Kit",
    "platform-util-ui",
    "platform-concurrency",
    "intellij-deps-fastutil",
    # CLion ships MockProjectEx in testFramework.jar instead of idea.jar, so it
    # must stay listed or parser generation fails with NoClassDefFoundError
    "testFramework",
    "3rd-party",
)


def lexer_predicate(file: Path) -> bool:
    """Match JFlex jars (``jflex-1.9.2.jar``, ``jflex.jar``...)."""
    return file.name.startswith(LEXER_JAR_PREFIX)


def required_libs_predicate(libs: Iterable[str]) -> NamePredicate:
    """Build a predicate matching ``<lib>.jar`` (any case) or ``<lib>-*.jar``.

    Only jars qualify, so leftovers such as ``guava-extra.jar.bak`` are skipped.
    """
    names = tuple(libs)
    exact = {f"{name}.jar".lower() for name in names}
    prefixes = tuple(f"{name}-" for name in names)

    def predicate(file: Path) -> bool:
        name = file.name
        if not name.lower().endswith(".jar"):
            return False
        return name.lower() in exact or name.startswith(prefixes)

    return predicate


parser_predicate: NamePredicate = required_libs_predicate(REQUIRED_PARSER_LIBS)


def select(
    primary: Iterable[Path],
    fallback: Iterable[Path],
    predicate: NamePredicate,
) -> tuple[Path, ...]:
    """
    Pick the classpath for a generator invocation.

    Args:
        primary: Files of the dedicated classpath set.
        fallback: Files of the ambient compile classpath.
        predicate: Filter applied to ``fallback`` only.

    Returns:
        ``primary`` unchanged when non-empty, otherwise the matching
        ``fallback`` files in their original order.

    Example:
        >>> select([], [Path("jflex-1.9.1.jar"), Path("guava-30.jar")], lexer_predicate)
        (PosixPath('jflex-1.9.1.jar'),)
    """
    dedicated = tuple(primary)
    if dedicated:
        logger.debug(f"Using dedicated classpath ({len(dedicated)} files)")
        return dedicated

    candidates = tuple(fallback)
    selected = tuple(file for file in candidates if predicate(file))
    logger.debug(f"Filtered compile classpath: {len(selected)} of {len(candidates)} files kept")
    return selected
