"""Dependency declaration for the generator tasks.

Exactly one of two branches runs per build, chosen by whether an IntelliJ
platform release is configured:

- Branch A (no platform): the project is assumed to have IDE classes on its
  compile classpath already, so only Grammar-Kit and JFlex are added to
  ``compileOnly``.
- Branch B (platform configured): nothing ambient can be relied on, so the
  dedicated ``grammarKitClassPath`` set declares the generator's full
  requirement set and prunes transitive extras known to break it.
"""

from enum import Enum

from loguru import logger

from grammarkit.core.config import Settings, get_settings
from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.extension import FrozenConfiguration
from grammarkit.dependencies.models import DependencySet, ExclusionRule

# Transitive components absent from, or harmful to, a standalone generator run
PLATFORM_EXCLUSIONS: tuple[ExclusionRule, ...] = (
    ExclusionRule(group="com.jetbrains.rd"),
    ExclusionRule(group="org.jetbrains.marketplace"),
    ExclusionRule(group="org.roaringbitmap"),
    ExclusionRule(group=GrammarKitConstants.PLUGINS_GROUP),
    ExclusionRule(module="idea"),
    ExclusionRule(module="ant"),
)

COMPILE_ONLY_EXCLUSIONS: tuple[ExclusionRule, ...] = (
    ExclusionRule(group=GrammarKitConstants.PLUGINS_GROUP, module="ant"),
    ExclusionRule(group=GrammarKitConstants.PLUGINS_GROUP, module="idea"),
)


class Branch(str, Enum):
    """Which dependency declaration strategy was applied."""

    COMPILE_ONLY = "compile_only"
    DEDICATED_CLASSPATH = "dedicated_classpath"


def grammar_kit_notation(release: str) -> str:
    return (
        f"{GrammarKitConstants.GRAMMAR_KIT_GROUP}:"
        f"{GrammarKitConstants.GRAMMAR_KIT_ARTIFACT}:{release}"
    )


def jflex_notation(release: str) -> str:
    return f"{GrammarKitConstants.JFLEX_GROUP}:{GrammarKitConstants.JFLEX_ARTIFACT}:{release}"


class DependencySetBuilder:
    """
    Populate dependency sets from a frozen configuration.

    Example:
        >>> builder = DependencySetBuilder(compile_only, grammar_kit_class_path, bom)
        >>> builder.configure(FrozenConfiguration(grammar_kit_release="2022.3.2", jflex_release="1.9.2"))
        <Branch.COMPILE_ONLY: 'compile_only'>
    """

    def __init__(
        self,
        compile_only: DependencySet,
        grammar_kit_class_path: DependencySet,
        bom: DependencySet,
        settings: Settings | None = None,
    ) -> None:
        self.compile_only = compile_only
        self.grammar_kit_class_path = grammar_kit_class_path
        self.bom = bom
        self.settings = settings or get_settings()

    def configure(self, config: FrozenConfiguration) -> Branch:
        """Declare dependencies for the branch selected by ``config``."""
        if config.intellij_release is None:
            self._configure_compile_only(config)
            return Branch.COMPILE_ONLY

        self._configure_grammar_kit_class_path(config, config.intellij_release)
        return Branch.DEDICATED_CLASSPATH

    def _configure_compile_only(self, config: FrozenConfiguration) -> None:
        logger.info(
            f"No IntelliJ release configured, adding Grammar-Kit and JFlex to "
            f"'{self.compile_only.name}'"
        )
        self.compile_only.add_all(
            [
                grammar_kit_notation(config.grammar_kit_release),
                jflex_notation(config.jflex_release),
            ]
        )
        for rule in COMPILE_ONLY_EXCLUSIONS:
            self.compile_only.exclude(group=rule.group, module=rule.module)

        self._configure_bom()

    def _configure_bom(self) -> None:
        coordinate = self.settings.bom_coordinate.strip()
        if not coordinate:
            logger.debug(f"Auxiliary '{self.bom.name}' set disabled")
            return

        self.bom.add(coordinate)
        if self.settings.bom_exclude_group or self.settings.bom_exclude_module:
            self.bom.exclude(
                group=self.settings.bom_exclude_group,
                module=self.settings.bom_exclude_module,
            )

    def _configure_grammar_kit_class_path(
        self,
        config: FrozenConfiguration,
        intellij_release: str,
    ) -> None:
        logger.info(
            f"IntelliJ {intellij_release} configured, declaring generator classpath in "
            f"'{self.grammar_kit_class_path.name}'"
        )
        platform = [
            f"{GrammarKitConstants.INTELLIJ_PLATFORM_GROUP}:{module}:{intellij_release}"
            for module in GrammarKitConstants.INTELLIJ_PLATFORM_MODULES
        ]
        self.grammar_kit_class_path.add_all(
            [
                grammar_kit_notation(config.grammar_kit_release),
                jflex_notation(config.jflex_release),
                *platform,
                GrammarKitConstants.ASM_ALL_COORDINATE,
            ]
        )
        for rule in PLATFORM_EXCLUSIONS:
            self.grammar_kit_class_path.exclude(group=rule.group, module=rule.module)
