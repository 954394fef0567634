"""User-facing plugin configuration and its frozen snapshot.

Configuration happens in two phases. While the build script runs, values on
``GrammarKitExtension`` may change freely. When the project finishes
evaluating, ``freeze`` resolves the ``latest`` sentinel once and produces an
immutable ``FrozenConfiguration`` that every later step reads.
"""

from typing import TYPE_CHECKING

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from grammarkit.dependencies.version_resolver import VersionResolver


class FrozenConfiguration(BaseModel):
    """Immutable versions used for dependency declaration."""

    model_config = ConfigDict(frozen=True)

    grammar_kit_release: str = Field(..., min_length=1, description="Concrete Grammar-Kit release")
    jflex_release: str = Field(..., min_length=1, description="JFlex release")
    intellij_release: str | None = Field(
        default=None,
        description="IntelliJ platform release; selects the dedicated classpath branch",
    )

    @property
    def has_intellij_platform(self) -> bool:
        return self.intellij_release is not None


class GrammarKitExtension(BaseModel):
    """
    The ``grammarKit { ... }`` block of a build.

    Example:
        >>> extension = GrammarKitExtension()
        >>> extension.intellij_release = "2023.1"
        >>> frozen = extension.freeze(VersionResolver())
        >>> frozen.grammar_kit_release
        '2022.3.2'
    """

    model_config = ConfigDict(validate_assignment=True)

    grammar_kit_release: str = Field(
        default=GrammarKitConstants.LATEST_VERSION,
        min_length=1,
        description="Grammar-Kit release, or 'latest'",
    )
    jflex_release: str = Field(
        default=GrammarKitConstants.JFLEX_DEFAULT_VERSION,
        min_length=1,
        description="JFlex release",
    )
    intellij_release: str | None = Field(
        default=None,
        description="IntelliJ platform release to build the generator classpath from",
    )

    _frozen: FrozenConfiguration | None = PrivateAttr(default=None)

    @field_validator("intellij_release")
    @classmethod
    def _blank_is_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    def __setattr__(self, name: str, value: object) -> None:
        if not name.startswith("_") and self._frozen is not None:
            raise ConfigurationError(
                f"Cannot set '{name}': {GrammarKitConstants.GROUP_NAME} configuration is frozen"
            )
        super().__setattr__(name, value)

    @property
    def is_frozen(self) -> bool:
        return self._frozen is not None

    @property
    def frozen(self) -> FrozenConfiguration:
        """The snapshot taken by :meth:`freeze`.

        Raises:
            ConfigurationError: If the project has not been evaluated yet.
        """
        if self._frozen is None:
            raise ConfigurationError(
                f"{GrammarKitConstants.GROUP_NAME} configuration is not frozen yet"
            )
        return self._frozen

    def freeze(self, resolver: "VersionResolver") -> FrozenConfiguration:
        """Resolve versions and take the immutable snapshot (once)."""
        if self._frozen is not None:
            return self._frozen

        snapshot = FrozenConfiguration(
            grammar_kit_release=resolver.resolve(self.grammar_kit_release),
            jflex_release=self.jflex_release,
            intellij_release=self.intellij_release,
        )
        self._frozen = snapshot
        logger.info(
            f"Frozen {GrammarKitConstants.GROUP_NAME} configuration: "
            f"Grammar-Kit {snapshot.grammar_kit_release}, JFlex {snapshot.jflex_release}, "
            f"IntelliJ {snapshot.intellij_release or 'not configured'}"
        )
        return snapshot
