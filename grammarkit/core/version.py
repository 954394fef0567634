"""Host runtime version parsing and the minimum-version gate."""

import re
from functools import total_ordering

from loguru import logger

from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import SetupError

_VERSION_PATTERN = re.compile(r"^(\d+(?:\.\d+)*)(?:[-+.]?(.*))?$")


@total_ordering
class Version:
    """Dotted numeric version with an optional pre-release suffix.

    ``6.6-rc-1`` sorts before ``6.6``; missing trailing components count as
    zero, so ``6.6`` equals ``6.6.0``.
    """

    def __init__(self, release: tuple[int, ...], suffix: str = "") -> None:
        self.release = release
        self.suffix = suffix

    @classmethod
    def parse(cls, value: str) -> "Version":
        """Parse a version string such as ``8.5`` or ``7.0-rc-2``.

        Raises:
            ValueError: If the string does not start with a numeric component.
        """
        match = _VERSION_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"Invalid version: {value!r}")
        release = tuple(int(part) for part in match.group(1).split("."))
        return cls(release, match.group(2) or "")

    def _key(self) -> tuple[tuple[int, ...], int, str]:
        release = self.release
        while len(release) > 1 and release[-1] == 0:
            release = release[:-1]
        # Final releases sort after any pre-release of the same numbers
        return release, 0 if self.suffix else 1, self.suffix

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Version") -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = ".".join(str(part) for part in self.release)
        return f"{text}-{self.suffix}" if self.suffix else text

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"


def check_runtime_version(
    runtime_version: str,
    minimum: str = GrammarKitConstants.MINIMUM_RUNTIME_VERSION,
) -> None:
    """Abort plugin setup when the host runtime is older than ``minimum``.

    Raises:
        SetupError: If the runtime version is below the floor or unparseable.
    """
    try:
        current = Version.parse(runtime_version)
    except ValueError as e:
        raise SetupError(f"Cannot parse host runtime version {runtime_version!r}") from e

    if current < Version.parse(minimum):
        raise SetupError(
            f"{GrammarKitConstants.PLUGIN_NAME} requires host runtime {minimum} and higher "
            f"(found {runtime_version})"
        )
    logger.debug(f"Host runtime {runtime_version} satisfies minimum {minimum}")
