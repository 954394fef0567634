"""Resolve the symbolic ``latest`` Grammar-Kit release to a concrete tag.

GitHub answers ``/releases/latest`` with a redirect to ``/releases/tag/<tag>``;
the tag is read from the ``Location`` header without following the redirect.
"""

import httpx
from loguru import logger

from grammarkit.core.config import get_settings
from grammarkit.core.constants import GrammarKitConstants
from grammarkit.core.exceptions import VersionResolutionError


class VersionResolver:
    """
    Look up the latest Grammar-Kit release over HTTP.

    Explicit versions are returned as-is without touching the network. The
    sentinel triggers a single HEAD request with redirects disabled; any
    failure is fatal and not retried.

    Example:
        >>> resolver = VersionResolver()
        >>> resolver.resolve("2022.3.2")
        '2022.3.2'
        >>> resolver.resolve("latest")
        '2023.3'
    """

    def __init__(
        self,
        url: str | None = None,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            url: Endpoint redirecting to the latest release (settings default).
            client: Optional preconfigured client, e.g. with a mock transport.
            timeout: Request timeout in seconds (settings default).
        """
        settings = get_settings()
        self.url = url or settings.latest_release_url
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self._client = client

    def resolve(self, requested: str) -> str:
        """
        Return ``requested`` unless it is the ``latest`` sentinel.

        Raises:
            VersionResolutionError: If the latest release lookup fails.
        """
        if requested != GrammarKitConstants.LATEST_VERSION:
            return requested

        logger.info(f"Resolving latest Grammar-Kit release from {self.url}")
        version = self._lookup_latest()
        logger.info(f"Latest Grammar-Kit release is {version}")
        return version

    def _lookup_latest(self) -> str:
        try:
            if self._client is not None:
                response = self._client.head(self.url, follow_redirects=False)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=False) as client:
                    response = client.head(self.url)
        except httpx.HTTPError as e:
            logger.error(f"Latest release lookup failed: {e}")
            raise VersionResolutionError("Cannot resolve the latest GrammarKit version") from e

        if not response.is_redirect:
            raise VersionResolutionError(
                "Cannot resolve the latest GrammarKit version: "
                f"expected a redirect, got HTTP {response.status_code}"
            )

        location = response.headers.get("Location", "")
        version = location.rstrip("/").split("/")[-1]
        if not version:
            raise VersionResolutionError(
                "Cannot resolve the latest GrammarKit version: redirect has no Location"
            )
        return version


def resolve_generator_version(requested: str, client: httpx.Client | None = None) -> str:
    """Resolve ``requested`` with a one-off :class:`VersionResolver`."""
    return VersionResolver(client=client).resolve(requested)
