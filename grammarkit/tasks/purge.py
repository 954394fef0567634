"""Removal of previously generated output before regeneration."""

import shutil
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from grammarkit.core.exceptions import PurgeError


def purge(paths: Iterable[Path | str], enabled: bool | None) -> list[Path]:
    """
    Recursively delete ``paths`` when ``enabled`` is true.

    Missing paths are skipped. A failure stops immediately and leaves any
    already-deleted paths deleted.

    Args:
        paths: Files or directories to remove.
        enabled: The task's ``purge_old_files`` flag; ``None`` counts as off.

    Returns:
        The paths that existed and were removed.

    Raises:
        PurgeError: If a path cannot be deleted.
    """
    if not enabled:
        return []

    removed: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.exists() and not path.is_symlink():
            logger.debug(f"Nothing to purge at {path}")
            continue

        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise PurgeError(path, str(e)) from e

        logger.info(f"Purged old generated output at {path}")
        removed.append(path)

    return removed
