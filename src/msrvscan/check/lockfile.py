"""Move a Cargo lockfile out of the way for the duration of a single probe."""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from msrvscan.constants import Constants
from msrvscan.errors import CheckError

logger = logging.getLogger(__name__)


@contextmanager
def relocated_lockfile(lockfile: Path, enabled: bool = True) -> Iterator[Optional[Path]]:
    """Temporarily rename ``lockfile`` while the block runs.

    Nothing happens when ``enabled`` is false or the lockfile does not exist.
    Otherwise the file is renamed to ``Constants.CARGO_LOCK_REPLACEMENT``
    next to it, and renamed back when the block exits, whether it returned
    or raised. A lockfile regenerated by the probe is discarded first.

    Yields:
        The temporary location of the lockfile, or None if it was not moved.
    """
    lockfile = Path(lockfile)
    if not enabled or not lockfile.is_file():
        yield None
        return

    replacement = lockfile.parent / Constants.CARGO_LOCK_REPLACEMENT
    try:
        os.replace(lockfile, replacement)
    except OSError as exc:
        raise CheckError(f"Unable to rename file '{lockfile}': {exc}") from exc
    logger.debug("Moved %s to %s", lockfile, replacement)

    try:
        yield replacement
    finally:
        try:
            if lockfile.is_file():
                lockfile.unlink()
            os.replace(replacement, lockfile)
        except OSError as exc:
            raise CheckError(f"Unable to restore lockfile '{lockfile}': {exc}") from exc
        logger.debug("Restored %s", lockfile)
