"""Look up the default host triple from rustup."""
from __future__ import annotations

import logging
import subprocess

from msrvscan.errors import DefaultTargetError

logger = logging.getLogger(__name__)


def default_target() -> str:
    """Return the default host triple reported by ``rustup show``.

    The first line of the output reads ``Default host: <triple>``.

    Raises:
        DefaultTargetError: If rustup cannot be run or its output is unexpected.
    """
    try:
        result = subprocess.run(["rustup", "show"], capture_output=True, text=True, check=False)
    except OSError as exc:
        raise DefaultTargetError(str(exc)) from exc

    lines = (result.stdout or "").splitlines()
    if result.returncode != 0 or not lines:
        raise DefaultTargetError((result.stderr or "").strip())

    tokens = lines[0].split()
    if len(tokens) < 3:
        raise DefaultTargetError(f"Unexpected output: {lines[0]!r}")

    logger.debug("Default target: %s", tokens[2])
    return tokens[2]
