"""Compatibility checker interface consumed by the search methods."""
from __future__ import annotations

from abc import ABC, abstractmethod

from msrvscan.versioning.models import Compatibility, Toolchain


class CompatibilityChecker(ABC):
    """Run one probe against one toolchain.

    Implementations return ``Compatible`` or ``Incompatible``; they raise
    ``CheckError`` only when the check itself could not be carried out.
    """

    @abstractmethod
    def check(self, toolchain: Toolchain) -> Compatibility:
        """Probe ``toolchain``.

        Args:
            toolchain: The toolchain to build the crate with.

        Returns:
            Compatibility: The outcome of this probe.
        """
