"""Shared plumbing for the MSRV search methods."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from msrvscan.check.base import CompatibilityChecker
from msrvscan.reporter import Reporter
from msrvscan.versioning.models import Compatibility, MsrvDecision, Release, SearchMethod

logger = logging.getLogger(__name__)


class SearchStrategy(ABC):
    """Find the oldest compatible release in a search space.

    The search space is ordered most recent first. Probes run one at a time,
    through ``checker``; a ``CheckError`` raised by the checker aborts the
    search.
    """

    method: SearchMethod

    def __init__(
        self,
        checker: CompatibilityChecker,
        target: str,
        components: Sequence[str] = (),
        reporter: Optional[Reporter] = None,
    ):
        self.checker = checker
        self.target = target
        self.components: Tuple[str, ...] = tuple(components)
        self.reporter = reporter if reporter is not None else Reporter()

    @abstractmethod
    def find_toolchain(self, search_space: Sequence[Release]) -> MsrvDecision:
        """Run the search and return its decision."""

    def _check(self, release: Release) -> Compatibility:
        toolchain = release.to_toolchain(self.target, self.components)
        outcome = self.checker.check(toolchain)
        logger.debug(
            "Probed %s: %s",
            toolchain.spec,
            "compatible" if outcome.is_compatible else "incompatible",
        )
        return outcome

    def _decide(self, release: Optional[Release]) -> MsrvDecision:
        if release is None:
            return MsrvDecision.no_compatible_toolchain()
        return MsrvDecision.found(release.to_toolchain(self.target, self.components))
