"""Binary search over the release sequence."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from msrvscan.common.logging_utils import extra_context, is_debug_enabled
from msrvscan.errors import NoToolchainsToTryError
from msrvscan.reporter.events import FindMsrv, Progress
from msrvscan.search.base import SearchStrategy
from msrvscan.versioning.models import MsrvDecision, Release, SearchMethod

logger = logging.getLogger(__name__)


class Bisect(SearchStrategy):
    """Bisect the search space, assuming compatibility is monotonic.

    The window ``[left, right]`` shrinks towards the boundary between
    incompatible (recent) and compatible (older) releases: a compatible
    middle moves ``left`` past it, an incompatible one moves ``right`` onto
    it. Once the window converges on the oldest release, that release is
    probed separately, since the loop itself never probes it.

    Compatibility is not verified to be monotonic. With a non-monotonic
    checker the result may not be the oldest compatible release.
    """

    method = SearchMethod.BISECT

    def find_toolchain(self, search_space: Sequence[Release]) -> MsrvDecision:
        logger.info("Bisecting over %d releases", len(search_space))

        with self.reporter.scoped(FindMsrv(search_method=self.method)):
            if not search_space:
                raise NoToolchainsToTryError()

            total = len(search_space)
            left, right = 0, total - 1
            best: Optional[int] = None
            iteration = 0

            while left != right:
                middle = (left + right) // 2
                outcome = self._check(search_space[middle])
                iteration += 1
                self.reporter.report(
                    Progress(current=middle, search_space_size=total, iteration=iteration)
                )

                if outcome.is_compatible:
                    best = middle
                    left = middle + 1
                else:
                    right = middle

                if is_debug_enabled(logger):
                    logger.debug(
                        "Bisect step",
                        extra=extra_context(
                            event="decision",
                            component="bisect",
                            action="step",
                            outcome="compatible" if outcome.is_compatible else "incompatible",
                            middle=middle,
                            left=left,
                            right=right,
                        ),
                    )

            converged = left
            if converged == total - 1:
                self.reporter.report(
                    Progress(current=converged, search_space_size=total, iteration=iteration + 1)
                )
                if self._check(search_space[converged]).is_compatible:
                    return self._decide(search_space[converged])

            return self._decide(search_space[best] if best is not None else None)
