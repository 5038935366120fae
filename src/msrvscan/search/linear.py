"""Linear search: walk from the most recent release towards the oldest."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from msrvscan.reporter.events import FindMsrv, Progress
from msrvscan.search.base import SearchStrategy
from msrvscan.versioning.models import MsrvDecision, Release, SearchMethod

logger = logging.getLogger(__name__)


class Linear(SearchStrategy):
    """Probe every release in order until the first incompatible one.

    The MSRV is the last compatible release seen before stopping. No release
    older than the first incompatible one is ever probed.
    """

    method = SearchMethod.LINEAR

    def find_toolchain(self, search_space: Sequence[Release]) -> MsrvDecision:
        logger.info("Linear search over %d releases", len(search_space))
        total = len(search_space)

        with self.reporter.scoped(FindMsrv(search_method=self.method)):
            last_compatible: Optional[Release] = None
            for i, release in enumerate(search_space):
                self.reporter.report(Progress(current=i, search_space_size=total, iteration=i + 1))
                if not self._check(release).is_compatible:
                    break
                last_compatible = release

            return self._decide(last_compatible)
