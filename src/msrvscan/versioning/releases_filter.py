"""Narrow a descending sequence of releases down to the search space."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import semantic_version

from msrvscan.common.logging_utils import extra_context, is_debug_enabled
from msrvscan.versioning.bare_version import BareVersion
from msrvscan.versioning.models import Release

logger = logging.getLogger(__name__)


class ReleasesFilter:
    """Filter releases on patch collapsing and inclusive min/max bounds."""

    def __init__(
        self,
        include_all_patch_releases: bool = False,
        min_version: Optional[BareVersion] = None,
        max_version: Optional[BareVersion] = None,
    ):
        self.include_all_patch_releases = include_all_patch_releases
        self.min_version = min_version
        self.max_version = max_version

    def filter(self, releases: Sequence[Release]) -> List[Release]:
        """Filter the given releases, keeping their (descending) order.

        Args:
            releases: Releases ordered most recent first.

        Returns:
            list: The search space; may be empty.
        """
        if self.include_all_patch_releases:
            candidates = list(releases)
        else:
            candidates = latest_patch_releases(releases)

        included = [
            release
            for release in candidates
            if include_version(release.version, self.min_version, self.max_version)
        ]

        if is_debug_enabled(logger):
            logger.debug(
                "Filtered releases",
                extra=extra_context(
                    event="decision",
                    component="releases_filter",
                    action="filter",
                    count=len(included),
                    total=len(releases),
                    min_version=str(self.min_version) if self.min_version else None,
                    max_version=str(self.max_version) if self.max_version else None,
                ),
            )
        return included


def latest_patch_releases(releases: Sequence[Release]) -> List[Release]:
    """Keep only the first release seen for every (major, minor) pair."""
    seen = set()
    out: List[Release] = []
    for release in releases:
        key = (release.version.major, release.version.minor)
        if key in seen:
            continue
        seen.add(key)
        out.append(release)
    return out


def include_version(
    current: semantic_version.Version,
    min_version: Optional[BareVersion],
    max_version: Optional[BareVersion],
) -> bool:
    """Whether ``current`` lies in the inclusive [min_version, max_version] range."""
    if min_version is not None and not min_version.is_at_least(current):
        return False
    if max_version is not None and not max_version.is_at_most(current):
        return False
    return True
