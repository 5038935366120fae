"""The ``find`` subcommand: determine the MSRV of a crate."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import semantic_version

from msrvscan.check.base import CompatibilityChecker
from msrvscan.constants import Constants, ReleaseSources
from msrvscan.errors import NoToolchainsToTryError, UnableToFindAnyGoodVersion
from msrvscan.registry.release_index import fetch_release_index
from msrvscan.reporter import Reporter
from msrvscan.reporter.events import FetchIndex, FindResult
from msrvscan.search import strategy_for
from msrvscan.versioning.bare_version import BareVersion
from msrvscan.versioning.models import Release, SearchMethod
from msrvscan.versioning.releases_filter import ReleasesFilter

logger = logging.getLogger(__name__)


@dataclass
class FindSettings:
    """Resolved options of a ``find`` run."""

    target: str
    components: List[str] = field(default_factory=list)
    search_method: SearchMethod = SearchMethod.BISECT
    release_source: str = ReleaseSources.RUST_CHANGELOG.value
    include_all_patch_releases: bool = False
    min_version: Optional[BareVersion] = None
    max_version: Optional[BareVersion] = None
    request_timeout: float = Constants.REQUEST_TIMEOUT


def fetch_releases(source: str, reporter: Reporter, timeout: Optional[float] = None) -> List[Release]:
    """Fetch the release index, reporting where it comes from."""
    reporter.report(FetchIndex(source=source))
    return fetch_release_index(source, timeout=timeout)


def find_msrv(
    settings: FindSettings,
    checker: CompatibilityChecker,
    reporter: Optional[Reporter] = None,
    releases: Optional[Sequence[Release]] = None,
    command_hint: str = "cargo check",
) -> semantic_version.Version:
    """Search for the oldest release which builds the crate.

    Args:
        settings: Resolved find options.
        checker: Runs a single probe.
        reporter: Receives progress and result events.
        releases: Release index, most recent first; fetched when omitted.
        command_hint: Check command shown to the user when no MSRV is found.

    Returns:
        The MSRV.

    Raises:
        NoToolchainsToTryError: If the bounds leave nothing to check.
        UnableToFindAnyGoodVersion: If no release was found compatible.
    """
    reporter = reporter if reporter is not None else Reporter()
    if releases is None:
        releases = fetch_releases(settings.release_source, reporter, settings.request_timeout)

    releases_filter = ReleasesFilter(
        include_all_patch_releases=settings.include_all_patch_releases,
        min_version=settings.min_version,
        max_version=settings.max_version,
    )
    search_space = releases_filter.filter(releases)
    if not search_space:
        raise NoToolchainsToTryError(
            min_version=settings.min_version,
            max_version=settings.max_version,
            candidates=[r.version for r in releases],
        )

    strategy = strategy_for(settings.search_method)(
        checker,
        target=settings.target,
        components=settings.components,
        reporter=reporter,
    )
    decision = strategy.find_toolchain(search_space)

    reporter.report(
        FindResult(
            version=str(decision.version) if decision.is_found else None,
            search_method=settings.search_method,
            target=settings.target,
            minimum_version=str(settings.min_version) if settings.min_version else None,
            maximum_version=str(settings.max_version) if settings.max_version else None,
        )
    )

    if not decision.is_found:
        logger.warning("No compatible toolchain found in %d releases", len(search_space))
        raise UnableToFindAnyGoodVersion(command_hint)

    logger.info("MSRV found: %s", decision.version)
    return decision.version
