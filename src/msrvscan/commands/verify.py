"""The ``verify`` subcommand: check the declared MSRV still builds the crate."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from msrvscan.check.base import CompatibilityChecker
from msrvscan.commands.find import fetch_releases
from msrvscan.constants import Constants, ReleaseSources
from msrvscan.errors import VerifyFailedError
from msrvscan.manifest import read_minimum_rust_version
from msrvscan.reporter import Reporter
from msrvscan.reporter.events import VerifyResult
from msrvscan.versioning.bare_version import BareVersion
from msrvscan.versioning.models import Release, Toolchain

logger = logging.getLogger(__name__)


@dataclass
class VerifySettings:
    """Resolved options of a ``verify`` run.

    When ``rust_version`` is None the MSRV is read from ``manifest_path``.
    """

    target: str
    manifest_path: Path
    components: List[str] = field(default_factory=list)
    rust_version: Optional[BareVersion] = None
    release_source: str = ReleaseSources.RUST_CHANGELOG.value
    request_timeout: float = Constants.REQUEST_TIMEOUT


def verify_msrv(
    settings: VerifySettings,
    checker: CompatibilityChecker,
    reporter: Optional[Reporter] = None,
    releases: Optional[Sequence[Release]] = None,
) -> Toolchain:
    """Probe the release matching the declared MSRV.

    Returns:
        The verified toolchain.

    Raises:
        ManifestError: If no version was given and the manifest declares none.
        NoVersionMatchesError: If no known release matches the MSRV.
        VerifyFailedError: If the toolchain does not build the crate.
    """
    reporter = reporter if reporter is not None else Reporter()
    rust_version = settings.rust_version
    if rust_version is None:
        rust_version = read_minimum_rust_version(settings.manifest_path)

    if releases is None:
        releases = fetch_releases(settings.release_source, reporter, settings.request_timeout)

    version = rust_version.try_to_semver(r.version for r in releases)
    toolchain = Toolchain(version=version, target=settings.target, components=tuple(settings.components))
    logger.info("Verifying MSRV %s with toolchain %s", rust_version, toolchain.spec)

    outcome = checker.check(toolchain)
    reporter.report(
        VerifyResult(
            toolchain=toolchain,
            is_compatible=outcome.is_compatible,
            error=outcome.error_message,
        )
    )

    if not outcome.is_compatible:
        raise VerifyFailedError(toolchain.spec, rust_version, outcome.error_message)
    return toolchain
