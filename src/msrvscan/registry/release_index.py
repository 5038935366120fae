"""Fetch the index of stable Rust releases."""
from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

import semantic_version

from msrvscan.common.http_client import robust_get
from msrvscan.common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from msrvscan.constants import Constants, ReleaseSources
from msrvscan.errors import ReleaseIndexError
from msrvscan.versioning.models import Release

logger = logging.getLogger(__name__)

_CHANGELOG_HEADING = re.compile(r"^Version (\d+)\.(\d+)\.(\d+) \(", re.MULTILINE)
_DIST_MANIFEST = re.compile(r"channel-rust-(\d+)\.(\d+)\.(\d+)\.toml$", re.MULTILINE)


def parse_changelog(text: str) -> List[Release]:
    """Collect releases from the ``Version X.Y.Z (date)`` headings of RELEASES.md."""
    return _to_releases(_CHANGELOG_HEADING.findall(text or ""))


def parse_dist_manifests(text: str) -> List[Release]:
    """Collect releases from the ``channel-rust-X.Y.Z.toml`` entries of manifests.txt.

    Beta and nightly manifests, and dated stable channel manifests, do not
    carry a full version and are skipped.
    """
    return _to_releases(_DIST_MANIFEST.findall(text or ""))


def _to_releases(matches: Iterable) -> List[Release]:
    versions = set()
    for major, minor, patch in matches:
        version = semantic_version.Version(major=int(major), minor=int(minor), patch=int(patch))
        # Pre-1.0 versions are not stable releases.
        if version.major >= 1:
            versions.add(version)
    return [Release.stable(v) for v in sorted(versions, reverse=True)]


_SOURCES = {
    ReleaseSources.RUST_CHANGELOG.value: (Constants.RUST_CHANGELOG_URL, parse_changelog),
    ReleaseSources.RUST_DIST.value: (Constants.RUST_DIST_MANIFESTS_URL, parse_dist_manifests),
}


def fetch_release_index(
    source: str = ReleaseSources.RUST_CHANGELOG.value,
    timeout: Optional[float] = None,
) -> List[Release]:
    """Fetch and parse the index of stable releases.

    Args:
        source (str): One of ``Constants.SUPPORTED_RELEASE_SOURCES``.
        timeout (float, optional): Per request timeout in seconds.

    Returns:
        list: Stable releases, most recent first, without duplicates.

    Raises:
        ReleaseIndexError: If the source is unknown, the request failed, or
            no release could be parsed from the response.
    """
    if source not in _SOURCES:
        raise ReleaseIndexError(
            f"Unknown release source '{source}', expected one of: "
            f"{', '.join(Constants.SUPPORTED_RELEASE_SOURCES)}"
        )
    url, parse = _SOURCES[source]

    logger.info("Fetching release index from %s", source)
    kwargs = {"timeout": timeout} if timeout is not None else {}
    with Timer() as t:
        status, _headers, text = robust_get(url, **kwargs)

    if status != 200:
        logger.error("Unable to fetch release index from %s (status %s)", safe_url(url), status)
        raise ReleaseIndexError(
            f"Unable to fetch the Rust release index from '{safe_url(url)}': "
            f"{text if status == 0 else f'HTTP status {status}'}"
        )

    releases = parse(text)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed release index",
            extra=extra_context(
                event="release_index",
                component="release_index",
                action="parse",
                outcome="success" if releases else "empty",
                source=source,
                count=len(releases),
                duration_ms=t.duration_ms(),
            ),
        )

    if not releases:
        raise ReleaseIndexError(f"The Rust release index from '{safe_url(url)}' contained no releases")
    return releases
