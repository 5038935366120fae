"""The ``show`` subcommand: print the MSRV declared in the manifest."""
from __future__ import annotations

from typing import Optional

from msrvscan.manifest import PathLike, manifest_path_for, read_minimum_rust_version
from msrvscan.reporter import Reporter
from msrvscan.reporter.events import ShowResult
from msrvscan.versioning.bare_version import BareVersion


def show_msrv(manifest_path: PathLike, reporter: Optional[Reporter] = None) -> BareVersion:
    manifest = manifest_path_for(manifest_path)
    version = read_minimum_rust_version(manifest)
    if reporter is not None:
        reporter.report(ShowResult(version=str(version), manifest_path=str(manifest)))
    return version
