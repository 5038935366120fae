"""Deterministic in-memory checker for exercising the search methods."""
from __future__ import annotations

from typing import Iterable, List, Optional, Union

import semantic_version

from msrvscan.check.base import CompatibilityChecker
from msrvscan.errors import CheckError
from msrvscan.versioning.models import Compatibility, Compatible, Incompatible, Toolchain


class AcceptSetCheck(CompatibilityChecker):
    """Accept exactly the given versions; record the order of the probes.

    ``fail_on`` names versions for which the checker raises ``CheckError``,
    to simulate an infrastructure failure.
    """

    def __init__(
        self,
        accept: Iterable[Union[str, semantic_version.Version]],
        fail_on: Optional[Iterable[Union[str, semantic_version.Version]]] = None,
    ):
        self.accept = {_version(v) for v in accept}
        self.fail_on = {_version(v) for v in (fail_on or ())}
        self.probes: List[Toolchain] = []

    @property
    def probed_versions(self) -> List[str]:
        return [str(t.version) for t in self.probes]

    def check(self, toolchain: Toolchain) -> Compatibility:
        self.probes.append(toolchain)
        if toolchain.version in self.fail_on:
            raise CheckError(f"simulated failure for {toolchain.spec}")
        if toolchain.version in self.accept:
            return Compatible(toolchain)
        return Incompatible(toolchain, f"{toolchain.version} not accepted")


def _version(value) -> semantic_version.Version:
    if isinstance(value, semantic_version.Version):
        return value
    return semantic_version.Version(value)
