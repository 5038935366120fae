"""Data models for releases, toolchains and the outcome of a search."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

import semantic_version

from msrvscan.constants import Constants


class SearchMethod(Enum):
    """Strategy used to walk the search space, chosen once per run."""
    LINEAR = "linear"
    BISECT = "bisect"


@dataclass(frozen=True)
class Release:
    """A published Rust toolchain release on a channel."""
    version: semantic_version.Version
    channel: str = Constants.STABLE_CHANNEL

    @classmethod
    def stable(cls, version: Union[str, semantic_version.Version]) -> "Release":
        if isinstance(version, str):
            version = semantic_version.Version(version)
        return cls(version=version)

    def to_toolchain(self, target: str, components: Tuple[str, ...] = ()) -> "Toolchain":
        """Bind this release to a target triple and components for a probe."""
        return Toolchain(version=self.version, target=target, components=tuple(components))


@dataclass(frozen=True)
class Toolchain:
    """The unit passed to a compatibility probe."""
    version: semantic_version.Version
    target: str
    components: Tuple[str, ...] = ()

    @property
    def spec(self) -> str:
        """Toolchain spec as understood by rustup, e.g. ``1.56.0-x86_64-unknown-linux-gnu``."""
        return f"{self.version}-{self.target}"

    def to_dict(self) -> dict:
        return {
            "version": str(self.version),
            "target": self.target,
            "components": list(self.components),
        }

    def __str__(self):
        return self.spec


@dataclass(frozen=True)
class Compatible:
    """The probed toolchain builds the crate."""
    toolchain: Toolchain

    @property
    def is_compatible(self) -> bool:
        return True

    @property
    def error_message(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Incompatible:
    """The probed toolchain does not build the crate; the diagnostic is kept verbatim."""
    toolchain: Toolchain
    error_message: Optional[str] = None

    @property
    def is_compatible(self) -> bool:
        return False


# Outcome of exactly one probe.
Compatibility = Union[Compatible, Incompatible]


@dataclass(frozen=True)
class MsrvDecision:
    """Terminal result of one search run.

    ``toolchain`` is None when no compatible toolchain was found.
    """
    toolchain: Optional[Toolchain] = field(default=None)

    @classmethod
    def found(cls, toolchain: Toolchain) -> "MsrvDecision":
        return cls(toolchain=toolchain)

    @classmethod
    def no_compatible_toolchain(cls) -> "MsrvDecision":
        return cls(toolchain=None)

    @property
    def is_found(self) -> bool:
        return self.toolchain is not None

    @property
    def version(self) -> Optional[semantic_version.Version]:
        return self.toolchain.version if self.toolchain is not None else None

