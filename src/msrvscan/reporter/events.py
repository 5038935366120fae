"""Events emitted while determining or verifying an MSRV.

Renderers consume these; none of them influence a search decision.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from msrvscan.versioning.models import SearchMethod, Toolchain


@dataclass(frozen=True)
class Event:
    """Base class; ``type`` is the snake_case name used in JSON output."""
    type: ClassVar[str] = "event"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class Meta(Event):
    type: ClassVar[str] = "meta"
    instance: str = "msrvscan"
    version: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "instance": self.instance, "version": self.version}


@dataclass(frozen=True)
class FetchIndex(Event):
    type: ClassVar[str] = "fetch_index"
    source: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "source": self.source}


@dataclass(frozen=True)
class FindMsrv(Event):
    type: ClassVar[str] = "find_msrv"
    search_method: SearchMethod = SearchMethod.BISECT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "search_method": self.search_method.value}


@dataclass(frozen=True)
class Progress(Event):
    """Position of the running probe in the search space."""
    type: ClassVar[str] = "progress"
    current: int = 0
    search_space_size: int = 0
    iteration: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "current": self.current,
            "search_space_size": self.search_space_size,
            "iteration": self.iteration,
        }


@dataclass(frozen=True)
class CheckToolchain(Event):
    type: ClassVar[str] = "check_toolchain"
    toolchain: Optional[Toolchain] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "toolchain": self.toolchain.to_dict() if self.toolchain else None}


@dataclass(frozen=True)
class SetupToolchain(Event):
    type: ClassVar[str] = "setup_toolchain"
    toolchain: Optional[Toolchain] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "toolchain": self.toolchain.to_dict() if self.toolchain else None}


@dataclass(frozen=True)
class CheckMethod(Event):
    type: ClassVar[str] = "check_method"
    toolchain: Optional[Toolchain] = None
    args: List[str] = field(default_factory=list)
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "toolchain": self.toolchain.to_dict() if self.toolchain else None,
            "method": {"type": "rustup_run", "args": list(self.args), "path": self.path},
        }


@dataclass(frozen=True)
class CheckResult(Event):
    """Outcome of one probe; ``error`` is None when feedback is suppressed."""
    type: ClassVar[str] = "check_result"
    toolchain: Optional[Toolchain] = None
    is_compatible: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type,
            "toolchain": self.toolchain.to_dict() if self.toolchain else None,
            "is_compatible": self.is_compatible,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class FindResult(Event):
    type: ClassVar[str] = "find_result"
    version: Optional[str] = None
    search_method: SearchMethod = SearchMethod.BISECT
    target: str = ""
    minimum_version: Optional[str] = None
    maximum_version: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.version is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type,
            "result": {
                "success": self.success,
                "search_method": self.search_method.value,
                "target": self.target,
                "minimum_version": self.minimum_version,
                "maximum_version": self.maximum_version,
            },
        }
        if self.version is not None:
            out["result"]["version"] = self.version
        return out


@dataclass(frozen=True)
class VerifyResult(Event):
    type: ClassVar[str] = "verify_result"
    toolchain: Optional[Toolchain] = None
    is_compatible: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.type,
            "toolchain": self.toolchain.to_dict() if self.toolchain else None,
            "is_compatible": self.is_compatible,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class ShowResult(Event):
    type: ClassVar[str] = "show_result"
    version: str = ""
    manifest_path: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "version": self.version, "manifest_path": self.manifest_path}


@dataclass(frozen=True)
class TerminateWithFailure(Event):
    type: ClassVar[str] = "terminate"
    message: str = ""
    is_error: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "is_error": self.is_error, "message": self.message}
