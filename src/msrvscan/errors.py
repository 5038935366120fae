"""Exception hierarchy for msrvscan.

Compatibility failures are not exceptions: a toolchain which does not build a
crate is reported as ``Incompatible`` data by a checker. The exceptions below
cover input errors, infrastructure failures and the user-facing terminal
failures of the subcommands. Each carries the exit code the CLI should use.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from msrvscan.constants import ExitCodes


class ParseErrorKind(Enum):
    """Reasons a bare version can fail to parse."""

    OVERFLOW = "Component would overflow"
    UNEXPECTED_TOKEN = "Unexpected token"
    UNEXPECTED_END_OF_INPUT = "Unexpected end of input"
    PRE_RELEASE_MODIFIER_NOT_ALLOWED = "Pre-release modifiers are not allowed"
    EXPECTED_END_OF_INPUT = "Expected end of input"


class ExpectedToken(Enum):
    """Kind of token the bare version parser expected to see."""

    NUMBER = "Number"
    DOT = "Dot"


class MsrvScanError(Exception):
    """Base class for all errors raised by msrvscan."""

    exit_code = ExitCodes.FAILURE


class BareVersionParseError(MsrvScanError, ValueError):
    """A string could not be parsed as a two or three component version."""

    exit_code = ExitCodes.USAGE_ERROR

    def __init__(
        self,
        kind: ParseErrorKind,
        text: str,
        found: Optional[str] = None,
        expected: Optional[ExpectedToken] = None,
    ):
        self.kind = kind
        self.input = text
        self.found = found
        self.expected = expected
        super().__init__(f"Unable to parse minimum rust version '{text}': {self.reason}")

    @property
    def reason(self) -> str:
        """Human readable reason, without the offending input."""
        if self.kind is ParseErrorKind.UNEXPECTED_TOKEN:
            expected = self.expected.value if self.expected else "?"
            return f"Unexpected token '{self.found}', expected token of kind {expected}"
        return self.kind.value


class NoVersionMatchesError(MsrvScanError):
    """A bare version requirement did not match any of the available releases."""

    exit_code = ExitCodes.USAGE_ERROR

    def __init__(self, requirement, available: Sequence):
        self.requirement = requirement
        self.available = list(available)
        listed = ", ".join(str(v) for v in self.available)
        super().__init__(
            f"No Rust releases match input '{requirement}' (search space: [{listed}])"
        )


class NoToolchainsToTryError(MsrvScanError):
    """The filtered search space is empty, so there is nothing to check."""

    exit_code = ExitCodes.USAGE_ERROR

    def __init__(self, min_version=None, max_version=None, candidates: Optional[Sequence] = None):
        self.min_version = min_version
        self.max_version = max_version
        self.candidates = list(candidates) if candidates is not None else None
        message = "No Rust releases to check: the filtered search space is empty."
        if self.has_clues():
            message += (
                f" Search space limited by user to min Rust "
                f"'{min_version if min_version is not None else '<not overridden>'}', "
                f"and max Rust "
                f"'{max_version if max_version is not None else '<not overridden>'}'"
            )
        if self.candidates:
            newest, oldest = max(self.candidates), min(self.candidates)
            message += (
                f" (releases before filtering: {len(self.candidates)}, "
                f"from {newest} down to {oldest})"
            )
        elif self.candidates is not None:
            message += " (the release index is empty)"
        super().__init__(message)

    def has_clues(self) -> bool:
        """Whether a user given bound may explain the empty search space."""
        return self.min_version is not None or self.max_version is not None


class CheckError(MsrvScanError):
    """The checker itself could not run; this is never a compatibility decision."""

    exit_code = ExitCodes.CHECK_ERROR

    def __init__(self, message: str, command: Optional[Sequence[str]] = None, cwd: Optional[str] = None):
        self.command = list(command) if command else None
        self.cwd = cwd
        super().__init__(message)


class DefaultTargetError(CheckError):
    """The default host triple could not be determined from rustup."""

    def __init__(self, detail: str = ""):
        message = "The default host triple (target) could not be found."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message, command=["rustup", "show"])


class UnableToFindAnyGoodVersion(MsrvScanError):
    """Every probed toolchain was incompatible."""

    exit_code = ExitCodes.FAILURE

    def __init__(self, command: str):
        self.command = command
        super().__init__(
            "Unable to find a Minimum Supported Rust Version (MSRV).\n\n"
            f"If you think this result is erroneous, please run: `{command}` manually.\n"
        )


class VerifyFailedError(MsrvScanError):
    """The toolchain selected for verification was found incompatible."""

    exit_code = ExitCodes.FAILURE

    def __init__(self, toolchain, rust_version, error_message: Optional[str] = None):
        self.toolchain = toolchain
        self.rust_version = rust_version
        self.error_message = error_message
        super().__init__(
            f"Crate source was found to be incompatible with Rust version '{rust_version}' "
            f"specified as MSRV (toolchain '{toolchain}')"
        )


class ManifestError(MsrvScanError):
    """A Cargo manifest could not be read, or did not declare an MSRV."""

    exit_code = ExitCodes.FILE_ERROR

    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{reason}: '{path}'")


class ReleaseIndexError(MsrvScanError):
    """The index of Rust releases could not be obtained."""

    exit_code = ExitCodes.CONNECTION_ERROR
