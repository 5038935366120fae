"""Compatibility checker which builds the crate with toolchains managed by rustup."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from msrvscan.check.base import CompatibilityChecker
from msrvscan.check.lockfile import relocated_lockfile
from msrvscan.common.logging_utils import Timer, extra_context, is_debug_enabled
from msrvscan.constants import Constants
from msrvscan.errors import CheckError
from msrvscan.reporter import Reporter
from msrvscan.reporter.events import CheckMethod, CheckResult, CheckToolchain, SetupToolchain
from msrvscan.versioning.models import Compatibility, Compatible, Incompatible, Toolchain

logger = logging.getLogger(__name__)


@dataclass
class CheckSettings:
    """How a single probe is carried out."""

    crate_root: Path
    check_command: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_CHECK_COMMAND))
    ignore_lockfile: bool = False
    no_check_feedback: bool = False
    skip_unavailable_toolchains: bool = False

    @property
    def lockfile_path(self) -> Path:
        return Path(self.crate_root) / Constants.CARGO_LOCK_FILE

    def check_command_string(self, version: Optional[str] = None) -> str:
        """The command a user can run to reproduce a probe by hand."""
        toolchain = version if version is not None else "<toolchain>"
        return " ".join(["rustup", "run", toolchain, *self.check_command])


class RustupToolchainCheck(CompatibilityChecker):
    """Install the toolchain with rustup, then run the check command through ``rustup run``."""

    def __init__(
        self,
        settings: CheckSettings,
        reporter: Optional[Reporter] = None,
    ):
        self.settings = settings
        self.reporter = reporter if reporter is not None else Reporter()

    def check(self, toolchain: Toolchain) -> Compatibility:
        settings = self.settings
        with self.reporter.scoped(CheckToolchain(toolchain=toolchain)):
            with relocated_lockfile(settings.lockfile_path, settings.ignore_lockfile):
                try:
                    self.setup_toolchain(toolchain)
                except CheckError as exc:
                    if not settings.skip_unavailable_toolchains:
                        raise
                    logger.warning("Skipping unavailable toolchain %s: %s", toolchain.spec, exc)
                    outcome: Compatibility = Incompatible(toolchain, str(exc))
                else:
                    outcome = self._run_check_command(toolchain)

            self._report_outcome(outcome)
        return outcome

    def setup_toolchain(self, toolchain: Toolchain) -> None:
        """Install the toolchain, its target and any requested components."""
        version = str(toolchain.version)
        with self.reporter.scoped(SetupToolchain(toolchain=toolchain)):
            logger.info("Installing toolchain %s", toolchain.spec)
            self._rustup_or_raise(
                ["install", "--profile", "minimal", version],
                f"rustup failed to install toolchain '{version}'",
            )
            self._rustup_or_raise(
                ["target", "add", "--toolchain", version, toolchain.target],
                f"rustup failed to add target '{toolchain.target}' to toolchain '{version}'",
            )
            if toolchain.components:
                self._rustup_or_raise(
                    ["component", "add", "--toolchain", version, *toolchain.components],
                    f"rustup failed to add components '{', '.join(toolchain.components)}' "
                    f"to toolchain '{version}'",
                )

    def _run_check_command(self, toolchain: Toolchain) -> Compatibility:
        settings = self.settings
        args = [str(toolchain.version), *settings.check_command]
        crate_root = str(settings.crate_root)

        self.reporter.report(CheckMethod(toolchain=toolchain, args=args, path=crate_root))

        with Timer() as t:
            result = self._rustup(["run", *args], cwd=crate_root)

        if is_debug_enabled(logger):
            logger.debug(
                "Check command finished",
                extra=extra_context(
                    event="check",
                    component="rustup",
                    action="run",
                    outcome="success" if result.returncode == 0 else "failure",
                    target=toolchain.spec,
                    duration_ms=t.duration_ms(),
                ),
            )

        if result.returncode == 0:
            return Compatible(toolchain)

        logger.info("Check failed for %s (exit code %s)", toolchain.spec, result.returncode)
        return Incompatible(toolchain, result.stderr or "")

    def _rustup_or_raise(self, args: Sequence[str], message: str) -> None:
        result = self._rustup(args)
        if result.returncode != 0:
            logger.error("%s: %s", message, (result.stderr or "").strip())
            raise CheckError(f"{message}: {(result.stderr or '').strip()}", command=["rustup", *args])

    def _rustup(self, args: Sequence[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
        command = ["rustup", *args]
        logger.debug("Running: %s", " ".join(command))
        try:
            return subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CheckError(
                f"Unable to run the check command: '{' '.join(command)}' at '{cwd or '.'}': {exc}",
                command=command,
                cwd=cwd,
            ) from exc

    def _report_outcome(self, outcome: Compatibility) -> None:
        error = None
        if not outcome.is_compatible and not self.settings.no_check_feedback:
            error = outcome.error_message
        self.reporter.report(
            CheckResult(toolchain=outcome.toolchain, is_compatible=outcome.is_compatible, error=error)
        )
