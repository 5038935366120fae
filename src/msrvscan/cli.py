"""Command line entry point for msrvscan."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from msrvscan import __version__
from msrvscan.args import parse_args
from msrvscan.check.default_target import default_target
from msrvscan.check.rustup import CheckSettings, RustupToolchainCheck
from msrvscan.cli_config import apply_config, config_path_for, load_config
from msrvscan.commands.find import FindSettings, find_msrv
from msrvscan.commands.show import show_msrv
from msrvscan.commands.verify import VerifySettings, verify_msrv
from msrvscan.common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from msrvscan.constants import Constants, ExitCodes, ReleaseSources
from msrvscan.errors import MsrvScanError
from msrvscan.manifest import edition_to_version, parse_version_or_edition, read_edition
from msrvscan.reporter import Reporter, handler_for_format
from msrvscan.reporter.events import Meta, TerminateWithFailure
from msrvscan.versioning.bare_version import BareVersion
from msrvscan.versioning.models import SearchMethod

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)


def _crate_root(args) -> Path:
    return Path(getattr(args, "PATH", None) or os.getcwd())


def _check_settings(args) -> CheckSettings:
    return CheckSettings(
        crate_root=_crate_root(args),
        check_command=list(args.CHECK_COMMAND or Constants.DEFAULT_CHECK_COMMAND),
        ignore_lockfile=bool(args.IGNORE_LOCKFILE),
        no_check_feedback=bool(args.NO_CHECK_FEEDBACK),
        skip_unavailable_toolchains=bool(args.SKIP_UNAVAILABLE_TOOLCHAINS),
    )


def _minimum_version(args) -> Optional[BareVersion]:
    """``--min`` if given; otherwise the first release of the crate's edition."""
    if args.MIN:
        return parse_version_or_edition(args.MIN)
    edition = read_edition(_crate_root(args))
    if edition is None:
        return None
    version = edition_to_version(edition)
    if version is not None:
        logger.info("Using edition %s: minimum version %s", edition, version)
    return version


def run_find(args, reporter: Reporter) -> None:
    check_settings = _check_settings(args)
    settings = FindSettings(
        target=args.TARGET or default_target(),
        components=list(args.COMPONENTS or []),
        search_method=SearchMethod(args.SEARCH_METHOD or SearchMethod.BISECT.value),
        release_source=args.RELEASE_SOURCE or ReleaseSources.RUST_CHANGELOG.value,
        include_all_patch_releases=bool(args.INCLUDE_ALL_PATCH_RELEASES),
        min_version=_minimum_version(args),
        max_version=BareVersion.parse(args.MAX) if args.MAX else None,
        request_timeout=args.REQUEST_TIMEOUT or Constants.REQUEST_TIMEOUT,
    )
    checker = RustupToolchainCheck(check_settings, reporter)
    find_msrv(settings, checker, reporter, command_hint=check_settings.check_command_string())


def run_verify(args, reporter: Reporter) -> None:
    settings = VerifySettings(
        target=args.TARGET or default_target(),
        manifest_path=_crate_root(args),
        components=list(args.COMPONENTS or []),
        rust_version=BareVersion.parse(args.RUST_VERSION) if args.RUST_VERSION else None,
        release_source=args.RELEASE_SOURCE or ReleaseSources.RUST_CHANGELOG.value,
        request_timeout=args.REQUEST_TIMEOUT or Constants.REQUEST_TIMEOUT,
    )
    checker = RustupToolchainCheck(_check_settings(args), reporter)
    verify_msrv(settings, checker, reporter)


def run_show(args, reporter: Reporter) -> None:
    show_msrv(_crate_root(args), reporter)


COMMANDS = {
    "find": run_find,
    "verify": run_verify,
    "show": run_show,
}


def run(args, reporter: Reporter) -> ExitCodes:
    """Run the selected subcommand and map failures to an exit code."""
    try:
        COMMANDS[args.COMMAND](args, reporter)
    except MsrvScanError as exc:
        logger.error("%s", exc)
        if is_debug_enabled(logger):
            logger.debug(
                "Command failed",
                extra=extra_context(
                    event="function_exit",
                    component="cli",
                    action=args.COMMAND,
                    outcome=type(exc).__name__,
                ),
            )
        reporter.report(TerminateWithFailure(message=str(exc)))
        return exc.exit_code
    return ExitCodes.SUCCESS


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    apply_config(args, load_config(config_path_for(args)))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND)
        )

    reporter = Reporter(handler_for_format(args.OUTPUT_FORMAT))
    reporter.report(Meta(version=__version__))
    try:
        code = run(args, reporter)
    finally:
        reporter.finish()
    sys.exit(code.value)


if __name__ == "__main__":
    main()
