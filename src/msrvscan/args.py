"""Argument parsing functionality for msrvscan."""

import argparse
import sys

from msrvscan import __version__
from msrvscan.constants import Constants


def _add_check_options(parser):
    """Options shared by the subcommands which run a toolchain check."""
    parser.add_argument("--target",
                        dest="TARGET",
                        help="Target triple to check with (default: the rustup default host)",
                        action="store", type=str)
    parser.add_argument("--component",
                        dest="COMPONENTS",
                        help="Rustup component to install with each toolchain; may be repeated",
                        action="append", type=str)
    parser.add_argument("--release-source",
                        dest="RELEASE_SOURCE",
                        help="Where to fetch the index of Rust releases from (default: rust-changelog)",
                        action="store", type=str,
                        choices=Constants.SUPPORTED_RELEASE_SOURCES)
    parser.add_argument("--ignore-lockfile",
                        dest="IGNORE_LOCKFILE",
                        help="Temporarily move Cargo.lock aside while checking",
                        action="store_true")
    parser.add_argument("--no-check-feedback",
                        dest="NO_CHECK_FEEDBACK",
                        help="Do not report the output of failed checks",
                        action="store_true")
    parser.add_argument("--skip-unavailable-toolchains",
                        dest="SKIP_UNAVAILABLE_TOOLCHAINS",
                        help="Treat toolchains rustup cannot install as incompatible",
                        action="store_true")
    parser.add_argument("--request-timeout",
                        dest="REQUEST_TIMEOUT",
                        help="Timeout in seconds for fetching the release index",
                        action="store", type=float)


def build_parser():
    """Build the argument parser, subcommands included."""
    parser = argparse.ArgumentParser(
        prog="msrvscan",
        description="msrvscan - find the Minimum Supported Rust Version (MSRV) of a crate",
        epilog="Arguments after '--' replace the check command (default: cargo check).",
        add_help=True,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--path",
                        dest="PATH",
                        help="Crate root directory (default: current directory)",
                        action="store", type=str)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help=f"YAML configuration file (default: {Constants.CONFIG_FILE} in the crate root)",
                        action="store", type=str)
    parser.add_argument("--output-format",
                        dest="OUTPUT_FORMAT",
                        help="How progress and results are reported",
                        action="store", type=str.lower,
                        choices=Constants.SUPPORTED_OUTPUT_FORMATS,
                        default="human")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    find = subparsers.add_parser("find", help="Determine the MSRV of the crate")
    method = find.add_mutually_exclusive_group()
    method.add_argument("--bisect",
                        dest="SEARCH_METHOD",
                        help="Use a binary search (default)",
                        action="store_const", const="bisect")
    method.add_argument("--linear",
                        dest="SEARCH_METHOD",
                        help="Check releases one by one, from the most recent",
                        action="store_const", const="linear")
    find.add_argument("--min",
                      dest="MIN",
                      help="Oldest version to consider; a bare version or an edition (e.g. 2018)",
                      action="store", type=str)
    find.add_argument("--max",
                      dest="MAX",
                      help="Most recent version to consider",
                      action="store", type=str)
    find.add_argument("--include-all-patch-releases",
                      dest="INCLUDE_ALL_PATCH_RELEASES",
                      help="Consider every patch release instead of only the latest of each minor",
                      action="store_true")
    _add_check_options(find)

    verify = subparsers.add_parser("verify", help="Verify the MSRV declared in Cargo.toml")
    verify.add_argument("--rust-version",
                        dest="RUST_VERSION",
                        help="Version to verify instead of the one declared in Cargo.toml",
                        action="store", type=str)
    _add_check_options(verify)

    subparsers.add_parser("show", help="Show the MSRV declared in Cargo.toml")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Everything after a ``--`` separator is the custom check command, stored
    as ``CHECK_COMMAND`` (None when absent).
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    check_command = None
    if "--" in argv:
        idx = argv.index("--")
        check_command = argv[idx + 1:] or None
        argv = argv[:idx]

    args = build_parser().parse_args(argv)
    args.CHECK_COMMAND = check_command
    return args
