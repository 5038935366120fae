"""Subcommand implementations."""
from msrvscan.commands.find import FindSettings, find_msrv
from msrvscan.commands.show import show_msrv
from msrvscan.commands.verify import VerifySettings, verify_msrv

__all__ = ["FindSettings", "find_msrv", "VerifySettings", "verify_msrv", "show_msrv"]
