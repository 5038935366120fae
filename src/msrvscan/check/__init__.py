"""Compatibility checkers."""
from msrvscan.check.base import CompatibilityChecker
from msrvscan.check.rustup import CheckSettings, RustupToolchainCheck

__all__ = ["CompatibilityChecker", "CheckSettings", "RustupToolchainCheck"]
