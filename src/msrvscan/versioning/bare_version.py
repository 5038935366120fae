"""Bare versions: the ``rust-version`` syntax of a Cargo manifest.

A bare version is ``MAJOR.MINOR`` or ``MAJOR.MINOR.PATCH``. Unlike semver, it
accepts neither pre-release nor build metadata. Components are unsigned
64 bit integers; the parser accumulates digit by digit and refuses anything
that would overflow.
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

import semantic_version

from msrvscan.errors import (
    BareVersionParseError,
    ExpectedToken,
    NoVersionMatchesError,
    ParseErrorKind,
)

MAX_COMPONENT = 2**64 - 1

_DIGITS = "0123456789"


class BareVersion:
    """A two or three component version, immutable once parsed."""

    __slots__ = ("_components",)

    def __init__(self, major: int, minor: int, patch: Optional[int] = None):
        components = (major, minor) if patch is None else (major, minor, patch)
        for component in components:
            if not 0 <= component <= MAX_COMPONENT:
                raise ValueError(f"Version component out of range: {component}")
        object.__setattr__(self, "_components", components)

    def __setattr__(self, name, value):
        raise AttributeError("BareVersion is immutable")

    @classmethod
    def two_components(cls, major: int, minor: int) -> "BareVersion":
        return cls(major, minor)

    @classmethod
    def three_components(cls, major: int, minor: int, patch: int) -> "BareVersion":
        return cls(major, minor, patch)

    @classmethod
    def parse(cls, text: str) -> "BareVersion":
        """Parse a bare version.

        Args:
            text: Input such as ``"1.56"`` or ``"1.56.0"``.

        Returns:
            BareVersion: The parsed version.

        Raises:
            BareVersionParseError: With the kind of failure and the offending input.
        """
        return _parse_bare_version(text)

    @classmethod
    def from_semver(cls, version: semantic_version.Version) -> "BareVersion":
        return cls(version.major, version.minor, version.patch)

    @property
    def major(self) -> int:
        return self._components[0]

    @property
    def minor(self) -> int:
        return self._components[1]

    @property
    def patch(self) -> Optional[int]:
        """Patch component, or None for a two component version."""
        return self._components[2] if len(self._components) == 3 else None

    @property
    def is_two_components(self) -> bool:
        return len(self._components) == 2

    @property
    def components(self) -> Tuple[int, ...]:
        return self._components

    def to_comparator(self) -> semantic_version.SimpleSpec:
        """Tilde requirement fixing major and minor, and patch when present."""
        return semantic_version.SimpleSpec(f"~{self}")

    def try_to_semver(
        self, candidates: Iterable[semantic_version.Version]
    ) -> semantic_version.Version:
        """Return the first candidate matched by this version's tilde requirement.

        Args:
            candidates: Versions in caller order, usually most recent first.

        Raises:
            NoVersionMatchesError: If no candidate matches.
        """
        available = list(candidates)
        requirement = self.to_comparator()
        for version in available:
            if requirement.match(version):
                return version
        raise NoVersionMatchesError(self, available)

    def to_semver_version(self) -> semantic_version.Version:
        """Rewrite the components as a semver version, defaulting patch to 0."""
        patch = self.patch if self.patch is not None else 0
        return semantic_version.Version(major=self.major, minor=self.minor, patch=patch)

    def is_at_least(self, version: semantic_version.Version) -> bool:
        """Whether ``version`` is at least this bound.

        A two component bound ignores the patch of ``version``.
        """
        return _select(version, self) >= self._components

    def is_at_most(self, version: semantic_version.Version) -> bool:
        """Whether ``version`` is at most this bound.

        A two component bound ignores the patch of ``version``, so ``1.54``
        admits ``1.54.99`` while ``1.54.0`` does not.
        """
        return _select(version, self) <= self._components

    def __eq__(self, other):
        if not isinstance(other, BareVersion):
            return NotImplemented
        return self._components == other._components

    def __hash__(self):
        return hash(self._components)

    def __str__(self):
        return ".".join(str(c) for c in self._components)

    def __repr__(self):
        if self.is_two_components:
            return f"BareVersion.two_components({self.major}, {self.minor})"
        return f"BareVersion.three_components({self.major}, {self.minor}, {self.patch})"


def _select(version: semantic_version.Version, bound: BareVersion) -> Tuple[int, ...]:
    if bound.is_two_components:
        return (version.major, version.minor)
    return (version.major, version.minor, version.patch)


def _parse_number(text: str, pos: int) -> Tuple[int, int]:
    """Consume digits starting at ``pos``; return (value, new position)."""
    value = 0
    start = pos
    while pos < len(text) and text[pos] in _DIGITS:
        value = value * 10 + (ord(text[pos]) - ord("0"))
        if value > MAX_COMPONENT:
            raise BareVersionParseError(ParseErrorKind.OVERFLOW, text)
        pos += 1
    if pos == start:
        raise BareVersionParseError(ParseErrorKind.UNEXPECTED_END_OF_INPUT, text)
    return value, pos


def _parse_separator(text: str, pos: int) -> int:
    if pos >= len(text):
        raise BareVersionParseError(ParseErrorKind.UNEXPECTED_END_OF_INPUT, text)
    if text[pos] != ".":
        raise BareVersionParseError(
            ParseErrorKind.UNEXPECTED_TOKEN, text, found=text[pos], expected=ExpectedToken.DOT
        )
    return pos + 1


def _parse_bare_version(text: str) -> BareVersion:
    major, pos = _parse_number(text, 0)
    pos = _parse_separator(text, pos)
    minor, pos = _parse_number(text, pos)

    if pos == len(text):
        return BareVersion(major, minor)

    pos = _parse_separator(text, pos)
    patch, pos = _parse_number(text, pos)

    if pos == len(text):
        return BareVersion(major, minor, patch)

    # Like Cargo, pre-release modifiers are refused.
    if text[pos] == "-":
        raise BareVersionParseError(ParseErrorKind.PRE_RELEASE_MODIFIER_NOT_ALLOWED, text)

    raise BareVersionParseError(ParseErrorKind.EXPECTED_END_OF_INPUT, text)
