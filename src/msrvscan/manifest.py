"""Read the declared MSRV and edition from a Cargo manifest."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from msrvscan.constants import Constants
from msrvscan.errors import BareVersionParseError, ManifestError
from msrvscan.versioning.bare_version import BareVersion

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def manifest_path_for(path: PathLike) -> Path:
    """Return the path of ``Cargo.toml``, given either the file or its crate root."""
    path = Path(path)
    if path.is_dir():
        return path / Constants.CARGO_MANIFEST_FILE
    return path


def load_manifest(path: PathLike) -> Dict[str, Any]:
    """Parse a Cargo manifest.

    Raises:
        ManifestError: If the file is missing or is not valid TOML.
    """
    try:
        import tomllib as toml  # type: ignore
    except Exception:  # pylint: disable=broad-exception-caught
        import tomli as toml  # type: ignore

    manifest = manifest_path_for(path)
    try:
        with open(manifest, "rb") as f:
            return toml.load(f) or {}
    except FileNotFoundError as exc:
        raise ManifestError(manifest, "Cargo manifest not found") from exc
    except OSError as exc:
        raise ManifestError(manifest, f"Unable to read Cargo manifest ({exc})") from exc
    except (toml.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ManifestError(manifest, f"Unable to parse Cargo manifest ({exc})") from exc


def read_minimum_rust_version(path: PathLike) -> BareVersion:
    """Return the MSRV declared in a manifest.

    ``package.rust-version`` takes precedence over ``package.metadata.msrv``.
    A ``rust-version`` inherited with ``{ workspace = true }`` is taken from
    ``workspace.package.rust-version`` of the same manifest.

    Raises:
        ManifestError: If no MSRV is declared, or the declared value is not a
            valid two or three component version.
    """
    manifest = manifest_path_for(path)
    data = load_manifest(manifest)
    package = data.get("package") or {}

    value = package.get("rust-version")
    key = "package.rust-version"
    if isinstance(value, dict) and value.get("workspace") is True:
        value = ((data.get("workspace") or {}).get("package") or {}).get("rust-version")
        key = "workspace.package.rust-version"
    if value is None:
        value = (package.get("metadata") or {}).get("msrv")
        key = "package.metadata.msrv"

    if value is None:
        raise ManifestError(
            manifest,
            "Unable to find key 'package.rust-version' (or 'package.metadata.msrv') in Cargo manifest",
        )
    if not isinstance(value, str):
        raise ManifestError(manifest, f"Expected a string for '{key}', found {type(value).__name__}")

    try:
        version = BareVersion.parse(value)
    except BareVersionParseError as exc:
        raise ManifestError(manifest, f"Invalid '{key}' in Cargo manifest ({exc.reason})") from exc

    logger.debug("Read %s = %s from %s", key, version, manifest)
    return version


def read_edition(path: PathLike) -> Optional[str]:
    """Return ``package.edition``, or None when it is absent or the manifest is unreadable."""
    try:
        data = load_manifest(path)
    except ManifestError as exc:
        logger.debug("No edition available: %s", exc)
        return None
    edition = (data.get("package") or {}).get("edition")
    if edition is None:
        return None
    return str(edition)


def edition_to_version(edition: str) -> Optional[BareVersion]:
    """Map an edition such as ``2021`` to the first release supporting it."""
    version = Constants.EDITIONS.get(str(edition))
    if version is None:
        return None
    return BareVersion.parse(version)


def parse_version_or_edition(text: str) -> BareVersion:
    """Parse a ``--min`` style value: a bare version or an edition alias.

    Raises:
        BareVersionParseError: If ``text`` is neither.
    """
    edition_version = edition_to_version(text)
    if edition_version is not None:
        return edition_version
    return BareVersion.parse(text)
