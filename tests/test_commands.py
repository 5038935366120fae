"""Tests for the find, verify and show subcommands."""

from unittest.mock import patch

import pytest
import semantic_version

from msrvscan.check.testing import AcceptSetCheck
from msrvscan.commands import FindSettings, VerifySettings, find_msrv, show_msrv, verify_msrv
from msrvscan.errors import (
    ManifestError,
    NoToolchainsToTryError,
    NoVersionMatchesError,
    UnableToFindAnyGoodVersion,
    VerifyFailedError,
)
from msrvscan.reporter import CollectingHandler, Reporter
from msrvscan.reporter.events import FetchIndex, FindResult, ShowResult, VerifyResult
from msrvscan.versioning.bare_version import BareVersion
from msrvscan.versioning.models import Release, SearchMethod

TARGET = "x86_64-unknown-linux-gnu"

RELEASES = [
    Release.stable(v)
    for v in ["1.58.1", "1.58.0", "1.57.0", "1.56.1", "1.56.0", "1.55.0", "1.54.1", "1.54.0"]
]


def write_manifest(tmp_path, rust_version):
    (tmp_path / "Cargo.toml").write_text(
        f'[package]\nname = "a"\nrust-version = "{rust_version}"\n', encoding="utf-8"
    )


class TestFind:
    """Filtering, searching and reporting the MSRV."""

    def test_bisect(self):
        handler = CollectingHandler()
        checker = AcceptSetCheck(["1.58.1", "1.57.0", "1.56.1"])

        msrv = find_msrv(FindSettings(target=TARGET), checker, Reporter(handler), releases=RELEASES)

        assert msrv == semantic_version.Version("1.56.1")
        result = handler.of_type(FindResult)[0]
        assert result.success
        assert result.version == "1.56.1"
        assert result.search_method is SearchMethod.BISECT
        assert result.target == TARGET

    def test_linear(self):
        checker = AcceptSetCheck(["1.58.1", "1.57.0"])
        settings = FindSettings(target=TARGET, search_method=SearchMethod.LINEAR)

        assert find_msrv(settings, checker, releases=RELEASES) == semantic_version.Version("1.57.0")
        assert checker.probed_versions == ["1.58.1", "1.57.0", "1.56.1"]

    def test_only_latest_patches_are_probed(self):
        checker = AcceptSetCheck([str(r.version) for r in RELEASES])
        settings = FindSettings(target=TARGET, search_method=SearchMethod.LINEAR)

        find_msrv(settings, checker, releases=RELEASES)

        assert checker.probed_versions == ["1.58.1", "1.57.0", "1.56.1", "1.55.0", "1.54.1"]

    def test_include_all_patch_releases(self):
        checker = AcceptSetCheck([str(r.version) for r in RELEASES])
        settings = FindSettings(
            target=TARGET,
            search_method=SearchMethod.LINEAR,
            include_all_patch_releases=True,
        )

        assert find_msrv(settings, checker, releases=RELEASES) == semantic_version.Version("1.54.0")

    def test_bounds(self):
        checker = AcceptSetCheck([str(r.version) for r in RELEASES])
        settings = FindSettings(
            target=TARGET,
            search_method=SearchMethod.LINEAR,
            min_version=BareVersion.two_components(1, 55),
            max_version=BareVersion.two_components(1, 57),
        )

        assert find_msrv(settings, checker, releases=RELEASES) == semantic_version.Version("1.55.0")
        assert checker.probed_versions == ["1.57.0", "1.56.1", "1.55.0"]

    def test_empty_search_space_names_bounds(self):
        checker = AcceptSetCheck([])
        settings = FindSettings(
            target=TARGET,
            min_version=BareVersion.two_components(1, 56),
            max_version=BareVersion.three_components(1, 54, 0),
        )

        with pytest.raises(NoToolchainsToTryError) as excinfo:
            find_msrv(settings, checker, releases=RELEASES)

        assert excinfo.value.has_clues()
        assert "1.56" in str(excinfo.value)
        assert "1.54.0" in str(excinfo.value)
        assert f"from {RELEASES[0].version} down to {RELEASES[-1].version}" in str(excinfo.value)
        assert checker.probes == []

    def test_no_compatible_toolchain(self):
        handler = CollectingHandler()
        checker = AcceptSetCheck([])

        with pytest.raises(UnableToFindAnyGoodVersion) as excinfo:
            find_msrv(
                FindSettings(target=TARGET),
                checker,
                Reporter(handler),
                releases=RELEASES,
                command_hint="rustup run <toolchain> cargo check",
            )

        assert "rustup run <toolchain> cargo check" in str(excinfo.value)
        assert not handler.of_type(FindResult)[0].success

    @patch("msrvscan.commands.find.fetch_release_index")
    def test_fetches_index_when_not_given(self, mock_fetch):
        mock_fetch.return_value = RELEASES
        handler = CollectingHandler()
        settings = FindSettings(target=TARGET, release_source="rust-dist", request_timeout=3)

        find_msrv(settings, AcceptSetCheck(["1.58.1"]), Reporter(handler))

        mock_fetch.assert_called_once_with("rust-dist", timeout=3)
        assert handler.of_type(FetchIndex)[0].source == "rust-dist"


class TestVerify:
    """Verifying the declared MSRV with a single probe."""

    def test_compatible_from_manifest(self, tmp_path):
        write_manifest(tmp_path, "1.56")
        handler = CollectingHandler()
        checker = AcceptSetCheck(["1.56.1"])
        settings = VerifySettings(target=TARGET, manifest_path=tmp_path)

        toolchain = verify_msrv(settings, checker, Reporter(handler), releases=RELEASES)

        assert str(toolchain.version) == "1.56.1"
        assert checker.probed_versions == ["1.56.1"]
        assert handler.of_type(VerifyResult)[0].is_compatible

    def test_explicit_rust_version(self, tmp_path):
        checker = AcceptSetCheck(["1.54.1"])
        settings = VerifySettings(
            target=TARGET,
            manifest_path=tmp_path,
            rust_version=BareVersion.three_components(1, 54, 0),
        )

        toolchain = verify_msrv(settings, checker, releases=RELEASES)

        assert str(toolchain.version) == "1.54.1"

    def test_incompatible(self, tmp_path):
        write_manifest(tmp_path, "1.55.0")
        handler = CollectingHandler()
        settings = VerifySettings(target=TARGET, manifest_path=tmp_path)

        with pytest.raises(VerifyFailedError) as excinfo:
            verify_msrv(settings, AcceptSetCheck([]), Reporter(handler), releases=RELEASES)

        assert excinfo.value.rust_version == BareVersion.three_components(1, 55, 0)
        assert "not accepted" in excinfo.value.error_message
        assert not handler.of_type(VerifyResult)[0].is_compatible

    def test_unknown_version(self, tmp_path):
        write_manifest(tmp_path, "1.20")
        settings = VerifySettings(target=TARGET, manifest_path=tmp_path)

        with pytest.raises(NoVersionMatchesError):
            verify_msrv(settings, AcceptSetCheck([]), releases=RELEASES)

    def test_missing_manifest(self, tmp_path):
        settings = VerifySettings(target=TARGET, manifest_path=tmp_path)
        with pytest.raises(ManifestError):
            verify_msrv(settings, AcceptSetCheck([]), releases=RELEASES)


class TestShow:
    """Showing the declared MSRV."""

    def test_show(self, tmp_path):
        write_manifest(tmp_path, "1.56")
        handler = CollectingHandler()

        assert show_msrv(tmp_path, Reporter(handler)) == BareVersion.two_components(1, 56)

        event = handler.of_type(ShowResult)[0]
        assert event.version == "1.56"
        assert event.manifest_path == str(tmp_path / "Cargo.toml")

    def test_show_without_msrv(self, tmp_path):
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "a"\n', encoding="utf-8")
        with pytest.raises(ManifestError):
            show_msrv(tmp_path)
