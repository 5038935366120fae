"""Tests for moving Cargo.lock aside during a probe."""

import os
from unittest.mock import patch

import pytest

from msrvscan.check.lockfile import relocated_lockfile
from msrvscan.constants import Constants
from msrvscan.errors import CheckError


@pytest.fixture
def crate(tmp_path):
    (tmp_path / "Cargo.lock").write_text("original", encoding="utf-8")
    return tmp_path


class TestRelocatedLockfile:
    """Relocation and restoration on every exit path."""

    def test_moves_and_restores(self, crate):
        lockfile = crate / "Cargo.lock"
        with relocated_lockfile(lockfile) as moved:
            assert moved == crate / Constants.CARGO_LOCK_REPLACEMENT
            assert not lockfile.exists()
            assert moved.read_text(encoding="utf-8") == "original"
        assert lockfile.read_text(encoding="utf-8") == "original"
        assert not (crate / Constants.CARGO_LOCK_REPLACEMENT).exists()

    def test_restores_when_block_raises(self, crate):
        lockfile = crate / "Cargo.lock"
        with pytest.raises(RuntimeError):
            with relocated_lockfile(lockfile):
                raise RuntimeError("probe failed")
        assert lockfile.read_text(encoding="utf-8") == "original"

    def test_discards_regenerated_lockfile(self, crate):
        lockfile = crate / "Cargo.lock"
        with relocated_lockfile(lockfile):
            lockfile.write_text("regenerated", encoding="utf-8")
        assert lockfile.read_text(encoding="utf-8") == "original"

    def test_disabled(self, crate):
        lockfile = crate / "Cargo.lock"
        with relocated_lockfile(lockfile, enabled=False) as moved:
            assert moved is None
            assert lockfile.exists()

    def test_missing_lockfile(self, tmp_path):
        with relocated_lockfile(tmp_path / "Cargo.lock") as moved:
            assert moved is None
        assert not (tmp_path / "Cargo.lock").exists()

    def test_rename_failure(self, crate):
        with patch("msrvscan.check.lockfile.os.replace", side_effect=OSError("denied")):
            with pytest.raises(CheckError):
                with relocated_lockfile(crate / "Cargo.lock"):
                    pass  # pragma: no cover
        assert os.path.exists(crate / "Cargo.lock")
