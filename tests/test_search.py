"""Tests for the linear and bisect search methods."""

import pytest

from msrvscan.check.testing import AcceptSetCheck
from msrvscan.errors import CheckError, NoToolchainsToTryError
from msrvscan.reporter import CollectingHandler, Reporter
from msrvscan.reporter.events import FindMsrv, Progress
from msrvscan.search import SEARCH_METHODS, Bisect, Linear, strategy_for
from msrvscan.versioning.models import Release, SearchMethod

TARGET = "x86_64-unknown-linux-gnu"

SPACE = [Release.stable(v) for v in ["1.58.1", "1.57.0", "1.56.1"]]


def releases(n):
    """``n`` releases, most recent first."""
    return [Release.stable(f"1.{50 + n - i}.0") for i in range(n)]


def run(strategy_cls, space, accept, **kwargs):
    checker = AcceptSetCheck(accept)
    handler = CollectingHandler()
    strategy = strategy_cls(checker, target=TARGET, reporter=Reporter(handler), **kwargs)
    decision = strategy.find_toolchain(space)
    return decision, checker, handler


def progress(handler):
    return [
        (p.current, p.search_space_size, p.iteration)
        for p in handler.of_type(Progress)
    ]


class TestLinear:
    """Linear search probes from the most recent release."""

    def test_all_compatible(self):
        decision, checker, handler = run(Linear, SPACE, ["1.58.1", "1.57.0", "1.56.1"])
        assert str(decision.version) == "1.56.1"
        assert checker.probed_versions == ["1.58.1", "1.57.0", "1.56.1"]
        assert progress(handler) == [(0, 3, 1), (1, 3, 2), (2, 3, 3)]

    def test_stops_at_first_incompatible(self):
        decision, checker, _ = run(Linear, SPACE, ["1.58.1", "1.57.0"])
        assert str(decision.version) == "1.57.0"
        assert checker.probed_versions == ["1.58.1", "1.57.0", "1.56.1"]

    def test_never_probes_past_an_incompatible_release(self):
        space = releases(5)
        decision, checker, _ = run(Linear, space, [str(space[0].version)])
        assert decision.version == space[0].version
        assert checker.probed_versions == [str(space[0].version), str(space[1].version)]

    def test_first_incompatible(self):
        decision, checker, _ = run(Linear, SPACE, [])
        assert not decision.is_found
        assert checker.probed_versions == ["1.58.1"]

    def test_only_oldest_compatible(self):
        # The most recent release is incompatible, so the search stops there.
        decision, checker, _ = run(Linear, SPACE, ["1.56.1"])
        assert not decision.is_found
        assert checker.probed_versions == ["1.58.1"]

    def test_empty_search_space(self):
        decision, checker, handler = run(Linear, [], ["1.56.1"])
        assert not decision.is_found
        assert checker.probes == []
        assert progress(handler) == []

    def test_decision_carries_target_and_components(self):
        decision, checker, _ = run(Linear, SPACE, ["1.58.1"], components=["rustfmt"])
        assert decision.toolchain.target == TARGET
        assert decision.toolchain.components == ("rustfmt",)
        assert checker.probes[0].components == ("rustfmt",)

    def test_scoped_find_event(self):
        _, _, handler = run(Linear, SPACE, ["1.58.1"])
        scoped = [(e, s) for e, s in handler.records if isinstance(e, FindMsrv)]
        assert [s["marker"] for _, s in scoped] == ["start", "end"]
        assert scoped[0][0].search_method is SearchMethod.LINEAR

    def test_check_error_aborts(self):
        checker = AcceptSetCheck(["1.58.1"], fail_on=["1.57.0"])
        with pytest.raises(CheckError):
            Linear(checker, target=TARGET).find_toolchain(SPACE)
        assert checker.probed_versions == ["1.58.1", "1.57.0"]


class TestBisect:
    """Bisect over the window [left, right]."""

    def test_only_oldest_compatible_probe_trace(self):
        decision, checker, handler = run(Bisect, SPACE, ["1.56.1"])
        assert not decision.is_found
        assert checker.probed_versions == ["1.57.0", "1.58.1"]
        assert progress(handler) == [(1, 3, 1), (0, 3, 2)]

    def test_all_compatible_probes_oldest(self):
        # Converging on the oldest release triggers one more probe of it.
        decision, checker, handler = run(Bisect, SPACE, ["1.58.1", "1.57.0", "1.56.1"])
        assert str(decision.version) == "1.56.1"
        assert checker.probed_versions == ["1.57.0", "1.56.1"]
        assert progress(handler) == [(1, 3, 1), (2, 3, 2)]

    def test_oldest_incompatible_falls_back_to_best(self):
        decision, checker, _ = run(Bisect, SPACE, ["1.58.1", "1.57.0"])
        assert str(decision.version) == "1.57.0"
        assert checker.probed_versions == ["1.57.0", "1.56.1"]

    def test_most_recent_only(self):
        decision, checker, _ = run(Bisect, SPACE, ["1.58.1"])
        assert str(decision.version) == "1.58.1"
        assert checker.probed_versions == ["1.57.0", "1.58.1"]

    def test_single_release_compatible(self):
        space = [Release.stable("1.56.1")]
        decision, checker, handler = run(Bisect, space, ["1.56.1"])
        assert str(decision.version) == "1.56.1"
        assert checker.probed_versions == ["1.56.1"]
        assert progress(handler) == [(0, 1, 1)]

    def test_single_release_incompatible(self):
        decision, checker, _ = run(Bisect, [Release.stable("1.56.1")], [])
        assert not decision.is_found
        assert checker.probed_versions == ["1.56.1"]

    def test_empty_search_space(self):
        checker = AcceptSetCheck([])
        with pytest.raises(NoToolchainsToTryError) as excinfo:
            Bisect(checker, target=TARGET).find_toolchain([])
        assert not excinfo.value.has_clues()
        assert checker.probes == []

    def test_check_error_aborts_and_closes_scope(self):
        checker = AcceptSetCheck([], fail_on=["1.57.0"])
        handler = CollectingHandler()
        with pytest.raises(CheckError):
            Bisect(checker, target=TARGET, reporter=Reporter(handler)).find_toolchain(SPACE)
        markers = [s["marker"] for e, s in handler.records if isinstance(e, FindMsrv)]
        assert markers == ["start", "end"]

    def test_probe_count_is_logarithmic(self):
        space = releases(64)
        _, checker, _ = run(Bisect, space, [str(r.version) for r in space[:20]])
        assert len(checker.probes) <= 8


class TestSearchProperties:
    """With the K most recent releases compatible, both methods find the K-th."""

    def test_k_most_recent(self):
        for n in (1, 2, 3, 4, 8, 13):
            space = releases(n)
            for k in sorted({0, 1, n // 2, n - 1, n}):
                accept = [str(r.version) for r in space[:k]]
                for strategy_cls in (Linear, Bisect):
                    decision, _, _ = run(strategy_cls, space, accept)
                    if k == 0:
                        assert not decision.is_found, (strategy_cls, n, k)
                    else:
                        assert decision.version == space[k - 1].version, (strategy_cls, n, k)

    def test_linear_and_bisect_agree(self):
        space = releases(10)
        for k in range(0, 11):
            accept = [str(r.version) for r in space[:k]]
            linear, _, _ = run(Linear, space, accept)
            bisect, _, _ = run(Bisect, space, accept)
            assert linear == bisect, k

    def test_nothing_compatible(self):
        space = [Release.stable(v) for v in ["1.58.0", "1.57.0", "1.56.0"]]
        for strategy_cls in (Linear, Bisect):
            decision, _, _ = run(strategy_cls, space, [])
            assert not decision.is_found, strategy_cls


class TestStrategyMapping:
    """Every search method maps to a strategy."""

    def test_mapping(self):
        assert strategy_for(SearchMethod.LINEAR) is Linear
        assert strategy_for(SearchMethod.BISECT) is Bisect
        assert set(SEARCH_METHODS) == set(SearchMethod)

    def test_strategy_declares_its_method(self):
        for method, strategy_cls in SEARCH_METHODS.items():
            assert strategy_cls.method is method
