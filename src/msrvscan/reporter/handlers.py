"""Output handlers rendering the event stream."""
from __future__ import annotations

import json
import sys
from typing import Dict, List, Optional, TextIO, Tuple

from msrvscan.constants import OutputFormats
from msrvscan.reporter import events as ev

Scope = Optional[Dict[str, object]]


class EventHandler:
    """Base class for event handlers."""

    def handle(self, event: ev.Event, scope: Scope) -> None:
        raise NotImplementedError

    def finish(self) -> None:
        """Called once when the subcommand completed."""


class DiscardHandler(EventHandler):
    """Swallow every event."""

    def handle(self, event: ev.Event, scope: Scope) -> None:
        return None


class CollectingHandler(EventHandler):
    """Keep every (event, scope) pair in memory; used by tests."""

    def __init__(self):
        self.records: List[Tuple[ev.Event, Scope]] = []

    def handle(self, event: ev.Event, scope: Scope) -> None:
        self.records.append((event, scope))

    @property
    def events(self) -> List[ev.Event]:
        return [event for event, _ in self.records]

    def of_type(self, event_type) -> List[ev.Event]:
        return [event for event in self.events if isinstance(event, event_type)]


class JsonHandler(EventHandler):
    """Write one JSON object per event and line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr

    def handle(self, event: ev.Event, scope: Scope) -> None:
        payload = event.to_dict()
        if scope is not None:
            payload["scope"] = scope
        self.stream.write(json.dumps(payload) + "\n")
        self.stream.flush()


class MinimalHandler(EventHandler):
    """Only print the result of a subcommand, for use in scripts."""

    def __init__(self, stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr

    def handle(self, event: ev.Event, scope: Scope) -> None:
        if isinstance(event, ev.FindResult):
            self.stream.write(f"{event.version if event.success else 'none'}\n")
        elif isinstance(event, ev.VerifyResult):
            self.stream.write(f"{'true' if event.is_compatible else 'false'}\n")
        elif isinstance(event, ev.ShowResult):
            self.stream.write(f"{event.version}\n")
        elif isinstance(event, ev.TerminateWithFailure):
            self.err_stream.write(f"{event.message}\n")


class HumanHandler(EventHandler):
    """Concise, line oriented progress for a terminal."""

    def __init__(self, stream: Optional[TextIO] = None, result_stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr
        self.result_stream = result_stream or sys.stdout

    def _line(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def handle(self, event: ev.Event, scope: Scope) -> None:
        is_start = scope is None or scope.get("marker") == "start"

        if isinstance(event, ev.FetchIndex) and is_start:
            self._line(f"Fetching index ({event.source})")
        elif isinstance(event, ev.FindMsrv) and is_start:
            self._line(f"Determining MSRV ({event.search_method.value} search)")
        elif isinstance(event, ev.Progress):
            self._line(
                f"Iteration {event.iteration}: release {event.current + 1} of {event.search_space_size}"
            )
        elif isinstance(event, ev.CheckToolchain) and is_start and event.toolchain is not None:
            self._line(f"Checking {event.toolchain.version}")
        elif isinstance(event, ev.SetupToolchain) and is_start and event.toolchain is not None:
            self._line(f"  Installing {event.toolchain.spec}")
        elif isinstance(event, ev.CheckMethod):
            self._line(f"  Running: rustup run {' '.join(event.args)}")
        elif isinstance(event, ev.CheckResult) and event.toolchain is not None:
            self._check_result(event)
        elif isinstance(event, ev.FindResult):
            self._find_result(event)
        elif isinstance(event, ev.VerifyResult):
            self._verify_result(event)
        elif isinstance(event, ev.ShowResult):
            self.result_stream.write(f"{event.version}\n")
        elif isinstance(event, ev.TerminateWithFailure):
            self._line(event.message)

    def _check_result(self, event: ev.CheckResult) -> None:
        toolchain = event.toolchain
        if event.is_compatible:
            self._line(f"  {toolchain.version} is compatible")
            return
        self._line(f"  {toolchain.version} is incompatible")
        if event.error:
            for line in event.error.rstrip().splitlines():
                self._line(f"    {line}")

    def _find_result(self, event: ev.FindResult) -> None:
        if event.success:
            self._line(
                f"Result: considered ({event.minimum_version} <= toolchain <= "
                f"{event.maximum_version}), MSRV {event.version} ({event.target})"
            )
            self.result_stream.write(f"{event.version}\n")
        else:
            self._line(
                f"Result: considered ({event.minimum_version} <= toolchain <= "
                f"{event.maximum_version}), no compatible toolchain found"
            )

    def _verify_result(self, event: ev.VerifyResult) -> None:
        version = event.toolchain.version if event.toolchain else "?"
        if event.is_compatible:
            self._line(f"Verified: {version} is compatible")
        else:
            self._line(f"Verification failed: {version} is incompatible")


def handler_for_format(output_format: str) -> EventHandler:
    """Build the handler for an ``--output-format`` value."""
    if output_format == OutputFormats.JSON.value:
        return JsonHandler()
    if output_format == OutputFormats.MINIMAL.value:
        return MinimalHandler()
    if output_format == OutputFormats.NONE.value:
        return DiscardHandler()
    return HumanHandler()
