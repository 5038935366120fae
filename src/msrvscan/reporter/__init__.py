"""Event reporting: a Reporter dispatches events to one output handler."""
from __future__ import annotations

import itertools
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from msrvscan.reporter.events import Event
from msrvscan.reporter.handlers import (
    CollectingHandler,
    DiscardHandler,
    EventHandler,
    HumanHandler,
    JsonHandler,
    MinimalHandler,
    handler_for_format,
)

logger = logging.getLogger(__name__)

__all__ = [
    "Reporter",
    "EventHandler",
    "CollectingHandler",
    "DiscardHandler",
    "HumanHandler",
    "JsonHandler",
    "MinimalHandler",
    "handler_for_format",
]


class Reporter:
    """Forward events to a handler.

    Scoped events are reported twice, with a shared scope id and a
    ``start``/``end`` marker; the end marker is sent even when the scoped
    block raises.
    """

    def __init__(self, handler: Optional[EventHandler] = None):
        self.handler = handler if handler is not None else DiscardHandler()
        self._scope_ids = itertools.count()

    def report(self, event: Event) -> None:
        self.handler.handle(event, None)

    @contextmanager
    def scoped(self, event: Event) -> Iterator[None]:
        scope_id = next(self._scope_ids)
        self.handler.handle(event, {"id": scope_id, "marker": "start"})
        try:
            yield
        finally:
            self.handler.handle(event, {"id": scope_id, "marker": "end"})

    def finish(self) -> None:
        self.handler.finish()
