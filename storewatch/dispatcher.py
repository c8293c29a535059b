"""
Notification dispatch.

Walks detected changes in order and, for each one:

1. builds a `ChangeRecord` describing it,
2. dispatches the record into the container when dispatching is effective,
3. sends the record to the log sink when logging is effective,
4. calls the handler's callback with ``(current, previous, new_state, old_state)``.

Each step is isolated: an exception in dispatching, logging or the callback is
reported as a HandlerCallbackError. A failed dispatch or log still lets the
callback run, and a failed callback still lets the remaining handlers run.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .errors import ErrorReporter, HandlerCallbackError
from .global_config import WatcherSettings
from .protocols import Container, State
from .registry import HandlerMeta

ACTION_TYPE = "WATCH_VALUE_CHANGED"

change_logger = logging.getLogger("storewatch.changes")


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """Structured description of one detected value change."""

    label: Optional[str]
    meta: HandlerMeta
    previous_value: Any
    current_value: Any
    kind: str = "value-changed"

    @property
    def type(self) -> str:
        """Action type for redux-style reducers, e.g. ``WATCH_VALUE_CHANGED: a.b``."""
        return f"{ACTION_TYPE}: {self.label}" if self.label else ACTION_TYPE

    def __repr__(self) -> str:
        return (
            f"ChangeRecord({self.label or self.meta.selector_repr}: "
            f"{self.previous_value!r} → {self.current_value!r})"
        )


def log_change(record: ChangeRecord) -> None:
    """Default log sink."""
    change_logger.info("%r", record)


class NotificationDispatcher:
    def __init__(
        self,
        container: Container,
        settings: WatcherSettings,
        report: Optional[ErrorReporter] = None,
        log_sink: Optional[Callable[[ChangeRecord], Any]] = None,
    ):
        self._container = container
        self._settings = settings
        self._report = report if report is not None else ErrorReporter()
        self._log_sink = log_sink if log_sink is not None else log_change

    def dispatch(self, changes: Iterable, new_state: State, old_state: State) -> None:
        for change in changes:
            self._notify(change, new_state, old_state)

    def _notify(self, change, new_state: State, old_state: State) -> None:
        handler = change.handler
        record = ChangeRecord(
            label=handler.name,
            meta=handler.meta,
            previous_value=change.previous_value,
            current_value=change.current_value,
        )
        if self._settings.effective("should_dispatch", handler.should_dispatch):
            self._guarded(handler, self._dispatch_record, record)
        if self._settings.effective("should_log", handler.should_log):
            self._guarded(handler, self._log_sink, record)
        self._guarded(
            handler,
            handler.callback,
            change.current_value,
            change.previous_value,
            new_state,
            old_state,
        )

    def _dispatch_record(self, record: ChangeRecord) -> None:
        self._container.dispatch(record)

    def _guarded(self, handler, step: Callable, *args) -> None:
        try:
            step(*args)
        except Exception as e:
            self._report(HandlerCallbackError(handler, e))
