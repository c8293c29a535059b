"""
Change detection.

On every transition the detector runs each watched selector once against the
new snapshot, advances every memoized previous value, and only then compares
old and new values handler by handler. Advancing all slots before any handler
is notified means a callback that reads state, or triggers another
transition, never sees a half-updated watcher.
"""

import logging
from typing import Any, List, NamedTuple, Optional

from .equality import strict_equal
from .errors import ErrorReporter, HandlerCallbackError, SelectorEvaluationError
from .paths import ABSENT
from .protocols import Selector, State
from .registry import Handler, SelectorRegistry

logger = logging.getLogger(__name__)


class DetectedChange(NamedTuple):
    handler: Handler
    current_value: Any
    previous_value: Any


def call_selector(
    selector: Selector, state: State, report: Optional[ErrorReporter] = None
) -> Any:
    """
    Evaluate ``selector`` against ``state``, turning failures into ABSENT.

    A selector that raises must not abort detection for unrelated selectors,
    so the error is reported at DEBUG level and swallowed.
    """
    try:
        return selector(state)
    except Exception as e:
        failure = SelectorEvaluationError(selector, e)
        if report is not None:
            report(failure, logging.DEBUG)
        else:
            logger.debug("%s", failure)
        return ABSENT


class ChangeDetector:
    """Compares each selector's new value with its memoized previous value."""

    def __init__(
        self,
        registry: SelectorRegistry,
        dispatcher=None,
        report: Optional[ErrorReporter] = None,
    ):
        self._registry = registry
        self._dispatcher = dispatcher
        self._report = report if report is not None else ErrorReporter()

    def evaluate(self, selector: Selector, state: State) -> Any:
        return call_selector(selector, state, self._report)

    def detect(self, new_state: State) -> List[DetectedChange]:
        """
        Advance every selector to ``new_state`` and return what changed.

        Changes are ordered by selector registration, then by handler
        registration within a selector.
        """
        evaluated = []
        for entry in self._registry.entries():
            current = self.evaluate(entry.selector, new_state)
            evaluated.append((tuple(entry.handlers), current, entry.previous_value))
            entry.previous_value = current

        changes = []
        for handlers, current, previous in evaluated:
            for handler in handlers:
                if self._has_changed(handler, current, previous):
                    changes.append(DetectedChange(handler, current, previous))
        return changes

    def on_transition(self, new_state: State, old_state: State) -> List[DetectedChange]:
        """Detect changes for one transition and hand them to the dispatcher."""
        changes = self.detect(new_state)
        if changes and self._dispatcher is not None:
            self._dispatcher.dispatch(changes, new_state, old_state)
        return changes

    def _has_changed(self, handler: Handler, current: Any, previous: Any) -> bool:
        try:
            if handler.check_equal is not None:
                return not handler.check_equal(current, previous)
            return not strict_equal(current, previous)
        except Exception as e:
            # Broken equality rule: skip this handler for the cycle
            self._report(HandlerCallbackError(handler, e))
            return False
