"""
StoreWatch Watcher - Selector Change Notifications
==================================================

A `Watcher` subscribes to one state container and calls your handlers when the
value a path or selector derives from state changes between transitions.

Basic Usage
-----------

```python
from storewatch import create_watcher

watcher = create_watcher(store)

# Watch a dotted path
watcher.watch("user.name", lambda current, previous, state, old_state: print(current))

# Watch any selector
watcher.watch(lambda state: len(state["items"]), on_count_change, name="itemCount")

# Or register with a decorator
@watcher.on("settings.theme")
def on_theme(current, previous, state, old_state):
    apply_theme(current)

# Stop all notifications
watcher.remove()
```

Change Semantics
----------------

- Values are compared with `strict_equal` (identity, value equality for
  scalars) unless a ``check_equal(current, previous)`` rule is given.
- Each selector runs once per transition; handlers sharing a selector (every
  watch of the same path does) see the same ``(current, previous)`` pair.
- Handlers run in registration order: selectors first by registration, then
  handlers within a selector.
- The baseline is captured at registration, so the first transition does not
  report a spurious change. Pass ``initialize_value=False`` to skip it.

Re-entrancy
-----------

Handlers and dispatched change records may trigger new transitions while a
cycle is running. Those transitions are queued and processed, in order, once
every handler of the current cycle has run. A change record dispatched into
the container therefore reaches the container before the handler's own
callback, while handlers reacting to the resulting transition run after the
current cycle completes.

Errors
------

Registration errors raise immediately. A selector that raises evaluates to
`ABSENT`; a handler that raises is logged and skipped. Both are passed to the
``on_error`` hook when one is configured.
"""

import inspect
import logging
from collections import deque
from typing import Any, Callable, Deque, Optional, Union

from .detector import ChangeDetector, call_selector
from .dispatcher import ChangeRecord, NotificationDispatcher
from .errors import ErrorReporter, InvalidArgumentError, MissingNameError, StoreWatchError
from .global_config import WatcherSettings, check_flag, get_global_config
from .paths import PathSelector, PathSelectorTranslator
from .protocols import (
    ChangeCallback,
    Container,
    EqualityCheck,
    Selector,
    State,
    is_container,
)
from .registry import Handler, HandlerMeta, SelectorRegistry

logger = logging.getLogger(__name__)

_WATCHER_OPTIONS = {"should_dispatch", "should_log", "require_name", "on_error", "log_sink"}


def _describe(selector: Selector) -> str:
    """Diagnostic text for a selector: its source when available."""
    if isinstance(selector, PathSelector):
        return repr(selector)
    try:
        return inspect.getsource(selector).strip()
    except (OSError, TypeError):
        return repr(selector)


class Watcher:
    """
    Watches paths and selectors of one container.

    Use `create_watcher()` to build one; it falls back to the globally
    configured container.
    """

    def __init__(
        self,
        store: Container,
        *,
        should_dispatch: Optional[bool] = None,
        should_log: Optional[bool] = None,
        require_name: Optional[bool] = None,
        on_error: Optional[Callable[[StoreWatchError], Any]] = None,
        log_sink: Optional[Callable[[ChangeRecord], Any]] = None,
    ):
        if not is_container(store):
            raise InvalidArgumentError(
                f"Watcher needs a container with get_state() and subscribe(), got {store!r}"
            )
        if on_error is not None and not callable(on_error):
            raise InvalidArgumentError("on_error must be callable")
        if log_sink is not None and not callable(log_sink):
            raise InvalidArgumentError("log_sink must be callable")

        self._store = store
        self._settings = WatcherSettings(should_dispatch, should_log, require_name)
        self._report = ErrorReporter(on_error)

        # Mapping paths to their selectors
        self._translator = PathSelectorTranslator()
        self._registry = SelectorRegistry(evaluate=self._evaluate)
        self._dispatcher = NotificationDispatcher(
            store, self._settings, self._report, log_sink
        )
        self._detector = ChangeDetector(self._registry, self._dispatcher, self._report)

        # State is immutable, so keeping the previous snapshot costs one reference
        self._previous_state = store.get_state()

        self._pending: Deque[State] = deque()
        self._is_propagating = False
        self._removed = False
        self._unsubscribe = store.subscribe(self._on_store_change)

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def watch(
        self,
        path_or_selector: Union[str, Selector],
        callback: ChangeCallback,
        *,
        check_equal: Optional[EqualityCheck] = None,
        should_dispatch: Optional[bool] = None,
        should_log: Optional[bool] = None,
        name: Optional[str] = None,
        initialize_value: bool = True,
    ) -> None:
        """
        Call ``callback(current, previous, state, old_state)`` whenever the
        value at a path, or returned by a selector, changes.

        Args:
            path_or_selector: Dotted path (``"a.b[0].c"``) or a callable of state
            callback: Change listener
            check_equal: Optional ``(current, previous) -> bool`` equality rule
            should_dispatch: Dispatch a ChangeRecord into the container per change
            should_log: Send a ChangeRecord to the log sink per change
            name: Label for change records; defaults to the path
            initialize_value: Capture the current value as baseline right away

        Raises:
            InvalidArgumentError: unusable path, selector, callback or option
            MissingNameError: no name available while names are required
        """
        if isinstance(path_or_selector, str):
            if not path_or_selector:
                raise InvalidArgumentError("watch() must be given a non-empty path")
        elif not callable(path_or_selector):
            raise InvalidArgumentError(
                f"watch() must be given a path or a selector, got {path_or_selector!r}"
            )
        if not callable(callback):
            raise InvalidArgumentError(
                f"watch() must be given a callable callback, got {callback!r}"
            )
        if check_equal is not None and not callable(check_equal):
            raise InvalidArgumentError("check_equal must be callable")
        if name is not None and not isinstance(name, str):
            raise InvalidArgumentError(f"name must be a string, got {name!r}")
        check_flag("should_dispatch", should_dispatch)
        check_flag("should_log", should_log)
        check_flag("initialize_value", initialize_value, optional=False)

        path = None
        if isinstance(path_or_selector, str):
            path = path_or_selector
            selector = self._translator.resolve(path)
            name = name or path
        else:
            selector = path_or_selector

        if not name and self._settings.effective("require_name"):
            raise MissingNameError(
                f"watch({_describe(selector)}) has no name while names are required"
            )

        handler = Handler(
            callback=callback,
            meta=HandlerMeta(
                name=name or None,
                path=path,
                selector=selector,
                selector_repr=_describe(selector),
            ),
            check_equal=check_equal,
            should_dispatch=should_dispatch,
            should_log=should_log,
        )
        # Baseline from the last processed snapshot, not the container: while a
        # cycle runs the container may already hold states still queued here
        self._registry.register(
            selector, handler, self._previous_state, initialize_value
        )

    def on(self, path_or_selector: Union[str, Selector], **config):
        """Decorator form of `watch()`; returns the callback unchanged."""

        def decorator(callback: ChangeCallback) -> ChangeCallback:
            self.watch(path_or_selector, callback, **config)
            return callback

        return decorator

    def remove(self) -> None:
        """
        Unsubscribe from the container. Safe to call more than once.

        A cycle already in progress finishes; queued transitions are dropped.
        """
        if self._removed:
            return
        self._removed = True
        self._pending.clear()
        self._unsubscribe()
        logger.debug("Removed %r", self)

    def get_store(self) -> Container:
        return self._store

    @property
    def removed(self) -> bool:
        return self._removed

    @property
    def registry(self) -> SelectorRegistry:
        return self._registry

    @property
    def translator(self) -> PathSelectorTranslator:
        return self._translator

    @property
    def previous_state(self) -> State:
        """Snapshot the most recent transition was compared against."""
        return self._previous_state

    # ========================================================================
    # INTERNAL IMPLEMENTATION
    # ========================================================================

    def _evaluate(self, selector: Selector, state: State) -> Any:
        return call_selector(selector, state, self._report)

    def _on_store_change(self) -> None:
        if self._removed:
            return
        self._pending.append(self._store.get_state())
        if self._is_propagating:
            # Re-entrant transition: runs after the current cycle
            return

        self._is_propagating = True
        try:
            while self._pending and not self._removed:
                current_state = self._pending.popleft()
                previous_state = self._previous_state
                self._previous_state = current_state
                self._detector.on_transition(current_state, previous_state)
        finally:
            self._is_propagating = False

    def __enter__(self) -> "Watcher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.remove()
        return False

    def __repr__(self) -> str:
        status = "removed" if self._removed else "active"
        return f"Watcher(selectors={len(self._registry)}, {status})"


def create_watcher(store: Optional[Container] = None, **config) -> Watcher:
    """
    Create a Watcher bound to ``store``, or to the global store if omitted.

    Keyword options: should_dispatch, should_log, require_name (bools; None
    inherits the global setting), on_error (hook receiving contained errors)
    and log_sink (callable receiving ChangeRecords when logging).
    """
    unknown = set(config) - _WATCHER_OPTIONS
    if unknown:
        raise InvalidArgumentError(f"Unknown watcher options: {sorted(unknown)}")
    if store is None:
        store = get_global_config().store
    if store is None:
        raise InvalidArgumentError(
            "create_watcher() needs a store; none given and no global store configured"
        )
    return Watcher(store, **config)
