"""
StoreWatch Errors
=================

Registration errors (`InvalidArgumentError`, `InvalidPathError`,
`MissingNameError`) are raised synchronously to the caller of `watch()` or
`create_watcher()`.

Run-time errors (`SelectorEvaluationError`, `HandlerCallbackError`) are never
raised out of a notification cycle. They wrap the original exception and are
handed to the watcher's `on_error` hook so that one broken selector or callback
cannot stop unrelated handlers.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class StoreWatchError(Exception):
    """Base class for all storewatch errors."""

    pass


class InvalidArgumentError(StoreWatchError, ValueError):
    """Raised when watch() or create_watcher() receive unusable arguments."""

    pass


class InvalidPathError(InvalidArgumentError):
    """Raised when a path string cannot be translated into a selector."""

    pass


class MissingNameError(StoreWatchError):
    """Raised when a registration has no name while names are required."""

    pass


class SelectorEvaluationError(StoreWatchError):
    """A selector raised while being evaluated against a state snapshot."""

    def __init__(self, selector: Any, error: BaseException):
        self.selector = selector
        self.error = error
        super().__init__(f"Selector {selector!r} failed: {error!r}")


class HandlerCallbackError(StoreWatchError):
    """A handler raised while being notified of a change."""

    def __init__(self, handler: Any, error: BaseException):
        self.handler = handler
        self.error = error
        super().__init__(f"Handler {handler!r} failed: {error!r}")


class ErrorReporter:
    """
    Routes contained run-time errors to the log and to an optional hook.

    The hook receives the wrapped StoreWatchError. A hook that raises is
    logged and does not interrupt the notification cycle.
    """

    def __init__(self, hook: Optional[Callable[[StoreWatchError], Any]] = None):
        self.hook = hook

    def __call__(self, error: StoreWatchError, level: int = logging.ERROR) -> None:
        cause = getattr(error, "error", None)
        exc_info = (type(cause), cause, cause.__traceback__) if cause is not None else None
        logger.log(level, "%s", error, exc_info=exc_info)
        if self.hook is None:
            return
        try:
            self.hook(error)
        except Exception:
            logger.exception("on_error hook raised while handling %r", error)
