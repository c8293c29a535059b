"""
StoreWatch - Selector Change Detection for Immutable State Containers

Subscribe once to a redux-style container and get called back only when the
value at a path, or returned by a selector, actually changes.
"""

from .detector import ChangeDetector, DetectedChange, call_selector
from .dispatcher import ACTION_TYPE, ChangeRecord, NotificationDispatcher, log_change
from .equality import by_key, strict_equal, values_equal
from .errors import (
    ErrorReporter,
    HandlerCallbackError,
    InvalidArgumentError,
    InvalidPathError,
    MissingNameError,
    SelectorEvaluationError,
    StoreWatchError,
)
from .global_config import (
    GlobalConfig,
    WatcherSettings,
    _reset_global_config,
    configure_global,
    get_global_config,
)
from .paths import ABSENT, PathSelector, PathSelectorTranslator, get_path, parse_path
from .protocols import Container
from .registry import Handler, HandlerMeta, SelectorEntry, SelectorRegistry
from .watcher import Watcher, create_watcher

__version__ = "0.1.0"

__all__ = [
    # Watcher
    "Watcher",
    "create_watcher",
    # Global configuration
    "GlobalConfig",
    "WatcherSettings",
    "configure_global",
    "get_global_config",
    # Paths
    "ABSENT",
    "PathSelector",
    "PathSelectorTranslator",
    "get_path",
    "parse_path",
    # Engine
    "ChangeDetector",
    "DetectedChange",
    "call_selector",
    "NotificationDispatcher",
    "ChangeRecord",
    "ACTION_TYPE",
    "log_change",
    "Handler",
    "HandlerMeta",
    "SelectorEntry",
    "SelectorRegistry",
    # Equality rules
    "strict_equal",
    "values_equal",
    "by_key",
    # Container contract
    "Container",
    # Exceptions
    "StoreWatchError",
    "InvalidArgumentError",
    "InvalidPathError",
    "MissingNameError",
    "SelectorEvaluationError",
    "HandlerCallbackError",
    "ErrorReporter",
    # Testing utilities (internal use)
    "_reset_global_config",
]
