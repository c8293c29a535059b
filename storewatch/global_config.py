"""
Global Config - process-wide defaults for watchers.

Holds a default container and default flags used by watchers created without
an explicit container or setting. Configure it once at startup:

```python
from storewatch import configure_global, create_watcher

configure_global(app_store, should_log=True)
watcher = create_watcher()  # bound to app_store, logs every change
```

Calling configure_global() again replaces the whole configuration; values are
not merged. Prefer passing containers explicitly where possible.

Setting precedence is handler > watcher > global. ``None`` at the handler or
watcher level means "inherit"; the global level is always a concrete bool.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .errors import InvalidArgumentError
from .protocols import is_container


@dataclass(frozen=True)
class GlobalConfig:
    """Process-wide default container and flags."""

    store: Any = None
    should_dispatch: bool = False
    should_log: bool = False
    require_name: bool = False


def check_flag(name: str, value: Any, optional: bool = True) -> None:
    """Raise InvalidArgumentError unless ``value`` is a bool (or None)."""
    if value is None and optional:
        return
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a bool, got {value!r}")


@dataclass(frozen=True)
class WatcherSettings:
    """
    Per-watcher flags. Effective values are resolved on every read, so a
    global configuration installed after the watcher was created still
    applies to settings the watcher leaves as None.
    """

    should_dispatch: Optional[bool] = None
    should_log: Optional[bool] = None
    require_name: Optional[bool] = None

    def __post_init__(self):
        for name in ("should_dispatch", "should_log", "require_name"):
            check_flag(name, getattr(self, name))

    def effective(self, name: str, override: Optional[bool] = None) -> bool:
        """Resolve ``name`` with an optional per-handler ``override``."""
        if override is not None:
            return override
        value = getattr(self, name)
        if value is not None:
            return value
        return getattr(get_global_config(), name)


_global_config: Optional[GlobalConfig] = None


def configure_global(
    store: Any = None,
    *,
    should_dispatch: bool = False,
    should_log: bool = False,
    require_name: bool = False,
) -> GlobalConfig:
    """Install the process-wide configuration and return it."""
    global _global_config
    if store is not None and not is_container(store):
        raise InvalidArgumentError(
            f"Global store must provide get_state() and subscribe(), got {store!r}"
        )
    check_flag("should_dispatch", should_dispatch, optional=False)
    check_flag("should_log", should_log, optional=False)
    check_flag("require_name", require_name, optional=False)

    _global_config = GlobalConfig(store, should_dispatch, should_log, require_name)
    return _global_config


def get_global_config() -> GlobalConfig:
    """Current global configuration; all defaults until configured."""
    if _global_config is None:
        return GlobalConfig()
    return _global_config


def _reset_global_config() -> None:
    """
    Reset the global configuration for testing purposes.

    Not for production use.
    """
    global _global_config
    _global_config = None
