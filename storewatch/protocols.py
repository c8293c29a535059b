"""
Container contract.

storewatch never owns state. It wraps any object that can hand out the
current immutable snapshot and notify listeners after each committed
transition, which is the shape of a redux-style store.
"""

from typing import Any, Callable, Protocol, runtime_checkable

State = Any
Selector = Callable[[State], Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
ChangeCallback = Callable[[Any, Any, State, State], None]
EqualityCheck = Callable[[Any, Any], bool]


@runtime_checkable
class Container(Protocol):
    """
    Protocol for the external state container.

    get_state() must return a new object after any state-changing transition
    and the same object otherwise. subscribe() registers a zero-argument
    listener fired after every committed transition and returns a function
    that removes it. dispatch() is only called when a watcher mirrors changes
    back into the container.
    """

    def get_state(self) -> State: ...

    def subscribe(self, listener: Listener) -> Unsubscribe: ...

    def dispatch(self, record: Any) -> Any: ...


def is_container(subject: Any) -> bool:
    """Check the parts of the contract every watcher needs."""
    return callable(getattr(subject, "get_state", None)) and callable(
        getattr(subject, "subscribe", None)
    )
