"""
Selector registry.

Maps each distinct selector, by identity, to the ordered list of handlers
watching it and to the value the selector produced on the last transition.
The memoized value lives on the selector entry rather than on each handler,
so handlers sharing a selector always see the same (current, previous) pair
and the selector runs once per transition no matter how many handlers it has.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from .paths import ABSENT
from .protocols import ChangeCallback, EqualityCheck, Selector, State


@dataclass(frozen=True, slots=True)
class HandlerMeta:
    """Diagnostic description of a registration, carried on change records."""

    name: Optional[str]
    path: Optional[str]
    selector: Selector = field(repr=False)
    selector_repr: str

    @property
    def label(self) -> Optional[str]:
        return self.name or self.path


@dataclass(frozen=True, slots=True, eq=False)
class Handler:
    """One registered interest in a selector."""

    callback: ChangeCallback
    meta: HandlerMeta
    check_equal: Optional[EqualityCheck] = None
    should_dispatch: Optional[bool] = None
    should_log: Optional[bool] = None

    @property
    def name(self) -> Optional[str]:
        return self.meta.label

    @property
    def selector(self) -> Selector:
        return self.meta.selector


class SelectorEntry:
    """A selector, its handlers and its memoized previous value."""

    __slots__ = ("selector", "handlers", "previous_value")

    def __init__(self, selector: Selector, previous_value: Any = ABSENT):
        self.selector = selector
        self.handlers: List[Handler] = []
        self.previous_value = previous_value

    def __repr__(self) -> str:
        return (
            f"SelectorEntry({self.selector!r}, handlers={len(self.handlers)}, "
            f"previous={self.previous_value!r})"
        )


def _call(selector: Selector, state: State) -> Any:
    return selector(state)


class SelectorRegistry:
    """
    Identity-keyed, insertion-ordered selector -> handlers mapping.

    Selectors are keyed by ``id()``; each entry holds a strong reference to its
    selector, so an id cannot be recycled while the entry exists. Entries are
    only created by a registration, so every entry has at least one handler.

    ``evaluate(selector, state)`` is used to take baselines; the watcher passes
    an evaluator that contains selector failures.
    """

    def __init__(self, evaluate: Callable[[Selector, State], Any] = _call):
        self._entries: Dict[int, SelectorEntry] = {}
        self._evaluate = evaluate

    def register(
        self,
        selector: Selector,
        handler: Handler,
        state: State = None,
        initialize_value: bool = True,
    ) -> SelectorEntry:
        """
        Append ``handler`` to the selector's handler list.

        With ``initialize_value`` the selector is evaluated against ``state``
        and the result becomes its baseline, so the next transition compares
        against a real prior value. Without it, a new selector starts at
        ABSENT (the first transition will very likely report a change) and an
        already-watched selector keeps its current baseline.
        """
        entry = self._entries.get(id(selector))
        if entry is None:
            entry = SelectorEntry(selector)
            self._entries[id(selector)] = entry
        entry.handlers.append(handler)

        if initialize_value:
            entry.previous_value = self._evaluate(selector, state)
        return entry

    def entries(self) -> List[SelectorEntry]:
        """Snapshot of the entries in selector registration order."""
        return list(self._entries.values())

    def handlers(self, selector: Selector) -> List[Handler]:
        entry = self._entries.get(id(selector))
        return list(entry.handlers) if entry is not None else []

    def previous_value(self, selector: Selector) -> Any:
        """Memoized value for ``selector``; KeyError if it is not watched."""
        entry = self._entries.get(id(selector))
        if entry is None:
            raise KeyError(selector)
        return entry.previous_value

    def __iter__(self) -> Iterator[SelectorEntry]:
        return iter(self.entries())

    def __contains__(self, selector: object) -> bool:
        return id(selector) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
