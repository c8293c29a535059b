"""
Path selectors
==============

Turns dotted path strings such as ``"user.profile.name"`` or
``"todos[0].title"`` into selectors over a state snapshot.

Lookups never raise for missing segments; they return the ``ABSENT`` sentinel
instead, so a watched path may point at data that does not exist yet.

Each segment is looked up by key on mappings, by integer index on sequences
and by attribute on anything else (dataclasses, named tuples, plain objects):

```python
state = {"todos": [{"title": "write docs"}]}

get_path(state, "todos[0].title")  # "write docs"
get_path(state, "todos.0.title")   # "write docs"
get_path(state, "todos[3].title")  # ABSENT
```

A `PathSelectorTranslator` memoizes one selector per path string, so every
registration for the same path shares the same selector object (and with it
the same memoized previous value).
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Tuple, Union

from .errors import InvalidPathError

Segment = Union[str, int]

_PART = re.compile(r"([^.\[\]]*)((?:\[\d+\])*)")
_INDEX = re.compile(r"\[(\d+)\]")
_DIGITS = re.compile(r"\d+")


class _Absent:
    """Sentinel for 'nothing at this path'."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


def parse_path(path: str) -> Tuple[Segment, ...]:
    """
    Split a path string into its segments.

    Bracketed indexes become ints, everything else stays a string key.
    Raises InvalidPathError for non-strings, empty strings, empty segments
    (``"a..b"``) and malformed brackets (``"a[b]"``).
    """
    if not isinstance(path, str):
        raise InvalidPathError(f"Path must be a string, got {type(path).__name__}")
    if not path:
        raise InvalidPathError("Path must not be empty")

    segments = []
    for part in path.split("."):
        match = _PART.fullmatch(part)
        if match is None or not part:
            raise InvalidPathError(f"Malformed segment {part!r} in path {path!r}")
        key, indexes = match.groups()
        if key:
            segments.append(key)
        segments.extend(int(index) for index in _INDEX.findall(indexes))
    return tuple(segments)


def _as_index(segment: Segment):
    if isinstance(segment, int):
        return segment
    if _DIGITS.fullmatch(segment):
        return int(segment)
    return None


def _lookup(target: Any, segment: Segment) -> Any:
    if target is None or target is ABSENT:
        return ABSENT

    if isinstance(target, Mapping):
        if segment in target:
            return target[segment]
        # "0" and 0 address the same mapping entry
        alternate = str(segment) if isinstance(segment, int) else _as_index(segment)
        if alternate is not None and alternate in target:
            return target[alternate]
        return ABSENT

    index = _as_index(segment)
    if index is not None and isinstance(target, Sequence) and not isinstance(target, (str, bytes)):
        return target[index] if index < len(target) else ABSENT

    if isinstance(segment, str):
        return getattr(target, segment, ABSENT)
    return ABSENT


def get_path(state: Any, path: Union[str, Tuple[Segment, ...]]) -> Any:
    """Return the value at ``path`` inside ``state``, or ABSENT."""
    segments = parse_path(path) if isinstance(path, str) else path
    value = state
    for segment in segments:
        value = _lookup(value, segment)
        if value is ABSENT:
            break
    return value


class PathSelector:
    """Selector reading one fixed path out of a state snapshot."""

    __slots__ = ("path", "_segments")

    def __init__(self, path: str):
        self.path = path
        self._segments = parse_path(path)

    def __call__(self, state: Any) -> Any:
        return get_path(state, self._segments)

    def __repr__(self) -> str:
        return f"PathSelector({self.path!r})"


class PathSelectorTranslator:
    """
    Memoizing path -> selector translation, one cache per watcher.

    The cache is keyed by the literal path string: ``"a.b"`` and ``"a[0]"``
    style spellings of an equivalent location are distinct paths.
    """

    def __init__(self):
        self._selectors: Dict[str, PathSelector] = {}

    def resolve(self, path: str) -> PathSelector:
        """Return the selector for ``path``, creating it on first use."""
        if not isinstance(path, str):
            raise InvalidPathError(f"Path must be a string, got {type(path).__name__}")
        selector = self._selectors.get(path)
        if selector is None:
            selector = PathSelector(path)
            self._selectors[path] = selector
        return selector

    def __contains__(self, path: object) -> bool:
        return path in self._selectors

    def __len__(self) -> int:
        return len(self._selectors)
