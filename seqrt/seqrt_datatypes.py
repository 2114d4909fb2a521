"""
Defines the core data types for the seqrt sequence runtime.

This module provides the `Sequence` container, a dense, integer-indexed
collection whose slots are either occupied or unset (holes), plus the
`Absent` marker returned by lookups that find no element.
"""

import operator
import collections.abc
from typing import Any, Callable, Iterable, List, Optional


class NameNotFound(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name


# =================================================================
# Markers
# =================================================================

class _Marker:
    """Internal helper class for creating stateless singleton markers."""
    __slots__ = ("_name",)

    def __init__(self, name):
        self._name = name

    def __repr__(self):
        return f"{self._name.capitalize()}<>"

    def __str__(self):
        return ""

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

# Public result of a lookup that found nothing.
Absent = _Marker("absent")
# Slot state for an index below `length` that was never assigned.
_EMPTY = _Marker("empty")


# =================================================================
# Sequence
# =================================================================

class Sequence(collections.abc.Sequence):
    """An ordered, integer-indexed container with unset holes.

    `length` is one past the highest index ever assigned. Slots below
    that bound which were never written are holes: `at` and `find` report
    them as `Absent`, `join` renders them as the empty string, and `map`
    and `concat` carry them through.

    Every operation is synchronous and total over its inputs. `map` and
    `concat` always build a new Sequence; nothing here mutates `self`
    except index assignment and `append`.
    """

    def __init__(self, values: Iterable[Any] = ()):
        self._slots: List[Any] = list(values)
        if any(v is _EMPTY for v in self._slots):
            raise ValueError("Sequence values cannot contain the hole marker.")

    @classmethod
    def of(cls, *values: Any) -> 'Sequence':
        """Builds a sequence whose slots 0..N-1 hold `values` in order."""
        return cls(values)

    @classmethod
    def _from_slots(cls, slots: List[Any]) -> 'Sequence':
        seq = cls.__new__(cls)
        seq._slots = slots
        return seq

    # --- Container protocol ---

    @property
    def length(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index):
        if isinstance(index, slice):
            raise TypeError("Sequence does not support slicing.")
        index = _as_index(index)
        n = len(self._slots)
        if index < 0:
            index += n
        if index < 0 or index >= n:
            raise IndexError("Sequence index out of range")
        value = self._slots[index]
        return Absent if value is _EMPTY else value

    def __setitem__(self, index, value):
        index = _as_index(index)
        if index < 0:
            raise IndexError("Sequence assignment index must be non-negative")
        if value is _EMPTY:
            raise ValueError("Cannot assign the hole marker to a slot.")
        n = len(self._slots)
        if index >= n:
            self._slots.extend([_EMPTY] * (index - n))
            self._slots.append(value)
        else:
            self._slots[index] = value

    def __iter__(self):
        for value in self._slots:
            yield Absent if value is _EMPTY else value

    def __eq__(self, other):
        if not isinstance(other, Sequence):
            return NotImplemented
        if len(self._slots) != len(other._slots):
            return False
        for a, b in zip(self._slots, other._slots):
            if (a is _EMPTY) != (b is _EMPTY):
                return False
            if a is not _EMPTY and not (a is b or a == b):
                return False
        return True

    __hash__ = None

    def __str__(self) -> str:
        return self.join(",")

    def __repr__(self) -> str:
        from seqrt.seqrt_printer import Printer
        return Printer().pformat(self)

    def append(self, value: Any):
        self[len(self._slots)] = value

    def is_set(self, index: int) -> bool:
        """True when `index` (after normalization) names an occupied slot."""
        index = _as_index(index)
        n = len(self._slots)
        if index < 0:
            index += n
        return 0 <= index < n and self._slots[index] is not _EMPTY

    def to_list(self, hole: Any = None) -> List[Any]:
        """Returns the slots as a plain list, writing `hole` for unset slots and Absent."""
        return [hole if (v is _EMPTY or v is Absent) else v for v in self._slots]

    # --- Operations ---

    def at(self, index: int) -> Any:
        index = _as_index(index)
        n = len(self._slots)
        if index < 0:
            index = index + n
        if index < 0 or index >= n:
            return Absent
        value = self._slots[index]
        return Absent if value is _EMPTY else value

    def concat(self, other, *, gap: int = 0) -> 'Sequence':
        """Returns a new sequence holding this one's slots followed by `other`'s.

        `other` is placed starting at `length + gap`; the `gap` slots in
        between stay unset. Holes in either input are preserved as holes.
        """
        if isinstance(other, Sequence):
            tail = other._slots
        elif isinstance(other, (str, bytes)) or not isinstance(other, collections.abc.Iterable):
            raise TypeError(f"concat expects a Sequence or iterable, not {type(other).__name__}")
        else:
            tail = list(other)
        gap = _as_index(gap)
        if gap < 0:
            raise ValueError("concat gap must be non-negative")
        slots = list(self._slots)
        if tail:
            slots.extend([_EMPTY] * gap)
            slots.extend(tail)
        return Sequence._from_slots(slots)

    def join(self, separator: str = ",") -> str:
        if not isinstance(separator, str):
            raise TypeError(f"join separator must be a str, not {type(separator).__name__}")
        return self._join(separator, set())

    def _join(self, separator: str, active: set) -> str:
        # A sequence already being joined further up renders as ""
        active.add(id(self))
        parts = []
        for i, value in enumerate(self._slots):
            if i > 0:
                parts.append(separator)
            parts.append(_render(value, active))
        active.discard(id(self))
        return "".join(parts)

    def map(self, transform: Callable[[Any, int], Any]) -> 'Sequence':
        slots = []
        for i, value in enumerate(self._slots):
            slots.append(transform(Absent if value is _EMPTY else value, i))
        return Sequence._from_slots(slots)

    def find(self, predicate: Callable[[Any, int], Any]) -> Any:
        for i, value in enumerate(self._slots):
            element = Absent if value is _EMPTY else value
            if predicate(element, i):
                return element
        return Absent


def _as_index(index) -> int:
    if isinstance(index, bool):
        raise TypeError("Sequence index must be an integer, not bool")
    try:
        return operator.index(index)
    except TypeError:
        raise TypeError(f"Sequence index must be an integer, not {type(index).__name__}") from None


def _render(value: Optional[Any], active: set) -> str:
    # None, Absent and holes all stringify as ""
    if value is None or value is _EMPTY or value is Absent:
        return ""
    if isinstance(value, Sequence):
        return "" if id(value) in active else value._join(",", active)
    return str(value)
