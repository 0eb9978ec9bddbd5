import logging
from collections.abc import Iterable, Iterator, MutableSet
from collections.abc import Set as AbstractSet
from typing import Any, Literal

from tinyset.configdefaults import config


_logger = logging.getLogger("tinyset.set")


def as_element(value: Any) -> str:
    """Normalize `value` to a set element according to ``config.element_coercion``."""
    if isinstance(value, str):
        return value
    if config.element_coercion == "raise":
        raise TypeError(
            f"Set elements must be strings, got {type(value).__name__}: {value!r}"
        )
    _logger.debug(f"Coercing non-string element {value!r} to str")
    return str(value)


def _is_operand(other) -> bool:
    return isinstance(other, Iterable) and not isinstance(other, str)


class Set(MutableSet):
    """Set of strings.

    Uses a dictionary with None values to store the set elements. Elements
    are always observed in ascending order, regardless of insertion order.

    Mutating methods (`insert`, `remove`, `clear`, `invert`) work in place
    and return the set itself, so calls can be chained::

        s = Set(["a", "b"]).insert("c").remove("a")

    All other combining operations return a new set and leave both operands
    untouched.
    """

    __slots__ = ("values",)
    values: dict[str, Literal[None]]

    def __init__(self, iterable: Iterable | None = None) -> None:
        if iterable is None:
            self.values = {}
        else:
            if isinstance(iterable, str):
                iterable = (iterable,)
            self.values = {as_element(value): None for value in iterable}

    @classmethod
    def new(cls, *elements) -> "Set":
        return cls(elements)

    def __contains__(self, value) -> bool:
        try:
            return as_element(value) in self.values
        except TypeError:
            # not a valid element, so never a member
            return False

    def __iter__(self) -> Iterator[str]:
        yield from sorted(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.elements()!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Set):
            if isinstance(other, AbstractSet):
                try:
                    other = type(self)(other)
                except TypeError:
                    return False
            else:
                return NotImplemented
        return self.is_equal(other)

    # Mutable, so unhashable like the builtin set
    __hash__ = None  # type: ignore[assignment]

    def add(self, value) -> None:
        self.values[as_element(value)] = None

    def discard(self, value) -> None:
        try:
            del self.values[as_element(value)]
        except KeyError:
            pass

    # Mutation

    def insert(self, *elements) -> "Set":
        self.values.update({as_element(e): None for e in elements})
        return self

    def remove(self, *elements) -> "Set":  # type: ignore[override]
        """Remove `elements` from the set, ignoring those that are not members.

        Unlike `MutableSet.remove`, missing elements never raise.
        """
        self_values = self.values
        for element in elements:
            try:
                del self_values[as_element(element)]
            except KeyError:
                pass
        return self

    def clear(self) -> "Set":  # type: ignore[override]
        self.values.clear()
        return self

    def invert(self, *elements) -> "Set":
        """Toggle membership of each element in `elements`.

        Elements are handled one at a time: an element given twice ends up
        with its original membership.
        """
        self_values = self.values
        for element in map(as_element, elements):
            if element in self_values:
                del self_values[element]
            else:
                self_values[element] = None
        return self

    # Queries

    def size(self) -> int:
        return len(self.values)

    def is_empty(self) -> bool:
        return not self.values

    def elements(self) -> list[str]:
        return sorted(self.values)

    def contains(self, *elements) -> bool:
        self_values = self.values
        return all(as_element(e) in self_values for e in elements)

    def as_string(self) -> str:
        return "(" + ", ".join(self.elements()) + ")"

    def clone(self) -> "Set":
        new_set = type(self)()
        new_set.values = self.values.copy()
        return new_set

    copy = clone

    # Relations

    def _coerce(self, other: Iterable) -> "Set":
        if isinstance(other, Set):
            return other
        return type(self)(other)

    def is_subset(self, other: Iterable) -> bool:
        return self._coerce(other).contains(*self.values)

    def is_proper_subset(self, other: Iterable) -> bool:
        other = self._coerce(other)
        return self.size() < other.size() and self.is_subset(other)

    def is_superset(self, other: Iterable) -> bool:
        return self._coerce(other).is_subset(self)

    def is_proper_superset(self, other: Iterable) -> bool:
        other = self._coerce(other)
        return self.size() > other.size() and other.is_subset(self)

    def is_equal(self, other: Iterable) -> bool:
        other = self._coerce(other)
        return other.is_subset(self) and self.is_subset(other)

    def is_disjoint(self, other: Iterable) -> bool:
        return self.intersection(other).size() == 0

    # Algebra

    def difference(self, other: Iterable) -> "Set":
        new_set = self.clone()
        for value in self._coerce(other).values:
            new_set.values.pop(value, None)
        return new_set

    def union(self, other: Iterable) -> "Set":
        new_set = type(self)()
        new_set.values = self.values | self._coerce(other).values
        return new_set

    def intersection(self, other: Iterable) -> "Set":
        return self.difference(self.clone().difference(other))

    def symmetric_difference(self, other: Iterable) -> "Set":
        return self.clone().invert(*self._coerce(other).values)

    # Aliases

    def has(self, *elements) -> bool:
        return self.contains(*elements)

    def members(self) -> list[str]:
        return self.elements()

    def delete(self, *elements) -> "Set":
        return self.remove(*elements)

    def unique(self, other: Iterable) -> "Set":
        return self.symmetric_difference(other)

    # Operators

    def __le__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.is_subset(other)

    def __lt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.is_proper_subset(other)

    def __ge__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.is_superset(other)

    def __gt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.is_proper_superset(other)

    def __or__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.union(other)

    def __and__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.intersection(other)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.difference(other)

    def __xor__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.symmetric_difference(other)
