"""
tinyset is a small library of string sets.

A `Set` is a thin wrapper around a dictionary keyed by strings. It offers the
usual set algebra (union, intersection, difference, symmetric difference),
subset and superset tests, and a canonical textual form::

    >>> from tinyset import Set
    >>> s1 = Set(["a", "b", "c"])
    >>> s2 = Set(["b", "c", "d"])
    >>> print(s1.union(s2))
    (a, b, c, d)
    >>> print(s1.intersection(s2))
    (b, c)
    >>> print(s1.symmetric_difference(s2))
    (a, d)

"""

__docformat__ = "restructuredtext en"

__version__ = "0.1.0"

from tinyset.configdefaults import config  # noqa: E402
from tinyset.set import Set  # noqa: E402


__all__ = ["Set", "config", "__version__"]
