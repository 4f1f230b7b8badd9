"""
Argosy utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the schema, pipeline, and fault layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/() are preserved.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) as an
    immutable view (tuple / frozenset / MappingProxyType).

- ordinal(number)
  • Human-friendly ordinal ("first", "second", "21st") for position-first messages.

Stability and contract
- Names in __all__ are supported; anything else may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a legitimate value (an Arg default, a handler result)
    but the API must still tell "not provided" apart from "provided as None".

    Characteristics
    - Boolean-false, printable as "Unset", sealed, and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or () are not treated as unset.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError on a non-callable target, a non-string name, or wrong arity.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Return a read-only view of a container (strings and scalars pass through).

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType
    - Set                   → frozenset
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a frozen
    view for containers, so schema fields cannot be mutated through the public API.

    Example
    - Given self._args, declare args = mirror("args") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Notes
- Singleton, distinct from None, falsey.
- Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
