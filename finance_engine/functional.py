from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')


class Maybe(Generic[T]):
    """Optional value used for lookups that may dangle and results that may be discarded.

    Subclasses only say whether a value is present; map/bind/get_or_else
    are shared and short-circuit on Nothing.
    """

    _value: Any = None

    def is_some(self) -> bool:
        raise NotImplementedError

    def is_none(self) -> bool:
        return not self.is_some()

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value)) if self.is_some() else Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value) if self.is_some() else Nothing()

    def get_or_else(self, default: T) -> T:
        return self._value if self.is_some() else default

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self), self._value))


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"


class Nothing(Maybe[T]):

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"


def from_optional(value: Optional[T]) -> Maybe[T]:
    return Nothing() if value is None else Some(value)


def lookup(index: Mapping[K, T], key: Optional[K]) -> Maybe[T]:
    """Resolve a possibly-missing reference; unset or unknown keys give Nothing."""
    if key is None or key not in index:
        return Nothing()
    return Some(index[key])


def pipe(x: Any, *funcs: Callable[[Any], Any]) -> Any:
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
