"""
Values that are either fixed or produced lazily by a zero-argument function.

Credentials and headers are accepted in both forms; the function form lets a
caller read from a session store at request time, so a rotated token is
picked up without calling ``authorize`` again.
"""
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Fixed(Generic[T]):
    """A literal value."""

    value: T

    def resolve(self) -> T:
        return self.value


@dataclass(frozen=True)
class Provider(Generic[T]):
    """A zero-argument function called on every resolve."""

    fn: Callable[[], T]

    def resolve(self) -> T:
        return self.fn()


Resolvable = Union[Fixed[T], Provider[T]]


def to_resolvable(ref: Any) -> Resolvable:
    """Wrap a value or a zero-argument callable; already wrapped values pass through."""
    if isinstance(ref, (Fixed, Provider)):
        return ref
    if callable(ref):
        return Provider(ref)
    return Fixed(ref)


def resolve_value(ref: Any) -> Any:
    """Resolve a value-or-function reference in one step."""
    return to_resolvable(ref).resolve()
