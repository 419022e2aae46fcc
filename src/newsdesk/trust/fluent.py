"""Chainable builders over shared, lock-protected state.

A builder accumulates field values through setters that return the same
instance. Every alias of a builder (including `copy.copy` clones) shares one
value dict and one lock, so chains issued from different tasks never observe
a half-written state. `snapshot()` copies under the lock into a frozen
dataclass; later setter calls do not reach earlier snapshots.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, Generic, Tuple, Type, TypeVar


@dataclass(frozen=True)
class Snapshot:
    """Immutable point-in-time read of a builder.

    Every field of a subclass defaults to None, meaning *unset*. An empty
    string is an explicit value.
    """

    # Field names in the order they were first assigned
    assigned: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def present(self) -> Dict[str, Any]:
        """Set fields, in assignment order.

        Values decide what is set; `assigned` only orders them. Fields set
        outside a builder (by hand or `dataclasses.replace`) follow in
        declaration order.
        """
        declared = [f.name for f in fields(self) if f.name != "assigned"]
        order = [name for name in self.assigned if name in declared]
        order += [name for name in declared if name not in order]
        return {name: getattr(self, name) for name in order if getattr(self, name) is not None}

    def is_set(self, name: str) -> bool:
        return getattr(self, name, None) is not None


S = TypeVar("S", bound=Snapshot)
F = TypeVar("F", bound="Fluent")


class Fluent(Generic[S]):
    """Base builder; subclasses set `snapshot_type` and declare setters."""

    snapshot_type: Type[S]

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[str, Any] = {}

    def _set(self: F, name: str, value: Any) -> F:
        with self._lock:
            if value is None:
                self._values.pop(name, None)
            else:
                self._values[name] = value
        return self

    def snapshot(self) -> S:
        with self._lock:
            values = dict(self._values)
        return self.snapshot_type(assigned=tuple(values), **values)

    def reset(self: F) -> F:
        """Forget every assigned field."""
        with self._lock:
            self._values.clear()
        return self


def setter(name: str, doc: str | None = None) -> Callable[..., Any]:
    """Build a chained setter for field `name`."""

    def method(self, value):
        return self._set(name, value)

    method.__name__ = name
    method.__doc__ = doc or f"Set `{name}`; None unsets it."
    return method
