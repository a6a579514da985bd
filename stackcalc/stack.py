"""Resizable LIFO stack used by both evaluators.

Backed by a pre-sized slot list that doubles when full, so ``capacity()`` reports
the real allocation and pushes stay amortized O(1). No locking here; the
evaluators that own a stack serialize access themselves.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

DEFAULT_CAPACITY = 10000


class StackUnderflow(IndexError):
    """Raised by pop()/top() on an empty stack."""

    def __init__(self, message: str = "Stack is empty") -> None:
        super().__init__(message)


class Stack(Generic[T]):
    """Growable last-in-first-out sequence."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._slots: list[T | None] = [None] * capacity
        self._count = 0

    def push(self, item: T) -> None:
        """Append item, doubling the slot list first if it is full."""
        if self._count == len(self._slots):
            self._slots.extend([None] * len(self._slots))
        self._slots[self._count] = item
        self._count += 1

    def pop(self) -> T:
        if self._count == 0:
            raise StackUnderflow()
        self._count -= 1
        item = self._slots[self._count]
        self._slots[self._count] = None
        return item  # type: ignore[return-value]

    def top(self) -> T:
        """Return the most recently pushed item without removing it.

        The item itself is returned, so mutable items can be changed in place.
        """
        if self._count == 0:
            raise StackUnderflow()
        return self._slots[self._count - 1]  # type: ignore[return-value]

    def size(self) -> int:
        return self._count

    def empty(self) -> bool:
        return self._count == 0

    def capacity(self) -> int:
        return len(self._slots)

    def clear(self) -> None:
        """Drop every item but keep the current allocation."""
        for i in range(self._count):
            self._slots[i] = None
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        """Iterate bottom to top."""
        for i in range(self._count):
            yield self._slots[i]  # type: ignore[misc]

    def __repr__(self) -> str:
        return "Stack[" + ", ".join(str(item) for item in self) + "]"
