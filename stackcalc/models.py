"""Data models for stackcalc.

StackKind, StackAction, StackOperation, OperationLog, PolynomialOutput: the
typed records that flow from the evaluators → service → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class StackKind(str, Enum):
    """Which evaluator stack an operation touched."""

    NUM = "num"
    SYM = "sym"


class StackAction(str, Enum):
    PUSH = "push"
    POP = "pop"


@dataclass(frozen=True)
class StackOperation:
    """One push or pop recorded during an integer evaluation."""

    stack: StackKind
    action: StackAction
    value: Union[int, str]
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "stack": self.stack.value,
            "action": self.action.value,
            "value": self.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> StackOperation:
        return cls(
            stack=StackKind(d["stack"]),
            action=StackAction(d["action"]),
            value=d["value"],
            timestamp=d["timestamp"],
        )


@dataclass
class OperationLog:
    """Chronological record of every stack push/pop in one evaluation.

    Timestamps are logical: a single counter shared by both stacks, so the
    merged record list is already in execution order.
    """

    records: list[StackOperation] = field(default_factory=list)

    def reset(self) -> None:
        self.records.clear()

    def record(self, stack: StackKind, action: StackAction, value: Union[int, str]) -> None:
        self.records.append(
            StackOperation(stack=stack, action=action, value=value, timestamp=len(self.records))
        )

    def _filtered(self, stack: Optional[StackKind]) -> list[StackOperation]:
        if stack is None:
            return self.records
        return [r for r in self.records if r.stack == stack]

    def count(self, stack: Optional[StackKind] = None) -> int:
        """Number of recorded operations, optionally for one stack only."""
        return len(self._filtered(stack))

    def at(self, index: int, stack: Optional[StackKind] = None) -> StackOperation:
        """Operation at index, counting within one stack when stack is given.

        Raises IndexError for out-of-range indexes (negative ones included).
        """
        ops = self._filtered(stack)
        if index < 0 or index >= len(ops):
            raise IndexError(f"operation index {index} out of range (0..{len(ops) - 1})")
        return ops[index]

    def snapshot(self) -> list[StackOperation]:
        """Independent copy of the records in timestamp order."""
        return list(self.records)

    def to_list(self) -> list[dict]:
        return [r.to_dict() for r in self.records]


@dataclass(frozen=True)
class PolynomialOutput:
    """A polynomial rendered both as standard serialization and as LaTeX."""

    standard: str
    latex: str

    def to_dict(self) -> dict:
        return {"standard": self.standard, "latex": self.latex}
